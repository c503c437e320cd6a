"""
Shared Kernel

Building blocks reused by the room catalog and the reservation engine:
value objects and the unit of work abstraction.
"""
