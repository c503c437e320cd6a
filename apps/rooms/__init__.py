"""Rooms app package.

Holds the room catalog and the restriction calendar: the date intervals
for which each room is unavailable, either because a reservation holds it
or because the owner blocked it.
"""
