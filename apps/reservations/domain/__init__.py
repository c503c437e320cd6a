"""
Reservation domain: entities, errors and the repository interface the
engine depends on. Nothing in this package touches the ORM.
"""
