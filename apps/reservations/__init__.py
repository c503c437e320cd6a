"""Reservations app package.

This app is the booking engine: availability queries over the room
restriction calendar, the transaction manager that commits a reservation
together with its restriction, and the per-session staging workflow that
carries a guest's draft from search to confirmation.
"""
