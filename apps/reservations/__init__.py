"""Reservations app package.

This app encapsulates the booking engine for the club's shared
resources: the resource catalog, role-based authorization, time window
conflict detection and the booking service that atomically commits or
rejects reservations. Overlapping bookings for the same resource and day
are prevented by serializing the check-then-insert per (resource, day).
"""
