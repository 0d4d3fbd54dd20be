"""Permission classes for the reservations API."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore

from .domain.policy import Capability
from .services import get_booking_service


class CanReadReservations(permissions.BasePermission):
    """
    Authenticated users whose role holds ``read`` may look at reservations.

    Writes pass through here untouched: the booking service authorizes
    them itself, whatever the client offered.
    """

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if request.method not in permissions.SAFE_METHODS:
            return True
        return get_booking_service().policy.can(getattr(user, "role", ""), Capability.READ)
