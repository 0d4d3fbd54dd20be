"""
Booking service

The only writer of the reservation store. ``create`` runs its checks in a
fixed order and stops at the first failure:

1. authorize the role and the requested resource
2. required fields present and parseable
3. start before end
4. category rule (vehicles need a destination, the rest a purpose)
5. conflict check against the (resource, day) key
6. re-check and insert atomically, serialized per (resource, day)

Nothing is written unless every step passed.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import List, Optional

from shared.application.locks import KeyedLock
from shared.domain.value_objects import TimeWindow, parse_clock, parse_day

from .catalog import GROUPS, Resource, get_resource
from .domain.conflicts import find_conflicts
from .domain.entities import ActingUser, Reservation, ReservationRequest
from .domain.policy import AuthorizationPolicy, Capability
from .exceptions import Conflict, ValidationError
from .store import (
    DjangoReservationStore,
    ReservationStore,
    conflict_error,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("resource", "group", "date", "start_time", "end_time", "user", "username")


class BookingService:
    """
    Orchestrates authorization, validation, conflict detection and
    persistence of reservations.

    Usage:
        service = BookingService(DjangoReservationStore())
        reservation = service.create(
            ReservationRequest(resource="Vereinsheim", group="Fußball",
                               date="2024-05-10", start_time="18:00",
                               end_time="20:00", purpose="Training"),
            ActingUser(id=7, username="anna", role="standard"),
        )
    """

    def __init__(
        self,
        store: ReservationStore,
        policy: Optional[AuthorizationPolicy] = None,
        locks: Optional[KeyedLock] = None,
    ):
        self.store = store
        self.policy = policy or AuthorizationPolicy()
        self._locks = locks or KeyedLock()

    # ----- commands -----

    def create(self, request: ReservationRequest, acting_user: ActingUser) -> Reservation:
        """
        Validate and store a new reservation.

        Raises:
            PermissionDenied: Role may not create, or may not book the resource
            ValidationError: Missing, malformed or contradictory input
            Conflict: The window overlaps an existing reservation
            StorageError: Persistence is unavailable
        """
        role = acting_user.role
        self.policy.require(role, Capability.CREATE)

        resource = self._resolve_resource(request.resource)
        if resource is not None:
            self.policy.require_resource(role, resource)

        record = self._build_record(request, acting_user, resource)

        blocking = find_conflicts(record, self.store.find_by_resource_and_date(*record.key))
        if blocking:
            logger.info(
                f"Rejected {record}: overlaps {len(blocking)} reservation(s), "
                f"first {blocking[0].id} {blocking[0].start_clock}-{blocking[0].end_clock}"
            )
            raise conflict_error(record, blocking[0])

        with self._locks.hold(record.key):
            try:
                stored = self.store.insert_if_free(record)
            except Conflict as exc:
                logger.info(f"Rejected {record} on commit: {exc.message}")
                raise

        logger.info(f"Reservation {stored.id} created by {acting_user.username}: {stored}")
        return stored

    def delete(self, reservation_id, acting_user: ActingUser) -> Reservation:
        """
        Remove a reservation. Any role holding ``delete`` may remove any
        reservation.

        Raises:
            PermissionDenied: Role may not delete
            NotFound: No reservation with that id
        """
        self.policy.require(acting_user.role, Capability.DELETE)
        removed = self.store.delete_by_id(reservation_id)
        logger.info(f"Reservation {removed.id} deleted by {acting_user.username}: {removed}")
        return removed

    # ----- queries -----

    def list(self) -> List[Reservation]:
        """Complete snapshot of active reservations"""
        return self.store.find_all()

    def get(self, reservation_id) -> Reservation:
        return self.store.get(reservation_id)

    def export(self, acting_user: ActingUser) -> List[Reservation]:
        """Snapshot for the reporting collaborators; admin only"""
        self.policy.require(acting_user.role, Capability.EXPORT)
        return self.store.find_all()

    def bookable_resources(self, acting_user: ActingUser) -> List[Resource]:
        return self.policy.allowed_resources(acting_user.role)

    # ----- validation -----

    @staticmethod
    def _resolve_resource(name) -> Optional[Resource]:
        if not _present(name):
            return None
        resource = get_resource(str(name).strip())
        if resource is None:
            raise ValidationError(f"Unknown resource {name!r}", fields=["resource"])
        return resource

    def _build_record(
        self,
        request: ReservationRequest,
        acting_user: ActingUser,
        resource: Optional[Resource],
    ) -> Reservation:
        values = {
            "resource": request.resource,
            "group": request.group,
            "date": request.date,
            "start_time": request.start_time,
            "end_time": request.end_time,
            "user": acting_user.id,
            "username": acting_user.username,
        }
        missing = [name for name in REQUIRED_FIELDS if not _present(values[name])]
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                fields=missing,
            )

        group = str(request.group).strip()
        if group not in GROUPS:
            raise ValidationError(f"Unknown group {group!r}", fields=["group"])

        errors = {}
        for name, parse in (("date", parse_day), ("start_time", parse_clock), ("end_time", parse_clock)):
            try:
                values[name] = parse(values[name])
            except ValueError as exc:
                errors[name] = str(exc)
        if errors:
            raise ValidationError("; ".join(errors.values()), fields=list(errors))

        if values["start_time"] >= values["end_time"]:
            raise ValidationError("Start time must be before end time", fields=["start_time", "end_time"])
        window = TimeWindow(values["date"], values["start_time"], values["end_time"])

        bus_destination = (request.bus_destination or "").strip()
        purpose = (request.purpose or "").strip()
        if resource.is_vehicle:
            if not bus_destination:
                raise ValidationError(
                    f'A destination is required for "{resource.name}"',
                    fields=["bus_destination"],
                )
            purpose = ""
        else:
            if not purpose:
                raise ValidationError(
                    f'A purpose is required for "{resource.name}"',
                    fields=["purpose"],
                )
            bus_destination = ""

        return Reservation(
            resource=resource.name,
            group=group,
            date=window.day,
            start_time=window.start,
            end_time=window.end,
            bus_destination=bus_destination,
            purpose=purpose,
            user=str(acting_user.id),
            username=str(acting_user.username).strip(),
        )


def _present(value) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


@lru_cache(maxsize=None)
def get_booking_service() -> BookingService:
    """Process-wide booking service backed by the database store"""
    return BookingService(DjangoReservationStore())
