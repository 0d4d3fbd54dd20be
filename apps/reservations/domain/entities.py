"""
Reservation Domain Entities

- ReservationRequest: raw booking input as received at the boundary
- ActingUser: identity and role resolved by the auth service
- Reservation: a validated, immutable booking record
"""

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any

from apps.reservations.catalog import Category, get_resource
from shared.domain.base import Entity
from shared.domain.value_objects import TimeWindow, format_clock


@dataclass
class ReservationRequest:
    """
    Booking input before validation

    Values are kept exactly as submitted; the booking service parses
    them once into a Reservation.
    """
    resource: str = ""
    group: str = ""
    date: Any = None
    start_time: str = ""
    end_time: str = ""
    bus_destination: str = ""
    purpose: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "ReservationRequest":
        names = cls.__dataclass_fields__.keys()
        return cls(**{name: data[name] for name in names if data.get(name) is not None})


@dataclass(frozen=True)
class ActingUser:
    """Identity trusted for the duration of one request."""
    id: Any
    username: str
    role: str

    @classmethod
    def from_user(cls, user) -> "ActingUser":
        return cls(id=user.pk, username=user.get_username(), role=getattr(user, "role", ""))


@dataclass(frozen=True, eq=False, kw_only=True)
class Reservation(Entity):
    """
    Reservation entity

    A booking of one resource for [start_time, end_time) minutes on one
    day. Records never change after creation; they are only deleted.
    ``id`` and ``created_at`` are assigned by the store.
    """
    resource: str
    group: str
    date: date
    start_time: int
    end_time: int
    user: str
    username: str
    bus_destination: str = ""
    purpose: str = ""
    created_at: datetime | None = None

    @property
    def window(self) -> TimeWindow:
        return TimeWindow(self.date, self.start_time, self.end_time)

    @property
    def key(self) -> tuple[str, date]:
        """(resource, day) key conflicts are scoped to"""
        return (self.resource, self.date)

    @property
    def category(self) -> Category | None:
        resource = get_resource(self.resource)
        return resource.category if resource else None

    @property
    def start_clock(self) -> str:
        return format_clock(self.start_time)

    @property
    def end_clock(self) -> str:
        return format_clock(self.end_time)

    def stored(self, id: int, created_at: datetime) -> "Reservation":
        """Copy of this record carrying the identity the store assigned"""
        return replace(self, id=id, created_at=created_at)

    def __str__(self):
        return f"{self.resource} {self.window} ({self.group}, {self.username})"
