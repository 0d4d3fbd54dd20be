from __future__ import annotations

import pytest

from apps.reservations.domain.entities import ActingUser
from apps.reservations.services import BookingService
from apps.reservations.store import InMemoryReservationStore


@pytest.fixture
def store() -> InMemoryReservationStore:
    return InMemoryReservationStore()


@pytest.fixture
def service(store) -> BookingService:
    return BookingService(store)


@pytest.fixture
def admin() -> ActingUser:
    return ActingUser(id=1, username="admin", role="admin")


@pytest.fixture
def board_member() -> ActingUser:
    return ActingUser(id=2, username="vorstand", role="board_member")


@pytest.fixture
def member() -> ActingUser:
    return ActingUser(id=3, username="anna", role="standard")


@pytest.fixture
def observer() -> ActingUser:
    return ActingUser(id=4, username="gast", role="observer")
