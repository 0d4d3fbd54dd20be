"""Two overlapping bookings submitted at once: exactly one wins."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from django.db import connection

from apps.reservations.domain.entities import ActingUser
from apps.reservations.exceptions import Conflict
from apps.reservations.models import Reservation as ReservationRow, ResourceDay
from apps.reservations.services import BookingService
from apps.reservations.store import DjangoReservationStore, InMemoryReservationStore
from shared.application.locks import KeyedLock

from .factories import make_request


class BarrierAtFirstLookup:
    """
    Holds every thread at its first lookup until all of them arrived, so
    all pre-checks see an empty day before anyone commits.
    """

    def __init__(self, parties: int):
        super().__init__()
        self._barrier = threading.Barrier(parties, timeout=5)
        self._seen = threading.local()

    def find_by_resource_and_date(self, resource, day):
        if not getattr(self._seen, "value", False):
            self._seen.value = True
            self._barrier.wait()
        return super().find_by_resource_and_date(resource, day)


class RacingStore(BarrierAtFirstLookup, InMemoryReservationStore):
    pass


class RacingDatabaseStore(BarrierAtFirstLookup, DjangoReservationStore):
    pass


def _submit(service, requests):
    members = [ActingUser(id=i, username=f"member{i}", role="standard") for i in range(len(requests))]

    def attempt(args):
        request, member = args
        try:
            return service.create(request, member)
        except Conflict as exc:
            return exc

    with ThreadPoolExecutor(max_workers=len(requests)) as pool:
        return list(pool.map(attempt, zip(requests, members)))


def test_exactly_one_of_two_identical_requests_succeeds():
    store = RacingStore(parties=2)
    service = BookingService(store)

    results = _submit(service, [make_request(), make_request()])

    conflicts = [r for r in results if isinstance(r, Conflict)]
    stored = [r for r in results if not isinstance(r, Conflict)]
    assert len(stored) == 1
    assert len(conflicts) == 1
    assert conflicts[0].blocking.id == stored[0].id
    assert store.find_all() == stored


def test_partially_overlapping_race_keeps_day_consistent():
    store = RacingStore(parties=4)
    service = BookingService(store)
    requests = [
        make_request(start_time="18:00", end_time="20:00"),
        make_request(start_time="19:00", end_time="21:00"),
        make_request(start_time="20:00", end_time="22:00"),
        make_request(start_time="08:00", end_time="09:00"),
    ]

    _submit(service, requests)

    day = sorted(store.find_all(), key=lambda r: r.start_time)
    for earlier, later in zip(day, day[1:]):
        assert earlier.end_time <= later.start_time
    assert "08:00" in [r.start_clock for r in day]


def test_parallel_requests_for_different_resources_all_succeed():
    store = RacingStore(parties=3)
    service = BookingService(store)

    results = _submit(
        service,
        [make_request(resource="Vereinsheim"), make_request(resource="Kiosk"), make_request(resource="JBL Box")],
    )

    assert not [r for r in results if isinstance(r, Conflict)]
    assert len(store.find_all()) == 3


def test_keyed_lock_blocks_same_key_only():
    locks = KeyedLock()
    same_key_entered = threading.Event()
    other_key_entered = threading.Event()

    def enter(key, event):
        with locks.hold(key):
            event.set()

    with locks.hold(("Vereinsheim", "2024-05-10")):
        blocked = threading.Thread(target=enter, args=(("Vereinsheim", "2024-05-10"), same_key_entered))
        free = threading.Thread(target=enter, args=(("Kiosk", "2024-05-10"), other_key_entered))
        blocked.start()
        free.start()

        assert other_key_entered.wait(timeout=2)
        assert not same_key_entered.wait(timeout=0.2)

    assert same_key_entered.wait(timeout=2)
    blocked.join()
    free.join()
    assert len(locks) == 0


def _submit_from_separate_processes(store, requests):
    """
    One service per thread, so no in-process lock is shared and only the
    database serializes the writers.
    """
    members = [ActingUser(id=i, username=f"member{i}", role="standard") for i in range(len(requests))]

    def attempt(args):
        request, member = args
        try:
            return BookingService(store).create(request, member)
        except Conflict as exc:
            return exc
        finally:
            connection.close()

    with ThreadPoolExecutor(max_workers=len(requests)) as pool:
        return list(pool.map(attempt, zip(requests, members)))


def test_sqlite_transactions_take_the_write_lock_at_begin():
    if connection.vendor != "sqlite":
        pytest.skip("only SQLite needs an immediate transaction mode")

    assert connection.settings_dict["OPTIONS"]["transaction_mode"] == "IMMEDIATE"


@pytest.mark.django_db(transaction=True)
def test_database_store_lets_exactly_one_overlapping_request_win():
    store = RacingDatabaseStore(parties=2)

    results = _submit_from_separate_processes(
        store,
        [make_request(start_time="18:00", end_time="20:00"), make_request(start_time="19:00", end_time="21:00")],
    )

    conflicts = [r for r in results if isinstance(r, Conflict)]
    stored = [r for r in results if not isinstance(r, Conflict)]
    assert len(stored) == 1
    assert len(conflicts) == 1
    assert conflicts[0].blocking.id == stored[0].id
    assert list(ReservationRow.objects.values_list("pk", flat=True)) == [stored[0].id]
    assert ResourceDay.objects.count() == 1


@pytest.mark.django_db(transaction=True)
def test_database_store_commits_parallel_requests_for_different_resources():
    store = RacingDatabaseStore(parties=2)

    results = _submit_from_separate_processes(
        store,
        [make_request(resource="Vereinsheim"), make_request(resource="Kiosk")],
    )

    assert not [r for r in results if isinstance(r, Conflict)]
    assert sorted(ReservationRow.objects.values_list("resource", flat=True)) == ["Kiosk", "Vereinsheim"]
    assert ResourceDay.objects.count() == 2
