from datetime import date

import pytest
from django.db import DatabaseError

from apps.reservations.domain.entities import Reservation
from apps.reservations.exceptions import Conflict, NotFound, StorageError
from apps.reservations.models import Reservation as ReservationRow, ResourceDay
from apps.reservations.store import DjangoReservationStore, InMemoryReservationStore

DAY = date(2024, 5, 10)


def record(start, end, *, resource="Vereinsheim", day=DAY):
    return Reservation(
        resource=resource,
        group="Volleyball",
        date=day,
        start_time=start * 60,
        end_time=end * 60,
        purpose="Training",
        user="3",
        username="anna",
    )


@pytest.fixture(params=["memory", "orm"])
def any_store(request):
    if request.param == "orm":
        request.getfixturevalue("db")
        return DjangoReservationStore()
    return InMemoryReservationStore()


def test_insert_assigns_id_and_timestamp(any_store):
    stored = any_store.insert_if_free(record(18, 20))

    assert stored.id is not None
    assert stored.created_at is not None
    assert any_store.get(stored.id).window == stored.window


def test_lookup_is_scoped_to_resource_and_day(any_store):
    evening = any_store.insert_if_free(record(18, 20))
    morning = any_store.insert_if_free(record(8, 10))
    any_store.insert_if_free(record(18, 20, resource="Kiosk"))
    any_store.insert_if_free(record(18, 20, day=date(2024, 5, 11)))

    found = any_store.find_by_resource_and_date("Vereinsheim", DAY)

    assert [r.id for r in found] == [morning.id, evening.id]
    assert len(any_store.find_all()) == 4


def test_conditional_insert_rejects_overlap(any_store):
    first = any_store.insert_if_free(record(18, 20))

    with pytest.raises(Conflict) as excinfo:
        any_store.insert_if_free(record(19, 21))

    assert excinfo.value.blocking.id == first.id
    assert len(any_store.find_all()) == 1


def test_plain_insert_skips_the_overlap_check(any_store):
    first = any_store.insert(record(18, 20))
    second = any_store.insert(record(19, 21))

    assert first.id != second.id
    assert second.created_at is not None
    assert [r.id for r in any_store.find_by_resource_and_date("Vereinsheim", DAY)] == [first.id, second.id]


def test_conditional_insert_allows_touching_windows(any_store):
    any_store.insert_if_free(record(18, 20))
    any_store.insert_if_free(record(20, 22))

    assert len(any_store.find_by_resource_and_date("Vereinsheim", DAY)) == 2


def test_delete_returns_removed_record(any_store):
    stored = any_store.insert_if_free(record(18, 20))

    removed = any_store.delete_by_id(stored.id)

    assert removed.id == stored.id
    assert any_store.find_all() == []
    assert any_store.find_by_resource_and_date("Vereinsheim", DAY) == []
    with pytest.raises(NotFound):
        any_store.delete_by_id(stored.id)


def test_get_unknown_id(any_store):
    with pytest.raises(NotFound):
        any_store.get(999)


@pytest.mark.django_db
def test_orm_store_creates_one_lock_row_per_key():
    store = DjangoReservationStore()
    store.insert_if_free(record(8, 10))
    store.insert_if_free(record(18, 20))
    store.insert_if_free(record(18, 20, resource="Kiosk"))

    assert ResourceDay.objects.count() == 2
    assert ReservationRow.objects.count() == 3


@pytest.mark.django_db
def test_orm_store_reports_database_failures_as_storage_error(monkeypatch):
    def broken(*args, **kwargs):
        raise DatabaseError("connection lost")

    monkeypatch.setattr(ReservationRow.objects, "create", broken)

    with pytest.raises(StorageError) as excinfo:
        DjangoReservationStore().insert_if_free(record(18, 20))

    assert excinfo.value.status_code == 503
    with pytest.raises(StorageError):
        DjangoReservationStore().insert(record(18, 20))
    assert not ReservationRow.objects.exists()
