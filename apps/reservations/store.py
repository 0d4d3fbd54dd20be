"""Reservation stores.

``ReservationStore`` is the storage contract the booking service writes
through. Two implementations honor it:

- ``DjangoReservationStore`` keeps reservations in the database and
  serializes conditional inserts per (resource, day) with a row lock on
  ``ResourceDay``.
- ``InMemoryReservationStore`` keeps them in process memory, for tests
  and single-process embedding.
"""

from __future__ import annotations

import itertools
import logging
import threading
from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, List, Tuple

from django.db import DatabaseError, transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from shared.application.uow import DjangoUnitOfWork

from .domain.conflicts import find_conflict
from .domain.entities import Reservation
from .exceptions import Conflict, NotFound, StorageError
from .models import Reservation as ReservationRow, ResourceDay

logger = logging.getLogger(__name__)


def conflict_error(record: Reservation, blocking: Reservation) -> Conflict:
    return Conflict(
        f'"{record.resource}" is already reserved on {record.date.isoformat()} '
        f"from {blocking.start_clock} to {blocking.end_clock}",
        blocking=blocking,
    )


class ReservationStore(ABC):
    """Durable keyed collection of reservation records."""

    @abstractmethod
    def insert(self, record: Reservation) -> Reservation:
        """Persist ``record`` unconditionally and return it with id and created_at."""

    @abstractmethod
    def insert_if_free(self, record: Reservation) -> Reservation:
        """
        Re-check for overlaps and insert as one atomic unit.

        Raises:
            Conflict: If an overlapping reservation exists by now
            StorageError: If persistence is unavailable
        """

    @abstractmethod
    def find_by_resource_and_date(self, resource: str, day: date) -> List[Reservation]:
        """Reservations for one (resource, day) key, ordered by start time."""

    @abstractmethod
    def find_all(self) -> List[Reservation]:
        """Snapshot of every reservation, ordered by day and start time."""

    @abstractmethod
    def get(self, reservation_id) -> Reservation:
        """Raises NotFound when absent."""

    @abstractmethod
    def delete_by_id(self, reservation_id) -> Reservation:
        """Remove and return the reservation; raises NotFound when absent."""


class InMemoryReservationStore(ReservationStore):
    """
    Process-local store

    A single re-entrant lock guards all writes; reads copy the rows out
    under the same lock and never observe a half-applied insert.
    """

    def __init__(self):
        self._guard = threading.RLock()
        self._ids = itertools.count(1)
        self._rows: Dict[int, Reservation] = {}
        self._index: Dict[Tuple[str, date], List[int]] = {}

    def insert(self, record: Reservation) -> Reservation:
        with self._guard:
            stored = record.stored(next(self._ids), timezone.now())
            self._rows[stored.id] = stored
            self._index.setdefault(stored.key, []).append(stored.id)
            return stored

    def insert_if_free(self, record: Reservation) -> Reservation:
        with self._guard:
            blocking = find_conflict(record, self.find_by_resource_and_date(*record.key))
            if blocking is not None:
                raise conflict_error(record, blocking)
            return self.insert(record)

    def find_by_resource_and_date(self, resource: str, day: date) -> List[Reservation]:
        with self._guard:
            rows = [self._rows[i] for i in self._index.get((resource, day), [])]
        return sorted(rows, key=lambda r: r.start_time)

    def find_all(self) -> List[Reservation]:
        with self._guard:
            rows = list(self._rows.values())
        return sorted(rows, key=lambda r: (r.date, r.start_time, r.resource))

    def get(self, reservation_id) -> Reservation:
        with self._guard:
            try:
                return self._rows[_coerce_id(reservation_id)]
            except KeyError:
                raise NotFound(f"Reservation {reservation_id} not found")

    def delete_by_id(self, reservation_id) -> Reservation:
        with self._guard:
            reservation = self.get(reservation_id)
            del self._rows[reservation.id]
            ids = self._index[reservation.key]
            ids.remove(reservation.id)
            if not ids:
                del self._index[reservation.key]
            return reservation


def _coerce_id(reservation_id) -> int:
    try:
        return int(reservation_id)
    except (TypeError, ValueError):
        raise NotFound(f"Reservation {reservation_id} not found")


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


class DjangoReservationStore(ReservationStore):
    """
    Database-backed store

    Conditional inserts run inside one transaction that first locks the
    ``ResourceDay`` row of the key (SELECT ... FOR UPDATE where the
    backend supports it), so concurrent writers on one key queue up
    while other keys are untouched. Database failures surface as
    StorageError.
    """

    def insert(self, record: Reservation) -> Reservation:
        try:
            return self._to_entity(self._create_row(record))
        except DatabaseError as exc:
            logger.error(f"Failed to store reservation {record}: {exc}", exc_info=True)
            raise StorageError("Reservation storage is unavailable, please retry") from exc

    def insert_if_free(self, record: Reservation) -> Reservation:
        try:
            with DjangoUnitOfWork() as uow:
                anchor, created = ResourceDay.objects.get_or_create(
                    resource=record.resource,
                    date=record.date,
                )
                if created:
                    logger.debug(f"Created lock row for {record.resource} on {record.date}")
                _lock_queryset_if_possible(ResourceDay.objects.filter(pk=anchor.pk)).get()

                blocking = find_conflict(record, self.find_by_resource_and_date(*record.key))
                if blocking is not None:
                    raise conflict_error(record, blocking)

                stored = self._to_entity(self._create_row(record))
                uow.after_commit(lambda: logger.info(f"Reservation {stored.id} committed: {stored}"))
                return stored
        except DatabaseError as exc:
            logger.error(f"Failed to store reservation {record}: {exc}", exc_info=True)
            raise StorageError("Reservation storage is unavailable, please retry") from exc

    def find_by_resource_and_date(self, resource: str, day: date) -> List[Reservation]:
        queryset = ReservationRow.objects.filter(resource=resource, date=day).order_by("start_time")
        return [self._to_entity(row) for row in self._fetch(queryset)]

    def find_all(self) -> List[Reservation]:
        queryset = ReservationRow.objects.order_by("date", "start_time", "resource")
        return [self._to_entity(row) for row in self._fetch(queryset)]

    def get(self, reservation_id) -> Reservation:
        try:
            return self._to_entity(ReservationRow.objects.get(pk=_coerce_id(reservation_id)))
        except ReservationRow.DoesNotExist:
            raise NotFound(f"Reservation {reservation_id} not found")
        except DatabaseError as exc:
            raise StorageError("Reservation storage is unavailable, please retry") from exc

    def delete_by_id(self, reservation_id) -> Reservation:
        pk = _coerce_id(reservation_id)
        try:
            with transaction.atomic():
                row = _lock_queryset_if_possible(ReservationRow.objects.filter(pk=pk)).first()
                if row is None:
                    raise NotFound(f"Reservation {reservation_id} not found")
                reservation = self._to_entity(row)
                row.delete()
                return reservation
        except DatabaseError as exc:
            logger.error(f"Failed to delete reservation {reservation_id}: {exc}", exc_info=True)
            raise StorageError("Reservation storage is unavailable, please retry") from exc

    @staticmethod
    def _fetch(queryset) -> list:
        try:
            return list(queryset)
        except DatabaseError as exc:
            raise StorageError("Reservation storage is unavailable, please retry") from exc

    @staticmethod
    def _create_row(record: Reservation):
        return ReservationRow.objects.create(
            resource=record.resource,
            group=record.group,
            date=record.date,
            start_time=record.start_time,
            end_time=record.end_time,
            bus_destination=record.bus_destination,
            purpose=record.purpose,
            user=record.user,
            username=record.username,
        )

    @staticmethod
    def _to_entity(row) -> Reservation:
        return Reservation(
            id=row.pk,
            resource=row.resource,
            group=row.group,
            date=row.date,
            start_time=row.start_time,
            end_time=row.end_time,
            bus_destination=row.bus_destination,
            purpose=row.purpose,
            user=row.user,
            username=row.username,
            created_at=row.created_at,
        )
