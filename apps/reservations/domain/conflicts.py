"""
Conflict detection

Pure functions, no storage access. Callers pass the reservations already
loaded for the candidate's (resource, day) key; anything else in
``existing`` is ignored.
"""

from typing import Iterable, List, Optional

from apps.reservations.domain.entities import Reservation


def overlaps(candidate: Reservation, other: Reservation) -> bool:
    """
    True when both reservations hold the same resource on the same day
    and their [start, end) windows share an instant.
    """
    if candidate.resource != other.resource:
        return False
    return candidate.window.overlaps_with(other.window)


def find_conflict(candidate: Reservation, existing: Iterable[Reservation]) -> Optional[Reservation]:
    """Return the first reservation in ``existing`` that overlaps ``candidate``."""
    for reservation in existing:
        if reservation.id is not None and reservation.id == candidate.id:
            continue
        if overlaps(candidate, reservation):
            return reservation
    return None


def find_conflicts(candidate: Reservation, existing: Iterable[Reservation]) -> List[Reservation]:
    """All reservations in ``existing`` overlapping ``candidate``, in input order"""
    return [
        r for r in existing
        if (r.id is None or r.id != candidate.id) and overlaps(candidate, r)
    ]
