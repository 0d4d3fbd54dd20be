from __future__ import annotations

from apps.reservations.domain.entities import ReservationRequest


def make_request(**overrides) -> ReservationRequest:
    values = {
        "resource": "Vereinsheim",
        "group": "Fußball",
        "date": "2024-05-10",
        "start_time": "18:00",
        "end_time": "20:00",
        "purpose": "Training",
    }
    values.update(overrides)
    return ReservationRequest(**values)
