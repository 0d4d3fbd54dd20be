"""Errors raised by the booking engine.

Every failure is terminal for the attempt; nothing is retried here.
The HTTP layer maps ``status_code`` onto the response.
"""

from __future__ import annotations

from typing import Any


class BookingError(Exception):
    """Base class for booking engine failures."""

    code = "booking_error"
    status_code = 400

    def __init__(self, message: str, **payload: Any):
        super().__init__(message)
        self.message = message
        self.payload = payload

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "detail": self.message, **self.payload}


class ValidationError(BookingError):
    """Missing, malformed or contradictory input."""

    code = "validation_error"
    status_code = 400

    def __init__(self, message: str, fields: list[str] | None = None, **payload: Any):
        if fields:
            payload["fields"] = list(fields)
        super().__init__(message, **payload)
        self.fields = list(fields or [])


class PermissionDenied(BookingError):
    """The acting role lacks a capability or may not book the resource."""

    code = "permission_denied"
    status_code = 403


class Conflict(BookingError):
    """The requested window overlaps an existing reservation."""

    code = "conflict"
    status_code = 409

    def __init__(self, message: str, blocking=None, **payload: Any):
        if blocking is not None:
            payload["conflict"] = {
                "id": blocking.id,
                "resource": blocking.resource,
                "date": blocking.date.isoformat(),
                "start_time": blocking.start_clock,
                "end_time": blocking.end_clock,
            }
        super().__init__(message, **payload)
        self.blocking = blocking


class NotFound(BookingError):
    """No reservation with the given id."""

    code = "not_found"
    status_code = 404


class StorageError(BookingError):
    """Persistence unavailable; the caller may resubmit."""

    code = "storage_unavailable"
    status_code = 503
