"""
Common Value Objects

Value objects used across the reservation domain:
- ClockTime helpers: "HH:MM" <-> minutes since midnight
- TimeWindow: a half-open interval of minutes on one calendar day
"""

import re
from dataclasses import dataclass
from datetime import date, datetime

from shared.domain.base import ValueObject

MINUTES_PER_DAY = 24 * 60
SLOT_MINUTES = 30

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_clock(value: str, *, granularity: int = SLOT_MINUTES) -> int:
    """
    Parse an "HH:MM" string into minutes since midnight.

    "24:00" is accepted and means end of day. Values off the
    ``granularity`` grid are rejected.

    Raises:
        ValueError: If the value is malformed or out of range
    """
    if not isinstance(value, str):
        raise ValueError(f"Time must be an 'HH:MM' string, got {value!r}")

    match = _CLOCK_RE.match(value.strip())
    if not match:
        raise ValueError(f"Time must be in 'HH:MM' format, got {value!r}")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes >= 60 or hours > 24:
        raise ValueError(f"Time {value!r} is out of range")

    total = hours * 60 + minutes
    if total > MINUTES_PER_DAY:
        raise ValueError(f"Time {value!r} is out of range")
    if total % granularity:
        raise ValueError(f"Time {value!r} must be on a {granularity}-minute boundary")
    return total


def format_clock(minutes: int) -> str:
    """Format minutes since midnight as "HH:MM"."""
    hours, rest = divmod(minutes, 60)
    return f"{hours:02d}:{rest:02d}"


def parse_day(value) -> date:
    """
    Normalize a calendar day.

    Accepts a ``date``, a naive or aware ``datetime`` (its own calendar
    day is kept, no timezone conversion) or an ISO "YYYY-MM-DD" string.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            raise ValueError(f"Date must be in 'YYYY-MM-DD' format, got {value!r}")
    raise ValueError(f"Unsupported date value: {value!r}")


@dataclass(frozen=True)
class TimeWindow(ValueObject):
    """
    Time window value object

    Represents [start, end) in minutes since midnight on ``day``.
    Adjacent windows (one ends where the other starts) do not overlap.
    """
    day: date
    start: int
    end: int

    def __post_init__(self):
        if isinstance(self.day, datetime) or not isinstance(self.day, date):
            raise ValueError(f"Day must be a calendar date, got {self.day!r}")
        if not 0 <= self.start < MINUTES_PER_DAY:
            raise ValueError(f"Start ({self.start}) is outside the day")
        if not 0 < self.end <= MINUTES_PER_DAY:
            raise ValueError(f"End ({self.end}) is outside the day")
        if self.start >= self.end:
            raise ValueError(
                f"Start ({format_clock(self.start)}) must be before end ({format_clock(self.end)})"
            )

    @classmethod
    def parse(cls, day, start: str, end: str) -> "TimeWindow":
        return cls(parse_day(day), parse_clock(start), parse_clock(end))

    def overlaps_with(self, other: "TimeWindow") -> bool:
        """
        Check if this window overlaps with another

        Windows on different days never overlap.

        Examples:
            - 18:00-20:00 overlaps with 19:00-21:00 -> True
            - 18:00-20:00 overlaps with 20:00-22:00 -> False (adjacent)
        """
        if not isinstance(other, TimeWindow):
            raise TypeError("Can only check overlap with another TimeWindow")

        return (self.day == other.day and
                self.start < other.end and
                other.start < self.end)

    @property
    def duration(self) -> int:
        """Length of the window in minutes"""
        return self.end - self.start

    def __str__(self):
        return f"{self.day.isoformat()} {format_clock(self.start)}-{format_clock(self.end)}"

    def __repr__(self):
        return f"TimeWindow({self.day}, {format_clock(self.start)}, {format_clock(self.end)})"
