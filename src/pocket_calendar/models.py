"""Event model, enums and the errors raised by the calendar core."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum


class CalendarError(ValueError):
    """Base class for rejected calendar mutations."""


class EmptyTitleError(CalendarError):
    """Raised when an event would be stored without a title."""


class InvalidTimeRangeError(CalendarError):
    """Raised when a timed event's end is not strictly after its start."""


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, value: str) -> "Priority":
        """Case-insensitive lookup. Blank means Medium."""
        text = (value or "").strip().lower()
        if not text:
            return cls.MEDIUM
        for member in cls:
            if member.value.lower() == text:
                return member
        raise ValueError(f"Unknown priority '{value}'. Must be one of: {[p.value for p in cls]}")


class Color(str, Enum):
    RED = "Red"
    BLUE = "Blue"
    GREEN = "Green"
    YELLOW = "Yellow"
    PURPLE = "Purple"
    ORANGE = "Orange"
    GRAY = "Gray"
    DEFAULT = "Default"

    @classmethod
    def parse(cls, value: str) -> "Color":
        """Case-insensitive lookup. Blank means Default."""
        text = (value or "").strip().lower()
        if not text:
            return cls.DEFAULT
        for member in cls:
            if member.value.lower() == text:
                return member
        raise ValueError(f"Unknown color '{value}'. Must be one of: {[c.value for c in cls]}")

    @classmethod
    def for_priority(cls, priority: Priority) -> "Color":
        return _PRIORITY_COLORS[priority]


_PRIORITY_COLORS = {
    Priority.LOW: Color.BLUE,
    Priority.MEDIUM: Color.GREEN,
    Priority.HIGH: Color.RED,
}


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


@dataclass
class Event:
    """A single calendar item.

    ``id`` stays ``None`` until a Calendar stores the event.
    """

    title: str
    start: datetime
    end: datetime
    color: Color = Color.DEFAULT
    priority: Priority = Priority.MEDIUM
    description: str = ""
    location: str = ""
    attendees: list[str] = field(default_factory=list)
    all_day: bool = False
    recurring: bool = False
    recurrence_pattern: str = ""  # label only, never expanded
    id: int | None = None

    @property
    def day(self) -> date:
        return self.start.date()

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def validate(self) -> None:
        if not self.title or not self.title.strip():
            raise EmptyTitleError("Title cannot be empty")
        require_naive(self.start, self.end)
        if not self.all_day and self.end <= self.start:
            raise InvalidTimeRangeError(
                f"End time must be after start time ({self.start.isoformat()} >= {self.end.isoformat()})"
            )

    def is_same_day(self, instant: date | datetime) -> bool:
        """True if the event starts on the calendar date of ``instant``."""
        return self.start.date() == _as_date(instant)

    def is_between(self, range_start: datetime, range_end: datetime) -> bool:
        """Loose overlap test: either endpoint inside the range, or the event covers it."""
        return (
            (range_start <= self.start <= range_end)
            or (range_start <= self.end <= range_end)
            or (self.start <= range_start and self.end >= range_end)
        )

    def is_at_time(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end


@dataclass
class EventPatch:
    """Partial update for an Event.

    ``None`` keeps the current value. Blank strings also keep the current
    value for text fields; ``attendees=[]`` clears the list.
    """

    title: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    color: Color | None = None
    priority: Priority | None = None
    description: str | None = None
    location: str | None = None
    attendees: list[str] | None = None
    all_day: bool | None = None
    recurring: bool | None = None
    recurrence_pattern: str | None = None

    def is_empty(self) -> bool:
        return not any((
            _given(self.title),
            self.start is not None,
            self.end is not None,
            self.color is not None,
            self.priority is not None,
            _given(self.description),
            _given(self.location),
            self.attendees is not None,
            self.all_day is not None,
            self.recurring is not None,
            _given(self.recurrence_pattern),
        ))

    def apply(self, event: Event) -> Event:
        """Apply the patch to ``event`` in place and return it.

        Raises InvalidTimeRangeError without touching ``event`` when the
        resulting time range would be invalid.
        """
        require_naive(self.start, self.end)
        start, end = event.start, event.end
        if self.start is not None:
            start = self.start
            if self.end is None:
                end = self.start + event.duration
        if self.end is not None:
            end = self.end

        all_day = event.all_day if self.all_day is None else self.all_day
        if not all_day and end <= start:
            raise InvalidTimeRangeError("End time must be after start time")

        if _given(self.title):
            event.title = self.title.strip()
        event.start, event.end = start, end
        event.all_day = all_day

        if self.priority is not None and self.priority != event.priority:
            event.priority = self.priority
            if self.color is None:
                event.color = Color.for_priority(self.priority)
        if self.color is not None:
            event.color = self.color

        if _given(self.description):
            event.description = self.description
        if _given(self.location):
            event.location = self.location
        if self.attendees is not None:
            event.attendees = list(self.attendees)

        if self.recurring is not None:
            event.recurring = self.recurring
        if _given(self.recurrence_pattern):
            event.recurrence_pattern = self.recurrence_pattern.strip()
            if self.recurring is None:
                event.recurring = True
        return event


def require_naive(*instants: datetime | None) -> None:
    """Stored instants are naive local time; aware values cannot be ordered against them."""
    for instant in instants:
        if instant is not None and instant.tzinfo is not None:
            raise InvalidTimeRangeError(
                f"Expected a local time without UTC offset, got {instant.isoformat()}"
            )


def _given(value: str | None) -> bool:
    return value is not None and bool(value.strip())
