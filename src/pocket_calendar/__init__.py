"""Personal calendar: event store, view projections and an MCP server."""

from .models import (
    CalendarError,
    Color,
    EmptyTitleError,
    Event,
    EventPatch,
    InvalidTimeRangeError,
    Priority,
)
from .store import Calendar

__all__ = [
    "Calendar",
    "CalendarError",
    "Color",
    "EmptyTitleError",
    "Event",
    "EventPatch",
    "InvalidTimeRangeError",
    "Priority",
]
