"""Creation-time scheduling policies, one per priority tier."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .models import InvalidTimeRangeError, Priority, require_naive

if TYPE_CHECKING:
    from .config import CalendarSettings


@runtime_checkable
class SchedulingPolicy(Protocol):
    """Turns creation input into a normalized (start, end) pair."""

    def resolve(
        self,
        start: datetime | time,
        end: datetime | None = None,
        *,
        day: date | None = None,
        all_day: bool = False,
    ) -> tuple[datetime, datetime]: ...


@dataclass(frozen=True)
class FixedDurationPolicy:
    """Same-day events of a fixed length. Any supplied end is ignored."""

    duration: timedelta

    def resolve(
        self,
        start: datetime | time,
        end: datetime | None = None,
        *,
        day: date | None = None,
        all_day: bool = False,
    ) -> tuple[datetime, datetime]:
        if isinstance(start, datetime):
            begin = start
        else:
            begin = datetime.combine(day or date.today(), start)
        return begin, begin + self.duration


@dataclass(frozen=True)
class ExplicitRangePolicy:
    """Caller picks both bounds; end defaults to ``start + default_duration``.

    All-day events are exempt from the end-after-start rule.
    """

    default_duration: timedelta = timedelta(hours=1)

    def resolve(
        self,
        start: datetime | time,
        end: datetime | None = None,
        *,
        day: date | None = None,
        all_day: bool = False,
    ) -> tuple[datetime, datetime]:
        if not isinstance(start, datetime):
            start = datetime.combine(day or date.today(), start)
        if end is None:
            return start, start + self.default_duration
        require_naive(start, end)
        if not all_day and end <= start:
            raise InvalidTimeRangeError("End time must be after start time")
        return start, end


def default_policies() -> dict[Priority, SchedulingPolicy]:
    return {
        Priority.LOW: FixedDurationPolicy(timedelta(hours=1)),
        Priority.MEDIUM: FixedDurationPolicy(timedelta(hours=2)),
        Priority.HIGH: ExplicitRangePolicy(timedelta(hours=1)),
    }


def policies_from_settings(settings: CalendarSettings) -> dict[Priority, SchedulingPolicy]:
    """Build the policy table from configured durations (minutes)."""
    return {
        Priority.LOW: FixedDurationPolicy(timedelta(minutes=settings.low_duration)),
        Priority.MEDIUM: FixedDurationPolicy(timedelta(minutes=settings.medium_duration)),
        Priority.HIGH: ExplicitRangePolicy(timedelta(minutes=settings.high_default_duration)),
    }


def policy_for(
    priority: Priority,
    policies: dict[Priority, SchedulingPolicy] | None = None,
) -> SchedulingPolicy:
    table = policies if policies is not None else default_policies()
    return table[priority]
