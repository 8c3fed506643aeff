"""Day, week, month and agenda projections over a Calendar.

Every function here only reads from the calendar. Results are plain
dataclasses meant to be serialized or printed by the caller.
"""

from __future__ import annotations

import calendar as gregorian
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta

from .models import Event
from .store import Calendar

WEEK_FIRST_HOUR = 8
WEEK_LAST_HOUR = 20


@dataclass(frozen=True)
class DayView:
    day: date
    events: list[Event] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.events


@dataclass(frozen=True)
class HourSlot:
    hour: int
    cells: list[Event | None]  # one per day of the week, None = free


@dataclass(frozen=True)
class WeekView:
    days: list[date]
    slots: list[HourSlot]
    all_day: dict[date, list[Event]]

    @property
    def start(self) -> date:
        return self.days[0]

    @property
    def end(self) -> date:
        return self.days[-1]


@dataclass(frozen=True)
class MonthCell:
    day: int
    has_events: bool


@dataclass(frozen=True)
class MonthView:
    year: int
    month: int
    leading_blanks: int
    days: list[MonthCell]

    @property
    def weeks(self) -> list[list[MonthCell | None]]:
        """Grid rows of seven, Sunday first, padded with None."""
        cells: list[MonthCell | None] = [None] * self.leading_blanks + list(self.days)
        if len(cells) % 7:
            cells.extend([None] * (7 - len(cells) % 7))
        return [cells[i:i + 7] for i in range(0, len(cells), 7)]


@dataclass(frozen=True)
class AgendaGroup:
    day: date
    events: list[Event]


@dataclass(frozen=True)
class AgendaView:
    start: datetime
    end: datetime
    groups: list[AgendaGroup]

    @property
    def is_empty(self) -> bool:
        return not self.groups


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def sunday_index(day: date) -> int:
    """Weekday with Sunday = 0 ... Saturday = 6."""
    return (day.weekday() + 1) % 7


def week_start(day: date | datetime) -> date:
    """The Sunday on or before ``day``."""
    d = _as_date(day)
    return d - timedelta(days=sunday_index(d))


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """First and last instant of the month."""
    days_in_month = gregorian.monthrange(year, month)[1]
    return (
        datetime(year, month, 1),
        datetime.combine(date(year, month, days_in_month), time.max),
    )


def day_view(calendar: Calendar, day: date | datetime) -> DayView:
    return DayView(day=_as_date(day), events=calendar.events_for_day(day))


def week_view(
    calendar: Calendar,
    reference: date | datetime,
    first_hour: int = WEEK_FIRST_HOUR,
    last_hour: int = WEEK_LAST_HOUR,
) -> WeekView:
    """Seven days from the Sunday on or before ``reference``.

    Each hourly cell holds the first event (in start order) running at
    ``day + hour:00``. Overlapping events beyond the first are not shown.
    """
    first = week_start(reference)
    days = [first + timedelta(days=i) for i in range(7)]
    events = calendar.all_events()

    slots = []
    for hour in range(first_hour, last_hour + 1):
        cells: list[Event | None] = []
        for day in days:
            instant = datetime.combine(day, time(hour))
            cells.append(next((e for e in events if e.is_at_time(instant)), None))
        slots.append(HourSlot(hour=hour, cells=cells))

    all_day: dict[date, list[Event]] = {}
    for day in days:
        listed = [e for e in calendar.events_for_day(day) if e.all_day]
        if listed:
            all_day[day] = listed

    return WeekView(days=days, slots=slots, all_day=all_day)


def month_view(calendar: Calendar, reference: date | datetime) -> MonthView:
    ref = _as_date(reference)
    first_weekday, days_in_month = gregorian.monthrange(ref.year, ref.month)
    month_start, month_end = month_bounds(ref.year, ref.month)
    month_events = calendar.events_between(month_start, month_end)

    days = []
    for number in range(1, days_in_month + 1):
        current = date(ref.year, ref.month, number)
        days.append(MonthCell(day=number, has_events=any(e.is_same_day(current) for e in month_events)))

    return MonthView(
        year=ref.year,
        month=ref.month,
        # monthrange counts Monday as 0
        leading_blanks=(first_weekday + 1) % 7,
        days=days,
    )


def agenda_view(calendar: Calendar, start: datetime, end: datetime) -> AgendaView:
    """Events in range, split into runs that share a start date."""
    groups: list[AgendaGroup] = []
    for event in calendar.events_between(start, end):
        if not groups or groups[-1].day != event.day:
            groups.append(AgendaGroup(day=event.day, events=[]))
        groups[-1].events.append(event)
    return AgendaView(start=start, end=end, groups=groups)


def list_view(calendar: Calendar) -> list[Event]:
    return calendar.all_events()
