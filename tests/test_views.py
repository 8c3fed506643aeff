"""Tests for the day, week, month and agenda projections."""

import calendar as gregorian
from datetime import date, datetime, time, timedelta

import pytest

from pocket_calendar import views
from pocket_calendar.models import Event
from pocket_calendar.store import Calendar


def _at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime.combine(day, time(hour, minute))


def _add(cal: Calendar, title: str, start: datetime, hours: float = 1, **fields) -> int:
    return cal.add(Event(title=title, start=start, end=start + timedelta(hours=hours), **fields))


# ---------------------------------------------------------------------------
# Day view
# ---------------------------------------------------------------------------

class TestDayView:
    def test_empty_day(self):
        view = views.day_view(Calendar(), date(2024, 3, 10))
        assert view.is_empty
        assert view.events == []
        assert view.day == date(2024, 3, 10)

    def test_sorted_events(self):
        cal = Calendar()
        day = date(2024, 3, 10)
        _add(cal, "Dinner", _at(day, 19))
        _add(cal, "Breakfast", _at(day, 7))
        _add(cal, "Elsewhere", _at(day + timedelta(days=1), 7))
        view = views.day_view(cal, _at(day, 12))
        assert [e.title for e in view.events] == ["Breakfast", "Dinner"]

    def test_does_not_mutate_store(self):
        cal = Calendar()
        day = date(2024, 3, 10)
        _add(cal, "Read", _at(day, 9))
        views.day_view(cal, day).events[0].title = "Changed"
        assert cal.all_events()[0].title == "Read"


# ---------------------------------------------------------------------------
# Week view
# ---------------------------------------------------------------------------

class TestWeekView:
    @pytest.mark.parametrize(
        "reference",
        [date(2024, 3, 10), date(2024, 3, 13), date(2024, 3, 16), datetime(2024, 3, 14, 23, 59)],
    )
    def test_starts_on_sunday(self, reference):
        view = views.week_view(Calendar(), reference)
        assert view.start == date(2024, 3, 10)
        assert view.end == date(2024, 3, 16)
        assert len(view.days) == 7

    def test_hour_range(self):
        view = views.week_view(Calendar(), date(2024, 3, 10))
        assert [s.hour for s in view.slots] == list(range(8, 21))
        assert all(len(s.cells) == 7 for s in view.slots)
        assert all(c is None for s in view.slots for c in s.cells)

    def test_custom_hour_range(self):
        view = views.week_view(Calendar(), date(2024, 3, 10), first_hour=6, last_hour=9)
        assert [s.hour for s in view.slots] == [6, 7, 8, 9]

    def test_event_fills_slots(self):
        cal = Calendar()
        tuesday = date(2024, 3, 12)
        _add(cal, "Focus", _at(tuesday, 9), hours=2)
        view = views.week_view(cal, tuesday)
        by_hour = {s.hour: s.cells[2] for s in view.slots}
        assert by_hour[8] is None
        assert by_hour[9].title == "Focus"
        assert by_hour[10].title == "Focus"
        assert by_hour[11].title == "Focus"  # end is inclusive
        assert by_hour[12] is None

    def test_first_match_wins(self):
        cal = Calendar()
        monday = date(2024, 3, 11)
        _add(cal, "Long", _at(monday, 8), hours=4)
        _add(cal, "Overlap", _at(monday, 10), hours=1)
        view = views.week_view(cal, monday)
        ten = next(s for s in view.slots if s.hour == 10)
        assert ten.cells[1].title == "Long"

    def test_event_between_hours_not_shown(self):
        cal = Calendar()
        wednesday = date(2024, 3, 13)
        _add(cal, "Quick", _at(wednesday, 9, 15), hours=0.5)
        view = views.week_view(cal, wednesday)
        assert all(s.cells[3] is None for s in view.slots)

    def test_all_day_listed_per_day(self):
        cal = Calendar()
        friday = date(2024, 3, 15)
        _add(cal, "Holiday", _at(friday, 0), hours=24, all_day=True)
        _add(cal, "Timed", _at(friday, 9))
        view = views.week_view(cal, friday)
        assert list(view.all_day) == [friday]
        assert [e.title for e in view.all_day[friday]] == ["Holiday"]


# ---------------------------------------------------------------------------
# Month view
# ---------------------------------------------------------------------------

class TestMonthView:
    def test_thirty_days_starting_tuesday(self):
        view = views.month_view(Calendar(), date(2025, 4, 17))
        assert view.leading_blanks == 2
        assert len(view.days) == 30
        assert [c.day for c in view.days] == list(range(1, 31))

    @pytest.mark.parametrize(
        "year,month,blanks,count",
        [(2024, 2, 4, 29), (2023, 2, 3, 28), (2024, 3, 5, 31), (2024, 9, 0, 30)],
    )
    def test_matches_gregorian_calendar(self, year, month, blanks, count):
        view = views.month_view(Calendar(), date(year, month, 1))
        assert view.leading_blanks == blanks
        assert len(view.days) == count
        assert count == gregorian.monthrange(year, month)[1]

    def test_marks_days_with_events(self):
        cal = Calendar()
        _add(cal, "First", datetime(2024, 3, 1, 9))
        _add(cal, "Mid", datetime(2024, 3, 15, 18))
        _add(cal, "Last", datetime(2024, 3, 31, 23))
        _add(cal, "April", datetime(2024, 4, 1, 9))
        view = views.month_view(cal, date(2024, 3, 20))
        marked = [c.day for c in view.days if c.has_events]
        assert marked == [1, 15, 31]

    def test_event_from_previous_month_not_marked(self):
        cal = Calendar()
        _add(cal, "Spill", datetime(2024, 2, 29, 22), hours=4)
        view = views.month_view(cal, date(2024, 3, 1))
        assert not any(c.has_events for c in view.days)

    def test_weeks_grid(self):
        view = views.month_view(Calendar(), date(2025, 4, 1))
        weeks = view.weeks
        assert all(len(row) == 7 for row in weeks)
        assert weeks[0][:2] == [None, None]
        assert weeks[0][2].day == 1
        assert weeks[-1][3].day == 30
        assert weeks[-1][4:] == [None, None, None]

    def test_month_bounds(self):
        start, end = views.month_bounds(2024, 2)
        assert start == datetime(2024, 2, 1)
        assert end.date() == date(2024, 2, 29)
        assert end.time() == time.max


# ---------------------------------------------------------------------------
# Agenda view
# ---------------------------------------------------------------------------

class TestAgendaView:
    def test_skips_empty_days(self):
        cal = Calendar()
        day1, day3 = date(2024, 3, 10), date(2024, 3, 12)
        _add(cal, "Late", _at(day3, 15))
        _add(cal, "Early", _at(day1, 9))
        _add(cal, "Noon", _at(day1, 12))
        view = views.agenda_view(cal, _at(day1, 0), _at(day3, 23, 59))
        assert [g.day for g in view.groups] == [day1, day3]
        assert [e.title for e in view.groups[0].events] == ["Early", "Noon"]
        assert [e.title for e in view.groups[1].events] == ["Late"]

    def test_empty_range(self):
        view = views.agenda_view(Calendar(), datetime(2024, 3, 1), datetime(2024, 3, 2))
        assert view.is_empty

    def test_includes_event_overlapping_range_start(self):
        cal = Calendar()
        _add(cal, "Overnight", datetime(2024, 3, 9, 22), hours=4)
        view = views.agenda_view(cal, datetime(2024, 3, 10), datetime(2024, 3, 10, 23, 59))
        assert [g.day for g in view.groups] == [date(2024, 3, 9)]


class TestListView:
    def test_all_events_sorted(self):
        cal = Calendar()
        _add(cal, "B", datetime(2024, 5, 1, 9))
        _add(cal, "A", datetime(2024, 1, 1, 9))
        assert [e.title for e in views.list_view(cal)] == ["A", "B"]
