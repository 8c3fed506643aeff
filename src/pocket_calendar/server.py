#!/usr/bin/env python3
"""
pocket-calendar — Personal calendar MCP server.

Keeps events in memory and serves day, week, month and agenda views as
structured data.

Environment variables:
    POCKET_CALENDAR_CONFIG — Path to calendar.yaml (default: /config/calendar.yaml)
"""

import logging
import sys
from datetime import date, datetime, time
from typing import Any

from mcp.server.fastmcp import FastMCP

from . import views
from .config import CalendarSettings, load_config
from .models import CalendarError, Color, Event, EventPatch, Priority
from .scheduling import policies_from_settings
from .store import Calendar

# MCP stdio servers must NEVER write to stdout — log to stderr only.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("pocket-calendar")


# ---------------------------------------------------------------------------
# Module-level state
# ---------------------------------------------------------------------------

_settings: CalendarSettings = CalendarSettings()
_calendar: Calendar = Calendar()


def _build_calendar(settings: CalendarSettings) -> Calendar:
    return Calendar(
        name=settings.name,
        owner=settings.owner,
        policies=policies_from_settings(settings),
    )


def _now() -> datetime:
    return datetime.now().replace(second=0, microsecond=0)


def _event_to_dict(event: Event) -> dict[str, Any]:
    """Convert Event to JSON-friendly dict."""
    return {
        "id": event.id,
        "title": event.title,
        "start": event.start.isoformat(),
        "end": event.end.isoformat(),
        "color": event.color.value,
        "priority": event.priority.value,
        "description": event.description,
        "location": event.location,
        "attendees": list(event.attendees),
        "all_day": event.all_day,
        "recurring": event.recurring,
        "recurrence_pattern": event.recurrence_pattern,
    }


def _cell_to_dict(event: Event | None) -> dict[str, Any] | None:
    if event is None:
        return None
    return {"id": event.id, "title": event.title, "color": event.color.value}


def _hour_label(hour: int) -> str:
    if hour == 0:
        return "12 AM"
    if hour < 12:
        return f"{hour} AM"
    if hour == 12:
        return "12 PM"
    return f"{hour - 12} PM"


def _parse_datetime(value: str) -> datetime:
    """Parse ISO 8601 datetime string. Supports date-only and datetime.

    Values with a UTC offset are converted to naive host-local time.
    """
    from dateutil.parser import parse as parse_dt
    dt = parse_dt(value)
    if dt.tzinfo:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def _parse_day(value: str) -> date:
    """Blank means today."""
    if not value:
        return _now().date()
    return _parse_datetime(value).date()


# ---------------------------------------------------------------------------
# MCP Server + Tools
# ---------------------------------------------------------------------------

mcp = FastMCP("pocket-calendar")


@mcp.tool()
async def calendar_info() -> dict:
    """Show the calendar name, owner and number of stored events."""
    return {
        "name": _calendar.name,
        "owner": _calendar.owner,
        "count": len(_calendar),
    }


@mcp.tool()
async def create_event(
    title: str,
    priority: str = "medium",
    start: str = "",
    end: str = "",
    color: str = "",
    description: str = "",
    location: str = "",
    attendees: list[str] | None = None,
    all_day: bool = False,
    recurrence: str = "",
) -> dict:
    """Create a new calendar event.

    Low and medium priority events take only a start time of day for today and
    last a fixed duration (1 or 2 hours by default); any end is ignored. High
    priority events take a full start and end date/time.

    Args:
        title: Event title (required)
        priority: "low", "medium" or "high". Default: medium
        start: Low/medium: time of day, e.g. "14:00". High: ISO 8601 date/time. Default: now
        end: High only: ISO 8601 date/time. Default: start + 1 hour
        color: Red, Blue, Green, Yellow, Purple, Orange, Gray or Default. Default: derived from priority
        description: Event description (optional)
        location: Event location (optional)
        attendees: Attendee names in order (optional)
        all_day: Whether the event covers the whole start day
        recurrence: Recurrence label such as "Daily" (optional, not expanded)
    """
    title = title.strip()
    if not title:
        return {"error": "Title cannot be empty"}

    try:
        prio = Priority.parse(priority)
    except ValueError as e:
        return {"error": str(e)}

    fields: dict[str, Any] = {
        "description": description,
        "location": location,
        "attendees": list(attendees or []),
        "all_day": all_day,
        "recurring": bool(recurrence.strip()),
        "recurrence_pattern": recurrence.strip(),
    }
    if color:
        try:
            fields["color"] = Color.parse(color)
        except ValueError as e:
            return {"error": str(e)}

    now = _now()
    when: datetime | time
    dt_end: datetime | None = None
    if prio is Priority.HIGH:
        try:
            when = _parse_datetime(start) if start else now
        except Exception:
            return {"error": f"Invalid start date: {start}"}
        if end:
            try:
                dt_end = _parse_datetime(end)
            except Exception:
                return {"error": f"Invalid end date: {end}"}
    else:
        # fixed-duration tiers: time of day only, end is ignored
        try:
            when = _parse_datetime(start).time() if start else now.time()
        except Exception:
            return {"error": f"Invalid start date: {start}"}

    try:
        event = _calendar.schedule(title, prio, when, dt_end, day=now.date(), **fields)
    except CalendarError as e:
        return {"error": str(e)}
    return {"success": True, "event": _event_to_dict(event)}


@mcp.tool()
async def update_event(
    event_id: int,
    title: str = "",
    start: str = "",
    end: str = "",
    color: str = "",
    priority: str = "",
    description: str = "",
    location: str = "",
    attendees: list[str] | None = None,
    all_day: bool | None = None,
    recurrence: str = "",
) -> dict:
    """Update an existing calendar event. Only provided fields are changed.

    Changing only the start keeps the event's duration. Changing the priority
    without a color also switches the color to the priority's color.

    Args:
        event_id: Event ID (from list_all_events or a view)
        title: New title (optional)
        start: New start date/time (optional)
        end: New end date/time (optional)
        color: New color (optional)
        priority: New priority (optional)
        description: New description (optional)
        location: New location (optional)
        attendees: Replacement attendee list (optional, [] clears it)
        all_day: New all-day flag (optional)
        recurrence: New recurrence label (optional)
    """
    patch = EventPatch(
        title=title,
        description=description,
        location=location,
        attendees=attendees,
        all_day=all_day,
        recurrence_pattern=recurrence,
    )
    if start:
        try:
            patch.start = _parse_datetime(start)
        except Exception:
            return {"error": f"Invalid start date: {start}"}
    if end:
        try:
            patch.end = _parse_datetime(end)
        except Exception:
            return {"error": f"Invalid end date: {end}"}
    try:
        if color:
            patch.color = Color.parse(color)
        if priority:
            patch.priority = Priority.parse(priority)
    except ValueError as e:
        return {"error": str(e)}

    if patch.is_empty():
        return {"error": "No fields to update"}

    try:
        event = _calendar.update(event_id, patch)
    except CalendarError as e:
        return {"error": f"Failed to update event: {e}"}
    if event is None:
        return {"error": f"Event not found: {event_id}"}
    return {"success": True, "event": _event_to_dict(event)}


@mcp.tool()
async def delete_event(event_id: int) -> dict:
    """Delete a calendar event.

    Args:
        event_id: Event ID
    """
    if _calendar.delete(event_id):
        return {"success": True, "message": f"Event {event_id} deleted"}
    return {"error": f"Event not found: {event_id}"}


@mcp.tool()
async def get_event(event_id: int) -> dict:
    """Get a single event with full details.

    Args:
        event_id: Event ID
    """
    event = _calendar.find(event_id)
    if event is None:
        return {"error": f"Event not found: {event_id}"}
    return {"event": _event_to_dict(event)}


@mcp.tool()
async def list_all_events() -> dict:
    """List every stored event in chronological order."""
    events = views.list_view(_calendar)
    return {"count": len(events), "events": [_event_to_dict(e) for e in events]}


@mcp.tool()
async def day_view(date: str = "") -> dict:
    """Events starting on one day.

    Args:
        date: Day to show (ISO 8601, e.g. "2026-02-13"). Default: today.
    """
    try:
        day = _parse_day(date)
    except Exception:
        return {"error": f"Invalid date: {date}"}

    view = views.day_view(_calendar, day)
    return {
        "date": view.day.isoformat(),
        "weekday": view.day.strftime("%A"),
        "count": len(view.events),
        "events": [_event_to_dict(e) for e in view.events],
    }


@mcp.tool()
async def week_view(date: str = "") -> dict:
    """Hourly grid for the Sunday-to-Saturday week containing a date.

    Each cell shows the first event running at the top of that hour.
    All-day events are listed per day below the grid.

    Args:
        date: Any day in the week (ISO 8601). Default: today.
    """
    try:
        day = _parse_day(date)
    except Exception:
        return {"error": f"Invalid date: {date}"}

    view = views.week_view(_calendar, day, _settings.week_first_hour, _settings.week_last_hour)
    return {
        "start": view.start.isoformat(),
        "end": view.end.isoformat(),
        "days": [d.isoformat() for d in view.days],
        "hours": [
            {
                "hour": slot.hour,
                "label": _hour_label(slot.hour),
                "cells": [_cell_to_dict(e) for e in slot.cells],
            }
            for slot in view.slots
        ],
        "all_day": {
            d.isoformat(): [_cell_to_dict(e) for e in events]
            for d, events in view.all_day.items()
        },
    }


@mcp.tool()
async def month_view(date: str = "") -> dict:
    """Month grid marking the days that have events.

    Args:
        date: Any day in the month (ISO 8601). Default: today.
    """
    try:
        day = _parse_day(date)
    except Exception:
        return {"error": f"Invalid date: {date}"}

    view = views.month_view(_calendar, day)
    return {
        "year": view.year,
        "month": view.month,
        "title": day.replace(day=1).strftime("%B %Y"),
        "leading_blanks": view.leading_blanks,
        "days_in_month": len(view.days),
        "days": [{"day": c.day, "has_events": c.has_events} for c in view.days],
        "weeks": [[c.day if c else None for c in row] for row in view.weeks],
    }


@mcp.tool()
async def agenda_view(start: str, end: str) -> dict:
    """Events in a range, grouped by date.

    Args:
        start: Start date/time (ISO 8601, e.g. "2026-02-13T00:00:00")
        end: End date/time (ISO 8601)
    """
    try:
        dt_start = _parse_datetime(start)
    except Exception:
        return {"error": f"Invalid start date: {start}"}
    try:
        dt_end = _parse_datetime(end)
    except Exception:
        return {"error": f"Invalid end date: {end}"}

    view = views.agenda_view(_calendar, dt_start, dt_end)
    return {
        "start": view.start.isoformat(),
        "end": view.end.isoformat(),
        "count": sum(len(g.events) for g in view.groups),
        "groups": [
            {
                "date": g.day.isoformat(),
                "weekday": g.day.strftime("%A"),
                "events": [_event_to_dict(e) for e in g.events],
            }
            for g in view.groups
        ],
    }


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    """Entry point for console script and python -m."""
    global _settings, _calendar

    _settings = load_config()
    logging.getLogger().setLevel(_settings.log_level)
    _calendar = _build_calendar(_settings)
    logger.info("Calendar '%s' ready for %s", _calendar.name, _calendar.owner)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
