"""YAML configuration loading for the calendar."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

import yaml

logger = logging.getLogger("pocket-calendar")

CONFIG_PATH = os.environ.get("POCKET_CALENDAR_CONFIG", "/config/calendar.yaml")

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class CalendarSettings:
    """Calendar metadata plus view and scheduling defaults."""

    name: str = "My Calendar"
    owner: str = "User"
    log_level: str = "INFO"
    week_first_hour: int = 8
    week_last_hour: int = 20
    low_duration: int = 60  # minutes
    medium_duration: int = 120
    high_default_duration: int = 60


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        raise ValueError(f"'{key}' must be a mapping")
    return value


def _hour(value: Any, key: str) -> int:
    try:
        hour = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"week_view.{key} must be an integer, got '{value}'") from None
    if not 0 <= hour <= 23:
        raise ValueError(f"week_view.{key} must be between 0 and 23, got {hour}")
    return hour


def _minutes(value: Any, key: str) -> int:
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"durations.{key} must be an integer, got '{value}'") from None
    if minutes <= 0:
        raise ValueError(f"durations.{key} must be positive, got {minutes}")
    return minutes


def load_config() -> CalendarSettings:
    """Load and validate the calendar YAML file.

    A missing file yields the defaults.
    """
    path = CONFIG_PATH
    if not os.path.isfile(path):
        logger.warning("Config file not found: %s", path)
        return CalendarSettings()

    with open(path, "r") as f:
        raw = yaml.safe_load(f)

    if not raw:
        logger.warning("Config file is empty: %s", path)
        return CalendarSettings()
    if not isinstance(raw, dict):
        raise ValueError("Config root must be a mapping")

    defaults = CalendarSettings()

    calendar = _section(raw, "calendar")
    name = str(calendar.get("name", defaults.name)).strip()
    if not name:
        raise ValueError("calendar.name cannot be empty")
    owner = str(calendar.get("owner", defaults.owner)).strip() or defaults.owner

    log_level = str(raw.get("log_level", defaults.log_level)).strip().upper()
    if log_level not in VALID_LOG_LEVELS:
        raise ValueError(f"Unknown log_level '{log_level}'. Must be one of: {sorted(VALID_LOG_LEVELS)}")

    week = _section(raw, "week_view")
    first_hour = _hour(week.get("first_hour", defaults.week_first_hour), "first_hour")
    last_hour = _hour(week.get("last_hour", defaults.week_last_hour), "last_hour")
    if first_hour > last_hour:
        raise ValueError(f"week_view.first_hour ({first_hour}) is after last_hour ({last_hour})")

    durations = _section(raw, "durations")

    return CalendarSettings(
        name=name,
        owner=owner,
        log_level=log_level,
        week_first_hour=first_hour,
        week_last_hour=last_hour,
        low_duration=_minutes(durations.get("low", defaults.low_duration), "low"),
        medium_duration=_minutes(durations.get("medium", defaults.medium_duration), "medium"),
        high_default_duration=_minutes(
            durations.get("high_default", defaults.high_default_duration), "high_default"
        ),
    )
