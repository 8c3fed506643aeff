"""In-memory event store with chronological ordering."""

from __future__ import annotations

import copy
import dataclasses
import itertools
import logging
from datetime import date, datetime, time
from typing import Any, Iterator

from .models import Color, Event, EventPatch, Priority
from .scheduling import SchedulingPolicy, policy_for

logger = logging.getLogger("pocket-calendar")


class Calendar:
    """Owns every Event and keeps them sorted by start time.

    Everything handed out is a copy; stored events change only through
    ``add``, ``replace``, ``update`` and ``delete``.
    """

    def __init__(
        self,
        name: str = "My Calendar",
        owner: str = "User",
        policies: dict[Priority, SchedulingPolicy] | None = None,
    ):
        self.name = name
        self.owner = owner
        self._policies = policies
        self._events: list[Event] = []
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._events)

    def __contains__(self, event_id: object) -> bool:
        return self._locate(event_id) is not None

    def __iter__(self) -> Iterator[Event]:
        return iter(self.all_events())

    def _locate(self, event_id: object) -> int | None:
        for index, event in enumerate(self._events):
            if event.id == event_id:
                return index
        return None

    def _commit(self, events: list[Event]) -> None:
        # ids grow with insertion, so equal starts stay in insertion order
        self._events = sorted(events, key=lambda e: (e.start, e.id))

    # -----------------------------------------------------------------------
    # Mutations
    # -----------------------------------------------------------------------

    def add(self, event: Event) -> int:
        """Store a copy of ``event`` under a fresh id and return the id."""
        event.validate()
        stored = dataclasses.replace(copy.deepcopy(event), id=next(self._ids))
        self._commit(self._events + [stored])
        logger.info("Added event %d '%s' at %s", stored.id, stored.title, stored.start.isoformat())
        return stored.id

    def create(self, title: str, start: datetime, end: datetime, **fields: Any) -> Event:
        event_id = self.add(Event(title=title, start=start, end=end, **fields))
        return self.find(event_id)

    def schedule(
        self,
        title: str,
        priority: Priority,
        start: datetime | time,
        end: datetime | None = None,
        *,
        day: date | None = None,
        **fields: Any,
    ) -> Event:
        """Create an event with the priority's scheduling policy applied.

        The color follows the priority unless one is passed explicitly.
        """
        begin, finish = policy_for(priority, self._policies).resolve(
            start, end, day=day, all_day=fields.get("all_day", False)
        )
        fields.setdefault("color", Color.for_priority(priority))
        return self.create(title, begin, finish, priority=priority, **fields)

    def delete(self, event_id: int) -> bool:
        before = len(self._events)
        self._events = [e for e in self._events if e.id != event_id]
        removed = len(self._events) != before
        if removed:
            logger.info("Deleted event %d", event_id)
        else:
            logger.debug("Delete: event %s not found", event_id)
        return removed

    def replace(self, event_id: int, event: Event) -> bool:
        """Commit an edited copy obtained from ``find``."""
        index = self._locate(event_id)
        if index is None:
            return False
        event.validate()
        candidate = list(self._events)
        candidate[index] = dataclasses.replace(copy.deepcopy(event), id=event_id)
        self._commit(candidate)
        logger.info("Replaced event %d", event_id)
        return True

    def update(self, event_id: int, patch: EventPatch) -> Event | None:
        """Apply ``patch`` to the stored event.

        Returns the updated copy, or None for an unknown id. An invalid time
        range raises and leaves the event unchanged.
        """
        index = self._locate(event_id)
        if index is None:
            return None
        # patch a scratch copy so a rejected patch leaves no trace
        updated = patch.apply(copy.deepcopy(self._events[index]))
        candidate = list(self._events)
        candidate[index] = updated
        self._commit(candidate)
        logger.info("Updated event %d", event_id)
        return copy.deepcopy(updated)

    # -----------------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------------

    def find(self, event_id: int) -> Event | None:
        index = self._locate(event_id)
        if index is None:
            return None
        return copy.deepcopy(self._events[index])

    def all_events(self) -> list[Event]:
        return [copy.deepcopy(e) for e in self._events]

    def events_for_day(self, day: date | datetime) -> list[Event]:
        result = [copy.deepcopy(e) for e in self._events if e.is_same_day(day)]
        logger.debug("events_for_day(%s): %d", day, len(result))
        return result

    def events_between(self, start: datetime, end: datetime) -> list[Event]:
        result = [copy.deepcopy(e) for e in self._events if e.is_between(start, end)]
        logger.debug("events_between(%s, %s): %d", start, end, len(result))
        return result
