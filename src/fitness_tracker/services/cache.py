"""In-memory authoritative store for days."""

from dataclasses import dataclass, field
from datetime import date
from typing import Protocol
from uuid import UUID

from fitness_tracker.domain.days import Day


class LocalDayStore(Protocol):
    """Local persistence interface for days."""

    def get(self, account_id: UUID, day: date) -> Day | None:
        """Return the stored day if present."""

    def fetch_or_create(self, account_id: UUID, day: date) -> Day:
        """Return the stored day, creating an empty one if missing."""

    def save(self, account_id: UUID, day: Day) -> None:
        """Store a day. May raise when the backing store fails."""


@dataclass
class InMemoryDayStore(LocalDayStore):
    """Per-process day cache keyed by account and calendar date."""

    _days: dict[tuple[UUID, date], Day] = field(default_factory=dict)

    def get(self, account_id: UUID, day: date) -> Day | None:
        """Return the cached day if present."""
        return self._days.get((account_id, day))

    def fetch_or_create(self, account_id: UUID, day: date) -> Day:
        """Return the cached day, inserting an empty one when missing."""
        key = (account_id, day)
        existing = self._days.get(key)
        if existing is not None:
            return existing
        created = Day(date=day)
        self._days[key] = created
        return created

    def save(self, account_id: UUID, day: Day) -> None:
        """Store a day under its calendar date."""
        self._days[(account_id, day.date)] = day
