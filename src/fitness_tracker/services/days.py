"""Day loading, saving and local/remote reconciliation."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from fitness_tracker.domain.days import ActivityTally, Day, day_key
from fitness_tracker.domain.macros import TrackedMacro
from fitness_tracker.services.cache import LocalDayStore
from fitness_tracker.services.macros import ensure_consumptions

_logger = logging.getLogger(__name__)

DayListener = Callable[[UUID, Day], None]


class RemoteDayRepository(Protocol):
    """Remote document store for days."""

    def fetch_day(self, account_id: UUID, day: date) -> Day | None:
        """Return the remote day, or None when missing or unreachable."""

    def save_day(self, account_id: UUID, day: Day) -> bool:
        """Write a day and report success."""

    def update_fields(
        self, account_id: UUID, day: Day, fields: dict[str, object]
    ) -> bool:
        """Write only the given fields of a day and report success."""


@dataclass
class DayChangeNotifier:
    """Publishes day changes to listeners of one account's calendar date."""

    _listeners: dict[tuple[UUID, date], list[DayListener]] = field(
        default_factory=dict
    )

    def subscribe(
        self, account_id: UUID, day: date, listener: DayListener
    ) -> Callable[[], None]:
        """Register a listener for an account's date; returns an unsubscribe."""
        key = (account_id, day)
        self._listeners.setdefault(key, []).append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(key)
            if not listeners or listener not in listeners:
                return
            listeners.remove(listener)
            if not listeners:
                del self._listeners[key]

        return unsubscribe

    def publish(self, account_id: UUID, day: Day) -> None:
        """Notify listeners of the account's calendar date."""
        for listener in list(self._listeners.get((account_id, day.date), [])):
            listener(account_id, day)


def normalize_date(value: date | datetime) -> date:
    """Strip the time of day, converting aware datetimes to UTC first."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(UTC).date()
        return value.date()
    return value


def day_has_meaningful_data(day: Day) -> bool:
    """Return True when a day holds anything worth writing remotely."""
    return bool(
        day.calories_consumed
        or day.meal_intakes
        or day.completed_meals
        or day.taken_supplements
        or day.taken_workout_supplements
        or day.checked_cravings
        or any(tally.total for tally in day.activity.values())
        or any(consumption.consumed for consumption in day.macro_consumptions)
    )


def filter_update_fields(fields: dict[str, object]) -> dict[str, object]:
    """Drop zero and empty values so defaults never overwrite remote data."""
    filtered: dict[str, object] = {}
    for key, value in fields.items():
        if value is None:
            continue
        if isinstance(value, bool):
            filtered[key] = value
            continue
        if isinstance(value, int | float) and value == 0:
            continue
        if isinstance(value, str | list | tuple | dict | set) and not value:
            continue
        filtered[key] = value
    return filtered


def merge_days(local: Day, remote: Day) -> Day:
    """Merge a remote day into the local one without losing local data.

    Remote values win only where they carry data. Nutrition totals travel
    together with the intake entries they were derived from.
    """
    nutrition = _nutrition_source(local, remote)
    activity = dict(local.activity)
    for metric, tally in remote.activity.items():
        if tally.total or tally.sensed:
            activity[metric] = ActivityTally(total=tally.total, sensed=tally.sensed)
    return replace(
        local,
        calories_consumed=nutrition.calories_consumed,
        calorie_adjustment=nutrition.calorie_adjustment,
        meal_intakes=list(nutrition.meal_intakes),
        macro_consumptions=[replace(item) for item in nutrition.macro_consumptions],
        macro_adjustments=dict(nutrition.macro_adjustments),
        calorie_goal=remote.calorie_goal or local.calorie_goal,
        completed_meals=list(remote.completed_meals or local.completed_meals),
        taken_supplements=list(remote.taken_supplements or local.taken_supplements),
        taken_workout_supplements=list(
            remote.taken_workout_supplements or local.taken_workout_supplements
        ),
        checked_cravings=list(remote.checked_cravings or local.checked_cravings),
        activity=activity,
    )


@dataclass
class DayService:
    """Two-tier day store: local cache first, remote documents behind it."""

    local: LocalDayStore
    remote: RemoteDayRepository
    notifier: DayChangeNotifier = field(default_factory=DayChangeNotifier)
    pending: set[tuple[UUID, date]] = field(default_factory=set)
    _reconciled: set[tuple[UUID, date]] = field(default_factory=set)

    def get_day(
        self,
        account_id: UUID,
        day: date | datetime,
        tracked_macros: Iterable[TrackedMacro] = (),
    ) -> Day:
        """Return the day for a date, reconciling with the remote copy once."""
        calendar_day = normalize_date(day)
        if (account_id, calendar_day) in self._reconciled:
            current = self.local.fetch_or_create(account_id, calendar_day)
        else:
            current = self.refresh(account_id, calendar_day)
        ensure_consumptions(current, tracked_macros)
        return current

    def refresh(self, account_id: UUID, day: date | datetime) -> Day:
        """Fetch the remote day and merge it into the local copy."""
        calendar_day = normalize_date(day)
        local = self.local.fetch_or_create(account_id, calendar_day)
        remote = self.remote.fetch_day(account_id, calendar_day)
        self._reconciled.add((account_id, calendar_day))
        if remote is None:
            _logger.info("No remote day for key=%s", day_key(calendar_day))
            if day_has_meaningful_data(local):
                self._push(account_id, local)
            return local
        merged = merge_days(local, remote)
        self._save_local(account_id, merged)
        return merged

    def commit(self, account_id: UUID, day: Day) -> None:
        """Persist a mutated day locally and remotely, then notify listeners."""
        self._reconciled.add((account_id, day.date))
        self._save_local(account_id, day)
        self._push(account_id, day)
        self.notifier.publish(account_id, day)

    def update_fields(
        self, account_id: UUID, day: Day, fields: dict[str, object]
    ) -> bool:
        """Persist a few changed fields of a day, then notify listeners."""
        self._save_local(account_id, day)
        filtered = filter_update_fields(fields)
        success = True
        if filtered:
            success = self.remote.update_fields(account_id, day, filtered)
            if not success:
                _logger.warning(
                    "Failed to update fields %s for key=%s",
                    sorted(filtered),
                    day.key,
                )
                self.pending.add((account_id, day.date))
        self.notifier.publish(account_id, day)
        return success

    def upload_pending(self) -> bool:
        """Retry remote saves that previously failed."""
        if not self.pending:
            return True
        keys = sorted(self.pending, key=lambda item: (str(item[0]), item[1]))
        self.pending.clear()
        all_succeeded = True
        for account_id, calendar_day in keys:
            day = self.local.get(account_id, calendar_day)
            if day is None:
                _logger.info("No local day for pending key=%s", day_key(calendar_day))
                continue
            if not self._push(account_id, day):
                all_succeeded = False
        return all_succeeded

    def _save_local(self, account_id: UUID, day: Day) -> None:
        try:
            self.local.save(account_id, day)
        except Exception:
            _logger.exception("Failed to save day locally key=%s", day.key)

    def _push(self, account_id: UUID, day: Day) -> bool:
        if not day_has_meaningful_data(day):
            return True
        if self.remote.save_day(account_id, day):
            return True
        _logger.warning("Failed to save day key=%s; queued for retry", day.key)
        self.pending.add((account_id, day.date))
        return False


def _nutrition_source(local: Day, remote: Day) -> Day:
    if remote.meal_intakes:
        return remote
    if local.meal_intakes:
        return local
    remote_has_totals = remote.calories_consumed or any(
        consumption.consumed for consumption in remote.macro_consumptions
    )
    return remote if remote_has_totals else local
