"""Meal intake ledger for a day."""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from fitness_tracker.domain.days import Day
from fitness_tracker.domain.macros import MacroConsumption
from fitness_tracker.domain.meals import MealIntakeEntry, MealMacroEntry
from fitness_tracker.services.accounts import AccountService
from fitness_tracker.services.days import DayService
from fitness_tracker.services.macros import (
    apply_contribution,
    entry_totals,
    find_consumption,
    reverse_contribution,
)

_logger = logging.getLogger(__name__)


def log_intake(day: Day, entry: MealIntakeEntry) -> None:
    """Append an intake entry and refresh the day's totals."""
    day.meal_intakes.append(entry)
    recompute_totals(day)


def delete_intake(day: Day, entry_id: str) -> MealIntakeEntry | None:
    """Remove an intake entry by id and refresh totals.

    Returns the removed entry, or None when the id is unknown.
    """
    for index, entry in enumerate(day.meal_intakes):
        if entry.id == entry_id:
            removed = day.meal_intakes.pop(index)
            recompute_totals(day)
            return removed
    return None


def adjust_calories(day: Day, delta: int) -> None:
    """Apply a manual calorie correction that survives later recomputes."""
    from_entries = sum(entry.calories for entry in day.meal_intakes)
    consumed = max(day.calories_consumed + delta, 0)
    day.calorie_adjustment = consumed - from_entries
    day.calories_consumed = consumed


def recompute_totals(day: Day) -> None:
    """Derive calorie and macro totals from the intake entries.

    Totals equal the entry sums plus any manual adjustment, floored at zero.
    A floored total rewrites its adjustment so no negative balance is kept.
    """
    calories = sum(entry.calories for entry in day.meal_intakes)
    day.calories_consumed = max(calories + day.calorie_adjustment, 0)
    day.calorie_adjustment = day.calories_consumed - calories

    latest: dict[str, MealMacroEntry] = {}
    for entry in day.meal_intakes:
        for macro in entry.macros:
            latest[macro.macro_id] = macro
    for macro_id, macro in latest.items():
        consumption = find_consumption(day, macro_id)
        if consumption is None:
            day.macro_consumptions.append(
                MacroConsumption(
                    tracked_macro_id=macro_id, name=macro.name, unit=macro.unit
                )
            )
        else:
            consumption.name = macro.name
            consumption.unit = macro.unit

    totals = entry_totals(day)
    for consumption in day.macro_consumptions:
        macro_id = consumption.tracked_macro_id
        from_entries = totals.get(macro_id, 0.0)
        consumption.consumed = max(
            from_entries + day.macro_adjustments.get(macro_id, 0.0), 0.0
        )
        adjustment = consumption.consumed - from_entries
        if adjustment:
            day.macro_adjustments[macro_id] = adjustment
        else:
            day.macro_adjustments.pop(macro_id, None)


@dataclass
class MealLedgerService:
    """Service that records meal intake against an account's days."""

    days: DayService
    accounts: AccountService

    def get_day(self, account_id: UUID, day: date | datetime) -> Day:
        """Return the day with a consumption record for every tracked macro."""
        account = self.accounts.ensure_account(account_id)
        current = self.days.get_day(account_id, day, account.tracked_macros)
        if account.calorie_goal and current.calorie_goal != account.calorie_goal:
            current.calorie_goal = account.calorie_goal
        return current

    def log_intake(
        self, account_id: UUID, day: date | datetime, entry: MealIntakeEntry
    ) -> Day:
        """Log an intake entry on a day and persist it."""
        current = self.get_day(account_id, day)
        log_intake(current, entry)
        _logger.info(
            "Logged %s kcal (%s) for key=%s", entry.calories, entry.meal_type, current.key
        )
        self.days.commit(account_id, current)
        return current

    def delete_intake(
        self, account_id: UUID, day: date | datetime, entry_id: str
    ) -> Day:
        """Delete an intake entry. Unknown ids leave the day untouched."""
        current = self.get_day(account_id, day)
        removed = delete_intake(current, entry_id)
        if removed is None:
            return current
        self.days.commit(account_id, current)
        return current

    def adjust_calories(
        self, account_id: UUID, day: date | datetime, delta: int
    ) -> Day:
        """Manually raise or lower the day's calorie total."""
        current = self.get_day(account_id, day)
        adjust_calories(current, delta)
        self.days.commit(account_id, current)
        return current

    def adjust_macro(
        self, account_id: UUID, day: date | datetime, macro_id: str, delta: float
    ) -> Day:
        """Manually raise or lower one macro's consumption."""
        account = self.accounts.ensure_account(account_id)
        current = self.get_day(account_id, day)
        if delta >= 0:
            tracked = next(
                (macro for macro in account.tracked_macros if macro.id == macro_id),
                None,
            )
            existing = find_consumption(current, macro_id)
            name = tracked.name if tracked else (existing.name if existing else macro_id)
            unit = tracked.unit if tracked else (existing.unit if existing else "g")
            apply_contribution(current, macro_id, delta, unit, name)
        elif reverse_contribution(current, macro_id, -delta) is None:
            return current
        self.days.commit(account_id, current)
        return current
