"""Macro consumption tracking for a day."""

from collections.abc import Iterable

from fitness_tracker.domain.days import Day
from fitness_tracker.domain.macros import MacroConsumption, TrackedMacro


def percent_consumed(tracked: TrackedMacro, consumption: MacroConsumption) -> float:
    """Return the consumed share of a macro target in ``[0, 1]``."""
    if tracked.target <= 0:
        return 0.0
    return min(max(consumption.consumed / tracked.target, 0.0), 1.0)


def find_consumption(day: Day, tracked_macro_id: str) -> MacroConsumption | None:
    """Return the consumption record for a tracked macro, if present."""
    for consumption in day.macro_consumptions:
        if consumption.tracked_macro_id == tracked_macro_id:
            return consumption
    return None


def apply_contribution(
    day: Day, tracked_macro_id: str, amount: float, unit: str, name: str
) -> MacroConsumption:
    """Add an amount to a macro's consumption, creating the record if needed.

    The change is kept as a manual adjustment so that totals re-derived from
    the day's intake entries still include it.
    """
    consumption = _find_or_create(day, tracked_macro_id, name, unit)
    consumption.name = name
    consumption.unit = unit
    _shift(day, consumption, amount)
    return consumption


def reverse_contribution(
    day: Day, tracked_macro_id: str, amount: float
) -> MacroConsumption | None:
    """Subtract an amount from a macro's consumption, never going below zero."""
    consumption = find_consumption(day, tracked_macro_id)
    if consumption is None:
        return None
    _shift(day, consumption, -amount)
    return consumption


def ensure_consumptions(day: Day, tracked_macros: Iterable[TrackedMacro]) -> None:
    """Create zero consumption records for tracked macros missing from a day."""
    for tracked in tracked_macros:
        _find_or_create(day, tracked.id, tracked.name, tracked.unit)


def entry_totals(day: Day) -> dict[str, float]:
    """Return per-macro sums across the day's intake entries."""
    totals: dict[str, float] = {}
    for entry in day.meal_intakes:
        for macro in entry.macros:
            totals[macro.macro_id] = totals.get(macro.macro_id, 0.0) + macro.amount
    return totals


def _find_or_create(
    day: Day, tracked_macro_id: str, name: str, unit: str
) -> MacroConsumption:
    consumption = find_consumption(day, tracked_macro_id)
    if consumption is None:
        consumption = MacroConsumption(
            tracked_macro_id=tracked_macro_id, name=name, unit=unit
        )
        day.macro_consumptions.append(consumption)
    return consumption


def _shift(day: Day, consumption: MacroConsumption, amount: float) -> None:
    consumption.consumed = max(consumption.consumed + amount, 0.0)
    from_entries = entry_totals(day).get(consumption.tracked_macro_id, 0.0)
    adjustment = consumption.consumed - from_entries
    if adjustment:
        day.macro_adjustments[consumption.tracked_macro_id] = adjustment
    else:
        day.macro_adjustments.pop(consumption.tracked_macro_id, None)
