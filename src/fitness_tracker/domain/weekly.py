"""Domain models for weekly summaries."""

from dataclasses import dataclass
from datetime import date

from fitness_tracker.domain.days import ActivityMetric


@dataclass(frozen=True)
class MacroDaySummary:
    """Consumption of one tracked macro on one day of the week."""

    tracked_macro_id: str
    name: str
    unit: str
    target: float
    consumed: float | None


@dataclass(frozen=True)
class WeekDaySummary:
    """One day bucket of a seven-day window.

    Future days carry ``None`` values instead of zeros.
    """

    date: date
    is_future: bool
    calories_consumed: int | None
    calorie_goal: int | None
    macros: list[MacroDaySummary]
    activity: dict[ActivityMetric, float] | None
