"""Domain models for the per-day aggregate."""

from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum

from fitness_tracker.domain.macros import MacroConsumption, new_id
from fitness_tracker.domain.meals import MealIntakeEntry


class ActivityMetric(StrEnum):
    """Activity quantities tracked per day."""

    CALORIES_BURNED = "calories"
    STEPS = "steps"
    DISTANCE = "distanceWalking"
    EXERCISE_TIME = "exerciseTime"


ACTIVITY_UNITS: dict[ActivityMetric, str] = {
    ActivityMetric.CALORIES_BURNED: "kcal",
    ActivityMetric.STEPS: "steps",
    ActivityMetric.DISTANCE: "m",
    ActivityMetric.EXERCISE_TIME: "min",
}

DEFAULT_ACTIVITY_GOALS: dict[ActivityMetric, float] = {
    ActivityMetric.CALORIES_BURNED: 500,
    ActivityMetric.STEPS: 10000,
    ActivityMetric.DISTANCE: 3000,
    ActivityMetric.EXERCISE_TIME: 30,
}


@dataclass
class ActivityTally:
    """Displayed total for a metric and the last sensed reading behind it."""

    total: float = 0.0
    sensed: float = 0.0


@dataclass
class Day:
    """All nutrition, supplement and activity data for one calendar date."""

    date: date
    calories_consumed: int = 0
    calorie_goal: int = 0
    meal_intakes: list[MealIntakeEntry] = field(default_factory=list)
    macro_consumptions: list[MacroConsumption] = field(default_factory=list)
    completed_meals: list[str] = field(default_factory=list)
    taken_supplements: list[str] = field(default_factory=list)
    taken_workout_supplements: list[str] = field(default_factory=list)
    checked_cravings: list[str] = field(default_factory=list)
    activity: dict[ActivityMetric, ActivityTally] = field(default_factory=dict)
    calorie_adjustment: int = 0
    macro_adjustments: dict[str, float] = field(default_factory=dict)
    id: str = field(default_factory=new_id)

    @property
    def key(self) -> str:
        """Return the UTC calendar key used to address this day."""
        return day_key(self.date)


def day_key(value: date) -> str:
    """Format a calendar date as a ``dd-MM-yyyy`` key."""
    return value.strftime("%d-%m-%Y")
