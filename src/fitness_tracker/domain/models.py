"""Domain models for the fitness tracker account."""

from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

from fitness_tracker.domain.days import DEFAULT_ACTIVITY_GOALS, ActivityMetric
from fitness_tracker.domain.fasting import FastingState
from fitness_tracker.domain.goals import (
    ActivityLevel,
    Gender,
    MacroDistributionStrategy,
    UnitSystem,
    WeightGoalStrategy,
)
from fitness_tracker.domain.macros import TrackedMacro
from fitness_tracker.domain.tracking import (
    SportActivityRecord,
    TrackableItem,
    TrackableKind,
    WeeklyProgressEntry,
    WeightGroupDefinition,
)


@dataclass
class Account:
    """User profile that owns goals, tracked items and logs."""

    id: UUID
    name: str | None = None
    gender: Gender | None = None
    birth_date: date | None = None
    height_cm: float | None = None
    weight_kg: float | None = None
    unit_system: UnitSystem = UnitSystem.METRIC
    week_starts_on_monday: bool = True
    activity_level: ActivityLevel | None = None
    workouts_per_week: int = 0
    timezone: str = "UTC"
    maintenance_calories: int = 0
    calorie_goal: int = 0
    weight_goal: WeightGoalStrategy = WeightGoalStrategy.MAINTAIN
    macro_strategy: MacroDistributionStrategy = MacroDistributionStrategy.CUSTOM
    tracked_macros: list[TrackedMacro] = field(default_factory=list)
    selected_presets: dict[TrackableKind, list[str]] = field(default_factory=dict)
    custom_items: dict[TrackableKind, list[TrackableItem]] = field(
        default_factory=dict
    )
    weekly_progress: list[WeeklyProgressEntry] = field(default_factory=list)
    weight_groups: list[WeightGroupDefinition] = field(default_factory=list)
    sport_records: list[SportActivityRecord] = field(default_factory=list)
    fasting: FastingState = field(default_factory=FastingState)
    activity_goals: dict[ActivityMetric, float] = field(
        default_factory=lambda: dict(DEFAULT_ACTIVITY_GOALS)
    )
