"""Domain models for calorie and macro goal planning."""

from dataclasses import dataclass
from datetime import date
from enum import StrEnum


class WeightGoalStrategy(StrEnum):
    """Calorie adjustment preset applied to maintenance calories."""

    MAINTAIN = "maintainWeight"
    MILD_LOSS = "mildWeightLoss"
    LOSS = "weightLoss"
    EXTREME_LOSS = "extremeWeightLoss"
    MILD_GAIN = "mildWeightGain"
    GAIN = "weightGain"
    EXTREME_GAIN = "extremeWeightGain"
    CUSTOM = "custom"


class MacroDistributionStrategy(StrEnum):
    """Ratio preset used to derive macro targets from a calorie goal."""

    HIGH_PROTEIN = "highProtein"
    BALANCED = "balanced"
    LOW_FAT = "lowFat"
    LOW_CARB = "lowCarb"
    CUSTOM = "custom"


class Gender(StrEnum):
    MALE = "male"
    FEMALE = "female"
    PREFER_NOT_SAY = "preferNotSay"


class ActivityLevel(StrEnum):
    SEDENTARY = "sedentary"
    LIGHT = "lightlyActive"
    MODERATE = "moderatelyActive"
    HIGH = "veryActive"
    ATHLETE = "extraActive"


class UnitSystem(StrEnum):
    METRIC = "metric"
    IMPERIAL = "imperial"


@dataclass(frozen=True)
class CalorieRecommendation:
    """Recommended daily calories and the adjustment applied to maintenance."""

    value: int
    adjustment: int


@dataclass(frozen=True)
class MacroSplit:
    """Target grams of each energy macro."""

    protein_g: int
    fat_g: int
    carbs_g: int


@dataclass(frozen=True)
class GoalState:
    """Active weight-goal strategy and the calorie goal it produced."""

    strategy: WeightGoalStrategy
    calorie_goal: int


@dataclass(frozen=True)
class BodyProfile:
    """Inputs for estimating maintenance calories."""

    gender: Gender | None
    birth_date: date
    unit_system: UnitSystem
    height: float | None = None
    height_feet: float | None = None
    height_inches: float | None = None
    weight: float | None = None
    workouts_per_week: int = 0
    activity_level: ActivityLevel | None = None


@dataclass(frozen=True)
class DailyTargets:
    """Secondary daily targets derived from the calorie goal."""

    fibre_g: int
    sodium_mg: int
    water_ml: int
