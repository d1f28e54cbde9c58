"""Domain models for account-owned trackable items and logs."""

from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum

from fitness_tracker.domain.macros import new_id


class TrackableKind(StrEnum):
    """Lists of items that can be checked off per day."""

    SUPPLEMENT = "supplement"
    WORKOUT_SUPPLEMENT = "workoutSupplement"
    CRAVING = "craving"


@dataclass(frozen=True)
class TrackableItem:
    """A supplement or craving that can be marked taken on a day."""

    id: str
    name: str
    amount: float = 0.0
    unit: str = ""
    calories: int = 0
    is_preset: bool = False


@dataclass(frozen=True)
class WeeklyProgressEntry:
    """Body-composition snapshot recorded on a date."""

    date: date
    weight_kg: float
    water_percent: float | None = None
    body_fat_percent: float | None = None
    photo_url: str | None = None
    id: str = field(default_factory=new_id)


@dataclass
class WeightExerciseValue:
    """Named exercise with the last logged weight, sets and reps."""

    name: str
    weight: str = ""
    sets: str = ""
    reps: str = ""
    logged_on: date | None = None
    id: str = field(default_factory=new_id)


@dataclass
class WeightGroupDefinition:
    """Body-part group holding a list of exercises."""

    name: str
    exercises: list[WeightExerciseValue] = field(default_factory=list)
    id: str = field(default_factory=new_id)


@dataclass(frozen=True)
class SportMetricValue:
    """One measured value of a sport session."""

    key: str
    label: str
    unit: str
    value: float


@dataclass(frozen=True)
class SportActivityRecord:
    """Metrics logged for a sport on a date."""

    sport: str
    date: date
    metrics: tuple[SportMetricValue, ...] = ()
    id: str = field(default_factory=new_id)
