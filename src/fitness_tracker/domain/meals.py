"""Domain models for meal intake logging."""

from dataclasses import dataclass, field
from enum import StrEnum

from fitness_tracker.domain.macros import new_id


class MealType(StrEnum):
    """Meal slot an intake entry belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class MealMacroEntry:
    """Contribution of one macro to a meal intake entry."""

    macro_id: str
    name: str
    unit: str
    amount: float


@dataclass(frozen=True)
class MealIntakeEntry:
    """A logged food item with its calories and macro contributions."""

    meal_type: MealType
    item_name: str
    portion: str
    calories: int
    macros: tuple[MealMacroEntry, ...] = ()
    id: str = field(default_factory=new_id)
