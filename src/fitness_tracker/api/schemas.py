"""Pydantic request models for the HTTP API."""

from pydantic import BaseModel, Field, model_validator

from fitness_tracker.domain.days import ActivityMetric
from fitness_tracker.domain.fasting import FastingProtocol
from fitness_tracker.domain.goals import MacroDistributionStrategy, WeightGoalStrategy
from fitness_tracker.domain.meals import MealType


class MealMacroPayload(BaseModel):
    """Macro contribution of a logged item."""

    macro_id: str
    name: str
    unit: str = "g"
    amount: float = Field(ge=0)


class MealIntakePayload(BaseModel):
    """Food item to log against a day."""

    meal_type: MealType
    item_name: str = Field(min_length=1)
    portion: str = ""
    calories: int = Field(ge=0)
    macros: list[MealMacroPayload] = Field(default_factory=list)


class ActivityPayload(BaseModel):
    """Sensed reading or manual adjustment for one activity metric."""

    metric: ActivityMetric
    sensed: float | None = Field(default=None, ge=0)
    delta: float | None = None

    @model_validator(mode="after")
    def _require_value(self) -> "ActivityPayload":
        if self.sensed is None and self.delta is None:
            raise ValueError("Either sensed or delta is required")
        return self


class CalorieGoalPayload(BaseModel):
    """Weight-goal strategy or a hand-entered calorie goal."""

    strategy: WeightGoalStrategy | None = None
    calorie_goal: int | None = Field(default=None, ge=0)
    maintenance_calories: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _require_goal(self) -> "CalorieGoalPayload":
        if (
            self.strategy is None
            and self.calorie_goal is None
            and self.maintenance_calories is None
        ):
            raise ValueError("Provide a strategy, a calorie goal or a maintenance value")
        return self


class MacroGoalPayload(BaseModel):
    """Macro distribution strategy to apply to the calorie goal."""

    strategy: MacroDistributionStrategy
    body_weight_kg: float | None = Field(default=None, gt=0)


class FastingStartPayload(BaseModel):
    """Protocol for a new fast; the account's protocol is used when omitted."""

    protocol: FastingProtocol | None = None
    custom_hours: int | None = Field(default=None, ge=0)
    custom_minutes: int | None = None
