"""Calorie goal planning from maintenance calories."""

import calendar
import logging
import math
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from fitness_tracker.domain.goals import (
    ActivityLevel,
    BodyProfile,
    CalorieRecommendation,
    DailyTargets,
    Gender,
    GoalState,
    MacroDistributionStrategy,
    UnitSystem,
    WeightGoalStrategy,
)
from fitness_tracker.domain.models import Account
from fitness_tracker.services.accounts import AccountService
from fitness_tracker.services.macro_split import (
    apply_split,
    calculate_split,
    round_half_up,
)

MIN_DAILY_CALORIES = 1200
MAX_DAILY_CALORIES = 4500
MAX_AGE_YEARS = 120
CM_PER_INCH = 2.54
LB_PER_KG = 2.20462

_ADJUSTMENTS: dict[WeightGoalStrategy, int] = {
    WeightGoalStrategy.MAINTAIN: 0,
    WeightGoalStrategy.MILD_LOSS: -250,
    WeightGoalStrategy.LOSS: -500,
    WeightGoalStrategy.EXTREME_LOSS: -1000,
    WeightGoalStrategy.MILD_GAIN: 250,
    WeightGoalStrategy.GAIN: 500,
    WeightGoalStrategy.EXTREME_GAIN: 1000,
    WeightGoalStrategy.CUSTOM: 0,
}

_ACTIVITY_MULTIPLIERS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.HIGH: 1.725,
    ActivityLevel.ATHLETE: 1.9,
}

_logger = logging.getLogger(__name__)


def recommend(
    strategy: WeightGoalStrategy, maintenance_calories: float
) -> CalorieRecommendation:
    """Return a safe daily calorie goal for a weight-goal strategy.

    A zero value means there is no maintenance baseline to work from.
    """
    if maintenance_calories <= 0:
        return CalorieRecommendation(value=0, adjustment=0)
    adjustment = _ADJUSTMENTS[strategy]
    adjusted = min(
        max(maintenance_calories + adjustment, MIN_DAILY_CALORIES),
        MAX_DAILY_CALORIES,
    )
    return CalorieRecommendation(value=round_half_up(adjusted), adjustment=adjustment)


def select_strategy(
    state: GoalState, strategy: WeightGoalStrategy, maintenance_calories: float
) -> GoalState:
    """Switch strategy; preset strategies overwrite the calorie goal."""
    if strategy == WeightGoalStrategy.CUSTOM:
        return GoalState(strategy=strategy, calorie_goal=state.calorie_goal)
    recommendation = recommend(strategy, maintenance_calories)
    if recommendation.value == 0:
        return GoalState(strategy=strategy, calorie_goal=state.calorie_goal)
    return GoalState(strategy=strategy, calorie_goal=recommendation.value)


def edit_goal(state: GoalState, calorie_goal: int) -> GoalState:
    """Set the calorie goal by hand, which makes the strategy custom."""
    if calorie_goal == state.calorie_goal:
        return state
    return GoalState(
        strategy=WeightGoalStrategy.CUSTOM, calorie_goal=max(calorie_goal, 0)
    )


def estimate_maintenance_calories(
    profile: BodyProfile, reference_date: date | None = None
) -> int | None:
    """Estimate daily energy expenditure with Mifflin-St Jeor."""
    if profile.gender is None or profile.gender == Gender.PREFER_NOT_SAY:
        return None
    height_cm = _height_cm(profile)
    weight_kg = body_weight_kg(profile)
    age = _age_in_years(profile.birth_date, reference_date or date.today())
    if height_cm is None or weight_kg is None or age is None:
        return None
    bmr = 10 * weight_kg + 6.25 * height_cm - 5 * age
    bmr += 5 if profile.gender == Gender.MALE else -161
    level = profile.activity_level or activity_level_from_workouts(
        profile.workouts_per_week
    )
    tdee = bmr * _ACTIVITY_MULTIPLIERS[level]
    if not math.isfinite(tdee):
        return None
    return round_half_up(tdee)


def activity_level_from_workouts(workouts_per_week: int) -> ActivityLevel:
    """Map weekly workout count to an activity level."""
    if workouts_per_week < 1:
        return ActivityLevel.SEDENTARY
    if workouts_per_week <= 2:  # noqa: PLR2004
        return ActivityLevel.LIGHT
    if workouts_per_week <= 4:  # noqa: PLR2004
        return ActivityLevel.MODERATE
    if workouts_per_week == 5:  # noqa: PLR2004
        return ActivityLevel.HIGH
    return ActivityLevel.ATHLETE


def body_weight_kg(profile: BodyProfile) -> float | None:
    """Return the profile weight in kilograms."""
    if profile.weight is None or profile.weight <= 0:
        return None
    if profile.unit_system == UnitSystem.IMPERIAL:
        return profile.weight / LB_PER_KG
    return profile.weight


def daily_targets(calories: float, body_weight: float | None) -> DailyTargets:
    """Return fibre, sodium and water targets for a calorie goal."""
    fibre = min(max(calories / 1000 * 14, 20.0), 40.0)
    water = 2000
    if body_weight and body_weight > 0:
        water = max(2000, round_half_up(body_weight * 35.0))
    return DailyTargets(fibre_g=round_half_up(fibre), sodium_mg=2300, water_ml=water)


@dataclass
class GoalService:
    """Service that keeps an account's calorie and macro goals in sync."""

    accounts: AccountService

    def choose_strategy(
        self, account_id: UUID, strategy: WeightGoalStrategy
    ) -> tuple[Account, CalorieRecommendation]:
        """Apply a weight-goal strategy to the account's calorie goal."""
        account = self.accounts.ensure_account(account_id)
        recommendation = recommend(strategy, account.maintenance_calories)
        state = select_strategy(
            GoalState(account.weight_goal, account.calorie_goal),
            strategy,
            account.maintenance_calories,
        )
        if recommendation.value == 0 and strategy != WeightGoalStrategy.CUSTOM:
            _logger.info(
                "No maintenance baseline for account %s; goal unchanged", account_id
            )
        account.weight_goal = state.strategy
        account.calorie_goal = state.calorie_goal
        self.accounts.save(account)
        return account, recommendation

    def set_custom_goal(self, account_id: UUID, calorie_goal: int) -> Account:
        """Store a hand-entered calorie goal."""
        account = self.accounts.ensure_account(account_id)
        state = edit_goal(
            GoalState(account.weight_goal, account.calorie_goal), calorie_goal
        )
        account.weight_goal = state.strategy
        account.calorie_goal = state.calorie_goal
        self.accounts.save(account)
        return account

    def set_maintenance(self, account_id: UUID, maintenance_calories: int) -> Account:
        """Store a maintenance baseline and refresh a preset goal from it."""
        account = self.accounts.ensure_account(account_id)
        account.maintenance_calories = max(maintenance_calories, 0)
        if account.weight_goal != WeightGoalStrategy.CUSTOM:
            state = select_strategy(
                GoalState(account.weight_goal, account.calorie_goal),
                account.weight_goal,
                account.maintenance_calories,
            )
            account.calorie_goal = state.calorie_goal
        self.accounts.save(account)
        return account

    def estimate_maintenance(
        self, account_id: UUID, reference_date: date | None = None
    ) -> Account:
        """Estimate maintenance calories from the stored body profile."""
        account = self.accounts.ensure_account(account_id)
        if account.birth_date is None:
            return account
        profile = BodyProfile(
            gender=account.gender,
            birth_date=account.birth_date,
            unit_system=UnitSystem.METRIC,
            height=account.height_cm,
            weight=account.weight_kg,
            workouts_per_week=account.workouts_per_week,
            activity_level=account.activity_level,
        )
        estimate = estimate_maintenance_calories(profile, reference_date)
        if estimate is None:
            return account
        return self.set_maintenance(account_id, estimate)

    def apply_macro_strategy(
        self,
        account_id: UUID,
        strategy: MacroDistributionStrategy,
        body_weight: float | None = None,
    ) -> Account:
        """Recompute protein, fat and carb targets from the calorie goal."""
        account = self.accounts.ensure_account(account_id)
        account.macro_strategy = strategy
        weight = body_weight if body_weight is not None else account.weight_kg
        split = calculate_split(account.calorie_goal, weight or 0.0, strategy)
        if split is not None:
            account.tracked_macros = apply_split(account.tracked_macros, split)
        self.accounts.save(account)
        return account


def _height_cm(profile: BodyProfile) -> float | None:
    if profile.unit_system == UnitSystem.IMPERIAL:
        if profile.height_feet is None or profile.height_inches is None:
            return None
        total_inches = profile.height_feet * 12 + profile.height_inches
        if total_inches <= 0:
            return None
        return total_inches * CM_PER_INCH
    if profile.height is None or profile.height <= 0:
        return None
    return profile.height


def _age_in_years(birth_date: date, reference: date) -> float | None:
    if birth_date > reference:
        return None
    years = reference.year - birth_date.year
    if (reference.month, reference.day) < (birth_date.month, birth_date.day):
        years -= 1
    anniversary = _add_months(birth_date, years * 12)
    months = 0
    while _add_months(anniversary, months + 1) <= reference:
        months += 1
    days = (reference - _add_months(anniversary, months)).days
    age = years + months / 12 + days / 365
    if not 0 <= age <= MAX_AGE_YEARS:
        return None
    return age


def _add_months(value: date, months: int) -> date:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
