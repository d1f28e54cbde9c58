"""Account-scoped API endpoints with simple token auth."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from fitness_tracker.api.schemas import (  # noqa: TC001
    ActivityPayload,
    CalorieGoalPayload,
    FastingStartPayload,
    MacroGoalPayload,
    MealIntakePayload,
)
from fitness_tracker.domain.fasting import FastingProtocol, FastingStatus
from fitness_tracker.domain.meals import MealIntakeEntry, MealMacroEntry
from fitness_tracker.domain.tracking import TrackableKind
from fitness_tracker.services.activity import progress, tally_for
from fitness_tracker.services.fasting import custom_duration_minutes
from fitness_tracker.services.formatting import format_value
from fitness_tracker.services.goals import daily_targets, recommend
from fitness_tracker.services.macro_split import STRATEGY_DESCRIPTIONS
from fitness_tracker.services.macros import find_consumption, percent_consumed

if TYPE_CHECKING:
    from fitness_tracker.containers import AppContainer
    from fitness_tracker.domain.days import Day
    from fitness_tracker.domain.models import Account
    from fitness_tracker.domain.weekly import WeekDaySummary


def _get_api_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_api_token(
    x_api_token: str | None = Header(default=None),
    api_token: str = Depends(_get_api_token),
) -> None:
    """Ensure requests include a valid API token."""
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


router = APIRouter(
    prefix="/accounts/{account_id}",
    tags=["accounts"],
    dependencies=[Depends(require_api_token)],
)


@router.get("/days/{day}")
async def get_day(account_id: UUID, day: date, request: Request) -> dict[str, object]:
    """Return a day summary."""
    container: AppContainer = request.app.state.container
    account = container.account_service.ensure_account(account_id)
    current = container.meal_ledger_service.get_day(account_id, day)
    return _day_payload(current, account)


@router.post("/days/{day}/meals", status_code=status.HTTP_201_CREATED)
async def log_meal(
    account_id: UUID, day: date, payload: MealIntakePayload, request: Request
) -> dict[str, object]:
    """Log an intake entry."""
    container: AppContainer = request.app.state.container
    entry = MealIntakeEntry(
        meal_type=payload.meal_type,
        item_name=payload.item_name.strip(),
        portion=payload.portion.strip(),
        calories=payload.calories,
        macros=tuple(
            MealMacroEntry(
                macro_id=macro.macro_id,
                name=macro.name,
                unit=macro.unit,
                amount=macro.amount,
            )
            for macro in payload.macros
        ),
    )
    current = container.meal_ledger_service.log_intake(account_id, day, entry)
    account = container.account_service.ensure_account(account_id)
    return {"entry_id": entry.id, "day": _day_payload(current, account)}


@router.delete("/days/{day}/meals/{entry_id}")
async def delete_meal(
    account_id: UUID, day: date, entry_id: str, request: Request
) -> dict[str, object]:
    """Delete an intake entry."""
    container: AppContainer = request.app.state.container
    current = container.meal_ledger_service.get_day(account_id, day)
    if not any(entry.id == entry_id for entry in current.meal_intakes):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    current = container.meal_ledger_service.delete_intake(account_id, day, entry_id)
    account = container.account_service.ensure_account(account_id)
    return _day_payload(current, account)


@router.post("/days/{day}/activity")
async def record_activity(
    account_id: UUID, day: date, payload: ActivityPayload, request: Request
) -> dict[str, object]:
    """Store a sensed reading and/or a manual adjustment for a metric."""
    container: AppContainer = request.app.state.container
    current = None
    if payload.sensed is not None:
        current = container.activity_service.record_reading(
            account_id, day, payload.metric, payload.sensed
        )
    if payload.delta is not None:
        current = container.activity_service.adjust(
            account_id, day, payload.metric, payload.delta
        )
    account = container.account_service.ensure_account(account_id)
    return _day_payload(current, account)


@router.post("/days/{day}/supplements/{supplement_id}/toggle")
async def toggle_supplement(
    account_id: UUID,
    day: date,
    supplement_id: str,
    request: Request,
    kind: TrackableKind = TrackableKind.SUPPLEMENT,
) -> dict[str, object]:
    """Flip the taken state of a supplement or craving on a day."""
    container: AppContainer = request.app.state.container
    current = container.tracking_service.toggle_taken(
        account_id, day, kind, supplement_id
    )
    account = container.account_service.ensure_account(account_id)
    return _day_payload(current, account)


@router.get("/weeks/{day}")
async def get_week(account_id: UUID, day: date, request: Request) -> dict[str, object]:
    """Return the seven days of the week containing a date."""
    container: AppContainer = request.app.state.container
    week = container.weekly_service.get_week(account_id, day)
    return {"days": [_week_day_payload(summary) for summary in week]}


@router.post("/goals/calories")
async def set_calorie_goal(
    account_id: UUID, payload: CalorieGoalPayload, request: Request
) -> dict[str, object]:
    """Apply a maintenance value, a weight-goal strategy or a custom goal."""
    container: AppContainer = request.app.state.container
    goals = container.goal_service
    if payload.maintenance_calories is not None:
        goals.set_maintenance(account_id, payload.maintenance_calories)
    if payload.strategy is not None:
        goals.choose_strategy(account_id, payload.strategy)
    if payload.calorie_goal is not None:
        goals.set_custom_goal(account_id, payload.calorie_goal)
    account = container.account_service.ensure_account(account_id)
    recommendation = recommend(account.weight_goal, account.maintenance_calories)
    targets = daily_targets(account.calorie_goal, account.weight_kg)
    return {
        "strategy": account.weight_goal,
        "calorie_goal": account.calorie_goal,
        "maintenance_calories": account.maintenance_calories,
        "recommendation": asdict(recommendation),
        "daily_targets": asdict(targets),
    }


@router.post("/goals/macros")
async def set_macro_goal(
    account_id: UUID, payload: MacroGoalPayload, request: Request
) -> dict[str, object]:
    """Recompute macro targets from the calorie goal."""
    container: AppContainer = request.app.state.container
    account = container.goal_service.apply_macro_strategy(
        account_id, payload.strategy, payload.body_weight_kg
    )
    return {
        "strategy": account.macro_strategy,
        "description": STRATEGY_DESCRIPTIONS[account.macro_strategy],
        "tracked_macros": [asdict(macro) for macro in account.tracked_macros],
    }


@router.get("/fasting")
async def fasting_status(
    account_id: UUID, request: Request, app_active: bool = True
) -> dict[str, object]:
    """Return the fasting status, signalling completion when it just ended.

    Clients polling from the background pass ``app_active=false``.
    """
    container: AppContainer = request.app.state.container
    completed = await container.fasting_service.check_completion(
        account_id, app_active=app_active
    )
    fasting = container.fasting_service.status(account_id)
    return {**_fasting_payload(fasting), "completed_now": completed}


@router.post("/fasting", status_code=status.HTTP_201_CREATED)
async def start_fast(
    account_id: UUID, payload: FastingStartPayload, request: Request
) -> dict[str, object]:
    """Start a fast."""
    container: AppContainer = request.app.state.container
    custom_minutes = None
    if payload.protocol == FastingProtocol.CUSTOM and (
        payload.custom_hours is not None or payload.custom_minutes is not None
    ):
        custom_minutes = custom_duration_minutes(
            payload.custom_hours or 0, payload.custom_minutes or 0
        )
    fasting = await container.fasting_service.start(
        account_id, payload.protocol, custom_minutes
    )
    return _fasting_payload(fasting)


@router.delete("/fasting")
async def end_fast(account_id: UUID, request: Request) -> dict[str, object]:
    """End the running fast."""
    container: AppContainer = request.app.state.container
    fasting = await container.fasting_service.end(account_id)
    return _fasting_payload(fasting)


def _day_payload(day: Day, account: Account) -> dict[str, object]:
    macros = []
    for tracked in account.tracked_macros:
        consumption = find_consumption(day, tracked.id)
        consumed = consumption.consumed if consumption else 0.0
        macros.append(
            {
                "tracked_macro_id": tracked.id,
                "name": tracked.name,
                "unit": tracked.unit,
                "target": tracked.target,
                "consumed": consumed,
                "percent": percent_consumed(tracked, consumption)
                if consumption
                else 0.0,
                "label": format_value(consumed, tracked.unit),
            }
        )
    activity = {}
    for metric, goal in account.activity_goals.items():
        tally = tally_for(day, metric)
        activity[metric.value] = {
            "total": tally.total,
            "sensed": tally.sensed,
            "goal": goal,
            "progress": progress(tally.total, goal),
        }
    return {
        "key": day.key,
        "date": day.date.isoformat(),
        "calories_consumed": day.calories_consumed,
        "calorie_goal": day.calorie_goal,
        "calories_label": format_value(day.calories_consumed, "kcal"),
        "meal_intakes": [asdict(entry) for entry in day.meal_intakes],
        "macros": macros,
        "completed_meals": list(day.completed_meals),
        "taken_supplements": list(day.taken_supplements),
        "taken_workout_supplements": list(day.taken_workout_supplements),
        "checked_cravings": list(day.checked_cravings),
        "activity": activity,
    }


def _week_day_payload(summary: WeekDaySummary) -> dict[str, object]:
    return {
        "date": summary.date.isoformat(),
        "is_future": summary.is_future,
        "calories_consumed": summary.calories_consumed,
        "calorie_goal": summary.calorie_goal,
        "macros": [asdict(macro) for macro in summary.macros],
        "activity": (
            {metric.value: value for metric, value in summary.activity.items()}
            if summary.activity is not None
            else None
        ),
    }


def _fasting_payload(fasting: FastingStatus) -> dict[str, object]:
    return asdict(fasting)
