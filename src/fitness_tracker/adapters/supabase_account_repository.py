"""Supabase-backed account repository."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from fitness_tracker.config import parse_week_start
from fitness_tracker.domain.days import ActivityMetric
from fitness_tracker.domain.fasting import FastingProtocol, FastingState
from fitness_tracker.domain.goals import (
    ActivityLevel,
    Gender,
    MacroDistributionStrategy,
    UnitSystem,
    WeightGoalStrategy,
)
from fitness_tracker.domain.macros import TrackedMacro
from fitness_tracker.domain.models import Account
from fitness_tracker.domain.tracking import (
    SportActivityRecord,
    SportMetricValue,
    TrackableItem,
    TrackableKind,
    WeeklyProgressEntry,
    WeightExerciseValue,
    WeightGroupDefinition,
)
from fitness_tracker.services.accounts import AccountRepository


@dataclass
class SupabaseAccountRepository(AccountRepository):
    """Supabase implementation for account persistence."""

    client: Client

    def get_account(self, account_id: UUID) -> Account | None:
        """Return the account row for an id, if present."""
        response = (
            self.client.table("accounts")
            .select("*")
            .eq("id", str(account_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return decode_account(response.data[0])

    def create_account(self, account: Account) -> Account:
        """Insert a new account row and return it."""
        response = self.client.table("accounts").insert(encode_account(account)).execute()
        if not response.data:
            raise RuntimeError("Failed to create account in Supabase")
        return decode_account(response.data[0])

    def save_account(self, account: Account) -> None:
        """Overwrite the stored account row."""
        payload = encode_account(account)
        payload["updated_at"] = datetime.now(tz=UTC).isoformat()
        self.client.table("accounts").update(payload).eq(
            "id", str(account.id)
        ).execute()


def encode_account(account: Account) -> dict[str, object]:
    """Return the column payload for an account."""
    fasting = account.fasting
    return {
        "id": str(account.id),
        "name": account.name,
        "gender": account.gender.value if account.gender else None,
        "birth_date": account.birth_date.isoformat() if account.birth_date else None,
        "height_cm": account.height_cm,
        "weight_kg": account.weight_kg,
        "unit_system": account.unit_system.value,
        "week_start": "monday" if account.week_starts_on_monday else "sunday",
        "activity_level": (
            account.activity_level.value if account.activity_level else None
        ),
        "workouts_per_week": account.workouts_per_week,
        "timezone": account.timezone,
        "maintenance_calories": account.maintenance_calories,
        "calorie_goal": account.calorie_goal,
        "weight_goal": account.weight_goal.value,
        "macro_strategy": account.macro_strategy.value,
        "tracked_macros": [
            {
                "id": macro.id,
                "name": macro.name,
                "unit": macro.unit,
                "target": macro.target,
                "color_hex": macro.color_hex,
            }
            for macro in account.tracked_macros
        ],
        "selected_presets": {
            kind.value: list(ids) for kind, ids in account.selected_presets.items()
        },
        "custom_items": {
            kind.value: [
                {
                    "id": item.id,
                    "name": item.name,
                    "amount": item.amount,
                    "unit": item.unit,
                    "calories": item.calories,
                }
                for item in items
            ]
            for kind, items in account.custom_items.items()
        },
        "weekly_progress": [
            {
                "id": entry.id,
                "date": entry.date.isoformat(),
                "weight_kg": entry.weight_kg,
                "water_percent": entry.water_percent,
                "body_fat_percent": entry.body_fat_percent,
                "photo_url": entry.photo_url,
            }
            for entry in account.weekly_progress
        ],
        "weight_groups": [
            {
                "id": group.id,
                "name": group.name,
                "exercises": [
                    {
                        "id": exercise.id,
                        "name": exercise.name,
                        "weight": exercise.weight,
                        "sets": exercise.sets,
                        "reps": exercise.reps,
                        "logged_on": (
                            exercise.logged_on.isoformat()
                            if exercise.logged_on
                            else None
                        ),
                    }
                    for exercise in group.exercises
                ],
            }
            for group in account.weight_groups
        ],
        "sport_records": [
            {
                "id": record.id,
                "sport": record.sport,
                "date": record.date.isoformat(),
                "metrics": [
                    {
                        "key": metric.key,
                        "label": metric.label,
                        "unit": metric.unit,
                        "value": metric.value,
                    }
                    for metric in record.metrics
                ],
            }
            for record in account.sport_records
        ],
        "fasting": {
            "protocol": fasting.protocol.value,
            "custom_minutes": fasting.custom_minutes,
            "started_at": (
                fasting.started_at.isoformat() if fasting.started_at else None
            ),
            "duration_minutes": fasting.duration_minutes,
            "completion_signalled": fasting.completion_signalled,
            "was_over_time": fasting.was_over_time,
        },
        "activity_goals": {
            metric.value: goal for metric, goal in account.activity_goals.items()
        },
    }


def decode_account(row: dict[str, object]) -> Account:
    """Build an account from a stored row."""
    account = Account(
        id=UUID(str(row["id"])),
        name=row.get("name"),
        gender=Gender(row["gender"]) if row.get("gender") else None,
        birth_date=_parse_date(row.get("birth_date")),
        height_cm=_optional_float(row.get("height_cm")),
        weight_kg=_optional_float(row.get("weight_kg")),
        unit_system=UnitSystem(row.get("unit_system") or UnitSystem.METRIC.value),
        week_starts_on_monday=parse_week_start(row.get("week_start")),
        activity_level=(
            ActivityLevel(row["activity_level"]) if row.get("activity_level") else None
        ),
        workouts_per_week=int(row.get("workouts_per_week") or 0),
        timezone=str(row.get("timezone") or "UTC"),
        maintenance_calories=int(row.get("maintenance_calories") or 0),
        calorie_goal=int(row.get("calorie_goal") or 0),
        weight_goal=WeightGoalStrategy(
            row.get("weight_goal") or WeightGoalStrategy.MAINTAIN.value
        ),
        macro_strategy=MacroDistributionStrategy(
            row.get("macro_strategy") or MacroDistributionStrategy.CUSTOM.value
        ),
        tracked_macros=[
            TrackedMacro(
                id=str(item["id"]),
                name=str(item.get("name", "")),
                unit=str(item.get("unit", "")),
                target=float(item.get("target", 0.0)),
                color_hex=str(item.get("color_hex") or "#FF3B30"),
            )
            for item in row.get("tracked_macros") or []
        ],
        selected_presets={
            TrackableKind(kind): list(ids)
            for kind, ids in (row.get("selected_presets") or {}).items()
        },
        custom_items={
            TrackableKind(kind): [
                TrackableItem(
                    id=str(item["id"]),
                    name=str(item.get("name", "")),
                    amount=float(item.get("amount", 0.0)),
                    unit=str(item.get("unit", "")),
                    calories=int(item.get("calories", 0)),
                )
                for item in items
            ]
            for kind, items in (row.get("custom_items") or {}).items()
        },
        weekly_progress=[
            WeeklyProgressEntry(
                id=str(item["id"]),
                date=date.fromisoformat(str(item["date"])),
                weight_kg=float(item.get("weight_kg", 0.0)),
                water_percent=_optional_float(item.get("water_percent")),
                body_fat_percent=_optional_float(item.get("body_fat_percent")),
                photo_url=item.get("photo_url"),
            )
            for item in row.get("weekly_progress") or []
        ],
        weight_groups=[_parse_group(item) for item in row.get("weight_groups") or []],
        sport_records=[
            SportActivityRecord(
                id=str(item["id"]),
                sport=str(item.get("sport", "")),
                date=date.fromisoformat(str(item["date"])),
                metrics=tuple(
                    SportMetricValue(
                        key=str(metric.get("key", "")),
                        label=str(metric.get("label", "")),
                        unit=str(metric.get("unit", "")),
                        value=float(metric.get("value", 0.0)),
                    )
                    for metric in item.get("metrics") or []
                ),
            )
            for item in row.get("sport_records") or []
        ],
        fasting=_parse_fasting(row.get("fasting") or {}),
    )
    goals = row.get("activity_goals") or {}
    for key, value in goals.items():
        account.activity_goals[ActivityMetric(key)] = float(value)
    return account


def _parse_group(item: dict[str, object]) -> WeightGroupDefinition:
    return WeightGroupDefinition(
        id=str(item["id"]),
        name=str(item.get("name", "")),
        exercises=[
            WeightExerciseValue(
                id=str(exercise["id"]),
                name=str(exercise.get("name", "")),
                weight=str(exercise.get("weight") or ""),
                sets=str(exercise.get("sets") or ""),
                reps=str(exercise.get("reps") or ""),
                logged_on=_parse_date(exercise.get("logged_on")),
            )
            for exercise in item.get("exercises") or []
        ],
    )


def _parse_fasting(item: dict[str, object]) -> FastingState:
    started_at = item.get("started_at")
    return FastingState(
        protocol=FastingProtocol(
            item.get("protocol") or FastingProtocol.SIXTEEN_EIGHT.value
        ),
        custom_minutes=int(item.get("custom_minutes") or 16 * 60),
        started_at=datetime.fromisoformat(str(started_at)) if started_at else None,
        duration_minutes=(
            int(item["duration_minutes"]) if item.get("duration_minutes") else None
        ),
        completion_signalled=bool(item.get("completion_signalled", False)),
        was_over_time=bool(item.get("was_over_time", False)),
    )


def _parse_date(value: object) -> date | None:
    if not value:
        return None
    return date.fromisoformat(str(value))


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return float(value)
