"""Supabase repository for per-day documents."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from fitness_tracker.domain.days import ActivityMetric, ActivityTally, Day, day_key
from fitness_tracker.domain.macros import MacroConsumption
from fitness_tracker.domain.meals import MealIntakeEntry, MealMacroEntry, MealType
from fitness_tracker.services.days import RemoteDayRepository

_logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, date, calories_consumed, calorie_goal, calorie_adjustment, "
    "meal_intakes, macro_consumptions, macro_adjustments, completed_meals, "
    "taken_supplements, taken_workout_supplements, checked_cravings, activity"
)


@dataclass
class SupabaseDayRepository(RemoteDayRepository):
    """Supabase implementation of the remote day store.

    Failures are logged and reported as ``None``/``False`` so callers can
    queue the day for a later retry.
    """

    client: Client

    def fetch_day(self, account_id: UUID, day: date) -> Day | None:
        """Return the stored day, or None when missing or unreachable."""
        try:
            response = (
                self.client.table("days")
                .select(_COLUMNS)
                .eq("account_id", str(account_id))
                .eq("day_key", day_key(day))
                .limit(1)
                .execute()
            )
        except Exception:
            _logger.exception("Failed to fetch day key=%s", day_key(day))
            return None
        if not response.data:
            return None
        return decode_day(response.data[0])

    def save_day(self, account_id: UUID, day: Day) -> bool:
        """Write the whole day document."""
        payload = encode_day(day)
        payload["account_id"] = str(account_id)
        payload["updated_at"] = datetime.now(tz=UTC).isoformat()
        try:
            self.client.table("days").upsert(
                payload, on_conflict="account_id,day_key"
            ).execute()
        except Exception:
            _logger.exception("Failed to save day key=%s", day.key)
            return False
        return True

    def update_fields(
        self, account_id: UUID, day: Day, fields: dict[str, object]
    ) -> bool:
        """Write only the given columns, creating the row when it is missing."""
        try:
            response = (
                self.client.table("days")
                .update({**fields, "updated_at": datetime.now(tz=UTC).isoformat()})
                .eq("account_id", str(account_id))
                .eq("day_key", day.key)
                .execute()
            )
        except Exception:
            _logger.exception("Failed to update day key=%s", day.key)
            return False
        if response.data:
            return True
        return self.save_day(account_id, day)


def encode_day(day: Day) -> dict[str, object]:
    """Return the column payload for a day."""
    return {
        "id": day.id,
        "day_key": day.key,
        "date": day.date.isoformat(),
        "calories_consumed": day.calories_consumed,
        "calorie_goal": day.calorie_goal,
        "calorie_adjustment": day.calorie_adjustment,
        "meal_intakes": [_encode_intake(entry) for entry in day.meal_intakes],
        "macro_consumptions": [
            {
                "id": consumption.id,
                "tracked_macro_id": consumption.tracked_macro_id,
                "name": consumption.name,
                "unit": consumption.unit,
                "consumed": consumption.consumed,
            }
            for consumption in day.macro_consumptions
        ],
        "macro_adjustments": dict(day.macro_adjustments),
        "completed_meals": list(day.completed_meals),
        "taken_supplements": list(day.taken_supplements),
        "taken_workout_supplements": list(day.taken_workout_supplements),
        "checked_cravings": list(day.checked_cravings),
        "activity": {
            metric.value: {"total": tally.total, "sensed": tally.sensed}
            for metric, tally in day.activity.items()
        },
    }


def decode_day(row: dict[str, object]) -> Day:
    """Build a day from a stored row, tolerating missing columns."""
    activity: dict[ActivityMetric, ActivityTally] = {}
    for key, value in (row.get("activity") or {}).items():
        try:
            metric = ActivityMetric(key)
        except ValueError:
            _logger.warning("Ignoring unknown activity metric %s", key)
            continue
        activity[metric] = ActivityTally(
            total=float(value.get("total", 0.0)),
            sensed=float(value.get("sensed", 0.0)),
        )
    day = Day(
        date=date.fromisoformat(str(row["date"])),
        calories_consumed=int(row.get("calories_consumed") or 0),
        calorie_goal=int(row.get("calorie_goal") or 0),
        calorie_adjustment=int(row.get("calorie_adjustment") or 0),
        meal_intakes=[_decode_intake(item) for item in row.get("meal_intakes") or []],
        macro_consumptions=[
            MacroConsumption(
                tracked_macro_id=str(item["tracked_macro_id"]),
                name=str(item.get("name", "")),
                unit=str(item.get("unit", "")),
                consumed=float(item.get("consumed", 0.0)),
                id=str(item.get("id") or item["tracked_macro_id"]),
            )
            for item in row.get("macro_consumptions") or []
        ],
        macro_adjustments={
            str(key): float(value)
            for key, value in (row.get("macro_adjustments") or {}).items()
        },
        completed_meals=list(row.get("completed_meals") or []),
        taken_supplements=list(row.get("taken_supplements") or []),
        taken_workout_supplements=list(row.get("taken_workout_supplements") or []),
        checked_cravings=list(row.get("checked_cravings") or []),
        activity=activity,
    )
    if row.get("id"):
        day.id = str(row["id"])
    return day


def _encode_intake(entry: MealIntakeEntry) -> dict[str, object]:
    return {
        "id": entry.id,
        "meal_type": entry.meal_type.value,
        "item_name": entry.item_name,
        "portion": entry.portion,
        "calories": entry.calories,
        "macros": [
            {
                "macro_id": macro.macro_id,
                "name": macro.name,
                "unit": macro.unit,
                "amount": macro.amount,
            }
            for macro in entry.macros
        ],
    }


def _decode_intake(item: dict[str, object]) -> MealIntakeEntry:
    return MealIntakeEntry(
        id=str(item["id"]),
        meal_type=MealType(item.get("meal_type", MealType.SNACK.value)),
        item_name=str(item.get("item_name", "")),
        portion=str(item.get("portion", "")),
        calories=int(item.get("calories", 0)),
        macros=tuple(
            MealMacroEntry(
                macro_id=str(macro["macro_id"]),
                name=str(macro.get("name", "")),
                unit=str(macro.get("unit", "")),
                amount=float(macro.get("amount", 0.0)),
            )
            for macro in item.get("macros") or []
        ),
    )
