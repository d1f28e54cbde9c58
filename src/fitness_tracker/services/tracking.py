"""Account-owned trackables: supplements, cravings and training logs."""

import logging
import re
from dataclasses import dataclass, replace
from datetime import date, datetime
from uuid import UUID

from fitness_tracker.domain.days import Day
from fitness_tracker.domain.macros import new_id
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
from fitness_tracker.services.accounts import AccountService
from fitness_tracker.services.days import DayService, normalize_date

PRESET_PREFIX = "preset:"

_DAY_FIELDS: dict[TrackableKind, str] = {
    TrackableKind.SUPPLEMENT: "taken_supplements",
    TrackableKind.WORKOUT_SUPPLEMENT: "taken_workout_supplements",
    TrackableKind.CRAVING: "checked_cravings",
}

_logger = logging.getLogger(__name__)


def preset_id(name: str) -> str:
    """Return the stable id of a preset item."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.strip().lower()).strip("-")
    return f"{PRESET_PREFIX}{slug}"


def is_preset_id(item_id: str) -> bool:
    return item_id.startswith(PRESET_PREFIX)


def _preset(
    name: str, amount: float = 0.0, unit: str = "", calories: int = 0
) -> TrackableItem:
    return TrackableItem(
        id=preset_id(name),
        name=name,
        amount=amount,
        unit=unit,
        calories=calories,
        is_preset=True,
    )


SUPPLEMENT_PRESETS: tuple[TrackableItem, ...] = (
    _preset("Vitamin C", 1000, "mg"),
    _preset("Vitamin D", 50, "μg"),
    _preset("Zinc", 30, "mg"),
    _preset("Iron", 18, "mg"),
    _preset("Magnesium", 400, "mg"),
    _preset("Magnesium Glycinate", 2.5, "g"),
    _preset("Melatonin", 5, "mg"),
)

WORKOUT_SUPPLEMENT_PRESETS: tuple[TrackableItem, ...] = (
    _preset("Creatine", 5, "g"),
    _preset("Whey Protein", 30, "g", 120),
    _preset("Pre-Workout", 1, "scoop", 10),
    _preset("BCAA", 5, "g"),
)

CRAVING_PRESETS: tuple[TrackableItem, ...] = (
    _preset("Sweets"),
    _preset("Salty Snacks"),
    _preset("Fast Food"),
    _preset("Soda"),
    _preset("Alcohol"),
)

PRESETS: dict[TrackableKind, tuple[TrackableItem, ...]] = {
    TrackableKind.SUPPLEMENT: SUPPLEMENT_PRESETS,
    TrackableKind.WORKOUT_SUPPLEMENT: WORKOUT_SUPPLEMENT_PRESETS,
    TrackableKind.CRAVING: CRAVING_PRESETS,
}


def find_preset(kind: TrackableKind, item_id: str) -> TrackableItem | None:
    return next((item for item in PRESETS[kind] if item.id == item_id), None)


def toggle_preset(account: Account, kind: TrackableKind, item_id: str) -> bool:
    """Select or deselect a preset by id. Returns the new selection state."""
    if find_preset(kind, item_id) is None:
        return False
    selected = account.selected_presets.setdefault(kind, [])
    if item_id in selected:
        selected.remove(item_id)
        return False
    selected.append(item_id)
    return True


def add_custom_item(  # noqa: PLR0913
    account: Account,
    kind: TrackableKind,
    name: str,
    amount: float = 0.0,
    unit: str = "",
    calories: int = 0,
) -> TrackableItem | None:
    """Add a user-defined item. Blank names are ignored."""
    cleaned = name.strip()
    if not cleaned:
        return None
    item = TrackableItem(
        id=new_id(),
        name=cleaned,
        amount=max(amount, 0.0),
        unit=unit.strip(),
        calories=max(calories, 0),
    )
    account.custom_items.setdefault(kind, []).append(item)
    return item


def remove_item(account: Account, kind: TrackableKind, item_id: str) -> bool:
    """Remove a custom item, or deselect a preset. Returns True when changed."""
    if is_preset_id(item_id):
        selected = account.selected_presets.get(kind, [])
        if item_id in selected:
            selected.remove(item_id)
            return True
        return False
    items = account.custom_items.get(kind, [])
    remaining = [item for item in items if item.id != item_id]
    if len(remaining) == len(items):
        return False
    account.custom_items[kind] = remaining
    return True


def active_items(account: Account, kind: TrackableKind) -> list[TrackableItem]:
    """Return selected presets followed by custom items."""
    selected = account.selected_presets.get(kind, [])
    presets = [item for item in PRESETS[kind] if item.id in selected]
    return presets + list(account.custom_items.get(kind, []))


def toggle_taken(day: Day, kind: TrackableKind, item_id: str) -> bool:
    """Flip an item's taken state on a day. Returns the new state."""
    taken: list[str] = getattr(day, _DAY_FIELDS[kind])
    if item_id in taken:
        taken.remove(item_id)
        return False
    taken.append(item_id)
    return True


def upsert_progress_entry(
    account: Account, entry: WeeklyProgressEntry
) -> list[WeeklyProgressEntry]:
    """Add or replace a progress entry by id, keeping the list date-sorted."""
    entries = [item for item in account.weekly_progress if item.id != entry.id]
    entries.append(entry)
    account.weekly_progress = sorted(entries, key=lambda item: item.date)
    return account.weekly_progress


def delete_progress_entry(account: Account, entry_id: str) -> bool:
    entries = [item for item in account.weekly_progress if item.id != entry_id]
    changed = len(entries) != len(account.weekly_progress)
    account.weekly_progress = entries
    return changed


def find_group(account: Account, group_id: str) -> WeightGroupDefinition | None:
    return next((group for group in account.weight_groups if group.id == group_id), None)


def log_exercise(  # noqa: PLR0913
    group: WeightGroupDefinition,
    exercise_id: str,
    logged_on: date,
    weight: str = "",
    sets: str = "",
    reps: str = "",
) -> WeightExerciseValue | None:
    """Record free-text weight, sets and reps for an exercise on a date."""
    for exercise in group.exercises:
        if exercise.id == exercise_id:
            exercise.weight = weight.strip()
            exercise.sets = sets.strip()
            exercise.reps = reps.strip()
            exercise.logged_on = logged_on
            return exercise
    return None


def upsert_sport_record(
    account: Account, record: SportActivityRecord
) -> SportActivityRecord:
    """Append a sport record or replace the one with the same id."""
    for index, existing in enumerate(account.sport_records):
        if existing.id == record.id:
            account.sport_records[index] = record
            return record
    account.sport_records.append(record)
    return record


def sport_records_for(
    account: Account, sport: str, day: date | None = None
) -> list[SportActivityRecord]:
    """Return a sport's records, optionally limited to one date."""
    return [
        record
        for record in account.sport_records
        if record.sport == sport and (day is None or record.date == day)
    ]


@dataclass
class TrackingService:
    """Service for trackable items and training logs owned by an account."""

    accounts: AccountService
    days: DayService

    def list_items(self, account_id: UUID, kind: TrackableKind) -> list[TrackableItem]:
        return active_items(self.accounts.ensure_account(account_id), kind)

    def toggle_preset(self, account_id: UUID, kind: TrackableKind, item_id: str) -> bool:
        account = self.accounts.ensure_account(account_id)
        selected = toggle_preset(account, kind, item_id)
        self.accounts.save(account)
        return selected

    def add_custom_item(  # noqa: PLR0913
        self,
        account_id: UUID,
        kind: TrackableKind,
        name: str,
        amount: float = 0.0,
        unit: str = "",
        calories: int = 0,
    ) -> TrackableItem | None:
        account = self.accounts.ensure_account(account_id)
        item = add_custom_item(account, kind, name, amount, unit, calories)
        if item is not None:
            self.accounts.save(account)
        return item

    def remove_item(self, account_id: UUID, kind: TrackableKind, item_id: str) -> bool:
        account = self.accounts.ensure_account(account_id)
        changed = remove_item(account, kind, item_id)
        if changed:
            self.accounts.save(account)
        return changed

    def toggle_taken(
        self,
        account_id: UUID,
        day: date | datetime,
        kind: TrackableKind,
        item_id: str,
    ) -> Day:
        """Flip an item's taken state and write only that list remotely."""
        current = self.days.get_day(account_id, day)
        taken = toggle_taken(current, kind, item_id)
        _logger.info("Item %s taken=%s for key=%s", item_id, taken, current.key)
        field_name = _DAY_FIELDS[kind]
        self.days.update_fields(
            account_id, current, {field_name: list(getattr(current, field_name))}
        )
        return current

    def save_progress_entry(
        self, account_id: UUID, entry: WeeklyProgressEntry
    ) -> list[WeeklyProgressEntry]:
        account = self.accounts.ensure_account(account_id)
        entries = upsert_progress_entry(account, entry)
        self.accounts.save(account)
        return entries

    def delete_progress_entry(self, account_id: UUID, entry_id: str) -> bool:
        account = self.accounts.ensure_account(account_id)
        changed = delete_progress_entry(account, entry_id)
        if changed:
            self.accounts.save(account)
        return changed

    def add_group(self, account_id: UUID, name: str) -> WeightGroupDefinition | None:
        cleaned = name.strip()
        if not cleaned:
            return None
        account = self.accounts.ensure_account(account_id)
        group = WeightGroupDefinition(name=cleaned)
        account.weight_groups.append(group)
        self.accounts.save(account)
        return group

    def rename_group(
        self, account_id: UUID, group_id: str, name: str
    ) -> WeightGroupDefinition | None:
        account = self.accounts.ensure_account(account_id)
        group = find_group(account, group_id)
        if group is None or not name.strip():
            return group
        group.name = name.strip()
        self.accounts.save(account)
        return group

    def delete_group(self, account_id: UUID, group_id: str) -> bool:
        account = self.accounts.ensure_account(account_id)
        groups = [group for group in account.weight_groups if group.id != group_id]
        if len(groups) == len(account.weight_groups):
            return False
        account.weight_groups = groups
        self.accounts.save(account)
        return True

    def add_exercise(
        self, account_id: UUID, group_id: str, name: str
    ) -> WeightExerciseValue | None:
        account = self.accounts.ensure_account(account_id)
        group = find_group(account, group_id)
        if group is None or not name.strip():
            return None
        exercise = WeightExerciseValue(name=name.strip())
        group.exercises.append(exercise)
        self.accounts.save(account)
        return exercise

    def rename_exercise(
        self, account_id: UUID, group_id: str, exercise_id: str, name: str
    ) -> WeightExerciseValue | None:
        account = self.accounts.ensure_account(account_id)
        group = find_group(account, group_id)
        if group is None or not name.strip():
            return None
        for exercise in group.exercises:
            if exercise.id == exercise_id:
                exercise.name = name.strip()
                self.accounts.save(account)
                return exercise
        return None

    def delete_exercise(self, account_id: UUID, group_id: str, exercise_id: str) -> bool:
        account = self.accounts.ensure_account(account_id)
        group = find_group(account, group_id)
        if group is None:
            return False
        exercises = [item for item in group.exercises if item.id != exercise_id]
        if len(exercises) == len(group.exercises):
            return False
        group.exercises = exercises
        self.accounts.save(account)
        return True

    def log_exercise(  # noqa: PLR0913
        self,
        account_id: UUID,
        group_id: str,
        exercise_id: str,
        logged_on: date | datetime,
        weight: str = "",
        sets: str = "",
        reps: str = "",
    ) -> WeightExerciseValue | None:
        account = self.accounts.ensure_account(account_id)
        group = find_group(account, group_id)
        if group is None:
            return None
        exercise = log_exercise(
            group, exercise_id, normalize_date(logged_on), weight, sets, reps
        )
        if exercise is not None:
            self.accounts.save(account)
        return exercise

    def save_sport_record(
        self,
        account_id: UUID,
        sport: str,
        day: date | datetime,
        metrics: list[SportMetricValue],
        record_id: str | None = None,
    ) -> SportActivityRecord:
        """Append a sport record, or update it when ``record_id`` is given."""
        account = self.accounts.ensure_account(account_id)
        record = SportActivityRecord(
            sport=sport, date=normalize_date(day), metrics=tuple(metrics)
        )
        if record_id is not None:
            record = replace(record, id=record_id)
        upsert_sport_record(account, record)
        self.accounts.save(account)
        return record

    def delete_sport_record(self, account_id: UUID, record_id: str) -> bool:
        account = self.accounts.ensure_account(account_id)
        records = [item for item in account.sport_records if item.id != record_id]
        if len(records) == len(account.sport_records):
            return False
        account.sport_records = records
        self.accounts.save(account)
        return True
