"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import uuid4

import pytest

from fitness_tracker.adapters.supabase_account_repository import (
    SupabaseAccountRepository,
    decode_account,
    encode_account,
)
from fitness_tracker.adapters.supabase_day_repository import (
    SupabaseDayRepository,
    decode_day,
    encode_day,
)
from fitness_tracker.domain.days import ActivityMetric, ActivityTally, Day
from fitness_tracker.domain.fasting import FastingProtocol
from fitness_tracker.domain.goals import Gender
from fitness_tracker.domain.meals import MealIntakeEntry, MealMacroEntry, MealType
from fitness_tracker.domain.models import Account
from fitness_tracker.domain.tracking import (
    SportActivityRecord,
    SportMetricValue,
    TrackableItem,
    TrackableKind,
    WeightExerciseValue,
    WeightGroupDefinition,
)
from fitness_tracker.services.meals import log_intake
from tests.conftest import make_tracked_macros


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "update": [], "upsert": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_options: dict[str, object] = field(default_factory=dict)
    error: Exception | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def upsert(self, payload, **options) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "upsert"
        self.last_payload = payload
        self.last_options = options
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        if self.error is not None:
            raise self.error
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _logged_day() -> Day:
    day = Day(
        date=date(2024, 3, 5),
        calorie_goal=2000,
        taken_supplements=["preset:zinc"],
        activity={ActivityMetric.STEPS: ActivityTally(total=6000, sensed=5000)},
    )
    log_intake(
        day,
        MealIntakeEntry(
            meal_type=MealType.BREAKFAST,
            item_name="Greek yogurt",
            portion="200 g",
            calories=190,
            macros=(MealMacroEntry("protein", "Protein", "g", 20),),
        ),
    )
    return day


def test_day_codec_preserves_fields() -> None:
    day = _logged_day()

    decoded = decode_day(encode_day(day))

    assert decoded == day


def test_day_repository_save_and_fetch() -> None:
    client = FakeSupabaseClient()
    days_table = client.table("days")
    account_id = uuid4()
    day = _logged_day()
    days_table.queue("select", [encode_day(day)])
    repository = SupabaseDayRepository(client)

    assert repository.save_day(account_id, day)
    assert days_table.last_options == {"on_conflict": "account_id,day_key"}
    assert days_table.last_payload["day_key"] == "05-03-2024"
    assert days_table.last_payload["account_id"] == str(account_id)

    fetched = repository.fetch_day(account_id, day.date)
    assert fetched is not None
    assert fetched.calories_consumed == 190
    assert ("day_key", "05-03-2024") in days_table.last_filters


def test_day_repository_missing_row_returns_none() -> None:
    repository = SupabaseDayRepository(FakeSupabaseClient())

    assert repository.fetch_day(uuid4(), date(2024, 3, 5)) is None


def test_day_repository_reports_failures() -> None:
    client = FakeSupabaseClient()
    client.table("days").error = RuntimeError("network down")
    repository = SupabaseDayRepository(client)
    day = _logged_day()

    assert repository.fetch_day(uuid4(), day.date) is None
    assert not repository.save_day(uuid4(), day)
    assert not repository.update_fields(uuid4(), day, {"taken_supplements": []})


def test_day_repository_update_creates_missing_row() -> None:
    client = FakeSupabaseClient()
    days_table = client.table("days")
    repository = SupabaseDayRepository(client)
    day = _logged_day()

    assert repository.update_fields(uuid4(), day, {"taken_supplements": ["x"]})
    assert days_table._action == "upsert"

    days_table.queue("update", [{"id": day.id}])
    assert repository.update_fields(uuid4(), day, {"taken_supplements": ["x"]})
    assert days_table._action == "update"
    assert days_table.last_payload["taken_supplements"] == ["x"]


def test_account_codec_preserves_fields() -> None:
    account = Account(
        id=uuid4(),
        name="Sam",
        gender=Gender.FEMALE,
        birth_date=date(1990, 6, 1),
        height_cm=168,
        weight_kg=61.5,
        week_starts_on_monday=False,
        calorie_goal=1900,
        tracked_macros=make_tracked_macros(),
        selected_presets={TrackableKind.SUPPLEMENT: ["preset:zinc"]},
        custom_items={
            TrackableKind.CRAVING: [TrackableItem(id="c1", name="Chips", calories=150)]
        },
        weight_groups=[
            WeightGroupDefinition(
                name="Back",
                exercises=[
                    WeightExerciseValue(
                        name="Row", weight="60", logged_on=date(2024, 3, 1)
                    )
                ],
            )
        ],
        sport_records=[
            SportActivityRecord(
                sport="cycling",
                date=date(2024, 3, 2),
                metrics=(SportMetricValue("distance", "Distance", "km", 30.5),),
            )
        ],
    )
    account.fasting.protocol = FastingProtocol.CUSTOM
    account.fasting.started_at = datetime(2024, 3, 5, 20, tzinfo=UTC)
    account.fasting.duration_minutes = 1110
    account.activity_goals[ActivityMetric.STEPS] = 12000

    decoded = decode_account(encode_account(account))

    assert decoded == account


def test_account_repository_roundtrip() -> None:
    client = FakeSupabaseClient()
    accounts_table = client.table("accounts")
    account = Account(id=uuid4(), timezone="Europe/Berlin")
    accounts_table.queue("insert", [encode_account(account)])
    accounts_table.queue("select", [encode_account(account)])
    repository = SupabaseAccountRepository(client)

    created = repository.create_account(account)
    fetched = repository.get_account(account.id)
    repository.save_account(account)

    assert created.id == account.id
    assert fetched is not None
    assert fetched.timezone == "Europe/Berlin"
    assert accounts_table.last_filters[-1] == ("id", str(account.id))
    assert "updated_at" in accounts_table.last_payload


def test_account_repository_create_requires_row() -> None:
    repository = SupabaseAccountRepository(FakeSupabaseClient())

    with pytest.raises(RuntimeError, match="Failed to create account"):
        repository.create_account(Account(id=uuid4()))
