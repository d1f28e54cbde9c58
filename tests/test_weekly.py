"""Tests for weekly aggregation."""

from datetime import UTC, date, datetime, timedelta

from fitness_tracker.domain.days import ActivityMetric, ActivityTally, Day
from fitness_tracker.domain.macros import MacroConsumption
from fitness_tracker.domain.meals import MealIntakeEntry, MealMacroEntry, MealType
from fitness_tracker.services.meals import MealLedgerService
from fitness_tracker.services.weekly import (
    WeeklyService,
    build_week,
    resolve_consumption,
    week_start,
)
from tests.conftest import make_tracked_macros

FRIDAY = date(2024, 3, 8)


def test_week_start_monday_and_sunday() -> None:
    assert week_start(FRIDAY, week_starts_on_monday=True) == date(2024, 3, 4)
    assert week_start(FRIDAY, week_starts_on_monday=False) == date(2024, 3, 3)
    sunday = date(2024, 3, 10)
    assert week_start(sunday, week_starts_on_monday=True) == date(2024, 3, 4)
    assert week_start(sunday, week_starts_on_monday=False) == sunday


def test_build_week_always_has_seven_days() -> None:
    week = build_week(
        FRIDAY, True, make_tracked_macros(), lambda _day: None, today=FRIDAY
    )

    assert len(week) == 7
    assert [summary.date for summary in week] == [
        date(2024, 3, 4) + timedelta(days=offset) for offset in range(7)
    ]


def test_future_days_are_marked() -> None:
    week = build_week(
        FRIDAY, True, make_tracked_macros(), lambda _day: None, today=FRIDAY
    )

    assert [summary.is_future for summary in week] == [
        False,
        False,
        False,
        False,
        False,
        True,
        True,
    ]
    future = week[5]
    assert future.calories_consumed is None
    assert future.activity is None
    assert all(macro.consumed is None for macro in future.macros)


def test_untracked_day_reports_zero_for_each_macro() -> None:
    logged = Day(
        date=date(2024, 3, 5),
        calories_consumed=1800,
        calorie_goal=2000,
        macro_consumptions=[MacroConsumption("protein", "Protein", "g", 120)],
        activity={ActivityMetric.STEPS: ActivityTally(total=8000, sensed=8000)},
    )
    lookup = {logged.date: logged}

    week = build_week(FRIDAY, True, make_tracked_macros(), lookup.get, today=FRIDAY)

    tuesday = week[1]
    assert tuesday.calories_consumed == 1800
    assert {macro.name: macro.consumed for macro in tuesday.macros} == {
        "Protein": 120,
        "Carbs": 0.0,
        "Fats": 0.0,
    }
    assert tuesday.activity[ActivityMetric.STEPS] == 8000
    assert tuesday.activity[ActivityMetric.DISTANCE] == 0.0
    monday = week[0]
    assert monday.calories_consumed == 0
    assert [macro.consumed for macro in monday.macros] == [0.0, 0.0, 0.0]


def test_selected_day_overrides_lookup() -> None:
    stale = Day(date=FRIDAY, calories_consumed=100)
    selected = Day(date=FRIDAY, calories_consumed=900)

    week = build_week(
        FRIDAY,
        True,
        [],
        {FRIDAY: stale}.get,
        selected_day=selected,
        today=FRIDAY,
    )

    assert week[4].calories_consumed == 900


def test_resolve_consumption_falls_back_to_name() -> None:
    tracked = make_tracked_macros()[0]
    records = [MacroConsumption("legacy-id", " protein ", "g", 42)]

    assert resolve_consumption(tracked, records) == 42
    assert resolve_consumption(tracked, []) == 0.0


def test_weekly_service_uses_account_week_start(
    account_service, day_service, account_id
) -> None:
    account = account_service.set_week_start(account_id, False)
    account.tracked_macros = make_tracked_macros()
    account_service.save(account)
    ledger = MealLedgerService(day_service, account_service)
    ledger.log_intake(
        account_id,
        date(2024, 3, 3),
        MealIntakeEntry(
            meal_type=MealType.DINNER,
            item_name="Salmon",
            portion="200 g",
            calories=410,
            macros=(MealMacroEntry("protein", "Protein", "g", 40),),
        ),
    )

    week = WeeklyService(day_service, account_service).get_week(
        account_id, FRIDAY, today=FRIDAY
    )

    assert week[0].date == date(2024, 3, 3)
    assert week[0].calories_consumed == 410
    assert week[0].macros[0].consumed == 40
    assert week[6].is_future


def test_weekly_service_takes_today_in_account_timezone(
    account_service, day_service, account_id
) -> None:
    # Sunday evening in UTC is already Monday morning in Kiritimati (UTC+14).
    def clock() -> datetime:
        return datetime(2024, 3, 10, 20, 0, tzinfo=UTC)

    service = WeeklyService(day_service, account_service, clock=clock)
    monday = date(2024, 3, 11)

    utc_week = service.get_week(account_id, monday)
    account_service.set_timezone(account_id, "Pacific/Kiritimati")
    local_week = service.get_week(account_id, monday)

    assert utc_week[0].is_future
    assert not local_week[0].is_future
    assert local_week[1].is_future
