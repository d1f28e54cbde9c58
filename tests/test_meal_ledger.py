"""Tests for the meal intake ledger."""

from datetime import date

import pytest

from fitness_tracker.domain.days import Day
from fitness_tracker.domain.macros import TrackedMacro
from fitness_tracker.domain.meals import MealIntakeEntry, MealMacroEntry, MealType
from fitness_tracker.services.macros import (
    apply_contribution,
    find_consumption,
    reverse_contribution,
)
from fitness_tracker.services.meals import (
    MealLedgerService,
    adjust_calories,
    delete_intake,
    log_intake,
    recompute_totals,
)
from tests.conftest import make_tracked_macros

DAY = date(2024, 3, 5)


def _entry(calories: int, **macros: float) -> MealIntakeEntry:
    return MealIntakeEntry(
        meal_type=MealType.LUNCH,
        item_name="Chicken bowl",
        portion="1 bowl",
        calories=calories,
        macros=tuple(
            MealMacroEntry(
                macro_id=macro_id, name=macro_id.title(), unit="g", amount=amount
            )
            for macro_id, amount in macros.items()
        ),
    )


def _consumed(day: Day, macro_id: str) -> float:
    consumption = find_consumption(day, macro_id)
    assert consumption is not None
    return consumption.consumed


def test_log_and_delete_scenario() -> None:
    day = Day(date=DAY)
    first = _entry(500, protein=50)

    log_intake(day, first)
    assert day.calories_consumed == 500
    assert _consumed(day, "protein") == pytest.approx(50)

    log_intake(day, _entry(300, protein=20))
    assert day.calories_consumed == 800
    assert _consumed(day, "protein") == pytest.approx(70)

    removed = delete_intake(day, first.id)
    assert removed == first
    assert day.calories_consumed == 300
    assert _consumed(day, "protein") == pytest.approx(20)


def test_totals_match_entries_after_every_mutation() -> None:
    day = Day(date=DAY)
    entries = [
        _entry(420, protein=30, carbs=40),
        _entry(180, carbs=25.5),
        _entry(650, protein=45, fats=22),
        _entry(90),
    ]

    def assert_consistent() -> None:
        assert day.calories_consumed == sum(item.calories for item in day.meal_intakes)
        for macro_id in ("protein", "carbs", "fats"):
            expected = sum(
                macro.amount
                for item in day.meal_intakes
                for macro in item.macros
                if macro.macro_id == macro_id
            )
            consumption = find_consumption(day, macro_id)
            actual = consumption.consumed if consumption else 0.0
            assert actual == pytest.approx(expected)

    for entry in entries:
        log_intake(day, entry)
        assert_consistent()
    for entry in (entries[2], entries[0], entries[3], entries[1]):
        delete_intake(day, entry.id)
        assert_consistent()


def test_delete_unknown_entry_is_noop() -> None:
    day = Day(date=DAY)
    log_intake(day, _entry(200, protein=10))

    assert delete_intake(day, "missing") is None
    assert day.calories_consumed == 200


def test_manual_reduction_then_delete_floors_at_zero() -> None:
    day = Day(date=DAY)
    entry = _entry(400, protein=50)
    log_intake(day, entry)
    apply_contribution(day, "protein", -45, "g", "Protein")
    assert _consumed(day, "protein") == pytest.approx(5)

    delete_intake(day, entry.id)

    assert _consumed(day, "protein") == 0.0


def test_floored_macro_reduction_does_not_eat_later_entries() -> None:
    day = Day(date=DAY)
    entry = _entry(500, protein=50)
    log_intake(day, entry)
    reverse_contribution(day, "protein", 40)
    delete_intake(day, entry.id)

    log_intake(day, _entry(300, protein=30))

    assert _consumed(day, "protein") == pytest.approx(30)
    assert day.macro_adjustments == {}


def test_floored_calorie_reduction_does_not_eat_later_entries() -> None:
    day = Day(date=DAY)
    entry = _entry(500)
    log_intake(day, entry)
    adjust_calories(day, -400)
    assert day.calories_consumed == 100

    delete_intake(day, entry.id)
    assert day.calories_consumed == 0
    log_intake(day, _entry(300))

    assert day.calories_consumed == 300
    assert day.calorie_adjustment == 0


def test_partial_reduction_is_kept_while_entries_cover_it() -> None:
    day = Day(date=DAY)
    log_intake(day, _entry(500, protein=50))
    reverse_contribution(day, "protein", 10)

    log_intake(day, _entry(200, protein=20))

    assert _consumed(day, "protein") == pytest.approx(60)


def test_manual_adjustments_survive_recompute() -> None:
    day = Day(date=DAY)
    log_intake(day, _entry(400, protein=20))
    adjust_calories(day, 150)
    apply_contribution(day, "protein", 10, "g", "Protein")

    recompute_totals(day)
    log_intake(day, _entry(100, protein=5))

    assert day.calories_consumed == 650
    assert _consumed(day, "protein") == pytest.approx(35)


def test_adjust_calories_never_goes_negative() -> None:
    day = Day(date=DAY)
    log_intake(day, _entry(100))

    adjust_calories(day, -500)

    assert day.calories_consumed == 0


def test_service_persists_and_syncs_goal(
    account_service, day_service, remote_days, account_id
) -> None:
    account = account_service.ensure_account(account_id)
    account.calorie_goal = 2100
    account.tracked_macros = make_tracked_macros()
    account_service.save(account)
    service = MealLedgerService(day_service, account_service)

    day = service.log_intake(account_id, DAY, _entry(500, protein=50))

    assert day.calorie_goal == 2100
    assert _consumed(day, "carbs") == 0.0
    stored = remote_days.days[(account_id, DAY)]
    assert stored.calories_consumed == 500
    assert len(stored.meal_intakes) == 1


def test_service_adjust_macro_uses_tracked_name(
    account_service, day_service, account_id
) -> None:
    account = account_service.ensure_account(account_id)
    account.tracked_macros = [
        TrackedMacro(id="fibre", name="Fibre", unit="g", target=30)
    ]
    account_service.save(account)
    service = MealLedgerService(day_service, account_service)

    service.adjust_macro(account_id, DAY, "fibre", 12)
    day = service.adjust_macro(account_id, DAY, "fibre", -4)

    consumption = find_consumption(day, "fibre")
    assert consumption is not None
    assert consumption.name == "Fibre"
    assert consumption.consumed == pytest.approx(8)


def test_service_delete_unknown_entry_does_not_write(
    account_service, day_service, remote_days, account_id
) -> None:
    service = MealLedgerService(day_service, account_service)

    service.delete_intake(account_id, DAY, "missing")

    assert remote_days.saved == []
