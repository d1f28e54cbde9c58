"""Tests for account lifecycle."""

import pytest

from fitness_tracker.domain.days import DEFAULT_ACTIVITY_GOALS
from fitness_tracker.domain.macros import TrackedMacro
from fitness_tracker.services.accounts import AccountService
from tests.conftest import make_tracked_macros


def test_ensure_account_creates_once(account_service, account_repository, account_id) -> None:
    first = account_service.ensure_account(account_id)
    second = account_service.ensure_account(account_id)

    assert first is second
    assert list(account_repository.accounts) == [account_id]
    assert first.week_starts_on_monday
    assert first.activity_goals == DEFAULT_ACTIVITY_GOALS
    assert first.activity_goals is not DEFAULT_ACTIVITY_GOALS


def test_week_start_and_timezone(account_service, account_id) -> None:
    account = account_service.set_week_start(account_id, False)
    assert not account.week_starts_on_monday

    account = account_service.set_timezone(account_id, "Europe/Berlin")
    assert account.timezone == "Europe/Berlin"


def test_new_accounts_use_default_timezone(account_repository, account_id) -> None:
    service = AccountService(account_repository, default_timezone="Asia/Tokyo")

    assert service.ensure_account(account_id).timezone == "Asia/Tokyo"


def test_upsert_and_remove_tracked_macro(account_service, account_id) -> None:
    for macro in make_tracked_macros():
        account_service.upsert_tracked_macro(account_id, macro)

    account = account_service.upsert_tracked_macro(
        account_id, TrackedMacro(id="protein", name="Protein", unit="g", target=170)
    )
    assert [macro.target for macro in account.tracked_macros] == [170, 200, 60]

    account = account_service.remove_tracked_macro(account_id, "carbs")
    assert [macro.id for macro in account.tracked_macros] == ["protein", "fats"]


def test_set_timezone_rejects_unknown_zone(account_service, account_id) -> None:
    with pytest.raises(ValueError, match="Unknown timezone"):
        account_service.set_timezone(account_id, "Mars/Olympus")

    assert account_service.ensure_account(account_id).timezone == "UTC"
