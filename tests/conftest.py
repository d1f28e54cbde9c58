"""Shared test fixtures."""

import copy
from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID, uuid4

import pytest

from fitness_tracker.adapters.push_client import PushClient
from fitness_tracker.config import Settings
from fitness_tracker.containers import AppContainer
from fitness_tracker.domain.days import Day
from fitness_tracker.domain.macros import TrackedMacro
from fitness_tracker.domain.models import Account
from fitness_tracker.services.accounts import AccountRepository, AccountService
from fitness_tracker.services.activity import ActivityService
from fitness_tracker.services.cache import InMemoryDayStore
from fitness_tracker.services.days import DayService, RemoteDayRepository
from fitness_tracker.services.fasting import FastingService
from fitness_tracker.services.goals import GoalService
from fitness_tracker.services.meals import MealLedgerService
from fitness_tracker.services.tracking import TrackingService
from fitness_tracker.services.weekly import WeeklyService


@dataclass
class InMemoryAccountRepository(AccountRepository):
    """In-memory account repository for tests."""

    accounts: dict[UUID, Account] = field(default_factory=dict)
    saves: int = 0

    def get_account(self, account_id: UUID) -> Account | None:
        return self.accounts.get(account_id)

    def create_account(self, account: Account) -> Account:
        self.accounts[account.id] = account
        return account

    def save_account(self, account: Account) -> None:
        self.saves += 1
        self.accounts[account.id] = account


@dataclass
class FakeRemoteDayRepository(RemoteDayRepository):
    """Remote day store that keeps independent copies of saved days."""

    days: dict[tuple[UUID, date], Day] = field(default_factory=dict)
    available: bool = True
    saved: list[str] = field(default_factory=list)
    updates: list[dict[str, object]] = field(default_factory=list)

    def fetch_day(self, account_id: UUID, day: date) -> Day | None:
        if not self.available:
            return None
        stored = self.days.get((account_id, day))
        return copy.deepcopy(stored) if stored else None

    def save_day(self, account_id: UUID, day: Day) -> bool:
        if not self.available:
            return False
        self.saved.append(day.key)
        self.days[(account_id, day.date)] = copy.deepcopy(day)
        return True

    def update_fields(
        self, account_id: UUID, day: Day, fields: dict[str, object]
    ) -> bool:
        if not self.available:
            return False
        self.updates.append(dict(fields))
        stored = self.days.setdefault((account_id, day.date), Day(date=day.date))
        for key, value in fields.items():
            setattr(stored, key, copy.deepcopy(value))
        return True


@dataclass
class FakePushClient(PushClient):
    """Push client that records scheduled and cancelled notifications."""

    scheduled: list[tuple[str, datetime]] = field(default_factory=list)
    cancelled: list[str] = field(default_factory=list)
    closed: bool = False

    async def schedule_notification(
        self, notification_id: str, fire_at: datetime, title: str, body: str
    ) -> None:
        self.scheduled.append((notification_id, fire_at))

    async def cancel_notification(self, notification_id: str) -> None:
        self.cancelled.append(notification_id)

    async def close(self) -> None:
        self.closed = True


def make_tracked_macros() -> list[TrackedMacro]:
    return [
        TrackedMacro(id="protein", name="Protein", unit="g", target=150),
        TrackedMacro(id="carbs", name="Carbs", unit="g", target=200),
        TrackedMacro(id="fats", name="Fats", unit="g", target=60),
    ]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        api_token="api-token",
    )


@pytest.fixture
def account_id() -> UUID:
    return uuid4()


@pytest.fixture
def account_repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def account_service(account_repository: InMemoryAccountRepository) -> AccountService:
    return AccountService(account_repository)


@pytest.fixture
def remote_days() -> FakeRemoteDayRepository:
    return FakeRemoteDayRepository()


@pytest.fixture
def day_service(remote_days: FakeRemoteDayRepository) -> DayService:
    return DayService(local=InMemoryDayStore(), remote=remote_days)


@pytest.fixture
def push_client() -> FakePushClient:
    return FakePushClient()


@pytest.fixture
def container(
    settings: Settings,
    account_service: AccountService,
    day_service: DayService,
    push_client: FakePushClient,
) -> AppContainer:
    async def close_resources() -> None:
        await push_client.close()

    return AppContainer(
        settings=settings,
        push_client=push_client,
        account_service=account_service,
        day_service=day_service,
        meal_ledger_service=MealLedgerService(day_service, account_service),
        goal_service=GoalService(account_service),
        weekly_service=WeeklyService(day_service, account_service),
        activity_service=ActivityService(day_service, account_service),
        fasting_service=FastingService(account_service, push_client),
        tracking_service=TrackingService(account_service, day_service),
        close_resources=close_resources,
    )
