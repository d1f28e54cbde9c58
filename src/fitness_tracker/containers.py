"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from fitness_tracker.adapters.push_client import (
    HttpxPushClient,
    LoggingPushClient,
    PushClient,
)
from fitness_tracker.adapters.supabase_account_repository import (
    SupabaseAccountRepository,
)
from fitness_tracker.adapters.supabase_day_repository import SupabaseDayRepository
from fitness_tracker.config import Settings
from fitness_tracker.services.accounts import AccountService
from fitness_tracker.services.activity import ActivityService
from fitness_tracker.services.cache import InMemoryDayStore
from fitness_tracker.services.days import DayService
from fitness_tracker.services.fasting import FastingService
from fitness_tracker.services.goals import GoalService
from fitness_tracker.services.meals import MealLedgerService
from fitness_tracker.services.tracking import TrackingService
from fitness_tracker.services.weekly import WeeklyService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    push_client: PushClient
    account_service: AccountService
    day_service: DayService
    meal_ledger_service: MealLedgerService
    goal_service: GoalService
    weekly_service: WeeklyService
    activity_service: ActivityService
    fasting_service: FastingService
    tracking_service: TrackingService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    account_service = AccountService(
        SupabaseAccountRepository(supabase_client),
        default_timezone=resolved_settings.default_timezone,
    )
    day_service = DayService(
        local=InMemoryDayStore(),
        remote=SupabaseDayRepository(supabase_client),
    )
    if resolved_settings.push_webhook_url:
        push_client: HttpxPushClient | LoggingPushClient = HttpxPushClient.create(
            resolved_settings.push_webhook_url, resolved_settings.push_api_key
        )
    else:
        push_client = LoggingPushClient()

    async def close_resources() -> None:
        await push_client.close()

    return AppContainer(
        settings=resolved_settings,
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
