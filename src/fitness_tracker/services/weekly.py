"""Weekly summaries anchored to the user's week start."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from uuid import UUID
from zoneinfo import ZoneInfo

from fitness_tracker.domain.days import ActivityMetric, Day
from fitness_tracker.domain.macros import MacroConsumption, TrackedMacro
from fitness_tracker.domain.weekly import MacroDaySummary, WeekDaySummary
from fitness_tracker.services.accounts import AccountService
from fitness_tracker.services.days import DayService, normalize_date

DAYS_PER_WEEK = 7

DayLookup = Callable[[date], Day | None]


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def week_start(anchor: date | datetime, week_starts_on_monday: bool) -> date:
    """Return the first day of the week containing the anchor."""
    day = normalize_date(anchor)
    if week_starts_on_monday:
        offset = day.weekday()
    else:
        offset = (day.weekday() + 1) % DAYS_PER_WEEK
    return day - timedelta(days=offset)


def build_week(  # noqa: PLR0913
    anchor: date | datetime,
    week_starts_on_monday: bool,
    tracked_macros: Iterable[TrackedMacro],
    per_day_lookup: DayLookup,
    *,
    selected_day: Day | None = None,
    today: date | datetime | None = None,
) -> list[WeekDaySummary]:
    """Return seven day buckets for the week containing the anchor.

    ``selected_day`` is the in-memory copy of the currently selected date and
    is used instead of the lookup for that date.
    """
    macros = list(tracked_macros)
    current_day = normalize_date(today or datetime.now(tz=UTC))
    start = week_start(anchor, week_starts_on_monday)
    week: list[WeekDaySummary] = []
    for offset in range(DAYS_PER_WEEK):
        day = start + timedelta(days=offset)
        if day > current_day:
            week.append(_future_bucket(day, macros))
            continue
        if selected_day is not None and selected_day.date == day:
            record = selected_day
        else:
            record = per_day_lookup(day)
        week.append(_bucket(day, macros, record))
    return week


def resolve_consumption(
    tracked: TrackedMacro, consumptions: Iterable[MacroConsumption]
) -> float:
    """Find a tracked macro's consumption by id, then by name, else zero."""
    records = list(consumptions)
    for consumption in records:
        if consumption.tracked_macro_id == tracked.id:
            return consumption.consumed
    name = tracked.name.strip().lower()
    for consumption in records:
        if consumption.name.strip().lower() == name:
            return consumption.consumed
    return 0.0


@dataclass
class WeeklyService:
    """Service that builds a week of summaries for an account."""

    days: DayService
    accounts: AccountService
    clock: Callable[[], datetime] = field(default=_utc_now)

    def get_week(
        self,
        account_id: UUID,
        anchor: date | datetime,
        selected_day: Day | None = None,
        today: date | datetime | None = None,
    ) -> list[WeekDaySummary]:
        """Return the week containing the anchor date.

        Without an explicit ``today`` the current date is taken in the
        account's timezone.
        """
        account = self.accounts.ensure_account(account_id)
        if today is None:
            today = self.clock().astimezone(ZoneInfo(account.timezone)).date()

        def lookup(day: date) -> Day | None:
            return self.days.get_day(account_id, day, account.tracked_macros)

        return build_week(
            anchor,
            account.week_starts_on_monday,
            account.tracked_macros,
            lookup,
            selected_day=selected_day,
            today=today,
        )


def _bucket(
    day: date, macros: list[TrackedMacro], record: Day | None
) -> WeekDaySummary:
    consumptions = record.macro_consumptions if record else []
    activity: dict[ActivityMetric, float] = {metric: 0.0 for metric in ActivityMetric}
    if record:
        for metric, tally in record.activity.items():
            activity[metric] = tally.total
    return WeekDaySummary(
        date=day,
        is_future=False,
        calories_consumed=record.calories_consumed if record else 0,
        calorie_goal=record.calorie_goal if record else 0,
        macros=[
            MacroDaySummary(
                tracked_macro_id=macro.id,
                name=macro.name,
                unit=macro.unit,
                target=macro.target,
                consumed=resolve_consumption(macro, consumptions),
            )
            for macro in macros
        ],
        activity=activity,
    )


def _future_bucket(day: date, macros: list[TrackedMacro]) -> WeekDaySummary:
    return WeekDaySummary(
        date=day,
        is_future=True,
        calories_consumed=None,
        calorie_goal=None,
        macros=[
            MacroDaySummary(
                tracked_macro_id=macro.id,
                name=macro.name,
                unit=macro.unit,
                target=macro.target,
                consumed=None,
            )
            for macro in macros
        ],
        activity=None,
    )
