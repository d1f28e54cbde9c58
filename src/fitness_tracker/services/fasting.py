"""Intermittent fasting window tracking."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID

from fitness_tracker.adapters.push_client import PushClient
from fitness_tracker.domain.fasting import FastingProtocol, FastingState, FastingStatus
from fitness_tracker.services.accounts import AccountService
from fitness_tracker.services.formatting import format_duration

FASTING_END_ID = "fasting.end"
FASTING_END_IMMEDIATE_ID = "fasting.end.immediate"
MAX_CUSTOM_MINUTE = 59

_PRESET_MINUTES: dict[FastingProtocol, int] = {
    FastingProtocol.TWELVE_TWELVE: 12 * 60,
    FastingProtocol.FOURTEEN_TEN: 14 * 60,
    FastingProtocol.SIXTEEN_EIGHT: 16 * 60,
}

_logger = logging.getLogger(__name__)


def custom_duration_minutes(hours: float, minutes: float) -> int:
    """Convert custom hours and minutes into a duration in minutes."""
    clamped_minutes = min(max(minutes, 0), MAX_CUSTOM_MINUTE)
    return int(max(hours, 0) * 60 + clamped_minutes)


def protocol_minutes(state: FastingState) -> int:
    """Return the fasting duration configured by the state's protocol."""
    if state.protocol == FastingProtocol.CUSTOM:
        return max(state.custom_minutes, 0)
    return _PRESET_MINUTES[state.protocol]


def protocol_label(state: FastingState) -> str:
    """Return ``"16:8"`` style text, or ``"Custom H:MM"`` for custom windows."""
    if state.protocol != FastingProtocol.CUSTOM:
        return state.protocol.value
    hours, minutes = divmod(max(state.custom_minutes, 0), 60)
    return f"Custom {hours}:{minutes:02d}"


@dataclass
class FastingTracker:
    """State machine over a persisted fasting state: idle or running."""

    state: FastingState

    @property
    def is_running(self) -> bool:
        return self.state.started_at is not None and bool(self.state.duration_minutes)

    def start(self, duration_minutes: int, now: datetime) -> None:
        """Begin a fast, replacing any fast in progress."""
        self.state.started_at = now
        self.state.duration_minutes = max(duration_minutes, 0)
        self.state.completion_signalled = False
        self.state.was_over_time = False

    def end(self) -> None:
        """Stop the current fast."""
        self.state.started_at = None
        self.state.duration_minutes = None
        self.state.completion_signalled = False
        self.state.was_over_time = False

    def change_protocol(
        self, protocol: FastingProtocol, custom_minutes: int | None = None
    ) -> None:
        """Switch protocol; a running fast keeps its start time."""
        self.state.protocol = protocol
        if custom_minutes is not None:
            self.state.custom_minutes = max(custom_minutes, 0)
        if self.is_running:
            self.state.duration_minutes = protocol_minutes(self.state)

    def ends_at(self) -> datetime | None:
        if not self.is_running:
            return None
        return self.state.started_at + timedelta(minutes=self.state.duration_minutes)

    def elapsed(self, now: datetime) -> timedelta:
        if not self.is_running:
            return timedelta(0)
        return now - self.state.started_at

    def remaining(self, now: datetime) -> timedelta | None:
        """Return time left until the target, negative once over time."""
        ends_at = self.ends_at()
        if ends_at is None:
            return None
        return ends_at - now

    def progress(self, now: datetime) -> float:
        if not self.is_running:
            return 0.0
        duration = self.state.duration_minutes * 60
        return min(max(self.elapsed(now).total_seconds() / duration, 0.0), 1.0)

    def is_over_time(self, now: datetime) -> bool:
        remaining = self.remaining(now)
        return remaining is not None and remaining <= timedelta(0)

    def poll(self, now: datetime, app_active: bool) -> bool:
        """Return True exactly once, when an active app first sees the fast end."""
        if not self.is_running:
            return False
        over_time = self.is_over_time(now)
        fire = (
            over_time
            and app_active
            and not self.state.was_over_time
            and not self.state.completion_signalled
        )
        self.state.was_over_time = over_time
        if fire:
            self.state.completion_signalled = True
        return fire

    def status(self, now: datetime) -> FastingStatus:
        remaining = self.remaining(now)
        remaining_seconds = remaining.total_seconds() if remaining is not None else 0.0
        duration = (
            self.state.duration_minutes
            if self.is_running
            else protocol_minutes(self.state)
        )
        return FastingStatus(
            is_running=self.is_running,
            protocol_label=protocol_label(self.state),
            duration_minutes=duration,
            elapsed_seconds=self.elapsed(now).total_seconds(),
            remaining_seconds=remaining_seconds,
            progress=self.progress(now),
            is_over_time=self.is_over_time(now),
            remaining_label=format_duration(max(remaining_seconds, 0.0) / 3600),
        )


@dataclass
class FastingService:
    """Service that persists fasts and schedules their end notifications."""

    accounts: AccountService
    push_client: PushClient

    async def start(
        self,
        account_id: UUID,
        protocol: FastingProtocol | None = None,
        custom_minutes: int | None = None,
        now: datetime | None = None,
    ) -> FastingStatus:
        """Start a fast with the configured or given protocol."""
        current = now or datetime.now(tz=UTC)
        account = self.accounts.ensure_account(account_id)
        tracker = FastingTracker(account.fasting)
        if protocol is not None:
            tracker.change_protocol(protocol, custom_minutes)
        tracker.start(protocol_minutes(account.fasting), current)
        self.accounts.save(account)
        await self._schedule_end(tracker)
        return tracker.status(current)

    async def end(self, account_id: UUID, now: datetime | None = None) -> FastingStatus:
        """End the running fast and cancel its notifications."""
        current = now or datetime.now(tz=UTC)
        account = self.accounts.ensure_account(account_id)
        tracker = FastingTracker(account.fasting)
        tracker.end()
        self.accounts.save(account)
        await self._cancel(FASTING_END_ID, FASTING_END_IMMEDIATE_ID)
        return tracker.status(current)

    async def change_protocol(
        self,
        account_id: UUID,
        protocol: FastingProtocol,
        custom_minutes: int | None = None,
        now: datetime | None = None,
    ) -> FastingStatus:
        """Change the protocol and reschedule the end of a running fast."""
        current = now or datetime.now(tz=UTC)
        account = self.accounts.ensure_account(account_id)
        tracker = FastingTracker(account.fasting)
        tracker.change_protocol(protocol, custom_minutes)
        self.accounts.save(account)
        if tracker.is_running:
            await self._schedule_end(tracker)
        return tracker.status(current)

    def status(self, account_id: UUID, now: datetime | None = None) -> FastingStatus:
        """Return the derived fasting status."""
        account = self.accounts.ensure_account(account_id)
        return FastingTracker(account.fasting).status(now or datetime.now(tz=UTC))

    async def check_completion(
        self, account_id: UUID, app_active: bool, now: datetime | None = None
    ) -> bool:
        """Send the completion signal if the fast has just ended."""
        current = now or datetime.now(tz=UTC)
        account = self.accounts.ensure_account(account_id)
        tracker = FastingTracker(account.fasting)
        fired = tracker.poll(current, app_active)
        self.accounts.save(account)
        if fired:
            await self._notify(FASTING_END_IMMEDIATE_ID, current)
        return fired

    async def _schedule_end(self, tracker: FastingTracker) -> None:
        ends_at = tracker.ends_at()
        if ends_at is None:
            return
        await self._notify(FASTING_END_ID, ends_at)

    async def _notify(self, notification_id: str, fire_at: datetime) -> None:
        try:
            await self.push_client.schedule_notification(
                notification_id,
                fire_at,
                "Fast complete",
                "You've reached your fasting goal. Time to eat!",
            )
        except Exception:
            _logger.exception("Failed to schedule notification %s", notification_id)

    async def _cancel(self, *notification_ids: str) -> None:
        for notification_id in notification_ids:
            try:
                await self.push_client.cancel_notification(notification_id)
            except Exception:
                _logger.exception("Failed to cancel notification %s", notification_id)
