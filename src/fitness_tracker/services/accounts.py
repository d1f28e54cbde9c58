"""Account lifecycle and profile settings."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from fitness_tracker.domain.macros import TrackedMacro
from fitness_tracker.domain.models import Account

_logger = logging.getLogger(__name__)


def is_valid_timezone(value: str) -> bool:
    """Return True when the value names a known IANA timezone."""
    try:
        ZoneInfo(value)
    except Exception:
        return False
    return True


class AccountRepository(Protocol):
    """Persistence interface for accounts."""

    def get_account(self, account_id: UUID) -> Account | None:
        """Return the account for an id, if present."""

    def create_account(self, account: Account) -> Account:
        """Create and return a new account."""

    def save_account(self, account: Account) -> None:
        """Persist all fields of an account."""


@dataclass
class AccountService:
    """Application service for account lifecycle actions."""

    repository: AccountRepository
    default_timezone: str = "UTC"

    def ensure_account(self, account_id: UUID) -> Account:
        """Ensure an account exists for the id and return it."""
        existing = self.repository.get_account(account_id)
        if existing:
            return existing
        _logger.info("Creating account %s", account_id)
        return self.repository.create_account(
            Account(id=account_id, timezone=self.default_timezone)
        )

    def save(self, account: Account) -> None:
        """Persist an account."""
        self.repository.save_account(account)

    def set_week_start(self, account_id: UUID, week_starts_on_monday: bool) -> Account:
        """Update which weekday starts the user's week."""
        account = self.ensure_account(account_id)
        account.week_starts_on_monday = week_starts_on_monday
        self.save(account)
        return account

    def set_timezone(self, account_id: UUID, timezone: str) -> Account:
        """Update the user's timezone. Unknown zone names raise ValueError."""
        if not is_valid_timezone(timezone):
            raise ValueError(f"Unknown timezone: {timezone}")
        account = self.ensure_account(account_id)
        account.timezone = timezone
        self.save(account)
        return account

    def upsert_tracked_macro(self, account_id: UUID, macro: TrackedMacro) -> Account:
        """Add a tracked macro or update the one with the same id."""
        account = self.ensure_account(account_id)
        for index, existing in enumerate(account.tracked_macros):
            if existing.id == macro.id:
                account.tracked_macros[index] = replace(macro)
                break
        else:
            account.tracked_macros.append(macro)
        self.save(account)
        return account

    def remove_tracked_macro(self, account_id: UUID, macro_id: str) -> Account:
        """Stop tracking a macro. Unknown ids are ignored."""
        account = self.ensure_account(account_id)
        account.tracked_macros = [
            macro for macro in account.tracked_macros if macro.id != macro_id
        ]
        self.save(account)
        return account
