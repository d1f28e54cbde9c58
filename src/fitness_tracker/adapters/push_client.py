"""Push notification client adapter."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

import httpx

_logger = logging.getLogger(__name__)


class PushClient(Protocol):
    """Interface for scheduling user notifications."""

    async def schedule_notification(
        self, notification_id: str, fire_at: datetime, title: str, body: str
    ) -> None:
        """Schedule a notification, replacing any with the same id."""

    async def cancel_notification(self, notification_id: str) -> None:
        """Cancel a pending notification."""


@dataclass
class HttpxPushClient:
    """Push client that forwards requests to a notification webhook."""

    webhook_url: str
    http_client: httpx.AsyncClient
    api_key: str | None = None

    @classmethod
    def create(cls, webhook_url: str, api_key: str | None = None) -> "HttpxPushClient":
        """Create a push client with a managed httpx session."""
        return cls(
            webhook_url=webhook_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            api_key=api_key,
        )

    async def schedule_notification(
        self, notification_id: str, fire_at: datetime, title: str, body: str
    ) -> None:
        """Schedule a notification through the webhook."""
        payload: dict[str, object] = {
            "id": notification_id,
            "fire_at": fire_at.isoformat(),
            "title": title,
            "body": body,
        }
        response = await self.http_client.post(
            f"{self.webhook_url}/notifications",
            json=payload,
            headers=self._headers(),
            timeout=10,
        )
        response.raise_for_status()

    async def cancel_notification(self, notification_id: str) -> None:
        """Cancel a notification through the webhook."""
        response = await self.http_client.delete(
            f"{self.webhook_url}/notifications/{notification_id}",
            headers=self._headers(),
            timeout=10,
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return
        response.raise_for_status()

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            return {}
        return {"Authorization": f"Bearer {self.api_key}"}


@dataclass
class LoggingPushClient:
    """Push client used when no webhook is configured; only logs requests."""

    async def schedule_notification(
        self, notification_id: str, fire_at: datetime, title: str, body: str
    ) -> None:
        """Log the notification that would have been scheduled."""
        _logger.info("Notification %s at %s: %s", notification_id, fire_at, title)

    async def cancel_notification(self, notification_id: str) -> None:
        """Log the cancelled notification id."""
        _logger.info("Notification %s cancelled", notification_id)

    async def close(self) -> None:
        """Nothing to release."""
        return None
