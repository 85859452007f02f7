"""Discord webhook notifier.

Posts a one-line summary for each accepted EventSub message to a Discord
channel webhook.  Runs after verification has finished; a delivery
failure here never changes how the inbound message was judged.

All methods use httpx.AsyncClient.
"""

from __future__ import annotations

import logging

import httpx
from fastapi import Depends

from app.config import Settings, get_settings
from app.core.exceptions import NotifierError
from app.models.eventsub import NotificationPayload, RevocationPayload

logger = logging.getLogger(__name__)

TWITCH_BASE = "https://twitch.tv"


def format_live_message(payload: NotificationPayload) -> str:
    login = payload.broadcaster_login
    return f"{login} went live\n{TWITCH_BASE}/{login}"


def format_revocation_message(payload: RevocationPayload) -> str:
    return (
        f"revoked subscription to user id: {payload.broadcaster_id}"
        f"  reason: {payload.status}"
    )


class DiscordNotifier:
    """Async client for a single Discord channel webhook."""

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.webhook_url = webhook_url
        self.timeout = timeout
        self._transport = transport

    async def send(self, content: str) -> None:
        """POST ``{"content": content}`` to the webhook.

        Raises:
            NotifierError: If no webhook is configured, the request fails,
                or Discord answers with a 4xx/5xx status.
        """
        if not self.webhook_url:
            raise NotifierError("Discord webhook URL is empty — check DISCORD_WEBHOOK_URL")

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(self.webhook_url, json={"content": content})
        except httpx.HTTPError as exc:
            logger.error(
                "Discord webhook unreachable",
                extra={"error": type(exc).__name__},
            )
            raise NotifierError(f"Discord webhook unreachable: {type(exc).__name__}") from exc

        if response.status_code >= 400:
            logger.error(
                "Discord webhook rejected message",
                extra={
                    "status_code": response.status_code,
                    "response": response.text[:200],
                },
            )
            raise NotifierError(
                f"Discord webhook returned {response.status_code}",
                status_code=response.status_code,
            )

    async def announce_live(self, payload: NotificationPayload) -> None:
        await self.send(format_live_message(payload))

    async def announce_revocation(self, payload: RevocationPayload) -> None:
        await self.send(format_revocation_message(payload))


def get_notifier(config: Settings = Depends(get_settings)) -> DiscordNotifier:
    """FastAPI dependency returning a notifier bound to the configured webhook."""
    return DiscordNotifier(
        config.discord_webhook_url,
        timeout=config.notifier_timeout_seconds,
    )
