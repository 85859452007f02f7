"""Tests for the Discord webhook notifier.

Uses httpx.MockTransport so no network traffic leaves the test.
"""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from app.config import Settings
from app.core.exceptions import NotifierError
from app.core.notifier import (
    DiscordNotifier,
    format_live_message,
    format_revocation_message,
    get_notifier,
)
from app.models.eventsub import NotificationPayload, RevocationPayload

WEBHOOK_URL = "https://discord.test/api/webhooks/1/abc"


def _live(login: str = "alice") -> NotificationPayload:
    return NotificationPayload.model_validate({"event": {"broadcaster_user_login": login}})


def _revoked() -> RevocationPayload:
    return RevocationPayload.model_validate(
        {"condition": {"broadcaster_user_id": "99"}, "status": "user_removed"}
    )


def _notifier(handler) -> DiscordNotifier:
    return DiscordNotifier(WEBHOOK_URL, transport=httpx.MockTransport(handler))


# =============================================================================
#  Message formatting
# =============================================================================


class TestFormatting:
    def test_live_message_links_channel(self) -> None:
        assert format_live_message(_live("bob")) == "bob went live\nhttps://twitch.tv/bob"

    def test_revocation_message(self) -> None:
        assert (
            format_revocation_message(_revoked())
            == "revoked subscription to user id: 99  reason: user_removed"
        )


# =============================================================================
#  Delivery
# =============================================================================


class TestDelivery:
    def test_posts_content_json(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        asyncio.run(_notifier(handler).announce_live(_live()))

        assert len(seen) == 1
        assert seen[0].method == "POST"
        assert str(seen[0].url) == WEBHOOK_URL
        assert json.loads(seen[0].content) == {
            "content": "alice went live\nhttps://twitch.tv/alice"
        }

    def test_revocation_posted(self) -> None:
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200)

        asyncio.run(_notifier(handler).announce_revocation(_revoked()))

        assert bodies == [{"content": "revoked subscription to user id: 99  reason: user_removed"}]

    @pytest.mark.parametrize("status_code", [400, 404, 429, 500, 503])
    def test_error_status_raises(self, status_code: int) -> None:
        notifier = _notifier(lambda request: httpx.Response(status_code, text="nope"))

        with pytest.raises(NotifierError) as exc_info:
            asyncio.run(notifier.send("hello"))

        assert exc_info.value.status_code == status_code

    def test_connection_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NotifierError):
            asyncio.run(_notifier(handler).send("hello"))

    def test_empty_url_raises_without_request(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(204)

        notifier = DiscordNotifier("", transport=httpx.MockTransport(handler))

        with pytest.raises(NotifierError):
            asyncio.run(notifier.send("hello"))
        assert calls == []


def test_get_notifier_uses_settings() -> None:
    settings = Settings(discord_webhook_url=WEBHOOK_URL, notifier_timeout_seconds=3.5)
    notifier = get_notifier(settings)
    assert notifier.webhook_url == WEBHOOK_URL
    assert notifier.timeout == 3.5
