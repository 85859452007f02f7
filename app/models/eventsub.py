"""Payload shapes for the EventSub message kinds the bridge handles.

Only the fields the bridge reads are declared; Twitch sends many more,
which are ignored.  See
https://dev.twitch.tv/docs/eventsub/handling-webhook-events/
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class _EventSubModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class ChallengePayload(_EventSubModel):
    """Body of a ``webhook_callback_verification`` message."""

    challenge: str


class StreamEvent(_EventSubModel):
    broadcaster_user_login: str


class NotificationPayload(_EventSubModel):
    """Body of a ``stream.online`` notification."""

    event: StreamEvent

    @property
    def broadcaster_login(self) -> str:
        return self.event.broadcaster_user_login


class SubscriptionCondition(_EventSubModel):
    broadcaster_user_id: str


class RevocationPayload(_EventSubModel):
    """Body of a ``revocation`` message.

    ``status`` is the revocation reason, e.g. ``authorization_revoked`` or
    ``user_removed``.
    """

    condition: SubscriptionCondition
    status: str

    @property
    def broadcaster_id(self) -> str:
        return self.condition.broadcaster_user_id


EventSubPayload = ChallengePayload | NotificationPayload | RevocationPayload
