"""Message-type classification for EventSub deliveries.

Twitch declares the delivery kind in ``Twitch-Eventsub-Message-Type``.
Matching is by substring, checked in a fixed priority order, so a value
such as ``notification-x`` still classifies as a notification.
"""

from __future__ import annotations

import enum

from app.core.exceptions import UnknownKindError


class MessageKind(enum.Enum):
    """The closed set of delivery kinds the bridge handles."""

    WEBHOOK_CALLBACK_VERIFICATION = "webhook_callback_verification"
    NOTIFICATION = "notification"
    REVOCATION = "revocation"


# Checked in order; the first token contained in the header wins.
_PRIORITY: tuple[MessageKind, ...] = (
    MessageKind.WEBHOOK_CALLBACK_VERIFICATION,
    MessageKind.NOTIFICATION,
    MessageKind.REVOCATION,
)


def classify(declared_type: str) -> MessageKind:
    """Map a message-type header value to a :class:`MessageKind`.

    Raises:
        UnknownKindError: If no known token is contained in the value.
    """
    for kind in _PRIORITY:
        if kind.value in declared_type:
            return kind
    raise UnknownKindError(declared_type)
