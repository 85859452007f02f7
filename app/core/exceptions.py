"""Domain-specific exceptions for the EventSub bridge.

Every verification or parsing failure raises one of these so the
dispatcher can turn it into a precise rejection outcome. Never raise
bare Exception or use generic error types.
"""

from __future__ import annotations


# =============================================================================
# Inbound EventSub messages
# =============================================================================


class EventSubError(Exception):
    """Base exception for all inbound message failures."""


class MissingHeaderError(EventSubError):
    """A required ``Twitch-Eventsub-*`` header was not sent."""

    def __init__(self, header: str) -> None:
        self.header = header
        super().__init__(f"header {header} missing")


class InvalidSignatureError(EventSubError):
    """Signature header is not ``sha256=`` followed by even-length hex."""


class MacMismatchError(EventSubError):
    """HMAC-SHA256 over the canonical message does not match the signature."""


class UnknownKindError(EventSubError):
    """Message type header matches none of the known message kinds."""

    def __init__(self, declared_type: str) -> None:
        self.declared_type = declared_type
        super().__init__(f"unknown message type: {declared_type!r}")


class MalformedPayloadError(EventSubError):
    """Body is not valid JSON or lacks a field required for its kind."""


# =============================================================================
# Outbound notifications
# =============================================================================


class NotifierError(Exception):
    """Delivery to the Discord webhook failed."""

    def __init__(self, message: str, status_code: int = 0) -> None:
        self.status_code = status_code
        super().__init__(message)
