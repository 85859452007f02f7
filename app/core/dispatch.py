"""EventSub delivery dispatcher.

Turns one inbound request into exactly one terminal outcome:

    Start -> Verifying -> Classifying -> Accepted(kind, payload)
                                       | Rejected(reason)

Order is strict:
  1. Required headers present
  2. HMAC-SHA256 verified against the raw body
  3. Message type classified
  4. Body parsed into the payload model for that kind

The body is never parsed before step 2 succeeds.  Nothing here performs
I/O or touches shared state; acting on an ``Accepted`` outcome is the
caller's job.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from pydantic import ValidationError

from app.core.classifier import MessageKind, classify
from app.core.exceptions import (
    InvalidSignatureError,
    MacMismatchError,
    MalformedPayloadError,
    MissingHeaderError,
    UnknownKindError,
)
from app.core.security import build_canonical_message, decode_signature, verify_hmac
from app.models.eventsub import (
    ChallengePayload,
    EventSubPayload,
    NotificationPayload,
    RevocationPayload,
)

logger = logging.getLogger(__name__)

MESSAGE_ID_HEADER = "Twitch-Eventsub-Message-Id"
MESSAGE_TIMESTAMP_HEADER = "Twitch-Eventsub-Message-Timestamp"
MESSAGE_SIGNATURE_HEADER = "Twitch-Eventsub-Message-Signature"
MESSAGE_TYPE_HEADER = "Twitch-Eventsub-Message-Type"

_REQUIRED_HEADERS: tuple[str, ...] = (
    MESSAGE_ID_HEADER,
    MESSAGE_TIMESTAMP_HEADER,
    MESSAGE_SIGNATURE_HEADER,
    MESSAGE_TYPE_HEADER,
)

_PAYLOAD_MODELS: dict[MessageKind, type[EventSubPayload]] = {
    MessageKind.WEBHOOK_CALLBACK_VERIFICATION: ChallengePayload,
    MessageKind.NOTIFICATION: NotificationPayload,
    MessageKind.REVOCATION: RevocationPayload,
}


# =============================================================================
#  Request / outcome types
# =============================================================================


@dataclass(frozen=True)
class InboundRequest:
    """Headers and raw body of one delivery.

    Header names are matched case-insensitively.  ``body`` must be the
    bytes exactly as received.
    """

    headers: Mapping[str, str]
    body: bytes

    def __post_init__(self) -> None:
        lowered = {name.lower(): value for name, value in self.headers.items()}
        object.__setattr__(self, "headers", MappingProxyType(lowered))

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())

    def require_header(self, name: str) -> str:
        value = self.header(name)
        if value is None:
            raise MissingHeaderError(name)
        return value


class RejectReason(enum.Enum):
    MISSING_HEADER = "missing_header"
    UNAUTHORIZED = "unauthorized"
    UNKNOWN_KIND = "unknown_kind"
    BAD_REQUEST = "bad_request"

    @property
    def status_code(self) -> int:
        if self is RejectReason.UNAUTHORIZED:
            return 401
        return 400


@dataclass(frozen=True)
class Accepted:
    kind: MessageKind
    payload: EventSubPayload


@dataclass(frozen=True)
class Rejected:
    reason: RejectReason
    header: str | None = None
    error: Exception | None = field(default=None, compare=False, repr=False)


Outcome = Accepted | Rejected


# =============================================================================
#  Stages
# =============================================================================


def parse_payload(kind: MessageKind, body: bytes) -> EventSubPayload:
    """Parse a verified body into the payload model for ``kind``.

    Raises:
        MalformedPayloadError: On invalid JSON or a missing/mistyped field.
    """
    model = _PAYLOAD_MODELS[kind]
    try:
        return model.model_validate_json(body)
    except ValidationError as exc:
        raise MalformedPayloadError(
            f"{kind.value} payload failed validation ({exc.error_count()} errors)"
        ) from exc


def dispatch(request: InboundRequest, secret: bytes) -> Outcome:
    """Verify, classify, and parse one delivery.

    Never raises for an expected failure; every failure becomes a
    :class:`Rejected` outcome and is logged.
    """
    try:
        message_id, timestamp, signature_header, declared_type = [
            request.require_header(name) for name in _REQUIRED_HEADERS
        ]
    except MissingHeaderError as exc:
        logger.warning("EventSub rejected: missing header", extra={"header": exc.header})
        return Rejected(RejectReason.MISSING_HEADER, header=exc.header, error=exc)

    # Verifying: FIRST operation on the body, before any parsing.
    try:
        signature = decode_signature(signature_header)
        message = build_canonical_message(message_id, timestamp, request.body)
        verify_hmac(message, signature, secret)
    except (InvalidSignatureError, MacMismatchError) as exc:
        logger.warning(
            "EventSub rejected: signature verification failed",
            extra={"message_id": message_id, "error": type(exc).__name__},
        )
        return Rejected(RejectReason.UNAUTHORIZED, error=exc)

    # Classifying
    try:
        kind = classify(declared_type)
    except UnknownKindError as exc:
        logger.warning(
            "EventSub rejected: unknown message type",
            extra={"message_id": message_id, "message_type": declared_type},
        )
        return Rejected(RejectReason.UNKNOWN_KIND, error=exc)

    try:
        payload = parse_payload(kind, request.body)
    except MalformedPayloadError as exc:
        logger.warning(
            "EventSub rejected: malformed payload",
            extra={"message_id": message_id, "kind": kind.value},
        )
        return Rejected(RejectReason.BAD_REQUEST, error=exc)

    logger.info(
        "EventSub message accepted",
        extra={"message_id": message_id, "kind": kind.value},
    )
    return Accepted(kind, payload)
