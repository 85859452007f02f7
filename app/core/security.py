"""HMAC-SHA256 verification for Twitch EventSub deliveries.

Twitch signs ``message_id + timestamp + raw_body`` with the subscription
secret and sends ``Twitch-Eventsub-Message-Signature: sha256=<hex>``.
Every delivery is verified here BEFORE its body is parsed.  Uses
hmac.compare_digest() for constant-time comparison to prevent timing
attacks.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac

from app.core.exceptions import InvalidSignatureError, MacMismatchError

SIGNATURE_PREFIX = "sha256="


def decode_signature(header_value: str) -> bytes:
    """Decode a ``sha256=<hex>`` header value into raw digest bytes.

    Raises:
        InvalidSignatureError: If the prefix is missing, the hex part has
            odd length, or any pair is not a hex byte.
    """
    if len(header_value) < len(SIGNATURE_PREFIX) or not header_value.startswith(
        SIGNATURE_PREFIX
    ):
        raise InvalidSignatureError("expected sha256= prefix")

    hex_digest = header_value[len(SIGNATURE_PREFIX):]
    if len(hex_digest) % 2 != 0:
        raise InvalidSignatureError("odd-length hex digest")

    # unhexlify rejects whitespace, unlike bytes.fromhex().
    try:
        return binascii.unhexlify(hex_digest)
    except (binascii.Error, ValueError) as exc:
        raise InvalidSignatureError("non-hex characters in digest") from exc


def build_canonical_message(message_id: str, timestamp: str, raw_body: bytes) -> bytes:
    """Rebuild the exact byte string Twitch signed.

    ``raw_body`` must be the bytes as received; a re-serialized body will
    never verify.
    """
    return message_id.encode("utf-8") + timestamp.encode("utf-8") + raw_body


def compute_hmac(message: bytes, secret: bytes) -> bytes:
    """Return the HMAC-SHA256 digest of ``message`` keyed with ``secret``."""
    return hmac.new(key=secret, msg=message, digestmod=hashlib.sha256).digest()


def verify_hmac(message: bytes, signature: bytes, secret: bytes) -> None:
    """Check ``signature`` against the HMAC of ``message``.

    Raises:
        MacMismatchError: If the digests differ, including in length.
    """
    expected = compute_hmac(message, secret)

    # CRITICAL: constant-time comparison prevents timing side-channel attacks.
    if not hmac.compare_digest(expected, signature):
        raise MacMismatchError("signature does not match")
