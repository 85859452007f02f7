"""Tests for message-type classification.

Matching is deliberately loose (substring containment), checked in a
fixed priority order.
"""

from __future__ import annotations

import pytest

from app.core.classifier import MessageKind, classify
from app.core.exceptions import UnknownKindError


class TestClassify:
    @pytest.mark.parametrize(
        ("declared", "kind"),
        [
            ("webhook_callback_verification", MessageKind.WEBHOOK_CALLBACK_VERIFICATION),
            ("notification", MessageKind.NOTIFICATION),
            ("revocation", MessageKind.REVOCATION),
        ],
    )
    def test_known_tokens(self, declared: str, kind: MessageKind) -> None:
        assert classify(declared) is kind

    @pytest.mark.parametrize(
        ("declared", "kind"),
        [
            ("notification-x", MessageKind.NOTIFICATION),
            ("x-revocation-y", MessageKind.REVOCATION),
            ("webhook_callback_verification_pending", MessageKind.WEBHOOK_CALLBACK_VERIFICATION),
        ],
    )
    def test_substring_matches_are_accepted(self, declared: str, kind: MessageKind) -> None:
        assert classify(declared) is kind

    def test_priority_order_when_several_tokens_match(self) -> None:
        assert classify("revocation notification") is MessageKind.NOTIFICATION
        assert (
            classify("notification webhook_callback_verification")
            is MessageKind.WEBHOOK_CALLBACK_VERIFICATION
        )

    @pytest.mark.parametrize("declared", ["", "something_else", "Notification", "notif", "revoke"])
    def test_unknown_values_rejected(self, declared: str) -> None:
        with pytest.raises(UnknownKindError) as exc_info:
            classify(declared)
        assert exc_info.value.declared_type == declared
