"""Twitch EventSub webhook receiver.

POST /callback — receives every EventSub delivery for our subscriptions.
Strict order:
  1. Read raw body (before JSON parsing)
  2. Verify HMAC-SHA256 signature (FIRST operation, no exceptions)
  3. Classify message type and parse payload
  4. Answer the challenge, or relay a summary to Discord

Rejections map to 400 (bad/missing headers, unknown type, bad payload)
or 401 (signature).  A Discord delivery failure maps to 500.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse, Response

from app.config import Settings, get_settings
from app.core.classifier import MessageKind
from app.core.dispatch import Accepted, InboundRequest, Rejected, RejectReason, dispatch
from app.core.exceptions import NotifierError
from app.core.notifier import DiscordNotifier, get_notifier

logger = logging.getLogger(__name__)

router = APIRouter(tags=["eventsub"])

# Fixed, non-sensitive response details.
_REJECT_DETAILS: dict[RejectReason, str] = {
    RejectReason.MISSING_HEADER: "Missing EventSub header",
    RejectReason.UNAUTHORIZED: "Invalid EventSub signature",
    RejectReason.UNKNOWN_KIND: "Unknown EventSub message type",
    RejectReason.BAD_REQUEST: "Malformed EventSub payload",
}


@router.post("/callback", status_code=200, response_model=None)
async def receive_eventsub_callback(
    request: Request,
    config: Settings = Depends(get_settings),
    notifier: DiscordNotifier = Depends(get_notifier),
) -> Response | dict[str, str]:
    """Receive, verify, and act on one EventSub delivery.

    Returns:
        The raw challenge as text/plain for callback verification,
        otherwise ``{"status": "accepted"}``.

    Raises:
        HTTPException(400/401): if the delivery is rejected.
        HTTPException(500): if no secret is configured or Discord delivery fails.
    """
    secret = config.event_secret_bytes
    if not secret:
        logger.error("TWITCH_EVENT_SECRET is not configured — refusing delivery")
        raise HTTPException(status_code=500, detail="Webhook secret not configured")

    # Raw bytes are what Twitch signed; read them before anything else.
    body = await request.body()
    outcome = dispatch(InboundRequest(headers=request.headers, body=body), secret)

    if isinstance(outcome, Rejected):
        detail = _REJECT_DETAILS[outcome.reason]
        if outcome.header:
            detail = f"{detail}: {outcome.header}"
        raise HTTPException(status_code=outcome.reason.status_code, detail=detail)

    return await _handle_accepted(outcome, notifier)


async def _handle_accepted(
    outcome: Accepted,
    notifier: DiscordNotifier,
) -> Response | dict[str, str]:
    if outcome.kind is MessageKind.WEBHOOK_CALLBACK_VERIFICATION:
        # Twitch requires the challenge echoed verbatim as text/plain.
        return PlainTextResponse(outcome.payload.challenge, status_code=200)

    try:
        if outcome.kind is MessageKind.NOTIFICATION:
            await notifier.announce_live(outcome.payload)
        elif outcome.kind is MessageKind.REVOCATION:
            await notifier.announce_revocation(outcome.payload)
    except NotifierError as exc:
        logger.error(
            "Could not relay EventSub message to Discord",
            extra={"kind": outcome.kind.value, "status_code": exc.status_code},
        )
        raise HTTPException(status_code=500, detail="Notification delivery failed") from exc

    return {"status": "accepted"}
