"""
Messenger Webhook Receiver

FastAPI router for the Messenger Platform webhook.
Verifies the subscription handshake, normalizes events and hands them
to the relay as a background task. Always acknowledges well-formed page
events with 200 so the platform does not redeliver.
"""

import asyncio
import json
import logging
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request, status
from fastapi.responses import PlainTextResponse

from agent.relay import MessageRelay
from infra.bootstrap import bootstrap_infrastructure

from .normalize import NormalizationError, normalize_payload
from .schemas import PAGE_OBJECT, NormalizedMessage
from .security import verify_webhook_challenge

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Messenger Transport"])


def get_relay() -> MessageRelay:
    """Relay dependency (overridden in tests)."""
    return bootstrap_infrastructure().get_relay()


# ============================================================================
# WEBHOOK CHALLENGE (Setup only)
# ============================================================================

@router.get("/webhook", response_class=PlainTextResponse)
async def messenger_webhook_challenge(
    hub_mode: Optional[str] = Query(None, alias="hub.mode"),
    hub_verify_token: Optional[str] = Query(None, alias="hub.verify_token"),
    hub_challenge: Optional[str] = Query(None, alias="hub.challenge"),
) -> PlainTextResponse:
    """
    Verify webhook subscription challenge from Meta.

    Returns:
        The challenge string (plain text)

    Raises:
        HTTPException(403): Invalid token
    """
    try:
        challenge = verify_webhook_challenge(hub_verify_token, hub_challenge)
    except HTTPException:
        logger.warning(f"Webhook verification failed (mode={hub_mode})")
        raise

    logger.info("Webhook verified")
    return PlainTextResponse(challenge, status_code=status.HTTP_200_OK)


# ============================================================================
# WEBHOOK RECEIVER (Message processing)
# ============================================================================

@router.post("/webhook", response_class=PlainTextResponse)
async def messenger_webhook_receiver(
    request: Request,
    background_tasks: BackgroundTasks,
    relay: MessageRelay = Depends(get_relay),
) -> PlainTextResponse:
    """
    Receive Messenger events via webhook.

    Flow:
    1. Parse JSON body (404 unless it is a page event)
    2. Normalize every messaging event of every entry
    3. Schedule relay processing (messages run concurrently)
    4. Return 200 EVENT_RECEIVED immediately

    Raises:
        HTTPException(404): Not a page event, or entries are malformed
    """
    try:
        payload = json.loads(await request.body())
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Webhook body is not valid JSON")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    if not isinstance(payload, dict) or payload.get("object") != PAGE_OBJECT:
        logger.warning(
            f"Ignoring non-page webhook object: "
            f"{payload.get('object') if isinstance(payload, dict) else type(payload).__name__}"
        )
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    try:
        messages = normalize_payload(payload)
    except NormalizationError as e:
        logger.warning(f"Malformed page event: {e}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    for message in messages:
        logger.info(
            "Message normalized",
            extra={
                "sender_id": message.sender_id,
                "message_id": message.message_id,
                "input_type": message.input_type,
            },
        )
    if messages:
        background_tasks.add_task(dispatch_messages, relay, messages)

    return PlainTextResponse("EVENT_RECEIVED", status_code=status.HTTP_200_OK)


async def dispatch_messages(relay: MessageRelay, messages: List[NormalizedMessage]) -> None:
    """Run the relay on every message of one POST concurrently."""
    await asyncio.gather(*(relay.handle_message(message) for message in messages))
