"""
Messenger Input Normalization

PURE CONVERSION - NO LOGIC, NO API CALLS

Converts Messenger webhook events into canonical NormalizedMessage.
- TEXT: Keep text as sent (command parsing needs the raw prefix)
- IMAGE: Keep attachment URL only, no vision inference

Events that are not user messages (delivery, read, postback) and
echoes of the page's own messages are skipped, not errors.
"""

import logging
from datetime import datetime, timezone
from typing import Iterator, Optional

from pydantic import ValidationError

from .schemas import MessengerWebhookPayload, NormalizedMessage

logger = logging.getLogger(__name__)


class NormalizationError(Exception):
    """Input normalization failed."""
    pass


def iter_messaging_events(payload: dict | MessengerWebhookPayload) -> Iterator[dict]:
    """
    Yield every messaging event of every entry.

    Entries that are not objects, or whose 'messaging' is not a list,
    are logged and skipped.

    Raises:
        NormalizationError: Entry structure is invalid
    """
    if isinstance(payload, MessengerWebhookPayload):
        payload = payload.model_dump()

    entries = payload.get("entry") or []
    if not isinstance(entries, list):
        raise NormalizationError("'entry' must be a list")

    for entry in entries:
        if not isinstance(entry, dict):
            logger.warning(f"Skipping malformed entry: {type(entry).__name__}")
            continue
        events = entry.get("messaging") or []
        if not isinstance(events, list):
            logger.warning(f"Skipping entry with non-list 'messaging': {type(events).__name__}")
            continue
        for event in events:
            yield event


def normalize_event(event: dict) -> Optional[NormalizedMessage]:
    """
    Convert one messaging event into a NormalizedMessage.

    Returns:
        NormalizedMessage, or None for events the relay does not handle

    Raises:
        NormalizationError: Message event is malformed
    """
    if not isinstance(event, dict):
        raise NormalizationError("Event must be an object")

    try:
        sender_id = str(event["sender"]["id"])
    except (KeyError, TypeError):
        raise NormalizationError("Event missing 'sender.id'")

    message = event.get("message")
    if not message:
        logger.debug(f"Skipping non-message event from {sender_id}")
        return None
    if not isinstance(message, dict):
        raise NormalizationError("'message' must be an object")

    if message.get("is_echo"):
        logger.debug(f"Skipping echo event for {sender_id}")
        return None

    message_id = message.get("mid")
    if message_id is not None and not isinstance(message_id, str):
        raise NormalizationError("'message.mid' must be a string")
    timestamp = _parse_timestamp(event.get("timestamp"))

    attachments = message.get("attachments")
    if attachments:
        if not isinstance(attachments, list) or not isinstance(attachments[0], dict):
            raise NormalizationError("'message.attachments' must be a list of objects")
        return _normalize_attachment(attachments[0], sender_id, message_id, timestamp)

    text = message.get("text")
    if text is None:
        logger.debug(f"Skipping message without text from {sender_id}")
        return None
    if not isinstance(text, str):
        raise NormalizationError("'message.text' must be a string")

    return NormalizedMessage(
        sender_id=sender_id,
        input_type="text",
        input_text=text,
        media_url=None,
        message_id=message_id,
        timestamp=timestamp,
    )


def normalize_payload(payload: dict | MessengerWebhookPayload) -> list[NormalizedMessage]:
    """
    Normalize all handled messages in a webhook payload.

    Malformed events are logged and skipped so one bad event
    does not drop the rest of the batch.
    """
    messages = []
    for event in iter_messaging_events(payload):
        try:
            normalized = normalize_event(event)
        except (NormalizationError, ValidationError) as e:
            logger.warning(f"Skipping malformed messaging event: {e}")
            continue
        if normalized is not None:
            messages.append(normalized)
    return messages


def _normalize_attachment(
    attachment: dict,
    sender_id: str,
    message_id: Optional[str],
    timestamp: Optional[datetime],
) -> Optional[NormalizedMessage]:
    """
    Normalize the first attachment of a message.

    Only images are handled; other attachment types are skipped.
    """
    if attachment.get("type") != "image":
        logger.debug(
            f"Skipping unsupported attachment type from {sender_id}: {attachment.get('type')}"
        )
        return None

    try:
        url = attachment["payload"]["url"]
    except (KeyError, TypeError):
        raise NormalizationError("Image attachment missing 'payload.url'")
    if not isinstance(url, str):
        raise NormalizationError("Image attachment 'payload.url' must be a string")

    return NormalizedMessage(
        sender_id=sender_id,
        input_type="image",
        input_text="",
        media_url=url,
        message_id=message_id,
        timestamp=timestamp,
    )


def _parse_timestamp(value) -> Optional[datetime]:
    # Messenger timestamps are epoch milliseconds
    if value is None:
        return None
    try:
        return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError):
        return None
