"""Messenger Transport Layer - Module Exports"""

from .chunking import MAX_MESSAGE_CHARS, chunk_text
from .delivery import DeliveryBatch, DeliverySequencer
from .normalize import (
    NormalizationError,
    iter_messaging_events,
    normalize_event,
    normalize_payload,
)
from .schemas import (
    PAGE_OBJECT,
    MessengerWebhookPayload,
    NormalizedMessage,
    SendRequest,
    SendResponse,
)
from .security import verify_webhook_challenge
from .sender import MessengerSender, MessengerSenderError

__all__ = [
    # Schemas
    "PAGE_OBJECT",
    "NormalizedMessage",
    "MessengerWebhookPayload",
    "SendRequest",
    "SendResponse",
    # Normalization
    "iter_messaging_events",
    "normalize_event",
    "normalize_payload",
    "NormalizationError",
    # Security
    "verify_webhook_challenge",
    # Outbound
    "chunk_text",
    "MAX_MESSAGE_CHARS",
    "DeliveryBatch",
    "DeliverySequencer",
    "MessengerSender",
    "MessengerSenderError",
]
