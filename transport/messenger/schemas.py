"""
Messenger Transport Layer - Pydantic Schemas

PURE DATA MODELS - NO LOGIC
Only defines the contract between the Messenger Platform and the relay.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


PAGE_OBJECT = "page"


# ============================================================================
# NORMALIZED MESSAGE (THE CONTRACT)
# ============================================================================

class NormalizedMessage(BaseModel):
    """
    Canonical inbound message consumed by the relay.

    One per messaging event. Image messages carry the attachment URL,
    text messages carry the raw text.
    """

    sender_id: str = Field(..., description="Page-scoped sender identity")
    input_type: Literal["text", "image"] = Field(
        ...,
        description="Content modality: text or image"
    )
    input_text: str = Field(
        "",
        description="Message text. Empty for image messages."
    )
    media_url: Optional[str] = Field(
        None,
        description="Image attachment URL. None for text."
    )
    message_id: Optional[str] = Field(None, description="Messenger 'mid'")
    timestamp: Optional[datetime] = Field(None, description="Event timestamp UTC")

    class Config:
        """Pydantic config."""
        frozen = True


# ============================================================================
# MESSENGER WEBHOOK PAYLOAD SCHEMAS (INPUT)
# ============================================================================

class MessengerWebhookPayload(BaseModel):
    """
    Full Messenger webhook payload.

    ref: https://developers.facebook.com/docs/messenger-platform/webhooks
    """

    object: str = Field(..., description="Always 'page' for Messenger")
    entry: list[dict] = Field(default_factory=list, description="Webhook entries")

    class Config:
        extra = "allow"


# ============================================================================
# SEND API PAYLOADS (OUTPUT)
# ============================================================================

class Recipient(BaseModel):
    id: str


class AttachmentPayload(BaseModel):
    url: str
    is_reusable: bool = True


class Attachment(BaseModel):
    type: Literal["image", "audio", "video", "file"]
    payload: AttachmentPayload


class OutboundMessage(BaseModel):
    """Either text or a single attachment."""
    text: Optional[str] = None
    attachment: Optional[Attachment] = None


class SendRequest(BaseModel):
    """Body of POST /me/messages."""
    recipient: Recipient
    message: Optional[OutboundMessage] = None
    sender_action: Optional[Literal["mark_seen", "typing_on", "typing_off"]] = None


class SendResponse(BaseModel):
    """Response from the Send API."""
    recipient_id: Optional[str] = None
    message_id: Optional[str] = None

    class Config:
        extra = "allow"
