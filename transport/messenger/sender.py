"""
Messenger Response Sender

Sends relay output back through the Graph API Send API.
No formatting intelligence. No retries. No chunking (see chunking.py).
"""

import logging
from typing import Optional

import httpx

from .schemas import (
    Attachment,
    AttachmentPayload,
    OutboundMessage,
    Recipient,
    SendRequest,
    SendResponse,
)

logger = logging.getLogger(__name__)

GRAPH_API_BASE_URL = "https://graph.facebook.com"
DEFAULT_API_VERSION = "v21.0"


class MessengerSenderError(Exception):
    """Failed to send to the Messenger Platform."""
    pass


class MessengerSender:
    """
    Messenger Send API client.

    Pure I/O: one POST per call, errors raised as MessengerSenderError.
    """

    def __init__(
        self,
        access_token: str,
        api_version: str = DEFAULT_API_VERSION,
        base_url: str = GRAPH_API_BASE_URL,
        timeout_s: float = 30.0,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            access_token: Page access token
            api_version: Graph API version, e.g. "v21.0"
            base_url: Graph API host
            timeout_s: Per-request timeout
            http_transport: Optional httpx transport (tests)
        """
        self.access_token = access_token
        self.api_version = api_version
        self.timeout_s = timeout_s
        self.endpoint = f"{base_url.rstrip('/')}/{api_version}/me/messages"
        self._http_transport = http_transport

    async def send_text(self, recipient_id: str, text: str) -> SendResponse:
        """Send a plain text message. Caller must keep text within the limit."""
        request = SendRequest(
            recipient=Recipient(id=recipient_id),
            message=OutboundMessage(text=text),
        )
        return await self._post(request)

    async def send_attachment(
        self,
        recipient_id: str,
        attachment_type: str,
        url: str,
    ) -> SendResponse:
        """Send a media attachment (image, audio, ...) referenced by URL."""
        request = SendRequest(
            recipient=Recipient(id=recipient_id),
            message=OutboundMessage(
                attachment=Attachment(
                    type=attachment_type,
                    payload=AttachmentPayload(url=url, is_reusable=True),
                )
            ),
        )
        return await self._post(request)

    async def mark_seen(self, recipient_id: str) -> SendResponse:
        """Send the mark_seen sender action."""
        request = SendRequest(
            recipient=Recipient(id=recipient_id),
            sender_action="mark_seen",
        )
        return await self._post(request)

    async def _post(self, request: SendRequest) -> SendResponse:
        if not self.access_token:
            raise MessengerSenderError("PAGE_ACCESS_TOKEN not configured")

        recipient_id = request.recipient.id
        body = request.model_dump(exclude_none=True)

        try:
            async with httpx.AsyncClient(transport=self._http_transport) as client:
                response = await client.post(
                    self.endpoint,
                    params={"access_token": self.access_token},
                    json=body,
                    timeout=self.timeout_s,
                )
        except httpx.RequestError as e:
            logger.error(
                f"HTTP request failed: {e}",
                extra={"recipient_id": recipient_id, "error": str(e)},
            )
            raise MessengerSenderError(f"HTTP request failed: {e}") from e

        if response.status_code != 200:
            error_text = response.text
            logger.error(
                f"Send API error: {response.status_code} - {error_text}",
                extra={
                    "recipient_id": recipient_id,
                    "status_code": response.status_code,
                    "error_body": error_text,
                },
            )
            raise MessengerSenderError(f"Send API returned {response.status_code}")

        try:
            result = SendResponse(**response.json())
        except ValueError as e:
            raise MessengerSenderError(f"Unexpected Send API response: {e}") from e

        logger.info(
            f"Sent to {recipient_id}",
            extra={
                "recipient_id": recipient_id,
                "message_id": result.message_id,
                "sender_action": request.sender_action,
            },
        )
        return result
