"""
Kaiz API adapters: text Q&A, vision analysis, image generation.

All three endpoints live under the same API root and answer
with {"response": "..."} (Q&A, vision) or an image body (imagine).
"""

import logging
from typing import Optional
from urllib.parse import quote, urlencode

import httpx

from .base import CapabilityAdapter, CapabilityRequest, CapabilityResponse
from .http import HTTPCapabilityAdapter

logger = logging.getLogger(__name__)

DEFAULT_KAIZ_BASE_URL = "https://kaiz-apis.gleeze.com/api"


def _response_text(data) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    text = data.get("response")
    return str(text) if text else None


class KaizTextAdapter(HTTPCapabilityAdapter, CapabilityAdapter):
    """Free-text Q&A via the gpt-4o endpoint."""

    name = "kaiz_gpt4o"

    def __init__(
        self,
        base_url: str = DEFAULT_KAIZ_BASE_URL,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(base_url, http_transport)

    async def invoke(self, request: CapabilityRequest) -> CapabilityResponse:
        data, error = await self._get_json(
            "/gpt-4o",
            {"q": request.query, "uid": request.sender_id},
            request.timeout_s,
        )
        if error:
            return error

        text = _response_text(data)
        if not text:
            # Q&A has no useful "empty" answer
            logger.error(f"{self.name} response missing 'response': {data!r}")
            return CapabilityResponse(
                status="recoverable_error",
                error_type="invalid_response",
                metadata=self._metadata(),
            )

        return CapabilityResponse(
            status="success",
            output=text,
            metadata=self._metadata(),
        )


class KaizVisionAdapter(HTTPCapabilityAdapter, CapabilityAdapter):
    """Prompted image analysis via the gemini-vision endpoint."""

    name = "kaiz_gemini_vision"

    def __init__(
        self,
        base_url: str = DEFAULT_KAIZ_BASE_URL,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(base_url, http_transport)

    async def invoke(self, request: CapabilityRequest) -> CapabilityResponse:
        if not request.media_url:
            return CapabilityResponse(
                status="fatal_error",
                error_type="invalid_request",
                metadata=self._metadata(reason="media_url required"),
            )

        data, error = await self._get_json(
            "/gemini-vision",
            {
                "q": request.query,
                "uid": request.sender_id,
                "imageUrl": request.media_url,
            },
            request.timeout_s,
        )
        if error:
            return error

        # Missing text is a successful call with nothing to say
        return CapabilityResponse(
            status="success",
            output=_response_text(data),
            metadata=self._metadata(),
        )


class KaizImagineAdapter(CapabilityAdapter):
    """
    Image generation via the imagine endpoint.

    The endpoint returns the image itself, so the result is the request
    URL: the platform downloads it when the attachment is delivered.
    """

    name = "kaiz_imagine"

    def __init__(self, base_url: str = DEFAULT_KAIZ_BASE_URL):
        self.base_url = base_url.rstrip("/")

    async def invoke(self, request: CapabilityRequest) -> CapabilityResponse:
        prompt = request.query.strip()
        if not prompt:
            return CapabilityResponse(
                status="fatal_error",
                error_type="invalid_request",
                metadata={"backend": self.name, "reason": "empty prompt"},
            )

        url = f"{self.base_url}/imagine?{urlencode({'prompt': prompt}, quote_via=quote)}"
        return CapabilityResponse(
            status="success",
            media_url=url,
            metadata={"backend": self.name},
        )
