"""
Song search adapter.

Looks a track up through the Spotify search proxy and returns the
first downloadable link.
"""

from typing import Optional

import httpx

from .base import CapabilityAdapter, CapabilityRequest, CapabilityResponse
from .http import HTTPCapabilityAdapter

DEFAULT_SONG_SEARCH_BASE_URL = "https://hiroshi-api.onrender.com"


class SpotifySearchAdapter(HTTPCapabilityAdapter, CapabilityAdapter):
    """Song lookup: query -> audio download URL."""

    name = "spotify_search"

    def __init__(
        self,
        base_url: str = DEFAULT_SONG_SEARCH_BASE_URL,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(base_url, http_transport)

    async def invoke(self, request: CapabilityRequest) -> CapabilityResponse:
        data, error = await self._get_json(
            "/tiktok/spotify",
            {"search": request.query},
            request.timeout_s,
        )
        if error:
            return error

        link = None
        if isinstance(data, list) and data and isinstance(data[0], dict):
            link = data[0].get("download")

        if not link:
            return CapabilityResponse(
                status="recoverable_error",
                error_type="not_found",
                metadata=self._metadata(query=request.query),
            )

        return CapabilityResponse(
            status="success",
            media_url=link,
            metadata=self._metadata(),
        )
