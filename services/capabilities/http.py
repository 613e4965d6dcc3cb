"""
Shared HTTP plumbing for capability adapters.

Maps httpx failures onto typed CapabilityResponse statuses so the
concrete adapters only deal with their own response shape.
"""

import logging
from typing import Any, Dict, Optional, Tuple

import httpx

from .base import CapabilityResponse

logger = logging.getLogger(__name__)


class HTTPCapabilityAdapter:
    """Mixin: GET a JSON document with typed failure handling."""

    name = "http"

    def __init__(
        self,
        base_url: str,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: API root, without trailing slash
            http_transport: Optional httpx transport (tests)
        """
        self.base_url = base_url.rstrip("/")
        self._http_transport = http_transport

    def _metadata(self, **extra) -> Dict[str, Any]:
        return {"backend": self.name, **extra}

    async def _get_json(
        self,
        path: str,
        params: Dict[str, str],
        timeout_s: Optional[float],
    ) -> Tuple[Optional[Any], Optional[CapabilityResponse]]:
        """
        GET {base_url}{path} and decode JSON.

        Returns:
            (data, None) on success, (None, error_response) on failure
        """
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(transport=self._http_transport) as client:
                response = await client.get(url, params=params, timeout=timeout_s)
            response.raise_for_status()
            return response.json(), None

        except httpx.TimeoutException as e:
            logger.error(f"{self.name} timed out: {e}")
            return None, CapabilityResponse(
                status="recoverable_error",
                error_type="timeout",
                metadata=self._metadata(error=str(e)),
            )

        except httpx.HTTPStatusError as e:
            logger.error(
                f"{self.name} returned {e.response.status_code}",
                extra={"status_code": e.response.status_code},
            )
            return None, CapabilityResponse(
                status="recoverable_error",
                error_type="invalid_response",
                metadata=self._metadata(status_code=e.response.status_code),
            )

        except httpx.RequestError as e:
            logger.error(f"{self.name} request failed: {e}", exc_info=True)
            return None, CapabilityResponse(
                status="fatal_error",
                error_type="backend_unavailable",
                metadata=self._metadata(error=str(e)),
            )

        except ValueError as e:
            logger.error(f"{self.name} returned invalid JSON: {e}")
            return None, CapabilityResponse(
                status="recoverable_error",
                error_type="invalid_response",
                metadata=self._metadata(error=str(e)),
            )
