"""
Capability adapter abstract interface.

Role: one third-party content API behind a uniform request/response call.

Rules:
- One outbound call per request (at most)
- No session access, no reply formatting
- Never raises: all failures are explicit and typed
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional


CapabilityStatus = Literal["success", "recoverable_error", "fatal_error"]


@dataclass
class CapabilityRequest:
    """Capability request."""

    query: str  # Prompt or search terms
    sender_id: str
    media_url: Optional[str] = None  # Image to analyze (vision only)
    timeout_s: Optional[float] = 30.0


@dataclass
class CapabilityResponse:
    """Capability response."""

    status: CapabilityStatus
    output: Optional[str] = None  # Text result
    media_url: Optional[str] = None  # Media result (audio/image link)
    error_type: Optional[str] = None  # timeout | invalid_response | backend_unavailable | not_found
    metadata: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.status == "success"


class CapabilityAdapter(ABC):
    """
    Abstract capability boundary.
    Relay code must depend ONLY on this interface.
    """

    name: str = "capability"

    @abstractmethod
    async def invoke(self, request: CapabilityRequest) -> CapabilityResponse:
        """
        Run the capability.

        Args:
            request: CapabilityRequest with query and optional media URL

        Returns:
            CapabilityResponse with result or explicit error status
        """
        raise NotImplementedError
