"""
Stub capability adapter for testing and offline development.

Deterministic, fast, and never fails silently.
"""

from urllib.parse import quote

from .base import CapabilityAdapter, CapabilityRequest, CapabilityResponse


class StubCapabilityAdapter(CapabilityAdapter):
    """
    Deterministic fake capability for testing and CI.

    kind selects the result shape:
    - "text": echoes the query as output
    - "media": returns a stable stub:// URL for the query
    A query of "fail" returns a recoverable error.
    """

    def __init__(self, kind: str = "text", name: str = "stub"):
        if kind not in ("text", "media"):
            raise ValueError(f"Unknown stub kind: {kind}")
        self.kind = kind
        self.name = name

    async def invoke(self, request: CapabilityRequest) -> CapabilityResponse:
        metadata = {"backend": self.name, "sender_id": request.sender_id}

        if request.query == "fail":
            return CapabilityResponse(
                status="recoverable_error",
                error_type="invalid_response",
                metadata=metadata,
            )

        if self.kind == "media":
            return CapabilityResponse(
                status="success",
                media_url=f"stub://{self.name}/{quote(request.query)}",
                metadata=metadata,
            )

        output = f"[{self.name}] {request.query}"
        if request.media_url:
            output += f" ({request.media_url})"
        return CapabilityResponse(status="success", output=output, metadata=metadata)
