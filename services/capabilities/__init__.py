"""
Capability adapter exports.

Clean interface for the relay to import capability components.
"""

from .base import (
    CapabilityAdapter,
    CapabilityRequest,
    CapabilityResponse,
    CapabilityStatus,
)
from .kaiz import (
    DEFAULT_KAIZ_BASE_URL,
    KaizImagineAdapter,
    KaizTextAdapter,
    KaizVisionAdapter,
)
from .spotify import DEFAULT_SONG_SEARCH_BASE_URL, SpotifySearchAdapter
from .stub import StubCapabilityAdapter

__all__ = [
    "CapabilityAdapter",
    "CapabilityRequest",
    "CapabilityResponse",
    "CapabilityStatus",
    "KaizTextAdapter",
    "KaizVisionAdapter",
    "KaizImagineAdapter",
    "SpotifySearchAdapter",
    "StubCapabilityAdapter",
    "DEFAULT_KAIZ_BASE_URL",
    "DEFAULT_SONG_SEARCH_BASE_URL",
]
