"""
Infrastructure configuration system.

Environment-based backend selection with sensible defaults.
Capabilities default to the public Kaiz / Spotify-search APIs;
"stub" switches every adapter to the offline stub.
"""

import os
from typing import Literal, Optional
from dataclasses import dataclass

from agent.relay import MessageRelay
from agent.session import LRUSessionStore, SessionStore
from services.capabilities import (
    DEFAULT_KAIZ_BASE_URL,
    DEFAULT_SONG_SEARCH_BASE_URL,
    CapabilityAdapter,
    KaizImagineAdapter,
    KaizTextAdapter,
    KaizVisionAdapter,
    SpotifySearchAdapter,
    StubCapabilityAdapter,
)
from transport.messenger.chunking import MAX_MESSAGE_CHARS
from transport.messenger.delivery import DEFAULT_INTERVAL_S, DeliverySequencer
from transport.messenger.sender import DEFAULT_API_VERSION, MessengerSender


CapabilityBackendType = Literal["kaiz", "stub"]


def _optional_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    return float(value) if value else None


@dataclass
class InfraConfig:
    """Infrastructure configuration from environment."""

    # Messenger
    page_access_token: str
    graph_api_version: str

    # Capabilities
    capability_backend: CapabilityBackendType
    kaiz_base_url: str
    song_search_base_url: str
    http_timeout_s: float

    # Sessions
    session_capacity: int
    session_ttl_s: Optional[float]

    # Delivery
    delivery_interval_s: float
    max_message_chars: int

    @classmethod
    def from_env(cls) -> "InfraConfig":
        """
        Load configuration from environment variables.

        Defaults:
        - Capabilities: kaiz (public APIs)
        - Sessions: 1000 senders, no TTL
        - Delivery: 1s between segments, 2000 chars per segment
        """
        return cls(
            # Messenger Configuration
            page_access_token=os.getenv("PAGE_ACCESS_TOKEN", ""),
            graph_api_version=os.getenv("GRAPH_API_VERSION", DEFAULT_API_VERSION),

            # Capability Configuration
            capability_backend=os.getenv("CAPABILITY_BACKEND", "kaiz"),  # type: ignore
            kaiz_base_url=os.getenv("KAIZ_BASE_URL", DEFAULT_KAIZ_BASE_URL),
            song_search_base_url=os.getenv("SONG_SEARCH_BASE_URL", DEFAULT_SONG_SEARCH_BASE_URL),
            http_timeout_s=float(os.getenv("HTTP_TIMEOUT_S", "30")),

            # Session Configuration
            session_capacity=int(os.getenv("SESSION_CAPACITY", "1000")),
            session_ttl_s=_optional_float("SESSION_TTL_S"),

            # Delivery Configuration
            delivery_interval_s=float(os.getenv("DELIVERY_INTERVAL_S", str(DEFAULT_INTERVAL_S))),
            max_message_chars=int(os.getenv("MAX_MESSAGE_CHARS", str(MAX_MESSAGE_CHARS))),
        )

    def create_sender(self) -> MessengerSender:
        """Create the Send API client."""
        return MessengerSender(
            access_token=self.page_access_token,
            api_version=self.graph_api_version,
            timeout_s=self.http_timeout_s,
        )

    def create_sequencer(self) -> DeliverySequencer:
        """Create the delivery sequencer."""
        return DeliverySequencer(interval_s=self.delivery_interval_s)

    def create_session_store(self) -> SessionStore:
        """Create the session store."""
        return LRUSessionStore(
            capacity=self.session_capacity,
            ttl_s=self.session_ttl_s,
        )

    def create_text_adapter(self) -> CapabilityAdapter:
        """Create the free-text Q&A adapter."""
        if self.capability_backend == "stub":
            return StubCapabilityAdapter("text", name="stub_ask")
        return KaizTextAdapter(base_url=self.kaiz_base_url)

    def create_vision_adapter(self) -> CapabilityAdapter:
        """Create the image analysis adapter."""
        if self.capability_backend == "stub":
            return StubCapabilityAdapter("text", name="stub_gemini")
        return KaizVisionAdapter(base_url=self.kaiz_base_url)

    def create_song_adapter(self) -> CapabilityAdapter:
        """Create the song search adapter."""
        if self.capability_backend == "stub":
            return StubCapabilityAdapter("media", name="stub_play")
        return SpotifySearchAdapter(base_url=self.song_search_base_url)

    def create_image_adapter(self) -> CapabilityAdapter:
        """Create the image generation adapter."""
        if self.capability_backend == "stub":
            return StubCapabilityAdapter("media", name="stub_imagine")
        return KaizImagineAdapter(base_url=self.kaiz_base_url)

    def create_relay(
        self,
        sender: MessengerSender,
        sequencer: DeliverySequencer,
        sessions: SessionStore,
    ) -> MessageRelay:
        """Create the relay around already-built transport pieces."""
        return MessageRelay(
            sender=sender,
            sequencer=sequencer,
            sessions=sessions,
            text_adapter=self.create_text_adapter(),
            vision_adapter=self.create_vision_adapter(),
            song_adapter=self.create_song_adapter(),
            image_adapter=self.create_image_adapter(),
            max_message_chars=self.max_message_chars,
            timeout_s=self.http_timeout_s,
        )


def get_config() -> InfraConfig:
    """Get global infrastructure configuration."""
    return InfraConfig.from_env()
