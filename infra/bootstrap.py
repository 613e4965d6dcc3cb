"""
Infrastructure initialization and bootstrap.

Singleton pattern for creating the relay and its collaborators from configuration.
"""

from typing import Optional

from agent.relay import MessageRelay
from agent.session import SessionStore
from transport.messenger.delivery import DeliverySequencer
from transport.messenger.sender import MessengerSender

from .config import InfraConfig, get_config


class InfraBootstrap:
    """
    Bootstrap infrastructure based on configuration.

    Singleton pattern - single instance per process.
    """

    _instance: Optional["InfraBootstrap"] = None

    def __init__(self, config: Optional[InfraConfig] = None):
        """Initialize bootstrap with configuration."""
        self.config = config or get_config()
        self.sender = self.config.create_sender()
        self.sequencer = self.config.create_sequencer()
        self.sessions = self.config.create_session_store()
        self.relay = self.config.create_relay(self.sender, self.sequencer, self.sessions)

    @classmethod
    def get_instance(cls, config: Optional[InfraConfig] = None) -> "InfraBootstrap":
        """
        Get singleton instance.

        Args:
            config: Optional custom configuration (only used first time)

        Returns:
            Singleton InfraBootstrap instance
        """
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def reset(cls):
        """Reset singleton (for testing)."""
        cls._instance = None

    def get_relay(self) -> MessageRelay:
        return self.relay

    def get_sequencer(self) -> DeliverySequencer:
        return self.sequencer

    def get_sender(self) -> MessengerSender:
        return self.sender

    def get_session_store(self) -> SessionStore:
        return self.sessions

    def __repr__(self) -> str:
        """String representation showing configured backends."""
        return (
            f"InfraBootstrap(capabilities={self.config.capability_backend}, "
            f"graph_api={self.config.graph_api_version}, "
            f"sessions={self.config.session_capacity}"
            f"{'/ttl=' + str(self.config.session_ttl_s) if self.config.session_ttl_s else ''}, "
            f"interval={self.config.delivery_interval_s}s)"
        )


def bootstrap_infrastructure(config: Optional[InfraConfig] = None) -> InfraBootstrap:
    """
    Bootstrap all infrastructure backends.

    Args:
        config: Optional custom configuration

    Returns:
        InfraBootstrap instance with all backends initialized
    """
    return InfraBootstrap.get_instance(config)
