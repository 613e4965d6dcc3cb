"""
Infrastructure module exports.

Configuration and bootstrap for the relay and its backends.
"""

from .config import InfraConfig, get_config, CapabilityBackendType
from .bootstrap import InfraBootstrap, bootstrap_infrastructure

__all__ = [
    "InfraConfig",
    "get_config",
    "CapabilityBackendType",
    "InfraBootstrap",
    "bootstrap_infrastructure",
]
