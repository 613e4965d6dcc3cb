"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(autouse=True)
def reset_infrastructure():
    """Each test builds its own relay from the environment it patches."""
    from infra.bootstrap import InfraBootstrap

    InfraBootstrap.reset()
    yield
    InfraBootstrap.reset()
