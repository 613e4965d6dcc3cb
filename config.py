"""
Configuration management for the Messenger relay.

Loads environment variables from .env file and provides typed access to configuration.
"""

import logging
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)

logger = logging.getLogger(__name__)


class Config:
    """Configuration class for the Messenger relay."""

    # Server
    PORT = int(os.getenv("PORT", "3000"))
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    STATIC_DIR = os.getenv("STATIC_DIR", "public")

    # Messenger Platform
    VERIFY_TOKEN = os.getenv("VERIFY_TOKEN", "")
    PAGE_ACCESS_TOKEN = os.getenv("PAGE_ACCESS_TOKEN", "")
    GRAPH_API_VERSION = os.getenv("GRAPH_API_VERSION", "v21.0")

    @classmethod
    def missing(cls) -> list[str]:
        """Names of required settings that are unset."""
        required = ["VERIFY_TOKEN", "PAGE_ACCESS_TOKEN"]
        return [key for key in required if not getattr(cls, key)]

    @classmethod
    def validate(cls) -> bool:
        """Validate that required configuration is set."""
        missing = cls.missing()

        if missing:
            logger.warning(f"Missing required environment variables: {', '.join(missing)}")
            return False

        return True


if __name__ == "__main__":
    # Test configuration loading
    print("Configuration loaded:")
    print(f"  Port: {Config.PORT}")
    print(f"  Environment: {Config.ENVIRONMENT}")
    print(f"  Verify Token: {'✓ Set' if Config.VERIFY_TOKEN else '✗ Missing'}")
    print(f"  Page Access Token: {'✓ Set' if Config.PAGE_ACCESS_TOKEN else '✗ Missing'}")
    print(f"  Graph API Version: {Config.GRAPH_API_VERSION}")
    print(f"\n  Validation: {'✓ PASSED' if Config.validate() else '✗ FAILED'}")
