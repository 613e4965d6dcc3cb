"""
Abstract session store interface.

Remembers the last image each sender shared, so a later /gemini
command can refer to it. The relay depends only on this interface.
"""

from abc import ABC, abstractmethod
from typing import Optional


class SessionStore(ABC):
    """
    Abstract session boundary.

    Key properties:
    - Last write wins per sender
    - Reads never remove the entry
    - Never raises for unknown senders (returns None)
    """

    @abstractmethod
    def get(self, sender_id: str) -> Optional[str]:
        """Return the last image URL for sender_id, or None."""
        raise NotImplementedError

    @abstractmethod
    def set(self, sender_id: str, image_url: str) -> None:
        """Remember image_url as sender_id's last image."""
        raise NotImplementedError

    @abstractmethod
    def __len__(self) -> int:
        raise NotImplementedError
