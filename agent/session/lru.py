"""
In-memory LRU session store.

Bounded replacement for a plain dict: at most `capacity` senders are
remembered, least recently used first out, with an optional TTL.
Process-lifetime only; nothing survives a restart.
"""

import logging
import time
from collections import OrderedDict
from typing import Callable, Optional, Tuple

from agent.session.base import SessionStore

logger = logging.getLogger(__name__)


class LRUSessionStore(SessionStore):
    """
    OrderedDict-backed session store.

    Touched only from the event loop thread, so no locking.
    """

    def __init__(
        self,
        capacity: int = 1000,
        ttl_s: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            capacity: Maximum number of senders kept
            ttl_s: Entry lifetime in seconds (None = no expiry)
            clock: Monotonic time source (injectable for tests)
        """
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        if ttl_s is not None and ttl_s <= 0:
            raise ValueError(f"ttl_s must be positive, got {ttl_s}")

        self.capacity = capacity
        self.ttl_s = ttl_s
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[str, float]]" = OrderedDict()

    def get(self, sender_id: str) -> Optional[str]:
        entry = self._entries.get(sender_id)
        if entry is None:
            return None

        image_url, stored_at = entry
        if self._expired(stored_at):
            del self._entries[sender_id]
            logger.debug(f"Session expired for {sender_id}")
            return None

        self._entries.move_to_end(sender_id)
        return image_url

    def set(self, sender_id: str, image_url: str) -> None:
        self._entries[sender_id] = (image_url, self._clock())
        self._entries.move_to_end(sender_id)

        while len(self._entries) > self.capacity:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Session evicted for {evicted}")

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, sender_id: object) -> bool:
        return sender_id in self._entries

    def _expired(self, stored_at: float) -> bool:
        return self.ttl_s is not None and self._clock() - stored_at > self.ttl_s
