"""
Session module exports.
"""

from agent.session.base import SessionStore
from agent.session.lru import LRUSessionStore

__all__ = [
    "SessionStore",
    "LRUSessionStore",
]
