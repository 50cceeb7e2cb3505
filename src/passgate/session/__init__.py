"""Session storage contract and the in-memory implementation."""

from passgate.session.memory import MemorySession, MemorySessionStorage
from passgate.session.protocol import Session, SessionStorage

__all__ = [
    "Session",
    "SessionStorage",
    "MemorySession",
    "MemorySessionStorage",
]
