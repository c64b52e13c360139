"""Adapters - I/O implementations of ports."""

from .memory import InMemoryCollection
from .chat_api import ChatAPIService, ChatServiceError

__all__ = [
    "InMemoryCollection",
    "ChatAPIService",
    "ChatServiceError",
]
