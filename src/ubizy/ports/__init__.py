"""Ports - interfaces/protocols for external dependencies."""

from .item_collection import ItemCollection
from .chat_service import ChatMessage, ChatService

__all__ = [
    "ItemCollection",
    "ChatMessage",
    "ChatService",
]
