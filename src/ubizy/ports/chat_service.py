"""Chat service interface."""

from typing import Iterator, Protocol

# {"role": "system" | "user" | "assistant", "content": str}
ChatMessage = dict[str, str]


class ChatService(Protocol):
    """Interface for an external text-generation service."""

    def generate(self, messages: list[ChatMessage]) -> str:
        """Generate a reply to a conversation. Returns complete response."""
        ...

    def stream(self, messages: list[ChatMessage]) -> Iterator[str]:
        """Stream a reply to a conversation. Yields chunks as they arrive."""
        ...
