"""Chat API adapter - HTTP client for an OpenAI-compatible chat endpoint."""

import json
import logging
from typing import Iterator

import requests

from ubizy.config import Config, load_config
from ubizy.ports.chat_service import ChatMessage

logger = logging.getLogger(__name__)


class ChatServiceError(Exception):
    """Raised when the chat service cannot produce a reply."""

    pass


class ChatAPIService:
    """
    Chat completions API adapter.

    Implements ChatService protocol. Sends the conversation as-is and returns
    the model's text. No business logic - just I/O.
    """

    def __init__(self, config: Config | None = None, session: requests.Session | None = None):
        self.config = config or load_config()
        self._session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        if not self.config.chat_api_key:
            raise ChatServiceError("No API key. Set CHAT_API_KEY in ubizy.conf or OPENAI_API_KEY.")
        return {
            "Authorization": f"Bearer {self.config.chat_api_key}",
            "Content-Type": "application/json",
        }

    def _post(self, messages: list[ChatMessage], stream: bool) -> requests.Response:
        try:
            resp = self._session.post(
                self.config.chat_api_url,
                headers=self._headers(),
                json={"model": self.config.chat_model, "messages": messages, "stream": stream},
                timeout=self.config.chat_timeout,
                stream=stream,
            )
        except requests.Timeout:
            raise ChatServiceError(f"Chat service timed out after {self.config.chat_timeout}s")
        except requests.RequestException as e:
            raise ChatServiceError(f"Chat service unreachable: {e}")

        if resp.status_code != 200:
            logger.error(f"Chat service failed ({resp.status_code}): {resp.text}")
            raise ChatServiceError(f"Chat service failed ({resp.status_code})")
        return resp

    def generate(self, messages: list[ChatMessage]) -> str:
        """Generate a reply to a conversation. Returns complete response."""
        resp = self._post(messages, stream=False)
        try:
            return resp.json()["choices"][0]["message"]["content"] or ""
        except (ValueError, KeyError, IndexError) as e:
            raise ChatServiceError(f"Unexpected chat service response: {e}")

    def stream(self, messages: list[ChatMessage]) -> Iterator[str]:
        """Stream a reply. Yields content chunks from server-sent events."""
        resp = self._post(messages, stream=True)
        with resp:
            try:
                for line in resp.iter_lines(decode_unicode=True):
                    if not line or not line.startswith("data:"):
                        continue
                    payload = line[len("data:"):].strip()
                    if payload == "[DONE]":
                        break
                    try:
                        chunk = json.loads(payload)
                        delta = chunk["choices"][0].get("delta", {}).get("content")
                    except (json.JSONDecodeError, KeyError, IndexError) as e:
                        raise ChatServiceError(f"Unexpected chat service chunk: {e}")
                    if delta:
                        yield delta
            except requests.RequestException as e:
                raise ChatServiceError(f"Chat service stream interrupted: {e}")
