"""Chat assistants.

ChatAssistant turns messages into suggestions and, only when the user
confirms one, into items in the store. GeneralAssistant forwards the
conversation to an external chat service. Neither lets an exception escape
into the conversation: failures become an apologetic reply.
"""

import logging
import random
import time
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, Iterator

from .adapters.chat_api import ChatServiceError
from .config import Config
from .core.intents import (
    EventSuggestion,
    HabitSuggestion,
    PlainReply,
    Suggestion,
    TaskSuggestion,
    parse_message,
)
from .core.models import Frequency
from .ports.chat_service import ChatMessage, ChatService
from .store import ItemStore

logger = logging.getLogger(__name__)

PROCESSING_ERROR = "I'm sorry, I encountered an error. Please try again."
CREATION_ERROR = "I'm sorry, I couldn't create that item. Please try again."
SERVICE_ERROR = "I'm sorry, I couldn't reach the assistant right now. Please try again later."

SYSTEM_PROMPT = """You are {name}, a helpful AI assistant for a productivity and task management app.
Your goal is to help users manage their tasks, events, and habits effectively.
Provide concise, helpful responses focused on productivity, time management, and organization.
When users ask about creating tasks, events, or habits, try to extract relevant details like title, date, time, and category.
Be friendly and encouraging, but keep responses brief and to the point."""


@dataclass
class AssistantMessage:
    """One message in a chat conversation."""

    content: str
    sender: str = "bot"
    timestamp: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    suggestion: Suggestion | None = None


def describe_suggestion(suggestion: Suggestion) -> str:
    """The question shown alongside a suggestion."""
    if isinstance(suggestion, EventSuggestion):
        return f'I can help you create an event "{suggestion.title}". Would you like me to add it?'
    if isinstance(suggestion, HabitSuggestion):
        return f'I can help you create a {suggestion.frequency.value} habit "{suggestion.title}". Would you like me to add it?'
    return f'I can help you create a task "{suggestion.title}". Would you like me to add it?'


def _combine(day: date, clock: str) -> datetime:
    """Instant from a date and an HH:MM string. Raises ValueError if malformed."""
    return datetime.fromisoformat(f"{day.isoformat()}T{clock}")


class ChatAssistant:
    """
    Rule-based assistant over an ItemStore.

    respond() never touches the store; confirm() is the only way a
    suggestion becomes an item.
    """

    def __init__(
        self,
        store: ItemStore,
        config: Config | None = None,
        sleep: Callable[[float], None] = time.sleep,
        rng: random.Random | None = None,
    ):
        self.store = store
        self.config = config or Config()
        self._sleep = sleep
        self._rng = rng or random.Random()

    def welcome(self) -> AssistantMessage:
        return self._reply(
            f"Hello! I'm {self.config.assistant_name}. I can help you manage your tasks, events, "
            "and habits. How can I assist you today?"
        )

    def _reply(self, content: str, suggestion: Suggestion | None = None) -> AssistantMessage:
        return AssistantMessage(content=content, timestamp=self.store.now(), suggestion=suggestion)

    def respond(self, text: str) -> AssistantMessage | None:
        """Answer a user message. Blank input gets no answer."""
        if not text.strip():
            return None

        if self.config.thinking_delay > 0:
            self._sleep(self.config.thinking_delay)

        try:
            intent = parse_message(text, self.store.now().date(), self._rng)
        except Exception:
            logger.exception(f"Error processing message: {text!r}")
            return self._reply(PROCESSING_ERROR)

        if isinstance(intent, PlainReply):
            return self._reply(intent.text)
        return self._reply(describe_suggestion(intent), suggestion=intent)

    def confirm(self, suggestion: Suggestion) -> AssistantMessage:
        """Create the suggested item. Failures are reported, not raised."""
        try:
            if isinstance(suggestion, TaskSuggestion):
                self.store.add_task(
                    title=suggestion.title,
                    description=suggestion.description or "",
                    due_date=_combine(suggestion.date, suggestion.time),
                    completed=False,
                    is_static=False,
                    category=suggestion.category,
                )
            elif isinstance(suggestion, EventSuggestion):
                self.store.add_event(
                    title=suggestion.title,
                    description=suggestion.description or "",
                    start_date=_combine(suggestion.date, suggestion.time),
                    end_date=_combine(suggestion.end_date, suggestion.end_time),
                    is_static=False,
                    category=suggestion.category,
                )
            elif isinstance(suggestion, HabitSuggestion):
                self.store.add_habit(
                    title=suggestion.title,
                    description=suggestion.description or "",
                    frequency=suggestion.frequency or Frequency.DAILY,
                    category=suggestion.category,
                )
            else:
                raise TypeError(f"Not a suggestion: {suggestion!r}")
        except Exception:
            logger.exception("Error creating item")
            return self._reply(CREATION_ERROR)

        logger.info(f"Created {suggestion.type} {suggestion.title!r} from chat")
        return self._reply(f'I\'ve created the {suggestion.type} "{suggestion.title}" for you.')


class GeneralAssistant:
    """
    Free-form assistant backed by an external chat service.

    Keeps the conversation history and sends it with a fixed system
    instruction on every turn. No retries.
    """

    def __init__(self, service: ChatService, config: Config | None = None):
        self.service = service
        self.config = config or Config()
        self.history: list[ChatMessage] = []

    @property
    def system_prompt(self) -> str:
        return SYSTEM_PROMPT.format(name=self.config.assistant_name)

    def _messages(self) -> list[ChatMessage]:
        return [{"role": "system", "content": self.system_prompt}, *self.history]

    def ask(self, text: str) -> str:
        """Send a message and return the full reply."""
        self.history.append({"role": "user", "content": text})
        try:
            reply = self.service.generate(self._messages()).strip()
        except ChatServiceError as e:
            logger.error(f"Chat service error: {e}")
            return SERVICE_ERROR
        self.history.append({"role": "assistant", "content": reply})
        return reply

    def stream(self, text: str) -> Iterator[str]:
        """Send a message and yield the reply as it arrives."""
        self.history.append({"role": "user", "content": text})
        chunks: list[str] = []
        try:
            for chunk in self.service.stream(self._messages()):
                chunks.append(chunk)
                yield chunk
        except ChatServiceError as e:
            logger.error(f"Chat service error: {e}")
            yield SERVICE_ERROR
            return
        self.history.append({"role": "assistant", "content": "".join(chunks)})
