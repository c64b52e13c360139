"""Rule-based intent extraction for the assistant.

Turns a free-form message into a structured suggestion (task, event or
habit) or a plain reply. Pure functions - no I/O; "today" and the random
source are passed in. Nothing here creates items: a suggestion is a draft
the user still has to confirm.
"""

import logging
import random
import re
from dataclasses import asdict, dataclass
from datetime import date, timedelta
from typing import ClassVar

from .models import Frequency

logger = logging.getLogger(__name__)

DEFAULT_TIME = "12:00"
DEFAULT_END_TIME = "13:00"

TASK_KEYWORDS = ("create task", "add task")
EVENT_KEYWORDS = ("create event", "add event", "schedule")
HABIT_KEYWORDS = ("create habit", "add habit")
TIP_KEYWORDS = ("productivity", "tips", "advice")
HELP_KEYWORDS = ("help", "how to")

PRODUCTIVITY_TIPS = (
    "Try the Pomodoro Technique: work for 25 minutes, then take a 5-minute break. "
    "After 4 cycles, take a longer break.",
    "Plan your most important tasks for the morning when your energy levels are typically higher.",
    "Use the 2-minute rule: if a task takes less than 2 minutes, do it immediately instead of scheduling it.",
    "Group similar tasks together to minimize context switching and improve focus.",
    "Schedule buffer time between meetings and tasks to avoid feeling rushed.",
    "Try time-blocking your calendar to dedicate specific hours to specific types of work.",
    "Review your upcoming week every Sunday to prepare mentally for what's ahead.",
    "Set clear boundaries between work and personal time to avoid burnout.",
    "Break large projects into smaller, manageable tasks to make progress more visible.",
    "Consider using the Eisenhower Matrix to prioritize tasks: urgent/important, "
    "not urgent/important, urgent/not important, and not urgent/not important.",
)

GENERIC_RESPONSES = (
    "I'm here to help you manage your tasks and time better. Try asking me to create a task, event, or habit.",
    "I can help you organize your schedule. Ask me about creating tasks or events, or request productivity tips.",
    "Need help with time management? I can create tasks and events for you, or provide productivity advice.",
    "I'm your productivity assistant. Try asking me to create a task for tomorrow, "
    "schedule an event, or start a new habit.",
    "Not sure what to ask? Try 'Give me a productivity tip' or 'Create a task for tomorrow'.",
)

HELP_TEXT = """Here are some things I can help you with:

1. Create tasks, events, or habits by typing "create [type] [title]"
2. Get productivity tips by asking for "productivity tips"
3. Ask me how to use any feature in the app
4. Get suggestions for organizing your schedule

Try asking me to create a task for you!"""


# ============== Suggestions ==============


@dataclass
class TaskSuggestion:
    """Draft task."""

    type: ClassVar[str] = "task"

    title: str
    date: date
    time: str = DEFAULT_TIME
    description: str | None = None
    category: str | None = None

    def to_dict(self) -> dict:
        return {"type": self.type, **asdict(self), "date": self.date.isoformat()}


@dataclass
class EventSuggestion:
    """Draft event. Times are 24-hour HH:MM strings."""

    type: ClassVar[str] = "event"

    title: str
    date: date
    end_date: date
    time: str = DEFAULT_TIME
    end_time: str = DEFAULT_END_TIME
    description: str | None = None
    category: str | None = None

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            **asdict(self),
            "date": self.date.isoformat(),
            "end_date": self.end_date.isoformat(),
        }


@dataclass
class HabitSuggestion:
    """Draft habit."""

    type: ClassVar[str] = "habit"

    title: str
    frequency: Frequency = Frequency.DAILY
    description: str | None = None
    category: str | None = None

    def to_dict(self) -> dict:
        return {"type": self.type, **asdict(self), "frequency": self.frequency.value}


@dataclass
class PlainReply:
    """A text answer with nothing to create."""

    type: ClassVar[str] = "reply"

    text: str

    def to_dict(self) -> dict:
        return {"type": self.type, "text": self.text}


Suggestion = TaskSuggestion | EventSuggestion | HabitSuggestion
Intent = TaskSuggestion | EventSuggestion | HabitSuggestion | PlainReply


# ============== Patterns ==============

_CLOCK = r"(\d{1,2})(?::(\d{2}))? ?(am|pm)?"
_CLOCK_NC = r"\d{1,2}(?::\d{2})? ?(?:am|pm)?"

_EXPLICIT_TITLE = re.compile(
    r"(?:create|add) (?:task|event|habit|schedule)(?: called| titled| named)? [\"']([^\"']+)[\"']",
    re.IGNORECASE,
)
_COMMAND_REMAINDER = re.compile(r"(?:create|add) (?:task|event|habit|schedule) (.+)", re.IGNORECASE)

_IN_DAYS = re.compile(r"\bin (\d+) days?\b", re.IGNORECASE)
_NUMERIC_DATE = re.compile(r"(\d{1,2})[/-](\d{1,2})[/-](\d{4})")
_START_TIME = re.compile(rf"\bat {_CLOCK}", re.IGNORECASE)
_END_TIME = re.compile(rf"\b(?:until|to) {_CLOCK}", re.IGNORECASE)

_QUOTED_DESCRIPTION = re.compile(r"with description [\"']([^\"']+)[\"']", re.IGNORECASE)
_DESCRIBED_AS = re.compile(r"described as [\"']?([^\"']+)[\"']?", re.IGNORECASE)
_QUOTED_CATEGORY = re.compile(r"in category [\"']([^\"']+)[\"']", re.IGNORECASE)
_CATEGORY = re.compile(r"(?:in|under) (?:the )?category [\"']?([^\"']+)[\"']?", re.IGNORECASE)

# Sub-phrases removed from a free-form title, applied in order
_TITLE_NOISE = [
    re.compile(r"^(?:called|titled|named)\s+", re.IGNORECASE),
    _QUOTED_DESCRIPTION,
    _DESCRIBED_AS,
    _QUOTED_CATEGORY,
    _CATEGORY,
    re.compile(rf"\b(?:at|from) {_CLOCK_NC}\s*(?:-|to|until)\s*{_CLOCK_NC}", re.IGNORECASE),
    re.compile(rf"\bat {_CLOCK_NC}", re.IGNORECASE),
    re.compile(rf"\b(?:until|to) {_CLOCK_NC}", re.IGNORECASE),
    re.compile(
        r"\b(?:on|at|for) (?:monday|tuesday|wednesday|thursday|friday|saturday|sunday|next week|next month)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(?:(?:on|for) )?(?:today|tomorrow)\b", re.IGNORECASE),
    re.compile(r"\b(?:(?:on|for) )?in \d+ days?\b", re.IGNORECASE),
    re.compile(r"\b(?:on )?\d{1,2}[/-]\d{1,2}[/-]\d{4}\b"),
]


# ============== Field extraction ==============


def _contains_any(lowered: str, keywords: tuple[str, ...]) -> bool:
    return any(k in lowered for k in keywords)


def _default_title(text: str) -> str:
    if "task" in text:
        return "New Task"
    if "event" in text:
        return "New Event"
    return "New Habit"


def extract_title(text: str) -> str:
    """
    Title for a new item.

    An explicit quoted title wins; otherwise the text after the command with
    recognized date, time, description and category phrases removed;
    otherwise a "New <Kind>" placeholder picked from the words in the message.
    """
    match = _EXPLICIT_TITLE.search(text)
    if match and match.group(1).strip():
        return match.group(1).strip()

    match = _COMMAND_REMAINDER.search(text)
    if match:
        title = match.group(1)
        for pattern in _TITLE_NOISE:
            title = pattern.sub("", title)
        title = " ".join(title.split()).strip(" ,.;:-\"'")
        if title:
            return title

    return _default_title(text)


def extract_date(text: str, today: date) -> date | None:
    """Date mentioned in the message, relative to `today`. None if absent."""
    lowered = text.lower()
    if "today" in lowered:
        return today
    if "tomorrow" in lowered:
        return today + timedelta(days=1)

    match = _IN_DAYS.search(text)
    if match:
        try:
            return today + timedelta(days=int(match.group(1)))
        except OverflowError:
            logger.debug(f"Day offset out of range: {match.group(0)!r}")
            return None

    match = _NUMERIC_DATE.search(text)
    if match:
        month, day, year = (int(g) for g in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            logger.debug(f"Ignoring invalid date: {match.group(0)!r}")
    return None


def extract_end_date(text: str, today: date) -> date | None:
    """End date of an event. Only one date per message is recognized."""
    return extract_date(text, today)


def _to_clock(match: re.Match) -> str | None:
    """Convert an (hours, minutes, am/pm) match to 24-hour HH:MM."""
    hours = int(match.group(1))
    minutes = int(match.group(2)) if match.group(2) else 0
    period = match.group(3).lower() if match.group(3) else None

    if period == "pm" and hours < 12:
        hours += 12
    if period == "am" and hours == 12:
        hours = 0

    if hours > 23 or minutes > 59:
        return None
    return f"{hours:02d}:{minutes:02d}"


def extract_time(text: str) -> str | None:
    """Start time from "at H[:MM][am|pm]" as HH:MM."""
    match = _START_TIME.search(text)
    return _to_clock(match) if match else None


def extract_end_time(text: str) -> str | None:
    """End time from "until/to H[:MM][am|pm]", else one hour after the start."""
    match = _END_TIME.search(text)
    if match:
        end = _to_clock(match)
        if end:
            return end

    start = extract_time(text)
    if start:
        hours, minutes = (int(p) for p in start.split(":"))
        return f"{(hours + 1) % 24:02d}:{minutes:02d}"
    return None


def extract_description(text: str) -> str | None:
    match = _QUOTED_DESCRIPTION.search(text) or _DESCRIBED_AS.search(text)
    if match and match.group(1).strip():
        return match.group(1).strip()
    return None


def extract_category(text: str) -> str | None:
    match = _QUOTED_CATEGORY.search(text) or _CATEGORY.search(text)
    if match and match.group(1).strip():
        return match.group(1).strip()
    return None


def extract_frequency(text: str) -> Frequency:
    lowered = text.lower()
    for freq in (Frequency.DAILY, Frequency.WEEKLY, Frequency.MONTHLY):
        if freq.value in lowered:
            return freq
    return Frequency.DAILY


# ============== Intent detection ==============


def parse_message(text: str, today: date, rng: random.Random | None = None) -> Intent:
    """
    Detect what the user wants and extract the fields for it.

    Checked in order, first match wins: task, event, habit, tips, help,
    then a generic reply.
    """
    rng = rng or random.Random()
    lowered = text.lower()

    if _contains_any(lowered, TASK_KEYWORDS):
        return TaskSuggestion(
            title=extract_title(text),
            date=extract_date(text, today) or today,
            time=extract_time(text) or DEFAULT_TIME,
            description=extract_description(text),
            category=extract_category(text),
        )

    if _contains_any(lowered, EVENT_KEYWORDS):
        start_date = extract_date(text, today) or today
        return EventSuggestion(
            title=extract_title(text),
            date=start_date,
            end_date=extract_end_date(text, today) or start_date,
            time=extract_time(text) or DEFAULT_TIME,
            end_time=extract_end_time(text) or DEFAULT_END_TIME,
            description=extract_description(text),
            category=extract_category(text),
        )

    if _contains_any(lowered, HABIT_KEYWORDS):
        return HabitSuggestion(
            title=extract_title(text),
            frequency=extract_frequency(text),
            description=extract_description(text),
            category=extract_category(text),
        )

    if _contains_any(lowered, TIP_KEYWORDS):
        return PlainReply(rng.choice(PRODUCTIVITY_TIPS))

    if _contains_any(lowered, HELP_KEYWORDS):
        return PlainReply(HELP_TEXT)

    return PlainReply(rng.choice(GENERIC_RESPONSES))
