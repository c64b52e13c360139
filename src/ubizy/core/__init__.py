"""Functional core - pure business logic with no I/O."""

from .models import Event, Frequency, Habit, Task, User
from .recurrence import is_due, last_completion_before
from .agenda import Agenda, CategoryStats, select_day, urgency_level
from .intents import (
    EventSuggestion,
    HabitSuggestion,
    PlainReply,
    TaskSuggestion,
    parse_message,
)

__all__ = [
    # Models
    "Task",
    "Event",
    "Habit",
    "User",
    "Frequency",
    # Recurrence
    "is_due",
    "last_completion_before",
    # Agenda
    "Agenda",
    "CategoryStats",
    "select_day",
    "urgency_level",
    # Intents
    "TaskSuggestion",
    "EventSuggestion",
    "HabitSuggestion",
    "PlainReply",
    "parse_message",
]
