"""Domain records - tasks, events, habits, users. No I/O."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


class Frequency(str, Enum):
    """How often a habit is meant to be performed."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass
class Task:
    """A to-do with a due instant."""

    id: str
    title: str
    due_date: datetime
    description: str | None = None
    completed: bool = False
    is_static: bool = False
    category: str | None = None

    def due_on(self, day: date) -> bool:
        return self.due_date.date() == day


@dataclass
class Event:
    """A calendar event spanning [start_date, end_date]."""

    id: str
    title: str
    start_date: datetime
    end_date: datetime
    description: str | None = None
    is_static: bool = False
    category: str | None = None
    completed: bool = False

    def duration_minutes(self) -> int:
        return int((self.end_date - self.start_date).total_seconds() / 60)


@dataclass
class Habit:
    """A recurring activity and the instants it was completed."""

    id: str
    title: str
    frequency: Frequency | str
    completed_dates: list[datetime] = field(default_factory=list)
    description: str | None = None
    category: str | None = None

    def completed_on(self, day: date) -> bool:
        """True if any completion falls on the given calendar day."""
        return any(d.date() == day for d in self.completed_dates)

    @property
    def frequency_label(self) -> str:
        value = self.frequency.value if isinstance(self.frequency, Frequency) else str(self.frequency)
        return value.capitalize()


@dataclass
class User:
    """The signed-in user. Lives in session state only."""

    id: str
    name: str
    email: str
