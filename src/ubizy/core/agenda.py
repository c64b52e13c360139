"""Pure agenda logic - which items belong to a day, urgency, ordering."""

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from .models import Event, Habit, Task
from .recurrence import day_bounds, is_due

URGENT = "urgent"
SOON = "soon"
LATER = "later"


@dataclass
class Agenda:
    """Tasks, events and habits selected for a view."""

    tasks: list[Task] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)
    habits: list[Habit] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.tasks) + len(self.events) + len(self.habits)

    def is_empty(self) -> bool:
        return len(self) == 0


@dataclass
class CategoryStats:
    """Item counts for one category."""

    category: str
    tasks: int = 0
    events: int = 0
    habits: int = 0

    @property
    def total(self) -> int:
        return self.tasks + self.events + self.habits


def task_on_day(task: Task, day: date) -> bool:
    """Task is due on the calendar day."""
    return task.due_date.date() == day


def event_on_day(event: Event, day: date) -> bool:
    """
    Event touches the calendar day.

    Either it starts on the day, ends on the day, or strictly spans the
    whole day (starts before it and ends after it).
    """
    day_start, day_end = day_bounds(day)
    return (
        event.start_date.date() == day
        or event.end_date.date() == day
        or (event.start_date < day_start and event.end_date > day_end)
    )


def select_day(
    tasks: list[Task],
    events: list[Event],
    habits: list[Habit],
    reference: datetime,
    unknown_due: bool = True,
) -> Agenda:
    """
    Select the items relevant to `reference`'s calendar day.

    Pure function - no I/O. Habits already completed on the day stay in the
    result; their due-ness only looks at earlier completions.
    """
    day = reference.date()
    return Agenda(
        tasks=[t for t in tasks if task_on_day(t, day)],
        events=[e for e in events if event_on_day(e, day)],
        habits=[h for h in habits if is_due(h.frequency, h.completed_dates, reference, unknown_due)],
    )


def urgency_level(
    when: datetime,
    today: date,
    urgent_days: int = 1,
    soon_days: int = 7,
) -> str:
    """
    Urgency tier for an upcoming instant.

    Whole days from the start of today, truncated toward zero:
    <= urgent_days is urgent, <= soon_days is soon, anything later is later.
    """
    day_start, _ = day_bounds(today)
    days_until = int((when - day_start) / timedelta(days=1))
    if days_until <= urgent_days:
        return URGENT
    if days_until <= soon_days:
        return SOON
    return LATER


def sort_tasks(tasks: list[Task]) -> list[Task]:
    """Open tasks first, by due date. Completed tasks keep their order."""
    open_tasks = sorted((t for t in tasks if not t.completed), key=lambda t: t.due_date)
    return open_tasks + [t for t in tasks if t.completed]


def sort_events(events: list[Event]) -> list[Event]:
    """Open events first, by start. Completed events keep their order."""
    open_events = sorted((e for e in events if not e.completed), key=lambda e: e.start_date)
    return open_events + [e for e in events if e.completed]


def sort_habits(habits: list[Habit], day: date) -> list[Habit]:
    """Habits not yet done on `day` first. Stable otherwise."""
    return sorted(habits, key=lambda h: h.completed_on(day))


def collect_categories(
    tasks: list[Task],
    events: list[Event],
    habits: list[Habit],
) -> list[str]:
    """Distinct non-empty categories, in first-seen order."""
    seen: dict[str, None] = {}
    for item in [*tasks, *events, *habits]:
        if item.category:
            seen.setdefault(item.category, None)
    return list(seen)


def category_stats(
    category: str,
    tasks: list[Task],
    events: list[Event],
    habits: list[Habit],
) -> CategoryStats:
    """Count items of each kind in a category."""
    return CategoryStats(
        category=category,
        tasks=sum(1 for t in tasks if t.category == category),
        events=sum(1 for e in events if e.category == category),
        habits=sum(1 for h in habits if h.category == category),
    )


def month_grid(year: int, month: int) -> list[date]:
    """
    Days shown on a month calendar page.

    Weeks start on Sunday; leading and trailing days from the neighbouring
    months pad the grid to whole weeks.
    """
    cal = calendar.Calendar(firstweekday=calendar.SUNDAY)
    return list(cal.itermonthdates(year, month))
