"""Item store - the single owner of task, event and habit state.

All mutations are synchronous and run to completion. Unknown ids are
ignored: completing or deleting something that is not there is a no-op.
"""

import logging
import uuid
from dataclasses import replace
from datetime import date, datetime
from typing import Callable

from .adapters.memory import InMemoryCollection
from .core.agenda import (
    Agenda,
    CategoryStats,
    category_stats,
    collect_categories,
    month_grid,
    select_day,
    sort_events,
    sort_habits,
    sort_tasks,
)
from .core.models import Event, Frequency, Habit, Task
from .ports.item_collection import ItemCollection

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


class ItemStore:
    """
    Tasks, events and habits for one session.

    Backing collections and the clock are injected so the store can be
    swapped onto other storage and tested without the wall clock.
    """

    def __init__(
        self,
        tasks: ItemCollection[Task] | None = None,
        events: ItemCollection[Event] | None = None,
        habits: ItemCollection[Habit] | None = None,
        clock: Callable[[], datetime] | None = None,
        unknown_frequency_due: bool = True,
    ):
        self._tasks = tasks if tasks is not None else InMemoryCollection()
        self._events = events if events is not None else InMemoryCollection()
        self._habits = habits if habits is not None else InMemoryCollection()
        self._clock = clock or datetime.now
        self.unknown_frequency_due = unknown_frequency_due

    def now(self) -> datetime:
        return self._clock()

    # ============== Reads ==============

    def tasks(self) -> list[Task]:
        return self._tasks.values()

    def events(self) -> list[Event]:
        return self._events.values()

    def habits(self) -> list[Habit]:
        return self._habits.values()

    def get_task(self, task_id: str) -> Task | None:
        return self._tasks.get(task_id)

    def get_event(self, event_id: str) -> Event | None:
        return self._events.get(event_id)

    def get_habit(self, habit_id: str) -> Habit | None:
        return self._habits.get(habit_id)

    # ============== Creation ==============

    def add_task(
        self,
        title: str,
        due_date: datetime,
        description: str | None = None,
        completed: bool = False,
        is_static: bool = False,
        category: str | None = None,
    ) -> None:
        task = Task(
            id=_new_id(),
            title=title,
            due_date=due_date,
            description=description,
            completed=completed,
            is_static=is_static,
            category=category,
        )
        self._tasks.put(task)
        logger.debug(f"Added task {task.id}: {title!r}")

    def add_event(
        self,
        title: str,
        start_date: datetime,
        end_date: datetime,
        description: str | None = None,
        is_static: bool = False,
        category: str | None = None,
    ) -> None:
        event = Event(
            id=_new_id(),
            title=title,
            start_date=start_date,
            end_date=end_date,
            description=description,
            is_static=is_static,
            category=category,
            completed=False,
        )
        self._events.put(event)
        logger.debug(f"Added event {event.id}: {title!r}")

    def add_habit(
        self,
        title: str,
        frequency: Frequency | str,
        description: str | None = None,
        category: str | None = None,
    ) -> None:
        habit = Habit(
            id=_new_id(),
            title=title,
            frequency=frequency,
            completed_dates=[],
            description=description,
            category=category,
        )
        self._habits.put(habit)
        logger.debug(f"Added habit {habit.id}: {title!r}")

    # ============== Completion ==============

    def _set_task_completed(self, task_id: str, completed: bool) -> None:
        task = self._tasks.get(task_id)
        if task is None:
            logger.debug(f"No task {task_id}, ignoring")
            return
        self._tasks.put(replace(task, completed=completed))

    def _set_event_completed(self, event_id: str, completed: bool) -> None:
        event = self._events.get(event_id)
        if event is None:
            logger.debug(f"No event {event_id}, ignoring")
            return
        self._events.put(replace(event, completed=completed))

    def complete_task(self, task_id: str) -> None:
        self._set_task_completed(task_id, True)

    def uncomplete_task(self, task_id: str) -> None:
        self._set_task_completed(task_id, False)

    def complete_event(self, event_id: str) -> None:
        self._set_event_completed(event_id, True)

    def uncomplete_event(self, event_id: str) -> None:
        self._set_event_completed(event_id, False)

    def complete_habit(self, habit_id: str, when: datetime) -> None:
        """Record a completion. At most one per calendar day of `when`."""
        habit = self._habits.get(habit_id)
        if habit is None:
            logger.debug(f"No habit {habit_id}, ignoring")
            return
        if habit.completed_on(when.date()):
            return
        self._habits.put(replace(habit, completed_dates=[*habit.completed_dates, when]))

    def uncomplete_habit(self, habit_id: str) -> None:
        """Drop today's completions. Always today, whatever day was completed."""
        habit = self._habits.get(habit_id)
        if habit is None:
            logger.debug(f"No habit {habit_id}, ignoring")
            return
        today = self.now().date()
        kept = [d for d in habit.completed_dates if d.date() != today]
        self._habits.put(replace(habit, completed_dates=kept))

    # ============== Deletion ==============

    def delete_task(self, task_id: str) -> None:
        if not self._tasks.remove(task_id):
            logger.debug(f"No task {task_id} to delete")

    def delete_event(self, event_id: str) -> None:
        if not self._events.remove(event_id):
            logger.debug(f"No event {event_id} to delete")

    def delete_habit(self, habit_id: str) -> None:
        if not self._habits.remove(habit_id):
            logger.debug(f"No habit {habit_id} to delete")

    # ============== Queries ==============

    def _select(self, reference: datetime) -> Agenda:
        return select_day(
            self.tasks(),
            self.events(),
            self.habits(),
            reference,
            unknown_due=self.unknown_frequency_due,
        )

    def get_today_items(self) -> Agenda:
        """Tasks due today, events touching today, habits due now."""
        return self._select(self.now())

    def get_items_for_day(self, day: date) -> Agenda:
        """
        Same selection as get_today_items for any calendar day.

        Habit due-ness is evaluated at the current time of day on that day.
        """
        return self._select(datetime.combine(day, self.now().time()))

    def get_month_items(self, year: int, month: int) -> dict[date, Agenda]:
        """Agenda for every cell of a month calendar page."""
        return {day: self.get_items_for_day(day) for day in month_grid(year, month)}

    def get_all_items(self) -> Agenda:
        """Everything, ordered for the full list view."""
        return Agenda(
            tasks=sort_tasks(self.tasks()),
            events=sort_events(self.events()),
            habits=sort_habits(self.habits(), self.now().date()),
        )

    def categories(self) -> list[str]:
        return collect_categories(self.tasks(), self.events(), self.habits())

    def category_stats(self, category: str) -> CategoryStats:
        return category_stats(category, self.tasks(), self.events(), self.habits())
