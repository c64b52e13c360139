"""Habit recurrence - decide whether a habit is due on a day.

Pure functions - no I/O, no wall clock. Every caller passes the reference
instant explicitly.
"""

from datetime import date, datetime, time, timedelta
from typing import Iterable

from .models import Frequency

# Minimum whole days since the last completion before a habit is due again
THRESHOLD_DAYS = {
    Frequency.DAILY: 1,
    Frequency.WEEKLY: 7,
    Frequency.MONTHLY: 30,
}

ONE_DAY = timedelta(days=1)


def same_day(a: datetime, b: datetime | date) -> bool:
    """Compare calendar days, ignoring time of day."""
    other = b.date() if isinstance(b, datetime) else b
    return a.date() == other


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """First and last instant of a calendar day."""
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


def last_completion_before(completed_dates: Iterable[datetime], day: date) -> datetime | None:
    """
    Most recent completion on a calendar day strictly before `day`.

    Completions on the day itself or later are ignored, so completing a
    habit never changes its due-ness for that day or any earlier one.
    """
    earlier = [d for d in completed_dates if d.date() < day]
    if not earlier:
        return None
    return max(earlier)


def parse_frequency(frequency: Frequency | str) -> Frequency | None:
    """Normalize a frequency value. Returns None if unrecognized."""
    try:
        return Frequency(frequency)
    except ValueError:
        return None


def is_due(
    frequency: Frequency | str,
    completed_dates: Iterable[datetime],
    reference: datetime,
    unknown_due: bool = True,
) -> bool:
    """
    Is a habit due at `reference`?

    The elapsed time is the raw difference between `reference` and the last
    earlier-day completion, floored to whole days. That makes the boundary
    sensitive to time of day: a daily habit done yesterday at 18:00 is not
    due yet at 09:00 today.

    Args:
        frequency: daily, weekly or monthly
        completed_dates: completion instants, any order
        reference: the instant to evaluate at
        unknown_due: result for an unrecognized frequency
    """
    last = last_completion_before(completed_dates, reference.date())
    if last is None:
        return True

    diff_days = (reference - last) // ONE_DAY

    freq = parse_frequency(frequency)
    if freq is None:
        return unknown_due
    return diff_days >= THRESHOLD_DAYS[freq]
