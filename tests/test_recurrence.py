"""Tests for habit recurrence logic."""

from datetime import date, datetime, timedelta

import pytest

from ubizy.core.models import Frequency
from ubizy.core.recurrence import (
    day_bounds,
    is_due,
    last_completion_before,
    parse_frequency,
    same_day,
)


@pytest.fixture
def now():
    return datetime(2025, 1, 15, 10, 0)


class TestHelpers:
    def test_same_day_ignores_time(self, now):
        assert same_day(now, now.replace(hour=23, minute=59)) is True
        assert same_day(now, now - timedelta(days=1)) is False

    def test_same_day_accepts_date(self, now):
        assert same_day(now, date(2025, 1, 15)) is True

    def test_day_bounds(self):
        start, end = day_bounds(date(2025, 1, 15))
        assert start == datetime(2025, 1, 15, 0, 0)
        assert end.date() == date(2025, 1, 15)
        assert end + timedelta(microseconds=1) == datetime(2025, 1, 16, 0, 0)

    def test_last_completion_excludes_the_day(self, now):
        completions = [now - timedelta(days=3), now - timedelta(days=1), now]
        assert last_completion_before(completions, now.date()) == now - timedelta(days=1)

    def test_last_completion_ignores_insertion_order(self, now):
        completions = [now - timedelta(days=1), now - timedelta(days=5)]
        assert last_completion_before(completions, now.date()) == now - timedelta(days=1)

    def test_last_completion_ignores_later_days(self, now):
        completions = [now - timedelta(days=2), now + timedelta(days=2)]
        assert last_completion_before(completions, now.date()) == now - timedelta(days=2)

    def test_last_completion_none(self, now):
        assert last_completion_before([], now.date()) is None
        assert last_completion_before([now], now.date()) is None

    def test_parse_frequency(self):
        assert parse_frequency("weekly") == Frequency.WEEKLY
        assert parse_frequency(Frequency.MONTHLY) == Frequency.MONTHLY
        assert parse_frequency("yearly") is None


class TestIsDue:
    @pytest.mark.parametrize("frequency", ["daily", "weekly", "monthly", "yearly"])
    def test_never_completed_is_due(self, frequency, now):
        assert is_due(frequency, [], now) is True

    def test_only_completed_today_is_due(self, now):
        """Today's own completion never changes today's due-ness."""
        assert is_due(Frequency.WEEKLY, [now.replace(hour=8)], now) is True

    def test_daily_next_day_same_time(self, now):
        done = now - timedelta(days=1)
        assert is_due(Frequency.DAILY, [done], now) is True

    def test_daily_is_time_of_day_sensitive(self, now):
        """Yesterday evening to this morning is less than a whole day."""
        done = datetime(2025, 1, 14, 18, 0)
        assert is_due(Frequency.DAILY, [done], now) is False
        assert is_due(Frequency.DAILY, [done], datetime(2025, 1, 15, 18, 0)) is True

    def test_weekly_not_due_within_six_days(self, now):
        done = now - timedelta(days=7)
        for offset in range(1, 7):
            assert is_due(Frequency.WEEKLY, [done], done + timedelta(days=offset)) is False

    def test_weekly_due_at_seven_days(self, now):
        done = now - timedelta(days=7)
        assert is_due(Frequency.WEEKLY, [done], done + timedelta(days=7)) is True
        assert is_due(Frequency.WEEKLY, [done], done + timedelta(days=7, milliseconds=-1)) is False

    def test_monthly_threshold_is_thirty_days(self, now):
        done = now - timedelta(days=30)
        assert is_due(Frequency.MONTHLY, [done], now) is True
        assert is_due(Frequency.MONTHLY, [done], now - timedelta(days=1)) is False

    def test_uses_most_recent_completion(self, now):
        completions = [now - timedelta(days=10), now - timedelta(days=2)]
        assert is_due(Frequency.WEEKLY, completions, now) is False

    def test_plain_string_frequency(self, now):
        assert is_due("daily", [now - timedelta(days=2)], now) is True

    def test_unknown_frequency_uses_flag(self, now):
        done = [now - timedelta(days=2)]
        assert is_due("yearly", done, now) is True
        assert is_due("yearly", done, now, unknown_due=False) is False

    def test_later_completion_does_not_hide_past_day(self):
        completions = [datetime(2025, 10, 15, 9, 0), datetime(2025, 10, 19, 9, 0)]
        assert is_due(Frequency.DAILY, completions, datetime(2025, 10, 17, 10, 0)) is True

    def test_only_later_completions_is_due(self, now):
        assert is_due(Frequency.MONTHLY, [now + timedelta(days=3)], now) is True
