"""
Unit tests for task day resolution.

Task quotas refresh at midnight British time.
"""

from datetime import UTC, date, datetime

from taskminer.utils.datetime_utils import as_utc, task_today


class TestTaskToday:
    """Test task day boundaries."""

    def test_summer_time_rolls_over_before_utc_midnight(self):
        """Test 23:30 UTC in July is already the next day in London."""
        assert task_today(datetime(2026, 7, 1, 23, 30, tzinfo=UTC)) == date(
            2026, 7, 2
        )

    def test_winter_time_matches_utc(self):
        """Test 23:30 UTC in December is the same day in London."""
        assert task_today(datetime(2026, 12, 1, 23, 30, tzinfo=UTC)) == date(
            2026, 12, 1
        )

    def test_naive_is_utc(self):
        """Test naive datetimes are read as UTC."""
        assert task_today(datetime(2026, 7, 1, 23, 30)) == date(2026, 7, 2)


class TestAsUtc:
    """Test UTC normalization."""

    def test_naive(self):
        """Test naive value gets UTC tzinfo."""
        assert as_utc(datetime(2026, 1, 1)).tzinfo == UTC

    def test_aware(self):
        """Test aware value is converted."""
        value = datetime(2026, 1, 1, 12, tzinfo=UTC)
        assert as_utc(value) == value
