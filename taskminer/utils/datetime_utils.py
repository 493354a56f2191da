"""
Datetime utilities.

Provides timezone-aware datetime functions.
"""

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Returns:
        Current datetime in UTC with timezone awareness
    """
    return datetime.now(UTC)


def task_today(now: datetime | None = None) -> date:
    """
    Get the current task day.

    Task quotas refresh at midnight in the configured task timezone,
    so the task day can differ from the UTC calendar day.

    Args:
        now: Moment to classify (default: now)

    Returns:
        Calendar day in the task timezone
    """
    from taskminer.config.settings import settings

    if now is None:
        now = utc_now()
    elif now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return now.astimezone(settings.task_zone).date()


def as_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to aware UTC.

    Naive values (e.g. read back from SQLite) are treated as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
