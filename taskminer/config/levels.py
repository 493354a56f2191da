"""
Single source of truth for level configuration.

Regular levels (LV0-LV4) and VIP levels (sLV0-sLV4) define the deposit
requirement, the weekday/weekend task quota and the reward per task.
Daily and weekend income are always derived from quota * reward.
"""

from datetime import date
from decimal import Decimal
from typing import NamedTuple

from taskminer.utils.datetime_utils import task_today


class LevelConfig(NamedTuple):
    """Level configuration."""

    level: int
    name: str
    is_vip: bool
    deposit: Decimal  # USDT required to activate
    weekday_tasks: int
    weekend_tasks: int
    reward_per_task: Decimal
    vip_required_team: int  # LV1+ direct invitees needed for VIP

    @property
    def daily_income(self) -> Decimal:
        """Income for a fully completed weekday."""
        return self.weekday_tasks * self.reward_per_task

    @property
    def weekend_income(self) -> Decimal:
        """Income for a fully completed weekend day."""
        return self.weekend_tasks * self.reward_per_task


REGULAR_LEVELS: dict[int, LevelConfig] = {
    0: LevelConfig(0, "LV0", False, Decimal("0"), 4, 2, Decimal("1"), 1),
    1: LevelConfig(1, "LV1", False, Decimal("200"), 12, 6, Decimal("0.5"), 2),
    2: LevelConfig(2, "LV2", False, Decimal("680"), 20, 10, Decimal("1"), 3),
    3: LevelConfig(3, "LV3", False, Decimal("1560"), 22, 11, Decimal("2"), 4),
    4: LevelConfig(4, "LV4", False, Decimal("3600"), 26, 13, Decimal("4"), 5),
}

# VIP tiers are already unlocked, so they carry no team requirement
VIP_LEVELS: dict[int, LevelConfig] = {
    0: LevelConfig(0, "sLV0 (VIP)", True, Decimal("0"), 5, 3, Decimal("0.4"), 0),
    1: LevelConfig(1, "sLV1 (VIP)", True, Decimal("200"), 16, 8, Decimal("0.5"), 0),
    2: LevelConfig(2, "sLV2 (VIP)", True, Decimal("680"), 28, 14, Decimal("1"), 0),
    3: LevelConfig(3, "sLV3 (VIP)", True, Decimal("1560"), 32, 16, Decimal("2"), 0),
    4: LevelConfig(4, "sLV4 (VIP)", True, Decimal("3600"), 36, 18, Decimal("4"), 0),
}

MAX_LEVEL = max(REGULAR_LEVELS)


def is_weekend(day: date | None = None) -> bool:
    """
    Check whether a task day is a weekend day.

    Args:
        day: Task day (default: current task day)

    Returns:
        True for Saturday and Sunday
    """
    if day is None:
        day = task_today()
    return day.weekday() >= 5


def get_level_config(level: int, is_vip: bool) -> LevelConfig:
    """
    Get configuration for a level.

    Unknown levels fall back to the regular LV0 configuration.

    Args:
        level: Level number (0-4)
        is_vip: Use the VIP table

    Returns:
        Level configuration
    """
    levels = VIP_LEVELS if is_vip else REGULAR_LEVELS
    return levels.get(level, REGULAR_LEVELS[0])


def get_max_tasks(
    level: int, is_vip: bool, day: date | None = None
) -> int:
    """Get the task quota for a level on a given day."""
    config = get_level_config(level, is_vip)
    return config.weekend_tasks if is_weekend(day) else config.weekday_tasks


def get_reward_per_task(level: int, is_vip: bool) -> Decimal:
    """Get the reward for one completed task."""
    return get_level_config(level, is_vip).reward_per_task


def get_daily_income(
    level: int, is_vip: bool, day: date | None = None
) -> Decimal:
    """Get the maximum income for a level on a given day."""
    config = get_level_config(level, is_vip)
    return config.weekend_income if is_weekend(day) else config.daily_income


def level_for_deposit(amount: Decimal) -> int:
    """
    Get the highest regular level unlocked by a deposit amount.

    Args:
        amount: Total locked deposit

    Returns:
        Level number (0 if no paid level is reached)
    """
    unlocked = [
        config.level
        for config in REGULAR_LEVELS.values()
        if config.deposit <= amount
    ]
    return max(unlocked, default=0)


def next_level_config(level: int, is_vip: bool) -> LevelConfig | None:
    """
    Get the configuration of the next level to upgrade to.

    Returns:
        Next level configuration or None at the top level
    """
    if level >= MAX_LEVEL:
        return None
    levels = VIP_LEVELS if is_vip else REGULAR_LEVELS
    return levels.get(level + 1)
