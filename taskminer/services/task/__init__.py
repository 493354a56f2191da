"""
Task services package.

- completion_service: daily task quota, rewards and commission trigger
"""

from taskminer.services.task.completion_service import (
    TaskCompletionResult,
    TaskCompletionService,
    TaskProgress,
)


__all__ = [
    "TaskCompletionResult",
    "TaskCompletionService",
    "TaskProgress",
]
