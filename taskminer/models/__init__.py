"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from taskminer.models.base import Base
from taskminer.models.enums import AppRole, TransactionStatus, TransactionType
from taskminer.models.profile import MONEY_FIELDS, Profile
from taskminer.models.task_completion import TaskCompletion
from taskminer.models.transaction import Transaction
from taskminer.models.user_role import UserRole

__all__ = [
    # Base
    "Base",
    # Enums
    "AppRole",
    "TransactionStatus",
    "TransactionType",
    # Core Models
    "Profile",
    "MONEY_FIELDS",
    "TaskCompletion",
    "Transaction",
    "UserRole",
]
