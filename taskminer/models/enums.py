"""
Enumerations shared by models and services.
"""

from enum import StrEnum


class TransactionType(StrEnum):
    """Transaction type."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class TransactionStatus(StrEnum):
    """
    Transaction status.

    PENDING is the only initial state, APPROVED and REJECTED are terminal.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AppRole(StrEnum):
    """Application role."""

    ADMIN = "admin"
    USER = "user"
