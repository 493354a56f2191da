"""
User role model.

Authorization facts; not mutated by ledger logic.
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from taskminer.models.base import Base
from taskminer.models.enums import AppRole


class UserRole(Base):
    """Role granted to a user."""

    __tablename__ = "user_roles"
    __table_args__ = (
        UniqueConstraint("user_id", "role", name="uq_user_role"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[str] = mapped_column(
        String(64), index=True, nullable=False
    )
    role: Mapped[str] = mapped_column(
        String(20), default=AppRole.USER.value, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<UserRole(user_id={self.user_id}, role={self.role})>"
