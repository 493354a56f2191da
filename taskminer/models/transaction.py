"""
Transaction model.

Deposit and withdrawal requests with a pending -> approved | rejected lifecycle.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from taskminer.models.base import Base
from taskminer.models.enums import TransactionStatus
from taskminer.models.types import MoneyType


class Transaction(Base):
    """Deposit or withdrawal request."""

    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("amount > 0", name="check_transaction_amount_positive"),
        CheckConstraint(
            "type IN ('deposit', 'withdrawal')",
            name="check_transaction_type",
        ),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="check_transaction_status",
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("profiles.user_id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    wallet_address: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        default=TransactionStatus.PENDING.value,
        nullable=False,
        index=True,
    )

    # Set only on the transition out of pending
    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    processed_by: Mapped[str | None] = mapped_column(
        String(64), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
        index=True,
    )

    @property
    def is_pending(self) -> bool:
        """Check if transaction still awaits a decision."""
        return self.status == TransactionStatus.PENDING.value

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Transaction(id={self.id}, type={self.type}, "
            f"amount={self.amount}, status={self.status})>"
        )
