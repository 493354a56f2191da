"""
Profile model.

Represents a registered user: level, VIP flag, invite tree edge and balances.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskminer.models.base import Base
from taskminer.models.types import MoneyType

# Monetary fields that the balance ledger is allowed to touch
MONEY_FIELDS = (
    "total_balance",
    "available_balance",
    "locked_deposit",
    "today_commission",
    "total_commission",
    "total_revenue",
    "total_withdrawal",
    "level1_commission",
    "level2_commission",
    "level3_commission",
)


class Profile(Base):
    """Profile model - one row per registered user, never deleted."""

    __tablename__ = "profiles"
    __table_args__ = (
        *(
            CheckConstraint(
                f"{field} >= 0", name=f"check_profile_{field}_non_negative"
            )
            for field in MONEY_FIELDS
        ),
        CheckConstraint(
            "total_balance >= available_balance",
            name="check_profile_total_covers_available",
        ),
        CheckConstraint("level >= 0", name="check_profile_level_non_negative"),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # External auth identity
    user_id: Mapped[str] = mapped_column(
        String(64), unique=True, index=True, nullable=False
    )
    email: Mapped[str | None] = mapped_column(
        String(255), nullable=True, index=True
    )

    # Level
    level: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_vip: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )

    # Referral
    invite_code: Mapped[str] = mapped_column(
        String(20), unique=True, index=True, nullable=False
    )
    invited_by: Mapped[int | None] = mapped_column(
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Contract (anchors the 1-year countdown)
    contract_start_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Balances
    total_balance: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    available_balance: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    locked_deposit: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    today_commission: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    total_commission: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    total_revenue: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    total_withdrawal: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )

    # Per-tier commission accumulators
    level1_commission: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    level2_commission: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    level3_commission: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False
    )

    # Relationships
    inviter: Mapped[Optional["Profile"]] = relationship(
        "Profile",
        remote_side=[id],
        back_populates="invitees",
        foreign_keys=[invited_by],
    )
    invitees: Mapped[list["Profile"]] = relationship(
        "Profile",
        back_populates="inviter",
        foreign_keys=[invited_by],
    )

    @property
    def level_name(self) -> str:
        """Display name of the level (LV2, sLV2 ...)."""
        prefix = "sLV" if self.is_vip else "LV"
        return f"{prefix}{self.level}"

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Profile(id={self.id}, user_id={self.user_id}, "
            f"level={self.level_name})>"
        )
