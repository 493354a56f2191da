"""
Balance ledger.

All balance mutations go through atomic SQL-side arithmetic
(UPDATE ... SET field = field + :amount) so concurrent writers never lose
updates. The ledger never commits; the calling service owns the transaction.
"""

from dataclasses import dataclass
from decimal import Decimal

from loguru import logger
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from taskminer.models.profile import MONEY_FIELDS, Profile
from taskminer.repositories.profile_repository import ProfileRepository
from taskminer.utils.exceptions import (
    InconsistentStateError,
    InsufficientBalanceError,
    NotFoundError,
    ValidationError,
)


@dataclass(frozen=True)
class BalanceSnapshot:
    """Balances of a profile at read time."""

    profile_id: int
    total_balance: Decimal
    available_balance: Decimal
    locked_deposit: Decimal
    today_commission: Decimal
    total_commission: Decimal
    total_revenue: Decimal
    total_withdrawal: Decimal
    level1_commission: Decimal
    level2_commission: Decimal
    level3_commission: Decimal

    @classmethod
    def from_profile(cls, profile: Profile) -> "BalanceSnapshot":
        """Build snapshot from a loaded profile."""
        return cls(
            profile_id=profile.id,
            **{field: getattr(profile, field) for field in MONEY_FIELDS},
        )


class BalanceLedger:
    """Atomic credit/debit operations on profile balances."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize balance ledger.

        Args:
            session: Async database session
        """
        self.session = session
        self.profile_repo = ProfileRepository(session)

    @staticmethod
    def _check_amounts(amounts: dict[str, Decimal]) -> None:
        if not amounts:
            raise ValidationError("No balance fields given")
        for field, amount in amounts.items():
            if field not in MONEY_FIELDS:
                raise ValidationError(f"Unknown balance field: {field}")
            if not isinstance(amount, Decimal) or not amount.is_finite():
                raise ValidationError(f"Invalid amount for {field}")
            if amount <= 0:
                raise ValidationError(f"Amount for {field} must be positive")

    async def credit(
        self, profile_id: int, field: str, amount: Decimal
    ) -> None:
        """
        Credit a single balance field.

        Args:
            profile_id: Profile ID
            field: Balance field name
            amount: Positive amount to add
        """
        await self.credit_many(profile_id, {field: amount})

    async def credit_many(
        self, profile_id: int, amounts: dict[str, Decimal]
    ) -> None:
        """
        Credit several balance fields in one atomic statement.

        Args:
            profile_id: Profile ID
            amounts: Mapping of field name to positive amount

        Raises:
            ValidationError: Unknown field or non-positive amount
            InconsistentStateError: Profile row vanished
        """
        self._check_amounts(amounts)

        stmt = (
            update(Profile)
            .where(Profile.id == profile_id)
            .values({
                field: getattr(Profile, field) + amount
                for field, amount in amounts.items()
            })
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)

        if result.rowcount == 0:
            raise InconsistentStateError(
                profile_id=profile_id, operation="credit"
            )

        logger.debug(
            "Balance credited",
            extra={
                "profile_id": profile_id,
                "amounts": {k: str(v) for k, v in amounts.items()},
            },
        )

    async def debit(
        self, profile_id: int, field: str, amount: Decimal
    ) -> None:
        """
        Debit a single balance field.

        Args:
            profile_id: Profile ID
            field: Balance field name
            amount: Positive amount to subtract
        """
        await self.debit_many(profile_id, {field: amount})

    async def debit_many(
        self, profile_id: int, amounts: dict[str, Decimal]
    ) -> None:
        """
        Debit several balance fields in one conditional statement.

        The update only applies if every field stays non-negative.

        Args:
            profile_id: Profile ID
            amounts: Mapping of field name to positive amount

        Raises:
            ValidationError: Unknown field or non-positive amount
            NotFoundError: Profile does not exist
            InsufficientBalanceError: A field would become negative
        """
        self._check_amounts(amounts)

        conditions = [
            getattr(Profile, field) >= amount
            for field, amount in amounts.items()
        ]
        stmt = (
            update(Profile)
            .where(Profile.id == profile_id, *conditions)
            .values({
                field: getattr(Profile, field) - amount
                for field, amount in amounts.items()
            })
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)

        if result.rowcount == 0:
            if not await self.profile_repo.exists(id=profile_id):
                raise NotFoundError("Profile not found", profile_id=profile_id)
            logger.warning(
                "Insufficient balance for debit",
                extra={
                    "profile_id": profile_id,
                    "requested": {k: str(v) for k, v in amounts.items()},
                },
            )
            raise InsufficientBalanceError(
                profile_id=profile_id,
                requested={k: str(v) for k, v in amounts.items()},
            )

        logger.info(
            "Balance debited",
            extra={
                "profile_id": profile_id,
                "amounts": {k: str(v) for k, v in amounts.items()},
            },
        )

    async def get_balances(self, profile_id: int) -> BalanceSnapshot:
        """
        Read balances consistent with the latest committed write.

        Args:
            profile_id: Profile ID

        Returns:
            Balance snapshot

        Raises:
            NotFoundError: Profile does not exist
        """
        profile = await self.profile_repo.refresh_by_id(profile_id)
        if not profile:
            raise NotFoundError("Profile not found", profile_id=profile_id)
        return BalanceSnapshot.from_profile(profile)

    async def reset_today_commission(self) -> int:
        """
        Zero today's commission for every profile (daily rollover).

        Returns:
            Number of profiles reset
        """
        stmt = (
            update(Profile)
            .where(Profile.today_commission > 0)
            .values(today_commission=Decimal("0"))
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)

        logger.info(
            "Today's commission reset",
            extra={"profiles_reset": result.rowcount},
        )
        return result.rowcount
