"""
Transaction lifecycle handling module.

Admin decisions on pending requests: pending -> approved | rejected.
Terminal states never change again. Approval applies the balance effect in
the same database transaction as the status change.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from taskminer.config.levels import level_for_deposit
from taskminer.models.enums import TransactionStatus, TransactionType
from taskminer.models.profile import Profile
from taskminer.models.transaction import Transaction
from taskminer.repositories.profile_repository import ProfileRepository
from taskminer.repositories.transaction_repository import TransactionRepository
from taskminer.services.balance.ledger import BalanceLedger
from taskminer.services.user.authorization import AuthContext, require_admin
from taskminer.utils.datetime_utils import utc_now
from taskminer.utils.db_decorators import transactional
from taskminer.utils.exceptions import (
    InconsistentStateError,
    NotFoundError,
    TransactionAlreadyProcessedError,
)


class TransactionLifecycleHandler:
    """Handles deposit and withdrawal approval and rejection."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize transaction lifecycle handler.

        Args:
            session: Database session
        """
        self.session = session
        self.profile_repo = ProfileRepository(session)
        self.transaction_repo = TransactionRepository(session)
        self.ledger = BalanceLedger(session)

    @transactional
    async def process_deposit(
        self, ctx: AuthContext, transaction_id: int, approved: bool
    ) -> Transaction:
        """
        Approve or reject a pending deposit (admin only).

        Approval credits total balance and locked deposit, starts the
        contract on the first deposit and raises the level to the highest
        one the locked deposit unlocks. The level is never lowered.

        Args:
            ctx: Caller identity
            transaction_id: Transaction ID
            approved: Approve (True) or reject (False)

        Returns:
            Processed transaction

        Raises:
            AuthorizationError: Caller is not an admin
            NotFoundError: No deposit with this ID
            TransactionAlreadyProcessedError: Deposit is not pending
        """
        await require_admin(self.session, ctx)
        transaction = await self._lock_pending(
            transaction_id, TransactionType.DEPOSIT
        )

        if approved:
            profile = await self._lock_owner(transaction)
            await self.ledger.credit_many(
                profile.id,
                {
                    "total_balance": transaction.amount,
                    "locked_deposit": transaction.amount,
                },
            )

            profile = await self.profile_repo.refresh_by_id(profile.id)
            if profile.contract_start_date is None:
                profile.contract_start_date = utc_now()

            unlocked_level = level_for_deposit(profile.locked_deposit)
            if unlocked_level > profile.level:
                logger.info(
                    "Level raised by deposit",
                    extra={
                        "user_id": profile.user_id,
                        "old_level": profile.level,
                        "new_level": unlocked_level,
                    },
                )
                profile.level = unlocked_level

        self._finish(transaction, ctx, approved)
        await self.session.flush()

        logger.info(
            "Deposit processed",
            extra={
                "transaction_id": transaction.id,
                "user_id": transaction.user_id,
                "amount": str(transaction.amount),
                "status": transaction.status,
                "admin_id": ctx.user_id,
            },
        )
        return transaction

    @transactional
    async def process_withdrawal(
        self, ctx: AuthContext, transaction_id: int, approved: bool
    ) -> Transaction:
        """
        Approve or reject a pending withdrawal (admin only).

        Approval is a conditional debit: if the balance no longer covers
        the amount, nothing changes and the withdrawal stays pending.

        Args:
            ctx: Caller identity
            transaction_id: Transaction ID
            approved: Approve (True) or reject (False)

        Returns:
            Processed transaction

        Raises:
            AuthorizationError: Caller is not an admin
            NotFoundError: No withdrawal with this ID
            TransactionAlreadyProcessedError: Withdrawal is not pending
            InsufficientBalanceError: Balance no longer covers the amount
        """
        await require_admin(self.session, ctx)
        transaction = await self._lock_pending(
            transaction_id, TransactionType.WITHDRAWAL
        )

        if approved:
            profile = await self._lock_owner(transaction)
            await self.ledger.debit_many(
                profile.id,
                {
                    "available_balance": transaction.amount,
                    "total_balance": transaction.amount,
                },
            )
            await self.ledger.credit(
                profile.id, "total_withdrawal", transaction.amount
            )

        self._finish(transaction, ctx, approved)
        await self.session.flush()

        logger.info(
            "Withdrawal processed",
            extra={
                "transaction_id": transaction.id,
                "user_id": transaction.user_id,
                "amount": str(transaction.amount),
                "status": transaction.status,
                "admin_id": ctx.user_id,
            },
        )
        return transaction

    async def _lock_pending(
        self, transaction_id: int, type: TransactionType
    ) -> Transaction:
        transaction = await self.transaction_repo.lock_by_id(transaction_id)
        if not transaction or transaction.type != type.value:
            raise NotFoundError(
                "Transaction not found",
                transaction_id=transaction_id,
                type=type.value,
            )
        if not transaction.is_pending:
            logger.warning(
                "Transaction already processed",
                extra={
                    "transaction_id": transaction_id,
                    "status": transaction.status,
                },
            )
            raise TransactionAlreadyProcessedError(
                transaction_id=transaction_id, status=transaction.status
            )
        return transaction

    async def _lock_owner(self, transaction: Transaction) -> Profile:
        profile = await self.profile_repo.lock_by_user_id(transaction.user_id)
        if not profile:
            raise InconsistentStateError(
                transaction_id=transaction.id, user_id=transaction.user_id
            )
        return profile

    @staticmethod
    def _finish(
        transaction: Transaction, ctx: AuthContext, approved: bool
    ) -> None:
        transaction.status = (
            TransactionStatus.APPROVED.value
            if approved
            else TransactionStatus.REJECTED.value
        )
        transaction.processed_at = utc_now()
        transaction.processed_by = ctx.user_id
