"""
Transaction repository.

Data access layer for Transaction model.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskminer.models.transaction import Transaction
from taskminer.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    """Transaction repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize transaction repository."""
        super().__init__(Transaction, session)

    async def get_by_user(
        self,
        user_id: str,
        type: str | None = None,
        status: str | None = None,
    ) -> list[Transaction]:
        """
        Get transactions of a user, newest first.

        Args:
            user_id: Auth user ID
            type: Optional type filter
            status: Optional status filter

        Returns:
            List of transactions
        """
        stmt = select(Transaction).where(Transaction.user_id == user_id)
        if type:
            stmt = stmt.where(Transaction.type == type)
        if status:
            stmt = stmt.where(Transaction.status == status)
        stmt = stmt.order_by(
            Transaction.created_at.desc(), Transaction.id.desc()
        )

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_all(
        self, status: str | None = None
    ) -> list[Transaction]:
        """
        Get all transactions, newest first.

        Args:
            status: Optional status filter

        Returns:
            List of transactions
        """
        stmt = select(Transaction)
        if status:
            stmt = stmt.where(Transaction.status == status)
        stmt = stmt.order_by(
            Transaction.created_at.desc(), Transaction.id.desc()
        )

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def lock_by_id(self, transaction_id: int) -> Transaction | None:
        """
        Get transaction with a row lock.

        Args:
            transaction_id: Transaction ID

        Returns:
            Locked transaction or None
        """
        return await self.get_for_update(id=transaction_id)
