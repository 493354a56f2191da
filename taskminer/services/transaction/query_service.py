"""
Transaction query service.

Read-only listings of deposit and withdrawal requests.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from taskminer.models.enums import TransactionStatus, TransactionType
from taskminer.models.transaction import Transaction
from taskminer.repositories.transaction_repository import TransactionRepository


class TransactionQueryService:
    """Transaction listings."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize transaction query service."""
        self.session = session
        self.transaction_repo = TransactionRepository(session)

    async def list_for_user(
        self,
        user_id: str,
        type: TransactionType | None = None,
        status: TransactionStatus | None = None,
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
        return await self.transaction_repo.get_by_user(
            user_id,
            type=type.value if type else None,
            status=status.value if status else None,
        )

    async def list_all(
        self, status: TransactionStatus | None = None
    ) -> list[Transaction]:
        """Get all transactions, newest first."""
        return await self.transaction_repo.list_all(
            status=status.value if status else None
        )

    async def get_pending(self) -> list[Transaction]:
        """Get requests awaiting an admin decision."""
        return await self.list_all(TransactionStatus.PENDING)
