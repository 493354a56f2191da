"""
Transaction request handling module.

Creates pending deposit and withdrawal requests after validating them.
Nothing is reserved at request time: balances only move when an admin
approves the request.
"""

from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from taskminer.config.business_constants import MIN_WITHDRAWAL
from taskminer.models.enums import TransactionStatus, TransactionType
from taskminer.models.transaction import Transaction
from taskminer.repositories.profile_repository import ProfileRepository
from taskminer.repositories.transaction_repository import TransactionRepository
from taskminer.utils.db_decorators import transactional
from taskminer.utils.exceptions import NotFoundError, ValidationError
from taskminer.validators.common import validate_amount, validate_wallet_address


class TransactionRequestHandler:
    """Handles deposit and withdrawal request creation."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize transaction request handler.

        Args:
            session: Database session
        """
        self.session = session
        self.profile_repo = ProfileRepository(session)
        self.transaction_repo = TransactionRepository(session)

    @transactional
    async def request_deposit(
        self,
        user_id: str,
        amount: Decimal | str | int,
        wallet_address: str | None,
    ) -> Transaction:
        """
        Create a pending deposit request.

        Args:
            user_id: Auth user ID
            amount: Deposit amount
            wallet_address: Address the funds were sent from

        Returns:
            Pending deposit transaction

        Raises:
            ValidationError: Invalid amount or blank wallet address
            NotFoundError: User has no profile
        """
        is_valid, parsed_amount, error = validate_amount(amount)
        if not is_valid:
            raise ValidationError(error, user_id=user_id, amount=str(amount))

        is_valid, address, error = validate_wallet_address(wallet_address)
        if not is_valid:
            raise ValidationError(error, user_id=user_id)

        if not await self.profile_repo.exists(user_id=user_id):
            raise NotFoundError("Profile not found", user_id=user_id)

        transaction = await self.transaction_repo.create(
            user_id=user_id,
            type=TransactionType.DEPOSIT.value,
            amount=parsed_amount,
            wallet_address=address,
            status=TransactionStatus.PENDING.value,
        )

        logger.info(
            "Deposit request created",
            extra={
                "transaction_id": transaction.id,
                "user_id": user_id,
                "amount": str(parsed_amount),
            },
        )
        return transaction

    @transactional
    async def request_withdrawal(
        self,
        user_id: str,
        amount: Decimal | str | int,
        wallet_address: str | None,
    ) -> Transaction:
        """
        Create a pending withdrawal request.

        Checks run in order: minimum amount, available balance, wallet
        address. The first failing check is reported.

        Args:
            user_id: Auth user ID
            amount: Withdrawal amount
            wallet_address: Payout address

        Returns:
            Pending withdrawal transaction

        Raises:
            ValidationError: Below minimum, above available balance, or
                blank wallet address
            NotFoundError: User has no profile
        """
        is_valid, parsed_amount, error = validate_amount(
            amount, min_amount=MIN_WITHDRAWAL
        )
        if not is_valid:
            raise ValidationError(error, user_id=user_id, amount=str(amount))

        profile = await self.profile_repo.get_by_user_id(user_id)
        if not profile:
            raise NotFoundError("Profile not found", user_id=user_id)
        profile = await self.profile_repo.refresh_by_id(profile.id)

        if parsed_amount > profile.available_balance:
            raise ValidationError(
                "Insufficient balance",
                user_id=user_id,
                amount=str(parsed_amount),
                available=str(profile.available_balance),
            )

        is_valid, address, error = validate_wallet_address(wallet_address)
        if not is_valid:
            raise ValidationError(error, user_id=user_id)

        transaction = await self.transaction_repo.create(
            user_id=user_id,
            type=TransactionType.WITHDRAWAL.value,
            amount=parsed_amount,
            wallet_address=address,
            status=TransactionStatus.PENDING.value,
        )

        logger.info(
            "Withdrawal request created",
            extra={
                "transaction_id": transaction.id,
                "user_id": user_id,
                "amount": str(parsed_amount),
            },
        )
        return transaction
