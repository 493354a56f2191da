"""
Ledger gateway.

Entry points called by the UI layer. Every call runs in its own session and
database transaction, under a timeout, and transient failures are retried
with exponential backoff.
"""

import asyncio
import random
from collections.abc import Awaitable, Callable
from datetime import date, datetime
from decimal import Decimal
from typing import TypeVar

from loguru import logger
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taskminer.config.business_constants import VIP_TEAM_MIN_LEVEL
from taskminer.config.settings import settings
from taskminer.models.enums import AppRole, TransactionStatus
from taskminer.models.profile import Profile
from taskminer.models.transaction import Transaction
from taskminer.repositories.profile_repository import ProfileRepository
from taskminer.services.admin_service import (
    AdminService,
    AdminTransactionView,
    AdminUserView,
)
from taskminer.services.balance.ledger import BalanceLedger, BalanceSnapshot
from taskminer.services.referral.commission_distributor import (
    CommissionDistributor,
    DistributionResult,
)
from taskminer.services.referral.statistics import TeamReport, TeamStatistics
from taskminer.services.referral.tree import ReferralTree
from taskminer.services.task.completion_service import (
    TaskCompletionResult,
    TaskCompletionService,
    TaskProgress,
)
from taskminer.services.transaction.lifecycle_handler import (
    TransactionLifecycleHandler,
)
from taskminer.services.transaction.query_service import (
    TransactionQueryService,
)
from taskminer.services.transaction.request_handler import (
    TransactionRequestHandler,
)
from taskminer.services.user.authorization import AuthContext, has_role
from taskminer.services.user.contract_service import (
    ContractService,
    ContractStatus,
)
from taskminer.services.user.registration import RegistrationService
from taskminer.services.user.vip_service import VipService
from taskminer.utils.exceptions import (
    InconsistentStateError,
    NotFoundError,
    TransientBackendError,
)


T = TypeVar("T")

Operation = Callable[[AsyncSession], Awaitable[T]]


class LedgerGateway:
    """Transactional boundary of the ledger."""

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        timeout: float | None = None,
        max_retries: int | None = None,
        retry_delay_base: float | None = None,
    ) -> None:
        """
        Initialize ledger gateway.

        Args:
            session_maker: Session factory
            timeout: Seconds per attempt (default from settings)
            max_retries: Attempts for transient failures (default from settings)
            retry_delay_base: Base backoff delay in seconds (default from settings)
        """
        self.session_maker = session_maker
        self.timeout = (
            settings.operation_timeout_seconds if timeout is None else timeout
        )
        self.max_retries = max(
            settings.max_retries if max_retries is None else max_retries, 1
        )
        self.retry_delay_base = (
            settings.retry_delay_base
            if retry_delay_base is None
            else retry_delay_base
        )

    async def _run(self, name: str, operation: Operation[T]) -> T:
        """
        Run an operation with timeout and retry.

        Args:
            name: Operation name for logs
            operation: Coroutine function taking a fresh session

        Returns:
            Operation result

        Raises:
            TransientBackendError: Still failing after the last attempt
            InconsistentStateError: Any other SQLAlchemy error, not retried
            TaskMinerError: Any non-transient ledger error, unchanged
        """
        for attempt in range(self.max_retries):
            try:
                async with self.session_maker() as session:
                    return await asyncio.wait_for(
                        operation(session), timeout=self.timeout
                    )
            except TimeoutError as e:
                error = TransientBackendError(
                    "Request timed out. Please try again.",
                    operation=name,
                    timeout=self.timeout,
                )
                error.__cause__ = e
            except TransientBackendError as e:
                error = e
            except (IntegrityError, OperationalError) as e:
                error = TransientBackendError(operation=name, error=str(e))
                error.__cause__ = e
            except SQLAlchemyError as e:
                logger.opt(exception=e).error(
                    f"Database error in {name}"
                )
                raise InconsistentStateError(
                    operation=name, error=str(e)
                ) from e

            if attempt < self.max_retries - 1:
                delay = self.retry_delay_base * (2 ** attempt) + random.uniform(
                    0, self.retry_delay_base
                )
                logger.warning(
                    f"Transient failure in {name}, retrying",
                    extra={
                        "attempt": attempt + 1,
                        "max_retries": self.max_retries,
                        "delay": round(delay, 3),
                        "error": str(error.context.get("error", error)),
                    },
                )
                await asyncio.sleep(delay)
                continue

            logger.error(
                f"Transient failure in {name}, giving up",
                extra={"attempts": self.max_retries},
            )
            raise error

        # Unreachable: the loop either returns or raises
        raise TransientBackendError(operation=name)

    # Registration

    async def register_user(
        self,
        user_id: str,
        email: str | None = None,
        invite_code: str | None = None,
    ) -> Profile:
        """Register a new profile, optionally under an inviter."""
        return await self._run(
            "register_user",
            lambda s: RegistrationService(s).register_user(
                user_id, email=email, invite_code=invite_code
            ),
        )

    # Tasks

    async def complete_task(self, user_id: str) -> TaskCompletionResult:
        """
        Record one completed task for the current task day and pay commissions.

        The task day always comes from the configured task timezone, never
        from the caller.
        """
        return await self._run(
            "complete_task",
            lambda s: TaskCompletionService(s).complete_task(user_id),
        )

    async def get_task_progress(
        self, user_id: str, day: date | None = None
    ) -> TaskProgress:
        """Get today's task progress."""
        return await self._run(
            "get_task_progress",
            lambda s: TaskCompletionService(s).get_progress(user_id, day),
        )

    async def distribute_team_commission(
        self, user_id: str, task_earnings: Decimal
    ) -> DistributionResult:
        """
        Distribute team commission for earnings in a transaction of its own.

        Task completion already distributes within its own transaction;
        this entry point serves out-of-band earnings.
        """
        async def operation(session: AsyncSession) -> DistributionResult:
            result = await CommissionDistributor(session).distribute(
                user_id, task_earnings
            )
            await session.commit()
            return result

        return await self._run("distribute_team_commission", operation)

    # Transactions

    async def request_deposit(
        self, user_id: str, amount: Decimal | str, wallet_address: str | None
    ) -> Transaction:
        """Create a pending deposit request."""
        return await self._run(
            "request_deposit",
            lambda s: TransactionRequestHandler(s).request_deposit(
                user_id, amount, wallet_address
            ),
        )

    async def request_withdrawal(
        self, user_id: str, amount: Decimal | str, wallet_address: str | None
    ) -> Transaction:
        """Create a pending withdrawal request."""
        return await self._run(
            "request_withdrawal",
            lambda s: TransactionRequestHandler(s).request_withdrawal(
                user_id, amount, wallet_address
            ),
        )

    async def process_deposit(
        self, ctx: AuthContext, transaction_id: int, approved: bool
    ) -> Transaction:
        """Approve or reject a pending deposit (admin only)."""
        return await self._run(
            "process_deposit",
            lambda s: TransactionLifecycleHandler(s).process_deposit(
                ctx, transaction_id, approved
            ),
        )

    async def process_withdrawal(
        self, ctx: AuthContext, transaction_id: int, approved: bool
    ) -> Transaction:
        """Approve or reject a pending withdrawal (admin only)."""
        return await self._run(
            "process_withdrawal",
            lambda s: TransactionLifecycleHandler(s).process_withdrawal(
                ctx, transaction_id, approved
            ),
        )

    async def list_transactions(
        self, user_id: str, status: TransactionStatus | None = None
    ) -> list[Transaction]:
        """Get the caller's own transactions, newest first."""
        return await self._run(
            "list_transactions",
            lambda s: TransactionQueryService(s).list_for_user(
                user_id, status=status
            ),
        )

    # VIP, team and roles

    async def check_vip_eligibility(self, user_id: str) -> bool:
        """Check if user qualifies for VIP."""
        return await self._run(
            "check_vip_eligibility",
            lambda s: VipService(s).check_vip_eligibility(user_id),
        )

    async def upgrade_to_vip(self, user_id: str) -> bool:
        """Upgrade user to VIP if eligible."""
        return await self._run(
            "upgrade_to_vip",
            lambda s: VipService(s).upgrade_to_vip(user_id),
        )

    async def count_team_at_level(
        self, profile_id: int, level: int = VIP_TEAM_MIN_LEVEL
    ) -> int:
        """Count direct invitees at or above a level."""
        return await self._run(
            "count_team_at_level",
            lambda s: ReferralTree(s).count_team_at_level(profile_id, level),
        )

    async def has_role(self, user_id: str, role: AppRole | str) -> bool:
        """Check a role (False on any failure)."""
        return await self._run(
            "has_role", lambda s: has_role(s, user_id, role)
        )

    async def get_team_report(self, user_id: str) -> TeamReport:
        """Get team report."""
        return await self._run(
            "get_team_report",
            lambda s: TeamStatistics(s).get_team_report(user_id),
        )

    async def get_contract_status(
        self, user_id: str, now: datetime | None = None
    ) -> ContractStatus:
        """Get contract countdown and time bonuses."""
        return await self._run(
            "get_contract_status",
            lambda s: ContractService(s).get_contract_status(user_id, now),
        )

    # Balances

    async def get_balances(self, user_id: str) -> BalanceSnapshot:
        """Get balances of a user."""
        async def operation(session: AsyncSession) -> BalanceSnapshot:
            profile = await ProfileRepository(session).get_by_user_id(user_id)
            if not profile:
                raise NotFoundError("Profile not found", user_id=user_id)
            return await BalanceLedger(session).get_balances(profile.id)

        return await self._run("get_balances", operation)

    async def reset_daily_commissions(self) -> int:
        """Zero today's commission of every profile (daily job)."""
        async def operation(session: AsyncSession) -> int:
            count = await BalanceLedger(session).reset_today_commission()
            await session.commit()
            return count

        return await self._run("reset_daily_commissions", operation)

    # Admin

    async def admin_list_transactions(
        self, ctx: AuthContext, status: TransactionStatus | None = None
    ) -> list[AdminTransactionView]:
        """List every transaction with requester email (admin only)."""
        return await self._run(
            "admin_list_transactions",
            lambda s: AdminService(s).list_transactions(ctx, status=status),
        )

    async def admin_list_users(self, ctx: AuthContext) -> list[AdminUserView]:
        """List every profile with invite tree edges (admin only)."""
        return await self._run(
            "admin_list_users",
            lambda s: AdminService(s).list_users(ctx),
        )
