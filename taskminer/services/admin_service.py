"""
Admin service.

Admin-only listings: every transaction with the requester's email, and
every profile with its place in the invite tree.
"""

from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from taskminer.models.enums import TransactionStatus
from taskminer.models.profile import Profile
from taskminer.models.transaction import Transaction
from taskminer.repositories.profile_repository import ProfileRepository
from taskminer.repositories.transaction_repository import TransactionRepository
from taskminer.services.user.authorization import AuthContext, require_admin


@dataclass
class AdminTransactionView:
    """Transaction row of the admin panel."""

    transaction: Transaction
    email: str | None


@dataclass
class AdminUserView:
    """Profile row of the admin panel."""

    profile: Profile
    inviter_user_id: str | None
    invitee_user_ids: list[str] = field(default_factory=list)


class AdminService:
    """Admin panel listings."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize admin service."""
        self.session = session
        self.profile_repo = ProfileRepository(session)
        self.transaction_repo = TransactionRepository(session)

    async def list_transactions(
        self,
        ctx: AuthContext,
        status: TransactionStatus | None = None,
    ) -> list[AdminTransactionView]:
        """
        List all transactions, newest first.

        Args:
            ctx: Caller identity (must be admin)
            status: Optional status filter

        Returns:
            Transactions joined with requester email
        """
        await require_admin(self.session, ctx)

        transactions = await self.transaction_repo.list_all(
            status=status.value if status else None
        )
        emails = await self.profile_repo.get_emails_by_user_ids(
            list({t.user_id for t in transactions})
        )
        return [
            AdminTransactionView(transaction=t, email=emails.get(t.user_id))
            for t in transactions
        ]

    async def list_users(self, ctx: AuthContext) -> list[AdminUserView]:
        """
        List all profiles, newest first, with inviter and direct invitees.

        Args:
            ctx: Caller identity (must be admin)

        Returns:
            Profiles with invite tree edges
        """
        await require_admin(self.session, ctx)

        profiles = await self.profile_repo.list_all()
        by_id = {p.id: p for p in profiles}

        children: dict[int, list[str]] = {}
        for profile in reversed(profiles):
            if profile.invited_by is not None:
                children.setdefault(profile.invited_by, []).append(
                    profile.user_id
                )

        return [
            AdminUserView(
                profile=p,
                inviter_user_id=(
                    by_id[p.invited_by].user_id
                    if p.invited_by in by_id
                    else None
                ),
                invitee_user_ids=children.get(p.id, []),
            )
            for p in profiles
        ]
