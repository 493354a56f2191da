"""
User registration functionality.

Handles new profile creation with invite code support.
"""

import secrets
import string

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from taskminer.config.settings import settings
from taskminer.models.enums import AppRole
from taskminer.models.profile import Profile
from taskminer.repositories.profile_repository import ProfileRepository
from taskminer.repositories.user_role_repository import UserRoleRepository
from taskminer.services.referral.tree import ReferralTree
from taskminer.utils.db_decorators import transactional
from taskminer.utils.exceptions import TransientBackendError, ValidationError
from taskminer.validators.common import normalize_invite_code

INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits

# Attempts before giving up on a unique code
MAX_CODE_ATTEMPTS = 10


def generate_invite_code(length: int | None = None) -> str:
    """Generate a random upper-case invite code."""
    length = length or settings.invite_code_length
    return "".join(
        secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length)
    )


class RegistrationService:
    """New profile registration."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize registration service."""
        self.session = session
        self.profile_repo = ProfileRepository(session)
        self.role_repo = UserRoleRepository(session)
        self.tree = ReferralTree(session)

    @transactional
    async def register_user(
        self,
        user_id: str,
        email: str | None = None,
        invite_code: str | None = None,
    ) -> Profile:
        """
        Register a new profile.

        An unknown or malformed invite code is not an error: the profile is
        created without an inviter.

        Args:
            user_id: Auth user ID
            email: Email (optional)
            invite_code: Invite code entered at signup (optional)

        Returns:
            Created profile

        Raises:
            ValidationError: Profile already exists for this user
        """
        if not user_id or not user_id.strip():
            raise ValidationError("User ID is required")

        if await self.profile_repo.exists(user_id=user_id):
            raise ValidationError("User already registered", user_id=user_id)

        inviter = None
        code = normalize_invite_code(invite_code)
        if code:
            inviter = await self.profile_repo.get_by_invite_code(code)
        if invite_code and not inviter:
            logger.info(
                "Unknown invite code ignored",
                extra={"user_id": user_id, "invite_code": invite_code},
            )

        profile = await self.profile_repo.create(
            user_id=user_id,
            email=email.strip() if email else None,
            invite_code=await self._unique_invite_code(),
        )

        if inviter:
            if await self.tree.would_create_cycle(profile.id, inviter.id):
                logger.warning(
                    "Invite would create a cycle, ignored",
                    extra={"user_id": user_id, "inviter_id": inviter.id},
                )
            else:
                profile.invited_by = inviter.id
                await self.session.flush()

        await self.role_repo.grant(user_id, AppRole.USER)

        logger.info(
            "User registered",
            extra={
                "user_id": user_id,
                "profile_id": profile.id,
                "invited_by": profile.invited_by,
            },
        )
        return profile

    async def _unique_invite_code(self) -> str:
        for _ in range(MAX_CODE_ATTEMPTS):
            code = generate_invite_code()
            if not await self.profile_repo.exists(invite_code=code):
                return code
        raise TransientBackendError("Could not generate an invite code")
