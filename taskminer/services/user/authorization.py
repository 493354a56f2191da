"""
Authorization checks.

Role checks always hit the database and fail closed: any error while
checking a role denies access.
"""

from dataclasses import dataclass

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from taskminer.models.enums import AppRole
from taskminer.repositories.user_role_repository import UserRoleRepository
from taskminer.utils.exceptions import AuthorizationError


@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller, as established by the auth provider."""

    user_id: str


async def has_role(
    session: AsyncSession, user_id: str, role: AppRole | str
) -> bool:
    """
    Check if user has a role.

    Args:
        session: Async database session
        user_id: Auth user ID
        role: Role to check

    Returns:
        True if granted, False if not granted or the check failed
    """
    if not user_id:
        return False
    try:
        return await UserRoleRepository(session).has_role(user_id, role)
    except Exception as e:
        logger.error(
            "Role check failed, denying",
            extra={"user_id": user_id, "role": str(role), "error": str(e)},
        )
        return False


async def require_admin(session: AsyncSession, ctx: AuthContext | None) -> None:
    """
    Ensure the caller is an admin.

    Args:
        session: Async database session
        ctx: Caller identity

    Raises:
        AuthorizationError: Caller is anonymous, not an admin, or the check failed
    """
    user_id = ctx.user_id if ctx else None
    if not user_id or not await has_role(session, user_id, AppRole.ADMIN):
        logger.warning(
            "Admin access denied", extra={"user_id": user_id}
        )
        raise AuthorizationError(user_id=user_id)
