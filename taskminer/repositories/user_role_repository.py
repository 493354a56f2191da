"""
User role repository.

Data access layer for UserRole model.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from taskminer.models.enums import AppRole
from taskminer.models.user_role import UserRole
from taskminer.repositories.base import BaseRepository


class UserRoleRepository(BaseRepository[UserRole]):
    """User role repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user role repository."""
        super().__init__(UserRole, session)

    async def has_role(self, user_id: str, role: AppRole | str) -> bool:
        """
        Check if user has a role.

        Args:
            user_id: Auth user ID
            role: Role to check

        Returns:
            True if role is granted
        """
        role_value = role.value if isinstance(role, AppRole) else role
        return await self.exists(user_id=user_id, role=role_value)

    async def grant(self, user_id: str, role: AppRole) -> UserRole:
        """
        Grant a role to a user (no-op if already granted).

        Args:
            user_id: Auth user ID
            role: Role to grant

        Returns:
            UserRole record
        """
        existing = await self.get_by(user_id=user_id, role=role.value)
        if existing:
            return existing
        return await self.create(user_id=user_id, role=role.value)

    async def get_roles(self, user_id: str) -> list[str]:
        """
        Get all roles of a user.

        Args:
            user_id: Auth user ID

        Returns:
            List of role names
        """
        roles = await self.find_all(user_id=user_id)
        return [role.role for role in roles]
