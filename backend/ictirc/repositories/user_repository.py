"""Repository for User model operations."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import case, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ictirc.models.enums import UserRole
from ictirc.models.user import User
from ictirc.rbac import ROLE_HIERARCHY
from ictirc.utils.logger import get_logger

log = get_logger(__name__)

# Highest-ranked roles first when listing
_ROLE_RANK = case(
    {role: rank for role, rank in ROLE_HIERARCHY.items()}, value=User.role, else_=0
)


class UserRepository:
    """Repository for User CRUD operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UUID | str) -> Optional[User]:
        """Get user by auth-issued id."""
        log.debug("query user by id", user_id=str(user_id))
        result = await self.session.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        log.debug("query result", found=user is not None)
        return user

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        log.debug("query user by email", email=email)
        result = await self.session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        log.debug("query result", found=user is not None)
        return user

    async def create(
        self,
        user_id: UUID | str,
        email: str,
        name: Optional[str] = None,
        role: UserRole = UserRole.AUTHOR,
    ) -> User:
        """
        Create a new user.

        Caller is responsible for committing the transaction.
        """
        user = User(id=user_id, email=email, name=name, role=role, is_active=True)
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        log.info("user created", user_id=str(user_id), email=email, role=str(role))
        return user

    async def get_or_create(
        self, user_id: UUID | str, email: str, name: Optional[str] = None
    ) -> tuple[User, bool]:
        """
        Get existing user or create a new AUTHOR.

        Returns:
            Tuple of (user, created) where created is True if user was newly created
        """
        user = await self.get_by_id(user_id)
        if user:
            return user, False
        user = await self.create(user_id=user_id, email=email, name=name)
        return user, True

    async def list_users(
        self,
        role: Optional[UserRole] = None,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[User], int]:
        """List users newest first, optionally filtered by role and name/email."""
        filters = []
        if role is not None:
            filters.append(User.role == role)
        if search:
            pattern = f"%{search}%"
            filters.append(or_(User.name.ilike(pattern), User.email.ilike(pattern)))

        count_result = await self.session.execute(
            select(func.count()).select_from(User).where(*filters)
        )
        total = count_result.scalar_one()

        result = await self.session.execute(
            select(User)
            .where(*filters)
            .order_by(_ROLE_RANK.desc(), User.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        users = list(result.scalars().all())
        log.debug("users listed", count=len(users), total=total)
        return users, total

    async def update_role(self, user: User, role: UserRole) -> User:
        """
        Set a user's role.

        Caller is responsible for committing the transaction.
        """
        await self.session.execute(
            update(User)
            .where(User.id == user.id)
            .values(role=role, updated_at=datetime.now(timezone.utc))
        )
        await self.session.flush()
        await self.session.refresh(user)
        log.debug("user role updated", user_id=str(user.id), role=str(role))
        return user

    async def set_active(self, user: User, is_active: bool) -> User:
        """
        Activate or deactivate a user.

        Caller is responsible for committing the transaction.
        """
        await self.session.execute(
            update(User)
            .where(User.id == user.id)
            .values(is_active=is_active, updated_at=datetime.now(timezone.utc))
        )
        await self.session.flush()
        await self.session.refresh(user)
        log.debug("user active flag updated", user_id=str(user.id), is_active=is_active)
        return user
