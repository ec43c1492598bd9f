"""
User CRUD operations.

This module contains CRUD operations specific to user management.
"""

from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from weather_monitor.core.exceptions import ConflictError
from weather_monitor.crud.base import CRUDBase
from weather_monitor.models.user import Role, User
from weather_monitor.schemas.auth import UserCreate
from weather_monitor.utils.security import get_password_hash


class CRUDUser(CRUDBase[User, UserCreate, UserCreate]):
    """
    CRUD operations for User model.
    """

    async def create(self, db: AsyncSession, *, obj_in: UserCreate) -> User:
        """
        Create a new user with a hashed password.

        Args:
            db: Database session
            obj_in: User creation data

        Returns:
            Created user instance

        Raises:
            ConflictError: If the email is already registered
        """
        if await self.get_by_email(db, email=obj_in.email):
            raise ConflictError()

        db_obj = User(
            name=obj_in.name,
            email=obj_in.email,
            hashed_password=get_password_hash(obj_in.password),
            role=(obj_in.role or Role.USER).value,
        )
        db.add(db_obj)
        try:
            await db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            await db.rollback()
            raise ConflictError()
        await db.refresh(db_obj)
        return db_obj

    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            db: Database session
            email: User email address

        Returns:
            User instance or None if not found
        """
        result = await db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def get_multi_newest_first(self, db: AsyncSession) -> List[User]:
        """Get every user, most recently created first."""
        return await self.get_multi(db, limit=None, order_by=User.created_at.desc())

    async def set_refresh_token(
        self, db: AsyncSession, *, user: User, token: Optional[str]
    ) -> User:
        """
        Store the user's current refresh token, replacing any previous one.

        Passing None clears it. Concurrent writers race with last-write-wins.
        """
        return await self.update(db, db_obj=user, obj_in={"refresh_token": token})


# Create instance of CRUDUser
user = CRUDUser(User)
