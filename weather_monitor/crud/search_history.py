"""
Search history CRUD operations.
"""

from typing import List

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from weather_monitor.crud.base import CRUDBase
from weather_monitor.models.search_history import SearchHistory


class CRUDSearchHistory(CRUDBase[SearchHistory, SearchHistory, dict]):
    """
    CRUD operations for SearchHistory model.
    """

    async def get_multi_by_owner(
        self, db: AsyncSession, *, user_id: str, limit: int = 50
    ) -> List[SearchHistory]:
        """
        Get a user's most recent records, newest first.

        Args:
            db: Database session
            user_id: Owner id
            limit: Maximum number of records to return

        Returns:
            List of SearchHistory instances
        """
        result = await db.execute(
            select(SearchHistory)
            .where(SearchHistory.user_id == user_id)
            .order_by(SearchHistory.searched_at.desc())
            .limit(limit)
        )
        return result.scalars().all()

    async def get_multi_with_owner(self, db: AsyncSession) -> List[SearchHistory]:
        """Get every record across all users, newest first, with owners loaded."""
        result = await db.execute(
            select(SearchHistory)
            .options(selectinload(SearchHistory.owner))
            .order_by(SearchHistory.searched_at.desc())
        )
        return result.scalars().all()

    async def remove_by_owner(self, db: AsyncSession, *, user_id: str) -> int:
        """
        Delete every record owned by a user.

        Returns:
            Number of records deleted
        """
        result = await db.execute(
            delete(SearchHistory).where(SearchHistory.user_id == user_id)
        )
        await db.commit()
        return result.rowcount


search_history = CRUDSearchHistory(SearchHistory)
