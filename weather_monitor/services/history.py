"""
Search history ledger.

Records weather lookups per user and enforces who may list and delete them.
"""

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from weather_monitor.core.exceptions import ForbiddenError, NotFoundError, UpstreamError
from weather_monitor.crud.search_history import search_history as history_crud
from weather_monitor.models.search_history import CITY_MAX_LENGTH, CONDITION_MAX_LENGTH, SearchHistory
from weather_monitor.models.user import Role
from weather_monitor.schemas.auth import Identity
from weather_monitor.schemas.weather import WeatherReport
from weather_monitor.utils.logging_config import get_logger

logger = get_logger(__name__)

HISTORY_LIMIT = 50


class HistoryService:
    """Per-user search history."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record(self, owner: Identity, report: WeatherReport) -> SearchHistory:
        """
        Append a snapshot of a lookup to the owner's history.

        Every successful lookup leaves exactly one record, so a report the
        ledger cannot store fails the lookup instead of being skipped. Text
        is cut to the column widths.

        Raises:
            UpstreamError: If the provider sent no temperature
        """
        if report.current.temperature is None:
            logger.warning(
                f"Weather provider returned no temperature for '{report.location.name}' (user {owner.id})"
            )
            raise UpstreamError("Weather provider returned no temperature")

        return await history_crud.create(
            self.db,
            obj_in={
                "user_id": owner.id,
                "city": report.location.name[:CITY_MAX_LENGTH],
                "temperature": report.current.temperature,
                "condition": report.current.condition[:CONDITION_MAX_LENGTH],
                "humidity": report.current.humidity,
                "wind_speed": report.current.wind_speed,
            },
        )

    async def list_for_user(self, owner: Identity) -> List[SearchHistory]:
        """The owner's most recent records, newest first."""
        return await history_crud.get_multi_by_owner(self.db, user_id=owner.id, limit=HISTORY_LIMIT)

    async def list_all(self) -> List[SearchHistory]:
        """Every record across all users, newest first, owners joined."""
        return await history_crud.get_multi_with_owner(self.db)

    async def delete_one(self, caller: Identity, record_id: str) -> str:
        """
        Delete a single record.

        Existence is checked before permission, so probing an unknown id
        yields NotFoundError whoever the caller is.

        Raises:
            NotFoundError: If no such record exists (or it was deleted concurrently)
            ForbiddenError: If the caller neither owns it nor is an admin
        """
        item = await history_crud.get(self.db, record_id)
        if item is None:
            raise NotFoundError("History item not found")

        if item.user_id != caller.id and not caller.has_role(Role.ADMIN):
            logger.warning(f"User {caller.id} attempted to delete history item {record_id} owned by {item.user_id}")
            raise ForbiddenError("Not authorized to delete this item")

        if not await history_crud.remove(self.db, id=record_id):
            raise NotFoundError("History item not found")

        logger.info(f"History item {record_id} deleted by {caller.id} ({caller.role})")
        return record_id

    async def delete_all_for_user(self, caller: Identity) -> int:
        """Delete every record the caller owns. Never touches other users' records."""
        deleted = await history_crud.remove_by_owner(self.db, user_id=caller.id)
        logger.info(f"Cleared {deleted} history items for user {caller.id}")
        return deleted
