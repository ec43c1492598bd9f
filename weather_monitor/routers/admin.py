"""
Admin router.

User and search history oversight. Every route requires the admin role.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from weather_monitor.crud.user import user as user_crud
from weather_monitor.database import get_db
from weather_monitor.dependencies.auth import require_admin
from weather_monitor.dependencies.services import get_history_service
from weather_monitor.schemas.auth import Identity, User
from weather_monitor.schemas.history import HistoryDeleteResponse, HistoryRecordWithOwner
from weather_monitor.services.history import HistoryService

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Admin role required"},
    },
)


@router.get("/users", response_model=List[User])
async def get_all_users(
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Get every user, newest first. Password hashes and tokens are never included."""
    return await user_crud.get_multi_newest_first(db)


@router.get("/all-history", response_model=List[HistoryRecordWithOwner])
async def get_all_history(
    admin: Identity = Depends(require_admin),
    history_service: HistoryService = Depends(get_history_service),
):
    """Get every search history record with its owner's name and email."""
    return await history_service.list_all()


@router.delete("/history/{record_id}", response_model=HistoryDeleteResponse)
async def admin_delete_history(
    record_id: str,
    admin: Identity = Depends(require_admin),
    history_service: HistoryService = Depends(get_history_service),
):
    """Delete any user's history item."""
    deleted_id = await history_service.delete_one(admin, record_id)
    return HistoryDeleteResponse(message="History item deleted by admin", id=deleted_id)
