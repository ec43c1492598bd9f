"""
Weather router.

Weather lookups for authenticated users and management of their own
search history.
"""

from typing import List

from fastapi import APIRouter, Depends

from weather_monitor.dependencies.auth import get_current_user
from weather_monitor.dependencies.services import get_history_service, get_weather_service
from weather_monitor.schemas.auth import Identity
from weather_monitor.schemas.history import HistoryClearResponse, HistoryDeleteResponse, HistoryRecord
from weather_monitor.schemas.weather import WeatherReport
from weather_monitor.services.history import HistoryService
from weather_monitor.services.weather import WeatherService

router = APIRouter(
    prefix="/weather",
    tags=["weather"],
    responses={
        401: {"description": "Unauthorized"},
        404: {"description": "Not found"}
    },
)


# History routes are registered before /{city} so "history" is never read as a city


@router.get("/history", response_model=List[HistoryRecord])
async def get_history(
    current_user: Identity = Depends(get_current_user),
    history_service: HistoryService = Depends(get_history_service),
):
    """Get the caller's 50 most recent lookups, newest first."""
    return await history_service.list_for_user(current_user)


@router.delete("/history/all", response_model=HistoryClearResponse)
async def clear_history(
    current_user: Identity = Depends(get_current_user),
    history_service: HistoryService = Depends(get_history_service),
):
    """Delete all of the caller's history."""
    deleted = await history_service.delete_all_for_user(current_user)
    return HistoryClearResponse(message="All history cleared", deleted_count=deleted)


@router.delete("/history/{record_id}", response_model=HistoryDeleteResponse)
async def delete_history_item(
    record_id: str,
    current_user: Identity = Depends(get_current_user),
    history_service: HistoryService = Depends(get_history_service),
):
    """Delete one history item. Only its owner (or an admin) may do so."""
    deleted_id = await history_service.delete_one(current_user, record_id)
    return HistoryDeleteResponse(message="History item deleted", id=deleted_id)


@router.get("/{city}", response_model=WeatherReport)
async def get_weather(
    city: str,
    current_user: Identity = Depends(get_current_user),
    weather_service: WeatherService = Depends(get_weather_service),
    history_service: HistoryService = Depends(get_history_service),
):
    """
    Get current weather for a city.

    The lookup is recorded in the caller's search history.
    """
    report = await weather_service.lookup(city)
    await history_service.record(current_user, report)
    return report
