"""
Tests for the search history service.

Ownership rules are exercised directly against the service with explicit
identities, no HTTP layer involved.
"""

import pytest

from weather_monitor.core.exceptions import ForbiddenError, NotFoundError, UpstreamError
from weather_monitor.crud.search_history import search_history as history_crud
from weather_monitor.crud.user import user as user_crud
from weather_monitor.models.search_history import CITY_MAX_LENGTH, CONDITION_MAX_LENGTH
from weather_monitor.models.user import Role
from weather_monitor.schemas.auth import Identity, UserCreate
from weather_monitor.services.history import HISTORY_LIMIT, HistoryService
from weather_monitor.services.weather import normalize


async def make_identity(db, email, role=None) -> Identity:
    created = await user_crud.create(
        db,
        obj_in=UserCreate(name=email.split("@")[0].title(), email=email, password="secret1", role=role),
    )
    return Identity.model_validate(created)


def report_for(city, temperature=18, **current):
    return normalize({"current": {"temperature": temperature, **current}}, city)


@pytest.fixture
async def users(db):
    return {
        "alice": await make_identity(db, "alice@example.com"),
        "bob": await make_identity(db, "bob@example.com"),
        "admin": await make_identity(db, "admin@example.com", role=Role.ADMIN),
    }


@pytest.mark.asyncio
async def test_record_snapshot(db, users):
    service = HistoryService(db)
    record = await service.record(
        users["alice"],
        report_for("London", 18, humidity=70, wind_speed=9, weather_descriptions=["Light rain", "Mist"]),
    )

    assert record.user_id == users["alice"].id
    assert record.city == "London"
    assert record.temperature == 18
    assert record.condition == "Light rain"
    assert record.humidity == 70
    assert record.wind_speed == 9
    assert record.searched_at is not None


@pytest.mark.asyncio
async def test_record_without_condition(db, users):
    record = await HistoryService(db).record(users["alice"], report_for("London"))
    assert record.condition == "N/A"
    assert record.humidity is None


@pytest.mark.asyncio
async def test_record_without_temperature_fails_lookup(db, users):
    service = HistoryService(db)
    with pytest.raises(UpstreamError) as exc_info:
        await service.record(users["alice"], normalize({}, "London"))
    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "Weather provider returned no temperature"
    assert await service.list_for_user(users["alice"]) == []


@pytest.mark.asyncio
async def test_record_truncates_long_text(db, users):
    long_city = "X" * (CITY_MAX_LENGTH + 50)
    long_condition = "Y" * (CONDITION_MAX_LENGTH + 50)

    record = await HistoryService(db).record(
        users["alice"], report_for(long_city, weather_descriptions=[long_condition])
    )
    assert record.city == "X" * CITY_MAX_LENGTH
    assert record.condition == "Y" * CONDITION_MAX_LENGTH


@pytest.mark.asyncio
async def test_list_for_user_only_returns_own_records(db, users):
    service = HistoryService(db)
    await service.record(users["alice"], report_for("London"))
    await service.record(users["bob"], report_for("Paris"))
    await service.record(users["alice"], report_for("Rome"))

    alice_records = await service.list_for_user(users["alice"])
    assert [r.city for r in alice_records] == ["Rome", "London"]
    assert all(r.user_id == users["alice"].id for r in alice_records)

    bob_records = await service.list_for_user(users["bob"])
    assert [r.city for r in bob_records] == ["Paris"]


@pytest.mark.asyncio
async def test_list_for_user_is_capped(db, users):
    service = HistoryService(db)
    for i in range(HISTORY_LIMIT + 3):
        await service.record(users["alice"], report_for(f"City {i}"))

    records = await service.list_for_user(users["alice"])
    assert len(records) == HISTORY_LIMIT
    assert records[0].city == f"City {HISTORY_LIMIT + 2}"


@pytest.mark.asyncio
async def test_list_all_spans_users(db, users):
    service = HistoryService(db)
    await service.record(users["alice"], report_for("London"))
    await service.record(users["bob"], report_for("Paris"))

    records = await service.list_all()
    assert {r.owner.email for r in records} == {"alice@example.com", "bob@example.com"}


@pytest.mark.asyncio
async def test_owner_deletes_once(db, users):
    service = HistoryService(db)
    record = await service.record(users["alice"], report_for("London"))

    assert await service.delete_one(users["alice"], record.id) == record.id
    with pytest.raises(NotFoundError) as exc_info:
        await service.delete_one(users["alice"], record.id)
    assert exc_info.value.message == "History item not found"


@pytest.mark.asyncio
async def test_other_user_cannot_delete(db, users):
    service = HistoryService(db)
    record = await service.record(users["alice"], report_for("London"))

    with pytest.raises(ForbiddenError) as exc_info:
        await service.delete_one(users["bob"], record.id)
    assert exc_info.value.message == "Not authorized to delete this item"

    assert len(await service.list_for_user(users["alice"])) == 1


@pytest.mark.asyncio
async def test_admin_deletes_any_record_once(db, users):
    service = HistoryService(db)
    record = await service.record(users["alice"], report_for("London"))

    assert await service.delete_one(users["admin"], record.id) == record.id
    with pytest.raises(NotFoundError):
        await service.delete_one(users["admin"], record.id)


@pytest.mark.asyncio
async def test_unknown_id_is_not_found_before_permission(db, users):
    with pytest.raises(NotFoundError):
        await HistoryService(db).delete_one(users["bob"], "does-not-exist")


@pytest.mark.asyncio
async def test_delete_all_only_touches_caller(db, users):
    service = HistoryService(db)
    await service.record(users["alice"], report_for("London"))
    await service.record(users["alice"], report_for("Rome"))
    await service.record(users["bob"], report_for("Paris"))

    assert await service.delete_all_for_user(users["alice"]) == 2
    assert await service.list_for_user(users["alice"]) == []
    assert len(await service.list_for_user(users["bob"])) == 1
    assert await service.delete_all_for_user(users["alice"]) == 0


@pytest.mark.asyncio
async def test_delete_race_reports_not_found(db, users, monkeypatch):
    """A record removed between the lookup and the delete is reported as missing."""
    service = HistoryService(db)
    record = await service.record(users["alice"], report_for("London"))
    original_get = history_crud.get

    async def get_then_lose_race(session, id):
        item = await original_get(session, id)
        await history_crud.remove(session, id=id)
        return item

    monkeypatch.setattr(history_crud, "get", get_then_lose_race)

    with pytest.raises(NotFoundError) as exc_info:
        await service.delete_one(users["alice"], record.id)
    assert exc_info.value.message == "History item not found"
