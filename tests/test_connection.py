from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from coursehub.application.exceptions.base import BackendUnavailableError
from coursehub.bootstrap.configs import AuthConfig, Config, MongoDBConfig
from coursehub.infrastructure.db import connection
from coursehub.infrastructure.db.connection import connect_mongo, open_storage
from coursehub.infrastructure.db.memory_storage import MemoryStorage
from coursehub.infrastructure.db.seed import DEMO_PASSWORD, seed_demo_data

DATABASE = MongoDBConfig(
    uri="mongodb://localhost:27017/",
    db_name="coursehub",
    connect_retries=3,
    retry_delay=0.0,
)


def make_config(**kwargs) -> Config:
    return Config(auth=AuthConfig(secret_key="test"), **kwargs)


@pytest.fixture
def unreachable(monkeypatch):
    """Every connection attempt fails"""
    connect = AsyncMock(return_value=None)
    monkeypatch.setattr(connection, "connect_mongo", connect)
    return connect


# ============= connect_mongo =============


@pytest.mark.asyncio
async def test_connect_retries_then_gives_up(monkeypatch):
    client = MagicMock()
    client.admin.command = AsyncMock(
        side_effect=ServerSelectionTimeoutError("no servers"),
    )
    client_factory = MagicMock(return_value=client)
    sleep = AsyncMock()
    monkeypatch.setattr(connection, "AsyncIOMotorClient", client_factory)
    monkeypatch.setattr(connection.asyncio, "sleep", sleep)

    result = await connect_mongo(DATABASE)

    assert result is None
    assert client.admin.command.await_count == 3
    assert client.close.call_count == 3
    assert sleep.await_count == 2
    assert client_factory.call_args.kwargs["tz_aware"] is True


@pytest.mark.asyncio
async def test_connect_succeeds_on_retry(monkeypatch):
    client = MagicMock()
    client.admin.command = AsyncMock(
        side_effect=[ServerSelectionTimeoutError("no servers"), {"ok": 1}],
    )
    monkeypatch.setattr(
        connection,
        "AsyncIOMotorClient",
        MagicMock(return_value=client),
    )
    monkeypatch.setattr(connection.asyncio, "sleep", AsyncMock())

    result = await connect_mongo(DATABASE)

    assert result is client
    client.close.assert_called_once()


# ============= open_storage =============


@pytest.mark.asyncio
async def test_no_database_config_uses_memory(password_hasher, unreachable):
    handle = await open_storage(make_config(), password_hasher)

    assert isinstance(handle.storage, MemoryStorage)
    assert handle.client is None
    unreachable.assert_not_awaited()


@pytest.mark.asyncio
async def test_unreachable_falls_back_to_memory(password_hasher, unreachable):
    handle = await open_storage(
        make_config(database=DATABASE, environment="development"),
        password_hasher,
    )

    assert handle.storage.name == "memory"
    unreachable.assert_awaited_once_with(DATABASE)


@pytest.mark.asyncio
async def test_unreachable_in_production_raises(password_hasher, unreachable):
    with pytest.raises(BackendUnavailableError) as exc_info:
        await open_storage(
            make_config(database=DATABASE, environment="production"),
            password_hasher,
        )

    assert exc_info.value.attempts == 3


@pytest.mark.asyncio
async def test_connected_uses_mongo(monkeypatch, password_hasher):
    client = MagicMock()
    monkeypatch.setattr(
        connection,
        "connect_mongo",
        AsyncMock(return_value=client),
    )
    ensure_indexes = AsyncMock()
    monkeypatch.setattr(
        connection.MongoStorage,
        "ensure_indexes",
        ensure_indexes,
    )

    handle = await open_storage(make_config(database=DATABASE), password_hasher)

    assert handle.storage.name == "mongodb"
    ensure_indexes.assert_awaited_once()
    handle.close()
    client.close.assert_called_once()


@pytest.mark.asyncio
async def test_memory_storage_seeded_on_request(password_hasher, unreachable):
    handle = await open_storage(
        make_config(seed_demo_data=True),
        password_hasher,
    )

    courses = await handle.storage.get_courses()
    assert len(courses) == 2


# ============= Demo data =============


@pytest.mark.asyncio
async def test_seed_demo_data(memory_storage, password_hasher):
    await seed_demo_data(memory_storage)

    instructor = await memory_storage.get_user_by_email("instructor@example.com")
    student = await memory_storage.get_user_by_email("student@example.com")
    courses = await memory_storage.get_courses(published_only=True)
    free = next(course for course in courses if course.is_free)

    assert password_hasher.verify(DEMO_PASSWORD, student.password)
    assert instructor.can_author_courses
    assert len(courses) == 2
    assert free.total_lessons == 3
    assert free.total_students == 1
    assert (free.average_rating, free.num_reviews) == (5.0, 1)
    enrollments = await memory_storage.get_enrollments_by_user(student.id)
    assert enrollments[0].enrollment.progress == 40
    assert enrollments[0].enrollment.has_access


@pytest.mark.asyncio
async def test_seed_skipped_when_courses_exist(memory_storage):
    await seed_demo_data(memory_storage)
    await seed_demo_data(memory_storage)

    assert len(await memory_storage.get_courses()) == 2
