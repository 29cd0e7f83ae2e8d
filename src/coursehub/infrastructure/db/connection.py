import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from coursehub.application.exceptions.base import BackendUnavailableError
from coursehub.application.security import PasswordHasher
from coursehub.application.storage import Storage
from coursehub.bootstrap.configs import Config, MongoDBConfig
from coursehub.infrastructure.db.memory_storage import MemoryStorage
from coursehub.infrastructure.db.mongo_storage import MongoStorage
from coursehub.infrastructure.db.retort import build_mongo_retort
from coursehub.infrastructure.db.seed import seed_demo_data

logger = logging.getLogger(__name__)

MongoClient = AsyncIOMotorClient[dict[str, Any]]


@dataclass(slots=True)
class StorageHandle:
    """Storage chosen at startup together with the client it owns"""

    storage: Storage
    client: MongoClient | None = None

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            logger.debug("MongoDB client was closed")


async def connect_mongo(config: MongoDBConfig) -> MongoClient | None:
    """Ping MongoDB up to connect_retries times, None when all attempts fail"""
    for attempt in range(1, config.connect_retries + 1):
        client: MongoClient = AsyncIOMotorClient(
            config.uri,
            serverSelectionTimeoutMS=config.server_selection_timeout_ms,
            tz_aware=True,
        )
        try:
            await client.admin.command("ping")
        except PyMongoError as e:
            client.close()
            logger.warning(
                "MongoDB connection attempt %s/%s failed: %s",
                attempt,
                config.connect_retries,
                e,
            )
            if attempt < config.connect_retries:
                await asyncio.sleep(config.retry_delay)
            continue

        logger.info("MongoDB connected on attempt %s", attempt)
        return client

    return None


async def open_storage(
    config: Config,
    password_hasher: PasswordHasher,
) -> StorageHandle:
    if config.database is None:
        logger.warning("MongoDB is not configured, using in-memory storage")
        handle = StorageHandle(storage=MemoryStorage(password_hasher))
    else:
        client = await connect_mongo(config.database)
        if client is None:
            if config.is_production:
                raise BackendUnavailableError(config.database.connect_retries)
            logger.warning(
                "MongoDB unavailable, falling back to in-memory storage. "
                "Data will not survive a restart",
            )
            handle = StorageHandle(storage=MemoryStorage(password_hasher))
        else:
            storage = MongoStorage(
                database=client[config.database.db_name],
                retort=build_mongo_retort(),
                password_hasher=password_hasher,
            )
            await storage.ensure_indexes()
            handle = StorageHandle(storage=storage, client=client)

    if config.seed_demo_data and handle.storage.name == MemoryStorage.name:
        await seed_demo_data(handle.storage)

    logger.info("Using %s storage", handle.storage.name)
    return handle
