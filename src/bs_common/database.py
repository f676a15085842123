"""MongoDB client factory, index bootstrap and query guard.

Every repository call runs inside ``db_guard`` so driver failures are logged
once with collection/operation/query and surface as AppError subclasses.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, IndexModel
from pymongo.errors import ConnectionFailure, PyMongoError

from config.settings import settings
from src.bs_common.errors import DatabaseQueryError, StoreUnavailableError

logger = logging.getLogger(__name__)

_client: AsyncIOMotorClient | None = None

# collection name -> indexes created on startup
_INDEXES: dict[str, list[IndexModel]] = {
    "accounting_entry": [
        IndexModel([("source.id", ASCENDING), ("source.type", ASCENDING)]),
        IndexModel([("source.id", ASCENDING), ("type", ASCENDING)]),
        IndexModel([("merchant_id", ASCENDING), ("created_at", DESCENDING)]),
    ],
    "order": [
        IndexModel([("uuid", ASCENDING)], unique=True),
        IndexModel([("project.merchant_id", ASCENDING)]),
    ],
    "order_view": [
        IndexModel([("merchant_id", ASCENDING), ("created_at", ASCENDING)]),
        IndexModel([("uuid", ASCENDING)]),
        IndexModel(
            [
                ("operating_company_id", ASCENDING),
                ("pm_order_close_date", ASCENDING),
                ("country_code", ASCENDING),
            ]
        ),
    ],
}


def get_client() -> AsyncIOMotorClient:
    """Get or create the shared Motor client."""
    global _client  # noqa: PLW0603
    if _client is None:
        _client = AsyncIOMotorClient(
            settings.MONGODB_URL,
            serverSelectionTimeoutMS=settings.MONGODB_TIMEOUT_MS,
            tz_aware=True,
        )
    return _client


def get_database() -> AsyncIOMotorDatabase:
    return get_client()[settings.MONGODB_DATABASE]


def close_client() -> None:
    """Close the Motor client."""
    global _client  # noqa: PLW0603
    if _client is not None:
        _client.close()
        _client = None


@asynccontextmanager
async def db_guard(
    collection: str,
    operation: str,
    query: Any = None,
) -> AsyncIterator[None]:
    """Translate driver errors.

    ConnectionFailure -> StoreUnavailableError, any other PyMongoError -> DatabaseQueryError.
    """
    try:
        yield
    except ConnectionFailure as exc:
        logger.error(
            "Database unavailable: collection=%s operation=%s query=%s error=%s",
            collection,
            operation,
            query,
            exc,
        )
        raise StoreUnavailableError(collection, str(exc)) from exc
    except PyMongoError as exc:
        logger.error(
            "Database query failed: collection=%s operation=%s query=%s error=%s",
            collection,
            operation,
            query,
            exc,
        )
        raise DatabaseQueryError(collection, operation, str(exc)) from exc


async def ping(db: AsyncIOMotorDatabase) -> None:
    async with db_guard("admin", "ping"):
        await db.client.admin.command("ping")


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    for collection, indexes in _INDEXES.items():
        async with db_guard(collection, "create_indexes"):
            await db[collection].create_indexes(indexes)
        logger.debug("Indexes ensured: collection=%s count=%d", collection, len(indexes))
