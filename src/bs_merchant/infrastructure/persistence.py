# src/bs_merchant/infrastructure/persistence.py
"""MerchantRepository — MongoDB persistence with a read-through cache.

Cache key: ``merchant:id:{id}``. Reads try the cache first and populate it on
a miss; writes go to MongoDB first and then overwrite the cache entry.
A cache outage on read degrades to MongoDB reads.
"""
import logging
from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from src.bs_common.cache import CacheProtocol
from src.bs_common.database import db_guard
from src.bs_common.errors import CacheError, MerchantNotFoundError
from src.bs_common.object_id import parse_object_id
from src.bs_merchant.domain.models import Merchant

logger = logging.getLogger(__name__)

COLLECTION = "merchant"
CACHE_KEY = "merchant:id:{}"


def _doc_to_merchant(doc: dict[str, Any]) -> Merchant:
    return Merchant(
        id=str(doc["_id"]),
        name=doc.get("name", ""),
        agreement_number=doc.get("agreement_number", ""),
        operating_company_id=doc.get("operating_company_id", ""),
        status=int(doc.get("status", 0)),
    )


def _merchant_to_doc(merchant: Merchant) -> dict[str, Any]:
    return {
        "_id": parse_object_id(merchant.id),
        "name": merchant.name,
        "agreement_number": merchant.agreement_number,
        "operating_company_id": merchant.operating_company_id,
        "status": merchant.status,
    }


class MerchantRepository:
    """Implements MerchantRepositoryProtocol."""

    def __init__(self, db: AsyncIOMotorDatabase, cache: CacheProtocol) -> None:
        self._collection = db[COLLECTION]
        self._cache = cache

    async def get_by_id(self, merchant_id: str) -> Merchant:
        key = CACHE_KEY.format(merchant_id)
        try:
            cached = await self._cache.get(key)
        except CacheError as exc:
            logger.warning("Merchant cache read failed, using MongoDB: %s", exc.message)
            cached = None
        if cached is not None:
            return Merchant.from_cache(cached)

        query = {"_id": parse_object_id(merchant_id)}
        async with db_guard(COLLECTION, "find_one", query):
            doc = await self._collection.find_one(query)
        if doc is None:
            raise MerchantNotFoundError(merchant_id)
        merchant = _doc_to_merchant(doc)
        try:
            await self._cache.set(key, merchant.to_cache())
        except CacheError as exc:
            logger.warning("Merchant cache write failed: %s", exc.message)
        else:
            logger.debug("Merchant cached: merchant_id=%s", merchant_id)
        return merchant

    async def insert(self, merchant: Merchant) -> None:
        doc = _merchant_to_doc(merchant)
        async with db_guard(COLLECTION, "insert_one", {"_id": doc["_id"]}):
            await self._collection.insert_one(doc)
        await self._cache.set(CACHE_KEY.format(merchant.id), merchant.to_cache())

    async def update(self, merchant: Merchant) -> None:
        doc = _merchant_to_doc(merchant)
        query = {"_id": doc["_id"]}
        async with db_guard(COLLECTION, "replace_one", query):
            result = await self._collection.replace_one(query, doc)
        if result.matched_count == 0:
            raise MerchantNotFoundError(merchant.id)
        await self._cache.set(CACHE_KEY.format(merchant.id), merchant.to_cache())
