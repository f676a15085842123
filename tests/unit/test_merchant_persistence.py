# tests/unit/test_merchant_persistence.py
"""Unit tests for MerchantRepository read-through caching."""
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId

from src.bs_common.cache import InMemoryCache
from src.bs_common.errors import CacheError, MerchantNotFoundError
from src.bs_merchant.domain.models import Merchant
from src.bs_merchant.infrastructure.persistence import MerchantRepository

MERCHANT_ID = "65a0000000000000000000aa"


@pytest.fixture
def collection() -> MagicMock:
    col = MagicMock()
    col.find_one = AsyncMock(
        return_value={
            "_id": ObjectId(MERCHANT_ID),
            "name": "Acme Games",
            "agreement_number": "AG-0001",
            "operating_company_id": "oc-1",
            "status": 4,
        }
    )
    col.insert_one = AsyncMock()
    col.replace_one = AsyncMock(return_value=MagicMock(matched_count=1))
    return col


@pytest.fixture
def cache() -> InMemoryCache:
    return InMemoryCache(default_ttl=300)


@pytest.fixture
def repo(collection, cache) -> MerchantRepository:
    db = MagicMock()
    db.__getitem__.return_value = collection
    return MerchantRepository(db, cache)


class TestMerchantRepository:
    async def test_miss_reads_mongo_and_populates_cache(self, repo, collection, cache) -> None:
        merchant = await repo.get_by_id(MERCHANT_ID)
        assert merchant.name == "Acme Games"
        assert await cache.get(f"merchant:id:{MERCHANT_ID}") == merchant.to_cache()

    async def test_hit_skips_mongo(self, repo, collection) -> None:
        await repo.get_by_id(MERCHANT_ID)
        await repo.get_by_id(MERCHANT_ID)
        collection.find_one.assert_awaited_once()

    async def test_not_found(self, repo, collection) -> None:
        collection.find_one.return_value = None
        with pytest.raises(MerchantNotFoundError):
            await repo.get_by_id(MERCHANT_ID)

    async def test_update_refreshes_cache(self, repo, cache) -> None:
        await repo.get_by_id(MERCHANT_ID)
        renamed = Merchant(id=MERCHANT_ID, name="Acme Studios", agreement_number="AG-0001")
        await repo.update(renamed)
        assert (await repo.get_by_id(MERCHANT_ID)).name == "Acme Studios"

    async def test_update_missing_leaves_cache(self, repo, collection, cache) -> None:
        collection.replace_one.return_value = MagicMock(matched_count=0)
        with pytest.raises(MerchantNotFoundError):
            await repo.update(Merchant(id=MERCHANT_ID, name="Ghost"))
        assert await cache.get(f"merchant:id:{MERCHANT_ID}") is None

    async def test_insert_writes_mongo_then_cache(self, repo, collection, cache) -> None:
        merchant = Merchant(id=MERCHANT_ID, name="New")
        await repo.insert(merchant)
        assert collection.insert_one.call_args.args[0]["_id"] == ObjectId(MERCHANT_ID)
        assert (await cache.get(f"merchant:id:{MERCHANT_ID}"))["name"] == "New"

    async def test_cache_read_failure_falls_back_to_mongo(self, collection) -> None:
        db = MagicMock()
        db.__getitem__.return_value = collection
        broken = MagicMock()
        broken.get = AsyncMock(side_effect=CacheError("merchant:id:x", "down"))
        broken.set = AsyncMock(side_effect=CacheError("merchant:id:x", "down"))
        repo = MerchantRepository(db, broken)
        merchant = await repo.get_by_id(MERCHANT_ID)
        assert merchant.name == "Acme Games"
        collection.find_one.assert_awaited_once()
        broken.set.assert_awaited_once()

    async def test_cache_read_failure_still_reports_missing(self, collection) -> None:
        db = MagicMock()
        db.__getitem__.return_value = collection
        collection.find_one.return_value = None
        broken = MagicMock()
        broken.get = AsyncMock(side_effect=CacheError("merchant:id:x", "down"))
        repo = MerchantRepository(db, broken)
        with pytest.raises(MerchantNotFoundError):
            await repo.get_by_id(MERCHANT_ID)
