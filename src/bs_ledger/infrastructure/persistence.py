# src/bs_ledger/infrastructure/persistence.py
"""AccountingEntryRepository — MongoDB persistence for the append-only ledger."""
import logging
from collections.abc import Collection
from decimal import Decimal
from typing import Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from src.bs_common.database import db_guard
from src.bs_common.enums import AccountingEntryType, OrderType
from src.bs_common.errors import AccountingEntryNotFoundError, MalformedEntryError
from src.bs_common.money import ZERO, to_decimal, to_decimal128
from src.bs_common.object_id import id_match, parse_object_id, parse_object_ids
from src.bs_ledger.domain.models import AccountingEntry, CurrencyField, EntrySource

logger = logging.getLogger(__name__)

COLLECTION = "accounting_entry"

_ENTRY_TYPES = frozenset(t.value for t in AccountingEntryType)

# Deterministic read order; the aggregation engine relies on it for supersession.
_SORT = [("created_at", 1), ("_id", 1)]
# Source types whose source.id is an order id.
ORDER_SOURCE_TYPES = [OrderType.ORDER.value, OrderType.REFUND.value]


# ---------------------------------------------------------------------------
# Document mapper
# ---------------------------------------------------------------------------


def _entry_to_doc(entry: AccountingEntry) -> dict[str, Any]:
    return {
        "_id": parse_object_id(entry.id),
        "object": entry.object,
        "type": entry.entry_type,
        "source": {"id": parse_object_id(entry.source.id), "type": entry.source.type},
        "merchant_id": parse_object_id(entry.merchant_id) if entry.merchant_id else None,
        "amount": to_decimal128(entry.amount),
        "currency": entry.currency,
        "local_amount": to_decimal128(entry.local_amount),
        "local_currency": entry.local_currency,
        "original_amount": to_decimal128(entry.original_amount),
        "original_currency": entry.original_currency,
        "country": entry.country,
        "reason": entry.reason,
        "status": entry.status,
        "operating_company_id": entry.operating_company_id,
        "created_at": entry.created_at,
        "available_on": entry.available_on,
    }


def _optional_amount(doc: dict[str, Any], field: str) -> Decimal:
    value = doc.get(field)
    return ZERO if value is None else to_decimal(value)


def _doc_to_entry(doc: dict[str, Any]) -> AccountingEntry:
    """Convert a stored document to an AccountingEntry. Raises MalformedEntryError."""
    entry_id = str(doc.get("_id", "<missing>"))
    entry_type = doc.get("type")
    if entry_type not in _ENTRY_TYPES:
        raise MalformedEntryError(entry_id, f"unknown entry type {entry_type!r}")
    source = doc.get("source")
    if not isinstance(source, dict) or source.get("id") is None:
        raise MalformedEntryError(entry_id, "missing source.id")
    if "amount" not in doc or not doc.get("currency"):
        raise MalformedEntryError(entry_id, "missing amount or currency")
    try:
        amount = to_decimal(doc["amount"])
        local_amount = _optional_amount(doc, "local_amount")
        original_amount = _optional_amount(doc, "original_amount")
    except ValueError as exc:
        raise MalformedEntryError(entry_id, str(exc)) from exc

    merchant_id = doc.get("merchant_id")
    return AccountingEntry(
        id=entry_id,
        entry_type=entry_type,
        source=EntrySource(id=str(source["id"]), type=source.get("type", "")),
        amount=amount,
        currency=doc["currency"],
        local_amount=local_amount,
        local_currency=doc.get("local_currency") or "",
        original_amount=original_amount,
        original_currency=doc.get("original_currency") or "",
        object=doc.get("object") or "balance_transaction",
        merchant_id=str(merchant_id) if merchant_id else "",
        country=doc.get("country") or "",
        reason=doc.get("reason") or "",
        status=doc.get("status") or "",
        operating_company_id=doc.get("operating_company_id") or "",
        created_at=doc.get("created_at"),
        available_on=doc.get("available_on"),
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class AccountingEntryRepository:
    """Implements AccountingEntryRepositoryProtocol. Entries are never updated."""

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db[COLLECTION]

    async def insert(self, entry: AccountingEntry) -> str:
        doc = _entry_to_doc(entry)
        async with db_guard(COLLECTION, "insert_one", {"_id": doc["_id"]}):
            await self._collection.insert_one(doc)
        return entry.id

    async def multiple_insert(self, entries: list[AccountingEntry]) -> list[str]:
        if not entries:
            return []
        docs = [_entry_to_doc(e) for e in entries]
        async with db_guard(COLLECTION, "insert_many", {"count": len(docs)}):
            await self._collection.insert_many(docs, ordered=True)
        return [e.id for e in entries]

    async def get_by_id(self, entry_id: str) -> AccountingEntry:
        query = {"_id": parse_object_id(entry_id)}
        async with db_guard(COLLECTION, "find_one", query):
            doc = await self._collection.find_one(query)
        if doc is None:
            raise AccountingEntryNotFoundError(entry_id)
        return _doc_to_entry(doc)

    async def find_by_source(self, source_id: str, source_type: str) -> list[AccountingEntry]:
        query = {"source.id": parse_object_id(source_id), "source.type": source_type}
        return await self._find(query)

    async def find(
        self, order_ids: list[str], entry_types: Collection[str] | None = None
    ) -> list[AccountingEntry]:
        """Entries whose source is one of ``order_ids``, oldest first."""
        if not order_ids:
            return []
        query: dict[str, Any] = id_match("source.id", parse_object_ids(order_ids))
        if entry_types:
            query["type"] = {"$in": sorted(entry_types)}
        return await self._find(query)

    async def sum_grouped_by_currency(
        self,
        order_id: str,
        entry_types: Collection[str],
        currency_field: CurrencyField,
    ) -> dict[str, Decimal]:
        """Plain (unsigned) sum of the paired amount field per currency."""
        pipeline: list[dict[str, Any]] = [
            {
                "$match": {
                    "source.id": parse_object_id(order_id),
                    "type": {"$in": sorted(entry_types)},
                }
            },
            {
                "$group": {
                    "_id": f"${currency_field.value}",
                    "amount": {"$sum": f"${currency_field.amount_field}"},
                }
            },
        ]
        async with db_guard(COLLECTION, "aggregate", pipeline):
            cursor = self._collection.aggregate(pipeline)
            rows = await cursor.to_list(length=None)
        return {row["_id"]: to_decimal(row["amount"]) for row in rows if row.get("_id")}

    async def get_distinct_by_source_id(self) -> list[str]:
        """Ids of every order or refund that has ledger entries."""
        query = {"source.type": {"$in": ORDER_SOURCE_TYPES}}
        async with db_guard(COLLECTION, "distinct", query):
            values = await self._collection.distinct("source.id", query)
        return [str(v) for v in values if isinstance(v, ObjectId)]

    async def _find(self, query: dict[str, Any]) -> list[AccountingEntry]:
        async with db_guard(COLLECTION, "find", query):
            cursor = self._collection.find(query, sort=_SORT)
            docs = await cursor.to_list(length=None)
        logger.debug("Ledger entries loaded: count=%d query=%s", len(docs), query)
        return [_doc_to_entry(d) for d in docs]
