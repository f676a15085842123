# src/bs_order_view/infrastructure/persistence.py
"""OrderViewRepository — MongoDB persistence for the ``order_view`` read model.

Document layout: ``_id`` is the order ObjectId; money buckets are stored at
the top level as ``{amount, currency, amount_rounded}`` with Decimal128
values; absent buckets are omitted from the document.
"""
import dataclasses
import logging
from datetime import datetime
from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReplaceOne

from src.bs_common.database import db_guard
from src.bs_common.datetime_utils import end_of_day, start_of_day
from src.bs_common.enums import OrderStatus, OrderType, VatCurrencyRatesPolicy
from src.bs_common.errors import InvalidCurrencyPolicyError, OrderViewNotFoundError
from src.bs_common.money import ZERO, round_amount, to_decimal, to_decimal128
from src.bs_common.object_id import parse_object_id
from src.bs_order_view.domain.models import (
    MoneyAmount,
    OrderView,
    TurnoverSummaryItem,
    VatSummaryItem,
)
from src.bs_order_view.domain.rules import METRIC_NAMES

logger = logging.getLogger(__name__)

COLLECTION = "order_view"

_DECIMAL_FIELDS = ("total_payment_amount", "order_amount", "tax_rate")
_MONEY_FIELDS = ("order_charge", "order_charge_before_vat")
_SORT = [("created_at", 1), ("_id", 1)]

# VAT report field -> order view bucket it sums
_VAT_SUMS = {
    "payment_gross_revenue_local": "payment_gross_revenue_local",
    "payment_tax_fee_local": "payment_tax_fee_local",
    "payment_refund_gross_revenue_local": "payment_refund_gross_revenue_local",
    "payment_refund_tax_fee_local": "payment_refund_tax_fee_local",
    "fees_total": "fees_total_local",
    "refund_fees_total": "refund_fees_total_local",
}

_TURNOVER_BUCKETS = {
    VatCurrencyRatesPolicy.ON_DAY.value: "payment_gross_revenue_local",
    VatCurrencyRatesPolicy.LAST_DAY.value: "payment_gross_revenue_origin",
}


# ---------------------------------------------------------------------------
# Document mapper
# ---------------------------------------------------------------------------


def _money_to_doc(value: MoneyAmount) -> dict[str, Any]:
    return {
        "amount": to_decimal128(value.amount),
        "currency": value.currency,
        "amount_rounded": to_decimal128(value.amount_rounded),
    }


def _doc_to_money(doc: dict[str, Any]) -> MoneyAmount:
    amount = to_decimal(doc["amount"])
    rounded = doc.get("amount_rounded")
    return MoneyAmount(
        amount=amount,
        currency=doc.get("currency", ""),
        amount_rounded=to_decimal(rounded) if rounded is not None else round_amount(amount),
    )


def _view_to_doc(view: OrderView) -> dict[str, Any]:
    doc: dict[str, Any] = {}
    for f in dataclasses.fields(view):
        if f.name in ("id", "metrics"):
            continue
        doc[f.name] = getattr(view, f.name)
    doc["_id"] = parse_object_id(view.id)
    for name in _DECIMAL_FIELDS:
        doc[name] = to_decimal128(doc[name])
    for name in _MONEY_FIELDS:
        doc[name] = _money_to_doc(doc[name])
    doc["items"] = [{**item, "amount": to_decimal128(item["amount"])} for item in view.items]
    for name, value in view.metrics.items():
        doc[name] = _money_to_doc(value)
    return doc


def _doc_to_view(doc: dict[str, Any]) -> OrderView:
    known = {f.name for f in dataclasses.fields(OrderView)} - {"id", "metrics"}
    kwargs: dict[str, Any] = {k: v for k, v in doc.items() if k in known}
    for name in _DECIMAL_FIELDS:
        kwargs[name] = to_decimal(kwargs[name]) if kwargs.get(name) is not None else ZERO
    for name in _MONEY_FIELDS:
        kwargs[name] = _doc_to_money(kwargs.get(name) or {"amount": 0})
    kwargs["items"] = [
        {**item, "amount": to_decimal(item.get("amount", 0))} for item in kwargs.get("items") or []
    ]
    metrics = {name: _doc_to_money(doc[name]) for name in METRIC_NAMES if doc.get(name)}
    return OrderView(id=str(doc["_id"]), metrics=metrics, **kwargs)


def _round_public(view: OrderView) -> OrderView:
    """Round the public money fields and recompute net = gross - tax - fees.

    Without a gross revenue bucket there is no net to recompute, so the view
    is returned as stored.
    """
    gross = view.bucket("gross_revenue")
    if gross is None:
        return view

    metrics = dict(view.metrics)
    net = round_amount(gross.amount)
    metrics["gross_revenue"] = MoneyAmount.of(net, gross.currency)
    for name in ("tax_fee", "fees_total"):
        bucket = view.bucket(name)
        if bucket is None:
            continue
        rounded = round_amount(bucket.amount)
        metrics[name] = MoneyAmount.of(rounded, bucket.currency)
        net -= rounded
    metrics["net_revenue"] = MoneyAmount.of(net, gross.currency)
    return dataclasses.replace(view, metrics=metrics)


def _lookup_query(order_id: str, uuid: str, merchant_id: str) -> dict[str, Any]:
    query: dict[str, Any] = {}
    if order_id:
        query["_id"] = parse_object_id(order_id)
    if uuid:
        query["uuid"] = uuid
    if merchant_id:
        query["merchant_id"] = merchant_id
    return query


def _doc_to_vat_item(row: dict[str, Any]) -> VatSummaryItem:
    return VatSummaryItem(
        country_code=row["_id"],
        count=int(row.get("count", 0)),
        **{name: to_decimal(row.get(name, 0)) for name in _VAT_SUMS},
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class OrderViewRepository:
    """Implements OrderViewRepositoryProtocol."""

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db[COLLECTION]

    async def replace_many(self, views: list[OrderView]) -> None:
        """Replace-upsert every view keyed by order id in one ordered bulk write."""
        if not views:
            return
        requests = []
        for view in views:
            doc = _view_to_doc(view)
            requests.append(ReplaceOne({"_id": doc["_id"]}, doc, upsert=True))
        ids = [v.id for v in views]
        async with db_guard(COLLECTION, "bulk_write", {"_id": ids}):
            result = await self._collection.bulk_write(requests, ordered=True)
        logger.info(
            "Order views replaced: count=%d upserted=%d modified=%d",
            len(views),
            result.upserted_count,
            result.modified_count,
        )

    async def get_by_id(self, order_id: str) -> OrderView:
        query = {"_id": parse_object_id(order_id)}
        async with db_guard(COLLECTION, "find_one", query):
            doc = await self._collection.find_one(query)
        if doc is None:
            raise OrderViewNotFoundError(order_id)
        return _doc_to_view(doc)

    async def get_public_by_id(self, order_id: str) -> OrderView:
        """Public view looked up by the order's public id, its ``uuid``."""
        return await self.get_public_order_by(uuid=order_id)

    async def get_order_by(
        self, order_id: str = "", uuid: str = "", merchant_id: str = ""
    ) -> OrderView:
        """First view matching every non-empty criterion."""
        query = _lookup_query(order_id, uuid, merchant_id)
        if not query:
            raise OrderViewNotFoundError("")
        async with db_guard(COLLECTION, "find_one", query):
            doc = await self._collection.find_one(query)
        if doc is None:
            raise OrderViewNotFoundError(order_id or uuid)
        return _doc_to_view(doc)

    async def get_public_order_by(
        self, order_id: str = "", uuid: str = "", merchant_id: str = ""
    ) -> OrderView:
        return _round_public(await self.get_order_by(order_id, uuid, merchant_id))

    async def get_many_by(
        self, filters: dict[str, Any], limit: int = 100, offset: int = 0
    ) -> list[OrderView]:
        async with db_guard(COLLECTION, "find", filters):
            cursor = self._collection.find(filters, sort=_SORT, skip=offset, limit=limit)
            docs = await cursor.to_list(length=None)
        return [_doc_to_view(d) for d in docs]

    async def count_by(self, filters: dict[str, Any]) -> int:
        async with db_guard(COLLECTION, "count_documents", filters):
            return await self._collection.count_documents(filters)

    # -----------------------------------------------------------------------
    # Reports
    # -----------------------------------------------------------------------

    async def get_vat_summary(
        self,
        operating_company_id: str,
        country: str,
        is_vat_deduction: bool,
        date_from: datetime,
        date_to: datetime,
    ) -> list[VatSummaryItem]:
        """Local-currency totals of production orders closed in whole days [from, to]."""
        match = {
            "pm_order_close_date": {
                "$gte": start_of_day(date_from),
                "$lte": end_of_day(date_to),
            },
            "country_code": country,
            "is_vat_deduction": is_vat_deduction,
            "operating_company_id": operating_company_id,
            "is_production": True,
        }
        group: dict[str, Any] = {"_id": "$country_code", "count": {"$sum": 1}}
        for name, bucket in _VAT_SUMS.items():
            group[name] = {"$sum": f"${bucket}.amount"}
        pipeline = [{"$match": match}, {"$group": group}]
        rows = await self._aggregate(pipeline)
        return [_doc_to_vat_item(row) for row in rows]

    async def get_turnover_summary(
        self,
        operating_company_id: str,
        country: str,
        currency_policy: str,
        date_from: datetime,
        date_to: datetime,
    ) -> list[TurnoverSummaryItem]:
        """Gross revenue of processed production payments, summed per currency.

        ``on-day`` sums the local basis, ``last-day`` the origin basis. An
        empty ``country`` covers every order with a country code.
        """
        bucket = _TURNOVER_BUCKETS.get(currency_policy)
        if bucket is None:
            raise InvalidCurrencyPolicyError(currency_policy)
        match: dict[str, Any] = {
            "pm_order_close_date": {"$gte": date_from, "$lte": date_to},
            "operating_company_id": operating_company_id,
            "is_production": True,
            "type": OrderType.ORDER.value,
            "status": OrderStatus.PROCESSED.value,
            "payment_gross_revenue_origin": {"$ne": None},
            "country_code": country if country else {"$ne": ""},
        }
        group = {"_id": f"${bucket}.currency", "amount": {"$sum": f"${bucket}.amount"}}
        rows = await self._aggregate([{"$match": match}, {"$group": group}])
        return [
            TurnoverSummaryItem(currency=row["_id"], amount=to_decimal(row["amount"]))
            for row in rows
            if row.get("_id")
        ]

    async def _aggregate(self, pipeline: list[dict[str, Any]]) -> list[dict[str, Any]]:
        async with db_guard(COLLECTION, "aggregate", pipeline):
            cursor = self._collection.aggregate(pipeline)
            return await cursor.to_list(length=None)
