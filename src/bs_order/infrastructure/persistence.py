# src/bs_order/infrastructure/persistence.py
"""OrderRepository — MongoDB persistence for the ``order`` collection."""
from decimal import Decimal
from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from src.bs_common.database import db_guard
from src.bs_common.errors import OrderNotFoundError
from src.bs_common.money import ZERO, to_decimal, to_decimal128
from src.bs_common.object_id import id_match, parse_object_id, parse_object_ids
from src.bs_order.domain.models import (
    Order,
    OrderItem,
    OrderProject,
    OrderUser,
    ParentOrder,
    PaymentMethod,
)

COLLECTION = "order"


# ---------------------------------------------------------------------------
# Document mapper
# ---------------------------------------------------------------------------


def _money(value: Any) -> Decimal:
    return ZERO if value is None else to_decimal(value)


def _doc_to_order(doc: dict[str, Any]) -> Order:
    """Convert a stored document to an Order domain object."""
    project = doc.get("project") or {}
    user = doc.get("user") or {}
    payment_method = doc.get("payment_method")
    parent = doc.get("parent_order")
    return Order(
        id=str(doc["_id"]),
        uuid=doc.get("uuid", ""),
        project=OrderProject(
            id=str(project.get("id", "")),
            merchant_id=str(project.get("merchant_id", "")),
            name=project.get("name", ""),
        ),
        type=doc.get("type", "order"),
        status=doc.get("status", ""),
        currency=doc.get("currency", ""),
        total_payment_amount=_money(doc.get("total_payment_amount")),
        order_amount=_money(doc.get("order_amount")),
        charge_amount=_money(doc.get("charge_amount")),
        charge_currency=doc.get("charge_currency", ""),
        country_code=doc.get("country_code", ""),
        user=OrderUser(
            id=str(user.get("id", "")),
            email=user.get("email", ""),
            locale=user.get("locale", ""),
        ),
        billing_address=doc.get("billing_address"),
        tax_rate=_money(doc.get("tax_rate")),
        mcc_code=doc.get("mcc_code", ""),
        operating_company_id=doc.get("operating_company_id", ""),
        is_production=bool(doc.get("is_production", False)),
        is_vat_deduction=bool(doc.get("is_vat_deduction", False)),
        vat_payer=doc.get("vat_payer", ""),
        is_high_risk=bool(doc.get("is_high_risk", False)),
        is_refund_allowed=bool(doc.get("is_refund_allowed", False)),
        payment_method=(
            PaymentMethod(
                id=str(payment_method.get("id", "")),
                name=payment_method.get("name", ""),
                terminal_id=payment_method.get("terminal_id", ""),
            )
            if payment_method
            else None
        ),
        transaction=doc.get("transaction", ""),
        metadata=dict(doc.get("metadata") or {}),
        items=[
            OrderItem(
                id=str(item.get("id", "")),
                name=item.get("name", ""),
                amount=_money(item.get("amount")),
                currency=item.get("currency", ""),
            )
            for item in doc.get("items") or []
        ],
        parent_order=(
            ParentOrder(id=str(parent["id"]), uuid=parent.get("uuid", "")) if parent else None
        ),
        refund=doc.get("refund"),
        cancellation=doc.get("cancellation"),
        issuer=doc.get("issuer"),
        recurring=bool(doc.get("recurring", False)),
        recurring_id=doc.get("recurring_id", ""),
        royalty_report_id=doc.get("royalty_report_id", ""),
        created_at=doc.get("created_at"),
        payment_method_order_closed_at=doc.get("payment_method_order_closed_at"),
    )


def _order_to_doc(order: Order) -> dict[str, Any]:
    pm = order.payment_method
    return {
        "_id": parse_object_id(order.id),
        "uuid": order.uuid,
        "type": order.type,
        "status": order.status,
        "project": {
            "id": order.project.id,
            "merchant_id": order.project.merchant_id,
            "name": order.project.name,
        },
        "currency": order.currency,
        "total_payment_amount": to_decimal128(order.total_payment_amount),
        "order_amount": to_decimal128(order.order_amount),
        "charge_amount": to_decimal128(order.charge_amount),
        "charge_currency": order.charge_currency,
        "country_code": order.country_code,
        "user": {"id": order.user.id, "email": order.user.email, "locale": order.user.locale},
        "billing_address": order.billing_address,
        "tax_rate": to_decimal128(order.tax_rate),
        "mcc_code": order.mcc_code,
        "operating_company_id": order.operating_company_id,
        "is_production": order.is_production,
        "is_vat_deduction": order.is_vat_deduction,
        "vat_payer": order.vat_payer,
        "is_high_risk": order.is_high_risk,
        "is_refund_allowed": order.is_refund_allowed,
        "payment_method": (
            {"id": pm.id, "name": pm.name, "terminal_id": pm.terminal_id} if pm else None
        ),
        "transaction": order.transaction,
        "metadata": order.metadata,
        "items": [
            {
                "id": i.id,
                "name": i.name,
                "amount": to_decimal128(i.amount),
                "currency": i.currency,
            }
            for i in order.items
        ],
        "parent_order": (
            {"id": order.parent_order.id, "uuid": order.parent_order.uuid}
            if order.parent_order
            else None
        ),
        "refund": order.refund,
        "cancellation": order.cancellation,
        "issuer": order.issuer,
        "recurring": order.recurring,
        "recurring_id": order.recurring_id,
        "royalty_report_id": order.royalty_report_id,
        "created_at": order.created_at,
        "payment_method_order_closed_at": order.payment_method_order_closed_at,
    }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class OrderRepository:
    """Implements OrderRepositoryProtocol."""

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db[COLLECTION]

    async def get_by_id(self, order_id: str) -> Order:
        query = {"_id": parse_object_id(order_id)}
        async with db_guard(COLLECTION, "find_one", query):
            doc = await self._collection.find_one(query)
        if doc is None:
            raise OrderNotFoundError(order_id)
        return _doc_to_order(doc)

    async def get_by_uuid(self, uuid: str) -> Order:
        query = {"uuid": uuid}
        async with db_guard(COLLECTION, "find_one", query):
            doc = await self._collection.find_one(query)
        if doc is None:
            raise OrderNotFoundError(uuid)
        return _doc_to_order(doc)

    async def find_by_ids(self, order_ids: list[str]) -> list[Order]:
        """Orders for the given ids; ids with no document are simply absent."""
        if not order_ids:
            return []
        query = id_match("_id", parse_object_ids(order_ids))
        async with db_guard(COLLECTION, "find", query):
            docs = await self._collection.find(query).to_list(length=None)
        return [_doc_to_order(d) for d in docs]

    async def insert(self, order: Order) -> None:
        doc = _order_to_doc(order)
        async with db_guard(COLLECTION, "insert_one", {"_id": doc["_id"]}):
            await self._collection.insert_one(doc)

    async def update(self, order: Order) -> None:
        doc = _order_to_doc(order)
        query = {"_id": doc["_id"]}
        async with db_guard(COLLECTION, "replace_one", query):
            result = await self._collection.replace_one(query, doc)
        if result.matched_count == 0:
            raise OrderNotFoundError(order.id)
