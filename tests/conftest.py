"""Shared test fixtures: in-memory repositories and domain factories.

The fakes conform to the domain Protocols, so services can be exercised end
to end without MongoDB.
"""

import copy
from collections.abc import Callable, Collection
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

import pytest
from bson import ObjectId

from src.bs_common.errors import MerchantNotFoundError, OrderNotFoundError, OrderViewNotFoundError
from src.bs_ledger.domain.models import AccountingEntry, CurrencyField, EntrySource
from src.bs_merchant.domain.models import Merchant
from src.bs_order.domain.models import Order, OrderProject, OrderUser, PaymentMethod
from src.bs_order_view.application.service import OrderViewService
from src.bs_order_view.domain.models import OrderView

BASE_TIME = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
MERCHANT_ID = "65a0000000000000000000aa"


class FakeLedgerRepository:
    def __init__(self) -> None:
        self.entries: list[AccountingEntry] = []
        self.find_calls: list[list[str]] = []

    async def insert(self, entry: AccountingEntry) -> str:
        self.entries.append(entry)
        return entry.id

    async def multiple_insert(self, entries: list[AccountingEntry]) -> list[str]:
        self.entries.extend(entries)
        return [e.id for e in entries]

    async def get_by_id(self, entry_id: str) -> AccountingEntry:
        return next(e for e in self.entries if e.id == entry_id)

    async def find_by_source(self, source_id: str, source_type: str) -> list[AccountingEntry]:
        return [
            e for e in self.entries if e.source.id == source_id and e.source.type == source_type
        ]

    async def find(
        self, order_ids: list[str], entry_types: Collection[str] | None = None
    ) -> list[AccountingEntry]:
        self.find_calls.append(list(order_ids))
        return [
            e
            for e in self.entries
            if e.source_id in order_ids and (not entry_types or e.entry_type in entry_types)
        ]

    async def sum_grouped_by_currency(
        self, order_id: str, entry_types: Collection[str], currency_field: CurrencyField
    ) -> dict[str, Decimal]:
        sums: dict[str, Decimal] = {}
        for e in self.entries:
            if e.source_id == order_id and e.entry_type in entry_types:
                amount, currency = e.money(currency_field)
                sums[currency] = sums.get(currency, Decimal("0")) + amount
        return sums

    async def get_distinct_by_source_id(self) -> list[str]:
        return list(
            dict.fromkeys(
                e.source_id for e in self.entries if e.source.type in ("order", "refund")
            )
        )


class FakeOrderRepository:
    def __init__(self) -> None:
        self.orders: dict[str, Order] = {}

    async def get_by_id(self, order_id: str) -> Order:
        if order_id not in self.orders:
            raise OrderNotFoundError(order_id)
        return self.orders[order_id]

    async def get_by_uuid(self, uuid: str) -> Order:
        for order in self.orders.values():
            if order.uuid == uuid:
                return order
        raise OrderNotFoundError(uuid)

    async def find_by_ids(self, order_ids: list[str]) -> list[Order]:
        return [self.orders[oid] for oid in order_ids if oid in self.orders]

    async def insert(self, order: Order) -> None:
        self.orders[order.id] = order

    async def update(self, order: Order) -> None:
        self.orders[order.id] = order


class FakeMerchantRepository:
    def __init__(self) -> None:
        self.merchants: dict[str, Merchant] = {}

    async def get_by_id(self, merchant_id: str) -> Merchant:
        if merchant_id not in self.merchants:
            raise MerchantNotFoundError(merchant_id)
        return self.merchants[merchant_id]

    async def insert(self, merchant: Merchant) -> None:
        self.merchants[merchant.id] = merchant

    async def update(self, merchant: Merchant) -> None:
        self.merchants[merchant.id] = merchant


class FakeOrderViewRepository:
    def __init__(self) -> None:
        self.views: dict[str, OrderView] = {}
        self.write_calls = 0

    async def replace_many(self, views: list[OrderView]) -> None:
        self.write_calls += 1
        for view in views:
            self.views[view.id] = copy.deepcopy(view)

    async def get_by_id(self, order_id: str) -> OrderView:
        if order_id not in self.views:
            raise OrderViewNotFoundError(order_id)
        return self.views[order_id]

    async def get_public_by_id(self, order_id: str) -> OrderView:
        return await self.get_order_by(uuid=order_id)

    async def get_order_by(
        self, order_id: str = "", uuid: str = "", merchant_id: str = ""
    ) -> OrderView:
        for view in self.views.values():
            if (
                (not order_id or view.id == order_id)
                and (not uuid or view.uuid == uuid)
                and (not merchant_id or view.merchant_id == merchant_id)
            ):
                return view
        raise OrderViewNotFoundError(order_id or uuid)

    async def get_public_order_by(
        self, order_id: str = "", uuid: str = "", merchant_id: str = ""
    ) -> OrderView:
        return await self.get_order_by(order_id, uuid, merchant_id)

    async def get_many_by(
        self, filters: dict[str, Any], limit: int = 100, offset: int = 0
    ) -> list[OrderView]:
        matched = [
            v
            for v in self.views.values()
            if all(getattr(v, k) == val for k, val in filters.items())
        ]
        return matched[offset : offset + limit]

    async def count_by(self, filters: dict[str, Any]) -> int:
        return len(await self.get_many_by(filters, limit=len(self.views)))


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_entry() -> Callable[..., AccountingEntry]:
    counter = iter(range(1, 1_000_000))

    def _make(order_id: str, entry_type: str, amount: str | int, currency: str = "USD", **kwargs):
        n = next(counter)
        defaults: dict[str, Any] = dict(
            id=str(ObjectId()),
            entry_type=entry_type,
            source=EntrySource(id=order_id, type=kwargs.pop("source_type", "order")),
            amount=Decimal(str(amount)),
            currency=currency,
            local_amount=Decimal(str(amount)),
            local_currency=currency,
            original_amount=Decimal(str(amount)),
            original_currency=currency,
            merchant_id=MERCHANT_ID,
            created_at=BASE_TIME + timedelta(seconds=n),
        )
        defaults.update(kwargs)
        return AccountingEntry(**defaults)

    return _make


@pytest.fixture
def make_order() -> Callable[..., Order]:
    def _make(order_id: str, **kwargs) -> Order:
        defaults: dict[str, Any] = dict(
            id=order_id,
            uuid=f"uuid-{order_id[-4:]}",
            project=OrderProject(
                id="65a0000000000000000000bb", merchant_id=MERCHANT_ID, name="Game"
            ),
            type="order",
            status="processed",
            currency="USD",
            total_payment_amount=Decimal("120"),
            order_amount=Decimal("100"),
            charge_amount=Decimal("120"),
            charge_currency="USD",
            country_code="US",
            user=OrderUser(id="user-1", email="buyer@example.com", locale="en-US"),
            payment_method=PaymentMethod(id="pm-1", name="Bank card", terminal_id="T-15"),
            metadata={"campaign": "spring"},
            created_at=BASE_TIME,
        )
        defaults.update(kwargs)
        return Order(**defaults)

    return _make


@pytest.fixture
def make_merchant() -> Callable[..., Merchant]:
    def _make(merchant_id: str = MERCHANT_ID, **kwargs) -> Merchant:
        defaults: dict[str, Any] = dict(
            id=merchant_id,
            name="Acme Games",
            agreement_number="AG-0001",
            operating_company_id="oc-1",
            status=4,
        )
        defaults.update(kwargs)
        return Merchant(**defaults)

    return _make


# ---------------------------------------------------------------------------
# Repositories and service
# ---------------------------------------------------------------------------


@pytest.fixture
def ledger_repo() -> FakeLedgerRepository:
    return FakeLedgerRepository()


@pytest.fixture
def order_repo() -> FakeOrderRepository:
    return FakeOrderRepository()


@pytest.fixture
def merchant_repo(make_merchant) -> FakeMerchantRepository:
    repo = FakeMerchantRepository()
    merchant = make_merchant()
    repo.merchants[merchant.id] = merchant
    return repo


@pytest.fixture
def view_repo() -> FakeOrderViewRepository:
    return FakeOrderViewRepository()


@pytest.fixture
def service(ledger_repo, order_repo, merchant_repo, view_repo) -> OrderViewService:
    return OrderViewService(
        ledger_repo=ledger_repo,
        order_repo=order_repo,
        merchant_repo=merchant_repo,
        view_repo=view_repo,
        batch_size=2,
    )
