"""Order domain models — read-only for the order-view pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from src.bs_common.enums import OrderType
from src.bs_common.money import ZERO


@dataclass(frozen=True)
class OrderProject:
    id: str
    merchant_id: str
    name: str = ""


@dataclass(frozen=True)
class OrderUser:
    id: str = ""
    email: str = ""
    locale: str = ""


@dataclass(frozen=True)
class PaymentMethod:
    id: str = ""
    name: str = ""
    terminal_id: str = ""


@dataclass(frozen=True)
class OrderItem:
    id: str
    name: str
    amount: Decimal
    currency: str


@dataclass(frozen=True)
class ParentOrder:
    id: str
    uuid: str


@dataclass
class Order:
    """Order as stored in the ``order`` collection.

    ``type`` is "order" for a payment and "refund" for a refund order, whose
    ``parent_order`` points at the original payment.
    """

    id: str
    uuid: str
    project: OrderProject
    type: str = OrderType.ORDER.value
    status: str = ""
    currency: str = ""
    total_payment_amount: Decimal = ZERO
    order_amount: Decimal = ZERO
    charge_amount: Decimal = ZERO
    charge_currency: str = ""
    country_code: str = ""
    user: OrderUser = field(default_factory=OrderUser)
    billing_address: dict[str, Any] | None = None
    tax_rate: Decimal = ZERO
    mcc_code: str = ""
    operating_company_id: str = ""
    is_production: bool = False
    is_vat_deduction: bool = False
    vat_payer: str = ""
    is_high_risk: bool = False
    is_refund_allowed: bool = False
    payment_method: PaymentMethod | None = None
    transaction: str = ""
    metadata: dict[str, str] = field(default_factory=dict)
    items: list[OrderItem] = field(default_factory=list)
    parent_order: ParentOrder | None = None
    refund: dict[str, Any] | None = None
    cancellation: dict[str, Any] | None = None
    issuer: dict[str, Any] | None = None
    recurring: bool = False
    recurring_id: str = ""
    royalty_report_id: str = ""
    created_at: datetime | None = None
    payment_method_order_closed_at: datetime | None = None

    @property
    def merchant_id(self) -> str:
        return self.project.merchant_id

    @property
    def is_refund(self) -> bool:
        return self.type != OrderType.ORDER.value
