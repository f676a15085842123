"""Order view domain models — the denormalized per-order reporting record."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from src.bs_common.money import ZERO, round_amount


@dataclass(frozen=True)
class MoneyAmount:
    amount: Decimal
    currency: str
    amount_rounded: Decimal

    @classmethod
    def of(cls, amount: Decimal, currency: str) -> "MoneyAmount":
        return cls(amount=amount, currency=currency, amount_rounded=round_amount(amount))


@dataclass
class OrderView:
    """Read model for one order. Replaced wholesale on every projection.

    ``metrics`` holds the ledger buckets by name; a bucket with no ledger
    entries is absent from the dict, never present with a zero amount.
    """

    id: str
    uuid: str
    type: str
    status: str
    created_at: datetime | None
    project_id: str
    project_name: str
    merchant_id: str
    merchant_name: str
    merchant_agreement_number: str
    merchant_payout_currency: str
    operating_company_id: str
    currency: str
    total_payment_amount: Decimal
    order_amount: Decimal
    order_charge: MoneyAmount
    order_charge_before_vat: MoneyAmount
    country_code: str = ""
    user_id: str = ""
    user_email: str = ""
    locale: str = ""
    payment_method_id: str = ""
    payment_method_name: str = ""
    payment_method_terminal_id: str = ""
    transaction: str = ""
    tax_rate: Decimal = ZERO
    mcc_code: str = ""
    is_production: bool = False
    is_vat_deduction: bool = False
    vat_payer: str = ""
    is_high_risk: bool = False
    is_refund_allowed: bool = False
    billing_address: dict[str, Any] | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    metadata_values: list[str] = field(default_factory=list)
    items: list[dict[str, Any]] = field(default_factory=list)
    parent_order: dict[str, str] | None = None
    refund: dict[str, Any] | None = None
    cancellation: dict[str, Any] | None = None
    issuer: dict[str, Any] | None = None
    recurring: bool = False
    recurring_id: str = ""
    royalty_report_id: str = ""
    pm_order_close_date: datetime | None = None
    metrics: dict[str, MoneyAmount] = field(default_factory=dict)

    def bucket(self, name: str) -> MoneyAmount | None:
        return self.metrics.get(name)


@dataclass(frozen=True)
class VatSummaryItem:
    """Local-currency VAT report totals for one country."""

    country_code: str
    count: int
    payment_gross_revenue_local: Decimal
    payment_tax_fee_local: Decimal
    payment_refund_gross_revenue_local: Decimal
    payment_refund_tax_fee_local: Decimal
    fees_total: Decimal
    refund_fees_total: Decimal


@dataclass(frozen=True)
class TurnoverSummaryItem:
    currency: str
    amount: Decimal
