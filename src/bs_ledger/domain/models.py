"""Ledger domain models — pure dataclasses, no driver dependency."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from src.bs_common.money import ZERO


class CurrencyField(str, Enum):
    """Grouping key for ledger sums; each currency field has a paired amount field."""

    CURRENCY = "currency"
    LOCAL_CURRENCY = "local_currency"
    ORIGINAL_CURRENCY = "original_currency"

    @property
    def amount_field(self) -> str:
        # currency -> amount, local_currency -> local_amount, ...
        return self.value.replace("currency", "amount")


@dataclass(frozen=True)
class EntrySource:
    id: str      # ObjectId hex of the order (or refund order)
    type: str    # collection of the source document: "order" / "refund"


@dataclass(frozen=True)
class AccountingEntry:
    """One signed accounting fact. Never mutated; a correction is a newer entry."""

    id: str
    entry_type: str                  # AccountingEntryType value
    source: EntrySource
    amount: Decimal
    currency: str
    local_amount: Decimal = ZERO
    local_currency: str = ""
    original_amount: Decimal = ZERO
    original_currency: str = ""
    object: str = "balance_transaction"
    merchant_id: str = ""
    country: str = ""
    reason: str = ""
    status: str = ""
    operating_company_id: str = ""
    created_at: datetime | None = None
    available_on: datetime | None = None

    @property
    def source_id(self) -> str:
        return self.source.id

    def money(self, field: CurrencyField) -> tuple[Decimal, str]:
        """Return (amount, currency) for the requested currency basis."""
        return getattr(self, field.amount_field), getattr(self, field.value)
