"""Repository Protocol — dependency inversion for testability.

Unit tests inject a fake that conforms to this Protocol.
Infrastructure layer provides the MongoDB implementation.
"""

from collections.abc import Collection
from decimal import Decimal
from typing import Protocol

from src.bs_ledger.domain.models import AccountingEntry, CurrencyField


class AccountingEntryRepositoryProtocol(Protocol):
    async def insert(self, entry: AccountingEntry) -> str: ...

    async def multiple_insert(self, entries: list[AccountingEntry]) -> list[str]: ...

    async def get_by_id(self, entry_id: str) -> AccountingEntry: ...

    async def find_by_source(self, source_id: str, source_type: str) -> list[AccountingEntry]: ...

    async def find(
        self, order_ids: list[str], entry_types: Collection[str] | None = None
    ) -> list[AccountingEntry]: ...

    async def sum_grouped_by_currency(
        self,
        order_id: str,
        entry_types: Collection[str],
        currency_field: CurrencyField,
    ) -> dict[str, Decimal]: ...

    async def get_distinct_by_source_id(self) -> list[str]: ...
