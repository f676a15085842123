"""Repository Protocol for order views."""

from datetime import datetime
from typing import Any, Protocol

from src.bs_order_view.domain.models import OrderView, TurnoverSummaryItem, VatSummaryItem


class OrderViewRepositoryProtocol(Protocol):
    async def replace_many(self, views: list[OrderView]) -> None: ...

    async def get_by_id(self, order_id: str) -> OrderView: ...

    async def get_public_by_id(self, order_id: str) -> OrderView: ...

    async def get_order_by(
        self, order_id: str = "", uuid: str = "", merchant_id: str = ""
    ) -> OrderView: ...

    async def get_public_order_by(
        self, order_id: str = "", uuid: str = "", merchant_id: str = ""
    ) -> OrderView: ...

    async def get_many_by(
        self, filters: dict[str, Any], limit: int = 100, offset: int = 0
    ) -> list[OrderView]: ...

    async def count_by(self, filters: dict[str, Any]) -> int: ...

    async def get_vat_summary(
        self,
        operating_company_id: str,
        country: str,
        is_vat_deduction: bool,
        date_from: datetime,
        date_to: datetime,
    ) -> list[VatSummaryItem]: ...

    async def get_turnover_summary(
        self,
        operating_company_id: str,
        country: str,
        currency_policy: str,
        date_from: datetime,
        date_to: datetime,
    ) -> list[TurnoverSummaryItem]: ...
