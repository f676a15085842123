"""Repository Protocol for orders."""

from typing import Protocol

from src.bs_order.domain.models import Order


class OrderRepositoryProtocol(Protocol):
    async def get_by_id(self, order_id: str) -> Order: ...

    async def get_by_uuid(self, uuid: str) -> Order: ...

    async def find_by_ids(self, order_ids: list[str]) -> list[Order]: ...

    async def insert(self, order: Order) -> None: ...

    async def update(self, order: Order) -> None: ...
