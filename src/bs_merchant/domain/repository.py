"""Repository Protocol for merchants."""

from typing import Protocol

from src.bs_merchant.domain.models import Merchant


class MerchantRepositoryProtocol(Protocol):
    async def get_by_id(self, merchant_id: str) -> Merchant: ...

    async def insert(self, merchant: Merchant) -> None: ...

    async def update(self, merchant: Merchant) -> None: ...
