"""Merchant domain model."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class Merchant:
    id: str
    name: str
    agreement_number: str = ""
    operating_company_id: str = ""
    status: int = 0

    def to_cache(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_cache(cls, data: dict[str, Any]) -> "Merchant":
        return cls(**data)
