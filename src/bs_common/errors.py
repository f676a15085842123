"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Ledger (accounting entries)
  2xxx: Order
  3xxx: Merchant
  4xxx: Order view
  9xxx: System (store, cache)
"""

from typing import Any


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.context = context or {}
        super().__init__(message)


# --- 1xxx: Ledger ---

class AccountingEntryNotFoundError(AppError):
    def __init__(self, entry_id: str) -> None:
        super().__init__(1001, f"Accounting entry not found: {entry_id}", {"entry_id": entry_id})


class MalformedEntryError(AppError):
    def __init__(self, entry_id: str, detail: str) -> None:
        super().__init__(
            1002,
            f"Malformed accounting entry {entry_id}: {detail}",
            {"entry_id": entry_id},
        )


# --- 2xxx: Order ---

class OrderNotFoundError(AppError):
    def __init__(self, order_id: str) -> None:
        super().__init__(2001, f"Order not found: {order_id}", {"order_id": order_id})


# --- 3xxx: Merchant ---

class MerchantNotFoundError(AppError):
    def __init__(self, merchant_id: str) -> None:
        super().__init__(3001, f"Merchant not found: {merchant_id}", {"merchant_id": merchant_id})


# --- 4xxx: Order view ---

class OrderViewNotFoundError(AppError):
    def __init__(self, order_id: str) -> None:
        super().__init__(4001, f"Order view not found: {order_id}", {"order_id": order_id})


class ProjectionError(AppError):
    """Raised when a batch projection fails; the cause is chained via ``from``."""

    def __init__(self, order_ids: list[str], stage: str, detail: str) -> None:
        super().__init__(
            4002,
            f"Order view projection failed at stage {stage}: {detail}",
            {"order_ids": order_ids, "stage": stage},
        )
        self.order_ids = order_ids
        self.stage = stage


class InvalidCurrencyPolicyError(AppError):
    def __init__(self, policy: str) -> None:
        super().__init__(4003, f"Unknown currency rates policy: {policy}", {"policy": policy})


# --- 9xxx: System ---

class StoreUnavailableError(AppError):
    def __init__(self, collection: str, detail: str) -> None:
        super().__init__(
            9001,
            f"Store unavailable ({collection}): {detail}",
            {"collection": collection},
        )


class DatabaseQueryError(AppError):
    def __init__(self, collection: str, operation: str, detail: str) -> None:
        super().__init__(
            9002,
            f"Query failed on {collection}.{operation}: {detail}",
            {"collection": collection, "operation": operation},
        )


class InvalidObjectIdError(AppError):
    def __init__(self, value: object) -> None:
        super().__init__(9003, f"Invalid ObjectId: {value!r}", {"value": str(value)})


class CacheError(AppError):
    def __init__(self, key: str, detail: str) -> None:
        super().__init__(9004, f"Cache operation failed for {key}: {detail}", {"key": key})


class InternalError(AppError):
    def __init__(self, detail: str = "Internal error") -> None:
        super().__init__(9005, detail)
