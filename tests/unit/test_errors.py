"""Tests for bs_common.errors."""

from src.bs_common.errors import (
    AccountingEntryNotFoundError,
    AppError,
    CacheError,
    DatabaseQueryError,
    InternalError,
    InvalidCurrencyPolicyError,
    InvalidObjectIdError,
    MalformedEntryError,
    MerchantNotFoundError,
    OrderNotFoundError,
    OrderViewNotFoundError,
    ProjectionError,
    StoreUnavailableError,
)


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9005, message="Internal error")
        assert err.code == 9005
        assert err.message == "Internal error"
        assert err.context == {}

    def test_is_exception(self) -> None:
        err = AppError(code=1001, message="test")
        assert isinstance(err, Exception)
        assert str(err) == "test"


class TestSpecificErrors:
    def test_entry_not_found(self) -> None:
        err = AccountingEntryNotFoundError("e-1")
        assert err.code == 1001
        assert err.context == {"entry_id": "e-1"}

    def test_malformed_entry(self) -> None:
        err = MalformedEntryError("e-2", "unknown entry type 'bogus'")
        assert err.code == 1002
        assert "bogus" in err.message

    def test_order_not_found(self) -> None:
        assert OrderNotFoundError("o-1").code == 2001

    def test_merchant_not_found(self) -> None:
        assert MerchantNotFoundError("m-1").code == 3001

    def test_order_view_not_found(self) -> None:
        assert OrderViewNotFoundError("o-1").code == 4001

    def test_projection_error_carries_stage_and_ids(self) -> None:
        err = ProjectionError(["o-1", "o-2"], "merchants", "Merchant not found: m-1")
        assert err.code == 4002
        assert err.stage == "merchants"
        assert err.order_ids == ["o-1", "o-2"]
        assert "merchants" in err.message

    def test_invalid_currency_policy(self) -> None:
        err = InvalidCurrencyPolicyError("weekly")
        assert err.code == 4003
        assert err.context == {"policy": "weekly"}

    def test_system_errors(self) -> None:
        assert StoreUnavailableError("order", "timeout").code == 9001
        assert DatabaseQueryError("order", "find", "bad query").code == 9002
        assert InvalidObjectIdError("xyz").code == 9003
        assert CacheError("merchant:id:1", "down").code == 9004
        assert InternalError().code == 9005

    def test_query_error_context(self) -> None:
        err = DatabaseQueryError("accounting_entry", "aggregate", "boom")
        assert err.context == {"collection": "accounting_entry", "operation": "aggregate"}
