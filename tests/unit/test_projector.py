"""Tests for order view assembly."""

from datetime import datetime, timezone
from decimal import Decimal

from src.bs_order.domain.models import ParentOrder
from src.bs_order_view.domain.models import MoneyAmount
from src.bs_order_view.domain.projector import build_order_view

ORDER_O = "65a000000000000000000001"


class TestBuildOrderView:
    def test_core_fields_copied(self, make_order, make_merchant) -> None:
        view = build_order_view(make_order(ORDER_O), make_merchant(), {})
        assert view.id == ORDER_O
        assert view.merchant_name == "Acme Games"
        assert view.merchant_agreement_number == "AG-0001"
        assert view.locale == "en-US"
        assert view.payment_method_terminal_id == "T-15"
        assert view.metadata_values == ["spring"]
        assert view.metrics == {}

    def test_order_charge(self, make_order, make_merchant) -> None:
        view = build_order_view(make_order(ORDER_O), make_merchant(), {})
        assert view.order_charge == MoneyAmount.of(Decimal("120"), "USD")

    def test_charge_before_vat_uses_payment_tax_origin(self, make_order, make_merchant) -> None:
        metrics = {
            "payment_tax_fee_origin": MoneyAmount.of(Decimal("20"), "USD"),
            "payment_refund_tax_fee_origin": MoneyAmount.of(Decimal("99"), "USD"),
        }
        view = build_order_view(make_order(ORDER_O), make_merchant(), metrics)
        assert view.order_charge_before_vat.amount == Decimal("100")

    def test_refund_uses_refund_tax_origin(self, make_order, make_merchant) -> None:
        order = make_order(
            ORDER_O,
            type="refund",
            parent_order=ParentOrder(id="65a0000000000000000000ff", uuid="p"),
        )
        metrics = {"payment_refund_tax_fee_origin": MoneyAmount.of(Decimal("15"), "USD")}
        view = build_order_view(order, make_merchant(), metrics)
        assert view.order_charge_before_vat.amount == Decimal("105")
        assert view.parent_order == {"id": "65a0000000000000000000ff", "uuid": "p"}

    def test_absent_tax_bucket_subtracts_zero(self, make_order, make_merchant) -> None:
        view = build_order_view(make_order(ORDER_O), make_merchant(), {})
        assert view.order_charge_before_vat.amount == Decimal("120")

    def test_payout_currency_from_net_revenue(self, make_order, make_merchant) -> None:
        metrics = {
            "net_revenue": MoneyAmount.of(Decimal("93"), "EUR"),
            "refund_reverse_revenue": MoneyAmount.of(Decimal("1"), "USD"),
        }
        view = build_order_view(make_order(ORDER_O), make_merchant(), metrics)
        assert view.merchant_payout_currency == "EUR"

    def test_payout_currency_falls_back_to_refund(self, make_order, make_merchant) -> None:
        metrics = {"refund_reverse_revenue": MoneyAmount.of(Decimal("1"), "GBP")}
        view = build_order_view(make_order(ORDER_O), make_merchant(), metrics)
        assert view.merchant_payout_currency == "GBP"

    def test_payout_currency_empty_without_buckets(self, make_order, make_merchant) -> None:
        view = build_order_view(make_order(ORDER_O), make_merchant(), {})
        assert view.merchant_payout_currency == ""

    def test_no_payment_method(self, make_order, make_merchant) -> None:
        view = build_order_view(make_order(ORDER_O, payment_method=None), make_merchant(), {})
        assert view.payment_method_terminal_id == ""

    def test_close_date_copied_for_reports(self, make_order, make_merchant) -> None:
        closed = datetime(2024, 1, 20, 9, 0, tzinfo=timezone.utc)
        order = make_order(ORDER_O, payment_method_order_closed_at=closed)
        view = build_order_view(order, make_merchant(), {})
        assert view.pm_order_close_date == closed
