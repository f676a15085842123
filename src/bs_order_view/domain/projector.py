"""Order view assembly — pure merge of order, merchant and ledger metrics."""

from src.bs_common.money import ZERO
from src.bs_merchant.domain.models import Merchant
from src.bs_order.domain.models import Order
from src.bs_order_view.domain.models import MoneyAmount, OrderView


def _payout_currency(metrics: dict[str, MoneyAmount]) -> str:
    for name in ("net_revenue", "refund_reverse_revenue"):
        bucket = metrics.get(name)
        if bucket is not None:
            return bucket.currency
    return ""


def _charge_before_vat(order: Order, metrics: dict[str, MoneyAmount]) -> MoneyAmount:
    tax_bucket = "payment_refund_tax_fee_origin" if order.is_refund else "payment_tax_fee_origin"
    tax = metrics.get(tax_bucket)
    charge = order.charge_amount - (tax.amount if tax else ZERO)
    return MoneyAmount.of(charge, order.charge_currency)


def build_order_view(
    order: Order,
    merchant: Merchant,
    metrics: dict[str, MoneyAmount],
) -> OrderView:
    pm = order.payment_method
    return OrderView(
        id=order.id,
        uuid=order.uuid,
        type=order.type,
        status=order.status,
        created_at=order.created_at,
        project_id=order.project.id,
        project_name=order.project.name,
        merchant_id=merchant.id,
        merchant_name=merchant.name,
        merchant_agreement_number=merchant.agreement_number,
        merchant_payout_currency=_payout_currency(metrics),
        operating_company_id=order.operating_company_id,
        currency=order.currency,
        total_payment_amount=order.total_payment_amount,
        order_amount=order.order_amount,
        order_charge=MoneyAmount.of(order.charge_amount, order.charge_currency),
        order_charge_before_vat=_charge_before_vat(order, metrics),
        country_code=order.country_code,
        user_id=order.user.id,
        user_email=order.user.email,
        locale=order.user.locale,
        payment_method_id=pm.id if pm else "",
        payment_method_name=pm.name if pm else "",
        payment_method_terminal_id=pm.terminal_id if pm else "",
        transaction=order.transaction,
        tax_rate=order.tax_rate,
        mcc_code=order.mcc_code,
        is_production=order.is_production,
        is_vat_deduction=order.is_vat_deduction,
        vat_payer=order.vat_payer,
        is_high_risk=order.is_high_risk,
        is_refund_allowed=order.is_refund_allowed,
        billing_address=order.billing_address,
        metadata=dict(order.metadata),
        metadata_values=list(order.metadata.values()),
        items=[
            {"id": i.id, "name": i.name, "amount": i.amount, "currency": i.currency}
            for i in order.items
        ],
        parent_order=(
            {"id": order.parent_order.id, "uuid": order.parent_order.uuid}
            if order.parent_order
            else None
        ),
        refund=order.refund,
        cancellation=order.cancellation,
        issuer=order.issuer,
        recurring=order.recurring,
        recurring_id=order.recurring_id,
        royalty_report_id=order.royalty_report_id,
        pm_order_close_date=order.payment_method_order_closed_at,
        metrics=dict(metrics),
    )
