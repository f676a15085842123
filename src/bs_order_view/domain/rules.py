"""Metric bucket catalog.

Every bucket of an order view is one ``MetricRule``: a set of entry types
added, a set subtracted, the currency basis to read and the aggregation mode.
A single routine in ``aggregation.py`` evaluates all of them.
"""

from dataclasses import dataclass
from enum import Enum

from src.bs_common.enums import AccountingEntryType as T
from src.bs_ledger.domain.models import CurrencyField

CUR = CurrencyField.CURRENCY
LOCAL = CurrencyField.LOCAL_CURRENCY
ORIGIN = CurrencyField.ORIGINAL_CURRENCY


class AggregationMode(str, Enum):
    LATEST = "latest"   # pass-through of the most recent matching entry
    SUM = "sum"         # signed sum over every matching entry


@dataclass(frozen=True)
class MetricRule:
    name: str
    included: tuple[str, ...]
    negated: tuple[str, ...] = ()
    group_by: CurrencyField = CUR
    mode: AggregationMode = AggregationMode.SUM

    @property
    def entry_types(self) -> frozenset[str]:
        return frozenset(self.included) | frozenset(self.negated)


def _latest(name: str, entry_type: T, group_by: CurrencyField = CUR) -> MetricRule:
    return MetricRule(name, (entry_type.value,), group_by=group_by, mode=AggregationMode.LATEST)


def _sum(
    name: str,
    included: tuple[T, ...],
    negated: tuple[T, ...] = (),
    group_by: CurrencyField = CUR,
) -> MetricRule:
    return MetricRule(
        name,
        tuple(t.value for t in included),
        tuple(t.value for t in negated),
        group_by=group_by,
    )


PAYMENT_RULES: tuple[MetricRule, ...] = (
    _latest("payment_gross_revenue", T.REAL_GROSS_REVENUE),
    _latest("payment_gross_revenue_local", T.REAL_GROSS_REVENUE, LOCAL),
    _latest("payment_gross_revenue_origin", T.REAL_GROSS_REVENUE, ORIGIN),
    _latest("payment_tax_fee", T.REAL_TAX_FEE),
    _latest("payment_tax_fee_local", T.REAL_TAX_FEE, LOCAL),
    _latest("payment_tax_fee_origin", T.REAL_TAX_FEE, ORIGIN),
    _latest("payment_tax_fee_currency_exchange_fee", T.CENTRAL_BANK_TAX_FEE, ORIGIN),
    _sum("payment_tax_fee_total", (T.REAL_TAX_FEE, T.CENTRAL_BANK_TAX_FEE)),
    _latest("payment_gross_revenue_fx", T.PS_GROSS_REVENUE_FX),
    _latest("payment_gross_revenue_fx_tax_fee", T.PS_GROSS_REVENUE_FX_TAX_FEE),
    _sum(
        "payment_gross_revenue_fx_profit",
        (T.PS_GROSS_REVENUE_FX,),
        (T.PS_GROSS_REVENUE_FX_TAX_FEE,),
    ),
    _sum("gross_revenue", (T.REAL_GROSS_REVENUE,), (T.PS_GROSS_REVENUE_FX,)),
    _latest("tax_fee", T.MERCHANT_TAX_FEE_COST_VALUE),
    _latest("tax_fee_currency_exchange_fee", T.MERCHANT_TAX_FEE_CENTRAL_BANK_FX),
    _sum("tax_fee_total", (T.MERCHANT_TAX_FEE_COST_VALUE, T.MERCHANT_TAX_FEE_CENTRAL_BANK_FX)),
    _latest("method_fee_total", T.PS_METHOD_FEE),
    _latest("method_fee_tariff", T.MERCHANT_METHOD_FEE),
    _latest("paysuper_method_fee_tariff_self_cost", T.MERCHANT_METHOD_FEE_COST_VALUE),
    _sum(
        "paysuper_method_fee_profit",
        (T.MERCHANT_METHOD_FEE,),
        (T.MERCHANT_METHOD_FEE_COST_VALUE,),
    ),
    _latest("method_fixed_fee_tariff", T.MERCHANT_METHOD_FIXED_FEE),
    _sum(
        "paysuper_method_fixed_fee_tariff_fx_profit",
        (T.MERCHANT_METHOD_FIXED_FEE,),
        (T.REAL_MERCHANT_METHOD_FIXED_FEE,),
    ),
    _latest(
        "paysuper_method_fixed_fee_tariff_self_cost",
        T.REAL_MERCHANT_METHOD_FIXED_FEE_COST_VALUE,
    ),
    _sum(
        "paysuper_method_fixed_fee_tariff_total_profit",
        (T.REAL_MERCHANT_METHOD_FIXED_FEE,),
        (T.REAL_MERCHANT_METHOD_FIXED_FEE_COST_VALUE,),
    ),
    _latest("paysuper_fixed_fee", T.MERCHANT_PS_FIXED_FEE),
    _sum(
        "paysuper_fixed_fee_fx_profit",
        (T.MERCHANT_PS_FIXED_FEE,),
        (T.REAL_MERCHANT_PS_FIXED_FEE,),
    ),
    _sum("fees_total", (T.PS_METHOD_FEE, T.MERCHANT_PS_FIXED_FEE)),
    _sum("fees_total_local", (T.PS_METHOD_FEE, T.MERCHANT_PS_FIXED_FEE), group_by=LOCAL),
    _sum(
        "net_revenue",
        (T.REAL_GROSS_REVENUE,),
        (
            T.PS_GROSS_REVENUE_FX,
            T.MERCHANT_PS_FIXED_FEE,
            T.MERCHANT_TAX_FEE_CENTRAL_BANK_FX,
            T.PS_METHOD_FEE,
            T.MERCHANT_TAX_FEE_COST_VALUE,
        ),
    ),
    _sum(
        "paysuper_method_total_profit",
        (T.PS_METHOD_FEE, T.MERCHANT_PS_FIXED_FEE),
        (T.MERCHANT_METHOD_FEE_COST_VALUE, T.REAL_MERCHANT_METHOD_FIXED_FEE_COST_VALUE),
    ),
    _sum(
        "paysuper_total_profit",
        (T.PS_GROSS_REVENUE_FX, T.PS_METHOD_FEE, T.MERCHANT_PS_FIXED_FEE),
        (
            T.CENTRAL_BANK_TAX_FEE,
            T.PS_GROSS_REVENUE_FX_TAX_FEE,
            T.MERCHANT_METHOD_FEE_COST_VALUE,
            T.REAL_MERCHANT_METHOD_FIXED_FEE_COST_VALUE,
        ),
    ),
)

REFUND_RULES: tuple[MetricRule, ...] = (
    _latest("payment_refund_gross_revenue", T.REAL_REFUND),
    _latest("payment_refund_gross_revenue_local", T.REAL_REFUND, LOCAL),
    _latest("payment_refund_gross_revenue_origin", T.REAL_REFUND, ORIGIN),
    _latest("payment_refund_tax_fee", T.REAL_REFUND_TAX_FEE),
    _latest("payment_refund_tax_fee_local", T.REAL_REFUND_TAX_FEE, LOCAL),
    _latest("payment_refund_tax_fee_origin", T.REAL_REFUND_TAX_FEE, ORIGIN),
    _latest("payment_refund_fee_tariff", T.REAL_REFUND_FEE),
    _latest("method_refund_fixed_fee_tariff", T.REAL_REFUND_FIXED_FEE),
    _latest("refund_gross_revenue", T.MERCHANT_REFUND),
    _sum("refund_gross_revenue_fx", (T.MERCHANT_REFUND,), (T.REAL_REFUND,)),
    _latest("method_refund_fee_tariff", T.MERCHANT_REFUND_FEE),
    _sum(
        "paysuper_method_refund_fee_tariff_profit",
        (T.MERCHANT_REFUND_FEE,),
        (T.REAL_REFUND_FEE,),
    ),
    _latest(
        "paysuper_method_refund_fixed_fee_tariff_self_cost",
        T.MERCHANT_REFUND_FIXED_FEE_COST_VALUE,
    ),
    _latest("merchant_refund_fixed_fee_tariff", T.MERCHANT_REFUND_FIXED_FEE),
    _sum(
        "paysuper_method_refund_fixed_fee_tariff_profit",
        (T.MERCHANT_REFUND_FIXED_FEE,),
        (T.REAL_REFUND_FIXED_FEE,),
    ),
    _latest("refund_tax_fee", T.REVERSE_TAX_FEE),
    _latest("refund_tax_fee_currency_exchange_fee", T.REVERSE_TAX_FEE_DELTA),
    _latest("paysuper_refund_tax_fee_currency_exchange_fee", T.PS_REVERSE_TAX_FEE_DELTA),
    _sum("refund_tax_fee_total", (T.REVERSE_TAX_FEE, T.REVERSE_TAX_FEE_DELTA)),
    _sum(
        "refund_reverse_revenue",
        (
            T.MERCHANT_REFUND,
            T.MERCHANT_REFUND_FEE,
            T.MERCHANT_REFUND_FIXED_FEE,
            T.REVERSE_TAX_FEE_DELTA,
        ),
        (T.REVERSE_TAX_FEE,),
    ),
    _sum("refund_fees_total", (T.MERCHANT_REFUND_FEE, T.MERCHANT_REFUND_FIXED_FEE)),
    _sum(
        "refund_fees_total_local",
        (T.MERCHANT_REFUND_FEE, T.MERCHANT_REFUND_FIXED_FEE),
        group_by=LOCAL,
    ),
    _sum(
        "paysuper_refund_total_profit",
        (T.MERCHANT_REFUND_FEE, T.MERCHANT_REFUND_FIXED_FEE, T.PS_REVERSE_TAX_FEE_DELTA),
        (T.REAL_REFUND_FIXED_FEE, T.REAL_REFUND_FEE),
    ),
)

METRIC_RULES: tuple[MetricRule, ...] = PAYMENT_RULES + REFUND_RULES

METRIC_NAMES: tuple[str, ...] = tuple(r.name for r in METRIC_RULES)

# Every entry type any rule reads; the engine fetches exactly these.
RULE_ENTRY_TYPES: frozenset[str] = frozenset().union(*(r.entry_types for r in METRIC_RULES))
