"""Global enums — values are the strings stored in MongoDB documents."""

from enum import Enum


class AccountingEntryType(str, Enum):
    # Payment: gross revenue and tax
    REAL_GROSS_REVENUE = "real_gross_revenue"
    REAL_TAX_FEE = "real_tax_fee"
    CENTRAL_BANK_TAX_FEE = "central_bank_tax_fee"
    # Payment: currency exchange
    PS_GROSS_REVENUE_FX = "ps_gross_revenue_fx"
    PS_GROSS_REVENUE_FX_TAX_FEE = "ps_gross_revenue_fx_tax_fee"
    # Payment: merchant tax
    MERCHANT_TAX_FEE_COST_VALUE = "merchant_tax_fee_cost_value"
    MERCHANT_TAX_FEE_CENTRAL_BANK_FX = "merchant_tax_fee_central_bank_fx"
    # Payment: method fees
    PS_METHOD_FEE = "ps_method_fee"
    MERCHANT_METHOD_FEE = "merchant_method_fee"
    MERCHANT_METHOD_FEE_COST_VALUE = "merchant_method_fee_cost_value"
    # Payment: fixed fees
    MERCHANT_METHOD_FIXED_FEE = "merchant_method_fixed_fee"
    REAL_MERCHANT_METHOD_FIXED_FEE = "real_merchant_method_fixed_fee"
    REAL_MERCHANT_METHOD_FIXED_FEE_COST_VALUE = "real_merchant_method_fixed_fee_cost_value"
    MERCHANT_PS_FIXED_FEE = "merchant_ps_fixed_fee"
    REAL_MERCHANT_PS_FIXED_FEE = "real_merchant_ps_fixed_fee"
    # Refund: payment system side
    REAL_REFUND = "real_refund"
    REAL_REFUND_TAX_FEE = "real_refund_tax_fee"
    REAL_REFUND_FEE = "real_refund_fee"
    REAL_REFUND_FIXED_FEE = "real_refund_fixed_fee"
    # Refund: merchant side
    MERCHANT_REFUND = "merchant_refund"
    MERCHANT_REFUND_FEE = "merchant_refund_fee"
    MERCHANT_REFUND_FIXED_FEE = "merchant_refund_fixed_fee"
    MERCHANT_REFUND_FIXED_FEE_COST_VALUE = "merchant_refund_fixed_fee_cost_value"
    # Refund: tax reversal
    REVERSE_TAX_FEE = "reverse_tax_fee"
    REVERSE_TAX_FEE_DELTA = "reverse_tax_fee_delta"
    PS_REVERSE_TAX_FEE_DELTA = "ps_reverse_tax_fee_delta"
    # Merchant-level corrections (not tied to a single order bucket)
    MERCHANT_ROYALTY_CORRECTION = "merchant_royalty_correction"
    MERCHANT_ROLLING_RESERVE_CREATE = "merchant_rolling_reserve_create"
    MERCHANT_ROLLING_RESERVE_RELEASE = "merchant_rolling_reserve_release"


class OrderType(str, Enum):
    ORDER = "order"
    REFUND = "refund"


class OrderStatus(str, Enum):
    CREATED = "created"
    PROCESSED = "processed"
    CANCELED = "canceled"
    REJECTED = "rejected"
    REFUNDED = "refunded"
    CHARGEBACK = "chargeback"
    PENDING = "pending"


class VatCurrencyRatesPolicy(str, Enum):
    """Which conversion basis a turnover report sums."""

    ON_DAY = "on-day"
    LAST_DAY = "last-day"
