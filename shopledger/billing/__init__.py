"""Billing package."""

from shopledger.billing.derivation import (
    INVENTORY_CATEGORY,
    SALES_CATEGORY,
    BillingPlan,
    derive_billing,
    format_amount,
)
from shopledger.models.transaction import margin_percent, selling_price_for_margin

__all__ = [
    "INVENTORY_CATEGORY",
    "SALES_CATEGORY",
    "BillingPlan",
    "derive_billing",
    "format_amount",
    "margin_percent",
    "selling_price_for_margin",
]
