"""
Billing Derivation

A sale entered in the billing form becomes TWO ledger entries:
1. An expense (category "Inventory") for what the stock cost
2. A profit (category "Sales") for what the customer paid

The profit on the sale is not stored separately. It is the difference
between the two entries and is written into the sale's description,
which is also where the assistant later reads product names from.

Both entries share one timestamp. This module only derives them;
the ledger flow writes them in a single storage call.
"""

from decimal import Decimal
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from shopledger.config import get_settings
from shopledger.models.transaction import (
    SaleRecord,
    TransactionFields,
    TransactionType,
    margin_percent,
    quantize_amount,
    utc_now,
)


INVENTORY_CATEGORY = "Inventory"
SALES_CATEGORY = "Sales"


class BillingPlan(BaseModel):
    """The two transactions a sale produces, not yet persisted."""

    expense: TransactionFields
    profit: TransactionFields
    total_cost: Decimal
    total_sale: Decimal
    total_profit: Decimal
    margin_percent: Decimal


def format_amount(value: Decimal, symbol: Optional[str] = None) -> str:
    """Render money for descriptions, e.g. ₹1,500.00 or -₹5.00."""
    if symbol is None:
        symbol = get_settings().app.currency_symbol
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def derive_billing(
    sale: SaleRecord,
    timestamp: Optional[datetime] = None,
    currency_symbol: Optional[str] = None,
) -> BillingPlan:
    """
    Turn a sale into its expense and profit transactions.

    SaleRecord validation has already resolved the selling price and
    bounded both totals to a storable amount.
    """
    moment = timestamp or sale.timestamp or utc_now()

    total_cost = quantize_amount(sale.purchase_price * sale.quantity)
    total_sale = quantize_amount(sale.selling_price * sale.quantity)
    total_profit = total_sale - total_cost

    purchase = format_amount(sale.purchase_price, currency_symbol)
    selling = format_amount(sale.selling_price, currency_symbol)
    profit = format_amount(total_profit, currency_symbol)

    expense_fields = TransactionFields(
        type=TransactionType.EXPENSE,
        amount=total_cost,
        category=INVENTORY_CATEGORY,
        description=f"Purchase of {sale.quantity} {sale.product_name} @ {purchase} each",
        timestamp=moment,
    )
    profit_fields = TransactionFields(
        type=TransactionType.PROFIT,
        amount=total_sale,
        category=SALES_CATEGORY,
        description=(
            f"Sale of {sale.quantity} {sale.product_name} @ {selling} each "
            f"(profit: {profit})"
        ),
        timestamp=moment,
    )

    return BillingPlan(
        expense=expense_fields,
        profit=profit_fields,
        total_cost=total_cost,
        total_sale=total_sale,
        total_profit=total_profit,
        margin_percent=margin_percent(sale.purchase_price, sale.selling_price),
    )
