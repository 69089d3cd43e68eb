"""
Shop Context Builder

Assembles the bounded view of a user's ledger that the assistant is
allowed to see. The LLM never touches storage; it only gets what
this module extracts.

Products are recovered from the free-text description of sale
transactions written by the billing helper ("Sale of 3 Rice @ ...").
Descriptions in any other shape are ignored.
"""

import re
from decimal import Decimal
from typing import Optional

from shopledger.config import get_settings
from shopledger.models.insight import CategoryTotal, ProductSales, ShopContext
from shopledger.models.transaction import Transaction
from shopledger.queries.summary import summarize


PRODUCT_SALE_PATTERN = re.compile(r"Sale of (\d+) (.+?) @")


def parse_product_sale(description: Optional[str]) -> Optional[tuple[int, str]]:
    """
    Extract (quantity, product name) from a sale description.

    Returns None when the description does not contain the
    "Sale of <int> <name> @" shape.
    """
    if not description:
        return None
    match = PRODUCT_SALE_PATTERN.search(description)
    if not match:
        return None
    return int(match.group(1)), match.group(2)


def summarize_expenses(
    transactions: list[Transaction],
    limit: int = 5,
) -> list[CategoryTotal]:
    """Expense totals per category, largest first, top `limit`."""
    totals: dict[str, Decimal] = {}
    for transaction in transactions:
        if not transaction.is_expense:
            continue
        totals[transaction.category] = (
            totals.get(transaction.category, Decimal("0")) + transaction.amount
        )

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [
        CategoryTotal(category=category, total=total)
        for category, total in ranked[:limit]
    ]


def top_products(
    transactions: list[Transaction],
    limit: int = 5,
) -> list[ProductSales]:
    """
    Units and revenue per product, highest revenue first.

    Revenue is the transaction amount, not unit price times quantity.
    """
    quantities: dict[str, int] = {}
    revenues: dict[str, Decimal] = {}

    for transaction in transactions:
        if not transaction.is_profit:
            continue
        parsed = parse_product_sale(transaction.description)
        if parsed is None:
            continue
        quantity, name = parsed
        quantities[name] = quantities.get(name, 0) + quantity
        revenues[name] = revenues.get(name, Decimal("0")) + transaction.amount

    ranked = sorted(revenues.items(), key=lambda item: item[1], reverse=True)
    return [
        ProductSales(name=name, quantity=quantities[name], revenue=revenue)
        for name, revenue in ranked[:limit]
    ]


class ShopContextBuilder:
    """Builds a ShopContext from a user's full transaction list."""

    def __init__(
        self,
        recent_limit: Optional[int] = None,
        top_limit: Optional[int] = None,
    ):
        settings = get_settings().app
        self._recent_limit = recent_limit or settings.recent_transactions_limit
        self._top_limit = top_limit or settings.top_items_limit

    def build(self, transactions: list[Transaction]) -> ShopContext:
        """
        recent_transactions keeps the order storage returned;
        total_stats covers the whole list, not the truncated views.
        """
        return ShopContext(
            recent_transactions=transactions[:self._recent_limit],
            expense_summary=summarize_expenses(transactions, self._top_limit),
            top_products=top_products(transactions, self._top_limit),
            total_stats=summarize(transactions),
        )
