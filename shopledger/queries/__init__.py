"""Aggregation and context-building package."""

from shopledger.queries.context import (
    ShopContextBuilder,
    parse_product_sale,
    summarize_expenses,
    top_products,
)
from shopledger.queries.summary import (
    Period,
    category_breakdown,
    monthly_breakdown,
    resolve_period,
    summarize,
)

__all__ = [
    "Period",
    "ShopContextBuilder",
    "category_breakdown",
    "monthly_breakdown",
    "parse_product_sale",
    "resolve_period",
    "summarize",
    "summarize_expenses",
    "top_products",
]
