"""
Assistant Models

The shop context is the ONLY view of the ledger the LLM ever gets.
It is bounded (top-N lists, a handful of recent rows) and rebuilt
for every chatbot request.
"""

from pydantic import Field

from shopledger.models.transaction import (
    CamelModel,
    Money,
    Summary,
    Transaction,
)


class CategoryTotal(CamelModel):
    """Total spent in one expense category."""

    category: str
    total: Money


class ProductSales(CamelModel):
    """Units and revenue for one product parsed from sale descriptions."""

    name: str
    quantity: int = Field(ge=0)
    revenue: Money


class ShopContext(CamelModel):
    """
    Bounded summary of a user's ledger for the assistant.

    recent_transactions keeps storage order; it is not re-sorted
    by timestamp.
    """

    recent_transactions: list[Transaction] = Field(default_factory=list)
    expense_summary: list[CategoryTotal] = Field(default_factory=list)
    top_products: list[ProductSales] = Field(default_factory=list)
    total_stats: Summary = Field(default_factory=Summary)


class ChatRequest(CamelModel):
    """Question sent to the assistant."""

    message: str = Field(
        ...,
        min_length=1,
        max_length=2000,
        description="The owner's question"
    )


class ChatResponse(CamelModel):
    """Assistant reply. Always present, even when the provider failed."""

    reply: str
