"""
Data Models Package

This package contains all Pydantic models used in Shop Ledger.
All data flowing through the system must conform to these schemas.
"""

from shopledger.models.transaction import (
    CATEGORY_SUGGESTIONS,
    BillingResult,
    CategoryShare,
    DateRange,
    MonthlyTotals,
    SaleRecord,
    Summary,
    Transaction,
    TransactionFields,
    TransactionType,
    quantize_amount,
    utc_now,
)
from shopledger.models.insight import (
    CategoryTotal,
    ChatRequest,
    ChatResponse,
    ProductSales,
    ShopContext,
)
from shopledger.models.user import (
    LoginRequest,
    PublicUser,
    RegisterRequest,
    UserRecord,
)

__all__ = [
    # Transaction models
    "CATEGORY_SUGGESTIONS",
    "BillingResult",
    "CategoryShare",
    "DateRange",
    "MonthlyTotals",
    "SaleRecord",
    "Summary",
    "Transaction",
    "TransactionFields",
    "TransactionType",
    "quantize_amount",
    "utc_now",
    # Assistant models
    "CategoryTotal",
    "ChatRequest",
    "ChatResponse",
    "ProductSales",
    "ShopContext",
    # User models
    "LoginRequest",
    "PublicUser",
    "RegisterRequest",
    "UserRecord",
]
