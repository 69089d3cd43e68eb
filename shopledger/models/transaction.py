"""
Core Data Models for Shop Ledger

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable for storage and the JSON API

DESIGN DECISION: Amounts are Decimal end-to-end so that totals and
net balance are exact. They are rendered as JSON numbers only at the
API boundary.
"""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Annotated, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


CENTS = Decimal("0.01")
MAX_AMOUNT = Decimal("99999999.99")

# Decimal in Python, number in JSON
Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


def quantize_amount(value: Decimal) -> Decimal:
    """Round to cents, half-up."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def margin_percent(purchase_price: Decimal, selling_price: Decimal) -> Decimal:
    """Markup over cost, in percent."""
    if purchase_price <= 0:
        raise ValueError("Purchase price must be greater than 0")
    return quantize_amount((selling_price - purchase_price) / purchase_price * 100)


def selling_price_for_margin(purchase_price: Decimal, margin: Decimal) -> Decimal:
    """Unit price that gives the requested markup over cost."""
    return quantize_amount(purchase_price * (1 + margin / 100))


def utc_now() -> datetime:
    """Current time as naive UTC, the form timestamps are stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """A ledger entry is either money in or money out."""
    PROFIT = "profit"
    EXPENSE = "expense"


# Conventional categories offered to the user. Not enforced: category is free text.
CATEGORY_SUGGESTIONS: dict[TransactionType, list[str]] = {
    TransactionType.PROFIT: ["Sales", "Investment", "Refund", "Other"],
    TransactionType.EXPENSE: [
        "Rent",
        "Utilities",
        "Inventory",
        "Salary",
        "Food",
        "Marketing",
        "Miscellaneous",
    ],
}


# =============================================================================
# TRANSACTION MODELS
# =============================================================================

class TransactionFields(CamelModel):
    """
    Writable fields of a transaction.

    Used for both create and update. The owning user is never taken
    from the payload; it comes from the authenticated request.
    """

    type: TransactionType = Field(
        ...,
        description="profit or expense"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        le=MAX_AMOUNT,
        description="Positive amount, stored with 2-decimal precision"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Free-text category"
    )
    description: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Optional note"
    )
    timestamp: Optional[datetime] = Field(
        default=None,
        description="When it happened. Defaults to creation time."
    )

    @field_validator('amount')
    @classmethod
    def round_to_cents(cls, v: Decimal) -> Decimal:
        """Amounts that round to zero are rejected, not stored as 0.00."""
        rounded = quantize_amount(v)
        if rounded <= 0:
            raise ValueError("Amount must be greater than 0")
        return rounded

    @field_validator('description')
    @classmethod
    def blank_description_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @field_validator('timestamp')
    @classmethod
    def normalize_timestamp(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class Transaction(CamelModel):
    """A persisted ledger entry owned by one user."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: int
    user_id: int
    type: TransactionType
    amount: Money
    category: str
    description: Optional[str] = None
    timestamp: datetime

    @property
    def is_profit(self) -> bool:
        return self.type == TransactionType.PROFIT

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE


# =============================================================================
# DERIVED / REPORTING MODELS
# =============================================================================

class Summary(CamelModel):
    """
    Aggregate totals over a set of transactions.

    Never persisted. Recomputed from the live transaction set.
    """

    total_profit: Money = Decimal("0")
    total_expense: Money = Decimal("0")
    net_balance: Money = Decimal("0")
    transaction_count: int = Field(default=0, ge=0)


class DateRange(CamelModel):
    """Inclusive datetime window."""

    start: datetime
    end: datetime

    @field_validator('start', 'end')
    @classmethod
    def normalize_bounds(cls, v: datetime) -> datetime:
        return to_naive_utc(v)

    @model_validator(mode='after')
    def validate_order(self) -> 'DateRange':
        if self.end < self.start:
            raise ValueError("Range end cannot be before start")
        return self

class MonthlyTotals(CamelModel):
    """One bar of the monthly profit/expense chart."""

    month: str = Field(..., pattern=r"^\d{4}-\d{2}$")
    profit: Money = Decimal("0")
    expense: Money = Decimal("0")
    net: Money = Decimal("0")


class CategoryShare(CamelModel):
    """One slice of the per-category breakdown."""

    category: str
    total: Money
    percentage: float = Field(ge=0.0, le=100.0)


# =============================================================================
# BILLING MODELS
# =============================================================================

class SaleRecord(CamelModel):
    """
    A sale entered through the billing helper.

    Turned into one expense (stock purchase) and one profit (sale)
    transaction. The unit selling price is given directly or as a
    margin over the purchase price; an explicit price wins over the
    margin. After validation selling_price is always set.
    """

    product_name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="What was sold"
    )
    purchase_price: Decimal = Field(
        ...,
        gt=0,
        le=MAX_AMOUNT,
        description="Unit cost"
    )
    selling_price: Optional[Decimal] = Field(
        default=None,
        gt=0,
        le=MAX_AMOUNT,
        description="Unit sale price. Derived from margin_percent when omitted."
    )
    margin_percent: Optional[Decimal] = Field(
        default=None,
        gt=-100,
        le=100000,
        description="Markup over the purchase price, used when selling_price is omitted"
    )
    quantity: int = Field(
        ...,
        ge=1,
        description="Units sold"
    )
    timestamp: Optional[datetime] = Field(
        default=None,
        description="Shared timestamp of both derived transactions"
    )

    @field_validator('purchase_price', 'selling_price')
    @classmethod
    def round_to_cents(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is None:
            return v
        rounded = quantize_amount(v)
        if rounded <= 0:
            raise ValueError("Price must be greater than 0")
        return rounded

    @field_validator('quantity')
    @classmethod
    def totals_within_limit(cls, v: int, info: ValidationInfo) -> int:
        """Both sale totals must fit in a single stored amount."""
        purchase = info.data.get('purchase_price')
        selling = info.data.get('selling_price')
        margin = info.data.get('margin_percent')
        if selling is None and purchase is not None and margin is not None:
            selling = selling_price_for_margin(purchase, margin)

        for price in (purchase, selling):
            if price is not None and price * v > MAX_AMOUNT:
                raise ValueError(
                    f"Quantity too large: the sale total cannot exceed {MAX_AMOUNT}"
                )
        return v

    @field_validator('timestamp')
    @classmethod
    def normalize_timestamp(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)

    @model_validator(mode='after')
    def resolve_selling_price(self) -> 'SaleRecord':
        if self.selling_price is not None:
            return self

        if self.margin_percent is None:
            raise ValueError("Either sellingPrice or marginPercent is required")

        derived = selling_price_for_margin(self.purchase_price, self.margin_percent)
        if derived <= 0 or derived > MAX_AMOUNT:
            raise ValueError("Margin gives a selling price outside the storable range")
        self.selling_price = derived
        return self


class BillingResult(CamelModel):
    """The two recorded transactions and the numbers behind them."""

    expense: Transaction
    profit: Transaction
    total_cost: Money
    total_sale: Money
    total_profit: Money
    margin_percent: Money
