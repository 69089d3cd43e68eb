"""
Summary Aggregation

DESIGN DECISION: All statistics are DERIVED. Nothing here is stored
or cached; every call reduces the live transaction list it is given.

Amounts are summed as Decimal, so net balance is exactly
total profit minus total expense.
"""

from calendar import monthrange
from collections import defaultdict
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional

from shopledger.models.transaction import (
    CategoryShare,
    DateRange,
    MonthlyTotals,
    Summary,
    Transaction,
    TransactionType,
    utc_now,
)


ZERO = Decimal("0")
DEFAULT_CUSTOM_DAYS = 30


class Period(str, Enum):
    """Dashboard period filters."""
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    CUSTOM = "custom"


def summarize(transactions: Iterable[Transaction]) -> Summary:
    """
    Single pass over the transactions.

    An empty input yields an all-zero summary.
    """
    total_profit = ZERO
    total_expense = ZERO
    count = 0

    for transaction in transactions:
        count += 1
        if transaction.is_profit:
            total_profit += transaction.amount
        elif transaction.is_expense:
            total_expense += transaction.amount

    return Summary(
        total_profit=total_profit,
        total_expense=total_expense,
        net_balance=total_profit - total_expense,
        transaction_count=count,
    )


# =============================================================================
# DATE RANGES
# =============================================================================

def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=999999)


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def resolve_period(
    period: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> DateRange:
    """
    Convert a period name (or explicit bounds) into a date range.

    - today/week/month/year are the calendar units containing now;
      weeks start on Monday
    - custom uses start/end; a missing start means 30 days before end,
      a missing end means now
    - anything else falls back to the current month

    Raises:
        ValueError: If a custom range ends before it starts
    """
    now = now or utc_now()

    if period is None and (start or end):
        period = Period.CUSTOM.value

    if period == Period.TODAY.value:
        return DateRange(start=_start_of_day(now), end=_end_of_day(now))

    if period == Period.WEEK.value:
        monday = _start_of_day(now - timedelta(days=now.weekday()))
        sunday = _end_of_day(monday + timedelta(days=6))
        return DateRange(start=monday, end=sunday)

    if period == Period.YEAR.value:
        return DateRange(
            start=datetime(now.year, 1, 1),
            end=_end_of_day(datetime(now.year, 12, 31)),
        )

    if period == Period.CUSTOM.value:
        range_end = end or now
        range_start = start or (range_end - timedelta(days=DEFAULT_CUSTOM_DAYS))
        return DateRange(start=range_start, end=range_end)

    # Month, and the default
    last_day = monthrange(now.year, now.month)[1]
    return DateRange(
        start=datetime(now.year, now.month, 1),
        end=_end_of_day(datetime(now.year, now.month, last_day)),
    )


# =============================================================================
# CHART DATA
# =============================================================================

def monthly_breakdown(
    transactions: Iterable[Transaction],
    months: int = 6,
    now: Optional[datetime] = None,
) -> list[MonthlyTotals]:
    """
    Profit, expense and net per month for the trailing months.

    Includes the current month. Months without activity are present
    with zeros; transactions outside the window are ignored.
    """
    if months < 1:
        raise ValueError("months must be at least 1")

    now = now or utc_now()
    keys = []
    for offset in range(months - 1, -1, -1):
        year, month = _shift_month(now.year, now.month, -offset)
        keys.append(f"{year:04d}-{month:02d}")

    profit: dict[str, Decimal] = defaultdict(lambda: ZERO)
    expense: dict[str, Decimal] = defaultdict(lambda: ZERO)
    wanted = set(keys)

    for transaction in transactions:
        key = transaction.timestamp.strftime("%Y-%m")
        if key not in wanted:
            continue
        if transaction.is_profit:
            profit[key] += transaction.amount
        else:
            expense[key] += transaction.amount

    return [
        MonthlyTotals(
            month=key,
            profit=profit[key],
            expense=expense[key],
            net=profit[key] - expense[key],
        )
        for key in keys
    ]


def category_breakdown(
    transactions: Iterable[Transaction],
    transaction_type: TransactionType = TransactionType.EXPENSE,
) -> list[CategoryShare]:
    """Totals per category for one transaction type, largest first."""
    totals: dict[str, Decimal] = {}
    for transaction in transactions:
        if transaction.type != transaction_type:
            continue
        totals[transaction.category] = (
            totals.get(transaction.category, ZERO) + transaction.amount
        )

    grand_total = sum(totals.values(), ZERO)
    shares = [
        CategoryShare(
            category=category,
            total=total,
            percentage=(
                round(float(total / grand_total * 100), 2) if grand_total else 0.0
            ),
        )
        for category, total in totals.items()
    ]
    return sorted(shares, key=lambda s: s.total, reverse=True)
