"""
Tests for summary aggregation and the assistant's shop context.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from shopledger.models import Transaction, TransactionType
from shopledger.queries import (
    Period,
    ShopContextBuilder,
    category_breakdown,
    monthly_breakdown,
    parse_product_sale,
    resolve_period,
    summarize,
    top_products,
)


def make_transaction(
    id: int,
    type: str,
    amount: str,
    category: str = "Misc",
    description: str = None,
    timestamp: datetime = datetime(2024, 3, 15, 10, 0),
) -> Transaction:
    return Transaction(
        id=id,
        user_id=1,
        type=TransactionType(type),
        amount=Decimal(amount),
        category=category,
        description=description,
        timestamp=timestamp,
    )


class TestSummarize:
    """Tests for summary totals."""

    def test_empty_list_is_all_zero(self):
        """Test an empty ledger summarizes to zeros."""
        summary = summarize([])
        assert summary.total_profit == 0
        assert summary.total_expense == 0
        assert summary.net_balance == 0
        assert summary.transaction_count == 0

    def test_net_balance_is_exact(self):
        """Test Decimal totals make net balance exact."""
        transactions = [
            make_transaction(1, "profit", "0.10"),
            make_transaction(2, "profit", "0.20"),
            make_transaction(3, "expense", "0.30"),
        ]
        summary = summarize(transactions)
        assert summary.total_profit == Decimal("0.30")
        assert summary.total_expense == Decimal("0.30")
        assert summary.net_balance == Decimal("0")
        assert summary.transaction_count == 3

    def test_negative_net_balance(self):
        """Test net balance goes negative when expenses exceed profit."""
        summary = summarize([
            make_transaction(1, "profit", "45"),
            make_transaction(2, "expense", "100"),
        ])
        assert summary.net_balance == Decimal("-55")


class TestResolvePeriod:
    """Tests for period name → date range."""

    NOW = datetime(2024, 3, 14, 15, 30)  # a Thursday

    def test_today(self):
        """Test today spans midnight to the last microsecond."""
        window = resolve_period("today", now=self.NOW)
        assert window.start == datetime(2024, 3, 14)
        assert window.end.date() == self.NOW.date()
        assert window.end.hour == 23

    def test_week_starts_on_monday(self):
        """Test the week runs Monday to Sunday."""
        window = resolve_period("week", now=self.NOW)
        assert window.start == datetime(2024, 3, 11)
        assert window.start.weekday() == 0
        assert window.end.date() == datetime(2024, 3, 17).date()

    def test_month(self):
        """Test the month covers its first to last day."""
        window = resolve_period(Period.MONTH.value, now=self.NOW)
        assert window.start == datetime(2024, 3, 1)
        assert window.end.date() == datetime(2024, 3, 31).date()

    def test_month_in_leap_february(self):
        """Test February ends on the 29th in a leap year."""
        window = resolve_period("month", now=datetime(2024, 2, 10))
        assert window.end.day == 29

    def test_year(self):
        """Test the year runs January 1 to December 31."""
        window = resolve_period("year", now=self.NOW)
        assert window.start == datetime(2024, 1, 1)
        assert window.end.date() == datetime(2024, 12, 31).date()

    def test_unknown_period_falls_back_to_month(self):
        """Test an unknown period name means the current month."""
        assert resolve_period("fortnight", now=self.NOW) == resolve_period("month", now=self.NOW)

    def test_custom_with_bounds(self):
        """Test a custom period keeps its explicit bounds."""
        window = resolve_period(
            "custom",
            start=datetime(2024, 1, 5),
            end=datetime(2024, 1, 20),
            now=self.NOW,
        )
        assert window.start == datetime(2024, 1, 5)
        assert window.end == datetime(2024, 1, 20)

    def test_custom_without_start_defaults_to_30_days(self):
        """Test a custom range without a start looks back 30 days."""
        window = resolve_period("custom", end=datetime(2024, 3, 31), now=self.NOW)
        assert window.start == datetime(2024, 3, 1)

    def test_bounds_without_period_mean_custom(self):
        """Test bounds alone imply a custom period ending now."""
        window = resolve_period(start=datetime(2024, 1, 1), now=self.NOW)
        assert window.start == datetime(2024, 1, 1)
        assert window.end == self.NOW

    def test_custom_end_before_start_rejected(self):
        """Test a reversed custom range is rejected."""
        with pytest.raises(ValueError):
            resolve_period("custom", start=datetime(2024, 2, 1), end=datetime(2024, 1, 1))


class TestMonthlyBreakdown:
    """Tests for the trailing-months chart data."""

    NOW = datetime(2024, 2, 20)

    def test_zero_filled_and_ordered(self):
        """Test every trailing month is present, oldest first."""
        result = monthly_breakdown([], months=6, now=self.NOW)
        assert [m.month for m in result] == [
            "2023-09", "2023-10", "2023-11", "2023-12", "2024-01", "2024-02",
        ]
        assert all(m.profit == 0 and m.expense == 0 and m.net == 0 for m in result)

    def test_totals_per_month(self):
        """Test transactions land in their month and old ones are ignored."""
        transactions = [
            make_transaction(1, "profit", "100", timestamp=datetime(2024, 1, 3)),
            make_transaction(2, "expense", "40", timestamp=datetime(2024, 1, 20)),
            make_transaction(3, "profit", "10", timestamp=datetime(2024, 2, 1)),
            # Outside the window
            make_transaction(4, "profit", "999", timestamp=datetime(2023, 1, 1)),
        ]
        result = {m.month: m for m in monthly_breakdown(transactions, now=self.NOW)}
        assert result["2024-01"].profit == Decimal("100")
        assert result["2024-01"].expense == Decimal("40")
        assert result["2024-01"].net == Decimal("60")
        assert result["2024-02"].net == Decimal("10")
        assert "2023-01" not in result

    def test_months_must_be_positive(self):
        """Test a zero-month window is rejected."""
        with pytest.raises(ValueError):
            monthly_breakdown([], months=0)


class TestCategoryBreakdown:
    """Tests for the per-category breakdown."""

    def test_sorted_with_percentages(self):
        """Test categories are sorted by total with percentage shares."""
        transactions = [
            make_transaction(1, "expense", "30", category="Rent"),
            make_transaction(2, "expense", "10", category="Utilities"),
            make_transaction(3, "expense", "60", category="Rent"),
            make_transaction(4, "profit", "500", category="Sales"),
        ]
        shares = category_breakdown(transactions, TransactionType.EXPENSE)
        assert [s.category for s in shares] == ["Rent", "Utilities"]
        assert shares[0].total == Decimal("90")
        assert shares[0].percentage == 90.0
        assert shares[1].percentage == 10.0

    def test_empty(self):
        """Test no transactions give no categories."""
        assert category_breakdown([], TransactionType.PROFIT) == []


class TestProductParsing:
    """Tests for product names recovered from sale descriptions."""

    def test_billing_description(self):
        """Test the billing sale description parses."""
        assert parse_product_sale("Sale of 3 Rice @ ₹15.00 each (profit: ₹15.00)") == (3, "Rice")

    def test_multi_word_name(self):
        """Test product names may contain spaces."""
        assert parse_product_sale("Sale of 12 Basmati Rice 5kg @ ₹1.00 each") == (12, "Basmati Rice 5kg")

    @pytest.mark.parametrize("description", [
        None,
        "",
        "Walk-in sale",
        "Sale of three Rice @ ₹1",
        "Sale of 3 Rice",
    ])
    def test_non_matching_descriptions(self, description):
        """Test descriptions in any other shape are ignored."""
        assert parse_product_sale(description) is None

    def test_revenue_is_transaction_amount(self):
        """Test product revenue sums sale amounts and skips non-sales."""
        transactions = [
            make_transaction(1, "profit", "45", description="Sale of 3 Rice @ ₹15.00 each"),
            make_transaction(2, "profit", "20", description="Sale of 2 Rice @ ₹10.00 each"),
            make_transaction(3, "profit", "100", description="Sale of 1 Oil @ ₹100.00 each"),
            make_transaction(4, "profit", "500", description="Cash deposit"),
            make_transaction(5, "expense", "30", description="Sale of 9 Ghost @ ₹1 each"),
        ]
        products = top_products(transactions)
        assert [p.name for p in products] == ["Oil", "Rice"]
        assert products[1].quantity == 5
        assert products[1].revenue == Decimal("65")


class TestShopContextBuilder:
    """Tests for the bounded view handed to the assistant."""

    def test_limits_and_totals(self):
        """Test the context is bounded but totals cover everything."""
        transactions = [
            make_transaction(i, "expense", str(i), category=f"Cat{i}")
            for i in range(1, 13)
        ]
        context = ShopContextBuilder(recent_limit=10, top_limit=5).build(transactions)

        # Storage order is preserved, not re-sorted
        assert [t.id for t in context.recent_transactions] == list(range(1, 11))
        assert [c.category for c in context.expense_summary] == [
            "Cat12", "Cat11", "Cat10", "Cat9", "Cat8",
        ]
        # Totals cover the full list, not the truncated view
        assert context.total_stats.transaction_count == 12
        assert context.total_stats.total_expense == Decimal("78")

    def test_empty_ledger(self):
        """Test an empty ledger gives an empty context."""
        context = ShopContextBuilder(recent_limit=10, top_limit=5).build([])
        assert context.recent_transactions == []
        assert context.top_products == []
        assert context.total_stats.net_balance == 0

    def test_serializes_camel_case(self):
        """Test the context serializes with camelCase keys."""
        context = ShopContextBuilder(recent_limit=10, top_limit=5).build([])
        data = context.model_dump(mode="json", by_alias=True)
        assert set(data) == {"recentTransactions", "expenseSummary", "topProducts", "totalStats"}
