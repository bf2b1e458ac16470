from datetime import date
from decimal import Decimal

from finance_engine.breakdown import breakdown_from_rows
from finance_engine.domain import BudgetUtilization, Contributor, DailyBucket
from finance_engine.presentation import (
    breakdown_frame,
    daily_frame,
    format_amount,
    format_amount_with_sign,
    format_category_path,
    to_major_units,
    utilization_frame,
)


def test_major_units_are_exact():
    assert to_major_units(12550) == Decimal("125.50")
    assert to_major_units(-1) == Decimal("-0.01")


def test_format_amount():
    assert format_amount(12550) == "125.50 kr"
    assert format_amount(123456789, show_currency=False) == "1,234,567.89"
    assert format_amount_with_sign(-12550) == "-125.50 kr"
    assert format_amount_with_sign(0) == "+0.00 kr"


def test_format_category_path():
    assert format_category_path("Supermarket", "Food & drink") == "Food & drink › Supermarket"
    assert format_category_path("Food & drink") == "Food & drink"
    assert format_category_path(None) == "Uncategorized"


def test_daily_frame_converts_at_the_boundary():
    buckets = (
        DailyBucket(date(2025, 3, 1), 10050, 0, (Contributor("Employer", 10050),), ()),
        DailyBucket(date(2025, 3, 2), 0, 2500, (), (Contributor("Netto", 2000), Contributor("Bus", 500))),
    )
    df = daily_frame(buckets)
    assert list(df["income"]) == [100.5, 0.0]
    assert list(df["expenses"]) == [0.0, 25.0]
    assert df["top_expenses"].iloc[1] == "Netto, Bus"


def test_empty_frames_keep_columns():
    assert list(daily_frame(()).columns) == ["date", "income", "expenses", "top_income", "top_expenses"]
    assert breakdown_frame(breakdown_from_rows([])).empty


def test_breakdown_frame_top_only():
    rows = [(str(i), -(i + 1) * 100) for i in range(7)]
    b = breakdown_from_rows(rows)
    assert len(breakdown_frame(b)) == 5
    assert len(breakdown_frame(b, top_only=False)) == 7
    assert breakdown_frame(b)["spent"].iloc[0] == 7.0


def test_utilization_frame():
    u = BudgetUtilization(1, "Food", "#fff", (1,), 4500, 4000, 100.0, True)
    df = utilization_frame([u])
    assert df["spent"].iloc[0] == 45.0
    assert bool(df["over_budget"].iloc[0]) is True
