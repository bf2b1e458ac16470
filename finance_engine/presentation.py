"""Presentation boundary.

Engine output is integer minor units all the way through; this is the only
place amounts become major units, as Decimal values for tables and floats
inside DataFrames handed to the charts.
"""
from decimal import Decimal
from typing import Iterable, Optional, Sequence

import pandas as pd

from finance_engine.config import CURRENCY_SUFFIX, UNCATEGORIZED
from finance_engine.domain import BudgetUtilization, CategoryBreakdown, DailyBucket

MINOR_PER_MAJOR = 100


def to_major_units(minor: int) -> Decimal:
    return Decimal(int(minor)) / MINOR_PER_MAJOR


def format_amount(minor: int, show_currency: bool = True, suffix: str = CURRENCY_SUFFIX) -> str:
    """12550 -> '125.50 kr'."""
    formatted = f"{to_major_units(minor):,.2f}"
    return f"{formatted} {suffix}" if show_currency else formatted


def format_amount_with_sign(minor: int, show_currency: bool = True) -> str:
    formatted = format_amount(abs(minor), show_currency)
    return f"+{formatted}" if minor >= 0 else f"-{formatted}"


def format_category_path(name: Optional[str], parent_name: Optional[str] = None) -> str:
    if not name:
        return UNCATEGORIZED
    if parent_name:
        return f"{parent_name} › {name}"
    return name


def _major(series: pd.Series) -> pd.Series:
    return series.astype("int64") / MINOR_PER_MAJOR


def daily_frame(buckets: Sequence[DailyBucket]) -> pd.DataFrame:
    """One row per day: date, income, expenses (major units) and tooltip text."""
    rows = [
        {
            "date": pd.Timestamp(b.date),
            "income": b.income_total,
            "expenses": b.expense_total,
            "top_income": ", ".join(c.payee for c in b.top_income_contributors),
            "top_expenses": ", ".join(c.payee for c in b.top_expense_contributors),
        }
        for b in buckets
    ]
    df = pd.DataFrame(rows, columns=["date", "income", "expenses", "top_income", "top_expenses"])
    if not df.empty:
        df["income"] = _major(df["income"])
        df["expenses"] = _major(df["expenses"])
    return df


def breakdown_frame(breakdown: CategoryBreakdown, top_only: bool = True) -> pd.DataFrame:
    labels: Iterable[str] = breakdown.top if top_only else [label for label, _ in breakdown.totals]
    df = pd.DataFrame(
        [{"category": label, "spent": breakdown.total_for(label)} for label in labels],
        columns=["category", "spent"],
    )
    if not df.empty:
        df["spent"] = _major(df["spent"])
    return df


def utilization_frame(utilizations: Sequence[BudgetUtilization]) -> pd.DataFrame:
    df = pd.DataFrame(
        [
            {
                "budget": u.name,
                "color": u.color,
                "spent": u.spent_amount,
                "allocated": u.allocated_amount,
                "percent": u.percent,
                "over_budget": u.over_budget,
            }
            for u in utilizations
        ],
        columns=["budget", "color", "spent", "allocated", "percent", "over_budget"],
    )
    if not df.empty:
        df["spent"] = _major(df["spent"])
        df["allocated"] = _major(df["allocated"])
    return df
