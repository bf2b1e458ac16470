from typing import Dict, Iterable, List, Tuple

from finance_engine.config import TOP_N
from finance_engine.domain import Contributor, DailyBucket, DateRange, Transaction


def _top(contributors: List[Contributor], n: int) -> Tuple[Contributor, ...]:
    # sorted() is stable, so equal magnitudes keep insertion order
    return tuple(sorted(contributors, key=lambda c: c.amount, reverse=True)[: max(0, n)])


def aggregate_daily(
    trans: Iterable[Transaction], date_range: DateRange, top_n: int = TOP_N
) -> Tuple[DailyBucket, ...]:
    """Bucket transactions by calendar day.

    Every day of the range gets a bucket, even without activity, so charts
    stay continuous. Transactions outside the range are skipped. Totals stay
    in minor units; contributor lists are cut to the top_n largest.
    """
    income: Dict = {}
    expense: Dict = {}
    income_by: Dict = {}
    expense_by: Dict = {}
    for day in date_range.days():
        income[day] = 0
        expense[day] = 0
        income_by[day] = []
        expense_by[day] = []

    for t in trans:
        if t.date not in income:
            continue
        if t.amount > 0:
            income[t.date] += t.amount
            income_by[t.date].append(Contributor(t.payee, t.amount, t.category_id))
        elif t.amount < 0:
            expense[t.date] += -t.amount
            expense_by[t.date].append(Contributor(t.payee, -t.amount, t.category_id))

    return tuple(
        DailyBucket(
            date=day,
            income_total=income[day],
            expense_total=expense[day],
            top_income_contributors=_top(income_by[day], top_n),
            top_expense_contributors=_top(expense_by[day], top_n),
        )
        for day in date_range.days()
    )


def cash_flow_totals(trans: Iterable[Transaction], date_range: DateRange) -> Tuple[int, int]:
    """(income, expense) magnitudes for the transactions inside date_range."""
    income = 0
    expense = 0
    for t in trans:
        if not date_range.contains(t.date):
            continue
        if t.amount > 0:
            income += t.amount
        else:
            expense += -t.amount
    return income, expense
