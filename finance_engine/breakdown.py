import logging
from collections import defaultdict
from typing import Dict, Iterable, Iterator, Optional, Sequence, Tuple

from finance_engine.config import TOP_N
from finance_engine.domain import Category, CategoryBreakdown, DateRange, Transaction
from finance_engine.functional import pipe
from finance_engine.tree import category_index, category_label

logger = logging.getLogger(__name__)


def iter_expenses(trans: Iterable[Transaction], date_range: DateRange) -> Iterator[Transaction]:
    for t in trans:
        if t.amount < 0 and date_range.contains(t.date):
            yield t


def spending_by_category_id(
    trans: Iterable[Transaction], date_range: DateRange
) -> Dict[Optional[int], int]:
    """category_id (None when unset) -> absolute spend inside date_range."""
    totals: Dict[Optional[int], int] = defaultdict(int)
    for t in iter_expenses(trans, date_range):
        totals[t.category_id] += -t.amount
    return dict(totals)


def _accumulate(rows: Iterable[Tuple[str, int]]) -> Dict[str, int]:
    # dict keeps first-seen label order, which is the tie-breaker for ranking
    totals: Dict[str, int] = {}
    for label, amount in rows:
        totals[label] = totals.get(label, 0) + abs(int(amount))
    return totals


def _rank(totals: Dict[str, int], top_n: int = TOP_N) -> CategoryBreakdown:
    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return CategoryBreakdown(
        totals=tuple(totals.items()),
        grand_total=sum(totals.values()),
        top=tuple(label for label, _ in ordered[: max(0, top_n)]),
    )


def breakdown_from_rows(rows: Iterable[Tuple[str, int]], top_n: int = TOP_N) -> CategoryBreakdown:
    """Build a breakdown from (label, total) rows as the store reports them.

    Store totals are signed sums of expenses, so they are taken by magnitude.
    """
    return _rank(_accumulate(rows), top_n)


def breakdown_from_transactions(
    trans: Iterable[Transaction],
    date_range: DateRange,
    categories: Iterable[Category],
    top_n: int = TOP_N,
) -> CategoryBreakdown:
    index = category_index(categories)
    return pipe(
        iter_expenses(trans, date_range),
        lambda expenses: ((category_label(t.category_id, index), t.amount) for t in expenses),
        _accumulate,
        lambda totals: _rank(totals, top_n),
    )


def merge_breakdowns(breakdowns: Sequence[CategoryBreakdown], top_n: int = TOP_N) -> CategoryBreakdown:
    """Sum per-label totals across accounts, then rank.

    Ranking has to happen after the merge: a category split across accounts
    can miss every per-account top list and still lead the combined one.
    """
    merged = _accumulate(row for b in breakdowns for row in b.totals)
    logger.debug("merged %d breakdowns into %d labels", len(breakdowns), len(merged))
    return _rank(merged, top_n)
