import asyncio
import logging
from typing import Awaitable, Callable, Iterable, List, Optional, Sequence, Tuple, TypeVar, Union

from finance_engine.breakdown import breakdown_from_rows, breakdown_from_transactions, merge_breakdowns
from finance_engine.domain import Account, Category, CategoryBreakdown, DateRange, MergedAccounts, Transaction
from finance_engine.errors import StoreUnavailable
from finance_engine.functional import Maybe, Nothing, Some, from_optional
from finance_engine.periods import Period, requires_full_history
from finance_engine.store import LedgerStore

logger = logging.getLogger(__name__)

T = TypeVar('T')


async def guarded(query: str, account_id, awaitable: Awaitable[T]) -> T:
    try:
        return await awaitable
    except StoreUnavailable:
        raise
    except Exception as exc:
        logger.error("store query %s failed for account %s: %s", query, account_id, exc)
        raise StoreUnavailable(query, account_id, str(exc)) from exc


async def latest_balance(store: LedgerStore, account_id: int) -> int:
    """balance_snapshot of the newest transaction, 0 when the account has none."""
    latest = await store.list_transactions(account_id, limit=1)
    if not latest:
        return 0
    return from_optional(latest[0].balance_snapshot).get_or_else(0)


async def merge_accounts(
    store: LedgerStore,
    accounts: Sequence[Account],
    selector: Union[str, Period],
    date_range: DateRange,
    categories: Optional[Iterable[Category]] = None,
) -> MergedAccounts:
    """Fetch every account's data concurrently and fold it into one view.

    Per account three independent queries run: transactions for the period,
    spending by category and the latest balance. The fold waits for all of
    them; one failing query fails the whole view.

    Full-history selectors label spending client-side, so the category list
    is fetched from the store when the caller does not supply one.
    """
    full_history = requires_full_history(selector)
    if categories is None and full_history:
        categories = await guarded("list_categories", None, store.list_categories())
    cats = tuple(categories or ())

    async def account_data(a: Account) -> Tuple[List[Transaction], CategoryBreakdown, int]:
        if full_history:
            # spending is derived client-side from the filtered history
            history, balance = await asyncio.gather(
                guarded("list_transactions", a.id, store.list_transactions(a.id)),
                guarded("latest_balance", a.id, latest_balance(store, a.id)),
            )
            txs = [t for t in history if date_range.contains(t.date)]
            return txs, breakdown_from_transactions(txs, date_range, cats), balance

        txs, rows, balance = await asyncio.gather(
            guarded("list_transactions", a.id, store.list_transactions(a.id, date_range)),
            guarded("spending_by_category", a.id, store.spending_by_category(a.id, date_range)),
            guarded("latest_balance", a.id, latest_balance(store, a.id)),
        )
        return list(txs), breakdown_from_rows(rows), balance

    results = await asyncio.gather(*(account_data(a) for a in accounts))

    transactions: List[Transaction] = []
    total_balance = 0
    for txs, _, balance in results:
        transactions.extend(txs)
        total_balance += balance

    logger.info(
        "merged %d accounts: %d transactions, balance %d",
        len(accounts), len(transactions), total_balance,
    )
    return MergedAccounts(
        total_balance=total_balance,
        transactions=tuple(transactions),
        spending=merge_breakdowns([b for _, b, _ in results]),
    )


class LatestRequestGate:
    """Last-request-wins guard for user-triggered queries.

    Each run() takes a ticket; a result whose ticket is no longer the newest
    when it resolves is dropped and comes back as Nothing().
    """

    def __init__(self):
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    async def run(self, factory: Callable[[], Awaitable[T]]) -> Maybe[T]:
        self._latest += 1
        ticket = self._latest
        result = await factory()
        if ticket != self._latest:
            logger.debug("discarding stale result for request %d (latest is %d)", ticket, self._latest)
            return Nothing()
        return Some(result)
