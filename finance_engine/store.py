"""Ledger Store interface and a read-only JSON-backed implementation.

The engine only ever talks to a store through the async LedgerStore
protocol. JsonLedgerStore loads a seed file once into frozen records and
answers every query from that snapshot.
"""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple, Union

from finance_engine.config import DATE_FORMAT, SEED_PATH
from finance_engine.domain import (
    Account,
    Budget,
    BudgetAllocation,
    BudgetPlan,
    Category,
    DateRange,
    Frequency,
    IncomeStream,
    Subscription,
    Transaction,
)
from finance_engine.errors import StoreUnavailable
from finance_engine.tree import category_index, category_label

logger = logging.getLogger(__name__)


class LedgerStore(Protocol):

    async def list_accounts(self) -> Sequence[Account]:  # pragma: no cover - interface
        ...

    async def list_transactions(
        self,
        account_id: int,
        date_range: Optional[DateRange] = None,
        limit: Optional[int] = None,
    ) -> Sequence[Transaction]:  # pragma: no cover - interface
        """Transactions of one account, newest first."""
        ...

    async def spending_by_category(
        self, account_id: int, date_range: DateRange
    ) -> Sequence[Tuple[str, int]]:  # pragma: no cover - interface
        """(label, signed expense total) rows, largest spend first."""
        ...

    async def list_categories(self) -> Sequence[Category]:  # pragma: no cover - interface
        ...

    async def list_subscriptions(self, account_id: int) -> Sequence[Subscription]:  # pragma: no cover - interface
        """Saved subscriptions of one account, dismissed ones excluded."""
        ...

    async def list_income_streams(self) -> Sequence[IncomeStream]:  # pragma: no cover - interface
        ...

    async def budgets_for_month(self, month: str) -> Sequence[BudgetPlan]:  # pragma: no cover - interface
        ...


def _parse_date(value: Optional[str]):
    if not value:
        return None
    return datetime.strptime(value, DATE_FORMAT).date()


def _transaction(d: Dict[str, Any]) -> Transaction:
    return Transaction(
        id=d["id"],
        account_id=d["account_id"],
        category_id=d.get("category_id"),
        date=_parse_date(d["date"]),
        payee=d.get("payee", ""),
        amount=int(d["amount"]),
        balance_snapshot=d.get("balance_snapshot"),
    )


def _subscription(d: Dict[str, Any]) -> Subscription:
    return Subscription(
        id=d["id"],
        account_id=d["account_id"],
        payee_pattern=d.get("payee_pattern", ""),
        amount=abs(int(d["amount"])),
        frequency=Frequency.parse(d.get("frequency")),
        next_charge_date=_parse_date(d.get("next_charge_date")),
        category_id=d.get("category_id"),
    )


def _income_stream(d: Dict[str, Any]) -> IncomeStream:
    return IncomeStream(
        id=d["id"],
        name=d["name"],
        amount=abs(int(d.get("expected_amount", d.get("amount", 0)))),
        frequency=Frequency.parse(d.get("frequency")),
        category_id=d.get("category_id"),
        is_active=bool(d.get("is_active", True)),
    )


class JsonLedgerStore:
    """Ledger store over an in-memory snapshot of a seed document."""

    def __init__(self, data: Dict[str, Any]):
        try:
            self._accounts = tuple(Account(**a) for a in data.get("accounts", []))
            self._categories = tuple(Category(**c) for c in data.get("categories", []))
            self._transactions = tuple(_transaction(t) for t in data.get("transactions", []))
            self._subscriptions = tuple(
                _subscription(s) for s in data.get("subscriptions", []) if not s.get("is_dismissed")
            )
            self._income_streams = tuple(_income_stream(s) for s in data.get("income_streams", []))
            self._budgets = tuple(
                (Budget(id=b["id"], name=b["name"], color=b.get("color", "#888888")),
                 tuple(b.get("category_ids", [])))
                for b in data.get("budgets", [])
            )
            self._allocations = tuple(BudgetAllocation(**a) for a in data.get("budget_allocations", []))
        except (KeyError, TypeError, ValueError) as exc:
            raise StoreUnavailable("load", reason=f"malformed seed data ({exc})") from exc

    @classmethod
    def from_file(cls, path: Union[str, Path, None] = None) -> "JsonLedgerStore":
        path = Path(path or SEED_PATH)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreUnavailable("load", reason=f"cannot read {path} ({exc})") from exc
        logger.info("loaded ledger snapshot from %s", path)
        return cls(data)

    async def list_accounts(self) -> List[Account]:
        return list(self._accounts)

    async def list_transactions(
        self,
        account_id: int,
        date_range: Optional[DateRange] = None,
        limit: Optional[int] = None,
    ) -> List[Transaction]:
        rows = [
            t for t in self._transactions
            if t.account_id == account_id and (date_range is None or date_range.contains(t.date))
        ]
        rows.sort(key=lambda t: (t.date, t.id), reverse=True)
        return rows if limit is None else rows[:limit]

    async def spending_by_category(self, account_id: int, date_range: DateRange) -> List[Tuple[str, int]]:
        index = category_index(self._categories)
        totals: Dict[str, int] = {}
        for t in await self.list_transactions(account_id, date_range):
            if t.amount < 0:
                label = category_label(t.category_id, index)
                totals[label] = totals.get(label, 0) + t.amount
        return sorted(totals.items(), key=lambda item: item[1])

    async def list_categories(self) -> List[Category]:
        return list(self._categories)

    async def list_subscriptions(self, account_id: int) -> List[Subscription]:
        return [s for s in self._subscriptions if s.account_id == account_id]

    async def list_income_streams(self) -> List[IncomeStream]:
        return list(self._income_streams)

    async def budgets_for_month(self, month: str) -> List[BudgetPlan]:
        allocated = {a.budget_id: a.allocated_amount for a in self._allocations if a.month == month}
        return [
            BudgetPlan(budget=budget, category_ids=cat_ids, allocated_amount=allocated.get(budget.id, 0))
            for budget, cat_ids in sorted(self._budgets, key=lambda item: item[0].name)
        ]
