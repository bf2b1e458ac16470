from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Iterator, Optional, Tuple


@dataclass(frozen=True)
class Account:
    id: int
    name: str
    currency: str = "DKK"


@dataclass(frozen=True)
class Category:
    id: int
    name: str
    parent_id: Optional[int] = None


@dataclass(frozen=True)
class Transaction:
    id: int
    account_id: int
    category_id: Optional[int]  # None = uncategorized
    date: date
    payee: str
    amount: int                 # minor units, + for income, - for expense
    balance_snapshot: Optional[int] = None


class Frequency(Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, tag) -> "Frequency":
        """Map a raw frequency tag onto the enum, UNKNOWN for anything unrecognized."""
        if isinstance(tag, Frequency):
            return tag
        try:
            return cls(str(tag).strip().lower())
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class Subscription:
    id: int
    account_id: int
    payee_pattern: str
    amount: int                 # unsigned magnitude
    frequency: Frequency
    next_charge_date: Optional[date] = None
    category_id: Optional[int] = None


@dataclass(frozen=True)
class IncomeStream:
    id: int
    name: str
    amount: int                 # unsigned magnitude
    frequency: Frequency
    category_id: Optional[int] = None
    is_active: bool = True


@dataclass(frozen=True)
class Budget:
    id: int
    name: str
    color: str = "#888888"


@dataclass(frozen=True)
class BudgetAllocation:
    budget_id: int
    month: str                  # "YYYY-MM"
    allocated_amount: int


@dataclass(frozen=True)
class BudgetPlan:
    """A budget together with its linked categories and the allocation for one month."""
    budget: Budget
    category_ids: Tuple[int, ...]
    allocated_amount: int = 0


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def day_count(self) -> int:
        return max(0, (self.end - self.start).days + 1)

    def days(self) -> Iterator[date]:
        for offset in range(self.day_count):
            yield self.start + timedelta(days=offset)


# Derived views. Everything below is recomputed per query and never stored.

@dataclass(frozen=True)
class Contributor:
    payee: str
    amount: int                 # magnitude
    category_id: Optional[int] = None


@dataclass(frozen=True)
class DailyBucket:
    date: date
    income_total: int = 0
    expense_total: int = 0
    top_income_contributors: Tuple[Contributor, ...] = ()
    top_expense_contributors: Tuple[Contributor, ...] = ()


@dataclass(frozen=True)
class CategoryBreakdown:
    totals: Tuple[Tuple[str, int], ...] = ()   # (label, spent) in first-seen order
    grand_total: int = 0
    top: Tuple[str, ...] = ()

    def total_for(self, label: str) -> int:
        return dict(self.totals).get(label, 0)


@dataclass(frozen=True)
class CategoryNode:
    category: Category
    children: Tuple["CategoryNode", ...] = ()

    @property
    def id(self) -> int:
        return self.category.id

    @property
    def name(self) -> str:
        return self.category.name


@dataclass(frozen=True)
class BudgetUtilization:
    budget_id: int
    name: str
    color: str
    category_ids: Tuple[int, ...]
    spent_amount: int
    allocated_amount: int
    percent: float
    over_budget: bool


@dataclass(frozen=True)
class MergedAccounts:
    total_balance: int = 0
    transactions: Tuple[Transaction, ...] = ()
    spending: CategoryBreakdown = field(default_factory=CategoryBreakdown)


@dataclass(frozen=True)
class DashboardView:
    period: DateRange
    window: DateRange
    account_count: int
    total_balance: int
    daily: Tuple[DailyBucket, ...]
    spending: CategoryBreakdown
    month_income: int
    month_expense: int


@dataclass(frozen=True)
class PlannerView:
    month: str
    budgets: Tuple[BudgetUtilization, ...]
    total_budgeted: int
    total_spent: int
    expected_monthly_income: int
    monthly_subscription_cost: int
