import asyncio
import logging
from datetime import date, datetime
from typing import Optional, Union

from finance_engine.breakdown import spending_by_category_id
from finance_engine.budgets import calculate_budget_utilization, summarize_budgets
from finance_engine.config import MONTH_FORMAT
from finance_engine.daily import aggregate_daily, cash_flow_totals
from finance_engine.domain import DashboardView, PlannerView
from finance_engine.merger import guarded, merge_accounts
from finance_engine.periods import Period, dashboard_window, month_range, resolve_period
from finance_engine.recurring import expected_monthly_income, monthly_subscription_cost
from finance_engine.store import LedgerStore

logger = logging.getLogger(__name__)


class DashboardService:
    """Facade for the dashboard: cash-flow chart, category breakdown and KPI cards.

    The cash-flow chart and the month KPIs always use the bounded dashboard
    window around today; the category breakdown follows the period selector.
    """

    def __init__(self, store: LedgerStore):
        self.store = store

    async def load(self, selector: Union[str, Period] = Period.MONTH, now: Union[date, datetime, None] = None) -> DashboardView:
        today = now or date.today()
        period = resolve_period(selector, today)
        window = dashboard_window(today)

        accounts, categories = await asyncio.gather(
            guarded("list_accounts", None, self.store.list_accounts()),
            guarded("list_categories", None, self.store.list_categories()),
        )
        recent, selected = await asyncio.gather(
            merge_accounts(self.store, accounts, Period.MONTH, window, categories),
            merge_accounts(self.store, accounts, selector, period, categories),
        )

        this_month = month_range(period.end.strftime(MONTH_FORMAT))
        month_income, month_expense = cash_flow_totals(recent.transactions, this_month)

        return DashboardView(
            period=period,
            window=window,
            account_count=len(accounts),
            total_balance=recent.total_balance,
            daily=aggregate_daily(recent.transactions, window),
            spending=selected.spending,
            month_income=month_income,
            month_expense=month_expense,
        )


class PlannerService:
    """Facade for the monthly planner: budget utilization plus recurring totals."""

    def __init__(self, store: LedgerStore):
        self.store = store

    async def load(self, month: Optional[str] = None) -> PlannerView:
        month = month or date.today().strftime(MONTH_FORMAT)
        span = month_range(month)

        accounts, categories, plans, streams = await asyncio.gather(
            guarded("list_accounts", None, self.store.list_accounts()),
            guarded("list_categories", None, self.store.list_categories()),
            guarded("budgets_for_month", None, self.store.budgets_for_month(month)),
            guarded("list_income_streams", None, self.store.list_income_streams()),
        )
        per_account = await asyncio.gather(
            *(guarded("list_transactions", a.id, self.store.list_transactions(a.id, span)) for a in accounts)
        )
        subscriptions = await asyncio.gather(
            *(guarded("list_subscriptions", a.id, self.store.list_subscriptions(a.id)) for a in accounts)
        )

        spend = spending_by_category_id((t for txs in per_account for t in txs), span)
        cats = tuple(categories)
        budgets = tuple(calculate_budget_utilization(p, spend, cats) for p in plans)
        summary = summarize_budgets(budgets)
        logger.info("planner %s: %d budgets, %d over budget", month, len(budgets), summary["over_budget_count"])

        return PlannerView(
            month=month,
            budgets=budgets,
            total_budgeted=summary["total_budgeted"],
            total_spent=summary["total_spent"],
            expected_monthly_income=expected_monthly_income(streams),
            monthly_subscription_cost=monthly_subscription_cost(s for subs in subscriptions for s in subs),
        )
