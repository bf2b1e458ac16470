import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio
from datetime import date

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from finance_engine.config import MONTH_FORMAT, configure_logging
from finance_engine.errors import StoreUnavailable
from finance_engine.merger import LatestRequestGate
from finance_engine.periods import Period
from finance_engine.presentation import (
    breakdown_frame,
    daily_frame,
    format_amount,
    format_amount_with_sign,
    format_category_path,
    utilization_frame,
)
from finance_engine.services import DashboardService, PlannerService
from finance_engine.store import JsonLedgerStore
from finance_engine.tree import build_category_tree

configure_logging()
st.set_page_config(page_title="Finance Manager", layout="wide")


@st.cache_resource
def get_store() -> JsonLedgerStore:
    return JsonLedgerStore.from_file()


try:
    store = get_store()
except StoreUnavailable as exc:
    st.error(f"Could not open the ledger: {exc}")
    st.stop()

if "gate" not in st.session_state:
    st.session_state.gate = LatestRequestGate()

PERIOD_LABELS = {
    "Last 7 days": Period.WEEK,
    "Last month": Period.MONTH,
    "Last year": Period.YEAR,
    "This month": Period.THIS_MONTH,
    "This year": Period.THIS_YEAR,
    "All time": Period.ALL,
}

menu = st.sidebar.radio("Menu", ["🏠 Dashboard", "📋 Budgets", "🗂 Categories"])

if menu == "🏠 Dashboard":
    st.title("🏠 Dashboard")
    period_label = st.sidebar.selectbox("Category period", list(PERIOD_LABELS), index=1)

    try:
        result = asyncio.run(
            st.session_state.gate.run(lambda: DashboardService(store).load(PERIOD_LABELS[period_label]))
        )
    except StoreUnavailable as exc:
        st.error(f"Dashboard unavailable: {exc}")
        st.stop()
    if result.is_none():
        st.stop()
    view = result.get_or_else(None)

    k1, k2, k3 = st.columns(3)
    with k1:
        st.metric("Total Balance", format_amount(view.total_balance))
        st.caption(f"Current balance across {view.account_count} accounts")
    with k2:
        st.metric("Monthly Spending", format_amount(view.month_expense))
    with k3:
        st.metric("Monthly Income", format_amount(view.month_income))

    df = daily_frame(view.daily)
    st.subheader("Cash Flow Trend")
    if not df.empty:
        fig = go.Figure()
        fig.add_trace(go.Bar(x=df["date"], y=df["income"], name="Income", hovertext=df["top_income"]))
        fig.add_trace(go.Bar(x=df["date"], y=-df["expenses"], name="Expenses", hovertext=df["top_expenses"]))
        fig.add_trace(go.Scatter(
            x=df["date"], y=np.cumsum(df["income"] - df["expenses"]), mode="lines", name="Net"
        ))
        fig.add_vline(x=pd.Timestamp(date.today()), line_dash="dot")
        fig.update_layout(barmode="relative", template="plotly_dark", margin=dict(t=30, b=10, l=10, r=10))
        st.plotly_chart(fig, use_container_width=True)

    st.subheader("Category Breakdown")
    cat_df = breakdown_frame(view.spending)
    if cat_df.empty:
        st.info("No spending in this period.")
    else:
        fig_cat = px.pie(cat_df, values="spent", names="category", hole=0.6, title="Top spending by category")
        st.plotly_chart(fig_cat, use_container_width=True)
        st.caption(f"Total spent: {format_amount(view.spending.grand_total)}")

elif menu == "📋 Budgets":
    st.title("📋 Budgets")
    month = st.sidebar.text_input("Month (YYYY-MM)", value=date.today().strftime(MONTH_FORMAT))

    try:
        planner = asyncio.run(PlannerService(store).load(month))
    except (StoreUnavailable, ValueError) as exc:
        st.error(f"Planner unavailable: {exc}")
        st.stop()

    k1, k2, k3 = st.columns(3)
    with k1:
        st.metric("Expected Income", format_amount_with_sign(planner.expected_monthly_income))
    with k2:
        st.metric("Budgeted Spending", format_amount(planner.total_budgeted))
    with k3:
        st.metric("Subscriptions", format_amount(planner.monthly_subscription_cost))

    for u in planner.budgets:
        st.write(f"**{u.name}**: {format_amount(u.spent_amount)} / {format_amount(u.allocated_amount)}")
        st.progress(u.percent / 100)
        if u.over_budget:
            st.warning(f"{u.name} is over budget")

    util_df = utilization_frame(planner.budgets)
    if not util_df.empty:
        st.dataframe(util_df, use_container_width=True)

elif menu == "🗂 Categories":
    st.title("🗂 Categories")

    def render(nodes, parent_name=None, level=0):
        for node in nodes:
            st.markdown(f"{'&nbsp;' * 4 * level}- {format_category_path(node.name, parent_name)}")
            render(node.children, node.name, level + 1)

    render(build_category_tree(asyncio.run(store.list_categories())))
