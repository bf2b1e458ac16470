import calendar
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Union

import pandas as pd

from finance_engine.config import DASHBOARD_DAYS_AHEAD, DASHBOARD_MONTHS_BACK, EPOCH, MONTH_FORMAT
from finance_engine.domain import DateRange


class Period(Enum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    THIS_MONTH = "thisMonth"
    THIS_YEAR = "thisYear"
    ALL = "all"


FULL_HISTORY = frozenset({Period.THIS_YEAR, Period.ALL})


def parse_period(value: Union[str, Period]) -> Period:
    if isinstance(value, Period):
        return value
    try:
        return Period(value)
    except ValueError:
        raise ValueError(f"unknown period selector: {value!r}") from None


def _as_date(now: Union[date, datetime]) -> date:
    return now.date() if isinstance(now, datetime) else now


def _months_back(day: date, months: int) -> date:
    # DateOffset clamps to the last valid day, e.g. 31 Mar - 1 month = 28/29 Feb
    return (pd.Timestamp(day) - pd.DateOffset(months=months)).date()


def resolve_period(selector: Union[str, Period], now: Union[date, datetime]) -> DateRange:
    """Map a period selector onto an inclusive [start, end] date range ending at now."""
    period = parse_period(selector)
    today = _as_date(now)

    if period is Period.WEEK:
        start = today - timedelta(days=7)
    elif period is Period.MONTH:
        start = _months_back(today, 1)
    elif period is Period.YEAR:
        start = _months_back(today, 12)
    elif period is Period.THIS_MONTH:
        start = today.replace(day=1)
    elif period is Period.THIS_YEAR:
        start = today.replace(month=1, day=1)
    else:
        start = EPOCH
    return DateRange(start=start, end=today)


def requires_full_history(selector: Union[str, Period]) -> bool:
    """True when the bounded recent-window query would miss part of the period."""
    return parse_period(selector) in FULL_HISTORY


def month_range(month: str) -> DateRange:
    """'YYYY-MM' -> first..last day of that month."""
    try:
        first = datetime.strptime(month, MONTH_FORMAT).date()
    except (TypeError, ValueError):
        raise ValueError(f"month must look like YYYY-MM, got {month!r}") from None
    last_day = calendar.monthrange(first.year, first.month)[1]
    return DateRange(start=first, end=first.replace(day=last_day))


def dashboard_window(today: Union[date, datetime]) -> DateRange:
    day = _as_date(today)
    return DateRange(
        start=_months_back(day, DASHBOARD_MONTHS_BACK),
        end=day + timedelta(days=DASHBOARD_DAYS_AHEAD),
    )
