"""Configuration for the aggregation engine.

Fixed engine constants live here next to the few values that can be
overridden through environment variables.
"""
import logging
import os
from datetime import date
from pathlib import Path

_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

SEED_PATH = Path(
    os.getenv("FINANCE_ENGINE_SEED_PATH", _PROJECT_ROOT / "data" / "seed.json")
)
LOG_LEVEL = os.getenv("FINANCE_ENGINE_LOG_LEVEL", "INFO").upper()
CURRENCY_SUFFIX = os.getenv("FINANCE_ENGINE_CURRENCY_SUFFIX", "kr")

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"

UNCATEGORIZED = "Uncategorized"
TOP_N = 5
EPOCH = date(1970, 1, 1)

# Dashboard cash-flow window: months back / days ahead of today
DASHBOARD_MONTHS_BACK = 3
DASHBOARD_DAYS_AHEAD = 3


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
