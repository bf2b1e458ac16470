from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union

from finance_engine.domain import Frequency, IncomeStream, Subscription

# Average occurrences per month
MONTHLY_FACTORS = {
    Frequency.WEEKLY: Decimal("4.33"),
    Frequency.BIWEEKLY: Decimal("2.17"),
    Frequency.MONTHLY: Decimal(1),
    Frequency.YEARLY: Decimal(1) / Decimal(12),
}


def monthly_equivalent(amount: int, frequency: Union[Frequency, str]) -> int:
    """Normalize a recurring amount (minor units) onto an average month.

    Unrecognized frequencies count as monthly. Results round half-up to
    whole minor units.
    """
    factor = MONTHLY_FACTORS.get(Frequency.parse(frequency), Decimal(1))
    return int((Decimal(abs(int(amount))) * factor).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def expected_monthly_income(streams: Iterable[IncomeStream]) -> int:
    return sum(monthly_equivalent(s.amount, s.frequency) for s in streams if s.is_active)


def monthly_subscription_cost(subscriptions: Iterable[Subscription]) -> int:
    # dismissed subscriptions never reach this point
    return sum(monthly_equivalent(s.amount, s.frequency) for s in subscriptions)
