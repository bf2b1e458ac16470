from datetime import date, timedelta

from finance_engine.daily import aggregate_daily, cash_flow_totals
from finance_engine.domain import DateRange, Transaction


def make_tx(id, amount, day, payee="p", acc_id=1, cat_id=None):
    return Transaction(id=id, account_id=acc_id, category_id=cat_id, date=day, payee=payee, amount=amount)


MARCH = DateRange(date(2025, 3, 1), date(2025, 3, 31))


def test_every_day_gets_a_bucket():
    buckets = aggregate_daily([], MARCH)
    assert len(buckets) == 31
    assert buckets[0].date == date(2025, 3, 1)
    assert buckets[-1].date == date(2025, 3, 31)
    assert all(b.income_total == 0 and b.expense_total == 0 for b in buckets)


def test_length_matches_inclusive_day_count():
    r = DateRange(date(2024, 2, 27), date(2024, 3, 2))
    trans = [make_tx(1, -100, date(2024, 2, 1)), make_tx(2, 500, date(2024, 2, 29))]
    assert len(aggregate_daily(trans, r)) == r.day_count == 5


def test_single_day_and_reversed_range():
    day = date(2025, 3, 5)
    assert len(aggregate_daily([], DateRange(day, day))) == 1
    assert aggregate_daily([], DateRange(day, day - timedelta(days=1))) == ()


def test_totals_split_income_and_expense():
    trans = [
        make_tx(1, 1000, date(2025, 3, 2)),
        make_tx(2, -300, date(2025, 3, 2)),
        make_tx(3, -200, date(2025, 3, 2)),
        make_tx(4, 0, date(2025, 3, 2)),
    ]
    bucket = aggregate_daily(trans, MARCH)[1]
    assert bucket.income_total == 1000
    assert bucket.expense_total == 500
    assert len(bucket.top_income_contributors) == 1
    assert len(bucket.top_expense_contributors) == 2


def test_out_of_range_transactions_are_ignored():
    trans = [make_tx(1, -100, date(2025, 2, 28)), make_tx(2, 700, date(2025, 4, 1))]
    buckets = aggregate_daily(trans, MARCH)
    assert sum(b.income_total for b in buckets) == 0
    assert sum(b.expense_total for b in buckets) == 0


def test_sums_match_in_range_amounts():
    trans = [make_tx(i, amount, date(2025, 3, 1 + i % 31)) for i, amount in enumerate(
        [120, -45, -3000, 800, -1, 55, -999, 10000, -20, 7]
    )]
    trans.append(make_tx(99, -5000, date(2025, 4, 2)))
    buckets = aggregate_daily(trans, MARCH)
    in_range = [t for t in trans if MARCH.contains(t.date)]
    assert sum(b.income_total for b in buckets) == sum(t.amount for t in in_range if t.amount > 0)
    assert sum(b.expense_total for b in buckets) == sum(-t.amount for t in in_range if t.amount < 0)


def test_contributors_truncated_to_top_five_with_stable_ties():
    day = date(2025, 3, 10)
    trans = [
        make_tx(1, -100, day, "a"),
        make_tx(2, -500, day, "b"),
        make_tx(3, -100, day, "c"),
        make_tx(4, -300, day, "d"),
        make_tx(5, -100, day, "e"),
        make_tx(6, -100, day, "f"),
        make_tx(7, -50, day, "g"),
    ]
    bucket = aggregate_daily(trans, MARCH)[9]
    top = bucket.top_expense_contributors
    assert [c.payee for c in top] == ["b", "d", "a", "c", "e"]
    assert [c.amount for c in top] == [500, 300, 100, 100, 100]
    assert bucket.expense_total == 1250


def test_aggregation_is_idempotent():
    trans = [make_tx(1, 100, date(2025, 3, 3)), make_tx(2, -40, date(2025, 3, 3))]
    assert aggregate_daily(trans, MARCH) == aggregate_daily(trans, MARCH)


def test_cash_flow_totals():
    trans = [
        make_tx(1, 10000, date(2025, 3, 1)),
        make_tx(2, -4000, date(2025, 3, 15)),
        make_tx(3, -9999, date(2025, 2, 15)),
    ]
    assert cash_flow_totals(trans, MARCH) == (10000, 4000)
    assert cash_flow_totals([], MARCH) == (0, 0)
