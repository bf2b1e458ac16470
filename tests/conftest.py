import pytest

from finance_engine.store import JsonLedgerStore


def ledger_data():
    return {
        "accounts": [
            {"id": 1, "name": "A", "currency": "DKK"},
            {"id": 2, "name": "B", "currency": "DKK"},
        ],
        "categories": [
            {"id": 1, "name": "Food", "parent_id": None},
            {"id": 2, "name": "Groceries", "parent_id": 1},
            {"id": 3, "name": "Salary", "parent_id": None},
            {"id": 4, "name": "Transport", "parent_id": None},
        ],
        "transactions": [
            {"id": 1, "account_id": 1, "category_id": 3, "date": "2025-03-01", "payee": "Employer", "amount": 10000, "balance_snapshot": 10000},
            {"id": 2, "account_id": 1, "category_id": 2, "date": "2025-03-05", "payee": "Netto", "amount": -2500, "balance_snapshot": 7500},
            {"id": 3, "account_id": 1, "category_id": 4, "date": "2025-03-20", "payee": "DSB", "amount": -1500, "balance_snapshot": 6000},
            {"id": 4, "account_id": 2, "category_id": 1, "date": "2025-03-10", "payee": "Cafe", "amount": -2000, "balance_snapshot": 3000},
            {"id": 5, "account_id": 2, "category_id": None, "date": "2025-01-15", "payee": "Kiosk", "amount": -700, "balance_snapshot": 5000},
        ],
        "subscriptions": [
            {"id": 1, "account_id": 1, "payee_pattern": "Netflix", "amount": 12900, "frequency": "monthly"},
            {"id": 2, "account_id": 2, "payee_pattern": "Paper", "amount": 120000, "frequency": "yearly"},
            {"id": 3, "account_id": 2, "payee_pattern": "Dismissed", "amount": 5000, "frequency": "weekly", "is_dismissed": True},
        ],
        "income_streams": [
            {"id": 1, "name": "Salary", "expected_amount": 10000, "frequency": "monthly", "is_active": True},
            {"id": 2, "name": "Old", "expected_amount": 10000, "frequency": "weekly", "is_active": False},
        ],
        "budgets": [
            {"id": 1, "name": "Food", "color": "#FF9800", "category_ids": [1]},
            {"id": 2, "name": "Transport", "color": "#2196F3", "category_ids": [4, 99]},
        ],
        "budget_allocations": [
            {"budget_id": 1, "month": "2025-03", "allocated_amount": 4000},
            {"budget_id": 2, "month": "2025-03", "allocated_amount": 1000},
        ],
    }


@pytest.fixture
def data():
    return ledger_data()


@pytest.fixture
def store(data):
    return JsonLedgerStore(data)
