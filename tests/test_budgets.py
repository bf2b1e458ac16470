from finance_engine.budgets import (
    calculate_budget_utilization,
    covered_category_ids,
    summarize_budgets,
    utilization,
)
from finance_engine.domain import Budget, BudgetPlan, Category


def make_cats():
    return (
        Category(1, "Food", None),
        Category(2, "Groceries", 1),
        Category(3, "Fruits", 2),
        Category(4, "Transport", None),
    )


def test_utilization_basic():
    assert utilization(250, 1000) == (25.0, False)


def test_utilization_clamps_percent_but_flags_breach():
    percent, over = utilization(1500, 1000)
    assert percent == 100.0
    assert over is True


def test_exactly_on_budget_is_not_over():
    assert utilization(1000, 1000) == (100.0, False)


def test_zero_allocation_guards_division():
    assert utilization(500, 0) == (0.0, True)
    assert utilization(0, 0) == (0.0, False)


def test_covered_ids_include_descendants_and_skip_dangling():
    assert set(covered_category_ids([1, 42], make_cats())) == {1, 2, 3}


def test_budget_spend_sums_linked_categories():
    plan = BudgetPlan(Budget(7, "Food", "#FF9800"), (1, 99), allocated_amount=1000)
    spend = {1: 200, 3: 150, 4: 5000, None: 70}
    u = calculate_budget_utilization(plan, spend, make_cats())
    assert u.budget_id == 7
    assert u.spent_amount == 350
    assert u.allocated_amount == 1000
    assert u.percent == 35.0
    assert u.over_budget is False
    assert u.category_ids == (1, 99)


def test_budget_without_allocation():
    plan = BudgetPlan(Budget(8, "Transport"), (4,))
    u = calculate_budget_utilization(plan, {4: 500}, make_cats())
    assert u.percent == 0.0
    assert u.over_budget is True


def test_summarize_budgets():
    cats = make_cats()
    us = [
        calculate_budget_utilization(BudgetPlan(Budget(1, "A"), (1,), 100), {1: 150}, cats),
        calculate_budget_utilization(BudgetPlan(Budget(2, "B"), (4,), 300), {4: 100}, cats),
    ]
    assert summarize_budgets(us) == {"total_budgeted": 400, "total_spent": 250, "over_budget_count": 1}


def test_linked_category_with_dangling_parent_still_counts():
    cats = (Category(1, "Food", None), Category(5, "Snacks", 42), Category(6, "Candy", 5))
    plan = BudgetPlan(Budget(3, "Treats"), (5,), allocated_amount=1000)
    u = calculate_budget_utilization(plan, {5: 700, 6: 100, 1: 9999}, cats)
    assert u.spent_amount == 800
    assert set(covered_category_ids([5], cats)) == {5, 6}


def test_parent_cycle_does_not_loop():
    cats = (Category(1, "A", 2), Category(2, "B", 1))
    assert set(covered_category_ids([1], cats)) == {1, 2}
