import logging
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from finance_engine.domain import BudgetPlan, BudgetUtilization, Category
from finance_engine.tree import category_index, children_by_parent

logger = logging.getLogger(__name__)


def utilization(spent: int, allocated: int) -> Tuple[float, bool]:
    """Return (percent, over_budget).

    percent is clamped to 100 for display and is 0 when nothing is allocated;
    over_budget compares the raw amounts so a breach past 100% still shows.
    """
    percent = min(100.0, spent / allocated * 100) if allocated > 0 else 0.0
    return percent, spent > allocated


def covered_category_ids(category_ids: Iterable[int], categories: Iterable[Category]) -> Tuple[int, ...]:
    """Linked ids plus everything below them.

    Only ids with no category record are skipped. A linked category still
    counts when its own parent chain dangles, so this walks parent links
    directly instead of the pruned display tree.
    """
    cats = tuple(categories)
    index = category_index(cats)
    children = children_by_parent(cats)
    covered: Dict[int, None] = {}
    for cat_id in category_ids:
        if cat_id not in index:
            logger.debug("budget links unknown category %s, ignoring", cat_id)
            continue
        pending = [cat_id]
        while pending:
            current = pending.pop()
            if current in covered:
                continue
            covered[current] = None
            pending.extend(reversed(children.get(current, [])))
    return tuple(covered)


def calculate_budget_utilization(
    plan: BudgetPlan,
    spend_by_category: Mapping[Optional[int], int],
    categories: Iterable[Category],
) -> BudgetUtilization:
    covered = covered_category_ids(plan.category_ids, categories)
    spent = sum(spend_by_category.get(cat_id, 0) for cat_id in covered)
    percent, over = utilization(spent, plan.allocated_amount)
    return BudgetUtilization(
        budget_id=plan.budget.id,
        name=plan.budget.name,
        color=plan.budget.color,
        category_ids=tuple(plan.category_ids),
        spent_amount=spent,
        allocated_amount=plan.allocated_amount,
        percent=percent,
        over_budget=over,
    )


def summarize_budgets(utilizations: Sequence[BudgetUtilization]) -> Dict[str, int]:
    return {
        "total_budgeted": sum(u.allocated_amount for u in utilizations),
        "total_spent": sum(u.spent_amount for u in utilizations),
        "over_budget_count": sum(1 for u in utilizations if u.over_budget),
    }
