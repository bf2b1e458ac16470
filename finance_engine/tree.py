import logging
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from finance_engine.config import UNCATEGORIZED
from finance_engine.domain import Category, CategoryNode
from finance_engine.functional import lookup

logger = logging.getLogger(__name__)


def build_category_tree(categories: Iterable[Category]) -> Tuple[CategoryNode, ...]:
    """Turn a flat, parent-referencing category list into an ordered forest.

    First pass indexes every category by id, second pass attaches each one to
    its parent's children (or to the roots when parent_id is None). Sibling
    order follows input order. A category whose parent_id points at an id
    that does not exist is left out, and so is everything below it.
    """
    cats = tuple(categories)
    by_id: Dict[int, Category] = {c.id: c for c in cats}
    children_of: Dict[int, List[int]] = {c.id: [] for c in cats}
    root_ids: List[int] = []

    for c in cats:
        if c.parent_id is None:
            root_ids.append(c.id)
        elif c.parent_id in children_of:
            children_of[c.parent_id].append(c.id)
        else:
            logger.debug("dropping category %s: parent %s does not exist", c.id, c.parent_id)

    def freeze(cat_id: int, path: frozenset) -> CategoryNode:
        # path guards against a corrupt store handing us a cycle
        kids = tuple(
            freeze(child_id, path | {child_id})
            for child_id in children_of[cat_id]
            if child_id not in path
        )
        return CategoryNode(category=by_id[cat_id], children=kids)

    return tuple(freeze(root_id, frozenset({root_id})) for root_id in root_ids)


def iter_nodes(forest: Iterable[CategoryNode]) -> Iterator[CategoryNode]:
    for node in forest:
        yield node
        yield from iter_nodes(node.children)


def find_node(forest: Iterable[CategoryNode], category_id: int) -> Optional[CategoryNode]:
    return next((n for n in iter_nodes(forest) if n.id == category_id), None)


def descendant_ids(forest: Iterable[CategoryNode], category_id: int) -> Tuple[int, ...]:
    """The category itself plus every category reachable below it."""
    node = find_node(forest, category_id)
    if node is None:
        return ()
    return tuple(n.id for n in iter_nodes((node,)))


def category_index(categories: Iterable[Category]) -> Dict[int, Category]:
    return {c.id: c for c in categories}


def children_by_parent(categories: Iterable[Category]) -> Dict[int, List[int]]:
    """parent_id -> child ids in input order, over every category with a parent."""
    children: Dict[int, List[int]] = {}
    for c in categories:
        if c.parent_id is not None:
            children.setdefault(c.parent_id, []).append(c.id)
    return children


def category_label(category_id: Optional[int], index: Mapping[int, Category]) -> str:
    """Reporting label for a transaction's category.

    Spending rolls up one level: a subcategory reports under its parent's
    name. Unset or unknown ids report as Uncategorized.
    """
    own = lookup(index, category_id)
    parent = own.bind(lambda c: lookup(index, c.parent_id))
    return parent.map(lambda c: c.name).get_or_else(
        own.map(lambda c: c.name).get_or_else(UNCATEGORIZED)
    )
