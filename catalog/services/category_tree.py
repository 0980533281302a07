"""
Nested views over the flat category table.
"""

from typing import Any, FrozenSet, Iterable, List, Optional, Sequence

from loguru import logger

from catalog.schemas.categories import CategoryTreeNode


def canonical_id(value: Any) -> Optional[str]:
    """
    Normalize an identifier for comparison.

    ``None`` stays ``None`` so that only a missing parent marks a root; any
    other value, including an empty string, is compared by its string form.
    """
    if value is None:
        return None
    return str(value)


def build_category_tree(categories: Sequence[Any], parent_id: Any = None) -> List[CategoryTreeNode]:
    """
    Nest ``categories`` under ``parent_id``.

    ``categories`` is the complete flat list in creation order; the result
    keeps that order among siblings. Each node carries its full subtree in
    ``children``, however deep. A node reached twice on the same path is
    left out so that a corrupted table cannot recurse forever.
    """
    return _build_level(categories, canonical_id(parent_id), frozenset())


def _build_level(
    categories: Sequence[Any],
    parent_key: Optional[str],
    path: FrozenSet[str],
) -> List[CategoryTreeNode]:
    tree = []
    for category in categories:
        if canonical_id(category.parent_id) != parent_key:
            continue

        key = str(category.id)
        if key in path:
            logger.warning(f"Category {key} references one of its own ancestors; skipping cycle")
            continue

        node = CategoryTreeNode.model_validate(category)
        node.children = _build_level(categories, key, path | {key})
        tree.append(node)

    return tree


def iter_tree(nodes: Iterable[CategoryTreeNode]) -> Iterable[CategoryTreeNode]:
    """Yield every node of a forest, parents before their children."""
    for node in nodes:
        yield node
        yield from iter_tree(node.children)
