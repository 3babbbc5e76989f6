"""
==============================================================================
Ordering Engine Module
==============================================================================

Deterministic multi-key sort applied to every group after each mutation.

Sort Key:
---------
1. Position of the item's category in PREFERRED_CATEGORY_ORDER; categories
   not in the list share one rank after all listed ones
2. Ascending scanned_at

Python's sort is stable, so items with equal keys keep their previous
relative order.

==============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, List, Tuple

from scanflow.domain.models import Group, ScanItem


PREFERRED_CATEGORY_ORDER: Tuple[str, ...] = (
    "ASY",
    "ASY-OTL",
    "Serial Number",
    "MAC Address",
    "Deviation",
    "PCA",
)

_CATEGORY_RANK: Dict[str, int] = {
    category: index for index, category in enumerate(PREFERRED_CATEGORY_ORDER)
}


def category_rank(category: str) -> int:
    """Rank of a category; unlisted categories rank last."""
    return _CATEGORY_RANK.get(category, len(PREFERRED_CATEGORY_ORDER))


def sort_key(item: ScanItem) -> Tuple[int, datetime]:
    return category_rank(item.category), item.scanned_at


def order_items(items: Iterable[ScanItem]) -> List[ScanItem]:
    """
    Return items in preferred-category, then timestamp order.

    Args:
        items: Items from one group or several groups

    Returns:
        New sorted list
    """
    return sorted(items, key=sort_key)


def sort_group(group: Group) -> Group:
    """Re-sort a group's items in place and return the group."""
    group.items = order_items(group.items)
    return group
