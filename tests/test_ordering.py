"""
==============================================================================
Ordering Engine Tests
==============================================================================
"""

from datetime import datetime, timedelta, timezone

from scanflow.domain.models import Group, ScanItem
from scanflow.grouping.ordering import (
    PREFERRED_CATEGORY_ORDER,
    category_rank,
    order_items,
    sort_group,
)


T0 = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)


def item(value: str, category: str, offset: int = 0) -> ScanItem:
    return ScanItem(value=value, category=category, format="CODE128", scanned_at=T0 + timedelta(seconds=offset))


class TestCategoryRank:
    """Tests for category_rank."""

    def test_preferred_order(self):
        ranks = [category_rank(c) for c in PREFERRED_CATEGORY_ORDER]
        assert ranks == sorted(ranks)
        assert category_rank("ASY") == 0
        assert category_rank("PCA") == len(PREFERRED_CATEGORY_ORDER) - 1

    def test_unlisted_categories_share_last_rank(self):
        assert category_rank("Unknown") == category_rank("Something Else")
        assert category_rank("Unknown") > category_rank("PCA")


class TestOrderItems:
    """Tests for order_items / sort_group."""

    def test_category_then_timestamp(self):
        items = [
            item("p", "PCA", 0),
            item("s2", "Serial Number", 5),
            item("u", "Unknown", 0),
            item("s1", "Serial Number", 1),
            item("a", "ASY", 9),
            item("m", "MAC Address", 3),
            item("d", "Deviation", 2),
            item("o", "ASY-OTL", 4),
        ]

        assert [i.value for i in order_items(items)] == ["a", "o", "s1", "s2", "m", "d", "p", "u"]

    def test_stable_for_equal_keys(self):
        items = [item("first", "Unknown"), item("second", "Custom"), item("third", "Unknown")]
        assert [i.value for i in order_items(items)] == ["first", "second", "third"]

    def test_input_not_modified(self):
        items = [item("p", "PCA"), item("a", "ASY")]
        order_items(items)
        assert [i.value for i in items] == ["p", "a"]

    def test_sort_group_in_place(self):
        group = Group(items=[item("u", "Unknown"), item("d", "Deviation"), item("a", "ASY")])
        assert sort_group(group) is group
        assert group.values() == ["a", "d", "u"]
