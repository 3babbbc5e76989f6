"""
==============================================================================
Grouping Package
==============================================================================

Detection records, grouping policies and ordering.

Modules:
--------
- records: Record builder (symbols -> ScanItems)
- ordering: Preferred-category sort
- collector: Session-level case-insensitive value dedup
- engine: Camera / upload grouping policies over a SessionRegistry
- batch: Sequential upload image decoding

==============================================================================
"""

from .collector import SeenValueCollector
from .ordering import PREFERRED_CATEGORY_ORDER, category_rank, order_items, sort_group
from .records import build_scan_item, build_scan_items
from .engine import GroupingEngine, build_upload_group
from .batch import NO_IMAGE_DATA, ImageBatchProcessor, ImageUpload

__all__ = [
    "NO_IMAGE_DATA",
    "PREFERRED_CATEGORY_ORDER",
    "GroupingEngine",
    "ImageBatchProcessor",
    "ImageUpload",
    "SeenValueCollector",
    "build_scan_item",
    "build_scan_items",
    "build_upload_group",
    "category_rank",
    "order_items",
    "sort_group",
]
