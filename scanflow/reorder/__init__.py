"""
==============================================================================
Reorder Package
==============================================================================

Manual reordering of flattened items and plain-text export.

Classes:
--------
- ReorderScope, ReorderableEntry: Flattening inputs / outputs
- ReorderManager: Session-scoped reorder lists
- SingleValue, GroupValues, OrderedValues: Export content

==============================================================================
"""

from .export import (
    ExportContent,
    GroupValues,
    OrderedValues,
    SingleValue,
    render_export_text,
)
from .manager import (
    DEFAULT_ZONE,
    ReorderManager,
    ReorderScope,
    ReorderableEntry,
    build_reorderable,
    items_of,
    move,
)

__all__ = [
    "DEFAULT_ZONE",
    "ExportContent",
    "GroupValues",
    "OrderedValues",
    "ReorderManager",
    "ReorderScope",
    "ReorderableEntry",
    "SingleValue",
    "build_reorderable",
    "items_of",
    "move",
    "render_export_text",
]
