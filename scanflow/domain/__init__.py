"""
==============================================================================
Domain Package
==============================================================================

Pydantic models and enums shared across the pipeline.

Classes:
--------
- BarcodeMode, SourceKind, FileState: Enumerations
- DecodedSymbol: Raw decode output
- ScanItem: Classified detection
- Group: Ordered item collection
- SessionEvent, SessionEventKind: Registry change notifications

==============================================================================
"""

from .events import SessionEvent, SessionEventKind
from .models import (
    UNKNOWN_CATEGORY,
    BarcodeMode,
    DecodedSymbol,
    FileState,
    Group,
    ScanItem,
    SourceKind,
    utc_now,
)

__all__ = [
    "UNKNOWN_CATEGORY",
    "BarcodeMode",
    "DecodedSymbol",
    "FileState",
    "Group",
    "ScanItem",
    "SessionEvent",
    "SessionEventKind",
    "SourceKind",
    "utc_now",
]
