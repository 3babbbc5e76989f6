"""
==============================================================================
Detection Record Builder Module
==============================================================================

Wraps decoded symbols into classified ScanItems.

One ScanItem per symbol, no filtering or merging. Every item of a batch
shares the batch capture time and gets a fresh identifier.

==============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Union

from scanflow.classifier import classify
from scanflow.domain.models import BarcodeMode, DecodedSymbol, ScanItem, utc_now


def build_scan_item(
    symbol: DecodedSymbol,
    mode: Union[BarcodeMode, str],
    scanned_at: Optional[datetime] = None,
) -> ScanItem:
    """Build a single ScanItem from one decoded symbol."""
    return ScanItem(
        value=symbol.text,
        format=symbol.format,
        category=classify(symbol.text, mode),
        scanned_at=scanned_at or utc_now(),
    )


def build_scan_items(
    symbols: Iterable[DecodedSymbol],
    mode: Union[BarcodeMode, str],
    scanned_at: Optional[datetime] = None,
) -> List[ScanItem]:
    """
    Build ScanItems for one decode batch.

    Args:
        symbols: Decoded symbols from one image or camera frame
        mode: Classification mode for the whole batch
        scanned_at: Batch capture time (defaults to now)

    Returns:
        One ScanItem per symbol, in input order
    """
    captured = scanned_at or utc_now()
    return [build_scan_item(symbol, mode, captured) for symbol in symbols]
