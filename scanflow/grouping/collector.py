"""
==============================================================================
Session-Level Value Collector
==============================================================================

Simple one-shot collector for live display: every distinct raw value is
kept once per scanning session.

- Values are compared case-insensitively
- The first occurrence wins; repeats are dropped without creating an item
- Blank values are ignored
- Results are kept newest first

This path is independent of the per-category replace policy used by the
current camera group.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import List, Optional, Set, Union

from scanflow.domain.models import BarcodeMode, DecodedSymbol, ScanItem
from scanflow.grouping.records import build_scan_item


# Module logger
logger = logging.getLogger(__name__)


class SeenValueCollector:
    """
    Collector with a case-insensitive seen-value set.

    Example:
        >>> collector = SeenValueCollector()
        >>> collector.add(DecodedSymbol(text="abc", format="QRCODE"), "Standard")
        >>> collector.add(DecodedSymbol(text="ABC", format="QRCODE"), "Standard") is None
        True
    """

    def __init__(self) -> None:
        self._seen: Set[str] = set()
        self._results: List[ScanItem] = []

    @property
    def results(self) -> List[ScanItem]:
        """Collected items, newest first."""
        return list(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def has_seen(self, value: str) -> bool:
        return value.casefold() in self._seen

    def add(
        self,
        symbol: DecodedSymbol,
        mode: Union[BarcodeMode, str],
    ) -> Optional[ScanItem]:
        """
        Add a symbol unless its value was already seen this session.

        Args:
            symbol: Decoded symbol
            mode: Classification mode

        Returns:
            The new ScanItem, or None if the value was blank or a repeat
        """
        if not symbol.text or not symbol.text.strip():
            return None

        key = symbol.text.casefold()
        if key in self._seen:
            return None

        self._seen.add(key)
        item = build_scan_item(symbol, mode)
        self._results.insert(0, item)
        logger.debug(f"Collected {item.category}: {item.value}")
        return item

    def clear(self) -> None:
        """Forget all results and seen values."""
        self._results.clear()
        self._seen.clear()
