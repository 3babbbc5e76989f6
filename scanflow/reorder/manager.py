"""
==============================================================================
Reorder Manager Module
==============================================================================

Flattens items from one or more groups into an entry list the user can
rearrange by hand.

Scopes:
-------
- ReorderScope.for_group(id): items of one group (current or finalized)
- ReorderScope.for_source(kind): items of every finalized group of that
  source kind, skipping empty groups

Entries reference their original ScanItem; moving entries never touches
the underlying groups. Open reorder lists are held per session by the
registry, keyed by reorder id.

==============================================================================
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from scanflow.core.exceptions import group_not_found, invalid_move, reorder_not_found
from scanflow.domain.events import SessionEvent, SessionEventKind
from scanflow.domain.models import Group, ScanItem, SourceKind

if TYPE_CHECKING:
    from scanflow.session.registry import SessionRegistry


# Module logger
logger = logging.getLogger(__name__)


DEFAULT_ZONE = "1"


@dataclass(frozen=True)
class ReorderScope:
    """Selection of groups to flatten: one group id, or one source kind."""

    group_id: Optional[uuid.UUID] = None
    source_kind: Optional[SourceKind] = None

    def __post_init__(self) -> None:
        if (self.group_id is None) == (self.source_kind is None):
            raise ValueError("ReorderScope needs exactly one of group_id or source_kind")

    @classmethod
    def for_group(cls, group_id: uuid.UUID) -> "ReorderScope":
        return cls(group_id=group_id)

    @classmethod
    def for_source(cls, source_kind: SourceKind) -> "ReorderScope":
        return cls(source_kind=SourceKind(source_kind))

    def select(self, groups: Iterable[Group]) -> List[Group]:
        """Groups covered by this scope, in their given order."""
        if self.group_id is not None:
            return [group for group in groups if group.id == self.group_id]
        return [
            group for group in groups
            if group.source_kind == self.source_kind and not group.is_empty
        ]


@dataclass
class ReorderableEntry:
    """
    One row of a reorder list.

    Attributes:
        display_key: Text shown to the user (the item's value)
        zone: Drop zone label
        back_ref: The ScanItem this entry stands for
    """

    display_key: str
    back_ref: ScanItem
    zone: str = DEFAULT_ZONE


def build_reorderable(groups: Iterable[Group], scope: ReorderScope) -> List[ReorderableEntry]:
    """
    Flatten the scoped groups into reorder entries.

    Args:
        groups: Candidate groups in display order
        scope: Which groups to include

    Returns:
        One entry per item, groups in order, items in their current order
    """
    return [
        ReorderableEntry(display_key=item.value, back_ref=item)
        for group in scope.select(groups)
        for item in group.items
    ]


def move(entries: List[ReorderableEntry], from_index: int, to_index: int) -> List[ReorderableEntry]:
    """
    Move one entry to a new position, in place.

    Args:
        entries: Reorder list
        from_index: Current position of the entry
        to_index: Position the entry ends up at

    Returns:
        The same list

    Raises:
        IndexError: If either index is outside the list
    """
    size = len(entries)
    if not (0 <= from_index < size and 0 <= to_index < size):
        raise IndexError(f"move({from_index}, {to_index}) outside list of {size}")

    if from_index != to_index:
        entry = entries.pop(from_index)
        entries.insert(to_index, entry)
    return entries


def items_of(entries: Iterable[ReorderableEntry]) -> List[ScanItem]:
    """Back-referenced items in entry order."""
    return [entry.back_ref for entry in entries]


class ReorderManager:
    """
    Session-scoped reorder lists.

    Example:
        >>> manager = ReorderManager(registry)
        >>> reorder_id, entries = manager.open(ReorderScope.for_source(SourceKind.UPLOAD))
        >>> manager.move(reorder_id, 0, 2)
        >>> items = manager.read(reorder_id)
    """

    def __init__(self, registry: "SessionRegistry") -> None:
        self._registry = registry

    def _lookup(self, reorder_id: uuid.UUID) -> List[ReorderableEntry]:
        entries = self._registry.reorder_sessions.get(reorder_id)
        if entries is None:
            raise reorder_not_found(str(reorder_id))
        return entries

    def _candidate_groups(self, scope: ReorderScope) -> Tuple[Group, ...]:
        finalized = self._registry.finalized_groups
        if scope.group_id is None:
            return finalized
        return (self._registry.current_group,) + finalized

    def open(self, scope: ReorderScope) -> Tuple[uuid.UUID, List[ReorderableEntry]]:
        """
        Create a reorder list for a scope.

        Returns:
            Tuple of (reorder_id, entries)

        Raises:
            AppException: GROUP_NOT_FOUND for an unknown group scope
        """
        self._registry.require_owner()
        if scope.group_id is not None and self._registry.find_group(scope.group_id) is None:
            raise group_not_found(str(scope.group_id))

        entries = build_reorderable(self._candidate_groups(scope), scope)
        reorder_id = uuid.uuid4()
        self._registry.reorder_sessions[reorder_id] = entries

        logger.debug(f"Reorder opened: {reorder_id} ({len(entries)} entries)")
        self._registry.notify(
            SessionEvent(SessionEventKind.REORDER_OPENED, scope.group_id, reorder_id)
        )
        return reorder_id, list(entries)

    def entries(self, reorder_id: uuid.UUID) -> List[ReorderableEntry]:
        return list(self._lookup(reorder_id))

    def move(self, reorder_id: uuid.UUID, from_index: int, to_index: int) -> List[ReorderableEntry]:
        """
        Move an entry within an open reorder list.

        Raises:
            AppException: REORDER_NOT_FOUND or INVALID_MOVE
        """
        self._registry.require_owner()
        entries = self._lookup(reorder_id)
        try:
            move(entries, from_index, to_index)
        except IndexError:
            raise invalid_move(from_index, to_index, len(entries))
        return list(entries)

    def read(self, reorder_id: uuid.UUID) -> List[ScanItem]:
        """Items of an open reorder list in manual order."""
        return items_of(self._lookup(reorder_id))

    def cancel(self, reorder_id: uuid.UUID) -> None:
        """Discard a reorder list; the underlying groups are untouched."""
        self._registry.require_owner()
        self._lookup(reorder_id)
        del self._registry.reorder_sessions[reorder_id]

        logger.debug(f"Reorder closed: {reorder_id}")
        self._registry.notify(
            SessionEvent(SessionEventKind.REORDER_CLOSED, reorder_id=reorder_id)
        )
