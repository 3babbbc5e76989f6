"""
==============================================================================
Grouping & Dedup Engine Module
==============================================================================

Applies detection batches to session groups.

Policies:
---------
Camera (live capture)
    The current group holds at most one item per category. An incoming item
    replaces the item in the same category slot; otherwise it is appended.

Upload (single image)
    Every decoded symbol is kept as its own item; the group is built once
    and added to the finalized sequence.

Every mutation re-sorts the affected group, refreshes ``updated_at`` and
notifies the registry's observers. Only the current group is mutable.

==============================================================================
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Iterable, List, Optional

from scanflow.core.exceptions import (
    group_finalized,
    group_not_found,
    invalid_category,
    item_not_found,
)
from scanflow.domain.events import SessionEvent, SessionEventKind
from scanflow.domain.models import FileState, Group, ScanItem, SourceKind, utc_now
from scanflow.grouping.ordering import order_items, sort_group

if TYPE_CHECKING:
    from scanflow.session.registry import SessionRegistry


# Module logger
logger = logging.getLogger(__name__)


def build_upload_group(
    name: str,
    items: Iterable[ScanItem],
    error: Optional[str] = None,
) -> Group:
    """
    Build the group for one uploaded image.

    Args:
        name: Source file name
        items: Every item decoded from the image
        error: Failure message; marks the group as Error

    Returns:
        New Group with items in preferred order. Zero items and no error
        yields an empty group in state Done.
    """
    return Group(
        name=name,
        source_kind=SourceKind.UPLOAD,
        items=order_items(items),
        error=error,
        state=FileState.ERROR if error else FileState.DONE,
    )


class GroupingEngine:
    """
    Group mutation policies over a SessionRegistry.

    Example:
        >>> engine = GroupingEngine(registry)
        >>> engine.apply_camera_batch(build_scan_items(symbols, "Standard"))
        >>> finalized = engine.complete_current_group()
    """

    def __init__(self, registry: "SessionRegistry") -> None:
        self._registry = registry

    @property
    def registry(self) -> "SessionRegistry":
        return self._registry

    def _current_updated(self, group: Group) -> Group:
        sort_group(group)
        group.updated_at = utc_now()
        self._registry.notify(SessionEvent(SessionEventKind.CURRENT_UPDATED, group.id))
        return group

    # =========================================================================
    # CAMERA POLICY
    # =========================================================================

    def apply_camera_batch(self, items: List[ScanItem]) -> Group:
        """
        Merge one camera batch into the current group.

        Args:
            items: Items from one decoded frame

        Returns:
            The current group after the merge
        """
        self._registry.require_owner()
        group = self._registry.current_group
        if not items:
            return group

        for item in items:
            slot = group.index_of_category(item.category)
            if slot >= 0:
                logger.debug(
                    f"Replacing {item.category}: {group.items[slot].value} -> {item.value}"
                )
                group.items[slot] = item
            else:
                group.items.append(item)

        return self._current_updated(group)

    def complete_current_group(self) -> Optional[Group]:
        """
        Finalize the current group and start a fresh one.

        Returns:
            The finalized group, or None if the current group was empty
        """
        self._registry.require_owner()
        group = self._registry.current_group
        if group.is_empty:
            logger.debug("Current group is empty, nothing to complete")
            return None

        group.state = FileState.DONE
        group.updated_at = utc_now()
        self._registry.append_finalized(group)
        self._registry.install_current(Group.new_camera_group())

        logger.info(f"✅ Group completed: {group.name} ({len(group.items)} items)")
        self._registry.notify(SessionEvent(SessionEventKind.GROUP_FINALIZED, group.id))
        return group

    def discard_current_group(self) -> Group:
        """Drop the current group without finalizing it. Returns the new group."""
        self._registry.require_owner()
        previous = self._registry.install_current(Group.new_camera_group())
        logger.info(f"🗑️ Group discarded: {previous.name}")
        self._registry.notify(SessionEvent(SessionEventKind.CURRENT_DISCARDED, previous.id))
        return self._registry.current_group

    # =========================================================================
    # USER EDITS (current group only)
    # =========================================================================

    def _editable_group(self, group_id: Optional[uuid.UUID]) -> Group:
        current = self._registry.current_group
        if group_id is None or group_id == current.id:
            return current
        if self._registry.is_finalized(group_id):
            raise group_finalized(str(group_id))
        raise group_not_found(str(group_id))

    def remove_item(self, item_id: uuid.UUID, group_id: Optional[uuid.UUID] = None) -> Group:
        """
        Remove one item from the current group.

        Raises:
            AppException: GROUP_FINALIZED, GROUP_NOT_FOUND or ITEM_NOT_FOUND
        """
        self._registry.require_owner()
        group = self._editable_group(group_id)
        item = group.find_item(item_id)
        if item is None:
            raise item_not_found(str(item_id))

        group.items.remove(item)
        return self._current_updated(group)

    def correct_category(
        self,
        item_id: uuid.UUID,
        category: str,
        group_id: Optional[uuid.UUID] = None,
    ) -> Group:
        """
        Replace the category of an item in the current group.

        The corrected item keeps its slot even if another item already
        holds the same category; the next camera batch in that category
        replaces the first matching slot.

        Raises:
            AppException: INVALID_CATEGORY, GROUP_FINALIZED, GROUP_NOT_FOUND
                or ITEM_NOT_FOUND
        """
        if not category or not category.strip():
            raise invalid_category(category or "")

        self._registry.require_owner()
        group = self._editable_group(group_id)
        item = group.find_item(item_id)
        if item is None:
            raise item_not_found(str(item_id))

        item.category = category.strip()
        return self._current_updated(group)

    # =========================================================================
    # UPLOAD POLICY / FINALIZED GROUPS
    # =========================================================================

    def add_upload_group(self, group: Group) -> Group:
        """Append one upload group to the finalized sequence."""
        self._registry.require_owner()
        self._registry.append_finalized(group)
        self._registry.notify(SessionEvent(SessionEventKind.UPLOAD_GROUP_ADDED, group.id))
        return group

    def add_upload_groups(self, groups: Iterable[Group]) -> List[Group]:
        return [self.add_upload_group(group) for group in groups]

    def remove_finalized_group(self, index: int) -> Optional[Group]:
        """
        Remove a finalized group by position.

        Returns:
            The removed group, or None when the index is out of range
        """
        removed = self._registry.remove_finalized_at(index)
        if removed is not None:
            logger.info(f"🗑️ Finalized group removed: {removed.name}")
            self._registry.notify(SessionEvent(SessionEventKind.FINALIZED_REMOVED, removed.id))
        return removed
