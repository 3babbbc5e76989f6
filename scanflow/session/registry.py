"""
==============================================================================
Session Registry Module
==============================================================================

Owned state of one scanning session.

The registry holds:
- The current (mutable) camera group
- The append-only sequence of finalized groups
- Open reorder sessions, keyed by reorder id
- The session-level seen-value collector
- The observer list for change notification

Threading Model:
---------------
All mutation happens on a single owner thread. The owner is the first
thread that mutates the registry (in the service this is the event loop
thread). Mutating from another thread raises RuntimeError; background
decode results must be marshaled back with ``marshal_to_owner`` or by
awaiting them on the loop. Readers on other threads use ``snapshot()``.

Event types live in scanflow.domain.events.

==============================================================================
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Any, Callable, Dict, List, Optional, Tuple

from scanflow.domain.events import SessionEvent
from scanflow.domain.models import Group
from scanflow.grouping.collector import SeenValueCollector


# Module logger
logger = logging.getLogger(__name__)


Observer = Callable[[SessionEvent], None]


class SessionRegistry:
    """
    Shared state for one scanning session.

    Mutation primitives are used by GroupingEngine and ReorderManager; this
    class does not implement any dedup or ordering policy itself.

    Attributes:
        session_id: Identifier of the session
        collector: Session-level seen-value collector

    Example:
        >>> registry = SessionRegistry("bench-1")
        >>> unsubscribe = registry.subscribe(print)
        >>> registry.current_group.is_empty
        True
    """

    def __init__(self, session_id: str = "default") -> None:
        self.session_id = session_id
        self.collector = SeenValueCollector()
        self._current = Group.new_camera_group()
        self._finalized: List[Group] = []
        self._reorder_sessions: Dict[uuid.UUID, List[Any]] = {}
        self._observers: List[Observer] = []
        self._owner_thread: Optional[int] = None

        logger.debug(f"Session registry created: {session_id}")

    # =========================================================================
    # OWNERSHIP
    # =========================================================================

    def require_owner(self) -> None:
        """
        Check that the caller runs on the owner thread.

        The first mutating thread becomes the owner.

        Raises:
            RuntimeError: If called from a thread other than the owner
        """
        ident = threading.get_ident()
        if self._owner_thread is None:
            self._owner_thread = ident
            return
        if ident != self._owner_thread:
            raise RuntimeError(
                f"Session '{self.session_id}' mutated outside its owner thread"
            )

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    @property
    def current_group(self) -> Group:
        return self._current

    @property
    def finalized_groups(self) -> Tuple[Group, ...]:
        """Finalized groups in completion order (read-only view)."""
        return tuple(self._finalized)

    @property
    def reorder_sessions(self) -> Dict[uuid.UUID, List[Any]]:
        """Session-scoped reorder map, keyed by reorder id."""
        return self._reorder_sessions

    def find_group(self, group_id: uuid.UUID) -> Optional[Group]:
        """Find a group by id among the current and finalized groups."""
        if self._current.id == group_id:
            return self._current
        for group in self._finalized:
            if group.id == group_id:
                return group
        return None

    def is_finalized(self, group_id: uuid.UUID) -> bool:
        return any(group.id == group_id for group in self._finalized)

    def snapshot(self) -> dict:
        """
        Immutable copy of the session state, safe to hand to any thread.

        Returns:
            Dictionary with deep-copied current and finalized groups
        """
        return {
            "session_id": self.session_id,
            "current_group": self._current.model_copy(deep=True),
            "finalized_groups": [g.model_copy(deep=True) for g in self._finalized],
            "open_reorders": [str(rid) for rid in self._reorder_sessions],
        }

    # =========================================================================
    # MUTATION PRIMITIVES
    # =========================================================================

    def install_current(self, group: Group) -> Group:
        """Replace the current group, returning the previous one."""
        self.require_owner()
        previous = self._current
        self._current = group
        return previous

    def append_finalized(self, group: Group) -> None:
        self.require_owner()
        self._finalized.append(group)

    def remove_finalized_at(self, index: int) -> Optional[Group]:
        """Remove a finalized group by position; out of range is ignored."""
        self.require_owner()
        if 0 <= index < len(self._finalized):
            return self._finalized.pop(index)
        return None

    # =========================================================================
    # OBSERVERS
    # =========================================================================

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """
        Register a change observer.

        Args:
            observer: Callable receiving SessionEvent

        Returns:
            Function that removes the observer
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def notify(self, event: SessionEvent) -> None:
        """Deliver an event to every observer in registration order."""
        for observer in list(self._observers):
            try:
                observer(event)
            except Exception as e:
                logger.error(f"Session observer failed on {event.kind}: {e}")

    def __repr__(self) -> str:
        return (
            f"SessionRegistry(session_id={self.session_id!r}, "
            f"current_items={len(self._current.items)}, "
            f"finalized={len(self._finalized)})"
        )

