"""
==============================================================================
Session Package
==============================================================================

Owned session state and change notification.

Classes:
--------
- SessionRegistry: Current/finalized groups, reorder sessions, observers
- SessionEvent, SessionEventKind: Change notifications
- SessionEventQueue: Bounded async event buffer
- SessionStore: Session id -> registry map held on app.state

==============================================================================
"""

from scanflow.domain.events import SessionEvent, SessionEventKind

from .events import SessionEventQueue, marshal_to_owner
from .registry import SessionRegistry
from .store import SessionStore

__all__ = [
    "SessionEvent",
    "SessionEventKind",
    "SessionEventQueue",
    "SessionRegistry",
    "SessionStore",
    "marshal_to_owner",
]
