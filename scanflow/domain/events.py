"""
==============================================================================
Session Event Types
==============================================================================

Change notifications emitted by a session registry.

Events:
-------
    current_updated      camera batch applied / item removed / category fixed
    group_finalized      current group moved to finalized
    current_discarded    current group reset without finalizing
    upload_group_added   upload group appended to finalized
    finalized_removed    finalized group removed by the user
    reorder_opened       reorder session created
    reorder_closed       reorder session cancelled or closed

==============================================================================
"""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from typing import Optional


class SessionEventKind(str, enum.Enum):
    """Kinds of change notifications emitted by the registry."""

    CURRENT_UPDATED = "current_updated"
    GROUP_FINALIZED = "group_finalized"
    CURRENT_DISCARDED = "current_discarded"
    UPLOAD_GROUP_ADDED = "upload_group_added"
    FINALIZED_REMOVED = "finalized_removed"
    REORDER_OPENED = "reorder_opened"
    REORDER_CLOSED = "reorder_closed"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SessionEvent:
    """Change notification delivered to observers."""

    kind: SessionEventKind
    group_id: Optional[uuid.UUID] = None
    reorder_id: Optional[uuid.UUID] = None

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "group_id": str(self.group_id) if self.group_id else None,
            "reorder_id": str(self.reorder_id) if self.reorder_id else None,
        }
