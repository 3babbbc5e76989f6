"""
==============================================================================
Reorder Endpoints
==============================================================================

Manual reordering of a group's items, or of every finalized group of one
source kind, before export or submission.

==============================================================================
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends

from scanflow.core.dependencies import get_registry
from scanflow.reorder.export import OrderedValues, render_export_text
from scanflow.reorder.manager import ReorderableEntry, ReorderManager, ReorderScope
from scanflow.schemas.common import MessageResponse
from scanflow.schemas.scan import (
    ExportResponse,
    MoveRequest,
    ReorderEntryResponse,
    ReorderOpenRequest,
    ReorderResponse,
)
from scanflow.session.registry import SessionRegistry


router = APIRouter(prefix="/sessions", tags=["Reorder"])


class ReorderController:
    """Controller for reorder list operations."""

    def __init__(self, registry: SessionRegistry):
        self._manager = ReorderManager(registry)

    @staticmethod
    def to_response(reorder_id: uuid.UUID, entries: List[ReorderableEntry]) -> ReorderResponse:
        return ReorderResponse(
            reorder_id=reorder_id,
            entries=[
                ReorderEntryResponse(
                    display_key=e.display_key,
                    zone=e.zone,
                    item_id=e.back_ref.id,
                    category=e.back_ref.category,
                )
                for e in entries
            ],
        )

    def open(self, data: ReorderOpenRequest) -> ReorderResponse:
        if data.group_id is not None:
            scope = ReorderScope.for_group(data.group_id)
        else:
            scope = ReorderScope.for_source(data.source_kind)
        reorder_id, entries = self._manager.open(scope)
        return self.to_response(reorder_id, entries)

    def get(self, reorder_id: uuid.UUID) -> ReorderResponse:
        return self.to_response(reorder_id, self._manager.entries(reorder_id))

    def move(self, reorder_id: uuid.UUID, data: MoveRequest) -> ReorderResponse:
        entries = self._manager.move(reorder_id, data.from_index, data.to_index)
        return self.to_response(reorder_id, entries)

    def cancel(self, reorder_id: uuid.UUID) -> MessageResponse:
        self._manager.cancel(reorder_id)
        return MessageResponse(message="Reorder discarded")

    def export(self, reorder_id: uuid.UUID) -> ExportResponse:
        items = self._manager.read(reorder_id)
        return ExportResponse(text=render_export_text(OrderedValues(items)), count=len(items))


@router.post("/{session_id}/reorders", response_model=ReorderResponse)
async def open_reorder(data: ReorderOpenRequest, registry: SessionRegistry = Depends(get_registry)):
    """Flatten the scoped groups into a new reorder list."""
    return ReorderController(registry).open(data)


@router.get("/{session_id}/reorders/{reorder_id}", response_model=ReorderResponse)
async def get_reorder(reorder_id: uuid.UUID, registry: SessionRegistry = Depends(get_registry)):
    return ReorderController(registry).get(reorder_id)


@router.post("/{session_id}/reorders/{reorder_id}/move", response_model=ReorderResponse)
async def move_entry(
    reorder_id: uuid.UUID,
    data: MoveRequest,
    registry: SessionRegistry = Depends(get_registry),
):
    """Move one entry from ``from_index`` to ``to_index``."""
    return ReorderController(registry).move(reorder_id, data)


@router.delete("/{session_id}/reorders/{reorder_id}", response_model=MessageResponse)
async def cancel_reorder(reorder_id: uuid.UUID, registry: SessionRegistry = Depends(get_registry)):
    """Discard a reorder list. The groups keep their own order."""
    return ReorderController(registry).cancel(reorder_id)


@router.get("/{session_id}/reorders/{reorder_id}/export", response_model=ExportResponse)
async def export_reorder(reorder_id: uuid.UUID, registry: SessionRegistry = Depends(get_registry)):
    """Values in manual order, joined by newlines."""
    return ReorderController(registry).export(reorder_id)
