"""
==============================================================================
Session Endpoints
==============================================================================

Scanning session state: the current camera group, finalized groups,
session-level collected values, export and submission.

Endpoints:
----------
    GET    /sessions/{id}                             snapshot
    DELETE /sessions/{id}                             forget session
    POST   /sessions/{id}/camera-batch                apply decoded frame
    POST   /sessions/{id}/current/complete            finalize current group
    POST   /sessions/{id}/current/discard             reset current group
    DELETE /sessions/{id}/current/items/{item}        remove item
    PATCH  /sessions/{id}/current/items/{item}        correct category
    DELETE /sessions/{id}/finalized/{index}           remove finalized group
    GET    /sessions/{id}/collected                   distinct values
    POST   /sessions/{id}/collected                   add values
    DELETE /sessions/{id}/collected                   clear values
    GET    /sessions/{id}/groups/{group}/export       group values as text
    GET    /sessions/{id}/groups/{group}/items/{item}/export
    POST   /sessions/{id}/submit                      submit to the store

==============================================================================
"""

import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends

from scanflow.config import Settings, get_settings
from scanflow.core import exceptions
from scanflow.core.dependencies import (
    get_registry,
    get_session_store,
    get_submitter,
    resolve_mode,
)
from scanflow.domain.models import Group, ScanItem
from scanflow.grouping.engine import GroupingEngine
from scanflow.grouping.records import build_scan_items
from scanflow.reorder.export import GroupValues, SingleValue, render_export_text
from scanflow.reorder.manager import ReorderManager
from scanflow.schemas.common import MessageResponse, ServiceResponse
from scanflow.schemas.scan import (
    CameraBatchRequest,
    CategoryUpdate,
    CollectedValuesResponse,
    ExportResponse,
    GroupResponse,
    ScanItemResponse,
    SessionSnapshotResponse,
    SubmitRequest,
)
from scanflow.services.scanned_barcode_service import NO_ITEMS_MESSAGE
from scanflow.services.submission_client import Submitter
from scanflow.session.registry import SessionRegistry
from scanflow.session.store import SessionStore


# Module logger
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["Sessions"])


def group_response(group: Group) -> GroupResponse:
    return GroupResponse.model_validate(group, from_attributes=True)


class SessionController:
    """Controller for session group operations."""

    def __init__(self, registry: SessionRegistry):
        self._registry = registry
        self._engine = GroupingEngine(registry)

    def snapshot(self) -> SessionSnapshotResponse:
        state = self._registry.snapshot()
        return SessionSnapshotResponse(
            session_id=state["session_id"],
            current_group=group_response(state["current_group"]),
            finalized_groups=[group_response(g) for g in state["finalized_groups"]],
            open_reorders=state["open_reorders"],
        )

    def apply_camera_batch(self, data: CameraBatchRequest, settings: Settings) -> GroupResponse:
        mode = resolve_mode(data.mode, settings)
        items = build_scan_items([s.to_symbol() for s in data.symbols if s.text.strip()], mode)
        return group_response(self._engine.apply_camera_batch(items))

    def complete(self) -> dict:
        group = self._engine.complete_current_group()
        return {
            "success": True,
            "completed": group_response(group) if group else None,
            "current_group": group_response(self._registry.current_group),
        }

    def discard(self) -> GroupResponse:
        return group_response(self._engine.discard_current_group())

    def remove_item(self, item_id: uuid.UUID) -> GroupResponse:
        return group_response(self._engine.remove_item(item_id))

    def correct_category(self, item_id: uuid.UUID, category: str) -> GroupResponse:
        return group_response(self._engine.correct_category(item_id, category))

    def remove_finalized(self, index: int) -> MessageResponse:
        removed = self._engine.remove_finalized_group(index)
        if removed is None:
            return MessageResponse(success=False, message=f"No finalized group at index {index}")
        return MessageResponse(message=f"Group '{removed.name}' removed")

    def find_group(self, group_id: uuid.UUID) -> Group:
        group = self._registry.find_group(group_id)
        if group is None:
            raise exceptions.group_not_found(str(group_id))
        return group

    def export_group(self, group_id: uuid.UUID) -> ExportResponse:
        group = self.find_group(group_id)
        return ExportResponse(text=render_export_text(GroupValues(group)), count=len(group.items))

    def export_item(self, group_id: uuid.UUID, item_id: uuid.UUID) -> ExportResponse:
        item = self.find_group(group_id).find_item(item_id)
        if item is None:
            raise exceptions.item_not_found(str(item_id))
        return ExportResponse(text=render_export_text(SingleValue(item.value)), count=1)

    def submission_items(self, data: SubmitRequest) -> List[ScanItem]:
        """Items to submit, in submission order."""
        if data.reorder_id is not None:
            return ReorderManager(self._registry).read(data.reorder_id)
        if data.group_id is not None:
            return list(self.find_group(data.group_id).items)
        return [item for group in self._registry.finalized_groups for item in group.items]


@router.get("/{session_id}", response_model=SessionSnapshotResponse)
async def get_session(registry: SessionRegistry = Depends(get_registry)):
    """Current and finalized groups of a session."""
    return SessionController(registry).snapshot()


@router.delete("/{session_id}", response_model=MessageResponse)
async def drop_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Forget a session and everything in it."""
    if not store.drop(session_id):
        return MessageResponse(success=False, message=f"Session '{session_id}' not found")
    return MessageResponse(message=f"Session '{session_id}' closed")


@router.post("/{session_id}/camera-batch", response_model=GroupResponse)
async def apply_camera_batch(
    data: CameraBatchRequest,
    registry: SessionRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
):
    """Merge one decoded camera frame into the current group."""
    return SessionController(registry).apply_camera_batch(data, settings)


@router.post("/{session_id}/current/complete")
async def complete_current_group(registry: SessionRegistry = Depends(get_registry)):
    """Finalize the current group. An empty group is left as is."""
    return SessionController(registry).complete()


@router.post("/{session_id}/current/discard", response_model=GroupResponse)
async def discard_current_group(registry: SessionRegistry = Depends(get_registry)):
    """Reset the current group without finalizing it."""
    return SessionController(registry).discard()


@router.delete("/{session_id}/current/items/{item_id}", response_model=GroupResponse)
async def remove_item(item_id: uuid.UUID, registry: SessionRegistry = Depends(get_registry)):
    return SessionController(registry).remove_item(item_id)


@router.patch("/{session_id}/current/items/{item_id}", response_model=GroupResponse)
async def correct_category(
    item_id: uuid.UUID,
    data: CategoryUpdate,
    registry: SessionRegistry = Depends(get_registry),
):
    """Replace an item's category; the group is re-sorted."""
    return SessionController(registry).correct_category(item_id, data.category)


@router.delete("/{session_id}/finalized/{index}", response_model=MessageResponse)
async def remove_finalized_group(index: int, registry: SessionRegistry = Depends(get_registry)):
    return SessionController(registry).remove_finalized(index)


@router.get("/{session_id}/collected", response_model=CollectedValuesResponse)
async def list_collected(registry: SessionRegistry = Depends(get_registry)):
    """Distinct values seen in this session, newest first."""
    items = [ScanItemResponse.model_validate(i, from_attributes=True) for i in registry.collector.results]
    return CollectedValuesResponse(items=items)


@router.post("/{session_id}/collected", response_model=CollectedValuesResponse)
async def add_collected(
    data: CameraBatchRequest,
    registry: SessionRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
):
    """Add decoded values; repeats (case-insensitive) are ignored."""
    mode = resolve_mode(data.mode, settings)
    registry.require_owner()
    added = sum(
        1 for s in data.symbols
        if registry.collector.add(s.to_symbol(), mode) is not None
    )
    items = [ScanItemResponse.model_validate(i, from_attributes=True) for i in registry.collector.results]
    return CollectedValuesResponse(added=added, items=items)


@router.delete("/{session_id}/collected", response_model=MessageResponse)
async def clear_collected(registry: SessionRegistry = Depends(get_registry)):
    registry.require_owner()
    registry.collector.clear()
    return MessageResponse(message="Collected values cleared")


@router.get("/{session_id}/groups/{group_id}/export", response_model=ExportResponse)
async def export_group(group_id: uuid.UUID, registry: SessionRegistry = Depends(get_registry)):
    """Group values joined by newlines."""
    return SessionController(registry).export_group(group_id)


@router.get(
    "/{session_id}/groups/{group_id}/items/{item_id}/export",
    response_model=ExportResponse,
)
async def export_item(
    group_id: uuid.UUID,
    item_id: uuid.UUID,
    registry: SessionRegistry = Depends(get_registry),
):
    return SessionController(registry).export_item(group_id, item_id)


@router.post("/{session_id}/submit", response_model=ServiceResponse[int])
async def submit(
    data: SubmitRequest,
    registry: SessionRegistry = Depends(get_registry),
    submitter: Submitter = Depends(get_submitter),
):
    """
    Submit items to the barcode store.

    Submits a reorder list in manual order, one group, or (by default)
    every finalized group.
    """
    items = SessionController(registry).submission_items(data)
    if not items:
        return ServiceResponse.fail(NO_ITEMS_MESSAGE, "NO_ITEMS")

    logger.info(f"📤 Session {registry.session_id}: submitting {len(items)} item(s)")
    return await submitter.submit(items)
