"""
==============================================================================
Schemas Package - Pydantic Models
==============================================================================

Request and response schemas using Pydantic for validation.

This package provides:
- Common: Shared response schemas and the store's ServiceResponse
- Scan: Classification, session, upload, reorder and submission schemas

==============================================================================
"""

from .common import MessageResponse, ServiceResponse, SuccessResponse
from .scan import (
    CameraBatchRequest,
    CategoryChoicesResponse,
    CategoryUpdate,
    ClassifyRequest,
    ClassifyResponse,
    ClassifyResult,
    CollectedValuesResponse,
    ExportResponse,
    GroupResponse,
    MoveRequest,
    ReorderEntryResponse,
    ReorderOpenRequest,
    ReorderResponse,
    ScanItemPayload,
    ScanItemResponse,
    ScannedBarcodeResponse,
    SessionSnapshotResponse,
    SubmitRequest,
    SymbolPayload,
    UploadResponse,
)

__all__ = [
    # Common
    "MessageResponse",
    "ServiceResponse",
    "SuccessResponse",
    # Scan
    "CameraBatchRequest",
    "CategoryChoicesResponse",
    "CategoryUpdate",
    "ClassifyRequest",
    "ClassifyResponse",
    "ClassifyResult",
    "CollectedValuesResponse",
    "ExportResponse",
    "GroupResponse",
    "MoveRequest",
    "ReorderEntryResponse",
    "ReorderOpenRequest",
    "ReorderResponse",
    "ScanItemPayload",
    "ScanItemResponse",
    "ScannedBarcodeResponse",
    "SessionSnapshotResponse",
    "SubmitRequest",
    "SymbolPayload",
    "UploadResponse",
]
