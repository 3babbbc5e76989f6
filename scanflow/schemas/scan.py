"""
==============================================================================
Scan Schemas Module
==============================================================================

Request and response schemas for classification, session groups,
uploads, reorder lists, export and submission.

==============================================================================
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from scanflow.domain.models import (
    BarcodeMode,
    DecodedSymbol,
    FileState,
    ScanItem,
    SourceKind,
    UNKNOWN_CATEGORY,
    utc_now,
)


# =============================================================================
# CLASSIFICATION
# =============================================================================

class ClassifyRequest(BaseModel):
    """Values to classify with one mode."""
    values: List[str] = Field(..., min_length=1)
    mode: Optional[BarcodeMode] = Field(default=None)


class ClassifyResult(BaseModel):
    value: str
    category: str


class ClassifyResponse(BaseModel):
    success: bool = Field(default=True)
    mode: BarcodeMode
    results: List[ClassifyResult]


class CategoryChoicesResponse(BaseModel):
    success: bool = Field(default=True)
    categories: List[str]
    preferred_order: List[str]


# =============================================================================
# SESSION GROUPS
# =============================================================================

class SymbolPayload(BaseModel):
    """One decoded symbol sent by a client-side decoder."""
    text: str
    format: str = Field(default="")

    def to_symbol(self) -> DecodedSymbol:
        return DecodedSymbol(text=self.text, format=self.format)


class CameraBatchRequest(BaseModel):
    """Symbols decoded from one camera frame."""
    symbols: List[SymbolPayload] = Field(default_factory=list)
    mode: Optional[BarcodeMode] = Field(default=None)


class CategoryUpdate(BaseModel):
    """Manual category correction."""
    category: str = Field(..., min_length=1, max_length=50)

    @field_validator("category")
    @classmethod
    def strip_category(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Category cannot be blank")
        return v


class ScanItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    value: str
    category: str
    format: str
    scanned_at: datetime


class GroupResponse(BaseModel):
    """Group with its items in display order."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    source_kind: SourceKind
    state: FileState
    created_at: datetime
    updated_at: datetime
    error: Optional[str] = None
    items: List[ScanItemResponse] = Field(default_factory=list)


class SessionSnapshotResponse(BaseModel):
    success: bool = Field(default=True)
    session_id: str
    current_group: GroupResponse
    finalized_groups: List[GroupResponse]
    open_reorders: List[str] = Field(default_factory=list)


class CollectedValuesResponse(BaseModel):
    """Session-level distinct values, newest first."""
    success: bool = Field(default=True)
    added: int = Field(default=0, ge=0)
    items: List[ScanItemResponse]


class UploadResponse(BaseModel):
    success: bool = Field(default=True)
    groups: List[GroupResponse]
    progress: List[int] = Field(default_factory=list)


# =============================================================================
# REORDER / EXPORT
# =============================================================================

class ReorderOpenRequest(BaseModel):
    """Scope of a new reorder list: one group, or every group of a source."""
    group_id: Optional[uuid.UUID] = Field(default=None)
    source_kind: Optional[SourceKind] = Field(default=None)

    @model_validator(mode="after")
    def validate_scope(self):
        if (self.group_id is None) == (self.source_kind is None):
            raise ValueError("Provide exactly one of group_id or source_kind")
        return self


class MoveRequest(BaseModel):
    from_index: int
    to_index: int


class ReorderEntryResponse(BaseModel):
    display_key: str
    zone: str
    item_id: uuid.UUID
    category: str


class ReorderResponse(BaseModel):
    success: bool = Field(default=True)
    reorder_id: uuid.UUID
    entries: List[ReorderEntryResponse]


class ExportResponse(BaseModel):
    success: bool = Field(default=True)
    text: str
    count: int = Field(ge=0)


# =============================================================================
# SUBMISSION
# =============================================================================

class ScanItemPayload(BaseModel):
    """Wire shape of one barcode sent to the store."""
    model_config = ConfigDict(populate_by_name=True)

    value: str
    format: str = Field(default="")
    category: str = Field(default=UNKNOWN_CATEGORY)
    scanned_at: datetime = Field(default_factory=utc_now, alias="scannedAt")

    @classmethod
    def from_item(cls, item: ScanItem) -> "ScanItemPayload":
        return cls(
            value=item.value,
            format=item.format,
            category=item.category,
            scanned_at=item.scanned_at,
        )


class SubmitRequest(BaseModel):
    """
    What to submit from a session.

    A reorder id submits that list in manual order; a group id submits one
    group; neither submits every finalized group in order.
    """
    reorder_id: Optional[uuid.UUID] = Field(default=None)
    group_id: Optional[uuid.UUID] = Field(default=None)


class ScannedBarcodeResponse(BaseModel):
    """Stored barcode row."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    value: str
    format: str
    category: str
    scanned_time: datetime = Field(alias="scannedTime")
