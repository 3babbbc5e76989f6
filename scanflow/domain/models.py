"""
==============================================================================
Domain Models Module
==============================================================================

Pydantic models shared by every stage of the post-decode pipeline.

This module defines:
- BarcodeMode: Rule table selector (Standard / Unique)
- SourceKind: Where a group's items came from (Camera / Upload)
- FileState: Processing state of an uploaded image's group
- DecodedSymbol: Raw text + symbology pair from the decode collaborator
- ScanItem: One classified detection
- Group: Ordered collection of ScanItems (unit of finalization)

Mutability:
-----------
DecodedSymbol is frozen. On ScanItem every field except ``category`` is
frozen; ``category`` may be replaced by a manual correction. Group items are
only mutated through the grouping engine, which re-sorts after every change.

==============================================================================
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


UNKNOWN_CATEGORY = "Unknown"


def utc_now() -> datetime:
    """Timezone-aware current time used for every pipeline timestamp."""
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS
# =============================================================================

class BarcodeMode(str, enum.Enum):
    """
    Classification mode selecting which rule table is used.

    The mode is always chosen explicitly by the caller; it is never
    inferred from the scanned values.
    """

    STANDARD = "Standard"
    UNIQUE = "Unique"

    def __str__(self) -> str:
        return self.value


class SourceKind(str, enum.Enum):
    """Origin of a group: live camera capture or uploaded image."""

    CAMERA = "Camera"
    UPLOAD = "Upload"

    def __str__(self) -> str:
        return self.value


class FileState(str, enum.Enum):
    """
    Processing state of a group.

    - READY: Image accepted, not decoded yet
    - DETECTING: Decode in progress (or live capture still running)
    - DONE: Decode finished, zero or more items produced
    - ERROR: Nothing could be produced from the input
    """

    READY = "Ready"
    DETECTING = "Detecting"
    DONE = "Done"
    ERROR = "Error"

    def __str__(self) -> str:
        return self.value


# =============================================================================
# MODELS
# =============================================================================

class DecodedSymbol(BaseModel):
    """Raw output of one decoded barcode: text plus symbology name."""

    model_config = ConfigDict(frozen=True)

    text: str
    format: str


class ScanItem(BaseModel):
    """
    A single classified detection.

    Attributes:
        id: Fresh identifier assigned by the record builder
        value: Decoded text, stored verbatim
        category: Classifier label (replaceable by manual correction)
        format: Symbology reported by the decoder, stored verbatim
        scanned_at: Capture time of the batch this item came from
    """

    model_config = ConfigDict(validate_assignment=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, frozen=True)
    value: str = Field(..., frozen=True)
    category: str = Field(..., min_length=1)
    format: str = Field(..., frozen=True)
    scanned_at: datetime = Field(default_factory=utc_now, frozen=True)


class Group(BaseModel):
    """
    Ordered collection of scan items.

    A camera group is filled incrementally during live capture; an upload
    group holds everything decoded from one image.

    Attributes:
        id: Group identifier
        name: Display name (file name or "Machine xxxxxxxx")
        source_kind: Camera or Upload
        created_at: Creation time
        updated_at: Time of the last mutation
        items: Items in Ordering Engine order
        error: Message when processing failed
        state: Processing state
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str = ""
    source_kind: SourceKind = SourceKind.CAMERA
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    items: List[ScanItem] = Field(default_factory=list)
    error: Optional[str] = None
    state: FileState = FileState.READY

    @classmethod
    def new_camera_group(cls) -> "Group":
        """Create an empty live-capture group named after its id."""
        group = cls(source_kind=SourceKind.CAMERA, state=FileState.DETECTING)
        group.name = f"Machine {str(group.id)[:8]}"
        return group

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find_item(self, item_id: uuid.UUID) -> Optional[ScanItem]:
        """Look up an item by id."""
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def index_of_category(self, category: str) -> int:
        """Slot index of the item holding ``category``, or -1."""
        for index, item in enumerate(self.items):
            if item.category == category:
                return index
        return -1

    def values(self) -> List[str]:
        return [item.value for item in self.items]
