"""
==============================================================================
SQLAlchemy ORM Models Module
==============================================================================

Persistent store of submitted barcodes.

Database Schema:
---------------

    ┌─────────────────────────────────────────────────────────────────┐
    │                       scanned_barcodes                           │
    ├─────────────────────────────────────────────────────────────────┤
    │ id (INTEGER, PK, AUTO INCREMENT)                                │
    │ value (VARCHAR, UNIQUE, NOT NULL)                               │
    │ format (VARCHAR, NOT NULL)                                      │
    │ category (VARCHAR, NOT NULL)                                    │
    │ scanned_time (DATETIME, NOT NULL)                               │
    │ created_at (DATETIME, DEFAULT now)                              │
    └─────────────────────────────────────────────────────────────────┘

``value`` is unique (case-sensitive); duplicate submissions are skipped by
the service layer before insert.

=============================================================================
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, func

from scanflow.db.database import Base


class ScannedBarcode(Base):
    """
    One stored barcode value.

    Attributes:
        id: Auto-increment identifier
        value: Trimmed barcode text (unique)
        format: Symbology name reported by the decoder
        category: Classifier label at submission time
        scanned_time: Capture time reported by the client
        created_at: Insert time
    """

    __tablename__ = "scanned_barcodes"

    id: int = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        doc="Auto-increment identifier"
    )

    value: str = Column(
        String(512),
        unique=True,
        nullable=False,
        index=True,
        doc="Barcode text, trimmed"
    )

    format: str = Column(String(50), nullable=False, default="")

    category: str = Column(String(50), nullable=False, default="Unknown")

    scanned_time: datetime = Column(DateTime(timezone=True), nullable=False)

    created_at: datetime = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def to_dict(self) -> dict:
        """Convert to the wire shape used by the store API."""
        return {
            "id": self.id,
            "value": self.value,
            "format": self.format,
            "category": self.category,
            "scannedTime": self.scanned_time.isoformat() if self.scanned_time else None,
        }

    def __repr__(self) -> str:
        return f"<ScannedBarcode(id={self.id}, value={self.value!r}, category={self.category!r})>"
