"""
==============================================================================
Scanned Barcode Service Module
==============================================================================

Store operations for submitted barcodes.

Add Semantics:
--------------
1. Trim every value; blank values are dropped
2. De-duplicate within the batch by exact value (first occurrence wins)
3. Skip values that are already stored (case-sensitive)
4. Insert the rest in one transaction

Resubmitting the same batch is therefore idempotent: the second call
saves nothing and still reports success.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from scanflow.db.models import ScannedBarcode
from scanflow.domain.models import UNKNOWN_CATEGORY
from scanflow.schemas.common import ServiceResponse
from scanflow.schemas.scan import ScanItemPayload


# Module logger
logger = logging.getLogger(__name__)


NO_ITEMS_MESSAGE = "No barcode items provided."
NOTHING_NEW_MESSAGE = (
    "No new barcodes to save. All provided values already exist or are duplicates."
)
CONCURRENT_INSERT_MESSAGE = (
    "Some barcodes were already inserted (possibly by another process). Please retry."
)
INVALID_ID_MESSAGE = "Invalid barcode ID."


class ScannedBarcodeService:
    """
    Service for the scanned barcode store.

    Attributes:
        _db: Database session

    Example:
        >>> service = ScannedBarcodeService(db_session)
        >>> result = service.add_scanned_barcodes(payloads)
        >>> result.data
        3
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    # =========================================================================
    # ADD
    # =========================================================================

    def add_scanned_barcodes(self, items: Sequence[ScanItemPayload]) -> ServiceResponse[int]:
        """
        Store every new value of a submission batch.

        Args:
            items: Submitted barcodes

        Returns:
            ServiceResponse with the number of rows inserted
        """
        if not items:
            return ServiceResponse.fail(NO_ITEMS_MESSAGE, "NO_ITEMS")

        unique: Dict[str, ScanItemPayload] = {}
        for item in items:
            value = (item.value or "").strip()
            if value and value not in unique:
                unique[value] = item

        existing = set()
        if unique:
            rows = self._db.query(ScannedBarcode.value).filter(
                ScannedBarcode.value.in_(list(unique))
            ).all()
            existing = {row[0] for row in rows}

        new_rows: List[ScannedBarcode] = [
            ScannedBarcode(
                value=value,
                format=item.format or "",
                category=item.category or UNKNOWN_CATEGORY,
                scanned_time=item.scanned_at,
            )
            for value, item in unique.items()
            if value not in existing
        ]

        if not new_rows:
            logger.info(f"Nothing new in batch of {len(items)}")
            return ServiceResponse.ok(0, NOTHING_NEW_MESSAGE)

        try:
            self._db.add_all(new_rows)
            self._db.commit()
        except IntegrityError as e:
            self._db.rollback()
            logger.warning(f"Concurrent insert detected: {e.orig}")
            return ServiceResponse.fail(CONCURRENT_INSERT_MESSAGE, "DUPLICATE_VALUE")

        skipped = len(items) - len(new_rows)
        logger.info(f"💾 Saved {len(new_rows)} barcode(s), skipped {skipped}")
        return ServiceResponse.ok(
            len(new_rows),
            f"{len(new_rows)} new barcode(s) saved. "
            f"{skipped} duplicate/existing value(s) skipped.",
        )

    # =========================================================================
    # LIST / DELETE
    # =========================================================================

    def list_scanned_barcodes(self) -> List[ScannedBarcode]:
        """All stored barcodes, newest first."""
        return self._db.query(ScannedBarcode).order_by(ScannedBarcode.id.desc()).all()

    def delete_scanned_barcode(self, barcode_id: int) -> ServiceResponse[int]:
        """
        Delete one stored barcode.

        Returns:
            ServiceResponse with 1 when deleted, 0 when the id did not exist
        """
        if barcode_id <= 0:
            return ServiceResponse.fail(INVALID_ID_MESSAGE, "INVALID_ID")

        row = self._db.get(ScannedBarcode, barcode_id)
        if row is None:
            return ServiceResponse.ok(
                0, f"Barcode (Id={barcode_id}) not found. Nothing to delete."
            )

        value = row.value
        self._db.delete(row)
        self._db.commit()

        logger.info(f"🗑️ Barcode deleted: {value}")
        return ServiceResponse.ok(1, f"Barcode value ({value}) deleted.")
