"""
==============================================================================
Scanned Barcode Store Endpoints
==============================================================================

The submission collaborator: accepts barcode batches, lists and deletes
stored rows.

==============================================================================
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from scanflow.db.database import get_db
from scanflow.schemas.common import ServiceResponse
from scanflow.schemas.scan import ScanItemPayload, ScannedBarcodeResponse
from scanflow.services.scanned_barcode_service import ScannedBarcodeService


router = APIRouter(prefix="/scanned-barcodes", tags=["Scanned Barcodes"])


@router.post("", response_model=ServiceResponse[int])
def add_scanned_barcodes(items: List[ScanItemPayload], db: Session = Depends(get_db)):
    """
    Store a batch of barcodes.

    Values are trimmed, de-duplicated within the batch and skipped when
    already stored. Resubmitting a batch saves nothing new.
    """
    return ScannedBarcodeService(db).add_scanned_barcodes(items)


@router.get("", response_model=ServiceResponse[List[ScannedBarcodeResponse]])
def list_scanned_barcodes(db: Session = Depends(get_db)):
    """All stored barcodes, newest first."""
    rows = ScannedBarcodeService(db).list_scanned_barcodes()
    return ServiceResponse.ok(
        [ScannedBarcodeResponse.model_validate(row, from_attributes=True) for row in rows]
    )


@router.delete("/{barcode_id}", response_model=ServiceResponse[int])
def delete_scanned_barcode(barcode_id: int, db: Session = Depends(get_db)):
    return ScannedBarcodeService(db).delete_scanned_barcode(barcode_id)
