"""
==============================================================================
Scanned Barcode Store Tests
==============================================================================

Service-level tests for the local barcode store.

==============================================================================
"""

from datetime import datetime, timezone

from sqlalchemy.orm import Session

from scanflow.db.models import ScannedBarcode
from scanflow.schemas.scan import ScanItemPayload
from scanflow.services.scanned_barcode_service import (
    INVALID_ID_MESSAGE,
    NO_ITEMS_MESSAGE,
    NOTHING_NEW_MESSAGE,
    ScannedBarcodeService,
)


def payload(value: str, category: str = "Serial Number") -> ScanItemPayload:
    return ScanItemPayload(
        value=value,
        format="CODE128",
        category=category,
        scanned_at=datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc),
    )


class TestAddScannedBarcodes:
    """Tests for add_scanned_barcodes."""

    def test_saves_new_values(self, db: Session):
        result = ScannedBarcodeService(db).add_scanned_barcodes([
            payload("ABC1234WXYZ"),
            payload("DEV-12345", "Deviation"),
        ])

        assert result.success is True
        assert result.data == 2
        assert result.message == "2 new barcode(s) saved. 0 duplicate/existing value(s) skipped."
        assert db.query(ScannedBarcode).count() == 2

    def test_resubmission_is_idempotent(self, db: Session):
        service = ScannedBarcodeService(db)
        batch = [payload("ABC1234WXYZ"), payload("DEV-12345", "Deviation")]
        service.add_scanned_barcodes(batch)

        result = service.add_scanned_barcodes(batch)

        assert result.success is True
        assert result.data == 0
        assert result.message == NOTHING_NEW_MESSAGE
        assert db.query(ScannedBarcode).count() == 2

    def test_trims_and_dedups_within_batch(self, db: Session):
        result = ScannedBarcodeService(db).add_scanned_barcodes([
            payload("  ABC1234WXYZ "),
            payload("ABC1234WXYZ"),
            payload("   "),
            payload("DEV-12345"),
        ])

        assert result.data == 2
        assert result.message == "2 new barcode(s) saved. 2 duplicate/existing value(s) skipped."
        values = sorted(row.value for row in db.query(ScannedBarcode).all())
        assert values == ["ABC1234WXYZ", "DEV-12345"]

    def test_existing_values_are_case_sensitive(self, db: Session):
        service = ScannedBarcodeService(db)
        service.add_scanned_barcodes([payload("abc1234wxyz")])

        result = service.add_scanned_barcodes([payload("ABC1234WXYZ"), payload("abc1234wxyz")])

        assert result.data == 1

    def test_empty_batch(self, db: Session):
        result = ScannedBarcodeService(db).add_scanned_barcodes([])

        assert result.success is False
        assert result.message == NO_ITEMS_MESSAGE
        assert result.error_code == "NO_ITEMS"

    def test_round_trip_of_stored_fields(self, db: Session):
        ScannedBarcodeService(db).add_scanned_barcodes([payload("00:1A:2B:3C:4D:5E", "MAC Address")])

        row = db.query(ScannedBarcode).one()
        assert (row.value, row.format, row.category) == ("00:1A:2B:3C:4D:5E", "CODE128", "MAC Address")
        assert row.to_dict()["scannedTime"] is not None


class TestListAndDelete:
    """Tests for list_scanned_barcodes and delete_scanned_barcode."""

    def test_list_newest_first(self, db: Session):
        service = ScannedBarcodeService(db)
        service.add_scanned_barcodes([payload("first")])
        service.add_scanned_barcodes([payload("second")])

        assert [row.value for row in service.list_scanned_barcodes()] == ["second", "first"]

    def test_delete(self, db: Session):
        service = ScannedBarcodeService(db)
        service.add_scanned_barcodes([payload("ABC1234WXYZ")])
        row = db.query(ScannedBarcode).one()

        result = service.delete_scanned_barcode(row.id)

        assert result.success is True
        assert result.data == 1
        assert result.message == "Barcode value (ABC1234WXYZ) deleted."
        assert db.query(ScannedBarcode).count() == 0

    def test_delete_missing(self, db: Session):
        result = ScannedBarcodeService(db).delete_scanned_barcode(999)

        assert result.success is True
        assert result.data == 0
        assert result.message == "Barcode (Id=999) not found. Nothing to delete."

    def test_delete_invalid_id(self, db: Session):
        result = ScannedBarcodeService(db).delete_scanned_barcode(0)

        assert result.success is False
        assert result.message == INVALID_ID_MESSAGE
