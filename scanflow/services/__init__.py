"""
==============================================================================
Services Package - Business Logic Layer
==============================================================================

Service classes for the barcode store and submission.

This package provides:
- ScannedBarcodeService: Add / list / delete stored barcodes
- SubmissionClient: HTTP submission with timeout and cancellation
- LocalSubmitter: Submission into the local store

    ┌─────────────────┐
    │   API Router    │
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │    Service      │  ← Business Logic
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │   Repository    │  ← Data Access (via ORM)
    └─────────────────┘

==============================================================================
"""

from .scanned_barcode_service import ScannedBarcodeService
from .submission_client import LocalSubmitter, SubmissionClient, Submitter

__all__ = [
    "LocalSubmitter",
    "ScannedBarcodeService",
    "SubmissionClient",
    "Submitter",
]
