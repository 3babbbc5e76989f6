"""
==============================================================================
API v1 Endpoints
==============================================================================

Version 1 of the REST API.

Routers:
--------
- health: Health check endpoints
- classify: Stateless classification
- sessions: Session groups, export and submission
- uploads: Image upload decoding
- reorder: Manual reorder lists
- scanned_barcodes: Barcode store

==============================================================================
"""

from . import classify, health, reorder, scanned_barcodes, sessions, uploads

__all__ = ["classify", "health", "reorder", "scanned_barcodes", "sessions", "uploads"]
