"""
==============================================================================
scanflow - Barcode Post-Decode Pipeline
==============================================================================

Turns raw decoded barcode symbols into categorized, de-duplicated and
deterministically ordered groups ready for review, manual reordering and
bulk submission.

Packages:
---------
- domain: Pydantic domain models (symbols, items, groups, enums)
- classifier: Ordered rule tables for category assignment
- grouping: Record builder, dedup engine, ordering, upload batches
- reorder: Manual reorder sessions and export text
- session: Session registry, event queue and per-app session store
- scanner: OpenCV/pyzbar decode adapter
- services: Submission store and HTTP submission client
- api / websockets: FastAPI surface

==============================================================================
"""

__version__ = "1.0.0"
