"""
==============================================================================
Database Package
==============================================================================

SQLAlchemy infrastructure for the submitted-barcode store.

Architecture:
------------
├── database.py   - DatabaseManager, engine selection, get_db
├── models.py     - ScannedBarcode ORM model
└── init_db.py    - DatabaseInitializer for setup

==============================================================================
"""

from .database import Base, DatabaseManager, get_database_manager, get_db
from .models import ScannedBarcode
from .init_db import DatabaseInitializer, init_db

__all__ = [
    "Base",
    "DatabaseManager",
    "get_database_manager",
    "get_db",
    "ScannedBarcode",
    "DatabaseInitializer",
    "init_db",
]
