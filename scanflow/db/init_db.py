"""
==============================================================================
Database Initialization Module
==============================================================================

Creates the barcode store tables and verifies the connection at startup.

Usage:
------
    from scanflow.db import init_db
    init_db()

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional

from scanflow.db.database import DatabaseManager, get_database_manager
from scanflow.db.models import ScannedBarcode


# Module logger
logger = logging.getLogger(__name__)


class DatabaseInitializer:
    """
    Database setup operations.

    Example:
        >>> DatabaseInitializer().initialize()
    """

    def __init__(self, db_manager: Optional[DatabaseManager] = None) -> None:
        self._db_manager = db_manager or get_database_manager()

    def create_tables(self) -> None:
        logger.info("Creating database tables...")
        self._db_manager.create_tables()
        logger.info("✅ Database tables created successfully")

    def verify_tables(self) -> bool:
        """
        Check that the barcode table can be queried.

        Returns:
            True if the table exists, False otherwise
        """
        session = self._db_manager.get_session()
        try:
            session.query(ScannedBarcode).first()
            return True
        except Exception as e:
            logger.error(f"Table verification failed: {e}")
            return False
        finally:
            session.close()

    def initialize(self) -> None:
        """Create tables, then verify the connection."""
        self.create_tables()

        if self._db_manager.verify_connection():
            logger.info("✅ Database connection verified")
        else:
            logger.warning("⚠️ Database connection check failed")


def init_db() -> None:
    """Initialize the database at application startup."""
    DatabaseInitializer().initialize()
