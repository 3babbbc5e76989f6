"""
==============================================================================
Database Connection Management Module
==============================================================================

SQLAlchemy engine and session handling for the local barcode store.

    database_url ──► DatabaseManager ──► Engine ──► sessionmaker ──► Session
                          ▲
                get_database_manager()  (one cached manager per process)

Engine Selection:
----------------
- sqlite:///:memory:  single shared connection (StaticPool), so every
                      thread sees the same tables
- sqlite file         'check_same_thread' disabled for FastAPI's worker threads
- anything else       pooled connections with pre-ping

==============================================================================
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Generator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from scanflow.config import get_settings


# Module logger
logger = logging.getLogger(__name__)

# SQLAlchemy declarative base for all models
Base = declarative_base()


def is_memory_url(database_url: str) -> bool:
    return database_url in ("sqlite://", "sqlite:///:memory:")


def build_engine(database_url: str) -> Engine:
    """Create the engine appropriate for a database URL."""
    if is_memory_url(database_url):
        logger.info("Using in-memory SQLite barcode store")
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    if database_url.startswith("sqlite"):
        logger.info(f"Using SQLite barcode store: {database_url}")
        return create_engine(database_url, connect_args={"check_same_thread": False})

    logger.info(f"Using pooled barcode store: {database_url}")
    return create_engine(
        database_url,
        pool_size=5,
        max_overflow=10,
        pool_recycle=1800,
        pool_pre_ping=True,
    )


class DatabaseManager:
    """
    Engine and session factory for one database URL.

    The engine is created on first use.

    Example:
        >>> manager = DatabaseManager("sqlite:///:memory:")
        >>> manager.create_tables()
        >>> session = manager.get_session()
    """

    def __init__(self, database_url: Optional[str] = None) -> None:
        self.database_url = database_url or get_settings().database_url
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = build_engine(self.database_url)
        return self._engine

    def get_session(self) -> Session:
        """New session; the caller closes it."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.engine,
                autocommit=False,
                autoflush=False,
                expire_on_commit=False,
            )
        return self._session_factory()

    def create_tables(self) -> None:
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables created/verified")

    def verify_connection(self) -> bool:
        """
        Verify database connection is working.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database connection failed: {e}")
            return False

    def dispose(self) -> None:
        """Release pooled connections (application shutdown)."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database connections released")

    def __repr__(self) -> str:
        return f"DatabaseManager(url={self.database_url!r})"


@lru_cache(maxsize=1)
def get_database_manager() -> DatabaseManager:
    """Process-wide manager for the configured database URL."""
    return DatabaseManager()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session.

    Usage:
        @router.get("/scanned-barcodes")
        def list_barcodes(db: Session = Depends(get_db)):
            ...
    """
    session = get_database_manager().get_session()
    try:
        yield session
    finally:
        session.close()
