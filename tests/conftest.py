"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides test database, client, session and decoder fixtures.

==============================================================================
"""

import os

# Keep the application database in memory for the whole test run
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("DEBUG", "false")

import pytest
from typing import Dict, Generator, List, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from scanflow.main import app
from scanflow.db.database import Base
from scanflow.core.dependencies import get_db
from scanflow.domain.models import DecodedSymbol
from scanflow.scanner.core import DecodeFailure
from scanflow.session.registry import SessionRegistry
from scanflow.session.store import SessionStore


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

# In-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


# ============================================================================
# DECODER FIXTURES
# ============================================================================

class FakeDecoder:
    """
    Decoder returning canned symbols per payload.

    Payloads missing from the table raise DecodeFailure, like bytes OpenCV
    cannot read.
    """

    def __init__(self, table: Optional[Dict[bytes, List[DecodedSymbol]]] = None):
        self.table = table or {}
        self.calls: List[bytes] = []

    def decode_bytes(self, payload: Optional[bytes]) -> List[DecodedSymbol]:
        self.calls.append(payload)
        if not payload:
            return []
        if payload not in self.table:
            raise DecodeFailure("Could not read image data")
        return list(self.table[payload])

    def decode_base64_frame(self, data: str) -> List[DecodedSymbol]:
        import base64
        try:
            return self.decode_bytes(base64.b64decode(data))
        except DecodeFailure:
            return []


@pytest.fixture
def fake_decoder() -> FakeDecoder:
    return FakeDecoder({
        b"label-a": [
            DecodedSymbol(text="PCA-12345-01-A1", format="CODE128"),
            DecodedSymbol(text="ABC1234WXYZ", format="CODE128"),
            DecodedSymbol(text="ASY-12345-001-A1", format="QRCODE"),
        ],
        b"label-b": [DecodedSymbol(text="DEV-12345", format="CODE39")],
        b"blank": [],
    })


# ============================================================================
# SESSION FIXTURES
# ============================================================================

@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry("test-session")


# ============================================================================
# CLIENT FIXTURES
# ============================================================================

@pytest.fixture(scope="function")
def client(db: Session, fake_decoder: FakeDecoder) -> Generator[TestClient, None, None]:
    """Create test client with database, decoder and session overrides."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.state.decoder = fake_decoder
    app.state.session_store = SessionStore()

    # All requests of one client run on the same event loop thread
    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
