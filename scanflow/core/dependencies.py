"""
==============================================================================
FastAPI Dependencies Module
==============================================================================

Dependency injection for sessions, the database and collaborators.

Dependency Hierarchy:
--------------------
                 ┌──────────────────────┐
                 │ get_session_store()  │  app.state.session_store
                 └──────────┬───────────┘
                            │
                 ┌──────────▼───────────┐
                 │    get_registry()    │  per session_id
                 └──────────────────────┘

    get_db() ──────────► get_submitter()   (local store or HTTP client)
    get_settings() ────► get_upload_validator()
    app.state.decoder ─► get_decoder()

Session endpoints are ``async def`` so registry mutations stay on the
event loop thread that owns the session.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session
from starlette.requests import HTTPConnection

from scanflow.config import Settings, get_settings
from scanflow.core.exceptions import invalid_mode
from scanflow.db.database import get_db
from scanflow.domain.models import BarcodeMode
from scanflow.scanner.core import BarcodeDecoder
from scanflow.services.submission_client import LocalSubmitter, SubmissionClient, Submitter
from scanflow.session.registry import SessionRegistry
from scanflow.session.store import SessionStore
from scanflow.utils.validators import UploadValidator


# Module logger
logger = logging.getLogger(__name__)


async def get_session_store(conn: HTTPConnection) -> SessionStore:
    """SessionStore of the running application."""
    return conn.app.state.session_store


async def get_registry(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> SessionRegistry:
    """
    Registry for the ``session_id`` path/query parameter.

    Sessions are created on first use.
    """
    return store.get_or_create(session_id)


async def get_decoder(conn: HTTPConnection) -> BarcodeDecoder:
    return conn.app.state.decoder


def get_upload_validator(settings: Settings = Depends(get_settings)) -> UploadValidator:
    return UploadValidator(
        settings.allowed_content_types_list,
        max_bytes=settings.max_upload_bytes,
    )


def get_submitter(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Submitter:
    """
    Submission collaborator.

    Posts to ``submission_url`` when configured, otherwise writes to the
    local store.
    """
    if settings.submission_url:
        return SubmissionClient(settings.submission_url, settings.submission_timeout_seconds)
    return LocalSubmitter(db)


def resolve_mode(mode: Optional[str], settings: Settings) -> BarcodeMode:
    """
    Resolve an explicit mode, falling back to the configured default.

    Raises:
        AppException: INVALID_MODE for an unknown mode string
    """
    if mode is None or mode == "":
        return settings.default_mode
    try:
        return BarcodeMode(mode)
    except ValueError:
        raise invalid_mode(str(mode))


__all__ = [
    "get_db",
    "get_decoder",
    "get_registry",
    "get_session_store",
    "get_settings",
    "get_submitter",
    "get_upload_validator",
    "resolve_mode",
]
