"""
==============================================================================
Scanflow Barcode API - Application Entry Point
==============================================================================

FastAPI application with:
- Classification and session REST endpoints
- Image upload decoding
- WebSocket live camera scanning
- Reorder, export and submission of grouped barcodes

Usage:
------
    # Development
    uvicorn scanflow.main:app --reload

    # Production
    uvicorn scanflow.main:app --host 0.0.0.0 --port 8000

==============================================================================
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from scanflow import __version__
from scanflow.config import get_settings
from scanflow.core.exceptions import register_exception_handlers
from scanflow.db import init_db
from scanflow.db.database import get_database_manager
from scanflow.api.router import api_router
from scanflow.scanner.core import BarcodeDecoder
from scanflow.session.store import SessionStore
from scanflow.websockets import scanner_router


# ============================================================================
# LOGGING SETUP
# ============================================================================

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

logger = logging.getLogger(__name__)


# ============================================================================
# APPLICATION FACTORY
# ============================================================================

class Application:
    """
    FastAPI application factory and manager.

    Handles application lifecycle including:
    - Startup and shutdown events
    - Middleware configuration
    - Router registration
    - Exception handler setup

    Each instance owns its own session store and decoder, stored on
    ``app.state``.
    """

    def __init__(self):
        self._settings = get_settings()
        self._app = self._create_app()

    def _create_app(self) -> FastAPI:
        """Create and configure the FastAPI application."""
        app = FastAPI(
            title=self._settings.app_name,
            version=__version__,
            description="Barcode classification, grouping and ordering service",
            lifespan=self._lifespan,
            docs_url="/docs",
            redoc_url="/redoc",
        )

        # Shared per-process state
        app.state.session_store = SessionStore()
        app.state.decoder = BarcodeDecoder()

        self._configure_middleware(app)
        register_exception_handlers(app)
        self._register_routers(app)
        self._register_root(app)

        return app

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        """Application lifespan manager."""
        self._startup()
        yield
        self._shutdown(app)

    def _startup(self) -> None:
        """Application startup tasks."""
        logger.info("=" * 60)
        logger.info(f"🚀 Starting {self._settings.app_name} ({self._settings.app_env})")
        logger.info("=" * 60)

        init_db()

        logger.info(f"✅ {self._settings.app_name} ready")
        logger.info(f"🔤 Default mode: {self._settings.default_mode.value}")
        if self._settings.submission_url:
            logger.info(f"📤 Submitting to {self._settings.submission_url}")
        else:
            logger.info("📤 Submitting to the local barcode store")
        logger.info(f"📖 API Docs: http://{self._settings.host}:{self._settings.port}/docs")
        logger.info("=" * 60)

    def _shutdown(self, app: FastAPI) -> None:
        """Application shutdown tasks."""
        logger.info("🛑 Shutting down...")
        store: SessionStore = app.state.session_store
        for session_id in store.ids():
            store.drop(session_id)
        get_database_manager().dispose()
        logger.info("✅ Shutdown complete")

    def _configure_middleware(self, app: FastAPI) -> None:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=self._settings.cors_origins_list,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def _register_routers(self, app: FastAPI) -> None:
        """Register API routers."""
        # REST API routes
        app.include_router(api_router)

        # WebSocket routes
        app.include_router(scanner_router)

    def _register_root(self, app: FastAPI) -> None:
        @app.get("/", include_in_schema=False)
        async def root():
            """Redirect to the interactive API docs."""
            return RedirectResponse(url="/docs")

    @property
    def app(self) -> FastAPI:
        """Get the FastAPI application instance."""
        return self._app


# ============================================================================
# APPLICATION INSTANCE
# ============================================================================

application = Application()
app = application.app


# ============================================================================
# ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "scanflow.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info"
    )
