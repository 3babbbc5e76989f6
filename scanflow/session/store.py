"""
==============================================================================
Session Store Module
==============================================================================

Per-application map of session id to SessionRegistry.

The store lives on ``app.state`` and is created by the application factory,
so every app instance (and every test client) gets its own sessions.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from scanflow.session.registry import SessionRegistry


# Module logger
logger = logging.getLogger(__name__)


class SessionStore:
    """Registry lookup by session id."""

    def __init__(self) -> None:
        self._sessions: Dict[str, SessionRegistry] = {}

    def get_or_create(self, session_id: str) -> SessionRegistry:
        """
        Get the registry for a session, creating it on first use.

        Args:
            session_id: Client-chosen session identifier

        Returns:
            SessionRegistry for the session
        """
        registry = self._sessions.get(session_id)
        if registry is None:
            registry = SessionRegistry(session_id)
            self._sessions[session_id] = registry
            logger.info(f"🆕 Session opened: {session_id}")
        return registry

    def get(self, session_id: str) -> Optional[SessionRegistry]:
        return self._sessions.get(session_id)

    def drop(self, session_id: str) -> bool:
        """Forget a session. Returns True if it existed."""
        removed = self._sessions.pop(session_id, None)
        if removed is not None:
            logger.info(f"🗑️ Session dropped: {session_id}")
        return removed is not None

    def ids(self) -> List[str]:
        return list(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions
