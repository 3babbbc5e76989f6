"""
==============================================================================
WebSocket Package
==============================================================================

Real-time WebSocket handlers for barcode scanning.

Handlers:
---------
- scanner: Live camera capture into a session's current group

==============================================================================
"""

from .scanner import router as scanner_router

__all__ = ["scanner_router"]
