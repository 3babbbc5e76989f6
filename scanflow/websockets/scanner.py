"""
==============================================================================
Scanner WebSocket Module
==============================================================================

Live camera capture via WebSocket connection.

Protocol:
---------
1. Client connects to /ws/scan?session_id=<id>
2. Client sends {"type": "init", "mode": "Standard" | "Unique"}
3. Client streams {"type": "frame", "frame": "<base64 image>"} or, when it
   decodes locally, {"type": "symbols", "symbols": [{"text", "format"}]}
4. Server answers each frame with the current group
5. {"type": "complete"} finalizes the current group,
   {"type": "discard"} resets it, {"type": "stop"} ends the session
6. Registry change events are pushed as {"type": "event", ...}
7. A malformed message is answered with an INVALID_MESSAGE error and the
   connection stays open

Frames are decoded in a worker thread; the results are applied to the
current group back on the event loop, which owns the session.

==============================================================================
"""

import asyncio
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect
from pydantic import TypeAdapter, ValidationError

from scanflow.config import get_settings
from scanflow.core.dependencies import get_decoder, get_session_store
from scanflow.core.exceptions import AppException
from scanflow.domain.models import BarcodeMode, DecodedSymbol, Group
from scanflow.grouping.engine import GroupingEngine
from scanflow.grouping.records import build_scan_items
from scanflow.scanner.core import BarcodeDecoder
from scanflow.schemas.scan import SymbolPayload
from scanflow.session.events import SessionEventQueue
from scanflow.session.registry import SessionRegistry
from scanflow.session.store import SessionStore


# Module logger
logger = logging.getLogger(__name__)

router = APIRouter()

SymbolList = TypeAdapter(List[SymbolPayload])

# Malformed client payloads; answered with INVALID_MESSAGE
MESSAGE_ERRORS = (ValidationError, AttributeError, TypeError, ValueError)


class ScannerWebSocketHandler:
    """
    Handler for live camera scanning WebSocket connections.

    Manages the lifecycle of a scanning connection including:
    - Mode selection
    - Frame decoding and current group updates
    - Group completion / discard
    - Event forwarding
    """

    def __init__(self, websocket: WebSocket, registry: SessionRegistry, decoder: BarcodeDecoder):
        self._websocket = websocket
        self._registry = registry
        self._engine = GroupingEngine(registry)
        self._decoder = decoder
        self._mode = get_settings().default_mode
        self._events: Optional[SessionEventQueue] = None

    async def send_error(self, message: str, code: str = "ERROR") -> None:
        """Send error message to client."""
        await self._websocket.send_json({
            "type": "error",
            "code": code,
            "message": message
        })

    @staticmethod
    def group_payload(group: Group) -> dict:
        return group.model_dump(mode="json")

    async def handle_init(self, data: dict) -> bool:
        """Handle init message from client."""
        try:
            self._mode = BarcodeMode(data.get("mode") or self._mode)
        except ValueError:
            await self.send_error(f"Unknown mode: {data.get('mode')}", "INVALID_MODE")
            return False

        logger.info(f"Init: session={self._registry.session_id}, mode={self._mode}")
        await self._websocket.send_json({
            "type": "init",
            "session_id": self._registry.session_id,
            "mode": self._mode.value,
            "current_group": self.group_payload(self._registry.current_group),
        })
        return True

    async def apply_symbols(self, symbols: List[DecodedSymbol], frame_id: int) -> None:
        """Apply one frame's symbols to the current group and report it."""
        items = build_scan_items(symbols, self._mode)
        group = self._engine.apply_camera_batch(items)

        await self._websocket.send_json({
            "type": "detection",
            "frame_id": frame_id,
            "detections": [
                {"value": i.value, "format": i.format, "category": i.category}
                for i in items
            ],
            "current_group": self.group_payload(group),
        })

    async def handle_frame(self, data: dict, frame_id: int) -> None:
        """Decode a base64 frame off the loop, then apply it on the loop."""
        frame = data.get("frame", "")
        if not isinstance(frame, str):
            raise TypeError("frame must be a base64 string")

        symbols = await asyncio.to_thread(self._decoder.decode_base64_frame, frame)
        await self.apply_symbols(symbols, frame_id)

    async def handle_symbols(self, data: dict, frame_id: int) -> None:
        payloads = SymbolList.validate_python(data.get("symbols") or [])
        symbols = [p.to_symbol() for p in payloads if p.text.strip()]
        await self.apply_symbols(symbols, frame_id)

    async def handle_complete(self) -> None:
        group = self._engine.complete_current_group()
        await self._websocket.send_json({
            "type": "completed",
            "group": self.group_payload(group) if group else None,
            "current_group": self.group_payload(self._registry.current_group),
        })

    async def handle_discard(self) -> None:
        group = self._engine.discard_current_group()
        await self._websocket.send_json({
            "type": "discarded",
            "current_group": self.group_payload(group),
        })

    async def forward_events(self) -> None:
        """Push registry events to the client until cancelled."""
        while True:
            event = await self._events.get()
            await self._websocket.send_json({"type": "event", **event.to_dict()})

    async def run(self) -> None:
        """Main handler loop."""
        await self._websocket.accept()
        logger.info(f"📱 Scanner WebSocket connected: {self._registry.session_id}")

        self._events = SessionEventQueue(self._registry, get_settings().event_queue_size)
        forwarder = asyncio.create_task(self.forward_events())

        try:
            frame_count = 0

            while True:
                data = await self._websocket.receive_json()
                if not isinstance(data, dict):
                    await self.send_error("Message must be a JSON object", "INVALID_MESSAGE")
                    continue
                kind = data.get("type")

                try:
                    if kind == "init":
                        if not await self.handle_init(data):
                            break
                    elif kind == "frame":
                        frame_count += 1
                        await self.handle_frame(data, frame_count)
                    elif kind == "symbols":
                        frame_count += 1
                        await self.handle_symbols(data, frame_count)
                    elif kind == "complete":
                        await self.handle_complete()
                    elif kind == "discard":
                        await self.handle_discard()
                    elif kind == "stop":
                        logger.info("🛑 Client requested stop")
                        break
                    else:
                        await self.send_error(f"Unknown message type: {kind}", "UNKNOWN_MESSAGE")
                except AppException as e:
                    await self.send_error(e.message, e.code)
                except MESSAGE_ERRORS as e:
                    logger.warning(f"⚠️ Invalid {kind} message: {e}")
                    await self.send_error(f"Invalid {kind} message", "INVALID_MESSAGE")

        except WebSocketDisconnect:
            logger.info("📱 Client disconnected")
        except Exception as e:
            logger.error(f"WebSocket error: {e}")
            try:
                await self.send_error(str(e))
            except (WebSocketDisconnect, RuntimeError):
                pass
        finally:
            forwarder.cancel()
            try:
                await forwarder
            except (asyncio.CancelledError, WebSocketDisconnect, RuntimeError):
                pass
            self._events.close()
            logger.info("✅ Scanner WebSocket closed")


@router.websocket("/ws/scan")
async def websocket_scan(
    websocket: WebSocket,
    session_id: str = Query("default"),
    store: SessionStore = Depends(get_session_store),
    decoder: BarcodeDecoder = Depends(get_decoder),
):
    """Live camera scanning via WebSocket."""
    handler = ScannerWebSocketHandler(websocket, store.get_or_create(session_id), decoder)
    await handler.run()
