"""
==============================================================================
Barcode Decoder Core Module
==============================================================================

Decode collaborator: turns image bytes or camera frames into raw
DecodedSymbol values.

Features:
---------
- OpenCV ``imdecode`` for encoded image bytes (JPEG, PNG, ...)
- pyzbar for symbol detection
- Base64 camera frame decoding
- Pluggable reader callable for tests and alternative libraries

The decoder performs no classification and no filtering beyond dropping
symbols whose text is blank.

==============================================================================
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Callable, List, Optional, Protocol, Sequence

import cv2
import numpy as np

from scanflow.domain.models import DecodedSymbol


# Module logger
logger = logging.getLogger(__name__)


Reader = Callable[[np.ndarray], Sequence[Any]]


class DecodeFailure(Exception):
    """Non-empty input could not be turned into a bitmap."""


class SymbolDecoder(Protocol):
    """Anything that can decode symbols from raw image bytes."""

    def decode_bytes(self, payload: Optional[bytes]) -> List[DecodedSymbol]:
        ...


def pyzbar_reader(frame: np.ndarray) -> Sequence[Any]:
    """Default reader backed by pyzbar (imported on first use)."""
    from pyzbar.pyzbar import decode

    return decode(frame)


class BarcodeDecoder:
    """
    Barcode decoder built on OpenCV and pyzbar.

    Attributes:
        reader: Callable returning pyzbar-style results
            (objects with ``data: bytes`` and ``type: str``)

    Example:
        >>> decoder = BarcodeDecoder()
        >>> with open("label.png", "rb") as f:
        ...     symbols = decoder.decode_bytes(f.read())
        >>> [s.text for s in symbols]
        ['ABC1234WXYZ']
    """

    def __init__(self, reader: Optional[Reader] = None) -> None:
        self._reader: Reader = reader or pyzbar_reader
        logger.debug("Decoder created")

    # =========================================================================
    # BITMAP LOADING
    # =========================================================================

    @staticmethod
    def load_bitmap(payload: bytes) -> Optional[np.ndarray]:
        """
        Decode encoded image bytes into a BGR bitmap.

        Returns:
            Bitmap, or None if OpenCV cannot read the bytes
        """
        buffer = np.frombuffer(payload, np.uint8)
        if buffer.size == 0:
            return None
        return cv2.imdecode(buffer, cv2.IMREAD_COLOR)

    # =========================================================================
    # SYMBOL DECODING
    # =========================================================================

    def decode(self, frame: Optional[np.ndarray]) -> List[DecodedSymbol]:
        """
        Decode every symbol in a bitmap.

        Args:
            frame: OpenCV image (numpy array)

        Returns:
            Decoded symbols in reader order; empty when nothing is found
        """
        if frame is None or frame.size == 0:
            return []

        try:
            results = self._reader(frame)
        except Exception as e:
            logger.error(f"Decode error: {e}")
            return []

        symbols = []
        for result in results:
            try:
                text = result.data.decode("utf-8")
            except UnicodeDecodeError:
                text = result.data.decode("latin-1")

            if not text.strip():
                continue

            symbols.append(DecodedSymbol(text=text, format=str(result.type)))

        return symbols

    def decode_bytes(self, payload: Optional[bytes]) -> List[DecodedSymbol]:
        """
        Decode symbols from encoded image bytes.

        Args:
            payload: Image file contents

        Returns:
            Decoded symbols; empty for a missing or empty payload

        Raises:
            DecodeFailure: If the bytes are not a readable image
        """
        if not payload:
            return []

        frame = self.load_bitmap(payload)
        if frame is None:
            raise DecodeFailure("Could not read image data")

        return self.decode(frame)

    def decode_base64_frame(self, data: str) -> List[DecodedSymbol]:
        """
        Decode symbols from a base64 camera frame.

        Frames that cannot be read are skipped (empty result).
        """
        try:
            payload = base64.b64decode(data, validate=False)
        except (binascii.Error, TypeError, ValueError) as e:
            logger.warning(f"Invalid frame encoding: {e}")
            return []

        try:
            return self.decode_bytes(payload)
        except DecodeFailure:
            logger.debug("Unreadable camera frame skipped")
            return []
