"""
==============================================================================
Scanner Package - Barcode Decoding
==============================================================================

Barcode decoding with OpenCV and pyzbar.

Classes:
--------
- BarcodeDecoder: Bytes / frame / file decoding
- SymbolDecoder: Protocol accepted by the upload batch processor
- DecodeFailure: Unreadable image bytes

==============================================================================
"""

from .core import BarcodeDecoder, DecodeFailure, SymbolDecoder, pyzbar_reader

__all__ = ["BarcodeDecoder", "DecodeFailure", "SymbolDecoder", "pyzbar_reader"]
