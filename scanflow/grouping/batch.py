"""
==============================================================================
Upload Batch Processor Module
==============================================================================

Decodes a batch of uploaded images, one group per image.

Processing:
-----------
1. Report progress 5
2. For each image, in order:
   - rejected upload    -> Error group (its rejection message)
   - missing bytes      -> Error group ("No image data")
   - unreadable bytes   -> Error group (DecodeFailure message)
   - otherwise          -> Done group with every decoded symbol
   once decoded, report progress 5 + (index + 1) / total * 95 and yield
   to the event loop
3. Report progress 100

A failing image never aborts the batch. Decoding runs in a worker thread;
groups are built on the calling (owner) thread.

==============================================================================
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Union

from scanflow.domain.models import BarcodeMode, Group
from scanflow.grouping.engine import build_upload_group
from scanflow.grouping.records import build_scan_items
from scanflow.scanner.core import DecodeFailure, SymbolDecoder


# Module logger
logger = logging.getLogger(__name__)


NO_IMAGE_DATA = "No image data"

ProgressCallback = Callable[[int], None]


@dataclass
class ImageUpload:
    """One uploaded image awaiting decode."""

    name: str
    payload: Optional[bytes]
    content_type: str = "image/jpeg"
    error: Optional[str] = None


class ImageBatchProcessor:
    """
    Sequential decoder for uploaded images.

    Example:
        >>> processor = ImageBatchProcessor(BarcodeDecoder(), progress=print)
        >>> groups = await processor.process(uploads, BarcodeMode.STANDARD)
    """

    def __init__(
        self,
        decoder: SymbolDecoder,
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        self._decoder = decoder
        self._progress = progress

    def _report(self, value: int) -> None:
        if self._progress is not None:
            self._progress(value)

    async def decode_one(self, upload: ImageUpload, mode: Union[BarcodeMode, str]) -> Group:
        """
        Decode a single image into its group.

        Returns:
            Group in state Done or Error
        """
        if upload.error:
            logger.warning(f"⚠️ Upload rejected {upload.name}: {upload.error}")
            return build_upload_group(upload.name, [], error=upload.error)

        if not upload.payload:
            logger.warning(f"⚠️ No image data: {upload.name}")
            return build_upload_group(upload.name, [], error=NO_IMAGE_DATA)

        try:
            symbols = await asyncio.to_thread(self._decoder.decode_bytes, upload.payload)
        except DecodeFailure as e:
            logger.warning(f"⚠️ Unreadable image {upload.name}: {e}")
            return build_upload_group(upload.name, [], error=str(e))
        except Exception as e:
            logger.exception(f"❌ Decode failed for {upload.name}")
            return build_upload_group(upload.name, [], error=str(e) or type(e).__name__)

        items = build_scan_items(symbols, mode)
        logger.info(f"📷 {upload.name}: {len(items)} barcode(s)")
        return build_upload_group(upload.name, items)

    async def process(
        self,
        uploads: Sequence[ImageUpload],
        mode: Union[BarcodeMode, str],
    ) -> List[Group]:
        """
        Decode every upload in order.

        Args:
            uploads: Images to decode
            mode: Classification mode for the whole batch

        Returns:
            One group per upload, in upload order

        Raises:
            ValueError: If the mode is not recognized
        """
        mode = BarcodeMode(mode)
        total = len(uploads)
        groups: List[Group] = []

        self._report(5)
        for index, upload in enumerate(uploads):
            groups.append(await self.decode_one(upload, mode))
            self._report(5 + int((index + 1) / total * 95))
            await asyncio.sleep(0)

        self._report(100)
        return groups
