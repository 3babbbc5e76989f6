"""
==============================================================================
Image Upload Endpoints
==============================================================================

Decodes uploaded images into one group per image and appends the groups
to the session's finalized sequence.

==============================================================================
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from scanflow.config import Settings, get_settings
from scanflow.core import exceptions
from scanflow.core.dependencies import (
    get_decoder,
    get_registry,
    get_upload_validator,
    resolve_mode,
)
from scanflow.domain.models import BarcodeMode
from scanflow.grouping.batch import ImageBatchProcessor, ImageUpload
from scanflow.grouping.engine import GroupingEngine
from scanflow.scanner.core import BarcodeDecoder
from scanflow.schemas.scan import GroupResponse, UploadResponse
from scanflow.session.registry import SessionRegistry
from scanflow.utils.validators import UploadValidator


# Module logger
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["Uploads"])


class UploadController:
    """Controller for image upload decoding."""

    def __init__(
        self,
        registry: SessionRegistry,
        decoder: BarcodeDecoder,
        validator: UploadValidator,
    ):
        self._engine = GroupingEngine(registry)
        self._decoder = decoder
        self._validator = validator

    async def read_upload(self, file: UploadFile) -> ImageUpload:
        """
        Read and validate one uploaded file.

        An oversized file comes back as a rejected upload, which the batch
        turns into an Error group.

        Raises:
            AppException: UNSUPPORTED_MEDIA_TYPE
        """
        name = file.filename or "image"
        content_type = self._validator.normalize_content_type(file.content_type)

        valid, _ = self._validator.validate_content_type(content_type)
        if not valid:
            raise exceptions.unsupported_media_type(name, content_type)

        payload = await file.read()
        valid, message = self._validator.validate_size(len(payload))
        if not valid:
            logger.warning(f"⚠️ {name}: {message}")
            return ImageUpload(name=name, payload=None, content_type=content_type, error=message)

        return ImageUpload(name=name, payload=payload, content_type=content_type)

    async def process(self, files: List[UploadFile], mode: BarcodeMode) -> UploadResponse:
        uploads = [await self.read_upload(f) for f in files]

        progress: List[int] = []
        processor = ImageBatchProcessor(self._decoder, progress=progress.append)
        groups = await processor.process(uploads, mode)
        self._engine.add_upload_groups(groups)

        logger.info(f"📷 Upload batch: {len(groups)} image(s) processed")
        return UploadResponse(
            groups=[GroupResponse.model_validate(g, from_attributes=True) for g in groups],
            progress=progress,
        )


@router.post("/{session_id}/uploads", response_model=UploadResponse)
async def upload_images(
    files: List[UploadFile] = File(...),
    mode: Optional[str] = Form(None),
    registry: SessionRegistry = Depends(get_registry),
    decoder: BarcodeDecoder = Depends(get_decoder),
    validator: UploadValidator = Depends(get_upload_validator),
    settings: Settings = Depends(get_settings),
):
    """
    Decode uploaded images.

    Every symbol found becomes its own item; an unreadable or oversized
    image yields a group in state Error without failing the batch.
    """
    controller = UploadController(registry, decoder, validator)
    return await controller.process(files, resolve_mode(mode, settings))
