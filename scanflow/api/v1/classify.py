"""
==============================================================================
Classification Endpoints
==============================================================================

Stateless classification of barcode values and category metadata.

==============================================================================
"""

from fastapi import APIRouter, Depends

from scanflow.classifier import CATEGORY_CHOICES, classify
from scanflow.config import Settings, get_settings
from scanflow.core.dependencies import resolve_mode
from scanflow.grouping.ordering import PREFERRED_CATEGORY_ORDER
from scanflow.schemas.scan import (
    CategoryChoicesResponse,
    ClassifyRequest,
    ClassifyResponse,
    ClassifyResult,
)


router = APIRouter(prefix="/classify", tags=["Classify"])


@router.post("", response_model=ClassifyResponse)
async def classify_values(
    data: ClassifyRequest,
    settings: Settings = Depends(get_settings),
):
    """Classify each value with the requested (or default) mode."""
    mode = resolve_mode(data.mode, settings)
    return ClassifyResponse(
        mode=mode,
        results=[
            ClassifyResult(value=value, category=classify(value, mode))
            for value in data.values
        ],
    )


@router.get("/categories", response_model=CategoryChoicesResponse)
async def list_categories():
    """Categories offered for manual correction, plus the display order."""
    return CategoryChoicesResponse(
        categories=list(CATEGORY_CHOICES),
        preferred_order=list(PREFERRED_CATEGORY_ORDER),
    )
