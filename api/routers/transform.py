"""
Transform API Router - Stateless pipeline application
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from api.dependencies import get_transform_service
from api.exceptions import safe_endpoint
from api.models import ApplyRequest, ApplyResponse
from core.image.converters import ImageConverters

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/apply")
@safe_endpoint
async def apply_pipeline(
    request: ApplyRequest, transform_service=Depends(get_transform_service)
) -> ApplyResponse:
    """
    Apply a pipeline to an image and return the result.

    The workspace is not touched. Stages are applied in list order starting
    from the decoded image; unknown kinds pass the image through.
    """
    result, processing_time = await run_in_threadpool(
        transform_service.apply, request.image_base64, request.pipeline
    )

    logger.debug(
        f"Applied {len(request.pipeline)} stage(s) to "
        f"{result.width}x{result.height} image in {processing_time}ms"
    )

    return ApplyResponse(
        image_base64=ImageConverters.to_base64(result),
        width=result.width,
        height=result.height,
        stage_count=len(request.pipeline),
        processing_time_ms=processing_time,
    )
