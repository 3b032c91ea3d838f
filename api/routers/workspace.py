"""
Workspace API Router - Interactive pipeline editing

Every mutation recomputes the full pipeline from the source image. When a
newer edit supersedes a request's recompute, the response carries the
currently published result and superseded=true.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from api.dependencies import get_transform_service
from api.exceptions import safe_endpoint
from api.models import ImageLoadRequest, TransformSpec, WorkspaceResponse
from core.image.converters import ImageConverters
from core.recompute import RecomputeResult
from services.transform_service import TransformService

logger = logging.getLogger(__name__)

router = APIRouter()


def build_workspace_response(
    service: TransformService, outcome: Optional[RecomputeResult] = None, mutated: bool = False
) -> WorkspaceResponse:
    """
    Build the workspace response from the service state.

    Args:
        service: Transform service
        outcome: Result of this request's recompute (None if superseded)
        mutated: Whether this request triggered a recompute
    """
    state = service.get_state()
    published = state["result"]

    response = WorkspaceResponse(
        width=state["width"],
        height=state["height"],
        pipeline=[TransformSpec(**stage) for stage in state["pipeline"]],
        superseded=mutated and outcome is None,
    )
    if published is not None:
        response.generation = published.generation
        response.image_base64 = ImageConverters.to_base64(published.buffer)
        response.processing_time_ms = published.processing_time_ms
        response.completed_at = published.completed_at
    return response


@router.post("/image")
@safe_endpoint
async def load_image(
    request: ImageLoadRequest, transform_service=Depends(get_transform_service)
) -> WorkspaceResponse:
    """Load a new source image. Clears the pipeline."""
    outcome = await run_in_threadpool(transform_service.load_image, request.image_base64)
    return build_workspace_response(transform_service, outcome, mutated=True)


@router.get("")
@safe_endpoint
async def get_workspace(transform_service=Depends(get_transform_service)) -> WorkspaceResponse:
    """Get the pipeline and the published result."""
    return build_workspace_response(transform_service)


@router.post("/stages")
@safe_endpoint
async def add_stage(
    spec: TransformSpec, transform_service=Depends(get_transform_service)
) -> WorkspaceResponse:
    """Append a stage to the pipeline."""
    outcome = await run_in_threadpool(transform_service.add_stage, spec)
    return build_workspace_response(transform_service, outcome, mutated=True)


@router.delete("/stages/{index}")
@safe_endpoint
async def remove_stage(
    index: int, transform_service=Depends(get_transform_service)
) -> WorkspaceResponse:
    """Remove the stage at index."""
    outcome = await run_in_threadpool(transform_service.remove_stage, index)
    return build_workspace_response(transform_service, outcome, mutated=True)


@router.post("/reset")
@safe_endpoint
async def reset_pipeline(transform_service=Depends(get_transform_service)) -> WorkspaceResponse:
    """Remove all stages."""
    outcome = await run_in_threadpool(transform_service.reset)
    return build_workspace_response(transform_service, outcome, mutated=True)
