"""
Pydantic models for API requests and responses
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from schemas.transform import TransformSpec

__all__ = [
    "TransformSpec",
    "ApplyRequest",
    "ApplyResponse",
    "ImageLoadRequest",
    "WorkspaceResponse",
    "SystemStatus",
]


class ApplyRequest(BaseModel):
    """Apply a pipeline to an image without using the workspace"""

    image_base64: str = Field(..., description="Encoded source image (base64 or data URL)")
    pipeline: List[Dict[str, Any]] = Field(
        default_factory=list, description="Ordered list of {kind, params} stages"
    )


class ApplyResponse(BaseModel):
    """Result of a stateless pipeline application"""

    image_base64: str = Field(..., description="Result as base64 PNG")
    width: int
    height: int
    stage_count: int
    processing_time_ms: int


class ImageLoadRequest(BaseModel):
    """Load a source image into the workspace"""

    image_base64: str = Field(..., description="Encoded source image (base64 or data URL)")


class WorkspaceResponse(BaseModel):
    """Current workspace state"""

    width: int
    height: int
    pipeline: List[TransformSpec]
    generation: Optional[int] = Field(None, description="Generation of the published result")
    image_base64: Optional[str] = Field(None, description="Published result as base64 PNG")
    processing_time_ms: Optional[int] = None
    completed_at: Optional[datetime] = None
    superseded: bool = Field(
        False, description="True if this request's recompute was replaced by a newer edit"
    )


class SystemStatus(BaseModel):
    """System status information"""

    status: str
    uptime: float
    memory_usage: Dict[str, float]
    stage_count: int
    recompute: Dict[str, int]
