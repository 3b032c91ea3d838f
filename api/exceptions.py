"""
API exceptions and exception handlers.

Engine errors (core.exceptions) are mapped to HTTP status codes here so the
engine itself stays free of HTTP concerns.
"""

import functools
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from core.exceptions import (
    InvalidBufferError,
    PixelTransformError,
    ResourceExhausted,
    ValidationError,
)

logger = logging.getLogger(__name__)


class APIException(Exception):
    """Base class for API-level errors with a status code."""

    status_code = 500

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class NoImageLoadedException(APIException):
    """Raised when a workspace operation needs a source image and none is loaded."""

    status_code = 404

    def __init__(self):
        super().__init__("No source image loaded in the workspace")


class StageIndexException(APIException):
    """Raised when a stage index does not exist."""

    status_code = 404

    def __init__(self, index: int, stage_count: int):
        self.index = index
        self.stage_count = stage_count
        super().__init__(f"Stage {index} not found (pipeline has {stage_count} stage(s))")


ENGINE_STATUS_CODES = {
    InvalidBufferError: 400,
    ValidationError: 400,
    ResourceExhausted: 507,
}


def _engine_status(exc: PixelTransformError) -> int:
    for exc_type, status_code in ENGINE_STATUS_CODES.items():
        if isinstance(exc, exc_type):
            return status_code
    return 500


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers for API and engine exceptions."""

    @app.exception_handler(APIException)
    async def api_exception_handler(request: Request, exc: APIException):
        logger.warning(f"{request.method} {request.url.path}: {exc.detail}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(PixelTransformError)
    async def engine_exception_handler(request: Request, exc: PixelTransformError):
        status_code = _engine_status(exc)
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path}: {exc}")
        else:
            logger.warning(f"{request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=status_code, content={"error": str(exc)})


def safe_endpoint(func):
    """
    Decorator for endpoints: known errors pass through to the registered
    handlers, anything else is logged and turned into a 500.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except (HTTPException, APIException, PixelTransformError):
            raise
        except Exception as e:
            logger.error(f"Unhandled error in {func.__name__}: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")

    return wrapper
