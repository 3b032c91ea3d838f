"""
Shared FastAPI dependencies for the Pixel Transform Flow system.
"""

import logging
from typing import Any, Dict

from fastapi import HTTPException, Request

from services.transform_service import TransformService

logger = logging.getLogger(__name__)


def get_transform_service(request: Request) -> TransformService:
    """
    Get the TransformService instance from app state.

    Args:
        request: FastAPI request object

    Returns:
        TransformService instance

    Raises:
        HTTPException: If the service is not initialized
    """
    try:
        return request.app.state.transform_service
    except AttributeError as e:
        logger.error(f"Transform service not initialized in app state: {e}")
        raise HTTPException(
            status_code=500, detail="Internal server error: Transform service not initialized"
        )


def get_config(request: Request) -> Dict[str, Any]:
    """
    Get application configuration.

    Args:
        request: FastAPI request object

    Returns:
        Configuration dictionary
    """
    try:
        return request.app.state.config
    except AttributeError:
        logger.warning("Config not found in app state, using defaults")
        return {}
