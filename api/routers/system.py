"""
System API Router - Status and configuration
"""

import logging
import time

import psutil
from fastapi import APIRouter, Depends

from api.dependencies import get_config, get_transform_service
from api.exceptions import safe_endpoint
from api.models import SystemStatus

logger = logging.getLogger(__name__)

router = APIRouter()

# Track start time
START_TIME = time.time()


@router.get("/status")
@safe_endpoint
async def get_status(transform_service=Depends(get_transform_service)) -> SystemStatus:
    """Get system status"""
    # Get memory usage
    process = psutil.Process()
    memory_info = process.memory_info()

    # Get system memory
    virtual_memory = psutil.virtual_memory()

    return SystemStatus(
        status="healthy",
        uptime=time.time() - START_TIME,
        memory_usage={
            "process_mb": memory_info.rss / 1024 / 1024,
            "system_percent": virtual_memory.percent,
            "available_mb": virtual_memory.available / 1024 / 1024,
        },
        stage_count=len(transform_service.pipeline),
        recompute=transform_service.scheduler.get_statistics(),
    )


@router.post("/debug/{enable}")
@safe_endpoint
async def set_debug_mode(enable: bool) -> dict:
    """Enable or disable verbose logging"""
    log_level = logging.DEBUG if enable else logging.INFO
    logging.getLogger().setLevel(log_level)

    logger.info(f"Debug mode {'enabled' if enable else 'disabled'}")

    return {"enabled": enable, "log_level": logging.getLevelName(log_level)}


@router.get("/config")
@safe_endpoint
async def read_config(config=Depends(get_config)) -> dict:
    """Get current configuration"""
    return config
