"""
API Routers for Pixel Transform Flow
"""

from . import system, transform, workspace

__all__ = ["transform", "workspace", "system"]
