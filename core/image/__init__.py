"""
Image adapter utilities.

- converters: decode encoded images into PixelBuffers and encode results as PNG
"""

from core.image.converters import ImageConverters

__all__ = ["ImageConverters"]
