"""
Image format conversion utilities.

Adapter between encoded images and the engine's PixelBuffer:
- Encoded bytes / base64 (any Pillow-readable format) -> RGBA PixelBuffer
- PixelBuffer -> PNG bytes / base64
"""

import base64
import binascii
import io
import logging
from typing import Optional

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from core.buffer import PixelBuffer
from core.constants import ImageConstants
from core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class ImageConverters:
    """Utilities for converting between encoded images and pixel buffers."""

    @staticmethod
    def decode_to_buffer(image_bytes: bytes, max_pixels: Optional[int] = None) -> PixelBuffer:
        """
        Decode an encoded image into an RGBA PixelBuffer.

        Args:
            image_bytes: Encoded image (PNG, JPEG, ...)
            max_pixels: Reject images with more pixels than this

        Returns:
            PixelBuffer in RGBA order

        Raises:
            ValidationError: If the bytes are not a readable image or it is too large
        """
        try:
            image = Image.open(io.BytesIO(image_bytes))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            logger.error(f"Failed to decode image: {e}")
            raise ValidationError(f"Unreadable image data: {e}") from e

        limit = max_pixels or ImageConstants.DEFAULT_MAX_PIXELS
        if image.width * image.height > limit:
            raise ValidationError(
                f"Image {image.width}x{image.height} exceeds the {limit} pixel limit"
            )

        rgba = np.array(image.convert("RGBA"), dtype=np.uint8)
        return PixelBuffer.from_array(rgba)

    @staticmethod
    def from_base64(base64_string: str, max_pixels: Optional[int] = None) -> PixelBuffer:
        """
        Decode a base64 encoded image (optionally a data URL) into a PixelBuffer.

        Raises:
            ValidationError: If the string is not valid base64 image data
        """
        if base64_string.startswith("data:") and "," in base64_string:
            base64_string = base64_string.split(",", 1)[1]
        try:
            image_bytes = base64.b64decode(base64_string, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValidationError(f"Invalid base64 image data: {e}") from e
        return ImageConverters.decode_to_buffer(image_bytes, max_pixels=max_pixels)

    @staticmethod
    def encode_png(buffer: PixelBuffer) -> bytes:
        """
        Encode a PixelBuffer as PNG.

        Args:
            buffer: RGBA buffer

        Returns:
            PNG file bytes
        """
        bgra = cv2.cvtColor(buffer.to_array(), cv2.COLOR_RGBA2BGRA)
        success, encoded = cv2.imencode(ImageConstants.PNG_FORMAT, bgra)
        if not success:
            logger.error(f"Failed to encode {buffer.width}x{buffer.height} image as PNG")
            raise ValueError("PNG encoding failed")
        return encoded.tobytes()

    @staticmethod
    def to_base64(buffer: PixelBuffer) -> str:
        """Encode a PixelBuffer as a base64 PNG string."""
        return base64.b64encode(ImageConverters.encode_png(buffer)).decode("utf-8")
