#!/usr/bin/env python3
"""
Image Processing for Interview Coder

This module provides functions for encoding screenshots as data-URI payloads
and for preparing images for OCR (downscaling, grayscale, contrast
normalization and sharpening).

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- PNG bytes of a 2880x1800 screenshot

Expected output:
- "data:image/png;base64,iVBORw0..." payload
- Preprocessed grayscale PIL image (1920x1200)
"""

import io
import os
import re
import base64
import binascii
from typing import Union

from PIL import Image, ImageFilter, ImageOps
from loguru import logger

from interview_coder.core.constants import IMAGE_MIME_TYPES, OCR_MAX_HEIGHT

DATA_URI_PATTERN = re.compile(r"^data:image/[a-zA-Z0-9.+-]+;base64,")


def mime_type_for(path: str) -> str:
    """
    Guess the image MIME type from a file extension, defaulting to PNG.

    Args:
        path: File path or name

    Returns:
        str: MIME type
    """
    extension = os.path.splitext(path)[1].lstrip(".").lower()
    return IMAGE_MIME_TYPES.get(extension, "image/png")


def encode_data_uri(data: bytes, mime_type: str = "image/png") -> str:
    """
    Encode raw image bytes as a data URI.

    Args:
        data: Image bytes
        mime_type: MIME type for the prefix

    Returns:
        str: data:<mime>;base64,<payload>
    """
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('utf-8')}"


def decode_data_uri(payload: str) -> bytes:
    """
    Decode a data URI or a bare base64 string to bytes.

    Args:
        payload: "data:image/png;base64,..." or plain base64

    Returns:
        bytes: Decoded image bytes

    Raises:
        ValueError: If the payload is not valid base64
    """
    encoded = DATA_URI_PATTERN.sub("", payload.strip())
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 image payload: {str(e)}") from e


def ensure_data_uri(payload: str) -> str:
    """Prefix bare base64 image data with a PNG data-URI header."""
    if DATA_URI_PATTERN.match(payload):
        return payload
    return f"data:image/png;base64,{payload}"


def image_to_png_bytes(img: Image.Image) -> bytes:
    """
    Serialize a PIL image as PNG.

    Args:
        img: PIL Image object

    Returns:
        bytes: PNG bytes
    """
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def resize_to_max_height(img: Image.Image, max_height: int = OCR_MAX_HEIGHT) -> Image.Image:
    """
    Scales an image down to max_height, preserving aspect ratio. Smaller
    images are returned unchanged.

    Args:
        img: PIL Image object to resize
        max_height: Maximum height allowed

    Returns:
        PIL.Image: Resized image or original if no resize needed
    """
    width, height = img.size
    if height <= max_height:
        return img

    new_width = max(1, int(width * max_height / height))
    logger.debug(f"Resizing image from {width}x{height} to {new_width}x{max_height}")
    return img.resize((new_width, max_height), Image.LANCZOS)


def preprocess_for_ocr(image: Union[bytes, Image.Image]) -> Image.Image:
    """
    Enhance an image for text recognition: downscale, grayscale, stretch
    contrast and sharpen. If enhancement fails the decoded original is
    returned instead.

    Args:
        image: Image bytes or PIL Image

    Returns:
        PIL.Image: Image ready for OCR

    Raises:
        OSError: If the bytes cannot be decoded as an image at all
    """
    img = Image.open(io.BytesIO(image)) if isinstance(image, bytes) else image
    try:
        processed = resize_to_max_height(img)
        processed = ImageOps.grayscale(processed)
        processed = ImageOps.autocontrast(processed)
        return processed.filter(ImageFilter.SHARPEN)
    except (OSError, ValueError) as e:
        logger.warning(f"Image preprocessing failed, using original: {str(e)}")
        return img
