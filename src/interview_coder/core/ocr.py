#!/usr/bin/env python3
"""
OCR Engine for Interview Coder

This module extracts text from screenshots with Tesseract (via pytesseract).
Images are preprocessed first (downscale to at most 1200 px height, grayscale,
autocontrast, sharpen); if preprocessing fails the decoded original is used.

Batches are processed sequentially. A failing image degrades to empty text so
one bad screenshot does not sink the batch; a batch in which no image yields
meaningful text (more than OCR_MIN_TEXT_LENGTH characters) is an error.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Third-Party Package Documentation:
- pytesseract: https://github.com/madmaze/pytesseract

Sample input:
- await engine.extract_batch(["data:image/png;base64,iVBOR..."])

Expected output:
- OcrBatchResult(texts=["Given an array of integers nums..."], failures=[])
"""

import asyncio
from typing import List, Optional, Union

import pytesseract
from PIL import Image
from loguru import logger
from pydantic import BaseModel, Field

from interview_coder.core.constants import DEFAULT_OCR_LANG, OCR_MIN_TEXT_LENGTH
from interview_coder.core.errors import NoReadableTextError, OcrError
from interview_coder.core.image_processing import decode_data_uri, preprocess_for_ocr
from interview_coder.core.session import CancellationToken
from interview_coder.core.utils import truncate_large_value

ImageInput = Union[str, bytes, Image.Image]


class OcrFailure(BaseModel):
    """An image whose text extraction failed"""

    index: int
    reason: str


class OcrBatchResult(BaseModel):
    """Per-image texts (in input order) plus the failures that produced empty text"""

    texts: List[str] = Field(default_factory=list)
    failures: List[OcrFailure] = Field(default_factory=list)

    def meaningful_texts(self, min_length: int = OCR_MIN_TEXT_LENGTH) -> List[str]:
        return [text for text in self.texts if len(text.strip()) > min_length]


class OcrEngine:
    """Tesseract-backed text extraction"""

    def __init__(
        self,
        lang: str = DEFAULT_OCR_LANG,
        tesseract_cmd: Optional[str] = None,
        min_text_length: int = OCR_MIN_TEXT_LENGTH
    ):
        self.lang = lang
        self.min_text_length = min_text_length
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def is_available(self) -> bool:
        """Check whether the tesseract binary can be run."""
        try:
            version = pytesseract.get_tesseract_version()
        except (pytesseract.TesseractNotFoundError, OSError) as e:
            logger.warning(f"Tesseract is not available: {str(e)}")
            return False
        logger.debug(f"Tesseract version {version}")
        return True

    def extract_text(self, image: ImageInput) -> str:
        """
        Extract text from one image.

        Args:
            image: Data URI, bare base64 string, raw bytes or PIL image

        Returns:
            str: Stripped text (possibly empty)

        Raises:
            OcrError: If the image cannot be decoded or Tesseract fails
        """
        try:
            raw = decode_data_uri(image) if isinstance(image, str) else image
            processed = preprocess_for_ocr(raw)
            text = pytesseract.image_to_string(processed, lang=self.lang)
        except pytesseract.TesseractNotFoundError as e:
            raise OcrError(
                "Tesseract OCR is not installed",
                technical=str(e),
                suggestion="Install tesseract or set TESSERACT_CMD"
            ) from e
        except (pytesseract.TesseractError, OSError, ValueError) as e:
            raise OcrError(technical=str(e)) from e

        text = text.strip()
        logger.debug(f"OCR extracted {len(text)} chars: {truncate_large_value(text)}")
        return text

    async def extract_batch(
        self,
        images: List[ImageInput],
        cancel_token: Optional[CancellationToken] = None
    ) -> OcrBatchResult:
        """
        Extract text from each image in order, one at a time.

        Args:
            images: Images to process
            cancel_token: Checked before each image

        Returns:
            OcrBatchResult: One text per input image; failed images map to ""
        """
        logger.info(f"Processing {len(images)} images with OCR")
        result = OcrBatchResult()

        for index, image in enumerate(images):
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()
            try:
                text = await asyncio.to_thread(self.extract_text, image)
            except OcrError as e:
                logger.error(f"OCR failed for image {index + 1}: {e.technical or e.message}")
                result.failures.append(OcrFailure(index=index, reason=e.technical or e.message))
                text = ""
            result.texts.append(text)

        logger.info(f"OCR completed: {len(images) - len(result.failures)}/{len(images)} images succeeded")
        return result

    def combine_texts(self, texts: List[str]) -> str:
        """
        Join meaningful texts under per-image headers.

        Args:
            texts: Texts in image order

        Returns:
            str: Combined text

        Raises:
            NoReadableTextError: If no text exceeds the minimum length
        """
        sections = [
            f"--- Image {index + 1} ---\n{text.strip()}"
            for index, text in enumerate(texts)
            if len(text.strip()) > self.min_text_length
        ]
        if not sections:
            raise NoReadableTextError()
        return "\n\n".join(sections)

    async def extract_combined(
        self,
        images: List[ImageInput],
        cancel_token: Optional[CancellationToken] = None
    ) -> str:
        """OCR a batch and combine the readable results."""
        batch = await self.extract_batch(images, cancel_token=cancel_token)
        return self.combine_texts(batch.texts)
