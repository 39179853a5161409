#!/usr/bin/env python3
"""
Solution Service

In-process service boundary between the processing coordinator and the
language-model backend. It accepts either text or screenshot payloads, runs
OCR on screenshots, builds the prompt, sends it through the request
orchestrator and normalizes the reply.

Result shapes:

generate -> {code, thoughts, time_complexity, space_complexity, approach,
             language, problem_info, metadata}
debug    -> {new_code, thoughts, time_complexity, space_complexity,
             debug_notes, language, metadata}
health   -> {status, timestamp, services: {gemini, ocr}}

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- await service.generate(text_list=["Given an array nums, return two indices..."], language="python")

Expected output:
- {"code": "def two_sum(...)...", "thoughts": [...], "time_complexity": "O(n)", ...}
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from loguru import logger

from interview_coder.core.constants import DEFAULT_LANGUAGE
from interview_coder.core.errors import InvalidInputError
from interview_coder.core.ocr import OcrEngine
from interview_coder.core.orchestrator import RequestOrchestrator
from interview_coder.core.prompts import build_debug_prompt, build_solution_prompt
from interview_coder.core.responses import parse_debug, parse_solution
from interview_coder.core.session import CancellationToken
from interview_coder.core.utils import truncate_large_value

SERVICE_NAME = "Gemini"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _clean_texts(text_list: Optional[List[str]]) -> List[str]:
    return [text.strip() for text in (text_list or []) if text and text.strip()]


class SolutionService:
    """OCR + prompt + backend call + response normalization"""

    def __init__(
        self,
        orchestrator: RequestOrchestrator,
        ocr_engine: OcrEngine,
        default_language: str = DEFAULT_LANGUAGE
    ):
        self.orchestrator = orchestrator
        self.ocr_engine = ocr_engine
        self.default_language = default_language

    async def _collect_text(
        self,
        text_list: Optional[List[str]],
        image_data_list: Optional[List[str]],
        cancel_token: Optional[CancellationToken]
    ) -> str:
        """
        Turn the request input into one block of text. Images win over text
        when both are given.

        Raises:
            InvalidInputError: If neither input carries anything usable
            NoReadableTextError: If OCR finds nothing meaningful
        """
        if image_data_list:
            logger.info(f"Received {len(image_data_list)} images for OCR processing")
            combined = await self.ocr_engine.extract_combined(image_data_list, cancel_token=cancel_token)
            logger.info(f"OCR extraction produced {len(combined)} chars")
            return combined

        texts = _clean_texts(text_list)
        if texts:
            return "\n\n".join(texts)

        if text_list:
            raise InvalidInputError(
                "No valid text extracted",
                suggestion="Please provide clearer images or direct text input"
            )
        raise InvalidInputError()

    async def generate(
        self,
        text_list: Optional[List[str]] = None,
        image_data_list: Optional[List[str]] = None,
        language: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None
    ) -> Dict[str, Any]:
        """
        Generate a solution from problem text or screenshots.

        Args:
            text_list: Problem text fragments
            image_data_list: Screenshot data URIs
            language: Target language, defaults to the service default
            cancel_token: Cancellation handle for the run

        Returns:
            Dict[str, Any]: Solution fields plus problem_info and metadata

        Raises:
            InvalidInputError: If no usable input was provided
            NoReadableTextError: If OCR found no readable text
            NoCredentialsConfigured, AllCredentialsExhausted: Backend failures
        """
        language = language or self.default_language
        problem_text = await self._collect_text(text_list, image_data_list, cancel_token)
        logger.info(f"Generating {language} solution from {len(problem_text)} chars of input")
        logger.debug(f"Problem text: {truncate_large_value(problem_text)}")

        reply = await self.orchestrator.send(
            build_solution_prompt(problem_text, language),
            operation="generate",
            cancel_token=cancel_token
        )
        solution = parse_solution(reply, language)

        result = solution.model_dump()
        result["problem_info"] = {"problem_statement": problem_text, "language": language}
        result["metadata"] = {
            "language": language,
            "service": SERVICE_NAME,
            "ocr_used": bool(image_data_list),
            "timestamp": _timestamp(),
        }
        return result

    async def debug(
        self,
        image_data_list: Optional[List[str]] = None,
        problem_info: Optional[Dict[str, Any]] = None,
        language: Optional[str] = None,
        text_list: Optional[List[str]] = None,
        cancel_token: Optional[CancellationToken] = None
    ) -> Dict[str, Any]:
        """
        Improve a previous solution using screenshots of code, output or errors.

        Args:
            image_data_list: Debug screenshot data URIs
            problem_info: Context from the last successful generate
            language: Target language
            text_list: Debug text fragments, used when no images are given
            cancel_token: Cancellation handle for the run

        Returns:
            Dict[str, Any]: Debug fields plus metadata

        Raises:
            InvalidInputError: If input or problem context is missing
            MalformedBackendResponse: If the reply carries no JSON object
        """
        if not problem_info:
            raise InvalidInputError(
                "No problem info available",
                suggestion="Generate a solution before debugging it"
            )

        language = language or problem_info.get("language") or self.default_language
        debug_text = await self._collect_text(text_list, image_data_list, cancel_token)
        logger.info(f"Debugging {language} solution with {len(debug_text)} chars of input")

        reply = await self.orchestrator.send(
            build_debug_prompt(debug_text, problem_info, language),
            operation="debug",
            cancel_token=cancel_token
        )
        debug_result = parse_debug(reply, language)

        result = debug_result.model_dump()
        result["metadata"] = {
            "language": language,
            "service": SERVICE_NAME,
            "ocr_used": bool(image_data_list),
            "timestamp": _timestamp(),
        }
        return result

    def health(self) -> Dict[str, Any]:
        """
        Report backend and OCR availability.

        Returns:
            Dict[str, Any]: {"status", "timestamp", "services": {"gemini", "ocr"}}
        """
        gemini = self.orchestrator.pool.is_configured
        ocr = self.ocr_engine.is_available()
        return {
            "status": "healthy" if gemini and ocr else "degraded",
            "timestamp": _timestamp(),
            "services": {
                "gemini": gemini,
                "ocr": ocr,
            },
        }
