#!/usr/bin/env python3
"""
Backend Response Parsing

This module turns the free-form text returned by the language model into the
solution and debug shapes exposed by the solution service. The model is asked
for JSON but frequently wraps it in code fences, surrounds it with prose or
leaves trailing commas, so parsing tries progressively looser strategies.

Alternate field names are resolved in exactly one place, by precedence:

Solution: code <- solution | code
          thoughts <- explanation | thoughts
          time_complexity <- timeComplexity | time_complexity
          space_complexity <- spaceComplexity | space_complexity
Debug:    new_code <- improvedSolution | new_code | code | solution
          thoughts <- improvements | thoughts
          time_complexity <- performanceGains | time_complexity
          space_complexity <- spaceComplexity | space_complexity
          debug_notes <- debugNotes | debug_notes

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- '```json\\n{"solution": "print(1)", "timeComplexity": "O(1)",}\\n```'

Expected output:
- SolutionResponse(code="print(1)", time_complexity="O(1)", ...)
"""

import re
import json
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, Field

from interview_coder.core.errors import MalformedBackendResponse
from interview_coder.core.utils import truncate_large_value

CODE_FENCE_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)
JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")
TRAILING_COMMA_PATTERN = re.compile(r",(\s*[}\]])")
CODE_BLOCK_PATTERN = re.compile(r"```[a-zA-Z0-9+#]*\n([\s\S]*?)```")

NOT_SPECIFIED = "Not specified"


class SolutionResponse(BaseModel):
    """Generated solution for a problem"""

    code: str = ""
    thoughts: List[str] = Field(default_factory=list)
    time_complexity: str = NOT_SPECIFIED
    space_complexity: str = NOT_SPECIFIED
    approach: str = ""
    language: str = ""


class DebugResponse(BaseModel):
    """Improved solution produced by a debug pass"""

    new_code: str = ""
    thoughts: List[str] = Field(default_factory=list)
    time_complexity: str = NOT_SPECIFIED
    space_complexity: str = NOT_SPECIFIED
    debug_notes: str = ""
    language: str = ""


def _loads_object(text: str) -> Optional[Dict[str, Any]]:
    try:
        value = json.loads(text)
    except ValueError:
        return None
    return value if isinstance(value, dict) else None


def parse_json_payload(text: str) -> Optional[Dict[str, Any]]:
    """
    Parse a JSON object out of model output.

    Tries, in order: the raw text, the content of a code fence, the outermost
    brace-delimited span, and that span with trailing commas removed.

    Args:
        text: Raw model output

    Returns:
        Optional[Dict[str, Any]]: Parsed object, or None if every strategy failed
    """
    if not text:
        return None

    candidates = [text.strip()]

    fence = CODE_FENCE_PATTERN.search(text)
    if fence:
        candidates.append(fence.group(1))

    embedded = JSON_OBJECT_PATTERN.search(text)
    if embedded:
        candidates.append(embedded.group(0))
        candidates.append(TRAILING_COMMA_PATTERN.sub(r"\1", embedded.group(0)))

    for candidate in candidates:
        parsed = _loads_object(candidate)
        if parsed is not None:
            return parsed

    logger.warning(f"Could not parse JSON from response: {truncate_large_value(text)}")
    return None


def first_present(raw: Dict[str, Any], *names: str, default: Any = None) -> Any:
    """Value of the first name present with a non-empty value."""
    for name in names:
        value = raw.get(name)
        if value not in (None, "", []):
            return value
    return default


def _as_lines(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [str(item).strip() for item in value if str(item).strip()]
    return [line.strip() for line in str(value).splitlines() if line.strip()]


def _as_text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, list):
        return "\n".join(str(item) for item in value)
    return str(value)


def resolve_solution(raw: Dict[str, Any], language: str) -> SolutionResponse:
    """
    Map a parsed backend object onto the solution shape.

    Args:
        raw: Parsed backend object
        language: Language requested by the caller

    Returns:
        SolutionResponse: Normalized solution
    """
    return SolutionResponse(
        code=_as_text(first_present(raw, "solution", "code")),
        thoughts=_as_lines(first_present(raw, "explanation", "thoughts")),
        time_complexity=_as_text(first_present(raw, "timeComplexity", "time_complexity"), NOT_SPECIFIED),
        space_complexity=_as_text(first_present(raw, "spaceComplexity", "space_complexity"), NOT_SPECIFIED),
        approach=_as_text(first_present(raw, "approach")),
        language=_as_text(first_present(raw, "language"), language),
    )


def resolve_debug(raw: Dict[str, Any], language: str) -> DebugResponse:
    """
    Map a parsed backend object onto the debug shape.

    Args:
        raw: Parsed backend object
        language: Language requested by the caller

    Returns:
        DebugResponse: Normalized debug result
    """
    return DebugResponse(
        new_code=_as_text(first_present(raw, "improvedSolution", "new_code", "code", "solution")),
        thoughts=_as_lines(first_present(raw, "improvements", "thoughts")),
        time_complexity=_as_text(first_present(raw, "performanceGains", "time_complexity"), NOT_SPECIFIED),
        space_complexity=_as_text(first_present(raw, "spaceComplexity", "space_complexity"), NOT_SPECIFIED),
        debug_notes=_as_text(first_present(raw, "debugNotes", "debug_notes")),
        language=_as_text(first_present(raw, "language"), language),
    )


def fallback_solution(text: str, language: str) -> SolutionResponse:
    """
    Build a solution from unstructured output: the first code block becomes
    the code, the full text becomes the explanation.
    """
    block = CODE_BLOCK_PATTERN.search(text)
    return SolutionResponse(
        code=block.group(1).strip() if block else text.strip(),
        thoughts=["Response was not structured; showing raw model output."],
        approach=text.strip(),
        language=language,
    )


def parse_solution(text: str, language: str) -> SolutionResponse:
    """
    Parse model output as a solution, falling back to raw text when it has no
    JSON object.
    """
    raw = parse_json_payload(text)
    if raw is None:
        logger.warning("Using unstructured fallback for solution response")
        return fallback_solution(text, language)
    return resolve_solution(raw, language)


def parse_debug(text: str, language: str) -> DebugResponse:
    """
    Parse model output as a debug result.

    Raises:
        MalformedBackendResponse: If no JSON object can be recovered
    """
    raw = parse_json_payload(text)
    if raw is None:
        raise MalformedBackendResponse(
            "Failed to parse debug response from Gemini API",
            technical=truncate_large_value(text)
        )
    return resolve_debug(raw, language)
