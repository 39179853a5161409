#!/usr/bin/env python3
"""
Schema Definitions for CLI Module

This module provides the pydantic response models used for machine-readable
(--json) CLI output and the helper that formats every command's result into
them.

This module is part of the Presentation Layer and should only depend on
Core Layer components, not on Integration Layer.

Third-party package documentation:
- Pydantic: https://docs.pydantic.dev/

Sample input:
- format_cli_response(True, data={"path": "/tmp/a.png"})
- format_cli_response(False, error="No Gemini API keys available",
                      details={"suggestion": "Set GEMINI_API_KEY"})

Expected output:
- {"success": True, "data": {"path": "/tmp/a.png"}}
- {"success": False, "error": "No Gemini API keys available",
   "details": {"suggestion": "Set GEMINI_API_KEY"}}
"""

from typing import Dict, List, Any, Optional, Tuple, Type

from pydantic import BaseModel, Field, ValidationError


# Response structure models
class ErrorResponse(BaseModel):
    """Error response model"""
    success: bool = False
    error: str
    details: Optional[Dict[str, Any]] = None


class SuccessResponse(BaseModel):
    """Success response model"""
    success: bool = True
    data: Dict[str, Any]


class SolutionOutput(BaseModel):
    """Shape of a solve result"""
    code: str
    thoughts: List[str] = Field(default_factory=list)
    time_complexity: str
    space_complexity: str
    approach: str = ""
    language: str
    problem_info: Optional[Dict[str, Any]] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class DebugOutput(BaseModel):
    """Shape of a debug result"""
    new_code: str
    thoughts: List[str] = Field(default_factory=list)
    time_complexity: str
    space_complexity: str
    debug_notes: str = ""
    language: str
    metadata: Dict[str, Any] = Field(default_factory=dict)


# Response formatting functions
def format_cli_response(
    success: bool,
    data: Optional[Dict[str, Any]] = None,
    error: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Format a standardized CLI response.

    Args:
        success: Whether the operation was successful
        data: Response data (for successful operations)
        error: Error message (for failed operations)
        details: Extra error fields such as technical detail and suggestion

    Returns:
        Dict[str, Any]: Formatted response
    """
    if success and data is not None:
        return SuccessResponse(data=data).model_dump()
    elif not success and error is not None:
        response = ErrorResponse(error=error, details=details).model_dump()
        if response.get('details') is None:
            del response['details']
        return response
    else:
        return {"success": success}


def validate_output_against_schema(output: Dict[str, Any], schema_model: Type[BaseModel]) -> Tuple[bool, Optional[str]]:
    """
    Validate output against a schema model.

    Args:
        output: Output data to validate
        schema_model: Pydantic model to validate against

    Returns:
        Tuple[bool, Optional[str]]: (is_valid, error_message)
    """
    try:
        schema_model(**output)
        return True, None
    except (ValidationError, TypeError) as e:
        return False, str(e)
