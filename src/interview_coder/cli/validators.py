#!/usr/bin/env python3
"""
Validators for Interview Coder CLI

This module provides Typer callbacks that validate CLI inputs: image files,
problem context files, languages, log levels and view modes.

This module is part of the Presentation Layer and should only depend on
Core Layer components, not on Integration Layer.

Sample input:
- CLI parameter values

Expected output:
- Validated and processed parameter values
- Friendly error messages
"""

import os
import json
from typing import Any, Dict, List, Optional

import typer
from loguru import logger

from interview_coder.core.constants import IMAGE_MIME_TYPES, SUPPORTED_LANGUAGES
from interview_coder.core.session import View
from interview_coder.cli.formatters import print_error, print_warning

LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


def validate_file_exists(ctx: typer.Context, value: str) -> str:
    """
    Typer callback for validating a file exists.

    Args:
        ctx: Typer context
        value: File path from CLI

    Returns:
        str: Validated file path
    """
    if not os.path.exists(value):
        print_error(f"File not found: {value}")
        raise typer.Exit(1)

    if not os.path.isfile(value):
        print_error(f"Not a file: {value}")
        raise typer.Exit(1)

    return value


def validate_image_files(ctx: typer.Context, values: Optional[List[str]]) -> List[str]:
    """
    Typer callback for validating screenshot image arguments.

    Args:
        ctx: Typer context
        values: Image paths from CLI

    Returns:
        List[str]: Validated image paths
    """
    images = []
    for value in values or []:
        validate_file_exists(ctx, value)
        extension = os.path.splitext(value)[1].lstrip(".").lower()
        if extension not in IMAGE_MIME_TYPES:
            print_error(
                f"Unsupported image type: {value}. "
                f"Expected one of {', '.join(sorted(IMAGE_MIME_TYPES))}."
            )
            raise typer.Exit(1)
        images.append(value)
    return images


def validate_language_option(ctx: typer.Context, value: Optional[str]) -> Optional[str]:
    """
    Typer callback for validating the solution language.

    Args:
        ctx: Typer context
        value: Language from CLI

    Returns:
        Optional[str]: Lower-cased language
    """
    if value is None:
        return None

    language = value.strip().lower()
    if language not in SUPPORTED_LANGUAGES:
        print_warning(
            f"Language '{value}' is not in the list of known languages "
            f"({', '.join(SUPPORTED_LANGUAGES)}). The model may still handle it."
        )
    return language


def validate_problem_file(ctx: typer.Context, value: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Typer callback that loads a problem context JSON file.

    Args:
        ctx: Typer context
        value: Path to a JSON file

    Returns:
        Optional[Dict[str, Any]]: Parsed problem context
    """
    if value is None:
        return None

    validate_file_exists(ctx, value)
    try:
        with open(value, "r") as f:
            problem_info = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Problem file error: {str(e)}")
        print_error(f"Invalid problem file: {value}. Error: {str(e)}")
        raise typer.Exit(1)

    if not isinstance(problem_info, dict):
        print_error(f"Problem file must contain a JSON object: {value}")
        raise typer.Exit(1)
    return problem_info


def validate_log_level(ctx: typer.Context, value: str) -> str:
    """
    Typer callback for validating the log level.

    Args:
        ctx: Typer context
        value: Log level from CLI

    Returns:
        str: Upper-cased log level
    """
    level = value.upper()
    if level not in LOG_LEVELS:
        print_error(f"Invalid log level: {value}. Must be one of {', '.join(LOG_LEVELS)}.")
        raise typer.Exit(1)
    return level


def parse_view(value: str) -> Optional[View]:
    """Parse a view name, returning None when it is not a known view."""
    try:
        return View(value.strip().lower())
    except ValueError:
        return None


def validate_json_output(ctx: typer.Context, value: bool) -> bool:
    """
    Typer callback for validating JSON output option.

    Args:
        ctx: Typer context
        value: JSON output flag from CLI

    Returns:
        bool: Validated JSON output flag
    """
    # Store in context for other callbacks to access
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = value
    return value
