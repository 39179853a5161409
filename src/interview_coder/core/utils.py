#!/usr/bin/env python3
"""
Utility Functions for Interview Coder

This module provides common utility functions used by other core modules.
It includes functions for file naming, error handling, file operations and
logging setup.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- Various utility function inputs

Expected output:
- Various utility function outputs
"""

import os
import sys
import uuid
from typing import Any, Optional, Tuple

from loguru import logger

from interview_coder.core.constants import LOG_MAX_STR_LEN, SCREENSHOT_EXTENSION


def generate_filename(extension: str = SCREENSHOT_EXTENSION) -> str:
    """
    Generates a unique filename.

    Args:
        extension: File extension without dot

    Returns:
        str: Generated filename
    """
    return f"{uuid.uuid4()}.{extension}"


def ensure_directory(directory: str) -> bool:
    """
    Ensures directory exists, creating it if necessary.

    Args:
        directory: Directory path

    Returns:
        bool: True if successful, False otherwise
    """
    try:
        os.makedirs(directory, exist_ok=True)
        return True
    except OSError as e:
        logger.error(f"Failed to create directory {directory}: {str(e)}")
        return False


def safe_file_operation(operation_name: str, func, *args, **kwargs) -> Tuple[bool, Optional[Any], Optional[str]]:
    """
    Safely execute a file operation with proper error handling.

    Args:
        operation_name: Name of the operation for error reporting
        func: Function to execute
        *args: Positional arguments for the function
        **kwargs: Keyword arguments for the function

    Returns:
        Tuple[bool, Optional[Any], Optional[str]]: (success, result, error_message)
    """
    try:
        result = func(*args, **kwargs)
        return True, result, None
    except FileNotFoundError as e:
        error = f"{operation_name} failed: File not found - {str(e)}"
        logger.error(error)
        return False, None, error
    except PermissionError as e:
        error = f"{operation_name} failed: Permission denied - {str(e)}"
        logger.error(error)
        return False, None, error
    except OSError as e:
        error = f"{operation_name} failed: I/O error - {str(e)}"
        logger.error(error)
        return False, None, error


def truncate_large_value(value: Any, max_str_len: int = LOG_MAX_STR_LEN) -> Any:
    """
    Truncates large string values for logging purposes.

    Args:
        value: The value to truncate
        max_str_len: Maximum string length to allow

    Returns:
        The value, truncated if it is a long string
    """
    if isinstance(value, str) and len(value) > max_str_len:
        return f"{value[:max_str_len]}... [truncated, {len(value)} chars total]"
    return value


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure logging with proper format and level.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional rotating log file path
    """
    logger.remove()

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            ensure_directory(log_dir)
        logger.add(
            log_file,
            rotation="10 MB",
            retention="1 week",
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"
        )

    logger.add(
        sys.stderr,
        format="<level>{level: <8}</level> | {message}",
        level=level,
        colorize=True
    )


if __name__ == "__main__":
    """Validate utility functions"""
    all_validation_failures = []
    total_tests = 0

    # Test 1: generate_filename
    total_tests += 1
    first, second = generate_filename(), generate_filename()
    if first == second or not first.endswith(".png"):
        all_validation_failures.append(f"generate_filename test: Invalid names {first}, {second}")


    # Test 2: safe_file_operation
    total_tests += 1
    success, result, error = safe_file_operation("file operation", open, "nonexistent_file.txt", "r")
    if success or result is not None or error is None:
        all_validation_failures.append("safe_file_operation test: Failed to handle error")

    # Test 3: truncate_large_value
    total_tests += 1
    if "truncated" not in truncate_large_value("x" * 500):
        all_validation_failures.append("truncate_large_value test: Long value not truncated")

    if all_validation_failures:
        print(f"❌ VALIDATION FAILED - {len(all_validation_failures)} of {total_tests} tests failed:")
        for failure in all_validation_failures:
            print(f"  - {failure}")
        sys.exit(1)
    else:
        print(f"✅ VALIDATION PASSED - All {total_tests} tests produced expected results")
        print("Utility functions are validated and ready for use")
        sys.exit(0)
