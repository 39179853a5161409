#!/usr/bin/env python3
"""
Constants for Interview Coder

This module defines fixed values used throughout the core layer: queue
capacity, backend request settings, and the names of the notifications the
processing coordinator emits.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- None (module contains only constants)

Expected output:
- None (module contains only constants)
"""

from typing import Dict, Any, List

# Queue settings
MAX_SCREENSHOTS: int = 10  # Capacity of each screenshot queue
SCREENSHOT_EXTENSION: str = "png"
MAIN_SCREENSHOT_DIRNAME: str = "screenshots"
EXTRA_SCREENSHOT_DIRNAME: str = "extra_screenshots"

# Capture settings
CAPTURE_BACKENDS: List[str] = ["auto", "screencapture", "powershell", "mss"]
HIDE_WINDOW_DELAY: float = 0.1  # Seconds to wait after hiding the window
SHOW_WINDOW_DELAY: float = 0.05  # Seconds to wait before showing it again

# MIME types for preview payloads, keyed by file extension
IMAGE_MIME_TYPES: Dict[str, str] = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
}

# Text-generation backend
DEFAULT_GEMINI_API_URL: str = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "gemini-1.5-flash-latest:generateContent"
)
API_KEY_ENV_VARS: List[str] = [
    "GEMINI_API_KEY",
    "GEMINI_API_KEY1",
    "GEMINI_API_KEY2",
    "GEMINI_API_KEY3",
    "GEMINI_API_KEY4",
    "GEMINI_API_KEY5",
]
REQUEST_TIMEOUT_SECONDS: float = 300.0
GENERATION_CONFIG: Dict[str, Any] = {
    "temperature": 0.2,
    "maxOutputTokens": 4000,
    "topP": 0.8,
    "topK": 40,
    "candidateCount": 1,
    "stopSequences": [],
}
QUOTA_STATUS_CODES: List[int] = [403, 429]
QUOTA_MARKERS: List[str] = ["quota", "rate limit"]

# OCR settings
OCR_MAX_HEIGHT: int = 1200  # Preprocessed images are scaled down to this height
OCR_MIN_TEXT_LENGTH: int = 10  # Shorter extractions are not considered meaningful
DEFAULT_OCR_LANG: str = "eng"

# Solution defaults
DEFAULT_LANGUAGE: str = "cpp"
SUPPORTED_LANGUAGES: List[str] = [
    "cpp", "python", "java", "javascript", "csharp", "go", "rust", "kotlin", "swift"
]

# Logging settings
LOG_MAX_STR_LEN: int = 100  # Maximum string length for truncated logging


if __name__ == "__main__":
    """Validate module constants"""
    import sys

    all_validation_failures = []
    total_tests = 0

    # Test 1: Queue capacity is positive
    total_tests += 1
    if MAX_SCREENSHOTS <= 0:
        all_validation_failures.append(f"MAX_SCREENSHOTS should be positive, got {MAX_SCREENSHOTS}")

    # Test 2: Generation config has the keys the backend expects
    total_tests += 1
    required_keys = ["temperature", "maxOutputTokens", "topP", "topK", "candidateCount"]
    missing_keys = [key for key in required_keys if key not in GENERATION_CONFIG]
    if missing_keys:
        all_validation_failures.append(f"GENERATION_CONFIG missing keys: {missing_keys}")

    # Test 3: Default language is supported
    total_tests += 1
    if DEFAULT_LANGUAGE not in SUPPORTED_LANGUAGES:
        all_validation_failures.append(f"DEFAULT_LANGUAGE {DEFAULT_LANGUAGE} is not supported")

    # Test 4: Screenshot extension has a MIME type
    total_tests += 1
    if SCREENSHOT_EXTENSION not in IMAGE_MIME_TYPES:
        all_validation_failures.append(f"No MIME type for {SCREENSHOT_EXTENSION}")

    if all_validation_failures:
        print(f"❌ VALIDATION FAILED - {len(all_validation_failures)} of {total_tests} tests failed:")
        for failure in all_validation_failures:
            print(f"  - {failure}")
        sys.exit(1)
    else:
        print(f"✅ VALIDATION PASSED - All {total_tests} tests produced expected results")
        print("Constants are valid and ready for use")
        sys.exit(0)
