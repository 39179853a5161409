"""
Configuration Module for Interview Coder.

Description:
Centralizes environment-driven settings: Gemini API keys and endpoint,
screenshot storage directories, capture backend selection, OCR options and
logging. Values are loaded from environment variables, optionally populated
from a .env file.

Third-Party Package Documentation:
- python-dotenv: https://github.com/theskumar/python-dotenv

Sample Input:
Environment variables (e.g., in .env file or exported):
GEMINI_API_KEY="AIza..."
GEMINI_API_KEY1="AIza..."
INTERVIEW_CODER_DATA_DIR="~/.interview_coder"
INTERVIEW_CODER_CAPTURE_BACKEND="auto"
INTERVIEW_CODER_LANGUAGE="python"

Expected Output (when imported):
Configuration variables are available for use by other modules.
e.g.,
from interview_coder.core.config import GEMINI_API_URL
print(GEMINI_API_URL)
"""

import os
from typing import List, Mapping, Optional

from dotenv import load_dotenv

from interview_coder.core.constants import (
    API_KEY_ENV_VARS,
    DEFAULT_GEMINI_API_URL,
    DEFAULT_LANGUAGE,
    DEFAULT_OCR_LANG,
    EXTRA_SCREENSHOT_DIRNAME,
    MAIN_SCREENSHOT_DIRNAME,
    REQUEST_TIMEOUT_SECONDS,
)

# Load environment variables from .env file if it exists
load_dotenv()

# --- Backend Configuration ---
GEMINI_API_URL: str = os.environ.get("GEMINI_API_URL", DEFAULT_GEMINI_API_URL)
REQUEST_TIMEOUT: float = float(
    os.environ.get("INTERVIEW_CODER_REQUEST_TIMEOUT", REQUEST_TIMEOUT_SECONDS)
)

# --- Storage Configuration ---
DATA_DIR: str = os.path.expanduser(
    os.environ.get("INTERVIEW_CODER_DATA_DIR", "~/.interview_coder")
)

# --- Capture Configuration ---
CAPTURE_BACKEND: str = os.environ.get("INTERVIEW_CODER_CAPTURE_BACKEND", "auto")

# --- OCR Configuration ---
TESSERACT_CMD: Optional[str] = os.environ.get("TESSERACT_CMD")
OCR_LANG: str = os.environ.get("INTERVIEW_CODER_OCR_LANG", DEFAULT_OCR_LANG)

# --- Solution Configuration ---
LANGUAGE: str = os.environ.get("INTERVIEW_CODER_LANGUAGE", DEFAULT_LANGUAGE)

# --- Logging Configuration ---
LOG_LEVEL: str = os.environ.get("INTERVIEW_CODER_LOG_LEVEL", "INFO")
LOG_FILE: str = os.environ.get("INTERVIEW_CODER_LOG_FILE", "logs/interview_coder.log")


def get_api_keys(environ: Optional[Mapping[str, str]] = None) -> List[str]:
    """
    Collect the configured Gemini API keys in priority order.

    Keys are read at call time so a .env change or a patched environment is
    picked up. Unset variables are skipped; blank values are kept here and
    filtered by the credential pool.

    Args:
        environ: Mapping to read from, defaults to os.environ

    Returns:
        List[str]: Raw key values in GEMINI_API_KEY, GEMINI_API_KEY1.. order
    """
    environ = os.environ if environ is None else environ
    return [environ[name] for name in API_KEY_ENV_VARS if name in environ]


def get_screenshot_dirs(data_dir: Optional[str] = None) -> List[str]:
    """
    Resolve the main and extra screenshot directories.

    Args:
        data_dir: Base directory, defaults to DATA_DIR

    Returns:
        List[str]: [main_dir, extra_dir]
    """
    base = os.path.expanduser(data_dir or DATA_DIR)
    return [
        os.path.join(base, MAIN_SCREENSHOT_DIRNAME),
        os.path.join(base, EXTRA_SCREENSHOT_DIRNAME),
    ]


def get_temp_dir(data_dir: Optional[str] = None) -> str:
    """Directory for the capture utility's intermediate files."""
    base = os.path.expanduser(data_dir or DATA_DIR)
    return os.path.join(base, "tmp")
