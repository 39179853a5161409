"""
Core Layer for Interview Coder

This package contains the core business logic: the bounded screenshot queues,
screen capture, OCR, the multi-key Gemini request orchestrator, response
normalization and the processing coordinator that ties them together.

The core layer is designed to be:
1. Independent of UI or integration concerns
2. Fully testable in isolation
3. Focused on business logic only

Usage:
    from interview_coder.core import build_runtime
    runtime = build_runtime()
    path = await runtime.capture.take_screenshot()
    result = await runtime.coordinator.process_screenshots()
"""

# Core constants and settings
from interview_coder.core.constants import (
    MAX_SCREENSHOTS,
    GENERATION_CONFIG,
    DEFAULT_LANGUAGE,
    SUPPORTED_LANGUAGES
)

# Errors
from interview_coder.core.errors import (
    InterviewCoderError,
    ScreenshotIOError,
    ScreenshotNotFoundError,
    CaptureError,
    NoCredentialsConfigured,
    AllCredentialsExhausted,
    BackendRequestError,
    MalformedBackendResponse,
    OcrError,
    NoReadableTextError,
    InvalidInputError,
    RequestTimeoutError,
    OperationCancelled
)

# State
from interview_coder.core.session import Session, View, CancellationToken

# Screenshot queues and capture
from interview_coder.core.store import ScreenshotStore, QueueSelector, BatchReadResult
from interview_coder.core.capture import CaptureDriver

# OCR
from interview_coder.core.ocr import OcrEngine, OcrBatchResult

# Backend
from interview_coder.core.credentials import CredentialPool
from interview_coder.core.orchestrator import RequestOrchestrator
from interview_coder.core.responses import resolve_solution, resolve_debug

# Processing
from interview_coder.core.solution_service import SolutionService
from interview_coder.core.events import EventChannel, ProcessingEvent
from interview_coder.core.coordinator import ProcessingCoordinator
from interview_coder.core.runtime import InterviewCoderRuntime, build_runtime

# Utility functions
from interview_coder.core.utils import configure_logging

__all__ = [
    # Constants
    'MAX_SCREENSHOTS',
    'GENERATION_CONFIG',
    'DEFAULT_LANGUAGE',
    'SUPPORTED_LANGUAGES',

    # Errors
    'InterviewCoderError',
    'ScreenshotIOError',
    'ScreenshotNotFoundError',
    'CaptureError',
    'NoCredentialsConfigured',
    'AllCredentialsExhausted',
    'BackendRequestError',
    'MalformedBackendResponse',
    'OcrError',
    'NoReadableTextError',
    'InvalidInputError',
    'RequestTimeoutError',
    'OperationCancelled',

    # State
    'Session',
    'View',
    'CancellationToken',

    # Queues and capture
    'ScreenshotStore',
    'QueueSelector',
    'BatchReadResult',
    'CaptureDriver',

    # OCR
    'OcrEngine',
    'OcrBatchResult',

    # Backend
    'CredentialPool',
    'RequestOrchestrator',
    'resolve_solution',
    'resolve_debug',

    # Processing
    'SolutionService',
    'EventChannel',
    'ProcessingEvent',
    'ProcessingCoordinator',
    'InterviewCoderRuntime',
    'build_runtime',

    # Utilities
    'configure_logging'
]
