#!/usr/bin/env python3
"""
Error Types for Interview Coder

This module defines the exception hierarchy raised by the core layer. Every
error carries a human-readable message, an optional technical detail string
and an optional remediation suggestion, so whole-operation failures can be
reported to the user in a uniform shape.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- raise NoCredentialsConfigured()

Expected output:
- {"error": "No Gemini API keys available", "technical": None,
   "suggestion": "Set GEMINI_API_KEY, GEMINI_API_KEY1, GEMINI_API_KEY2, etc."}
"""

from typing import Any, Dict, Optional


class InterviewCoderError(Exception):
    """Base class for all core errors"""

    default_message: str = "Interview Coder operation failed"
    default_suggestion: Optional[str] = None

    def __init__(
        self,
        message: Optional[str] = None,
        technical: Optional[str] = None,
        suggestion: Optional[str] = None
    ):
        self.message = message or self.default_message
        self.technical = technical
        self.suggestion = suggestion or self.default_suggestion
        super().__init__(self.message)

    def to_notice(self) -> Dict[str, Any]:
        """
        Render the error for the UI event channel.

        Returns:
            Dict[str, Any]: error, technical and suggestion fields
        """
        return {
            "error": self.message,
            "technical": self.technical,
            "suggestion": self.suggestion,
        }


class ScreenshotIOError(InterviewCoderError, OSError):
    """File read/write/delete failure on a screenshot"""

    default_message = "Screenshot file operation failed"


class ScreenshotNotFoundError(ScreenshotIOError):
    """Screenshot is not queued or its file is already gone"""

    default_message = "Screenshot not found"


class CaptureError(InterviewCoderError):
    """Platform capture utility failed or produced no image"""

    default_message = "Screenshot capture failed"
    default_suggestion = "Check that screen recording permission is granted"


class CredentialError(InterviewCoderError):
    """Base class for credential pool failures"""

    default_suggestion = "Please try again later or check your Gemini API key configuration"


class NoCredentialsConfigured(CredentialError):
    """The credential pool is empty"""

    default_message = "No Gemini API keys available"
    default_suggestion = "Set GEMINI_API_KEY, GEMINI_API_KEY1, GEMINI_API_KEY2, etc."


class AllCredentialsExhausted(CredentialError):
    """Every credential in the pool failed for one request"""

    default_message = "All Gemini API keys failed"

    def __init__(self, last_error: Optional[BaseException] = None, attempts: int = 0):
        self.last_error = last_error
        self.attempts = attempts
        technical = str(last_error) if last_error is not None else None
        super().__init__(
            f"All Gemini API keys failed. Last error: {technical}",
            technical=technical
        )


class BackendRequestError(InterviewCoderError):
    """One attempt against the backend failed (transport or HTTP status)"""

    default_message = "Gemini API request failed"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None, kind: str = "other"):
        self.status_code = status_code
        self.kind = kind
        super().__init__(message, technical=f"HTTP {status_code}" if status_code else None)


class MalformedBackendResponse(InterviewCoderError):
    """Backend replied without a navigable candidate text"""

    default_message = "Invalid response from Gemini API"


class OcrError(InterviewCoderError):
    """Text extraction failed for an image"""

    default_message = "OCR processing failed"
    default_suggestion = "Ensure images are in valid format (PNG, JPG) and contain readable text"


class NoReadableTextError(OcrError):
    """No image in a batch produced meaningful text"""

    default_message = "No meaningful text could be extracted from the images"
    default_suggestion = "Try capturing clearer screenshots with readable text"


class InvalidInputError(InterviewCoderError):
    """Neither usable text nor usable images were provided"""

    default_message = "No valid input provided"
    default_suggestion = "Please provide either text or screenshots"


class RequestTimeoutError(InterviewCoderError):
    """An outbound generation call exceeded the time limit"""

    default_message = "Request timed out. The server took too long to respond. Please try again."


class OperationCancelled(InterviewCoderError):
    """The user cancelled the operation"""

    default_message = "Processing was canceled by the user."
