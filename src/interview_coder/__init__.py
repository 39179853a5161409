"""
Interview Coder

Screenshot-driven coding interview assistant: capture problem statements
into bounded queues, OCR them, and turn them into solutions (code, reasoning,
complexity) with Gemini, rotating across several API keys.

This package implements a three-layer architecture:

1. Core Layer: Queues, capture, OCR, backend requests and the processing coordinator
2. Presentation Layer: CLI interface with rich formatting
3. Integration Layer: MCP wrapper for AI agent usage

Usage:
    # Direct API usage (Core Layer)
    from interview_coder.core import build_runtime
    runtime = build_runtime()
    await runtime.capture.take_screenshot()
    result = await runtime.coordinator.process_screenshots(language="python")

    # CLI usage (Presentation Layer)
    # interview-coder solve -t "Reverse a linked list"

    # MCP server usage (Integration Layer)
    # interview-coder-mcp start
"""

# Core functionality
from interview_coder.core import (
    build_runtime,
    InterviewCoderRuntime
)

# CLI layer
from interview_coder.cli import app as cli_app

# MCP layer
from interview_coder.mcp import create_mcp_server

__version__ = "1.0.0"

__all__ = [
    # Core
    'build_runtime',
    'InterviewCoderRuntime',

    # CLI entrypoint
    'cli_app',

    # MCP server
    'create_mcp_server',

    # Version info
    '__version__'
]
