#!/usr/bin/env python3
"""
MCP Tools for Interview Coder

This module provides MCP tool definitions over one runtime: screenshot
capture and queue management, view switching, solution processing,
cancellation, reset and a health check.

This module is part of the Integration Layer and can depend on both
Core Layer and Presentation Layer components.

Sample input:
- MCP server configuration

Expected output:
- Configured MCP server with registered tools
"""

from typing import Any, Dict, List, Optional

from loguru import logger
from mcp.server.fastmcp import FastMCP

from interview_coder.core.runtime import InterviewCoderRuntime, build_runtime
from interview_coder.mcp.wrappers import (
    cancel_requests_wrapper,
    delete_screenshot_wrapper,
    get_queue_wrapper,
    health_wrapper,
    image_preview_wrapper,
    process_screenshots_wrapper,
    remove_previous_screenshot_wrapper,
    reset_wrapper,
    set_view_wrapper,
    take_screenshot_wrapper,
)


def create_mcp_server(
    runtime: Optional[InterviewCoderRuntime] = None,
    name: str = "Interview Coder",
    host: str = "localhost",
    port: int = 3000
) -> FastMCP:
    """
    Create and configure MCP server with Interview Coder tools

    Args:
        runtime: Runtime the tools operate on, built from configuration if omitted
        name: Name for the MCP server
        host: Host to listen on
        port: Port to listen on

    Returns:
        FastMCP: Configured MCP server instance
    """
    runtime = runtime or build_runtime()
    mcp = FastMCP(name, host=host, port=port)

    logger.info(f"Initialized FastMCP server: {name} on {host}:{port}")

    register_screenshot_tools(mcp, runtime)
    register_processing_tools(mcp, runtime)

    return mcp


def register_screenshot_tools(mcp: FastMCP, runtime: InterviewCoderRuntime) -> None:
    """
    Register capture, queue and view tools with the MCP server

    Args:
        mcp: MCP server instance
        runtime: Runtime the tools operate on
    """
    @mcp.tool()
    async def take_screenshot() -> Dict[str, Any]:
        """
        Captures the primary screen and appends it to the current view's queue.

        In "queue" view the capture goes to the main (problem) queue; in the
        "solutions" and "debug" views it goes to the extra (debug) queue. Each
        queue keeps at most 10 screenshots, dropping the oldest.

        Returns:
            dict: MCP-compliant response containing:
                - path: Path to the saved screenshot file.
                - queue: "main" or "extra".
                On error:
                - error: Error message as a string.
                - success: Boolean indicating success/failure.
        """
        logger.info("Screenshot requested")
        return await take_screenshot_wrapper(runtime)

    @mcp.tool()
    def get_screenshot_queue(queue: Optional[str] = None) -> Dict[str, Any]:
        """
        Lists queued screenshot paths, oldest first.

        Args:
            queue (str, optional): "main", "extra" or "both". Defaults to None,
                                   which returns both queues and the current view.

        Returns:
            dict: MCP-compliant response containing the queued paths.
        """
        logger.info(f"Queue listing requested: {queue}")
        return get_queue_wrapper(runtime, queue)

    @mcp.tool()
    def delete_screenshot(path: str) -> Dict[str, Any]:
        """
        Deletes one screenshot from the current view's queue and from disk.

        Args:
            path (str): Path of a queued screenshot

        Returns:
            dict: MCP-compliant response. Fails without changes if the path is not queued.
        """
        logger.info(f"Delete requested for {path}")
        return delete_screenshot_wrapper(runtime, path)

    @mcp.tool()
    def remove_previous_screenshot() -> Dict[str, Any]:
        """
        Deletes the most recent screenshot of the current view's queue.

        Returns:
            dict: MCP-compliant response with the removed path.
        """
        logger.info("Remove previous screenshot requested")
        return remove_previous_screenshot_wrapper(runtime)

    @mcp.tool()
    def get_image_preview(path: str) -> Dict[str, Any]:
        """
        Reads a screenshot as a base64 data URI.

        Args:
            path (str): Path of a screenshot file

        Returns:
            dict: MCP-compliant response containing:
                - preview: "data:image/png;base64,..."
        """
        logger.info(f"Preview requested for {path}")
        return image_preview_wrapper(runtime, path)

    @mcp.tool()
    def set_view(view: str) -> Dict[str, Any]:
        """
        Switches the view: "queue", "solutions" or "debug".

        Args:
            view (str): New view

        Returns:
            dict: MCP-compliant response with the view now in effect.
        """
        logger.info(f"View change requested: {view}")
        return set_view_wrapper(runtime, view)


def register_processing_tools(mcp: FastMCP, runtime: InterviewCoderRuntime) -> None:
    """
    Register processing, cancel, reset and health tools with the MCP server

    Args:
        mcp: MCP server instance
        runtime: Runtime the tools operate on
    """
    @mcp.tool()
    async def process_screenshots(
        text_list: Optional[List[str]] = None,
        language: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Generates a solution, or debugs the current one.

        With text_list, or in "queue" view, a solution is generated from the
        text or from the main queue's screenshots. In the other views the extra
        queue's screenshots are used to debug the last solution.

        Args:
            text_list (list, optional): Problem text fragments
            language (str, optional): Solution language. Defaults to the configured language.

        Returns:
            dict: Response containing:
                - data: code, thoughts, time_complexity, space_complexity, ... on success
                - events: Processing events emitted during the run
                - view: The view after the run
                On error:
                - error: Error message as a string.
                - cancelled: True if the run was cancelled or superseded.
        """
        logger.info(f"Processing requested: text_list={bool(text_list)}, language={language}")
        return await process_screenshots_wrapper(runtime, text_list, language)

    @mcp.tool()
    def cancel_requests() -> Dict[str, Any]:
        """
        Cancels in-flight processing and forgets the current problem.

        Returns:
            dict: MCP-compliant response with "cancelled" set when anything was in flight.
        """
        logger.info("Cancel requested")
        return cancel_requests_wrapper(runtime)

    @mcp.tool()
    def reset_queues() -> Dict[str, Any]:
        """
        Cancels everything, deletes both queues' screenshots and returns to "queue" view.

        Returns:
            dict: MCP-compliant response with the number of deleted screenshots.
        """
        logger.info("Reset requested")
        return reset_wrapper(runtime)

    @mcp.tool()
    def health() -> Dict[str, Any]:
        """
        Reports whether Gemini API keys are configured and Tesseract OCR is available.

        Returns:
            dict: MCP-compliant response with "status" and per-service flags.
        """
        logger.info("Health check requested")
        return health_wrapper(runtime)
