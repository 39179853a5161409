#!/usr/bin/env python3
"""
MCP Wrappers for Interview Coder

This module provides MCP-specific wrapper functions around one runtime's
screenshot store, capture driver and processing coordinator, handling
parameter validation and error formatting specific to MCP.

Processing events emitted while a wrapper runs are collected and returned
with the response, since an MCP client has no event channel to listen on.

This module is part of the Integration Layer and can depend on both
Core Layer and Presentation Layer components.

Sample input:
- await take_screenshot_wrapper(runtime)
- await process_screenshots_wrapper(runtime, language="python")

Expected output:
- {"success": True, "path": "/.../screenshots/<uuid>.png", "queue": "main"}
- {"success": True, "data": {...}, "events": [{"event": "initial-start"}, ...]}
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, List, Optional

from loguru import logger

from interview_coder.core.errors import InterviewCoderError
from interview_coder.core.events import ProcessingEvent
from interview_coder.core.runtime import InterviewCoderRuntime
from interview_coder.core.session import View
from interview_coder.core.store import QueueSelector
from interview_coder.core.utils import truncate_large_value


def format_mcp_response(
    success: bool,
    data: Optional[Dict[str, Any]] = None,
    error: Optional[str] = None
) -> Dict[str, Any]:
    """
    Format a response in MCP-compatible format.

    Args:
        success: Whether the operation was successful
        data: Response data, merged into the response
        error: Error message (for failed operations)

    Returns:
        Dict[str, Any]: MCP-compatible response
    """
    response: Dict[str, Any] = {"success": success}

    if data is not None:
        response.update(data)
    if not success and error is not None:
        response["error"] = error

    return response


def _error_response(error: InterviewCoderError) -> Dict[str, Any]:
    notice = error.to_notice()
    extra = {k: v for k, v in notice.items() if k != "error" and v}
    return format_mcp_response(False, data=extra or None, error=error.message)


_current_call: ContextVar[Optional[object]] = ContextVar("interview_coder_mcp_call", default=None)


@contextmanager
def collect_events(runtime: InterviewCoderRuntime) -> Iterator[List[Dict[str, Any]]]:
    """
    Record events emitted on the runtime's channel by this call.

    The call is marked in a context variable, which asyncio copies into every
    task the call spawns. Events emitted from other tool calls running at the
    same time carry a different mark and are not recorded.

    Yields:
        List[Dict[str, Any]]: Filled with {"event": name, "payload": ...} entries
    """
    collected: List[Dict[str, Any]] = []
    call = object()

    def listener(event: ProcessingEvent, payload: Optional[Any]) -> None:
        if _current_call.get() is not call:
            return
        entry: Dict[str, Any] = {"event": event.value}
        if payload is not None:
            entry["payload"] = payload
        collected.append(entry)

    reset_token = _current_call.set(call)
    unsubscribe = runtime.events.subscribe(listener)
    try:
        yield collected
    finally:
        unsubscribe()
        _current_call.reset(reset_token)


def _queue_state(runtime: InterviewCoderRuntime) -> Dict[str, Any]:
    return {
        "view": runtime.session.view.value,
        "main": runtime.store.list_paths(QueueSelector.MAIN),
        "extra": runtime.store.list_paths(QueueSelector.EXTRA),
    }


async def take_screenshot_wrapper(runtime: InterviewCoderRuntime) -> Dict[str, Any]:
    """
    MCP wrapper for capturing a screenshot into the current view's queue.

    Returns:
        Dict[str, Any]: MCP-compatible response with the new path
    """
    try:
        path = await runtime.capture.take_screenshot()
    except InterviewCoderError as e:
        logger.error(f"Screenshot capture failed: {e.message}")
        return _error_response(e)

    queue = QueueSelector.MAIN if runtime.session.view == View.QUEUE else QueueSelector.EXTRA
    return format_mcp_response(True, data={"path": path, "queue": queue.value})


def get_queue_wrapper(runtime: InterviewCoderRuntime, selector: Optional[str] = None) -> Dict[str, Any]:
    """
    MCP wrapper for listing queued screenshots.

    Args:
        selector: "main", "extra" or "both"; None returns both queues and the view

    Returns:
        Dict[str, Any]: MCP-compatible response
    """
    if selector is None:
        return format_mcp_response(True, data=_queue_state(runtime))

    try:
        paths = runtime.store.list_paths(selector)
    except ValueError:
        return format_mcp_response(False, error=f"Invalid queue: {selector}. Must be main, extra or both.")
    return format_mcp_response(True, data={"queue": selector, "paths": paths})


def delete_screenshot_wrapper(runtime: InterviewCoderRuntime, path: str) -> Dict[str, Any]:
    """
    MCP wrapper for deleting one screenshot of the current view's queue.

    Returns:
        Dict[str, Any]: MCP-compatible response
    """
    result = runtime.store.delete(path)
    if not result["success"]:
        return format_mcp_response(False, error=result["error"])
    return format_mcp_response(True, data={"path": path})


def remove_previous_screenshot_wrapper(runtime: InterviewCoderRuntime) -> Dict[str, Any]:
    """
    MCP wrapper for deleting the most recent screenshot of the current view's queue.

    Returns:
        Dict[str, Any]: MCP-compatible response
    """
    result = runtime.store.remove_last()
    if not result["success"]:
        return format_mcp_response(False, data={"path": result.get("path")}, error=result["error"])
    return format_mcp_response(True, data={"path": result["path"]})


def image_preview_wrapper(runtime: InterviewCoderRuntime, path: str) -> Dict[str, Any]:
    """
    MCP wrapper for reading a screenshot as a data URI.

    Returns:
        Dict[str, Any]: MCP-compatible response with the "preview" data URI
    """
    try:
        preview = runtime.store.read_as_preview_payload(path)
    except InterviewCoderError as e:
        return _error_response(e)
    logger.debug(f"Preview for {path}: {truncate_large_value(preview)}")
    return format_mcp_response(True, data={"path": path, "preview": preview})


def set_view_wrapper(runtime: InterviewCoderRuntime, view: str) -> Dict[str, Any]:
    """
    MCP wrapper for switching the view that decides where captures go.

    Returns:
        Dict[str, Any]: MCP-compatible response with the view now in effect
    """
    try:
        new_view = runtime.store.set_view(view.strip().lower())
    except ValueError:
        return format_mcp_response(False, error=f"Invalid view: {view}. Must be queue, solutions or debug.")
    return format_mcp_response(True, data={"view": new_view.value})


async def process_screenshots_wrapper(
    runtime: InterviewCoderRuntime,
    text_list: Optional[List[str]] = None,
    language: Optional[str] = None
) -> Dict[str, Any]:
    """
    MCP wrapper for running the processing coordinator.

    Args:
        text_list: Problem text fragments, used instead of the main queue
        language: Target language

    Returns:
        Dict[str, Any]: Coordinator result plus the events it emitted
    """
    with collect_events(runtime) as events:
        try:
            result = await runtime.coordinator.process_screenshots(text_list=text_list, language=language)
        except Exception as e:
            error_message = f"Processing failed: {str(e)}"
            logger.exception(error_message)
            return format_mcp_response(False, data={"events": list(events)}, error=error_message)

    response = dict(result)
    response["events"] = list(events)
    response["view"] = runtime.session.view.value
    return response


def cancel_requests_wrapper(runtime: InterviewCoderRuntime) -> Dict[str, Any]:
    """
    MCP wrapper for cancelling in-flight processing.

    Returns:
        Dict[str, Any]: MCP-compatible response with "cancelled" set when anything was in flight
    """
    with collect_events(runtime) as events:
        cancelled = runtime.coordinator.cancel_ongoing_requests()
    return format_mcp_response(True, data={"cancelled": cancelled, "events": events})


def reset_wrapper(runtime: InterviewCoderRuntime) -> Dict[str, Any]:
    """
    MCP wrapper for cancelling everything and clearing both queues.

    Returns:
        Dict[str, Any]: MCP-compatible response
    """
    with collect_events(runtime) as events:
        result = runtime.coordinator.reset()
    return format_mcp_response(
        True,
        data={"cancelled": result["cancelled"], "deleted": result["deleted"], "events": events}
    )


def health_wrapper(runtime: InterviewCoderRuntime) -> Dict[str, Any]:
    """
    MCP wrapper for the service health check.

    Returns:
        Dict[str, Any]: MCP-compatible response
    """
    health = runtime.service.health()
    return format_mcp_response(health["status"] == "healthy", data=health, error="Service degraded")


if __name__ == "__main__":
    """Validate MCP wrapper functions"""
    import sys
    import json

    logger.remove()
    logger.add(
        sys.stderr,
        format="<level>{level}: {message}</level>",
        level="INFO",
        colorize=True
    )

    print("Testing MCP wrapper functions...")

    success_response = format_mcp_response(True, data={"path": "/tmp/screenshots/example.png"})
    error_response = format_mcp_response(False, error="Test error")

    print(f"Success response: {json.dumps(success_response)}")
    print(f"Error response: {json.dumps(error_response)}")

    print("\nNote: Tool calls need a runtime with screen access and API keys.")
    print("Run the unit tests for full coverage of the wrappers.")
