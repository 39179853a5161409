#!/usr/bin/env python3
"""
Unit tests for mcp/wrappers.py and mcp/mcp_tools.py
"""

import os
import asyncio
import sys
import shutil
import tempfile
import unittest
from unittest.mock import patch

# Add parent directory to path to import module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from interview_coder.core.credentials import CredentialPool
from interview_coder.core.errors import CaptureError
from interview_coder.core.runtime import build_runtime
from interview_coder.mcp.mcp_tools import create_mcp_server
from interview_coder.mcp.wrappers import (
    cancel_requests_wrapper,
    delete_screenshot_wrapper,
    format_mcp_response,
    get_queue_wrapper,
    health_wrapper,
    image_preview_wrapper,
    process_screenshots_wrapper,
    remove_previous_screenshot_wrapper,
    reset_wrapper,
    set_view_wrapper,
    take_screenshot_wrapper,
)
from interview_coder.tests.fakes import ScriptedService


class McpRuntimeTestCase(unittest.IsolatedAsyncioTestCase):
    """Runtime in a temp directory with a scripted solution service"""

    def setUp(self):
        self.base_dir = tempfile.mkdtemp()
        self.runtime = build_runtime(
            data_dir=self.base_dir,
            pool=CredentialPool(["test-key"]),
            capture_backend="mss",
        )
        self.service = ScriptedService()
        self.runtime.service = self.service
        self.runtime.coordinator.service = self.service

    def tearDown(self):
        shutil.rmtree(self.base_dir, ignore_errors=True)


class TestIntegrationWrappers(McpRuntimeTestCase):
    """Test cases for MCP wrappers"""

    def test_format_mcp_response(self):
        success_response = format_mcp_response(True, data={"result": "test"})
        self.assertTrue(success_response["success"])
        self.assertEqual(success_response["result"], "test")

        error_response = format_mcp_response(False, error="Test error")
        self.assertFalse(error_response["success"])
        self.assertEqual(error_response["error"], "Test error")

    @patch("interview_coder.core.capture.grab_with_mss", return_value=b"png bytes")
    async def test_take_screenshot(self, mock_grab):
        result = await take_screenshot_wrapper(self.runtime)

        self.assertTrue(result["success"])
        self.assertEqual(result["queue"], "main")
        self.assertTrue(os.path.exists(result["path"]))

    async def test_take_screenshot_failure(self):
        with patch.object(self.runtime.capture, "grab", side_effect=CaptureError("screencapture exited with status 1")):
            result = await take_screenshot_wrapper(self.runtime)

        self.assertFalse(result["success"])
        self.assertEqual(result["error"], "screencapture exited with status 1")
        self.assertIn("suggestion", result)

    def test_get_queue(self):
        path = self.runtime.store.capture(b"image")

        state = get_queue_wrapper(self.runtime)
        self.assertEqual(state["view"], "queue")
        self.assertEqual(state["main"], [path])
        self.assertEqual(state["extra"], [])

        main = get_queue_wrapper(self.runtime, "main")
        self.assertEqual(main["paths"], [path])

        invalid = get_queue_wrapper(self.runtime, "sideways")
        self.assertFalse(invalid["success"])

    def test_delete_screenshot(self):
        path = self.runtime.store.capture(b"image")

        self.assertFalse(delete_screenshot_wrapper(self.runtime, "/not/queued.png")["success"])
        self.assertTrue(delete_screenshot_wrapper(self.runtime, path)["success"])
        self.assertEqual(self.runtime.store.list_paths(), [])

    def test_remove_previous_screenshot(self):
        first = self.runtime.store.capture(b"first")
        second = self.runtime.store.capture(b"second")

        result = remove_previous_screenshot_wrapper(self.runtime)

        self.assertTrue(result["success"])
        self.assertEqual(result["path"], second)
        self.assertEqual(self.runtime.store.list_paths(), [first])

    def test_image_preview(self):
        path = self.runtime.store.capture(b"image")

        result = image_preview_wrapper(self.runtime, path)
        self.assertTrue(result["preview"].startswith("data:image/png;base64,"))

        missing = image_preview_wrapper(self.runtime, os.path.join(self.base_dir, "missing.png"))
        self.assertFalse(missing["success"])

    def test_set_view(self):
        self.assertEqual(set_view_wrapper(self.runtime, "Debug")["view"], "debug")
        self.assertFalse(set_view_wrapper(self.runtime, "gallery")["success"])
        self.assertEqual(self.runtime.session.view.value, "debug")

    async def test_process_empty_queue(self):
        result = await process_screenshots_wrapper(self.runtime)

        self.assertFalse(result["success"])
        self.assertEqual(
            [entry["event"] for entry in result["events"]],
            ["initial-start", "processing-no-screenshots"]
        )

    async def test_process_text(self):
        result = await process_screenshots_wrapper(self.runtime, text_list=["Two sum"], language="go")

        self.assertTrue(result["success"])
        self.assertEqual(result["data"]["code"], "print('solved')")
        self.assertEqual(result["view"], "solutions")
        self.assertEqual(result["events"][-1]["event"], "solution-success")
        self.assertEqual(self.service.generate_calls[0]["language"], "go")

    async def test_events_stay_with_their_call(self):
        self.service.delay = 1.0
        process = asyncio.create_task(process_screenshots_wrapper(self.runtime, text_list=["Two sum"]))
        await asyncio.sleep(0.05)

        cancel = cancel_requests_wrapper(self.runtime)
        processed = await process

        self.assertTrue(cancel["cancelled"])
        self.assertEqual(cancel["events"], [{"event": "processing-no-screenshots"}])
        self.assertTrue(processed["cancelled"])
        self.assertEqual(processed["events"], [{"event": "initial-start"}])

    def test_cancel_idle(self):
        result = cancel_requests_wrapper(self.runtime)
        self.assertTrue(result["success"])
        self.assertFalse(result["cancelled"])
        self.assertEqual(result["events"], [])

    def test_reset(self):
        self.runtime.store.capture(b"image")
        self.runtime.store.set_view("solutions")

        result = reset_wrapper(self.runtime)

        self.assertTrue(result["success"])
        self.assertEqual(result["deleted"], 1)
        self.assertEqual(result["events"], [{"event": "reset-view"}])
        self.assertEqual(self.runtime.session.view.value, "queue")

    def test_health(self):
        result = health_wrapper(self.runtime)
        self.assertTrue(result["success"])
        self.assertEqual(result["status"], "healthy")


class TestMcpServer(McpRuntimeTestCase):
    """Test cases for tool registration"""

    async def test_tools_registered(self):
        mcp = create_mcp_server(self.runtime)
        names = {tool.name for tool in await mcp.list_tools()}

        self.assertEqual(names, {
            "take_screenshot",
            "get_screenshot_queue",
            "delete_screenshot",
            "remove_previous_screenshot",
            "get_image_preview",
            "set_view",
            "process_screenshots",
            "cancel_requests",
            "reset_queues",
            "health",
        })


if __name__ == "__main__":
    unittest.main()
