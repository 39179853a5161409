#!/usr/bin/env python3
"""
Unit tests for core/coordinator.py and core/events.py
"""

import os
import sys
import shutil
import asyncio
import tempfile
import unittest

# Add parent directory to path to import module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from interview_coder.core.coordinator import Category, ProcessingCoordinator
from interview_coder.core.errors import AllCredentialsExhausted, RequestTimeoutError
from interview_coder.core.events import EventChannel, ProcessingEvent
from interview_coder.core.session import Session, View
from interview_coder.core.store import QueueSelector, ScreenshotStore
from interview_coder.tests.fakes import ScriptedService


class TestEventChannel(unittest.TestCase):
    """Test cases for event fan-out"""

    def test_subscribe_and_unsubscribe(self):
        channel = EventChannel()
        seen = []
        unsubscribe = channel.subscribe(lambda event, payload: seen.append((event, payload)))

        channel.emit(ProcessingEvent.INITIAL_START)
        unsubscribe()
        channel.emit(ProcessingEvent.RESET_VIEW)

        self.assertEqual(seen, [(ProcessingEvent.INITIAL_START, None)])

    def test_failing_listener_does_not_block_others(self):
        channel = EventChannel()
        seen = []

        def broken(event, payload):
            raise RuntimeError("listener bug")

        channel.subscribe(broken)
        channel.subscribe(lambda event, payload: seen.append(event))
        channel.emit(ProcessingEvent.DEBUG_START)

        self.assertEqual(seen, [ProcessingEvent.DEBUG_START])

    def test_event_names(self):
        self.assertEqual(ProcessingEvent.INITIAL_SOLUTION_ERROR.value, "solution-error")
        self.assertEqual(ProcessingEvent.NO_SCREENSHOTS.value, "processing-no-screenshots")


class TestProcessingCoordinator(unittest.IsolatedAsyncioTestCase):
    """Test cases for processing runs, cancellation and recovery"""

    def setUp(self):
        self.base_dir = tempfile.mkdtemp()
        self.session = Session()
        self.store = ScreenshotStore(
            self.session,
            os.path.join(self.base_dir, "screenshots"),
            os.path.join(self.base_dir, "extra_screenshots"),
        )
        self.events = EventChannel()
        self.seen = []
        self.events.subscribe(lambda event, payload: self.seen.append((event, payload)))
        self.use_service(ScriptedService())

    def tearDown(self):
        shutil.rmtree(self.base_dir, ignore_errors=True)

    def use_service(self, service, timeout=5.0):
        self.service = service
        self.coordinator = ProcessingCoordinator(
            self.store, service, self.events, timeout=timeout, default_language="python"
        )

    def event_names(self):
        return [event for event, _ in self.seen]

    async def test_empty_queue(self):
        result = await self.coordinator.process_screenshots()

        self.assertFalse(result["success"])
        self.assertEqual(
            self.event_names(),
            [ProcessingEvent.INITIAL_START, ProcessingEvent.NO_SCREENSHOTS]
        )
        self.assertEqual(self.service.generate_calls, [])

    async def test_unreadable_queue(self):
        path = self.store.capture(b"image")
        os.remove(path)

        result = await self.coordinator.process_screenshots()

        self.assertFalse(result["success"])
        self.assertIn(ProcessingEvent.NO_SCREENSHOTS, self.event_names())
        self.assertEqual(self.service.generate_calls, [])

    async def test_solution_from_main_queue(self):
        self.store.capture(b"first")
        self.store.capture(b"second")

        result = await self.coordinator.process_screenshots()

        self.assertTrue(result["success"])
        self.assertEqual(result["data"]["code"], "print('solved')")
        call = self.service.generate_calls[0]
        self.assertEqual(len(call["image_data_list"]), 2)
        self.assertEqual(call["language"], "python")
        self.assertEqual(
            self.event_names(),
            [ProcessingEvent.INITIAL_START, ProcessingEvent.SOLUTION_SUCCESS]
        )
        self.assertEqual(self.session.view, View.SOLUTIONS)
        self.assertEqual(self.session.problem_info["problem_statement"], "statement")
        self.assertFalse(self.coordinator.is_in_flight(Category.PRIMARY))

    async def test_solution_from_text(self):
        result = await self.coordinator.process_screenshots(text_list=["  ", "Two sum"], language="java")

        self.assertTrue(result["success"])
        self.assertEqual(self.service.generate_calls[0]["text_list"], ["Two sum"])
        self.assertEqual(self.service.generate_calls[0]["language"], "java")

    async def test_debug_from_extra_queue(self):
        self.session.problem_info = {"problem_statement": "Two sum", "language": "python"}
        self.store.set_view(View.SOLUTIONS)
        self.store.capture(b"debug shot")

        result = await self.coordinator.process_screenshots()

        self.assertTrue(result["success"])
        self.assertEqual(result["data"]["new_code"], "print('fixed')")
        self.assertEqual(self.service.debug_calls[0]["problem_info"]["problem_statement"], "Two sum")
        self.assertEqual(
            self.event_names(),
            [ProcessingEvent.DEBUG_START, ProcessingEvent.DEBUG_SUCCESS]
        )
        self.assertEqual(self.session.view, View.DEBUG)
        self.assertTrue(self.session.has_debugged)

    async def test_debug_without_problem_info(self):
        self.store.set_view(View.DEBUG)
        self.store.capture(b"debug shot")

        result = await self.coordinator.process_screenshots()

        self.assertFalse(result["success"])
        self.assertEqual(self.event_names()[-1], ProcessingEvent.DEBUG_ERROR)
        self.assertEqual(self.seen[-1][1]["error"], "No problem info available")
        self.assertEqual(self.service.debug_calls, [])

    async def test_primary_failure_reports_and_resets_view(self):
        self.use_service(ScriptedService(error=AllCredentialsExhausted(RuntimeError("HTTP 500"), attempts=2)))
        self.store.set_view(View.SOLUTIONS)

        result = await self.coordinator.generate_solution(text_list=["Two sum"])

        self.assertFalse(result["success"])
        self.assertIn("All Gemini API keys failed", result["error"])
        event, notice = self.seen[-1]
        self.assertEqual(event, ProcessingEvent.INITIAL_SOLUTION_ERROR)
        self.assertIn("suggestion", notice)
        self.assertEqual(self.session.view, View.QUEUE)

    async def test_unexpected_failure_is_reported(self):
        self.use_service(ScriptedService(error=RuntimeError("boom")))

        result = await self.coordinator.generate_solution(text_list=["Two sum"])

        self.assertFalse(result["success"])
        self.assertEqual(result["error"], "boom")
        self.assertEqual(self.event_names()[-1], ProcessingEvent.INITIAL_SOLUTION_ERROR)

    async def test_timeout_recovery(self):
        self.use_service(ScriptedService(delay=2.0), timeout=0.05)
        main_path = self.store.capture(b"main shot")
        self.store.set_view(View.SOLUTIONS)
        extra_path = self.store.capture(b"extra shot")
        self.store.set_view(View.QUEUE)

        result = await self.coordinator.process_screenshots()

        self.assertFalse(result["success"])
        self.assertEqual(result["error"], RequestTimeoutError.default_message)
        self.assertEqual(self.store.list_paths(QueueSelector.BOTH), [])
        self.assertFalse(os.path.exists(main_path))
        self.assertFalse(os.path.exists(extra_path))
        self.assertEqual(self.session.view, View.QUEUE)

        names = self.event_names()
        self.assertIn(ProcessingEvent.RESET_VIEW, names)
        self.assertEqual(names[-1], ProcessingEvent.INITIAL_SOLUTION_ERROR)
        self.assertLess(names.index(ProcessingEvent.RESET_VIEW), len(names) - 1)
        self.assertNotIn(ProcessingEvent.SOLUTION_SUCCESS, names)

    async def test_cancel_in_flight(self):
        self.use_service(ScriptedService(delay=1.0))
        self.session.problem_info = {"problem_statement": "old"}

        task = asyncio.create_task(self.coordinator.generate_solution(text_list=["Two sum"]))
        await asyncio.sleep(0.05)
        self.assertTrue(self.coordinator.is_in_flight(Category.PRIMARY))

        self.assertTrue(self.coordinator.cancel_ongoing_requests())
        result = await task

        self.assertTrue(result["cancelled"])
        self.assertIsNone(self.session.problem_info)
        names = self.event_names()
        self.assertIn(ProcessingEvent.NO_SCREENSHOTS, names)
        self.assertNotIn(ProcessingEvent.SOLUTION_SUCCESS, names)
        self.assertNotIn(ProcessingEvent.INITIAL_SOLUTION_ERROR, names)

    async def test_cancel_idle(self):
        self.assertFalse(self.coordinator.cancel_ongoing_requests())
        self.assertEqual(self.seen, [])

    async def test_new_request_supersedes(self):
        self.use_service(ScriptedService(delay=0.2))

        first = asyncio.create_task(self.coordinator.generate_solution(text_list=["first"]))
        await asyncio.sleep(0.05)
        second = asyncio.create_task(self.coordinator.generate_solution(text_list=["second"]))

        first_result, second_result = await asyncio.gather(first, second)

        self.assertTrue(first_result["cancelled"])
        self.assertTrue(second_result["success"])
        self.assertEqual(self.event_names().count(ProcessingEvent.SOLUTION_SUCCESS), 1)
        self.assertFalse(self.coordinator.is_in_flight(Category.PRIMARY))

    async def test_primary_and_debug_are_independent(self):
        self.use_service(ScriptedService(delay=0.1))
        self.session.problem_info = {"problem_statement": "Two sum"}
        self.store.set_view(View.SOLUTIONS)
        self.store.capture(b"debug shot")

        primary = asyncio.create_task(self.coordinator.generate_solution(text_list=["Two sum"]))
        debug = asyncio.create_task(self.coordinator.debug_solution())
        primary_result, debug_result = await asyncio.gather(primary, debug)

        self.assertTrue(primary_result["success"])
        self.assertTrue(debug_result["success"])

    async def test_reset(self):
        self.store.capture(b"main shot")
        self.store.set_view(View.DEBUG)
        self.store.capture(b"extra shot")
        self.session.problem_info = {"problem_statement": "Two sum"}
        self.session.has_debugged = True

        result = self.coordinator.reset()

        self.assertEqual(result, {"success": True, "cancelled": False, "deleted": 2})
        self.assertEqual(self.session.view, View.QUEUE)
        self.assertIsNone(self.session.problem_info)
        self.assertFalse(self.session.has_debugged)
        self.assertEqual(self.event_names(), [ProcessingEvent.RESET_VIEW])


if __name__ == "__main__":
    unittest.main()
