#!/usr/bin/env python3
"""
Processing Coordinator

This module drives a processing run from the screenshot queues to the UI
event channel. There are two independent categories of run:

- primary: solution generation from an explicit text list or the main queue
- debug: improvement of the last solution from the extra queue

Each category is idle or has exactly one in-flight run owning a
CancellationToken. Starting a run in a category that is already in flight
supersedes it: the older token is cancelled and the older run returns a
cancelled result without emitting anything.

Every outbound call is bounded by the request timeout. When it expires the
coordinator recovers: in-flight work is cancelled, both queues are cleared,
the view goes back to "queue", and RESET_VIEW plus the category's error event
are emitted.

Results of cancelled runs are discarded; cancellation is never reported as
an error.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- await coordinator.process_screenshots()

Expected output:
- {"success": True, "data": {"code": "...", ...}} and a SOLUTION_SUCCESS event
"""

import asyncio
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

from loguru import logger

from interview_coder.core.constants import DEFAULT_LANGUAGE, REQUEST_TIMEOUT_SECONDS
from interview_coder.core.errors import (
    InterviewCoderError,
    InvalidInputError,
    OperationCancelled,
    RequestTimeoutError,
)
from interview_coder.core.events import EventChannel, ProcessingEvent
from interview_coder.core.session import CancellationToken, Session, View
from interview_coder.core.solution_service import SolutionService
from interview_coder.core.store import BatchReadResult, QueueSelector, ScreenshotStore

NO_SCREENSHOTS_MESSAGE = "No screenshots to process"


class Category(str, Enum):
    PRIMARY = "primary"
    DEBUG = "debug"


ERROR_EVENTS: Dict[Category, ProcessingEvent] = {
    Category.PRIMARY: ProcessingEvent.INITIAL_SOLUTION_ERROR,
    Category.DEBUG: ProcessingEvent.DEBUG_ERROR,
}


def cancelled_result() -> Dict[str, Any]:
    return {"success": False, "cancelled": True, "error": OperationCancelled.default_message}


class ProcessingCoordinator:
    """Runs generation and debug requests and reports them as events"""

    def __init__(
        self,
        store: ScreenshotStore,
        service: SolutionService,
        events: EventChannel,
        session: Optional[Session] = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        default_language: str = DEFAULT_LANGUAGE
    ):
        self.store = store
        self.service = service
        self.events = events
        self.session = session or store.session
        self.timeout = timeout
        self.default_language = default_language
        self._tokens: Dict[Category, Optional[CancellationToken]] = {
            Category.PRIMARY: None,
            Category.DEBUG: None,
        }

    def is_in_flight(self, category: Category) -> bool:
        return self._tokens[category] is not None

    def _begin(self, category: Category) -> CancellationToken:
        previous = self._tokens[category]
        if previous is not None:
            logger.info(f"Superseding in-flight {category.value} request")
            previous.cancel()
        token = CancellationToken(f"{category.value} request")
        self._tokens[category] = token
        return token

    def _finish(self, category: Category, token: CancellationToken) -> None:
        if self._tokens[category] is token:
            self._tokens[category] = None

    async def _run(self, token: CancellationToken, operation: Awaitable[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Run an operation as its own task, bound to the token and the timeout.

        Raises:
            RequestTimeoutError: If the timeout expires
            asyncio.CancelledError: If the token cancelled the task
        """
        task = asyncio.ensure_future(operation)
        token.bind(task)
        try:
            return await asyncio.wait_for(task, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"{token.name} timed out after {self.timeout}s")
            raise RequestTimeoutError() from e

    async def _execute(
        self,
        category: Category,
        operation: Callable[[CancellationToken], Awaitable[Dict[str, Any]]],
        on_success: Callable[[Dict[str, Any]], None]
    ) -> Dict[str, Any]:
        error_event = ERROR_EVENTS[category]
        token = self._begin(category)
        try:
            try:
                data = await self._run(token, operation(token))
            except asyncio.CancelledError:
                if not token.cancelled:
                    raise
                logger.info(f"{category.value} request was cancelled")
                return cancelled_result()
            except OperationCancelled:
                logger.info(f"{category.value} request was cancelled")
                return cancelled_result()
            except RequestTimeoutError as e:
                if token.cancelled:
                    return cancelled_result()
                self._recover_from_timeout(error_event, e)
                return {"success": False, "error": e.message}
            except InterviewCoderError as e:
                if token.cancelled:
                    return cancelled_result()
                logger.error(f"{category.value} request failed: {e.message}")
                self._report_failure(category, e.to_notice())
                return {"success": False, "error": e.message}
            except Exception as e:
                if token.cancelled:
                    return cancelled_result()
                logger.exception(f"Unexpected error in {category.value} request: {str(e)}")
                self._report_failure(category, {"error": str(e) or "Server error. Please try again."})
                return {"success": False, "error": str(e) or "Server error. Please try again."}

            if token.cancelled:
                logger.info(f"Discarding late result of cancelled {category.value} request")
                return cancelled_result()

            on_success(data)
            return {"success": True, "data": data}
        finally:
            self._finish(category, token)

    def _report_failure(self, category: Category, notice: Dict[str, Any]) -> None:
        self.events.emit(ERROR_EVENTS[category], notice)
        if category == Category.PRIMARY:
            logger.info("Resetting view to queue due to error")
            self.store.set_view(View.QUEUE)

    def _read_queue(self, selector: QueueSelector) -> Optional[BatchReadResult]:
        """Batch-read a queue; None (and NO_SCREENSHOTS) when nothing is usable."""
        paths = self.store.list_paths(selector)
        if not paths:
            logger.info(f"No screenshots in {selector.value} queue")
            self.events.emit(ProcessingEvent.NO_SCREENSHOTS)
            return None

        batch = self.store.batch_read(paths)
        if not batch.items:
            logger.error(f"No valid screenshots found in {selector.value} queue")
            self.events.emit(ProcessingEvent.NO_SCREENSHOTS)
            return None
        if batch.failures:
            logger.warning(f"Dropped {batch.dropped} unreadable screenshot(s)")
        return batch

    def _on_solution(self, data: Dict[str, Any]) -> None:
        self.session.problem_info = data.get("problem_info")
        self.store.set_view(View.SOLUTIONS)
        self.events.emit(ProcessingEvent.SOLUTION_SUCCESS, data)

    def _on_debug(self, data: Dict[str, Any]) -> None:
        self.session.has_debugged = True
        self.store.set_view(View.DEBUG)
        self.events.emit(ProcessingEvent.DEBUG_SUCCESS, data)

    async def generate_solution(
        self,
        text_list: Optional[List[str]] = None,
        language: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Generate a solution from a text list, or from the main queue when no
        usable text is given.

        Args:
            text_list: Problem text fragments
            language: Target language

        Returns:
            Dict[str, Any]: {"success": True, "data": ...} or {"success": False, "error": ...}
        """
        language = language or self.default_language
        texts = [text for text in (text_list or []) if text and text.strip()]
        self.events.emit(ProcessingEvent.INITIAL_START)

        if texts:
            logger.info(f"Processing direct text input with {len(texts)} items")

            def operation(token: CancellationToken) -> Awaitable[Dict[str, Any]]:
                return self.service.generate(text_list=texts, language=language, cancel_token=token)
        else:
            batch = self._read_queue(QueueSelector.MAIN)
            if batch is None:
                return {"success": False, "error": NO_SCREENSHOTS_MESSAGE}
            image_data_list = batch.data
            logger.info(f"Prepared {len(image_data_list)} images for processing")

            def operation(token: CancellationToken) -> Awaitable[Dict[str, Any]]:
                return self.service.generate(
                    image_data_list=image_data_list, language=language, cancel_token=token
                )

        return await self._execute(Category.PRIMARY, operation, self._on_solution)

    async def debug_solution(self, language: Optional[str] = None) -> Dict[str, Any]:
        """
        Debug the current solution using the extra queue.

        Args:
            language: Target language, defaults to the problem's language

        Returns:
            Dict[str, Any]: {"success": True, "data": ...} or {"success": False, "error": ...}
        """
        self.events.emit(ProcessingEvent.DEBUG_START)

        batch = self._read_queue(QueueSelector.EXTRA)
        if batch is None:
            return {"success": False, "error": NO_SCREENSHOTS_MESSAGE}

        problem_info = self.session.problem_info
        if not problem_info:
            error = InvalidInputError(
                "No problem info available",
                suggestion="Generate a solution before debugging it"
            )
            logger.error(error.message)
            self.events.emit(ProcessingEvent.DEBUG_ERROR, error.to_notice())
            return {"success": False, "error": error.message}

        image_data_list = batch.data
        logger.info(f"Sending {len(image_data_list)} images for debug processing")

        def operation(token: CancellationToken) -> Awaitable[Dict[str, Any]]:
            return self.service.debug(
                image_data_list=image_data_list,
                problem_info=problem_info,
                language=language,
                cancel_token=token,
            )

        return await self._execute(Category.DEBUG, operation, self._on_debug)

    async def process_screenshots(
        self,
        text_list: Optional[List[str]] = None,
        language: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Process whatever the current state calls for: a text list or the main
        queue in "queue" view, the extra queue otherwise.
        """
        logger.info(f"process_screenshots called with view: {self.session.view.value}")
        if text_list and any(text and text.strip() for text in text_list):
            return await self.generate_solution(text_list=text_list, language=language)
        if self.session.view == View.QUEUE:
            return await self.generate_solution(language=language)
        return await self.debug_solution(language=language)

    def cancel_ongoing_requests(self) -> bool:
        """
        Abort both categories and forget the problem context.

        Returns:
            bool: True if anything was in flight
        """
        was_cancelled = False
        for category in list(self._tokens):
            token = self._tokens[category]
            if token is not None:
                token.cancel()
                self._tokens[category] = None
                was_cancelled = True

        self.session.has_debugged = False
        self.session.problem_info = None

        if was_cancelled:
            self.events.emit(ProcessingEvent.NO_SCREENSHOTS)
        return was_cancelled

    def _recover_from_timeout(self, error_event: ProcessingEvent, error: RequestTimeoutError) -> None:
        logger.warning("Recovering from request timeout: clearing queues and resetting view")
        self.cancel_ongoing_requests()
        self.store.clear(QueueSelector.BOTH)
        self.store.set_view(View.QUEUE)
        self.events.emit(ProcessingEvent.RESET_VIEW)
        self.events.emit(error_event, error.to_notice())

    def reset(self) -> Dict[str, Any]:
        """
        Cancel everything, clear both queues and return to the queue view.

        Returns:
            Dict[str, Any]: {"success": True, "cancelled": bool, "deleted": int}
        """
        was_cancelled = self.cancel_ongoing_requests()
        deleted = self.store.clear(QueueSelector.BOTH)
        self.session.reset()
        self.events.emit(ProcessingEvent.RESET_VIEW)
        logger.info(f"Reset complete: {deleted} screenshot(s) deleted")
        return {"success": True, "cancelled": was_cancelled, "deleted": deleted}


if __name__ == "__main__":
    """Validate dispatch and cancellation with a stub service"""
    import sys
    import shutil
    import tempfile

    all_validation_failures = []
    total_tests = 0

    class StubService:
        def __init__(self, delay: float = 0.0):
            self.delay = delay

        async def generate(self, text_list=None, image_data_list=None, language=None, cancel_token=None):
            await asyncio.sleep(self.delay)
            return {"code": "pass", "language": language, "problem_info": {"problem_statement": "stub"}}

    async def run_checks(base_dir: str) -> None:
        global total_tests
        session = Session()
        store = ScreenshotStore(
            session,
            f"{base_dir}/screenshots",
            f"{base_dir}/extra_screenshots"
        )
        events = EventChannel()
        seen: List[ProcessingEvent] = []
        events.subscribe(lambda event, payload: seen.append(event))

        # Test 1: Empty main queue short-circuits
        total_tests += 1
        coordinator = ProcessingCoordinator(store, StubService(), events)
        result = await coordinator.process_screenshots()
        if result["success"] or seen[-1] != ProcessingEvent.NO_SCREENSHOTS:
            all_validation_failures.append("process_screenshots test: Empty queue was processed")

        # Test 2: Text input reaches the solutions view
        total_tests += 1
        result = await coordinator.process_screenshots(text_list=["Two sum"])
        if not result["success"] or session.view != View.SOLUTIONS:
            all_validation_failures.append(f"process_screenshots test: Unexpected result {result}")

        # Test 3: Cancelling an in-flight run discards its result
        total_tests += 1
        store.set_view(View.QUEUE)
        coordinator = ProcessingCoordinator(store, StubService(delay=1.0), events)
        task = asyncio.ensure_future(coordinator.generate_solution(text_list=["Two sum"]))
        await asyncio.sleep(0.05)
        coordinator.cancel_ongoing_requests()
        result = await task
        if not result.get("cancelled"):
            all_validation_failures.append(f"cancel test: Expected cancelled result, got {result}")

    base_dir = tempfile.mkdtemp()
    try:
        asyncio.run(run_checks(base_dir))
    finally:
        shutil.rmtree(base_dir, ignore_errors=True)

    if all_validation_failures:
        print(f"❌ VALIDATION FAILED - {len(all_validation_failures)} of {total_tests} tests failed:")
        for failure in all_validation_failures:
            print(f"  - {failure}")
        sys.exit(1)
    else:
        print(f"✅ VALIDATION PASSED - All {total_tests} tests produced expected results")
        print("Processing coordinator is validated and ready for use")
        sys.exit(0)
