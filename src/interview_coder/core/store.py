#!/usr/bin/env python3
"""
Screenshot Store

This module owns the two bounded screenshot queues (main and extra) and the
files they reference on disk. All queue mutation goes through ScreenshotStore,
which routes new captures by the session's current view:

- "queue" view      -> main queue, main screenshot directory
- any other view    -> extra queue, extra screenshot directory

Each queue keeps at most MAX_SCREENSHOTS paths. Inserting beyond capacity
evicts the oldest path (FIFO) and deletes its file.

Single-item failures are reported to the caller; bulk cleanup failures are
logged per item so one bad file does not block the rest.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- store.capture(png_bytes)
- store.batch_read(["/data/screenshots/a.png", "/missing.png"])

Expected output:
- "/data/screenshots/3f0c...e1.png"
- BatchReadResult(items=[EncodedScreenshot(path=..., data="data:image/png;base64,...")],
                  failures=[ReadFailure(path="/missing.png", reason="File not found")])
"""

import os
from enum import Enum
from typing import Dict, List, Optional, Union, Any

from loguru import logger
from pydantic import BaseModel, Field

from interview_coder.core.constants import MAX_SCREENSHOTS, SCREENSHOT_EXTENSION
from interview_coder.core.errors import ScreenshotIOError, ScreenshotNotFoundError
from interview_coder.core.image_processing import encode_data_uri, mime_type_for
from interview_coder.core.session import Session, View
from interview_coder.core.utils import (
    ensure_directory,
    generate_filename,
    safe_file_operation,
    truncate_large_value,
)


class QueueSelector(str, Enum):
    """Which queue(s) an operation applies to"""

    MAIN = "main"
    EXTRA = "extra"
    BOTH = "both"


class EncodedScreenshot(BaseModel):
    """A screenshot read from disk as a data-URI payload"""

    path: str
    data: str


class ReadFailure(BaseModel):
    """A screenshot that could not be read during a batch"""

    path: str
    reason: str


class BatchReadResult(BaseModel):
    """Surviving screenshots of a best-effort batch read, plus what was dropped"""

    items: List[EncodedScreenshot] = Field(default_factory=list)
    failures: List[ReadFailure] = Field(default_factory=list)

    @property
    def dropped(self) -> int:
        return len(self.failures)

    @property
    def data(self) -> List[str]:
        return [item.data for item in self.items]


class ScreenshotStore:
    """Bounded, view-scoped screenshot queues backed by files on disk"""

    def __init__(
        self,
        session: Session,
        screenshot_dir: str,
        extra_screenshot_dir: str,
        max_screenshots: int = MAX_SCREENSHOTS
    ):
        self.session = session
        self.screenshot_dir = screenshot_dir
        self.extra_screenshot_dir = extra_screenshot_dir
        self.max_screenshots = max_screenshots
        self._queues: Dict[QueueSelector, List[str]] = {
            QueueSelector.MAIN: [],
            QueueSelector.EXTRA: [],
        }

        for directory in (screenshot_dir, extra_screenshot_dir):
            if not ensure_directory(directory):
                raise ScreenshotIOError(f"Cannot create screenshot directory: {directory}")

    @property
    def view(self) -> View:
        return self.session.view

    def set_view(self, view: Union[View, str]) -> View:
        """
        Change the view that decides where new captures go.

        Args:
            view: "queue", "solutions" or "debug"

        Returns:
            View: The view now in effect
        """
        new_view = self.session.set_view(view)
        logger.debug(
            f"Current queues - Main: {len(self._queues[QueueSelector.MAIN])}, "
            f"Extra: {len(self._queues[QueueSelector.EXTRA])}"
        )
        return new_view

    def _selector_for_view(self) -> QueueSelector:
        return QueueSelector.MAIN if self.view == View.QUEUE else QueueSelector.EXTRA

    def _directory_for(self, selector: QueueSelector) -> str:
        if selector == QueueSelector.MAIN:
            return self.screenshot_dir
        return self.extra_screenshot_dir

    def _resolve(self, selector: Optional[Union[QueueSelector, str]]) -> List[QueueSelector]:
        if selector is None:
            return [self._selector_for_view()]
        selector = QueueSelector(selector)
        if selector == QueueSelector.BOTH:
            return [QueueSelector.MAIN, QueueSelector.EXTRA]
        return [selector]

    def capture(self, file_bytes: bytes, extension: str = SCREENSHOT_EXTENSION) -> str:
        """
        Persist screenshot bytes and enqueue the new file for the current view.

        Args:
            file_bytes: Encoded image bytes
            extension: File extension without dot

        Returns:
            str: Path of the new screenshot file

        Raises:
            ScreenshotIOError: If the bytes are empty or the write fails; the
                queue is left unmodified
        """
        selector = self._selector_for_view()
        path = os.path.join(self._directory_for(selector), generate_filename(extension))

        if not file_bytes:
            raise ScreenshotIOError("Refusing to store an empty screenshot", technical=path)

        try:
            with open(path, "wb") as f:
                f.write(file_bytes)
        except OSError as e:
            logger.error(f"Failed to write screenshot {path}: {str(e)}")
            if os.path.exists(path):
                safe_file_operation("Remove partial screenshot", os.remove, path)
            raise ScreenshotIOError(f"Failed to save screenshot: {str(e)}", technical=path) from e

        queue = self._queues[selector]
        queue.append(path)
        logger.info(f"Added screenshot to {selector.value} queue: {path}")

        while len(queue) > self.max_screenshots:
            removed_path = queue.pop(0)
            success, _, _ = safe_file_operation("Remove old screenshot", os.remove, removed_path)
            if success:
                logger.info(f"Removed old screenshot from {selector.value} queue: {removed_path}")

        return path

    def delete(self, path: str) -> Dict[str, Any]:
        """
        Delete a screenshot file and remove it from the current view's queue.

        Never raises. A path that is not queued is reported as a failure and
        nothing is mutated. A queued path whose file is already gone is still
        removed from the queue, and the missing file is reported.

        Args:
            path: Screenshot path

        Returns:
            Dict[str, Any]: {"success": True} or {"success": False, "error": str}
        """
        selector = self._selector_for_view()
        queue = self._queues[selector]

        if path not in queue:
            error = f"Screenshot not found in {selector.value} queue: {path}"
            logger.warning(error)
            return {"success": False, "error": error}

        try:
            os.remove(path)
        except OSError as e:
            logger.error(f"Error deleting file {path}: {str(e)}")
            return {"success": False, "error": f"Screenshot file not found: {str(e)}"}
        finally:
            self._queues[selector] = [p for p in queue if p != path]

        logger.info(f"Deleted screenshot: {path}")
        return {"success": True}

    def remove_last(self) -> Dict[str, Any]:
        """
        Delete the most recent screenshot of the current view's queue.

        Returns:
            Dict[str, Any]: Delete result, with the removed "path" on success
        """
        queue = self._queues[self._selector_for_view()]
        if not queue:
            return {"success": False, "error": "No screenshots to remove"}

        path = queue[-1]
        result = self.delete(path)
        result["path"] = path
        return result

    def clear(self, selector: Union[QueueSelector, str] = QueueSelector.BOTH) -> int:
        """
        Delete every file referenced by the selected queue(s) and empty them.

        Individual deletion failures are logged and skipped.

        Args:
            selector: "main", "extra" or "both"

        Returns:
            int: Number of files actually deleted
        """
        deleted = 0
        for queue_selector in self._resolve(selector):
            for path in self._queues[queue_selector]:
                success, _, _ = safe_file_operation(
                    f"Delete {queue_selector.value} screenshot", os.remove, path
                )
                if success:
                    deleted += 1
            self._queues[queue_selector] = []
            logger.info(f"Cleared {queue_selector.value} screenshot queue")
        return deleted

    def restore(self) -> Dict[str, int]:
        """
        Adopt screenshots already on disk into empty queues.

        Files left by an earlier process are queued oldest first by
        modification time. Anything beyond capacity is evicted and deleted,
        so the bound holds across processes.

        Returns:
            Dict[str, int]: Number of restored paths per queue
        """
        restored: Dict[str, int] = {}
        suffix = f".{SCREENSHOT_EXTENSION}"

        for selector in (QueueSelector.MAIN, QueueSelector.EXTRA):
            directory = self._directory_for(selector)
            queue = self._queues[selector]
            try:
                names = [name for name in os.listdir(directory) if name.endswith(suffix)]
            except OSError as e:
                logger.error(f"Cannot list {directory}: {str(e)}")
                restored[selector.value] = 0
                continue

            found = [
                path for path in (os.path.join(directory, name) for name in names)
                if os.path.isfile(path) and path not in queue
            ]
            found.sort(key=lambda path: (os.path.getmtime(path), path))
            queue[:0] = found

            while len(queue) > self.max_screenshots:
                removed_path = queue.pop(0)
                safe_file_operation("Remove old screenshot", os.remove, removed_path)

            restored[selector.value] = len(queue)
            if found:
                logger.info(f"Restored {len(queue)} screenshot(s) into {selector.value} queue")

        return restored

    def list_paths(self, selector: Optional[Union[QueueSelector, str]] = None) -> List[str]:
        """
        Return the queued paths, oldest first.

        Args:
            selector: "main", "extra" or "both"; defaults to the current view's queue

        Returns:
            List[str]: Copy of the queue contents
        """
        paths: List[str] = []
        for queue_selector in self._resolve(selector):
            paths.extend(self._queues[queue_selector])
        return paths

    def read_as_preview_payload(self, path: str) -> str:
        """
        Read a screenshot and encode it as a data URI.

        Args:
            path: Screenshot path

        Returns:
            str: "data:image/png;base64,..."

        Raises:
            ScreenshotNotFoundError: If the file does not exist
            ScreenshotIOError: If the file cannot be read
        """
        try:
            with open(path, "rb") as f:
                data = f.read()
        except FileNotFoundError as e:
            logger.error(f"Screenshot file not found: {path}")
            raise ScreenshotNotFoundError(f"Screenshot file not found: {path}", technical=str(e)) from e
        except OSError as e:
            logger.error(f"Error reading image {path}: {str(e)}")
            raise ScreenshotIOError(f"Failed to read screenshot: {str(e)}", technical=path) from e
        return encode_data_uri(data, mime_type_for(path))

    def batch_read(self, paths: List[str]) -> BatchReadResult:
        """
        Read several screenshots, dropping any that are missing, empty or
        unreadable. Order of the surviving entries follows the input.

        Args:
            paths: Screenshot paths

        Returns:
            BatchReadResult: Encoded screenshots and per-item failures
        """
        logger.info(f"Processing {len(paths)} screenshots")
        result = BatchReadResult()

        for path in paths:
            if not os.path.exists(path):
                logger.error(f"Screenshot file not found: {path}")
                result.failures.append(ReadFailure(path=path, reason="File not found"))
                continue

            try:
                size = os.path.getsize(path)
                if size == 0:
                    logger.error(f"Screenshot file is empty: {path}")
                    result.failures.append(ReadFailure(path=path, reason="File is empty"))
                    continue
                data = self.read_as_preview_payload(path)
            except OSError as e:
                logger.error(f"Error reading screenshot at {path}: {str(e)}")
                result.failures.append(ReadFailure(path=path, reason=str(e)))
                continue

            logger.debug(f"Read screenshot {path}: {truncate_large_value(data)}")
            result.items.append(EncodedScreenshot(path=path, data=data))

        logger.info(f"Successfully processed {len(result.items)}/{len(paths)} screenshots")
        return result


if __name__ == "__main__":
    """Validate the screenshot store"""
    import sys
    import base64
    import shutil
    import tempfile

    all_validation_failures = []
    total_tests = 0
    base_dir = tempfile.mkdtemp()

    try:
        store = ScreenshotStore(
            Session(),
            os.path.join(base_dir, "screenshots"),
            os.path.join(base_dir, "extra_screenshots")
        )

        # Test 1: Capacity and FIFO eviction
        total_tests += 1
        paths = [store.capture(f"image {i}".encode()) for i in range(MAX_SCREENSHOTS + 1)]
        if store.list_paths() != paths[1:] or os.path.exists(paths[0]):
            all_validation_failures.append("capture test: Oldest screenshot was not evicted")

        # Test 2: Preview payload round trip
        total_tests += 1
        payload = store.read_as_preview_payload(paths[-1])
        if base64.b64decode(payload.split(",", 1)[1]) != f"image {MAX_SCREENSHOTS}".encode():
            all_validation_failures.append("read_as_preview_payload test: Payload does not decode to file bytes")

        # Test 3: Deleting an unqueued path fails without mutation
        total_tests += 1
        before = store.list_paths()
        result = store.delete(os.path.join(base_dir, "unqueued.png"))
        if result["success"] or store.list_paths() != before:
            all_validation_failures.append("delete test: Unqueued path was accepted")

        # Test 4: Debug view routes to the extra queue
        total_tests += 1
        store.set_view(View.DEBUG)
        extra_path = store.capture(b"extra")
        if store.list_paths(QueueSelector.EXTRA) != [extra_path] or extra_path in store.list_paths(QueueSelector.MAIN):
            all_validation_failures.append("set_view test: Capture not routed to extra queue")
    finally:
        shutil.rmtree(base_dir, ignore_errors=True)

    if all_validation_failures:
        print(f"❌ VALIDATION FAILED - {len(all_validation_failures)} of {total_tests} tests failed:")
        for failure in all_validation_failures:
            print(f"  - {failure}")
        sys.exit(1)
    else:
        print(f"✅ VALIDATION PASSED - All {total_tests} tests produced expected results")
        print("Screenshot store is validated and ready for use")
        sys.exit(0)
