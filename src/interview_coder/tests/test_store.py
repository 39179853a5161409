#!/usr/bin/env python3
"""
Unit tests for core/store.py
"""

import os
import sys
import base64
import shutil
import tempfile
import unittest
from unittest.mock import patch

# Add parent directory to path to import module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from interview_coder.core.errors import ScreenshotIOError, ScreenshotNotFoundError
from interview_coder.core.session import Session, View
from interview_coder.core.store import QueueSelector, ScreenshotStore


class TestScreenshotStore(unittest.TestCase):
    """Test cases for the bounded screenshot queues"""

    def setUp(self):
        self.base_dir = tempfile.mkdtemp()
        self.main_dir = os.path.join(self.base_dir, "screenshots")
        self.extra_dir = os.path.join(self.base_dir, "extra_screenshots")
        self.session = Session()
        self.store = ScreenshotStore(self.session, self.main_dir, self.extra_dir)

    def tearDown(self):
        shutil.rmtree(self.base_dir, ignore_errors=True)

    def test_creates_directories(self):
        """Both queue directories exist after construction"""
        self.assertTrue(os.path.isdir(self.main_dir))
        self.assertTrue(os.path.isdir(self.extra_dir))

    def test_capture_routes_by_view(self):
        """Queue view captures go to main, other views to extra"""
        main_path = self.store.capture(b"main image")
        self.assertTrue(main_path.startswith(self.main_dir))

        self.store.set_view(View.SOLUTIONS)
        extra_path = self.store.capture(b"extra image")
        self.assertTrue(extra_path.startswith(self.extra_dir))

        self.store.set_view("debug")
        debug_path = self.store.capture(b"debug image")
        self.assertTrue(debug_path.startswith(self.extra_dir))

        self.assertEqual(self.store.list_paths(QueueSelector.MAIN), [main_path])
        self.assertEqual(self.store.list_paths(QueueSelector.EXTRA), [extra_path, debug_path])
        with open(main_path, "rb") as f:
            self.assertEqual(f.read(), b"main image")

    def test_capture_evicts_oldest(self):
        """The eleventh capture drops the oldest file from queue and disk"""
        paths = [self.store.capture(f"image {i}".encode()) for i in range(11)]

        queue = self.store.list_paths(QueueSelector.MAIN)
        self.assertEqual(len(queue), 10)
        self.assertEqual(queue, paths[1:])
        self.assertFalse(os.path.exists(paths[0]))
        self.assertTrue(os.path.exists(paths[1]))

    def test_capture_custom_capacity(self):
        """Capacity is configurable per store"""
        store = ScreenshotStore(Session(), self.main_dir, self.extra_dir, max_screenshots=2)
        first = store.capture(b"a")
        store.capture(b"b")
        store.capture(b"c")
        self.assertEqual(len(store.list_paths()), 2)
        self.assertNotIn(first, store.list_paths())

    def test_capture_rejects_empty_bytes(self):
        """Empty image data is refused and the queue is untouched"""
        with self.assertRaises(ScreenshotIOError):
            self.store.capture(b"")
        self.assertEqual(self.store.list_paths(), [])

    def test_capture_write_failure_leaves_queue(self):
        """A failed write raises and does not enqueue"""
        with patch("builtins.open", side_effect=PermissionError("denied")):
            with self.assertRaises(ScreenshotIOError):
                self.store.capture(b"data")
        self.assertEqual(self.store.list_paths(), [])

    def test_delete_queued(self):
        """Deleting a queued path removes file and queue entry"""
        path = self.store.capture(b"data")
        result = self.store.delete(path)

        self.assertTrue(result["success"])
        self.assertFalse(os.path.exists(path))
        self.assertEqual(self.store.list_paths(), [])

    def test_delete_not_queued(self):
        """Deleting an unknown path fails without touching anything"""
        path = self.store.capture(b"data")
        result = self.store.delete(os.path.join(self.main_dir, "other.png"))

        self.assertFalse(result["success"])
        self.assertIn("error", result)
        self.assertEqual(self.store.list_paths(), [path])
        self.assertTrue(os.path.exists(path))

    def test_delete_other_view_queue(self):
        """Delete only looks at the current view's queue"""
        path = self.store.capture(b"data")
        self.store.set_view(View.DEBUG)

        result = self.store.delete(path)

        self.assertFalse(result["success"])
        self.assertEqual(self.store.list_paths(QueueSelector.MAIN), [path])

    def test_delete_missing_file(self):
        """A queued path whose file is gone is dropped from the queue and reported"""
        path = self.store.capture(b"data")
        os.remove(path)

        result = self.store.delete(path)

        self.assertFalse(result["success"])
        self.assertEqual(self.store.list_paths(), [])

    def test_remove_last(self):
        """remove_last deletes the newest screenshot"""
        first = self.store.capture(b"first")
        second = self.store.capture(b"second")

        result = self.store.remove_last()

        self.assertTrue(result["success"])
        self.assertEqual(result["path"], second)
        self.assertEqual(self.store.list_paths(), [first])

    def test_remove_last_empty(self):
        """remove_last on an empty queue fails"""
        result = self.store.remove_last()
        self.assertFalse(result["success"])

    def test_clear(self):
        """Clearing both queues deletes every file"""
        main_path = self.store.capture(b"main")
        self.store.set_view(View.SOLUTIONS)
        extra_path = self.store.capture(b"extra")

        deleted = self.store.clear(QueueSelector.BOTH)

        self.assertEqual(deleted, 2)
        self.assertEqual(self.store.list_paths(QueueSelector.BOTH), [])
        self.assertFalse(os.path.exists(main_path))
        self.assertFalse(os.path.exists(extra_path))

    def test_clear_single_queue(self):
        """Clearing one queue leaves the other"""
        main_path = self.store.capture(b"main")
        self.store.set_view(View.SOLUTIONS)
        self.store.capture(b"extra")

        deleted = self.store.clear("extra")

        self.assertEqual(deleted, 1)
        self.assertEqual(self.store.list_paths(QueueSelector.MAIN), [main_path])
        self.assertEqual(self.store.list_paths(QueueSelector.EXTRA), [])

    def test_clear_skips_missing_files(self):
        """Files already gone are not counted but the queue is still emptied"""
        path = self.store.capture(b"main")
        self.store.capture(b"other")
        os.remove(path)

        deleted = self.store.clear(QueueSelector.MAIN)

        self.assertEqual(deleted, 1)
        self.assertEqual(self.store.list_paths(QueueSelector.MAIN), [])

    def test_list_paths_is_copy(self):
        """Mutating the returned list does not change the queue"""
        self.store.capture(b"data")
        paths = self.store.list_paths()
        paths.clear()
        self.assertEqual(len(self.store.list_paths()), 1)

    def test_list_paths_invalid_selector(self):
        """Unknown selectors raise ValueError"""
        with self.assertRaises(ValueError):
            self.store.list_paths("sideways")

    def test_set_view_keeps_queues(self):
        """Switching views does not touch queue contents"""
        path = self.store.capture(b"data")
        self.store.set_view(View.DEBUG)
        self.store.set_view(View.QUEUE)
        self.assertEqual(self.store.list_paths(), [path])

    def test_set_view_invalid(self):
        """Unknown views are rejected"""
        with self.assertRaises(ValueError):
            self.store.set_view("gallery")
        self.assertEqual(self.store.view, View.QUEUE)

    def test_read_as_preview_payload(self):
        """Previews are base64 data URIs that decode to the stored bytes"""
        original = b"\x89PNG\r\n\x1a\n" + bytes(range(256))
        path = self.store.capture(original)
        payload = self.store.read_as_preview_payload(path)
        self.assertTrue(payload.startswith("data:image/png;base64,"))
        self.assertEqual(base64.b64decode(payload.split(",", 1)[1]), original)

    def test_queues_never_share_paths(self):
        """Captures in queue and debug views land in disjoint queues"""
        main_paths = [self.store.capture(b"main %d" % i) for i in range(3)]
        self.store.set_view(View.DEBUG)
        extra_paths = [self.store.capture(b"extra %d" % i) for i in range(3)]

        main_queue = self.store.list_paths(QueueSelector.MAIN)
        extra_queue = self.store.list_paths(QueueSelector.EXTRA)
        self.assertEqual(main_queue, main_paths)
        self.assertEqual(extra_queue, extra_paths)
        self.assertEqual(set(main_queue) & set(extra_queue), set())

    def test_restore_adopts_newest_files(self):
        """Files left on disk are queued oldest first and trimmed to capacity"""
        written = []
        for i in range(12):
            path = os.path.join(self.main_dir, f"leftover-{i:02d}.png")
            with open(path, "wb") as f:
                f.write(b"leftover")
            os.utime(path, (1000 + i, 1000 + i))
            written.append(path)
        notes = os.path.join(self.main_dir, "notes.txt")
        open(notes, "w").close()

        store = ScreenshotStore(Session(), self.main_dir, self.extra_dir)
        restored = store.restore()

        self.assertEqual(restored, {"main": 10, "extra": 0})
        self.assertEqual(store.list_paths(QueueSelector.MAIN), written[2:])
        self.assertFalse(os.path.exists(written[0]))
        self.assertFalse(os.path.exists(written[1]))
        self.assertTrue(os.path.exists(notes))

    def test_restore_then_capture_keeps_bound(self):
        """A restored queue still evicts on the next capture"""
        for i in range(10):
            self.store.capture(b"image %d" % i)

        store = ScreenshotStore(Session(), self.main_dir, self.extra_dir)
        store.restore()
        store.capture(b"one more")

        pngs = [name for name in os.listdir(self.main_dir) if name.endswith(".png")]
        self.assertEqual(len(pngs), 10)
        self.assertEqual(len(store.list_paths(QueueSelector.MAIN)), 10)

    def test_read_as_preview_payload_missing(self):
        """Missing files raise ScreenshotNotFoundError"""
        with self.assertRaises(ScreenshotNotFoundError):
            self.store.read_as_preview_payload(os.path.join(self.main_dir, "missing.png"))

    def test_batch_read_drops_bad_entries(self):
        """Missing and empty files are dropped and reported, order is kept"""
        first = self.store.capture(b"first")
        second = self.store.capture(b"second")
        missing = os.path.join(self.main_dir, "missing.png")
        empty = os.path.join(self.main_dir, "empty.png")
        open(empty, "wb").close()

        result = self.store.batch_read([first, missing, empty, second])

        self.assertEqual([item.path for item in result.items], [first, second])
        self.assertEqual(result.dropped, 2)
        reasons = {failure.path: failure.reason for failure in result.failures}
        self.assertEqual(reasons[missing], "File not found")
        self.assertEqual(reasons[empty], "File is empty")
        self.assertEqual(len(result.data), 2)
        self.assertTrue(all(data.startswith("data:image/png;base64,") for data in result.data))


if __name__ == "__main__":
    unittest.main()
