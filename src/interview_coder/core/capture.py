#!/usr/bin/env python3
"""
Screenshot Capture Driver

This module grabs the full primary screen and hands the PNG bytes to the
screenshot store. Backends:

- "screencapture": macOS `screencapture -x <tmp>`
- "powershell": Windows System.Drawing CopyFromScreen script
- "mss": in-process grab with the MSS library (any platform)
- "auto": screencapture on macOS, powershell on Windows, mss elsewhere

External utilities write to a temp file that is read back and removed. Each
capture is single-shot; a non-zero exit status or an empty result raises
CaptureError.

If hide/show callbacks are given (an overlay window, for instance) the window
is hidden for the duration of the grab and shown again even when the capture
fails.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- await CaptureDriver(store, temp_dir="/tmp/ic").take_screenshot()

Expected output:
- "/home/user/.interview_coder/screenshots/0b6e...41.png"
"""

import os
import sys
import asyncio
import inspect
from typing import Awaitable, Callable, Optional, Union

import mss
from mss.exception import ScreenShotError
from PIL import Image
from loguru import logger

from interview_coder.core.constants import CAPTURE_BACKENDS, HIDE_WINDOW_DELAY, SHOW_WINDOW_DELAY
from interview_coder.core.errors import CaptureError
from interview_coder.core.image_processing import image_to_png_bytes
from interview_coder.core.store import ScreenshotStore
from interview_coder.core.utils import ensure_directory, generate_filename, safe_file_operation

WindowCallback = Callable[[], Union[None, Awaitable[None]]]

POWERSHELL_SCRIPT = """
Add-Type -AssemblyName System.Windows.Forms
Add-Type -AssemblyName System.Drawing
$screen = [System.Windows.Forms.Screen]::PrimaryScreen
$bitmap = New-Object System.Drawing.Bitmap $screen.Bounds.Width, $screen.Bounds.Height
$graphics = [System.Drawing.Graphics]::FromImage($bitmap)
$graphics.CopyFromScreen($screen.Bounds.X, $screen.Bounds.Y, 0, 0, $bitmap.Size)
$bitmap.Save('{path}', [System.Drawing.Imaging.ImageFormat]::Png)
$graphics.Dispose()
$bitmap.Dispose()
"""


def resolve_backend(backend: str = "auto", platform: Optional[str] = None) -> str:
    """
    Pick the concrete capture backend.

    Args:
        backend: One of CAPTURE_BACKENDS
        platform: sys.platform value, defaults to the running platform

    Returns:
        str: "screencapture", "powershell" or "mss"

    Raises:
        ValueError: If backend is unknown
    """
    if backend not in CAPTURE_BACKENDS:
        raise ValueError(f"Unknown capture backend {backend!r}, expected one of {CAPTURE_BACKENDS}")
    if backend != "auto":
        return backend

    platform = platform or sys.platform
    if platform == "darwin":
        return "screencapture"
    if platform.startswith("win"):
        return "powershell"
    return "mss"


def grab_with_mss() -> bytes:
    """Grab the primary monitor with MSS and encode it as PNG."""
    with mss.mss() as sct:
        monitor = sct.monitors[1]  # Primary monitor
        logger.debug(f"Selected monitor: {monitor}")
        sct_img = sct.grab(monitor)
        img = Image.frombytes("RGB", sct_img.size, sct_img.bgra, "raw", "BGRX")
    return image_to_png_bytes(img)


async def _invoke(callback: Optional[WindowCallback]) -> None:
    if callback is None:
        return
    result = callback()
    if inspect.isawaitable(result):
        await result


class CaptureDriver:
    """Takes screenshots and stores them in the view-appropriate queue"""

    def __init__(
        self,
        store: ScreenshotStore,
        temp_dir: str,
        backend: str = "auto",
        hide_window: Optional[WindowCallback] = None,
        show_window: Optional[WindowCallback] = None
    ):
        self.store = store
        self.temp_dir = temp_dir
        self.backend = resolve_backend(backend)
        self.hide_window = hide_window
        self.show_window = show_window

    async def _run_utility(self, program: str, *args: str) -> None:
        try:
            process = await asyncio.create_subprocess_exec(
                program,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise CaptureError(f"Could not run {program}", technical=str(e)) from e

        _, stderr = await process.communicate()
        if process.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise CaptureError(
                f"{program} exited with status {process.returncode}",
                technical=detail or None
            )

    async def _grab_via_file(self, program: str, *args_before_path: str, script: Optional[str] = None) -> bytes:
        if not ensure_directory(self.temp_dir):
            raise CaptureError(f"Cannot create temp directory: {self.temp_dir}")
        tmp_path = os.path.join(self.temp_dir, generate_filename())

        try:
            if script is not None:
                await self._run_utility(program, *args_before_path, script.format(path=tmp_path))
            else:
                await self._run_utility(program, *args_before_path, tmp_path)

            try:
                with open(tmp_path, "rb") as f:
                    return f.read()
            except OSError as e:
                raise CaptureError(f"{program} produced no image", technical=str(e)) from e
        finally:
            if os.path.exists(tmp_path):
                safe_file_operation("Remove temp screenshot", os.remove, tmp_path)

    async def grab(self) -> bytes:
        """
        Capture the primary screen as PNG bytes without storing it.

        Returns:
            bytes: PNG data

        Raises:
            CaptureError: If the backend fails or returns nothing
        """
        logger.info(f"Capturing screen with {self.backend} backend")

        if self.backend == "screencapture":
            data = await self._grab_via_file("screencapture", "-x")
        elif self.backend == "powershell":
            data = await self._grab_via_file(
                "powershell", "-NoProfile", "-Command", script=POWERSHELL_SCRIPT
            )
        else:
            try:
                data = await asyncio.to_thread(grab_with_mss)
            except ScreenShotError as e:
                raise CaptureError("MSS screen grab failed", technical=str(e)) from e

        if not data:
            raise CaptureError("Capture produced an empty image")
        return data

    async def take_screenshot(self) -> str:
        """
        Hide the window, grab the screen, store the image and show the window.

        Returns:
            str: Path of the stored screenshot

        Raises:
            CaptureError: If the grab fails
            ScreenshotIOError: If the image cannot be stored
        """
        logger.info(f"Taking screenshot in view: {self.store.view.value}")
        await _invoke(self.hide_window)
        await asyncio.sleep(HIDE_WINDOW_DELAY)

        try:
            data = await self.grab()
            return self.store.capture(data)
        finally:
            await asyncio.sleep(SHOW_WINDOW_DELAY)
            await _invoke(self.show_window)
