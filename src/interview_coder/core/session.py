#!/usr/bin/env python3
"""
Session State for Interview Coder

This module holds the mutable state shared by the screenshot store and the
processing coordinator: the current view mode, the problem context obtained
from the last successful generation, and cancellation tokens for in-flight
operations.

One Session is created per runtime and passed explicitly to the components
that need it.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- session = Session(); session.set_view("debug")

Expected output:
- session.view == View.DEBUG
"""

import asyncio
from enum import Enum
from typing import Any, Dict, Optional, Union

from loguru import logger

from interview_coder.core.errors import OperationCancelled


class View(str, Enum):
    """UI mode deciding which queue receives new captures"""

    QUEUE = "queue"
    SOLUTIONS = "solutions"
    DEBUG = "debug"


class Session:
    """Mutable per-runtime state"""

    def __init__(self, view: Union[View, str] = View.QUEUE):
        self.view: View = View(view)
        self.problem_info: Optional[Dict[str, Any]] = None
        self.has_debugged: bool = False

    def set_view(self, view: Union[View, str]) -> View:
        """
        Change the current view. Existing queues are not touched.

        Args:
            view: New view, as a View or its string value

        Returns:
            View: The view now in effect

        Raises:
            ValueError: If view is not a known mode
        """
        new_view = View(view)
        if new_view != self.view:
            logger.info(f"View changed from {self.view.value} to {new_view.value}")
        self.view = new_view
        return new_view

    def reset(self) -> None:
        """Return to the initial capture state and forget problem context."""
        self.view = View.QUEUE
        self.problem_info = None
        self.has_debugged = False


class CancellationToken:
    """
    Cooperative cancellation handle for one in-flight operation.

    Cancelling sets a flag that suspendable operations check at each
    resumption point, and cancels the bound asyncio task if there is one.
    """

    def __init__(self, name: str = "operation"):
        self.name = name
        self._cancelled = False
        self._task: Optional[asyncio.Task] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def bind(self, task: asyncio.Task) -> None:
        """Attach the task that should be cancelled along with this token."""
        self._task = task
        if self._cancelled and not task.done():
            task.cancel()

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        logger.info(f"Cancelling {self.name}")
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def raise_if_cancelled(self) -> None:
        """
        Raises:
            OperationCancelled: If cancel() has been called
        """
        if self._cancelled:
            raise OperationCancelled()
