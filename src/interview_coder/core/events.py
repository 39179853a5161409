#!/usr/bin/env python3
"""
UI Event Channel

One-way notifications from the processing coordinator to whatever is
presenting results (the interactive CLI session, the MCP wrappers). Listener
exceptions are logged and never propagate back into processing.

Sample input:
- channel.emit(ProcessingEvent.SOLUTION_SUCCESS, {"code": "..."})

Expected output:
- every subscribed listener is called with (ProcessingEvent.SOLUTION_SUCCESS, {...})
"""

from enum import Enum
from typing import Any, Callable, List, Optional

from loguru import logger


class ProcessingEvent(str, Enum):
    INITIAL_START = "initial-start"
    SOLUTION_SUCCESS = "solution-success"
    INITIAL_SOLUTION_ERROR = "solution-error"
    NO_SCREENSHOTS = "processing-no-screenshots"
    DEBUG_START = "debug-start"
    DEBUG_SUCCESS = "debug-success"
    DEBUG_ERROR = "debug-error"
    RESET_VIEW = "reset-view"


Listener = Callable[[ProcessingEvent, Optional[Any]], None]


class EventChannel:
    """Fan-out of processing events to subscribed listeners"""

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener.

        Args:
            listener: Called as listener(event, payload)

        Returns:
            Callable[[], None]: Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, event: ProcessingEvent, payload: Optional[Any] = None) -> None:
        logger.debug(f"Event {event.value}")
        for listener in list(self._listeners):
            try:
                listener(event, payload)
            except Exception as e:
                logger.exception(f"Event listener failed for {event.value}: {str(e)}")
