#!/usr/bin/env python3
"""
Interactive session for Interview Coder

A prompt loop over one runtime that stands in for the desktop shortcuts:
capture screenshots, inspect and prune the queues, switch views, and start,
cancel or reset processing. Processing runs as a background task so "cancel"
can be typed while a request is in flight; results arrive as event
notifications.

This module is part of the Presentation Layer and should only depend on
Core Layer components, not on Integration Layer.

Sample input:
- capture / list / process / cancel / reset / quit

Expected output:
- Rich panels for captures, solutions, debug results and errors
"""

import asyncio
from typing import Optional, Set

from loguru import logger
from rich.prompt import Prompt
from rich.table import Table

from interview_coder.core.errors import InterviewCoderError
from interview_coder.core.runtime import InterviewCoderRuntime
from interview_coder.core.session import View
from interview_coder.cli.formatters import (
    COLORS,
    console,
    print_error_notice,
    print_event,
    print_info,
    print_queue_table,
    print_screenshot_result,
    print_warning,
)
from interview_coder.cli.validators import parse_view

COMMANDS = {
    "capture": "Take a screenshot into the current view's queue",
    "remove": "Delete the most recent screenshot of the current queue",
    "list": "Show the current queue (or 'list main' / 'list extra')",
    "preview N": "Show details of screenshot N in the current queue",
    "view MODE": "Switch view: queue, solutions or debug",
    "process": "Generate a solution (queue view) or debug it (other views)",
    "solve TEXT": "Generate a solution from typed problem text",
    "cancel": "Cancel in-flight processing",
    "reset": "Cancel everything, clear both queues, return to queue view",
    "help": "Show this table",
    "quit": "Leave the session",
}


def print_help() -> None:
    table = Table(title="Session Commands")
    table.add_column("Command", style=COLORS["highlight"])
    table.add_column("Description")
    for command, description in COMMANDS.items():
        table.add_row(command, description)
    console.print(table)


class InteractiveSession:
    """Prompt loop driving one runtime"""

    def __init__(self, runtime: InterviewCoderRuntime, language: Optional[str] = None):
        self.runtime = runtime
        self.language = language
        self._tasks: Set[asyncio.Task] = set()

    def _spawn(self, coro) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _capture(self) -> None:
        try:
            path = await self.runtime.capture.take_screenshot()
        except InterviewCoderError as e:
            logger.error(f"Capture failed: {e.message}")
            print_error_notice(e.to_notice(), title="Capture Failed")
            return
        queue_name = "main" if self.runtime.session.view == View.QUEUE else "extra"
        print_screenshot_result(path, queue_name=queue_name)

    def _preview(self, argument: Optional[str]) -> None:
        paths = self.runtime.store.list_paths()
        try:
            index = int(argument or "")
        except ValueError:
            print_warning("Usage: preview N")
            return
        if not 1 <= index <= len(paths):
            print_warning(f"No screenshot #{index} in the current queue")
            return

        path = paths[index - 1]
        try:
            payload = self.runtime.store.read_as_preview_payload(path)
        except InterviewCoderError as e:
            print_error_notice(e.to_notice(), title="Preview Failed")
            return
        header = payload.split(",", 1)[0]
        print_info(f"{path}\n{header}\n{len(payload)} chars of preview data", title=f"Screenshot #{index}")

    def handle(self, line: str) -> bool:
        """
        Run one command line.

        Returns:
            bool: False when the session should end
        """
        parts = line.strip().split(maxsplit=1)
        if not parts:
            return True
        command = parts[0].lower()
        argument = parts[1] if len(parts) > 1 else None
        store = self.runtime.store
        coordinator = self.runtime.coordinator

        if command in ("quit", "exit", "q"):
            return False
        elif command == "capture":
            self._spawn(self._capture())
        elif command == "remove":
            result = store.remove_last()
            if result["success"]:
                console.print(f"[{COLORS['success']}]Removed {result['path']}")
            else:
                print_warning(result["error"])
        elif command == "list":
            selector = argument.lower() if argument else None
            if selector not in (None, "main", "extra", "both"):
                print_warning("Usage: list [main|extra|both]")
            else:
                print_queue_table(store.list_paths(selector), title=f"Queue ({selector or store.view.value})")
        elif command == "preview":
            self._preview(argument)
        elif command == "view":
            view = parse_view(argument or "")
            if view is None:
                print_warning("Usage: view queue|solutions|debug")
            else:
                store.set_view(view)
        elif command == "process":
            self._spawn(coordinator.process_screenshots(language=self.language))
        elif command == "solve":
            if not argument:
                print_warning("Usage: solve TEXT")
            else:
                self._spawn(coordinator.process_screenshots(text_list=[argument], language=self.language))
        elif command == "cancel":
            if not coordinator.cancel_ongoing_requests():
                print_info("Nothing to cancel")
        elif command == "reset":
            result = coordinator.reset()
            print_info(f"Deleted {result['deleted']} screenshot(s)", title="Reset")
        elif command == "help":
            print_help()
        else:
            print_warning(f"Unknown command: {command}. Type 'help' for a list.")
        return True

    async def run(self) -> None:
        unsubscribe = self.runtime.events.subscribe(print_event)
        print_help()
        try:
            while True:
                line = await asyncio.to_thread(Prompt.ask, f"[bold]{self.runtime.session.view.value}[/bold]")
                if not self.handle(line):
                    break
                # let fast commands print before the next prompt
                await asyncio.sleep(0)
        finally:
            self.runtime.coordinator.cancel_ongoing_requests()
            if self._tasks:
                await asyncio.gather(*self._tasks, return_exceptions=True)
            unsubscribe()
