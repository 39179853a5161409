#!/usr/bin/env python3
"""
Formatters for Interview Coder CLI

This module provides rich formatting utilities for the CLI presentation layer:
panels for captures, solutions and debug results, queue tables, processing
event notifications and progress indicators.

This module is part of the Presentation Layer and should only depend on
Core Layer components, not on Integration Layer.

Sample input:
- Solution dictionary from SolutionService.generate
- Queue paths from ScreenshotStore.list_paths
- Error notices from InterviewCoderError.to_notice

Expected output:
- Rich formatted tables, panels, and progress indicators
"""

import os
import json
from typing import Dict, List, Any, Optional

from rich.console import Console, Group
from rich.table import Table
from rich.panel import Panel
from rich.syntax import Syntax
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.text import Text

from interview_coder.core.events import ProcessingEvent


# Initialize console
console = Console()


# Color scheme
COLORS = {
    "success": "green",
    "error": "red",
    "warning": "yellow",
    "info": "blue",
    "path": "cyan",
    "highlight": "magenta",
    "dim": "grey70",
}

# Pygments lexer names for solution languages
LEXERS = {
    "cpp": "cpp",
    "python": "python",
    "java": "java",
    "javascript": "javascript",
    "csharp": "csharp",
    "go": "go",
    "rust": "rust",
    "kotlin": "kotlin",
    "swift": "swift",
}


def print_screenshot_result(path: str, queue_name: Optional[str] = None) -> None:
    """
    Format and print a captured screenshot to the console.

    Args:
        path: Path of the stored screenshot
        queue_name: Queue the screenshot was added to
    """
    file_info = Text()
    file_info.append("Filename: ", style=COLORS["dim"])
    file_info.append(f"{os.path.basename(path)}\n", style=COLORS["path"])
    file_info.append("Directory: ", style=COLORS["dim"])
    file_info.append(f"{os.path.dirname(path)}", style=COLORS["path"])

    if os.path.exists(path):
        size_kb = os.path.getsize(path) / 1024
        file_info.append("\nSize: ", style=COLORS["dim"])
        file_info.append(f"{size_kb:.1f} KB", style=COLORS["info"])

    if queue_name:
        file_info.append("\nQueue: ", style=COLORS["dim"])
        file_info.append(queue_name, style=COLORS["highlight"])

    panel = Panel(
        file_info,
        title="[bold green]Screenshot Captured Successfully",
        border_style=COLORS["success"],
        padding=(1, 2)
    )

    console.print(panel)


def print_queue_table(paths: List[str], title: str = "Screenshot Queue") -> None:
    """
    Format and print queued screenshots as a table.

    Args:
        paths: Queued paths, oldest first
        title: Table title
    """
    table = Table(title=title)

    table.add_column("#", justify="right", style=COLORS["highlight"])
    table.add_column("File", style=COLORS["path"])
    table.add_column("Size", justify="right", style=COLORS["info"])

    for index, path in enumerate(paths, start=1):
        size = f"{os.path.getsize(path) / 1024:.1f} KB" if os.path.exists(path) else "missing"
        table.add_row(str(index), os.path.basename(path), size)

    if not paths:
        table.add_row("-", "(empty)", "-")

    console.print(table)


def _complexity_table(time_complexity: str, space_complexity: str) -> Table:
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column(style=COLORS["dim"])
    table.add_column(style=COLORS["highlight"])
    table.add_row("Time", time_complexity or "Not specified")
    table.add_row("Space", space_complexity or "Not specified")
    return table


def _thoughts_text(thoughts: List[str]) -> Text:
    text = Text()
    for thought in thoughts:
        text.append("• ", style=COLORS["info"])
        text.append(f"{thought}\n")
    return text


def print_solution(result: Dict[str, Any]) -> None:
    """
    Format and print a generated solution.

    Args:
        result: Solution dictionary (code, thoughts, complexities, approach, language)
    """
    language = result.get("language") or "text"
    parts = []

    if result.get("approach"):
        parts.append(Text(result["approach"] + "\n"))
    if result.get("thoughts"):
        parts.append(_thoughts_text(result["thoughts"]))
    parts.append(_complexity_table(result.get("time_complexity", ""), result.get("space_complexity", "")))

    console.print(Panel(
        Group(*parts),
        title="[bold blue]My Thoughts",
        border_style=COLORS["info"],
        padding=(1, 2)
    ))
    console.print(Panel(
        Syntax(result.get("code") or "", LEXERS.get(language, "text"), theme="monokai", line_numbers=True),
        title=f"[bold green]Solution ({language})",
        border_style=COLORS["success"],
        padding=(1, 2)
    ))


def print_debug_result(result: Dict[str, Any]) -> None:
    """
    Format and print a debug result.

    Args:
        result: Debug dictionary (new_code, thoughts, complexities, debug_notes)
    """
    language = result.get("language") or "text"
    parts = []

    if result.get("thoughts"):
        parts.append(_thoughts_text(result["thoughts"]))
    if result.get("debug_notes"):
        parts.append(Text(result["debug_notes"] + "\n", style=COLORS["warning"]))
    parts.append(_complexity_table(result.get("time_complexity", ""), result.get("space_complexity", "")))

    console.print(Panel(
        Group(*parts),
        title="[bold blue]What I Changed",
        border_style=COLORS["info"],
        padding=(1, 2)
    ))
    console.print(Panel(
        Syntax(result.get("new_code") or "", LEXERS.get(language, "text"), theme="monokai", line_numbers=True),
        title=f"[bold green]Improved Solution ({language})",
        border_style=COLORS["success"],
        padding=(1, 2)
    ))


def print_health(health: Dict[str, Any]) -> None:
    """
    Format and print a health report as a table.

    Args:
        health: Health dictionary from SolutionService.health
    """
    status = health.get("status", "unknown")
    table = Table(title=f"Service Health: {status}")

    table.add_column("Service", style=COLORS["highlight"])
    table.add_column("Available", justify="center")

    for name, available in health.get("services", {}).items():
        mark = Text("yes", style=COLORS["success"]) if available else Text("no", style=COLORS["error"])
        table.add_row(name, mark)

    console.print(table)


def print_error(message: str, title: str = "Error") -> None:
    """
    Format and print error message to the console.

    Args:
        message: Error message
        title: Panel title
    """
    panel = Panel(
        Text(message, style=COLORS["error"]),
        title=f"[bold {COLORS['error']}]{title}",
        border_style=COLORS["error"],
        padding=(1, 2)
    )

    console.print(panel)


def print_error_notice(notice: Dict[str, Any], title: str = "Error") -> None:
    """Print an {error, technical, suggestion} notice."""
    message = notice.get("error") or "Unknown error"
    if notice.get("suggestion"):
        message = f"{message}\n\nSuggestion: {notice['suggestion']}"
    print_error(message, title=title)


def print_warning(message: str, title: str = "Warning") -> None:
    """
    Format and print warning message to the console.

    Args:
        message: Warning message
        title: Panel title
    """
    panel = Panel(
        Text(message, style=COLORS["warning"]),
        title=f"[bold {COLORS['warning']}]{title}",
        border_style=COLORS["warning"],
        padding=(1, 2)
    )

    console.print(panel)


def print_info(message: str, title: str = "Info") -> None:
    """
    Format and print info message to the console.

    Args:
        message: Info message
        title: Panel title
    """
    panel = Panel(
        Text(message, style=COLORS["info"]),
        title=f"[bold {COLORS['info']}]{title}",
        border_style=COLORS["info"],
        padding=(1, 2)
    )

    console.print(panel)


def print_json(data: Dict[str, Any]) -> None:
    """
    Print JSON data for machine consumption.

    Args:
        data: JSON-serializable data
    """
    console.print_json(json.dumps(data, default=str))


def print_event(event: ProcessingEvent, payload: Optional[Any] = None) -> None:
    """
    Render a processing event notification. Used as an EventChannel listener
    by the interactive session.

    Args:
        event: Event emitted by the coordinator
        payload: Event payload
    """
    if event == ProcessingEvent.INITIAL_START:
        console.print(f"[{COLORS['info']}]Generating solution...")
    elif event == ProcessingEvent.DEBUG_START:
        console.print(f"[{COLORS['info']}]Debugging solution...")
    elif event == ProcessingEvent.SOLUTION_SUCCESS:
        print_solution(payload or {})
    elif event == ProcessingEvent.DEBUG_SUCCESS:
        print_debug_result(payload or {})
    elif event in (ProcessingEvent.INITIAL_SOLUTION_ERROR, ProcessingEvent.DEBUG_ERROR):
        notice = payload if isinstance(payload, dict) else {"error": str(payload)}
        title = "Solution Error" if event == ProcessingEvent.INITIAL_SOLUTION_ERROR else "Debug Error"
        print_error_notice(notice, title=title)
    elif event == ProcessingEvent.NO_SCREENSHOTS:
        print_warning("No screenshots to process", title="Queue Empty")
    elif event == ProcessingEvent.RESET_VIEW:
        console.print(f"[{COLORS['warning']}]View reset to queue")


def create_progress(description: str = "Processing") -> Progress:
    """
    Create a spinner progress indicator.

    Args:
        description: Progress description

    Returns:
        Progress: Rich progress indicator
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        TimeElapsedColumn(),
        transient=True,
    )


if __name__ == "__main__":
    """Render sample output"""
    print_screenshot_result("/tmp/screenshots/example.png", queue_name="main")
    print_queue_table(["/tmp/screenshots/a.png", "/tmp/screenshots/b.png"], title="Queue (main)")
    print_solution({
        "code": "def two_sum(nums, target):\n    seen = {}",
        "thoughts": ["Store each value", "Look up the complement"],
        "time_complexity": "O(n)",
        "space_complexity": "O(n)",
        "approach": "Hash map",
        "language": "python",
    })
    print_event(ProcessingEvent.NO_SCREENSHOTS)
    print_error_notice({"error": "No Gemini API keys available", "suggestion": "Set GEMINI_API_KEY"})
    print_json({"success": True, "data": {"path": "/tmp/screenshots/example.png"}})
