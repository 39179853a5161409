#!/usr/bin/env python3
"""
Command Line Interface for Interview Coder

This module provides a CLI using Typer and Rich: one-shot screen capture,
solution generation from text or screenshot files, debugging a previous
solution, a service health check, and an interactive session that drives the
screenshot queues and processing coordinator.

This module is part of the Presentation Layer and should only depend on
Core Layer components, not on Integration Layer.

Sample input:
- interview-coder solve -t "Given an array nums..." --language python
- interview-coder --json solve shot1.png shot2.png
- interview-coder session

Expected output:
- Formatted console output of operation results
- Structured JSON output for machine consumption
"""

import asyncio
from typing import Any, Dict, List, Optional

import typer
from loguru import logger

from interview_coder.core import config
from interview_coder.core.errors import InterviewCoderError
from interview_coder.core.image_processing import encode_data_uri, mime_type_for
from interview_coder.core.runtime import build_runtime
from interview_coder.core.utils import configure_logging
from interview_coder.cli.formatters import (
    create_progress,
    print_debug_result,
    print_error,
    print_error_notice,
    print_health,
    print_info,
    print_json,
    print_screenshot_result,
    print_solution,
)
from interview_coder.cli.validators import (
    validate_file_exists,
    validate_image_files,
    validate_json_output,
    validate_language_option,
    validate_log_level,
    validate_problem_file,
)
from interview_coder.cli.schemas import format_cli_response
from interview_coder.cli.interactive import InteractiveSession

VERSION = "1.0.0"


# Initialize typer app with command groups
app = typer.Typer(
    help="Interview Coder: screenshots in, solutions out",
    rich_markup_mode="rich",
    add_completion=False
)

tools_app = typer.Typer(help="Utility tools", rich_markup_mode="rich")
app.add_typer(tools_app, name="tools", help="Utility tools")


@app.callback()
def main(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output results as JSON",
        callback=validate_json_output
    ),
    log_level: str = typer.Option(
        config.LOG_LEVEL,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
        callback=validate_log_level
    ),
    data_dir: Optional[str] = typer.Option(
        None,
        "--data-dir",
        help="Directory for screenshot queues (default: INTERVIEW_CODER_DATA_DIR)"
    ),
):
    """
    Interview Coder - capture coding problems and generate solutions

    Screenshots are OCR'd and sent to Gemini; results are shown as code,
    reasoning and complexity analysis.
    """
    configure_logging(log_level, config.LOG_FILE)
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = json_output
    ctx.obj["data_dir"] = data_dir


def _report_failure(json_output: bool, error: InterviewCoderError) -> None:
    logger.error(f"Command failed: {error.message}")
    if json_output:
        details = {k: v for k, v in error.to_notice().items() if k != "error" and v}
        print_json(format_cli_response(False, error=error.message, details=details or None))
    else:
        print_error_notice(error.to_notice())
    raise typer.Exit(1)


def _load_images(paths: List[str]) -> List[str]:
    images = []
    for path in paths:
        with open(path, "rb") as f:
            images.append(encode_data_uri(f.read(), mime_type_for(path)))
    return images


def _run_with_progress(json_output: bool, description: str, coro) -> Any:
    if json_output:
        return asyncio.run(coro)
    with create_progress() as progress:
        progress.add_task(description, total=None)
        return asyncio.run(coro)


@app.command("capture")
def capture_command(ctx: typer.Context):
    """
    Take a screenshot of the primary screen and add it to the main queue.
    """
    json_output = ctx.obj.get("json_output", False)
    try:
        runtime = build_runtime(data_dir=ctx.obj.get("data_dir"))
        path = asyncio.run(runtime.capture.take_screenshot())
    except InterviewCoderError as e:
        _report_failure(json_output, e)

    if json_output:
        print_json(format_cli_response(True, data={"path": path}))
    else:
        print_screenshot_result(path, queue_name="main")


@app.command("solve")
def solve_command(
    ctx: typer.Context,
    images: Optional[List[str]] = typer.Argument(
        None,
        help="Screenshot files of the problem statement",
        callback=validate_image_files
    ),
    text: Optional[List[str]] = typer.Option(
        None,
        "--text", "-t",
        help="Problem text (repeatable)"
    ),
    text_file: Optional[str] = typer.Option(
        None,
        "--text-file",
        help="File containing the problem text"
    ),
    language: Optional[str] = typer.Option(
        None,
        "--language", "-l",
        help="Solution language (default: INTERVIEW_CODER_LANGUAGE)",
        callback=validate_language_option
    ),
):
    """
    Generate a solution from problem text or screenshots.

    Screenshots take precedence over text when both are given.
    """
    json_output = ctx.obj.get("json_output", False)
    text_list = list(text or [])
    if text_file:
        validate_file_exists(ctx, text_file)
        with open(text_file, "r") as f:
            text_list.append(f.read())

    if not images and not text_list:
        print_error("Provide screenshot files, --text or --text-file")
        raise typer.Exit(1)

    try:
        runtime = build_runtime(data_dir=ctx.obj.get("data_dir"))
        result: Dict[str, Any] = _run_with_progress(
            json_output,
            "Generating solution...",
            runtime.service.generate(
                text_list=text_list or None,
                image_data_list=_load_images(images) if images else None,
                language=language,
            )
        )
    except InterviewCoderError as e:
        _report_failure(json_output, e)

    if json_output:
        print_json(format_cli_response(True, data=result))
    else:
        print_solution(result)


@app.command("debug")
def debug_command(
    ctx: typer.Context,
    images: List[str] = typer.Argument(
        ...,
        help="Screenshots of the current code, output or errors",
        callback=validate_image_files
    ),
    problem_file: Optional[str] = typer.Option(
        None,
        "--problem", "-p",
        help="JSON file with the problem context (problem_info from a solve --json run)"
    ),
    language: Optional[str] = typer.Option(
        None,
        "--language", "-l",
        help="Solution language",
        callback=validate_language_option
    ),
):
    """
    Debug and improve a solution using screenshots of its code and output.
    """
    json_output = ctx.obj.get("json_output", False)
    problem = validate_problem_file(ctx, problem_file)
    if not problem:
        print_error("A problem context file is required (--problem)")
        raise typer.Exit(1)
    # accept a whole `solve --json` response as well as its problem_info
    problem = problem.get("data", problem)
    problem = problem.get("problem_info", problem)

    try:
        runtime = build_runtime(data_dir=ctx.obj.get("data_dir"))
        result: Dict[str, Any] = _run_with_progress(
            json_output,
            "Debugging solution...",
            runtime.service.debug(
                image_data_list=_load_images(images),
                problem_info=problem,
                language=language,
            )
        )
    except InterviewCoderError as e:
        _report_failure(json_output, e)

    if json_output:
        print_json(format_cli_response(True, data=result))
    else:
        print_debug_result(result)


@app.command("health")
def health_command(ctx: typer.Context):
    """
    Check Gemini key configuration and OCR availability.
    """
    json_output = ctx.obj.get("json_output", False)
    runtime = build_runtime(data_dir=ctx.obj.get("data_dir"))
    health = runtime.service.health()

    if json_output:
        print_json(format_cli_response(True, data=health))
    else:
        print_health(health)

    if health["status"] != "healthy":
        raise typer.Exit(1)


@app.command("session")
def session_command(
    ctx: typer.Context,
    language: Optional[str] = typer.Option(
        None,
        "--language", "-l",
        help="Solution language",
        callback=validate_language_option
    ),
):
    """
    Start an interactive session: capture, queue, process, cancel, reset.
    """
    runtime = build_runtime(data_dir=ctx.obj.get("data_dir"))
    try:
        asyncio.run(InteractiveSession(runtime, language=language).run())
    except (KeyboardInterrupt, EOFError):
        print_info("Session ended")


@tools_app.command("version")
def show_version(ctx: typer.Context):
    """
    Show version information.
    """
    version_info = {
        "name": "Interview Coder",
        "version": VERSION,
        "description": "Screenshot OCR and Gemini-powered coding interview assistant.",
    }

    json_output = ctx.obj.get("json_output", False)

    if json_output:
        response = format_cli_response(True, data=version_info)
        print_json(response)
    else:
        print_info(
            f"Name: {version_info['name']}\n"
            f"Version: {version_info['version']}\n"
            f"Description: {version_info['description']}"
        )


if __name__ == "__main__":
    """
    CLI entry point for Interview Coder.

    Examples:
      python -m interview_coder.cli.cli capture
      python -m interview_coder.cli.cli solve -t "Reverse a linked list" -l python
      python -m interview_coder.cli.cli --json health
      python -m interview_coder.cli.cli session
    """
    app()
