"""
CLI Layer for Interview Coder

This package contains the CLI (Command Line Interface) layer, providing a rich
interface for human users.

The CLI layer is designed to:
1. Handle user interaction concerns
2. Format outputs for human readability
3. Parse and validate command-line arguments
4. Implement CLI-specific error handling

Usage:
    from interview_coder.cli import app as interview_coder_app

    # Run the CLI app
    interview_coder_app()

    # Alternative: use formatters directly
    from interview_coder.cli.formatters import print_solution
    print_solution(result)
"""

# CLI application
from interview_coder.cli.cli import app

# Formatters for rich output
from interview_coder.cli.formatters import (
    print_screenshot_result,
    print_queue_table,
    print_solution,
    print_debug_result,
    print_health,
    print_event,
    print_error,
    print_error_notice,
    print_warning,
    print_info,
    print_json,
    create_progress,
    console
)

# CLI validators
from interview_coder.cli.validators import (
    validate_file_exists,
    validate_image_files,
    validate_language_option,
    validate_problem_file,
    validate_log_level,
    validate_json_output,
    parse_view
)

# Schema definitions and validation
from interview_coder.cli.schemas import (
    format_cli_response,
    validate_output_against_schema
)

# Interactive session
from interview_coder.cli.interactive import InteractiveSession

__all__ = [
    # CLI application
    'app',

    # Formatters
    'print_screenshot_result',
    'print_queue_table',
    'print_solution',
    'print_debug_result',
    'print_health',
    'print_event',
    'print_error',
    'print_error_notice',
    'print_warning',
    'print_info',
    'print_json',
    'create_progress',
    'console',

    # Validators
    'validate_file_exists',
    'validate_image_files',
    'validate_language_option',
    'validate_problem_file',
    'validate_log_level',
    'validate_json_output',
    'parse_view',

    # Schemas
    'format_cli_response',
    'validate_output_against_schema',

    # Interactive session
    'InteractiveSession'
]
