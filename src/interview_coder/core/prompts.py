#!/usr/bin/env python3
"""
Prompt templates for solution generation and debugging.

Both prompts ask the model for a single JSON object whose keys match the
precedence lists in interview_coder.core.responses.
"""

import json
from typing import Any, Dict, Optional

SOLUTION_PROMPT = """You are an expert competitive programmer helping with a coding interview.

Problem statement (extracted from screenshots, may contain OCR noise):
{problem_text}

Write a correct, efficient solution in {language}.

Respond with ONLY a JSON object of this form:
{{
  "approach": "one paragraph describing the idea",
  "solution": "complete {language} code",
  "explanation": ["key step 1", "key step 2"],
  "timeComplexity": "O(...) with a short justification",
  "spaceComplexity": "O(...) with a short justification"
}}"""

DEBUG_PROMPT = """You are an expert programmer reviewing a candidate's attempt at a coding interview problem.

Original problem:
{problem_context}

Current code, test output or error messages (extracted from screenshots):
{debug_text}

Find the bugs, fix them and improve the {language} solution.

Respond with ONLY a JSON object of this form:
{{
  "improvedSolution": "complete corrected {language} code",
  "improvements": ["what was wrong and how it was fixed"],
  "performanceGains": "time complexity of the improved solution",
  "spaceComplexity": "space complexity of the improved solution",
  "debugNotes": "anything the candidate should double-check"
}}"""


def build_solution_prompt(problem_text: str, language: str) -> str:
    return SOLUTION_PROMPT.format(problem_text=problem_text.strip(), language=language)


def build_debug_prompt(debug_text: str, problem_info: Optional[Dict[str, Any]], language: str) -> str:
    """
    Args:
        debug_text: OCR text of the debug screenshots
        problem_info: Problem context from the last successful generation
        language: Target language

    Returns:
        str: Prompt text
    """
    if isinstance(problem_info, dict):
        problem_context = problem_info.get("problem_statement") or json.dumps(problem_info, indent=2)
    else:
        problem_context = str(problem_info or "Not available")
    return DEBUG_PROMPT.format(
        problem_context=problem_context,
        debug_text=debug_text.strip(),
        language=language,
    )
