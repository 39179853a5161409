"""
Tests for Interview Coder

Run with `python -m interview_coder.tests.run_tests` or `pytest src/interview_coder/tests`.
"""
