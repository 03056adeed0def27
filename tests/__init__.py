"""TIL Insights Test Suite

Test organization:
- unit/: Fast, isolated tests for the analytics, repository and tool layers

Running tests:
    pytest tests/
    pytest tests/unit/til/test_streaks.py -v
"""
