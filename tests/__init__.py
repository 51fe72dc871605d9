"""
Tests Package

Unit tests for feedback-core.

Structure:
    - conftest.py: Shared fixtures, simulated clock and recording plugins
    - test_*.py: One module per component
"""

__all__ = []
