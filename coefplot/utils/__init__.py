# coefplot/utils/__init__.py
"""Utility functions module."""
from .helpers import bare_stem, first_appearance, format_value, split_term

__all__ = [
    "bare_stem",
    "first_appearance",
    "format_value",
    "split_term",
]
