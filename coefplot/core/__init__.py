# coefplot/core/__init__.py
"""Per-model computational steps: extraction, intervals, naming, sorting."""
from . import extract, intervals, names, results, sorting

__all__ = ["extract", "intervals", "names", "results", "sorting"]
