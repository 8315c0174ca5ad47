# coefplot/output/__init__.py
"""Output and visualization module for aggregated coefficients."""
from .plots import line_style, render_multiplot
from .summary import coeftable

__all__ = [
    "coeftable",
    "line_style",
    "render_multiplot",
]
