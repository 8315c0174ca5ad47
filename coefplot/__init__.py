"""coefplot: compare coefficients across fitted models.

Extracts estimates and standard errors from any number of models, builds
nested confidence intervals, applies selection/naming/sorting rules, and
merges everything into one tidy table ready for plotting.
"""
from __future__ import annotations

from importlib import import_module
from typing import Any

__version__ = "0.1.0"

__all__ = [
    "CoefplotError",
    "EstimationResult",
    "InvalidAxisConfig",
    "LayoutDescriptor",
    "ModelAdapter",
    "MultiplotConfig",
    "NameCoverageError",
    "StyleConfig",
    "UnsupportedModel",
    "build_multiplot",
    "ci_multiplier",
    "coeftable",
    "extract_coefficients",
    "multiplot",
    "register_adapter",
    "render_multiplot",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "CoefplotError": ("coefplot.errors", "CoefplotError"),
    "InvalidAxisConfig": ("coefplot.errors", "InvalidAxisConfig"),
    "NameCoverageError": ("coefplot.errors", "NameCoverageError"),
    "UnsupportedModel": ("coefplot.errors", "UnsupportedModel"),
    "EstimationResult": ("coefplot.core.results", "EstimationResult"),
    "ModelAdapter": ("coefplot.core.extract", "ModelAdapter"),
    "extract_coefficients": ("coefplot.core.extract", "extract_coefficients"),
    "register_adapter": ("coefplot.core.extract", "register_adapter"),
    "ci_multiplier": ("coefplot.core.intervals", "ci_multiplier"),
    "MultiplotConfig": ("coefplot.pipeline.config", "MultiplotConfig"),
    "StyleConfig": ("coefplot.pipeline.config", "StyleConfig"),
    "LayoutDescriptor": ("coefplot.pipeline.layout", "LayoutDescriptor"),
    "build_multiplot": ("coefplot.pipeline.multiplot", "build_multiplot"),
    "multiplot": ("coefplot.pipeline.multiplot", "multiplot"),
    "coeftable": ("coefplot.output.summary", "coeftable"),
    "render_multiplot": ("coefplot.output.plots", "render_multiplot"),
}


def __getattr__(name: str) -> Any:
    """Lazily import public entry points on first access."""
    if name in _LAZY_IMPORTS:
        module_name, attr_name = _LAZY_IMPORTS[name]
        module = import_module(module_name)
        attr = getattr(module, attr_name)
        globals()[name] = attr
        return attr
    raise AttributeError(f"module 'coefplot' has no attribute '{name}'")


def __dir__() -> list[str]:
    """Ensure dir() exposes lazily imported names."""
    return sorted(set(globals()) | set(__all__))
