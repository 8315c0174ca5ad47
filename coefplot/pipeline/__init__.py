# coefplot/pipeline/__init__.py
"""Cross-model aggregation, layout decisions, and the public entry points."""
from .config import MultiplotConfig, StyleConfig
from .aggregator import ModelEntry, aggregate_models, entries_to_frame
from .layout import LayoutDescriptor, finalize, validate_axis_config
from .multiplot import MultiplotData, build_multiplot, multiplot

__all__ = [
    "LayoutDescriptor",
    "ModelEntry",
    "MultiplotConfig",
    "MultiplotData",
    "StyleConfig",
    "aggregate_models",
    "build_multiplot",
    "entries_to_frame",
    "finalize",
    "multiplot",
    "validate_axis_config",
]
