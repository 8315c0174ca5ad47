"""Cross-model filtering and axis/facet decisions.

The output of this step is what the rendering collaborator consumes: the
final tidy table and a ``LayoutDescriptor``.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import pandas as pd

from coefplot.errors import InvalidAxisConfig
from coefplot.pipeline.aggregator import ModelEntry, entries_to_frame

if TYPE_CHECKING:
    from coefplot.pipeline.config import MultiplotConfig, StyleConfig

__all__ = [
    "AXIS_MODES",
    "LayoutDescriptor",
    "decide_layout",
    "drop_empty_models",
    "finalize",
    "normalize_by",
    "validate_axis_config",
]

LOGGER = logging.getLogger(__name__)

AXIS_MODES = ("Coefficient", "Model")


def normalize_by(by: str | None) -> str:
    """Canonical axis mode; accepts any case and unambiguous prefixes."""
    if by is None:
        return "Coefficient"
    key = str(by).strip().lower()
    hits = [mode for mode in AXIS_MODES if key and mode.lower().startswith(key)]
    if len(hits) != 1:
        raise InvalidAxisConfig(f"by must be one of {AXIS_MODES}, got '{by}'.")
    return hits[0]


def validate_axis_config(by: str | None, variables: Sequence[str] | None) -> None:
    """Plotting models along the axis requires exactly one selected variable."""
    if normalize_by(by) == "Model" and (variables is None or len(variables) != 1):
        raise InvalidAxisConfig(
            "If plotting the model along the axis then exactly one variable "
            "must be specified in `variables`.",
        )


@dataclass(frozen=True)
class LayoutDescriptor:
    """How the rendering collaborator should lay out the tidy table.

    ``axis_mode`` is ``"Coefficient"`` (coefficients on the category axis,
    coloured by model) or ``"Model"`` (models on the category axis, one
    colour). ``models`` lists the retained model labels in display order.
    ``numeric`` asks for a continuous band, which only applies when exactly
    one factor is selected.
    """

    axis_mode: str
    facet: bool
    facet_scales: str
    facet_columns: int
    color_mode: str
    color: str | None
    models: tuple[str, ...]
    numeric: bool = False


def drop_empty_models(entries: Sequence[ModelEntry]) -> list[ModelEntry]:
    """Remove models without a single coefficient carrying a finite estimate."""
    kept = [e for e in entries if e.has_valid_coefficients]
    dropped = [e.model_id for e in entries if not e.has_valid_coefficients]
    if dropped:
        LOGGER.debug("Dropping models without valid coefficients: %s", dropped)
    return kept


def decide_layout(
    entries: Sequence[ModelEntry],
    config: MultiplotConfig,
    style: StyleConfig | None = None,
) -> LayoutDescriptor:
    models = tuple(e.label for e in entries)
    numeric = bool(
        style is not None
        and style.numeric
        and config.factors is not None
        and len(config.factors) == 1
    )
    # default column count follows the retained models
    ncol = config.ncol if config.ncol is not None else max(1, len(models))
    if config.by == "Model":
        return LayoutDescriptor(
            axis_mode="Model",
            facet=False,
            facet_scales=config.scales,
            facet_columns=ncol,
            color_mode="single",
            color=None if style is None else style.color,
            models=models,
            numeric=numeric,
        )
    return LayoutDescriptor(
        axis_mode="Coefficient",
        facet=not config.single,
        facet_scales=config.scales,
        facet_columns=ncol,
        color_mode="model",
        color=None,
        models=models,
        numeric=numeric,
    )


def _check_model_axis(table: pd.DataFrame) -> None:
    names = table["coefficient"].unique().tolist()
    if len(names) != 1:
        found = ", ".join(map(str, names)) if names else "none"
        raise InvalidAxisConfig(
            "Plotting by model needs exactly one coefficient across all models; "
            f"found: {found}.",
        )


def finalize(
    entries: Sequence[ModelEntry],
    config: MultiplotConfig,
    style: StyleConfig | None = None,
) -> tuple[pd.DataFrame, LayoutDescriptor]:
    """Apply ``drop``, validate the axis mode, and build table + layout."""
    kept = drop_empty_models(entries) if config.drop else list(entries)
    table = entries_to_frame(kept)
    if config.by == "Model":
        _check_model_axis(table)
    return table, decide_layout(kept, config, style)
