"""Cross-model aggregation.

Runs extraction, intervals, naming and sorting for every model, attaches
model identity and display labels, and merges the results in a
deterministic order.
"""
from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

import numpy as np
import pandas as pd

from coefplot.core.extract import RawCoefficient, adapter_for
from coefplot.core.intervals import build_intervals
from coefplot.core.names import DisplayCoefficient, resolve_names
from coefplot.core.sorting import sort_coefficients
from coefplot.errors import NameCoverageError
from coefplot.utils.helpers import first_appearance

if TYPE_CHECKING:
    from coefplot.pipeline.config import MultiplotConfig

__all__ = [
    "TABLE_COLUMNS",
    "ModelEntry",
    "aggregate_models",
    "collect_models",
    "entries_to_frame",
    "extract_model",
    "label_coefficients",
    "merge_factor_levels",
    "process_model",
    "resolve_labels",
]

LOGGER = logging.getLogger(__name__)

TABLE_COLUMNS = [
    "model_id",
    "model",
    "coefficient",
    "variable",
    "estimate",
    "se",
    "low_inner",
    "high_inner",
    "low_outer",
    "high_outer",
    "kind",
    "position",
]
_FLOAT_COLUMNS = ["estimate", "se", "low_inner", "high_inner", "low_outer", "high_outer"]


@dataclass
class ModelEntry:
    """One model's processed coefficients.

    ``position`` is the model's index in the caller's input, kept so that
    the input order can be recovered after label sorting.
    """

    model_id: str
    label: str
    coefficients: list[DisplayCoefficient] = field(default_factory=list)
    position: int = 0

    @property
    def has_valid_coefficients(self) -> bool:
        return any(not math.isnan(c.estimate) for c in self.coefficients)


def collect_models(models: Any) -> list[tuple[str, Any]]:
    """Pair every model with its identifier.

    Mappings keep their keys (as strings); lists and tuples get synthetic
    ``Model1``, ``Model2``, ... identifiers. Any other object is a single model.
    """
    if isinstance(models, Mapping):
        pairs = [(str(key), model) for key, model in models.items()]
        ids = [mid for mid, _ in pairs]
        if len(set(ids)) != len(ids):
            raise ValueError("Model identifiers must be unique once converted to strings.")
    elif isinstance(models, (list, tuple)):
        pairs = [(f"Model{i + 1}", model) for i, model in enumerate(models)]
    else:
        pairs = [("Model1", models)]
    if not pairs:
        raise ValueError("At least one model is required.")
    return pairs


def resolve_labels(
    model_ids: Sequence[str], names: Mapping[Any, str] | Sequence[str] | None,
) -> dict[str, str]:
    """Map model identifiers to display labels.

    Raises ``NameCoverageError`` when explicit ``names`` omit a model.
    """
    if names is None:
        return {mid: mid for mid in model_ids}
    if isinstance(names, Mapping):
        lookup = {str(k): str(v) for k, v in names.items()}
        missing = [mid for mid in model_ids if mid not in lookup]
        extra = sorted(set(lookup) - set(model_ids))
        if extra:
            LOGGER.debug("Ignoring names for unknown models: %s", extra)
    else:
        labels = [str(v) for v in names]
        if len(labels) > len(model_ids):
            raise ValueError(
                f"names has {len(labels)} labels but only {len(model_ids)} models were given.",
            )
        lookup = dict(zip(model_ids, labels))
        missing = list(model_ids[len(labels):])
    if missing:
        raise NameCoverageError(missing)
    resolved = {mid: lookup[mid] for mid in model_ids}
    if len(set(resolved.values())) != len(resolved):
        raise ValueError("names must give every model a distinct label.")
    return resolved


def extract_model(model: Any) -> tuple[list[RawCoefficient], dict[str, tuple[str, ...]]]:
    """Coefficients and factor levels of one model."""
    adapter = adapter_for(model)
    return adapter.report_coefficients(), adapter.factor_levels()


def merge_factor_levels(
    reported: Iterable[Mapping[str, Sequence[str]]],
) -> dict[str, tuple[str, ...]]:
    """Union of the factor levels reported by several models.

    Labels are resolved against the merged levels, so a variable gets the
    same display name in every model, including models that report no
    factor metadata of their own.
    """
    merged: dict[str, list[str]] = {}
    for levels in reported:
        for stem, values in levels.items():
            merged.setdefault(str(stem), []).extend(str(v) for v in values)
    return {stem: tuple(first_appearance(values)) for stem, values in merged.items()}


def label_coefficients(
    model_id: str,
    raw: Sequence[RawCoefficient],
    config: MultiplotConfig,
    factor_levels: Mapping[str, Sequence[str]],
) -> list[DisplayCoefficient]:
    """Intervals -> names -> sort for one model's extracted coefficients."""
    intervals = build_intervals(raw, config.inner_ci, config.outer_ci)
    named = resolve_names(
        intervals,
        intercept=config.intercept,
        intercept_name=config.intercept_name,
        variables=config.variables,
        factors=config.factors,
        only=config.only,
        shorten=config.shorten,
        new_names=config.new_names,
        factor_levels=factor_levels,
    )
    ordered = sort_coefficients(named, config.sort, config.decreasing)
    if not ordered:
        LOGGER.debug("Model %s has no coefficients left after filtering", model_id)
    return [replace(c, model_id=model_id) for c in ordered]


def process_model(
    model_id: str,
    model: Any,
    config: MultiplotConfig,
    factor_levels: Mapping[str, Sequence[str]] | None = None,
) -> list[DisplayCoefficient]:
    """Extract -> intervals -> names -> sort for a single model.

    ``factor_levels`` (e.g. merged from other models) extends the levels the
    model reports itself.
    """
    raw, levels = extract_model(model)
    if factor_levels is not None:
        levels = merge_factor_levels([levels, factor_levels])
    return label_coefficients(model_id, raw, config, levels)


def aggregate_models(models: Any, config: MultiplotConfig) -> list[ModelEntry]:
    """Process every model and return the entries in display order.

    All models are extracted before any is labelled, so that factor levels
    reported by one model also shorten the same labels in the others. With
    explicit ``names`` the models are ordered alphabetically by label;
    otherwise they keep the input order.
    """
    pairs = collect_models(models)
    labels = resolve_labels([mid for mid, _ in pairs], config.names)

    n_workers = min(int(config.n_jobs), len(pairs))
    if n_workers > 1:
        with ThreadPoolExecutor(max_workers=n_workers) as ex:
            futures = [ex.submit(extract_model, model) for _, model in pairs]
            extracted = [fut.result() for fut in futures]
    else:
        extracted = [extract_model(model) for _, model in pairs]

    levels = merge_factor_levels(lv for _, lv in extracted)
    if levels:
        LOGGER.debug("Factor levels across models: %s", levels)
    processed = [
        label_coefficients(mid, raw, config, levels)
        for (mid, _), (raw, _) in zip(pairs, extracted)
    ]

    entries = [
        ModelEntry(model_id=mid, label=labels[mid], coefficients=coefs, position=pos)
        for pos, ((mid, _), coefs) in enumerate(zip(pairs, processed))
    ]
    if config.names is not None:
        return sorted(entries, key=lambda e: e.label)
    return entries


def _nan_if_none(val: float | None) -> float:
    return np.nan if val is None else float(val)


def entries_to_frame(entries: Sequence[ModelEntry]) -> pd.DataFrame:
    """Flatten entries into the tidy table (one row per coefficient per model)."""
    rows: list[dict[str, Any]] = []
    for entry in entries:
        for pos, c in enumerate(entry.coefficients):
            rows.append(
                {
                    "model_id": entry.model_id,
                    "model": entry.label,
                    "coefficient": c.display_name,
                    "variable": c.variable,
                    "estimate": c.estimate,
                    "se": c.se,
                    "low_inner": _nan_if_none(c.low_inner),
                    "high_inner": _nan_if_none(c.high_inner),
                    "low_outer": _nan_if_none(c.low_outer),
                    "high_outer": _nan_if_none(c.high_outer),
                    "kind": c.kind,
                    "position": pos,
                },
            )
    table = pd.DataFrame(rows, columns=TABLE_COLUMNS)
    table[_FLOAT_COLUMNS] = table[_FLOAT_COLUMNS].astype(np.float64)
    table["position"] = table["position"].astype(np.int64)
    table["model"] = pd.Categorical(
        table["model"], categories=[e.label for e in entries], ordered=True,
    )
    return table
