"""Coefficient extraction.

Turns a fitted model into an ordered list of ``RawCoefficient``. Models are
reached through small adapter classes, one per supported reporting
convention; the rest of the pipeline never looks at the concrete model type.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from coefplot.errors import UnsupportedModel
from coefplot.utils.helpers import bare_stem

__all__ = [
    "FrameAdapter",
    "ModelAdapter",
    "NativeAdapter",
    "RawCoefficient",
    "ResultAdapter",
    "StatsmodelsAdapter",
    "adapter_for",
    "extract_coefficients",
    "extract_factor_levels",
    "factor_levels_from_design",
    "register_adapter",
]

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawCoefficient:
    """One coefficient as reported by a model."""

    variable: str
    estimate: float
    se: float


# ---------------------------------------------------------------------
# Factor metadata
# ---------------------------------------------------------------------
def factor_levels_from_design(design_info: Any) -> dict[str, tuple[str, ...]]:
    """Collect categorical factors and their levels from a ``patsy.DesignInfo``."""
    levels: dict[str, tuple[str, ...]] = {}
    try:
        items = design_info.factor_infos.items()
    except AttributeError as exc:
        LOGGER.debug("Object is not a patsy DesignInfo: %s", exc)
        return levels
    for factor, info in items:
        if getattr(info, "type", None) != "categorical":
            continue
        stem = bare_stem(factor.name())
        levels[stem] = tuple(str(c) for c in info.categories)
    return levels


def _normalize_levels(raw: Mapping[Any, Any]) -> dict[str, tuple[str, ...]]:
    out: dict[str, tuple[str, ...]] = {}
    for key, vals in raw.items():
        if vals is None or isinstance(vals, str):
            vals = ()
        out[bare_stem(key)] = tuple(str(v) for v in vals)
    return out


def _find_design_info(model: Any) -> Any:
    design = getattr(model, "design_info", None)
    if design is not None:
        return design
    # statsmodels formula API: results.model.data.design_info
    data = getattr(getattr(model, "model", None), "data", None)
    return getattr(data, "design_info", None)


# ---------------------------------------------------------------------
# Adapters
# ---------------------------------------------------------------------
class ModelAdapter(ABC):
    """Reporting capability of one model family."""

    def __init__(self, model: Any) -> None:
        self.model = model

    @classmethod
    @abstractmethod
    def accepts(cls, model: Any) -> bool:
        """Return True when this adapter understands ``model``."""

    @abstractmethod
    def table(self) -> tuple[list[Any], Any, Any]:
        """Return aligned ``(names, estimates, standard_errors)``."""

    def factor_levels(self) -> dict[str, tuple[str, ...]]:
        levels: dict[str, tuple[str, ...]] = {}
        design = _find_design_info(self.model)
        if design is not None:
            levels.update(factor_levels_from_design(design))
        explicit = getattr(self.model, "factor_levels", None)
        if isinstance(explicit, Mapping):
            levels.update(_normalize_levels(explicit))
        return levels

    def report_coefficients(self) -> list[RawCoefficient]:
        names, est, se = self.table()
        return _validated(names, est, se)


class NativeAdapter(ModelAdapter):
    """Objects implementing ``report_coefficients()`` themselves."""

    @classmethod
    def accepts(cls, model: Any) -> bool:
        return callable(getattr(model, "report_coefficients", None))

    def table(self) -> tuple[list[Any], Any, Any]:
        names: list[Any] = []
        est: list[float] = []
        se: list[float] = []
        for item in self.model.report_coefficients():
            if isinstance(item, RawCoefficient):
                names.append(item.variable)
                est.append(item.estimate)
                se.append(item.se)
            elif isinstance(item, (tuple, list)) and len(item) == 3:
                names.append(item[0])
                est.append(item[1])
                se.append(item[2])
            else:
                raise UnsupportedModel(
                    self.model,
                    "report_coefficients() must yield RawCoefficient or (name, estimate, se)",
                )
        return names, est, se


def _series_names(params: Any, model: Any) -> list[Any]:
    index = getattr(params, "index", None)
    if index is not None:
        return list(index)
    exog_names = getattr(getattr(model, "model", None), "exog_names", None)
    n = int(np.asarray(params).reshape(-1).shape[0])
    if exog_names is not None and len(exog_names) == n:
        return list(exog_names)
    return [f"x{j}" for j in range(n)]


def _align(values: Any, names: list[Any], label: str) -> np.ndarray:
    if isinstance(values, pd.Series):
        if set(values.index) != set(names):
            raise ValueError(f"{label} index does not match the coefficient names.")
        values = values.reindex(names)
    arr = np.asarray(values, dtype=np.float64).reshape(-1)
    if arr.shape[0] != len(names):
        raise ValueError(
            f"{label} has length {arr.shape[0]} but the model reports {len(names)} coefficients.",
        )
    return arr


class ResultAdapter(ModelAdapter):
    """Result containers with ``params`` and ``se`` (e.g. ``EstimationResult``)."""

    @classmethod
    def accepts(cls, model: Any) -> bool:
        return (
            not isinstance(model, pd.DataFrame)
            and hasattr(model, "params")
            and hasattr(model, "se")
        )

    def table(self) -> tuple[list[Any], Any, Any]:
        params = self.model.params
        se = self.model.se
        if se is None:
            raise UnsupportedModel(self.model, "standard errors were not computed")
        names = _series_names(params, self.model)
        return names, _align(params, names, "params"), _align(se, names, "se")


class StatsmodelsAdapter(ModelAdapter):
    """statsmodels-style results exposing ``params`` and ``bse``."""

    @classmethod
    def accepts(cls, model: Any) -> bool:
        return (
            not isinstance(model, pd.DataFrame)
            and hasattr(model, "params")
            and hasattr(model, "bse")
        )

    def table(self) -> tuple[list[Any], Any, Any]:
        params = self.model.params
        bse = self.model.bse
        if bse is None:
            raise UnsupportedModel(self.model, "standard errors were not computed")
        names = _series_names(params, self.model)
        return names, _align(params, names, "params"), _align(bse, names, "bse")


_ESTIMATE_COLUMNS = ("estimate", "coef", "params", "value", "beta")
_SE_COLUMNS = ("se", "std_err", "std err", "std. error", "std.error", "bse", "stderr")
_NAME_COLUMNS = ("term", "variable", "coefficient", "name", "param")


class FrameAdapter(ModelAdapter):
    """A coefficient table held in a ``pandas.DataFrame``.

    Column names are matched case-insensitively against common aliases;
    coefficient names come from a term/variable column or, failing that,
    the index.
    """

    @classmethod
    def accepts(cls, model: Any) -> bool:
        return isinstance(model, pd.DataFrame)

    def _columns(self) -> tuple[Any, Any, Any]:
        cols = {str(c).strip().lower(): c for c in self.model.columns}
        est_col = next((cols[k] for k in _ESTIMATE_COLUMNS if k in cols), None)
        se_col = next((cols[k] for k in _SE_COLUMNS if k in cols), None)
        name_col = next((cols[k] for k in _NAME_COLUMNS if k in cols), None)
        return est_col, se_col, name_col

    def table(self) -> tuple[list[Any], Any, Any]:
        est_col, se_col, name_col = self._columns()
        if est_col is None or se_col is None:
            raise UnsupportedModel(
                self.model, "DataFrame needs an estimate column and a standard-error column",
            )
        names = (
            list(self.model[name_col]) if name_col is not None else list(self.model.index)
        )
        return names, self.model[est_col].to_numpy(), self.model[se_col].to_numpy()

    def factor_levels(self) -> dict[str, tuple[str, ...]]:
        raw = self.model.attrs.get("factor_levels") or {}
        return _normalize_levels(raw)


_ADAPTERS: list[type[ModelAdapter]] = [
    NativeAdapter,
    ResultAdapter,
    StatsmodelsAdapter,
    FrameAdapter,
]


def register_adapter(adapter: type[ModelAdapter], *, first: bool = True) -> None:
    """Add a model family. ``first=True`` gives it priority over built-ins."""
    if not (isinstance(adapter, type) and issubclass(adapter, ModelAdapter)):
        raise TypeError("adapter must be a ModelAdapter subclass.")
    if adapter in _ADAPTERS:
        _ADAPTERS.remove(adapter)
    if first:
        _ADAPTERS.insert(0, adapter)
    else:
        _ADAPTERS.append(adapter)


def adapter_for(model: Any) -> ModelAdapter:
    """Return the first registered adapter accepting ``model``."""
    for adapter in _ADAPTERS:
        if adapter.accepts(model):
            LOGGER.debug("Using %s for %s", adapter.__name__, type(model).__name__)
            return adapter(model)
    raise UnsupportedModel(
        model,
        "expected report_coefficients(), params/se, params/bse or a coefficient DataFrame",
    )


def _validated(names: list[Any], est: Any, se: Any) -> list[RawCoefficient]:
    labels = [str(n) for n in names]
    est_arr = np.asarray(est, dtype=np.float64).reshape(-1)
    se_arr = np.asarray(se, dtype=np.float64).reshape(-1)
    if not (len(labels) == est_arr.shape[0] == se_arr.shape[0]):
        raise ValueError("Coefficient names, estimates and standard errors are misaligned.")
    seen: set[str] = set()
    dups: list[str] = []
    for lab in labels:
        if lab in seen:
            dups.append(lab)
        seen.add(lab)
    if dups:
        raise ValueError(f"Model reports duplicate coefficients: {', '.join(dups)}")
    if np.any(np.isfinite(se_arr) & (se_arr < 0)):
        raise ValueError("Standard errors must be nonnegative.")
    return [
        RawCoefficient(variable=lab, estimate=float(b), se=float(s))
        for lab, b, s in zip(labels, est_arr, se_arr)
    ]


def extract_coefficients(model: Any) -> list[RawCoefficient]:
    """Coefficients of ``model`` in its native reporting order."""
    return adapter_for(model).report_coefficients()


def extract_factor_levels(model: Any) -> dict[str, tuple[str, ...]]:
    """Factor stems and levels reported by ``model`` (empty if unknown)."""
    return adapter_for(model).factor_levels()
