"""Pipeline and style configuration.

``MultiplotConfig`` holds everything the aggregation pipeline acts on;
``StyleConfig`` holds options the pipeline only forwards to the renderer.
Both are frozen and validated on construction, so a bad option fails before
any model is touched.
"""

# coefplot/pipeline/config.py
from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from coefplot.core.intervals import validate_multiplier, validate_nesting
from coefplot.core.names import normalize_shorten
from coefplot.core.sorting import normalize_sort
from coefplot.pipeline.layout import AXIS_MODES, normalize_by, validate_axis_config

__all__ = [
    "AXIS_MODES",
    "FACET_SCALES",
    "MultiplotConfig",
    "StyleConfig",
    "normalize_by",
    "validate_axis_config",
]

FACET_SCALES = ("fixed", "free", "free_x", "free_y")


def _as_tuple(values: Any) -> tuple[str, ...] | None:
    if values is None:
        return None
    if isinstance(values, str):
        return (values,)
    return tuple(str(v) for v in values)


# ---------------------------------------------------------------------
# Pipeline configuration
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class MultiplotConfig:
    """Options shared by every model of one multiplot call.

    Notes
    -----
    - ``inner_ci``/``outer_ci`` are standard-error multipliers; 0 disables
      the tier. When both are positive, ``outer_ci`` must not be narrower.
    - ``variables`` takes precedence over ``factors``; ``only=None`` keeps
      interactions of the selected factors.
    - ``names`` is a mapping keyed by model identifier or a sequence aligned
      with the models. When given, models are ordered alphabetically by name.
    - ``ncol=None`` means one facet column per retained model.

    """

    inner_ci: float = 1.0
    outer_ci: float = 2.0
    intercept: bool = True
    intercept_name: str = "(Intercept)"
    variables: tuple[str, ...] | None = None
    factors: tuple[str, ...] | None = None
    only: bool | None = None
    shorten: Any = True
    new_names: Mapping[str, str] | None = None
    sort: str = "natural"
    decreasing: bool = False
    names: Mapping[Any, str] | Sequence[str] | None = None
    drop: bool = False
    by: str = "Coefficient"
    single: bool = True
    scales: str = "fixed"
    ncol: int | None = None
    plot: bool = True
    n_jobs: int = 1

    def __post_init__(self) -> None:
        setattr_ = object.__setattr__
        setattr_(self, "inner_ci", validate_multiplier(self.inner_ci, "inner_ci"))
        setattr_(self, "outer_ci", validate_multiplier(self.outer_ci, "outer_ci"))
        validate_nesting(self.inner_ci, self.outer_ci)
        setattr_(self, "variables", _as_tuple(self.variables))
        setattr_(self, "factors", _as_tuple(self.factors))
        setattr_(self, "shorten", normalize_shorten(self.shorten))
        setattr_(self, "sort", normalize_sort(self.sort))
        setattr_(self, "by", normalize_by(self.by))
        scales = str(self.scales).strip().lower()
        if scales not in FACET_SCALES:
            raise ValueError(f"scales must be one of {FACET_SCALES}, got '{self.scales}'.")
        setattr_(self, "scales", scales)
        if self.ncol is not None:
            if isinstance(self.ncol, bool) or int(self.ncol) != self.ncol or self.ncol < 1:
                raise ValueError("ncol must be a positive integer.")
            setattr_(self, "ncol", int(self.ncol))
        if int(self.n_jobs) < 1:
            raise ValueError("n_jobs must be >= 1.")
        if not isinstance(self.intercept_name, str) or not self.intercept_name:
            raise ValueError("intercept_name must be a non-empty string.")
        if self.new_names is not None and not isinstance(self.new_names, Mapping):
            raise TypeError("new_names must be a mapping of old name -> new name.")
        if isinstance(self.names, str):
            raise TypeError("names must be a mapping or a sequence of labels.")
        validate_axis_config(self.by, self.variables)

    @property
    def model_axis(self) -> bool:
        return self.by == "Model"


# R line types (lty) accepted for zero_type
_LINE_TYPES = {0, 1, 2, 3, 4, 5, 6}


@dataclass(frozen=True)
class StyleConfig:
    """Display options forwarded untouched to the rendering collaborator."""

    title: str | None = "Coefficient Plot"
    xlab: str = "Value"
    ylab: str = "Coefficient"
    lwd_inner: float = 1.0
    lwd_outer: float = 0.0
    point_size: float = 3.0
    dodge_height: float = 1.0
    color: str = "blue"
    fill_color: str = "grey"
    alpha: float = 0.5
    zero_color: str = "grey"
    zero_lwd: float = 1.0
    zero_type: int | str = 2
    text_angle: float = 0.0
    number_angle: float = 90.0
    numeric: bool = False
    horizontal: bool = False

    def __post_init__(self) -> None:
        for label in ("lwd_inner", "lwd_outer", "point_size", "dodge_height", "zero_lwd"):
            val = float(getattr(self, label))
            if not val >= 0.0:
                raise ValueError(f"{label} must be nonnegative.")
        if not (0.0 <= float(self.alpha) <= 1.0):
            raise ValueError("alpha must lie in [0, 1].")
        if isinstance(self.zero_type, int) and self.zero_type not in _LINE_TYPES:
            raise ValueError("zero_type must be an R line type 0-6 or a matplotlib linestyle.")
