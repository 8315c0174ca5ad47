"""Inner/outer interval construction.

Bounds are ``estimate ± multiplier * se``. A multiplier of exactly zero
means the tier is not requested: its bounds are ``None`` rather than a
zero-width interval, so renderers can skip it entirely.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from scipy.stats import norm

from coefplot.core.extract import RawCoefficient

__all__ = [
    "IntervalCoefficient",
    "build_intervals",
    "ci_multiplier",
    "normalize_ci_level",
    "validate_multiplier",
    "validate_nesting",
]


@dataclass(frozen=True)
class IntervalCoefficient(RawCoefficient):
    low_inner: float | None = None
    high_inner: float | None = None
    low_outer: float | None = None
    high_outer: float | None = None

    @property
    def has_inner(self) -> bool:
        return self.low_inner is not None

    @property
    def has_outer(self) -> bool:
        return self.low_outer is not None


def normalize_ci_level(level: float | None, *, default: float = 0.95) -> float:
    """Normalize confidence level to a probability (0, 1)."""
    if not (0.0 < float(default) < 1.0):
        raise ValueError("default confidence level must lie in (0, 1)")
    if level is None:
        coerced = float(default)
    else:
        coerced = float(level)
        # Accept percentage-style inputs (e.g., 90 for 90%)
        if coerced > 1.0:
            coerced /= 100.0
    if not (0.0 < coerced < 1.0):
        raise ValueError("ci_level must be in (0, 1); supply e.g. 0.95 or 95")
    return coerced


def ci_multiplier(level: float | None = None) -> float:
    """Standard-error multiplier of a two-sided normal interval at ``level``.

    ``ci_multiplier(0.95)`` is about 1.96, which can be passed as
    ``outer_ci`` to draw 95% intervals instead of ±2 SE.
    """
    ci_level = normalize_ci_level(level)
    return float(norm.ppf(0.5 + ci_level / 2.0))


def validate_multiplier(value: float, label: str) -> float:
    out = float(value)
    if not (out >= 0.0 and out != float("inf")):
        raise ValueError(f"{label} must be a finite nonnegative multiplier.")
    return out


def validate_nesting(inner_ci: float, outer_ci: float) -> None:
    """The inner interval must not be wider than the outer one when both are drawn."""
    if inner_ci > 0 and outer_ci > 0 and inner_ci > outer_ci:
        raise ValueError("inner_ci must not exceed outer_ci when both intervals are drawn.")


def _bounds(estimate: float, se: float, mult: float) -> tuple[float | None, float | None]:
    if mult == 0.0:
        return None, None
    half = mult * se
    return estimate - half, estimate + half


def build_intervals(
    coefs: Sequence[RawCoefficient],
    inner_ci: float = 1.0,
    outer_ci: float = 2.0,
) -> list[IntervalCoefficient]:
    """Attach inner/outer bounds to every coefficient (order preserved)."""
    inner = validate_multiplier(inner_ci, "inner_ci")
    outer = validate_multiplier(outer_ci, "outer_ci")
    validate_nesting(inner, outer)
    out: list[IntervalCoefficient] = []
    for c in coefs:
        lo_in, hi_in = _bounds(c.estimate, c.se, inner)
        lo_out, hi_out = _bounds(c.estimate, c.se, outer)
        out.append(
            IntervalCoefficient(
                variable=c.variable,
                estimate=c.estimate,
                se=c.se,
                low_inner=lo_in,
                high_inner=hi_in,
                low_outer=lo_out,
                high_outer=hi_out,
            ),
        )
    return out
