"""Coefficient result container.

A minimal, estimator-agnostic container for a fitted model's coefficient
table. Any object exposing ``params``/``se`` Series is accepted by the
extractor; this class is simply the canonical one.
"""

# coefplot/core/results.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd

__all__ = ["EstimationResult"]


# ---------------------------------------------------------------------
# Results container (R/Stata-like), extensible and estimator-agnostic
# ---------------------------------------------------------------------
@dataclass
class EstimationResult:
    """Container for estimation results.

    Stores parameter estimates, standard errors, and optional factor
    metadata used to shorten factor-level labels.

    Parameters
    ----------
    params : pd.Series
        Point estimates indexed by coefficient name (model order).
    se : pd.Series, optional
        Standard errors indexed like ``params``. Without them the result
        cannot be plotted.
    factor_levels : dict, optional
        ``{variable: levels}`` for categorical regressors, the analogue of
        R's ``xlevels``.
    design_info : patsy.DesignInfo, optional
        Design metadata of the model matrix; categorical factors found here
        complement ``factor_levels``.

    """

    params: pd.Series
    se: pd.Series | None = None
    n_obs: int | None = None
    factor_levels: dict[str, Any] = field(default_factory=dict)
    design_info: Any = None
    model_info: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.params, pd.Series):
            self.params = pd.Series(np.asarray(self.params, dtype=np.float64).reshape(-1))
        if self.se is not None and not isinstance(self.se, pd.Series):
            self.se = pd.Series(
                np.asarray(self.se, dtype=np.float64).reshape(-1), index=self.params.index,
            )

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        head = ", ".join(f"{k}={v}" for k, v in self.model_info.items())
        return f"EstimationResult(k={len(self.params)}, n={self.n_obs}, {head})"

    @classmethod
    def from_arrays(
        cls,
        names: list[str],
        params: Any,
        se: Any,
        **kwargs: Any,
    ) -> EstimationResult:
        """Build a result from aligned name/estimate/standard-error sequences."""
        index = pd.Index([str(n) for n in names], name="param")
        p = np.asarray(params, dtype=np.float64).reshape(-1)
        s = np.asarray(se, dtype=np.float64).reshape(-1)
        if p.shape[0] != len(index) or s.shape[0] != len(index):
            raise ValueError("names, params and se must have the same length.")
        return cls(
            params=pd.Series(p, index=index, name="params"),
            se=pd.Series(s, index=index, name="se"),
            **kwargs,
        )
