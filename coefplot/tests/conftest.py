from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pandas as pd
import patsy
import pytest

from coefplot.core.results import EstimationResult


def pytest_configure() -> None:
    """Ensure the repository root is on sys.path.

    pytest may pick ``coefplot/`` as its rootdir when invoked from inside
    the package, in which case importing ``coefplot`` fails unless the
    parent directory is on ``sys.path``.
    """

    repo_root = Path(__file__).resolve().parents[2]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


def fit_ols(formula: str, data: pd.DataFrame) -> EstimationResult:
    """Classical OLS through patsy; enough to get realistic coefficient names."""
    y, X = patsy.dmatrices(formula, data, return_type="dataframe")
    Xm = X.to_numpy()
    ym = y.to_numpy().reshape(-1)
    beta, *_ = np.linalg.lstsq(Xm, ym, rcond=None)
    resid = ym - Xm @ beta
    n, k = Xm.shape
    sigma2 = float(resid @ resid) / (n - k)
    cov = sigma2 * np.linalg.inv(Xm.T @ Xm)
    return EstimationResult(
        params=pd.Series(beta, index=X.columns, name="params"),
        se=pd.Series(np.sqrt(np.diag(cov)), index=X.columns, name="se"),
        n_obs=n,
        design_info=X.design_info,
        model_info={"Estimator": "OLS", "formula": formula},
    )


@pytest.fixture
def diamonds() -> pd.DataFrame:
    rng = np.random.default_rng(42)
    n = 300
    cut = rng.choice(["Fair", "Good", "Ideal"], size=n)
    color = rng.choice(["D", "E", "F"], size=n)
    carat = rng.uniform(0.2, 2.5, size=n)
    shift = pd.Series(cut).map({"Fair": 0.0, "Good": 300.0, "Ideal": 700.0}).to_numpy()
    price = 500.0 + 4000.0 * carat + shift + rng.normal(scale=250.0, size=n)
    depth = rng.normal(61.8, 1.4, size=n)
    return pd.DataFrame(
        {"price": price, "carat": carat, "depth": depth, "cut": cut, "color": color},
    )


@pytest.fixture
def fitted_models(diamonds: pd.DataFrame) -> list[EstimationResult]:
    return [
        fit_ols("price ~ carat + cut", diamonds),
        fit_ols("price ~ carat + cut + color", diamonds),
        fit_ols("price ~ carat + color", diamonds),
    ]


@pytest.fixture
def carat_models() -> list[EstimationResult]:
    """Three models sharing ``carat`` (estimates 100, 110, 95; SE 5)."""
    return [
        EstimationResult.from_arrays(["(Intercept)", "carat", "colorE"], [1.0, 100.0, -3.0], [0.5, 5.0, 1.0]),
        EstimationResult.from_arrays(["(Intercept)", "carat", "depth"], [2.0, 110.0, 0.4], [0.5, 5.0, 0.1]),
        EstimationResult.from_arrays(["(Intercept)", "carat"], [3.0, 95.0], [0.5, 5.0]),
    ]


@pytest.fixture
def ols():
    return fit_ols
