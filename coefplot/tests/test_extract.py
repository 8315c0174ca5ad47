from types import SimpleNamespace

import numpy as np
import pandas as pd
import pytest

from coefplot.core import extract
from coefplot.core.extract import (
    ModelAdapter,
    RawCoefficient,
    adapter_for,
    extract_coefficients,
    extract_factor_levels,
    factor_levels_from_design,
    register_adapter,
)
from coefplot.core.results import EstimationResult
from coefplot.errors import CoefplotError, UnsupportedModel


class NativeModel:
    def __init__(self, rows):
        self.rows = rows

    def report_coefficients(self):
        return iter(self.rows)


# ---------------------------------------------------------------------
# Result containers
# ---------------------------------------------------------------------
def test_extract_keeps_model_order():
    res = EstimationResult.from_arrays(["(Intercept)", "carat", "colorE"], [1.0, 2.0, 3.0], [0.1, 0.2, 0.3])
    coefs = extract_coefficients(res)
    assert [c.variable for c in coefs] == ["(Intercept)", "carat", "colorE"]
    assert coefs[1] == RawCoefficient("carat", 2.0, 0.2)


def test_from_arrays_rejects_length_mismatch():
    with pytest.raises(ValueError):
        EstimationResult.from_arrays(["a", "b"], [1.0, 2.0], [0.1])


def test_result_without_se_is_unsupported():
    res = EstimationResult(params=pd.Series([1.0], index=["carat"]))
    with pytest.raises(UnsupportedModel) as err:
        extract_coefficients(res)
    assert "standard errors" in str(err.value)


def test_patsy_fit_names_and_levels(diamonds, ols):
    res = ols("price ~ carat + cut", diamonds)
    names = [c.variable for c in extract_coefficients(res)]
    assert names == ["Intercept", "cut[T.Good]", "cut[T.Ideal]", "carat"]
    assert extract_factor_levels(res) == {"cut": ("Fair", "Good", "Ideal")}


def test_factor_levels_strip_patsy_wrapper(diamonds, ols):
    res = ols("price ~ carat + C(color)", diamonds)
    assert factor_levels_from_design(res.design_info) == {"color": ("D", "E", "F")}


def test_factor_levels_from_non_design_is_empty():
    assert factor_levels_from_design(object()) == {}


def test_explicit_factor_levels_are_reported():
    res = EstimationResult.from_arrays(
        ["carat", "colorE"], [1.0, 2.0], [0.1, 0.2], factor_levels={"color": ["D", "E"]},
    )
    assert extract_factor_levels(res) == {"color": ("D", "E")}


# ---------------------------------------------------------------------
# Other reporting conventions
# ---------------------------------------------------------------------
def test_statsmodels_like_results():
    params = pd.Series([1.0, 2.0], index=["Intercept", "carat"])
    bse = pd.Series([0.2, 0.1], index=["carat", "Intercept"])
    coefs = extract_coefficients(SimpleNamespace(params=params, bse=bse))
    assert [(c.variable, c.se) for c in coefs] == [("Intercept", 0.1), ("carat", 0.2)]


def test_statsmodels_array_params_use_exog_names():
    model = SimpleNamespace(
        params=np.array([1.0, 2.0]),
        bse=np.array([0.1, 0.2]),
        model=SimpleNamespace(exog_names=["const", "x1"]),
    )
    assert [c.variable for c in extract_coefficients(model)] == ["const", "x1"]


def test_dataframe_with_term_column():
    df = pd.DataFrame({"term": ["a", "b"], "Estimate": [1.0, 2.0], "Std. Error": [0.5, 0.25]})
    coefs = extract_coefficients(df)
    assert coefs == [RawCoefficient("a", 1.0, 0.5), RawCoefficient("b", 2.0, 0.25)]


def test_dataframe_with_index_names():
    df = pd.DataFrame({"coef": [1.0, 2.0], "std err": [0.5, 0.25]}, index=["x", "z"])
    df.attrs["factor_levels"] = {"C(z)": ["u", "v"]}
    assert [c.variable for c in extract_coefficients(df)] == ["x", "z"]
    assert extract_factor_levels(df) == {"z": ("u", "v")}


def test_dataframe_without_se_column():
    df = pd.DataFrame({"estimate": [1.0]}, index=["x"])
    with pytest.raises(UnsupportedModel):
        extract_coefficients(df)


def test_native_reporting():
    model = NativeModel([("carat", 1.0, 0.1), RawCoefficient("depth", -2.0, 0.3)])
    coefs = extract_coefficients(model)
    assert [c.variable for c in coefs] == ["carat", "depth"]
    assert coefs[1].estimate == -2.0


def test_native_reporting_bad_rows():
    with pytest.raises(UnsupportedModel):
        extract_coefficients(NativeModel([("carat", 1.0)]))


# ---------------------------------------------------------------------
# Validation and dispatch
# ---------------------------------------------------------------------
@pytest.mark.parametrize("model", [42, "price ~ carat", [1.0, 2.0], None])
def test_unsupported_objects(model):
    with pytest.raises(UnsupportedModel) as err:
        extract_coefficients(model)
    assert isinstance(err.value, CoefplotError)
    assert isinstance(err.value, TypeError)


def test_duplicate_names_rejected():
    with pytest.raises(ValueError, match="duplicate"):
        extract_coefficients(NativeModel([("a", 1.0, 0.1), ("a", 2.0, 0.1)]))


def test_negative_se_rejected():
    with pytest.raises(ValueError, match="nonnegative"):
        extract_coefficients(NativeModel([("a", 1.0, -0.1)]))


def test_nan_estimates_pass_through():
    coefs = extract_coefficients(NativeModel([("a", np.nan, np.nan)]))
    assert np.isnan(coefs[0].estimate)


def test_registered_adapter_takes_priority(monkeypatch):
    monkeypatch.setattr(extract, "_ADAPTERS", list(extract._ADAPTERS))

    class Fixed(ModelAdapter):
        @classmethod
        def accepts(cls, model):
            return isinstance(model, dict) and "beta" in model

        def table(self):
            return ["b"], [self.model["beta"]], [1.0]

    with pytest.raises(UnsupportedModel):
        adapter_for({"beta": 3.0})
    register_adapter(Fixed)
    assert extract_coefficients({"beta": 3.0}) == [RawCoefficient("b", 3.0, 1.0)]


def test_register_adapter_requires_subclass():
    with pytest.raises(TypeError):
        register_adapter(object)
