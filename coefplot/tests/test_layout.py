from dataclasses import replace

import numpy as np
import pytest

from coefplot.core.results import EstimationResult
from coefplot.errors import InvalidAxisConfig
from coefplot.pipeline.aggregator import aggregate_models
from coefplot.pipeline.config import MultiplotConfig, StyleConfig
from coefplot.pipeline.layout import (
    decide_layout,
    drop_empty_models,
    finalize,
    normalize_by,
    validate_axis_config,
)


@pytest.mark.parametrize(
    ("by", "expected"),
    [("Coefficient", "Coefficient"), ("model", "Model"), ("M", "Model"), ("coef", "Coefficient"), (None, "Coefficient")],
)
def test_normalize_by(by, expected):
    assert normalize_by(by) == expected


@pytest.mark.parametrize("by", ["", "x", "Models"])
def test_normalize_by_invalid(by):
    with pytest.raises(InvalidAxisConfig):
        normalize_by(by)


@pytest.mark.parametrize("variables", [None, [], ["carat", "depth"]])
def test_model_axis_needs_one_variable(variables):
    with pytest.raises(InvalidAxisConfig):
        validate_axis_config("Model", variables)
    validate_axis_config("Coefficient", variables)


def test_drop_removes_models_without_valid_estimates(carat_models):
    nan_model = EstimationResult.from_arrays(["carat"], [np.nan], [np.nan])
    entries = aggregate_models(carat_models + [nan_model], MultiplotConfig(variables=["depth"]))
    kept = drop_empty_models(entries)
    assert [e.model_id for e in kept] == ["Model2"]


def test_drop_only_affects_empty_models(carat_models):
    config = MultiplotConfig(variables=["colorE", "depth"], drop=True)
    table, layout = finalize(aggregate_models(carat_models, config), config)
    assert layout.models == ("Model1", "Model2")
    assert table["model_id"].tolist() == ["Model1", "Model2"]
    assert layout.facet_columns == 2


def test_without_drop_empty_models_remain(carat_models):
    config = MultiplotConfig(variables=["colorE", "depth"])
    table, layout = finalize(aggregate_models(carat_models, config), config)
    assert layout.models == ("Model1", "Model2", "Model3")
    assert list(table["model"].cat.categories) == ["Model1", "Model2", "Model3"]
    assert len(table) == 2


def test_coefficient_layout(carat_models):
    config = MultiplotConfig(single=False, scales="free_x")
    layout = decide_layout(aggregate_models(carat_models, config), config)
    assert layout.axis_mode == "Coefficient"
    assert layout.facet is True
    assert layout.facet_scales == "free_x"
    assert layout.facet_columns == 3
    assert layout.color_mode == "model"


def test_explicit_ncol(carat_models):
    config = MultiplotConfig(single=False, ncol=2)
    assert decide_layout(aggregate_models(carat_models, config), config).facet_columns == 2


def test_model_layout(carat_models):
    config = MultiplotConfig(by="Model", variables=["carat"], single=False)
    table, layout = finalize(aggregate_models(carat_models, config), config, StyleConfig(color="red"))
    assert layout.axis_mode == "Model"
    assert layout.facet is False
    assert layout.color_mode == "single"
    assert layout.color == "red"
    assert table["coefficient"].unique().tolist() == ["carat"]


def test_model_axis_with_no_matching_coefficient(carat_models):
    config = MultiplotConfig(by="Model", variables=["price"])
    with pytest.raises(InvalidAxisConfig):
        finalize(aggregate_models(carat_models, config), config)


def test_model_axis_with_diverging_labels(carat_models):
    config = MultiplotConfig(by="Model", variables=["carat"])
    entries = aggregate_models(carat_models, config)
    entries[0].coefficients[0] = replace(entries[0].coefficients[0], display_name="Carat")
    with pytest.raises(InvalidAxisConfig):
        finalize(entries, config)


def test_numeric_band_needs_exactly_one_factor(carat_models):
    style = StyleConfig(numeric=True)
    for factors, expected in [(None, False), (["color"], True), (["color", "cut"], False)]:
        config = MultiplotConfig(factors=factors)
        layout = decide_layout(aggregate_models(carat_models, config), config, style)
        assert layout.numeric is expected
    config = MultiplotConfig(factors=["color"])
    assert decide_layout(aggregate_models(carat_models, config), config).numeric is False
