import pytest

from coefplot import coeftable, multiplot


@pytest.fixture
def table(carat_models):
    return multiplot(carat_models, intercept=False, plot=False)


def test_text_table(table):
    out = coeftable(table)
    lines = out.splitlines()
    # header, rule, then estimate + interval row per coefficient
    assert len(lines) == 2 + 2 * 3
    assert lines[0].split() == ["Model1", "Model2", "Model3"]
    assert "[90, 110]" in out
    assert "[100, 120]" in out
    assert "[85, 105]" in out
    assert "[-5, -1]" in out


def test_inner_interval(table):
    out = coeftable(table, interval="inner")
    assert "[95, 105]" in out
    assert "[90, 110]" not in out


def test_disabled_tier_has_no_interval_rows(carat_models):
    table = multiplot(carat_models, intercept=False, outer_ci=0, plot=False)
    assert len(coeftable(table).splitlines()) == 2 + 3


def test_latex_escapes_labels(carat_models):
    table = multiplot(carat_models, variables=["carat"], names=["m_1", "m_2", "m_3"], plot=False)
    out = coeftable(table, output="latex")
    assert "\\toprule" in out
    assert "m\\_1" in out
    raw = coeftable(table, output="latex", escape=False)
    assert "m_1" in raw


@pytest.mark.parametrize("kwargs", [{"output": "html"}, {"interval": "both"}])
def test_invalid_options(table, kwargs):
    with pytest.raises(ValueError):
        coeftable(table, **kwargs)
