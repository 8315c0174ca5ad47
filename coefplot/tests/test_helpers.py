import math

from coefplot.utils.helpers import bare_stem, first_appearance, format_value, split_term


def test_bare_stem():
    assert bare_stem("C(color)") == "color"
    assert bare_stem("C( color , Treatment('E'))") == "color"
    assert bare_stem("carat") == "carat"
    assert bare_stem("np.log(carat)") == "np.log(carat)"


def test_split_term_ignores_nested_colons():
    assert split_term("carat:cut[T.Good]") == ["carat", "cut[T.Good]"]
    assert split_term("C(t)[T.09:00]:x") == ["C(t)[T.09:00]", "x"]
    assert split_term("carat") == ["carat"]


def test_first_appearance():
    assert first_appearance(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]


def test_format_value():
    assert format_value(None) == ""
    assert format_value(math.nan) == ""
    assert format_value(1234.5678, ".4g") == "1235"
    assert format_value("x") == "x"
