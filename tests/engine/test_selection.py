"""Test selection normalization."""

import pytest

pytestmark = pytest.mark.unit

from maptheme.contracts import InvalidSelectionError
from maptheme.engine import default_selection, normalize_selection, selected_names


class TestDefaultSelection:

    def test_defaults(self, theme):
        assert selected_names(default_selection(theme)) == {
            "indicator": "mortality",
            "age": "children",
            "year": 2010,
        }


class TestNormalizeSelection:

    def test_fills_defaults(self, theme):
        state = normalize_selection(theme, {"age": "adults"})
        assert selected_names(state) == {"indicator": "mortality", "age": "adults", "year": 2010}

    def test_returns_canonical_options(self, theme):
        state = normalize_selection(theme, {"indicator": "prevalence"})
        assert state["indicator"].display_name == "Prevalence"

    def test_theme_order(self, theme):
        state = normalize_selection(theme, {"year": 2000, "indicator": "prevalence"})
        assert list(state) == ["indicator", "age", "year"]

    def test_without_fill_defaults(self, theme):
        state = normalize_selection(theme, {"year": 2000}, fill_defaults=False)
        assert list(state) == ["year"]

    def test_unknown_dimension(self, theme):
        with pytest.raises(InvalidSelectionError, match="unknown dimension 'sex'"):
            normalize_selection(theme, {"sex": "m"})

    def test_unknown_option(self, theme):
        with pytest.raises(InvalidSelectionError, match="1990"):
            normalize_selection(theme, {"year": 1990})

    def test_string_does_not_select_number(self, theme):
        with pytest.raises(InvalidSelectionError):
            normalize_selection(theme, {"year": "2010"})

    def test_float_selects_integer_option(self, theme):
        state = normalize_selection(theme, {"year": 2010.0})
        assert state["year"].name == 2010

    def test_accepts_option_objects(self, theme):
        adults = theme.get_dimension("age").find_option("adults")
        state = normalize_selection(theme, {"age": adults})
        assert state["age"] is adults
