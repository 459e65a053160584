"""Test path and title templating."""

import pytest

pytestmark = pytest.mark.unit

from maptheme.contracts import InvalidSelectionError, UnresolvedPlaceholderError
from maptheme.engine import (
    expand_template,
    extract_selection,
    normalize_selection,
    resolve_path,
    resolve_title,
)
from maptheme.schemas import Option


@pytest.fixture
def state(theme):
    return normalize_selection(theme, {"age": "children", "year": 2010})


@pytest.fixture
def scope_options(theme):
    return {name: theme.get_dimension(name).options for name in ("indicator", "age", "year")}


class TestResolveTitle:

    def test_title_uses_display_names(self, state):
        title = resolve_title("Mortality for {age} in {year}", state, ["year", "age"])
        assert title == "Mortality for children in 2010"

    def test_object_option_display_name(self, state):
        assert resolve_title("{indicator}", state, ["indicator"]) == "Mortality"

    def test_out_of_scope_placeholder(self, state):
        with pytest.raises(UnresolvedPlaceholderError, match="indicator"):
            resolve_title("{indicator} in {year}", state, ["year"])


class TestResolvePath:

    def test_path_uses_names(self, state):
        path = resolve_path("raster/{indicator}_{age}_{year}.tif", state, ["indicator", "age", "year"])
        assert path == "raster/mortality_children_2010.tif"

    def test_repeated_placeholder(self, state):
        assert resolve_path("{year}/{year}.csv", state, ["year"]) == "2010/2010.csv"

    def test_single_pass_substitution(self):
        selection = {"a": Option(name="{b}", display_name="x"), "b": Option(name="y", display_name="y")}
        assert resolve_path("{a}_{b}", selection, ["a", "b"]) == "{b}_y"

    def test_integral_float_option(self):
        selection = {"year": Option(name=2010.0, display_name="2010")}
        assert resolve_path("{year}.tif", selection, ["year"]) == "2010.tif"

    def test_in_scope_but_unselected(self, state):
        with pytest.raises(InvalidSelectionError):
            resolve_path("{sex}.tif", state, ["sex"])

    def test_no_placeholders(self, state):
        assert resolve_path("static.tif", state, []) == "static.tif"


class TestPathRoundTrip:

    TEMPLATE = "raster/{indicator}_{age}_{year}.tif"

    def test_expand_template_enumerates_every_file(self, scope_options):
        paths = expand_template(self.TEMPLATE, scope_options)
        assert len(paths) == 2 * 2 * 2
        assert paths[0] == "raster/mortality_children_2000.tif"
        assert "raster/prevalence_adults_2010.tif" in paths

    def test_unreferenced_dimensions_do_not_multiply(self, scope_options):
        assert expand_template("raster/{year}.tif", scope_options) == ["raster/2000.tif", "raster/2010.tif"]

    def test_extract_recovers_selection(self, theme, scope_options):
        for path in expand_template(self.TEMPLATE, scope_options):
            names = extract_selection(self.TEMPLATE, path, scope_options)
            state = normalize_selection(theme, names)
            assert resolve_path(self.TEMPLATE, state, list(scope_options)) == path

    def test_extract_typed_names(self, scope_options):
        names = extract_selection(self.TEMPLATE, "raster/mortality_adults_2000.tif", scope_options)
        assert names == {"indicator": "mortality", "age": "adults", "year": 2000}

    def test_extract_foreign_path(self, scope_options):
        assert extract_selection(self.TEMPLATE, "raster/mortality_adults_1990.tif", scope_options) is None

    def test_extract_out_of_scope(self, scope_options):
        with pytest.raises(UnresolvedPlaceholderError):
            extract_selection("{sex}.tif", "m.tif", scope_options)
