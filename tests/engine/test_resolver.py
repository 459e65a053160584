"""Test ThemeResolver end to end."""

import logging

import numpy as np
import pytest

pytestmark = pytest.mark.unit

from maptheme.contracts import (
    InvalidSelectionError,
    NoActiveCandidateError,
    UnresolvedPlaceholderError,
)
from maptheme.engine import GEO, DisplayContext, Resolution, ThemeResolver, check_theme


class TestResolve:

    def test_default_resolution(self, resolver):
        resolution = resolver.resolve()

        assert isinstance(resolution, Resolution)
        assert resolution.schema.name == "mortality"
        assert resolution.color_scale.legend_label == "Mortality"
        assert resolution.title == "Mortality for children in 2010"
        assert resolution.raster_path == "raster/mortality_children_2010.tif"
        assert resolution.aggregate_path == "aggregate/children_2010.csv"
        assert resolution.display_precision == 1

    def test_context_defaults_from_theme(self, resolver):
        assert resolver.resolve().context == DisplayContext(mode="aggregate", level=1)

    def test_selection_names(self, resolver):
        resolution = resolver.resolve({"age": "adults", "year": 2000})
        assert resolution.selection_names == {"indicator": "mortality", "age": "adults", "year": 2000}
        assert resolution.title == "Mortality for adults in 2000"

    def test_catch_all_schema_and_scale(self, resolver):
        resolution = resolver.resolve({"indicator": "prevalence"})
        assert resolution.schema.name == "prevalence"
        assert resolution.color_scale.legend_label == "Prevalence"
        assert resolution.title == "Prevalence in 2010"

    def test_disabled_mode_has_no_path(self, resolver):
        resolution = resolver.resolve({"indicator": "prevalence"})
        assert resolution.raster_path == "raster/prevalence_2010.tif"
        assert resolution.aggregate_path is None

    def test_disabled_format_has_no_path(self, make_theme):
        resolver = ThemeResolver(make_theme(data_format={"raster": False}))
        resolution = resolver.resolve()
        assert resolution.raster_path is None
        assert resolution.aggregate_path == "aggregate/children_2010.csv"

    def test_color_for_uses_context(self, resolver):
        assert resolver.resolve().color_for(5).color == "#808080"
        level0 = resolver.resolve(context=DisplayContext(mode="aggregate", level=0))
        assert level0.color_for(10).color == "#808080"

    def test_sentinel(self, resolver):
        result = resolver.resolve().color_for(0)
        assert (result.color, result.label) == ("#ff0000", "No data")

    def test_labels_use_display_precision(self, resolver):
        resolution = resolver.resolve()
        assert resolution.color_for(2.5).label == "2.5"
        assert [entry.label for entry in resolution.legend_entries()] == ["0.0", "10.0+"]

    def test_colorize(self, resolver):
        rgba, mask = resolver.resolve(context=GEO).colorize(np.array([5.0, np.nan]))
        assert rgba[0].tolist() == [128, 128, 128, 255]
        assert mask.tolist() == [True, False]

    def test_display_queries(self, resolver):
        resolution = resolver.resolve()
        assert [resolved.display.type for resolved in resolution.displays] == ["line_chart", "bar_chart", "values"]
        values_query = resolution.queries[2]
        assert values_query.schema.name == "prevalence"
        assert values_query.fixed_names == {"year": 2000}

    def test_resolution_is_idempotent(self, resolver):
        first = resolver.resolve({"age": "adults"})
        second = resolver.resolve({"age": "adults"})
        assert first.schema is second.schema
        assert first.evaluator is second.evaluator
        assert first.title == second.title

    def test_accepts_theme_dict_and_settings_dict(self, theme_dict):
        resolver = ThemeResolver(theme_dict, {"no_data": {"label": "n/a"}})
        assert resolver.resolve().color_for(np.nan).label == "n/a"


class TestResolveErrors:

    def test_invalid_option(self, resolver):
        with pytest.raises(InvalidSelectionError):
            resolver.resolve({"year": 1990})

    def test_no_active_schema(self, theme_dict, make_theme):
        schemas = theme_dict["schemas"][:1]
        resolver = ThemeResolver(make_theme(schemas=schemas))
        with pytest.raises(NoActiveCandidateError, match="schema"):
            resolver.resolve({"indicator": "prevalence"})

    def test_no_active_color_scale(self, theme_dict, make_theme):
        color_scales = theme_dict["color_scales"][:1]
        resolver = ThemeResolver(make_theme(color_scales=color_scales))
        with pytest.raises(NoActiveCandidateError, match="color scale"):
            resolver.resolve({"indicator": "prevalence"})

    def test_without_fill_defaults_missing_dimension_fails(self, theme):
        resolver = ThemeResolver(theme, {"selection": {"fill_defaults": False}})
        with pytest.raises(InvalidSelectionError, match="age"):
            resolver.resolve({"indicator": "mortality", "year": 2010})

    def test_broken_schema_fails_only_when_active(self, theme_dict, make_theme):
        schemas = theme_dict["schemas"]
        schemas[1]["ui_title_template"] = "Prevalence for {age}"
        resolver = ThemeResolver(make_theme(schemas=schemas))

        assert resolver.resolve().schema.name == "mortality"
        with pytest.raises(UnresolvedPlaceholderError):
            resolver.resolve({"indicator": "prevalence"})


class TestActiveEntities:

    def test_active_schema(self, resolver):
        assert resolver.active_schema().name == "mortality"
        assert resolver.active_schema({"indicator": "prevalence"}).name == "prevalence"

    def test_active_color_scale(self, resolver):
        assert resolver.active_color_scale().legend_label == "Mortality"
        assert resolver.active_color_scale({"indicator": "prevalence"}).legend_label == "Prevalence"

    def test_agree_with_resolve(self, resolver):
        resolution = resolver.resolve({"age": "adults"})
        assert resolver.active_schema({"age": "adults"}) is resolution.schema
        assert resolver.active_color_scale({"age": "adults"}) is resolution.color_scale

    def test_active_schema_runs_contracts(self, theme_dict, make_theme):
        schemas = theme_dict["schemas"]
        schemas[1]["ui_title_template"] = "Prevalence for {age}"
        resolver = ThemeResolver(make_theme(schemas=schemas))
        with pytest.raises(UnresolvedPlaceholderError):
            resolver.active_schema({"indicator": "prevalence"})

    def test_no_active_color_scale(self, theme_dict, make_theme):
        resolver = ThemeResolver(make_theme(color_scales=theme_dict["color_scales"][:1]))
        with pytest.raises(NoActiveCandidateError, match="color scale"):
            resolver.active_color_scale({"indicator": "prevalence"})


class TestPrecision:

    def _theme(self, theme_dict, make_theme, schema_precision, display_precision):
        schemas = theme_dict["schemas"]
        schemas[0]["display_precision"] = schema_precision
        schemas[0]["info_displays"] = [{"type": "values", "precision": display_precision}]
        return make_theme(schemas=schemas)

    def test_schema_precision_wins(self, theme_dict, make_theme, caplog):
        resolver = ThemeResolver(self._theme(theme_dict, make_theme, 1, 3))
        with caplog.at_level(logging.WARNING, logger="maptheme.engine.resolver"):
            resolved = resolver.resolve().displays[0]
        assert resolved.precision == 1
        assert resolved.evaluator.color_for(2.5).label == "2.5"
        assert "takes precedence" in caplog.text

    def test_deprecated_display_precision_fallback(self, theme_dict, make_theme, caplog):
        resolver = ThemeResolver(self._theme(theme_dict, make_theme, None, 2))
        with caplog.at_level(logging.WARNING, logger="maptheme.engine.resolver"):
            resolved = resolver.resolve().displays[0]
        assert resolved.precision == 2
        assert resolved.evaluator.color_for(2.5).label == "2.50"
        assert "deprecated" in caplog.text


class TestCheckTheme:

    def test_valid_theme(self, theme):
        assert check_theme(theme) is theme

    def test_broken_inactive_schema_is_reported(self, theme_dict):
        theme_dict["schemas"][1]["filepath_template_raster"] = "raster/{sex}.tif"
        with pytest.raises(UnresolvedPlaceholderError, match="sex"):
            check_theme(theme_dict)
