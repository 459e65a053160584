"""Root-level pytest fixtures for the maptheme test suite.

Provides a small, complete theme document and the validated objects built
from it. Tests that need a variation use ``make_theme`` instead of
editing raw dicts in place.
"""

import copy

import pytest

from maptheme.engine import ThemeResolver
from maptheme.schemas import load_theme, resolve_settings


THEME = {
    "name": "child-health",
    "display_name": "Child Health",
    "dimensions": [
        {
            "name": "indicator",
            "display_name": "Indicator",
            "options": [
                {"name": "mortality", "display_name": "Mortality"},
                {"name": "prevalence", "display_name": "Prevalence"},
            ],
        },
        {
            "name": "age",
            "display_name": "Age group",
            "options": ["children", "adults"],
        },
        {
            "name": "year",
            "display_name": "Year",
            "options": [2000, 2010],
            "default_option": 2010,
        },
    ],
    "schemas": [
        {
            "name": "mortality",
            "conditions": {"indicator": ["mortality"]},
            "dimensions": ["age", "year"],
            "filepath_template_raster": "raster/{indicator}_{age}_{year}.tif",
            "filepath_template_aggregate": "aggregate/{age}_{year}.csv",
            "ui_title_template": "Mortality for {age} in {year}",
            "display_precision": 1,
            "info_displays": [
                {"type": "line_chart", "label": "Trend", "domain": "year"},
                {"type": "bar_chart", "label": "By age", "category_dimension": "age"},
                {
                    "type": "values",
                    "label": "Prevalence",
                    "cross_schema": {"name": "prevalence", "dimension_filter": {"year": 2000}},
                },
            ],
        },
        {
            "name": "prevalence",
            "dimensions": ["year"],
            "filepath_template_raster": "raster/prevalence_{year}.tif",
            "filepath_template_aggregate": "aggregate/prevalence_{year}.csv",
            "ui_title_template": "Prevalence in {year}",
            "disable_mode": "aggregate",
        },
    ],
    "color_scales": [
        {
            "conditions": {"indicator": ["mortality"]},
            "legend_label": "Mortality",
            "scaling_aggregate": {"admin0": {"factor": 2}},
            "scale": [
                {"color": "#000000", "offset": 0, "label": "{val}"},
                {"color": "#ffffff", "offset": 10, "label": "{val}+"},
            ],
            "sentinel_values": [
                {"color": "#ff0000", "offset": 0, "label": "No data"},
            ],
        },
        {
            "legend_label": "Prevalence",
            "scaling": {"factor": 100},
            "scale": [
                {"color": "#ffffff", "offset": 0},
                {"color": "#0000ff", "offset": 1},
            ],
        },
    ],
}


# =============================================================================
# Theme Fixtures
# =============================================================================

@pytest.fixture
def theme_dict():
    """Deserialized theme document (a fresh deep copy per test)."""
    return copy.deepcopy(THEME)


@pytest.fixture
def theme(theme_dict):
    """Validated ThemeConfig."""
    return load_theme(theme_dict)


@pytest.fixture
def resolver(theme):
    """ThemeResolver with default settings."""
    return ThemeResolver(theme)


@pytest.fixture
def make_theme(theme_dict):
    """Factory fixture for theme variations.

    Top-level keys passed as keyword arguments replace the corresponding
    keys of the base document.

    Examples
    --------
    >>> def test_single_scale(make_theme):
    ...     theme = make_theme(color_scales=[{"legend_label": "x", "scale": [...]}])
    """
    def _make(**overrides):
        document = copy.deepcopy(theme_dict)
        document.update(copy.deepcopy(overrides))
        return load_theme(document)

    return _make


@pytest.fixture
def settings():
    """Engine settings with all defaults."""
    return resolve_settings()
