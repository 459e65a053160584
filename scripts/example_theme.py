"""Example map theme.

A deserialized theme document expressed as a Python dict. Two indicators
share a year dimension; mortality is additionally split by age group.

Usage:
    python scripts/resolve_theme.py scripts/example_theme.py
    python scripts/resolve_theme.py scripts/example_theme.py -s age=adults -s year=2000
    python scripts/resolve_theme.py scripts/example_theme.py -s indicator=prevalence --mode geo
"""

CONFIG = {
    "version": "1",
    "name": "child-health",
    "display_name": "Child Health Atlas",

    # ========================================================================
    # DATA FORMAT & DISPLAY
    # ========================================================================
    "data_format": {
        "raster": True,
        "aggregate": True,
        "no_data_value": -999999,
        "max_admin_level": 2,
    },
    "default_display": {"mode": "aggregate", "level": 1},
    "download_url": "https://example.org/child-health/data.zip",

    # ========================================================================
    # DIMENSIONS
    # ========================================================================
    "dimensions": [
        {
            "name": "indicator",
            "display_name": "Indicator",
            "options": [
                {"name": "mortality", "display_name": "Mortality"},
                {"name": "prevalence", "display_name": "Prevalence"},
            ],
            "widget_type": "buttonset",
        },
        {
            "name": "age",
            "display_name": "Age group",
            "options": ["children", "adults"],
        },
        {
            "name": "year",
            "display_name": "Year",
            "options": [2000, 2005, 2010],
            "default_option": 2010,
            "widget_type": "slider",
            "playable": True,
        },
    ],

    # ========================================================================
    # SCHEMAS (first match wins; the last one is the catch-all)
    # ========================================================================
    "schemas": [
        {
            "name": "mortality",
            "conditions": {"indicator": ["mortality"]},
            "dimensions": ["age", "year"],
            "filepath_template_raster": "raster/{indicator}_{age}_{year}.tif",
            "filepath_template_aggregate": "aggregate/{indicator}_{age}_{year}.csv",
            "ui_title_template": "Mortality for {age} in {year}",
            "display_precision": 1,
            "info_displays": [
                {"type": "line_chart", "label": "Trend", "domain": "year"},
                {"type": "bar_chart", "label": "By age group", "category_dimension": "age"},
                {
                    "type": "values",
                    "label": "Prevalence (2010)",
                    "cross_schema": {"name": "prevalence", "dimension_filter": {"year": 2010}},
                },
            ],
        },
        {
            "name": "prevalence",
            "dimensions": ["year"],
            "filepath_template_raster": "raster/prevalence_{year}.tif",
            "ui_title_template": "Prevalence in {year}",
            "disable_mode": "aggregate",
        },
    ],

    # ========================================================================
    # COLOR SCALES
    # ========================================================================
    "color_scales": [
        {
            "conditions": {"indicator": ["mortality"]},
            "legend_label": "Deaths per 1,000",
            "scaling_aggregate": {"admin0": {"factor": 0.5}},
            "scale": [
                {"color": "#fff5f0", "offset": 0, "label": "{val}"},
                {"color": "#fb6a4a", "offset": 50},
                {"color": "#67000d", "offset": 100, "label": "{val}+"},
            ],
            "sentinel_values": [
                {"color": "#cccccc", "offset": -1, "label": "Not estimated"},
            ],
        },
        {
            "legend_label": "Prevalence",
            "scaling": {"factor": 100},
            "scale": [
                {"color": "rgb(247, 252, 245)", "offset": 0.01, "label": "{val}%"},
                {"color": "hsl(120, 60%, 25%)", "offset": 1, "label": "{val}%"},
            ],
            "legend_distribution": "log10",
        },
    ],
}
