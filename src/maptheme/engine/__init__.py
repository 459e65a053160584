"""Configuration resolution and color-scale engine.

Exports
-------
ThemeResolver : class
    Resolves selections against one theme
Resolution : class
    Result of one resolution
check_theme : function
    Validate every cross-reference of a theme up front
ColorScaleEvaluator : class
    Value -> color and legend label
DisplayContext : class
    Display mode and admin level
"""

from maptheme.engine.context import DisplayContext, GEO
from maptheme.engine.conditions import is_active, select_active
from maptheme.engine.selection import default_selection, normalize_selection, selected_names
from maptheme.engine.templates import (
    expand_template,
    extract_selection,
    resolve_path,
    resolve_title,
)
from maptheme.engine.colors import format_color, parse_color
from maptheme.engine.color_scale import ColorResult, ColorScaleEvaluator, LegendEntry
from maptheme.engine.cross_schema import QueryPlan, plan_query, resolve_query_options
from maptheme.engine.resolver import Resolution, ResolvedDisplay, ThemeResolver, check_theme

__all__ = [
    'DisplayContext',
    'GEO',
    'is_active',
    'select_active',
    'default_selection',
    'normalize_selection',
    'selected_names',
    'expand_template',
    'extract_selection',
    'resolve_path',
    'resolve_title',
    'format_color',
    'parse_color',
    'ColorResult',
    'ColorScaleEvaluator',
    'LegendEntry',
    'QueryPlan',
    'plan_query',
    'resolve_query_options',
    'Resolution',
    'ResolvedDisplay',
    'ThemeResolver',
    'check_theme',
]
