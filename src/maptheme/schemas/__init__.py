"""Pydantic schemas for maptheme.

This package models a deserialized theme document and the engine's own
settings. All validation, coercion, and option normalization happen at
validation time, so the engine only ever sees canonical, immutable models.

Exports
-------
load_theme : function
    Validate a deserialized theme document
resolve_settings : function
    Layer user overrides on top of engine defaults
ThemeConfig : class
    Top-level theme
Dimension, Option : class
    Data dimensions and their canonical options
Schema : class
    Data shape with templates and info displays
ColorScale, ColorStop, SentinelValue : class
    Colorization rules
ResolverSettings : class
    Engine settings
"""

from maptheme.schemas.resolve import load_theme, resolve_settings, deep_merge
from maptheme.schemas.theme import ThemeConfig, DataFormat, DefaultDisplay, Geography
from maptheme.schemas.dimension import Dimension, Option, normalize_option, same_option_name
from maptheme.schemas.schema import Schema
from maptheme.schemas.info_display import (
    Area,
    BarChart,
    CrossSchema,
    InfoDisplay,
    LineChart,
    ValuesDisplay,
    expanded_dimensions,
)
from maptheme.schemas.color_scale import (
    ColorScale,
    ColorStop,
    CustomLegend,
    Scaling,
    ScalingByAdmin,
    SentinelValue,
)
from maptheme.schemas.settings import ResolverSettings

__all__ = [
    'load_theme',
    'resolve_settings',
    'deep_merge',
    'ThemeConfig',
    'DataFormat',
    'DefaultDisplay',
    'Geography',
    'Dimension',
    'Option',
    'normalize_option',
    'same_option_name',
    'Schema',
    'Area',
    'expanded_dimensions',
    'BarChart',
    'CrossSchema',
    'InfoDisplay',
    'LineChart',
    'ValuesDisplay',
    'ColorScale',
    'ColorStop',
    'CustomLegend',
    'Scaling',
    'ScalingByAdmin',
    'SentinelValue',
    'ResolverSettings',
]
