"""Theme loading and settings resolution.

This module provides the two entrypoints that turn plain mappings into
validated, immutable models:

- load_theme(): deserialized theme document -> ThemeConfig
- resolve_settings(): defaults < user overrides -> ResolverSettings
"""

from typing import Any, Optional, Union

from maptheme.schemas.settings import ResolverSettings
from maptheme.schemas.theme import ThemeConfig


def deep_merge(base: dict, *overrides: dict) -> dict:
    """Deep merge multiple dictionaries.

    Later dictionaries override earlier ones. Nested dictionaries are
    merged recursively; other values are replaced.

    Parameters
    ----------
    base : dict
        Base dictionary (lowest priority)
    *overrides : dict
        Override dictionaries (higher priority, left to right)

    Returns
    -------
    dict
        Merged dictionary

    Examples
    --------
    >>> base = {"a": 1, "b": {"c": 2, "d": 3}}
    >>> override = {"b": {"d": 4, "e": 5}, "f": 6}
    >>> deep_merge(base, override)
    {'a': 1, 'b': {'c': 2, 'd': 4, 'e': 5}, 'f': 6}
    """
    result = base.copy()

    for override in overrides:
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = deep_merge(result[key], value)
            else:
                result[key] = value

    return result


def load_theme(data: Union[dict, ThemeConfig]) -> ThemeConfig:
    """Validate a deserialized theme document.

    Parameters
    ----------
    data : dict or ThemeConfig
        Theme document as produced by a JSON/YAML loader. An existing
        ThemeConfig is returned unchanged.

    Returns
    -------
    ThemeConfig
        Validated, immutable theme.

    Raises
    ------
    ValidationError
        If the document does not have the declared shape.
    """
    if isinstance(data, ThemeConfig):
        return data
    return ThemeConfig.model_validate(data)


def resolve_settings(
    user_settings: Optional[Union[dict, ResolverSettings]] = None,
    *overrides: Optional[dict],
) -> ResolverSettings:
    """Resolve engine settings from defaults and overrides.

    Precedence (highest to lowest):
    1. ``overrides`` (left to right)
    2. ``user_settings``
    3. ResolverSettings defaults

    Parameters
    ----------
    user_settings : dict or ResolverSettings, optional
        User overrides. If None or empty, defaults are used.
    *overrides : dict
        Further overrides, e.g. from command-line flags.

    Returns
    -------
    ResolverSettings
        Fully validated, immutable settings.

    Examples
    --------
    >>> settings = resolve_settings({"no_data": {"color": "#cccccc"}})
    >>> settings.no_data.label
    'No data'
    """
    base: dict[str, Any] = ResolverSettings().model_dump()

    if isinstance(user_settings, ResolverSettings):
        user = user_settings.model_dump(exclude_unset=True)
    else:
        user = user_settings or {}

    merged = deep_merge(base, user, *[o for o in overrides if o])
    return ResolverSettings.model_validate(merged)
