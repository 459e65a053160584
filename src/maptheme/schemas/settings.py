"""ResolverSettings: engine defaults that are not part of a theme.

Every tunable of the resolution engine has a default here. Runtime code
receives a validated ResolverSettings and reads fields directly; user
overrides are layered on top by ``resolve_settings()``.
"""

from typing import Literal, Optional

from pydantic import ConfigDict, Field

from maptheme.schemas.base import ThemeBaseModel


class SelectionSettings(ThemeBaseModel):
    """How incomplete selections are treated."""
    fill_defaults: bool = Field(
        True, description="Fill dimensions missing from a selection with their default option"
    )


class NoDataSettings(ThemeBaseModel):
    """Treatment attached to values that cannot be colorized."""
    color: Optional[str] = None
    label: str = "No data"


class LegendSettings(ThemeBaseModel):
    """Legend and colormap sampling."""
    ticks: int = Field(5, ge=2, description="Samples per interpolation interval for colormaps")


class LoggingSettings(ThemeBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


class ResolverSettings(ThemeBaseModel):
    """Complete engine configuration with all defaults.

    Usage
    -----
        settings = resolve_settings({"no_data": {"color": "#cccccc"}})
        resolver = ThemeResolver(theme, settings)
    """

    selection: SelectionSettings = Field(default_factory=SelectionSettings)
    no_data: NoDataSettings = Field(default_factory=NoDataSettings)
    legend: LegendSettings = Field(default_factory=LegendSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = ConfigDict(
        extra='forbid',           # Settings are ours; typos are errors
        frozen=True,
        str_strip_whitespace=True,
    )
