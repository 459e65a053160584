"""Color scale schemas.

A color scale maps data values to colors through linear interpolation
between `ColorStop`s and/or exact matches against `SentinelValue`s. As with
schemas, exactly one color scale is active at a time, chosen by its
`conditions`.

Whether a scale has any stops at all is checked when the engine first
resolves it (see ``maptheme.engine.color_scale``), not here.
"""

from typing import Literal, Optional, Union

from pydantic import Field, field_validator

from maptheme.schemas.base import ThemeBaseModel
from maptheme.schemas.conditions import Conditions


class ColorStop(ThemeBaseModel):
    """Reference color applied at a data value.

    ``label`` may contain ``{val}``, replaced in the legend by the offset
    after scaling.
    """
    color: str
    offset: float
    label: Optional[str] = None

    @field_validator("offset", mode="before")
    @classmethod
    def coerce_offset(cls, v):
        """Accept int or float offsets."""
        if isinstance(v, bool):
            raise ValueError("offset must be a number")
        return float(v)


class SentinelValue(ColorStop):
    """Categorical value matched by exact equality; label is mandatory."""
    label: str


class Scaling(ThemeBaseModel):
    """Multiplier applied to every color-stop offset."""
    factor: float


class ScalingByAdmin(ThemeBaseModel):
    """Per-admin-level scaling for aggregate mode."""
    admin0: Optional[Scaling] = None
    admin1: Optional[Scaling] = None
    admin2: Optional[Scaling] = None

    def for_level(self, level: int) -> Optional[Scaling]:
        return getattr(self, f"admin{level}", None)


class CustomLegend(ThemeBaseModel):
    """SVG element used in place of the generated legend.

    ``contents`` takes precedence over ``filepath``.
    """
    filepath: Optional[str] = None
    contents: Optional[str] = None

    @property
    def source(self) -> Optional[str]:
        """Inline SVG if present, otherwise the file path."""
        return self.contents if self.contents is not None else self.filepath


class ColorScale(ThemeBaseModel):
    """Rules for colorizing features according to their data values."""

    conditions: Optional[Conditions] = None
    legend_label: str
    scaling: Optional[Scaling] = None
    scaling_aggregate: Optional[Union[Scaling, ScalingByAdmin]] = None
    scaling_geospatial: Optional[Scaling] = None
    scale: list[ColorStop] = Field(default_factory=list)
    sentinel_values: list[SentinelValue] = Field(default_factory=list)
    legend_distribution: Literal["linear", "ln", "log10"] = "linear"
    custom_legend: Optional[CustomLegend] = None

    @field_validator("scaling_aggregate", mode="before")
    @classmethod
    def pick_aggregate_scaling(cls, v):
        """A mapping with `factor` is global; anything else is per admin level."""
        if isinstance(v, dict):
            if "factor" in v:
                return Scaling.model_validate(v)
            return ScalingByAdmin.model_validate(v)
        return v

    @field_validator("scale", mode="after")
    @classmethod
    def sort_stops(cls, v):
        """Keep stops ascending by offset (stable for equal offsets)."""
        return sorted(v, key=lambda stop: stop.offset)
