"""Info display components shown next to the map.

The Info box renders supplemental data for the selected pixel (geo mode)
or feature (aggregate mode). Each component is one variant of the
`InfoDisplay` tagged union, discriminated by its ``type`` field:

- ``bar_chart``: one bar (or stack) per option of a category dimension
- ``line_chart``: a series over a domain dimension, optionally split into
  several lines and/or a shaded area
- ``values``: plain numeric values, optionally for every option of one
  dimension

Any component may query a schema other than the active one through
``cross_schema``.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import Field

from maptheme.schemas.base import ThemeBaseModel
from maptheme.schemas.dimension import OptionName


class CrossSchema(ThemeBaseModel):
    """Query a schema other than the currently active one.

    ``dimension_filter`` fixes the option used for a dimension of the
    target schema. Dimensions shared with the active schema may be omitted;
    the current selection is used for those.
    """
    name: str
    dimension_filter: dict[str, OptionName] = Field(default_factory=dict)


class BarChart(ThemeBaseModel):
    """Bar chart with one category per option of `category_dimension`."""
    type: Literal["bar_chart"]
    label: Optional[str] = None
    category_dimension: str
    subcategory_dimension: Optional[str] = None
    cross_schema: Optional[CrossSchema] = None


class Area(ThemeBaseModel):
    """Shaded area between two options of `expand_dimension`.

    An optional ``line`` option is drawn on top of the area.
    """
    expand_dimension: str
    line: Optional[OptionName] = None
    upper: OptionName
    lower: OptionName

    @property
    def option_names(self) -> list:
        names = [self.upper, self.lower]
        if self.line is not None:
            names.insert(0, self.line)
        return names


class LineChart(ThemeBaseModel):
    """Line chart over the options of `domain`."""
    type: Literal["line_chart"]
    label: Optional[str] = None
    domain: str
    split_dimension: Optional[str] = None
    area: Optional[Area] = None
    cross_schema: Optional[CrossSchema] = None


class ValuesDisplay(ThemeBaseModel):
    """Numeric values and their colors for the selected pixel/feature.

    ``precision`` is deprecated; the schema's ``display_precision`` takes
    precedence whenever it is set.
    """
    type: Literal["values"]
    label: Optional[str] = None
    expand_dimension: Optional[str] = None
    cross_schema: Optional[CrossSchema] = None
    precision: Optional[int] = Field(None, ge=0)


InfoDisplay = Annotated[
    Union[BarChart, LineChart, ValuesDisplay],
    Field(discriminator="type"),
]


def expanded_dimensions(display) -> list[str]:
    """Dimensions a display iterates over instead of taking from the selection.

    Raises
    ------
    TypeError
        If ``display`` is not a known info display type.
    """
    if isinstance(display, BarChart):
        names = [display.category_dimension, display.subcategory_dimension]
    elif isinstance(display, LineChart):
        names = [display.domain, display.split_dimension]
        if display.area is not None:
            names.append(display.area.expand_dimension)
    elif isinstance(display, ValuesDisplay):
        names = [display.expand_dimension]
    else:
        raise TypeError(f"Unknown info display type: {type(display).__name__}")

    result = []
    for name in names:
        if name is not None and name not in result:
            result.append(name)
    return result
