"""Schema: a data shape active under certain conditions.

A theme may declare several data shapes. One (and only one) is active at a
time, chosen by its `conditions`; the dimensions named there act as schema
selectors. Each schema is backed by its own set of data files/tables.
"""

import re
from typing import Literal, Optional

from pydantic import Field

from maptheme.schemas.base import ThemeBaseModel
from maptheme.schemas.conditions import Conditions
from maptheme.schemas.info_display import InfoDisplay

PLACEHOLDER = re.compile(r"\{([^{}]+)\}")


def template_placeholders(template: str) -> list[str]:
    """Dimension names referenced by ``template``, in first-use order."""
    names = []
    for match in PLACEHOLDER.finditer(template):
        if match.group(1) not in names:
            names.append(match.group(1))
    return names


class Schema(ThemeBaseModel):
    """Named data shape.

    ``dimensions`` lists the data dimensions of the schema, NOT including
    the schema-selector dimensions used in ``conditions``. Templates may
    reference both kinds as ``{dimension_name}`` wildcards.

    Example
    -------
        Schema(
            name="mortality",
            conditions={"age": ["children"]},
            dimensions=["year"],
            filepath_template_raster="data/raster/{age}_{year}.tif",
            ui_title_template="Mortality for {age} in {year}",
        )
    """

    name: str
    conditions: Optional[Conditions] = None
    dimensions: list[str] = Field(default_factory=list)
    filepath_template_aggregate: Optional[str] = None
    filepath_template_raster: Optional[str] = None
    disable_mode: Optional[Literal["geo", "aggregate"]] = None
    ui_title_template: str
    info_displays: list[InfoDisplay] = Field(default_factory=list)
    display_precision: Optional[int] = Field(None, ge=0)

    @property
    def selector_dimensions(self) -> list[str]:
        """Dimensions used only to select this schema."""
        return [name for name in (self.conditions or {}) if name not in self.dimensions]

    @property
    def scope_dimensions(self) -> list[str]:
        """Dimensions a template of this schema may reference."""
        return list(self.dimensions) + self.selector_dimensions

    @property
    def templates(self) -> dict[str, str]:
        """Field name -> template, for every template the schema sets."""
        fields = ("filepath_template_raster", "filepath_template_aggregate", "ui_title_template")
        return {name: getattr(self, name) for name in fields if getattr(self, name) is not None}
