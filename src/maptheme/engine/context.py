"""Display context for color evaluation."""

from typing import Literal, Optional

from pydantic import Field, StrictInt

from maptheme.schemas.base import ThemeBaseModel

DisplayMode = Literal["geo", "aggregate"]


class DisplayContext(ThemeBaseModel):
    """Current display mode and, in aggregate mode, the admin level.

    The admin level only matters for aggregate scaling; it is ignored in
    geo mode.
    """
    mode: DisplayMode = "aggregate"
    level: Optional[StrictInt] = Field(None, ge=0, le=2)


GEO = DisplayContext(mode="geo")
