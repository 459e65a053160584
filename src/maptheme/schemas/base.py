"""Base Pydantic model for maptheme theme and settings schemas.

All theme entities inherit from this base so that a loaded theme behaves
the same way everywhere: read-only after construction, tolerant of
properties the engine does not know about.
"""

from pydantic import BaseModel, ConfigDict


class ThemeBaseModel(BaseModel):
    """Base model for all maptheme schemas.

    Validation behaviour:
    - Unknown fields are ignored (theme documents may carry extra keys)
    - Instances are frozen; a loaded theme is immutable
    - Uses Python mode (not JSON mode)
    - Strips surrounding whitespace from strings
    """

    model_config = ConfigDict(
        extra='ignore',           # Ignore unknown fields
        frozen=True,              # Immutable after construction
        use_enum_values=True,     # Convert enums to values
        str_strip_whitespace=True,# Strip whitespace from strings
    )
