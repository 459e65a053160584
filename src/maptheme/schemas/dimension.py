"""Dimensions and their options.

An option may be declared in three surface forms: a bare string, a bare
number, or a ``{"name": ..., "display_name": ...}`` object. Options are
normalized once, when the dimension is validated, so nothing downstream
ever inspects the raw form again.

Option identity follows the declared primitive: numeric ``5`` and string
``"5"`` are different options, while ``5`` and ``5.0`` are the same one.
"""

from collections.abc import Mapping
from typing import Any, Literal, Optional, Union

from pydantic import Field, StrictFloat, StrictInt, StrictStr, field_validator, model_validator

from maptheme.contracts.failure import InvalidOptionError
from maptheme.schemas.base import ThemeBaseModel


OptionName = Union[StrictStr, StrictInt, StrictFloat]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def option_display_text(value: Union[str, int, float]) -> str:
    """Render a primitive option name the way it is shown to users.

    Integral floats drop their trailing ``.0`` so that ``2010.0`` and
    ``2010`` read the same.
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def same_option_name(a: Any, b: Any) -> bool:
    """Compare two option names by value and kind.

    Numbers compare numerically, strings compare as strings, and a number
    never equals a string.
    """
    if _is_number(a) and _is_number(b):
        return a == b
    if isinstance(a, str) and isinstance(b, str):
        return a == b
    return False


def option_key(value: Any) -> tuple:
    """Hashable identity of an option name (see `same_option_name`)."""
    if _is_number(value):
        return ("number", float(value))
    return ("string", value)


class Option(ThemeBaseModel):
    """A concrete value of a dimension.

    name : str or number
        Internal identifier, unique within its dimension. Used in paths,
        conditions and selections.
    display_name : str
        Label shown to the user and substituted into titles.
    """
    name: OptionName
    display_name: str

    @field_validator("display_name", mode="before")
    @classmethod
    def coerce_display_name(cls, v):
        """Accept numeric display names."""
        if _is_number(v):
            return option_display_text(v)
        return v

    def matches(self, name: Any) -> bool:
        """True if ``name`` identifies this option."""
        return same_option_name(self.name, name)


def normalize_option(raw: Any) -> Option:
    """Canonicalize any option declaration into an `Option`.

    Parameters
    ----------
    raw : str, int, float, mapping or Option
        Option as declared in the theme.

    Returns
    -------
    Option
        ``(name, display_name)`` pair. For primitives the name keeps its
        declared type and the display name is its string form.

    Raises
    ------
    InvalidOptionError
        If a mapping lacks ``name`` or ``display_name``, or the value is of
        an unsupported type (booleans included).

    Examples
    --------
    >>> normalize_option(2010)
    Option(name=2010, display_name='2010')
    >>> normalize_option({"name": "m", "display_name": "Male"}).display_name
    'Male'
    """
    if isinstance(raw, Option):
        return raw
    if isinstance(raw, bool):
        raise InvalidOptionError(f"Boolean is not a valid option: {raw!r}")
    if isinstance(raw, str) or _is_number(raw):
        return Option(name=raw, display_name=option_display_text(raw))
    if isinstance(raw, Mapping):
        missing = [key for key in ("name", "display_name") if key not in raw]
        if missing:
            raise InvalidOptionError(
                f"Option object {dict(raw)!r} is missing {', '.join(missing)}"
            )
        return Option(name=raw["name"], display_name=raw["display_name"])
    raise InvalidOptionError(f"Unsupported option declaration: {raw!r}")


class Dimension(ThemeBaseModel):
    """Named axis of variation with an enumerated set of options.

    Dimensions are only meaningful inside a `Schema`; they are declared
    once at theme level so several schemas can share them.
    """

    name: str
    display_name: str
    options: list[Option] = Field(min_length=1)
    default_option: Optional[OptionName] = None
    widget_type: Literal["select", "slider", "buttonset"] = "select"
    playable: bool = False
    help_text: Optional[str] = None

    @field_validator("options", mode="before")
    @classmethod
    def normalize_options(cls, v):
        """Normalize every option declaration form."""
        if isinstance(v, (list, tuple)):
            return [normalize_option(raw) for raw in v]
        return v

    @model_validator(mode="after")
    def check_options(self):
        """Option names are unique; the default option exists."""
        seen = set()
        for option in self.options:
            key = option_key(option.name)
            if key in seen:
                raise ValueError(
                    f"Dimension '{self.name}' declares option {option.name!r} twice"
                )
            seen.add(key)

        if self.default_option is not None and self.find_option(self.default_option) is None:
            raise ValueError(
                f"Dimension '{self.name}' default_option {self.default_option!r} "
                f"is not one of its options"
            )
        return self

    @property
    def option_names(self) -> list:
        return [option.name for option in self.options]

    @property
    def default(self) -> Option:
        """Option shown before the user makes a selection."""
        if self.default_option is None:
            return self.options[0]
        return self.find_option(self.default_option)

    def find_option(self, name: Any) -> Optional[Option]:
        """Return the option identified by ``name``, or None."""
        for option in self.options:
            if option.matches(name):
                return option
        return None
