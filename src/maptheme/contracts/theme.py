"""Theme cross-reference contracts.

Pydantic validates each model on its own. These contracts check the
references between models that only make sense against the whole theme:
dimension names, option names, schema names and template wildcards.

They run the first time a schema or color scale becomes active (see
``ThemeResolver``), or eagerly for the whole theme via ``check_theme``.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Optional

from maptheme.contracts.base import require
from maptheme.contracts.failure import (
    DanglingReferenceError,
    EmptyColorScaleError,
    UnresolvedPlaceholderError,
)
from maptheme.schemas.color_scale import ColorScale
from maptheme.schemas.info_display import LineChart, expanded_dimensions
from maptheme.schemas.schema import Schema, template_placeholders
from maptheme.schemas.theme import ThemeConfig


def _assert_conditions(conditions: Optional[Mapping[str, Sequence[Any]]], theme: ThemeConfig, owner: str) -> None:
    for name, allowed in (conditions or {}).items():
        dimension = theme.get_dimension(name)
        require(
            dimension is not None,
            f"{owner} contract violated: condition on unknown dimension '{name}'",
            DanglingReferenceError,
        )
        for option_name in allowed:
            require(
                dimension.find_option(option_name) is not None,
                f"{owner} contract violated: condition option {option_name!r} "
                f"is not an option of '{name}'",
                DanglingReferenceError,
            )


def _assert_display(display, index: int, schema: Schema, theme: ThemeConfig) -> None:
    owner = f"Schema '{schema.name}' info display #{index} ({display.type})"

    target = schema
    if display.cross_schema is not None:
        target = theme.get_schema(display.cross_schema.name)
        require(
            target is not None,
            f"{owner} contract violated: cross_schema references unknown schema "
            f"'{display.cross_schema.name}'",
            DanglingReferenceError,
        )
        for name, option_name in display.cross_schema.dimension_filter.items():
            dimension = theme.get_dimension(name)
            require(
                dimension is not None,
                f"{owner} contract violated: dimension_filter names unknown dimension '{name}'",
                DanglingReferenceError,
            )
            require(
                dimension.find_option(option_name) is not None,
                f"{owner} contract violated: dimension_filter option {option_name!r} "
                f"is not an option of '{name}'",
                DanglingReferenceError,
            )

    for name in expanded_dimensions(display):
        require(
            theme.get_dimension(name) is not None,
            f"{owner} contract violated: expands unknown dimension '{name}'",
            DanglingReferenceError,
        )

    if isinstance(display, LineChart) and display.area is not None:
        dimension = theme.get_dimension(display.area.expand_dimension)
        for option_name in display.area.option_names:
            require(
                dimension.find_option(option_name) is not None,
                f"{owner} contract violated: area option {option_name!r} is not an option "
                f"of '{display.area.expand_dimension}'",
                DanglingReferenceError,
            )


def assert_schema_consistent(schema: Schema, theme: ThemeConfig) -> None:
    """Enforce the cross-references of a schema.

    Parameters
    ----------
    schema : Schema
        Schema to check.
    theme : ThemeConfig
        Theme the schema belongs to.

    Raises
    ------
    DanglingReferenceError
        If the schema names an unknown dimension, option or schema.
    UnresolvedPlaceholderError
        If a template wildcard is outside the schema's scope (its
        dimensions plus its selector dimensions).
    """
    for name in schema.dimensions:
        require(
            theme.get_dimension(name) is not None,
            f"Schema '{schema.name}' contract violated: unknown dimension '{name}'",
            DanglingReferenceError,
        )

    _assert_conditions(schema.conditions, theme, f"Schema '{schema.name}'")

    scope = schema.scope_dimensions
    for field_name, template in schema.templates.items():
        unresolved = [name for name in template_placeholders(template) if name not in scope]
        require(
            not unresolved,
            f"Schema '{schema.name}' contract violated: {field_name} {template!r} "
            f"references {unresolved}, not in scope {scope}",
            UnresolvedPlaceholderError,
        )

    for index, display in enumerate(schema.info_displays):
        _assert_display(display, index, schema, theme)


def assert_color_scale_consistent(color_scale: ColorScale, theme: ThemeConfig) -> None:
    """Enforce the cross-references of a color scale.

    Raises
    ------
    EmptyColorScaleError
        If the scale has neither stops nor sentinel values.
    DanglingReferenceError
        If its conditions name an unknown dimension or option.
    """
    require(
        bool(color_scale.scale) or bool(color_scale.sentinel_values),
        f"Color scale '{color_scale.legend_label}' contract violated: "
        f"neither scale stops nor sentinel values",
        EmptyColorScaleError,
    )
    _assert_conditions(color_scale.conditions, theme, f"Color scale '{color_scale.legend_label}'")
