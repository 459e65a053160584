"""Query option sets for info displays.

An info display fetches values for the selected pixel/feature from the
active schema, or from another schema through ``cross_schema``. This
module works out which option of each dimension to query:

- dimensions the display expands (a bar chart's categories, a line
  chart's domain, ...) are never fixed; every option is queried
- with ``cross_schema``, ``dimension_filter`` fixes options explicitly and
  the current selection fills dimensions shared with the active schema
- without ``cross_schema``, the current selection is used as is
"""

import itertools
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from maptheme.contracts.base import require
from maptheme.contracts.failure import DanglingReferenceError, InvalidSelectionError
from maptheme.schemas.dimension import Option
from maptheme.schemas.info_display import LineChart, expanded_dimensions
from maptheme.schemas.schema import Schema
from maptheme.schemas.theme import ThemeConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryPlan:
    """Everything a data-query collaborator needs for one info display.

    Attributes
    ----------
    schema : Schema
        Schema to query.
    fixed : dict
        Dimension name -> the single option to query.
    expand : dict
        Dimension name -> every option to query, in declaration order.
    """
    schema: Schema
    fixed: dict[str, Option]
    expand: dict[str, list[Option]] = field(default_factory=dict)

    @property
    def fixed_names(self) -> dict[str, Any]:
        """Dimension name -> option name for the fixed dimensions."""
        return {name: option.name for name, option in self.fixed.items()}

    def rows(self) -> Iterator[dict[str, Any]]:
        """Every full dimension -> option name mapping to query."""
        names = list(self.expand)
        for combo in itertools.product(*(self.expand[name] for name in names)):
            row = self.fixed_names
            row.update({name: option.name for name, option in zip(names, combo)})
            yield row

    def to_frame(self) -> pd.DataFrame:
        """Rows as a DataFrame, one column per dimension."""
        columns = list(self.fixed) + list(self.expand)
        return pd.DataFrame(list(self.rows()), columns=columns)


def _target_schema(display, current_schema: Schema, theme: ThemeConfig) -> Schema:
    if display.cross_schema is None:
        return current_schema
    target = theme.get_schema(display.cross_schema.name)
    require(
        target is not None,
        f"cross_schema references unknown schema '{display.cross_schema.name}'",
        DanglingReferenceError,
    )
    return target


def resolve_query_options(
    display,
    current_schema: Schema,
    selection: Mapping[str, Option],
    theme: ThemeConfig,
) -> tuple[Schema, dict[str, Option]]:
    """Fixed options to query for an info display.

    Parameters
    ----------
    display : InfoDisplay
        Bar chart, line chart or values display.
    current_schema : Schema
        Active schema.
    selection : mapping
        Normalized selection (dimension name -> `Option`).
    theme : ThemeConfig
        Loaded theme.

    Returns
    -------
    schema : Schema
        Schema to query (the target of ``cross_schema``, if any).
    options : dict
        Dimension name -> `Option` for every non-expanded dimension of
        that schema.

    Raises
    ------
    DanglingReferenceError
        If the target schema is unknown, a filter names an unknown option,
        or a dimension of the target schema is neither filtered nor shared
        with the active schema.
    InvalidSelectionError
        If a shared dimension has no selected option.
    """
    expanded = expanded_dimensions(display)
    target = _target_schema(display, current_schema, theme)
    cross = display.cross_schema
    dimension_filter = cross.dimension_filter if cross is not None else {}

    for name in dimension_filter:
        if name in expanded:
            logger.warning(
                "dimension_filter for '%s' ignored: the %s display expands it",
                name, display.type,
            )
        elif name not in target.dimensions:
            logger.warning(
                "dimension_filter for '%s' ignored: not a dimension of schema '%s'",
                name, target.name,
            )

    options: dict[str, Option] = {}
    for name in target.dimensions:
        if name in expanded:
            continue

        if name in dimension_filter:
            dimension = theme.get_dimension(name)
            require(dimension is not None, f"Unknown dimension '{name}' in dimension_filter", DanglingReferenceError)
            option = dimension.find_option(dimension_filter[name])
            require(
                option is not None,
                f"dimension_filter option {dimension_filter[name]!r} is not an option of '{name}'",
                DanglingReferenceError,
            )
            options[name] = option
            continue

        require(
            name in current_schema.scope_dimensions,
            f"Dimension '{name}' of schema '{target.name}' is neither filtered nor shared "
            f"with schema '{current_schema.name}'",
            DanglingReferenceError,
        )
        if name not in selection:
            raise InvalidSelectionError(f"No option selected for dimension '{name}'")
        options[name] = selection[name]

    return target, options


def _expanded_options(display, name: str, theme: ThemeConfig) -> list[Option]:
    dimension = theme.get_dimension(name)
    require(dimension is not None, f"Info display expands unknown dimension '{name}'", DanglingReferenceError)

    area = display.area if isinstance(display, LineChart) else None
    if area is None or area.expand_dimension != name or name in (display.domain, display.split_dimension):
        return list(dimension.options)

    # The area only draws its line and bounds
    options = []
    for option_name in area.option_names:
        option = dimension.find_option(option_name)
        require(
            option is not None,
            f"Area option {option_name!r} is not an option of '{name}'",
            DanglingReferenceError,
        )
        options.append(option)
    return options


def plan_query(
    display,
    current_schema: Schema,
    selection: Mapping[str, Option],
    theme: ThemeConfig,
) -> QueryPlan:
    """Full query plan for an info display: fixed plus expanded options."""
    target, fixed = resolve_query_options(display, current_schema, selection, theme)
    expand = {name: _expanded_options(display, name, theme) for name in expanded_dimensions(display)}

    logger.debug(
        "Query plan for %s on '%s': fixed=%s expand=%s",
        display.type, target.name, list(fixed), list(expand),
    )
    return QueryPlan(schema=target, fixed=fixed, expand=expand)
