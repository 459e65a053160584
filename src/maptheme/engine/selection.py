"""Selection state helpers.

The client owns the selection: one chosen option name per dimension. The
engine only reads it, turning a plain ``{dimension: option_name}`` mapping
into canonical `Option`s checked against the theme.
"""

import logging
from collections.abc import Mapping
from typing import Any

from maptheme.contracts.failure import InvalidSelectionError
from maptheme.schemas.dimension import Option
from maptheme.schemas.theme import ThemeConfig

logger = logging.getLogger(__name__)


SelectionState = dict[str, Option]


def default_selection(theme: ThemeConfig) -> SelectionState:
    """Selection shown when the theme is first loaded."""
    return {dimension.name: dimension.default for dimension in theme.dimensions}


def normalize_selection(
    theme: ThemeConfig,
    selection: Mapping[str, Any],
    fill_defaults: bool = True,
) -> SelectionState:
    """Validate a selection and map it to canonical options.

    Parameters
    ----------
    theme : ThemeConfig
        Loaded theme.
    selection : mapping
        Dimension name -> option name (or `Option`).
    fill_defaults : bool, optional
        Fill dimensions absent from ``selection`` with their default
        option (default True).

    Returns
    -------
    dict
        Dimension name -> `Option`, in theme declaration order.

    Raises
    ------
    InvalidSelectionError
        If a dimension is unknown, or a selected value is not one of its
        options. Option identity is typed: ``"5"`` does not select ``5``.
    """
    state: SelectionState = {}

    for name, value in selection.items():
        dimension = theme.get_dimension(name)
        if dimension is None:
            raise InvalidSelectionError(f"Selection names unknown dimension '{name}'")

        option_name = value.name if isinstance(value, Option) else value
        option = dimension.find_option(option_name)
        if option is None:
            raise InvalidSelectionError(
                f"{option_name!r} is not an option of dimension '{name}' "
                f"(options: {dimension.option_names})"
            )
        state[name] = option

    if fill_defaults:
        for dimension in theme.dimensions:
            if dimension.name not in state:
                state[dimension.name] = dimension.default
                logger.debug("Filled %s with default option %r", dimension.name, dimension.default.name)

    order = {dimension.name: i for i, dimension in enumerate(theme.dimensions)}
    return dict(sorted(state.items(), key=lambda item: order[item[0]]))


def selected_names(state: Mapping[str, Option]) -> dict[str, Any]:
    """Dimension name -> selected option name."""
    return {name: option.name for name, option in state.items()}
