"""Path and title templating.

Templates reference dimensions as ``{dimension_name}`` wildcards:

- path templates are filled with the selected option's ``name``
- title templates are filled with the selected option's ``display_name``

All wildcards are substituted in a single pass. A wildcard naming a
dimension outside the schema's scope is a configuration error. Delimiters
between wildcards (commonly ``_``) are a caller convention.

Example
-------
    >>> resolve_title("Mortality for {age} in {year}", state, ["year", "age"])
    'Mortality for children in 2010'
"""

import itertools
import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any, Optional

from maptheme.contracts.failure import InvalidSelectionError, UnresolvedPlaceholderError
from maptheme.schemas.dimension import Option, option_display_text
from maptheme.schemas.schema import PLACEHOLDER, template_placeholders

logger = logging.getLogger(__name__)


def check_template_scope(template: str, scope_dimensions: Sequence[str]) -> None:
    """Raise if ``template`` references a dimension outside the scope."""
    unresolved = [name for name in template_placeholders(template) if name not in scope_dimensions]
    if unresolved:
        raise UnresolvedPlaceholderError(
            f"Template {template!r} references {unresolved}, not in scope {list(scope_dimensions)}"
        )


def _path_text(option: Option) -> str:
    return option_display_text(option.name)


def _substitute(template: str, selection: Mapping[str, Option], scope_dimensions: Sequence[str], use_display: bool) -> str:
    check_template_scope(template, scope_dimensions)

    def replace(match):
        name = match.group(1)
        if name not in selection:
            raise InvalidSelectionError(f"No option selected for dimension '{name}' used in {template!r}")
        option = selection[name]
        return option.display_name if use_display else _path_text(option)

    resolved = PLACEHOLDER.sub(replace, template)
    logger.debug("Template %r -> %r", template, resolved)
    return resolved


def resolve_path(template: str, selection: Mapping[str, Option], scope_dimensions: Sequence[str]) -> str:
    """Fill a path template with selected option names.

    Parameters
    ----------
    template : str
        e.g. ``"data/raster/{dim1}_{dim2}.tif"``
    selection : mapping
        Dimension name -> selected `Option`.
    scope_dimensions : sequence of str
        Dimensions the template may reference (schema dimensions plus
        selector dimensions).

    Raises
    ------
    UnresolvedPlaceholderError
        If a wildcard is not in scope.
    InvalidSelectionError
        If a wildcard is in scope but nothing is selected for it.
    """
    return _substitute(template, selection, scope_dimensions, use_display=False)


def resolve_title(template: str, selection: Mapping[str, Option], scope_dimensions: Sequence[str]) -> str:
    """Fill a title template with selected option display names.

    Same rules as `resolve_path`.
    """
    return _substitute(template, selection, scope_dimensions, use_display=True)


def expand_template(template: str, scope_options: Mapping[str, Sequence[Option]]) -> list[str]:
    """Every path a template can produce.

    There is one data file per combination of options of the referenced
    dimensions. Dimensions in ``scope_options`` that the template does not
    reference do not multiply the result.

    Parameters
    ----------
    template : str
        Path template.
    scope_options : mapping
        Dimension name -> its options.

    Returns
    -------
    list of str
        Resolved paths, in option declaration order.
    """
    names = template_placeholders(template)
    check_template_scope(template, list(scope_options))

    paths = []
    for combo in itertools.product(*(scope_options[name] for name in names)):
        paths.append(resolve_path(template, dict(zip(names, combo)), names))
    return paths


def extract_selection(
    template: str,
    resolved: str,
    scope_options: Mapping[str, Sequence[Option]],
) -> Optional[dict[str, Any]]:
    """Recover the selected option names from a resolved path.

    Inverse of `resolve_path`: matches ``resolved`` against the template
    with each wildcard restricted to the known option names of its
    dimension.

    Returns
    -------
    dict or None
        Dimension name -> option name, or None if ``resolved`` was not
        produced by ``template``.
    """
    check_template_scope(template, list(scope_options))

    groups: dict[str, str] = {}
    pattern = []
    position = 0
    for match in PLACEHOLDER.finditer(template):
        pattern.append(re.escape(template[position:match.start()]))
        name = match.group(1)
        if name in groups:
            pattern.append(f"(?P={groups[name]})")
        else:
            groups[name] = f"g{len(groups)}"
            texts = sorted({_path_text(o) for o in scope_options[name]}, key=len, reverse=True)
            pattern.append(f"(?P<{groups[name]}>{'|'.join(re.escape(t) for t in texts)})")
        position = match.end()
    pattern.append(re.escape(template[position:]))

    found = re.fullmatch("".join(pattern), resolved)
    if found is None:
        return None

    selection = {}
    for name, group in groups.items():
        text = found.group(group)
        selection[name] = next(o.name for o in scope_options[name] if _path_text(o) == text)
    return selection
