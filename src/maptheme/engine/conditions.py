"""Condition matching and active-entity selection.

Schemas and color scales are both gated by `Conditions`. Exactly one of
each must be active for rendering to proceed; when several could apply,
declaration order breaks the tie (first match wins). Schema and color
scale selection are independent of each other.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional, TypeVar

from maptheme.contracts.failure import NoActiveCandidateError
from maptheme.schemas.dimension import same_option_name

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_active(conditions: Optional[Mapping[str, Sequence[Any]]], selection: Mapping[str, Any]) -> bool:
    """Check whether ``conditions`` hold for the current selection.

    Parameters
    ----------
    conditions : mapping or None
        Dimension name -> acceptable option names. None (or empty) is
        vacuously true.
    selection : mapping
        Dimension name -> currently selected option name.

    Returns
    -------
    bool
        True if, for every constrained dimension, the selected option is
        among the acceptable ones. A constrained dimension with no
        selection never matches.
    """
    if not conditions:
        return True

    for dimension, allowed in conditions.items():
        if dimension not in selection:
            return False
        selected = selection[dimension]
        if not any(same_option_name(selected, name) for name in allowed):
            return False
    return True


def select_active(candidates: Sequence[T], selection: Mapping[str, Any], kind: str = "candidate") -> T:
    """Pick the first candidate whose conditions hold.

    Parameters
    ----------
    candidates : sequence
        Objects with a ``conditions`` attribute (schemas or color scales),
        in declaration order. A candidate without conditions is a
        catch-all.
    selection : mapping
        Dimension name -> currently selected option name.
    kind : str, optional
        Entity name used in log and error messages.

    Returns
    -------
    object
        The first active candidate.

    Raises
    ------
    NoActiveCandidateError
        If no candidate is active for the selection.
    """
    for index, candidate in enumerate(candidates):
        if is_active(candidate.conditions, selection):
            logger.debug("Active %s: #%d %s", kind, index, getattr(candidate, "name", ""))
            return candidate

    raise NoActiveCandidateError(
        f"No {kind} is active for selection {dict(selection)!r}"
    )
