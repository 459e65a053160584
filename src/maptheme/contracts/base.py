"""Base contract enforcement utilities.

The require() function is the single enforcement mechanism for all theme
contracts. It enforces cross-references that a single pydantic model
cannot see on its own.
"""

from typing import Type

from maptheme.contracts.failure import ThemeConfigError


def require(
    condition: bool,
    message: str,
    error: Type[Exception] = ThemeConfigError,
) -> None:
    """Enforce a theme contract.

    Fail-fast: no recovery, no fallback, no silence.

    Parameters
    ----------
    condition : bool
        The invariant that must be true.

    message : str
        Error message explaining the violation.

    error : type, optional
        Exception class to raise (default ThemeConfigError).

    Raises
    ------
    ThemeConfigError
        Or the requested subclass, if condition is False.

    Examples
    --------
    >>> require(schema.name in names, f"Unknown schema '{schema.name}'")
    >>> require(bool(stops), "Color scale is empty", EmptyColorScaleError)
    """
    if not condition:
        raise error(message)
