"""Centralized error taxonomy for theme resolution.

Resolution fails fast, loud, and once. Every fatal problem raises a
subclass of ResolutionError, so callers can react to a broken theme or a
bad selection uniformly while still telling the two apart.

Key distinction:
- ThemeConfigError: the theme itself is inconsistent (fix the document)
- SelectionError: the theme is fine but the current selection cannot be
  resolved (reset the selection)
- Unrepresentable values are not errors at all; they are reported per
  value by the color-scale evaluator
"""


class ResolutionError(ValueError):
    """Base class for every fatal resolution failure."""


class ThemeConfigError(ResolutionError):
    """Raised when a theme is structurally inconsistent.

    These errors only depend on the theme document. They abort the whole
    resolution call; nothing is partially rendered.
    """


class UnresolvedPlaceholderError(ThemeConfigError):
    """A template wildcard names a dimension that is not in scope."""


class DanglingReferenceError(ThemeConfigError):
    """A dimension, option, or schema reference does not resolve."""


class EmptyColorScaleError(ThemeConfigError):
    """A color scale declares neither `scale` stops nor sentinel values."""


class InvalidOptionError(ThemeConfigError):
    """An option declaration is malformed."""


class InvalidColorError(ThemeConfigError):
    """A color string cannot be parsed."""


class SelectionError(ResolutionError):
    """Raised when the current selection cannot be resolved."""


class NoActiveCandidateError(SelectionError):
    """No schema or color scale satisfies its conditions for the selection."""


class InvalidSelectionError(SelectionError):
    """A selected option is missing or not an option of its dimension."""
