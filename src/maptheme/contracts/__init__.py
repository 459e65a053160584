"""Theme contracts: fail-fast enforcement of cross-references.

Key principle:
- Pydantic validates each model on its own
- Contracts validate references between models (``maptheme.contracts.theme``)
- The engine reports per-value problems without raising

The theme contracts are imported from ``maptheme.contracts.theme``.
"""

from maptheme.contracts.failure import (
    ResolutionError,
    ThemeConfigError,
    UnresolvedPlaceholderError,
    DanglingReferenceError,
    EmptyColorScaleError,
    InvalidOptionError,
    InvalidColorError,
    SelectionError,
    NoActiveCandidateError,
    InvalidSelectionError,
)
from maptheme.contracts.base import require

__all__ = [
    "ResolutionError",
    "ThemeConfigError",
    "UnresolvedPlaceholderError",
    "DanglingReferenceError",
    "EmptyColorScaleError",
    "InvalidOptionError",
    "InvalidColorError",
    "SelectionError",
    "NoActiveCandidateError",
    "InvalidSelectionError",
    "require",
]
