"""matplotlib adapters for resolved color scales."""

from .colormap import build_colormap, colormap_for

__all__ = ['build_colormap', 'colormap_for']
