"""`maptheme` - configuration resolution and color scales for map themes.

Subpackages:
- schemas: Theme document model, engine settings
- contracts: Error taxonomy, cross-reference checks
- engine: Condition matching, templating, color scales, queries
- visualization: matplotlib colormap adapters
"""

__version__ = "0.1.0"
