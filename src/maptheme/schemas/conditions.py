"""Conditions gating schemas and color scales.

A `Conditions` mapping goes from a dimension name to the option names for
which the owning schema or color scale is active. It is satisfied when, for
every listed dimension, the currently selected option is among those
listed. Dimensions absent from the mapping are unconstrained.

Example
-------
    conditions = {"data-shape": ["data-shape-1"]}
    # ACTIVE if "data-shape" is "data-shape-1", INACTIVE otherwise
"""

from maptheme.schemas.dimension import OptionName


Conditions = dict[str, list[OptionName]]
