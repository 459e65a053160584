"""matplotlib adapters for color scales.

A rendering collaborator that draws with matplotlib (``imshow``,
``pcolormesh``, GeoPandas ``plot``) needs a colormap and a norm rather
than per-value colors. `build_colormap` samples a `ColorScaleEvaluator`
so that matplotlib renders exactly what ``color_for`` returns, including
clamping at both ends and sharp steps where two stops share an
offset. Sentinel values are categorical and are not part of
the colormap; colorize them with ``ColorScaleEvaluator.colorize``.
"""

import itertools
import logging
from typing import Optional

import numpy as np
import matplotlib.colors as mcolors

from maptheme.contracts.base import require
from maptheme.contracts.failure import ThemeConfigError
from maptheme.engine.color_scale import ColorScaleEvaluator
from maptheme.engine.colors import to_unit_rgba
from maptheme.engine.context import DisplayContext

logger = logging.getLogger(__name__)

_CHANNELS = ("red", "green", "blue", "alpha")


def build_colormap(
    evaluator: ColorScaleEvaluator,
    context: Optional[DisplayContext] = None,
    ticks: int = 5,
    name: Optional[str] = None,
) -> tuple[mcolors.LinearSegmentedColormap, mcolors.Normalize]:
    """Colormap and norm for the interpolated part of a color scale.

    Parameters
    ----------
    evaluator : ColorScaleEvaluator
        Evaluator of the active color scale.
    context : DisplayContext, optional
        Display mode and admin level; selects the scaling factor.
    ticks : int, optional
        Samples per interval between two stops (default 5, see
        ``ResolverSettings.legend.ticks``).
    name : str, optional
        Colormap name (default: the scale's legend label).

    Returns
    -------
    cmap : LinearSegmentedColormap
        Under/over colors are the boundary stop colors; the "bad" color is
        the configured no-data color, if any.
    norm : Normalize
        Maps the effective offset range onto [0, 1].

    Raises
    ------
    ThemeConfigError
        If the scale has no stops.

    Example usage::

        cmap, norm = build_colormap(resolution.evaluator, resolution.context)
        ax.imshow(values, cmap=cmap, norm=norm)
    """
    context = context or DisplayContext()
    stops = evaluator.effective_stops(context)
    require(
        bool(stops),
        f"Color scale '{evaluator.color_scale.legend_label}' has no stops to build a colormap from",
        ThemeConfigError,
    )

    lo, hi = stops[0][0], stops[-1][0]
    under, over = stops[0][1], stops[-1][1]
    if hi > lo:
        points = _sample_points(evaluator, context, stops, ticks)
        positions = [(offset - lo) / (hi - lo) for offset, _, _ in points]
    else:
        color = evaluator.scale_color(lo, context).rgba
        points = [(lo, color, color), (hi, color, color)]
        positions = [0.0, 1.0]

    segmentdata = {channel: [] for channel in _CHANNELS}
    for position, (_, left, right) in zip(positions, points):
        left, right = to_unit_rgba(left), to_unit_rgba(right)
        for c, channel in enumerate(_CHANNELS):
            segmentdata[channel].append((position, left[c], right[c]))

    extremes = {"under": to_unit_rgba(under), "over": to_unit_rgba(over)}
    if evaluator.no_data.color is not None:
        extremes["bad"] = to_unit_rgba(evaluator.color_for(np.nan, context).rgba)
    cmap = mcolors.LinearSegmentedColormap(
        name or evaluator.color_scale.legend_label, segmentdata
    ).with_extremes(**extremes)

    logger.debug(
        "Colormap '%s': %d samples over [%s, %s]", cmap.name, len(points), lo, hi,
    )
    return cmap, mcolors.Normalize(vmin=lo, vmax=hi)


def _sample_points(evaluator, context, stops, ticks):
    """``(offset, left rgba, right rgba)`` samples along the scale.

    Each distinct offset contributes one point whose left color is the
    first stop there and whose right color is the last, so steps stay
    sharp. Intervals between offsets are sampled through ``scale_color``.
    """
    groups = [
        (offset, [rgba for _, rgba in group])
        for offset, group in itertools.groupby(stops, key=lambda item: item[0])
    ]
    points = []
    for i, (offset, colors) in enumerate(groups):
        points.append((offset, colors[0], colors[-1]))
        if i + 1 == len(groups):
            break
        for value in np.linspace(offset, groups[i + 1][0], max(ticks, 2))[1:-1]:
            rgba = evaluator.scale_color(float(value), context).rgba
            points.append((float(value), rgba, rgba))
    return points


def colormap_for(resolution) -> tuple[mcolors.LinearSegmentedColormap, mcolors.Normalize]:
    """`build_colormap` for a `Resolution`, sampled per ``legend.ticks``."""
    ticks = resolution.settings.legend.ticks if resolution.settings is not None else 5
    return build_colormap(resolution.evaluator, resolution.context, ticks=ticks)
