"""Color scale evaluation.

Turns a data value into a color and a legend label according to the
active `ColorScale`:

1. **Sentinels** are matched first, by exact equality on the raw value.
   They are categorical states, so no scaling applies and they win over
   the interpolated scale.
2. **Scaling**: stop offsets are multiplied by a factor picked from the
   display context (admin level, then mode, then the global ``scaling``,
   then 1). Values are never rescaled; offsets are moved into value space.
3. **Clamping** below the lowest and above the highest effective offset.
4. **Interpolation** channel-wise in RGB between the bracketing stops,
   rounded half up.

Values that are not finite, equal the theme's ``no_data_value``, or reach a
scale without stops are reported as ``"unrepresentable"`` instead of
raising; one bad pixel never aborts a whole resolution.

The evaluator is immutable once built and safe to share between threads.
"""

import bisect
import logging
import math
from dataclasses import dataclass
from typing import Any, Literal, Optional

import numpy as np

from maptheme.contracts.base import require
from maptheme.contracts.failure import EmptyColorScaleError, ThemeConfigError
from maptheme.engine.colors import RGBA, format_color, interpolate_rgba, parse_color
from maptheme.engine.context import DisplayContext
from maptheme.schemas.color_scale import ColorScale, ColorStop, ScalingByAdmin, SentinelValue
from maptheme.schemas.settings import NoDataSettings

logger = logging.getLogger(__name__)

ResultKind = Literal["sentinel", "scale", "unrepresentable"]


@dataclass(frozen=True)
class ColorResult:
    """Color and label for one value.

    ``color`` is None for an unrepresentable value unless a no-data color
    is configured.
    """
    color: Optional[str]
    label: Optional[str]
    kind: ResultKind
    rgba: Optional[RGBA] = None

    @property
    def representable(self) -> bool:
        return self.kind != "unrepresentable"


@dataclass(frozen=True)
class LegendEntry:
    """One swatch of a legend.

    ``offset`` is the value after scaling. ``position`` is the fraction
    (0-1) along a continuous legend, spaced per ``legend_distribution``;
    sentinel entries have no position.
    """
    color: str
    label: Optional[str]
    offset: float
    position: Optional[float] = None


def format_value(value: float, precision: Optional[int] = None) -> str:
    """Format a number for labels.

    With ``precision`` the value is printed with that many decimals.
    Without it the value is printed at full precision, integral values
    without a trailing ``.0``.
    """
    if precision is not None:
        return f"{value:.{precision}f}"
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def render_label(template: Optional[str], value: float, precision: Optional[int] = None) -> Optional[str]:
    """Replace ``{val}`` in a stop label with the formatted value."""
    if template is None:
        return None
    return template.replace("{val}", format_value(value, precision))


def _cell_to_float(cell: Any) -> float:
    try:
        return float(cell)
    except (TypeError, ValueError):
        return math.nan


def as_float_array(values: Any) -> np.ndarray:
    """Float array of raw values; cells that are not numbers become NaN."""
    try:
        return np.asarray(values, dtype=float)
    except (TypeError, ValueError):
        cells = np.asarray(values, dtype=object)
        return np.vectorize(_cell_to_float, otypes=[float])(cells)


class ColorScaleEvaluator:
    """Evaluates one color scale.

    Parameters
    ----------
    color_scale : ColorScale
        Active color scale.
    display_precision : int, optional
        Decimals used for ``{val}`` and value labels. None means full
        precision.
    no_data_value : float, optional
        Raw value that marks missing data (``data_format.no_data_value``).
    no_data : NoDataSettings, optional
        Color and label attached to unrepresentable values.

    Raises
    ------
    EmptyColorScaleError
        If the scale has neither stops nor sentinel values.
    InvalidColorError
        If any color string cannot be parsed.

    Example usage::

        evaluator = ColorScaleEvaluator(scale, display_precision=1)
        evaluator.color_for(5.0, DisplayContext(mode="aggregate", level=0))
    """

    def __init__(
        self,
        color_scale: ColorScale,
        display_precision: Optional[int] = None,
        no_data_value: Optional[float] = None,
        no_data: Optional[NoDataSettings] = None,
    ):
        require(
            bool(color_scale.scale) or bool(color_scale.sentinel_values),
            f"Color scale '{color_scale.legend_label}' has neither scale stops nor sentinel values",
            EmptyColorScaleError,
        )

        self.color_scale = color_scale
        self.display_precision = display_precision
        self.no_data_value = no_data_value
        self.no_data = no_data or NoDataSettings()

        self._stops: list[ColorStop] = list(color_scale.scale)
        self._stop_rgba: list[RGBA] = [parse_color(stop.color) for stop in self._stops]
        self._sentinels: list[tuple[SentinelValue, RGBA]] = [
            (sentinel, parse_color(sentinel.color)) for sentinel in color_scale.sentinel_values
        ]
        self._no_data_rgba: Optional[RGBA] = (
            parse_color(self.no_data.color) if self.no_data.color is not None else None
        )

        logger.debug(
            "ColorScaleEvaluator: '%s' (%d stops, %d sentinels, distribution=%s)",
            color_scale.legend_label, len(self._stops), len(self._sentinels),
            color_scale.legend_distribution,
        )

    # ------------------------------------------------------------------
    # Scaling
    # ------------------------------------------------------------------

    def scaling_factor(self, context: DisplayContext) -> float:
        """Offset multiplier for the display context.

        Fallback: level-specific -> mode-level -> global ``scaling`` -> 1.
        """
        cs = self.color_scale
        if context.mode == "aggregate":
            aggregate = cs.scaling_aggregate
            if isinstance(aggregate, ScalingByAdmin):
                if context.level is not None:
                    by_level = aggregate.for_level(context.level)
                    if by_level is not None:
                        return by_level.factor
            elif aggregate is not None:
                return aggregate.factor
        elif cs.scaling_geospatial is not None:
            return cs.scaling_geospatial.factor

        if cs.scaling is not None:
            return cs.scaling.factor
        return 1.0

    def _effective_stops(self, context: DisplayContext) -> list[tuple[float, RGBA, ColorStop]]:
        factor = self.scaling_factor(context)
        stops = [
            (stop.offset * factor, rgba, stop)
            for stop, rgba in zip(self._stops, self._stop_rgba)
        ]
        # A negative factor flips the order
        return sorted(stops, key=lambda item: item[0])

    def effective_offsets(self, context: DisplayContext) -> list[float]:
        """Stop offsets after scaling, ascending."""
        return [offset for offset, _, _ in self._effective_stops(context)]

    def effective_stops(self, context: DisplayContext) -> list[tuple[float, RGBA]]:
        """``(offset, rgba)`` of every stop after scaling, ascending.

        Stops sharing an offset keep their declaration order, so a step
        shows up as two consecutive entries at the same offset.
        """
        return [(offset, rgba) for offset, rgba, _ in self._effective_stops(context)]

    # ------------------------------------------------------------------
    # Single values
    # ------------------------------------------------------------------

    def match_sentinel(self, number: float) -> Optional[ColorResult]:
        """Sentinel color and label for a raw value, if a sentinel matches it exactly."""
        for sentinel, rgba in self._sentinels:
            if number == sentinel.offset:
                label = render_label(sentinel.label, sentinel.offset, self.display_precision)
                return ColorResult(format_color(rgba), label, "sentinel", rgba)
        return None

    def _unrepresentable(self) -> ColorResult:
        color = format_color(self._no_data_rgba) if self._no_data_rgba is not None else None
        return ColorResult(color, self.no_data.label, "unrepresentable", self._no_data_rgba)

    def _stop_result(self, offset: float, rgba: RGBA, stop: ColorStop, value: float) -> ColorResult:
        label = render_label(stop.label, offset, self.display_precision)
        if label is None:
            label = format_value(value, self.display_precision)
        return ColorResult(format_color(rgba), label, "scale", rgba)

    def color_for(self, value: Any, context: Optional[DisplayContext] = None) -> ColorResult:
        """Color and label for a raw data value.

        Parameters
        ----------
        value : number
            Raw data value (before any scaling).
        context : DisplayContext, optional
            Display mode and admin level (default: aggregate, no level).

        Returns
        -------
        ColorResult
            ``kind`` is ``"sentinel"`` for an exact sentinel match,
            ``"scale"`` for an interpolated or clamped color and
            ``"unrepresentable"`` otherwise. The label is the matching
            stop's rendered label when the value sits on (or is clamped
            to) a labelled stop, otherwise the formatted value.
        """
        context = context or DisplayContext()

        try:
            number = float(value)
        except (TypeError, ValueError):
            return self._unrepresentable()

        sentinel = self.match_sentinel(number)
        if sentinel is not None:
            return sentinel

        if not math.isfinite(number) or not self._stops:
            return self._unrepresentable()
        if self.no_data_value is not None and number == self.no_data_value:
            return self._unrepresentable()

        return self.scale_color(number, context)

    def scale_color(self, number: float, context: Optional[DisplayContext] = None) -> ColorResult:
        """Interpolated or clamped color of a finite value, ignoring sentinels."""
        context = context or DisplayContext()
        stops = self._effective_stops(context)
        offsets = [offset for offset, _, _ in stops]

        if number <= offsets[0]:
            return self._stop_result(*stops[0], number)
        if number >= offsets[-1]:
            return self._stop_result(*stops[-1], number)

        hi = bisect.bisect_right(offsets, number)
        lo = hi - 1
        lo_offset, lo_rgba, _ = stops[lo]
        if number == lo_offset:
            return self._stop_result(*stops[lo], number)

        hi_offset, hi_rgba, _ = stops[hi]
        t = (number - lo_offset) / (hi_offset - lo_offset)
        rgba = interpolate_rgba(lo_rgba, hi_rgba, t)
        return ColorResult(format_color(rgba), format_value(number, self.display_precision), "scale", rgba)

    # ------------------------------------------------------------------
    # Arrays
    # ------------------------------------------------------------------

    def colorize(self, values: Any, context: Optional[DisplayContext] = None) -> tuple[np.ndarray, np.ndarray]:
        """Vectorized `color_for` over an array (e.g. a raster band).

        Parameters
        ----------
        values : array-like
            Raw data values of any shape.
        context : DisplayContext, optional
            Display mode and admin level.

        Returns
        -------
        rgba : np.ndarray
            ``uint8`` array of shape ``values.shape + (4,)``; alpha is
            scaled to 0-255. Unrepresentable cells (non-numeric, non-finite
            or the no-data value) get the no-data color,
            or transparent black when none is configured.
        representable : np.ndarray
            Boolean mask of cells that were colorized.
        """
        context = context or DisplayContext()
        data = as_float_array(values)
        flat = data.ravel()

        out = np.zeros((flat.size, 4), dtype=float)
        representable = np.isfinite(flat)
        if self.no_data_value is not None:
            representable &= flat != self.no_data_value

        if self._stops:
            stops = self._effective_stops(context)
            offsets = np.array([offset for offset, _, _ in stops])
            channels = np.array([rgba for _, rgba, _ in stops], dtype=float)
            channels[:, 3] *= 255
            for c in range(4):
                out[:, c] = np.interp(flat, offsets, channels[:, c])
        else:
            representable[:] = False

        for sentinel, rgba in self._sentinels:
            hit = flat == sentinel.offset
            out[hit] = (rgba[0], rgba[1], rgba[2], rgba[3] * 255)
            representable |= hit

        fill = self._no_data_rgba or (0, 0, 0, 0.0)
        out[~representable] = (fill[0], fill[1], fill[2], fill[3] * 255)

        rgba_out = np.clip(np.floor(out + 0.5), 0, 255).astype(np.uint8)
        return rgba_out.reshape(data.shape + (4,)), representable.reshape(data.shape)

    # ------------------------------------------------------------------
    # Legend
    # ------------------------------------------------------------------

    def legend_positions(self, offsets: list[float]) -> list[float]:
        """Fractions along the legend for the given (scaled) offsets.

        ``ln`` and ``log10`` distributions only change the spacing of the
        legend; they never affect interpolation.

        Raises
        ------
        ThemeConfigError
            If a logarithmic distribution meets a non-positive offset.
        """
        if not offsets:
            return []

        distribution = self.color_scale.legend_distribution
        points = np.asarray(offsets, dtype=float)
        if distribution != "linear":
            require(
                bool(np.all(points > 0)),
                f"Legend distribution '{distribution}' of '{self.color_scale.legend_label}' "
                f"requires positive offsets, got {offsets}",
                ThemeConfigError,
            )
            points = np.log(points) if distribution == "ln" else np.log10(points)

        lo, hi = points.min(), points.max()
        if hi == lo:
            return [0.0] * len(offsets)
        return [float(p) for p in (points - lo) / (hi - lo)]

    def legend_entries(self, context: Optional[DisplayContext] = None) -> list[LegendEntry]:
        """Legend swatches for the interpolated scale, ascending."""
        context = context or DisplayContext()
        stops = self._effective_stops(context)
        positions = self.legend_positions([offset for offset, _, _ in stops])
        return [
            LegendEntry(
                color=format_color(rgba),
                label=render_label(stop.label, offset, self.display_precision),
                offset=offset,
                position=position,
            )
            for (offset, rgba, stop), position in zip(stops, positions)
        ]

    def sentinel_legend_entries(self) -> list[LegendEntry]:
        """Legend swatches for sentinel values, in declaration order."""
        return [
            LegendEntry(
                color=format_color(rgba),
                label=render_label(sentinel.label, sentinel.offset, self.display_precision),
                offset=sentinel.offset,
            )
            for sentinel, rgba in self._sentinels
        ]

    @property
    def custom_legend(self) -> Optional[str]:
        """Custom SVG legend (inline contents, else file path), if any."""
        legend = self.color_scale.custom_legend
        return legend.source if legend is not None else None
