"""Theme resolution entry point.

``ThemeResolver`` ties the engine together for one theme. Given a
selection it:

1. normalizes the selection against the theme's dimensions
2. selects the active schema and, independently, the active color scale
3. resolves the title and the raster/aggregate file paths
4. plans the data queries of every info display
5. builds a color-scale evaluator for the schema's display precision

Cross-reference contracts for a schema or color scale run the first time
it becomes active and are remembered afterwards.

Example usage::

    from maptheme.engine import ThemeResolver

    resolver = ThemeResolver(CONFIG)
    resolution = resolver.resolve({"age": "children", "year": 2010})
    resolution.title                     # 'Mortality for children in 2010'
    resolution.color_for(5.0).color      # '#808080'
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Optional, Union

import numpy as np

from maptheme.contracts.theme import assert_color_scale_consistent, assert_schema_consistent
from maptheme.engine.color_scale import ColorResult, ColorScaleEvaluator, LegendEntry
from maptheme.engine.conditions import select_active
from maptheme.engine.context import DisplayContext
from maptheme.engine.cross_schema import QueryPlan, plan_query
from maptheme.engine.selection import SelectionState, normalize_selection, selected_names
from maptheme.engine.templates import resolve_path, resolve_title
from maptheme.schemas.color_scale import ColorScale
from maptheme.schemas.info_display import ValuesDisplay
from maptheme.schemas.resolve import load_theme, resolve_settings
from maptheme.schemas.schema import Schema
from maptheme.schemas.settings import ResolverSettings
from maptheme.schemas.theme import ThemeConfig

__all__ = ['ThemeResolver', 'Resolution', 'ResolvedDisplay', 'check_theme']

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedDisplay:
    """An info display with its query plan and label precision."""
    display: Any
    query: QueryPlan
    precision: Optional[int]
    evaluator: ColorScaleEvaluator


@dataclass(frozen=True)
class Resolution:
    """Result of resolving one selection.

    Attributes
    ----------
    selection : dict
        Normalized selection, dimension name -> `Option`.
    schema : Schema
        Active schema.
    color_scale : ColorScale
        Active color scale.
    evaluator : ColorScaleEvaluator
        Evaluator for the active color scale at ``display_precision``.
    context : DisplayContext
        Display mode and admin level the resolution was made for.
    title : str
        Map title.
    raster_path, aggregate_path : str or None
        Data file paths. None when the theme does not provide the format,
        the schema disables the mode, or the schema has no template.
    displays : list of ResolvedDisplay
        Info displays of the schema, in declaration order.
    display_precision : int or None
        Decimals for map and legend labels.
    settings : ResolverSettings or None
        Engine settings the resolution was made with.
    """
    selection: SelectionState
    schema: Schema
    color_scale: ColorScale
    evaluator: ColorScaleEvaluator
    context: DisplayContext
    title: str
    raster_path: Optional[str]
    aggregate_path: Optional[str]
    displays: list[ResolvedDisplay] = field(default_factory=list)
    display_precision: Optional[int] = None
    settings: Optional[ResolverSettings] = None

    @property
    def selection_names(self) -> dict[str, Any]:
        return selected_names(self.selection)

    @property
    def queries(self) -> list[QueryPlan]:
        return [resolved.query for resolved in self.displays]

    def color_for(self, value: Any) -> ColorResult:
        """Color and label of a raw value in this resolution's context."""
        return self.evaluator.color_for(value, self.context)

    def colorize(self, values: Any) -> tuple[np.ndarray, np.ndarray]:
        return self.evaluator.colorize(values, self.context)

    def legend_entries(self) -> list[LegendEntry]:
        return self.evaluator.legend_entries(self.context)


def display_precision_for(display, schema: Schema) -> Optional[int]:
    """Label precision for an info display.

    The schema's ``display_precision`` wins. A values display's own
    ``precision`` is deprecated and only used when the schema has none.
    """
    if not isinstance(display, ValuesDisplay) or display.precision is None:
        return schema.display_precision

    if schema.display_precision is not None:
        logger.warning(
            "Schema '%s': values display precision=%d ignored, display_precision=%d takes precedence",
            schema.name, display.precision, schema.display_precision,
        )
        return schema.display_precision

    logger.warning(
        "Schema '%s': values display 'precision' is deprecated, use the schema's display_precision",
        schema.name,
    )
    return display.precision


class ThemeResolver:
    """Resolves selections against one theme.

    Parameters
    ----------
    theme : ThemeConfig or dict
        Validated theme, or a deserialized theme document.
    settings : ResolverSettings or dict, optional
        Engine settings; plain dicts are layered over the defaults.

    Notes
    -----
    The theme is immutable, so a resolver can be shared between threads.
    The record of contract-checked entities is guarded by a lock.
    """

    def __init__(
        self,
        theme: Union[ThemeConfig, dict],
        settings: Optional[Union[ResolverSettings, dict]] = None,
    ):
        self.theme = load_theme(theme)
        self.settings = settings if isinstance(settings, ResolverSettings) else resolve_settings(settings)

        self._lock = threading.Lock()
        self._checked_schemas: set[str] = set()
        self._checked_scales: set[int] = set()
        self._evaluators: dict[tuple[int, Optional[int]], ColorScaleEvaluator] = {}

        logger.info(
            "ThemeResolver ready: theme '%s' (%d dimensions, %d schemas, %d color scales)",
            self.theme.name, len(self.theme.dimensions), len(self.theme.schemas),
            len(self.theme.color_scales),
        )

    # ------------------------------------------------------------------
    # Contracts
    # ------------------------------------------------------------------

    def _check_schema(self, schema: Schema) -> None:
        with self._lock:
            if schema.name in self._checked_schemas:
                return
        assert_schema_consistent(schema, self.theme)
        with self._lock:
            self._checked_schemas.add(schema.name)
        logger.debug("Schema '%s' passed contract checks", schema.name)

    def _check_color_scale(self, color_scale: ColorScale) -> None:
        key = id(color_scale)
        with self._lock:
            if key in self._checked_scales:
                return
        assert_color_scale_consistent(color_scale, self.theme)
        with self._lock:
            self._checked_scales.add(key)
        logger.debug("Color scale '%s' passed contract checks", color_scale.legend_label)

    def evaluator(self, color_scale: ColorScale, display_precision: Optional[int] = None) -> ColorScaleEvaluator:
        """Evaluator for a color scale at a label precision (cached)."""
        key = (id(color_scale), display_precision)
        with self._lock:
            cached = self._evaluators.get(key)
        if cached is not None:
            return cached

        evaluator = ColorScaleEvaluator(
            color_scale,
            display_precision=display_precision,
            no_data_value=self.theme.data_format.no_data_value,
            no_data=self.settings.no_data,
        )
        with self._lock:
            return self._evaluators.setdefault(key, evaluator)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def default_context(self) -> DisplayContext:
        """Display context the theme starts in."""
        default = self.theme.default_display
        if default.mode == "geo":
            return DisplayContext(mode="geo")
        return DisplayContext(mode="aggregate", level=default.level)

    def normalize(self, selection: Optional[dict] = None) -> SelectionState:
        return normalize_selection(
            self.theme, selection or {}, fill_defaults=self.settings.selection.fill_defaults
        )

    def active_schema(self, selection: Optional[dict] = None) -> Schema:
        """Active schema for a selection, contract-checked."""
        names = selected_names(self.normalize(selection))
        schema = select_active(self.theme.schemas, names, kind="schema")
        self._check_schema(schema)
        return schema

    def active_color_scale(self, selection: Optional[dict] = None) -> ColorScale:
        """Active color scale for a selection, contract-checked."""
        names = selected_names(self.normalize(selection))
        color_scale = select_active(self.theme.color_scales, names, kind="color scale")
        self._check_color_scale(color_scale)
        return color_scale

    def _path(self, schema: Schema, mode: str, state: SelectionState) -> Optional[str]:
        data_format = self.theme.data_format
        if mode == "geo":
            enabled, template = data_format.raster, schema.filepath_template_raster
        else:
            enabled, template = data_format.aggregate, schema.filepath_template_aggregate

        if not enabled or schema.disable_mode == mode or template is None:
            return None
        return resolve_path(template, state, schema.scope_dimensions)

    def resolve(self, selection: Optional[dict] = None, context: Optional[DisplayContext] = None) -> Resolution:
        """Resolve a selection.

        Parameters
        ----------
        selection : dict, optional
            Dimension name -> option name. Missing dimensions take their
            default option unless ``selection.fill_defaults`` is off.
        context : DisplayContext, optional
            Display mode and admin level (default: the theme's
            ``default_display``).

        Returns
        -------
        Resolution

        Raises
        ------
        SelectionError
            If the selection is invalid or no schema/color scale is
            active for it.
        ThemeConfigError
            If the active schema or color scale is inconsistent with the
            theme.
        """
        state = self.normalize(selection)
        names = selected_names(state)

        schema = select_active(self.theme.schemas, names, kind="schema")
        self._check_schema(schema)
        color_scale = select_active(self.theme.color_scales, names, kind="color scale")
        self._check_color_scale(color_scale)

        context = context or self.default_context()
        evaluator = self.evaluator(color_scale, schema.display_precision)

        displays = []
        for display in schema.info_displays:
            precision = display_precision_for(display, schema)
            displays.append(ResolvedDisplay(
                display=display,
                query=plan_query(display, schema, state, self.theme),
                precision=precision,
                evaluator=self.evaluator(color_scale, precision),
            ))

        resolution = Resolution(
            selection=state,
            schema=schema,
            color_scale=color_scale,
            evaluator=evaluator,
            context=context,
            title=resolve_title(schema.ui_title_template, state, schema.scope_dimensions),
            raster_path=self._path(schema, "geo", state),
            aggregate_path=self._path(schema, "aggregate", state),
            displays=displays,
            display_precision=schema.display_precision,
            settings=self.settings,
        )

        logger.info(
            "Resolved %s -> schema '%s', color scale '%s'",
            names, schema.name, color_scale.legend_label,
        )
        return resolution


def check_theme(theme: Union[ThemeConfig, dict]) -> ThemeConfig:
    """Validate a theme and every cross-reference in it.

    Runs the contracts of all schemas and color scales up front, and
    parses every color, instead of waiting for each to become active.

    Returns
    -------
    ThemeConfig
        The validated theme.

    Raises
    ------
    ThemeConfigError
        On the first inconsistency found.
    """
    theme = load_theme(theme)
    for schema in theme.schemas:
        assert_schema_consistent(schema, theme)
    for color_scale in theme.color_scales:
        assert_color_scale_consistent(color_scale, theme)
        ColorScaleEvaluator(color_scale, no_data_value=theme.data_format.no_data_value)
    logger.info("Theme '%s' passed all contract checks", theme.name)
    return theme
