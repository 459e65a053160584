#!/usr/bin/env python3
"""``maptheme`` resolution runner.

Resolves a selection against a theme and prints the resulting schema,
paths, title, legend, and info display queries.

Usage:
    python scripts/resolve_theme.py scripts/example_theme.py
    python scripts/resolve_theme.py scripts/example_theme.py -s age=adults --value 42 --value -1
    python scripts/resolve_theme.py scripts/example_theme.py --mode aggregate --level 0 -v
"""

import sys
import argparse
import importlib.util
from pathlib import Path

# Add src to path
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root / "src"))

from maptheme.engine import DisplayContext, ThemeResolver, check_theme
from maptheme.schemas import resolve_settings
from maptheme.setup_logging import configure_logging


def load_theme_dict(config_path: str) -> dict:
    """Load a theme dict from a Python file.

    Returns the raw dict before Pydantic validation.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Theme not found: {path}")

    spec = importlib.util.spec_from_file_location("theme_module", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    # Find CONFIG dict
    for name in dir(module):
        if name.startswith('CONFIG'):
            obj = getattr(module, name)
            if isinstance(obj, dict):
                return obj

    raise ValueError(f"No CONFIG dict found in {path}")


def parse_selection(theme, pairs: list[str]) -> dict:
    """Turn ``dim=option`` strings into a selection.

    Command-line values are text, so a numeric option is matched by its
    string form when no string option of that name exists.
    """
    selection = {}
    for pair in pairs:
        name, _, text = pair.partition("=")
        dimension = theme.get_dimension(name)
        if dimension is None:
            raise SystemExit(f"Unknown dimension: {name}")
        option = dimension.find_option(text)
        if option is None:
            option = next((o for o in dimension.options if str(o.name) == text), None)
        selection[name] = option.name if option is not None else text
    return selection


def main():
    parser = argparse.ArgumentParser(description="Resolve a selection against a map theme")
    parser.add_argument("config", help="Path to theme file")
    parser.add_argument("-s", "--select", action="append", default=[], help="Selection as dim=option")
    parser.add_argument("--mode", choices=["geo", "aggregate"], help="Display mode")
    parser.add_argument("--level", type=int, choices=[0, 1, 2], help="Admin level (aggregate mode)")
    parser.add_argument("--value", type=float, action="append", default=[], help="Value to colorize")
    parser.add_argument("--no-data-color", help="Color for unrepresentable values")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    settings = resolve_settings(
        {"no_data": {"color": args.no_data_color}} if args.no_data_color else None,
        {"logging": {"level": "DEBUG"}} if args.verbose else None,
    )
    configure_logging(settings)

    theme = check_theme(load_theme_dict(args.config))
    resolver = ThemeResolver(theme, settings)

    context = None
    if args.mode == "geo":
        context = DisplayContext(mode="geo")
    elif args.mode == "aggregate" or args.level is not None:
        context = DisplayContext(mode="aggregate", level=args.level)

    resolution = resolver.resolve(parse_selection(theme, args.select), context)

    # Print summary
    print(f"\n{'='*60}")
    print(theme.display_name)
    print('='*60)
    print(f"Selection: {resolution.selection_names}")
    print(f"Context:   {resolution.context.mode} (level {resolution.context.level})")
    print(f"Schema:    {resolution.schema.name}")
    print(f"Title:     {resolution.title}")
    print(f"Raster:    {resolution.raster_path}")
    print(f"Aggregate: {resolution.aggregate_path}")
    print('='*60)

    print(f"\nLegend: {resolution.color_scale.legend_label}")
    for entry in resolution.legend_entries():
        print(f"  {entry.position:6.3f}  {entry.color:<24} {entry.label or ''}")
    for entry in resolution.evaluator.sentinel_legend_entries():
        print(f"  {'':6}  {entry.color:<24} {entry.label}")

    for value in args.value:
        result = resolution.color_for(value)
        print(f"\n{value!r:>12} -> {result.color} ({result.kind}) {result.label}")

    for resolved in resolution.displays:
        frame = resolved.query.to_frame()
        print(f"\n{resolved.display.type} '{resolved.display.label}' on schema '{resolved.query.schema.name}'")
        print(frame.to_string(index=False))


if __name__ == "__main__":
    main()
