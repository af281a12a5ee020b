from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict

from src.core import config
from src.core.runtime_data_validation import RuntimeDataValidationError
from src.core.settings import load_settings
from src.world.locations import load_locations
from src.world.reference_points import ReferencePointTable
from src.world.structures import load_buildings
from src.world.tracker import WorldMapTracker


def _point(point) -> Dict[str, int] | None:
    return point.to_dict() if point is not None else None


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Inspect world-map projections and location classification."
    )
    parser.add_argument(
        "--points",
        default=config.REFERENCE_POINTS_FILE,
        help="Path to reference_points.json (default: data/reference_points.json).",
    )
    parser.add_argument(
        "--custom-points",
        help="Optional reference points file whose entries replace the base catalog.",
    )
    parser.add_argument(
        "--locations",
        default=config.LOCATIONS_FILE,
        help="Path to locations.json (default: data/locations.json).",
    )
    parser.add_argument(
        "--buildings",
        help="Optional buildings.json with movable structures on the host location.",
    )
    parser.add_argument(
        "--greenhouse",
        action="store_true",
        help="Treat the greenhouse as unlocked.",
    )
    parser.add_argument(
        "--settings",
        default=config.DEFAULT_SETTINGS_FILE,
        help="Default settings file (default: data/config/default.json).",
    )
    parser.add_argument(
        "--save-settings",
        help="Per-save settings file layered over the defaults.",
    )
    parser.add_argument("--verbose", action="store_true", help="Log diagnostics to stderr.")

    commands = parser.add_subparsers(dest="command", required=True)
    project_cmd = commands.add_parser("project", help="Project a location tile onto the overview image.")
    project_cmd.add_argument("location")
    project_cmd.add_argument("tile_x", type=int, nargs="?")
    project_cmd.add_argument("tile_y", type=int, nargs="?")

    commands.add_parser("classify", help="Print kind and root of every location.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=config.LOG_FORMAT,
        datefmt=config.LOG_DATE_FORMAT,
    )
    try:
        settings = load_settings(args.settings, args.save_settings)
        table = ReferencePointTable.load(args.points, args.custom_points)
        locations = load_locations(args.locations) if Path(args.locations).exists() else []
        buildings = load_buildings(args.buildings) if args.buildings else []
    except (OSError, json.JSONDecodeError, RuntimeDataValidationError) as exc:
        print(json.dumps({"error": str(exc)}, indent=2))
        return 2

    tracker = WorldMapTracker(table, settings)
    tracker.rebuild(locations, buildings, greenhouse_unlocked=args.greenhouse)

    report: Dict[str, Any]
    if args.command == "project":
        result = tracker.project(args.location, args.tile_x, args.tile_y)
        report = {
            "location": args.location,
            "tile": [args.tile_x, args.tile_y] if args.tile_x is not None and args.tile_y is not None else None,
            "pixel": [result.x, result.y],
            "onMap": result.on_map,
            "lower": _point(result.lower),
            "upper": _point(result.upper),
        }
        classification = tracker.classification(args.location)
        if classification.kind is not None:
            report["kind"] = classification.kind.value
            report["root"] = classification.root
    else:
        report = {
            "locations": tracker.snapshot(),
            "unresolved": tracker.unresolved(),
        }

    print(json.dumps(report, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
