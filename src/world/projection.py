"""Project (location, tile) positions onto the world overview image.

Each location has a small set of reference points pairing a tile with a pixel
on the overview image. A query tile is placed by picking the nearest pair of
reference points that bracket it (one at or below it on both axes, one at or
above it on both axes) and interpolating linearly on each axis between them.
Locations with a single reference point are fixed: every tile lands on that
point's pixel.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Tuple, Union

from src.core import config
from src.core.diagnostics import DiagnosticKind, DiagnosticSink, NullSink
from src.world.reference_points import ReferencePoint, ReferencePointTable
from src.world.special_cases import LevelBucketRule, canonicalize

PixelOverrides = Mapping[str, Tuple[int, int]]


@dataclass(frozen=True)
class ProjectionResult:
    x: int
    y: int
    on_map: bool = True
    # Only populated when the projector runs with debug enabled
    lower: Optional[ReferencePoint] = None
    upper: Optional[ReferencePoint] = None

    def as_tuple(self) -> Tuple[int, int]:
        return self.x, self.y


def select_brackets(
    points: Sequence[ReferencePoint], tile_x: int, tile_y: int
) -> Tuple[ReferencePoint, ReferencePoint]:
    """Pick the lower and upper bracket points for a tile.

    ``points`` must hold at least two entries. Points are scanned nearest
    first (ties keep catalog order). While the chosen pair shares a tile
    axis the scan keeps looking for replacements; otherwise it stops as soon
    as both brackets are set. A missing bracket falls back to the nearest
    point that is not already the other bracket.
    """
    ordered = sorted(points, key=lambda point: math.hypot(point.tile_x - tile_x, point.tile_y - tile_y))
    lower: Optional[ReferencePoint] = None
    upper: Optional[ReferencePoint] = None
    has_equal_tile = False

    for point in ordered:
        if lower is not None and upper is not None:
            if lower.tile_x == upper.tile_x or lower.tile_y == upper.tile_y:
                has_equal_tile = True
            else:
                break
        if (lower is None or has_equal_tile) and tile_x >= point.tile_x and tile_y >= point.tile_y:
            lower = point
            continue
        if (upper is None or has_equal_tile) and tile_x <= point.tile_x and tile_y <= point.tile_y:
            upper = point

    nearest = ordered[0]
    if lower is None:
        lower = ordered[1] if upper is nearest else nearest
    if upper is None:
        upper = ordered[1] if lower is nearest else nearest
    return lower, upper


def _interpolate_axis(query: int, lower_tile: int, upper_tile: int, lower_pixel: int, upper_pixel: int) -> Optional[float]:
    span = upper_tile - lower_tile
    if span == 0:
        return None
    return lower_pixel + (query - lower_tile) / span * (upper_pixel - lower_pixel)


class MapProjector:
    def __init__(
        self,
        table: ReferencePointTable,
        overrides: Optional[PixelOverrides] = None,
        *,
        sink: Optional[DiagnosticSink] = None,
        rule: Optional[LevelBucketRule] = None,
        off_map_position: Tuple[int, int] = config.OFF_MAP_POSITION,
        debug: bool = config.DEBUG_MODE,
    ) -> None:
        self.table = table
        self.overrides: PixelOverrides = dict(overrides or {})
        self.sink = sink or NullSink()
        self.rule = rule
        self.off_map_position = off_map_position
        self.debug = debug

    def with_overrides(self, overrides: Optional[PixelOverrides]) -> "MapProjector":
        return MapProjector(
            self.table,
            overrides,
            sink=self.sink,
            rule=self.rule,
            off_map_position=self.off_map_position,
            debug=self.debug,
        )

    def off_map(self) -> ProjectionResult:
        x, y = self.off_map_position
        return ProjectionResult(x, y, on_map=False)

    def project(self, location_name: str, tile_x: Optional[int] = None, tile_y: Optional[int] = None) -> ProjectionResult:
        override = self.overrides.get(location_name)
        if override is not None:
            return ProjectionResult(int(override[0]), int(override[1]))

        name = canonicalize(location_name, self.rule)
        points = self.table.get(name) if name else None
        if not points:
            self.sink.report(
                "debug",
                f"Unknown location: {name}.",
                key=DiagnosticKind.UNKNOWN_LOCATION.key(name),
            )
            return self.off_map()

        if len(points) == 1 or tile_x is None or tile_y is None:
            return ProjectionResult(*points[0].pixel)

        for point in points:
            if point.tile_x == tile_x and point.tile_y == tile_y:
                return self._result(point.pixel_x, point.pixel_y, point, point)

        lower, upper = select_brackets(points, tile_x, tile_y)
        x = _interpolate_axis(tile_x, lower.tile_x, upper.tile_x, lower.pixel_x, upper.pixel_x)
        y = _interpolate_axis(tile_y, lower.tile_y, upper.tile_y, lower.pixel_y, upper.pixel_y)
        if x is None or y is None:
            self.sink.report(
                "debug",
                f"Degenerate bracket for {name} at ({tile_x}, {tile_y}): "
                f"lower {lower.tile} and upper {upper.tile} share an axis.",
                key=DiagnosticKind.DEGENERATE_BRACKET.key(name),
            )
            if x is None:
                x = lower.pixel_x
            if y is None:
                y = lower.pixel_y
        return self._result(int(x), int(y), lower, upper)

    def _result(self, x: int, y: int, lower: ReferencePoint, upper: ReferencePoint) -> ProjectionResult:
        if self.debug:
            return ProjectionResult(x, y, lower=lower, upper=upper)
        return ProjectionResult(x, y)


def project(
    location_name: str,
    tile_x: Optional[int],
    tile_y: Optional[int],
    reference_points: Union[ReferencePointTable, Mapping[str, Sequence[ReferencePoint]]],
    overrides: Optional[PixelOverrides] = None,
    *,
    sink: Optional[DiagnosticSink] = None,
    rule: Optional[LevelBucketRule] = None,
) -> Tuple[int, int]:
    table = reference_points if isinstance(reference_points, ReferencePointTable) else ReferencePointTable(reference_points)
    projector = MapProjector(table, overrides, sink=sink, rule=rule)
    return projector.project(location_name, tile_x, tile_y).as_tuple()
