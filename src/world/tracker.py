from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from src.core.diagnostics import AlertLog, DiagnosticSink
from src.core.settings import LocatorSettings
from src.world import location_graph
from src.world.location_graph import UNRESOLVED, LocationClassification
from src.world.locations import Location
from src.world.projection import MapProjector, ProjectionResult
from src.world.reference_points import ReferencePoint, ReferencePointTable
from src.world.special_cases import LevelBucketRule, canonicalize
from src.world.structures import Building, build_structure_overrides

logger = logging.getLogger(__name__)


class WorldMapTracker:
    """Holds the current location classification and projection tables.

    Everything derived from the world (classification, building overrides)
    is rebuilt wholesale by :meth:`rebuild` and swapped in at the end, so
    queries never observe a half-built snapshot. Callers must not run a
    rebuild concurrently with queries.
    """

    def __init__(
        self,
        table: ReferencePointTable,
        settings: Optional[LocatorSettings] = None,
        sink: Optional[DiagnosticSink] = None,
    ) -> None:
        self.settings = settings or LocatorSettings()
        self.sink = sink or AlertLog()
        bucket = self.settings.level_bucket
        self.rule = LevelBucketRule(
            prefix=bucket.prefix,
            threshold=bucket.threshold,
            deep_bucket=bucket.deep_bucket,
            standard_bucket=bucket.standard_bucket,
        )
        self.classifications: Mapping[str, LocationClassification] = MappingProxyType({})
        self.structure_overrides: Mapping[str, Tuple[int, int]] = MappingProxyType({})
        self._buildings: List[Building] = []
        self._greenhouse_unlocked = False
        self._set_table(table)

    def _set_table(self, table: ReferencePointTable) -> None:
        self.table = table
        self._base_projector = MapProjector(
            table,
            sink=self.sink,
            rule=self.rule,
            off_map_position=self.settings.off_map_position,
            debug=self.settings.debug_mode,
        )
        self.projector = self._base_projector.with_overrides(self.structure_overrides)

    # Rebuilds -------------------------------------------------------------
    def rebuild(
        self,
        locations: Iterable[Location],
        buildings: Sequence[Building] = (),
        *,
        greenhouse_unlocked: bool = False,
    ) -> Mapping[str, LocationClassification]:
        classifications = location_graph.classify(
            locations, max_depth=self.settings.max_warp_depth, sink=self.sink
        )
        self._buildings = list(buildings)
        self._greenhouse_unlocked = greenhouse_unlocked
        self.classifications = MappingProxyType(classifications)
        self._rebuild_structures()
        logger.info(
            "Rebuilt location graph: %d locations, %d unresolved, %d structures.",
            len(classifications),
            len(location_graph.unresolved_locations(classifications)),
            len(self.structure_overrides),
        )
        return self.classifications

    def rebuild_buildings(self, buildings: Sequence[Building], *, greenhouse_unlocked: Optional[bool] = None) -> None:
        self._buildings = list(buildings)
        if greenhouse_unlocked is not None:
            self._greenhouse_unlocked = greenhouse_unlocked
        self._rebuild_structures()

    def set_custom_points(self, custom: Mapping[str, Iterable[ReferencePoint]]) -> None:
        self._set_table(self.table.with_custom(custom))
        self._rebuild_structures()

    def _rebuild_structures(self) -> None:
        self.structure_overrides = build_structure_overrides(
            self._buildings,
            self._base_projector,
            host_location=self.settings.host_location,
            greenhouse_unlocked=self._greenhouse_unlocked,
        )
        self.projector = self._base_projector.with_overrides(self.structure_overrides)

    # Queries --------------------------------------------------------------
    def project(self, location_name: str, tile_x: Optional[int] = None, tile_y: Optional[int] = None) -> ProjectionResult:
        return self.projector.project(location_name, tile_x, tile_y)

    def classification(self, location_name: str) -> LocationClassification:
        found = self.classifications.get(location_name)
        if found is None:
            found = self.classifications.get(canonicalize(location_name, self.rule), UNRESOLVED)
        return found

    def is_same_area(self, first: str, second: str) -> bool:
        return location_graph.is_same_area(self.classifications, first, second, self.rule)

    def is_outdoors(self, location_name: str) -> bool:
        return self.classification(location_name).kind is location_graph.LocationKind.OUTDOORS

    def unresolved(self) -> List[str]:
        return location_graph.unresolved_locations(dict(self.classifications))

    def snapshot(self) -> Dict[str, Dict[str, Optional[str]]]:
        return {
            name: {
                "kind": classification.kind.value if classification.kind else None,
                "root": classification.root,
            }
            for name, classification in sorted(self.classifications.items())
        }
