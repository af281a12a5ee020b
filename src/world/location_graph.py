"""Classify world locations by following their warps to an outdoor root.

Every location gets a kind (outdoors, indoors or room) and the name of the
outdoor location it ultimately connects to. Outdoor locations are their own
root. An indoor location with a warp straight to an outdoor location is
``indoors``; one that only reaches the outside through other indoor
locations is a ``room``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set, Tuple

from src.core import config
from src.core.diagnostics import DiagnosticKind, DiagnosticSink, NullSink
from src.world.locations import Location, Warp
from src.world.special_cases import LevelBucketRule, canonicalize

logger = logging.getLogger(__name__)


class LocationKind(str, Enum):
    OUTDOORS = "outdoors"
    INDOORS = "indoors"
    ROOM = "room"


@dataclass(frozen=True)
class LocationClassification:
    kind: Optional[LocationKind] = None
    root: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.root is not None


UNRESOLVED = LocationClassification()


class LocationGraphBuilder:
    """One classification pass over a snapshot of the world's locations."""

    def __init__(
        self,
        locations: Iterable[Location],
        *,
        max_depth: int = config.MAX_WARP_DEPTH,
        sink: Optional[DiagnosticSink] = None,
    ) -> None:
        self.locations: List[Location] = list(locations)
        self.max_depth = max_depth
        self.sink = sink or NullSink()
        self._by_key: Dict[str, Location] = {}
        self._by_name: Dict[str, Location] = {}
        for location in self.locations:
            self._by_key[location.key] = location
            self._by_name.setdefault(location.name, location)

    def classify(self) -> Dict[str, LocationClassification]:
        classifications: Dict[str, LocationClassification] = {}
        for location in self.locations:
            root, kind = self._trace(location, prev=None, has_outdoor_warp=False, visited=set(), depth=0)
            classifications[location.key] = LocationClassification(kind=kind, root=root)

        for name, classification in classifications.items():
            if classification.root is None:
                self.sink.report(
                    "debug",
                    f"Unresolved root: {name} has no warp path to an outdoor location.",
                    key=DiagnosticKind.UNRESOLVED_ROOT.key(name),
                )
        return classifications

    def _target(self, warp: Optional[Warp]) -> Optional[Location]:
        if warp is None or not warp.target_name:
            return None
        return self._by_key.get(warp.target_name) or self._by_name.get(warp.target_name)

    def _trace(
        self,
        location: Location,
        prev: Optional[str],
        has_outdoor_warp: bool,
        visited: Set[str],
        depth: int,
    ) -> Tuple[Optional[str], Optional[LocationKind]]:
        name = location.key
        if location.is_outdoors:
            return name, LocationKind.OUTDOORS
        if depth >= self.max_depth:
            logger.debug("Warp depth limit %d reached at %s.", self.max_depth, name)
            return None, None

        visited.add(name)
        for warp in location.warps:
            target = self._target(warp)
            if target is None:
                continue
            # Self-loops, immediate back-edges and anything already on this search
            if target.key == name or target.key == prev or target.key in visited:
                continue
            if target.is_outdoors:
                has_outdoor_warp = True
            root, _ = self._trace(target, name, has_outdoor_warp, visited, depth + 1)
            if root is not None:
                return root, LocationKind.INDOORS if has_outdoor_warp else LocationKind.ROOM
        return None, None


def classify(
    locations: Iterable[Location],
    *,
    max_depth: int = config.MAX_WARP_DEPTH,
    sink: Optional[DiagnosticSink] = None,
) -> Dict[str, LocationClassification]:
    return LocationGraphBuilder(locations, max_depth=max_depth, sink=sink).classify()


def unresolved_locations(classifications: Dict[str, LocationClassification]) -> List[str]:
    return sorted(name for name, classification in classifications.items() if classification.root is None)


def is_outdoors(classifications: Dict[str, LocationClassification], location_name: str) -> bool:
    return classifications.get(location_name, UNRESOLVED).kind is LocationKind.OUTDOORS


def is_same_area(
    classifications: Dict[str, LocationClassification],
    first: str,
    second: str,
    rule: Optional[LevelBucketRule] = None,
) -> bool:
    """True when both locations are the same place or share an outdoor root."""
    first = canonicalize(first, rule)
    second = canonicalize(second, rule)
    if first == second:
        return True
    first_root = classifications.get(first, UNRESOLVED).root
    second_root = classifications.get(second, UNRESOLVED).root
    return first_root is not None and first_root == second_root
