from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from src.core import config
from src.core.runtime_data_validation import load_validated_buildings, validate_buildings_payload
from src.world.projection import MapProjector


@dataclass(frozen=True)
class Building:
    """A movable structure placed on the host location."""
    tile_x: int
    tile_y: int
    building_type: Optional[str] = None
    indoors_name: Optional[str] = None
    indoors_base_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Building":
        return cls(
            tile_x=int(data["tileX"]),
            tile_y=int(data["tileY"]),
            building_type=data.get("buildingType"),
            indoors_name=data.get("indoorsName"),
            indoors_base_name=data.get("indoorsBaseName"),
        )

    @property
    def has_indoors(self) -> bool:
        # Some saves carry the literal string "null" for buildings without an interior
        return bool(self.indoors_base_name) and bool(self.indoors_name) and self.indoors_name != "null"

    @property
    def common_name(self) -> str:
        # The type distinguishes upgrades ("Big Barn") where the base name does not
        return self.building_type or self.indoors_base_name or ""


def build_structure_overrides(
    buildings: Iterable[Optional[Building]],
    projector: MapProjector,
    *,
    host_location: str = config.HOST_LOCATION,
    greenhouse_unlocked: bool = False,
) -> Mapping[str, Tuple[int, int]]:
    """Pixel positions for building interiors, keyed by their unique name.

    Each interior is pinned to where its building stands on the host
    location, so anything inside it is drawn at the building.
    """
    host = projector.with_overrides(None)
    overrides: Dict[str, Tuple[int, int]] = {}
    for building in buildings:
        if building is None or not building.has_indoors:
            continue
        result = host.project(host_location, building.tile_x, building.tile_y)
        if not result.on_map:
            continue
        x, y = result.as_tuple()
        if config.BARN_MARKER in building.common_name:
            y += config.BARN_Y_OFFSET
        overrides[building.indoors_name] = (x, y)

    if greenhouse_unlocked:
        result = host.project(config.GREENHOUSE_LOCATION)
        if result.on_map:
            dx, dy = config.GREENHOUSE_OFFSET
            overrides[config.GREENHOUSE_LOCATION] = (result.x + dx, result.y + dy)

    return MappingProxyType(overrides)


def buildings_from_payload(payload: Any, *, source: str = "buildings.json") -> List[Building]:
    return [Building.from_dict(raw) for raw in validate_buildings_payload(payload, source=source)]


def load_buildings(path: str) -> List[Building]:
    return [Building.from_dict(raw) for raw in load_validated_buildings(path)]
