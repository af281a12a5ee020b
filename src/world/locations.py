from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from src.core.runtime_data_validation import load_validated_locations, validate_locations_payload


@dataclass(frozen=True)
class Warp:
    target_name: Optional[str]


@dataclass(frozen=True)
class Location:
    """Snapshot of one world location and its outgoing warps."""
    name: str
    is_outdoors: bool = False
    warps: Tuple[Warp, ...] = field(default_factory=tuple)
    unique_name: Optional[str] = None

    @property
    def key(self) -> str:
        # Instanced buildings share a base name but carry a per-save unique name
        return self.unique_name or self.name

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Location":
        return cls(
            name=raw.get("name", ""),
            is_outdoors=bool(raw.get("isOutdoors", False)),
            warps=tuple(Warp(target_name=warp.get("targetName")) for warp in raw.get("warps", []) or []),
            unique_name=raw.get("uniqueName"),
        )

    def to_dict(self) -> Dict[str, Any]:
        raw: Dict[str, Any] = {
            "name": self.name,
            "isOutdoors": self.is_outdoors,
            "warps": [{"targetName": warp.target_name} for warp in self.warps],
        }
        if self.unique_name is not None:
            raw["uniqueName"] = self.unique_name
        return raw


def locations_from_payload(payload: Iterable[Dict[str, Any]], *, source: str = "locations.json") -> List[Location]:
    return [Location.from_dict(raw) for raw in validate_locations_payload(list(payload), source=source)]


def load_locations(path: str) -> List[Location]:
    return [Location.from_dict(raw) for raw in load_validated_locations(path)]


def index_locations(locations: Iterable[Location]) -> Dict[str, Location]:
    """Index by key; later entries win."""
    return {location.key: location for location in locations}
