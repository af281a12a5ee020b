from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple

from src.core.runtime_data_validation import (
    load_validated_reference_points,
    validate_reference_points_payload,
)


@dataclass(frozen=True)
class ReferencePoint:
    """One hand-authored tile to overview-pixel correspondence."""
    tile_x: int
    tile_y: int
    pixel_x: int
    pixel_y: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReferencePoint":
        return cls(
            tile_x=int(data.get("tileX", 0)),
            tile_y=int(data.get("tileY", 0)),
            pixel_x=int(data["mapX"]),
            pixel_y=int(data["mapY"]),
        )

    def to_dict(self) -> Dict[str, int]:
        return {"tileX": self.tile_x, "tileY": self.tile_y, "mapX": self.pixel_x, "mapY": self.pixel_y}

    @property
    def tile(self) -> Tuple[int, int]:
        return self.tile_x, self.tile_y

    @property
    def pixel(self) -> Tuple[int, int]:
        return self.pixel_x, self.pixel_y


def _freeze(points: Optional[Mapping[str, Iterable[ReferencePoint]]]) -> Mapping[str, Tuple[ReferencePoint, ...]]:
    return MappingProxyType({name: tuple(entries) for name, entries in (points or {}).items()})


class ReferencePointTable:
    """Read-only base catalog with a read-only custom layer on top.

    Custom entries replace base entries for the same location name. Neither
    layer is mutated after construction; use :meth:`with_custom` to build a
    new table.
    """

    def __init__(
        self,
        base: Optional[Mapping[str, Iterable[ReferencePoint]]] = None,
        custom: Optional[Mapping[str, Iterable[ReferencePoint]]] = None,
    ) -> None:
        self._base = _freeze(base)
        self._custom = _freeze(custom)

    @classmethod
    def from_payload(cls, payload: Any, *, source: str = "reference_points.json") -> "ReferencePointTable":
        return cls(points_from_payload(payload, source=source))

    @classmethod
    def load(cls, path: str, custom_path: Optional[str] = None) -> "ReferencePointTable":
        custom = load_reference_points(custom_path) if custom_path else None
        return cls(load_reference_points(path), custom)

    def with_custom(self, custom: Mapping[str, Iterable[ReferencePoint]]) -> "ReferencePointTable":
        merged = dict(self._custom)
        merged.update({name: tuple(entries) for name, entries in custom.items()})
        return ReferencePointTable(self._base, merged)

    def get(self, location_name: str) -> Optional[Tuple[ReferencePoint, ...]]:
        points = self._custom.get(location_name)
        if points is None:
            points = self._base.get(location_name)
        return points or None

    def __contains__(self, location_name: object) -> bool:
        return location_name in self._custom or location_name in self._base

    def __iter__(self) -> Iterator[str]:
        seen = set()
        for name in list(self._custom) + list(self._base):
            if name not in seen:
                seen.add(name)
                yield name

    def __len__(self) -> int:
        return len(set(self._custom) | set(self._base))


def points_from_payload(payload: Any, *, source: str = "reference_points.json") -> Dict[str, Tuple[ReferencePoint, ...]]:
    validated = validate_reference_points_payload(payload, source=source)
    return {name: tuple(ReferencePoint.from_dict(raw) for raw in points) for name, points in validated.items()}


def load_reference_points(path: str) -> Dict[str, Tuple[ReferencePoint, ...]]:
    validated = load_validated_reference_points(path)
    return {name: tuple(ReferencePoint.from_dict(raw) for raw in points) for name, points in validated.items()}
