from __future__ import annotations

import json
from typing import Any, Dict, Sequence, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    ValidationError,
    field_validator,
    model_validator,
)

MAX_MAP_COORDINATE = 100_000
MAX_WARP_DEPTH_LIMIT = 10_000


class RuntimeDataValidationError(ValueError):
    """Raised when runtime JSON payloads fail strict schema validation."""

    def __init__(self, source: str, errors: Sequence[Dict[str, Any]]) -> None:
        self.source = source
        self.errors = [self._normalize_error(error) for error in errors]
        super().__init__(self._build_message())

    @staticmethod
    def _normalize_error(error: Dict[str, Any]) -> Dict[str, Any]:
        loc = error.get("loc", ())
        if not isinstance(loc, tuple):
            if isinstance(loc, list):
                loc = tuple(loc)
            else:
                loc = (loc,)
        msg = str(error.get("msg", "Unknown validation error."))
        return {"loc": loc, "msg": msg}

    @staticmethod
    def _format_loc(loc: Tuple[Any, ...]) -> str:
        if not loc:
            return "<root>"
        parts = []
        for item in loc:
            if isinstance(item, int):
                parts.append(f"[{item}]")
            else:
                text = str(item)
                if not parts:
                    parts.append(text)
                else:
                    parts.append(f".{text}")
        return "".join(parts)

    def _build_message(self) -> str:
        lines = [f"{self.source} validation failed ({len(self.errors)} error(s))."]
        for error in self.errors:
            lines.append(f"- {self._format_loc(error['loc'])}: {error['msg']}")
        return "\n".join(lines)

    @classmethod
    def from_pydantic(cls, source: str, exc: ValidationError) -> "RuntimeDataValidationError":
        return cls(source=source, errors=exc.errors())


class _SchemaModel(BaseModel):
    model_config = ConfigDict(extra="allow")


def _strip_non_empty(value: str) -> str:
    stripped = value.strip()
    if not stripped:
        raise ValueError("value must be a non-empty string.")
    return stripped


class _ReferencePointModel(_SchemaModel):
    tileX: int = Field(default=0, ge=-MAX_MAP_COORDINATE, le=MAX_MAP_COORDINATE)
    tileY: int = Field(default=0, ge=-MAX_MAP_COORDINATE, le=MAX_MAP_COORDINATE)
    mapX: int = Field(ge=-MAX_MAP_COORDINATE, le=MAX_MAP_COORDINATE)
    mapY: int = Field(ge=-MAX_MAP_COORDINATE, le=MAX_MAP_COORDINATE)


class _ReferenceCatalogModel(RootModel[dict[str, list[_ReferencePointModel]]]):
    @field_validator("root")
    @classmethod
    def _validate_catalog(
        cls, value: dict[str, list[_ReferencePointModel]]
    ) -> dict[str, list[_ReferencePointModel]]:
        for location_name, points in value.items():
            if not location_name.strip():
                raise ValueError("Reference catalog keys must be non-empty location names.")
            if not points:
                raise ValueError(
                    f"Location '{location_name}' must define at least one reference point."
                )
        return value


class _WarpModel(_SchemaModel):
    targetName: str | None = None

    @field_validator("targetName")
    @classmethod
    def _strip_target(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return value.strip() or None


class _LocationModel(_SchemaModel):
    name: str = Field(min_length=1)
    uniqueName: str | None = None
    isOutdoors: bool = False
    warps: list[_WarpModel] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return _strip_non_empty(value)

    @field_validator("uniqueName")
    @classmethod
    def _strip_unique_name(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return value.strip() or None


class _LocationListModel(RootModel[list[_LocationModel]]):
    @model_validator(mode="after")
    def _reject_duplicate_keys(self) -> "_LocationListModel":
        seen: set[str] = set()
        for index, location in enumerate(self.root):
            key = location.uniqueName or location.name
            if key in seen:
                raise ValueError(f"[{index}] duplicates location '{key}'.")
            seen.add(key)
        return self


class _BuildingModel(_SchemaModel):
    buildingType: str | None = None
    indoorsName: str | None = None
    indoorsBaseName: str | None = None
    tileX: int = Field(ge=-MAX_MAP_COORDINATE, le=MAX_MAP_COORDINATE)
    tileY: int = Field(ge=-MAX_MAP_COORDINATE, le=MAX_MAP_COORDINATE)


class _BuildingListModel(RootModel[list[_BuildingModel]]):
    pass


class _LevelBucketModel(_SchemaModel):
    prefix: str = Field(min_length=1)
    threshold: int
    deepBucket: str = Field(min_length=1)
    standardBucket: str = Field(min_length=1)

    @field_validator("prefix", "deepBucket", "standardBucket")
    @classmethod
    def _strip_required_str(cls, value: str) -> str:
        return _strip_non_empty(value)


class _PositionModel(_SchemaModel):
    x: int
    y: int


class _SettingsModel(_SchemaModel):
    debugMode: bool | None = None
    levelBucket: _LevelBucketModel | None = None
    offMapPosition: _PositionModel | None = None
    maxWarpDepth: int | None = Field(default=None, ge=1, le=MAX_WARP_DEPTH_LIMIT)
    hostLocation: str | None = None

    @field_validator("hostLocation")
    @classmethod
    def _strip_host(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return _strip_non_empty(value)


def _read_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _validate_model(model: Any, payload: Any, *, source: str) -> Any:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise RuntimeDataValidationError.from_pydantic(source, exc) from exc


def validate_reference_points_payload(
    payload: Any, *, source: str = "reference_points.json"
) -> dict[str, list[dict[str, int]]]:
    validated = _validate_model(_ReferenceCatalogModel, payload, source=source)
    return {
        location_name: [point.model_dump() for point in points]
        for location_name, points in validated.root.items()
    }


def load_validated_reference_points(path: str) -> dict[str, list[dict[str, int]]]:
    payload = _read_json(path)
    return validate_reference_points_payload(payload, source=path)


def validate_locations_payload(payload: Any, *, source: str = "locations.json") -> list[dict[str, Any]]:
    validated = _validate_model(_LocationListModel, payload, source=source)
    return [location.model_dump() for location in validated.root]


def load_validated_locations(path: str) -> list[dict[str, Any]]:
    payload = _read_json(path)
    return validate_locations_payload(payload, source=path)


def validate_buildings_payload(payload: Any, *, source: str = "buildings.json") -> list[dict[str, Any]]:
    validated = _validate_model(_BuildingListModel, payload, source=source)
    return [building.model_dump() for building in validated.root]


def load_validated_buildings(path: str) -> list[dict[str, Any]]:
    payload = _read_json(path)
    return validate_buildings_payload(payload, source=path)


def validate_settings_payload(payload: Any, *, source: str = "settings.json") -> dict[str, Any]:
    validated = _validate_model(_SettingsModel, payload, source=source)
    return validated.model_dump(exclude_none=True)


def load_validated_settings(path: str) -> dict[str, Any]:
    payload = _read_json(path)
    return validate_settings_payload(payload, source=path)
