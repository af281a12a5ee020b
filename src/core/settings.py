from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

from src.core import config
from src.core.runtime_data_validation import load_validated_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LevelBucketSettings:
    prefix: str = config.LEVEL_PREFIX
    threshold: int = config.LEVEL_DEEP_THRESHOLD
    deep_bucket: str = config.LEVEL_DEEP_BUCKET
    standard_bucket: str = config.LEVEL_STANDARD_BUCKET


@dataclass(frozen=True)
class LocatorSettings:
    """Tunables read from ``data/config/default.json`` and per-save overrides."""

    debug_mode: bool = config.DEBUG_MODE
    level_bucket: LevelBucketSettings = field(default_factory=LevelBucketSettings)
    off_map_position: Tuple[int, int] = config.OFF_MAP_POSITION
    max_warp_depth: int = config.MAX_WARP_DEPTH
    host_location: str = config.HOST_LOCATION

    def merged(self, raw: Dict[str, Any]) -> "LocatorSettings":
        """Return a copy with the validated payload's keys applied on top."""
        updates: Dict[str, Any] = {}
        if "debugMode" in raw:
            updates["debug_mode"] = raw["debugMode"]
        if "levelBucket" in raw:
            bucket = raw["levelBucket"]
            updates["level_bucket"] = LevelBucketSettings(
                prefix=bucket["prefix"],
                threshold=bucket["threshold"],
                deep_bucket=bucket["deepBucket"],
                standard_bucket=bucket["standardBucket"],
            )
        if "offMapPosition" in raw:
            position = raw["offMapPosition"]
            updates["off_map_position"] = (position["x"], position["y"])
        if "maxWarpDepth" in raw:
            updates["max_warp_depth"] = raw["maxWarpDepth"]
        if "hostLocation" in raw:
            updates["host_location"] = raw["hostLocation"]
        return replace(self, **updates)


def load_settings(
    default_path: Optional[str] = None, save_path: Optional[str] = None
) -> LocatorSettings:
    """Layer the per-save file over the default file over built-in defaults.

    Missing files are skipped. Malformed files raise
    ``RuntimeDataValidationError``.
    """
    settings = LocatorSettings()
    for path in (default_path or config.DEFAULT_SETTINGS_FILE, save_path):
        if not path:
            continue
        if not os.path.exists(path):
            logger.debug("Settings file %s not found; keeping previous values.", path)
            continue
        settings = settings.merged(load_validated_settings(path))
        logger.debug("Loaded settings from %s.", path)
    return settings
