from dataclasses import dataclass
from typing import Optional

from src.core import config


@dataclass(frozen=True)
class LevelBucketRule:
    """Folds ``<prefix><level>`` names onto one of two shared buckets."""
    prefix: str = config.LEVEL_PREFIX
    threshold: int = config.LEVEL_DEEP_THRESHOLD
    deep_bucket: str = config.LEVEL_DEEP_BUCKET
    standard_bucket: str = config.LEVEL_STANDARD_BUCKET

    def level_of(self, location_name: str) -> Optional[int]:
        if not location_name.startswith(self.prefix):
            return None
        try:
            return int(location_name[len(self.prefix):])
        except ValueError:
            return None

    def bucket_for(self, level: int) -> str:
        return self.deep_bucket if level > self.threshold else self.standard_bucket


DEFAULT_RULE = LevelBucketRule()


def canonicalize(location_name: Optional[str], rule: Optional[LevelBucketRule] = None) -> Optional[str]:
    if not location_name:
        return location_name
    rule = rule or DEFAULT_RULE
    level = rule.level_of(location_name)
    if level is None:
        return location_name
    return rule.bucket_for(level)
