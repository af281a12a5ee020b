import pytest

from src.world.special_cases import DEFAULT_RULE, LevelBucketRule, canonicalize

DUNGEON = LevelBucketRule(prefix="DungeonLevel", threshold=120, deep_bucket="DeepDungeon", standard_bucket="Dungeon")


@pytest.mark.parametrize(
    "name, expected",
    [
        ("DungeonLevel5", "Dungeon"),
        ("DungeonLevel120", "Dungeon"),
        ("DungeonLevel121", "DeepDungeon"),
        ("DungeonLevel150", "DeepDungeon"),
    ],
)
def test_levels_fold_on_either_side_of_threshold(name, expected):
    assert canonicalize(name, DUNGEON) == expected


@pytest.mark.parametrize("name", ["DungeonLevel", "DungeonLevelX", "DungeonLevel5b", "Town", "LevelDungeon5"])
def test_non_matching_names_pass_through(name):
    assert canonicalize(name, DUNGEON) == name


def test_default_rule_uses_mine_buckets():
    assert canonicalize("UndergroundMine77") == "Mine"
    assert canonicalize("UndergroundMine121") == "SkullCave"
    assert DEFAULT_RULE.level_of("UndergroundMine77") == 77
    assert DEFAULT_RULE.level_of("Town") is None


def test_empty_names_pass_through():
    assert canonicalize(None) is None
    assert canonicalize("") == ""
