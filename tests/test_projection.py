import pytest

from src.core.diagnostics import AlertLog
from src.world.projection import MapProjector, ProjectionResult, project, select_brackets
from src.world.reference_points import ReferencePoint, ReferencePointTable
from src.world.special_cases import LevelBucketRule


def _point(tile_x, tile_y, pixel_x, pixel_y):
    return ReferencePoint(tile_x=tile_x, tile_y=tile_y, pixel_x=pixel_x, pixel_y=pixel_y)


def _table():
    return ReferencePointTable(
        {
            "Farm": [_point(0, 0, 10, 10), _point(10, 10, 110, 110)],
            "Town": [_point(0, 0, 595, 175), _point(45, 60, 700, 320), _point(119, 109, 855, 420)],
            "SeedShop": [_point(0, 0, 725, 305)],
            "Mine": [_point(0, 0, 418, 88)],
            "SkullCave": [_point(0, 0, 35, 450)],
        }
    )


def test_interpolates_between_bracket_points():
    projector = MapProjector(_table())

    result = projector.project("Farm", 5, 5)

    assert result.as_tuple() == (60, 60)
    assert result.on_map is True


def test_fixed_location_ignores_tile():
    projector = MapProjector(_table())

    assert projector.project("SeedShop", 3, 17).as_tuple() == (725, 305)
    assert projector.project("SeedShop").as_tuple() == (725, 305)


def test_missing_tile_uses_first_reference_point():
    projector = MapProjector(_table())

    assert projector.project("Town").as_tuple() == (595, 175)
    assert projector.project("Town", 30, None).as_tuple() == (595, 175)


@pytest.mark.parametrize("tile, pixel", [((0, 0), (595, 175)), ((45, 60), (700, 320)), ((119, 109), (855, 420))])
def test_reference_tile_projects_exactly(tile, pixel):
    projector = MapProjector(_table())

    assert projector.project("Town", *tile).as_tuple() == pixel


def test_result_is_truncated_to_whole_pixels():
    table = ReferencePointTable({"Field": [_point(0, 0, 0, 0), _point(3, 3, 10, 10)]})

    assert MapProjector(table).project("Field", 1, 1).as_tuple() == (3, 3)


def test_unknown_location_returns_sentinel_and_reports_once():
    sink = AlertLog()
    projector = MapProjector(_table(), sink=sink)

    results = [projector.project("Nowhere", 1, 1) for _ in range(3)]
    projector.project("Elsewhere")

    assert all(result.as_tuple() == (-1000, -1000) for result in results)
    assert all(result.on_map is False for result in results)
    assert [message for _, message in sink.records] == [
        "Unknown location: Nowhere.",
        "Unknown location: Elsewhere.",
    ]
    assert sink.has_flag("UnknownLocation:Nowhere")


def test_custom_sentinel_position():
    projector = MapProjector(_table(), off_map_position=(-1, -1))

    assert projector.project("Nowhere").as_tuple() == (-1, -1)


def test_override_wins_before_any_lookup():
    sink = AlertLog()
    projector = MapProjector(_table(), {"Coop1": (12, 34), "Farm": (1, 2)}, sink=sink)

    assert projector.project("Coop1", 4, 4).as_tuple() == (12, 34)
    assert projector.project("Farm", 5, 5).as_tuple() == (1, 2)
    assert sink.records == []


def test_level_names_fold_onto_buckets():
    projector = MapProjector(_table())

    assert projector.project("UndergroundMine5", 10, 10).as_tuple() == (418, 88)
    assert projector.project("UndergroundMine150", 10, 10).as_tuple() == (35, 450)


def test_custom_level_rule():
    rule = LevelBucketRule(prefix="DungeonLevel", threshold=120, deep_bucket="SkullCave", standard_bucket="Mine")
    projector = MapProjector(_table(), rule=rule)

    assert projector.project("DungeonLevel150").as_tuple() == (35, 450)
    assert projector.project("UndergroundMine150").on_map is False


def test_degenerate_axis_pins_to_lower_bracket():
    sink = AlertLog()
    table = ReferencePointTable({"Hall": [_point(0, 0, 0, 0), _point(0, 10, 40, 100)]})
    projector = MapProjector(table, sink=sink)

    assert projector.project("Hall", 0, 5).as_tuple() == (0, 50)
    assert projector.project("Hall", 0, 7).as_tuple() == (0, 70)
    assert len(sink.records) == 1
    assert sink.has_flag("DegenerateBracket:Hall")


def test_missing_lower_bracket_falls_back_to_next_nearest():
    table = ReferencePointTable({"Coast": [_point(10, 10, 100, 100), _point(20, 20, 200, 200)]})

    # Both points sit above the query, so the second nearest becomes the lower bound.
    assert MapProjector(table).project("Coast", 5, 5).as_tuple() == (50, 50)


def test_debug_mode_reports_brackets():
    projector = MapProjector(_table(), debug=True)

    result = projector.project("Farm", 5, 5)

    assert result.lower == _point(0, 0, 10, 10)
    assert result.upper == _point(10, 10, 110, 110)
    assert MapProjector(_table()).project("Farm", 5, 5).lower is None


def test_select_brackets_replaces_points_sharing_an_axis():
    first_lower = _point(4, 0, 0, 0)
    upper = _point(4, 10, 0, 0)
    second_lower = _point(0, 0, 0, 0)
    far_upper = _point(10, 10, 0, 0)

    lower, chosen_upper = select_brackets([first_lower, upper, second_lower, far_upper], 4, 5)

    assert lower is second_lower
    assert chosen_upper is upper


def test_select_brackets_ties_keep_catalog_order():
    first = _point(0, 10, 0, 0)
    second = _point(10, 0, 0, 0)

    lower, upper = select_brackets([first, second], 5, 5)

    # Neither point brackets (5, 5), so both fall back by distance then catalog order.
    assert lower is first
    assert upper is second


def test_module_level_project_accepts_plain_mapping():
    points = {"Farm": [_point(0, 0, 10, 10), _point(10, 10, 110, 110)]}

    assert project("Farm", 5, 5, points) == (60, 60)
    assert project("Barn", 5, 5, points, {"Barn": (7, 8)}) == (7, 8)
    assert project("Nowhere", None, None, points) == (-1000, -1000)


def test_projection_result_defaults():
    result = ProjectionResult(1, 2)

    assert result.as_tuple() == (1, 2)
    assert result.on_map is True
    assert result.lower is None and result.upper is None
