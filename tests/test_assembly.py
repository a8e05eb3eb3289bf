import pytest

from crawlmap.map.assembly import RoomGrid, RoomType, assemble
from crawlmap.map.grid import Coordinate, GridTopology, TransitionDirection


def C(x, y):
    return Coordinate(x, y)


ROOMS = {C(4, 4), C(4, 5), C(5, 4), C(4, 3)}


@pytest.fixture
def grid():
    return assemble(GridTopology(9, 9), ROOMS, C(4, 3))


def test_assembled_types_for_cross(grid):
    assert grid.get(C(4, 3)).room_type is RoomType.BOSS
    assert grid.get(C(4, 4)).room_type is RoomType.START
    assert grid.get(C(4, 5)).room_type is RoomType.NORMAL
    assert grid.get(C(5, 4)).room_type is RoomType.NORMAL
    others = [r for r in grid if r.coordinate not in ROOMS]
    assert len(others) == 77
    assert all(r.room_type is RoomType.EMPTY for r in others)


def test_assembly_is_total(grid):
    coords = [r.coordinate for r in grid]
    assert len(grid) == 81
    assert len(coords) == 81
    assert set(coords) == set(GridTopology(9, 9).coordinates())
    assert len(grid.rooms()) == 4


def test_neighbor_flags_match_room_set(grid):
    start = grid.get(C(4, 4))
    assert start.neighbors.directions() == [
        TransitionDirection.UP,
        TransitionDirection.DOWN,
        TransitionDirection.RIGHT,
    ]
    boss = grid.get(C(4, 3))
    assert boss.neighbors.top and boss.neighbors.count == 1
    # Empty cells still describe their surroundings
    assert grid.get(C(5, 5)).neighbors.left
    assert grid.get(C(5, 5)).neighbors.bottom


def test_to_lines_renders_rows_from_y0(grid):
    lines = grid.to_lines()
    assert len(lines) == 9
    assert lines[3] == "####B####"
    assert lines[4] == "####SX###"
    assert lines[5] == "####X####"
    assert lines[0] == "#########"


def test_to_dict_and_signature(grid):
    data = grid.to_dict()
    assert data["width"] == 9 and data["height"] == 9
    assert data["start"] == [4, 4]
    assert data["boss"] == [4, 3]
    assert len(data["rooms"]) == 4
    assert data["signature"] == grid.signature()
    other = assemble(GridTopology(9, 9), ROOMS, C(4, 5))
    assert other.signature() != grid.signature()


def test_get_out_of_bounds_raises(grid):
    with pytest.raises(IndexError):
        grid.get(C(9, 4))


def test_room_grid_rejects_wrong_dimensions():
    with pytest.raises(ValueError):
        RoomGrid(GridTopology(2, 2), [[]])
