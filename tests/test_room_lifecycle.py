import pytest

from crawlmap.errors import DuplicateRoomError, RoomStateError
from crawlmap.events import EnemySlain, PlayerEnteredRoom, RoomFinished
from crawlmap.map.assembly import RoomType
from crawlmap.map.grid import Coordinate, TransitionDirection
from crawlmap.systems import RoomLifecycleController
from crawlmap.world import EnemyType, GameState, RoomStatus

ROOM = Coordinate(4, 5)


@pytest.fixture
def state():
    s = GameState()
    s.add_room(Coordinate(4, 4), RoomType.START, RoomStatus.ACTIVE)
    s.add_room(ROOM, RoomType.NORMAL)
    return s


def test_entering_room_with_live_enemy_activates_without_finishing(state):
    state.add_enemy(ROOM, EnemyType.PISTOL)
    ctl = RoomLifecycleController(state)

    notes = ctl.process([PlayerEnteredRoom(ROOM, TransitionDirection.UP)])

    assert notes == []
    assert state.room_at(ROOM).status is RoomStatus.ACTIVE


def test_last_enemy_slain_finishes_once(state):
    enemy = state.add_enemy(ROOM, EnemyType.PISTOL)
    ctl = RoomLifecycleController(state)
    ctl.process([PlayerEnteredRoom(ROOM)])

    state.remove_enemy(enemy.eid)
    assert ctl.process([EnemySlain(ROOM, enemy.eid)]) == [RoomFinished(ROOM)]
    assert state.room_at(ROOM).status is RoomStatus.FINISHED

    # Duplicate signal for an already removed enemy is ignored
    assert ctl.process([EnemySlain(ROOM, enemy.eid)]) == []


def test_slain_enemy_still_in_state_is_excluded(state):
    enemy = state.add_enemy(ROOM, EnemyType.SNIPER)
    ctl = RoomLifecycleController(state)
    ctl.process([PlayerEnteredRoom(ROOM)])
    # Combat may report the death before the despawn
    assert ctl.process([EnemySlain(ROOM, enemy.eid)]) == [RoomFinished(ROOM)]


def test_room_stays_active_while_enemies_remain(state):
    first = state.add_enemy(ROOM, EnemyType.PISTOL)
    second = state.add_enemy(ROOM, EnemyType.CROSS)
    ctl = RoomLifecycleController(state)
    ctl.process([PlayerEnteredRoom(ROOM)])

    state.remove_enemy(first.eid)
    assert ctl.process([EnemySlain(ROOM, first.eid)]) == []
    assert state.room_at(ROOM).status is RoomStatus.ACTIVE

    state.remove_enemy(second.eid)
    assert ctl.process([EnemySlain(ROOM, second.eid)]) == [RoomFinished(ROOM)]


def test_empty_room_finishes_on_entry(state):
    ctl = RoomLifecycleController(state)
    assert ctl.process([PlayerEnteredRoom(ROOM)]) == [RoomFinished(ROOM)]
    assert state.room_at(ROOM).history == [RoomStatus.CLOSED, RoomStatus.ACTIVE, RoomStatus.FINISHED]


def test_spawners_are_consumed_on_entry(state):
    state.add_spawner(ROOM, EnemyType.SHOTGUN)
    state.add_spawner(ROOM, EnemyType.BIG_BLOB)
    ctl = RoomLifecycleController(state)

    assert ctl.process([PlayerEnteredRoom(ROOM)]) == []

    kinds = sorted(e.enemy_type.value for e in state.enemies_in(ROOM))
    assert kinds == ["big_blob", "shotgun"]
    assert state.spawners_in(ROOM) == []
    assert state.room_at(ROOM).status is RoomStatus.ACTIVE


def test_spawners_producing_nothing_finish_room(state):
    state.add_spawner(ROOM, EnemyType.CIRCLE)
    ctl = RoomLifecycleController(state, enemy_factory=lambda spawner: ())

    assert ctl.process([PlayerEnteredRoom(ROOM)]) == [RoomFinished(ROOM)]
    assert state.spawners() == []


def test_repeated_entry_in_one_batch_finishes_once(state):
    ctl = RoomLifecycleController(state)
    notes = ctl.process([PlayerEnteredRoom(ROOM), PlayerEnteredRoom(ROOM)])
    assert notes == [RoomFinished(ROOM)]


def test_entering_finished_room_is_ignored(state):
    ctl = RoomLifecycleController(state)
    ctl.process([PlayerEnteredRoom(ROOM)])
    assert ctl.process([PlayerEnteredRoom(ROOM)]) == []
    assert state.room_at(ROOM).status is RoomStatus.FINISHED


def test_stale_signals_are_ignored(state):
    ctl = RoomLifecycleController(state)
    nowhere = Coordinate(0, 0)
    assert ctl.process([PlayerEnteredRoom(nowhere), EnemySlain(nowhere, 99)]) == []
    # Room is still closed, so a slain signal there means nothing
    assert ctl.process([EnemySlain(ROOM, 99)]) == []
    assert state.room_at(ROOM).status is RoomStatus.CLOSED


def test_unknown_signal_type_raises(state):
    ctl = RoomLifecycleController(state)
    with pytest.raises(TypeError):
        ctl.process([RoomFinished(ROOM)])


def test_room_status_never_moves_backwards(state):
    room = state.room_at(ROOM)
    with pytest.raises(RoomStateError):
        room.finish()
    room.activate()
    room.finish()
    with pytest.raises(RoomStateError):
        room.activate()


def test_one_room_per_coordinate(state):
    with pytest.raises(DuplicateRoomError):
        state.add_room(ROOM, RoomType.NORMAL)
