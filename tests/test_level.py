from crawlmap.config import GenerationSettings
from crawlmap.events import RoomFinished
from crawlmap.map.assembly import RoomType, assemble
from crawlmap.map.grid import Coordinate, GridTopology
from crawlmap.rng import RandomSource
from crawlmap.world import EnemyType, LevelBuilder, RoomStatus
from crawlmap.engine import Level, autoplay

BLOB_ROOM = Coordinate(4, 5)
BOSS_ROOM = Coordinate(4, 3)


class OnePistol:
    def spawners_for(self, record):
        if record.room_type is RoomType.NORMAL:
            return [EnemyType.PISTOL]
        if record.room_type is RoomType.BOSS:
            return [EnemyType.BOSS]
        return []


def _level(seed=11):
    return Level.generate(GenerationSettings(seed=seed), RandomSource(seed), layout_provider=OnePistol())


def test_start_room_doors_open_on_first_tick():
    level = _level()
    start = level.grid.start
    assert level.state.room_at(start).status is RoomStatus.FINISHED
    assert all(not d.is_open for d in level.state.doors_in(start))

    notes = level.tick()

    assert notes == [RoomFinished(start)]
    assert level.state.doors_in(start)
    assert all(d.is_open for d in level.state.doors_in(start))


def test_traverse_open_door_activates_neighbor():
    level = _level()
    level.tick()
    door = level.state.doors_in(level.grid.start)[0]

    assert level.traverse(door.did) is True
    level.tick()

    room = level.state.room_at(door.destination)
    assert room.status is RoomStatus.ACTIVE
    assert len(list(level.state.enemies_in(door.destination))) == 1
    assert level.state.spawners_in(door.destination) == []


def test_closed_or_unknown_door_blocks_traversal():
    level = _level()
    level.tick()
    start = level.grid.start
    closed = next(d for d in level.state.doors() if d.coordinate != start)
    assert level.traverse(closed.did) is False
    assert level.traverse(10_000) is False


def test_slaying_last_enemy_finishes_room_and_opens_doors():
    level = _level()
    level.tick()
    door = level.state.doors_in(level.grid.start)[0]
    level.traverse(door.did)
    level.tick()

    (enemy,) = level.state.enemies_in(door.destination)
    assert level.slay_enemy(enemy.eid) is True
    assert level.slay_enemy(enemy.eid) is False

    notes = level.tick()
    assert notes == [RoomFinished(door.destination)]
    assert all(d.is_open for d in level.state.doors_in(door.destination))


def test_listeners_receive_finish_notes_and_errors_are_contained():
    level = _level()
    seen = []

    def broken(note, lvl):
        raise RuntimeError("listener failure")

    level.add_listener(broken)
    level.add_listener(lambda note, lvl: seen.append(note.coordinate))
    level.tick()
    assert seen == [level.grid.start]


def test_autoplay_clears_every_room():
    level = Level.generate(GenerationSettings(seed=21), RandomSource(21))
    # Big blobs die three times, medium blobs twice
    lives = {EnemyType.BIG_BLOB: 3, EnemyType.MEDIUM_BLOB: 2}
    expected_kills = sum(lives.get(s.enemy_type, 1) for s in level.state.spawners())
    rooms = {r.coordinate for r in level.state.rooms()}

    report = autoplay(level, max_ticks=1000)

    assert report.cleared
    assert level.cleared
    assert report.boss_slain
    assert report.enemies_slain == expected_kills
    assert report.finished_order[0] == level.grid.start
    assert set(report.finished_order) == rooms
    assert len(report.finished_order) == len(rooms)
    assert all(d.is_open for d in level.state.doors())
    assert report.as_dict()["cleared"] is True


def test_autoplay_stops_at_tick_limit():
    level = _level()
    report = autoplay(level, max_ticks=2)
    assert report.ticks == 2
    assert not report.cleared


class BlobAndBoss:
    def spawners_for(self, record):
        if record.coordinate == BLOB_ROOM:
            return [EnemyType.BIG_BLOB]
        if record.room_type is RoomType.BOSS:
            return [EnemyType.BOSS]
        return []


def _cross_level(**kwargs):
    topo = GridTopology(9, 9)
    grid = assemble(topo, {topo.start, BLOB_ROOM, Coordinate(5, 4), BOSS_ROOM}, BOSS_ROOM)
    level = Level(grid, LevelBuilder(BlobAndBoss()).build(grid), **kwargs)
    level.begin()
    level.tick()
    return level


def _enter(level, coordinate):
    door = next(d for d in level.state.doors_in(level.grid.start) if d.destination == coordinate)
    assert level.traverse(door.did)
    level.tick()


def test_blob_room_finishes_only_after_last_split_dies():
    level = _cross_level()
    _enter(level, BLOB_ROOM)
    seen = []

    for _ in range(3):
        room = level.state.room_at(BLOB_ROOM)
        assert room.status is RoomStatus.ACTIVE
        (enemy,) = level.state.enemies_in(BLOB_ROOM)
        seen.append(enemy.enemy_type)
        assert level.slay_enemy(enemy.eid)
        notes = level.tick()

    assert seen == [EnemyType.BIG_BLOB, EnemyType.MEDIUM_BLOB, EnemyType.SMALL_BLOB]
    assert notes == [RoomFinished(BLOB_ROOM)]
    assert level.state.room_at(BLOB_ROOM).status is RoomStatus.FINISHED


def test_split_does_not_raise_enemy_slain():
    level = _cross_level()
    _enter(level, BLOB_ROOM)
    (blob,) = level.state.enemies_in(BLOB_ROOM)
    level.slay_enemy(blob.eid)
    assert len(level.signals) == 0
    assert level.tick() == []


def test_successor_factory_is_injectable():
    level = _cross_level(successor_factory=lambda enemy: ())
    _enter(level, BLOB_ROOM)
    (blob,) = level.state.enemies_in(BLOB_ROOM)
    level.slay_enemy(blob.eid)
    assert level.tick() == [RoomFinished(BLOB_ROOM)]


def test_killing_the_boss_is_recorded():
    level = _cross_level()
    _enter(level, BOSS_ROOM)
    assert level.boss_slain is False
    (boss,) = level.state.enemies_in(BOSS_ROOM)
    assert boss.is_boss
    level.slay_enemy(boss.eid)
    assert level.boss_slain is True
    assert level.tick() == [RoomFinished(BOSS_ROOM)]


def test_autoplay_only_crosses_doors_next_to_explored_rooms():
    level = Level.generate(GenerationSettings(seed=4), RandomSource(4))
    report = autoplay(level)
    assert report.cleared
    for i, room in enumerate(report.visited[1:], start=1):
        earlier = report.visited[:i]
        assert any(room in c.neighbors() for c in earlier)


def test_teardown_releases_level_state():
    level = _cross_level()
    seen = []
    level.add_listener(lambda note, lvl: seen.append(note))
    _enter(level, BLOB_ROOM)
    level.enter_room(BOSS_ROOM)

    level.teardown()

    assert level.state.rooms() == []
    assert level.state.doors() == []
    assert level.state.enemies() == []
    assert level.state.spawners() == []
    assert len(level.signals) == 0
    assert level.tick() == []
    assert seen == []
