from __future__ import annotations

import itertools
import logging
from typing import Dict, Iterator, List, Optional

from ..errors import DuplicateRoomError
from ..map.assembly import RoomType
from ..map.grid import Coordinate, TransitionDirection
from .entities import Door, Enemy, EnemyType, Room, RoomStatus, Spawner

logger = logging.getLogger(__name__)


class GameState:
    """Owns every live room, door, spawner and enemy of the current level.

    Entities are stored by id with a per-coordinate index so systems can ask
    "what is in room C" without scanning the whole world. Lookups of unknown
    ids or coordinates return None/empty rather than raising: callers treat
    them as stale references.
    """

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._rooms: Dict[Coordinate, Room] = {}
        self._doors: Dict[int, Door] = {}
        self._doors_by_room: Dict[Coordinate, List[int]] = {}
        self._spawners: Dict[int, Spawner] = {}
        self._enemies: Dict[int, Enemy] = {}

    def _next_id(self) -> int:
        return next(self._ids)

    # Rooms
    def add_room(self, coordinate: Coordinate, room_type: RoomType, status: RoomStatus = RoomStatus.CLOSED) -> Room:
        if coordinate in self._rooms:
            raise DuplicateRoomError(f"A room already exists at {coordinate}")
        room = Room(coordinate, room_type, status)
        self._rooms[coordinate] = room
        return room

    def room_at(self, coordinate: Coordinate) -> Optional[Room]:
        return self._rooms.get(coordinate)

    def rooms(self) -> List[Room]:
        return list(self._rooms.values())

    # Doors
    def add_door(self, coordinate: Coordinate, direction: TransitionDirection) -> Door:
        door = Door(self._next_id(), coordinate, direction)
        self._doors[door.did] = door
        self._doors_by_room.setdefault(coordinate, []).append(door.did)
        return door

    def door(self, did: int) -> Optional[Door]:
        return self._doors.get(did)

    def doors_in(self, coordinate: Coordinate) -> List[Door]:
        return [self._doors[did] for did in self._doors_by_room.get(coordinate, [])]

    def doors(self) -> List[Door]:
        return list(self._doors.values())

    # Spawners
    def add_spawner(self, coordinate: Coordinate, enemy_type: EnemyType) -> Spawner:
        spawner = Spawner(self._next_id(), coordinate, enemy_type)
        self._spawners[spawner.sid] = spawner
        return spawner

    def spawners_in(self, coordinate: Coordinate) -> List[Spawner]:
        return [s for s in self._spawners.values() if s.coordinate == coordinate]

    def remove_spawner(self, sid: int) -> Optional[Spawner]:
        return self._spawners.pop(sid, None)

    def spawners(self) -> List[Spawner]:
        return list(self._spawners.values())

    # Enemies
    def add_enemy(self, coordinate: Coordinate, enemy_type: EnemyType) -> Enemy:
        enemy = Enemy(self._next_id(), coordinate, enemy_type)
        self._enemies[enemy.eid] = enemy
        logger.debug("Enemy %d (%s) spawned in room %s", enemy.eid, enemy_type.value, coordinate)
        return enemy

    def enemy(self, eid: int) -> Optional[Enemy]:
        return self._enemies.get(eid)

    def remove_enemy(self, eid: int) -> Optional[Enemy]:
        """Remove and return an enemy; None if it was already gone."""
        return self._enemies.pop(eid, None)

    def enemies_in(self, coordinate: Coordinate, exclude: Optional[int] = None) -> Iterator[Enemy]:
        for enemy in self._enemies.values():
            if enemy.eid == exclude:
                continue
            if enemy.coordinate == coordinate:
                yield enemy

    def has_enemies(self, coordinate: Coordinate, exclude: Optional[int] = None) -> bool:
        return next(self.enemies_in(coordinate, exclude), None) is not None

    def enemies(self) -> List[Enemy]:
        return list(self._enemies.values())

    # Level teardown
    def clear(self) -> None:
        self._rooms.clear()
        self._doors.clear()
        self._doors_by_room.clear()
        self._spawners.clear()
        self._enemies.clear()
        logger.debug("GameState cleared")

    def __repr__(self) -> str:
        return (
            f"GameState(rooms={len(self._rooms)}, doors={len(self._doors)}, "
            f"spawners={len(self._spawners)}, enemies={len(self._enemies)})"
        )


__all__ = ["GameState"]
