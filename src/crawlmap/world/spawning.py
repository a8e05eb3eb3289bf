from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Protocol

from ..map.assembly import RoomGrid, RoomRecord, RoomType
from ..rng import RandomSource
from .entities import BLOB_SPLITS, SPAWNABLE_ENEMIES, Enemy, EnemyType, RoomStatus, Spawner
from .state import GameState

logger = logging.getLogger(__name__)


class RoomLayoutProvider(Protocol):
    """Supplies the spawner contents of a room.

    Stands in for the room templates of the full game; only the enemy types
    of the spawner tiles matter to the room lifecycle.
    """

    def spawners_for(self, record: RoomRecord) -> List[EnemyType]:
        """Return one enemy type per spawner placed in the room."""


class RandomLayoutProvider:
    """Default layout provider.

    - START rooms have no spawners.
    - NORMAL rooms get between min_spawners and max_spawners spawners of
      random regular enemy types. A roll of zero yields a room that finishes
      as soon as it is entered.
    - BOSS rooms get ``boss_spawners`` BOSS spawners.
    """

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        min_spawners: int = 0,
        max_spawners: int = 3,
        boss_spawners: int = 1,
    ) -> None:
        if min_spawners < 0 or max_spawners < min_spawners:
            raise ValueError("Spawner range must satisfy 0 <= min_spawners <= max_spawners")
        self.rng = rng or RandomSource()
        self.min_spawners = min_spawners
        self.max_spawners = max_spawners
        self.boss_spawners = boss_spawners

    def spawners_for(self, record: RoomRecord) -> List[EnemyType]:
        if record.room_type is RoomType.BOSS:
            return [EnemyType.BOSS] * self.boss_spawners
        if record.room_type is not RoomType.NORMAL:
            return []
        count = self.rng.randint(self.min_spawners, self.max_spawners)
        return [self.rng.choice(SPAWNABLE_ENEMIES) for _ in range(count)]


class LevelBuilder:
    """Materializes the live world of a level from an assembled RoomGrid.

    For every non-empty record it creates the Room (START active, others
    closed), one Door per edge with a neighbor, and the room's spawners.
    """

    def __init__(self, layout_provider: Optional[RoomLayoutProvider] = None, rng: Optional[RandomSource] = None) -> None:
        self.layout_provider = layout_provider or RandomLayoutProvider(rng)

    def build(self, grid: RoomGrid, state: Optional[GameState] = None) -> GameState:
        state = state if state is not None else GameState()
        for record in grid.rooms():
            self.spawn_room(state, record)
        logger.info(
            "Built level: %d rooms, %d doors, %d spawners",
            len(state.rooms()),
            len(state.doors()),
            len(state.spawners()),
        )
        return state

    def spawn_room(self, state: GameState, record: RoomRecord) -> None:
        status = RoomStatus.ACTIVE if record.room_type is RoomType.START else RoomStatus.CLOSED
        state.add_room(record.coordinate, record.room_type, status)
        for direction in record.neighbors.directions():
            state.add_door(record.coordinate, direction)
        for enemy_type in self.layout_provider.spawners_for(record):
            state.add_spawner(record.coordinate, enemy_type)


def spawn_from(spawner: Spawner) -> Iterable[EnemyType]:
    """Default enemy factory: each spawner produces one enemy of its type."""
    return (spawner.enemy_type,)


def split_on_death(enemy: Enemy) -> Iterable[EnemyType]:
    """Default successor factory: blobs split into the next smaller blob."""
    return BLOB_SPLITS.get(enemy.enemy_type, ())


__all__ = ["RoomLayoutProvider", "RandomLayoutProvider", "LevelBuilder", "spawn_from", "split_on_death"]
