"""Live world state of a level and the collaborator that spawns it."""
from .entities import (
    BLOB_SPLITS,
    DOOR_CLOSED,
    DOOR_OPEN,
    SPAWNABLE_ENEMIES,
    Door,
    Enemy,
    EnemyType,
    Room,
    RoomStatus,
    Spawner,
)
from .state import GameState
from .spawning import LevelBuilder, RandomLayoutProvider, RoomLayoutProvider, spawn_from, split_on_death

__all__ = [
    "BLOB_SPLITS",
    "DOOR_CLOSED",
    "DOOR_OPEN",
    "SPAWNABLE_ENEMIES",
    "Door",
    "Enemy",
    "EnemyType",
    "Room",
    "RoomStatus",
    "Spawner",
    "GameState",
    "LevelBuilder",
    "RandomLayoutProvider",
    "RoomLayoutProvider",
    "spawn_from",
    "split_on_death",
]
