from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple

from ..errors import RoomStateError
from ..map.assembly import RoomType
from ..map.grid import Coordinate, TransitionDirection

logger = logging.getLogger(__name__)


class RoomStatus(Enum):
    """Clearable state of a room. Transitions only move forward."""

    CLOSED = 0
    ACTIVE = 1
    FINISHED = 2


class EnemyType(Enum):
    BIG_BLOB = "big_blob"
    MEDIUM_BLOB = "medium_blob"
    SMALL_BLOB = "small_blob"
    PISTOL = "pistol"
    SPLIT_SHOT = "split_shot"
    MACHINE_GUN = "machine_gun"
    SHOTGUN = "shotgun"
    SNIPER = "sniper"
    CROSS = "cross"
    CIRCLE = "circle"
    BOSS = "boss"


# Kinds a regular spawner may roll. Medium and small blobs only appear as splits.
SPAWNABLE_ENEMIES: Tuple[EnemyType, ...] = (
    EnemyType.BIG_BLOB,
    EnemyType.PISTOL,
    EnemyType.SPLIT_SHOT,
    EnemyType.SHOTGUN,
    EnemyType.SNIPER,
    EnemyType.CROSS,
    EnemyType.CIRCLE,
    EnemyType.MACHINE_GUN,
)

# What a dying enemy leaves behind in its room
BLOB_SPLITS: Dict[EnemyType, Tuple[EnemyType, ...]] = {
    EnemyType.BIG_BLOB: (EnemyType.MEDIUM_BLOB,),
    EnemyType.MEDIUM_BLOB: (EnemyType.SMALL_BLOB,),
}

DOOR_CLOSED = "door_closed"
DOOR_OPEN = "door_open"


@dataclass
class Room:
    """Live room entity. At most one per coordinate."""

    coordinate: Coordinate
    room_type: RoomType
    status: RoomStatus = RoomStatus.CLOSED
    history: List[RoomStatus] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        self.history.append(self.status)

    def _advance(self, target: RoomStatus) -> None:
        if target.value != self.status.value + 1:
            raise RoomStateError(
                f"Room at {self.coordinate} cannot go from {self.status.name} to {target.name}"
            )
        logger.debug("Room %s: %s -> %s", self.coordinate, self.status.name, target.name)
        self.status = target
        self.history.append(target)

    def activate(self) -> None:
        self._advance(RoomStatus.ACTIVE)

    def finish(self) -> None:
        self._advance(RoomStatus.FINISHED)


@dataclass
class Door:
    """Door tile on one edge of its owning room.

    A closed door is solid and drawn with the closed-door visual. Opening
    clears the solid flag and swaps the visual; opening twice changes nothing.
    """

    did: int
    coordinate: Coordinate
    direction: TransitionDirection
    solid: bool = True
    visual: str = DOOR_CLOSED

    @property
    def destination(self) -> Coordinate:
        return self.coordinate.step(self.direction)

    @property
    def is_open(self) -> bool:
        return not self.solid and self.visual == DOOR_OPEN

    def open(self) -> bool:
        """Open the door. Returns True if its state changed."""
        if self.is_open:
            return False
        self.solid = False
        self.visual = DOOR_OPEN
        return True


@dataclass(frozen=True)
class Spawner:
    """Placeholder that turns into enemies the first time its room activates."""

    sid: int
    coordinate: Coordinate
    enemy_type: EnemyType


@dataclass(frozen=True)
class Enemy:
    eid: int
    coordinate: Coordinate
    enemy_type: EnemyType

    @property
    def is_boss(self) -> bool:
        return self.enemy_type is EnemyType.BOSS


__all__ = [
    "RoomStatus",
    "EnemyType",
    "SPAWNABLE_ENEMIES",
    "BLOB_SPLITS",
    "Room",
    "Door",
    "Spawner",
    "Enemy",
    "DOOR_CLOSED",
    "DOOR_OPEN",
]
