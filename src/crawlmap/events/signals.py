from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..map.grid import Coordinate, TransitionDirection


@dataclass(frozen=True)
class PlayerEnteredRoom:
    """Raised by movement when the player crosses into the room at ``coordinate``.

    Attributes:
        coordinate: Room the player arrives in.
        direction: Edge crossed; only used to reposition the player visually.
    """

    coordinate: Coordinate
    direction: Optional[TransitionDirection] = None


@dataclass(frozen=True)
class EnemySlain:
    """Raised by combat when enemy ``enemy_id`` dies in the room at ``coordinate``."""

    coordinate: Coordinate
    enemy_id: int


@dataclass(frozen=True)
class RoomFinished:
    """Emitted by the lifecycle controller once a room has been cleared."""

    coordinate: Coordinate


RoomSignal = Union[PlayerEnteredRoom, EnemySlain]
