from __future__ import annotations

import logging
from typing import Iterable

from ..events.signals import RoomFinished
from ..map.grid import Coordinate
from ..world.state import GameState

logger = logging.getLogger(__name__)


class DoorController:
    """Opens the doors of a room once it is finished.

    Opening is idempotent: a repeated notification for the same room leaves
    the doors as they are.
    """

    def __init__(self, state: GameState) -> None:
        self.state = state

    def process(self, notifications: Iterable[RoomFinished]) -> int:
        """Apply a drained batch of finish notifications; returns doors opened."""
        return sum(self.open_doors(note.coordinate) for note in notifications)

    def open_doors(self, coordinate: Coordinate) -> int:
        doors = self.state.doors_in(coordinate)
        if not doors:
            logger.debug("No doors registered for room %s", coordinate)
            return 0
        opened = 0
        for door in doors:
            if door.open():
                opened += 1
                logger.debug("Door %d of room %s opened (%s)", door.did, coordinate, door.direction.name)
        if opened:
            logger.info("Opened %d door(s) of room %s", opened, coordinate)
        return opened


__all__ = ["DoorController"]
