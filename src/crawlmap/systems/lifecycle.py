from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from ..events.signals import EnemySlain, PlayerEnteredRoom, RoomFinished, RoomSignal
from ..map.grid import Coordinate
from ..world.entities import EnemyType, RoomStatus, Spawner
from ..world.spawning import spawn_from
from ..world.state import GameState

logger = logging.getLogger(__name__)

EnemyFactory = Callable[[Spawner], Iterable[EnemyType]]


class RoomLifecycleController:
    """Drives each room through CLOSED -> ACTIVE -> FINISHED.

    Responsibilities:
    - On PlayerEnteredRoom for a closed room, activate it and trigger its
      spawners if no enemy is already there. A room that ends up without
      enemies finishes immediately.
    - On EnemySlain in an active room, finish the room once no other enemy
      tagged with that room is alive.

    Signals for unknown rooms, or rooms already past the relevant state, are
    ignored: several crossings and despawn causes can report the same room
    within one tick.
    """

    def __init__(self, state: GameState, enemy_factory: Optional[EnemyFactory] = None) -> None:
        self.state = state
        self.enemy_factory: EnemyFactory = enemy_factory or spawn_from

    def process(self, signals: Iterable[RoomSignal]) -> List[RoomFinished]:
        """Handle a drained batch in order and return the finish notifications."""
        finished: List[RoomFinished] = []
        for signal in signals:
            if isinstance(signal, PlayerEnteredRoom):
                note = self.on_player_entered(signal)
            elif isinstance(signal, EnemySlain):
                note = self.on_enemy_slain(signal)
            else:
                raise TypeError(f"Unsupported room signal: {signal!r}")
            if note is not None:
                finished.append(note)
        return finished

    def on_player_entered(self, signal: PlayerEnteredRoom) -> Optional[RoomFinished]:
        coordinate = signal.coordinate
        room = self.state.room_at(coordinate)
        if room is None:
            logger.debug("Player entered %s but no room exists there; ignoring", coordinate)
            return None
        if room.status is not RoomStatus.CLOSED:
            logger.debug("Room %s already %s; entry ignored", coordinate, room.status.name)
            return None

        room.activate()
        logger.info("Room %s activated", coordinate)

        if not self.state.has_enemies(coordinate):
            self._trigger_spawners(coordinate)
            if not self.state.has_enemies(coordinate):
                logger.info("Room %s has no enemies; finishing immediately", coordinate)
                return self.finish(coordinate)
        return None

    def on_enemy_slain(self, signal: EnemySlain) -> Optional[RoomFinished]:
        coordinate = signal.coordinate
        room = self.state.room_at(coordinate)
        if room is None:
            logger.debug("Enemy %d slain in unknown room %s; ignoring", signal.enemy_id, coordinate)
            return None
        if room.status is not RoomStatus.ACTIVE:
            logger.debug(
                "Enemy %d slain in room %s while %s; ignoring",
                signal.enemy_id,
                coordinate,
                room.status.name,
            )
            return None
        if self.state.has_enemies(coordinate, exclude=signal.enemy_id):
            return None
        logger.info("Last enemy of room %s slain", coordinate)
        return self.finish(coordinate)

    def finish(self, coordinate: Coordinate) -> Optional[RoomFinished]:
        """Mark an active room finished and return its notification."""
        room = self.state.room_at(coordinate)
        if room is None or room.status is not RoomStatus.ACTIVE:
            return None
        room.finish()
        logger.info("Room %s finished", coordinate)
        return RoomFinished(coordinate)

    def _trigger_spawners(self, coordinate: Coordinate) -> int:
        """Consume the room's spawners and return the number of enemies produced."""
        produced = 0
        for spawner in self.state.spawners_in(coordinate):
            for enemy_type in self.enemy_factory(spawner):
                self.state.add_enemy(coordinate, enemy_type)
                produced += 1
            self.state.remove_spawner(spawner.sid)
        if produced:
            logger.debug("Room %s spawned %d enemies", coordinate, produced)
        return produced


__all__ = ["RoomLifecycleController", "EnemyFactory"]
