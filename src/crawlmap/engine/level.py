from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from ..config import GenerationSettings
from ..events import EnemySlain, PlayerEnteredRoom, RoomFinished, RoomSignal, SignalQueue
from ..map.assembly import RoomGrid
from ..map.generation import DungeonGraphGenerator
from ..map.grid import Coordinate, TransitionDirection
from ..rng import RandomSource
from ..systems import DoorController, EnemyFactory, RoomLifecycleController
from ..world.entities import Enemy, EnemyType, RoomStatus
from ..world.spawning import LevelBuilder, RoomLayoutProvider, split_on_death
from ..world.state import GameState

logger = logging.getLogger(__name__)

FinishedListener = Callable[[RoomFinished, "Level"], None]
SuccessorFactory = Callable[[Enemy], Iterable[EnemyType]]


class Level:
    """One dungeon level: its grid, live state, signal queues and systems.

    Each tick drains the inbound room signals through the lifecycle
    controller, then drains the resulting finish notifications through the
    door controller, then tells listeners (camera, HUD) which rooms finished.

    A slain enemy may leave successors behind (blob splits). They are tagged
    with the same room and no EnemySlain is raised, so the room stays active
    until the last of them dies.
    """

    def __init__(
        self,
        grid: RoomGrid,
        state: GameState,
        enemy_factory: Optional[EnemyFactory] = None,
        successor_factory: Optional[SuccessorFactory] = None,
    ) -> None:
        self.grid = grid
        self.state = state
        self.signals: SignalQueue[RoomSignal] = SignalQueue("room_signals")
        self.finished: SignalQueue[RoomFinished] = SignalQueue("room_finished")
        self.lifecycle = RoomLifecycleController(state, enemy_factory)
        self.doors = DoorController(state)
        self.successor_factory: SuccessorFactory = successor_factory or split_on_death
        self.boss_slain = False
        self.tick_count = 0
        self._listeners: List[FinishedListener] = []

    @classmethod
    def generate(
        cls,
        settings: Optional[GenerationSettings] = None,
        rng: Optional[RandomSource] = None,
        layout_provider: Optional[RoomLayoutProvider] = None,
        enemy_factory: Optional[EnemyFactory] = None,
        successor_factory: Optional[SuccessorFactory] = None,
    ) -> "Level":
        """Generate a dungeon and spawn its world.

        Raises GenerationExhausted when no valid dungeon is found.
        """
        settings = settings or GenerationSettings()
        rng = rng if rng is not None else RandomSource(settings.seed)
        grid = DungeonGraphGenerator(settings, rng).generate().unwrap()
        state = LevelBuilder(layout_provider, rng).build(grid)
        level = cls(grid, state, enemy_factory, successor_factory)
        level.begin()
        return level

    def begin(self) -> None:
        """Finish the start room so its doors open on the first tick."""
        note = self.lifecycle.finish(self.grid.start)
        if note is not None:
            self.finished.send(note)

    def add_listener(self, listener: FinishedListener) -> None:
        """Subscribe to room-finished notifications."""
        self._listeners.append(listener)

    def _emit(self, note: RoomFinished) -> None:
        for listener in list(self._listeners):
            try:
                listener(note, self)
            except Exception as ex:
                logger.exception("Listener errored on %s: %s", note, ex)

    # Signals from collaborators
    def enter_room(self, coordinate: Coordinate, direction: Optional[TransitionDirection] = None) -> None:
        self.signals.send(PlayerEnteredRoom(coordinate, direction))

    def slay_enemy(self, enemy_id: int) -> bool:
        """Despawn an enemy and raise EnemySlain unless it left successors.

        Unknown ids are ignored and return False.
        """
        enemy = self.state.remove_enemy(enemy_id)
        if enemy is None:
            logger.debug("Enemy %d already removed; slain signal dropped", enemy_id)
            return False
        if enemy.is_boss:
            self.boss_slain = True
            logger.info("Boss slain in room %s", enemy.coordinate)
        successors = list(self.successor_factory(enemy))
        for enemy_type in successors:
            self.state.add_enemy(enemy.coordinate, enemy_type)
        if successors:
            logger.debug("Enemy %d split into %d successor(s)", enemy.eid, len(successors))
        else:
            self.signals.send(EnemySlain(enemy.coordinate, enemy.eid))
        return True

    def traverse(self, door_id: int) -> bool:
        """Move the player through an open door into the neighboring room."""
        door = self.state.door(door_id)
        if door is None or not door.is_open:
            logger.debug("Door %s is closed or unknown; traversal blocked", door_id)
            return False
        self.enter_room(door.destination, door.direction)
        return True

    def tick(self) -> List[RoomFinished]:
        """Process one frame's worth of signals; returns the rooms finished."""
        self.tick_count += 1
        self.finished.extend(self.lifecycle.process(self.signals.drain()))
        notes = self.finished.drain()
        self.doors.process(notes)
        for note in notes:
            self._emit(note)
        return notes

    @property
    def cleared(self) -> bool:
        """True once every room has finished."""
        return all(r.status is RoomStatus.FINISHED for r in self.state.rooms())

    def teardown(self) -> None:
        """Drop all live entities, pending signals and listeners of the level."""
        self.signals.clear()
        self.finished.clear()
        self._listeners.clear()
        self.state.clear()
        logger.info("Level torn down after %d tick(s)", self.tick_count)

    def __repr__(self) -> str:
        return f"Level(grid={self.grid!r}, state={self.state!r}, tick={self.tick_count})"


__all__ = ["Level", "FinishedListener", "SuccessorFactory"]
