from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import List, Optional

from ..map.grid import Coordinate
from ..world.entities import Door, RoomStatus
from .level import Level

logger = logging.getLogger(__name__)


@dataclass
class WalkReport:
    """What happened while a level was cleared by autoplay."""

    ticks: int = 0
    enemies_slain: int = 0
    finished_order: List[Coordinate] = field(default_factory=list)
    visited: List[Coordinate] = field(default_factory=list)
    cleared: bool = False
    boss_slain: bool = False

    def as_dict(self) -> dict:
        return {
            "ticks": self.ticks,
            "enemies_slain": self.enemies_slain,
            "finished_order": [c.as_tuple() for c in self.finished_order],
            "visited": [c.as_tuple() for c in self.visited],
            "cleared": self.cleared,
            "boss_slain": self.boss_slain,
        }


class AutoPlayer:
    """Scripted player for headless runs and integration checks.

    Per tick the player either slays one enemy in its current room or, when
    the room is finished, walks through finished rooms to the nearest open
    door leading into a closed room and crosses it. Only that last crossing
    raises PlayerEnteredRoom; passing through finished rooms changes nothing.
    ``visited`` records the rooms entered through such crossings.
    """

    def __init__(self, level: Level) -> None:
        self.level = level
        self.position: Coordinate = level.grid.start
        self.report = WalkReport(visited=[self.position])
        level.add_listener(self._on_finished)

    def _on_finished(self, note, level: Level) -> None:
        self.report.finished_order.append(note.coordinate)

    def act(self) -> None:
        state = self.level.state
        room = state.room_at(self.position)
        if room is not None and room.status is RoomStatus.ACTIVE:
            enemy = next(state.enemies_in(self.position), None)
            if enemy is not None and self.level.slay_enemy(enemy.eid):
                self.report.enemies_slain += 1
            return
        door = self._next_door()
        if door is not None and self.level.traverse(door.did):
            self.position = door.destination
            self.report.visited.append(self.position)

    def _next_door(self) -> Optional[Door]:
        """Breadth-first search over finished rooms from the current position."""
        state = self.level.state
        seen = {self.position}
        queue = deque([self.position])
        while queue:
            here = queue.popleft()
            for door in state.doors_in(here):
                if not door.is_open:
                    continue
                target = state.room_at(door.destination)
                if target is None:
                    continue
                if target.status is RoomStatus.CLOSED:
                    return door
                if target.status is RoomStatus.FINISHED and door.destination not in seen:
                    seen.add(door.destination)
                    queue.append(door.destination)
        return None

    def run(self, max_ticks: int = 1000) -> WalkReport:
        for _ in range(max_ticks):
            self.level.tick()
            self.report.ticks += 1
            if self.level.cleared:
                break
            self.act()
        self.report.cleared = self.level.cleared
        self.report.boss_slain = self.level.boss_slain
        logger.info(
            "Autoplay finished: cleared=%s boss_slain=%s ticks=%d slain=%d",
            self.report.cleared,
            self.report.boss_slain,
            self.report.ticks,
            self.report.enemies_slain,
        )
        return self.report


def autoplay(level: Level, max_ticks: int = 1000) -> WalkReport:
    return AutoPlayer(level).run(max_ticks)


__all__ = ["AutoPlayer", "WalkReport", "autoplay"]
