from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Set

from ..config import GenerationSettings
from ..errors import GenerationExhausted
from ..rng import RandomSource
from .assembly import RoomGrid, assemble
from .grid import Coordinate, GridTopology, count_neighbors

logger = logging.getLogger(__name__)


@dataclass
class GenerationOutcome:
    """Result of the retrying generation driver.

    Attributes:
        grid: Assembled grid on success, None on failure.
        rooms: Accepted room coordinates (empty on failure).
        boss: Boss coordinate (None on failure).
        attempts: Number of attempts made, including the accepted one.
        error: GenerationExhausted when the attempt cap was reached.
    """

    grid: Optional[RoomGrid]
    rooms: FrozenSet[Coordinate] = field(default_factory=frozenset)
    boss: Optional[Coordinate] = None
    attempts: int = 0
    error: Optional[GenerationExhausted] = None

    def __post_init__(self) -> None:
        if self.grid is None and self.error is None:
            raise ValueError("A failed GenerationOutcome must carry its error")

    @property
    def ok(self) -> bool:
        return self.grid is not None

    def unwrap(self) -> RoomGrid:
        """Return the grid or raise the recorded GenerationExhausted."""
        if self.error is not None:
            raise self.error
        return self.grid


class DungeonGraphGenerator:
    """Randomized room-graph generator.

    One attempt grows a connected room set from the grid center. Candidates
    are kept on a stack, so the most recently discovered neighbor is examined
    first, which gives depth-first-biased, sprawling dungeons.
    A candidate is rejected outright when it already touches
    more than ``max_neighbors`` rooms, otherwise it is included with
    probability ``room_inclusion_probability`` and its free neighbors join the
    stack.

    generate() repeats whole attempts until the room count is within
    [min_rooms, max_rooms] and a boss leaf exists, or the attempt cap is hit.
    """

    def __init__(self, settings: Optional[GenerationSettings] = None, rng: Optional[RandomSource] = None) -> None:
        self.settings = settings or GenerationSettings()
        self.settings.validate()
        self.rng = rng if rng is not None else RandomSource(self.settings.seed)
        self.topology = GridTopology(self.settings.grid_width, self.settings.grid_height)

    @property
    def start(self) -> Coordinate:
        return self.topology.start

    # ---- Single attempt --------------------------------------------------
    def expand(self) -> Set[Coordinate]:
        """Run one generation attempt and return the included coordinates."""
        start = self.start
        rooms: Set[Coordinate] = {start}
        stack: List[Coordinate] = list(self.topology.neighbors(start))
        queued: Set[Coordinate] = set(stack)

        while stack:
            candidate = stack.pop()
            queued.discard(candidate)
            if not self._accepts_degree(candidate, rooms):
                continue
            if self.rng.random() < self.settings.room_inclusion_probability:
                rooms.add(candidate)
                for n in self.topology.neighbors(candidate):
                    if n not in rooms and n not in queued:
                        stack.append(n)
                        queued.add(n)
        return rooms

    def _accepts_degree(self, candidate: Coordinate, rooms: Set[Coordinate]) -> bool:
        limit = self.settings.max_neighbors
        if count_neighbors(candidate, rooms) > limit:
            return False
        if self.settings.degree_policy == "final":
            # Including the candidate adds one neighbor to each adjacent room
            for n in candidate.neighbors():
                if n in rooms and count_neighbors(n, rooms) + 1 > limit:
                    return False
        return True

    # ---- Boss selection --------------------------------------------------
    def select_boss(self, rooms: Set[Coordinate]) -> Optional[Coordinate]:
        """Pick a leaf room (exactly one neighbor) other than start, or None."""
        start = self.start
        leaves = sorted(r for r in rooms if r != start and count_neighbors(r, rooms) == 1)
        if not leaves:
            return None
        return self.rng.choice(leaves)

    # ---- Driver ----------------------------------------------------------
    def generate(self) -> GenerationOutcome:
        s = self.settings
        for attempt in range(1, s.generation_attempt_cap + 1):
            rooms = self.expand()
            if not (s.min_rooms <= len(rooms) <= s.max_rooms):
                logger.debug("Attempt %d rejected: %d rooms", attempt, len(rooms))
                continue
            boss = self.select_boss(rooms)
            if boss is None:
                logger.debug("Attempt %d rejected: no leaf room for the boss", attempt)
                continue
            grid = assemble(self.topology, rooms, boss)
            logger.info(
                "Generated dungeon with %d rooms after %d attempt(s); boss at %s",
                len(rooms),
                attempt,
                boss,
            )
            return GenerationOutcome(
                grid=grid, rooms=frozenset(rooms), boss=boss, attempts=attempt
            )

        error = GenerationExhausted(s.generation_attempt_cap, s.min_rooms, s.max_rooms)
        logger.error("%s", error)
        return GenerationOutcome(grid=None, attempts=s.generation_attempt_cap, error=error)


def generate_dungeon(settings: Optional[GenerationSettings] = None, rng: Optional[RandomSource] = None) -> RoomGrid:
    """High-level API: generate and assemble a dungeon or raise GenerationExhausted."""
    return DungeonGraphGenerator(settings, rng).generate().unwrap()


__all__ = ["DungeonGraphGenerator", "GenerationOutcome", "generate_dungeon"]
