from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Collection, Iterator, List, Tuple


class TransitionDirection(Enum):
    """Edge of a room crossed to reach the neighboring room."""

    UP = (0, 1)
    DOWN = (0, -1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def delta(self) -> Tuple[int, int]:
        return self.value


# Expansion and neighbor order: up, down, right, left
EXPANSION_ORDER: Tuple[TransitionDirection, ...] = (
    TransitionDirection.UP,
    TransitionDirection.DOWN,
    TransitionDirection.RIGHT,
    TransitionDirection.LEFT,
)


@dataclass(frozen=True, order=True)
class Coordinate:
    """Array based position of a room slot. y grows upwards."""

    x: int
    y: int

    def up(self) -> "Coordinate":
        return Coordinate(self.x, self.y + 1)

    def down(self) -> "Coordinate":
        return Coordinate(self.x, self.y - 1)

    def left(self) -> "Coordinate":
        return Coordinate(self.x - 1, self.y)

    def right(self) -> "Coordinate":
        return Coordinate(self.x + 1, self.y)

    def step(self, direction: TransitionDirection) -> "Coordinate":
        dx, dy = direction.delta
        return Coordinate(self.x + dx, self.y + dy)

    def neighbors(self) -> Tuple["Coordinate", ...]:
        """The four orthogonal neighbors, in expansion order."""
        return tuple(self.step(d) for d in EXPANSION_ORDER)

    def as_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


@dataclass(frozen=True)
class NeighborSet:
    """Which of the four edges of a room lead to another room."""

    top: bool = False
    bottom: bool = False
    left: bool = False
    right: bool = False

    @classmethod
    def from_rooms(cls, coordinate: Coordinate, rooms: Collection[Coordinate]) -> "NeighborSet":
        return cls(
            top=coordinate.up() in rooms,
            bottom=coordinate.down() in rooms,
            left=coordinate.left() in rooms,
            right=coordinate.right() in rooms,
        )

    @property
    def count(self) -> int:
        return sum((self.top, self.bottom, self.left, self.right))

    def directions(self) -> List[TransitionDirection]:
        """Directions with a neighbor, in top/bottom/left/right order."""
        flags = (
            (self.top, TransitionDirection.UP),
            (self.bottom, TransitionDirection.DOWN),
            (self.left, TransitionDirection.LEFT),
            (self.right, TransitionDirection.RIGHT),
        )
        return [d for present, d in flags if present]


@dataclass(frozen=True)
class GridTopology:
    """Fixed-size room grid with the start room at its center."""

    width: int = 9
    height: int = 9

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("GridTopology dimensions must be positive")

    @property
    def start(self) -> Coordinate:
        return Coordinate(self.width // 2, self.height // 2)

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    def in_bounds(self, coordinate: Coordinate) -> bool:
        return 0 <= coordinate.x < self.width and 0 <= coordinate.y < self.height

    def neighbors(self, coordinate: Coordinate) -> Iterator[Coordinate]:
        """Yield in-bounds neighbors in expansion order."""
        for n in coordinate.neighbors():
            if self.in_bounds(n):
                yield n

    def coordinates(self) -> Iterator[Coordinate]:
        """All cells, row by row starting at y=0."""
        for y in range(self.height):
            for x in range(self.width):
                yield Coordinate(x, y)


def count_neighbors(coordinate: Coordinate, rooms: Collection[Coordinate]) -> int:
    """Number of the coordinate's orthogonal neighbors present in ``rooms``."""
    return sum(1 for n in coordinate.neighbors() if n in rooms)


__all__ = [
    "Coordinate",
    "NeighborSet",
    "GridTopology",
    "TransitionDirection",
    "EXPANSION_ORDER",
    "count_neighbors",
]
