from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Collection, Dict, Iterator, List, Optional, Sequence

from .grid import Coordinate, GridTopology, NeighborSet

logger = logging.getLogger(__name__)


class RoomType(Enum):
    START = "start"
    NORMAL = "normal"
    BOSS = "boss"
    EMPTY = "empty"


GLYPHS: Dict[RoomType, str] = {
    RoomType.START: "S",
    RoomType.BOSS: "B",
    RoomType.NORMAL: "X",
    RoomType.EMPTY: "#",
}


@dataclass(frozen=True)
class RoomRecord:
    """Room information produced by the assembler and consumed by spawning."""

    room_type: RoomType
    coordinate: Coordinate
    neighbors: NeighborSet

    @property
    def is_room(self) -> bool:
        return self.room_type is not RoomType.EMPTY


class RoomGrid:
    """Dense width x height grid of RoomRecords.

    Records are stored row by row (records[y][x]); every cell has exactly one
    record, EMPTY where no room was generated.
    """

    def __init__(self, topology: GridTopology, records: Sequence[Sequence[RoomRecord]]) -> None:
        if len(records) != topology.height or any(len(row) != topology.width for row in records):
            raise ValueError(
                f"RoomGrid records must be {topology.width}x{topology.height}"
            )
        self.topology = topology
        self._records: List[List[RoomRecord]] = [list(row) for row in records]

    @property
    def width(self) -> int:
        return self.topology.width

    @property
    def height(self) -> int:
        return self.topology.height

    @property
    def start(self) -> Coordinate:
        return self.topology.start

    @property
    def boss(self) -> Optional[Coordinate]:
        for record in self:
            if record.room_type is RoomType.BOSS:
                return record.coordinate
        return None

    def get(self, coordinate: Coordinate) -> RoomRecord:
        if not self.topology.in_bounds(coordinate):
            raise IndexError(f"Coordinate out of bounds: {coordinate} for grid {self.width}x{self.height}")
        return self._records[coordinate.y][coordinate.x]

    def __iter__(self) -> Iterator[RoomRecord]:
        for row in self._records:
            yield from row

    def __len__(self) -> int:
        return self.width * self.height

    def rooms(self) -> List[RoomRecord]:
        """All non-empty records, row by row."""
        return [r for r in self if r.is_room]

    def coordinates(self) -> List[Coordinate]:
        return [r.coordinate for r in self.rooms()]

    def to_lines(self) -> List[str]:
        """ASCII rendering, one string per row starting at y=0."""
        return ["".join(GLYPHS[r.room_type] for r in row) for row in self._records]

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable summary of the grid."""
        boss = self.boss
        return {
            "width": self.width,
            "height": self.height,
            "start": list(self.start.as_tuple()),
            "boss": list(boss.as_tuple()) if boss else None,
            "rooms": [
                {
                    "x": r.coordinate.x,
                    "y": r.coordinate.y,
                    "type": r.room_type.value,
                    "neighbors": {
                        "top": r.neighbors.top,
                        "bottom": r.neighbors.bottom,
                        "left": r.neighbors.left,
                        "right": r.neighbors.right,
                    },
                }
                for r in self.rooms()
            ],
            "lines": self.to_lines(),
            "signature": self.signature(),
        }

    def signature(self) -> str:
        """Deterministic digest of the layout for equality checks across runs."""
        raw = "\n".join(self.to_lines()).encode("utf-8")
        return hashlib.blake2b(raw, digest_size=16).hexdigest()

    def __repr__(self) -> str:
        return f"RoomGrid(width={self.width}, height={self.height}, rooms={len(self.rooms())})"


def assemble(topology: GridTopology, rooms: Collection[Coordinate], boss: Coordinate) -> RoomGrid:
    """Convert the room set and boss coordinate into a dense RoomGrid.

    Total over the grid: each cell gets one record with its NeighborSet
    computed against ``rooms``.
    """
    start = topology.start
    records: List[List[RoomRecord]] = []
    for y in range(topology.height):
        row: List[RoomRecord] = []
        for x in range(topology.width):
            coordinate = Coordinate(x, y)
            neighbors = NeighborSet.from_rooms(coordinate, rooms)
            if coordinate not in rooms:
                room_type = RoomType.EMPTY
            elif coordinate == start:
                room_type = RoomType.START
            elif coordinate == boss:
                room_type = RoomType.BOSS
            else:
                room_type = RoomType.NORMAL
            row.append(RoomRecord(room_type, coordinate, neighbors))
        records.append(row)
    grid = RoomGrid(topology, records)
    logger.debug("Assembled grid:\n%s", "\n".join(grid.to_lines()))
    return grid


__all__ = ["RoomType", "RoomRecord", "RoomGrid", "assemble", "GLYPHS"]
