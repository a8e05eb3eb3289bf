"""
Dungeon map systems: grid topology, room-graph generation with boss
selection, and assembly into typed room records.
"""
from .grid import Coordinate, GridTopology, NeighborSet, TransitionDirection, count_neighbors
from .assembly import RoomGrid, RoomRecord, RoomType, assemble
from .generation import DungeonGraphGenerator, GenerationOutcome, generate_dungeon

__all__ = [
    "Coordinate",
    "GridTopology",
    "NeighborSet",
    "TransitionDirection",
    "count_neighbors",
    "RoomGrid",
    "RoomRecord",
    "RoomType",
    "assemble",
    "DungeonGraphGenerator",
    "GenerationOutcome",
    "generate_dungeon",
]
