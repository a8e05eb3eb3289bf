"""
crawlmap core package.

Headless dungeon logic for a room-based crawler:
- Grid topology and the randomized room-graph generator with boss selection
- Grid assembly into typed room records
- Live world state (rooms, doors, spawners, enemies)
- Room lifecycle and door controllers driven by per-tick signal queues

Rendering, input and audio layers should import and compose these services.
"""
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("crawlmap")
except PackageNotFoundError:  # pragma: no cover - during tests without packaging
    __version__ = "0.0.0"

from .config import GenerationSettings, load_settings
from .errors import (
    CrawlmapError,
    DuplicateRoomError,
    GenerationExhausted,
    InvalidSettings,
    RoomStateError,
)
from .map import (
    Coordinate,
    DungeonGraphGenerator,
    GenerationOutcome,
    GridTopology,
    NeighborSet,
    RoomGrid,
    RoomRecord,
    RoomType,
    assemble,
)
from .engine import GameEngine, Level, LoopConfig

__all__ = [
    "__version__",
    "GenerationSettings",
    "load_settings",
    "CrawlmapError",
    "DuplicateRoomError",
    "GenerationExhausted",
    "InvalidSettings",
    "RoomStateError",
    "Coordinate",
    "DungeonGraphGenerator",
    "GenerationOutcome",
    "GridTopology",
    "NeighborSet",
    "RoomGrid",
    "RoomRecord",
    "RoomType",
    "assemble",
    "GameEngine",
    "Level",
    "LoopConfig",
]
