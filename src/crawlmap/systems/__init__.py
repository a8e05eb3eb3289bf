"""Per-tick systems reacting to room signals."""
from .doors import DoorController
from .lifecycle import EnemyFactory, RoomLifecycleController

__all__ = ["DoorController", "EnemyFactory", "RoomLifecycleController"]
