"""Level orchestration and the headless tick loop."""
from .autoplay import AutoPlayer, WalkReport, autoplay
from .level import FinishedListener, Level, SuccessorFactory
from .loop import GameEngine, LoopConfig

__all__ = ["AutoPlayer", "FinishedListener", "Level", "GameEngine", "LoopConfig", "SuccessorFactory", "WalkReport", "autoplay"]
