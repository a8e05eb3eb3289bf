"""Signals exchanged between the core systems and their per-tick queues."""
from .channel import SignalQueue
from .signals import EnemySlain, PlayerEnteredRoom, RoomFinished, RoomSignal

__all__ = ["SignalQueue", "EnemySlain", "PlayerEnteredRoom", "RoomFinished", "RoomSignal"]
