from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

from .level import Level

logger = logging.getLogger(__name__)


@dataclass
class LoopConfig:
    """Configuration for the headless level loop.

    Attributes:
        tick_rate: Target ticks per second. If 0 or None, ticks as fast as possible.
        max_steps: If provided and > 0, the loop stops after this many ticks.
        stop_when_cleared: Stop once every room of the level has finished.
        stop_when_boss_slain: Stop once the boss has been killed.
    """

    tick_rate: float = 60.0
    max_steps: Optional[int] = None
    stop_when_cleared: bool = False
    stop_when_boss_slain: bool = False


class GameEngine:
    """Frame-synchronous driver for a Level.

    Every update is one level tick, so signals raised between updates are
    drained exactly once. Rendering front-ends call update() from their own
    frame callback; CLI and tests use run().
    """

    def __init__(self, level: Level, config: Optional[LoopConfig] = None) -> None:
        self.level = level
        self.config = config or LoopConfig()
        self._running: bool = False
        self._step: int = 0
        self._last_time: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def step(self) -> int:
        return self._step

    def start(self) -> None:
        """Start the engine loop state.

        Safe to call multiple times; subsequent calls are no-ops.
        """
        if self._running:
            logger.debug("GameEngine.start() called while already running")
            return
        self._running = True
        self._step = 0
        self._last_time = time.perf_counter()
        logger.info("GameEngine started (tick_rate=%s, max_steps=%s)", self.config.tick_rate, self.config.max_steps)

    def stop(self) -> None:
        """Stop the loop gracefully."""
        if not self._running:
            return
        self._running = False
        logger.info("GameEngine stopped at step=%s", self._step)

    def update(self, dt: float) -> None:
        """Perform a single tick of the level.

        Args:
            dt: Delta time in seconds since last update.
        """
        if not self._running:
            logger.debug("update() called while not running; ignored")
            return
        self._step += 1
        finished = self.level.tick()
        logger.debug("Tick #%d (dt=%.4f), %d room(s) finished", self._step, dt, len(finished))

        if self.config.max_steps is not None and self._step >= self.config.max_steps:
            self.stop()
        elif self.config.stop_when_cleared and self.level.cleared:
            logger.info("All rooms finished at step=%d", self._step)
            self.stop()
        elif self.config.stop_when_boss_slain and self.level.boss_slain:
            logger.info("Boss slain at step=%d", self._step)
            self.stop()

    def run(self) -> None:
        """Run a blocking loop until stopped or max_steps reached."""
        self.start()
        target_dt = 0.0
        if self.config.tick_rate and self.config.tick_rate > 0:
            target_dt = 1.0 / float(self.config.tick_rate)

        while self._running:
            now = time.perf_counter()
            dt = 0.0 if self._last_time is None else now - self._last_time
            self._last_time = now

            self.update(dt)

            if target_dt > 0:
                remaining = target_dt - (time.perf_counter() - now)
                if remaining > 0:
                    time.sleep(remaining)

        logger.info("Loop complete (steps=%d)", self._step)
