from __future__ import annotations

import logging
from typing import Generic, Iterable, List, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SignalQueue(Generic[T]):
    """Per-tick FIFO buffer of signals.

    Producers ``send`` during a tick; the consuming system calls ``drain``
    exactly once per tick and receives everything in the order it was sent.
    Signals sent while a drained batch is being processed land in the next
    batch.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._pending: List[T] = []

    def send(self, signal: T) -> None:
        self._pending.append(signal)
        logger.debug("Queued %r on '%s' (%d pending)", signal, self.name, len(self._pending))

    def extend(self, signals: Iterable[T]) -> None:
        for signal in signals:
            self.send(signal)

    def drain(self) -> List[T]:
        """Return all pending signals in FIFO order and empty the queue."""
        batch, self._pending = self._pending, []
        if batch:
            logger.debug("Draining %d signal(s) from '%s'", len(batch), self.name)
        return batch

    def peek(self) -> List[T]:
        return list(self._pending)

    def clear(self) -> None:
        self._pending.clear()

    def __len__(self) -> int:
        return len(self._pending)

    def __repr__(self) -> str:
        return f"SignalQueue({self.name!r}, pending={len(self._pending)})"
