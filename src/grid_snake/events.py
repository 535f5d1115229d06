"""Per-pass event signals and their single-shot queues."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

E = TypeVar("E")


@dataclass(frozen=True)
class GrowthEvent:
    """The head reached a food item."""


@dataclass(frozen=True)
class GameOverEvent:
    """The head left the arena or hit the body."""


class EventQueue(Generic[E]):
    """Mailbox read by exactly one consumer per pass.

    Reading drains the queue; the engine also clears it at the end of
    every pass so nothing leaks into the next one.
    """

    def __init__(self) -> None:
        self._pending: list[E] = []

    def send(self, event: E) -> None:
        self._pending.append(event)

    def drain(self) -> list[E]:
        """Return all pending events and empty the queue."""
        events, self._pending = self._pending, []
        return events

    def clear(self) -> None:
        self._pending.clear()

    def __len__(self) -> int:
        return len(self._pending)
