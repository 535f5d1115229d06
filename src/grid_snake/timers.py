"""Repeating timers that gate how often a step runs."""

from __future__ import annotations


class RepeatingTimer:
    """Fires once whenever accumulated time reaches ``interval`` seconds.

    Overshoot is carried into the next period, so cadence stays locked to
    elapsed time rather than to how often :meth:`tick` is called. Several
    elapsed periods within one tick still fire only once.
    """

    def __init__(self, interval: float) -> None:
        if interval <= 0:
            raise ValueError("Timer interval must be positive.")
        self.interval = interval
        self.elapsed = 0.0

    def tick(self, delta: float) -> bool:
        """Advance by *delta* seconds and report whether the timer fired."""
        if delta < 0:
            raise ValueError("Timer delta must not be negative.")
        self.elapsed += delta
        if self.elapsed < self.interval:
            return False
        self.elapsed %= self.interval
        return True

    def reset(self) -> None:
        self.elapsed = 0.0
