"""Arena geometry for the snake simulation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Iterable

    from grid_snake.snake import Direction


@dataclass(frozen=True)
class Position:
    """Integer cell coordinate. ``x`` grows rightwards, ``y`` grows upwards."""

    x: int
    y: int

    def step(self, direction: Direction) -> Position:
        """Return the neighbouring cell one unit along *direction*."""
        dx, dy = direction.value
        return Position(self.x + dx, self.y + dy)

    def to_list(self) -> list[int]:
        return [self.x, self.y]


class Grid:
    """Fixed-size arena of ``width`` × ``height`` cells.

    Occupancy masks are NumPy arrays indexed ``[y, x]``.
    """

    def __init__(self, width: int = 10, height: int = 10) -> None:
        if width < 1 or height < 1:
            raise ValueError("Grid dimensions must be at least 1×1.")
        self.width = width
        self.height = height

    def in_bounds(self, pos: Position) -> bool:
        """Check whether a position lies within the arena."""
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def random_cell(self, rng: np.random.Generator) -> Position:
        """Draw a cell with two independent uniform draws, floored."""
        x = int(np.floor(rng.random() * self.width))
        y = int(np.floor(rng.random() * self.height))
        return Position(x, y)

    def occupancy(self, positions: Iterable[Position]) -> np.ndarray:
        """Boolean mask of occupied cells. Out-of-bounds positions are ignored."""
        mask = np.zeros((self.height, self.width), dtype=bool)
        for pos in positions:
            if self.in_bounds(pos):
                mask[pos.y, pos.x] = True
        return mask

    def free_cells(self, occupied: Iterable[Position]) -> list[Position]:
        """Return every cell not covered by *occupied*, row by row."""
        ys, xs = np.where(~self.occupancy(occupied))
        return [
            Position(x, y)
            for y, x in zip(ys.tolist(), xs.tolist(), strict=True)
        ]

    def to_dict(self) -> dict:
        """Serialize arena dimensions to a dictionary."""
        return {"width": self.width, "height": self.height}
