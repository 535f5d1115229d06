"""Game configuration and the reference constants."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from grid_snake.grid import Position
from grid_snake.snake import Direction

logger = logging.getLogger(__name__)

ARENA_WIDTH = 10
ARENA_HEIGHT = 10
SPAWN_X = 3
SPAWN_Y = 3
SPAWN_DIRECTION = "up"
MOVEMENT_INTERVAL = 0.150  # seconds
FOOD_SPAWN_INTERVAL = 1.0  # seconds


@dataclass(frozen=True)
class GameConfig:
    """Arena, spawn, and timing settings for one game session.

    Defaults reproduce the reference game. Supports JSON serialization
    for reproducible runs.
    """

    arena_width: int = ARENA_WIDTH
    arena_height: int = ARENA_HEIGHT
    spawn_x: int = SPAWN_X
    spawn_y: int = SPAWN_Y
    spawn_direction: str = SPAWN_DIRECTION
    movement_interval: float = MOVEMENT_INTERVAL
    food_spawn_interval: float = FOOD_SPAWN_INTERVAL

    # Let the head enter the cell the tail is vacating this tick.
    tail_follow: bool = False
    # Only place food on cells free of snake segments and other food.
    food_avoids_snake: bool = False

    seed: int | None = None

    def __post_init__(self) -> None:
        if self.arena_width < 2 or self.arena_height < 2:
            raise ValueError("Arena dimensions must be at least 2×2.")
        if self.movement_interval <= 0 or self.food_spawn_interval <= 0:
            raise ValueError("Timer intervals must be positive.")
        if self.movement_interval > self.food_spawn_interval:
            raise ValueError(
                "Movement interval must not exceed the food spawn interval.",
            )
        heading = Direction.from_name(self.spawn_direction)
        head = self.spawn_position
        for pos in (head, head.step(heading.opposite())):
            if not (
                0 <= pos.x < self.arena_width
                and 0 <= pos.y < self.arena_height
            ):
                raise ValueError(
                    f"Spawned snake cell {pos.to_list()} is outside the arena.",
                )

    @property
    def spawn_position(self) -> Position:
        return Position(self.spawn_x, self.spawn_y)

    @property
    def spawn_heading(self) -> Direction:
        return Direction.from_name(self.spawn_direction)

    def to_dict(self) -> dict:
        """Serialize to a plain dict."""
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        return cls(**raw)
