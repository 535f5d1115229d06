"""Grid Snake — tick-driven snake simulation core."""

from grid_snake.config import GameConfig
from grid_snake.engine import GameEngine, PassReport
from grid_snake.entities import Entity, EntityKind, World
from grid_snake.grid import Grid, Position
from grid_snake.session import GameSession
from grid_snake.snake import Direction, Snake

__all__ = [
    "Direction",
    "Entity",
    "EntityKind",
    "GameConfig",
    "GameEngine",
    "GameSession",
    "Grid",
    "PassReport",
    "Position",
    "Snake",
    "World",
]
