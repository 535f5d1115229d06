"""The simulation state threaded through every step function."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from grid_snake.config import GameConfig
from grid_snake.entities import EntityKind, World
from grid_snake.events import EventQueue, GameOverEvent, GrowthEvent
from grid_snake.grid import Grid, Position
from grid_snake.snake import Snake
from grid_snake.systems import spawn_snake


@dataclass
class GameSession:
    """Everything one running game owns.

    Created by :meth:`new`, which also spawns the initial snake. Only the
    step functions in :mod:`grid_snake.systems` mutate it.
    """

    config: GameConfig
    grid: Grid
    rng: np.random.Generator
    world: World = field(default_factory=World)
    snake: Snake | None = None
    last_tail_position: Position | None = None
    growth_events: EventQueue[GrowthEvent] = field(default_factory=EventQueue)
    game_over_events: EventQueue[GameOverEvent] = field(
        default_factory=EventQueue,
    )

    @classmethod
    def new(cls, config: GameConfig | None = None) -> GameSession:
        config = config if config is not None else GameConfig()
        session = cls(
            config=config,
            grid=Grid(config.arena_width, config.arena_height),
            rng=np.random.default_rng(config.seed),
        )
        spawn_snake(session)
        return session

    def food_positions(self) -> list[Position]:
        return [e.position for e in self.world.of_kind(EntityKind.FOOD)]

    def to_dict(self) -> dict:
        """Serialize the simulation state to a dictionary."""
        last_tail = self.last_tail_position
        return {
            "arena": self.grid.to_dict(),
            "snake": self.snake.to_dict() if self.snake is not None else None,
            "food": [p.to_list() for p in self.food_positions()],
            "last_tail_position": (
                last_tail.to_list() if last_tail is not None else None
            ),
        }
