"""Scheduler-pass engine composing the simulation step functions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from grid_snake import systems
from grid_snake.config import GameConfig
from grid_snake.session import GameSession
from grid_snake.timers import RepeatingTimer

if TYPE_CHECKING:
    from grid_snake.grid import Position
    from grid_snake.snake import Direction
    from grid_snake.systems import CollisionKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PassReport:
    """What happened during one scheduler pass."""

    moved: bool = False
    collisions: tuple[CollisionKind, ...] = ()
    eaten: int = 0
    grew: bool = False
    food_spawned: Position | None = None
    reset: bool = False

    @property
    def changed(self) -> bool:
        """True if any entity moved, appeared, or disappeared."""
        return (
            self.moved
            or self.eaten > 0
            or self.grew
            or self.food_spawned is not None
            or self.reset
        )


class GameEngine:
    """Single-session engine driven by a host scheduler.

    The host calls :meth:`update` once per frame with the elapsed time and
    the currently pressed direction. Two independent timers decide whether
    the movement and food-spawn steps run in that pass.
    """

    def __init__(self, config: GameConfig | None = None) -> None:
        self.config = config if config is not None else GameConfig()
        self.session = GameSession.new(self.config)
        self.movement_timer = RepeatingTimer(self.config.movement_interval)
        self.food_timer = RepeatingTimer(self.config.food_spawn_interval)

        self.passes = 0
        self.ticks = 0
        self.resets = 0

    def update(
        self, delta: float, requested: Direction | None = None,
    ) -> PassReport:
        """Advance both timers by *delta* seconds and run one pass."""
        move = self.movement_timer.tick(delta)
        spawn = self.food_timer.tick(delta)
        return self.run_pass(requested, move=move, spawn_food=spawn)

    def run_pass(
        self,
        requested: Direction | None = None,
        move: bool = False,
        spawn_food: bool = False,
    ) -> PassReport:
        """Run every due step of one pass in its fixed order.

        Input is resolved first so a turn is latched even when no move is
        due. Food is spawned after the eating check, so it cannot be eaten
        in the pass that created it. The game-over reset runs last: the
        respawned snake is never checked in the same pass, and food
        spawned in that pass is cleared along with everything else.
        """
        session = self.session
        systems.resolve_input(session, requested)

        outcome = systems.move_snake(session) if move else None
        collisions: tuple[CollisionKind, ...] = ()
        if outcome is not None:
            self.ticks += 1
            collisions = systems.detect_collisions(session, outcome)

        eaten = systems.eat_food(session)
        grew = systems.grow_snake(session)
        food = systems.spawn_food(session) if spawn_food else None
        reset = systems.handle_game_over(session)

        session.growth_events.clear()
        session.game_over_events.clear()

        self.passes += 1
        if reset:
            self.resets += 1
        return PassReport(
            moved=outcome is not None,
            collisions=collisions,
            eaten=eaten,
            grew=grew,
            food_spawned=food,
            reset=reset,
        )

    def step(self, requested: Direction | None = None) -> dict:
        """Run one movement pass and return the resulting state."""
        self.run_pass(requested, move=True)
        return self.get_state()

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        state = {
            "passes": self.passes,
            "ticks": self.ticks,
            "resets": self.resets,
        }
        state.update(self.session.to_dict())
        return state
