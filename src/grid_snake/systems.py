"""Step functions that advance a :class:`GameSession`.

Each function performs one stage of a scheduler pass. The engine calls
them in a fixed order; see :meth:`grid_snake.engine.GameEngine.run_pass`.
A session without a snake makes every snake-related step a no-op.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from grid_snake.controls import resolve_heading
from grid_snake.entities import EntityKind
from grid_snake.events import GameOverEvent, GrowthEvent
from grid_snake.snake import Snake

if TYPE_CHECKING:
    from grid_snake.grid import Position
    from grid_snake.session import GameSession
    from grid_snake.snake import Direction

logger = logging.getLogger(__name__)


class CollisionKind(enum.Enum):
    """Why a movement step ended the game."""

    BOUNDARY = "boundary"
    SELF = "self"


@dataclass(frozen=True)
class MoveOutcome:
    """Result of one movement step.

    ``snapshot`` holds every segment position, head to tail, from before
    the step.
    """

    new_head: Position
    snapshot: tuple[Position, ...]


def spawn_snake(session: GameSession) -> Snake:
    """Place a fresh two-segment snake at the configured spawn point."""
    cfg = session.config
    session.snake = Snake.spawn(
        session.world, cfg.spawn_position, cfg.spawn_heading,
    )
    return session.snake


def resolve_input(
    session: GameSession, requested: Direction | None,
) -> Direction | None:
    """Latch a requested direction onto the head unless it reverses it."""
    snake = session.snake
    if snake is None:
        return None
    snake.direction = resolve_heading(snake.direction, requested)
    return snake.direction


def move_snake(session: GameSession) -> MoveOutcome | None:
    """Advance the head one cell and pull every segment along behind it."""
    snake = session.snake
    if snake is None:
        return None

    snapshot = tuple(snake.positions())
    head = snake.head
    head.position = head.position.step(snake.direction)

    for eid, previous in zip(snake.segments[1:], snapshot, strict=False):
        session.world[eid].position = previous

    session.last_tail_position = snapshot[-1]
    return MoveOutcome(new_head=head.position, snapshot=snapshot)


def detect_collisions(
    session: GameSession, outcome: MoveOutcome,
) -> tuple[CollisionKind, ...]:
    """Queue a game-over event for each way the new head position is fatal."""
    causes: list[CollisionKind] = []
    if not session.grid.in_bounds(outcome.new_head):
        causes.append(CollisionKind.BOUNDARY)

    trail = outcome.snapshot
    # The tail only vacates its cell when no growth follows this tick.
    food_ahead = any(
        food.position == outcome.new_head
        for food in session.world.of_kind(EntityKind.FOOD)
    )
    if session.config.tail_follow and not food_ahead:
        trail = trail[:-1]
    if outcome.new_head in trail:
        causes.append(CollisionKind.SELF)

    for cause in causes:
        logger.debug(
            "Collision (%s) at %s.", cause.value, outcome.new_head.to_list(),
        )
        session.game_over_events.send(GameOverEvent())
    return tuple(causes)


def eat_food(session: GameSession) -> int:
    """Consume every food item under the head. Returns how many were eaten."""
    snake = session.snake
    if snake is None:
        return 0

    head_pos = snake.head.position
    eaten = 0
    for food in session.world.of_kind(EntityKind.FOOD):
        if food.position == head_pos:
            session.world.despawn(food.entity_id)
            session.growth_events.send(GrowthEvent())
            eaten += 1
    return eaten


def grow_snake(session: GameSession) -> bool:
    """Append one segment at the vacated tail cell if growth was queued."""
    if not session.growth_events.drain():
        return False
    snake = session.snake
    if snake is None:
        return False

    position = session.last_tail_position
    if position is None:
        # No movement since the snake spawned: stack on the current tail.
        position = snake.tail.position
    snake.append_segment(position)
    logger.debug("Snake grew to length %d.", len(snake))
    return True


def spawn_food(session: GameSession) -> Position | None:
    """Place one food item on a random cell and return its position."""
    if session.config.food_avoids_snake:
        occupied = [e.position for e in session.world]
        free = session.grid.free_cells(occupied)
        if not free:
            logger.warning("No free cells available for food spawning.")
            return None
        position = free[int(session.rng.integers(len(free)))]
    else:
        position = session.grid.random_cell(session.rng)

    session.world.spawn(EntityKind.FOOD, position)
    logger.debug("Food spawned at %s.", position.to_list())
    return position


def handle_game_over(session: GameSession) -> bool:
    """Tear down every entity and respawn the snake if the game ended."""
    if not session.game_over_events.drain():
        return False

    length = len(session.snake) if session.snake is not None else 0
    for entity in session.world.of_kind(
        EntityKind.FOOD, EntityKind.HEAD, EntityKind.BODY,
    ):
        session.world.despawn(entity.entity_id)
    session.snake = None
    session.last_tail_position = None

    spawn_snake(session)
    logger.info("Game over at length %d; snake respawned.", length)
    return True
