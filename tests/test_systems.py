"""Tests for the per-pass step functions."""

import logging

import pytest

from grid_snake import systems
from grid_snake.config import GameConfig
from grid_snake.entities import EntityKind
from grid_snake.events import GameOverEvent, GrowthEvent
from grid_snake.grid import Position
from grid_snake.session import GameSession
from grid_snake.snake import Direction, Snake
from grid_snake.systems import CollisionKind


def _session(**overrides) -> GameSession:
    return GameSession.new(GameConfig(seed=0, **overrides))


def _place(session, cells, direction):
    """Replace the session's snake with one covering *cells*, head first."""
    session.snake.despawn()
    world = session.world
    head = world.spawn(EntityKind.HEAD, Position(*cells[0]), direction)
    rest = [world.spawn(EntityKind.BODY, Position(*c)) for c in cells[1:]]
    session.snake = Snake(world, [head, *rest])
    return session.snake


def _food(session, x, y):
    return session.world.spawn(EntityKind.FOOD, Position(x, y))


class TestSpawnSnake:
    def test_initial_state(self):
        session = _session()
        assert session.snake.positions() == [Position(3, 3), Position(3, 2)]
        assert session.snake.direction == Direction.UP
        assert session.last_tail_position is None


class TestResolveInput:
    def test_turn_accepted(self):
        session = _session()
        assert systems.resolve_input(session, Direction.LEFT) == Direction.LEFT
        assert session.snake.direction == Direction.LEFT

    def test_reversal_rejected(self):
        session = _session()
        systems.resolve_input(session, Direction.DOWN)
        assert session.snake.direction == Direction.UP

    def test_no_request(self):
        session = _session()
        systems.resolve_input(session, None)
        assert session.snake.direction == Direction.UP


class TestMoveSnake:
    def test_body_follows_head(self):
        session = _session()
        snake = _place(session, [(3, 3), (3, 2), (3, 1), (4, 1)], Direction.UP)
        before = snake.positions()

        outcome = systems.move_snake(session)

        after = snake.positions()
        assert after[0] == before[0].step(Direction.UP)
        for i in range(1, len(before)):
            assert after[i] == before[i - 1]
        assert session.last_tail_position == before[-1]
        assert outcome.new_head == Position(3, 4)
        assert outcome.snapshot == tuple(before)

    def test_moves_along_heading(self):
        session = _session()
        session.snake.direction = Direction.RIGHT
        systems.move_snake(session)
        assert session.snake.positions() == [Position(4, 3), Position(3, 3)]

    def test_length_unchanged(self):
        session = _session()
        systems.move_snake(session)
        assert len(session.snake) == 2


class TestDetectCollisions:
    def test_in_bounds_no_collision(self):
        session = _session()
        outcome = systems.move_snake(session)
        assert systems.detect_collisions(session, outcome) == ()
        assert len(session.game_over_events) == 0

    @pytest.mark.parametrize(
        ("cells", "direction"),
        [
            ([(0, 3), (1, 3)], Direction.LEFT),
            ([(9, 3), (8, 3)], Direction.RIGHT),
            ([(3, 0), (3, 1)], Direction.DOWN),
            ([(3, 9), (3, 8)], Direction.UP),
        ],
    )
    def test_boundary(self, cells, direction):
        session = _session()
        _place(session, cells, direction)
        outcome = systems.move_snake(session)
        causes = systems.detect_collisions(session, outcome)
        assert causes == (CollisionKind.BOUNDARY,)
        assert len(session.game_over_events) == 1

    def test_self_collision(self):
        session = _session()
        # Head turns up into the body segment at (2, 3).
        _place(
            session,
            [(2, 2), (3, 2), (3, 3), (2, 3), (1, 3)],
            Direction.UP,
        )
        outcome = systems.move_snake(session)
        assert systems.detect_collisions(session, outcome) == (
            CollisionKind.SELF,
        )

    def test_vacating_tail_counts_as_occupied(self):
        session = _session()
        _place(session, [(2, 2), (3, 2), (3, 3), (2, 3)], Direction.UP)
        outcome = systems.move_snake(session)
        assert systems.detect_collisions(session, outcome) == (
            CollisionKind.SELF,
        )

    def test_tail_follow_allows_vacating_tail(self):
        session = _session(tail_follow=True)
        _place(session, [(2, 2), (3, 2), (3, 3), (2, 3)], Direction.UP)
        outcome = systems.move_snake(session)
        assert systems.detect_collisions(session, outcome) == ()

    def test_tail_follow_still_detects_body(self):
        session = _session(tail_follow=True)
        _place(
            session,
            [(2, 2), (3, 2), (3, 3), (2, 3), (1, 3)],
            Direction.UP,
        )
        outcome = systems.move_snake(session)
        assert CollisionKind.SELF in systems.detect_collisions(
            session, outcome,
        )


    def test_tail_follow_blocked_when_food_on_tail(self):
        session = _session(tail_follow=True)
        _place(session, [(2, 2), (3, 2), (3, 3), (2, 3)], Direction.UP)
        _food(session, 2, 3)
        outcome = systems.move_snake(session)
        assert systems.detect_collisions(session, outcome) == (
            CollisionKind.SELF,
        )


class TestEatAndGrow:
    def test_eat_queues_growth_and_removes_food(self):
        session = _session()
        _food(session, 3, 4)
        systems.move_snake(session)
        assert systems.eat_food(session) == 1
        assert session.food_positions() == []
        assert len(session.growth_events) == 1

    def test_no_food_no_growth(self):
        session = _session()
        _food(session, 0, 0)
        systems.move_snake(session)
        assert systems.eat_food(session) == 0
        assert not systems.grow_snake(session)
        assert len(session.snake) == 2

    def test_grow_appends_at_vacated_tail(self):
        session = _session()
        _food(session, 3, 4)
        systems.move_snake(session)
        systems.eat_food(session)
        assert systems.grow_snake(session)
        assert session.snake.positions() == [
            Position(3, 4), Position(3, 3), Position(3, 2),
        ]

    def test_grow_at_most_once_per_pass(self):
        session = _session()
        systems.move_snake(session)
        for _ in range(3):
            session.growth_events.send(GrowthEvent())
        assert systems.grow_snake(session)
        assert len(session.snake) == 3
        assert len(session.growth_events) == 0
        assert not systems.grow_snake(session)

    def test_stacked_food_grows_once(self):
        session = _session()
        _food(session, 3, 4)
        _food(session, 3, 4)
        systems.move_snake(session)
        assert systems.eat_food(session) == 2
        systems.grow_snake(session)
        assert len(session.snake) == 3

    def test_grow_before_any_move_uses_tail(self):
        session = _session()
        session.growth_events.send(GrowthEvent())
        systems.grow_snake(session)
        assert session.snake.positions()[-1] == Position(3, 2)


class TestHandleGameOver:
    def test_no_event_no_reset(self):
        session = _session()
        head_id = session.snake.segments[0]
        assert not systems.handle_game_over(session)
        assert session.snake.segments[0] == head_id

    def test_full_reset(self):
        session = _session()
        _place(session, [(7, 7), (7, 6), (7, 5), (6, 5)], Direction.RIGHT)
        _food(session, 1, 1)
        _food(session, 2, 2)
        session.last_tail_position = Position(6, 4)
        session.game_over_events.send(GameOverEvent())

        assert systems.handle_game_over(session)

        assert len(session.snake) == 2
        assert session.snake.positions() == [Position(3, 3), Position(3, 2)]
        assert session.snake.direction == Direction.UP
        assert session.food_positions() == []
        assert session.last_tail_position is None
        assert len(session.world) == 2

    def test_duplicate_events_coalesce(self):
        session = _session()
        session.game_over_events.send(GameOverEvent())
        session.game_over_events.send(GameOverEvent())
        assert systems.handle_game_over(session)
        assert len(session.world) == 2
        assert not systems.handle_game_over(session)


class TestMissingSnake:
    def test_steps_are_noops(self):
        session = _session()
        session.snake.despawn()
        session.snake = None
        _food(session, 3, 3)

        assert systems.resolve_input(session, Direction.LEFT) is None
        assert systems.move_snake(session) is None
        assert systems.eat_food(session) == 0
        session.growth_events.send(GrowthEvent())
        assert not systems.grow_snake(session)
        assert len(session.food_positions()) == 1


class TestSpawnFood:
    def test_spawns_in_bounds(self):
        session = _session()
        for _ in range(20):
            pos = systems.spawn_food(session)
            assert session.grid.in_bounds(pos)
        assert len(session.food_positions()) == 20

    def test_deterministic_for_seed(self):
        a = systems.spawn_food(_session())
        b = systems.spawn_food(_session())
        assert a == b

    def test_may_land_on_snake_by_default(self):
        session = _session(arena_width=2, arena_height=2, spawn_x=0, spawn_y=1)
        snake_cells = set(session.snake.positions())
        spawned = [systems.spawn_food(session) for _ in range(50)]
        assert any(p in snake_cells for p in spawned)

    def test_avoids_snake_when_enabled(self):
        session = _session(
            arena_width=2, arena_height=2, spawn_x=0, spawn_y=1,
            food_avoids_snake=True,
        )
        snake_cells = set(session.snake.positions())
        first = systems.spawn_food(session)
        second = systems.spawn_food(session)
        assert first not in snake_cells
        assert second not in snake_cells
        assert first != second

    def test_no_free_cell(self, caplog):
        session = _session(
            arena_width=2, arena_height=2, spawn_x=0, spawn_y=1,
            food_avoids_snake=True,
        )
        systems.spawn_food(session)
        systems.spawn_food(session)
        with caplog.at_level(logging.WARNING):
            assert systems.spawn_food(session) is None
        assert "No free cells" in caplog.text
        assert len(session.food_positions()) == 2
