"""In-memory game registry and the async frame loops that drive each game."""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field

from starlette.websockets import WebSocket, WebSocketState

from grid_snake.config import GameConfig
from grid_snake.controls import parse_pressed
from grid_snake.engine import GameEngine
from grid_snake.render import frame_to_dict
from grid_snake.server.models import GameStatus, GameSummary
from grid_snake.snake import Direction

logger = logging.getLogger(__name__)

_MAX_GAMES = 100


@dataclass
class GameInstance:
    """All state for a single hosted game."""

    game_id: str
    engine: GameEngine
    frame_rate_hz: int
    status: GameStatus = GameStatus.WAITING
    pressed: Direction | None = None
    clients: list[WebSocket] = field(default_factory=list)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    _task: asyncio.Task | None = field(default=None, repr=False)

    @property
    def frame_interval(self) -> float:
        return 1.0 / self.frame_rate_hz

    def frame(self) -> dict:
        """Render payload sent to clients."""
        payload = {
            "passes": self.engine.passes,
            "ticks": self.engine.ticks,
            "resets": self.engine.resets,
        }
        payload.update(frame_to_dict(self.engine.session))
        return payload

    def summary(self) -> GameSummary:
        return GameSummary(
            game_id=self.game_id,
            status=self.status,
            frame_rate_hz=self.frame_rate_hz,
            clients=len(self.clients),
        )


class GameManager:
    """Central registry managing all game instances."""

    def __init__(self, max_games: int = _MAX_GAMES) -> None:
        if max_games < 1:
            raise ValueError("max_games must be at least 1.")
        self._games: dict[str, GameInstance] = {}
        self._max_games = max_games

    def create_game(
        self,
        seed: int | None = None,
        frame_rate_hz: int = 60,
        tail_follow: bool = False,
        food_avoids_snake: bool = False,
    ) -> GameInstance:
        """Create a new game in the waiting state and return it."""
        if len(self._games) >= self._max_games:
            raise ValueError("Game limit reached. Stop a game first.")

        config = GameConfig(
            seed=seed,
            tail_follow=tail_follow,
            food_avoids_snake=food_avoids_snake,
        )
        game_id = uuid.uuid4().hex[:12]
        instance = GameInstance(
            game_id=game_id,
            engine=GameEngine(config),
            frame_rate_hz=frame_rate_hz,
        )
        self._games[game_id] = instance
        logger.info("Game %s created (%d Hz).", game_id, frame_rate_hz)
        return instance

    def get_game(self, game_id: str) -> GameInstance | None:
        return self._games.get(game_id)

    def list_games(self) -> list[GameSummary]:
        """Return summaries of all registered games."""
        return [g.summary() for g in self._games.values()]

    def set_pressed(self, game_id: str, names: list[str]) -> Direction | None:
        """Record the keys currently held for a game.

        Raises ``KeyError`` for an unknown game and ``ValueError`` for an
        unknown key name.
        """
        game = self._games.get(game_id)
        if game is None:
            raise KeyError(f"Game {game_id} not found.")
        game.pressed = parse_pressed(names)
        return game.pressed

    def start_game(self, game_id: str) -> None:
        """Start the frame loop of a waiting game."""
        game = self._games.get(game_id)
        if game is None:
            raise KeyError(f"Game {game_id} not found.")
        if game.status != GameStatus.WAITING:
            raise ValueError("Game is not in waiting state.")

        game.status = GameStatus.ACTIVE
        game._task = asyncio.create_task(self._frame_loop(game))
        logger.info("Game %s started.", game_id)

    async def stop_game(self, game_id: str) -> None:
        """Stop a game's frame loop, close its sockets and forget it."""
        game = self._games.pop(game_id, None)
        if game is None:
            raise KeyError(f"Game {game_id} not found.")
        game.status = GameStatus.FINISHED
        task = game._task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        await self._close_connections(game)
        logger.info("Game %s stopped.", game_id)

    async def _frame_loop(self, game: GameInstance) -> None:
        """Run one scheduler pass per frame, broadcasting changed frames."""
        last = time.monotonic()
        try:
            while game.status == GameStatus.ACTIVE:
                await asyncio.sleep(game.frame_interval)
                now = time.monotonic()
                delta, last = now - last, now
                async with game.lock:
                    report = game.engine.update(delta, game.pressed)
                    payload = game.frame() if report.changed else None
                if payload is not None:
                    await self._broadcast(game, payload)
        except asyncio.CancelledError:
            logger.info("Frame loop cancelled for game %s.", game.game_id)
        except Exception:
            logger.exception("Frame loop error in game %s.", game.game_id)
            game.status = GameStatus.FINISHED
            await self._close_connections(game)

    async def _close_connections(self, game: GameInstance) -> None:
        """Close any live client sockets for a finished game."""
        for ws in list(game.clients):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=1000, reason="Game finished.")
            except Exception:
                logger.warning(
                    "Failed closing client socket in game %s.", game.game_id,
                )
        game.clients.clear()

    async def _broadcast(self, game: GameInstance, payload: dict) -> None:
        """Send a frame to all connected clients."""
        text = json.dumps(payload, separators=(",", ":"))
        dead: list[WebSocket] = []

        # Iterate over a snapshot so disconnect handlers can mutate the
        # live client list without affecting this send loop.
        for ws in list(game.clients):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(text)
            except Exception:
                dead.append(ws)

        for ws in dead:
            if ws in game.clients:
                game.clients.remove(ws)

    async def cleanup(self) -> None:
        """Cancel all running frame loops."""
        tasks = [
            g._task for g in self._games.values()
            if g._task and not g._task.done()
        ]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("GameManager cleanup complete.")
