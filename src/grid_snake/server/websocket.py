"""WebSocket handler streaming frames and accepting held keys."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from grid_snake.server.game_manager import GameManager

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_manager(ws: WebSocket) -> GameManager:
    return ws.app.state.game_manager


@ws_router.websocket("/games/{game_id}/play")
async def play(websocket: WebSocket, game_id: str) -> None:
    """Send held keys as ``{"pressed": [...]}``, receive a frame per change."""
    manager = _get_manager(websocket)
    game = manager.get_game(game_id)
    if game is None:
        await websocket.close(code=4004, reason="Game not found.")
        return

    await websocket.accept()
    game.clients.append(websocket)
    logger.info("Client connected to game %s.", game_id)

    # Send an initial frame so the client can draw immediately.
    async with game.lock:
        payload = game.frame()
    await websocket.send_text(json.dumps(payload, separators=(",", ":")))

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue

            pressed = msg.get("pressed")
            if not isinstance(pressed, list) or not all(
                isinstance(name, str) for name in pressed
            ):
                continue

            try:
                manager.set_pressed(game_id, pressed)
            except (KeyError, ValueError):
                continue
    except WebSocketDisconnect:
        logger.info("Client disconnected from game %s.", game_id)
    finally:
        if websocket in game.clients:
            game.clients.remove(websocket)
