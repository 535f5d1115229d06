"""REST API route handlers for game lifecycle and input."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from grid_snake.server.models import (
    CreateGameRequest,
    GameSummary,
    InputRequest,
    InputResponse,
)

router = APIRouter(prefix="/games", tags=["games"])


def _get_manager(request: Request):
    return request.app.state.game_manager


@router.post("", status_code=201)
async def create_game(body: CreateGameRequest, request: Request) -> GameSummary:
    """Create a new game."""
    manager = _get_manager(request)
    try:
        game = manager.create_game(
            seed=body.seed,
            frame_rate_hz=body.frame_rate_hz,
            tail_follow=body.tail_follow,
            food_avoids_snake=body.food_avoids_snake,
        )
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return game.summary()


@router.get("")
async def list_games(request: Request) -> list[GameSummary]:
    """List registered games."""
    return _get_manager(request).list_games()


@router.get("/{game_id}")
async def get_game(game_id: str, request: Request) -> dict:
    """Get game metadata and full simulation state."""
    game = _get_manager(request).get_game(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="Game not found.")
    result = game.summary().model_dump(mode="json")
    async with game.lock:
        result["state"] = game.engine.get_state()
    return result


@router.post("/{game_id}/start", status_code=200)
async def start_game(game_id: str, request: Request) -> dict:
    """Start the game's frame loop."""
    manager = _get_manager(request)
    try:
        manager.start_game(game_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return {"status": "started", "game_id": game_id}


@router.post("/{game_id}/input")
async def set_input(
    game_id: str, body: InputRequest, request: Request,
) -> InputResponse:
    """Set the keys currently held for this game."""
    manager = _get_manager(request)
    try:
        direction = manager.set_pressed(game_id, body.pressed)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return InputResponse(
        game_id=game_id,
        pressed=direction.name.lower() if direction is not None else None,
    )


@router.delete("/{game_id}", status_code=200)
async def stop_game(game_id: str, request: Request) -> dict:
    """Stop the game and remove it from the registry."""
    try:
        await _get_manager(request).stop_game(game_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"status": "stopped", "game_id": game_id}
