"""Pydantic models for API request/response schemas."""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field


class GameStatus(str, enum.Enum):
    """Lifecycle states for a game instance."""

    WAITING = "waiting"
    ACTIVE = "active"
    FINISHED = "finished"


class CreateGameRequest(BaseModel):
    """Request body for POST /games."""

    seed: int | None = None
    frame_rate_hz: int = Field(default=60, ge=1, le=240)
    tail_follow: bool = False
    food_avoids_snake: bool = False


class InputRequest(BaseModel):
    """Request body for POST /games/{game_id}/input.

    Lists the keys currently held; an empty list releases them all.
    """

    pressed: list[str] = Field(default_factory=list, max_length=4)


class GameSummary(BaseModel):
    """Compact game info for list endpoints."""

    game_id: str
    status: GameStatus
    frame_rate_hz: int
    clients: int


class InputResponse(BaseModel):
    """The direction the host will feed to the next pass."""

    game_id: str
    pressed: str | None
