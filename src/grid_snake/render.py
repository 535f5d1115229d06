"""Render adapter: what the view layer needs to draw each entity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from grid_snake.entities import EntityKind

if TYPE_CHECKING:
    from grid_snake.session import GameSession

# Square size of each entity relative to one grid cell.
RELATIVE_SIZES: dict[EntityKind, float] = {
    EntityKind.HEAD: 0.8,
    EntityKind.BODY: 0.65,
    EntityKind.FOOD: 0.8,
}


@dataclass(frozen=True)
class Sprite:
    """Cell coordinates and relative size of one entity.

    Converting cells to screen pixels is left to the view layer.
    """

    entity_id: int
    kind: EntityKind
    x: int
    y: int
    size: float

    def to_dict(self) -> dict:
        return {
            "id": self.entity_id,
            "kind": self.kind.value,
            "x": self.x,
            "y": self.y,
            "size": self.size,
        }


def render_frame(session: GameSession) -> list[Sprite]:
    """Return one sprite per positioned entity, in spawn order."""
    return [
        Sprite(
            entity_id=e.entity_id,
            kind=e.kind,
            x=e.position.x,
            y=e.position.y,
            size=RELATIVE_SIZES[e.kind],
        )
        for e in session.world
    ]


def frame_to_dict(session: GameSession) -> dict:
    """Serialize a frame together with the arena it is drawn on."""
    return {
        "arena": session.grid.to_dict(),
        "sprites": [s.to_dict() for s in render_frame(session)],
    }
