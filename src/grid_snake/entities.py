"""Entity arena holding snake segments and food items."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from grid_snake.grid import Position
    from grid_snake.snake import Direction


class EntityKind(enum.Enum):
    """Closed set of entity roles."""

    HEAD = "head"
    BODY = "body"
    FOOD = "food"


@dataclass
class Entity:
    """One positioned record in the world. Only heads carry a direction."""

    entity_id: int
    kind: EntityKind
    position: Position
    direction: Direction | None = None


class World:
    """Registry of entities keyed by stable integer ids.

    Ids are handed out from a counter and never reused, so a stale id
    simply stops resolving once its entity is despawned.
    """

    def __init__(self) -> None:
        self._entities: dict[int, Entity] = {}
        self._next_id = 0

    def spawn(
        self,
        kind: EntityKind,
        position: Position,
        direction: Direction | None = None,
    ) -> int:
        """Register a new entity and return its id."""
        eid = self._next_id
        self._next_id += 1
        self._entities[eid] = Entity(eid, kind, position, direction)
        return eid

    def despawn(self, entity_id: int) -> bool:
        """Remove an entity. Returns True if it existed."""
        return self._entities.pop(entity_id, None) is not None

    def get(self, entity_id: int) -> Entity | None:
        return self._entities.get(entity_id)

    def __getitem__(self, entity_id: int) -> Entity:
        return self._entities[entity_id]

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entities

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[Entity]:
        return iter(list(self._entities.values()))

    def of_kind(self, *kinds: EntityKind) -> list[Entity]:
        """Return entities of the given kinds in spawn order."""
        return [e for e in self._entities.values() if e.kind in kinds]
