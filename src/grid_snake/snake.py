"""Snake state: heading and the ordered list of segment entities."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from grid_snake.entities import Entity, EntityKind

if TYPE_CHECKING:
    from grid_snake.entities import World
    from grid_snake.grid import Position


class Direction(enum.Enum):
    """Cardinal headings with (dx, dy) unit steps. Up is +y."""

    LEFT = (-1, 0)
    RIGHT = (1, 0)
    UP = (0, 1)
    DOWN = (0, -1)

    def opposite(self) -> Direction:
        """Return the reverse heading."""
        return _OPPOSITES[self]

    @classmethod
    def from_name(cls, name: str) -> Direction:
        """Parse ``"left"``/``"UP"``/... into a direction."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown direction: {name!r}.") from None


_OPPOSITES: dict[Direction, Direction] = {
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
}


class Snake:
    """A snake as an ordered list of entity ids stored in a :class:`World`.

    The head is ``segments[0]`` and carries the heading; the tail is
    ``segments[-1]``.
    """

    def __init__(self, world: World, segments: list[int]) -> None:
        if len(segments) < 2:
            raise ValueError("Snake needs a head and at least one segment.")
        self.world = world
        self.segments = segments

    @classmethod
    def spawn(
        cls, world: World, position: Position, direction: Direction,
    ) -> Snake:
        """Create a head at *position* and one segment directly behind it."""
        head = world.spawn(EntityKind.HEAD, position, direction=direction)
        body = world.spawn(EntityKind.BODY, position.step(direction.opposite()))
        return cls(world, [head, body])

    @property
    def head(self) -> Entity:
        return self.world[self.segments[0]]

    @property
    def direction(self) -> Direction:
        return self.head.direction

    @direction.setter
    def direction(self, value: Direction) -> None:
        self.head.direction = value

    @property
    def tail(self) -> Entity:
        return self.world[self.segments[-1]]

    def __len__(self) -> int:
        return len(self.segments)

    def positions(self) -> list[Position]:
        """Return segment positions from head to tail."""
        return [self.world[eid].position for eid in self.segments]

    def append_segment(self, position: Position) -> int:
        """Add a body segment at the tail end and return its id."""
        eid = self.world.spawn(EntityKind.BODY, position)
        self.segments.append(eid)
        return eid

    def despawn(self) -> None:
        """Remove every segment from the world."""
        for eid in self.segments:
            self.world.despawn(eid)
        self.segments = []

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "body": [p.to_list() for p in self.positions()],
            "direction": self.direction.name.lower(),
            "length": len(self),
        }
