"""Input adapter helpers: key precedence and reversal rejection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from grid_snake.snake import Direction

if TYPE_CHECKING:
    from collections.abc import Iterable

# When several keys are held, the first match in this order wins.
KEY_PRECEDENCE: tuple[Direction, ...] = (
    Direction.LEFT,
    Direction.RIGHT,
    Direction.DOWN,
    Direction.UP,
)


def pressed_direction(pressed: Iterable[Direction]) -> Direction | None:
    """Collapse the set of held keys into one requested direction."""
    held = set(pressed)
    for direction in KEY_PRECEDENCE:
        if direction in held:
            return direction
    return None


def parse_pressed(names: Iterable[str]) -> Direction | None:
    """Resolve key names such as ``["left", "up"]``.

    Raises ``ValueError`` for an unknown name.
    """
    return pressed_direction(Direction.from_name(n) for n in names)


def resolve_heading(
    current: Direction, requested: Direction | None,
) -> Direction:
    """Return the heading after a request, ignoring 180° reversals."""
    if requested is None or requested == current.opposite():
        return current
    return requested
