"""Grid movement directions."""

from enum import Enum
from typing import Optional, Tuple, Union


class Direction(Enum):
    """Movement direction; values match the host-neutral key names."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def parse(cls, value: Union["Direction", str, None]) -> Optional["Direction"]:
        """Return the Direction for value, or None if it names no direction."""
        if isinstance(value, Direction):
            return value
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def vector(self) -> Tuple[int, int]:
        """Unit step (dx, dy) in grid cells."""
        return _VECTORS[self]


_VECTORS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}
