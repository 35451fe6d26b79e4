"""Scripted unit behaviors.

A behavior runs once per update while its unit is idle and may only issue
set_move commands (plus the wraparound teleport of the sweep behaviors). Each
behavior is a small tagged value so level tables can describe enemy AI as
data; the accelerating sweeps carry their own speed, which grows every time
the unit wraps around the board.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional

from .directions import Direction

if TYPE_CHECKING:
    from .config import BoardConfig
    from .sprites import Unit


class BehaviorKind(Enum):
    """Available behavior templates."""

    SWEEP_RIGHT = auto()
    SWEEP_LEFT = auto()
    SWEEP_RIGHT_ACCELERATING = auto()
    SWEEP_LEFT_ACCELERATING = auto()
    HOLD = auto()  # keep walking in one direction (held key)


_RIGHTWARD = (BehaviorKind.SWEEP_RIGHT, BehaviorKind.SWEEP_RIGHT_ACCELERATING)
_ACCELERATING = (BehaviorKind.SWEEP_RIGHT_ACCELERATING, BehaviorKind.SWEEP_LEFT_ACCELERATING)


@dataclass
class Behavior:
    """One behavior instance, owned by a single unit.

    Attributes:
        kind: Which template this is
        speed: Speed (cells/s) applied to the unit before each move, or None
            to leave the unit's speed alone
        direction: Walking direction for HOLD
        acceleration: Speed gained per wraparound (accelerating sweeps)
        max_speed: No acceleration once speed reaches this
        wrap_left, wrap_right: x coordinates where sweeping units leave the
            board and re-enter on the opposite side
    """

    kind: BehaviorKind
    speed: Optional[float] = None
    direction: Optional[Direction] = None
    acceleration: float = 0.6
    max_speed: float = 10.0
    wrap_left: float = -101.0
    wrap_right: float = 707.0

    @classmethod
    def hold(cls, direction: Direction) -> "Behavior":
        return cls(BehaviorKind.HOLD, direction=direction)

    @classmethod
    def sweep(
        cls,
        kind: BehaviorKind,
        speed: Optional[float] = None,
        board: Optional["BoardConfig"] = None,
    ) -> "Behavior":
        """Create a sweep behavior wrapping at the edges of board."""
        if kind is BehaviorKind.HOLD:
            raise ValueError("HOLD is not a sweep behavior")
        behavior = cls(kind, speed=speed)
        if board is not None:
            behavior.wrap_left = board.wrap_left
            behavior.wrap_right = board.wrap_right
        return behavior

    @property
    def accelerating(self) -> bool:
        return self.kind in _ACCELERATING

    def run(self, unit: "Unit") -> None:
        """Issue this tick's command for an idle unit."""
        if self.kind is BehaviorKind.HOLD:
            unit.set_move(self.direction)
            return

        if self.kind in _RIGHTWARD:
            direction = Direction.RIGHT
            wrapped = unit.x >= self.wrap_right
            if wrapped:
                unit.teleport(self.wrap_left, unit.y)
        else:
            direction = Direction.LEFT
            wrapped = unit.x <= self.wrap_left
            if wrapped:
                unit.teleport(self.wrap_right, unit.y)

        if wrapped and self.accelerating and self.speed is not None and self.speed < self.max_speed:
            self.speed += self.acceleration

        if self.speed is not None:
            unit.speed = self.speed
        unit.set_move(direction)
