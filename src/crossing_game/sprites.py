"""Game entities: Sprite, Unit (enemies) and Player.

Positions are canvas pixels with the origin at the top-left corner of the
board. Units move one grid cell per command and snap onto their destination so
a move never overshoots, whatever the frame time.
"""

import logging
from typing import TYPE_CHECKING, Dict, List, NamedTuple, Optional, Tuple, Union

from .behaviors import Behavior
from .directions import Direction

if TYPE_CHECKING:
    from .rendering import Renderer
    from .resources import ResourceLoader


logger = logging.getLogger(__name__)

# Odometer pixels per animation frame
ANIMATION_STRIDE = 10.0
FRAMES_PER_DIRECTION = 4


class Frame(NamedTuple):
    """Source rectangle into a texture."""

    sx: int
    sy: int
    width: int
    height: int


FrameSet = Dict[Direction, List[Frame]]


def create_frame_set(frame_width: int, frame_height: int) -> FrameSet:
    """Slice a 4x4 walk-cycle sheet into a frame set.

    Sheet rows are, top to bottom: down, left, right, up. Each row holds the
    four frames of that direction's walk cycle.
    """
    order = (Direction.DOWN, Direction.LEFT, Direction.RIGHT, Direction.UP)
    return {
        direction: [
            Frame(col * frame_width, row * frame_height, frame_width, frame_height)
            for col in range(FRAMES_PER_DIRECTION)
        ]
        for row, direction in enumerate(order)
    }


class Sprite:
    """Textured rectangle with a position and a velocity.

    The render rectangle is the logical position shifted by (offset_x,
    offset_y); collisions only look at the logical position and the collision
    box size.
    """

    def __init__(
        self,
        texture: str,
        x: float,
        y: float,
        width: int,
        height: int,
        offset_x: float = 0.0,
        offset_y: float = 0.0,
        collision_width: float = 0.0,
        collision_height: float = 0.0,
    ):
        """Create sprite.

        Args:
            texture: Resource key of the sprite sheet
            x, y: Logical position
            width, height: Size the frame is scaled to when drawn
            offset_x, offset_y: Render offset from the logical position
            collision_width, collision_height: Collision box size
        """
        self.texture = texture
        self.x = float(x)
        self.y = float(y)
        self.width = width
        self.height = height
        self.offset_x = offset_x
        self.offset_y = offset_y
        self.frame = Frame(0, 0, width, height)
        self.vx = 0.0
        self.vy = 0.0
        self.collision_width = collision_width
        self.collision_height = collision_height

    @property
    def position(self) -> Tuple[float, float]:
        """Current position (x, y)."""
        return self.x, self.y

    @property
    def velocity(self) -> Tuple[float, float]:
        """Current velocity (vx, vy) in pixels per second."""
        return self.vx, self.vy

    @property
    def render_position(self) -> Tuple[float, float]:
        return self.x + self.offset_x, self.y + self.offset_y

    def render(self, renderer: "Renderer", resources: "ResourceLoader") -> None:
        """Draw the current frame; raises ResourceNotLoadedError for unknown textures."""
        image = resources.get(self.texture)
        rx, ry = self.render_position
        renderer.draw_image(image, self.frame, rx, ry, self.width, self.height)

    def update(self, dt: float) -> None:
        # Raw per-frame velocity; Unit replaces this with time-scaled motion.
        self.x += self.vx
        self.y += self.vy


class Unit(Sprite):
    """Sprite that moves one grid cell at a time and animates while walking.

    A unit is idle when both velocity components are zero. An idle unit runs
    its behavior (if any) once per update; the behavior may only issue
    set_move commands.
    """

    def __init__(
        self,
        texture: str,
        x: float,
        y: float,
        width: int,
        height: int,
        offset_x: float = 0.0,
        offset_y: float = 0.0,
        collision_width: float = 0.0,
        collision_height: float = 0.0,
        direction: Direction = Direction.DOWN,
        frame_set: Optional[FrameSet] = None,
        cell_size: Tuple[int, int] = (101, 83),
    ):
        """Create unit.

        Args:
            direction: Initial facing direction
            frame_set: Walk-cycle frames per direction. A single full-size
                frame is used for every direction if None.
            cell_size: (width, height) of one grid cell in pixels

        Remaining arguments are those of Sprite.
        """
        super().__init__(
            texture, x, y, width, height,
            offset_x=offset_x, offset_y=offset_y,
            collision_width=collision_width, collision_height=collision_height,
        )
        if frame_set is None:
            frame_set = {d: [Frame(0, 0, width, height)] * FRAMES_PER_DIRECTION for d in Direction}
        self.frame_set = frame_set
        self.direction = direction
        self.cell_width, self.cell_height = cell_size
        self.dest_x = self.x
        self.dest_y = self.y
        self.speed = 0.0  # grid cells per second
        self.last_move_distance = 0.0
        self.behavior: Optional[Behavior] = None
        self.frame = self._current_frame()

    def is_moving(self) -> bool:
        return self.vx != 0 or self.vy != 0

    @property
    def animation_index(self) -> int:
        """Walk-cycle index derived from the distance walked since the last stop."""
        return int(self.last_move_distance // ANIMATION_STRIDE) % FRAMES_PER_DIRECTION

    def set_move(self, direction: Union[Direction, str, None]) -> None:
        """Start a one-cell move. Ignored while moving or for unknown directions."""
        if self.is_moving():
            return
        direction = Direction.parse(direction)
        if direction is None:
            return

        self.direction = direction
        self.dest_x = self.x
        self.dest_y = self.y
        dx, dy = direction.vector
        if dx:
            self.dest_x += dx * self.cell_width
            self.vx = dx * self.speed * self.cell_width
        else:
            self.dest_y += dy * self.cell_height
            self.vy = dy * self.speed * self.cell_height

    def update(self, dt: float) -> None:
        """Advance position and animation by dt seconds."""
        if self.is_moving():
            step_x = self.vx * dt
            step_y = self.vy * dt

            # Snap instead of stepping past the destination. The y check only
            # runs when x did not snap this tick.
            if abs(self.x - self.dest_x) < abs(step_x):
                self.x = self.dest_x
                self.vx = 0.0
                self.last_move_distance = 0.0
            elif abs(self.y - self.dest_y) < abs(step_y):
                self.y = self.dest_y
                self.vy = 0.0
                self.last_move_distance = 0.0
            else:
                self.x += step_x
                self.y += step_y
                self.last_move_distance += abs(step_x) + abs(step_y)
        elif self.behavior is not None:
            self.behavior.run(self)

        self.frame = self._current_frame()

    def teleport(self, x: float, y: float) -> None:
        """Move instantly to (x, y) and stop."""
        self.x = self.dest_x = float(x)
        self.y = self.dest_y = float(y)
        self.vx = 0.0
        self.vy = 0.0
        self.last_move_distance = 0.0

    def _current_frame(self) -> Frame:
        return self.frame_set[self.direction][self.animation_index]


class Player(Unit):
    """Keyboard-driven unit that cannot leave the play area."""

    def __init__(
        self,
        texture: str,
        x: float,
        y: float,
        width: int,
        height: int,
        offset_x: float = 0.0,
        offset_y: float = 0.0,
        collision_width: float = 0.0,
        collision_height: float = 0.0,
        direction: Direction = Direction.DOWN,
        frame_set: Optional[FrameSet] = None,
        cell_size: Tuple[int, int] = (101, 83),
        bounds: Tuple[float, float] = (606, 498),
        release_clears_all: bool = False,
    ):
        """Create player.

        Args:
            bounds: (max_x, max_y) of the play area; the minimum is (0, 0)
            release_clears_all: Stop on any key release instead of falling
                back to another key that is still held

        Remaining arguments are those of Unit.
        """
        super().__init__(
            texture, x, y, width, height,
            offset_x=offset_x, offset_y=offset_y,
            collision_width=collision_width, collision_height=collision_height,
            direction=direction, frame_set=frame_set, cell_size=cell_size,
        )
        self.max_x, self.max_y = bounds
        self.release_clears_all = release_clears_all
        self._held: List[Direction] = []

    def set_move(self, direction: Union[Direction, str, None]) -> None:
        if self.is_moving():
            return
        direction = Direction.parse(direction)
        if direction is None:
            return
        if (
            (direction is Direction.LEFT and self.x > 0)
            or (direction is Direction.RIGHT and self.x < self.max_x)
            or (direction is Direction.UP and self.y > 0)
            or (direction is Direction.DOWN and self.y < self.max_y)
        ):
            super().set_move(direction)

    def handle_input(self, event_type: str, direction: Union[Direction, str, None]) -> None:
        """Apply a "press" or "release" of a direction key.

        A press keeps the player walking in that direction: the move is
        re-issued on every idle tick until the key is released.
        """
        direction = Direction.parse(direction)
        if direction is None:
            return

        if event_type == "press":
            if direction in self._held:
                self._held.remove(direction)
            self._held.append(direction)
        elif event_type == "release":
            if self.release_clears_all:
                self._held.clear()
            elif direction in self._held:
                self._held.remove(direction)
        else:
            logger.debug("Ignoring input event %r", event_type)
            return

        self.behavior = Behavior.hold(self._held[-1]) if self._held else None

    @property
    def held_directions(self) -> List[Direction]:
        return list(self._held)
