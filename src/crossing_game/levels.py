"""Level tables and the level registry.

Levels are hand-authored: each LevelSpec lists its enemies by sprite template,
grid cell, speed and behavior. build_level turns a spec into live entities and
LevelRegistry hands them to the Director one level at a time.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import pygame

from .behaviors import Behavior, BehaviorKind
from .config import BoardConfig, GameConfig
from .directions import Direction
from .sprites import Player, Unit, create_frame_set


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpriteTemplate:
    """Visual and collision setup shared by every sprite of one kind."""

    texture: str
    width: int
    height: int
    offset_x: float
    offset_y: float
    collision_width: float
    collision_height: float
    frame_width: int
    frame_height: int
    direction: Direction = Direction.DOWN

    @property
    def sheet_size(self) -> Tuple[int, int]:
        """Size of the 4x4 walk-cycle sheet."""
        return 4 * self.frame_width, 4 * self.frame_height


PLAYER_TEMPLATE = SpriteTemplate(
    texture="images/Cat Girl.png",
    width=64, height=96, offset_x=18, offset_y=14,
    collision_width=57, collision_height=47,
    frame_width=32, frame_height=48,
)
PLAYER_SPEED = 1.5

ENEMY_TEMPLATES: Dict[str, SpriteTemplate] = {
    "ghoul": SpriteTemplate(
        texture="images/Goul.png",
        width=80, height=110, offset_x=10, offset_y=0,
        collision_width=72, collision_height=59,
        frame_width=40, frame_height=55,
    ),
    "murloc": SpriteTemplate(
        texture="images/Murloc.png",
        width=70, height=104, offset_x=10, offset_y=-1,
        collision_width=63, collision_height=59,
        frame_width=41, frame_height=61,
    ),
    "orc": SpriteTemplate(
        texture="images/Orc.png",
        width=73, height=110, offset_x=10, offset_y=-2,
        collision_width=65, collision_height=59,
        frame_width=55, frame_height=77,
    ),
    "werewolf": SpriteTemplate(
        texture="images/Werewolf.png",
        width=81, height=112, offset_x=10, offset_y=-7,
        collision_width=72, collision_height=59,
        frame_width=51, frame_height=70,
    ),
    "wolf": SpriteTemplate(
        texture="images/Wolf.png",
        width=104, height=83, offset_x=0, offset_y=25,
        collision_width=93, collision_height=59,
        frame_width=58, frame_height=46,
    ),
    "spider": SpriteTemplate(
        texture="images/Spider.png",
        width=80, height=67, offset_x=10, offset_y=40,
        collision_width=72, collision_height=59,
        frame_width=132, frame_height=112,
    ),
}

# Board tiles are drawn at natural size and overlap the row below
TILE_SIZE: Tuple[int, int] = (101, 171)

# Host key codes -> directions
KEY_DIRECTIONS: Dict[int, Direction] = {
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_UP: Direction.UP,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_a: Direction.LEFT,
    pygame.K_w: Direction.UP,
    pygame.K_d: Direction.RIGHT,
    pygame.K_s: Direction.DOWN,
}


@dataclass
class EnemySpec:
    """One enemy placement: template, grid cell, speed (cells/s), behavior."""

    template: str
    col: int
    row: int
    speed: float
    behavior: BehaviorKind


@dataclass
class LevelSpec:
    """Specification for a hand-authored level."""

    enemies: List[EnemySpec] = field(default_factory=list)
    player_start: Tuple[int, int] = (3, 6)  # (col, row)
    name: str = ""


def level_1() -> LevelSpec:
    """One fast murloc on the top lane, three lanes of slow ghouls."""
    enemies = [EnemySpec("murloc", 4, 1, 1.0, BehaviorKind.SWEEP_RIGHT)]
    for i in range(3):
        kind = BehaviorKind.SWEEP_LEFT if i == 1 else BehaviorKind.SWEEP_RIGHT
        for j in range(3):
            enemies.append(EnemySpec("ghoul", j * 2 + 1, i + 2, 0.5, kind))
    return LevelSpec(enemies=enemies, name="Graveyard")


def level_2() -> LevelSpec:
    """Wolves sweeping right, orcs sweeping left, on alternating lanes."""
    enemies = [EnemySpec("wolf", i * 2, i + 1, 2.5, BehaviorKind.SWEEP_RIGHT) for i in range(4)]
    enemies += [EnemySpec("orc", 7 - i * 2, i + 2, 1.8, BehaviorKind.SWEEP_LEFT) for i in range(4)]
    return LevelSpec(enemies=enemies, name="Warband")


def level_3() -> LevelSpec:
    """Werewolves that speed up every lap, and a wall of spiders with one gap."""
    enemies = [
        EnemySpec("werewolf", i * 2, i * 2 + 2, 2.2, BehaviorKind.SWEEP_RIGHT_ACCELERATING)
        for i in range(2)
    ]
    enemies += [
        EnemySpec("werewolf", 7 - i * 2, i * 2 + 3, 2.2, BehaviorKind.SWEEP_LEFT_ACCELERATING)
        for i in range(2)
    ]
    enemies += [
        EnemySpec("spider", i, 1, 1.0, BehaviorKind.SWEEP_LEFT)
        for i in range(7) if i != 3
    ]
    return LevelSpec(enemies=enemies, name="Full Moon")


# Levels run in this order
LEVELS: List[LevelSpec] = [level_1(), level_2(), level_3()]


def create_player(config: GameConfig, start: Tuple[int, int] = (3, 6)) -> Player:
    """Fresh player at the given start cell."""
    board = config.board
    t = PLAYER_TEMPLATE
    player = Player(
        t.texture,
        start[0] * board.cell_width,
        start[1] * board.cell_height,
        t.width, t.height,
        offset_x=t.offset_x, offset_y=t.offset_y,
        collision_width=t.collision_width, collision_height=t.collision_height,
        direction=t.direction,
        frame_set=create_frame_set(t.frame_width, t.frame_height),
        cell_size=(board.cell_width, board.cell_height),
        bounds=(board.max_x, board.max_y),
        release_clears_all=config.input.release_clears_all,
    )
    player.speed = PLAYER_SPEED
    return player


def create_enemy(spec: EnemySpec, board: BoardConfig) -> Unit:
    """Fresh enemy for spec with its own behavior instance."""
    try:
        t = ENEMY_TEMPLATES[spec.template]
    except KeyError:
        raise ValueError(f"Unknown enemy template: {spec.template}") from None

    unit = Unit(
        t.texture, 0, 0, t.width, t.height,
        offset_x=t.offset_x, offset_y=t.offset_y,
        collision_width=t.collision_width, collision_height=t.collision_height,
        direction=t.direction,
        frame_set=create_frame_set(t.frame_width, t.frame_height),
        cell_size=(board.cell_width, board.cell_height),
    )
    unit.teleport(spec.col * board.cell_width, spec.row * board.cell_height)
    unit.speed = spec.speed
    unit.behavior = Behavior.sweep(spec.behavior, speed=spec.speed, board=board)
    return unit


def build_level(spec: LevelSpec, config: GameConfig) -> Tuple[Player, List[Unit]]:
    """Create the player and enemies described by spec.

    Returns:
        (player, enemies) with enemies in spec order
    """
    enemies = [create_enemy(e, config.board) for e in spec.enemies]
    return create_player(config, spec.player_start), enemies


def texture_sizes(
    levels: Optional[Sequence[LevelSpec]] = None,
    board: Optional[BoardConfig] = None,
) -> Dict[str, Tuple[int, int]]:
    """Every texture key the game draws (for levels, LEVELS if None), mapped to its expected image size."""
    levels = LEVELS if levels is None else levels
    board = board or BoardConfig()
    sizes = {key: TILE_SIZE for key in board.ROW_TEXTURES}
    sizes[PLAYER_TEMPLATE.texture] = PLAYER_TEMPLATE.sheet_size
    for level in levels:
        for enemy in level.enemies:
            t = ENEMY_TEMPLATES[enemy.template]
            sizes[t.texture] = t.sheet_size
    return sizes


class LevelRegistry:
    """Builds each level's entities on request and routes keys to the player.

    Holds nothing between levels: clear() drops the entities and unbinds
    keyboard input.
    """

    def __init__(self, config: Optional[GameConfig] = None, levels: Optional[Sequence[LevelSpec]] = None):
        self.config = config or GameConfig()
        self.levels = list(LEVELS if levels is None else levels)
        self._player: Optional[Player] = None
        self._enemies: List[Unit] = []
        self._input_bound = False

    def __len__(self) -> int:
        return len(self.levels)

    def run(self, index: int) -> bool:
        """Set up level index (0-based). Returns False if there is no such level."""
        if not 0 <= index < len(self.levels):
            logger.info("No level at index %d", index)
            return False

        spec = self.levels[index]
        self._player, self._enemies = build_level(spec, self.config)
        self._input_bound = True
        logger.info(
            "Level %d (%s): %d enemies", index + 1, spec.name or "unnamed", len(self._enemies),
        )
        return True

    def clear(self) -> None:
        """Drop the current entities and stop forwarding input."""
        self._player = None
        self._enemies = []
        self._input_bound = False

    def get_player(self) -> Optional[Player]:
        return self._player

    def get_enemies(self) -> List[Unit]:
        return self._enemies

    @property
    def input_bound(self) -> bool:
        return self._input_bound

    def handle_key(self, event_type: str, key: int) -> None:
        """Forward a "press"/"release" of a host key to the player."""
        if not self._input_bound or self._player is None:
            return
        direction = KEY_DIRECTIONS.get(key)
        if direction is None:
            return
        self._player.handle_input(event_type, direction)
