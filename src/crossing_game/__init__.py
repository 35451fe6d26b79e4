"""crossing-game: lane crossing arcade game on pygame.

A player crosses a board of lanes patrolled by scripted enemies, level by
level, with a small pool of extra lives. Includes a Gymnasium environment and
scripted policies for headless play.
"""

from .config import BoardConfig, TimingConfig, SessionConfig, InputConfig, GameConfig, CONFIGS
from .directions import Direction
from .sprites import Frame, Sprite, Unit, Player, create_frame_set
from .behaviors import Behavior, BehaviorKind
from .levels import LevelSpec, EnemySpec, LevelRegistry, LEVELS, build_level
from .director import Director, GamePhase, SessionState, Message, collides, reached_goal
from .resources import ResourceLoader, ResourceNotLoadedError

__all__ = [
    "BoardConfig",
    "TimingConfig",
    "SessionConfig",
    "InputConfig",
    "GameConfig",
    "CONFIGS",
    "Direction",
    "Frame",
    "Sprite",
    "Unit",
    "Player",
    "create_frame_set",
    "Behavior",
    "BehaviorKind",
    "LevelSpec",
    "EnemySpec",
    "LevelRegistry",
    "LEVELS",
    "build_level",
    "Director",
    "GamePhase",
    "SessionState",
    "Message",
    "collides",
    "reached_goal",
    "ResourceLoader",
    "ResourceNotLoadedError",
]
