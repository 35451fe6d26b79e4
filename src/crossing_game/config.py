"""Configuration system for the crossing game.

Board geometry, level lifecycle timings, session rules and input policy are
plain dataclasses grouped under GameConfig. Everything the Director and the
entities treat as a "constant" lives here so presets can vary it.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Tuple


@dataclass
class BoardConfig:
    """Grid geometry of the playing field."""

    cell_width: int = 101
    cell_height: int = 83
    cols: int = 7
    rows: int = 7

    # Row backgrounds from top to bottom
    ROW_TEXTURES: ClassVar[Tuple[str, ...]] = (
        "images/Stone Block.png",
        "images/Grass Block.png",
        "images/Grass Block.png",
        "images/Grass Block.png",
        "images/Grass Block.png",
        "images/Grass Block.png",
        "images/Stone Block.png",
    )

    @property
    def width(self) -> int:
        """Board width in pixels (707 for the default grid)."""
        return self.cols * self.cell_width

    @property
    def height(self) -> int:
        return self.rows * self.cell_height

    @property
    def max_x(self) -> int:
        """Rightmost x a player may stand on (board width minus one cell)."""
        return self.width - self.cell_width

    @property
    def max_y(self) -> int:
        """Lowest y a player may stand on (498 for the default grid)."""
        return (self.rows - 1) * self.cell_height

    @property
    def wrap_left(self) -> int:
        """x at which a left-sweeping enemy has fully left the board."""
        return -self.cell_width

    @property
    def wrap_right(self) -> int:
        """x at which a right-sweeping enemy has fully left the board."""
        return self.width

    def row_texture(self, row: int) -> str:
        return self.ROW_TEXTURES[min(row, len(self.ROW_TEXTURES) - 1)]


@dataclass
class TimingConfig:
    """Durations (seconds) of the level lifecycle pauses and banners."""

    intro_pause: float = 1.5
    intro_message: float = 1.5
    death_pause: float = 3.0
    death_message: float = 1.5
    death_reset_delay: float = 1.6
    complete_pause: float = 2.2
    complete_message: float = 2.0
    complete_reset_delay: float = 2.1


@dataclass
class SessionConfig:
    """Rules of a play session."""

    starting_level: int = 1
    extra_lives: int = 2


@dataclass
class InputConfig:
    """Keyboard handling policy.

    With release_clears_all the player stops on any key release, even when a
    different direction is still held. Otherwise the most recently pressed key
    that is still down keeps driving the player.
    """

    release_clears_all: bool = False


@dataclass
class GameConfig:
    """Complete game configuration combining all parameter groups."""

    board: BoardConfig = field(default_factory=BoardConfig)
    timing: TimingConfig = field(default_factory=TimingConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    input: InputConfig = field(default_factory=InputConfig)

    # Display settings
    fps: int = 60
    hud_height: int = 48
    asset_dir: str = "."

    @property
    def screen_width(self) -> int:
        return self.board.width

    @property
    def screen_height(self) -> int:
        return self.board.width + self.hud_height

    def validate(self) -> None:
        """Raise ValueError when the configuration cannot produce a playable game."""
        errors = []
        if self.board.cell_width <= 0 or self.board.cell_height <= 0:
            errors.append("cell size must be positive")
        if self.board.cols < 2 or self.board.rows < 2:
            errors.append("board needs at least 2x2 cells")
        if self.session.starting_level < 1:
            errors.append("starting_level is 1-based")
        if self.session.extra_lives < 0:
            errors.append("extra_lives must be >= 0")
        if self.fps <= 0:
            errors.append("fps must be positive")
        for name, value in vars(self.timing).items():
            if value < 0:
                errors.append(f"timing.{name} must be >= 0")
        if errors:
            raise ValueError(f"Invalid game config: {errors}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to nested dictionary."""
        return {
            "board": {
                "cell_width": self.board.cell_width,
                "cell_height": self.board.cell_height,
                "cols": self.board.cols,
                "rows": self.board.rows,
            },
            "timing": dict(vars(self.timing)),
            "session": dict(vars(self.session)),
            "input": {"release_clears_all": self.input.release_clears_all},
            "fps": self.fps,
            "hud_height": self.hud_height,
            "asset_dir": self.asset_dir,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GameConfig":
        """Create from dictionary; missing keys keep their defaults."""
        return cls(
            board=BoardConfig(**d.get("board", {})),
            timing=TimingConfig(**d.get("timing", {})),
            session=SessionConfig(**d.get("session", {})),
            input=InputConfig(**d.get("input", {})),
            fps=d.get("fps", 60),
            hud_height=d.get("hud_height", 48),
            asset_dir=d.get("asset_dir", "."),
        )


# Predefined configurations
CONFIGS = {
    # Balanced default with held-key tracking
    "default": GameConfig(),

    # Any key release stops the player
    "classic": GameConfig(input=InputConfig(release_clears_all=True)),

    # More lives, shorter banners
    "easy": GameConfig(
        session=SessionConfig(extra_lives=5),
        timing=TimingConfig(intro_pause=1.0, intro_message=1.0),
    ),

    # No spare lives
    "hardcore": GameConfig(session=SessionConfig(extra_lives=0)),
}
