"""Game director: session state, level lifecycle and the per-frame update.

The Director owns the session (level, lives, pause, banner) and runs the
update -> collide -> goal cycle on the entities the LevelRegistry builds.
Every timed effect (pause, banner expiry, scheduled reset) is a deadline on
the session clock, checked at the start of each update, so the state machine
only changes inside update(), restart() and start().
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

from .config import GameConfig
from .levels import LevelRegistry
from .rendering import COLOR_BLACK, COLOR_RED, COLOR_WHITE, Color, Renderer
from .resources import ResourceLoader
from .sprites import Player, Sprite, Unit


logger = logging.getLogger(__name__)


class GamePhase(Enum):
    LOADING = auto()
    INTRO = auto()
    PLAYING = auto()
    DYING = auto()
    LEVEL_COMPLETE = auto()
    WON = auto()
    LOST = auto()


TERMINAL_PHASES = (GamePhase.WON, GamePhase.LOST)


@dataclass
class Message:
    """Banner text drawn over the board.

    expires_at is a session-clock time; None keeps the message until it is
    replaced.
    """

    text: str
    x: float
    y: float
    size: int = 72
    color: Color = COLOR_RED
    expires_at: Optional[float] = None


@dataclass
class Scoreboard:
    """Values shown in the HUD. Refreshed by reset(), not continuously."""

    level: int = 0
    highest: int = 0
    lives: int = 0


@dataclass
class SessionState:
    """Top-level mutable state of a play session."""

    current_level: int = 1
    highest_level: int = 0
    extra_lives: int = 2
    clock: float = 0.0
    pause_until: float = 0.0
    message: Optional[Message] = None
    reset_at: Optional[float] = None

    @property
    def paused(self) -> bool:
        return self.clock < self.pause_until

    @property
    def pause_remaining(self) -> float:
        return max(0.0, self.pause_until - self.clock)


def collides(a: Sprite, b: Sprite) -> bool:
    """Box overlap test on logical positions, using the smaller box per axis.

    Strict: boxes that exactly touch do not collide.
    """
    return (
        abs(a.x - b.x) < min(a.collision_width, b.collision_width)
        and abs(a.y - b.y) < min(a.collision_height, b.collision_height)
    )


def reached_goal(player: Player) -> bool:
    """Player stands on the top row."""
    return player.y == 0


class Director:
    """Drives a play session.

    Handles:
    - Session clock, pauses and banners
    - Entity updates, collision and goal checks
    - Death, level completion, win and loss transitions
    - Drawing the board, entities and banner
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        registry: Optional[LevelRegistry] = None,
        resources: Optional[ResourceLoader] = None,
        renderer: Optional[Renderer] = None,
    ):
        """Create director in the LOADING phase.

        Args:
            config: Game configuration. Uses defaults if None.
            registry: Level source. Built from config if None.
            resources: Texture source for render(). Nothing is drawn if None.
            renderer: Drawing target for render(). Nothing is drawn if None.
        """
        self.config = config or GameConfig()
        self.registry = registry or LevelRegistry(self.config)
        self.resources = resources
        self.renderer = renderer

        self.state = SessionState(
            current_level=self.config.session.starting_level,
            extra_lives=self.config.session.extra_lives,
        )
        self.scoreboard = Scoreboard()
        self.phase = GamePhase.LOADING

        self.player: Optional[Player] = None
        self.enemies: List[Unit] = []

        # Event counters, read by agents and tests
        self.deaths = 0
        self.levels_completed = 0

    # ------------------------------------------------------------------
    # Session control
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Leave LOADING and set up the current level. Use as the resources-ready callback."""
        logger.info("Session started at level %d", self.state.current_level)
        self.reset()

    def restart(self, level: Optional[int] = None) -> None:
        """Back to the starting level (or level) with full lives; keeps the highest level.

        Raises:
            ValueError: level is below 1
        """
        if level is not None and level < 1:
            raise ValueError(f"level is 1-based, got {level}")
        s = self.state
        s.pause_until = s.clock
        s.message = None
        s.reset_at = None
        s.current_level = self.config.session.starting_level if level is None else level
        s.extra_lives = self.config.session.extra_lives
        logger.info("Restart at level %d", s.current_level)
        self.reset()

    def reset(self) -> None:
        """Tear down the level and build the next one, or end the session."""
        s = self.state
        self.registry.clear()
        self.player = None
        self.enemies = []

        if s.extra_lives < 0:
            self.show_message("YOU LOST!", 110, 285, -1, size=72, color=COLOR_BLACK)
            self.phase = GamePhase.LOST
            logger.info("Session lost (highest level %d)", s.highest_level)
            return

        self.scoreboard.highest = s.highest_level
        self.scoreboard.lives = s.extra_lives

        if not self.registry.run(s.current_level - 1):
            self.show_message("YOU WON!", 195, 292, -1, size=96, color=COLOR_WHITE)
            self.phase = GamePhase.WON
            logger.info("Session won (highest level %d)", s.highest_level)
            return

        timing = self.config.timing
        self.scoreboard.level = s.current_level
        self.pause(timing.intro_pause)
        self.show_message(f"LEVEL {s.current_level}", 265, 285, timing.intro_message)
        self.player = self.registry.get_player()
        self.enemies = self.registry.get_enemies()
        self.phase = GamePhase.INTRO

    def pause(self, seconds: float) -> None:
        """Stop entity updates for seconds; overlapping pauses end at the latest deadline."""
        s = self.state
        s.pause_until = max(s.pause_until, s.clock + seconds)

    def show_message(
        self,
        text: str,
        x: float,
        y: float,
        seconds: float,
        size: int = 72,
        color: Color = COLOR_RED,
    ) -> None:
        """Replace the banner. Negative seconds keeps it until replaced."""
        expires_at = None if seconds < 0 else self.state.clock + seconds
        self.state.message = Message(text, x, y, size=size, color=color, expires_at=expires_at)

    def schedule_reset(self, delay: float) -> None:
        """Run reset() after delay seconds; replaces any reset already pending."""
        self.state.reset_at = self.state.clock + delay

    def handle_key(self, event_type: str, key: int) -> None:
        self.registry.handle_key(event_type, key)

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def tick(self, dt: float) -> None:
        """One host frame: update, then always render."""
        self.update(dt)
        self.render()

    def update(self, dt: float) -> None:
        """Advance the session by dt seconds."""
        if self.phase is GamePhase.LOADING:
            return

        self.state.clock += dt
        self._process_deadlines()

        if self.state.paused or self.state.reset_at is not None:
            return
        if self.player is None or not self.enemies:
            return

        self._update_entities(dt)
        if self.check_collisions():
            return
        self.check_goal()

    def _process_deadlines(self) -> None:
        s = self.state
        if s.reset_at is not None and s.clock >= s.reset_at:
            s.reset_at = None
            self.reset()

        if s.message and s.message.expires_at is not None and s.clock >= s.message.expires_at:
            s.message = None

        if self.phase is GamePhase.INTRO and not s.paused:
            self.phase = GamePhase.PLAYING

    def _update_entities(self, dt: float) -> None:
        self.player.update(dt)
        for enemy in self.enemies:
            enemy.update(dt)

    def check_collisions(self) -> bool:
        """Handle the first enemy touching the player. Returns True on a death."""
        for enemy in self.enemies:
            if collides(enemy, self.player):
                timing = self.config.timing
                self.state.extra_lives -= 1
                self.deaths += 1
                self.phase = GamePhase.DYING
                self.pause(timing.death_pause)
                self.show_message("YOU DIED", 125, 285, timing.death_message)
                self.schedule_reset(timing.death_reset_delay)
                logger.info(
                    "Player died on level %d at (%.0f, %.0f), %d extra lives left",
                    self.state.current_level, self.player.x, self.player.y, self.state.extra_lives,
                )
                return True
        return False

    def check_goal(self) -> bool:
        """Handle the player reaching the top row. Returns True on completion."""
        if not reached_goal(self.player):
            return False

        s = self.state
        timing = self.config.timing
        if s.highest_level < s.current_level:
            s.highest_level = s.current_level
        logger.info("Level %d complete", s.current_level)
        s.current_level += 1
        self.levels_completed += 1
        self.phase = GamePhase.LEVEL_COMPLETE
        self.pause(timing.complete_pause)
        self.show_message("LEVEL COMPLETE", 155, 285, timing.complete_message, color=COLOR_WHITE)
        self.schedule_reset(timing.complete_reset_delay)
        return True

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self) -> None:
        """Draw board, entities and banner."""
        if self.renderer is None or self.resources is None:
            return

        board = self.config.board
        self.renderer.clear(rect=(0, 0, board.width, board.width))
        if self.phase is GamePhase.LOADING:
            return

        for row in range(board.rows):
            tile = self.resources.get(board.row_texture(row))
            for col in range(board.cols):
                self.renderer.draw_tile(tile, col * board.cell_width, row * board.cell_height)

        if self.player:
            self.player.render(self.renderer, self.resources)
        for enemy in self.enemies:
            enemy.render(self.renderer, self.resources)

        message = self.state.message
        if message:
            self.renderer.fill_text(message.text, message.x, message.y, message.size, message.color)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def paused(self) -> bool:
        return self.state.paused

    @property
    def is_over(self) -> bool:
        return self.phase in TERMINAL_PHASES

    def get_state(self) -> dict:
        """Snapshot of the session for logging and agents."""
        s = self.state
        state = {
            "phase": self.phase.name.lower(),
            "current_level": s.current_level,
            "highest_level": s.highest_level,
            "extra_lives": s.extra_lives,
            "paused": s.paused,
            "message": s.message.text if s.message else None,
            "deaths": self.deaths,
            "levels_completed": self.levels_completed,
        }
        if self.player:
            state["player_position"] = self.player.position
            state["player_moving"] = self.player.is_moving()
        return state
