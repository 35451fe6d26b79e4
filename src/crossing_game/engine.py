"""Pygame host for the crossing game.

Opens the window, loads textures, forwards keyboard and mouse input, and
calls the Director once per frame with the real frame time. The HUD strip
under the board shows level, highest level and lives, plus a restart button.
"""

import logging
from typing import Optional

import pygame

from .config import GameConfig
from .director import Director
from .levels import LevelRegistry, texture_sizes
from .rendering import COLOR_BG, COLOR_WHITE, Renderer
from .resources import ResourceLoader


logger = logging.getLogger(__name__)

COLOR_HUD_TEXT = (229, 192, 123)
COLOR_BUTTON = (97, 175, 239)

RESTART_BUTTON_SIZE = (120, 32)


class CrossingEngine:
    """Main game engine coordinating all systems.

    Handles:
    - Game loop driven by the pygame clock
    - Resource loading
    - Keyboard and mouse input
    - HUD (level, highest level, lives, restart)
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """Initialize engine, load resources and start the first level.

        Args:
            config: Game configuration. Uses defaults if None.
        """
        self.config = config or GameConfig()
        self.config.validate()

        pygame.init()
        self.screen = pygame.display.set_mode(
            (self.config.screen_width, self.config.screen_height)
        )
        pygame.display.set_caption("Crossing")
        self.clock = pygame.time.Clock()

        self.resources = ResourceLoader(self.config.asset_dir)
        self.renderer = Renderer(self.screen)
        self.registry = LevelRegistry(self.config)
        self.director = Director(
            self.config,
            registry=self.registry,
            resources=self.resources,
            renderer=self.renderer,
        )

        hud_top = self.config.board.width
        w, h = RESTART_BUTTON_SIZE
        self.restart_rect = pygame.Rect(
            self.config.screen_width - w - 10,
            hud_top + (self.config.hud_height - h) // 2,
            w, h,
        )

        self.running = False

        sizes = texture_sizes(self.registry.levels, self.config.board)
        self.resources.on_ready(self.director.start)
        self.resources.load(sizes.keys(), placeholder_sizes=sizes)

    def handle_events(self) -> None:
        """Process pending pygame events."""
        for event in pygame.event.get():
            self.handle_event(event)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self.running = False
            elif event.key == pygame.K_r:
                self.director.restart()
            else:
                self.director.handle_key("press", event.key)
        elif event.type == pygame.KEYUP:
            self.director.handle_key("release", event.key)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.restart_rect.collidepoint(event.pos):
                self.director.restart()

    def update(self, dt: float) -> None:
        """Advance one frame and draw it (without flipping the display)."""
        self.director.tick(dt)
        self.render_hud()

    def render_hud(self) -> None:
        """Draw the scoreboard strip below the board."""
        board_height = self.config.board.width
        self.renderer.clear(COLOR_BG, (0, board_height, self.config.screen_width, self.config.hud_height))

        score = self.director.scoreboard
        text = f"Level: {score.level}    Highest: {score.highest}    Lives: {score.lives}"
        baseline = board_height + self.config.hud_height // 2 + 8
        self.renderer.fill_text(text, 12, baseline, size=30, color=COLOR_HUD_TEXT)

        self.renderer.fill_rect(self.restart_rect, COLOR_BUTTON, width=2)
        self.renderer.fill_text(
            "Restart", self.restart_rect.x + 22, self.restart_rect.y + 23, size=28, color=COLOR_WHITE,
        )

    def run(self) -> None:
        """Main game loop."""
        self.running = True
        self.clock.tick(self.config.fps)

        while self.running:
            dt = self.clock.tick(self.config.fps) / 1000.0
            self.handle_events()
            self.update(dt)
            pygame.display.flip()

        logger.info("Quit: %s", self.director.get_state())
        pygame.quit()
