"""Gymnasium environment wrapper for the crossing game.

Provides standard Gym API for agents and scripted play. One episode is one
attempt at a level: it terminates on a death, a completed crossing, or the
end of the session.
"""

from typing import Dict, Optional, Sequence, Tuple

import gymnasium
import numpy as np
import pygame
from gymnasium import spaces

from .config import GameConfig
from .director import Director, GamePhase
from .levels import LevelRegistry, LevelSpec, texture_sizes
from .rendering import Renderer
from .resources import ResourceLoader
from .directions import Direction
from .sprites import Player


# Action index -> held direction (None releases every key)
ACTIONS = (None, Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)

# State vector entries before the per-row lane readings
STATE_BASE = 11


class CrossingEnv(gymnasium.Env):
    """Gymnasium wrapper for the crossing game.

    Observation space (Dict):
        'rgb': uint8 array of shape (H, W, 3) - rendered board
        'state': float32 array of shape (11 + rows,) containing:
            [0-1] player position (x, y)
            [2-3] player velocity (vx, vy)
            [4]   player moving (0/1)
            [5]   current level
            [6]   extra lives
            [7]   paused (0/1)
            [8]   episode progress (steps / max_steps)
            [9]   level complete (0/1)
            [10]  player dying (0/1)
            [11:] per board row, signed x distance from the player to the
                  nearest enemy in that row (board width if the row is empty)

    Action space: Discrete(5) - hold none, up, down, left, right

    Reward = weighted sum of raw signals (stored in info['reward_signals']):
        goal:     1.0 when the crossing completes
        progress: rows climbed this step (negative when moving down)
        death:    1.0 when the player dies
        step:     1.0 every step
    """

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        obs_resolution: Tuple[int, int] = (256, 256),
        max_episode_steps: int = 3000,
        levels: Optional[Sequence[LevelSpec]] = None,
        reward_weights: Optional[Dict[str, float]] = None,
    ):
        super().__init__()

        self.config = config or GameConfig()
        self.config.validate()
        self.render_mode = render_mode
        self.obs_height, self.obs_width = obs_resolution
        self.max_episode_steps = max_episode_steps

        self.reward_weights = reward_weights or {
            "goal": 100.0,
            "progress": 1.0,
            "death": -50.0,
            "step": -0.01,
        }

        board = self.config.board
        self.action_space = spaces.Discrete(len(ACTIONS))
        self.observation_space = spaces.Dict({
            "rgb": spaces.Box(
                low=0, high=255,
                shape=(self.obs_height, self.obs_width, 3),
                dtype=np.uint8,
            ),
            "state": spaces.Box(
                low=-np.inf, high=np.inf,
                shape=(STATE_BASE + board.rows,),
                dtype=np.float32,
            ),
        })

        # Initialize pygame (caller sets SDL_VIDEODRIVER for headless)
        if not pygame.get_init():
            pygame.init()

        # Offscreen board surface
        self._surface = pygame.Surface((board.width, board.width))

        self._display = None
        if render_mode == "human":
            self._display = pygame.display.set_mode((board.width, board.width))
            pygame.display.set_caption("CrossingEnv")

        self._resources = ResourceLoader(self.config.asset_dir)
        registry = LevelRegistry(self.config, levels=levels)
        sizes = texture_sizes(registry.levels, board)
        self._resources.load(sizes.keys(), placeholder_sizes=sizes)

        self._director = Director(
            self.config,
            registry=registry,
            resources=self._resources,
            renderer=Renderer(self._surface),
        )

        self._episode_steps = 0
        self._held: Optional[Direction] = None
        self._held_player: Optional[Player] = None
        self._prev_player_y = 0.0
        self._dt = 1.0 / self.config.fps

    @property
    def director(self) -> Director:
        return self._director

    def reset(self, *, seed=None, options=None):
        super().reset(seed=seed)

        level = (options or {}).get("level")
        self._director.restart(level=level)

        self._episode_steps = 0
        self._held = None
        self._held_player = self._director.player
        self._prev_player_y = self._director.player.y if self._director.player else 0.0

        return self._get_obs(), self._get_info()

    def step(self, action):
        assert self._director.phase is not GamePhase.LOADING, "Must call reset() before step()"

        self._apply_action(ACTIONS[int(action)])

        deaths = self._director.deaths
        completed = self._director.levels_completed
        player = self._director.player

        self._director.update(self._dt)
        self._episode_steps += 1

        died = self._director.deaths > deaths
        finished = self._director.levels_completed > completed

        reward_signals = {
            "goal": 1.0 if finished else 0.0,
            "progress": self._progress(player),
            "death": 1.0 if died else 0.0,
            "step": 1.0,
        }
        reward = sum(
            self.reward_weights.get(k, 0.0) * v
            for k, v in reward_signals.items()
        )

        terminated = died or finished or self._director.is_over
        truncated = self._episode_steps >= self.max_episode_steps

        obs = self._get_obs()
        info = self._get_info()
        info["reward_signals"] = reward_signals

        if self.render_mode == "human":
            self.render()

        return obs, float(reward), bool(terminated), bool(truncated), info

    # ------------------------------------------------------------------
    # Action handling
    # ------------------------------------------------------------------

    def _apply_action(self, direction: Optional[Direction]) -> None:
        player = self._director.player
        if player is None:
            return
        if player is not self._held_player:
            # New level entities: nothing is held on them yet
            self._held = None
            self._held_player = player
        if direction is self._held:
            return
        if self._held is not None:
            player.handle_input("release", self._held)
        if direction is not None:
            player.handle_input("press", direction)
        self._held = direction

    def _progress(self, player: Optional[Player]) -> float:
        current = self._director.player
        if player is None or current is not player:
            self._prev_player_y = current.y if current else 0.0
            return 0.0
        rows = (self._prev_player_y - current.y) / self.config.board.cell_height
        self._prev_player_y = current.y
        return rows

    # ------------------------------------------------------------------
    # Observations
    # ------------------------------------------------------------------

    def _get_obs(self):
        if self.render_mode in ("rgb_array", "human"):
            rgb = self._render_frame()
        else:
            rgb = np.zeros(
                (self.obs_height, self.obs_width, 3), dtype=np.uint8
            )
        return {"rgb": rgb, "state": self._get_state_vector()}

    def _get_state_vector(self):
        board = self.config.board
        state = np.zeros(STATE_BASE + board.rows, dtype=np.float32)
        d = self._director

        player = d.player
        if player:
            state[0] = player.x
            state[1] = player.y
            state[2] = player.vx
            state[3] = player.vy
            state[4] = float(player.is_moving())

        state[5] = float(d.state.current_level)
        state[6] = float(d.state.extra_lives)
        state[7] = float(d.paused)
        state[8] = float(self._episode_steps) / max(self.max_episode_steps, 1)
        state[9] = float(d.phase is GamePhase.LEVEL_COMPLETE)
        state[10] = float(d.phase is GamePhase.DYING)

        lanes = state[STATE_BASE:]
        lanes[:] = board.width
        px = player.x if player else 0.0
        for enemy in d.enemies:
            row = int(round(enemy.y / board.cell_height))
            if 0 <= row < board.rows:
                offset = enemy.x - px
                if abs(offset) < abs(lanes[row]):
                    lanes[row] = offset

        return state

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render_frame(self):
        """Render current state to numpy array (H, W, 3) uint8."""
        self._director.render()
        scaled = pygame.transform.scale(
            self._surface, (self.obs_width, self.obs_height)
        )
        # surfarray gives (W, H, 3); transpose to (H, W, 3)
        array = pygame.surfarray.array3d(scaled)
        return np.transpose(array, (1, 0, 2)).astype(np.uint8)

    def render(self):
        if self.render_mode == "rgb_array":
            return self._render_frame()
        elif self.render_mode == "human" and self._display:
            self._director.render()
            self._display.blit(self._surface, (0, 0))
            pygame.display.flip()

    def _get_info(self):
        d = self._director
        info = {
            "episode_steps": self._episode_steps,
            "phase": d.phase.name.lower(),
            "current_level": d.state.current_level,
            "highest_level": d.state.highest_level,
            "extra_lives": d.state.extra_lives,
            "deaths": d.deaths,
            "levels_completed": d.levels_completed,
        }
        if d.player:
            info["player_position"] = d.player.position
        return info

    def close(self):
        if self._display:
            pygame.display.quit()
            self._display = None
