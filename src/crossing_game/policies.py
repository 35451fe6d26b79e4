"""Scripted policies for automated play.

Each policy takes an observation and returns an action index compatible with
CrossingEnv's action space.
"""

import numpy as np
from typing import Dict, Optional

from .gym_env import ACTIONS, STATE_BASE
from .directions import Direction


NOOP = 0
UP = ACTIONS.index(Direction.UP)
DOWN = ACTIONS.index(Direction.DOWN)


class BasePolicy:
    """Base class for scripted policies."""

    name: str = "base"

    def __call__(self, obs: Dict[str, np.ndarray]) -> int:
        return self.act(obs)

    def act(self, obs: Dict[str, np.ndarray]) -> int:
        raise NotImplementedError

    def reset(self):
        """Called at the start of each episode."""
        pass


class RandomPolicy(BasePolicy):
    """Uniform random actions each step.

    Broad state coverage, many deaths, good baseline.
    """

    name = "random"

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng or np.random.default_rng()

    def act(self, obs):
        return int(self.rng.integers(0, len(ACTIONS)))


class RushPolicy(BasePolicy):
    """Hold up and never look at the lanes."""

    name = "rush"

    def act(self, obs):
        return UP


class CautiousPolicy(BasePolicy):
    """Step up only when the lane above is clear, back off when threatened.

    Reads the per-row enemy distances from the state vector.
    """

    name = "cautious"

    def __init__(self, safe_distance: float = 160.0, cell_height: float = 83.0):
        self.safe_distance = safe_distance
        self.cell_height = cell_height

    def act(self, obs):
        state = obs["state"]
        lanes = state[STATE_BASE:]
        row = int(round(state[1] / self.cell_height))

        if state[4] > 0.5:  # mid-move: let go so the move ends in place
            return NOOP

        above = row - 1
        if above < 0:
            return NOOP
        if abs(lanes[above]) > self.safe_distance:
            return UP

        below = row + 1
        here_threatened = row < len(lanes) and abs(lanes[row]) < self.safe_distance * 0.75
        if here_threatened and below < len(lanes) and abs(lanes[below]) > self.safe_distance:
            return DOWN
        return NOOP


POLICIES = {
    "random": RandomPolicy,
    "rush": RushPolicy,
    "cautious": CautiousPolicy,
}
