"""Pytest configuration and shared fixtures."""

import os

# Ensure headless pygame for all tests
os.environ['SDL_VIDEODRIVER'] = 'dummy'

import pygame
import pytest

from crossing_game.behaviors import BehaviorKind
from crossing_game.config import GameConfig
from crossing_game.director import Director
from crossing_game.levels import EnemySpec, LevelRegistry, LevelSpec


@pytest.fixture(scope="session", autouse=True)
def pygame_init():
    pygame.init()
    yield
    pygame.quit()


@pytest.fixture
def game_config():
    """Default game configuration."""
    return GameConfig()


@pytest.fixture
def quiet_levels():
    """Two levels with a single slow ghoul that never reaches the player's column."""
    def quiet():
        return LevelSpec(enemies=[EnemySpec("ghoul", 0, 6, 0.5, BehaviorKind.SWEEP_LEFT)], name="quiet")
    return [quiet(), quiet()]


@pytest.fixture
def deadly_levels():
    """One level with a motionless ghoul standing on the player's start cell."""
    return [LevelSpec(enemies=[EnemySpec("ghoul", 3, 6, 0.0, BehaviorKind.SWEEP_LEFT)], name="deadly")]


@pytest.fixture
def make_director(game_config):
    """Factory for a started director over the given levels (no rendering)."""
    def factory(levels=None, config=None):
        config = config or game_config
        director = Director(config, registry=LevelRegistry(config, levels=levels))
        director.start()
        return director
    return factory
