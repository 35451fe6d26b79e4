"""Tests for the game director (session state machine)."""

import pygame
import pytest

from crossing_game.behaviors import BehaviorKind
from crossing_game.config import GameConfig, SessionConfig
from crossing_game.director import Director, GamePhase, collides, reached_goal
from crossing_game.levels import EnemySpec, LevelRegistry, LevelSpec, texture_sizes
from crossing_game.rendering import COLOR_BLACK, COLOR_WHITE
from crossing_game.resources import ResourceLoader, ResourceNotLoadedError
from crossing_game.sprites import Sprite


DT = 1 / 60


class FakeRenderer:
    def __init__(self):
        self.calls = []

    def clear(self, color=None, rect=None):
        self.calls.append(("clear", rect))

    def draw_tile(self, image, x, y):
        self.calls.append(("tile", x, y))

    def draw_image(self, image, frame, x, y, width, height):
        self.calls.append(("image", image))

    def fill_text(self, text, x, y, size=72, color=None):
        self.calls.append(("text", text, x, y, size))

    def count(self, kind):
        return sum(1 for c in self.calls if c[0] == kind)


class FakeResources:
    def get(self, key):
        return key


def finish_intro(director):
    director.update(1.6)
    assert director.phase is not GamePhase.INTRO


def walk_to_goal(director, limit=1000):
    director.handle_key("press", pygame.K_UP)
    for _ in range(limit):
        director.update(DT)
        if director.levels_completed:
            return
    pytest.fail("player never reached the top row")


def box(x, y, w=72, h=59):
    return Sprite("t", x, y, 10, 10, collision_width=w, collision_height=h)


class TestPredicates:
    def test_overlap(self):
        assert collides(box(0, 0), box(50, 40))

    def test_touching_edges_do_not_collide(self):
        assert not collides(box(0, 0), box(72, 0))
        assert not collides(box(0, 0), box(0, 59))

    def test_uses_smaller_box(self):
        player = box(0, 0, 57, 47)
        assert not collides(player, box(60, 0))
        assert collides(player, box(56, 46))

    def test_symmetric(self):
        player = box(0, 0, 57, 47)
        wolf = box(56, 46, 93, 59)
        assert collides(player, wolf)
        assert collides(wolf, player)

        touching = box(57, 0, 93, 59)
        assert not collides(player, touching)
        assert not collides(touching, player)

    def test_adjacent_cells_do_not_collide(self):
        assert not collides(box(0, 83), box(0, 0))
        assert not collides(box(101, 0), box(0, 0))

    def test_reached_goal(self):
        assert reached_goal(box(303, 0))
        assert not reached_goal(box(303, 1))


class TestLifecycle:
    def test_loading_until_started(self, game_config):
        director = Director(game_config)
        assert director.phase is GamePhase.LOADING
        director.update(1.0)
        assert director.state.clock == 0
        assert director.player is None

    def test_start_shows_intro(self, make_director, quiet_levels):
        director = make_director(quiet_levels)
        assert director.phase is GamePhase.INTRO
        assert director.paused
        assert director.state.message.text == "LEVEL 1"
        assert (director.state.message.x, director.state.message.y) == (265, 285)
        assert director.scoreboard.level == 1
        assert director.scoreboard.lives == 2

    def test_intro_freezes_entities(self, make_director, quiet_levels):
        director = make_director(quiet_levels)
        director.update(0.5)
        enemy = director.enemies[0]
        assert enemy.position == (0, 498)
        assert not enemy.is_moving()

    def test_intro_ends(self, make_director, quiet_levels):
        director = make_director(quiet_levels)
        director.update(1.0)
        assert director.phase is GamePhase.INTRO
        director.update(0.6)
        assert director.phase is GamePhase.PLAYING
        assert director.state.message is None
        assert director.enemies[0].is_moving()


class TestGoal:
    def test_crossing_completes_level(self, make_director, quiet_levels):
        director = make_director(quiet_levels)
        finish_intro(director)
        walk_to_goal(director)

        s = director.state
        assert director.player.y == 0
        assert s.current_level == 2
        assert s.highest_level == 1
        assert director.phase is GamePhase.LEVEL_COMPLETE
        assert s.message.text == "LEVEL COMPLETE"
        assert s.message.color == COLOR_WHITE

    def test_goal_fires_once(self, make_director, quiet_levels):
        director = make_director(quiet_levels)
        finish_intro(director)
        walk_to_goal(director)
        for _ in range(30):
            director.update(DT)
        assert director.levels_completed == 1
        assert director.state.current_level == 2

    def test_next_level_after_delay(self, make_director, quiet_levels):
        director = make_director(quiet_levels)
        finish_intro(director)
        walk_to_goal(director)
        old_player = director.player

        director.update(2.0)
        assert director.player is old_player
        director.update(0.2)
        assert director.player is not old_player
        assert director.phase is GamePhase.INTRO
        assert director.state.message.text == "LEVEL 2"
        assert director.scoreboard.level == 2
        assert director.scoreboard.highest == 1
        assert director.player.position == (303, 498)

    def test_win_after_last_level(self, make_director, quiet_levels):
        director = make_director(quiet_levels)
        for _ in range(2):
            finish_intro(director)
            walk_to_goal(director)
            director.levels_completed = 0
            director.update(2.2)

        assert director.phase is GamePhase.WON
        assert director.is_over
        assert director.state.highest_level == 2
        assert director.state.message.text == "YOU WON!"
        assert director.state.message.size == 96

    def test_win_when_starting_past_last_level(self, quiet_levels):
        config = GameConfig(session=SessionConfig(starting_level=3))
        director = Director(config, registry=LevelRegistry(config, levels=quiet_levels))
        director.start()
        assert director.phase is GamePhase.WON
        assert director.state.message.expires_at is None
        assert director.player is None


class TestDeath:
    def test_collision_kills(self, make_director, deadly_levels):
        director = make_director(deadly_levels)
        finish_intro(director)

        s = director.state
        assert director.phase is GamePhase.DYING
        assert director.deaths == 1
        assert s.extra_lives == 1
        assert s.message.text == "YOU DIED"
        assert (s.message.x, s.message.y) == (125, 285)
        assert director.paused
        assert s.reset_at == pytest.approx(1.6 + 1.6)

    def test_death_resets_level(self, make_director, deadly_levels):
        director = make_director(deadly_levels)
        finish_intro(director)
        old_player = director.player

        director.update(1.7)
        assert director.player is not old_player
        assert director.phase is GamePhase.INTRO
        assert director.state.message.text == "LEVEL 1"
        assert director.scoreboard.lives == 1

    def test_only_first_collision_counts(self, make_director):
        level = LevelSpec(enemies=[
            EnemySpec("ghoul", 3, 6, 0.0, BehaviorKind.SWEEP_LEFT),
            EnemySpec("orc", 3, 6, 0.0, BehaviorKind.SWEEP_RIGHT),
        ])
        director = make_director([level])
        finish_intro(director)
        assert director.deaths == 1
        assert director.state.extra_lives == 1

    def test_frozen_while_dying(self, make_director, deadly_levels):
        director = make_director(deadly_levels)
        finish_intro(director)
        director.handle_key("press", pygame.K_UP)
        director.update(1.0)
        assert director.player.position == (303, 498)
        assert director.deaths == 1

    def test_out_of_lives_loses(self, make_director, deadly_levels):
        director = make_director(deadly_levels)
        for _ in range(200):
            director.update(0.5)
            if director.is_over:
                break

        s = director.state
        assert director.phase is GamePhase.LOST
        assert director.deaths == 3
        assert s.extra_lives == -1
        assert s.message.text == "YOU LOST!"
        assert s.message.color == COLOR_BLACK
        assert s.message.expires_at is None
        assert director.player is None

    def test_lost_is_final(self, make_director, deadly_levels):
        director = make_director(deadly_levels)
        for _ in range(200):
            director.update(0.5)
        assert director.phase is GamePhase.LOST
        assert director.deaths == 3
        assert director.state.message.text == "YOU LOST!"

    def test_hardcore_loses_on_first_death(self, deadly_levels):
        config = GameConfig(session=SessionConfig(extra_lives=0))
        director = Director(config, registry=LevelRegistry(config, levels=deadly_levels))
        director.start()
        finish_intro(director)
        director.update(2.0)
        assert director.phase is GamePhase.LOST


class TestTimers:
    def test_pauses_coalesce(self, make_director, quiet_levels):
        director = make_director(quiet_levels)
        director.pause(5.0)
        director.pause(1.0)
        assert director.state.pause_until == 5.0
        director.update(4.0)
        assert director.paused
        assert director.state.pause_remaining == pytest.approx(1.0)

    def test_message_replaced(self, make_director, quiet_levels):
        director = make_director(quiet_levels)
        director.show_message("A", 0, 0, 1.0)
        director.show_message("B", 10, 20, -1)
        director.update(5.0)
        assert director.state.message.text == "B"

    def test_message_expires(self, make_director, quiet_levels):
        director = make_director(quiet_levels)
        director.show_message("A", 0, 0, 0.5)
        director.update(0.4)
        assert director.state.message.text == "A"
        director.update(0.2)
        assert director.state.message is None

    def test_scheduled_reset_replaces_pending(self, make_director, quiet_levels):
        director = make_director(quiet_levels)
        director.schedule_reset(1.0)
        director.schedule_reset(3.0)
        assert director.state.reset_at == 3.0


class TestRestart:
    def test_restart_after_death(self, make_director, deadly_levels):
        director = make_director(deadly_levels)
        finish_intro(director)
        director.restart()

        s = director.state
        assert s.extra_lives == 2
        assert s.current_level == 1
        assert s.reset_at is None
        assert director.phase is GamePhase.INTRO
        assert s.message.text == "LEVEL 1"

    def test_restart_keeps_highest(self, make_director, quiet_levels):
        director = make_director(quiet_levels)
        finish_intro(director)
        walk_to_goal(director)
        director.restart()
        assert director.state.current_level == 1
        assert director.state.highest_level == 1
        assert director.scoreboard.highest == 1

    def test_restart_from_lost(self, make_director, deadly_levels):
        director = make_director(deadly_levels)
        for _ in range(200):
            director.update(0.5)
        director.restart()
        assert director.phase is GamePhase.INTRO
        assert director.player is not None

    def test_restart_at_level(self, make_director, quiet_levels):
        director = make_director(quiet_levels)
        director.restart(level=2)
        assert director.state.current_level == 2
        assert director.scoreboard.level == 2

    @pytest.mark.parametrize("level", [0, -1])
    def test_restart_rejects_level_below_one(self, make_director, quiet_levels, level):
        director = make_director(quiet_levels)
        with pytest.raises(ValueError):
            director.restart(level=level)
        assert director.phase is GamePhase.INTRO
        assert director.state.current_level == 1


class TestRender:
    def test_draws_board_entities_and_banner(self, game_config, quiet_levels):
        renderer = FakeRenderer()
        director = Director(
            game_config,
            registry=LevelRegistry(game_config, levels=quiet_levels),
            resources=FakeResources(),
            renderer=renderer,
        )
        director.start()
        director.render()
        assert renderer.count("tile") == 49
        assert renderer.count("image") == 2
        assert ("text", "LEVEL 1", 265, 285, 72) in renderer.calls

    def test_loading_only_clears(self, game_config):
        renderer = FakeRenderer()
        director = Director(game_config, resources=FakeResources(), renderer=renderer)
        director.tick(DT)
        assert renderer.calls == [("clear", (0, 0, 707, 707))]

    def test_no_renderer_is_noop(self, make_director, quiet_levels):
        director = make_director(quiet_levels)
        director.tick(DT)

    def test_missing_texture_raises(self, game_config, quiet_levels):
        resources = ResourceLoader()
        resources.load(game_config.board.ROW_TEXTURES)
        director = Director(
            game_config,
            registry=LevelRegistry(game_config, levels=quiet_levels),
            resources=resources,
            renderer=FakeRenderer(),
        )
        director.start()
        with pytest.raises(ResourceNotLoadedError):
            director.render()

    def test_renders_with_placeholders(self, game_config, quiet_levels):
        resources = ResourceLoader()
        resources.load(texture_sizes(quiet_levels), placeholder_sizes=texture_sizes(quiet_levels))
        director = Director(
            game_config,
            registry=LevelRegistry(game_config, levels=quiet_levels),
            resources=resources,
            renderer=FakeRenderer(),
        )
        director.start()
        director.render()


class TestGetState:
    def test_snapshot(self, make_director, quiet_levels):
        director = make_director(quiet_levels)
        state = director.get_state()
        assert state["phase"] == "intro"
        assert state["current_level"] == 1
        assert state["extra_lives"] == 2
        assert state["paused"] is True
        assert state["message"] == "LEVEL 1"
        assert state["player_position"] == (303, 498)
