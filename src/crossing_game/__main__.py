"""Command line entry point.

    python -m crossing_game play [--preset classic] [--level 2] [--lives 5]
    python -m crossing_game simulate --policy cautious --episodes 10
"""

import argparse
import logging
import os
from typing import List, Optional

import numpy as np

from .config import CONFIGS, GameConfig
from .engine import CrossingEngine
from .gym_env import CrossingEnv
from .policies import POLICIES


logger = logging.getLogger(__name__)


def build_config(args: argparse.Namespace) -> GameConfig:
    """Copy the chosen preset and apply command line overrides."""
    config = GameConfig.from_dict(CONFIGS[args.preset].to_dict())
    if args.level is not None:
        config.session.starting_level = args.level
    if args.lives is not None:
        config.session.extra_lives = args.lives
    if args.fps is not None:
        config.fps = args.fps
    if args.asset_dir is not None:
        config.asset_dir = args.asset_dir
    config.validate()
    return config


def play(config: GameConfig) -> None:
    CrossingEngine(config).run()


def simulate(config: GameConfig, policy_name: str, episodes: int, max_steps: int, seed: Optional[int]) -> None:
    """Run a scripted policy headless and print one line per episode."""
    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

    rng = np.random.default_rng(seed)
    policy_cls = POLICIES[policy_name]
    policy = policy_cls(rng=rng) if policy_name == "random" else policy_cls()

    env = CrossingEnv(config=config, max_episode_steps=max_steps)
    level = config.session.starting_level
    try:
        for episode in range(episodes):
            policy.reset()
            obs, _ = env.reset(seed=seed, options={"level": level})
            total = 0.0
            info = {}
            terminated = truncated = False
            while not (terminated or truncated):
                obs, reward, terminated, truncated, info = env.step(policy(obs))
                total += reward

            signals = info.get("reward_signals", {})
            outcome = (
                "crossed" if signals.get("goal") else
                "died" if signals.get("death") else
                "timeout" if truncated else info.get("phase", "?")
            )
            print(f"episode {episode + 1}: level {level} {outcome} "
                  f"after {info.get('episode_steps', 0)} steps, return {total:.1f}")
            if outcome == "crossed" and level < len(env.director.registry):
                level += 1
    finally:
        env.close()


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="crossing-game", description="Lane crossing arcade game")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--preset", default="default", choices=sorted(CONFIGS))
    parser.add_argument("--level", type=int, help="starting level (1-based)")
    parser.add_argument("--lives", type=int, help="extra lives")
    parser.add_argument("--fps", type=int)
    parser.add_argument("--asset-dir", help="directory holding images/")

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("play", help="open the game window (default)")

    sim = sub.add_parser("simulate", help="run a scripted policy headless")
    sim.add_argument("--policy", default="cautious", choices=["random", "rush", "cautious"])
    sim.add_argument("--episodes", type=int, default=5)
    sim.add_argument("--max-steps", type=int, default=3000)
    sim.add_argument("--seed", type=int)
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = make_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(args)
    except ValueError as e:
        parser.error(str(e))

    if args.command == "simulate":
        simulate(config, args.policy, args.episodes, args.max_steps, args.seed)
    else:
        play(config)


if __name__ == "__main__":
    main()
