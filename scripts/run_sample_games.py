#!/usr/bin/env python3
"""
Play complete games between AI seats and save the final snapshots.
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from agents.registry import build_agents
from agents.turn_runner import TurnRunner
from engine.game import init_game, teardown
from schemas.game_config import Difficulty, GameConfig, PlayerConfig, PlayerType
from schemas.state_update import GameSnapshot
from utils.logging_setup import setup_session_logging

logger = logging.getLogger(__name__)

DIFFICULTY_BY_NAME = {
    "easy": (PlayerType.RANDOM, Difficulty.EASY),
    "medium": (PlayerType.HEURISTIC, Difficulty.MEDIUM),
    "hard": (PlayerType.OPTIMAL, Difficulty.HARD),
}


def build_config(seats: List[str], seed: int, thinking_time: float) -> GameConfig:
    players = []
    for index, name in enumerate(seats):
        player_type, difficulty = DIFFICULTY_BY_NAME[name]
        players.append(PlayerConfig(type=player_type, difficulty=difficulty, name=f"{name}-{index}"))
    return GameConfig(players=players, seed=seed, thinking_time=thinking_time)


async def play_game(config: GameConfig) -> Dict[str, Any]:
    game = init_game(config)
    runner = TurnRunner(game, build_agents(config), agent_timeout=config.agent_timeout)
    try:
        result = await runner.run_until_game_over(max_turns=config.max_turns)
        snapshot = GameSnapshot.from_game(game)
        return {
            "scores": result.scores,
            "winner_ids": result.winner_ids,
            "is_tie": result.is_tie,
            "moves": game.move_count,
            "snapshot": snapshot.model_dump(mode="json"),
        }
    finally:
        teardown(game)


def main():
    parser = argparse.ArgumentParser(description="Blokus sample games between AI seats")
    parser.add_argument("--games", type=int, default=1, help="Number of games to play")
    parser.add_argument("--seats", nargs="+", default=["medium", "easy", "hard", "medium"],
                        choices=sorted(DIFFICULTY_BY_NAME), help="Difficulty per seat (2-4 seats)")
    parser.add_argument("--seed", type=int, default=0, help="Base seed; game i uses seed + 100*i")
    parser.add_argument("--thinking-time", type=float, default=0.0,
                        help="Thinking delay per turn in seconds (0 disables it)")
    parser.add_argument("--output-dir", type=str, default="runs", help="Directory for session output")
    parser.add_argument("--verbose", action="store_true", help="Log engine debug output")
    args = parser.parse_args()

    run_dir, log_file = setup_session_logging(
        Path(args.output_dir), "sample_games", logging.DEBUG if args.verbose else logging.INFO
    )
    logger.info(f"Logging to {log_file}")

    results = []
    for index in range(args.games):
        config = build_config(args.seats, args.seed + 100 * index, args.thinking_time)
        result = asyncio.run(play_game(config))
        logger.info(f"Game {index}: scores={result['scores']} winners={result['winner_ids']} moves={result['moves']}")
        results.append(result)

    results_file = run_dir / "results.json"
    with open(results_file, "w") as f:
        json.dump(results, f, indent=2)
    logger.info(f"Saved {len(results)} game(s) to {results_file}")


if __name__ == "__main__":
    main()
