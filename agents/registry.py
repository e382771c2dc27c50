"""
Agent registry for Blokus.
"""

from __future__ import annotations

from typing import Dict, Optional, Union

from agents.heuristic_agent import HeuristicAgent
from agents.move_search import MoveSearch, preset_for
from agents.optimal_agent import OptimalAgent
from agents.random_agent import RandomAgent
from schemas.game_config import Difficulty, GameConfig, PlayerType

DEFAULT_DIFFICULTY = {
    PlayerType.RANDOM: Difficulty.EASY,
    PlayerType.HEURISTIC: Difficulty.MEDIUM,
    PlayerType.OPTIMAL: Difficulty.HARD,
}

TIER_FOR_DIFFICULTY = {
    Difficulty.EASY: PlayerType.RANDOM,
    Difficulty.MEDIUM: PlayerType.HEURISTIC,
    Difficulty.HARD: PlayerType.OPTIMAL,
}


def build_agent(agent_type: Optional[Union[PlayerType, str]] = None,
                difficulty: Optional[Union[Difficulty, str]] = None,
                seed: Optional[int] = None,
                thinking_time: Optional[float] = None) -> MoveSearch:
    """
    Build an automated seat.

    Either argument may be omitted: a difficulty alone selects its tier
    (easy -> random, medium -> heuristic, hard -> optimal) and an agent type
    alone uses its default difficulty.
    """
    if agent_type is None and difficulty is None:
        raise ValueError("Either agent_type or difficulty is required")
    if difficulty is not None:
        difficulty = Difficulty(difficulty)
    if agent_type is None:
        agent_type = TIER_FOR_DIFFICULTY[difficulty]
    agent_type = PlayerType(agent_type.lower() if isinstance(agent_type, str) else agent_type)
    if agent_type == PlayerType.HUMAN:
        raise ValueError("Human players have no agent")
    if difficulty is None:
        difficulty = DEFAULT_DIFFICULTY[agent_type]

    preset = preset_for(difficulty, thinking_time)
    if agent_type == PlayerType.RANDOM:
        agent = RandomAgent(seed=seed)
    elif agent_type == PlayerType.HEURISTIC:
        agent = HeuristicAgent(seed=seed, randomness_factor=preset.randomness_factor)
    else:
        agent = OptimalAgent(seed=seed, randomness_factor=preset.randomness_factor)
    return MoveSearch(agent, difficulty, preset)


def build_agents(config: GameConfig) -> Dict[int, MoveSearch]:
    """Agents for every non-human seat in ``config``, keyed by player id."""
    agents = {}
    for player_id, player in enumerate(config.players):
        if player.type == PlayerType.HUMAN:
            continue
        agents[player_id] = build_agent(
            player.type,
            difficulty=player.difficulty,
            seed=config.seed_for(player_id),
            thinking_time=config.thinking_time,
        )
    return agents
