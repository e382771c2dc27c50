"""
Difficulty presets and the move-search facade wrapping a tier agent.
"""

import logging
import time
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from engine.board import Board
from engine.move_generator import ALL_TRANSFORMS, Move
from schemas.game_config import Difficulty

if TYPE_CHECKING:
    from engine.game import BlokusGame

logger = logging.getLogger(__name__)

MIN_THINKING_TIME = 0.5


@dataclass(frozen=True)
class DifficultyPreset:
    randomness_factor: float
    thinking_time: float

    def with_thinking_time(self, seconds: Optional[float]) -> "DifficultyPreset":
        """
        Override the thinking delay. Positive values are raised to
        ``MIN_THINKING_TIME``; zero disables the delay.
        """
        if seconds is None:
            return self
        if seconds <= 0:
            return replace(self, thinking_time=0.0)
        return replace(self, thinking_time=max(MIN_THINKING_TIME, seconds))


DIFFICULTY_PRESETS: Dict[Difficulty, DifficultyPreset] = {
    Difficulty.EASY: DifficultyPreset(randomness_factor=0.4, thinking_time=1.0),
    Difficulty.MEDIUM: DifficultyPreset(randomness_factor=0.2, thinking_time=2.0),
    Difficulty.HARD: DifficultyPreset(randomness_factor=0.05, thinking_time=3.0),
}


def preset_for(difficulty: Difficulty, thinking_time: Optional[float] = None) -> DifficultyPreset:
    return DIFFICULTY_PRESETS[Difficulty(difficulty)].with_thinking_time(thinking_time)


class MoveSearch:
    """
    Chooses a placement for one seat.

    Wraps a tier agent (random, greedy or optimal), generates the candidate
    list the agent expects and reports the choice. ``None`` means the seat
    has nothing to place and should skip.
    """

    def __init__(self, agent, difficulty: Difficulty, preset: DifficultyPreset):
        self.agent = agent
        self.difficulty = difficulty
        self.preset = preset

    @property
    def thinking_time(self) -> float:
        return self.preset.thinking_time

    def candidates(self, game: "BlokusGame", player_id: int) -> List[Move]:
        """
        Legal moves in the form the agent expects.

        An agent limited to current transforms gets the placements of each
        piece's current rotation and flip. When none fit, the transforms are
        stepped (clockwise, flipping after a full turn) until one does, so the
        list is empty only when the seat cannot place anything at all.
        """
        generator = game.move_generator
        if not self.agent.current_transform_only:
            return generator.get_legal_moves(player_id, unique=self.agent.unique_transforms)

        for step in range(len(ALL_TRANSFORMS)):
            legal_moves = generator.get_legal_moves(player_id, current_transform_only=True, transform_step=step)
            if legal_moves:
                if step:
                    logger.debug(f"MoveSearch stepped transforms: player={player_id}, step={step}, "
                                 f"candidates={len(legal_moves)}")
                return legal_moves
        return []

    def choose_move(self, board: Board, player_id: int, legal_moves: List[Move],
                    time_budget_ms: Optional[int] = None) -> Tuple[Optional[Move], Dict[str, Any]]:
        start = time.perf_counter()
        move = self.agent.select_action(board, player_id, legal_moves)
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        info = {
            "agent": self.agent.get_action_info()["name"],
            "difficulty": self.difficulty.value,
            "candidates": len(legal_moves),
            "elapsed_ms": elapsed_ms,
        }
        if time_budget_ms is not None and elapsed_ms > time_budget_ms:
            logger.warning(f"MoveSearch over budget: player={player_id}, elapsed_ms={elapsed_ms:.1f}, "
                           f"budget_ms={time_budget_ms}")
        return move, info

    def decide(self, game: "BlokusGame", player_id: int) -> Optional[Move]:
        """Generate candidates for ``player_id`` and pick one."""
        legal_moves = self.candidates(game, player_id)
        move, info = self.choose_move(game.board, player_id, legal_moves)
        logger.debug(f"MoveSearch decision: player={player_id}, move={move}, info={info}")
        return move

    def reset(self) -> None:
        self.agent.reset()

    def __repr__(self):
        return f"MoveSearch({type(self.agent).__name__}, difficulty={self.difficulty.value})"
