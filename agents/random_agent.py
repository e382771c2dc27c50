"""
Random agent for Blokus that picks uniformly from legal actions.
"""

from typing import Any, Dict, List, Optional

import numpy as np

from engine.board import Board
from engine.move_generator import Move


class RandomAgent:
    """
    Random agent that selects moves uniformly from legal actions.

    Only each piece's current rotation and flip are considered, so the
    candidate list is generated with ``current_transform_only``. Stepping
    to other transforms when nothing fits is left to the caller
    (``MoveSearch.candidates``).
    """

    current_transform_only = True
    unique_transforms = True

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize random agent.

        Args:
            seed: Random seed for reproducible behavior
        """
        self.rng = np.random.RandomState(seed)

    def select_action(self, board: Board, player_id: int, legal_moves: List[Move]) -> Optional[Move]:
        """
        Select a random legal move.

        Args:
            board: Current board state
            player_id: Player making the move
            legal_moves: List of legal moves available

        Returns:
            Selected move, or None if no legal moves available
        """
        if not legal_moves:
            return None

        move_idx = self.rng.randint(0, len(legal_moves))
        return legal_moves[move_idx]

    def get_action_info(self) -> Dict[str, Any]:
        """Get information about the agent."""
        return {
            "name": "RandomAgent",
            "type": "random",
            "description": "Selects uniformly among placements of each piece's current transform"
        }

    def reset(self):
        """Reset agent state (no-op for random agent)."""
        pass

    def set_seed(self, seed: int):
        """Set random seed for reproducible behavior."""
        self.rng = np.random.RandomState(seed)
