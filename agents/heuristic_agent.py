"""
Greedy heuristic agent for Blokus.
"""

import math
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from engine.board import CORNER_OFFSETS, EMPTY, Board, Position
from engine.move_generator import Move

# Offsets of the eight surrounding cells.
NEIGHBOUR_OFFSETS = tuple((dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0))


class HeuristicAgent:
    """
    Greedy agent scoring every candidate placement:
    - Larger pieces first
    - Anchors near the centre
    - New diagonal contact points (expansion)
    - Cells next to opponents (blocking)
    - Board corners rewarded, board edges penalized

    The highest score wins; ties go to the first candidate encountered.
    Scores are cached per (piece_id, anchor) for one decision.
    """

    current_transform_only = False
    unique_transforms = False

    def __init__(self, seed: Optional[int] = None, randomness_factor: float = 0.2,
                 aggressive_weight: float = 1.0, defensive_weight: float = 0.5):
        """
        Initialize heuristic agent.

        Args:
            seed: Random seed for reproducible behavior
            randomness_factor: Scale of the uniform jitter added to each score
            aggressive_weight: Weight of the expansion term
            defensive_weight: Weight of the blocking term
        """
        self.rng = np.random.RandomState(seed)
        self.randomness_factor = randomness_factor

        # Heuristic weights
        self.size_weight = 10.0
        self.center_weight = 2.0
        self.aggressive_weight = aggressive_weight
        self.defensive_weight = defensive_weight
        self.corner_bonus = 15.0
        self.edge_penalty = 5.0

        self.evaluation_cache: Dict[Tuple[int, Position], float] = {}

    def select_action(self, board: Board, player_id: int, legal_moves: List[Move]) -> Optional[Move]:
        """
        Select the highest scoring move.

        Args:
            board: Current board state
            player_id: Player making the move
            legal_moves: List of legal moves available

        Returns:
            Selected move, or None if no legal moves available
        """
        # One dict per decision; a superseded decision keeps its own.
        cache: Dict[Tuple[int, Position], float] = {}
        self.evaluation_cache = cache
        if not legal_moves:
            return None

        best_move = None
        best_score = -math.inf
        for move in legal_moves:
            score = self.evaluate_move(board, player_id, move, cache)
            if score > best_score:
                best_move = move
                best_score = score
        return best_move

    def evaluate_move(self, board: Board, player_id: int, move: Move,
                      cache: Optional[Dict[Tuple[int, Position], float]] = None) -> float:
        if cache is None:
            cache = self.evaluation_cache
        key = (move.piece_id, move.anchor)
        if key in cache:
            return cache[key]

        score = self.size_weight * move.size
        score += self.center_weight * (20.0 - self._distance_to_center(move.anchor))
        score += self.aggressive_weight * self._expansion_potential(board, move)
        score += self.defensive_weight * self._defensive_value(board, player_id, move)

        last = Board.SIZE - 1
        if any(c.x in (0, last) and c.y in (0, last) for c in move.cells):
            score += self.corner_bonus
        if any(c.x in (0, last) or c.y in (0, last) for c in move.cells):
            score -= self.edge_penalty

        if self.randomness_factor > 0:
            spread = self.randomness_factor * 20.0
            score += self.rng.uniform(-spread, spread)

        cache[key] = score
        return score

    @staticmethod
    def _distance_to_center(anchor: Position) -> float:
        center = Board.SIZE / 2.0
        return math.hypot(anchor.x - center, anchor.y - center)

    @staticmethod
    def _expansion_potential(board: Board, move: Move) -> float:
        """3 points per empty diagonal neighbour of each placed cell."""
        potential = 0.0
        grid = board.grid
        for cell in move.cells:
            for dx, dy in CORNER_OFFSETS:
                x, y = cell.x + dx, cell.y + dy
                if 0 <= x < Board.SIZE and 0 <= y < Board.SIZE and grid[y, x] == EMPTY \
                        and Position(x, y) not in move.cells:
                    potential += 3.0
        return potential

    @staticmethod
    def _defensive_value(board: Board, player_id: int, move: Move) -> float:
        """2 points per opponent cell around each placed cell."""
        value = 0.0
        grid = board.grid
        for cell in move.cells:
            for dx, dy in NEIGHBOUR_OFFSETS:
                x, y = cell.x + dx, cell.y + dy
                if 0 <= x < Board.SIZE and 0 <= y < Board.SIZE:
                    owner = grid[y, x]
                    if owner != EMPTY and owner != player_id:
                        value += 2.0
        return value

    def get_action_info(self) -> Dict[str, Any]:
        """Get information about the agent."""
        return {
            "name": "HeuristicAgent",
            "type": "heuristic",
            "description": "Greedy agent with size, centre, expansion, blocking and corner preferences",
            "randomness_factor": self.randomness_factor,
            "weights": {
                "aggressive": self.aggressive_weight,
                "defensive": self.defensive_weight,
            }
        }

    def reset(self):
        """Drop cached evaluations."""
        self.evaluation_cache = {}

    def set_seed(self, seed: int):
        """Set random seed for reproducible behavior."""
        self.rng = np.random.RandomState(seed)

    def set_weights(self, weights: Dict[str, float]):
        """
        Set heuristic weights.

        Args:
            weights: Dictionary of weight names and values
        """
        if "aggressive" in weights:
            self.aggressive_weight = weights["aggressive"]
        if "defensive" in weights:
            self.defensive_weight = weights["defensive"]
        if "randomness" in weights:
            self.randomness_factor = weights["randomness"]
