"""
Blokus scoring.

A player's score is the number of cells they placed minus the number of cells
left in their unplaced pieces. Placing every piece earns a completion bonus,
and an extra bonus when the monomino was the last piece placed.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence

from .player import PlayerMoveState


@dataclass(frozen=True)
class ScoringRules:
    points_per_square: int = 1
    remaining_piece_penalty: int = 1
    completion_bonus: int = 15
    single_square_bonus: int = 5


@dataclass(frozen=True)
class ScoreBreakdown:
    """Score inputs and result for one player."""
    player_id: int
    placed_cells: int
    remaining_cells: int
    placed_score: int
    remaining_penalty: int
    bonus: int
    completed_all_pieces: bool
    last_piece_was_single: bool

    @property
    def total(self) -> int:
        return self.placed_score - self.remaining_penalty + self.bonus


@dataclass
class GameResult:
    """
    Canonical game result containing final scores and winner information.

    Attributes:
        scores: Dictionary mapping player_id to final score
        rankings: Dictionary mapping player_id to rank (1 = best, ties share a rank)
        winner_ids: List of player_ids that tied for the highest score
        is_tie: True if multiple players tied for the highest score
    """
    scores: Dict[int, int]
    rankings: Dict[int, int]
    winner_ids: List[int]
    is_tie: bool


def score_breakdown(state: PlayerMoveState, rules: ScoringRules = ScoringRules()) -> ScoreBreakdown:
    placed_cells = state.placed_cell_count
    remaining_cells = state.remaining_cell_count
    completed = state.all_pieces_placed and state.has_placed
    last = state.last_placed_piece
    last_single = completed and last is not None and last.size == 1

    bonus = 0
    if completed:
        bonus += rules.completion_bonus
        if last_single:
            bonus += rules.single_square_bonus

    return ScoreBreakdown(
        player_id=state.player_id,
        placed_cells=placed_cells,
        remaining_cells=remaining_cells,
        placed_score=placed_cells * rules.points_per_square,
        remaining_penalty=remaining_cells * rules.remaining_piece_penalty,
        bonus=bonus,
        completed_all_pieces=completed,
        last_piece_was_single=last_single,
    )


def calculate_score(state: PlayerMoveState, rules: ScoringRules = ScoringRules()) -> int:
    return score_breakdown(state, rules).total


def rank_players(scores: Dict[int, int]) -> Dict[int, int]:
    """Competition ranking: equal scores share a rank, the next rank skips."""
    ordered = sorted(scores.values(), reverse=True)
    return {player_id: ordered.index(score) + 1 for player_id, score in scores.items()}


def build_game_result(players: Sequence[PlayerMoveState], rules: ScoringRules = ScoringRules()) -> GameResult:
    scores = {state.player_id: calculate_score(state, rules) for state in players}
    max_score = max(scores.values())
    winner_ids = [player_id for player_id, score in scores.items() if score == max_score]
    return GameResult(
        scores=scores,
        rankings=rank_players(scores),
        winner_ids=winner_ids,
        is_tie=len(winner_ids) > 1,
    )
