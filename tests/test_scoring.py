"""
Tests for scoring and game results.
"""

import unittest

from engine.board import Position
from engine.pieces import create_player_pieces
from engine.player import PlayerMoveState
from engine.scoring import (
    GameResult,
    ScoringRules,
    build_game_result,
    calculate_score,
    rank_players,
    score_breakdown,
)

TOTAL_CELLS = 89


def _state(player_id, used_ids, available_ids):
    pieces = {p.piece_id: p for p in create_player_pieces(player_id)}
    used = []
    for order, piece_id in enumerate(used_ids):
        pieces[piece_id].mark_placed(order)
        used.append(pieces[piece_id])
    return PlayerMoveState(player_id, Position(0, 0), [pieces[i] for i in available_ids], used)


class TestScore(unittest.TestCase):

    def test_placed_minus_remaining(self):
        # One 4-cell piece placed, one 1-cell piece left.
        state = _state(0, [5], [1])
        self.assertEqual(calculate_score(state), 3)

    def test_fresh_player(self):
        state = PlayerMoveState.create(0, Position(0, 0))
        self.assertEqual(calculate_score(state), -TOTAL_CELLS)

    def test_completion_bonus(self):
        state = _state(0, list(range(2, 22)) + [1], [])
        breakdown = score_breakdown(state)
        self.assertTrue(breakdown.completed_all_pieces)
        self.assertTrue(breakdown.last_piece_was_single)
        self.assertEqual(breakdown.total, TOTAL_CELLS + 15 + 5)

    def test_completion_without_single_square_last(self):
        state = _state(0, list(range(1, 22)), [])
        breakdown = score_breakdown(state)
        self.assertFalse(breakdown.last_piece_was_single)
        self.assertEqual(breakdown.bonus, 15)
        self.assertEqual(breakdown.total, TOTAL_CELLS + 15)

    def test_no_bonus_with_nothing_placed(self):
        state = PlayerMoveState(0, Position(0, 0), [], [])
        self.assertEqual(calculate_score(state), 0)

    def test_custom_rules(self):
        rules = ScoringRules(points_per_square=2, remaining_piece_penalty=0)
        self.assertEqual(calculate_score(_state(0, [5], [1]), rules), 8)


class TestGameResult(unittest.TestCase):

    def test_rankings_share_ties(self):
        self.assertEqual(rank_players({0: 10, 1: 5, 2: 10, 3: -3}), {0: 1, 1: 3, 2: 1, 3: 4})

    def test_single_winner(self):
        players = [_state(0, [10], [1]), _state(1, [1], [2])]
        result = build_game_result(players)
        self.assertIsInstance(result, GameResult)
        self.assertEqual(result.winner_ids, [0])
        self.assertFalse(result.is_tie)

    def test_tie(self):
        players = [_state(0, [5], [1]), _state(1, [6], [1])]
        result = build_game_result(players)
        self.assertEqual(result.scores, {0: 3, 1: 3})
        self.assertEqual(result.winner_ids, [0, 1])
        self.assertTrue(result.is_tie)


if __name__ == '__main__':
    unittest.main()
