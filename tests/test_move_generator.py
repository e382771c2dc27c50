"""
Tests for legal move generation.
"""

import unittest

from engine.board import Position
from engine.move_generator import ALL_TRANSFORMS, LegalMoveGenerator, step_transform
from engine.pieces import get_definition, occupied_cells, unique_transforms
from engine.rules import PlacementRequest
from tests.utils_game_states import commit, generate_random_valid_state, make_rule_engine


class TestLegalMoveGenerator(unittest.TestCase):

    def setUp(self):
        self.board, self.engine = make_rule_engine(4)
        self.generator = LegalMoveGenerator(self.engine)

    def test_first_moves_cover_start_corner(self):
        moves = self.generator.get_legal_moves(0)
        self.assertGreater(len(moves), 0)
        for move in moves:
            self.assertIn(Position(0, 0), move.cells)
            self.assertTrue(self.engine.validate_cells(0, move.cells).valid)

    def test_first_move_counts_for_small_pieces(self):
        monomino = self.generator.get_legal_moves_for_piece(0, 1)
        self.assertEqual([(m.anchor, m.rotation, m.flipped) for m in monomino], [(Position(0, 0), 0, False)])
        domino = self.generator.get_legal_moves_for_piece(0, 2)
        self.assertEqual(len(domino), 2)

    def test_current_transform_only(self):
        moves = self.generator.get_legal_moves(0, current_transform_only=True)
        self.assertTrue(all(m.rotation == 0 and not m.flipped for m in moves))
        self.assertEqual(sum(1 for m in moves if m.piece_id == 2), 1)

    def test_step_transform_order(self):
        self.assertEqual(step_transform(0, False, 0), (0, False))
        self.assertEqual(step_transform(0, False, 1), (1, False))
        self.assertEqual(step_transform(3, False, 1), (0, True))
        self.assertEqual(step_transform(3, True, 1), (0, False))
        self.assertEqual(step_transform(2, True, 8), (2, True))
        reached = {step_transform(1, True, step) for step in range(len(ALL_TRANSFORMS))}
        self.assertEqual(reached, set(ALL_TRANSFORMS))

    def test_transform_step_leaves_pieces_unchanged(self):
        moves = self.generator.get_legal_moves(0, current_transform_only=True, transform_step=5)
        self.assertTrue(moves)
        self.assertTrue(all((m.rotation, m.flipped) == (1, True) for m in moves))
        state = self.engine.player_state(0)
        self.assertTrue(all(p.rotation == 0 and not p.flipped for p in state.available_pieces))

    def test_all_transforms_without_dedup(self):
        moves = self.generator.get_legal_moves(0, unique=False)
        domino = [m for m in moves if m.piece_id == 2]
        self.assertEqual(len(domino), len(ALL_TRANSFORMS))
        self.assertTrue(all(m.anchor == Position(0, 0) for m in domino))

    def test_encounter_order(self):
        moves = self.generator.get_legal_moves(0)
        piece_ids = [m.piece_id for m in moves]
        self.assertEqual(piece_ids, sorted(piece_ids))
        self.assertEqual(self.generator.first_legal_move(0), moves[0])

    def test_used_piece_has_no_moves(self):
        commit(self.engine, PlacementRequest(0, 1, (0, 0)))
        self.assertEqual(self.generator.get_legal_moves_for_piece(0, 1), [])
        self.assertNotIn(1, {m.piece_id for m in self.generator.get_legal_moves(0)})

    def test_matches_brute_force(self):
        game = generate_random_valid_state(12, seed=3)
        engine = game.rule_engine
        generator = game.move_generator
        for player_id in range(4):
            state = engine.player_state(player_id)
            for piece_id in (5, 12, 20):
                if not state.has_piece(piece_id):
                    continue
                with self.subTest(player_id=player_id, piece_id=piece_id):
                    expected = set()
                    for rotation, flipped, offsets in unique_transforms(get_definition(piece_id).base_cells):
                        for x in range(-5, 21):
                            for y in range(-5, 21):
                                cells = occupied_cells(offsets, Position(x, y))
                                if engine.validate_cells(player_id, cells).valid:
                                    expected.add((rotation, flipped, Position(x, y)))
                    found = {(m.rotation, m.flipped, m.anchor)
                             for m in generator.get_legal_moves_for_piece(player_id, piece_id)}
                    self.assertEqual(found, expected)

    def test_has_legal_moves(self):
        self.assertTrue(self.generator.has_legal_moves(0))
        self.assertEqual(self.generator.get_move_count(0), len(self.generator.get_legal_moves(0)))

    def test_move_to_request(self):
        move = self.generator.first_legal_move(0)
        request = move.to_request(0)
        self.assertEqual(self.engine.request_cells(request), move.cells)


if __name__ == '__main__':
    unittest.main()
