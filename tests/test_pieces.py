"""
Tests for the piece catalog and shape transforms.
"""

import unittest

from engine.errors import CatalogError, InvalidPieceIdError
from engine.pieces import (
    NUM_PIECES,
    PIECE_DEFINITIONS,
    PieceCatalog,
    PieceDefinition,
    create_player_pieces,
    get_definition,
    is_connected,
    mirror_horizontal,
    normalize,
    piece_ids_by_size,
    rotate_clockwise_90,
    transform,
    unique_transforms,
    validate_catalog,
)


class TestCatalog(unittest.TestCase):
    """Structural invariants of the 21-piece catalog."""

    def test_catalog_has_21_pieces(self):
        self.assertEqual(len(PIECE_DEFINITIONS), NUM_PIECES)
        self.assertEqual(list(PIECE_DEFINITIONS), list(range(1, 22)))

    def test_size_distribution(self):
        counts = {size: len(piece_ids_by_size(size)) for size in range(1, 6)}
        self.assertEqual(counts, {1: 1, 2: 1, 3: 2, 4: 5, 5: 12})

    def test_every_piece_connected_and_sized(self):
        for definition in PIECE_DEFINITIONS.values():
            with self.subTest(piece=definition.name):
                self.assertTrue(is_connected(definition.base_cells))
                self.assertEqual(len(definition.base_cells), definition.size)
                self.assertEqual(normalize(definition.base_cells), definition.base_cells)

    def test_orientation_counts(self):
        expected = {
            1: 1,   # monomino
            2: 2,   # domino
            4: 4,   # tromino L
            6: 1,   # tetromino O
            7: 8,   # tetromino L
            10: 2,  # pentomino I
            20: 8,  # pentomino F
            21: 1,  # pentomino X
        }
        for piece_id, count in expected.items():
            with self.subTest(piece_id=piece_id):
                self.assertEqual(len(get_definition(piece_id).orientations), count)

    def test_disconnected_shape_rejected(self):
        with self.assertRaises(CatalogError):
            PieceDefinition(99, "Broken", frozenset({(0, 0), (2, 0)}), 2)
        with self.assertRaises(CatalogError):
            PieceDefinition.from_grid(99, "Broken", [[1, 0, 1]])

    def test_size_mismatch_rejected(self):
        with self.assertRaises(CatalogError):
            PieceDefinition(99, "Broken", frozenset({(0, 0), (1, 0)}), 3)

    def test_validate_catalog_rejects_missing_piece(self):
        with self.assertRaises(CatalogError):
            validate_catalog(PieceCatalog.build_definitions()[:20])

    def test_validate_catalog_rejects_duplicate_shape(self):
        definitions = PieceCatalog.build_definitions()
        # A J tetromino in place of the T is the L tetromino mirrored.
        definitions[7] = PieceDefinition.from_grid(8, "Tetromino J", [[1, 1, 1], [0, 0, 1]])
        with self.assertRaises(CatalogError):
            validate_catalog(definitions)

    def test_unknown_piece_id(self):
        for piece_id in (0, 22, -1, None):
            with self.subTest(piece_id=piece_id):
                with self.assertRaises(InvalidPieceIdError):
                    get_definition(piece_id)
        with self.assertRaises(ValueError):
            get_definition(0)


class TestTransforms(unittest.TestCase):
    """Pure geometric helpers."""

    def test_four_rotations_are_identity(self):
        for definition in PIECE_DEFINITIONS.values():
            cells = definition.base_cells
            for _ in range(4):
                cells = normalize(rotate_clockwise_90(cells))
            self.assertEqual(cells, definition.base_cells, definition.name)

    def test_double_mirror_is_identity(self):
        for definition in PIECE_DEFINITIONS.values():
            cells = normalize(mirror_horizontal(normalize(mirror_horizontal(definition.base_cells))))
            self.assertEqual(cells, definition.base_cells, definition.name)

    def test_rotation_direction(self):
        # Horizontal domino becomes vertical.
        self.assertEqual(transform(frozenset({(0, 0), (1, 0)}), 1, False), frozenset({(0, 0), (0, 1)}))

    def test_mirror_applied_before_rotation(self):
        base = get_definition(7).base_cells
        expected = normalize(rotate_clockwise_90(mirror_horizontal(base)))
        self.assertEqual(transform(base, 1, True), expected)
        self.assertNotEqual(transform(base, 1, True), normalize(mirror_horizontal(rotate_clockwise_90(base))))

    def test_unique_transforms_order(self):
        transforms = unique_transforms(get_definition(2).base_cells)
        self.assertEqual([(r, f) for r, f, _ in transforms], [(0, False), (1, False)])


class TestPieceInstance(unittest.TestCase):

    def setUp(self):
        self.pieces = create_player_pieces(0)

    def test_player_gets_one_of_each(self):
        self.assertEqual([p.piece_id for p in self.pieces], list(range(1, 22)))
        self.assertTrue(all(p.owner == 0 and not p.placed for p in self.pieces))

    def test_rotate_four_times(self):
        piece = self.pieces[6]
        original = piece.current_cells
        for _ in range(4):
            piece.rotate_clockwise()
        self.assertEqual(piece.rotation, 0)
        self.assertEqual(piece.current_cells, original)

    def test_cells_for_leaves_transform(self):
        piece = self.pieces[6]
        piece.cells_for(3, True)
        self.assertEqual((piece.rotation, piece.flipped), (0, False))

    def test_flip_updates_cells(self):
        piece = self.pieces[6]
        piece.flip()
        self.assertTrue(piece.flipped)
        self.assertEqual(piece.current_cells, transform(piece.definition.base_cells, 0, True))

    def test_mark_placed_once(self):
        piece = self.pieces[0]
        piece.mark_placed(0)
        with self.assertRaises(ValueError):
            piece.mark_placed(1)
        piece.reset()
        self.assertFalse(piece.placed)
        self.assertIsNone(piece.placed_order)


if __name__ == '__main__':
    unittest.main()
