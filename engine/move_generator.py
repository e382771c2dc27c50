"""
Legal move generator for Blokus game.
"""

import logging
import os
import time
from dataclasses import dataclass
from typing import FrozenSet, Iterator, List, Optional, Tuple

from .board import Position
from .pieces import ROTATIONS, PieceInstance, occupied_cells, unique_transforms
from .rules import PlacementRequest, RuleEngine

logger = logging.getLogger(__name__)

# Debug flag for move generation timing (controlled via environment variable)
MOVEGEN_DEBUG = bool(os.getenv("BLOKUS_MOVEGEN_DEBUG", ""))

ALL_TRANSFORMS: Tuple[Tuple[int, bool], ...] = tuple(
    (rotation, flipped) for flipped in (False, True) for rotation in range(ROTATIONS)
)


def step_transform(rotation: int, flipped: bool, steps: int) -> Tuple[int, bool]:
    """
    The transform reached by ``steps`` clockwise turns, flipping after every
    full turn, starting from ``(rotation, flipped)``.
    """
    index = ALL_TRANSFORMS.index((rotation % ROTATIONS, bool(flipped)))
    return ALL_TRANSFORMS[(index + steps) % len(ALL_TRANSFORMS)]


@dataclass(frozen=True)
class Move:
    """A legal (piece, transform, anchor) candidate."""
    piece_id: int
    rotation: int
    flipped: bool
    anchor: Position
    cells: FrozenSet[Position]

    @property
    def size(self) -> int:
        return len(self.cells)

    def to_request(self, player_id: int) -> PlacementRequest:
        return PlacementRequest(player_id, self.piece_id, self.anchor, self.rotation, self.flipped)

    def __str__(self):
        return (f"Move(piece_id={self.piece_id}, rotation={self.rotation}, "
                f"flipped={self.flipped}, anchor={self.anchor})")


class LegalMoveGenerator:
    """
    Enumerates legal moves for a player through the rule engine.

    Moves come out in a fixed encounter order: available pieces in inventory
    order, then flipped False before True, rotation 0..3, then anchors in
    row-major order.
    """

    def __init__(self, rule_engine: RuleEngine):
        self.rule_engine = rule_engine

    def _transforms_for(self, piece: PieceInstance, current_transform_only: bool, unique: bool,
                        transform_step: int = 0):
        if current_transform_only:
            if transform_step == 0:
                return [(piece.rotation, piece.flipped, piece.current_cells)]
            rotation, flipped = step_transform(piece.rotation, piece.flipped, transform_step)
            return [(rotation, flipped, piece.cells_for(rotation, flipped))]
        if unique:
            return unique_transforms(piece.definition.base_cells)
        return [(rotation, flipped, piece.cells_for(rotation, flipped)) for rotation, flipped in ALL_TRANSFORMS]

    def iter_moves(self, player_id: int, current_transform_only: bool = False,
                   unique: bool = True, transform_step: int = 0) -> Iterator[Move]:
        """
        Yield legal moves lazily.

        Args:
            player_id: Player to generate moves for
            current_transform_only: Only try each piece's current rotation/flip
            unique: Skip transforms that repeat an earlier cell set of the
                same piece (symmetric pieces)
            transform_step: With ``current_transform_only``, try the transform
                this many steps past each piece's current one instead
                (see ``step_transform``); pieces are left unchanged
        """
        state = self.rule_engine.player_state(player_id)
        context = self.rule_engine.search_context(player_id)
        for piece in list(state.available_pieces):
            transforms = self._transforms_for(piece, current_transform_only, unique, transform_step)
            for rotation, flipped, offsets in transforms:
                for anchor in self.rule_engine.iter_valid_anchors(player_id, offsets, context):
                    yield Move(piece.piece_id, rotation, flipped, anchor, occupied_cells(offsets, anchor))

    def get_legal_moves(self, player_id: int, current_transform_only: bool = False,
                        unique: bool = True, transform_step: int = 0) -> List[Move]:
        """
        Get all legal moves for a given player on the current board.

        Args:
            player_id: Player to generate moves for
            current_transform_only: Only try each piece's current rotation/flip
            transform_step: Offset from the current transform, see ``iter_moves``

        Returns:
            List of legal moves
        """
        start = time.perf_counter()
        legal_moves = list(self.iter_moves(player_id, current_transform_only, unique, transform_step))
        elapsed_ms = (time.perf_counter() - start) * 1000.0

        if MOVEGEN_DEBUG:
            logger.info(f"MoveGen: player={player_id}, legal_moves={len(legal_moves)}, elapsed_ms={elapsed_ms:.2f}")
        logger.debug(f"Legal move generation: {len(legal_moves)} moves in {elapsed_ms:.2f}ms for player={player_id}")
        return legal_moves

    def get_legal_moves_for_piece(self, player_id: int, piece_id: int) -> List[Move]:
        """
        Get all legal moves for a specific piece, over every distinct transform.

        Returns:
            List of legal moves for the piece, empty if it is already used
        """
        state = self.rule_engine.player_state(player_id)
        piece = state.get_piece(piece_id)
        if piece is None:
            return []
        context = self.rule_engine.search_context(player_id)
        moves = []
        for rotation, flipped, offsets in unique_transforms(piece.definition.base_cells):
            for anchor in self.rule_engine.iter_valid_anchors(player_id, offsets, context):
                moves.append(Move(piece_id, rotation, flipped, anchor, occupied_cells(offsets, anchor)))
        return moves

    def first_legal_move(self, player_id: int) -> Optional[Move]:
        return next(self.iter_moves(player_id), None)

    def has_legal_moves(self, player_id: int) -> bool:
        return self.rule_engine.can_player_continue(player_id)

    def get_move_count(self, player_id: int) -> int:
        return len(self.get_legal_moves(player_id))
