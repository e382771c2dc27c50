"""
Per-player piece inventory and starting corners.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .board import Board, Position
from .pieces import PieceInstance, create_player_pieces, get_definition

MIN_PLAYERS = 2
MAX_PLAYERS = 4

_LAST = Board.SIZE - 1

# Four-player mapping, one board corner per seat in turn order.
FOUR_PLAYER_CORNERS = (
    Position(0, 0),
    Position(_LAST, 0),
    Position(_LAST, _LAST),
    Position(0, _LAST),
)


def start_corners_for(player_count: int) -> List[Position]:
    """
    Starting corner for each seat.

    Two players start on opposite corners; three players use the first three
    seats of the four-player mapping.
    """
    if player_count == 2:
        return [FOUR_PLAYER_CORNERS[0], FOUR_PLAYER_CORNERS[2]]
    if MIN_PLAYERS <= player_count <= MAX_PLAYERS:
        return list(FOUR_PLAYER_CORNERS[:player_count])
    raise ValueError(f"Player count must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {player_count}")


@dataclass
class PlayerMoveState:
    """
    Pieces still available to a player, pieces already used, and the corner
    the player's first placement must cover.
    """
    player_id: int
    start_corner: Position
    available_pieces: List[PieceInstance] = field(default_factory=list)
    used_pieces: List[PieceInstance] = field(default_factory=list)

    @classmethod
    def create(cls, player_id: int, start_corner: Position) -> "PlayerMoveState":
        return cls(player_id, start_corner, create_player_pieces(player_id), [])

    @property
    def has_placed(self) -> bool:
        return bool(self.used_pieces)

    @property
    def all_pieces_placed(self) -> bool:
        return not self.available_pieces

    @property
    def placed_cell_count(self) -> int:
        return sum(p.size for p in self.used_pieces)

    @property
    def remaining_cell_count(self) -> int:
        return sum(p.size for p in self.available_pieces)

    @property
    def last_placed_piece(self) -> Optional[PieceInstance]:
        return self.used_pieces[-1] if self.used_pieces else None

    def get_piece(self, piece_id: int) -> Optional[PieceInstance]:
        """
        The available instance of ``piece_id``, or None if already used.

        Raises:
            InvalidPieceIdError: if ``piece_id`` is not in the catalog
        """
        get_definition(piece_id)
        for piece in self.available_pieces:
            if piece.piece_id == piece_id:
                return piece
        return None

    def has_piece(self, piece_id: int) -> bool:
        return any(p.piece_id == piece_id for p in self.available_pieces)

    def use_piece(self, piece_id: int, order: int) -> PieceInstance:
        """Move a piece from available to used."""
        piece = self.get_piece(piece_id)
        if piece is None:
            raise ValueError(f"Piece {piece_id} is not available to player {self.player_id}")
        piece.mark_placed(order)
        self.available_pieces.remove(piece)
        self.used_pieces.append(piece)
        return piece

    def reset(self) -> None:
        """Return every piece to the available list in catalog order."""
        pieces = self.available_pieces + self.used_pieces
        for piece in pieces:
            piece.reset()
        self.available_pieces = sorted(pieces, key=lambda p: p.piece_id)
        self.used_pieces = []
