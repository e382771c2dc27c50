"""
Exceptions raised by the Blokus engine.

Rejected placements are not errors: they are reported through
``ValidationResult``. The exceptions here cover defective catalog data and
identifiers that fall outside the configured game.
"""


class BlokusError(Exception):
    """Base class for engine errors."""


class CatalogError(BlokusError):
    """The piece catalog violates a structural invariant."""


class InvalidPieceIdError(BlokusError, ValueError):
    """Piece id outside the catalog."""

    def __init__(self, piece_id):
        super().__init__(f"Invalid piece id: {piece_id}")
        self.piece_id = piece_id


class InvalidPlayerIdError(BlokusError, ValueError):
    """Player id outside the configured player count."""

    def __init__(self, player_id, player_count: int):
        super().__init__(f"Invalid player id: {player_id} (player count is {player_count})")
        self.player_id = player_id
        self.player_count = player_count


class OutOfRangeError(BlokusError, IndexError):
    """Board position outside the grid."""

    def __init__(self, pos):
        super().__init__(f"Position out of range: {pos}")
        self.pos = pos


class NotYourTurnError(BlokusError):
    """A placement or skip was requested for a player whose turn it is not."""

    def __init__(self, player_id: int, current_player: int):
        super().__init__(f"It is not your turn: player {player_id} requested, player {current_player} to move")
        self.player_id = player_id
        self.current_player = current_player
