"""
Placement rule engine for Blokus.

Validates a candidate placement against the board and each player's placement
history, reporting the first violated rule as a ``ValidationResult``.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Iterator, List, NamedTuple, Optional, Sequence

from .board import CORNER_OFFSETS, EDGE_OFFSETS, EMPTY, Board, Position
from .errors import InvalidPlayerIdError
from .pieces import Cells, PieceInstance, get_definition, occupied_cells, transform
from .player import PlayerMoveState

logger = logging.getLogger(__name__)


class RuleType(Enum):
    """Rule violated by a rejected placement."""
    NONE = "none"
    OUT_OF_BOUNDS = "out_of_bounds"
    OVERLAP = "overlap"
    FIRST_PLACEMENT_CORNER = "first_placement_corner"
    CORNER_CONTACT = "corner_contact"
    EDGE_CONTACT = "edge_contact"
    PIECE_ALREADY_PLACED = "piece_already_placed"


RULE_MESSAGES = {
    RuleType.NONE: "Placement is legal",
    RuleType.OUT_OF_BOUNDS: "Piece extends beyond the board",
    RuleType.OVERLAP: "Piece overlaps cells that are already occupied",
    RuleType.FIRST_PLACEMENT_CORNER: "First placement must cover your starting corner",
    RuleType.CORNER_CONTACT: "Piece must touch one of your pieces at a corner",
    RuleType.EDGE_CONTACT: "Piece must not share an edge with one of your pieces",
    RuleType.PIECE_ALREADY_PLACED: "Piece has already been used",
}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a single placement validation. Never mutated."""
    valid: bool
    violated_rule: RuleType = RuleType.NONE
    conflicting_cells: FrozenSet[Position] = field(default_factory=frozenset)

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls(True)

    @classmethod
    def failure(cls, rule: RuleType, cells: Iterable[Position] = ()) -> "ValidationResult":
        return cls(False, rule, frozenset(cells))

    @property
    def message(self) -> str:
        return RULE_MESSAGES[self.violated_rule]

    def __bool__(self) -> bool:
        return self.valid


@dataclass(frozen=True)
class PlacementRequest:
    """A player's request to place one of their pieces."""
    player_id: int
    piece_id: int
    anchor: Position
    rotation: int = 0
    flipped: bool = False

    def __post_init__(self):
        if not isinstance(self.anchor, Position):
            object.__setattr__(self, "anchor", Position(*self.anchor))
        if self.rotation not in range(4):
            raise ValueError(f"Rotation must be 0-3, got {self.rotation}")


class SearchContext(NamedTuple):
    grid: List[List[int]]
    seeds: List[Position]
    first_move: bool


class RuleEngine:
    """
    Decides whether a placement is legal for a player.

    Pipeline (first failure wins):
    1. every cell on the board
    2. no cell already owned
    3. first placement covers the player's starting corner
    4. no edge contact with the player's own cells
    5. at least one corner contact with the player's own cells

    Steps 4 and 5 only apply once the player has placed a piece. Contact
    with other players' cells is always allowed.
    """

    def __init__(self, board: Board, players: Sequence[PlayerMoveState]):
        self.board = board
        self.players = list(players)

    @property
    def player_count(self) -> int:
        return len(self.players)

    def player_state(self, player_id: int) -> PlayerMoveState:
        if not isinstance(player_id, int) or not 0 <= player_id < self.player_count:
            raise InvalidPlayerIdError(player_id, self.player_count)
        return self.players[player_id]

    def start_corner(self, player_id: int) -> Position:
        return self.player_state(player_id).start_corner

    def validate_cells(self, player_id: int, cells: Iterable[Position]) -> ValidationResult:
        """Run the placement pipeline on absolute board cells."""
        state = self.player_state(player_id)
        cells = frozenset(cells)
        board = self.board

        out_of_bounds = {c for c in cells if not board.is_in_bounds(c)}
        if out_of_bounds or not cells:
            return ValidationResult.failure(RuleType.OUT_OF_BOUNDS, out_of_bounds)

        overlap = {c for c in cells if board.owner_at(c) is not None}
        if overlap:
            return ValidationResult.failure(RuleType.OVERLAP, overlap)

        if not state.has_placed:
            if state.start_corner not in cells:
                return ValidationResult.failure(RuleType.FIRST_PLACEMENT_CORNER)
            return ValidationResult.success()

        edge_contact = {
            c for c in cells
            if any(board.is_owned_by(c + d, player_id) for d in EDGE_OFFSETS)
        }
        if edge_contact:
            return ValidationResult.failure(RuleType.EDGE_CONTACT, edge_contact)

        if not any(board.is_owned_by(c + d, player_id) for c in cells for d in CORNER_OFFSETS):
            return ValidationResult.failure(RuleType.CORNER_CONTACT)

        return ValidationResult.success()

    def validate_piece(self, player_id: int, piece: PieceInstance, anchor: Position,
                       rotation: Optional[int] = None, flipped: Optional[bool] = None) -> ValidationResult:
        """
        Validate ``piece`` at ``anchor``.

        The piece's current transform is used unless ``rotation``/``flipped``
        are given; the instance itself is never modified.
        """
        if piece.placed:
            return ValidationResult.failure(RuleType.PIECE_ALREADY_PLACED)
        rotation = piece.rotation if rotation is None else rotation
        flipped = piece.flipped if flipped is None else flipped
        cells = occupied_cells(piece.cells_for(rotation, flipped), anchor)
        result = self.validate_cells(player_id, cells)
        if not result.valid:
            logger.debug(
                f"Rejected placement: player={player_id}, piece={piece.piece_id}, anchor={anchor}, "
                f"rotation={rotation}, flipped={flipped}, rule={result.violated_rule.name}"
            )
        return result

    def validate_request(self, request: PlacementRequest) -> ValidationResult:
        """
        Validate a placement request.

        Raises:
            InvalidPlayerIdError: unknown player id
            InvalidPieceIdError: unknown piece id
        """
        state = self.player_state(request.player_id)
        get_definition(request.piece_id)
        piece = state.get_piece(request.piece_id)
        if piece is None:
            return ValidationResult.failure(RuleType.PIECE_ALREADY_PLACED)
        return self.validate_piece(request.player_id, piece, request.anchor, request.rotation, request.flipped)

    def request_cells(self, request: PlacementRequest) -> FrozenSet[Position]:
        """Absolute cells a request would cover."""
        definition = get_definition(request.piece_id)
        return occupied_cells(transform(definition.base_cells, request.rotation, request.flipped), request.anchor)

    def search_context(self, player_id: int) -> SearchContext:
        state = self.player_state(player_id)
        if not state.has_placed:
            seeds = [state.start_corner]
        else:
            seeds = sorted(self.board.get_frontier(player_id), key=lambda p: (p.y, p.x))
        return SearchContext(self.board.grid.tolist(), seeds, not state.has_placed)

    def iter_valid_anchors(self, player_id: int, offsets: Cells,
                           context: Optional[SearchContext] = None) -> Iterator[Position]:
        """
        Yield every anchor at which ``offsets`` is a legal placement, in
        row-major order.

        Only anchors that put some cell on a seed (the starting corner for a
        first move, otherwise a frontier cell) are tried: every legal
        placement covers one, because its corner-contact cell is a frontier
        cell.
        """
        if context is None:
            context = self.search_context(player_id)
        candidates = set()
        for seed in context.seeds:
            for dx, dy in offsets:
                candidates.add((seed.x - dx, seed.y - dy))
        for ax, ay in sorted(candidates, key=lambda a: (a[1], a[0])):
            if self._is_legal_at(context, player_id, offsets, ax, ay):
                yield Position(ax, ay)

    def _is_legal_at(self, context: SearchContext, player_id: int, offsets: Cells, ax: int, ay: int) -> bool:
        """Grid-level equivalent of ``validate_cells(...).valid`` for seeded anchors."""
        grid = context.grid
        size = Board.SIZE
        has_corner_connection = context.first_move

        for dx, dy in offsets:
            x, y = ax + dx, ay + dy
            if x < 0 or x >= size or y < 0 or y >= size:
                return False
            if grid[y][x] != EMPTY:
                return False
            if context.first_move:
                continue
            for ex, ey in EDGE_OFFSETS:
                nx, ny = x + ex, y + ey
                if 0 <= nx < size and 0 <= ny < size and grid[ny][nx] == player_id:
                    return False
            if not has_corner_connection:
                for cx, cy in CORNER_OFFSETS:
                    nx, ny = x + cx, y + cy
                    if 0 <= nx < size and 0 <= ny < size and grid[ny][nx] == player_id:
                        has_corner_connection = True
                        break

        return has_corner_connection

    def can_player_continue(self, player_id: int) -> bool:
        """
        True if some unplaced piece, in some rotation and flip, fits somewhere.

        Probing works on the catalog shapes, never on the player's piece
        instances, so no transform state changes.
        """
        state = self.player_state(player_id)
        if not state.available_pieces:
            return False

        context = self.search_context(player_id)
        if not context.seeds:
            return False
        for piece in state.available_pieces:
            for rotation, flipped, offsets in piece.definition.orientations:
                for _ in self.iter_valid_anchors(player_id, offsets, context):
                    return True
        return False

    def is_game_over(self) -> bool:
        """True once no configured player can place any piece."""
        for player_id in range(self.player_count):
            if self.can_player_continue(player_id):
                return False
        return True
