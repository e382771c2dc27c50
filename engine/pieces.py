"""
Blokus piece definitions with all 21 polyominoes and their rotations/reflections.

Shapes are sets of integer ``(dx, dy)`` offsets. The geometric helpers in this
module are pure: they never touch a board.
"""

import logging
from collections import Counter, deque
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

import numpy as np

from .board import Position
from .errors import CatalogError, InvalidPieceIdError

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]
Cells = FrozenSet[Cell]

NUM_PIECES = 21
ROTATIONS = 4

# cell count -> number of catalog pieces of that size
SIZE_DISTRIBUTION = {1: 1, 2: 1, 3: 2, 4: 5, 5: 12}


def shape_to_offsets(shape: np.ndarray) -> List[Cell]:
    """
    Convert a numpy shape array to a list of (x, y) offsets.

    Args:
        shape: 2D numpy array with 1s where cells are occupied; rows are y,
            columns are x

    Returns:
        List of (x, y) tuples for occupied cells
    """
    offsets = []
    rows, cols = shape.shape
    for y in range(rows):
        for x in range(cols):
            if shape[y, x] == 1:
                offsets.append((x, y))
    return offsets


def rotate_clockwise_90(cells: Iterable[Cell]) -> Cells:
    """Apply ``(x, y) -> (y, -x)`` to every cell. Does not normalize."""
    return frozenset((y, -x) for x, y in cells)


def mirror_horizontal(cells: Iterable[Cell]) -> Cells:
    """Apply ``(x, y) -> (-x, y)`` to every cell. Does not normalize."""
    return frozenset((-x, y) for x, y in cells)


def normalize(cells: Iterable[Cell]) -> Cells:
    """Translate cells so that min(x) = 0 and min(y) = 0."""
    cells = list(cells)
    if not cells:
        return frozenset()
    min_x = min(x for x, _ in cells)
    min_y = min(y for _, y in cells)
    return frozenset((x - min_x, y - min_y) for x, y in cells)


def transform(base_cells: Iterable[Cell], rotation: int, flipped: bool) -> Cells:
    """
    Apply a piece transform: mirror first (if flipped), then rotate
    ``rotation`` quarter turns clockwise, then normalize.

    The order is fixed. Rotating then mirroring gives a different result for
    asymmetric pieces.
    """
    cells = frozenset(base_cells)
    if flipped:
        cells = mirror_horizontal(cells)
    for _ in range(rotation % ROTATIONS):
        cells = rotate_clockwise_90(cells)
    return normalize(cells)


def occupied_cells(transformed_cells: Iterable[Cell], anchor: Position) -> FrozenSet[Position]:
    """Absolute board cells covered by a transformed shape placed at ``anchor``."""
    return frozenset(anchor + c for c in transformed_cells)


def is_connected(cells: Iterable[Cell]) -> bool:
    """True if the cells form one 4-connected (edge-adjacent) region."""
    cells = set(cells)
    if not cells:
        return False
    start = next(iter(cells))
    visited = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            neighbor = (x + dx, y + dy)
            if neighbor in cells and neighbor not in visited:
                visited.add(neighbor)
                queue.append(neighbor)
    return len(visited) == len(cells)


def unique_transforms(base_cells: Iterable[Cell]) -> List[Tuple[int, bool, Cells]]:
    """
    Distinct orientations of a shape as ``(rotation, flipped, cells)``.

    Enumerated flipped=False first, rotation 0..3; the first transform that
    produces a given cell set wins.
    """
    seen = set()
    result = []
    for flipped in (False, True):
        for rotation in range(ROTATIONS):
            cells = transform(base_cells, rotation, flipped)
            if cells in seen:
                continue
            seen.add(cells)
            result.append((rotation, flipped, cells))
    return result


@dataclass(frozen=True)
class PieceDefinition:
    """Immutable catalog entry for one Blokus piece."""
    id: int
    name: str
    base_cells: Cells
    size: int

    def __post_init__(self):
        """Validate piece after initialization."""
        if not self.base_cells:
            raise CatalogError(f"Piece {self.id} ({self.name}) has no cells")
        if len(self.base_cells) != self.size:
            raise CatalogError(
                f"Piece {self.id} ({self.name}) declares size {self.size} but has {len(self.base_cells)} cells"
            )
        if not is_connected(self.base_cells):
            raise CatalogError(f"Piece {self.id} ({self.name}) is not 4-connected")
        if normalize(self.base_cells) != self.base_cells:
            raise CatalogError(f"Piece {self.id} ({self.name}) is not normalized")

    @classmethod
    def from_grid(cls, piece_id: int, name: str, grid) -> "PieceDefinition":
        """Build a definition from a 0/1 grid (rows are y, columns are x)."""
        shape = np.array(grid)
        if shape.ndim != 2:
            raise CatalogError(f"Piece {piece_id} ({name}) shape must be 2D")
        offsets = shape_to_offsets(shape)
        if len(set(offsets)) != len(offsets):
            raise CatalogError(f"Piece {piece_id} ({name}) has duplicate cells")
        return cls(piece_id, name, frozenset(offsets), int(np.sum(shape)))

    @property
    def orientations(self) -> List[Tuple[int, bool, Cells]]:
        return unique_transforms(self.base_cells)


@dataclass
class PieceInstance:
    """
    A player's copy of a catalog piece with its current transform.

    ``placed`` goes from False to True once and is only cleared by ``reset``.
    """
    definition: PieceDefinition
    owner: int
    rotation: int = 0
    flipped: bool = False
    placed: bool = False
    placed_order: Optional[int] = None
    _cells_cache: Optional[Cells] = field(default=None, repr=False, compare=False)

    @property
    def piece_id(self) -> int:
        return self.definition.id

    @property
    def size(self) -> int:
        return self.definition.size

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def current_cells(self) -> Cells:
        """Normalized offsets for the current rotation and flip."""
        if self._cells_cache is None:
            self._cells_cache = transform(self.definition.base_cells, self.rotation, self.flipped)
        return self._cells_cache

    def cells_for(self, rotation: int, flipped: bool) -> Cells:
        """Offsets for an arbitrary transform, leaving this instance unchanged."""
        return transform(self.definition.base_cells, rotation, flipped)

    def set_transform(self, rotation: int, flipped: bool) -> None:
        self.rotation = rotation % ROTATIONS
        self.flipped = bool(flipped)
        self._cells_cache = None

    def rotate_clockwise(self) -> None:
        self.set_transform(self.rotation + 1, self.flipped)

    def flip(self) -> None:
        self.set_transform(self.rotation, not self.flipped)

    def mark_placed(self, order: int) -> None:
        if self.placed:
            raise ValueError(f"Piece {self.piece_id} of player {self.owner} is already placed")
        self.placed = True
        self.placed_order = order

    def reset(self) -> None:
        """Return to the unplaced, untransformed state."""
        self.placed = False
        self.placed_order = None
        self.set_transform(0, False)


class PieceCatalog:
    """Static registry of the 21 canonical Blokus pieces."""

    @staticmethod
    def build_definitions() -> List[PieceDefinition]:
        """Get all 21 Blokus pieces."""
        pieces = []

        # 1-2 squares
        pieces.append(PieceDefinition.from_grid(1, "Monomino", [[1]]))
        pieces.append(PieceDefinition.from_grid(2, "Domino", [[1, 1]]))

        # 3 squares
        pieces.append(PieceDefinition.from_grid(3, "Tromino I", [[1, 1, 1]]))
        pieces.append(PieceDefinition.from_grid(4, "Tromino L", [[1, 1], [1, 0]]))

        # 4 squares
        pieces.append(PieceDefinition.from_grid(5, "Tetromino I", [[1, 1, 1, 1]]))
        pieces.append(PieceDefinition.from_grid(6, "Tetromino O", [[1, 1], [1, 1]]))
        pieces.append(PieceDefinition.from_grid(7, "Tetromino L", [[1, 1, 1], [1, 0, 0]]))
        pieces.append(PieceDefinition.from_grid(8, "Tetromino T", [[1, 1, 1], [0, 1, 0]]))
        pieces.append(PieceDefinition.from_grid(9, "Tetromino Z", [[1, 1, 0], [0, 1, 1]]))

        # 5 squares
        pieces.append(PieceDefinition.from_grid(10, "Pentomino I", [[1, 1, 1, 1, 1]]))
        pieces.append(PieceDefinition.from_grid(11, "Pentomino L", [[1, 1, 1, 1], [1, 0, 0, 0]]))
        pieces.append(PieceDefinition.from_grid(12, "Pentomino Y", [[1, 1, 1, 1], [0, 1, 0, 0]]))
        pieces.append(PieceDefinition.from_grid(13, "Pentomino N", [[1, 1, 0, 0], [0, 1, 1, 1]]))
        pieces.append(PieceDefinition.from_grid(14, "Pentomino P", [[1, 1], [1, 1], [1, 0]]))
        pieces.append(PieceDefinition.from_grid(15, "Pentomino U", [[1, 1, 1], [1, 0, 1]]))
        pieces.append(PieceDefinition.from_grid(16, "Pentomino T", [[1, 1, 1], [0, 1, 0], [0, 1, 0]]))
        pieces.append(PieceDefinition.from_grid(17, "Pentomino V", [[1, 1, 1], [1, 0, 0], [1, 0, 0]]))
        pieces.append(PieceDefinition.from_grid(18, "Pentomino W", [[1, 1, 0], [0, 1, 1], [0, 0, 1]]))
        pieces.append(PieceDefinition.from_grid(19, "Pentomino Z", [[1, 1, 0], [0, 1, 0], [0, 1, 1]]))
        pieces.append(PieceDefinition.from_grid(20, "Pentomino F", [[1, 1, 0], [0, 1, 1], [0, 1, 0]]))
        pieces.append(PieceDefinition.from_grid(21, "Pentomino X", [[0, 1, 0], [1, 1, 1], [0, 1, 0]]))

        return pieces


def validate_catalog(definitions: List[PieceDefinition]) -> Dict[int, PieceDefinition]:
    """
    Check the catalog's structural invariants and index it by id.

    Raises:
        CatalogError: on the first violated invariant
    """
    if len(definitions) != NUM_PIECES:
        raise CatalogError(f"Expected {NUM_PIECES} pieces, got {len(definitions)}")

    by_id = {}
    for definition in definitions:
        if definition.id in by_id:
            raise CatalogError(f"Duplicate piece id {definition.id}")
        if not 1 <= definition.id <= NUM_PIECES:
            raise CatalogError(f"Piece id {definition.id} outside 1..{NUM_PIECES}")
        if not is_connected(definition.base_cells):
            raise CatalogError(f"Piece {definition.id} ({definition.name}) is not 4-connected")
        by_id[definition.id] = definition

    sizes = Counter(d.size for d in definitions)
    if dict(sizes) != SIZE_DISTRIBUTION:
        raise CatalogError(f"Unexpected size distribution {dict(sizes)}, expected {SIZE_DISTRIBUTION}")

    shapes = Counter(frozenset(c for _, _, c in d.orientations) for d in definitions)
    duplicates = [d.id for d in definitions if shapes[frozenset(c for _, _, c in d.orientations)] > 1]
    if duplicates:
        raise CatalogError(f"Pieces {duplicates} are the same free polyomino")

    return dict(sorted(by_id.items()))


PIECE_DEFINITIONS: Dict[int, PieceDefinition] = validate_catalog(PieceCatalog.build_definitions())
logger.debug(f"Piece catalog validated: {len(PIECE_DEFINITIONS)} pieces")


def get_definition(piece_id: int) -> PieceDefinition:
    """
    Look up a catalog piece.

    Raises:
        InvalidPieceIdError: if ``piece_id`` is not in the catalog
    """
    try:
        return PIECE_DEFINITIONS[piece_id]
    except (KeyError, TypeError):
        raise InvalidPieceIdError(piece_id) from None


def piece_ids_by_size(size: int) -> List[int]:
    return [pid for pid, d in PIECE_DEFINITIONS.items() if d.size == size]


def create_player_pieces(player_id: int) -> List[PieceInstance]:
    """Fresh, unplaced copies of every catalog piece for one player."""
    return [PieceInstance(definition, player_id) for definition in PIECE_DEFINITIONS.values()]
