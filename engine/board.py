"""
Blokus Board implementation with 20x20 occupancy grid.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Set, Tuple, Union

import numpy as np

from .errors import OutOfRangeError

logger = logging.getLogger(__name__)

EMPTY = -1

EDGE_OFFSETS = ((0, -1), (0, 1), (-1, 0), (1, 0))
CORNER_OFFSETS = ((-1, -1), (1, -1), (-1, 1), (1, 1))


@dataclass(frozen=True, order=True)
class Position:
    """Represents a position on the board (x = column, y = row)."""
    x: int
    y: int

    def __add__(self, other: Union["Position", Tuple[int, int]]) -> "Position":
        if isinstance(other, Position):
            return Position(self.x + other.x, self.y + other.y)
        dx, dy = other
        return Position(self.x + dx, self.y + dy)

    def __iter__(self):
        yield self.x
        yield self.y

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


class Board:
    """
    Blokus game board implementation.

    The board is a 20x20 grid where:
    - EMPTY (-1) represents empty space
    - 0..3 represent the id of the player owning the cell

    ``place`` is the only mutation path besides ``clear``.
    """

    SIZE = 20

    def __init__(self):
        self.grid = np.full((self.SIZE, self.SIZE), EMPTY, dtype=int)
        self.move_count = 0

    def is_in_bounds(self, pos: Position) -> bool:
        """Check if position is within board bounds."""
        return 0 <= pos.x < self.SIZE and 0 <= pos.y < self.SIZE

    def owner_at(self, pos: Position) -> Optional[int]:
        """
        Get the player owning a position, or None if empty.

        Raises:
            OutOfRangeError: if ``pos`` is outside the board
        """
        if not self.is_in_bounds(pos):
            raise OutOfRangeError(pos)
        value = int(self.grid[pos.y, pos.x])
        if value == EMPTY:
            return None
        return value

    def is_empty(self, pos: Position) -> bool:
        """Check if an in-bounds position is empty."""
        return self.owner_at(pos) is None

    def is_owned_by(self, pos: Position, player_id: int) -> bool:
        """True if ``pos`` is on the board and owned by ``player_id``."""
        return self.is_in_bounds(pos) and self.grid[pos.y, pos.x] == player_id

    def place(self, cells: Iterable[Position], player_id: int) -> bool:
        """
        Mark every cell with ``player_id``.

        The placement is atomic: bounds and occupancy are re-checked for all
        cells before anything is written, so a rejected call leaves the grid
        untouched.

        Returns:
            True if the cells were written, False otherwise
        """
        cells = list(cells)
        if not cells:
            return False

        for pos in cells:
            if not self.is_in_bounds(pos):
                logger.warning(f"Board.place rejected: {pos} out of bounds for player={player_id}")
                return False
            if self.grid[pos.y, pos.x] != EMPTY:
                logger.warning(f"Board.place rejected: {pos} already owned by player={self.grid[pos.y, pos.x]}")
                return False

        for pos in cells:
            self.grid[pos.y, pos.x] = player_id
        self.move_count += 1
        return True

    def clear(self) -> None:
        """Reset every cell to empty."""
        self.grid.fill(EMPTY)
        self.move_count = 0

    def count_cells(self, player_id: int) -> int:
        """Number of cells owned by a player."""
        return int(np.sum(self.grid == player_id))

    def get_edge_adjacent_positions(self, pos: Position) -> List[Position]:
        """Get in-bounds positions that share an edge (not diagonal)."""
        return [pos + d for d in EDGE_OFFSETS if self.is_in_bounds(pos + d)]

    def get_corner_adjacent_positions(self, pos: Position) -> List[Position]:
        """Get in-bounds positions that are diagonally adjacent (corner touching)."""
        return [pos + d for d in CORNER_OFFSETS if self.is_in_bounds(pos + d)]

    def get_adjacent_positions(self, pos: Position) -> List[Position]:
        """Get all in-bounds adjacent positions (including diagonals)."""
        return self.get_edge_adjacent_positions(pos) + self.get_corner_adjacent_positions(pos)

    def get_frontier(self, player_id: int) -> Set[Position]:
        """
        Empty cells where ``player_id`` could extend its territory.

        A frontier cell is empty, diagonally adjacent to one of the player's
        cells and not edge-adjacent to any of them.
        """
        frontier = set()
        ys, xs = np.nonzero(self.grid == player_id)
        for x, y in zip(xs.tolist(), ys.tolist()):
            for candidate in self.get_corner_adjacent_positions(Position(x, y)):
                if self.grid[candidate.y, candidate.x] != EMPTY:
                    continue
                if any(self.is_owned_by(n, player_id) for n in self.get_edge_adjacent_positions(candidate)):
                    continue
                frontier.add(candidate)
        return frontier

    def copy(self) -> 'Board':
        """Create a deep copy of the board."""
        new_board = Board()
        new_board.grid = self.grid.copy()
        new_board.move_count = self.move_count
        return new_board

    def __str__(self) -> str:
        """String representation of the board, row 0 first."""
        result = []
        for y in range(self.SIZE):
            row_str = ""
            for x in range(self.SIZE):
                value = self.grid[y, x]
                row_str += "." if value == EMPTY else str(value)
            result.append(row_str)
        return "\n".join(result)
