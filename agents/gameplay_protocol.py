"""
Gameplay agent protocol used by the turn runner.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Protocol, Tuple

from engine.board import Board
from engine.move_generator import Move

if TYPE_CHECKING:
    from engine.game import BlokusGame


class GameplayAgentProtocol(Protocol):
    """
    Minimal gameplay contract for automated seats.
    """

    thinking_time: float

    def choose_move(
        self,
        board: Board,
        player_id: int,
        legal_moves: List[Move],
        time_budget_ms: Optional[int] = None,
    ) -> Tuple[Optional[Move], Dict[str, Any]]:
        ...

    def decide(self, game: "BlokusGame", player_id: int) -> Optional[Move]:
        ...

    def reset(self) -> None:
        ...
