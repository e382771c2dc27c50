"""
Pydantic schemas for game state snapshots sent to presentation layers.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from engine.board import EMPTY
from engine.game import BlokusGame, PlacementOutcome

from .move import MoveResponse, Position


def _positions(cells) -> List[Position]:
    return [Position(x=c.x, y=c.y) for c in sorted(cells, key=lambda c: (c.y, c.x))]


class BoardState(BaseModel):
    """Current state of the game board."""
    cells: List[List[Optional[int]]] = Field(description="20x20 grid indexed [y][x]; owner id or null")
    move_count: int = Field(description="Total number of placements made")

    @classmethod
    def from_board(cls, board) -> "BoardState":
        cells = [[None if owner == EMPTY else owner for owner in row] for row in board.grid.tolist()]
        return cls(cells=cells, move_count=board.move_count)


class PlayerState(BaseModel):
    """State of a player."""
    player_id: int
    start_corner: Position
    score: int
    pieces_used: List[int] = Field(description="IDs of pieces already used, in placement order")
    pieces_remaining: List[int] = Field(description="IDs of pieces still available")
    is_active: bool = Field(description="Whether it's this player's turn")
    finished: bool = Field(default=False, description="Whether the player can no longer place a piece")

    class Config:
        json_schema_extra = {
            "example": {
                "player_id": 0,
                "start_corner": {"x": 0, "y": 0},
                "score": -80,
                "pieces_used": [10],
                "pieces_remaining": [1, 2, 3, 4, 5, 6, 7, 8, 9, 11, 12, 13, 14, 15, 16, 17, 18, 19, 20, 21],
                "is_active": False,
                "finished": False
            }
        }


class PlacementOutcomeModel(BaseModel):
    """One placement attempt or skip."""
    player_id: int
    success: bool
    skipped: bool = False
    violated_rule: Optional[str] = None
    conflicting_cells: List[Position] = Field(default_factory=list)
    piece_id: Optional[int] = None
    rotation: Optional[int] = None
    flipped: Optional[bool] = None
    cells: List[Position] = Field(default_factory=list)
    score_after: int
    turn_number: int
    move_number: int
    next_player: Optional[int] = None
    game_over: bool = False

    @classmethod
    def from_outcome(cls, outcome: PlacementOutcome) -> "PlacementOutcomeModel":
        request = outcome.request
        validation = outcome.validation
        return cls(
            player_id=outcome.player_id,
            success=outcome.success,
            skipped=outcome.skipped,
            violated_rule=None if validation.valid else validation.violated_rule.value,
            conflicting_cells=_positions(validation.conflicting_cells),
            piece_id=request.piece_id if request else None,
            rotation=request.rotation if request else None,
            flipped=request.flipped if request else None,
            cells=_positions(outcome.cells),
            score_after=outcome.score_after,
            turn_number=outcome.turn_number,
            move_number=outcome.move_number,
            next_player=outcome.next_player,
            game_over=outcome.game_over,
        )

    def to_response(self) -> MoveResponse:
        if self.skipped:
            message = "Turn skipped"
        elif self.success:
            message = "Move successful"
        else:
            message = f"Move rejected: {self.violated_rule}"
        return MoveResponse(
            success=self.success,
            message=message,
            violated_rule=self.violated_rule,
            conflicting_cells=self.conflicting_cells,
            new_score=self.score_after,
            game_over=self.game_over,
        )


class GameSnapshot(BaseModel):
    """Complete game state."""
    current_player: Optional[int]
    turn_number: int
    board: BoardState
    players: List[PlayerState]
    game_over: bool = False
    winner_ids: List[int] = Field(default_factory=list)
    last_outcome: Optional[PlacementOutcomeModel] = None

    @classmethod
    def from_game(cls, game: BlokusGame) -> "GameSnapshot":
        result = game.get_game_result()
        players = []
        for state in game.players:
            players.append(PlayerState(
                player_id=state.player_id,
                start_corner=Position(x=state.start_corner.x, y=state.start_corner.y),
                score=result.scores[state.player_id],
                pieces_used=[p.piece_id for p in state.used_pieces],
                pieces_remaining=[p.piece_id for p in state.available_pieces],
                is_active=not game.game_over and state.player_id == game.current_player,
                finished=state.player_id in game.finished_players,
            ))
        last_outcome = PlacementOutcomeModel.from_outcome(game.history[-1]) if game.history else None
        return cls(
            current_player=None if game.game_over else game.current_player,
            turn_number=game.turn_number,
            board=BoardState.from_board(game.board),
            players=players,
            game_over=game.game_over,
            winner_ids=result.winner_ids if game.game_over else [],
            last_outcome=last_outcome,
        )
