"""
Main Blokus game engine with turn order, scoring and placement outcomes.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, FrozenSet, List, Optional, Set, Tuple

from .board import Board, Position
from .errors import NotYourTurnError
from .move_generator import LegalMoveGenerator, Move
from .player import PlayerMoveState, start_corners_for
from .rules import PlacementRequest, RuleEngine, ValidationResult
from .scoring import GameResult, ScoreBreakdown, ScoringRules, build_game_result, score_breakdown

if TYPE_CHECKING:
    from schemas.game_config import GameConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlacementOutcome:
    """
    Plain-data record of one turn: a placement attempt or a skip.

    Successful placements and skips are delivered to subscribers; rejected
    placements are only returned to the caller.
    """
    player_id: int
    validation: ValidationResult
    request: Optional[PlacementRequest] = None
    cells: FrozenSet[Position] = field(default_factory=frozenset)
    score_after: int = 0
    turn_number: int = 0
    move_number: int = 0
    next_player: Optional[int] = None
    game_over: bool = False
    skipped: bool = False

    @property
    def success(self) -> bool:
        return self.validation.valid and not self.skipped


OutcomeCallback = Callable[[PlacementOutcome], None]


class BlokusGame:
    """
    Main Blokus game engine.

    Owns the board, every player's pieces and the rule engine, and advances
    turns. Collaborators learn about state changes through ``subscribe``.
    """

    def __init__(self, player_count: int = 4, scoring_rules: Optional[ScoringRules] = None):
        corners = start_corners_for(player_count)
        self.player_count = player_count
        self.scoring_rules = scoring_rules or ScoringRules()
        self.board = Board()
        self.players = [PlayerMoveState.create(pid, corner) for pid, corner in enumerate(corners)]
        self.rule_engine = RuleEngine(self.board, self.players)
        self.move_generator = LegalMoveGenerator(self.rule_engine)
        self.current_player = 0
        self.turn_number = 1
        self.move_count = 0
        self.game_over = False
        self.finished_players: Set[int] = set()
        self.history: List[PlacementOutcome] = []
        self._listeners: List[OutcomeCallback] = []

    def subscribe(self, callback: OutcomeCallback) -> OutcomeCallback:
        """Register a callback for successful placements and skips."""
        self._listeners.append(callback)
        return callback

    def unsubscribe(self, callback: OutcomeCallback) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _emit(self, outcome: PlacementOutcome) -> None:
        for callback in list(self._listeners):
            callback(outcome)

    def validate(self, request: PlacementRequest) -> ValidationResult:
        return self.rule_engine.validate_request(request)

    def place(self, request: PlacementRequest, enforce_turn: bool = True) -> PlacementOutcome:
        """
        Validate and apply a placement.

        Args:
            request: The placement to make
            enforce_turn: Reject requests from a player other than the current one

        Returns:
            PlacementOutcome; ``outcome.validation`` explains a rejection

        Raises:
            InvalidPlayerIdError / InvalidPieceIdError: bad identifiers
            NotYourTurnError: ``enforce_turn`` and it is another player's turn
        """
        start = time.perf_counter()
        state = self.rule_engine.player_state(request.player_id)
        if enforce_turn and request.player_id != self.current_player:
            raise NotYourTurnError(request.player_id, self.current_player)

        validation = self.rule_engine.validate_request(request)
        if not validation.valid:
            logger.info(
                f"Placement rejected: player={request.player_id}, piece={request.piece_id}, "
                f"anchor={request.anchor}, rule={validation.violated_rule.name} ({validation.message})"
            )
            return PlacementOutcome(
                player_id=request.player_id,
                validation=validation,
                request=request,
                score_after=self.get_score(request.player_id),
                turn_number=self.turn_number,
                move_number=self.move_count,
                next_player=self.current_player,
                game_over=self.game_over,
            )

        cells = self.rule_engine.request_cells(request)
        if not self.board.place(cells, request.player_id):
            raise RuntimeError(f"Board rejected validated placement {request}")

        piece = state.use_piece(request.piece_id, order=self.move_count)
        piece.set_transform(request.rotation, request.flipped)
        self.move_count += 1

        if request.player_id == self.current_player:
            self._advance_turn()
        else:
            self._refresh_finished()

        outcome = PlacementOutcome(
            player_id=request.player_id,
            validation=validation,
            request=request,
            cells=cells,
            score_after=self.get_score(request.player_id),
            turn_number=self.turn_number,
            move_number=self.move_count,
            next_player=None if self.game_over else self.current_player,
            game_over=self.game_over,
        )
        self.history.append(outcome)
        logger.debug(f"Engine place: player={request.player_id}, piece={request.piece_id}, "
                     f"cells={len(cells)}, elapsed={time.perf_counter() - start:.4f}s")
        self._emit(outcome)
        return outcome

    def place_move(self, move: Move, player_id: Optional[int] = None) -> PlacementOutcome:
        """Apply a move produced by the move generator or an agent."""
        if player_id is None:
            player_id = self.current_player
        return self.place(move.to_request(player_id))

    def skip_turn(self, player_id: Optional[int] = None) -> PlacementOutcome:
        """Pass the current player's turn without placing anything."""
        if player_id is None:
            player_id = self.current_player
        self.rule_engine.player_state(player_id)
        if player_id != self.current_player:
            raise NotYourTurnError(player_id, self.current_player)

        logger.info(f"Player {player_id} skips turn {self.turn_number}")
        self._advance_turn()
        outcome = PlacementOutcome(
            player_id=player_id,
            validation=ValidationResult.success(),
            score_after=self.get_score(player_id),
            turn_number=self.turn_number,
            move_number=self.move_count,
            next_player=None if self.game_over else self.current_player,
            game_over=self.game_over,
            skipped=True,
        )
        self.history.append(outcome)
        self._emit(outcome)
        return outcome

    def _refresh_finished(self) -> None:
        for player_id in range(self.player_count):
            if player_id not in self.finished_players and not self.rule_engine.can_player_continue(player_id):
                self.finished_players.add(player_id)
        if len(self.finished_players) == self.player_count:
            self._end_game()

    def _advance_turn(self) -> None:
        """
        Hand the turn to the next player who can still place a piece.

        Players that cannot move are recorded in ``finished_players``; the
        board only fills up, so they never become able to move again.
        """
        for step in range(1, self.player_count + 1):
            candidate = (self.current_player + step) % self.player_count
            if candidate in self.finished_players:
                continue
            if not self.rule_engine.can_player_continue(candidate):
                logger.info(f"Player {candidate} has no legal placement left")
                self.finished_players.add(candidate)
                continue
            if candidate <= self.current_player:
                self.turn_number += 1
            self.current_player = candidate
            return
        self._end_game()

    def _end_game(self) -> None:
        if self.game_over:
            return
        self.game_over = True
        result = self.get_game_result()
        logger.info(f"Game over after {self.move_count} moves: scores={result.scores}, winners={result.winner_ids}")

    def is_game_over(self) -> bool:
        """True iff no configured player can place any remaining piece."""
        return self.rule_engine.is_game_over()

    def get_legal_moves(self, player_id: Optional[int] = None) -> List[Move]:
        if player_id is None:
            player_id = self.current_player
        return self.move_generator.get_legal_moves(player_id)

    def get_score(self, player_id: int) -> int:
        return self.get_score_breakdown(player_id).total

    def get_score_breakdown(self, player_id: int) -> ScoreBreakdown:
        return score_breakdown(self.rule_engine.player_state(player_id), self.scoring_rules)

    def get_game_result(self) -> GameResult:
        """
        Final (or provisional, if the game is still running) scores and winners.
        """
        return build_game_result(self.players, self.scoring_rules)

    def reset(self) -> None:
        """Clear the board and return every piece to its owner."""
        self.board.clear()
        for state in self.players:
            state.reset()
        self.current_player = 0
        self.turn_number = 1
        self.move_count = 0
        self.game_over = False
        self.finished_players.clear()
        self.history.clear()
        logger.info("Game reset")


def init_game(config: Optional["GameConfig"] = None) -> BlokusGame:
    """Create a game from configuration."""
    if config is None:
        from schemas.game_config import GameConfig
        config = GameConfig()
    return BlokusGame(player_count=config.player_count, scoring_rules=config.scoring.to_rules())


def step(game: BlokusGame, request: Optional[PlacementRequest]) -> Tuple[BlokusGame, PlacementOutcome]:
    """
    Advance the game by one turn.

    ``request`` is a placement for the current player, or None to skip.
    """
    if request is None:
        return game, game.skip_turn()
    return game, game.place(request)


def teardown(game: BlokusGame) -> None:
    """Drop subscribers and clear the game state."""
    game._listeners.clear()
    game.reset()
