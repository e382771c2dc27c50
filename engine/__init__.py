"""
Blokus game engine package.

This package contains the core game logic for Blokus, including:
- Piece catalog and transforms
- Board management
- Placement rules
- Legal move generation
- Scoring system
- Main game engine
"""

from .board import Board, Position
from .errors import BlokusError, InvalidPieceIdError, InvalidPlayerIdError, NotYourTurnError, OutOfRangeError
from .game import BlokusGame, PlacementOutcome, init_game, step, teardown
from .move_generator import LegalMoveGenerator, Move
from .pieces import PieceCatalog, PieceDefinition, PieceInstance
from .player import PlayerMoveState
from .rules import PlacementRequest, RuleEngine, RuleType, ValidationResult
from .scoring import GameResult, ScoreBreakdown, ScoringRules

__all__ = [
    'Board', 'Position',
    'BlokusError', 'InvalidPieceIdError', 'InvalidPlayerIdError', 'NotYourTurnError', 'OutOfRangeError',
    'PieceCatalog', 'PieceDefinition', 'PieceInstance', 'PlayerMoveState',
    'PlacementRequest', 'RuleEngine', 'RuleType', 'ValidationResult',
    'Move', 'LegalMoveGenerator',
    'GameResult', 'ScoreBreakdown', 'ScoringRules',
    'BlokusGame', 'PlacementOutcome', 'init_game', 'step', 'teardown',
]
