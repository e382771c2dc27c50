"""
Pydantic schemas for Blokus configuration and state snapshots.
"""

from .game_config import Difficulty, GameConfig, PlayerConfig, PlayerType, ScoringConfig
from .move import MoveRequest, MoveResponse, Position
from .state_update import BoardState, GameSnapshot, PlacementOutcomeModel, PlayerState

__all__ = [
    "Difficulty",
    "GameConfig",
    "PlayerConfig",
    "PlayerType",
    "ScoringConfig",
    "MoveRequest",
    "MoveResponse",
    "Position",
    "BoardState",
    "GameSnapshot",
    "PlacementOutcomeModel",
    "PlayerState",
]
