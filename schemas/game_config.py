"""
Pydantic schemas for game configuration.
"""

from typing import List, Optional
from pydantic import BaseModel, Field, model_validator
from enum import Enum

from engine.player import MAX_PLAYERS, MIN_PLAYERS
from engine.scoring import ScoringRules


class PlayerType(str, Enum):
    """Types of players in a game."""
    HUMAN = "human"
    RANDOM = "random"
    HEURISTIC = "heuristic"
    OPTIMAL = "optimal"


class Difficulty(str, Enum):
    """AI difficulty tiers."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class PlayerConfig(BaseModel):
    """Configuration for one seat."""
    type: PlayerType = PlayerType.HUMAN
    name: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    seed: Optional[int] = None


class ScoringConfig(BaseModel):
    """Scoring constants."""
    points_per_square: int = Field(default=1, ge=0)
    remaining_piece_penalty: int = Field(default=1, ge=0)
    completion_bonus: int = Field(default=15, ge=0)
    single_square_bonus: int = Field(default=5, ge=0)

    def to_rules(self) -> ScoringRules:
        return ScoringRules(
            points_per_square=self.points_per_square,
            remaining_piece_penalty=self.remaining_piece_penalty,
            completion_bonus=self.completion_bonus,
            single_square_bonus=self.single_square_bonus,
        )


def _default_players() -> List[PlayerConfig]:
    return [PlayerConfig() for _ in range(MAX_PLAYERS)]


class GameConfig(BaseModel):
    """Configuration for a Blokus game."""
    players: List[PlayerConfig] = Field(default_factory=_default_players,
                                        min_length=MIN_PLAYERS, max_length=MAX_PLAYERS)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    seed: Optional[int] = Field(default=None, description="Base seed for agents without their own")
    thinking_time: Optional[float] = Field(
        default=None, ge=0.0, le=60.0,
        description="Overrides the difficulty preset's thinking delay (seconds)"
    )
    agent_timeout: float = Field(default=5.0, gt=0.0, le=300.0, description="Seconds an agent may deliberate")
    max_turns: int = Field(default=1000, ge=1, le=10000)

    @model_validator(mode="after")
    def _check_agents(self) -> "GameConfig":
        for index, player in enumerate(self.players):
            if player.type == PlayerType.HUMAN and player.difficulty is not None:
                raise ValueError(f"Player {index} is human and cannot have a difficulty")
        return self

    @property
    def player_count(self) -> int:
        return len(self.players)

    def seed_for(self, player_id: int) -> Optional[int]:
        """Per-seat seed: the player's own, else the base seed offset by seat."""
        player = self.players[player_id]
        if player.seed is not None:
            return player.seed
        if self.seed is None:
            return None
        return self.seed + player_id

    class Config:
        json_schema_extra = {
            "example": {
                "players": [
                    {"type": "human", "name": "Player 1"},
                    {"type": "random", "name": "Random Bot", "seed": 42},
                    {"type": "heuristic", "name": "Greedy Bot", "difficulty": "medium"},
                    {"type": "optimal", "name": "Hard Bot", "difficulty": "hard"}
                ],
                "seed": 7,
                "thinking_time": 0.0,
                "agent_timeout": 5.0
            }
        }
