"""
Pydantic schemas for placement requests and responses.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from engine.rules import PlacementRequest


class Position(BaseModel):
    """Position on the board."""
    x: int = Field(description="Column, 0 at the left edge")
    y: int = Field(description="Row, 0 at the top edge")


class MoveRequest(BaseModel):
    """Request to place a piece."""
    player_id: int = Field(..., ge=0, le=3)
    piece_id: int = Field(..., ge=1, le=21, description="ID of the piece to place")
    anchor: Position = Field(..., description="Board cell for the shape's (0, 0) offset")
    rotation: int = Field(default=0, ge=0, le=3, description="Clockwise quarter turns")
    flipped: bool = Field(default=False, description="Mirror before rotating")

    def to_request(self) -> PlacementRequest:
        return PlacementRequest(
            player_id=self.player_id,
            piece_id=self.piece_id,
            anchor=(self.anchor.x, self.anchor.y),
            rotation=self.rotation,
            flipped=self.flipped,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "player_id": 0,
                "piece_id": 1,
                "anchor": {"x": 0, "y": 0},
                "rotation": 0,
                "flipped": False
            }
        }


class MoveResponse(BaseModel):
    """Response after a placement attempt."""
    success: bool
    message: str
    violated_rule: Optional[str] = None
    conflicting_cells: List[Position] = Field(default_factory=list)
    new_score: Optional[int] = None
    game_over: bool = False

    class Config:
        json_schema_extra = {
            "example": {
                "success": False,
                "message": "Piece must not share an edge with one of your pieces",
                "violated_rule": "edge_contact",
                "conflicting_cells": [{"x": 2, "y": 1}],
                "new_score": -84,
                "game_over": False
            }
        }
