"""Maze schemas for request/response validation."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from mouse_maze.core import WallUpdate


class MazeBase(BaseModel):
    """Base maze schema with common fields."""

    name: str
    row_count: int = Field(..., gt=0)
    column_count: int = Field(..., gt=0)
    finalized: bool = False


class MazeListItem(MazeBase):
    """Schema for maze list item (without text)."""

    id: uuid.UUID
    created_at: datetime


class MazeDetail(MazeListItem):
    """Schema for detailed maze response with its ASCII text."""

    text: str


class MazeListResponse(BaseModel):
    """Schema for maze list response."""

    mazes: list[MazeListItem]
    total: int


class MazeCreateRequest(BaseModel):
    """Schema for creating a maze from dimensions or from text."""

    name: str = Field("Unnamed", min_length=1, max_length=100)
    row_count: Optional[int] = None
    column_count: Optional[int] = None
    text: Optional[str] = None

    @model_validator(mode="after")
    def check_source(self) -> "MazeCreateRequest":
        """Require either text or both dimensions, not both."""
        has_dimensions = self.row_count is not None or self.column_count is not None
        if self.text is not None and has_dimensions:
            raise ValueError("Provide either text or row_count/column_count, not both")
        if self.text is None and (self.row_count is None or self.column_count is None):
            raise ValueError("Provide text, or both row_count and column_count")
        return self


class MazeValidateRequest(BaseModel):
    """Schema for validating maze text."""

    text: str


class MazeValidateResponse(BaseModel):
    """Schema for maze text validation result."""

    valid: bool
    error: Optional[str] = None
    row_count: Optional[int] = None
    column_count: Optional[int] = None


class CellWalls(BaseModel):
    """Schema for the four walls of a cell."""

    north: bool
    east: bool
    south: bool
    west: bool


class WallUpdateResponse(BaseModel):
    """Schema for the outcome of a wall change."""

    applied: bool
    result: WallUpdate
    cell: CellWalls


class FinalizeResponse(BaseModel):
    """Schema for finalize response."""

    was_finalized: bool
