"""Pydantic models for API request/response schemas."""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field

from snake_frenzy.config import GameConfig


class GameStatus(str, enum.Enum):
    """Lifecycle states for a game session."""

    WAITING = "waiting"
    ACTIVE = "active"
    FINISHED = "finished"


class CreateSessionRequest(BaseModel):
    """Request body for POST /sessions."""

    grid_size: int = Field(default=40, ge=4, le=200)
    motion_interval_ms: int = Field(default=100, ge=0, le=2000)
    spawn_interval_ms: int = Field(default=100, ge=0, le=2000)
    food_enabled: bool = True
    random_obstacle_count: int | None = Field(default=None, ge=0)
    seed: int | None = None

    def to_config(self) -> GameConfig:
        return GameConfig(**self.model_dump())


class KeyRequest(BaseModel):
    """Request body for POST /sessions/{session_id}/keys."""

    key: int


class CellRequest(BaseModel):
    """Request body for POST /sessions/{session_id}/obstacles/toggle."""

    row: int = Field(ge=0)
    col: int = Field(ge=0)


class KeyResponse(BaseModel):
    accepted: bool


class ObstacleResponse(BaseModel):
    row: int
    col: int
    obstacle: bool


class SessionSummary(BaseModel):
    """Compact session info for list endpoints."""

    session_id: str
    status: GameStatus
    grid_size: int
    length: int
    tick: int
