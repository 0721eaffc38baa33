from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from .players import PlayerResponse


ContestStatus = Literal["not_live", "live", "completed"]


class ContestCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    team1: str = Field(..., min_length=1)
    team2: str = Field(..., min_length=1)
    status: ContestStatus = "not_live"
    entry_fee: int = Field(default=0, ge=0)
    max_entries: int | None = Field(default=None, ge=1)
    rules: str | None = None


class ContestUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    team1: str | None = Field(default=None, min_length=1)
    team2: str | None = Field(default=None, min_length=1)
    status: ContestStatus | None = None
    entry_fee: int | None = Field(default=None, ge=0)
    max_entries: int | None = Field(default=None, ge=1)
    rules: str | None = None


class ContestResponse(BaseModel):
    id: int
    name: str
    team1: str
    team2: str
    status: str
    entry_fee: int
    max_entries: int | None
    rules: str | None
    created_at: datetime
    updated_at: datetime


class PerformanceStatsRequest(BaseModel):
    runs: int = Field(default=0, ge=0)
    boundaries: int = Field(default=0, ge=0)
    sixes: int = Field(default=0, ge=0)
    dot_balls: int = Field(default=0, ge=0)
    wickets: int = Field(default=0, ge=0)


class PerformanceResponse(BaseModel):
    player_id: int
    contest_id: int
    runs: int
    boundaries: int
    sixes: int
    dot_balls: int
    wickets: int
    performance_points: int
    updated_at: datetime


class PointsBreakdownResponse(BaseModel):
    runs: int
    boundaries: int
    sixes: int
    dot_balls: int
    wickets: int
    run_points: int
    boundary_bonus: int
    six_bonus: int
    run_milestone_bonus: int
    dot_ball_points: int
    wicket_points: int
    wicket_milestone_bonus: int


class PerformanceUpdateResponse(BaseModel):
    performance: PerformanceResponse
    calculated_points: int
    breakdown: PointsBreakdownResponse
    recomputed_team_ids: list[int]


class ContestPerformanceResponse(PerformanceResponse):
    player: Optional[PlayerResponse] = None
