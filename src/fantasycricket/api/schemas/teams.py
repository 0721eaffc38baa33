from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .players import PlayerResponse


class TeamCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    player_ids: List[int]
    captain_id: int
    vice_captain_id: int
    contest_id: Optional[int] = None


class TeamPlayerResponse(PlayerResponse):
    is_captain: bool
    is_vice_captain: bool
    credit_points_at_selection: int


class TeamResponse(BaseModel):
    id: int
    name: str
    user_id: int
    username: str | None
    contest_id: int | None
    total_points: int
    total_credits: int
    created_at: datetime
    players: List[TeamPlayerResponse]


class LeaderboardEntryResponse(BaseModel):
    rank: int
    team_id: int
    team_name: str
    user_id: int
    username: str
    contest_id: int | None
    total_points: int


class TeamRankResponse(BaseModel):
    team_id: int
    rank: int
    total_points: int
    leader_points: int
    points_behind_leader: int
    total_teams: int
