"""Team, roster, contest and user records."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from fantasycricket.models.player import Player


class RosterMember(BaseModel):
    team_id: int
    player_id: int
    is_captain: bool = False
    is_vice_captain: bool = False
    credit_points_at_selection: int = 0

    model_config = ConfigDict(frozen=True)


class Team(BaseModel):
    id: int
    name: str
    user_id: int
    contest_id: Optional[int] = None
    total_points: int = 0
    created_at: datetime

    model_config = ConfigDict(frozen=True)


class TeamPlayer(Player):
    """Pool player annotated with its role inside one team."""

    is_captain: bool = False
    is_vice_captain: bool = False
    credit_points_at_selection: int = 0


class TeamDetail(BaseModel):
    team: Team
    username: Optional[str] = None
    players: List[TeamPlayer] = Field(default_factory=list)

    @property
    def total_credits(self) -> int:
        return sum(player.credit_points_at_selection for player in self.players)


class Contest(BaseModel):
    id: int
    name: str
    team1: str
    team2: str
    status: str = "not_live"
    entry_fee: int = 0
    max_entries: Optional[int] = None
    rules: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(frozen=True)

    @property
    def accepting_entries(self) -> bool:
        return self.status == "not_live"


class PlayerPerformance(BaseModel):
    player_id: int
    contest_id: int
    runs: int = 0
    boundaries: int = 0
    sixes: int = 0
    dot_balls: int = 0
    wickets: int = 0
    performance_points: int = 0
    updated_at: datetime

    model_config = ConfigDict(frozen=True)


class User(BaseModel):
    id: int
    username: str
    name: str
    email: str
    is_admin: bool = False
    created_at: datetime

    model_config = ConfigDict(frozen=True)
