"""Leaderboard ordering and rank lookups."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence


@dataclass(frozen=True)
class Standing:
    """Team total as read for ranking."""

    team_id: int
    team_name: str
    user_id: int
    username: str
    total_points: int
    created_at: datetime
    contest_id: Optional[int] = None


@dataclass(frozen=True)
class LeaderboardEntry:
    standing: Standing
    rank: int

    @property
    def team_id(self) -> int:
        return self.standing.team_id

    @property
    def total_points(self) -> int:
        return self.standing.total_points


@dataclass(frozen=True)
class TeamRank:
    team_id: int
    rank: int
    total_points: int
    leader_points: int
    points_behind_leader: int
    total_teams: int


def _sort_key(standing: Standing) -> tuple:
    # Highest total first; ties go to the earlier team, then the lower id.
    return (-standing.total_points, standing.created_at, standing.team_id)


def rank_of(total_points: int, standings: Sequence[Standing]) -> int:
    """Competition rank: 1 + number of teams with a strictly greater total."""

    return 1 + sum(1 for other in standings if other.total_points > total_points)


def build_leaderboard(standings: Sequence[Standing]) -> list[LeaderboardEntry]:
    """Order standings by total descending and attach ranks (ties share a rank)."""

    ordered = sorted(standings, key=_sort_key)
    entries: list[LeaderboardEntry] = []
    for index, standing in enumerate(ordered):
        if index and standing.total_points == ordered[index - 1].total_points:
            rank = entries[-1].rank
        else:
            rank = index + 1
        entries.append(LeaderboardEntry(standing=standing, rank=rank))
    return entries


def team_rank(team_id: int, standings: Sequence[Standing]) -> TeamRank:
    """Rank and distance to the leader for one team; KeyError if absent."""

    target = next((standing for standing in standings if standing.team_id == team_id), None)
    if target is None:
        raise KeyError(f"Team {team_id} is not part of these standings")

    leader_points = max(standing.total_points for standing in standings)
    return TeamRank(
        team_id=team_id,
        rank=rank_of(target.total_points, standings),
        total_points=target.total_points,
        leader_points=leader_points,
        points_behind_leader=max(0, leader_points - target.total_points),
        total_teams=len(standings),
    )
