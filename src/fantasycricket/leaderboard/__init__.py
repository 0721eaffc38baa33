"""Leaderboard utilities (ranking, export)."""

from .export import LEADERBOARD_HEADERS, leaderboard_to_csv
from .ranking import LeaderboardEntry, Standing, TeamRank, build_leaderboard, rank_of, team_rank

__all__ = [
    "LEADERBOARD_HEADERS",
    "LeaderboardEntry",
    "Standing",
    "TeamRank",
    "build_leaderboard",
    "leaderboard_to_csv",
    "rank_of",
    "team_rank",
]
