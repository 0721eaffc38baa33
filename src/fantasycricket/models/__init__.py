"""Domain models."""

from .player import Player, PlayerSeed, normalize_category
from .team import Contest, PlayerPerformance, RosterMember, Team, TeamDetail, TeamPlayer, User

__all__ = [
    "Contest",
    "Player",
    "PlayerPerformance",
    "PlayerSeed",
    "RosterMember",
    "Team",
    "TeamDetail",
    "TeamPlayer",
    "User",
    "normalize_category",
]
