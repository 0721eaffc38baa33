"""Roster validation and point aggregation.

The stateful operations live in :mod:`fantasycricket.scoring.service`.
"""

from .assembly import TeamSubmission, ValidatedRoster, validate_roster
from .points import (
    PointsBreakdown,
    calculate_performance_points,
    member_multiplier,
    points_breakdown,
    round_half_away_from_zero,
    team_total,
)

__all__ = [
    "PointsBreakdown",
    "TeamSubmission",
    "ValidatedRoster",
    "calculate_performance_points",
    "member_multiplier",
    "points_breakdown",
    "round_half_away_from_zero",
    "team_total",
    "validate_roster",
]
