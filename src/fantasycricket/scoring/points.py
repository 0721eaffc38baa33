"""Point calculations: raw match stats to player points, roster to team total."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Optional

from fantasycricket.config.rules import GameRules, get_rules
from fantasycricket.errors import ValidationError
from fantasycricket.models import RosterMember


PointsLookup = Callable[[int], Optional[int]]

BOUNDARY_BONUS = 4
SIX_BONUS = 6
HALF_CENTURY_BONUS = 34
QUARTER_CENTURY_BONUS = 18
WICKET_POINTS = 15
THREE_WICKET_BONUS = 18


@dataclass(frozen=True)
class PointsBreakdown:
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

    @property
    def total(self) -> int:
        return (
            self.run_points
            + self.boundary_bonus
            + self.six_bonus
            + self.run_milestone_bonus
            + self.dot_ball_points
            + self.wicket_points
            + self.wicket_milestone_bonus
        )


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, sending .5 away from zero (2.5 -> 3, -2.5 -> -3)."""

    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def member_multiplier(member: RosterMember, rules: GameRules | None = None) -> float:
    rules = rules or get_rules()
    if member.is_captain:
        return rules.captain_multiplier
    if member.is_vice_captain:
        return rules.vice_captain_multiplier
    return 1.0


def member_contribution(
    member: RosterMember,
    base_points: Optional[int],
    rules: GameRules | None = None,
) -> int:
    if base_points is None:
        return 0
    return round_half_away_from_zero(base_points * member_multiplier(member, rules))


def team_total(
    roster: Iterable[RosterMember],
    lookup: PointsLookup | Mapping[int, Optional[int]],
    rules: GameRules | None = None,
) -> int:
    """Sum the rounded, multiplied contribution of every roster member.

    ``lookup`` returns the base points for a player id, or ``None`` when the
    player (or its contest performance) is missing; missing players count 0.
    Rounding happens per member, so the total never depends on roster order.
    """

    rules = rules or get_rules()
    if isinstance(lookup, Mapping):
        points_for = lookup.get
    else:
        points_for = lookup
    return sum(member_contribution(member, points_for(member.player_id), rules) for member in roster)


def _stat(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be a whole number")
    if value < 0:
        raise ValidationError(f"{name} must not be negative")
    return value


def points_breakdown(
    *,
    runs: int = 0,
    boundaries: int = 0,
    sixes: int = 0,
    dot_balls: int = 0,
    wickets: int = 0,
) -> PointsBreakdown:
    runs = _stat("runs", runs)
    boundaries = _stat("boundaries", boundaries)
    sixes = _stat("sixes", sixes)
    dot_balls = _stat("dot_balls", dot_balls)
    wickets = _stat("wickets", wickets)

    if runs >= 50:
        run_milestone = HALF_CENTURY_BONUS
    elif runs >= 25:
        run_milestone = QUARTER_CENTURY_BONUS
    else:
        run_milestone = 0

    return PointsBreakdown(
        runs=runs,
        boundaries=boundaries,
        sixes=sixes,
        dot_balls=dot_balls,
        wickets=wickets,
        run_points=runs,
        boundary_bonus=boundaries * BOUNDARY_BONUS,
        six_bonus=sixes * SIX_BONUS,
        run_milestone_bonus=run_milestone,
        dot_ball_points=dot_balls,
        wicket_points=wickets * WICKET_POINTS,
        wicket_milestone_bonus=THREE_WICKET_BONUS if wickets >= 3 else 0,
    )


def calculate_performance_points(**stats: int) -> int:
    """Convert raw match stats into performance points."""

    return points_breakdown(**stats).total
