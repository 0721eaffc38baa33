import pytest

from fantasycricket.config import get_rules
from fantasycricket.errors import ValidationError
from fantasycricket.models import RosterMember
from fantasycricket.scoring import (
    calculate_performance_points,
    points_breakdown,
    round_half_away_from_zero,
    team_total,
)
from fantasycricket.scoring.points import member_contribution


def _roster() -> list[RosterMember]:
    return [
        RosterMember(team_id=1, player_id=1, is_captain=True, credit_points_at_selection=200),
        RosterMember(team_id=1, player_id=2, is_vice_captain=True, credit_points_at_selection=150),
        RosterMember(team_id=1, player_id=3, credit_points_at_selection=140),
        RosterMember(team_id=1, player_id=4, credit_points_at_selection=150),
    ]


def test_team_total_applies_captain_and_vice_multipliers():
    points = {1: 10, 2: 8, 3: 5, 4: 3}

    assert team_total(_roster(), points) == 40


def test_team_total_is_independent_of_roster_order():
    points = {1: 7, 2: 9, 3: -3, 4: 11}
    roster = _roster()

    assert team_total(roster, points) == team_total(list(reversed(roster)), points)


def test_team_total_is_idempotent_for_unchanged_points():
    points = {1: 7, 2: 9, 3: 4, 4: 0}

    first = team_total(_roster(), points)
    assert team_total(_roster(), points) == first


def test_team_total_counts_missing_players_as_zero():
    assert team_total(_roster(), {1: 10}) == 20
    assert team_total(_roster(), lambda player_id: None) == 0


def test_vice_captain_rounds_each_member_half_away_from_zero():
    vice = RosterMember(team_id=1, player_id=2, is_vice_captain=True)

    assert member_contribution(vice, 5) == 8
    assert member_contribution(vice, -5) == -8
    assert member_contribution(vice, 3) == 5


@pytest.mark.parametrize(
    ("value", "expected"),
    [(2.5, 3), (-2.5, -3), (2.4, 2), (-0.5, -1), (0.0, 0)],
)
def test_round_half_away_from_zero(value, expected):
    assert round_half_away_from_zero(value) == expected


def test_team_total_uses_rule_multipliers():
    rules = get_rules("LOW_BUDGET")

    assert team_total(_roster(), {1: 10, 2: 8, 3: 5, 4: 3}, rules) == 40


def test_points_breakdown_milestones():
    breakdown = points_breakdown(runs=52, boundaries=5, sixes=2, dot_balls=3, wickets=3)

    assert breakdown.run_milestone_bonus == 34
    assert breakdown.boundary_bonus == 20
    assert breakdown.six_bonus == 12
    assert breakdown.wicket_points == 45
    assert breakdown.wicket_milestone_bonus == 18
    assert breakdown.total == 52 + 20 + 12 + 34 + 3 + 45 + 18


def test_quarter_century_bonus():
    assert calculate_performance_points(runs=25) == 25 + 18
    assert calculate_performance_points(runs=24) == 24
    assert calculate_performance_points() == 0


@pytest.mark.parametrize("bad", [-1, 1.5, True, "3"])
def test_points_breakdown_rejects_bad_stats(bad):
    with pytest.raises(ValidationError):
        points_breakdown(runs=bad)
