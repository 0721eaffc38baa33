"""Roster validation for team submissions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence

from fantasycricket.config.rules import GameRules, get_rules
from fantasycricket.errors import BudgetExceeded, ValidationError
from fantasycricket.models import Player


@dataclass(frozen=True)
class TeamSubmission:
    name: str
    player_ids: Sequence[int]
    captain_id: int
    vice_captain_id: int
    contest_id: Optional[int] = None


@dataclass(frozen=True)
class RosterSlot:
    player_id: int
    is_captain: bool
    is_vice_captain: bool
    credit_points_at_selection: int


@dataclass(frozen=True)
class ValidatedRoster:
    name: str
    contest_id: Optional[int]
    slots: List[RosterSlot]

    @property
    def total_credits(self) -> int:
        return sum(slot.credit_points_at_selection for slot in self.slots)


def validate_roster(
    submission: TeamSubmission,
    pool: Mapping[int, Player],
    rules: GameRules | None = None,
) -> ValidatedRoster:
    """Check a submission against the pool and rules, returning the rows to persist.

    Raises ``ValidationError`` for malformed rosters and ``BudgetExceeded`` when
    the selected players cost more than the credit cap. Nothing is written here.
    """

    rules = rules or get_rules()

    name = (submission.name or "").strip()
    if not name:
        raise ValidationError("Team name is required")

    player_ids = list(submission.player_ids)
    if not player_ids:
        raise ValidationError("Select at least one player")

    seen: set[int] = set()
    duplicates = []
    for player_id in player_ids:
        if player_id in seen:
            duplicates.append(player_id)
        seen.add(player_id)
    if duplicates:
        raise ValidationError(f"Duplicate players in roster: {sorted(set(duplicates))}")

    unknown = [player_id for player_id in player_ids if player_id not in pool]
    if unknown:
        raise ValidationError(f"Unknown player ids: {unknown}")

    if submission.captain_id not in seen:
        raise ValidationError("Captain must be one of the selected players")
    if submission.vice_captain_id not in seen:
        raise ValidationError("Vice-captain must be one of the selected players")
    if submission.captain_id == submission.vice_captain_id:
        raise ValidationError("Captain and vice-captain must be different players")

    total_credits = sum(pool[player_id].credit_points for player_id in player_ids)
    if total_credits > rules.credit_cap:
        raise BudgetExceeded(total_credits, rules.credit_cap)

    slots = [
        RosterSlot(
            player_id=player_id,
            is_captain=player_id == submission.captain_id,
            is_vice_captain=player_id == submission.vice_captain_id,
            credit_points_at_selection=pool[player_id].credit_points,
        )
        for player_id in player_ids
    ]
    return ValidatedRoster(name=name, contest_id=submission.contest_id, slots=slots)
