"""Game rules for supported fantasy formats."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Tuple


PLAYER_CATEGORIES: Tuple[str, ...] = ("all_rounder", "batsman", "bowler", "wicketkeeper")
CONTEST_STATUSES: Tuple[str, ...] = ("not_live", "live", "completed")


@dataclass(frozen=True)
class GameRules:
    name: str
    credit_cap: int
    captain_multiplier: float
    vice_captain_multiplier: float
    categories: Tuple[str, ...] = PLAYER_CATEGORIES
    contest_statuses: Tuple[str, ...] = CONTEST_STATUSES


_GAME_RULES: Dict[str, GameRules] = {
    "CLASSIC": GameRules(
        name="CLASSIC",
        credit_cap=1000,
        captain_multiplier=2.0,
        vice_captain_multiplier=1.5,
    ),
    "LOW_BUDGET": GameRules(
        name="LOW_BUDGET",
        credit_cap=800,
        captain_multiplier=2.0,
        vice_captain_multiplier=1.5,
    ),
}

DEFAULT_RULES_KEY = "CLASSIC"


def iter_rules() -> Iterable[GameRules]:
    """Return an iterator of all configured rule sets."""

    return _GAME_RULES.values()


def get_rules(name: str = DEFAULT_RULES_KEY) -> GameRules:
    """Fetch rules for a format name, raising KeyError if missing."""

    key = name.strip().upper()
    if key not in _GAME_RULES:
        raise KeyError(f"No game rules configured for format={name!r}")
    return _GAME_RULES[key]
