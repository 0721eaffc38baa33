"""Configuration helpers for game formats and player categories."""

from .rules import (
    CONTEST_STATUSES,
    DEFAULT_RULES_KEY,
    PLAYER_CATEGORIES,
    GameRules,
    get_rules,
    iter_rules,
)

__all__ = [
    "CONTEST_STATUSES",
    "DEFAULT_RULES_KEY",
    "PLAYER_CATEGORIES",
    "GameRules",
    "get_rules",
    "iter_rules",
]
