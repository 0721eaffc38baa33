"""Built-in player pool."""

from __future__ import annotations

from typing import Dict, List

from fantasycricket.models import PlayerSeed


def _seeds(category: str, *entries: tuple[str, int]) -> List[PlayerSeed]:
    return [PlayerSeed(name=name, category=category, credit_points=credits) for name, credits in entries]


DEFAULT_POOL: List[PlayerSeed] = [
    *_seeds(
        "all_rounder",
        ("Ankur", 200),
        ("Prince", 150),
        ("Mayank", 140),
        ("Amit", 150),
    ),
    *_seeds(
        "batsman",
        ("Kuki", 160),
        ("Captain", 90),
        ("Chintu", 110),
        ("Paras Kumar", 90),
        ("Pushkar", 100),
        ("Dhilu", 55),
        ("Kamal", 110),
        ("Ajay", 35),
    ),
    *_seeds(
        "bowler",
        ("Pulkit", 55),
        ("Nitish", 110),
        ("Rahul", 110),
        ("Karambeer", 95),
        ("Manga", 90),
    ),
    *_seeds(
        "wicketkeeper",
        ("Rahul (WK)", 120),
    ),
]

DEFAULT_CREDITS: Dict[str, int] = {seed.name: seed.credit_points for seed in DEFAULT_POOL}
