"""Canonical player models shared by the pool, scoring and API layers."""

from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from fantasycricket.config.rules import PLAYER_CATEGORIES


_CATEGORY_ALIASES = {
    "allrounder": "all_rounder",
    "allrounders": "all_rounder",
    "ar": "all_rounder",
    "batsman": "batsman",
    "batsmen": "batsman",
    "batter": "batsman",
    "bat": "batsman",
    "bowler": "bowler",
    "bowlers": "bowler",
    "bowl": "bowler",
    "wicketkeeper": "wicketkeeper",
    "wicketkeepers": "wicketkeeper",
    "keeper": "wicketkeeper",
    "wk": "wicketkeeper",
}


def normalize_category(value: str) -> str:
    """Map free-form category labels (``All Rounder``, ``wicket_keepers``) to a canonical key."""

    token = re.sub(r"[^a-z]", "", value.lower())
    category = _CATEGORY_ALIASES.get(token)
    if category is None or category not in PLAYER_CATEGORIES:
        raise ValueError(f"Unknown player category {value!r}")
    return category


class PlayerSeed(BaseModel):
    """Player definition used to populate the pool."""

    name: str = Field(..., min_length=1)
    category: str
    credit_points: int = Field(..., gt=0)
    performance_points: int = 0
    runs: Optional[int] = Field(default=None, ge=0)
    wickets: Optional[int] = Field(default=None, ge=0)

    model_config = ConfigDict(frozen=True)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value

    @field_validator("category")
    @classmethod
    def _canonical_category(cls, value: str) -> str:
        return normalize_category(value)


class Player(BaseModel):
    """Player as stored in the pool."""

    id: int
    name: str
    category: str
    credit_points: int
    performance_points: int = 0
    runs: Optional[int] = None
    wickets: Optional[int] = None

    model_config = ConfigDict(frozen=True)
