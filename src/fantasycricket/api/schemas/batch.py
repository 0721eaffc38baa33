from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel

from .players import PlayerResponse


class ScoreUpdateEntry(BaseModel):
    player_id: Any
    points: Any


class BatchScoreRequest(BaseModel):
    updates: List[ScoreUpdateEntry]


class ScoreUpdateResult(BaseModel):
    player_id: Any
    ok: bool
    error: str | None = None
    message: str | None = None
    player: PlayerResponse | None = None
    recomputed_team_ids: List[int] = []


class BatchScoreResponse(BaseModel):
    status: str
    partial_failure: bool
    succeeded: int
    failed: int
    results: List[ScoreUpdateResult]


class RecomputeResponse(BaseModel):
    teams: int
    totals: dict[int, int]
