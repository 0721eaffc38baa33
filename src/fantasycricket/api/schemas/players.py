from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class PlayerResponse(BaseModel):
    id: int
    name: str
    category: str
    credit_points: int
    performance_points: int
    runs: int | None = None
    wickets: int | None = None


class PlayerSelectionResponse(PlayerResponse):
    selection_percentage: float


class PlayerScoreUpdate(BaseModel):
    points: Any
    runs: int | None = Field(default=None, ge=0)
    wickets: int | None = Field(default=None, ge=0)


class PlayersInitializeResponse(BaseModel):
    message: str
    count: int
    created: int
    skipped: List[str]
    removed_duplicates: List[int]


class PlayerImportResponse(BaseModel):
    total_rows: int
    accepted: int
    created: int
    skipped: List[str]
    rejected_rows: List[str]


class PlayerCreditsUpdate(BaseModel):
    credit_points: Any


class RepriceRequest(BaseModel):
    credits: Dict[str, Any]


class RepriceResponse(BaseModel):
    updated: List[PlayerResponse]
    unpriced: List[str]
    unknown: List[str]
