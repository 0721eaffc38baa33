"""Pydantic models for API I/O."""

from .auth import LoginRequest, LoginResponse, RegisterRequest, UserResponse
from .batch import (
    BatchScoreRequest,
    BatchScoreResponse,
    RecomputeResponse,
    ScoreUpdateEntry,
    ScoreUpdateResult,
)
from .contests import (
    ContestCreateRequest,
    ContestPerformanceResponse,
    ContestResponse,
    ContestUpdateRequest,
    PerformanceResponse,
    PerformanceStatsRequest,
    PerformanceUpdateResponse,
    PointsBreakdownResponse,
)
from .players import (
    PlayerCreditsUpdate,
    PlayerImportResponse,
    PlayerResponse,
    PlayerScoreUpdate,
    PlayerSelectionResponse,
    PlayersInitializeResponse,
    RepriceRequest,
    RepriceResponse,
)
from .teams import (
    LeaderboardEntryResponse,
    TeamCreateRequest,
    TeamPlayerResponse,
    TeamRankResponse,
    TeamResponse,
)

__all__ = [
    "BatchScoreRequest",
    "BatchScoreResponse",
    "ContestCreateRequest",
    "ContestPerformanceResponse",
    "ContestResponse",
    "ContestUpdateRequest",
    "LeaderboardEntryResponse",
    "LoginRequest",
    "LoginResponse",
    "PerformanceResponse",
    "PerformanceStatsRequest",
    "PerformanceUpdateResponse",
    "PlayerCreditsUpdate",
    "PlayerImportResponse",
    "PlayerResponse",
    "PlayerScoreUpdate",
    "PlayerSelectionResponse",
    "PlayersInitializeResponse",
    "PointsBreakdownResponse",
    "RecomputeResponse",
    "RegisterRequest",
    "RepriceRequest",
    "RepriceResponse",
    "ScoreUpdateEntry",
    "ScoreUpdateResult",
    "TeamCreateRequest",
    "TeamPlayerResponse",
    "TeamRankResponse",
    "TeamResponse",
    "UserResponse",
]
