"""REST API for the fantasy cricket league."""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

from fastapi import Depends, FastAPI, File, Header, HTTPException, Query, UploadFile
from fastapi.responses import Response

from fantasycricket.accounts import AccountService
from fantasycricket.api.schemas import (
    BatchScoreRequest,
    BatchScoreResponse,
    ContestCreateRequest,
    ContestPerformanceResponse,
    ContestResponse,
    ContestUpdateRequest,
    LeaderboardEntryResponse,
    LoginRequest,
    LoginResponse,
    PerformanceResponse,
    PerformanceStatsRequest,
    PerformanceUpdateResponse,
    PlayerCreditsUpdate,
    PlayerImportResponse,
    PlayerResponse,
    PlayerScoreUpdate,
    PlayerSelectionResponse,
    PlayersInitializeResponse,
    PointsBreakdownResponse,
    RecomputeResponse,
    RegisterRequest,
    RepriceRequest,
    RepriceResponse,
    ScoreUpdateResult,
    TeamCreateRequest,
    TeamPlayerResponse,
    TeamRankResponse,
    TeamResponse,
    UserResponse,
)
from fantasycricket.config.rules import get_rules
from fantasycricket.config_loader import Settings
from fantasycricket.errors import FantasyError, PermissionDenied
from fantasycricket.ingest import parse_player_csv
from fantasycricket.leaderboard import LeaderboardEntry, TeamRank, leaderboard_to_csv
from fantasycricket.models import Contest, Player, PlayerPerformance, TeamDetail, User
from fantasycricket.persistence import FantasyStore
from fantasycricket.pool import initialize_players
from fantasycricket.scoring.assembly import TeamSubmission
from fantasycricket.scoring.service import FantasyService


def _http_error(exc: FantasyError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _player_response(player: Player) -> PlayerResponse:
    return PlayerResponse.model_validate(player.model_dump())


def _user_response(user: User) -> UserResponse:
    return UserResponse.model_validate(user.model_dump())


def _team_response(detail: TeamDetail) -> TeamResponse:
    team = detail.team
    return TeamResponse(
        id=team.id,
        name=team.name,
        user_id=team.user_id,
        username=detail.username,
        contest_id=team.contest_id,
        total_points=team.total_points,
        total_credits=detail.total_credits,
        created_at=team.created_at,
        players=[TeamPlayerResponse.model_validate(player.model_dump()) for player in detail.players],
    )


def _entry_response(entry: LeaderboardEntry) -> LeaderboardEntryResponse:
    standing = entry.standing
    return LeaderboardEntryResponse(
        rank=entry.rank,
        team_id=standing.team_id,
        team_name=standing.team_name,
        user_id=standing.user_id,
        username=standing.username,
        contest_id=standing.contest_id,
        total_points=standing.total_points,
    )


def _rank_response(rank: TeamRank) -> TeamRankResponse:
    return TeamRankResponse(
        team_id=rank.team_id,
        rank=rank.rank,
        total_points=rank.total_points,
        leader_points=rank.leader_points,
        points_behind_leader=rank.points_behind_leader,
        total_teams=rank.total_teams,
    )


def _contest_response(contest: Contest) -> ContestResponse:
    return ContestResponse.model_validate(contest.model_dump())


def _performance_response(performance: PlayerPerformance) -> PerformanceResponse:
    return PerformanceResponse.model_validate(performance.model_dump())


def create_app(db_path: Path | str | None = None, *, settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title="fantasycricket")
    store = FantasyStore(db_path if db_path is not None else settings.db_path)
    service = FantasyService(store, get_rules(settings.rules_key))
    accounts = AccountService(store, session_ttl_hours=settings.session_ttl_hours)
    app.state.store = store
    app.state.service = service
    app.state.accounts = accounts

    if settings.admin_password:
        accounts.ensure_admin(settings.admin_username, settings.admin_password)

    def current_user(authorization: str | None = Header(None)) -> User:
        try:
            return accounts.resolve(_bearer_token(authorization))
        except FantasyError as exc:
            raise _http_error(exc) from exc

    def admin_user(user: User = Depends(current_user)) -> User:
        if not user.is_admin:
            raise _http_error(PermissionDenied("Forbidden"))
        return user

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    # Auth

    @app.post("/api/auth/register", response_model=UserResponse, status_code=201)
    async def register(payload: RegisterRequest) -> UserResponse:
        try:
            user = accounts.register(
                username=payload.username,
                password=payload.password,
                name=payload.name,
                email=payload.email,
            )
        except FantasyError as exc:
            raise _http_error(exc) from exc
        return _user_response(user)

    @app.post("/api/auth/login", response_model=LoginResponse)
    async def login(payload: LoginRequest) -> LoginResponse:
        try:
            user, token = accounts.login(payload.username, payload.password)
        except FantasyError as exc:
            raise _http_error(exc) from exc
        return LoginResponse(token=token, user=_user_response(user))

    @app.post("/api/auth/logout")
    async def logout(
        authorization: str | None = Header(None),
        user: User = Depends(current_user),
    ) -> dict[str, str]:
        token = _bearer_token(authorization)
        if token:
            accounts.logout(token)
        return {"message": "Logged out successfully"}

    @app.get("/api/auth/me", response_model=UserResponse)
    async def me(user: User = Depends(current_user)) -> UserResponse:
        return _user_response(user)

    # Players

    @app.get("/api/players", response_model=List[PlayerResponse])
    async def list_players() -> List[PlayerResponse]:
        return [_player_response(player) for player in service.list_players()]

    @app.get("/api/players/category/{category}", response_model=List[PlayerSelectionResponse])
    async def players_by_category(category: str) -> List[PlayerSelectionResponse]:
        try:
            rows = service.players_with_selection(category)
        except FantasyError as exc:
            raise _http_error(exc) from exc
        return [
            PlayerSelectionResponse(**player.model_dump(), selection_percentage=percentage)
            for player, percentage in rows
        ]

    @app.get("/api/players/{player_id}", response_model=PlayerResponse)
    async def get_player(player_id: int) -> PlayerResponse:
        try:
            return _player_response(service.get_player(player_id))
        except FantasyError as exc:
            raise _http_error(exc) from exc

    @app.post("/api/players/initialize", response_model=PlayersInitializeResponse)
    async def initialize(user: User = Depends(admin_user)) -> PlayersInitializeResponse:
        report = initialize_players(store)
        return PlayersInitializeResponse(
            message="Players initialized successfully",
            count=len(store.get_players()),
            created=report.total_created,
            skipped=report.skipped,
            removed_duplicates=report.removed_duplicates,
        )

    @app.post("/api/admin/players/import", response_model=PlayerImportResponse)
    async def import_players(
        players: UploadFile = File(...),
        user: User = Depends(admin_user),
    ) -> PlayerImportResponse:
        contents = await players.read()
        if not contents:
            raise HTTPException(status_code=400, detail="players file is empty")
        try:
            seeds, import_report = parse_player_csv(contents.decode("utf-8-sig"))
        except (UnicodeDecodeError, ValueError) as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        seed_report = initialize_players(store, seeds)
        return PlayerImportResponse(
            total_rows=import_report.total_rows,
            accepted=import_report.accepted,
            created=seed_report.total_created,
            skipped=seed_report.skipped,
            rejected_rows=import_report.rejected_rows,
        )

    # Teams

    @app.post("/api/teams", response_model=TeamResponse, status_code=201)
    async def create_team(payload: TeamCreateRequest, user: User = Depends(current_user)) -> TeamResponse:
        submission = TeamSubmission(
            name=payload.name,
            player_ids=payload.player_ids,
            captain_id=payload.captain_id,
            vice_captain_id=payload.vice_captain_id,
            contest_id=payload.contest_id,
        )
        try:
            detail = service.assemble_team(user.id, submission)
        except FantasyError as exc:
            raise _http_error(exc) from exc
        return _team_response(detail)

    @app.get("/api/teams", response_model=List[LeaderboardEntryResponse])
    async def list_teams(user: User = Depends(admin_user)) -> List[LeaderboardEntryResponse]:
        return [_entry_response(entry) for entry in service.get_leaderboard()]

    @app.get("/api/teams/user", response_model=Optional[TeamResponse])
    async def user_team(
        contest_id: int | None = Query(None),
        user: User = Depends(current_user),
    ) -> Optional[TeamResponse]:
        detail = service.get_user_team(user.id, contest_id)
        return _team_response(detail) if detail is not None else None

    @app.get("/api/teams/{team_id}", response_model=TeamResponse)
    async def get_team(team_id: int) -> TeamResponse:
        try:
            service.recompute_team_total(team_id)
            return _team_response(service.get_team(team_id))
        except FantasyError as exc:
            raise _http_error(exc) from exc

    @app.get("/api/teams/{team_id}/rank", response_model=TeamRankResponse)
    async def team_rank(team_id: int) -> TeamRankResponse:
        try:
            return _rank_response(service.get_team_rank(team_id))
        except FantasyError as exc:
            raise _http_error(exc) from exc

    @app.delete("/api/teams/{team_id}", status_code=204)
    async def delete_own_team(team_id: int, user: User = Depends(current_user)) -> Response:
        try:
            service.delete_team(team_id, user)
        except FantasyError as exc:
            raise _http_error(exc) from exc
        return Response(status_code=204)

    @app.delete("/api/admin/teams/{team_id}", status_code=204)
    async def admin_delete_team(team_id: int, user: User = Depends(admin_user)) -> Response:
        try:
            service.delete_team(team_id, user)
        except FantasyError as exc:
            raise _http_error(exc) from exc
        return Response(status_code=204)

    # Leaderboards

    @app.get("/api/leaderboard", response_model=List[LeaderboardEntryResponse])
    async def leaderboard() -> List[LeaderboardEntryResponse]:
        return [_entry_response(entry) for entry in service.get_leaderboard()]

    @app.get("/api/leaderboard.csv")
    async def leaderboard_csv(contest_id: int | None = Query(None)) -> Response:
        try:
            entries = service.get_leaderboard(contest_id)
        except FantasyError as exc:
            raise _http_error(exc) from exc
        filename = f"leaderboard-{contest_id}.csv" if contest_id is not None else "leaderboard.csv"
        return Response(
            content=leaderboard_to_csv(entries),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.get("/api/leaderboard/me", response_model=TeamRankResponse)
    async def my_rank(
        contest_id: int | None = Query(None),
        user: User = Depends(current_user),
    ) -> TeamRankResponse:
        try:
            return _rank_response(service.get_user_rank(user.id, contest_id))
        except FantasyError as exc:
            raise _http_error(exc) from exc

    @app.get("/api/contests/{contest_id}/leaderboard", response_model=List[LeaderboardEntryResponse])
    async def contest_leaderboard(contest_id: int) -> List[LeaderboardEntryResponse]:
        try:
            entries = service.get_leaderboard(contest_id)
        except FantasyError as exc:
            raise _http_error(exc) from exc
        return [_entry_response(entry) for entry in entries]

    # Contests

    @app.get("/api/contests", response_model=List[ContestResponse])
    async def list_contests() -> List[ContestResponse]:
        return [_contest_response(contest) for contest in service.list_contests()]

    @app.get("/api/contests/{contest_id}", response_model=ContestResponse)
    async def get_contest(contest_id: int) -> ContestResponse:
        try:
            return _contest_response(service.get_contest(contest_id))
        except FantasyError as exc:
            raise _http_error(exc) from exc

    @app.post("/api/admin/contests", response_model=ContestResponse, status_code=201)
    async def create_contest(payload: ContestCreateRequest, user: User = Depends(admin_user)) -> ContestResponse:
        try:
            contest = service.create_contest(**payload.model_dump())
        except FantasyError as exc:
            raise _http_error(exc) from exc
        return _contest_response(contest)

    @app.patch("/api/admin/contests/{contest_id}", response_model=ContestResponse)
    async def update_contest(
        contest_id: int,
        payload: ContestUpdateRequest,
        user: User = Depends(admin_user),
    ) -> ContestResponse:
        try:
            contest = service.update_contest(contest_id, **payload.model_dump(exclude_unset=True))
        except FantasyError as exc:
            raise _http_error(exc) from exc
        return _contest_response(contest)

    @app.delete("/api/admin/contests/{contest_id}", status_code=204)
    async def delete_contest(contest_id: int, user: User = Depends(admin_user)) -> Response:
        try:
            service.delete_contest(contest_id)
        except FantasyError as exc:
            raise _http_error(exc) from exc
        return Response(status_code=204)

    # Scoring

    @app.patch("/api/admin/players/{player_id}", response_model=PlayerResponse)
    async def update_player_score(
        player_id: int,
        payload: PlayerScoreUpdate,
        user: User = Depends(admin_user),
    ) -> PlayerResponse:
        try:
            player = service.apply_score_update(
                player_id,
                payload.points,
                runs=payload.runs,
                wickets=payload.wickets,
            )
        except FantasyError as exc:
            raise _http_error(exc) from exc
        except OverflowError as exc:
            raise HTTPException(status_code=400, detail="Team total out of range") from exc
        return _player_response(player)

    @app.patch("/api/admin/players/{player_id}/credits", response_model=PlayerResponse)
    async def update_player_credits(
        player_id: int,
        payload: PlayerCreditsUpdate,
        user: User = Depends(admin_user),
    ) -> PlayerResponse:
        try:
            player = service.set_player_credits(player_id, payload.credit_points)
        except FantasyError as exc:
            raise _http_error(exc) from exc
        return _player_response(player)

    @app.post("/api/admin/players/credits", response_model=RepriceResponse)
    async def reprice_players(payload: RepriceRequest, user: User = Depends(admin_user)) -> RepriceResponse:
        try:
            report = service.reprice_players(payload.credits)
        except FantasyError as exc:
            raise _http_error(exc) from exc
        return RepriceResponse(
            updated=[_player_response(player) for player in report.updated],
            unpriced=report.unpriced,
            unknown=report.unknown,
        )

    @app.post("/api/admin/players/scores", response_model=BatchScoreResponse)
    async def batch_scores(payload: BatchScoreRequest, user: User = Depends(admin_user)) -> BatchScoreResponse:
        result = service.apply_batch_score_update(
            [{"player_id": entry.player_id, "points": entry.points} for entry in payload.updates]
        )
        return BatchScoreResponse(
            status=result.status,
            partial_failure=result.partial_failure,
            succeeded=result.succeeded,
            failed=result.failed,
            results=[
                ScoreUpdateResult(
                    player_id=outcome.player_id,
                    ok=outcome.ok,
                    error=outcome.error,
                    message=outcome.message,
                    player=_player_response(outcome.player) if outcome.player is not None else None,
                    recomputed_team_ids=outcome.recomputed_team_ids,
                )
                for outcome in result.outcomes
            ],
        )

    @app.post(
        "/api/admin/contests/{contest_id}/players/{player_id}/performance",
        response_model=PerformanceUpdateResponse,
    )
    async def update_performance(
        contest_id: int,
        player_id: int,
        payload: PerformanceStatsRequest,
        user: User = Depends(admin_user),
    ) -> PerformanceUpdateResponse:
        try:
            update = service.apply_contest_performance(contest_id, player_id, **payload.model_dump())
        except FantasyError as exc:
            raise _http_error(exc) from exc
        breakdown = update.breakdown
        return PerformanceUpdateResponse(
            performance=_performance_response(update.performance),
            calculated_points=breakdown.total,
            breakdown=PointsBreakdownResponse(**asdict(breakdown)),
            recomputed_team_ids=update.recomputed_team_ids,
        )

    @app.get("/api/contests/{contest_id}/performances", response_model=List[ContestPerformanceResponse])
    async def contest_performances(contest_id: int) -> List[ContestPerformanceResponse]:
        try:
            rows = service.list_contest_performances(contest_id)
        except FantasyError as exc:
            raise _http_error(exc) from exc
        return [
            ContestPerformanceResponse(
                **performance.model_dump(),
                player=_player_response(player) if player is not None else None,
            )
            for performance, player in rows
        ]

    @app.post("/api/admin/recompute", response_model=RecomputeResponse)
    async def recompute(user: User = Depends(admin_user)) -> RecomputeResponse:
        totals = service.recompute_all_totals()
        return RecomputeResponse(teams=len(totals), totals=totals)

    return app
