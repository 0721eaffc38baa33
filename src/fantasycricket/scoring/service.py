"""Fantasy operations: team assembly, scoring updates, totals and standings."""

from __future__ import annotations

import logging
import numbers
import sqlite3
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from fantasycricket.config.rules import GameRules, get_rules
from fantasycricket.errors import (
    ContestUnavailable,
    DuplicateTeam,
    FantasyError,
    NotFound,
    PermissionDenied,
    ValidationError,
)
from fantasycricket.leaderboard.ranking import (
    LeaderboardEntry,
    Standing,
    TeamRank,
    build_leaderboard,
    team_rank,
)
from fantasycricket.models import (
    Contest,
    Player,
    PlayerPerformance,
    Team,
    TeamDetail,
    User,
    normalize_category,
)
from fantasycricket.persistence import FantasyStore
from fantasycricket.scoring.assembly import TeamSubmission, validate_roster
from fantasycricket.scoring.points import PointsBreakdown, points_breakdown, team_total


logger = logging.getLogger("uvicorn.error")
logger.setLevel(logging.INFO)

SQLITE_INT_MIN = -(2**63)
SQLITE_INT_MAX = 2**63 - 1


@dataclass
class ScoreUpdateOutcome:
    player_id: object
    ok: bool
    player: Optional[Player] = None
    recomputed_team_ids: List[int] = field(default_factory=list)
    error: Optional[str] = None
    message: Optional[str] = None


@dataclass
class BatchScoreResult:
    outcomes: List[ScoreUpdateOutcome]

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok)

    @property
    def failed(self) -> int:
        return len(self.outcomes) - self.succeeded

    @property
    def partial_failure(self) -> bool:
        return 0 < self.failed < len(self.outcomes)

    @property
    def status(self) -> str:
        if not self.failed:
            return "ok"
        if self.partial_failure:
            return "partial_failure"
        return "failed"


@dataclass
class RepriceReport:
    updated: List[Player] = field(default_factory=list)
    unpriced: List[str] = field(default_factory=list)
    unknown: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class PerformanceUpdate:
    performance: PlayerPerformance
    breakdown: PointsBreakdown
    recomputed_team_ids: List[int]


def _check_range(label: str, value: int) -> int:
    if not SQLITE_INT_MIN <= value <= SQLITE_INT_MAX:
        raise ValidationError(f"{label} is out of range")
    return value


def coerce_points(value: object) -> int:
    """Accept whole numbers (including integral floats) that fit a 64-bit column."""

    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValidationError("points must be a number")
    if isinstance(value, numbers.Integral):
        return _check_range("points", int(value))
    as_float = float(value)
    if not as_float.is_integer():
        raise ValidationError("points must be a whole number")
    return _check_range("points", int(as_float))


def coerce_credits(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValidationError("credit_points must be a whole number")
    if value <= 0:
        raise ValidationError("credit_points must be positive")
    return _check_range("credit_points", int(value))


class FantasyService:
    """Entry point for every operation that reads or mutates fantasy state.

    Cached team totals are only written by :meth:`recompute_team_total`, which
    runs after every performance write (in the same transaction) and again on
    every leaderboard or rank read.
    """

    def __init__(self, store: FantasyStore, rules: GameRules | None = None):
        self.store = store
        self.rules = rules or get_rules()

    # Player pool

    def list_players(self, category: Optional[str] = None) -> List[Player]:
        if category is None:
            return self.store.get_players()
        try:
            canonical = normalize_category(category)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        return self.store.get_players_by_category(canonical)

    def players_with_selection(self, category: Optional[str] = None) -> List[Tuple[Player, float]]:
        players = self.list_players(category)
        percentages = self.store.selection_percentages()
        return [(player, percentages.get(player.id, 0.0)) for player in players]

    def get_player(self, player_id: int) -> Player:
        player = self.store.get_player(player_id)
        if player is None:
            raise NotFound(f"Player {player_id} not found")
        return player

    def set_player_credits(self, player_id: int, credit_points: object) -> Player:
        credits = coerce_credits(credit_points)
        player = self.store.set_player_credits(player_id, credits)
        if player is None:
            raise NotFound(f"Player {player_id} not found")
        logger.info("Player %s repriced to %d credits", player_id, credits)
        return player

    def reprice_players(self, credits_by_name: Mapping[str, object]) -> RepriceReport:
        """Set credit costs by player name (case-insensitive) in one transaction.

        Pool players missing from the mapping keep their price and are listed
        as ``unpriced``; names with no pool player are listed as ``unknown``.
        """

        prices = {name.strip().casefold(): (name, coerce_credits(value)) for name, value in credits_by_name.items()}
        report = RepriceReport()
        matched: set[str] = set()
        with self.store.transaction() as conn:
            for player in self.store.get_players(conn=conn):
                key = player.name.casefold()
                if key not in prices:
                    report.unpriced.append(player.name)
                    continue
                matched.add(key)
                updated = self.store.set_player_credits(player.id, prices[key][1], conn=conn)
                if updated is not None:
                    report.updated.append(updated)
        report.unknown = [name for key, (name, _) in prices.items() if key not in matched]
        logger.info(
            "Repriced %d player(s); %d unpriced, %d unknown name(s)",
            len(report.updated),
            len(report.unpriced),
            len(report.unknown),
        )
        return report

    # Team assembly

    def assemble_team(self, user_id: int, submission: TeamSubmission) -> TeamDetail:
        with self.store.transaction() as conn:
            if self.store.get_user(user_id, conn=conn) is None:
                raise NotFound(f"User {user_id} not found")

            pool = {player.id: player for player in self.store.get_players(conn=conn)}
            roster = validate_roster(submission, pool, self.rules)

            if roster.contest_id is not None:
                self._check_contest_open(roster.contest_id, conn)

            if self.store.find_user_team(user_id, roster.contest_id, conn=conn) is not None:
                raise DuplicateTeam("User already has a team for this contest")

            team = self.store.create_team(user_id, roster, conn=conn)
            total = self.recompute_team_total(team.id, conn=conn)
            detail = self.store.get_team_detail(team.id, conn=conn)

        logger.info(
            "Team %s created for user %s (contest=%s, credits=%d, points=%d)",
            team.id,
            user_id,
            roster.contest_id,
            roster.total_credits,
            total,
        )
        if detail is None:  # pragma: no cover
            raise KeyError(f"Team {team.id} not found after insert")
        return detail

    def _check_contest_open(self, contest_id: int, conn: sqlite3.Connection) -> Contest:
        contest = self.store.get_contest(contest_id, conn=conn)
        if contest is None:
            raise NotFound(f"Contest {contest_id} not found")
        if not contest.accepting_entries:
            raise ContestUnavailable("Contest is not accepting entries")
        if contest.max_entries is not None:
            entries = self.store.count_contest_teams(contest_id, conn=conn)
            if entries >= contest.max_entries:
                raise ContestUnavailable("Contest is full")
        return contest

    def get_team(self, team_id: int) -> TeamDetail:
        detail = self.store.get_team_detail(team_id)
        if detail is None:
            raise NotFound(f"Team {team_id} not found")
        return detail

    def get_user_team(self, user_id: int, contest_id: Optional[int] = None) -> Optional[TeamDetail]:
        team = self._find_team_for_user(user_id, contest_id)
        if team is None:
            return None
        return self.store.get_team_detail(team.id)

    def _find_team_for_user(self, user_id: int, contest_id: Optional[int]) -> Optional[Team]:
        team = self.store.find_user_team(user_id, contest_id)
        if team is None and contest_id is None:
            teams = self.store.list_teams_by_user(user_id)
            team = teams[0] if teams else None
        return team

    def delete_team(self, team_id: int, actor: User) -> None:
        team = self.store.get_team(team_id)
        if team is None:
            raise NotFound(f"Team {team_id} not found")
        if not actor.is_admin and team.user_id != actor.id:
            raise PermissionDenied("Only the owner or an admin can delete this team")
        self.store.delete_team(team_id)
        logger.info("Team %s deleted by user %s", team_id, actor.id)

    # Scoring updates

    def apply_score_update(
        self,
        player_id: int,
        points: object,
        *,
        runs: Optional[int] = None,
        wickets: Optional[int] = None,
    ) -> Player:
        player, _ = self._apply_score_update(player_id, points, runs=runs, wickets=wickets)
        return player

    def _apply_score_update(
        self,
        player_id: int,
        points: object,
        *,
        runs: Optional[int] = None,
        wickets: Optional[int] = None,
    ) -> Tuple[Player, List[int]]:
        value = coerce_points(points)
        for label, stat in (("runs", runs), ("wickets", wickets)):
            if stat is not None and (isinstance(stat, bool) or not isinstance(stat, int) or stat < 0):
                raise ValidationError(f"{label} must be a non-negative whole number")
            if stat is not None:
                _check_range(label, stat)

        with self.store.transaction() as conn:
            player = self.store.set_player_score(player_id, value, runs=runs, wickets=wickets, conn=conn)
            if player is None:
                raise NotFound(f"Player {player_id} not found")
            team_ids = self.store.team_ids_for_player(player_id, conn=conn)
            for team_id in team_ids:
                self.recompute_team_total(team_id, conn=conn)

        logger.info(
            "Player %s performance set to %d; recomputed %d team(s)",
            player_id,
            value,
            len(team_ids),
        )
        return player, team_ids

    def apply_batch_score_update(self, updates: Iterable[object]) -> BatchScoreResult:
        """Apply ``(player_id, points)`` entries one by one, each in its own transaction.

        Entries may be tuples or mappings with ``player_id`` and ``points`` keys.
        A failing entry is reported in its outcome and never stops the rest.
        """

        outcomes: List[ScoreUpdateOutcome] = []
        for entry in updates:
            player_id = _entry_player_id(entry)
            try:
                player_id, points = _unpack_update(entry)
                player, team_ids = self._apply_score_update(player_id, points)
            except FantasyError as exc:
                logger.warning("Score update for player %s failed: %s", player_id, exc.message)
                outcomes.append(
                    ScoreUpdateOutcome(player_id=player_id, ok=False, error=exc.code, message=exc.message)
                )
            except (sqlite3.Error, OverflowError) as exc:
                logger.exception("Score update for player %s failed in storage", player_id)
                outcomes.append(
                    ScoreUpdateOutcome(player_id=player_id, ok=False, error="internal_error", message=str(exc))
                )
            else:
                outcomes.append(
                    ScoreUpdateOutcome(player_id=player_id, ok=True, player=player, recomputed_team_ids=team_ids)
                )

        result = BatchScoreResult(outcomes=outcomes)
        logger.info(
            "Batch score update finished: %d succeeded, %d failed",
            result.succeeded,
            result.failed,
        )
        return result

    def apply_contest_performance(
        self,
        contest_id: int,
        player_id: int,
        *,
        runs: int = 0,
        boundaries: int = 0,
        sixes: int = 0,
        dot_balls: int = 0,
        wickets: int = 0,
    ) -> PerformanceUpdate:
        """Record a player's match stats for one contest and refresh its teams."""

        breakdown = points_breakdown(
            runs=runs,
            boundaries=boundaries,
            sixes=sixes,
            dot_balls=dot_balls,
            wickets=wickets,
        )
        stats = {
            "runs": breakdown.runs,
            "boundaries": breakdown.boundaries,
            "sixes": breakdown.sixes,
            "dot_balls": breakdown.dot_balls,
            "wickets": breakdown.wickets,
        }

        with self.store.transaction() as conn:
            if self.store.get_contest(contest_id, conn=conn) is None:
                raise NotFound(f"Contest {contest_id} not found")
            if self.store.get_player(player_id, conn=conn) is None:
                raise NotFound(f"Player {player_id} not found")
            performance = self.store.upsert_contest_performance(
                player_id,
                contest_id,
                breakdown.total,
                stats,
                conn=conn,
            )
            team_ids = self.store.team_ids_for_player(player_id, contest_id=contest_id, conn=conn)
            for team_id in team_ids:
                self.recompute_team_total(team_id, conn=conn)

        logger.info(
            "Contest %s: player %s scored %d points; recomputed %d team(s)",
            contest_id,
            player_id,
            breakdown.total,
            len(team_ids),
        )
        return PerformanceUpdate(performance=performance, breakdown=breakdown, recomputed_team_ids=team_ids)

    def list_contest_performances(self, contest_id: int) -> List[Tuple[PlayerPerformance, Optional[Player]]]:
        self.get_contest(contest_id)
        players = {player.id: player for player in self.store.get_players()}
        return [
            (performance, players.get(performance.player_id))
            for performance in self.store.list_contest_performances(contest_id)
        ]

    # Aggregation

    def recompute_team_total(self, team_id: int, *, conn: Optional[sqlite3.Connection] = None) -> int:
        """Rederive a team's total from its roster and current performance data."""

        team = self.store.get_team(team_id, conn=conn)
        if team is None:
            raise NotFound(f"Team {team_id} not found")
        roster = self.store.get_roster(team_id, conn=conn)
        lookup = self.store.performance_map(
            (member.player_id for member in roster),
            team.contest_id,
            conn=conn,
        )
        total = team_total(roster, lookup, self.rules)
        self.store.set_cached_total(team_id, total, conn=conn)
        return total

    def recompute_all_totals(self) -> Dict[int, int]:
        with self.store.transaction() as conn:
            totals = {
                team.id: self.recompute_team_total(team.id, conn=conn)
                for team in self.store.list_teams(conn=conn)
            }
        logger.info("Recomputed totals for %d team(s)", len(totals))
        return totals

    # Standings

    def _standings(self, teams: Sequence[Team], conn: sqlite3.Connection) -> List[Standing]:
        usernames = self.store.usernames((team.user_id for team in teams), conn=conn)
        return [
            Standing(
                team_id=team.id,
                team_name=team.name,
                user_id=team.user_id,
                username=usernames.get(team.user_id, ""),
                total_points=self.recompute_team_total(team.id, conn=conn),
                created_at=team.created_at,
                contest_id=team.contest_id,
            )
            for team in teams
        ]

    def _scope_standings(self, contest_id: Optional[int], conn: sqlite3.Connection) -> List[Standing]:
        if contest_id is None:
            teams = self.store.list_teams(conn=conn)
        else:
            if self.store.get_contest(contest_id, conn=conn) is None:
                raise NotFound(f"Contest {contest_id} not found")
            teams = self.store.list_teams_by_contest(contest_id, conn=conn)
        return self._standings(teams, conn)

    def get_leaderboard(self, contest_id: Optional[int] = None) -> List[LeaderboardEntry]:
        with self.store.transaction() as conn:
            standings = self._scope_standings(contest_id, conn)
        return build_leaderboard(standings)

    def get_team_rank(self, team_id: int) -> TeamRank:
        """Rank within the team's contest, or among all teams when it has none."""

        with self.store.transaction() as conn:
            team = self.store.get_team(team_id, conn=conn)
            if team is None:
                raise NotFound(f"Team {team_id} not found")
            standings = self._scope_standings(team.contest_id, conn)
        return team_rank(team_id, standings)

    def get_user_rank(self, user_id: int, contest_id: Optional[int] = None) -> TeamRank:
        team = self._find_team_for_user(user_id, contest_id)
        if team is None:
            raise NotFound("You have not created a team yet")
        return self.get_team_rank(team.id)

    # Contests

    def list_contests(self) -> List[Contest]:
        return self.store.list_contests()

    def get_contest(self, contest_id: int) -> Contest:
        contest = self.store.get_contest(contest_id)
        if contest is None:
            raise NotFound(f"Contest {contest_id} not found")
        return contest

    def _validate_contest_fields(self, fields: Dict[str, object]) -> None:
        status = fields.get("status")
        if status is not None and status not in self.rules.contest_statuses:
            raise ValidationError(
                f"status must be one of {', '.join(self.rules.contest_statuses)}"
            )
        entry_fee = fields.get("entry_fee")
        if entry_fee is not None and entry_fee < 0:
            raise ValidationError("entry_fee must not be negative")
        max_entries = fields.get("max_entries")
        if max_entries is not None and max_entries < 1:
            raise ValidationError("max_entries must be at least 1")
        for key in ("name", "team1", "team2"):
            if key in fields and not str(fields[key] or "").strip():
                raise ValidationError(f"{key} is required")

    def create_contest(
        self,
        *,
        name: str,
        team1: str,
        team2: str,
        status: str = "not_live",
        entry_fee: int = 0,
        max_entries: Optional[int] = None,
        rules: Optional[str] = None,
    ) -> Contest:
        fields = {
            "name": name,
            "team1": team1,
            "team2": team2,
            "status": status,
            "entry_fee": entry_fee,
            "max_entries": max_entries,
            "rules": rules,
        }
        self._validate_contest_fields(fields)
        contest = self.store.create_contest(**fields)
        logger.info("Contest %s created: %s vs %s", contest.id, team1, team2)
        return contest

    def update_contest(self, contest_id: int, **fields: object) -> Contest:
        self._validate_contest_fields(fields)
        contest = self.store.update_contest(contest_id, **fields)
        if contest is None:
            raise NotFound(f"Contest {contest_id} not found")
        return contest

    def delete_contest(self, contest_id: int) -> None:
        if not self.store.delete_contest(contest_id):
            raise NotFound(f"Contest {contest_id} not found")
        logger.info("Contest %s deleted", contest_id)


def _entry_player_id(entry: object) -> object:
    if isinstance(entry, dict):
        return entry.get("player_id")
    if isinstance(entry, (tuple, list)) and entry:
        return entry[0]
    return getattr(entry, "player_id", None)


def _unpack_update(entry: object) -> Tuple[int, object]:
    if isinstance(entry, dict):
        if "player_id" not in entry or "points" not in entry:
            raise ValidationError("Each update needs player_id and points")
        player_id, points = entry["player_id"], entry["points"]
    elif isinstance(entry, (tuple, list)) and len(entry) == 2:
        player_id, points = entry
    else:
        player_id = getattr(entry, "player_id", None)
        points = getattr(entry, "points", None)
        if player_id is None:
            raise ValidationError("Each update needs player_id and points")
    if isinstance(player_id, bool) or not isinstance(player_id, int):
        raise ValidationError("player_id must be an integer")
    return _check_range("player_id", player_id), points
