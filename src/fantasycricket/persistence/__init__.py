"""Persistence layer for players, teams, contests and accounts."""

from __future__ import annotations

import secrets
import sqlite3
import tempfile
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from fantasycricket.errors import DuplicateTeam
from fantasycricket.models import (
    Contest,
    Player,
    PlayerPerformance,
    PlayerSeed,
    RosterMember,
    Team,
    TeamDetail,
    TeamPlayer,
    User,
)
from fantasycricket.scoring.assembly import ValidatedRoster


_CONTEST_FIELDS = ("name", "team1", "team2", "status", "entry_fee", "max_entries", "rules")
_PERFORMANCE_STATS = ("runs", "boundaries", "sixes", "dot_balls", "wickets")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_ts(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


class FantasyStore:
    """SQLite-backed store for the player pool, teams, contests and sessions.

    Every public method accepts an optional ``conn`` so callers can group
    several reads and writes into one transaction opened with
    :meth:`transaction`; without one, each call commits on its own.
    """

    def __init__(self, db_path: Path | str):
        self._use_uri = isinstance(db_path, str) and db_path.startswith("file:")
        self.db_path: Path | str = db_path if self._use_uri else Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            try:
                conn = sqlite3.connect(self.db_path)
            except sqlite3.OperationalError:
                fallback_dir = Path(tempfile.gettempdir()) / "fantasycricket-runtime"
                fallback_dir.mkdir(parents=True, exist_ok=True)
                self.db_path = fallback_dir / "fantasycricket.sqlite"
                conn = sqlite3.connect(self.db_path)
                self._create_schema(conn)
        else:
            conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Open a connection whose writes commit together or not at all."""

        conn = self._connect()
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    @contextmanager
    def _using(self, conn: Optional[sqlite3.Connection]) -> Iterator[sqlite3.Connection]:
        if conn is not None:
            yield conn
            return
        with self.transaction() as owned:
            yield owned

    def _ensure_schema(self) -> None:
        with self.transaction() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                username TEXT NOT NULL UNIQUE,
                name TEXT NOT NULL,
                email TEXT NOT NULL UNIQUE,
                password_hash TEXT NOT NULL,
                is_admin INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL
            );
            CREATE TABLE IF NOT EXISTS sessions (
                token TEXT PRIMARY KEY,
                user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                created_at TEXT NOT NULL,
                expires_at TEXT NOT NULL
            );
            CREATE TABLE IF NOT EXISTS players (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                category TEXT NOT NULL,
                credit_points INTEGER NOT NULL,
                performance_points INTEGER NOT NULL DEFAULT 0,
                runs INTEGER,
                wickets INTEGER
            );
            CREATE TABLE IF NOT EXISTS contests (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                team1 TEXT NOT NULL,
                team2 TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'not_live',
                entry_fee INTEGER NOT NULL DEFAULT 0,
                max_entries INTEGER,
                rules TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );
            CREATE TABLE IF NOT EXISTS teams (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                user_id INTEGER NOT NULL REFERENCES users(id),
                contest_id INTEGER REFERENCES contests(id),
                total_points INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL
            );
            CREATE UNIQUE INDEX IF NOT EXISTS teams_user_contest
                ON teams (user_id, IFNULL(contest_id, 0));
            CREATE TABLE IF NOT EXISTS team_players (
                team_id INTEGER NOT NULL REFERENCES teams(id) ON DELETE CASCADE,
                player_id INTEGER NOT NULL,
                is_captain INTEGER NOT NULL DEFAULT 0,
                is_vice_captain INTEGER NOT NULL DEFAULT 0,
                credit_points_at_selection INTEGER NOT NULL DEFAULT 0,
                PRIMARY KEY (team_id, player_id)
            );
            CREATE INDEX IF NOT EXISTS team_players_player ON team_players (player_id);
            CREATE TABLE IF NOT EXISTS player_performances (
                player_id INTEGER NOT NULL,
                contest_id INTEGER NOT NULL REFERENCES contests(id) ON DELETE CASCADE,
                runs INTEGER NOT NULL DEFAULT 0,
                boundaries INTEGER NOT NULL DEFAULT 0,
                sixes INTEGER NOT NULL DEFAULT 0,
                dot_balls INTEGER NOT NULL DEFAULT 0,
                wickets INTEGER NOT NULL DEFAULT 0,
                performance_points INTEGER NOT NULL DEFAULT 0,
                updated_at TEXT NOT NULL,
                PRIMARY KEY (player_id, contest_id)
            );
            """
        )

    # Users and sessions

    def create_user(
        self,
        *,
        username: str,
        name: str,
        email: str,
        password_hash: str,
        is_admin: bool = False,
        conn: Optional[sqlite3.Connection] = None,
    ) -> User:
        with self._using(conn) as db:
            cursor = db.execute(
                """
                INSERT INTO users (username, name, email, password_hash, is_admin, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (username, name, email, password_hash, int(is_admin), _now().isoformat()),
            )
            user = self.get_user(cursor.lastrowid, conn=db)
        if user is None:  # pragma: no cover
            raise KeyError(f"User {username} not found after insert")
        return user

    def get_user(self, user_id: int, *, conn: Optional[sqlite3.Connection] = None) -> Optional[User]:
        with self._using(conn) as db:
            row = db.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return self._row_to_user(row) if row is not None else None

    def get_credentials(self, username: str) -> Optional[Tuple[User, str]]:
        with self._using(None) as db:
            row = db.execute("SELECT * FROM users WHERE username = ?", (username,)).fetchone()
        if row is None:
            return None
        return self._row_to_user(row), row["password_hash"]

    def user_exists(self, *, username: str, email: str) -> bool:
        with self._using(None) as db:
            row = db.execute(
                "SELECT 1 FROM users WHERE username = ? OR email = ?",
                (username, email),
            ).fetchone()
        return row is not None

    def set_admin(self, user_id: int, is_admin: bool = True) -> Optional[User]:
        with self._using(None) as db:
            db.execute("UPDATE users SET is_admin = ? WHERE id = ?", (int(is_admin), user_id))
            return self.get_user(user_id, conn=db)

    def create_session(self, user_id: int, *, expires_at: datetime) -> str:
        token = secrets.token_urlsafe(32)
        with self._using(None) as db:
            db.execute(
                "INSERT INTO sessions (token, user_id, created_at, expires_at) VALUES (?, ?, ?, ?)",
                (token, user_id, _now().isoformat(), expires_at.isoformat()),
            )
        return token

    def get_session_user(self, token: str, *, now: Optional[datetime] = None) -> Optional[User]:
        now = now or _now()
        with self._using(None) as db:
            row = db.execute(
                """
                SELECT users.*, sessions.expires_at AS session_expires_at
                FROM sessions JOIN users ON users.id = sessions.user_id
                WHERE sessions.token = ?
                """,
                (token,),
            ).fetchone()
            if row is None:
                return None
            if datetime.fromisoformat(row["session_expires_at"]) <= now:
                db.execute("DELETE FROM sessions WHERE token = ?", (token,))
                return None
        return self._row_to_user(row)

    def delete_session(self, token: str) -> bool:
        with self._using(None) as db:
            cursor = db.execute("DELETE FROM sessions WHERE token = ?", (token,))
        return cursor.rowcount > 0

    # Players

    def create_player(self, seed: PlayerSeed, *, conn: Optional[sqlite3.Connection] = None) -> Player:
        with self._using(conn) as db:
            cursor = db.execute(
                """
                INSERT INTO players (name, category, credit_points, performance_points, runs, wickets)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    seed.name,
                    seed.category,
                    seed.credit_points,
                    seed.performance_points,
                    seed.runs,
                    seed.wickets,
                ),
            )
            player = self.get_player(cursor.lastrowid, conn=db)
        if player is None:  # pragma: no cover
            raise KeyError(f"Player {seed.name} not found after insert")
        return player

    def get_players(self, *, conn: Optional[sqlite3.Connection] = None) -> List[Player]:
        with self._using(conn) as db:
            rows = db.execute("SELECT * FROM players ORDER BY id").fetchall()
        return [self._row_to_player(row) for row in rows]

    def get_players_by_category(self, category: str) -> List[Player]:
        with self._using(None) as db:
            rows = db.execute(
                "SELECT * FROM players WHERE category = ? ORDER BY id",
                (category,),
            ).fetchall()
        return [self._row_to_player(row) for row in rows]

    def get_player(self, player_id: int, *, conn: Optional[sqlite3.Connection] = None) -> Optional[Player]:
        with self._using(conn) as db:
            row = db.execute("SELECT * FROM players WHERE id = ?", (player_id,)).fetchone()
        return self._row_to_player(row) if row is not None else None

    def set_player_score(
        self,
        player_id: int,
        points: int,
        *,
        runs: Optional[int] = None,
        wickets: Optional[int] = None,
        conn: Optional[sqlite3.Connection] = None,
    ) -> Optional[Player]:
        """Overwrite a player's global performance points (and optional stats)."""

        with self._using(conn) as db:
            cursor = db.execute(
                """
                UPDATE players
                SET performance_points = ?,
                    runs = COALESCE(?, runs),
                    wickets = COALESCE(?, wickets)
                WHERE id = ?
                """,
                (points, runs, wickets, player_id),
            )
            if cursor.rowcount == 0:
                return None
            return self.get_player(player_id, conn=db)

    def set_player_credits(
        self,
        player_id: int,
        credit_points: int,
        *,
        conn: Optional[sqlite3.Connection] = None,
    ) -> Optional[Player]:
        """Reprice a pool player. Roster rows keep the cost they were picked at."""

        with self._using(conn) as db:
            cursor = db.execute(
                "UPDATE players SET credit_points = ? WHERE id = ?",
                (credit_points, player_id),
            )
            if cursor.rowcount == 0:
                return None
            return self.get_player(player_id, conn=db)

    def delete_player(self, player_id: int, *, conn: Optional[sqlite3.Connection] = None) -> bool:
        with self._using(conn) as db:
            db.execute("DELETE FROM team_players WHERE player_id = ?", (player_id,))
            db.execute("DELETE FROM player_performances WHERE player_id = ?", (player_id,))
            cursor = db.execute("DELETE FROM players WHERE id = ?", (player_id,))
        return cursor.rowcount > 0

    def selection_percentages(self) -> Dict[int, float]:
        """Share of all teams (0-100) that picked each player."""

        with self._using(None) as db:
            total = db.execute("SELECT COUNT(*) FROM teams").fetchone()[0]
            if total == 0:
                return {}
            rows = db.execute(
                "SELECT player_id, COUNT(*) AS picks FROM team_players GROUP BY player_id"
            ).fetchall()
        return {row["player_id"]: row["picks"] * 100.0 / total for row in rows}

    # Performance

    def get_performance(
        self,
        player_id: int,
        contest_id: Optional[int] = None,
        *,
        conn: Optional[sqlite3.Connection] = None,
    ) -> Optional[int]:
        """Points for a player, contest-scoped when ``contest_id`` is given."""

        return self.performance_map([player_id], contest_id, conn=conn).get(player_id)

    def performance_map(
        self,
        player_ids: Iterable[int],
        contest_id: Optional[int] = None,
        *,
        conn: Optional[sqlite3.Connection] = None,
    ) -> Dict[int, int]:
        ids = list(dict.fromkeys(player_ids))
        if not ids:
            return {}
        placeholders = ", ".join("?" for _ in ids)
        with self._using(conn) as db:
            if contest_id is None:
                rows = db.execute(
                    f"SELECT id AS player_id, performance_points FROM players WHERE id IN ({placeholders})",
                    ids,
                ).fetchall()
            else:
                rows = db.execute(
                    f"""
                    SELECT player_id, performance_points FROM player_performances
                    WHERE contest_id = ? AND player_id IN ({placeholders})
                    """,
                    [contest_id, *ids],
                ).fetchall()
        return {row["player_id"]: row["performance_points"] for row in rows}

    def set_performance(
        self,
        player_id: int,
        points: int,
        contest_id: Optional[int] = None,
        *,
        stats: Optional[Dict[str, int]] = None,
        conn: Optional[sqlite3.Connection] = None,
    ) -> None:
        if contest_id is None:
            self.set_player_score(player_id, points, conn=conn)
            return
        self.upsert_contest_performance(player_id, contest_id, points, stats or {}, conn=conn)

    def upsert_contest_performance(
        self,
        player_id: int,
        contest_id: int,
        points: int,
        stats: Dict[str, int],
        *,
        conn: Optional[sqlite3.Connection] = None,
    ) -> PlayerPerformance:
        values = [int(stats.get(stat, 0)) for stat in _PERFORMANCE_STATS]
        with self._using(conn) as db:
            db.execute(
                """
                INSERT INTO player_performances (
                    player_id, contest_id, runs, boundaries, sixes, dot_balls, wickets,
                    performance_points, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (player_id, contest_id) DO UPDATE SET
                    runs = excluded.runs,
                    boundaries = excluded.boundaries,
                    sixes = excluded.sixes,
                    dot_balls = excluded.dot_balls,
                    wickets = excluded.wickets,
                    performance_points = excluded.performance_points,
                    updated_at = excluded.updated_at
                """,
                (player_id, contest_id, *values, points, _now().isoformat()),
            )
            row = db.execute(
                "SELECT * FROM player_performances WHERE player_id = ? AND contest_id = ?",
                (player_id, contest_id),
            ).fetchone()
        return self._row_to_performance(row)

    def list_contest_performances(self, contest_id: int) -> List[PlayerPerformance]:
        with self._using(None) as db:
            rows = db.execute(
                "SELECT * FROM player_performances WHERE contest_id = ? ORDER BY player_id",
                (contest_id,),
            ).fetchall()
        return [self._row_to_performance(row) for row in rows]

    # Teams

    def create_team(
        self,
        user_id: int,
        roster: ValidatedRoster,
        *,
        created_at: Optional[datetime] = None,
        conn: Optional[sqlite3.Connection] = None,
    ) -> Team:
        """Insert the team row and all roster rows together.

        Raises ``DuplicateTeam`` when the user already owns a team in the same
        contest scope; in that case nothing is written.
        """

        created_at = created_at or _now()
        with self._using(conn) as db:
            try:
                cursor = db.execute(
                    """
                    INSERT INTO teams (name, user_id, contest_id, total_points, created_at)
                    VALUES (?, ?, ?, 0, ?)
                    """,
                    (roster.name, user_id, roster.contest_id, created_at.isoformat()),
                )
            except sqlite3.IntegrityError as exc:
                if "UNIQUE" not in str(exc):
                    raise
                raise DuplicateTeam("User already has a team for this contest") from exc
            team_id = cursor.lastrowid
            db.executemany(
                """
                INSERT INTO team_players (
                    team_id, player_id, is_captain, is_vice_captain, credit_points_at_selection
                ) VALUES (?, ?, ?, ?, ?)
                """,
                [
                    (
                        team_id,
                        slot.player_id,
                        int(slot.is_captain),
                        int(slot.is_vice_captain),
                        slot.credit_points_at_selection,
                    )
                    for slot in roster.slots
                ],
            )
            team = self.get_team(team_id, conn=db)
        if team is None:  # pragma: no cover
            raise KeyError(f"Team {team_id} not found after insert")
        return team

    def get_team(self, team_id: int, *, conn: Optional[sqlite3.Connection] = None) -> Optional[Team]:
        with self._using(conn) as db:
            row = db.execute("SELECT * FROM teams WHERE id = ?", (team_id,)).fetchone()
        return self._row_to_team(row) if row is not None else None

    def list_teams(self, *, conn: Optional[sqlite3.Connection] = None) -> List[Team]:
        with self._using(conn) as db:
            rows = db.execute("SELECT * FROM teams ORDER BY id").fetchall()
        return [self._row_to_team(row) for row in rows]

    def list_teams_by_contest(
        self,
        contest_id: int,
        *,
        conn: Optional[sqlite3.Connection] = None,
    ) -> List[Team]:
        with self._using(conn) as db:
            rows = db.execute(
                "SELECT * FROM teams WHERE contest_id = ? ORDER BY id",
                (contest_id,),
            ).fetchall()
        return [self._row_to_team(row) for row in rows]

    def list_teams_by_user(self, user_id: int) -> List[Team]:
        with self._using(None) as db:
            rows = db.execute(
                "SELECT * FROM teams WHERE user_id = ? ORDER BY created_at, id",
                (user_id,),
            ).fetchall()
        return [self._row_to_team(row) for row in rows]

    def find_user_team(
        self,
        user_id: int,
        contest_id: Optional[int],
        *,
        conn: Optional[sqlite3.Connection] = None,
    ) -> Optional[Team]:
        with self._using(conn) as db:
            row = db.execute(
                "SELECT * FROM teams WHERE user_id = ? AND IFNULL(contest_id, 0) = IFNULL(?, 0)",
                (user_id, contest_id),
            ).fetchone()
        return self._row_to_team(row) if row is not None else None

    def count_contest_teams(self, contest_id: int, *, conn: Optional[sqlite3.Connection] = None) -> int:
        with self._using(conn) as db:
            return db.execute(
                "SELECT COUNT(*) FROM teams WHERE contest_id = ?",
                (contest_id,),
            ).fetchone()[0]

    def get_roster(self, team_id: int, *, conn: Optional[sqlite3.Connection] = None) -> List[RosterMember]:
        with self._using(conn) as db:
            rows = db.execute(
                "SELECT * FROM team_players WHERE team_id = ? ORDER BY rowid",
                (team_id,),
            ).fetchall()
        return [
            RosterMember(
                team_id=row["team_id"],
                player_id=row["player_id"],
                is_captain=bool(row["is_captain"]),
                is_vice_captain=bool(row["is_vice_captain"]),
                credit_points_at_selection=row["credit_points_at_selection"],
            )
            for row in rows
        ]

    def team_ids_for_player(
        self,
        player_id: int,
        *,
        contest_id: Optional[int] = None,
        conn: Optional[sqlite3.Connection] = None,
    ) -> List[int]:
        """Teams holding a player, optionally limited to one contest."""

        query = (
            "SELECT teams.id FROM team_players JOIN teams ON teams.id = team_players.team_id "
            "WHERE team_players.player_id = ?"
        )
        params: list[int] = [player_id]
        if contest_id is not None:
            query += " AND teams.contest_id = ?"
            params.append(contest_id)
        query += " ORDER BY teams.id"
        with self._using(conn) as db:
            rows = db.execute(query, params).fetchall()
        return [row[0] for row in rows]

    def set_cached_total(self, team_id: int, total: int, *, conn: Optional[sqlite3.Connection] = None) -> None:
        with self._using(conn) as db:
            db.execute("UPDATE teams SET total_points = ? WHERE id = ?", (total, team_id))

    def delete_team(self, team_id: int, *, conn: Optional[sqlite3.Connection] = None) -> bool:
        with self._using(conn) as db:
            db.execute("DELETE FROM team_players WHERE team_id = ?", (team_id,))
            cursor = db.execute("DELETE FROM teams WHERE id = ?", (team_id,))
        return cursor.rowcount > 0

    def get_team_detail(self, team_id: int, *, conn: Optional[sqlite3.Connection] = None) -> Optional[TeamDetail]:
        with self._using(conn) as db:
            team = self.get_team(team_id, conn=db)
            if team is None:
                return None
            owner = db.execute("SELECT username FROM users WHERE id = ?", (team.user_id,)).fetchone()
            rows = db.execute(
                """
                SELECT players.*, team_players.is_captain, team_players.is_vice_captain,
                       team_players.credit_points_at_selection
                FROM team_players JOIN players ON players.id = team_players.player_id
                WHERE team_players.team_id = ?
                ORDER BY team_players.rowid
                """,
                (team_id,),
            ).fetchall()
        players = [
            TeamPlayer(
                **self._row_to_player(row).model_dump(),
                is_captain=bool(row["is_captain"]),
                is_vice_captain=bool(row["is_vice_captain"]),
                credit_points_at_selection=row["credit_points_at_selection"],
            )
            for row in rows
        ]
        return TeamDetail(team=team, username=owner["username"] if owner else None, players=players)

    def usernames(self, user_ids: Iterable[int], *, conn: Optional[sqlite3.Connection] = None) -> Dict[int, str]:
        ids = list(dict.fromkeys(user_ids))
        if not ids:
            return {}
        placeholders = ", ".join("?" for _ in ids)
        with self._using(conn) as db:
            rows = db.execute(
                f"SELECT id, username FROM users WHERE id IN ({placeholders})",
                ids,
            ).fetchall()
        return {row["id"]: row["username"] for row in rows}

    # Contests

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
        now = _now().isoformat()
        with self._using(None) as db:
            cursor = db.execute(
                """
                INSERT INTO contests (
                    name, team1, team2, status, entry_fee, max_entries, rules, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (name, team1, team2, status, entry_fee, max_entries, rules, now, now),
            )
            contest = self.get_contest(cursor.lastrowid, conn=db)
        if contest is None:  # pragma: no cover
            raise KeyError(f"Contest {name} not found after insert")
        return contest

    def get_contest(self, contest_id: int, *, conn: Optional[sqlite3.Connection] = None) -> Optional[Contest]:
        with self._using(conn) as db:
            row = db.execute("SELECT * FROM contests WHERE id = ?", (contest_id,)).fetchone()
        return self._row_to_contest(row) if row is not None else None

    def list_contests(self) -> List[Contest]:
        with self._using(None) as db:
            rows = db.execute("SELECT * FROM contests ORDER BY created_at DESC, id DESC").fetchall()
        return [self._row_to_contest(row) for row in rows]

    def update_contest(self, contest_id: int, **fields: object) -> Optional[Contest]:
        updates = {key: value for key, value in fields.items() if key in _CONTEST_FIELDS}
        with self._using(None) as db:
            if self.get_contest(contest_id, conn=db) is None:
                return None
            if updates:
                assignments = ", ".join(f"{key} = ?" for key in updates)
                db.execute(
                    f"UPDATE contests SET {assignments}, updated_at = ? WHERE id = ?",
                    (*updates.values(), _now().isoformat(), contest_id),
                )
            return self.get_contest(contest_id, conn=db)

    def delete_contest(self, contest_id: int) -> bool:
        """Remove a contest together with its teams, rosters and performances."""

        with self._using(None) as db:
            db.execute(
                "DELETE FROM team_players WHERE team_id IN (SELECT id FROM teams WHERE contest_id = ?)",
                (contest_id,),
            )
            db.execute("DELETE FROM teams WHERE contest_id = ?", (contest_id,))
            db.execute("DELETE FROM player_performances WHERE contest_id = ?", (contest_id,))
            cursor = db.execute("DELETE FROM contests WHERE id = ?", (contest_id,))
        return cursor.rowcount > 0

    # Row conversion

    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            username=row["username"],
            name=row["name"],
            email=row["email"],
            is_admin=bool(row["is_admin"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def _row_to_player(self, row: sqlite3.Row) -> Player:
        return Player(
            id=row["id"],
            name=row["name"],
            category=row["category"],
            credit_points=row["credit_points"],
            performance_points=row["performance_points"],
            runs=row["runs"],
            wickets=row["wickets"],
        )

    def _row_to_team(self, row: sqlite3.Row) -> Team:
        return Team(
            id=row["id"],
            name=row["name"],
            user_id=row["user_id"],
            contest_id=row["contest_id"],
            total_points=row["total_points"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def _row_to_contest(self, row: sqlite3.Row) -> Contest:
        return Contest(
            id=row["id"],
            name=row["name"],
            team1=row["team1"],
            team2=row["team2"],
            status=row["status"],
            entry_fee=row["entry_fee"],
            max_entries=row["max_entries"],
            rules=row["rules"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=_parse_ts(row["updated_at"]) or datetime.fromisoformat(row["created_at"]),
        )

    def _row_to_performance(self, row: sqlite3.Row) -> PlayerPerformance:
        return PlayerPerformance(
            player_id=row["player_id"],
            contest_id=row["contest_id"],
            runs=row["runs"],
            boundaries=row["boundaries"],
            sixes=row["sixes"],
            dot_balls=row["dot_balls"],
            wickets=row["wickets"],
            performance_points=row["performance_points"],
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


__all__ = ["FantasyStore"]
