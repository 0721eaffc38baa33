"""Command-line interface for running the league from a shell."""

from __future__ import annotations

import argparse
import csv
import json
from pathlib import Path

from fantasycricket.accounts import AccountService
from fantasycricket.config.rules import get_rules, iter_rules
from fantasycricket.config_loader import PoolProfile, Settings
from fantasycricket.errors import FantasyError
from fantasycricket.ingest import load_player_csv
from fantasycricket.leaderboard import leaderboard_to_csv
from fantasycricket.persistence import FantasyStore
from fantasycricket.pool import DEFAULT_CREDITS, DEFAULT_POOL, initialize_players
from fantasycricket.scoring.service import FantasyService


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage a fantasy cricket league")
    parser.add_argument("--db", type=Path, default=None, help="SQLite database path (default from environment)")
    parser.add_argument(
        "--rules",
        default=None,
        choices=[rules.name for rules in iter_rules()],
        help="Game format used for credit caps and multipliers",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("init-db", help="Create the database schema")

    seed = commands.add_parser("seed-players", help="Load the player pool")
    source = seed.add_mutually_exclusive_group()
    source.add_argument("--pool", type=Path, default=None, help="Player pool JSON profile")
    source.add_argument("--csv", type=Path, default=None, help="Player pool CSV")
    seed.add_argument(
        "--column",
        action="append",
        default=[],
        help="Mapping for player CSV columns (e.g., name=First Name|Last Name)",
    )
    seed.add_argument("--save-pool", type=Path, default=None, help="Save the loaded pool as a JSON profile")

    admin = commands.add_parser("seed-admin", help="Create or promote an admin account")
    admin.add_argument("username")
    admin.add_argument("password")
    admin.add_argument("--email", default=None)

    score = commands.add_parser("score", help="Set one player's performance points")
    score.add_argument("player_id", type=int)
    score.add_argument("points", type=int)
    score.add_argument("--runs", type=int, default=None)
    score.add_argument("--wickets", type=int, default=None)

    batch = commands.add_parser("batch-score", help="Apply score updates from a player_id,points CSV")
    batch.add_argument("path", type=Path)
    batch.add_argument("--report", type=Path, default=None, help="Optional path to write the outcome JSON")

    credits = commands.add_parser("set-credits", help="Reprice pool players by name")
    credits.add_argument("prices", nargs="*", help="NAME=CREDITS entries (default: the built-in pool prices)")
    credits.add_argument("--file", type=Path, default=None, help="JSON object mapping player names to credits")

    commands.add_parser("recompute", help="Recompute every cached team total")

    board = commands.add_parser("leaderboard", help="Print or export a leaderboard")
    board.add_argument("--contest", type=int, default=None, help="Contest id (default: all teams)")
    board.add_argument("--output", type=Path, default=None, help="Write CSV here instead of printing")

    return parser.parse_args(argv)


def _parse_mapping(entries: list[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Invalid mapping entry '{entry}', expected key=value")
        key, value = entry.split("=", 1)
        mapping[key.strip()] = value.strip()
    return mapping


def _read_score_rows(path: Path) -> list[dict[str, object]]:
    updates: list[dict[str, object]] = []
    with path.open(newline="", encoding="utf-8-sig") as f:
        for row in csv.DictReader(f):
            updates.append({"player_id": _maybe_int(row.get("player_id")), "points": _maybe_int(row.get("points"))})
    return updates


def _maybe_int(raw: str | None) -> object:
    if raw is None:
        return None
    text = raw.strip()
    try:
        return int(text)
    except ValueError:
        return text


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    settings = Settings.from_env()
    store = FantasyStore(args.db or settings.db_path)
    service = FantasyService(store, get_rules(args.rules or settings.rules_key))

    if args.command == "init-db":
        print(f"Database ready at {store.db_path}")
        return

    if args.command == "seed-players":
        seeds = DEFAULT_POOL
        if args.pool:
            seeds = PoolProfile.load(args.pool).players
        elif args.csv:
            seeds, import_report = load_player_csv(args.csv, mapping=_parse_mapping(args.column) or None)
            print(f"Accepted {import_report.accepted}/{import_report.total_rows} player rows")
            for rejected in import_report.rejected_rows:
                print(f"  rejected {rejected}")
        if args.save_pool:
            PoolProfile(list(seeds)).save(args.save_pool)
            print(f"Saved player pool to {args.save_pool}")
        report = initialize_players(store, seeds)
        print(
            f"Created {report.total_created} player(s), skipped {len(report.skipped)}, "
            f"removed {len(report.removed_duplicates)} duplicate(s)"
        )
        return

    if args.command == "seed-admin":
        accounts = AccountService(store, session_ttl_hours=settings.session_ttl_hours)
        user = accounts.ensure_admin(args.username, args.password, email=args.email)
        print(f"Admin account ready: {user.username} (id {user.id})")
        return

    if args.command == "score":
        try:
            player = service.apply_score_update(
                args.player_id,
                args.points,
                runs=args.runs,
                wickets=args.wickets,
            )
        except FantasyError as exc:
            raise SystemExit(f"error: {exc.message}") from exc
        print(f"{player.name} now has {player.performance_points} points")
        return

    if args.command == "batch-score":
        result = service.apply_batch_score_update(_read_score_rows(args.path))
        print(f"Batch {result.status}: {result.succeeded} succeeded, {result.failed} failed")
        for outcome in result.outcomes:
            if not outcome.ok:
                print(f"  player {outcome.player_id}: {outcome.error} ({outcome.message})")
        if args.report:
            payload = {
                "status": result.status,
                "succeeded": result.succeeded,
                "failed": result.failed,
                "results": [
                    {
                        "player_id": outcome.player_id,
                        "ok": outcome.ok,
                        "error": outcome.error,
                        "message": outcome.message,
                        "recomputed_team_ids": outcome.recomputed_team_ids,
                    }
                    for outcome in result.outcomes
                ],
            }
            args.report.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            print(f"Wrote batch report to {args.report}")
        return

    if args.command == "set-credits":
        prices: dict[str, object] = {}
        if args.file:
            prices.update(json.loads(args.file.read_text(encoding="utf-8")))
        prices.update({name: _maybe_int(value) for name, value in _parse_mapping(args.prices).items()})
        try:
            report = service.reprice_players(prices or DEFAULT_CREDITS)
        except FantasyError as exc:
            raise SystemExit(f"error: {exc.message}") from exc
        print(
            f"Repriced {len(report.updated)} player(s), {len(report.unpriced)} unpriced, "
            f"{len(report.unknown)} unknown"
        )
        for name in report.unknown:
            print(f"  unknown player {name}")
        return

    if args.command == "recompute":
        totals = service.recompute_all_totals()
        print(f"Recomputed {len(totals)} team total(s)")
        return

    if args.command == "leaderboard":
        try:
            entries = service.get_leaderboard(args.contest)
        except FantasyError as exc:
            raise SystemExit(f"error: {exc.message}") from exc
        if args.output:
            args.output.write_text(leaderboard_to_csv(entries), encoding="utf-8")
            print(f"Wrote {len(entries)} row(s) to {args.output}")
            return
        for entry in entries:
            standing = entry.standing
            print(f"{entry.rank:>3}  {standing.total_points:>6}  {standing.team_name} ({standing.username})")


if __name__ == "__main__":
    main()
