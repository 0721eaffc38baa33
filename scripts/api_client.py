"""Lightweight REST client for the fantasycricket API."""

from __future__ import annotations

import argparse
import csv
import json
from pathlib import Path

import httpx


def read_score_updates(path: Path) -> list[dict[str, object]]:
    updates: list[dict[str, object]] = []
    with path.open(newline="", encoding="utf-8-sig") as f:
        for row in csv.DictReader(f):
            try:
                updates.append({"player_id": int(row["player_id"]), "points": int(row["points"])})
            except (KeyError, ValueError) as exc:
                raise SystemExit(f"Invalid score row {row}: {exc}") from exc
    return updates


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the fantasycricket REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--username", help="Login before running admin commands")
    parser.add_argument("--password", help="Password for --username")
    parser.add_argument("--contest", type=int, default=None, help="Contest id for leaderboard commands")
    parser.add_argument("--leaderboard", action="store_true", help="Print the leaderboard")
    parser.add_argument("--export-path", type=Path, help="Download the leaderboard CSV to this path")
    parser.add_argument("--scores", type=Path, help="CSV of player_id,points to apply as one batch")
    parser.add_argument("--recompute", action="store_true", help="Recompute every team total")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.username:
            resp = client.post("/api/auth/login", json={"username": args.username, "password": args.password or ""})
            if resp.status_code == 401:
                raise SystemExit("login failed")
            resp.raise_for_status()
            client.headers["Authorization"] = f"Bearer {resp.json()['token']}"

        if args.scores:
            resp = client.post("/api/admin/players/scores", json={"updates": read_score_updates(args.scores)})
            resp.raise_for_status()
            payload = resp.json()
            print(f"Batch {payload['status']}: {payload['succeeded']} succeeded, {payload['failed']} failed")
            for result in payload["results"]:
                if not result["ok"]:
                    print(f"  player {result['player_id']}: {result['error']} ({result['message']})")

        if args.recompute:
            resp = client.post("/api/admin/recompute")
            resp.raise_for_status()
            print(f"Recomputed {resp.json()['teams']} team(s)")

        if args.leaderboard:
            path = f"/api/contests/{args.contest}/leaderboard" if args.contest else "/api/leaderboard"
            resp = client.get(path)
            if resp.status_code == 404:
                raise SystemExit(f"contest {args.contest} not found")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))

        if args.export_path:
            params = {"contest_id": args.contest} if args.contest else None
            resp = client.get("/api/leaderboard.csv", params=params)
            if resp.status_code == 404:
                raise SystemExit(f"contest {args.contest} not found")
            resp.raise_for_status()
            args.export_path.write_text(resp.text)
            print(f"CSV export saved to {args.export_path}")


if __name__ == "__main__":
    main()
