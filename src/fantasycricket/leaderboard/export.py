"""CSV export helpers for leaderboards."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Sequence

from fantasycricket.leaderboard.ranking import LeaderboardEntry


LEADERBOARD_HEADERS: tuple[str, ...] = ("Rank", "Team", "Owner", "TeamId", "ContestId", "Points")


def leaderboard_to_csv(entries: Sequence[LeaderboardEntry]) -> str:
    """Render leaderboard entries as CSV, one row per team in ranked order."""

    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(LEADERBOARD_HEADERS)
    for entry in entries:
        standing = entry.standing
        writer.writerow(
            [
                entry.rank,
                standing.team_name,
                standing.username,
                standing.team_id,
                standing.contest_id if standing.contest_id is not None else "",
                standing.total_points,
            ]
        )
    return buffer.getvalue()


__all__ = [
    "LEADERBOARD_HEADERS",
    "leaderboard_to_csv",
]
