"""Helpers to load player pool CSVs and emit seed records."""

from __future__ import annotations

import csv
import logging
import re
from dataclasses import dataclass
from io import StringIO
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Tuple

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from fantasycricket.models import PlayerSeed


logger = logging.getLogger(__name__)

DEFAULT_PLAYER_MAPPING: Mapping[str, str] = {
    "name": "name",
    "category": "category",
    "credit_points": "credit_points",
    "performance_points": "performance_points",
    "runs": "runs",
    "wickets": "wickets",
}


class PlayerRow(BaseModel):
    raw_name: str
    raw_category: str
    raw_credit_points: str
    raw_performance_points: Optional[str] = None
    raw_runs: Optional[str] = None
    raw_wickets: Optional[str] = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, str], mapping: Mapping[str, str]) -> "PlayerRow":
        def extract(key: str) -> Optional[str]:
            column = mapping.get(key)
            if column is None:
                return None
            if "|" in column:
                parts = [row.get(part.strip(), "").strip() for part in column.split("|")]
                joined = " ".join(part for part in parts if part)
                return joined or None
            value = row.get(column)
            return value.strip() if value is not None else None

        return cls(
            raw_name=extract("name") or "",
            raw_category=extract("category") or "",
            raw_credit_points=extract("credit_points") or "",
            raw_performance_points=extract("performance_points"),
            raw_runs=extract("runs"),
            raw_wickets=extract("wickets"),
        )


@dataclass(frozen=True)
class PlayerImportReport:
    total_rows: int
    accepted: int
    rejected_rows: List[str]


def _parse_int(raw: Optional[str], *, label: str, default: Optional[int] = None) -> Optional[int]:
    if raw is None or not raw.strip():
        return default
    text = re.sub(r"[,\s]", "", raw)
    try:
        return int(float(text))
    except ValueError:
        raise ValueError(f"{label} '{raw}' is not numeric") from None


def rows_to_seeds(rows: Iterable[PlayerRow]) -> Tuple[List[PlayerSeed], PlayerImportReport]:
    seeds: List[PlayerSeed] = []
    rejected: List[str] = []
    total = 0
    for index, row in enumerate(rows, start=1):
        total += 1
        try:
            seed = PlayerSeed(
                name=row.raw_name,
                category=row.raw_category,
                credit_points=_parse_int(row.raw_credit_points, label="credit_points"),
                performance_points=_parse_int(row.raw_performance_points, label="performance_points", default=0),
                runs=_parse_int(row.raw_runs, label="runs"),
                wickets=_parse_int(row.raw_wickets, label="wickets"),
            )
        except (ValueError, PydanticValidationError) as exc:
            reason = str(exc).splitlines()[0]
            logger.warning("Skipping player row %d (%s): %s", index, row.raw_name or "?", reason)
            rejected.append(f"row {index}: {row.raw_name or '?'} ({reason})")
            continue
        seeds.append(seed)
    return seeds, PlayerImportReport(total_rows=total, accepted=len(seeds), rejected_rows=rejected)


def parse_player_csv(
    text: str,
    *,
    mapping: Mapping[str, str] | None = None,
) -> Tuple[List[PlayerSeed], PlayerImportReport]:
    mapping = {**DEFAULT_PLAYER_MAPPING, **(mapping or {})}
    reader = csv.DictReader(StringIO(text))
    if not reader.fieldnames:
        raise ValueError("player CSV has no header row")
    missing = [
        mapping[key]
        for key in ("name", "category", "credit_points")
        if not all(part.strip() in reader.fieldnames for part in mapping[key].split("|"))
    ]
    if missing:
        raise ValueError(f"player CSV is missing required columns: {', '.join(missing)}")
    return rows_to_seeds(PlayerRow.from_mapping(row, mapping) for row in reader)


def load_player_csv(
    path: Path,
    *,
    mapping: Mapping[str, str] | None = None,
) -> Tuple[List[PlayerSeed], PlayerImportReport]:
    return parse_player_csv(path.read_text(encoding="utf-8-sig"), mapping=mapping)
