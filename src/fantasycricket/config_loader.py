"""Environment settings and persisted player pool profiles."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from fantasycricket.config.rules import DEFAULT_RULES_KEY
from fantasycricket.models import PlayerSeed


logger = logging.getLogger(__name__)

_DB_PATH_ENV = "FANTASYCRICKET_DB_PATH"
_SESSION_TTL_ENV = "FANTASYCRICKET_SESSION_TTL_HOURS"
_RULES_ENV = "FANTASYCRICKET_RULES"
_ADMIN_USERNAME_ENV = "FANTASYCRICKET_ADMIN_USERNAME"
_ADMIN_PASSWORD_ENV = "FANTASYCRICKET_ADMIN_PASSWORD"

DEFAULT_DB_PATH = Path.cwd() / "fantasycricket.sqlite"
_SESSION_TTL_DEFAULT = 24 * 7


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


@dataclass(frozen=True)
class Settings:
    db_path: Path | str = DEFAULT_DB_PATH
    session_ttl_hours: int = _SESSION_TTL_DEFAULT
    rules_key: str = DEFAULT_RULES_KEY
    admin_username: str = "admin"
    admin_password: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        raw_db = os.getenv(_DB_PATH_ENV)
        db_path: Path | str
        if raw_db and raw_db.startswith("file:"):
            db_path = raw_db
        elif raw_db:
            db_path = Path(raw_db)
        else:
            db_path = DEFAULT_DB_PATH
        return cls(
            db_path=db_path,
            session_ttl_hours=_env_int(_SESSION_TTL_ENV, _SESSION_TTL_DEFAULT, min_value=1),
            rules_key=os.getenv(_RULES_ENV, DEFAULT_RULES_KEY),
            admin_username=os.getenv(_ADMIN_USERNAME_ENV, "admin"),
            admin_password=os.getenv(_ADMIN_PASSWORD_ENV),
        )


@dataclass
class PoolProfile:
    players: List[PlayerSeed] = field(default_factory=list)

    @classmethod
    def load(cls, path: Path) -> "PoolProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        rows = data.get("players", []) if isinstance(data, dict) else data
        return cls(players=[PlayerSeed.model_validate(row) for row in rows])

    def save(self, path: Path) -> None:
        payload = {"players": [seed.model_dump() for seed in self.players]}
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
