"""Input adapters that normalize raw player pool data."""

from .players import (
    DEFAULT_PLAYER_MAPPING,
    PlayerImportReport,
    PlayerRow,
    load_player_csv,
    parse_player_csv,
    rows_to_seeds,
)

__all__ = [
    "DEFAULT_PLAYER_MAPPING",
    "PlayerImportReport",
    "PlayerRow",
    "load_player_csv",
    "parse_player_csv",
    "rows_to_seeds",
]
