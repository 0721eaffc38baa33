"""Player pool utilities (defaults, seeding, cleanup)."""

from .defaults import DEFAULT_CREDITS, DEFAULT_POOL
from .seeding import SeedReport, cleanup_duplicate_players, initialize_players

__all__ = [
    "DEFAULT_CREDITS",
    "DEFAULT_POOL",
    "SeedReport",
    "cleanup_duplicate_players",
    "initialize_players",
]
