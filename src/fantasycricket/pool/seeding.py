"""Player pool initialization and duplicate cleanup."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from fantasycricket.models import Player, PlayerSeed
from fantasycricket.persistence import FantasyStore
from fantasycricket.pool.defaults import DEFAULT_POOL


logger = logging.getLogger(__name__)


@dataclass
class SeedReport:
    created: List[Player] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    removed_duplicates: List[int] = field(default_factory=list)

    @property
    def total_created(self) -> int:
        return len(self.created)


def cleanup_duplicate_players(store: FantasyStore) -> List[int]:
    """Delete every player whose name repeats an earlier (lower id) player."""

    seen: set[str] = set()
    duplicates: List[int] = []
    for player in store.get_players():
        key = player.name.casefold()
        if key in seen:
            duplicates.append(player.id)
        else:
            seen.add(key)

    for player_id in duplicates:
        store.delete_player(player_id)
        logger.info("Deleted duplicate player %s", player_id)
    return duplicates


def initialize_players(store: FantasyStore, seeds: Sequence[PlayerSeed] = DEFAULT_POOL) -> SeedReport:
    """Ensure every seed exists in the pool; existing names are left untouched."""

    report = SeedReport(removed_duplicates=cleanup_duplicate_players(store))
    existing = {player.name.casefold() for player in store.get_players()}
    logger.info("Initializing players: %d existing, %d seeds", len(existing), len(seeds))

    with store.transaction() as conn:
        for seed in seeds:
            key = seed.name.casefold()
            if key in existing:
                report.skipped.append(seed.name)
                continue
            report.created.append(store.create_player(seed, conn=conn))
            existing.add(key)

    logger.info(
        "Player initialization complete: %d created, %d skipped",
        report.total_created,
        len(report.skipped),
    )
    return report
