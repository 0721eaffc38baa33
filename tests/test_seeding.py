from fantasycricket.models import PlayerSeed
from fantasycricket.persistence import FantasyStore
from fantasycricket.pool import DEFAULT_POOL, cleanup_duplicate_players, initialize_players


def test_initialize_players_seeds_default_pool(tmp_path):
    store = FantasyStore(tmp_path / "league.sqlite")

    report = initialize_players(store)

    assert report.total_created == len(DEFAULT_POOL) == 18
    assert report.skipped == []
    categories = {player.category for player in store.get_players()}
    assert categories == {"all_rounder", "batsman", "bowler", "wicketkeeper"}


def test_initialize_players_is_idempotent(tmp_path):
    store = FantasyStore(tmp_path / "league.sqlite")
    initialize_players(store)

    report = initialize_players(store)

    assert report.total_created == 0
    assert len(report.skipped) == len(DEFAULT_POOL)
    assert len(store.get_players()) == len(DEFAULT_POOL)


def test_cleanup_keeps_lowest_id_per_name(tmp_path):
    store = FantasyStore(tmp_path / "league.sqlite")
    first = store.create_player(PlayerSeed(name="Ankur", category="all_rounder", credit_points=200))
    store.create_player(PlayerSeed(name="ankur", category="all_rounder", credit_points=180))
    store.create_player(PlayerSeed(name="Kuki", category="batsman", credit_points=160))

    removed = cleanup_duplicate_players(store)

    assert len(removed) == 1
    assert [player.id for player in store.get_players() if player.name.lower() == "ankur"] == [first.id]


def test_initialize_players_with_custom_seeds(tmp_path):
    store = FantasyStore(tmp_path / "league.sqlite")
    seeds = [PlayerSeed(name="Solo", category="bowler", credit_points=50)]

    report = initialize_players(store, seeds)

    assert [player.name for player in report.created] == ["Solo"]
