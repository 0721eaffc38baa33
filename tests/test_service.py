import pytest

from fantasycricket.errors import (
    BudgetExceeded,
    ContestUnavailable,
    DuplicateTeam,
    NotFound,
    PermissionDenied,
    ValidationError,
)
from fantasycricket.models import PlayerSeed
from fantasycricket.persistence import FantasyStore
from fantasycricket.scoring import TeamSubmission
from fantasycricket.scoring.service import FantasyService, coerce_points


@pytest.fixture()
def store(tmp_path) -> FantasyStore:
    return FantasyStore(tmp_path / "league.sqlite")


@pytest.fixture()
def service(store: FantasyStore) -> FantasyService:
    return FantasyService(store)


def _user(store: FantasyStore, username: str, *, is_admin: bool = False):
    return store.create_user(
        username=username,
        name=username.title(),
        email=f"{username}@example.com",
        password_hash="x.y",
        is_admin=is_admin,
    )


def _players(store: FantasyStore, *rows: tuple[str, int, int]):
    return [
        store.create_player(
            PlayerSeed(name=name, category="batsman", credit_points=credits, performance_points=points)
        )
        for name, credits, points in rows
    ]


def _standard_pool(store: FantasyStore):
    return _players(store, ("Ankur", 200, 10), ("Prince", 150, 8), ("Mayank", 140, 5), ("Amit", 150, 3))


def _submission(players, name: str = "Strikers", contest_id=None) -> TeamSubmission:
    return TeamSubmission(
        name=name,
        player_ids=[player.id for player in players],
        captain_id=players[0].id,
        vice_captain_id=players[1].id,
        contest_id=contest_id,
    )


def test_assemble_team_computes_initial_total(store, service):
    user = _user(store, "asha")
    players = _standard_pool(store)

    detail = service.assemble_team(user.id, _submission(players))

    assert detail.team.total_points == 40
    assert detail.total_credits == 640
    assert detail.username == "asha"
    assert [player.is_captain for player in detail.players] == [True, False, False, False]


def test_second_team_for_same_contest_is_rejected(store, service):
    user = _user(store, "asha")
    players = _standard_pool(store)
    contest = service.create_contest(name="Final", team1="Lions", team2="Tigers")
    first = service.assemble_team(user.id, _submission(players, contest_id=contest.id))

    with pytest.raises(DuplicateTeam):
        service.assemble_team(user.id, _submission(players, name="Again", contest_id=contest.id))

    assert [team.id for team in store.list_teams()] == [first.team.id]
    assert len(store.get_roster(first.team.id)) == 4


def test_same_user_may_enter_different_contests(store, service):
    user = _user(store, "asha")
    players = _standard_pool(store)
    final = service.create_contest(name="Final", team1="Lions", team2="Tigers")

    service.assemble_team(user.id, _submission(players))
    service.assemble_team(user.id, _submission(players, contest_id=final.id))

    assert len(store.list_teams_by_user(user.id)) == 2


def test_over_budget_team_writes_nothing(store, service):
    user = _user(store, "asha")
    players = _players(store, ("Big", 600, 0), ("Bigger", 401, 0))

    with pytest.raises(BudgetExceeded):
        service.assemble_team(user.id, _submission(players))

    assert store.list_teams() == []


def test_closed_and_full_contests_reject_entries(store, service):
    players = _standard_pool(store)
    live = service.create_contest(name="Live", team1="A", team2="B", status="live")
    full = service.create_contest(name="Full", team1="A", team2="B", max_entries=1)
    service.assemble_team(_user(store, "first").id, _submission(players, contest_id=full.id))

    with pytest.raises(ContestUnavailable):
        service.assemble_team(_user(store, "second").id, _submission(players, contest_id=live.id))
    with pytest.raises(ContestUnavailable):
        service.assemble_team(_user(store, "third").id, _submission(players, contest_id=full.id))
    with pytest.raises(NotFound):
        service.assemble_team(_user(store, "fourth").id, _submission(players, contest_id=999))


def test_score_update_recomputes_dependent_teams(store, service):
    players = _standard_pool(store)
    captain_team = service.assemble_team(_user(store, "asha").id, _submission(players))
    bench = _players(store, ("Kuki", 160, 0))
    other = service.assemble_team(_user(store, "ravi").id, _submission([bench[0], players[3]]))

    player = service.apply_score_update(players[0].id, 25, runs=25)

    assert player.performance_points == 25
    assert player.runs == 25
    assert service.get_team(captain_team.team.id).team.total_points == 50 + 12 + 5 + 3
    assert service.get_team(other.team.id).team.total_points == other.team.total_points


@pytest.mark.parametrize("bad", ["10", 2.5, True, None])
def test_score_update_rejects_non_integer_points(store, service, bad):
    players = _standard_pool(store)

    with pytest.raises(ValidationError):
        service.apply_score_update(players[0].id, bad)


def test_coerce_points_accepts_integral_floats():
    assert coerce_points(12.0) == 12
    assert coerce_points(-4) == -4


def test_score_update_unknown_player(service):
    with pytest.raises(NotFound):
        service.apply_score_update(999, 10)


def test_batch_update_reports_each_entry(store, service):
    players = _standard_pool(store)
    team = service.assemble_team(_user(store, "asha").id, _submission(players))

    result = service.apply_batch_score_update(
        [{"player_id": players[0].id, "points": 50}, {"player_id": 999, "points": 10}]
    )

    assert result.status == "partial_failure"
    assert result.partial_failure
    ok, missing = result.outcomes
    assert ok.ok and ok.player_id == players[0].id
    assert ok.recomputed_team_ids == [team.team.id]
    assert not missing.ok
    assert missing.player_id == 999
    assert missing.error == "not_found"
    assert service.get_team(team.team.id).team.total_points == 100 + 12 + 5 + 3


def test_batch_update_accepts_tuples_and_flags_bad_entries(store, service):
    players = _standard_pool(store)

    result = service.apply_batch_score_update([(players[1].id, 7), ("abc", 3), {"points": 1}])

    assert [outcome.ok for outcome in result.outcomes] == [True, False, False]
    assert result.outcomes[1].error == "validation_error"
    assert store.get_player(players[1].id).performance_points == 7


def test_batch_update_all_failed(service):
    result = service.apply_batch_score_update([{"player_id": 1, "points": "x"}])

    assert result.status == "failed"
    assert not result.partial_failure


def test_contest_team_uses_contest_performance(store, service):
    players = _standard_pool(store)
    contest = service.create_contest(name="Final", team1="Lions", team2="Tigers")
    user = _user(store, "asha")
    contest_team = service.assemble_team(user.id, _submission(players, contest_id=contest.id))
    global_team = service.assemble_team(user.id, _submission(players))

    assert contest_team.team.total_points == 0
    assert global_team.team.total_points == 40

    update = service.apply_contest_performance(contest.id, players[0].id, runs=30, boundaries=2)

    assert update.breakdown.total == 30 + 8 + 18
    assert update.recomputed_team_ids == [contest_team.team.id]
    assert service.get_team(contest_team.team.id).team.total_points == 112
    assert service.get_team(global_team.team.id).team.total_points == 40
    performances = service.list_contest_performances(contest.id)
    assert [(performance.player_id, player.name) for performance, player in performances] == [
        (players[0].id, "Ankur")
    ]


def test_contest_performance_requires_known_contest_and_player(store, service):
    players = _standard_pool(store)
    contest = service.create_contest(name="Final", team1="Lions", team2="Tigers")

    with pytest.raises(NotFound):
        service.apply_contest_performance(999, players[0].id, runs=1)
    with pytest.raises(NotFound):
        service.apply_contest_performance(contest.id, 999, runs=1)


def test_recompute_repairs_stale_cached_total(store, service):
    players = _standard_pool(store)
    team = service.assemble_team(_user(store, "asha").id, _submission(players))
    store.set_cached_total(team.team.id, 9999)

    assert service.recompute_team_total(team.team.id) == 40
    store.set_cached_total(team.team.id, -1)
    assert service.recompute_all_totals() == {team.team.id: 40}


def test_zeroed_performance_drops_member_contribution(store, service):
    players = _standard_pool(store)
    team = service.assemble_team(_user(store, "asha").id, _submission(players))
    store.set_performance(players[2].id, 0)

    assert store.get_performance(players[2].id) == 0
    assert service.recompute_team_total(team.team.id) == 35
    assert store.get_performance(players[0].id, contest_id=1) is None


def test_leaderboard_and_ranks(store, service):
    players = _standard_pool(store)
    asha = _user(store, "asha")
    ravi = _user(store, "ravi")
    meera = _user(store, "meera")
    first = service.assemble_team(asha.id, _submission(players))
    reversed_roles = TeamSubmission(
        name="Reverse",
        player_ids=[player.id for player in players],
        captain_id=players[3].id,
        vice_captain_id=players[2].id,
    )
    second = service.assemble_team(ravi.id, reversed_roles)
    third = service.assemble_team(meera.id, _submission(players, name="Copy"))

    board = service.get_leaderboard()

    assert [entry.team_id for entry in board] == [first.team.id, third.team.id, second.team.id]
    assert [entry.rank for entry in board] == [1, 1, 3]
    rank = service.get_user_rank(ravi.id)
    assert rank.rank == 3
    assert rank.points_behind_leader == 40 - second.team.total_points
    assert service.get_team_rank(third.team.id).points_behind_leader == 0


def test_contest_leaderboard_is_scoped(store, service):
    players = _standard_pool(store)
    contest = service.create_contest(name="Final", team1="Lions", team2="Tigers")
    asha = _user(store, "asha")
    in_contest = service.assemble_team(asha.id, _submission(players, contest_id=contest.id))
    service.assemble_team(asha.id, _submission(players))

    board = service.get_leaderboard(contest.id)

    assert [entry.team_id for entry in board] == [in_contest.team.id]
    assert service.get_user_rank(asha.id, contest.id).total_teams == 1
    with pytest.raises(NotFound):
        service.get_leaderboard(999)


def test_user_without_team_has_no_rank(store, service):
    with pytest.raises(NotFound):
        service.get_user_rank(_user(store, "asha").id)


def test_delete_team_requires_owner_or_admin(store, service):
    players = _standard_pool(store)
    owner = _user(store, "asha")
    stranger = _user(store, "ravi")
    admin = _user(store, "boss", is_admin=True)
    team = service.assemble_team(owner.id, _submission(players))

    with pytest.raises(PermissionDenied):
        service.delete_team(team.team.id, stranger)
    service.delete_team(team.team.id, admin)
    with pytest.raises(NotFound):
        service.get_team(team.team.id)
    assert store.get_roster(team.team.id) == []


def test_delete_contest_removes_its_teams(store, service):
    players = _standard_pool(store)
    contest = service.create_contest(name="Final", team1="Lions", team2="Tigers")
    user = _user(store, "asha")
    service.assemble_team(user.id, _submission(players, contest_id=contest.id))
    service.apply_contest_performance(contest.id, players[0].id, runs=10)

    service.delete_contest(contest.id)

    assert store.list_teams() == []
    assert store.list_contest_performances(contest.id) == []
    with pytest.raises(NotFound):
        service.delete_contest(contest.id)
    service.assemble_team(user.id, _submission(players))


def test_contest_validation(service):
    with pytest.raises(ValidationError):
        service.create_contest(name="Final", team1="A", team2="B", status="paused")
    contest = service.create_contest(name="Final", team1="A", team2="B")
    with pytest.raises(ValidationError):
        service.update_contest(contest.id, max_entries=0)
    updated = service.update_contest(contest.id, status="live")
    assert updated.status == "live"
    assert not updated.accepting_entries
    with pytest.raises(NotFound):
        service.update_contest(999, status="live")


def test_players_with_selection_percentage(store, service):
    players = _standard_pool(store)
    service.assemble_team(_user(store, "asha").id, _submission(players[:2]))
    service.assemble_team(_user(store, "ravi").id, _submission(players))

    selection = dict(
        (player.name, percentage) for player, percentage in service.players_with_selection("Batsmen")
    )

    assert selection["Ankur"] == 100.0
    assert selection["Amit"] == 50.0
    with pytest.raises(ValidationError):
        service.list_players("umpire")


def test_coerce_points_rejects_values_outside_sqlite_integers():
    assert coerce_points(2**63 - 1) == 2**63 - 1
    with pytest.raises(ValidationError):
        coerce_points(2**63)
    with pytest.raises(ValidationError):
        coerce_points(-1e30)


@pytest.mark.parametrize(
    "first",
    [{"player_id": 1, "points": 1e30}, (10**20, 5)],
)
def test_batch_update_flags_huge_values_and_keeps_going(store, service, first):
    players = _standard_pool(store)

    result = service.apply_batch_score_update([first, (players[1].id, 8)])

    assert result.status == "partial_failure"
    bad, ok = result.outcomes
    assert bad.error == "validation_error"
    assert ok.ok
    assert store.get_player(players[1].id).performance_points == 8
    assert store.get_player(players[0].id).performance_points == 10


def test_batch_update_survives_team_total_overflow(store, service):
    players = _standard_pool(store)
    team = service.assemble_team(_user(store, "asha").id, _submission(players))

    result = service.apply_batch_score_update([(players[0].id, 2**62), (players[1].id, 8)])

    bad, ok = result.outcomes
    assert bad.error == "internal_error"
    assert ok.ok and ok.recomputed_team_ids == [team.team.id]
    assert store.get_player(players[0].id).performance_points == 10
    assert service.get_team(team.team.id).team.total_points == 40


def test_single_update_overflow_rolls_back(store, service):
    players = _standard_pool(store)
    team = service.assemble_team(_user(store, "asha").id, _submission(players))

    with pytest.raises(OverflowError):
        service.apply_score_update(players[0].id, 2**62)

    assert store.get_player(players[0].id).performance_points == 10
    assert store.get_team(team.team.id).total_points == 40


def test_set_player_credits(store, service):
    players = _standard_pool(store)

    assert service.set_player_credits(players[0].id, 300).credit_points == 300
    assert store.get_player(players[0].id).credit_points == 300
    with pytest.raises(NotFound):
        service.set_player_credits(999, 100)
    for bad in (0, -5, "100", 1.5, True):
        with pytest.raises(ValidationError):
            service.set_player_credits(players[0].id, bad)


def test_reprice_players_reports_unmatched_names(store, service):
    _standard_pool(store)

    report = service.reprice_players({"ankur": 180, "Prince": 160, "Ghost": 50})

    assert [(player.name, player.credit_points) for player in report.updated] == [("Ankur", 180), ("Prince", 160)]
    assert report.unpriced == ["Mayank", "Amit"]
    assert report.unknown == ["Ghost"]


def test_reprice_players_is_all_or_nothing(store, service):
    players = _standard_pool(store)

    with pytest.raises(ValidationError):
        service.reprice_players({"Ankur": 180, "Prince": 0})

    assert store.get_player(players[0].id).credit_points == 200


def test_repricing_keeps_cost_at_selection(store, service):
    players = _standard_pool(store)
    team = service.assemble_team(_user(store, "asha").id, _submission(players))

    service.set_player_credits(players[0].id, 300)

    detail = service.get_team(team.team.id)
    assert detail.players[0].credit_points == 300
    assert detail.players[0].credit_points_at_selection == 200
    assert [member.credit_points_at_selection for member in store.get_roster(team.team.id)] == [200, 150, 140, 150]
    assert detail.total_credits == 640


def test_roster_member_without_player_row_counts_zero(store, service):
    players = _standard_pool(store)
    team = service.assemble_team(_user(store, "asha").id, _submission(players))
    with store.transaction() as conn:
        conn.execute("DELETE FROM players WHERE id = ?", (players[2].id,))

    assert len(store.get_roster(team.team.id)) == 4
    assert service.recompute_team_total(team.team.id) == 20 + 12 + 0 + 3
    assert store.get_team(team.team.id).total_points == 35
