from pathlib import Path

import pytest

from fantasycricket.cli import main
from fantasycricket.persistence import FantasyStore
from fantasycricket.scoring import TeamSubmission
from fantasycricket.scoring.service import FantasyService


def _league(db: Path) -> tuple[FantasyStore, int]:
    main(["--db", str(db), "seed-players"])
    store = FantasyStore(db)
    user = store.create_user(username="asha", name="Asha", email="asha@example.com", password_hash="x.y")
    players = store.get_players()[:3]
    team = FantasyService(store).assemble_team(
        user.id,
        TeamSubmission(
            name="Strikers",
            player_ids=[player.id for player in players],
            captain_id=players[0].id,
            vice_captain_id=players[1].id,
        ),
    )
    return store, team.team.id


def test_seed_players_and_score(tmp_path: Path, capsys):
    db = tmp_path / "league.sqlite"
    store, team_id = _league(db)

    main(["--db", str(db), "score", "1", "10"])

    assert store.get_team(team_id).total_points == 20
    assert "now has 10 points" in capsys.readouterr().out


def test_score_unknown_player_exits(tmp_path: Path):
    db = tmp_path / "league.sqlite"
    main(["--db", str(db), "init-db"])

    with pytest.raises(SystemExit, match="not found"):
        main(["--db", str(db), "score", "999", "10"])


def test_batch_score_and_leaderboard_export(tmp_path: Path, capsys):
    db = tmp_path / "league.sqlite"
    store, team_id = _league(db)
    scores = tmp_path / "scores.csv"
    scores.write_text("player_id,points\n1,10\n2,4\n999,1\nabc,3\n", encoding="utf-8")
    report = tmp_path / "report.json"

    main(["--db", str(db), "batch-score", str(scores), "--report", str(report)])

    out = capsys.readouterr().out
    assert "Batch partial_failure: 2 succeeded, 2 failed" in out
    assert report.exists()
    assert store.get_team(team_id).total_points == 20 + 6

    output = tmp_path / "board.csv"
    main(["--db", str(db), "leaderboard", "--output", str(output)])
    assert output.read_text(encoding="utf-8").splitlines()[1] == f"1,Strikers,asha,{team_id},,26"


def test_seed_players_from_csv(tmp_path: Path, capsys):
    db = tmp_path / "league.sqlite"
    csv_path = tmp_path / "players.csv"
    csv_path.write_text("name,category,credit_points\nManga,bowler,90\nGhost,umpire,1\n", encoding="utf-8")
    pool = tmp_path / "pool.json"

    main(["--db", str(db), "seed-players", "--csv", str(csv_path), "--save-pool", str(pool)])

    assert [player.name for player in FantasyStore(db).get_players()] == ["Manga"]
    assert pool.exists()
    assert "Accepted 1/2 player rows" in capsys.readouterr().out


def test_seed_admin(tmp_path: Path):
    db = tmp_path / "league.sqlite"

    main(["--db", str(db), "seed-admin", "boss", "secret123"])

    user, _ = FantasyStore(db).get_credentials("boss")
    assert user.is_admin


def test_set_credits_by_name(tmp_path: Path, capsys):
    db = tmp_path / "league.sqlite"
    store, team_id = _league(db)
    prices = tmp_path / "prices.json"
    prices.write_text('{"Prince": 120}', encoding="utf-8")

    main(["--db", str(db), "set-credits", "ankur=250", "Nobody=10", "--file", str(prices)])

    out = capsys.readouterr().out
    assert "Repriced 2 player(s), 16 unpriced, 1 unknown" in out
    assert "unknown player Nobody" in out
    assert store.get_player(1).credit_points == 250
    assert store.get_player(2).credit_points == 120
    assert [member.credit_points_at_selection for member in store.get_roster(team_id)] == [200, 150, 140]

    main(["--db", str(db), "set-credits"])

    assert store.get_player(1).credit_points == 200
    assert store.get_player(2).credit_points == 150


def test_set_credits_rejects_bad_price(tmp_path: Path):
    db = tmp_path / "league.sqlite"
    _league(db)

    with pytest.raises(SystemExit, match="credit_points"):
        main(["--db", str(db), "set-credits", "Ankur=free"])
