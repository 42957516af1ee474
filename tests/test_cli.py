import json

import pytest

from tourneykit.cli import build_engine, create_parser, main

EVENT = {
    "event_id": "spring-games",
    "activities": [
        {"id": "football", "name": "Football", "points": {"first": 10, "second": 5, "third": 3}}
    ],
    "fixtures": [
        {
            "id": "league",
            "activity_id": "football",
            "format": "roundrobin",
            "participants": ["X", "Y", "Z"],
            "results": [
                {"home": "X", "away": "Y", "home_score": 2, "away_score": 0},
                {"match_id": "league-m2", "homeScore": 1, "awayScore": 1},
                {"home": "Y", "away": "Z", "home_score": 3, "away_score": 0},
            ],
        },
        {
            "id": "cup",
            "activity_id": "football",
            "participants": ["X", "Y"],
        },
    ],
}


@pytest.fixture
def event_file(tmp_path):
    path = tmp_path / "event.json"
    path.write_text(json.dumps(EVENT), encoding="utf-8")
    return str(path)


def test_bracket_command_prints_rounds_and_byes(capsys):
    assert main(["bracket", "A", "B", "C"]) == 0

    out = capsys.readouterr().out
    assert "Seeding: A, B, C" in out
    assert "Final" in out
    assert "C vs BYE" in out


def test_bracket_command_json_with_third_place(capsys):
    assert main(["bracket", "A", "B", "C", "D", "--third-place", "--json"]) == 0

    matches = json.loads(capsys.readouterr().out)
    assert len(matches) == 4
    assert matches[-1]["is_third_place_match"] is True


def test_bracket_command_prints_round_dates(capsys):
    assert main(["bracket", "A", "B", "C", "D", "--start-date", "2025-05-03"]) == 0

    out = capsys.readouterr().out
    assert "Semi-Finals (2025-05-03)" in out
    assert "Final (2025-05-10)" in out


def test_bracket_command_rejects_bad_start_date():
    assert main(["bracket", "A", "B", "--start-date", "someday"]) == 1


def test_bracket_command_needs_two_names():
    assert main(["bracket", "Solo"]) == 1


def test_build_engine_replays_results():
    engine = build_engine(EVENT)

    assert engine.fixture_ids() == ["league", "cup"]
    assert engine.get_match("league-m3").winner == "Y"
    assert engine.get_fixture("cup").is_knockout


def test_standings_command_json(event_file, capsys):
    assert main(["standings", event_file, "--json"]) == 0

    tables = json.loads(capsys.readouterr().out)
    assert list(tables) == ["league"]
    assert [(row["participant_id"], row["points"]) for row in tables["league"]] == [
        ("X", 4),
        ("Y", 3),
        ("Z", 1),
    ]


def test_standings_command_text(event_file, capsys):
    assert main(["standings", event_file, "--fixture", "league"]) == 0
    out = capsys.readouterr().out
    assert "Pts" in out
    assert "X" in out


def test_scorecard_command_json(event_file, capsys):
    assert main(["scorecard", event_file, "--json"]) == 0

    cards = json.loads(capsys.readouterr().out)
    assert [(c["team_id"], c["total_points"], c["rank"]) for c in cards] == [
        ("X", 10, 1),
        ("Y", 5, 2),
        ("Z", 3, 3),
    ]


def test_missing_or_broken_documents(tmp_path):
    assert main(["scorecard", str(tmp_path / "nope.json")]) == 1

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert main(["standings", str(broken)]) == 1

    incomplete = tmp_path / "incomplete.json"
    incomplete.write_text(json.dumps({"fixtures": [{"id": "cup"}]}), encoding="utf-8")
    assert main(["standings", str(incomplete)]) == 1


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        create_parser().parse_args([])
