import math
from datetime import datetime

import pytest

from tourneykit.bracket import BracketBuilder, next_power_of_two, standard_seed_order
from tourneykit.bracket.seeding import bye_match_indices, pair_first_round
from tourneykit.exceptions import InvalidConfigurationException, InvalidParticipantCount
from tourneykit.models import FixtureSettings, MatchGraph, MatchStatus, TeamMembership, player, team

NO_SHUFFLE = FixtureSettings(randomize_seeds=False)


def _teams(count):
    return [team(f"T{i}") for i in range(1, count + 1)]


def test_standard_seed_order_keeps_top_seeds_apart():
    assert standard_seed_order(2) == [1, 2]
    assert standard_seed_order(4) == [1, 4, 2, 3]
    assert standard_seed_order(8) == [1, 8, 4, 5, 2, 7, 3, 6]


def test_next_power_of_two():
    assert [next_power_of_two(n) for n in (1, 2, 3, 5, 8, 9)] == [1, 2, 4, 8, 8, 16]


def test_byes_never_share_a_match_and_spread_over_halves():
    assert bye_match_indices(4, 0) == set()
    assert bye_match_indices(2, 1) == {1}
    # Two byes in an eight-slot bracket land in different round-2 feeders
    byes = bye_match_indices(4, 2)
    assert len(byes) == 2
    assert len({index // 2 for index in byes}) == 2


def test_first_round_fills_home_then_away():
    a, b, c = _teams(3)
    assert pair_first_round([a, b, c], 4) == [(a, b), (c, None)]


@pytest.mark.parametrize("count", range(2, 18))
def test_bracket_shape(count):
    result = BracketBuilder().build("ko", _teams(count), NO_SHUFFLE)

    assert len(result.contested_matches) == count - 1
    assert result.rounds == math.ceil(math.log2(count))
    assert result.byes == next_power_of_two(count) - count

    round_one = [m for m in result.matches if m.round == 1]
    assert sum(1 for m in round_one if len(m.participant_ids) == 1) == result.byes
    assert sorted(result.seeding) == sorted(t.id for t in _teams(count))


@pytest.mark.parametrize("count", [2, 3, 5, 6, 8, 11])
def test_graph_links_are_consistent(count):
    result = BracketBuilder().build("ko", _teams(count), FixtureSettings(
        randomize_seeds=False, third_place_match=count >= 4
    ))
    graph = MatchGraph(result.matches)

    final = graph.final_match()
    assert final is not None
    assert final.round == result.rounds

    for match in graph:
        if match is final or match.is_third_place_match:
            assert match.next_match_id is None
            continue
        assert match.next_match_id in graph
        parent = graph.get(match.next_match_id)
        assert match.id in parent.previous_match_ids

    for match in graph:
        if match.is_third_place_match:
            continue
        for index, previous_id in enumerate(match.previous_match_ids):
            assert graph.get(previous_id).next_match_id == match.id
            feeder = graph.get(previous_id)
            if feeder.is_bye:
                slot_holder = match.home_participant if index == 0 else match.away_participant
                assert slot_holder == feeder.winner


def test_match_numbers_are_unique_and_ids_deterministic():
    result = BracketBuilder().build("cup", _teams(6), NO_SHUFFLE)
    numbers = [m.match_number for m in result.matches]
    assert numbers == list(range(1, len(result.matches) + 1))
    assert [m.id for m in result.matches] == [f"cup-m{n}" for n in numbers]


def test_three_participants_scenario():
    a, b, c = team("A"), team("B"), team("C")
    result = BracketBuilder().build("ko", [a, b, c], NO_SHUFFLE)
    m1, m2, m3 = result.matches

    assert (m1.home_participant, m1.away_participant) == ("A", "B")
    assert m1.status == MatchStatus.SCHEDULED
    assert (m2.home_participant, m2.away_participant) == ("C", None)
    assert m2.status == MatchStatus.WALKOVER
    assert m2.winner == "C"
    assert m3.previous_match_ids == [m1.id, m2.id]
    assert (m3.home_participant, m3.away_participant) == (None, "C")
    assert len(result.contested_matches) == 2


def test_fewer_than_two_participants_rejected():
    with pytest.raises(InvalidParticipantCount):
        BracketBuilder().build("ko", [team("A")])
    with pytest.raises(InvalidParticipantCount):
        BracketBuilder().build("ko", [])


def test_duplicate_participants_rejected():
    with pytest.raises(InvalidConfigurationException):
        BracketBuilder().build("ko", [team("A"), team("A")], NO_SHUFFLE)


def test_seeded_shuffle_is_reproducible():
    settings = FixtureSettings(randomize_seeds=True, seed=42)
    first = BracketBuilder().build("ko", _teams(9), settings)
    second = BracketBuilder().build("ko", _teams(9), settings)
    assert first.seeding == second.seeding
    assert [m.to_dict() for m in first.matches] == [m.to_dict() for m in second.matches]


def test_unshuffled_seeding_keeps_input_order():
    result = BracketBuilder().build("ko", _teams(5), NO_SHUFFLE)
    assert result.seeding == ["T1", "T2", "T3", "T4", "T5"]


def test_third_place_match_fed_by_semifinals():
    result = BracketBuilder().build(
        "ko", _teams(6), FixtureSettings(randomize_seeds=False, third_place_match=True)
    )
    graph = MatchGraph(result.matches)
    third_place = graph.third_place_match()

    assert third_place is not None
    assert third_place.next_match_id is None
    assert third_place.previous_match_ids == graph.final_match().previous_match_ids
    assert third_place.round == result.rounds
    assert result.matches[-1] is third_place


def test_third_place_match_skipped_for_three_participants():
    result = BracketBuilder().build(
        "ko", _teams(3), FixtureSettings(randomize_seeds=False, third_place_match=True)
    )
    assert not any(m.is_third_place_match for m in result.matches)
    assert result.warnings


def _member(player_id, team_id):
    return player(player_id, None, TeamMembership(team_id=team_id, event_id="e1"))


def test_avoid_same_team_first_round():
    players = [_member("a1", "A"), _member("a2", "A"), _member("b1", "B"), _member("b2", "B")]
    settings = FixtureSettings(
        randomize_seeds=False, avoid_same_team_first_round=True, seed=3
    )
    result = BracketBuilder().build("ko", players, settings, event_id="e1")

    assert result.constraint_satisfied
    teams_by_player = {p.id: p.team_for_event("e1") for p in players}
    for match in result.matches:
        if match.round == 1:
            assert teams_by_player[match.home_participant] != teams_by_player[match.away_participant]


def test_avoid_same_team_falls_back_when_impossible():
    players = [_member(f"a{i}", "A") for i in range(4)]
    settings = FixtureSettings(
        randomize_seeds=False,
        avoid_same_team_first_round=True,
        seed=3,
        max_reseed_attempts=5,
    )
    result = BracketBuilder().build("ko", players, settings, event_id="e1")

    assert not result.constraint_satisfied
    assert result.seeding == ["a0", "a1", "a2", "a3"]


def test_rounds_scheduled_weekly_from_start_date():
    settings = FixtureSettings(
        randomize_seeds=False, third_place_match=True, start_date=datetime(2025, 5, 3)
    )
    result = BracketBuilder().build("ko", _teams(8), settings)

    dates = {m.round: m.scheduled_date for m in result.matches}
    assert dates == {
        1: datetime(2025, 5, 3),
        2: datetime(2025, 5, 10),
        3: datetime(2025, 5, 17),
    }
    assert result.matches[-1].scheduled_date == datetime(2025, 5, 17)
