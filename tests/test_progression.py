import threading
from datetime import datetime

import pytest

from tourneykit.exceptions import (
    AmbiguousResult,
    FixtureLocked,
    InconsistentSwap,
    InvalidResult,
    InvalidSlot,
    MatchLocked,
    MatchNotFound,
)
from tourneykit.models import MatchStatus, ScoreInput


def _slots(match):
    return (match.home_participant, match.away_participant)


# ========== Results ==========


def test_result_propagates_winner_to_home_slot(engine, knockout):
    knockout(["A", "B", "C"])

    outcome = engine.apply_match_result("ko-m1", ScoreInput.score(2, 1))

    assert outcome.updated_match.winner == "A"
    assert outcome.updated_match.loser == "B"
    assert outcome.updated_match.status == MatchStatus.COMPLETED
    assert outcome.propagated_match.id == "ko-m3"
    assert _slots(engine.get_match("ko-m3")) == ("A", "C")


def test_reopen_reverts_one_hop(engine, knockout):
    knockout(["A", "B", "C"])
    engine.apply_match_result("ko-m1", ScoreInput.score(2, 1))

    outcome = engine.reopen_match("ko-m1")

    assert outcome.updated_match.status == MatchStatus.SCHEDULED
    assert outcome.updated_match.winner is None
    assert outcome.updated_match.home_score is None
    assert outcome.reverted_match.id == "ko-m3"
    assert _slots(engine.get_match("ko-m3")) == (None, "C")


def test_reopen_then_new_result_repropagates(engine, knockout):
    knockout(["A", "B", "C"])
    engine.apply_match_result("ko-m1", ScoreInput.score(2, 1))
    engine.reopen_match("ko-m1")
    engine.apply_match_result("ko-m1", ScoreInput.score(0, 3))

    assert _slots(engine.get_match("ko-m3")) == ("B", "C")


def test_winner_decided_by_sets(engine, knockout):
    knockout(["A", "B"])

    outcome = engine.apply_match_result(
        "ko-m1", ScoreInput.from_sets([(21, 15), (18, 21), (19, 21)])
    )

    match = outcome.updated_match
    assert match.winner == "B"
    assert (match.home_score, match.away_score) == (1, 2)
    assert [s.set_number for s in match.sets] == [1, 2, 3]


def test_tied_sets_need_manual_winner(engine, knockout):
    knockout(["A", "B"])

    with pytest.raises(AmbiguousResult):
        engine.apply_match_result("ko-m1", ScoreInput.from_sets([(21, 10), (10, 21)]))

    outcome = engine.apply_match_result(
        "ko-m1", ScoreInput.from_sets([(21, 10), (10, 21)], winner_id="B")
    )
    assert outcome.updated_match.winner == "B"


def test_level_knockout_score_is_ambiguous_and_rolled_back(engine, knockout):
    knockout(["A", "B", "C", "D"])

    with pytest.raises(AmbiguousResult):
        engine.apply_match_result("ko-m1", ScoreInput.score(1, 1))

    match = engine.get_match("ko-m1")
    assert match.status == MatchStatus.SCHEDULED
    assert match.home_score is None
    assert match.version == 0


def test_manual_winner_must_be_playing(engine, knockout):
    knockout(["A", "B", "C", "D"])
    with pytest.raises(InvalidResult):
        engine.apply_match_result("ko-m1", ScoreInput.score(2, 0, winner_id="C"))


def test_invalid_scores_rejected(engine, knockout):
    knockout(["A", "B"])
    with pytest.raises(InvalidResult):
        engine.apply_match_result("ko-m1", ScoreInput.score(-1, 2))
    with pytest.raises(InvalidResult):
        engine.apply_match_result("ko-m1", ScoreInput())


def test_cannot_complete_with_empty_slot(engine, knockout):
    knockout(["A", "B", "C"])
    with pytest.raises(InvalidResult):
        engine.apply_match_result("ko-m3", ScoreInput.score(1, 0))


def test_completed_match_is_locked_until_reopened(engine, knockout):
    knockout(["A", "B"])
    engine.apply_match_result("ko-m1", ScoreInput.score(3, 1))

    with pytest.raises(MatchLocked):
        engine.apply_match_result("ko-m1", ScoreInput.score(1, 3))
    with pytest.raises(MatchLocked):
        engine.apply_match_result("ko-m1", {"status": "postponed"})


def test_walkover_cannot_be_scored_or_reopened(engine, knockout):
    knockout(["A", "B", "C"])
    with pytest.raises(MatchLocked):
        engine.apply_match_result("ko-m2", ScoreInput.score(1, 0))
    with pytest.raises(MatchLocked):
        engine.reopen_match("ko-m2")


def test_non_completing_status_does_not_propagate(engine, knockout):
    knockout(["A", "B", "C"])

    outcome = engine.apply_match_result(
        "ko-m1", {"homeScore": 1, "awayScore": 0, "status": "in_progress"}
    )

    assert outcome.updated_match.status == MatchStatus.IN_PROGRESS
    assert outcome.updated_match.winner is None
    assert outcome.propagated_match is None
    assert engine.get_match("ko-m3").home_participant is None


def test_reopen_rejected_when_next_match_played(engine, knockout):
    knockout(["A", "B", "C", "D"])
    engine.apply_match_result("ko-m1", ScoreInput.score(2, 0))
    engine.apply_match_result("ko-m2", ScoreInput.score(2, 0))
    engine.apply_match_result("ko-m3", ScoreInput.score(2, 0))

    with pytest.raises(MatchLocked):
        engine.reopen_match("ko-m1")


def test_reopen_requires_completed_match(engine, knockout):
    knockout(["A", "B"])
    with pytest.raises(MatchLocked):
        engine.reopen_match("ko-m1")


def test_semifinal_loser_goes_to_third_place_match(engine, knockout):
    knockout(["A", "B", "C", "D"], third_place_match=True)

    first = engine.apply_match_result("ko-m1", ScoreInput.score(2, 0))
    engine.apply_match_result("ko-m2", ScoreInput.score(0, 2))

    assert first.third_place_match.id == "ko-m4"
    assert _slots(engine.get_match("ko-m3")) == ("A", "D")
    assert _slots(engine.get_match("ko-m4")) == ("B", "C")

    reopened = engine.reopen_match("ko-m1")
    assert reopened.reverted_third_place_match.id == "ko-m4"
    assert _slots(engine.get_match("ko-m4")) == (None, "C")
    assert _slots(engine.get_match("ko-m3")) == (None, "D")


def test_completion_records_when_the_match_was_played(engine, knockout):
    knockout(["A", "B", "C"])

    engine.apply_match_result(
        "ko-m1", {"home_score": 2, "away_score": 1, "played_at": "2025-05-03T15:00:00"}
    )
    assert engine.get_match("ko-m1").actual_date == datetime(2025, 5, 3, 15, 0)

    engine.reopen_match("ko-m1")
    assert engine.get_match("ko-m1").actual_date is None

    engine.apply_match_result("ko-m1", ScoreInput.score(2, 1))
    assert engine.get_match("ko-m1").actual_date is not None


def test_unparseable_played_at_rejected(engine, knockout):
    knockout(["A", "B"])
    with pytest.raises(InvalidResult):
        engine.apply_match_result("ko-m1", {"home_score": 1, "away_score": 0, "played_at": "last week"})


def test_unknown_match(engine, knockout):
    knockout(["A", "B"])
    with pytest.raises(MatchNotFound):
        engine.apply_match_result("nope", ScoreInput.score(1, 0))


def test_concurrent_results_on_one_match_apply_once(engine, knockout):
    knockout(["A", "B"])
    outcomes = []
    errors = []

    def submit():
        try:
            outcomes.append(engine.apply_match_result("ko-m1", ScoreInput.score(2, 1)))
        except MatchLocked as e:
            errors.append(e)

    threads = [threading.Thread(target=submit) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(outcomes) == 1
    assert len(errors) == 7
    assert engine.get_match("ko-m1").version == 1


# ========== Reseeding ==========


def test_swap_is_self_inverse(engine, knockout):
    knockout(["A", "B", "C", "D"])
    before = [m.to_dict() for m in engine.get_matches("ko")]

    swapped = engine.swap_participants("ko-m1", "home", "ko-m2", "away")
    assert _slots(swapped.match_a) == ("D", "B")
    assert _slots(swapped.match_b) == ("C", "A")

    engine.swap_participants("ko-m1", "home", "ko-m2", "away")
    after = engine.get_matches("ko")
    assert [_slots(m) for m in after] == [
        (m["home_participant"], m["away_participant"]) for m in before
    ]


def test_swap_with_empty_slot_is_self_inverse(engine, knockout):
    knockout(["A", "B", "C"])
    # m1: A v B, m2: C bye, m3: final fed by m1 and m2
    original = [_slots(m) for m in engine.get_matches("ko")]
    assert original == [("A", "B"), ("C", None), (None, "C")]

    engine.swap_participants("ko-m1", "home", "ko-m2", "away")

    m1, m2, m3 = engine.get_matches("ko")
    assert _slots(m1) == (None, "B")
    assert m1.status == MatchStatus.WALKOVER
    assert m1.winner == "B"
    assert _slots(m2) == ("C", "A")
    assert m2.status == MatchStatus.SCHEDULED
    assert _slots(m3) == ("B", None)

    engine.swap_participants("ko-m1", "home", "ko-m2", "away")

    m1, m2, m3 = engine.get_matches("ko")
    assert [_slots(m) for m in (m1, m2, m3)] == original
    assert m1.status == MatchStatus.SCHEDULED
    assert m1.winner is None
    assert m2.status == MatchStatus.WALKOVER
    assert m2.winner == "C"


def test_swap_same_slot_is_noop(engine, knockout):
    knockout(["A", "B"])
    outcome = engine.swap_participants("ko-m1", "home", "ko-m1", "home")
    assert outcome.match_a.version == 0
    assert _slots(engine.get_match("ko-m1")) == ("A", "B")


def test_swap_same_slot_is_noop_after_play(engine, knockout):
    knockout(["A", "B", "C", "D"])
    engine.apply_match_result("ko-m1", ScoreInput.score(1, 0))

    outcome = engine.swap_participants("ko-m2", "away", "ko-m2", "away")

    assert _slots(outcome.match_a) == ("C", "D")


def test_swap_into_bye_moves_participant_and_updates_walkovers(engine, knockout):
    knockout(["A", "B", "C"])

    outcome = engine.swap_participants("ko-m1", "away", "ko-m2", "away")

    m1, m2 = outcome.match_a, outcome.match_b
    assert _slots(m1) == ("A", None)
    assert m1.status == MatchStatus.WALKOVER
    assert m1.winner == "A"
    assert _slots(m2) == ("C", "B")
    assert m2.status == MatchStatus.SCHEDULED
    assert m2.winner is None
    assert _slots(engine.get_match("ko-m3")) == ("A", None)


def test_swap_locked_after_play(engine, knockout):
    knockout(["A", "B", "C", "D"])
    engine.apply_match_result("ko-m1", ScoreInput.score(1, 0))
    with pytest.raises(FixtureLocked):
        engine.swap_participants("ko-m1", "home", "ko-m2", "home")


def test_swap_locked_while_in_progress(engine, knockout):
    knockout(["A", "B", "C", "D"])
    engine.apply_match_result("ko-m2", {"status": "in_progress"})
    with pytest.raises(FixtureLocked):
        engine.swap_participants("ko-m1", "home", "ko-m2", "home")


def test_swap_detects_stale_reference(engine, knockout):
    knockout(["A", "B", "C", "D"])
    with pytest.raises(InconsistentSwap):
        engine.swap_participants("ko-m1", "home", "ko-m2", "home", expected_a="B")

    outcome = engine.swap_participants(
        "ko-m1", "home", "ko-m2", "home", expected_a="A", expected_b="C"
    )
    assert outcome.match_a.home_participant == "C"


def test_swap_rejects_fed_slots_and_bad_names(engine, knockout):
    knockout(["A", "B", "C", "D"])
    with pytest.raises(InvalidSlot):
        engine.swap_participants("ko-m1", "home", "ko-m3", "home")
    with pytest.raises(InvalidSlot):
        engine.swap_participants("ko-m1", "left", "ko-m2", "home")


def test_swap_rejected_in_round_robin(engine, league):
    league(["A", "B", "C"])
    with pytest.raises(InvalidSlot):
        engine.swap_participants("league-m1", "home", "league-m2", "home")


# ========== Structural edits ==========


def test_editable_listing_excludes_walkovers(engine, knockout):
    knockout(["A", "B", "C"])
    editable = [m.id for m in engine.get_editable_matches("ko")]
    assert editable == ["ko-m1", "ko-m3"]
    assert not engine.can_delete_match("ko-m2")


def test_remove_empty_match_and_compact_numbering(engine, knockout):
    knockout(["A", "B", "C", "D", "E"])
    # m1: A v B, m2: C bye, m3: D bye, m4: E bye
    engine.swap_participants("ko-m2", "home", "ko-m3", "away")
    assert engine.can_delete_match("ko-m2")

    removed = engine.remove_match("ko-m2")
    assert removed.id == "ko-m2"

    matches = engine.get_matches("ko")
    assert [m.match_number for m in matches] == list(range(1, len(matches) + 1))
    parent = engine.get_match("ko-m5")
    assert parent.previous_match_ids == ["ko-m1"]

    with pytest.raises(MatchNotFound):
        engine.get_match("ko-m2")

    engine.apply_match_result("ko-m1", ScoreInput.score(2, 0))
    m5 = engine.get_match("ko-m5")
    assert m5.home_participant == "A"
    assert m5.status == MatchStatus.WALKOVER
    assert engine.get_match("ko-m7").home_participant == "A"


def test_pruned_bracket_plays_through_to_final(engine, knockout):
    knockout(["A", "B", "C", "D", "E"])
    # m3: D bye, m4: E bye, both feeding m6
    engine.swap_participants("ko-m4", "home", "ko-m3", "away")
    engine.remove_match("ko-m4")
    assert engine.get_match("ko-m6").previous_match_ids == ["ko-m3"]

    engine.apply_match_result("ko-m3", ScoreInput.score(1, 0))
    m6 = engine.get_match("ko-m6")
    assert m6.status == MatchStatus.WALKOVER
    assert m6.winner == "D"
    assert _slots(engine.get_match("ko-m7")) == (None, "D")

    engine.apply_match_result("ko-m1", ScoreInput.score(2, 0))
    engine.apply_match_result("ko-m5", ScoreInput.score(1, 0))
    outcome = engine.apply_match_result("ko-m7", ScoreInput.score(0, 1))

    assert _slots(outcome.updated_match) == ("A", "D")
    assert outcome.updated_match.winner == "D"
    placements = [(p.position, p.participant_id) for p in engine.get_placements("ko")]
    assert placements == [(1, "D"), (2, "A"), (3, "C")]


def test_pruning_beside_a_decided_bye_walks_it_over(engine, knockout):
    knockout(["A", "B", "C", "D", "E"])
    engine.swap_participants("ko-m4", "home", "ko-m2", "away")
    # m3 (D bye) is now the only feeder of m6, which already holds D
    engine.remove_match("ko-m4")

    m6 = engine.get_match("ko-m6")
    assert m6.status == MatchStatus.WALKOVER
    assert m6.winner == "D"
    assert engine.get_match("ko-m7").away_participant == "D"

    # Reseeding the bye unwinds and replays the whole chain
    engine.swap_participants("ko-m3", "home", "ko-m2", "home")
    assert _slots(engine.get_match("ko-m3")) == ("C", None)
    m6 = engine.get_match("ko-m6")
    assert _slots(m6) == ("C", None)
    assert m6.winner == "C"
    assert engine.get_match("ko-m7").away_participant == "C"


def test_reopen_unwinds_single_feeder_walkover(engine, knockout):
    knockout(["A", "B", "C", "D", "E"])
    engine.swap_participants("ko-m4", "home", "ko-m3", "away")
    engine.remove_match("ko-m4")
    engine.apply_match_result("ko-m3", ScoreInput.score(1, 0))

    outcome = engine.reopen_match("ko-m3")

    assert outcome.reverted_match.id == "ko-m6"
    m6 = engine.get_match("ko-m6")
    assert m6.is_empty
    assert m6.status == MatchStatus.SCHEDULED
    assert engine.get_match("ko-m7").away_participant is None


def test_reopen_blocked_behind_single_feeder_walkover(engine, knockout):
    knockout(["A", "B", "C", "D", "E"])
    engine.swap_participants("ko-m4", "home", "ko-m3", "away")
    engine.remove_match("ko-m4")
    engine.apply_match_result("ko-m3", ScoreInput.score(1, 0))
    engine.apply_match_result("ko-m1", ScoreInput.score(2, 0))
    engine.apply_match_result("ko-m5", ScoreInput.score(1, 0))
    engine.apply_match_result("ko-m7", {"status": "in_progress"})

    with pytest.raises(MatchLocked):
        engine.reopen_match("ko-m3")
    assert engine.get_match("ko-m6").status == MatchStatus.WALKOVER


def test_remove_rejects_occupied_or_linked_matches(engine, knockout):
    knockout(["A", "B", "C", "D"])
    with pytest.raises(MatchLocked):
        engine.remove_match("ko-m1")
    with pytest.raises(MatchLocked):
        engine.remove_match("ko-m3")
