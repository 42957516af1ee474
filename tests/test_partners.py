import pytest

from tourneykit.constants import FORMAT_KNOCKOUT, KIND_PLAYER
from tourneykit.exceptions import (
    IneligiblePartner,
    InvalidSlot,
    MatchLocked,
    ParticipantNotFound,
)
from tourneykit.models import ScoreInput, TeamMembership, player

EVENT_ID = "spring-games"


def _member(player_id, team_id):
    return player(player_id, player_id.upper(), TeamMembership(team_id, EVENT_ID))


@pytest.fixture
def doubles(engine):
    """p and q meet in m1, r (no team) has a bye; t1/t2 and u1 sit in the pool."""
    pool = [
        _member("p", "red"),
        _member("t1", "red"),
        _member("t2", "red"),
        _member("q", "blue"),
        _member("u1", "blue"),
        player("r", "R"),
    ]
    engine.register_players(pool)
    by_id = {p.id: p for p in pool}
    engine.create_fixture(
        fixture_id="ko",
        event_id=EVENT_ID,
        activity_id="badminton",
        format=FORMAT_KNOCKOUT,
        participant_type=KIND_PLAYER,
        participants=[by_id["p"], by_id["q"], by_id["r"]],
        settings={"isDoubles": True, "randomizeSeeds": False},
    )
    return engine


def _ids(participants):
    return [p.id for p in participants]


def test_all_unused_teammates_are_eligible(doubles):
    assert _ids(doubles.get_eligible_partners("ko", "p", "home")) == ["t1", "t2"]
    assert _ids(doubles.get_eligible_partners("ko", "q", "away")) == ["u1"]


def test_teammate_used_elsewhere_is_not_eligible(doubles):
    doubles.assign_partners("ko-m1", "t1", None)

    assert _ids(doubles.get_eligible_partners("ko", "p", "home")) == ["t2"]


def test_current_partner_stays_eligible_for_its_own_slot(doubles):
    doubles.assign_partners("ko-m1", "t1", "u1")

    assert _ids(doubles.get_eligible_partners("ko", "p", "home", "ko-m1")) == ["t1", "t2"]
    assert _ids(doubles.get_eligible_partners("ko", "q", "away", "ko-m1")) == ["u1"]
    assert _ids(doubles.get_eligible_partners("ko", "q", "away")) == []


def test_player_without_team_has_no_partners(doubles):
    assert doubles.get_eligible_partners("ko", "r", "home") == []


def test_unknown_participant_and_bad_side(doubles):
    with pytest.raises(ParticipantNotFound):
        doubles.get_eligible_partners("ko", "nobody", "home")
    with pytest.raises(InvalidSlot):
        doubles.get_eligible_partners("ko", "p", "left")


def test_assigning_partner_from_other_team_is_rejected_and_rolled_back(doubles):
    doubles.assign_partners("ko-m1", "t1", None)

    with pytest.raises(IneligiblePartner):
        doubles.assign_partners("ko-m1", None, "t2")

    match = doubles.get_match("ko-m1")
    assert match.home_partner == "t1"
    assert match.away_partner is None


def test_partner_for_empty_slot_is_rejected(doubles):
    with pytest.raises(InvalidSlot):
        doubles.assign_partners("ko-m3", "t1", None)


def test_partners_fixed_once_match_is_played(doubles):
    doubles.assign_partners("ko-m1", "t2", "u1")
    doubles.apply_match_result("ko-m1", ScoreInput.score(21, 18))

    with pytest.raises(MatchLocked):
        doubles.assign_partners("ko-m1", "t1", "u1")
    assert doubles.get_match("ko-m1").home_partner == "t2"


def test_singles_fixture_has_no_partners(engine, knockout):
    knockout(["A", "B"])
    with pytest.raises(IneligiblePartner):
        engine.assign_partners("ko-m1", None, None)
