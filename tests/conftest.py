import pytest

from tourneykit import FixtureSettings, TournamentEngine, team
from tourneykit.constants import FORMAT_KNOCKOUT, FORMAT_ROUND_ROBIN, KIND_TEAM

EVENT_ID = "spring-games"


def teams(*names):
    return [team(name) for name in names]


@pytest.fixture
def engine():
    return TournamentEngine()


@pytest.fixture
def knockout(engine):
    """Create a team knockout fixture in seeding order (no shuffle)."""

    def _create(names, fixture_id="ko", activity_id="chess", **settings):
        settings.setdefault("randomize_seeds", False)
        return engine.create_fixture(
            fixture_id=fixture_id,
            event_id=EVENT_ID,
            activity_id=activity_id,
            format=FORMAT_KNOCKOUT,
            participant_type=KIND_TEAM,
            participants=teams(*names),
            settings=FixtureSettings(**settings),
        )

    return _create


@pytest.fixture
def league(engine):
    """Create a team round-robin fixture."""

    def _create(names, fixture_id="league", activity_id="football", **settings):
        return engine.create_fixture(
            fixture_id=fixture_id,
            event_id=EVENT_ID,
            activity_id=activity_id,
            format=FORMAT_ROUND_ROBIN,
            participant_type=KIND_TEAM,
            participants=teams(*names),
            settings=FixtureSettings(**settings),
        )

    return _create
