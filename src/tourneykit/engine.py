"""Tournament engine facade.

The engine owns the fixture registry and serializes writes per fixture.
Every public method returns copies, so callers never hold a live reference
into a match graph.
"""

# tourneykit
# Copyright (C) 2025  tourneykit developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import copy
import dataclasses
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Union

from tourneykit.bracket import BracketBuilder, BracketLayout, RoundRobinScheduler
from tourneykit.controllers import (
    MatchProgression,
    PartnerEligibilityResolver,
    PlacementResolver,
    ScorecardAggregator,
    StandingsCalculator,
)
from tourneykit.exceptions import (
    FixtureLocked,
    FixtureNotFound,
    InvalidConfigurationException,
    InvalidSlot,
    MatchNotFound,
)
from tourneykit.models import (
    Activity,
    Fixture,
    FixtureSettings,
    Match,
    Participant,
    Placement,
    ReopenOutcome,
    ResultOutcome,
    ScoreInput,
    StandingRow,
    SwapOutcome,
    TeamScorecard,
)
from tourneykit.utils import setup_logger

logger = setup_logger(__name__)


class TournamentEngine:
    """Main entry point of tourneykit.

    This class coordinates all fixture operations through specialized
    controllers:
    - BracketBuilder / RoundRobinScheduler: create the match graph
    - MatchProgression: results, reopening, reseeding, partners, pruning
    - PartnerEligibilityResolver: doubles partner lists
    - StandingsCalculator / PlacementResolver / ScorecardAggregator:
      read-side projections

    Each fixture has its own re-entrant lock. Writes hold it for their whole
    duration; reads hold it only while copying the fixture and compute on
    the copy.
    """

    def __init__(self) -> None:
        self._fixtures: Dict[str, Fixture] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._match_index: Dict[str, str] = {}
        self._players: Dict[str, Participant] = {}
        self._activities: Dict[str, Activity] = {}
        self._registry_lock = threading.Lock()

        # Specialized controllers
        self.bracket_builder = BracketBuilder()
        self.round_robin_scheduler = RoundRobinScheduler()
        self.partner_resolver = PartnerEligibilityResolver()
        self.progression = MatchProgression(self.partner_resolver)
        self.standings_calculator = StandingsCalculator()
        self.placement_resolver = PlacementResolver(self.standings_calculator)
        self.scorecard_aggregator = ScorecardAggregator(self.placement_resolver)

    # ========== Registry ==========

    def register_players(self, players: Iterable[Participant]) -> None:
        """Add players to the pool used for partner resolution.

        Raises:
            InvalidConfigurationException: If a participant is not a player
        """
        players = list(players)
        for participant in players:
            if not participant.is_player:
                raise InvalidConfigurationException(
                    f"{participant.id} is a {participant.kind}, not a player"
                )
        with self._registry_lock:
            for participant in players:
                self._players[participant.id] = participant
        logger.debug(f"Registered {len(players)} players")

    def register_activity(self, activity: Activity) -> None:
        """Add or replace an activity and its point table."""
        with self._registry_lock:
            self._activities[activity.id] = activity
        logger.debug(f"Registered activity {activity.id} ({activity.name})")

    def player_pool(self) -> List[Participant]:
        with self._registry_lock:
            return list(self._players.values())

    def fixture_ids(self) -> List[str]:
        with self._registry_lock:
            return list(self._fixtures)

    def _lock_for(self, fixture_id: str) -> threading.RLock:
        with self._registry_lock:
            if fixture_id not in self._fixtures:
                raise FixtureNotFound(f"Fixture not found: {fixture_id}")
            return self._locks[fixture_id]

    def _fixture_id_for_match(self, match_id: str) -> str:
        with self._registry_lock:
            try:
                return self._match_index[match_id]
            except KeyError:
                raise MatchNotFound(f"Match not found: {match_id}") from None

    @contextmanager
    def _locked_fixture(self, fixture_id: str) -> Iterator[Fixture]:
        """Hold a fixture's lock and yield the live fixture."""
        with self._lock_for(fixture_id):
            yield self._fixtures[fixture_id]

    def _reindex(self, fixture: Fixture, old_ids: Iterable[str] = ()) -> None:
        with self._registry_lock:
            for match_id in old_ids:
                self._match_index.pop(match_id, None)
            for match in fixture.graph:
                self._match_index[match.id] = fixture.id

    # ========== Fixture creation ==========

    def create_fixture(
        self,
        fixture_id: str,
        event_id: str,
        activity_id: str,
        format: str,
        participant_type: str,
        participants: Sequence[Participant],
        settings: Optional[Union[FixtureSettings, Mapping[str, Any]]] = None,
        name: str = "",
    ) -> Fixture:
        """Create a fixture and build its matches.

        Knockout fixtures get a bracket, round-robin fixtures a schedule.

        Args:
            fixture_id: New fixture ID
            event_id: Event the fixture belongs to
            activity_id: Activity being played
            format: ``knockout`` or ``roundrobin``
            participant_type: ``player`` or ``team``
            participants: Participants in seeding order
            settings: Fixture settings, or a dictionary of them
            name: Display name

        Returns:
            A copy of the created fixture

        Raises:
            InvalidConfigurationException: If the ID is taken, a participant
                has the wrong kind or the configuration is invalid
            InvalidParticipantCount: If fewer than two participants are given
        """
        self._check_participant_kinds(fixture_id, participant_type, participants)
        if not isinstance(settings, FixtureSettings):
            settings = FixtureSettings.from_dict(settings)

        fixture = Fixture(
            id=fixture_id,
            event_id=event_id,
            activity_id=activity_id,
            format=format,
            participant_type=participant_type,
            participants=list(participants),
            settings=settings,
            name=name,
        )
        self._generate_matches(fixture, fixture.participants, settings)

        with self._registry_lock:
            if fixture_id in self._fixtures:
                raise InvalidConfigurationException(f"Fixture {fixture_id} already exists")
            self._fixtures[fixture_id] = fixture
            self._locks[fixture_id] = threading.RLock()
        self._reindex(fixture)

        logger.info(
            f"Created {format} fixture {fixture_id} ({participant_type}s) with "
            f"{len(fixture.participants)} participants and {len(fixture.graph)} matches"
        )
        return self.get_fixture(fixture_id)

    @staticmethod
    def _check_participant_kinds(
        fixture_id: str, participant_type: str, participants: Sequence[Participant]
    ) -> None:
        for participant in participants:
            if participant.kind != participant_type:
                raise InvalidConfigurationException(
                    f"Participant {participant.id} is a {participant.kind}, "
                    f"fixture {fixture_id} expects {participant_type}s"
                )

    def _generate_matches(
        self,
        fixture: Fixture,
        participants: Sequence[Participant],
        settings: FixtureSettings,
    ) -> None:
        """Replace the fixture's matches with a freshly built set."""
        if fixture.is_knockout:
            build = self.bracket_builder.build(
                fixture.id, participants, settings, event_id=fixture.event_id
            )
            matches, seeding = build.matches, build.seeding
        else:
            matches = self.round_robin_scheduler.schedule(fixture.id, participants, settings)
            seeding = [p.id for p in participants]

        with fixture.graph.transaction():
            fixture.graph.replace_all(matches)
        fixture.participants = list(participants)
        fixture.seeding = seeding

    def get_fixture(self, fixture_id: str) -> Fixture:
        """Consistent copy of a fixture and its matches."""
        with self._locked_fixture(fixture_id) as fixture:
            return copy.deepcopy(fixture)

    def get_matches(self, fixture_id: str) -> List[Match]:
        with self._locked_fixture(fixture_id) as fixture:
            return fixture.graph.snapshot().matches()

    def get_match(self, match_id: str) -> Match:
        fixture_id = self._fixture_id_for_match(match_id)
        with self._locked_fixture(fixture_id) as fixture:
            return copy.deepcopy(fixture.graph.get(match_id))

    # ========== Bracket construction ==========

    def build_bracket(
        self,
        fixture_id: str,
        participants: Optional[Sequence[Participant]] = None,
        settings: Optional[FixtureSettings] = None,
    ) -> List[Match]:
        """Rebuild the matches of an unplayed fixture.

        Args:
            fixture_id: ID of the fixture
            participants: New participant list (defaults to the current one)
            settings: Must match the fixture's settings when given; settings
                are fixed at creation

        Returns:
            Copies of the new matches

        Raises:
            FixtureLocked: If any match has been played
            InvalidConfigurationException: If different settings are given or
                a participant has the wrong kind
        """
        with self._locked_fixture(fixture_id) as fixture:
            if settings is not None and settings != fixture.settings:
                raise InvalidConfigurationException(
                    f"Settings of fixture {fixture_id} are fixed after creation"
                )
            self._rebuild(fixture, participants, fixture.settings)
            return fixture.graph.snapshot().matches()

    def randomize_bracket(self, fixture_id: str, seed: Optional[int] = None) -> List[Match]:
        """Reshuffle the seeding of an unplayed knockout fixture.

        Raises:
            FixtureLocked: If any match has been played
            InvalidConfigurationException: If the fixture is not a knockout
        """
        with self._locked_fixture(fixture_id) as fixture:
            if not fixture.is_knockout:
                raise InvalidConfigurationException(
                    f"Fixture {fixture_id} is not a knockout; nothing to randomize"
                )
            shuffle_settings = dataclasses.replace(
                fixture.settings, randomize_seeds=True, seed=seed
            )
            self._rebuild(fixture, None, shuffle_settings)
            logger.info(f"Randomized bracket of {fixture_id} (seed={seed})")
            return fixture.graph.snapshot().matches()

    def _rebuild(
        self,
        fixture: Fixture,
        participants: Optional[Sequence[Participant]],
        settings: FixtureSettings,
    ) -> None:
        if fixture.graph.has_played_matches():
            logger.warning(f"Rejected rebuild of {fixture.id}: play has begun")
            raise FixtureLocked(f"Fixture {fixture.id} has played matches")

        participants = list(participants if participants is not None else fixture.participants)
        self._check_participant_kinds(fixture.id, fixture.participant_type, participants)

        old_ids = [m.id for m in fixture.graph]
        self._generate_matches(fixture, participants, settings)
        self._reindex(fixture, old_ids)
        logger.info(f"Rebuilt matches of {fixture.id}: {len(fixture.graph)} matches")

    # ========== Match progression ==========

    def apply_match_result(
        self, match_id: str, result: Union[ScoreInput, Mapping[str, Any]]
    ) -> ResultOutcome:
        """Apply a result and propagate it.

        Args:
            match_id: ID of the match
            result: A ``ScoreInput`` or a dictionary accepted by
                ``ScoreInput.from_dict``

        Returns:
            Copies of the updated and propagated matches
        """
        if not isinstance(result, ScoreInput):
            result = ScoreInput.from_dict(dict(result))
        fixture_id = self._fixture_id_for_match(match_id)
        with self._locked_fixture(fixture_id) as fixture:
            return copy.deepcopy(self.progression.apply_result(fixture, match_id, result))

    def reopen_match(self, match_id: str) -> ReopenOutcome:
        """Reopen a completed match (one-hop revert)."""
        fixture_id = self._fixture_id_for_match(match_id)
        with self._locked_fixture(fixture_id) as fixture:
            return copy.deepcopy(self.progression.reopen(fixture, match_id))

    def swap_participants(
        self,
        match_a: str,
        slot_a: str,
        match_b: str,
        slot_b: str,
        expected_a: Optional[str] = None,
        expected_b: Optional[str] = None,
    ) -> SwapOutcome:
        """Swap two round-1 slots of the same knockout fixture.

        Raises:
            InvalidSlot: If the matches belong to different fixtures
        """
        fixture_id = self._fixture_id_for_match(match_a)
        if self._fixture_id_for_match(match_b) != fixture_id:
            raise InvalidSlot(f"Matches {match_a} and {match_b} are in different fixtures")
        with self._locked_fixture(fixture_id) as fixture:
            return copy.deepcopy(
                self.progression.swap_participants(
                    fixture, match_a, slot_a, match_b, slot_b, expected_a, expected_b
                )
            )

    # ========== Doubles partners ==========

    def get_eligible_partners(
        self,
        fixture_id: str,
        participant_id: str,
        side: str,
        match_id: Optional[str] = None,
    ) -> List[Participant]:
        """Teammates that may partner ``participant_id`` on ``side``."""
        fixture = self.get_fixture(fixture_id)
        return self.partner_resolver.eligible_partners(
            fixture, self.player_pool(), participant_id, side, match_id
        )

    def assign_partners(
        self,
        match_id: str,
        home_partner: Optional[str],
        away_partner: Optional[str],
    ) -> Match:
        fixture_id = self._fixture_id_for_match(match_id)
        pool = self.player_pool()
        with self._locked_fixture(fixture_id) as fixture:
            return copy.deepcopy(
                self.progression.assign_partners(
                    fixture, pool, match_id, home_partner, away_partner
                )
            )

    # ========== Structural edits ==========

    def get_editable_matches(self, fixture_id: str) -> List[Match]:
        """Matches to list for editing (walkovers excluded)."""
        fixture = self.get_fixture(fixture_id)
        return self.progression.editable_matches(fixture)

    def can_delete_match(self, match_id: str) -> bool:
        return self.progression.can_delete(self.get_match(match_id))

    def remove_match(self, match_id: str) -> Match:
        """Remove an empty, unplayed leaf match.

        Returns:
            The removed match
        """
        fixture_id = self._fixture_id_for_match(match_id)
        with self._locked_fixture(fixture_id) as fixture:
            removed = self.progression.remove_match(fixture, match_id)
            with self._registry_lock:
                self._match_index.pop(match_id, None)
            return copy.deepcopy(removed)

    # ========== Projections ==========

    def get_standings(self, fixture_id: str) -> List[StandingRow]:
        return self.standings_calculator.calculate(self.get_fixture(fixture_id))

    def get_placements(self, fixture_id: str) -> List[Placement]:
        return self.placement_resolver.resolve(self.get_fixture(fixture_id))

    def get_scorecard(self, event_id: str) -> List[TeamScorecard]:
        """Ranked team scorecard across all fixtures of an event."""
        fixtures = []
        for fixture_id in self.fixture_ids():
            fixture = self.get_fixture(fixture_id)
            if fixture.event_id == event_id:
                fixtures.append(fixture)
        with self._registry_lock:
            activities = dict(self._activities)
        return self.scorecard_aggregator.aggregate(event_id, fixtures, activities)

    def get_layout(self, fixture_id: str) -> BracketLayout:
        """Display positions and round titles of a knockout fixture."""
        return BracketLayout.for_matches(self.get_matches(fixture_id))
