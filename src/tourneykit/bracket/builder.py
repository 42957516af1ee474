"""Knockout bracket construction.

This module builds the complete match graph of a single-elimination fixture
from an ordered participant list.
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

import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from tourneykit.bracket.dates import assign_round_dates
from tourneykit.bracket.links import advance_winner
from tourneykit.bracket.seeding import (
    next_power_of_two,
    pair_first_round,
    seed_avoiding_teammates,
    shuffled,
)
from tourneykit.constants import BYE_NOTE, MIN_PARTICIPANTS_FOR_THIRD_PLACE
from tourneykit.exceptions import InvalidConfigurationException, InvalidParticipantCount
from tourneykit.models.fixture import FixtureSettings
from tourneykit.models.graph import MatchGraph
from tourneykit.models.match import Match, MatchStatus
from tourneykit.models.participant import Participant
from tourneykit.utils import setup_logger

logger = setup_logger(__name__)


def match_id_for(fixture_id: str, match_number: int) -> str:
    """Deterministic match ID inside a fixture."""
    return f"{fixture_id}-m{match_number}"


@dataclass
class BracketBuildResult:
    """Everything produced by a bracket build.

    Attributes:
        matches: All match nodes, round by round, third-place match last
        seeding: Participant IDs in the order they were laid into round 1
        bracket_size: Number of round-1 slots (power of two)
        byes: Number of round-1 slots left empty
        rounds: Number of rounds, final included
        constraint_satisfied: False when teammates could not be kept apart
    """

    matches: List[Match]
    seeding: List[str]
    bracket_size: int
    byes: int
    rounds: int
    constraint_satisfied: bool = True
    warnings: List[str] = field(default_factory=list)

    @property
    def contested_matches(self) -> List[Match]:
        """Matches that will actually be played (no byes, no third place)."""
        return [
            m
            for m in self.matches
            if not m.is_third_place_match and not (m.round == 1 and m.is_bye)
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "matches": [m.to_dict() for m in self.matches],
            "seeding": list(self.seeding),
            "bracket_size": self.bracket_size,
            "byes": self.byes,
            "rounds": self.rounds,
            "constraint_satisfied": self.constraint_satisfied,
            "warnings": list(self.warnings),
        }


class BracketBuilder:
    """Builds the match graph of a knockout fixture.

    This class is responsible for:
    - Applying (seeded) randomization to the participant order
    - Keeping teammates apart in round 1 when asked to
    - Laying participants and byes into round 1
    - Linking every round to the next and adding the third-place match
    - Advancing bye winners into round 2
    """

    def build(
        self,
        fixture_id: str,
        participants: Sequence[Participant],
        settings: Optional[FixtureSettings] = None,
        event_id: Optional[str] = None,
    ) -> BracketBuildResult:
        """Build a complete knockout bracket.

        Args:
            fixture_id: ID of the fixture the matches belong to
            participants: Participants in seeding order (N >= 2)
            settings: Fixture settings (defaults apply when omitted)
            event_id: Event used to resolve team memberships when keeping
                teammates apart

        Returns:
            The build result with all matches

        Raises:
            InvalidParticipantCount: If fewer than two participants are given
            InvalidConfigurationException: If a participant appears twice
        """
        settings = settings or FixtureSettings()
        self._validate_participants(participants)

        count = len(participants)
        bracket_size = next_power_of_two(count)
        byes = bracket_size - count
        rounds = bracket_size.bit_length() - 1
        warnings: List[str] = []

        rng = random.Random(settings.seed) if settings.seed is not None else random.Random()
        ordered = list(participants)
        if settings.randomize_seeds:
            ordered = shuffled(ordered, rng)
            logger.info(
                f"Randomized seeding for {fixture_id}: {', '.join(p.id for p in ordered)}"
            )

        constraint_satisfied = True
        if settings.avoid_same_team_first_round:
            if all(p.is_player for p in ordered) and event_id is not None:
                ordered, constraint_satisfied = seed_avoiding_teammates(
                    ordered,
                    bracket_size,
                    lambda p: p.team_for_event(event_id),
                    rng,
                    settings.max_reseed_attempts,
                )
                if not constraint_satisfied:
                    warnings.append("teammates could not be kept apart in round 1")
            else:
                logger.warning(
                    f"Fixture {fixture_id}: avoiding teammates needs player "
                    "participants and an event; setting ignored"
                )
                warnings.append("avoid_same_team_first_round ignored")

        graph = MatchGraph()
        match_number = self._create_rounds(graph, fixture_id, ordered, bracket_size, rounds)

        if settings.third_place_match:
            if count >= MIN_PARTICIPANTS_FOR_THIRD_PLACE:
                self._add_third_place_match(graph, fixture_id, match_number, rounds)
            else:
                logger.warning(
                    f"Fixture {fixture_id}: third-place match needs at least "
                    f"{MIN_PARTICIPANTS_FOR_THIRD_PLACE} participants; skipped"
                )
                warnings.append("third-place match skipped")

        for match in graph.by_round().get(1, []):
            if match.status == MatchStatus.WALKOVER:
                advance_winner(graph, match)
        assign_round_dates(graph, settings)

        logger.info(
            f"Built knockout bracket for {fixture_id}: {count} participants, "
            f"size {bracket_size}, {byes} byes, {rounds} rounds, {len(graph)} matches"
        )

        return BracketBuildResult(
            matches=graph.matches(),
            seeding=[p.id for p in ordered],
            bracket_size=bracket_size,
            byes=byes,
            rounds=rounds,
            constraint_satisfied=constraint_satisfied,
            warnings=warnings,
        )

    def _validate_participants(self, participants: Sequence[Participant]) -> None:
        if len(participants) < 2:
            raise InvalidParticipantCount(
                f"A knockout bracket needs at least 2 participants, got {len(participants)}"
            )
        ids = [p.id for p in participants]
        if len(set(ids)) != len(ids):
            raise InvalidConfigurationException("Participants must be unique")

    def _create_rounds(
        self,
        graph: MatchGraph,
        fixture_id: str,
        ordered: List[Participant],
        bracket_size: int,
        rounds: int,
    ) -> int:
        """Create and link all rounds; return the last match number used."""
        match_number = 0
        previous_round: List[Match] = []

        for home, away in pair_first_round(ordered, bracket_size):
            match_number += 1
            match = Match(
                id=match_id_for(fixture_id, match_number),
                fixture_id=fixture_id,
                round=1,
                match_number=match_number,
                home_participant=home.id,
                away_participant=away.id if away else None,
            )
            if away is None:
                match.status = MatchStatus.WALKOVER
                match.winner = home.id
                match.notes = BYE_NOTE
            graph.add(match)
            previous_round.append(match)
            logger.debug(
                f"Round 1, match {match_number}: {home.id} vs {away.id if away else 'BYE'}"
            )

        for round_number in range(2, rounds + 1):
            current_round: List[Match] = []
            for i in range(0, len(previous_round), 2):
                match_number += 1
                feeders = previous_round[i : i + 2]
                match = Match(
                    id=match_id_for(fixture_id, match_number),
                    fixture_id=fixture_id,
                    round=round_number,
                    match_number=match_number,
                    previous_match_ids=[f.id for f in feeders],
                )
                for feeder in feeders:
                    feeder.next_match_id = match.id
                graph.add(match)
                current_round.append(match)
            previous_round = current_round

        return match_number

    def _add_third_place_match(
        self, graph: MatchGraph, fixture_id: str, last_number: int, rounds: int
    ) -> None:
        semifinals = graph.semifinals()
        match_number = last_number + 1
        graph.add(
            Match(
                id=match_id_for(fixture_id, match_number),
                fixture_id=fixture_id,
                round=rounds,
                match_number=match_number,
                previous_match_ids=[m.id for m in semifinals],
                is_third_place_match=True,
            )
        )
