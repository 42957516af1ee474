"""All-play-all schedule generation."""

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

from itertools import combinations
from typing import List, Optional, Sequence, Tuple

from tourneykit.bracket.builder import match_id_for
from tourneykit.bracket.dates import assign_round_dates
from tourneykit.exceptions import InvalidConfigurationException, InvalidParticipantCount
from tourneykit.models.fixture import FixtureSettings
from tourneykit.models.match import Match
from tourneykit.models.participant import Participant
from tourneykit.utils import setup_logger

logger = setup_logger(__name__)


def expected_match_count(participant_count: int, settings: FixtureSettings) -> int:
    """Number of matches a schedule for ``participant_count`` contains."""
    legs = 2 if settings.home_and_away else 1
    pairs = participant_count * (participant_count - 1) // 2
    return pairs * settings.rounds * legs


class RoundRobinScheduler:
    """Generates the schedule of a round-robin fixture.

    Every unordered pair of participants meets once per round. With
    ``home_and_away`` each round holds a second leg with the sides swapped.
    Round-robin matches have no graph links.
    """

    def schedule(
        self,
        fixture_id: str,
        participants: Sequence[Participant],
        settings: Optional[FixtureSettings] = None,
    ) -> List[Match]:
        """Create all matches of the fixture.

        Args:
            fixture_id: ID of the fixture the matches belong to
            participants: Participants in entry order
            settings: Fixture settings (rounds, home_and_away)

        Returns:
            Matches ordered by round, then pair

        Raises:
            InvalidParticipantCount: If fewer than two participants are given
            InvalidConfigurationException: If a participant appears twice
        """
        settings = settings or FixtureSettings()
        if len(participants) < 2:
            raise InvalidParticipantCount(
                f"A round robin needs at least 2 participants, got {len(participants)}"
            )
        ids = [p.id for p in participants]
        if len(set(ids)) != len(ids):
            raise InvalidConfigurationException("Participants must be unique")

        matches: List[Match] = []
        match_number = 0
        for round_number in range(1, settings.rounds + 1):
            for home, away in self._round_pairings(ids, settings.home_and_away):
                match_number += 1
                matches.append(
                    Match(
                        id=match_id_for(fixture_id, match_number),
                        fixture_id=fixture_id,
                        round=round_number,
                        match_number=match_number,
                        home_participant=home,
                        away_participant=away,
                    )
                )

        assign_round_dates(matches, settings)
        logger.info(
            f"Scheduled round robin for {fixture_id}: {len(ids)} participants, "
            f"{settings.rounds} round(s), {len(matches)} matches"
        )
        return matches

    @staticmethod
    def _round_pairings(ids: List[str], home_and_away: bool) -> List[Tuple[str, str]]:
        pairings = list(combinations(ids, 2))
        if home_and_away:
            pairings += [(away, home) for home, away in combinations(ids, 2)]
        return pairings
