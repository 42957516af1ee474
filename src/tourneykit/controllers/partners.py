"""Doubles partner eligibility."""

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

from typing import List, Optional, Sequence, Set

from tourneykit.exceptions import ParticipantNotFound
from tourneykit.models.fixture import Fixture
from tourneykit.models.match import check_slot
from tourneykit.models.participant import Participant
from tourneykit.utils import setup_logger

logger = setup_logger(__name__)


class PartnerEligibilityResolver:
    """Works out which teammates may partner a player in a doubles fixture.

    A player's teammates are shared out across the fixture without reuse:
    anyone already placed in a match, as slot holder or as partner, is no
    longer eligible. The partner currently assigned to the slot being edited
    stays on the list so that re-opening an edit shows the existing choice.
    """

    def eligible_partners(
        self,
        fixture: Fixture,
        player_pool: Sequence[Participant],
        participant_id: str,
        side: str,
        match_id: Optional[str] = None,
    ) -> List[Participant]:
        """Resolve the eligible partners for one slot.

        Args:
            fixture: The doubles fixture
            player_pool: Every known player of the event, in display order
            participant_id: The slot holder looking for a partner
            side: ``home`` or ``away``
            match_id: The match being edited, if any

        Returns:
            Eligible teammates in pool order (empty when the player has no
            team in the fixture's event)

        Raises:
            ParticipantNotFound: If the participant is neither in the pool
                nor in the fixture
            InvalidSlot: If ``side`` is not a slot name
            MatchNotFound: If ``match_id`` is not part of the fixture
        """
        side = check_slot(side)
        participant = self._lookup(fixture, player_pool, participant_id)

        team_id = participant.team_for_event(fixture.event_id)
        if team_id is None:
            logger.debug(
                f"{participant_id} has no team in event {fixture.event_id}; no partners"
            )
            return []

        teammates = [
            p
            for p in player_pool
            if p.is_player
            and p.id != participant_id
            and p.team_for_event(fixture.event_id) == team_id
        ]

        used = self._used_ids(fixture)
        if match_id is not None:
            current = fixture.graph.get(match_id).partner_in(side)
            if current is not None:
                used.discard(current)

        eligible = [p for p in teammates if p.id not in used]
        logger.debug(
            f"Eligible partners for {participant_id} ({side}): "
            f"{[p.id for p in eligible]}"
        )
        return eligible

    @staticmethod
    def _used_ids(fixture: Fixture) -> Set[str]:
        used: Set[str] = set()
        for match in fixture.graph:
            for player_id in (
                match.home_participant,
                match.away_participant,
                match.home_partner,
                match.away_partner,
            ):
                if player_id is not None:
                    used.add(player_id)
        return used

    @staticmethod
    def _lookup(
        fixture: Fixture, player_pool: Sequence[Participant], participant_id: str
    ) -> Participant:
        for participant in player_pool:
            if participant.id == participant_id:
                return participant
        try:
            return fixture.participant(participant_id)
        except ParticipantNotFound:
            raise ParticipantNotFound(
                f"Unknown participant {participant_id} for fixture {fixture.id}"
            ) from None
