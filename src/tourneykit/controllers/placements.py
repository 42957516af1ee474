"""Podium placements of finished fixtures."""

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

from typing import List, Optional

from tourneykit.constants import FIRST_PLACE, PODIUM_POSITIONS, SECOND_PLACE, THIRD_PLACE
from tourneykit.controllers.standings import StandingsCalculator
from tourneykit.models.fixture import Fixture
from tourneykit.models.match import MatchStatus
from tourneykit.models.scorecard import Placement
from tourneykit.utils import setup_logger

logger = setup_logger(__name__)


class PlacementResolver:
    """Derives 1st, 2nd and 3rd place of a fixture from its matches.

    Knockout fixtures place the final's winner and loser, then the winner
    of the third-place match or, without one, the loser of the first
    completed semifinal. Round-robin fixtures place the top three rows of
    the table once every match is decided.

    Nothing is placed until the final (or, in a round robin, every match)
    is decided.
    """

    def __init__(self, standings: Optional[StandingsCalculator] = None):
        self.standings = standings or StandingsCalculator()

    def resolve(self, fixture: Fixture) -> List[Placement]:
        if fixture.is_knockout:
            placements = self._knockout(fixture)
        else:
            placements = self._round_robin(fixture)
        logger.debug(
            f"Placements for {fixture.id}: "
            f"{[(p.position, p.participant_id) for p in placements]}"
        )
        return placements

    def _knockout(self, fixture: Fixture) -> List[Placement]:
        graph = fixture.graph
        placements: List[Placement] = []

        final = graph.final_match()
        if final is None or not final.is_decided or final.winner is None:
            return placements

        placements.append(Placement(fixture.id, final.winner, FIRST_PLACE))
        if final.loser:
            placements.append(Placement(fixture.id, final.loser, SECOND_PLACE))

        third_place = graph.third_place_match()
        if third_place is not None:
            if third_place.is_completed and third_place.winner:
                placements.append(Placement(fixture.id, third_place.winner, THIRD_PLACE))
            return placements

        for semifinal in graph.semifinals():
            if semifinal.is_completed and semifinal.loser:
                placements.append(Placement(fixture.id, semifinal.loser, THIRD_PLACE))
                break
        return placements

    def _round_robin(self, fixture: Fixture) -> List[Placement]:
        finished = (MatchStatus.COMPLETED, MatchStatus.WALKOVER)
        matches = fixture.graph.matches()
        if not matches or any(m.status not in finished for m in matches):
            return []

        table = self.standings.calculate(fixture)
        return [
            Placement(fixture.id, row.participant_id, position)
            for position, row in zip(PODIUM_POSITIONS, table)
        ]
