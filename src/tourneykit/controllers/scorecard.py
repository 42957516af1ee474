"""Cross-activity team scorecards."""

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

from typing import Dict, Iterable, List, Mapping, Optional

from tourneykit.constants import FIRST_PLACE, SECOND_PLACE, THIRD_PLACE
from tourneykit.controllers.placements import PlacementResolver
from tourneykit.exceptions import ParticipantNotFound
from tourneykit.models.fixture import Fixture
from tourneykit.models.scorecard import Activity, Placement, ScorecardEntry, TeamScorecard
from tourneykit.utils import setup_logger

logger = setup_logger(__name__)


class ScorecardAggregator:
    """Aggregates podium points per team across the activities of an event.

    Team fixtures credit the placing team directly. Player fixtures credit
    the team the placing player represents in the fixture's event.
    """

    def __init__(self, placement_resolver: Optional[PlacementResolver] = None):
        self.placement_resolver = placement_resolver or PlacementResolver()

    def aggregate(
        self,
        event_id: str,
        fixtures: Iterable[Fixture],
        activities: Mapping[str, Activity],
    ) -> List[TeamScorecard]:
        """Build the ranked scorecard of an event.

        Args:
            event_id: Event being scored; fixtures of other events are ignored
            fixtures: Candidate fixtures
            activities: Activities by ID, with their point tables

        Returns:
            Team scorecards ranked by total points, then by the number of
            first, second and third places. Teams without points are left out.
        """
        cards: Dict[str, TeamScorecard] = {}

        for fixture in fixtures:
            if fixture.event_id != event_id:
                continue
            activity = activities.get(fixture.activity_id)
            if activity is None or activity.points is None:
                logger.warning(
                    f"Fixture {fixture.id}: activity {fixture.activity_id} has no "
                    "point table; skipped in scorecard"
                )
                continue

            for placement in self.placement_resolver.resolve(fixture):
                points = activity.points.points_for(placement.position)
                if points == 0:
                    continue
                team_id = self._team_for(fixture, placement)
                if team_id is None:
                    continue
                card = cards.setdefault(team_id, TeamScorecard(team_id=team_id))
                card.breakdown.append(
                    ScorecardEntry(
                        activity_id=activity.id,
                        position=placement.position,
                        points=points,
                        activity_name=activity.name,
                        fixture_id=fixture.id,
                    )
                )

        ranked = sorted(
            (card for card in cards.values() if card.total_points != 0),
            key=lambda c: (
                -c.total_points,
                -c.count_position(FIRST_PLACE),
                -c.count_position(SECOND_PLACE),
                -c.count_position(THIRD_PLACE),
                c.team_id,
            ),
        )
        for rank, card in enumerate(ranked, start=1):
            card.rank = rank

        logger.info(f"Scorecard for event {event_id}: {len(ranked)} teams ranked")
        return ranked

    @staticmethod
    def _team_for(fixture: Fixture, placement: Placement) -> Optional[str]:
        if not fixture.is_player_fixture:
            return placement.participant_id
        try:
            participant = fixture.participant(placement.participant_id)
        except ParticipantNotFound:
            logger.warning(
                f"Placed participant {placement.participant_id} is not entered in "
                f"{fixture.id}; no team credited"
            )
            return None
        team_id = participant.team_for_event(fixture.event_id)
        if team_id is None:
            logger.warning(
                f"Player {participant.id} has no team in event {fixture.event_id}; "
                "placement not credited"
            )
        return team_id
