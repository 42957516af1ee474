"""Round-robin league tables."""

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

from itertools import groupby
from typing import Dict, Iterable, List, Tuple

from tourneykit.models.fixture import Fixture, FixtureSettings
from tourneykit.models.match import Match
from tourneykit.models.standing import StandingRow
from tourneykit.utils import setup_logger

logger = setup_logger(__name__)


class StandingsCalculator:
    """Calculates league tables from completed matches.

    Rows are recomputed from scratch on every call. Ordering:

    - Points
    - Goal difference
    - Goals for
    - Head-to-head points among the participants still level
    - Name, then participant ID (ascending)
    """

    def calculate(self, fixture: Fixture) -> List[StandingRow]:
        """Build the ranked table of a fixture.

        Args:
            fixture: Fixture whose matches are tallied

        Returns:
            One row per fixture participant, ranked 1..n
        """
        rows = {
            p.id: StandingRow(participant_id=p.id, name=p.name)
            for p in fixture.participants
        }
        counted = self._counted_matches(fixture.graph)

        for match in counted:
            for participant_id in match.participant_ids:
                if participant_id not in rows:
                    # Participant removed from the entry list after play
                    rows[participant_id] = StandingRow(
                        participant_id=participant_id, name=participant_id
                    )
            self._credit(rows, match)

        for row in rows.values():
            row.points = self._points(row, fixture.settings)

        ranked = self._rank(list(rows.values()), counted, fixture.settings)
        logger.debug(
            f"Standings for {fixture.id}: {len(ranked)} rows from {len(counted)} matches"
        )
        return ranked

    @staticmethod
    def _counted_matches(matches: Iterable[Match]) -> List[Match]:
        """Completed matches with two participants; walkovers never count."""
        return [
            m
            for m in matches
            if m.is_completed and m.home_participant and m.away_participant
        ]

    @staticmethod
    def _credit(rows: Dict[str, StandingRow], match: Match) -> None:
        home = rows[match.home_participant]
        away = rows[match.away_participant]
        home_goals = match.home_score or 0
        away_goals = match.away_score or 0

        for row, scored, conceded in ((home, home_goals, away_goals), (away, away_goals, home_goals)):
            row.played += 1
            row.goals_for += scored
            row.goals_against += conceded

        if match.winner is None:
            home.drawn += 1
            away.drawn += 1
        elif match.winner == match.home_participant:
            home.won += 1
            away.lost += 1
        else:
            away.won += 1
            home.lost += 1

    @staticmethod
    def _points(row: StandingRow, settings: FixtureSettings) -> int:
        return (
            row.won * settings.points_for_win
            + row.drawn * settings.points_for_draw
            + row.lost * settings.points_for_loss
        )

    def _rank(
        self, rows: List[StandingRow], matches: List[Match], settings: FixtureSettings
    ) -> List[StandingRow]:
        def primary(row: StandingRow) -> Tuple[int, int, int]:
            return (row.points, row.goal_difference, row.goals_for)

        rows.sort(key=primary, reverse=True)

        ranked: List[StandingRow] = []
        for _, group in groupby(rows, key=primary):
            tied = list(group)
            if len(tied) > 1:
                h2h = self._head_to_head_points(tied, matches, settings)
                tied.sort(key=lambda r: (-h2h[r.participant_id], r.name, r.participant_id))
            ranked.extend(tied)

        for rank, row in enumerate(ranked, start=1):
            row.rank = rank
        return ranked

    def _head_to_head_points(
        self, tied: List[StandingRow], matches: List[Match], settings: FixtureSettings
    ) -> Dict[str, int]:
        """Points each tied participant took from matches among the tied group."""
        ids = {row.participant_id for row in tied}
        points = {participant_id: 0 for participant_id in ids}
        for match in matches:
            if match.home_participant not in ids or match.away_participant not in ids:
                continue
            if match.winner is None:
                points[match.home_participant] += settings.points_for_draw
                points[match.away_participant] += settings.points_for_draw
            else:
                points[match.winner] += settings.points_for_win
                points[match.opponent_of(match.winner)] += settings.points_for_loss
        return points
