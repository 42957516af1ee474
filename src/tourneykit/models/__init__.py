"""Data models for tourneykit."""

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

from tourneykit.models.fixture import Fixture, FixtureSettings
from tourneykit.models.graph import MatchGraph
from tourneykit.models.match import Match, MatchStatus, SetScore
from tourneykit.models.participant import Participant, TeamMembership, player, team
from tourneykit.models.results import (
    ReopenOutcome,
    ResultOutcome,
    ScoreInput,
    SwapOutcome,
)
from tourneykit.models.scorecard import (
    Activity,
    Placement,
    PointTable,
    ScorecardEntry,
    TeamScorecard,
)
from tourneykit.models.standing import StandingRow

__all__ = [
    "Activity",
    "Fixture",
    "FixtureSettings",
    "Match",
    "MatchGraph",
    "MatchStatus",
    "Participant",
    "Placement",
    "PointTable",
    "ReopenOutcome",
    "ResultOutcome",
    "ScoreInput",
    "ScorecardEntry",
    "SetScore",
    "StandingRow",
    "SwapOutcome",
    "TeamMembership",
    "TeamScorecard",
    "player",
    "team",
]
