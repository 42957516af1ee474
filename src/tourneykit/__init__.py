"""tourneykit: tournament bracket and scoring engine.

Builds knockout brackets and round-robin schedules, propagates results,
resolves doubles partners and computes standings and team scorecards.
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

from tourneykit.bracket import BracketBuilder, BracketLayout, RoundRobinScheduler
from tourneykit.controllers import (
    MatchProgression,
    PartnerEligibilityResolver,
    PlacementResolver,
    ScorecardAggregator,
    StandingsCalculator,
)
from tourneykit.engine import TournamentEngine
from tourneykit.models import (
    Activity,
    Fixture,
    FixtureSettings,
    Match,
    MatchStatus,
    Participant,
    PointTable,
    ScoreInput,
    TeamMembership,
    player,
    team,
)

__version__ = "0.1.0"

__all__ = [
    "Activity",
    "BracketBuilder",
    "BracketLayout",
    "Fixture",
    "FixtureSettings",
    "Match",
    "MatchProgression",
    "MatchStatus",
    "PartnerEligibilityResolver",
    "Participant",
    "PlacementResolver",
    "PointTable",
    "RoundRobinScheduler",
    "ScoreInput",
    "ScorecardAggregator",
    "StandingsCalculator",
    "TeamMembership",
    "TournamentEngine",
    "player",
    "team",
]
