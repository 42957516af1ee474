"""Standing row data class."""

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

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class StandingRow:
    """One participant's line in a round-robin table.

    Rows are derived from completed matches on every query and never stored.

    Attributes
    ----------
    participant_id : str
        ID of the participant.
    name : str
        Display name of the participant.
    played, won, drawn, lost : int
        Match counts.
    goals_for, goals_against : int
        Scores accumulated from completed matches.
    points : int
        Table points using the fixture weights.
    rank : int
        1-based position once the table is sorted (0 until then).
    """

    participant_id: str
    name: str = ""
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    points: int = 0
    rank: int = 0

    @property
    def goal_difference(self) -> int:
        """Goals for minus goals against."""
        return self.goals_for - self.goals_against

    def to_dict(self) -> Dict[str, Any]:
        """Serialize standing row to dictionary."""
        return {
            "participant_id": self.participant_id,
            "name": self.name,
            "played": self.played,
            "won": self.won,
            "drawn": self.drawn,
            "lost": self.lost,
            "goals_for": self.goals_for,
            "goals_against": self.goals_against,
            "goal_difference": self.goal_difference,
            "points": self.points,
            "rank": self.rank,
        }
