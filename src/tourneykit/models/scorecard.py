"""Activity, placement and scorecard data classes."""

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

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from tourneykit.constants import FIRST_PLACE, PODIUM_POSITIONS, SECOND_PLACE
from tourneykit.exceptions import InvalidConfigurationException
from tourneykit.type_hints import Position
from tourneykit.utils.validation import require_valid, validate_points


@dataclass(frozen=True)
class PointTable:
    """Points awarded per podium position for one activity."""

    first: int = 0
    second: int = 0
    third: int = 0

    def __post_init__(self) -> None:
        for label in ("first", "second", "third"):
            require_valid(validate_points(getattr(self, label), f"{label} place points"))

    def points_for(self, position: int) -> int:
        """Points for a podium position.

        Raises:
            InvalidConfigurationException: If the position is not 1, 2 or 3
        """
        if position not in PODIUM_POSITIONS:
            raise InvalidConfigurationException(f"Invalid podium position: {position}")
        if position == FIRST_PLACE:
            return self.first
        if position == SECOND_PLACE:
            return self.second
        return self.third

    def to_dict(self) -> Dict[str, Any]:
        return {"first": self.first, "second": self.second, "third": self.third}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PointTable":
        return cls(
            first=data.get("first", 0),
            second=data.get("second", 0),
            third=data.get("third", 0),
        )


@dataclass(frozen=True)
class Activity:
    """A sport or game played in an event, with its podium point table.

    Attributes
    ----------
    id : str
        Activity ID.
    name : str
        Display name.
    points : PointTable or None
        Podium points. Fixtures of activities without a table do not score.
    """

    id: str
    name: str
    points: Optional[PointTable] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "points": self.points.to_dict() if self.points else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Activity":
        points = data.get("points")
        return cls(
            id=str(data["id"]),
            name=data.get("name", data.get("title", str(data["id"]))),
            points=PointTable.from_dict(points) if points else None,
        )


@dataclass(frozen=True)
class Placement:
    """A participant's podium finish in one fixture."""

    fixture_id: str
    participant_id: str
    position: Position

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fixture_id": self.fixture_id,
            "participant_id": self.participant_id,
            "position": self.position,
        }


@dataclass
class ScorecardEntry:
    """Points credited to a team for one podium finish."""

    activity_id: str
    position: Position
    points: int
    activity_name: str = ""
    fixture_id: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "activity_id": self.activity_id,
            "activity_name": self.activity_name,
            "fixture_id": self.fixture_id,
            "position": self.position,
            "points": self.points,
        }


@dataclass
class TeamScorecard:
    """A team's aggregated placement points across an event.

    Attributes
    ----------
    team_id : str
        ID of the team.
    breakdown : list of ScorecardEntry
        One entry per credited podium finish.
    rank : int
        1-based position in the event ranking (0 until ranked).
    """

    team_id: str
    breakdown: List[ScorecardEntry] = field(default_factory=list)
    rank: int = 0

    @property
    def total_points(self) -> int:
        """Sum of all credited entries."""
        return sum(entry.points for entry in self.breakdown)

    def count_position(self, position: int) -> int:
        """Number of podium finishes at a position."""
        return sum(1 for entry in self.breakdown if entry.position == position)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "team_id": self.team_id,
            "total_points": self.total_points,
            "breakdown": [entry.to_dict() for entry in self.breakdown],
            "rank": self.rank,
        }
