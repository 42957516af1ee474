"""Result input and operation outcome data classes."""

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
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from tourneykit.exceptions import InvalidResult
from tourneykit.models.match import Match, MatchStatus, SetScore
from tourneykit.utils.validation import validate_datetime


@dataclass
class ScoreInput:
    """A result submitted for a match.

    Either ``home_score``/``away_score`` or ``sets`` is given. ``winner_id``
    overrides the automatic decision (needed when sets are level).

    Attributes
    ----------
    home_score, away_score : int or None
        Score pair.
    sets : list of SetScore
        Per-set breakdown; when present the score pair is derived from it.
    winner_id : str or None
        Manual winner.
    status : MatchStatus
        Target status, ``completed`` by default.
    notes : str or None
        Optional notes to store on the match.
    played_at : datetime or None
        When the match was played; completion time when omitted.
    """

    home_score: Optional[int] = None
    away_score: Optional[int] = None
    sets: List[SetScore] = field(default_factory=list)
    winner_id: Optional[str] = None
    status: MatchStatus = MatchStatus.COMPLETED
    notes: Optional[str] = None
    played_at: Optional[datetime] = None

    @classmethod
    def score(
        cls, home_score: int, away_score: int, winner_id: Optional[str] = None
    ) -> "ScoreInput":
        """Build a completed result from a score pair."""
        return cls(home_score=home_score, away_score=away_score, winner_id=winner_id)

    @classmethod
    def from_sets(
        cls, sets: List[Tuple[int, int]], winner_id: Optional[str] = None
    ) -> "ScoreInput":
        """Build a completed result from ``(home, away)`` set scores."""
        return cls(
            sets=[
                SetScore(set_number=i, home_score=home, away_score=away)
                for i, (home, away) in enumerate(sets, start=1)
            ],
            winner_id=winner_id,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScoreInput":
        """Deserialize result input from dictionary."""
        played_at = data.get("played_at", data.get("actualDate"))
        if played_at is not None:
            parsed = validate_datetime(played_at, "played_at")
            if not parsed:
                raise InvalidResult(parsed.error_message)
            played_at = parsed.sanitized_value

        sets = data.get("sets")
        if sets is None:
            sets = (data.get("score_details") or data.get("scoreDetails") or {}).get(
                "sets", []
            )
        return cls(
            home_score=data.get("home_score", data.get("homeScore")),
            away_score=data.get("away_score", data.get("awayScore")),
            sets=[SetScore.from_dict(s) for s in sets],
            winner_id=data.get("winner_id", data.get("winnerId")),
            status=MatchStatus(data.get("status", MatchStatus.COMPLETED.value)),
            notes=data.get("notes"),
            played_at=played_at,
        )


@dataclass
class ResultOutcome:
    """Matches changed by applying a result."""

    updated_match: Match
    propagated_match: Optional[Match] = None
    third_place_match: Optional[Match] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "updated_match": self.updated_match.to_dict(),
            "propagated_match": (
                self.propagated_match.to_dict() if self.propagated_match else None
            ),
            "third_place_match": (
                self.third_place_match.to_dict() if self.third_place_match else None
            ),
        }


@dataclass
class ReopenOutcome:
    """Matches changed by reopening a completed match."""

    updated_match: Match
    reverted_match: Optional[Match] = None
    reverted_third_place_match: Optional[Match] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "updated_match": self.updated_match.to_dict(),
            "reverted_match": (
                self.reverted_match.to_dict() if self.reverted_match else None
            ),
            "reverted_third_place_match": (
                self.reverted_third_place_match.to_dict()
                if self.reverted_third_place_match
                else None
            ),
        }


@dataclass
class SwapOutcome:
    """The two matches touched by a slot swap."""

    match_a: Match
    match_b: Match

    def to_dict(self) -> Dict[str, Any]:
        return {"match_a": self.match_a.to_dict(), "match_b": self.match_b.to_dict()}
