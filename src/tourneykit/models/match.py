"""Match data classes."""

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
from enum import Enum
from typing import Any, Dict, List, Optional

from tourneykit.constants import AWAY, HOME, SLOTS
from tourneykit.exceptions import InvalidSlot
from tourneykit.type_hints import MaybeId, Slot
from tourneykit.utils.validation import optional_datetime


class MatchStatus(str, Enum):
    """Lifecycle status of a match."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    WALKOVER = "walkover"
    POSTPONED = "postponed"
    CANCELLED = "cancelled"


# Statuses that count as "play has begun" for structural edits
PLAYED_STATUSES = (MatchStatus.COMPLETED, MatchStatus.IN_PROGRESS)


def check_slot(slot: str) -> Slot:
    """Return the slot if it is ``home`` or ``away``.

    Raises:
        InvalidSlot: For any other value
    """
    if slot not in SLOTS:
        raise InvalidSlot(f"Unknown slot {slot!r} (expected 'home' or 'away')")
    return slot  # type: ignore[return-value]


def slot_for_index(index: int) -> Slot:
    """Map a sibling index in ``previous_match_ids`` to the slot it feeds."""
    return HOME if index == 0 else AWAY


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass
class SetScore:
    """Score of a single set.

    Attributes
    ----------
    set_number : int
        Set number (1-indexed).
    home_score : int
        Points won by the home side in this set.
    away_score : int
        Points won by the away side in this set.
    """

    set_number: int
    home_score: int
    away_score: int

    def to_dict(self) -> Dict[str, Any]:
        """Serialize set score to dictionary."""
        return {
            "set_number": self.set_number,
            "home_score": self.home_score,
            "away_score": self.away_score,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SetScore":
        """Deserialize set score from dictionary."""
        return cls(
            set_number=data.get("set_number", data.get("setNumber", 0)),
            home_score=data.get("home_score", data.get("homeScore", 0)),
            away_score=data.get("away_score", data.get("awayScore", 0)),
        )


@dataclass
class Match:
    """A node of a fixture's match graph.

    Matches reference participants and other matches by ID only; the graph
    that owns them is an arena keyed by match ID.

    Attributes
    ----------
    id : str
        Match ID, unique across the engine.
    fixture_id : str
        ID of the owning fixture.
    round : int
        Round number (1-indexed).
    match_number : int
        Match number, unique within the round.
    home_participant, away_participant : str or None
        Participant IDs occupying the two slots.
    home_partner, away_partner : str or None
        Doubles partners of the slot holders.
    home_score, away_score : int or None
        Final score (sets won when a set breakdown is recorded).
    sets : list of SetScore
        Optional per-set breakdown.
    winner, loser : str or None
        Participant IDs once decided.
    status : MatchStatus
        Lifecycle status.
    next_match_id : str or None
        Match the winner advances to. None only for the final and the
        third-place match.
    previous_match_ids : list of str
        Matches feeding this one, in slot order (index 0 feeds home).
    is_third_place_match : bool
        Whether this is the play-off between the semifinal losers.
    scheduled_date : datetime or None
        Planned date, from the fixture start date and the round.
    actual_date : datetime or None
        When the result was recorded.
    notes : str
        Free-text notes.
    version : int
        Incremented on every mutation.
    """

    id: str
    fixture_id: str
    round: int
    match_number: int
    home_participant: MaybeId = None
    away_participant: MaybeId = None
    home_partner: MaybeId = None
    away_partner: MaybeId = None
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    sets: List[SetScore] = field(default_factory=list)
    winner: MaybeId = None
    loser: MaybeId = None
    status: MatchStatus = MatchStatus.SCHEDULED
    next_match_id: MaybeId = None
    previous_match_ids: List[str] = field(default_factory=list)
    is_third_place_match: bool = False
    scheduled_date: Optional[datetime] = None
    actual_date: Optional[datetime] = None
    notes: str = ""
    version: int = 0

    # ========== Slot access ==========

    def participant_in(self, slot: str) -> MaybeId:
        """Get the participant occupying a slot."""
        return self.home_participant if check_slot(slot) == HOME else self.away_participant

    def set_participant(self, slot: str, participant_id: MaybeId) -> None:
        """Place a participant in a slot (None clears it)."""
        if check_slot(slot) == HOME:
            self.home_participant = participant_id
        else:
            self.away_participant = participant_id

    def partner_in(self, slot: str) -> MaybeId:
        """Get the doubles partner assigned to a slot."""
        return self.home_partner if check_slot(slot) == HOME else self.away_partner

    def set_partner(self, slot: str, partner_id: MaybeId) -> None:
        """Assign a doubles partner to a slot (None clears it)."""
        if check_slot(slot) == HOME:
            self.home_partner = partner_id
        else:
            self.away_partner = partner_id

    def slot_of(self, participant_id: str) -> Optional[Slot]:
        """Return the slot a participant occupies, or None."""
        if participant_id is None:
            return None
        if self.home_participant == participant_id:
            return HOME
        if self.away_participant == participant_id:
            return AWAY
        return None

    def feeder_slot(self, previous_match_id: str) -> Optional[Slot]:
        """Slot fed by one of the previous matches, by sibling index."""
        if previous_match_id not in self.previous_match_ids:
            return None
        return slot_for_index(self.previous_match_ids.index(previous_match_id))

    # ========== State queries ==========

    @property
    def participant_ids(self) -> List[str]:
        """IDs of the participants currently placed in this match."""
        return [p for p in (self.home_participant, self.away_participant) if p]

    @property
    def is_bye(self) -> bool:
        """Exactly one participant and no opponent to come."""
        return self.status == MatchStatus.WALKOVER and len(self.participant_ids) == 1

    @property
    def is_empty(self) -> bool:
        return not self.home_participant and not self.away_participant

    @property
    def is_completed(self) -> bool:
        return self.status == MatchStatus.COMPLETED

    @property
    def is_played(self) -> bool:
        """Completed or in progress; walkovers are never played."""
        return self.status in PLAYED_STATUSES

    @property
    def is_decided(self) -> bool:
        """Completed or walkover with a winner."""
        return self.winner is not None and self.status in (
            MatchStatus.COMPLETED,
            MatchStatus.WALKOVER,
        )

    def opponent_of(self, participant_id: str) -> MaybeId:
        """Get the other participant of this match."""
        if participant_id == self.home_participant:
            return self.away_participant
        if participant_id == self.away_participant:
            return self.home_participant
        return None

    def clear_result(self) -> None:
        """Forget scores and the decision, keep participants."""
        self.home_score = None
        self.away_score = None
        self.sets = []
        self.winner = None
        self.loser = None
        self.actual_date = None

    def touch(self) -> None:
        """Record a mutation."""
        self.version += 1

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize match to dictionary."""
        return {
            "id": self.id,
            "fixture_id": self.fixture_id,
            "round": self.round,
            "match_number": self.match_number,
            "home_participant": self.home_participant,
            "away_participant": self.away_participant,
            "home_partner": self.home_partner,
            "away_partner": self.away_partner,
            "home_score": self.home_score,
            "away_score": self.away_score,
            "sets": [s.to_dict() for s in self.sets],
            "winner": self.winner,
            "loser": self.loser,
            "status": self.status.value,
            "next_match_id": self.next_match_id,
            "previous_match_ids": list(self.previous_match_ids),
            "is_third_place_match": self.is_third_place_match,
            "scheduled_date": _isoformat(self.scheduled_date),
            "actual_date": _isoformat(self.actual_date),
            "notes": self.notes,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        """Deserialize match from dictionary."""
        return cls(
            id=data["id"],
            fixture_id=data["fixture_id"],
            round=data["round"],
            match_number=data["match_number"],
            home_participant=data.get("home_participant"),
            away_participant=data.get("away_participant"),
            home_partner=data.get("home_partner"),
            away_partner=data.get("away_partner"),
            home_score=data.get("home_score"),
            away_score=data.get("away_score"),
            sets=[SetScore.from_dict(s) for s in data.get("sets", [])],
            winner=data.get("winner"),
            loser=data.get("loser"),
            status=MatchStatus(data.get("status", MatchStatus.SCHEDULED.value)),
            next_match_id=data.get("next_match_id"),
            previous_match_ids=list(data.get("previous_match_ids", [])),
            is_third_place_match=data.get("is_third_place_match", False),
            scheduled_date=optional_datetime(
                data.get("scheduled_date", data.get("scheduledDate")), "scheduled date"
            ),
            actual_date=optional_datetime(
                data.get("actual_date", data.get("actualDate")), "actual date"
            ),
            notes=data.get("notes", ""),
            version=data.get("version", 0),
        )
