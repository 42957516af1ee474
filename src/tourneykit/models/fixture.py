"""Fixture and FixtureSettings data classes."""

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
from typing import Any, Dict, List, Optional

from tourneykit.constants import (
    DEFAULT_DAYS_BETWEEN_ROUNDS,
    DEFAULT_MAX_RESEED_ATTEMPTS,
    DEFAULT_POINTS_FOR_DRAW,
    DEFAULT_POINTS_FOR_LOSS,
    DEFAULT_POINTS_FOR_WIN,
    DEFAULT_ROUNDS,
    FIXTURE_FORMATS,
    FORMAT_KNOCKOUT,
    FORMAT_ROUND_ROBIN,
    KIND_PLAYER,
    PARTICIPANT_KINDS,
)
from tourneykit.exceptions import InvalidConfigurationException, ParticipantNotFound
from tourneykit.models.graph import MatchGraph
from tourneykit.models.participant import Participant
from tourneykit.type_hints import FixtureFormat, ParticipantKind
from tourneykit.utils.validation import (
    optional_datetime,
    require_valid,
    validate_choice,
    validate_points,
    validate_positive_int,
)

# camelCase keys accepted by FixtureSettings.from_dict
_CAMEL_CASE_KEYS = {
    "thirdPlaceMatch": "third_place_match",
    "randomizeSeeds": "randomize_seeds",
    "avoidSameTeamFirstRound": "avoid_same_team_first_round",
    "pointsForWin": "points_for_win",
    "pointsForDraw": "points_for_draw",
    "pointsForLoss": "points_for_loss",
    "homeAndAway": "home_and_away",
    "isDoubles": "is_doubles",
    "maxReseedAttempts": "max_reseed_attempts",
    "startDate": "start_date",
    "daysBetweenRounds": "days_between_rounds",
}


@dataclass(frozen=True)
class FixtureSettings:
    """Configuration settings for a fixture, fixed after creation.

    Attributes
    ----------
    third_place_match : bool
        Add a play-off between the semifinal losers (knockout).
    randomize_seeds : bool
        Shuffle participants before seeding (knockout).
    seed : int or None
        Seed for the shuffle. Same seed, same bracket.
    avoid_same_team_first_round : bool
        Keep teammates apart in round 1 (player knockout fixtures).
    points_for_win, points_for_draw, points_for_loss : int
        Round-robin table weights.
    rounds : int
        Number of times every pair meets (round robin).
    home_and_away : bool
        Play both legs in every round (round robin).
    is_doubles : bool
        Matches are played by a slot holder and a partner.
    max_reseed_attempts : int
        Bound on reshuffles when keeping teammates apart.
    start_date : datetime or None
        Date of round 1. Later rounds follow every ``days_between_rounds``.
    days_between_rounds : int
        Calendar spacing of consecutive rounds.
    """

    third_place_match: bool = False
    randomize_seeds: bool = True
    seed: Optional[int] = None
    avoid_same_team_first_round: bool = False
    points_for_win: int = DEFAULT_POINTS_FOR_WIN
    points_for_draw: int = DEFAULT_POINTS_FOR_DRAW
    points_for_loss: int = DEFAULT_POINTS_FOR_LOSS
    rounds: int = DEFAULT_ROUNDS
    home_and_away: bool = False
    is_doubles: bool = False
    max_reseed_attempts: int = DEFAULT_MAX_RESEED_ATTEMPTS
    start_date: Optional[datetime] = None
    days_between_rounds: int = DEFAULT_DAYS_BETWEEN_ROUNDS

    def __post_init__(self) -> None:
        require_valid(validate_points(self.points_for_win, "points_for_win"))
        require_valid(validate_points(self.points_for_draw, "points_for_draw"))
        require_valid(validate_points(self.points_for_loss, "points_for_loss"))
        require_valid(validate_positive_int(self.rounds, "rounds"))
        require_valid(
            validate_positive_int(self.max_reseed_attempts, "max_reseed_attempts")
        )
        require_valid(
            validate_positive_int(self.days_between_rounds, "days_between_rounds")
        )
        if self.start_date is not None and not isinstance(self.start_date, datetime):
            raise InvalidConfigurationException(
                f"Invalid start_date: {self.start_date!r} (must be a datetime)"
            )
        if self.seed is not None and (
            isinstance(self.seed, bool) or not isinstance(self.seed, int)
        ):
            raise InvalidConfigurationException(
                f"Invalid seed: {self.seed!r} (must be an integer)"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {
            "third_place_match": self.third_place_match,
            "randomize_seeds": self.randomize_seeds,
            "seed": self.seed,
            "avoid_same_team_first_round": self.avoid_same_team_first_round,
            "points_for_win": self.points_for_win,
            "points_for_draw": self.points_for_draw,
            "points_for_loss": self.points_for_loss,
            "rounds": self.rounds,
            "home_and_away": self.home_and_away,
            "is_doubles": self.is_doubles,
            "max_reseed_attempts": self.max_reseed_attempts,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "days_between_rounds": self.days_between_rounds,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "FixtureSettings":
        """Deserialize configuration from dictionary.

        Both snake_case and camelCase keys are accepted. Unknown keys (venue,
        match duration and other presentation settings) are ignored.
        """
        known = set(cls.__dataclass_fields__)
        values: Dict[str, Any] = {}
        for key, value in (data or {}).items():
            key = _CAMEL_CASE_KEYS.get(key, key)
            if key in known:
                values[key] = value
        if "start_date" in values:
            values["start_date"] = optional_datetime(values["start_date"], "start date")
        return cls(**values)


@dataclass
class Fixture:
    """A competition of one activity inside an event.

    Attributes
    ----------
    id : str
        Fixture ID.
    event_id : str
        ID of the event the fixture belongs to.
    activity_id : str
        ID of the activity (sport or game) being played.
    format : str
        ``knockout`` or ``roundrobin``.
    participant_type : str
        ``player`` or ``team``.
    participants : list of Participant
        Participants in the order they were entered.
    settings : FixtureSettings
        Settings fixed at creation.
    name : str
        Display name.
    seeding : list of str
        Participant IDs in the order applied to the bracket (audit trail).
    graph : MatchGraph
        The fixture's matches.
    """

    id: str
    event_id: str
    activity_id: str
    format: FixtureFormat
    participant_type: ParticipantKind
    participants: List[Participant]
    settings: FixtureSettings = field(default_factory=FixtureSettings)
    name: str = ""
    seeding: List[str] = field(default_factory=list)
    graph: MatchGraph = field(default_factory=MatchGraph)

    def __post_init__(self) -> None:
        require_valid(validate_choice(self.format, FIXTURE_FORMATS, "format"))
        require_valid(
            validate_choice(self.participant_type, PARTICIPANT_KINDS, "participant type")
        )
        for participant in self.participants:
            if participant.kind != self.participant_type:
                raise InvalidConfigurationException(
                    f"Participant {participant.id} is a {participant.kind}, "
                    f"fixture {self.id} expects {self.participant_type}s"
                )

    @property
    def is_knockout(self) -> bool:
        return self.format == FORMAT_KNOCKOUT

    @property
    def is_round_robin(self) -> bool:
        return self.format == FORMAT_ROUND_ROBIN

    @property
    def is_player_fixture(self) -> bool:
        return self.participant_type == KIND_PLAYER

    def participant(self, participant_id: str) -> Participant:
        """Get a fixture participant by ID.

        Raises:
            ParticipantNotFound: If the participant is not in this fixture
        """
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        raise ParticipantNotFound(
            f"Participant {participant_id} is not part of fixture {self.id}"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize fixture (including matches) to dictionary."""
        return {
            "id": self.id,
            "event_id": self.event_id,
            "activity_id": self.activity_id,
            "format": self.format,
            "participant_type": self.participant_type,
            "participants": [p.to_dict() for p in self.participants],
            "settings": self.settings.to_dict(),
            "name": self.name,
            "seeding": list(self.seeding),
            "matches": self.graph.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Fixture":
        """Deserialize fixture from dictionary."""
        return cls(
            id=data["id"],
            event_id=data["event_id"],
            activity_id=data["activity_id"],
            format=data["format"],
            participant_type=data["participant_type"],
            participants=[Participant.from_dict(p) for p in data["participants"]],
            settings=FixtureSettings.from_dict(data.get("settings")),
            name=data.get("name", ""),
            seeding=list(data.get("seeding", [])),
            graph=MatchGraph.from_dict(data.get("matches", [])),
        )
