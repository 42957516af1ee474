"""Participant data classes."""

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
from typing import Any, Dict, Optional, Tuple

from tourneykit.constants import KIND_PLAYER, KIND_TEAM, PARTICIPANT_KINDS
from tourneykit.exceptions import InvalidConfigurationException
from tourneykit.type_hints import ParticipantKind


@dataclass(frozen=True)
class TeamMembership:
    """A player's membership of a team for one event.

    Attributes
    ----------
    team_id : str
        ID of the team.
    event_id : str
        ID of the event the team plays in.
    role : str
        Role inside the team (``player``, ``captain``, ``vicecaptain``).
    """

    team_id: str
    event_id: str
    role: str = "player"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize membership to dictionary."""
        return {"team_id": self.team_id, "event_id": self.event_id, "role": self.role}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TeamMembership":
        """Deserialize membership from dictionary."""
        return cls(
            team_id=str(data.get("team_id", data.get("teamId"))),
            event_id=str(data.get("event_id", data.get("eventId"))),
            role=data.get("role", "player"),
        )


@dataclass(frozen=True)
class Participant:
    """A player or a team taking part in a fixture.

    Participants are immutable once referenced by a fixture. Matches refer to
    them by ``id`` only.

    Attributes
    ----------
    kind : str
        ``player`` or ``team``.
    id : str
        Unique participant ID.
    name : str
        Display name.
    team_memberships : tuple of TeamMembership
        Team memberships, only meaningful for players.
    """

    kind: ParticipantKind
    id: str
    name: str
    team_memberships: Tuple[TeamMembership, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.kind not in PARTICIPANT_KINDS:
            raise InvalidConfigurationException(
                f"Invalid participant kind: {self.kind!r}"
            )
        if self.kind == KIND_TEAM and self.team_memberships:
            raise InvalidConfigurationException(
                f"Team {self.id} cannot carry team memberships"
            )

    @property
    def is_player(self) -> bool:
        return self.kind == KIND_PLAYER

    def team_for_event(self, event_id: str) -> Optional[str]:
        """Get the ID of the team this player represents in an event.

        Args:
            event_id: The event to look up

        Returns:
            Team ID, or None if the player has no team in that event
        """
        for membership in self.team_memberships:
            if membership.event_id == event_id:
                return membership.team_id
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize participant to dictionary."""
        data: Dict[str, Any] = {"kind": self.kind, "id": self.id, "name": self.name}
        if self.kind == KIND_PLAYER:
            data["team_memberships"] = [m.to_dict() for m in self.team_memberships]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Participant":
        """Deserialize participant from dictionary."""
        memberships = data.get("team_memberships", data.get("teamMemberships", []))
        return cls(
            kind=data.get("kind", KIND_PLAYER),
            id=str(data["id"]),
            name=data.get("name", str(data["id"])),
            team_memberships=tuple(TeamMembership.from_dict(m) for m in memberships),
        )


def player(
    participant_id: str, name: Optional[str] = None, *memberships: TeamMembership
) -> Participant:
    """Shortcut for building a player participant."""
    return Participant(
        kind=KIND_PLAYER,
        id=participant_id,
        name=name or participant_id,
        team_memberships=tuple(memberships),
    )


def team(participant_id: str, name: Optional[str] = None) -> Participant:
    """Shortcut for building a team participant."""
    return Participant(kind=KIND_TEAM, id=participant_id, name=name or participant_id)
