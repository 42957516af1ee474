"""Arena of matches for one fixture.

The match graph (``next_match_id`` / ``previous_match_ids``) is a DAG stored
as matches keyed by ID plus an ordered index. Nothing holds a reference to
another ``Match`` object, which keeps copying, rollback and serialization
trivial.
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

import copy
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional

from tourneykit.exceptions import MatchNotFound
from tourneykit.models.match import Match
from tourneykit.type_hints import RoundMatches
from tourneykit.utils import setup_logger

logger = setup_logger(__name__)


class MatchGraph:
    """Ordered, ID-keyed collection of a fixture's matches."""

    def __init__(self, matches: Optional[Iterable[Match]] = None) -> None:
        self._matches: Dict[str, Match] = {}
        self._order: List[str] = []
        for match in matches or ():
            self.add(match)

    # ========== Container protocol ==========

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[Match]:
        return (self._matches[match_id] for match_id in self._order)

    def __contains__(self, match_id: object) -> bool:
        return match_id in self._matches

    # ========== Arena operations ==========

    def add(self, match: Match) -> None:
        """Add a match to the arena.

        Raises:
            ValueError: If a match with the same ID already exists
        """
        if match.id in self._matches:
            raise ValueError(f"Duplicate match id: {match.id}")
        self._matches[match.id] = match
        self._order.append(match.id)

    def get(self, match_id: str) -> Match:
        """Get a match by ID.

        Raises:
            MatchNotFound: If the ID is unknown
        """
        try:
            return self._matches[match_id]
        except KeyError:
            raise MatchNotFound(f"Match not found: {match_id}") from None

    def find(self, match_id: Optional[str]) -> Optional[Match]:
        """Get a match by ID, or None."""
        if match_id is None:
            return None
        return self._matches.get(match_id)

    def remove(self, match_id: str) -> Match:
        """Remove a match from the arena and return it."""
        match = self.get(match_id)
        del self._matches[match_id]
        self._order.remove(match_id)
        return match

    def clear(self) -> None:
        self._matches.clear()
        self._order.clear()

    def replace_all(self, matches: Iterable[Match]) -> None:
        """Swap the whole arena content for a new set of matches."""
        self.clear()
        for match in matches:
            self.add(match)

    # ========== Queries ==========

    def matches(self) -> List[Match]:
        """All matches in creation order."""
        return list(self)

    def by_round(self) -> Dict[int, RoundMatches]:
        """Matches grouped by round and sorted by match number.

        The third-place match is left out; use ``third_place_match``.
        """
        rounds: Dict[int, RoundMatches] = {}
        for match in self:
            if match.is_third_place_match:
                continue
            rounds.setdefault(match.round, []).append(match)
        for round_matches in rounds.values():
            round_matches.sort(key=lambda m: m.match_number)
        return dict(sorted(rounds.items()))

    @property
    def total_rounds(self) -> int:
        return max((m.round for m in self if not m.is_third_place_match), default=0)

    def final_match(self) -> Optional[Match]:
        """The match with no successor that is not the third-place match."""
        finals = [
            m for m in self if m.next_match_id is None and not m.is_third_place_match
        ]
        if len(finals) != 1:
            return None
        return finals[0]

    def third_place_match(self) -> Optional[Match]:
        return next((m for m in self if m.is_third_place_match), None)

    def semifinals(self) -> List[Match]:
        """The two matches feeding the final, in slot order."""
        final = self.final_match()
        if final is None:
            return []
        return [self.get(match_id) for match_id in final.previous_match_ids]

    def has_played_matches(self) -> bool:
        """Whether any match is completed or in progress."""
        return any(m.is_played for m in self)

    def participant_ids_in_use(self) -> List[str]:
        """Participant IDs placed in any match slot, first occurrence order."""
        seen: List[str] = []
        for match in self:
            for participant_id in match.participant_ids:
                if participant_id not in seen:
                    seen.append(participant_id)
        return seen

    # ========== Snapshots and transactions ==========

    def snapshot(self) -> "MatchGraph":
        """Deep copy of the graph, safe to read outside the fixture lock."""
        return MatchGraph(copy.deepcopy(self.matches()))

    @contextmanager
    def transaction(self) -> Iterator["MatchGraph"]:
        """Run a multi-match write that either fully commits or rolls back.

        The arena is copied on entry. If the body raises, the copy is
        restored before the exception propagates.
        """
        saved_matches = copy.deepcopy(self._matches)
        saved_order = list(self._order)
        try:
            yield self
        except BaseException:
            self._matches = saved_matches
            self._order = saved_order
            logger.debug("Rolled back match graph transaction")
            raise

    # ========== Serialization ==========

    def to_dict(self) -> List[Dict[str, Any]]:
        """Serialize graph to a list of match dictionaries."""
        return [m.to_dict() for m in self]

    @classmethod
    def from_dict(cls, data: List[Dict[str, Any]]) -> "MatchGraph":
        """Deserialize graph from a list of match dictionaries."""
        return cls(Match.from_dict(m) for m in data)
