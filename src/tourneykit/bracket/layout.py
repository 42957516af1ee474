"""Vertical layout of a knockout bracket.

Pure projection of a match graph into display coordinates. Nothing here is
stored on the matches: callers recompute the layout whenever they draw.
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

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from tourneykit.constants import (
    LAYOUT_MATCH_HEIGHT,
    LAYOUT_VERTICAL_GAP,
    ROUND_TITLES_FROM_FINAL,
)
from tourneykit.models.graph import MatchGraph
from tourneykit.models.match import Match
from tourneykit.type_hints import LayoutMap


def round_title(round_number: int, total_rounds: int) -> str:
    """Display title of a round.

    >>> round_title(3, 3)
    'Final'
    >>> round_title(1, 4)
    'Round 1'
    """
    from_final = total_rounds - round_number
    if 0 <= from_final < len(ROUND_TITLES_FROM_FINAL):
        return ROUND_TITLES_FROM_FINAL[from_final]
    return f"Round {round_number}"


def compute_layout(
    matches: Iterable[Match],
    match_height: float = LAYOUT_MATCH_HEIGHT,
    vertical_gap: float = LAYOUT_VERTICAL_GAP,
) -> LayoutMap:
    """Compute the vertical center of every match.

    Round-1 matches are stacked one slot (``match_height + vertical_gap``)
    apart. Every later match sits halfway between its feeders, or level
    with its only feeder. The third-place match goes one slot below the
    final.

    Args:
        matches: Matches of one knockout fixture
        match_height: Height of a match box
        vertical_gap: Space between two round-1 boxes

    Returns:
        Mapping of match ID to center y coordinate
    """
    graph = MatchGraph(matches)
    slot = match_height + vertical_gap
    positions: LayoutMap = {}

    for round_number, round_matches in graph.by_round().items():
        spacing = slot * 2 ** (round_number - 1)
        for index, match in enumerate(round_matches):
            feeders = [positions[m] for m in match.previous_match_ids if m in positions]
            if feeders:
                positions[match.id] = sum(feeders) / len(feeders)
            else:
                positions[match.id] = index * spacing + spacing / 2

    third_place = graph.third_place_match()
    final = graph.final_match()
    if third_place is not None and final is not None and final.id in positions:
        positions[third_place.id] = positions[final.id] + slot

    return positions


@dataclass
class BracketLayout:
    """Display data of a knockout bracket.

    Attributes:
        positions: Center y coordinate per match ID
        titles: Round number to round title
        rounds: Round number to match IDs in display order
        total_height: Height of the tallest column
    """

    positions: LayoutMap = field(default_factory=dict)
    titles: Dict[int, str] = field(default_factory=dict)
    rounds: Dict[int, List[str]] = field(default_factory=dict)
    total_height: float = 0.0

    @classmethod
    def for_matches(
        cls,
        matches: Iterable[Match],
        match_height: float = LAYOUT_MATCH_HEIGHT,
        vertical_gap: float = LAYOUT_VERTICAL_GAP,
    ) -> "BracketLayout":
        graph = MatchGraph(matches)
        total_rounds = graph.total_rounds
        by_round = graph.by_round()
        return cls(
            positions=compute_layout(graph, match_height, vertical_gap),
            titles={r: round_title(r, total_rounds) for r in by_round},
            rounds={r: [m.id for m in ms] for r, ms in by_round.items()},
            total_height=(
                2 ** (total_rounds - 1) * (match_height + vertical_gap)
                if total_rounds
                else 0.0
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "positions": dict(self.positions),
            "titles": {str(r): t for r, t in self.titles.items()},
            "rounds": {str(r): list(ids) for r, ids in self.rounds.items()},
            "total_height": self.total_height,
        }
