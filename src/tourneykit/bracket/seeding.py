"""Seeding helpers for knockout brackets.

This module decides the order participants enter the bracket in and which
round-1 matches receive the byes.
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

import random
from typing import Callable, List, Optional, Sequence, Set, Tuple

from tourneykit.models.participant import Participant
from tourneykit.utils import setup_logger

logger = setup_logger(__name__)

# (home, away) for every round-1 match; away is None for a bye
FirstRoundPairs = List[Tuple[Participant, Optional[Participant]]]


def next_power_of_two(n: int) -> int:
    """Smallest power of two that is >= n (n >= 1)."""
    size = 1
    while size < n:
        size *= 2
    return size


def standard_seed_order(size: int) -> List[int]:
    """Classic bracket order of seeds 1..size.

    Seed 1 meets seed ``size``, and the two top seeds can only meet in the
    final: ``[1, 8, 4, 5, 2, 7, 3, 6]`` for eight slots.

    Args:
        size: Bracket size, a power of two

    Returns:
        Seeds in slot order
    """
    order = [1]
    while len(order) < size:
        mirror = 2 * len(order) + 1
        order = [seed for s in order for seed in (s, mirror - s)]
    return order


def bye_match_indices(num_matches: int, byes: int) -> Set[int]:
    """Pick which round-1 matches get a bye.

    Round-1 matches are ranked with the standard seed order and the byes go
    to the lowest-ranked matches, which spreads them over both halves of the
    bracket: two byes only feed the same round-2 match when there are more
    byes than round-2 matches.

    Args:
        num_matches: Number of round-1 matches
        byes: Number of byes (always < num_matches)

    Returns:
        Indices (0-based, in bracket order) of the bye matches
    """
    if byes <= 0:
        return set()
    match_seeds = standard_seed_order(num_matches)
    # Highest match seeds are the weakest lines of the bracket
    ranked = sorted(range(num_matches), key=lambda i: match_seeds[i], reverse=True)
    return set(ranked[:byes])


def pair_first_round(
    ordered: Sequence[Participant], bracket_size: int
) -> FirstRoundPairs:
    """Lay participants into round-1 matches in seeding order.

    Participants fill the home then away slot of each match in turn; bye
    matches take a single participant in the home slot.
    """
    num_matches = bracket_size // 2
    byes = bracket_size - len(ordered)
    bye_matches = bye_match_indices(num_matches, byes)

    pairs: FirstRoundPairs = []
    queue = list(ordered)
    for index in range(num_matches):
        home = queue.pop(0)
        away = None if index in bye_matches else queue.pop(0)
        pairs.append((home, away))
    return pairs


def shuffled(
    participants: Sequence[Participant], rng: random.Random
) -> List[Participant]:
    """Return a shuffled copy, leaving the input untouched."""
    order = list(participants)
    rng.shuffle(order)
    return order


def clashing_pairs(
    pairs: FirstRoundPairs, team_of: Callable[[Participant], Optional[str]]
) -> List[Tuple[Participant, Participant]]:
    """Contested round-1 pairs whose players share a team."""
    clashes = []
    for home, away in pairs:
        if away is None:
            continue
        home_team = team_of(home)
        if home_team is not None and home_team == team_of(away):
            clashes.append((home, away))
    return clashes


def seed_avoiding_teammates(
    ordered: Sequence[Participant],
    bracket_size: int,
    team_of: Callable[[Participant], Optional[str]],
    rng: random.Random,
    max_attempts: int,
) -> Tuple[List[Participant], bool]:
    """Find a seeding where no round-1 match pits teammates against each other.

    The given order is tried first, then up to ``max_attempts`` reshuffles.
    If none satisfies the constraint the given order is returned unchanged.

    Args:
        ordered: Seeding to start from
        bracket_size: Bracket size (power of two)
        team_of: Maps a participant to its team for the fixture's event
        rng: Random source for reshuffles
        max_attempts: Bound on reshuffles

    Returns:
        Tuple of (seeding, constraint satisfied)
    """
    if not clashing_pairs(pair_first_round(ordered, bracket_size), team_of):
        return list(ordered), True

    for attempt in range(1, max_attempts + 1):
        candidate = shuffled(ordered, rng)
        if not clashing_pairs(pair_first_round(candidate, bracket_size), team_of):
            logger.debug(f"Separated teammates after {attempt} reshuffles")
            return candidate, True

    logger.warning(
        f"Could not keep teammates apart in round 1 after {max_attempts} attempts; "
        "falling back to unconstrained seeding"
    )
    return list(ordered), False
