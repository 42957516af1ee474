"""Winner and loser propagation along match graph links.

Both the bracket builder (walkovers) and result progression move
participants between linked matches through these helpers, so slot
resolution lives in one place.
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

from typing import Optional

from tourneykit.constants import AWAY, BYE_NOTE, HOME
from tourneykit.exceptions import MatchLocked
from tourneykit.models.graph import MatchGraph
from tourneykit.models.match import Match, MatchStatus
from tourneykit.type_hints import Slot
from tourneykit.utils import setup_logger

logger = setup_logger(__name__)


def entry_slot(target: Match, source: Match, participant_id: str) -> Slot:
    """Slot of ``target`` that ``source``'s outcome occupies.

    With two feeders the slot is fixed by sibling index. With a single
    feeder the participant takes the slot it already holds, otherwise the
    first free slot (home first).

    Raises:
        MatchLocked: If a single-feeder target has no free slot
    """
    feeder_slot = target.feeder_slot(source.id)
    if feeder_slot is not None and len(target.previous_match_ids) == 2:
        return feeder_slot

    held = target.slot_of(participant_id)
    if held is not None:
        return held
    if target.home_participant is None:
        return HOME
    if target.away_participant is None:
        return AWAY
    raise MatchLocked(f"Match {target.id} has no free slot for {participant_id}")


def is_pass_through(match: Match) -> bool:
    """Whether ``match`` is fed by exactly one earlier match.

    Such a match only ever receives one participant, after a feeder was
    pruned, so its occupant walks over into the next round.
    """
    return not match.is_third_place_match and len(match.previous_match_ids) == 1


def settle_pass_through(graph: MatchGraph, match: Match) -> Optional[Match]:
    """Turn a single-feeder match holding its participant into a walkover.

    The participant is advanced to the next match, which is settled in turn.

    Returns:
        The match if it became a walkover, otherwise None
    """
    if (
        not is_pass_through(match)
        or match.status != MatchStatus.SCHEDULED
        or len(match.participant_ids) != 1
    ):
        return None

    match.status = MatchStatus.WALKOVER
    match.winner = match.participant_ids[0]
    match.loser = None
    match.notes = BYE_NOTE
    match.touch()
    logger.debug(f"{match.winner} walks over in single-feeder match {match.id}")
    advance_winner(graph, match)
    return match


def revert_pass_through(graph: MatchGraph, match: Match) -> None:
    """Undo ``settle_pass_through`` along the chain it advanced through."""
    if not is_pass_through(match) or match.status != MatchStatus.WALKOVER:
        return

    withdraw_participant(graph, match, match.next_match_id, match.winner)
    match.status = MatchStatus.SCHEDULED
    match.winner = None
    match.loser = None
    if match.notes == BYE_NOTE:
        match.notes = ""
    match.touch()
    logger.debug(f"Reverted walkover of single-feeder match {match.id}")


def played_downstream(graph: MatchGraph, match_id: Optional[str]) -> Optional[Match]:
    """First played match reached from ``match_id``, skipping pass-through walkovers."""
    target = graph.find(match_id)
    while (
        target is not None
        and is_pass_through(target)
        and target.status == MatchStatus.WALKOVER
    ):
        target = graph.find(target.next_match_id)
    if target is not None and target.is_played:
        return target
    return None


def advance_winner(graph: MatchGraph, match: Match) -> Optional[Match]:
    """Write ``match.winner`` into the next match.

    Returns:
        The next match if it was updated, otherwise None
    """
    if match.winner is None or match.next_match_id is None:
        return None

    next_match = graph.get(match.next_match_id)
    slot = entry_slot(next_match, match, match.winner)
    next_match.set_participant(slot, match.winner)
    next_match.touch()
    logger.debug(f"Advanced {match.winner} from {match.id} to {next_match.id} ({slot})")
    settle_pass_through(graph, next_match)
    return next_match


def withdraw_participant(
    graph: MatchGraph, source: Match, target_id: Optional[str], participant_id: Optional[str]
) -> Optional[Match]:
    """Remove a participant that ``source`` placed into ``target_id``.

    Only the slot fed by ``source`` is cleared, and only when it still holds
    that participant.

    Returns:
        The target match if a slot was cleared, otherwise None
    """
    if target_id is None or participant_id is None:
        return None

    target = graph.get(target_id)
    feeder_slot = target.feeder_slot(source.id)
    if feeder_slot is not None and len(target.previous_match_ids) == 2:
        slot: Optional[Slot] = feeder_slot
        if target.participant_in(feeder_slot) != participant_id:
            slot = None
    else:
        slot = target.slot_of(participant_id)

    if slot is None:
        logger.warning(
            f"{participant_id} from {source.id} is no longer in {target.id}; nothing to revert"
        )
        return None

    revert_pass_through(graph, target)
    target.set_participant(slot, None)
    target.set_partner(slot, None)
    target.touch()
    logger.debug(f"Withdrew {participant_id} from {target.id} ({slot})")
    return target


def advance_loser_to_third_place(graph: MatchGraph, match: Match) -> Optional[Match]:
    """Write a semifinal loser into the third-place match.

    Returns:
        The third-place match if it was updated, otherwise None
    """
    third_place = graph.third_place_match()
    if third_place is None or match.loser is None:
        return None
    slot = third_place.feeder_slot(match.id)
    if slot is None:
        return None

    third_place.set_participant(slot, match.loser)
    third_place.touch()
    logger.debug(f"Sent semifinal loser {match.loser} to {third_place.id} ({slot})")
    return third_place


def withdraw_loser_from_third_place(graph: MatchGraph, match: Match) -> Optional[Match]:
    """Undo ``advance_loser_to_third_place`` for a reopened semifinal."""
    third_place = graph.third_place_match()
    if third_place is None or match.id not in third_place.previous_match_ids:
        return None
    return withdraw_participant(graph, match, third_place.id, match.loser)
