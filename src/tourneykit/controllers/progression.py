"""Result entry, reopening and reseeding of fixture matches."""

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

from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from tourneykit.bracket.links import (
    advance_loser_to_third_place,
    advance_winner,
    played_downstream,
    settle_pass_through,
    withdraw_loser_from_third_place,
    withdraw_participant,
)
from tourneykit.constants import AWAY, BYE_NOTE, HOME
from tourneykit.controllers.partners import PartnerEligibilityResolver
from tourneykit.exceptions import (
    AmbiguousResult,
    FixtureLocked,
    InconsistentSwap,
    IneligiblePartner,
    InvalidResult,
    InvalidSlot,
    MatchLocked,
)
from tourneykit.models.fixture import Fixture
from tourneykit.models.graph import MatchGraph
from tourneykit.models.match import Match, MatchStatus, SetScore, check_slot
from tourneykit.models.participant import Participant
from tourneykit.models.results import (
    ReopenOutcome,
    ResultOutcome,
    ScoreInput,
    SwapOutcome,
)
from tourneykit.utils import setup_logger
from tourneykit.utils.validation import validate_score_strict

logger = setup_logger(__name__)


class MatchProgression:
    """Handles every write to a fixture's matches after it is built.

    This class is responsible for:
    - Recording results and propagating winners (and semifinal losers)
    - Reopening completed matches with a one-hop revert
    - Swapping round-1 slots while the bracket is unplayed
    - Assigning doubles partners
    - Pruning empty match nodes

    Each multi-match write runs inside ``MatchGraph.transaction()`` so it
    either fully commits or leaves the graph untouched.
    """

    def __init__(self, partner_resolver: Optional[PartnerEligibilityResolver] = None):
        self.partner_resolver = partner_resolver or PartnerEligibilityResolver()

    # ========== Results ==========

    def apply_result(
        self, fixture: Fixture, match_id: str, result: ScoreInput
    ) -> ResultOutcome:
        """Apply a result to a match.

        Args:
            fixture: Fixture owning the match
            match_id: ID of the match
            result: Score pair or set list, optional manual winner and the
                target status

        Returns:
            The updated match and the matches the outcome was propagated to

        Raises:
            MatchLocked: If the match is completed or a walkover
            InvalidResult: If scores are invalid, a slot is empty or the
                manual winner is not playing
            AmbiguousResult: If a completed result has no determinable winner
        """
        graph = fixture.graph
        match = graph.get(match_id)

        if match.status == MatchStatus.COMPLETED:
            logger.warning(f"Rejected result for {match_id}: match is completed")
            raise MatchLocked(f"Match {match_id} is completed; reopen it first")
        if match.status == MatchStatus.WALKOVER:
            logger.warning(f"Rejected result for {match_id}: match is a walkover")
            raise MatchLocked(f"Match {match_id} is a walkover and cannot be scored")
        if result.status == MatchStatus.WALKOVER:
            raise InvalidResult("Walkovers are assigned by the bracket, not by results")

        home_score, away_score, sets = self._normalize_scores(result)

        if result.status in (MatchStatus.COMPLETED, MatchStatus.IN_PROGRESS):
            if match.home_participant is None or match.away_participant is None:
                logger.warning(f"Rejected result for {match_id}: empty slot")
                raise InvalidResult(
                    f"Match {match_id} needs two participants before it can be played"
                )

        with graph.transaction():
            match.home_score = home_score
            match.away_score = away_score
            match.sets = sets
            if result.notes is not None:
                match.notes = result.notes

            if result.status != MatchStatus.COMPLETED:
                match.winner = None
                match.loser = None
                match.status = result.status
                match.touch()
                logger.info(f"Match {match_id} set to {result.status.value}")
                return ResultOutcome(updated_match=match)

            winner = self._decide_winner(fixture, match, result, home_score, away_score, sets)
            match.winner = winner
            match.loser = match.opponent_of(winner) if winner else None
            match.status = MatchStatus.COMPLETED
            match.actual_date = result.played_at or datetime.now()
            match.touch()

            propagated = None
            third_place = None
            if fixture.is_knockout:
                propagated = advance_winner(graph, match)
                third_place = advance_loser_to_third_place(graph, match)

        logger.info(
            f"Recorded result for {match_id}: {match.home_participant} "
            f"{home_score} - {away_score} {match.away_participant} "
            f"(winner: {match.winner or 'draw'})"
        )
        return ResultOutcome(
            updated_match=match, propagated_match=propagated, third_place_match=third_place
        )

    def _normalize_scores(
        self, result: ScoreInput
    ) -> Tuple[Optional[int], Optional[int], List[SetScore]]:
        """Validate scores; with a set list the score pair becomes sets won."""
        if result.sets:
            sets = []
            for number, set_score in enumerate(result.sets, start=1):
                sets.append(
                    SetScore(
                        set_number=set_score.set_number or number,
                        home_score=validate_score_strict(
                            set_score.home_score, f"set {number} home score"
                        ),
                        away_score=validate_score_strict(
                            set_score.away_score, f"set {number} away score"
                        ),
                    )
                )
            home_sets = sum(1 for s in sets if s.home_score > s.away_score)
            away_sets = sum(1 for s in sets if s.away_score > s.home_score)
            return home_sets, away_sets, sets

        if result.home_score is None and result.away_score is None:
            return None, None, []
        return (
            validate_score_strict(result.home_score, "home score"),
            validate_score_strict(result.away_score, "away score"),
            [],
        )

    def _decide_winner(
        self,
        fixture: Fixture,
        match: Match,
        result: ScoreInput,
        home_score: Optional[int],
        away_score: Optional[int],
        sets: List[SetScore],
    ) -> Optional[str]:
        """Pick the winner of a completing result; None is a draw."""
        if result.winner_id is not None:
            if result.winner_id not in match.participant_ids:
                logger.warning(
                    f"Rejected result for {match.id}: {result.winner_id} is not playing"
                )
                raise InvalidResult(
                    f"Winner {result.winner_id} is not a participant of match {match.id}"
                )
            return result.winner_id

        if home_score is None or away_score is None:
            raise InvalidResult(f"Match {match.id} needs a score or a winner to complete")

        if home_score > away_score:
            return match.home_participant
        if away_score > home_score:
            return match.away_participant

        if sets:
            logger.warning(f"Rejected result for {match.id}: sets are tied")
            raise AmbiguousResult(
                f"Sets are tied {home_score}-{away_score} in match {match.id}; "
                "a manual winner is required"
            )
        if fixture.is_knockout:
            logger.warning(f"Rejected result for {match.id}: level knockout score")
            raise AmbiguousResult(
                f"Knockout match {match.id} cannot end level without a manual winner"
            )
        return None

    def reopen(self, fixture: Fixture, match_id: str) -> ReopenOutcome:
        """Reopen a completed match.

        The winner is withdrawn from the next match and a semifinal loser
        from the third-place match. The revert goes one hop only.

        Raises:
            MatchLocked: If the match is not completed, or a match it fed has
                already been played
        """
        graph = fixture.graph
        match = graph.get(match_id)

        if match.status != MatchStatus.COMPLETED:
            raise MatchLocked(
                f"Only completed matches can be reopened ({match_id} is {match.status.value})"
            )

        third_place = graph.third_place_match()
        feeds_third_place = third_place is not None and match_id in third_place.previous_match_ids
        blocking = (
            played_downstream(graph, match.next_match_id),
            third_place if feeds_third_place else None,
        )
        for downstream in blocking:
            if downstream is not None and downstream.is_played:
                logger.warning(
                    f"Rejected reopen of {match_id}: {downstream.id} is already played"
                )
                raise MatchLocked(
                    f"Cannot reopen {match_id}: match {downstream.id} has already been played"
                )

        with graph.transaction():
            reverted = None
            reverted_third_place = None
            if fixture.is_knockout:
                reverted = withdraw_participant(graph, match, match.next_match_id, match.winner)
                reverted_third_place = withdraw_loser_from_third_place(graph, match)

            match.clear_result()
            match.status = MatchStatus.SCHEDULED
            match.touch()

        logger.info(f"Reopened match {match_id}")
        return ReopenOutcome(
            updated_match=match,
            reverted_match=reverted,
            reverted_third_place_match=reverted_third_place,
        )

    # ========== Reseeding ==========

    def swap_participants(
        self,
        fixture: Fixture,
        match_a_id: str,
        slot_a: str,
        match_b_id: str,
        slot_b: str,
        expected_a: Optional[str] = None,
        expected_b: Optional[str] = None,
    ) -> SwapOutcome:
        """Exchange the contents of two round-1 slots.

        An occupied target is exchanged with the source; an empty target
        receives the source participant and the source is cleared. Partners
        travel with their slot holders. Both matches are then re-evaluated
        for bye status.

        Args:
            fixture: Knockout fixture
            match_a_id, slot_a: Source slot
            match_b_id, slot_b: Target slot
            expected_a, expected_b: Participant IDs the caller last saw in
                the two slots; checked when given

        Raises:
            InvalidSlot: If a slot name is unknown or a slot is fed by a
                previous match
            FixtureLocked: If any match is completed or in progress
            InconsistentSwap: If a slot no longer holds the expected participant
        """
        slot_a = check_slot(slot_a)
        slot_b = check_slot(slot_b)
        graph = fixture.graph

        if match_a_id == match_b_id and slot_a == slot_b:
            match = graph.get(match_a_id)
            return SwapOutcome(match_a=match, match_b=match)

        if not fixture.is_knockout:
            raise InvalidSlot(f"Fixture {fixture.id} is not a knockout; slots are fixed")
        if graph.has_played_matches():
            logger.warning(f"Rejected swap in {fixture.id}: play has begun")
            raise FixtureLocked(f"Fixture {fixture.id} has played matches; seeding is locked")

        match_a = graph.get(match_a_id)
        match_b = graph.get(match_b_id)
        for match in (match_a, match_b):
            if match.previous_match_ids:
                raise InvalidSlot(
                    f"Slots of match {match.id} are fed by earlier matches and cannot be swapped"
                )

        for match, slot, expected in ((match_a, slot_a, expected_a), (match_b, slot_b, expected_b)):
            if expected is not None and match.participant_in(slot) != expected:
                logger.warning(
                    f"Stale swap reference {match.id}/{slot}: expected {expected}, "
                    f"found {match.participant_in(slot)}"
                )
                raise InconsistentSwap(
                    f"Slot {slot} of match {match.id} no longer holds {expected}"
                )

        affected = [match_a] if match_a is match_b else [match_a, match_b]
        with graph.transaction():
            for match in affected:
                self._revert_bye(graph, match)

            participant_a, partner_a = match_a.participant_in(slot_a), match_a.partner_in(slot_a)
            participant_b, partner_b = match_b.participant_in(slot_b), match_b.partner_in(slot_b)
            match_a.set_participant(slot_a, participant_b)
            match_a.set_partner(slot_a, partner_b)
            match_b.set_participant(slot_b, participant_a)
            match_b.set_partner(slot_b, partner_a)

            for match in affected:
                self._refresh_bye(graph, match)
                match.touch()

        logger.info(
            f"Swapped {match_a_id}/{slot_a} ({participant_a}) with "
            f"{match_b_id}/{slot_b} ({participant_b})"
        )
        return SwapOutcome(match_a=match_a, match_b=match_b)

    def _revert_bye(self, graph: MatchGraph, match: Match) -> None:
        """Undo the automatic advancement of a bye before its slots change."""
        if match.status != MatchStatus.WALKOVER:
            return
        withdraw_participant(graph, match, match.next_match_id, match.winner)
        match.winner = None
        match.loser = None
        match.status = MatchStatus.SCHEDULED
        if match.notes == BYE_NOTE:
            match.notes = ""

    def _refresh_bye(self, graph: MatchGraph, match: Match) -> None:
        """Turn a single-participant round-1 match into a propagated walkover.

        The bye holder keeps the slot it is in.
        """
        if len(match.participant_ids) != 1:
            return
        lone = match.participant_ids[0]
        match.status = MatchStatus.WALKOVER
        match.winner = lone
        match.loser = None
        match.notes = BYE_NOTE
        advance_winner(graph, match)

    # ========== Doubles partners ==========

    def assign_partners(
        self,
        fixture: Fixture,
        player_pool: Sequence[Participant],
        match_id: str,
        home_partner: Optional[str],
        away_partner: Optional[str],
    ) -> Match:
        """Assign (or clear, with None) the partners of both slots.

        Raises:
            IneligiblePartner: If the fixture is not doubles or a partner is
                not on the eligible list for its side
            MatchLocked: If the match has been played
            InvalidSlot: If a partner is given for an empty slot
        """
        if not fixture.settings.is_doubles:
            raise IneligiblePartner(f"Fixture {fixture.id} is not a doubles fixture")

        graph = fixture.graph
        match = graph.get(match_id)
        if match.is_played:
            raise MatchLocked(f"Match {match_id} has been played; partners are fixed")

        with graph.transaction():
            for slot, partner_id in ((HOME, home_partner), (AWAY, away_partner)):
                if partner_id is None:
                    match.set_partner(slot, None)
                    continue
                holder = match.participant_in(slot)
                if holder is None:
                    raise InvalidSlot(f"Slot {slot} of match {match_id} is empty")
                eligible = self.partner_resolver.eligible_partners(
                    fixture, player_pool, holder, slot, match_id
                )
                if partner_id not in [p.id for p in eligible]:
                    logger.warning(
                        f"Rejected partner {partner_id} for {holder} in {match_id}"
                    )
                    raise IneligiblePartner(
                        f"{partner_id} is not an eligible partner for {holder}"
                    )
                match.set_partner(slot, partner_id)
            match.touch()

        logger.info(
            f"Assigned partners in {match_id}: home={home_partner}, away={away_partner}"
        )
        return match

    # ========== Structural edits ==========

    @staticmethod
    def can_delete(match: Match) -> bool:
        """Only fully empty, unplayed nodes may be deleted."""
        return (
            match.is_empty
            and not match.is_played
            and match.home_partner is None
            and match.away_partner is None
        )

    @staticmethod
    def editable_matches(fixture: Fixture) -> List[Match]:
        """Matches shown in edit listings; walkovers are left out."""
        return [m for m in fixture.graph if m.status != MatchStatus.WALKOVER]

    def remove_match(self, fixture: Fixture, match_id: str) -> Match:
        """Delete an empty leaf match and compact the numbering.

        A parent left with a single feeder becomes a walkover as soon as that
        feeder's winner reaches it.

        Raises:
            MatchLocked: If the match holds participants, has been played or
                is fed by earlier matches
        """
        graph = fixture.graph
        match = graph.get(match_id)
        if not self.can_delete(match) or match.previous_match_ids:
            logger.warning(f"Rejected removal of {match_id}: match is not an empty leaf")
            raise MatchLocked(f"Match {match_id} is not an empty, unplayed leaf")

        with graph.transaction():
            for parent in (graph.find(match.next_match_id), graph.third_place_match()):
                if parent is not None and match_id in parent.previous_match_ids:
                    parent.previous_match_ids.remove(match_id)
                    parent.touch()
            graph.remove(match_id)
            self._compact_numbering(graph)

            next_match = graph.find(match.next_match_id)
            if next_match is not None:
                settle_pass_through(graph, next_match)

        logger.info(f"Removed match {match_id} from {fixture.id}")
        return match

    def _compact_numbering(self, graph: MatchGraph) -> None:
        """Renumber rounds and matches without gaps; IDs stay unchanged."""
        rounds = graph.by_round()
        round_map = {old: new for new, old in enumerate(rounds, start=1)}
        number = 0
        for old_round, round_matches in rounds.items():
            for match in round_matches:
                number += 1
                if match.round != round_map[old_round] or match.match_number != number:
                    match.round = round_map[old_round]
                    match.match_number = number
                    match.touch()

        third_place = graph.third_place_match()
        if third_place is not None:
            third_place.round = len(round_map)
            third_place.match_number = number + 1
