"""Command-line interface for tourneykit.

This module provides the ``tourneykit`` console script: build a bracket
from a list of names, or load a JSON event document and print standings or
the team scorecard.
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

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from tourneykit.bracket import BracketLayout
from tourneykit.constants import (
    DEFAULT_DAYS_BETWEEN_ROUNDS,
    FORMAT_KNOCKOUT,
    KIND_PLAYER,
    KIND_TEAM,
)
from tourneykit.engine import TournamentEngine
from tourneykit.exceptions import MatchNotFound, TourneyKitException
from tourneykit.models import Activity, Match, Participant, ScoreInput
from tourneykit.utils import set_log_level, setup_logger

logger = setup_logger(__name__)

DEFAULT_EVENT_ID = "event"


def load_document(path: str) -> Optional[Dict[str, Any]]:
    """Load an event document from a JSON file.

    Args:
        path: Path to the JSON file

    Returns:
        The parsed document, or None if it cannot be read
    """
    document_path = Path(path)
    if not document_path.exists():
        logger.error(f"Event document not found: {path}")
        return None

    try:
        with open(document_path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to load event document: {e}")
        return None

    if not isinstance(document, dict):
        logger.error(f"Event document must be a JSON object: {path}")
        return None
    return document


def _resolve_participants(
    entries: Sequence[Any], participant_type: str, pool: Dict[str, Participant]
) -> List[Participant]:
    """Participants of a fixture entry: dictionaries, or IDs/names."""
    participants = []
    for entry in entries:
        if isinstance(entry, dict):
            participants.append(Participant.from_dict({"kind": participant_type, **entry}))
        elif participant_type == KIND_PLAYER and str(entry) in pool:
            participants.append(pool[str(entry)])
        else:
            participants.append(Participant(kind=participant_type, id=str(entry), name=str(entry)))
    return participants


def _find_match(matches: List[Match], home: str, away: str) -> Match:
    """First undecided match with ``home`` and ``away`` in those slots."""
    for match in matches:
        if match.is_decided:
            continue
        if (match.home_participant, match.away_participant) == (home, away):
            return match
    raise MatchNotFound(f"No open match between {home} and {away}")


def build_engine(document: Dict[str, Any]) -> TournamentEngine:
    """Create an engine and replay every fixture and result of a document.

    The document holds ``players``, ``activities`` and ``fixtures``. Each
    fixture lists its ``participants`` and its ``results`` in the order they
    were played; a result names its match by ``match_id`` or by the ``home``
    and ``away`` participants.

    Raises:
        TourneyKitException: If the document describes an invalid event
        KeyError: If a required field is missing
    """
    engine = TournamentEngine()
    event_id = str(document.get("event_id", DEFAULT_EVENT_ID))

    players = [
        Participant.from_dict({"kind": KIND_PLAYER, **p}) for p in document.get("players", [])
    ]
    engine.register_players(players)
    pool = {p.id: p for p in players}

    for activity in document.get("activities", []):
        engine.register_activity(Activity.from_dict(activity))

    for entry in document.get("fixtures", []):
        participant_type = entry.get("participant_type", KIND_TEAM)
        fixture = engine.create_fixture(
            fixture_id=str(entry["id"]),
            event_id=str(entry.get("event_id", event_id)),
            activity_id=str(entry.get("activity_id", entry["id"])),
            format=entry.get("format", FORMAT_KNOCKOUT),
            participant_type=participant_type,
            participants=_resolve_participants(entry["participants"], participant_type, pool),
            settings={"randomize_seeds": False, **entry.get("settings", {})},
            name=entry.get("name", ""),
        )
        for result in entry.get("results", []):
            match_id = result.get("match_id")
            if match_id is None:
                match_id = _find_match(
                    engine.get_matches(fixture.id), str(result["home"]), str(result["away"])
                ).id
            engine.apply_match_result(match_id, ScoreInput.from_dict(result))

    return engine


# ========== Output ==========


def print_bracket(matches: List[Match], layout: BracketLayout) -> None:
    for round_number, match_ids in layout.rounds.items():
        round_matches = [m for m in matches if m.id in match_ids]
        title = layout.titles[round_number]
        if round_matches and round_matches[0].scheduled_date:
            title += f" ({round_matches[0].scheduled_date:%Y-%m-%d})"
        print(f"\n{title}")
        print("-" * 40)
        for match in round_matches:
            empty = "BYE" if match.is_bye else "TBD"
            home = match.home_participant or empty
            away = match.away_participant or empty
            print(f"  {match.id:<16} {home} vs {away}")
    third_place = next((m for m in matches if m.is_third_place_match), None)
    if third_place is not None:
        print("\nThird Place")
        print("-" * 40)
        home = third_place.home_participant or "TBD"
        away = third_place.away_participant or "TBD"
        print(f"  {third_place.id:<16} {home} vs {away}")


def print_standings(rows: List[Any]) -> None:
    print(f"{'#':>3} {'Participant':<20} {'P':>3} {'W':>3} {'D':>3} {'L':>3} "
          f"{'GF':>4} {'GA':>4} {'GD':>4} {'Pts':>4}")
    for row in rows:
        print(
            f"{row.rank:>3} {row.name:<20} {row.played:>3} {row.won:>3} {row.drawn:>3} "
            f"{row.lost:>3} {row.goals_for:>4} {row.goals_against:>4} "
            f"{row.goal_difference:>+4} {row.points:>4}"
        )


def print_scorecard(cards: List[Any]) -> None:
    for card in cards:
        print(f"{card.rank:>3}. {card.team_id:<20} {card.total_points:>5} pts")
        for entry in card.breakdown:
            print(f"       {entry.activity_name or entry.activity_id}: "
                  f"place {entry.position} (+{entry.points})")


# ========== Commands ==========


def run_bracket(args: argparse.Namespace) -> int:
    engine = TournamentEngine()
    fixture = engine.create_fixture(
        fixture_id=args.fixture_id,
        event_id=DEFAULT_EVENT_ID,
        activity_id=args.fixture_id,
        format=FORMAT_KNOCKOUT,
        participant_type=KIND_TEAM,
        participants=[Participant(kind=KIND_TEAM, id=name, name=name) for name in args.names],
        settings={
            "randomize_seeds": args.randomize,
            "seed": args.seed,
            "third_place_match": args.third_place,
            "start_date": args.start_date,
            "days_between_rounds": args.days_between_rounds,
        },
    )
    matches = fixture.graph.matches()
    if args.json:
        print(json.dumps([m.to_dict() for m in matches], indent=2))
    else:
        print(f"Seeding: {', '.join(fixture.seeding)}")
        print_bracket(matches, engine.get_layout(fixture.id))
    return 0


def run_standings(args: argparse.Namespace) -> int:
    document = load_document(args.document)
    if document is None:
        return 1
    engine = build_engine(document)
    fixture_ids = [args.fixture] if args.fixture else engine.fixture_ids()

    output = {}
    for fixture_id in fixture_ids:
        fixture = engine.get_fixture(fixture_id)
        if not fixture.is_round_robin and not args.fixture:
            continue
        rows = engine.get_standings(fixture_id)
        if args.json:
            output[fixture_id] = [row.to_dict() for row in rows]
        else:
            print(f"\n{fixture.name or fixture_id}")
            print_standings(rows)
    if args.json:
        print(json.dumps(output, indent=2))
    return 0


def run_scorecard(args: argparse.Namespace) -> int:
    document = load_document(args.document)
    if document is None:
        return 1
    engine = build_engine(document)
    event_id = args.event or str(document.get("event_id", DEFAULT_EVENT_ID))
    cards = engine.get_scorecard(event_id)
    if args.json:
        print(json.dumps([card.to_dict() for card in cards], indent=2))
    else:
        print_scorecard(cards)
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="tourneykit",
        description="Build knockout brackets and compute standings and scorecards",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Seeded bracket for five teams with a third-place match
  tourneykit bracket Lions Tigers Bears Wolves Hawks --randomize --seed 7 --third-place

  # Weekly rounds starting on 3 May
  tourneykit bracket Lions Tigers Bears Wolves --start-date 2025-05-03

  # League tables of every round-robin fixture in an event document
  tourneykit standings event.json

  # Team scorecard of the event as JSON
  tourneykit scorecard event.json --json
        """,
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    bracket = subparsers.add_parser("bracket", help="Build and print a knockout bracket")
    bracket.add_argument("names", nargs="+", help="Participant names in seeding order")
    bracket.add_argument("--fixture-id", default="ko", help="Fixture ID (default: ko)")
    bracket.add_argument("--randomize", action="store_true", help="Shuffle the seeding")
    bracket.add_argument("--seed", type=int, help="Random seed for reproducibility")
    bracket.add_argument(
        "--third-place", action="store_true", help="Add a third-place match"
    )
    bracket.add_argument("--start-date", help="Date of round 1 (ISO 8601)")
    bracket.add_argument(
        "--days-between-rounds",
        type=int,
        default=DEFAULT_DAYS_BETWEEN_ROUNDS,
        help=f"Days between rounds (default: {DEFAULT_DAYS_BETWEEN_ROUNDS})",
    )
    bracket.add_argument("--json", action="store_true", help="Print matches as JSON")
    bracket.set_defaults(handler=run_bracket)

    standings = subparsers.add_parser("standings", help="Print round-robin standings")
    standings.add_argument("document", help="Event document (JSON)")
    standings.add_argument("--fixture", help="Only this fixture")
    standings.add_argument("--json", action="store_true", help="Print rows as JSON")
    standings.set_defaults(handler=run_standings)

    scorecard = subparsers.add_parser("scorecard", help="Print the team scorecard")
    scorecard.add_argument("document", help="Event document (JSON)")
    scorecard.add_argument("--event", help="Event ID (default: the document's event_id)")
    scorecard.add_argument("--json", action="store_true", help="Print scorecards as JSON")
    scorecard.set_defaults(handler=run_scorecard)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for CLI.

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        set_log_level(logging.DEBUG)

    try:
        return args.handler(args)
    except TourneyKitException as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    except KeyError as e:
        logger.error(f"{args.command} failed: missing field {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
