"""Type hints used in tourneykit."""

from typing import Dict, List, Literal, Optional, Tuple

# Slot in a match (for type hints)
Slot = Literal["home", "away"]

# Participant kind literals
ParticipantKind = Literal["player", "team"]

# Fixture format literals
FixtureFormat = Literal["knockout", "roundrobin"]

# Podium position
Position = Literal[1, 2, 3]

MaybeId = Optional[str]
# (match id, slot) reference used by reseeding
SlotRef = Tuple[str, Slot]
# All matches of one round, ordered by match number
RoundMatches = List["Match"]
# match id -> vertical center of its box
LayoutMap = Dict[str, float]
