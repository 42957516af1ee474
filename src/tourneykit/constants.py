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

# --- Constants ---

# Fixture formats
FORMAT_KNOCKOUT = "knockout"
FORMAT_ROUND_ROBIN = "roundrobin"
FIXTURE_FORMATS = (FORMAT_KNOCKOUT, FORMAT_ROUND_ROBIN)

# Participant kinds
KIND_PLAYER = "player"
KIND_TEAM = "team"
PARTICIPANT_KINDS = (KIND_PLAYER, KIND_TEAM)

# Match slots
HOME = "home"
AWAY = "away"
SLOTS = (HOME, AWAY)

# Round robin points (overridable per fixture)
DEFAULT_POINTS_FOR_WIN = 3
DEFAULT_POINTS_FOR_DRAW = 1
DEFAULT_POINTS_FOR_LOSS = 0
DEFAULT_ROUNDS = 1

# Calendar spacing of consecutive rounds when a fixture has a start date
DEFAULT_DAYS_BETWEEN_ROUNDS = 7

# Reseeding attempts when keeping teammates apart in round 1
DEFAULT_MAX_RESEED_ATTEMPTS = 200

# Note on matches decided without an opponent
BYE_NOTE = "Bye - automatic advancement"

# A third-place match needs two real semifinal losers
MIN_PARTICIPANTS_FOR_THIRD_PLACE = 4

# Placement positions
FIRST_PLACE = 1
SECOND_PLACE = 2
THIRD_PLACE = 3
PODIUM_POSITIONS = (FIRST_PLACE, SECOND_PLACE, THIRD_PLACE)

# Bracket layout defaults
LAYOUT_MATCH_HEIGHT = 140
LAYOUT_VERTICAL_GAP = 30

# Round titles, counted back from the final
ROUND_TITLES_FROM_FINAL = ("Final", "Semi-Finals", "Quarter-Finals")

# Logging
LOG_LEVEL_ENV_VAR = "TOURNEYKIT_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
