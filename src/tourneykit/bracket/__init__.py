"""Match graph construction for knockout and round-robin fixtures."""

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

from tourneykit.bracket.builder import BracketBuilder, BracketBuildResult, match_id_for
from tourneykit.bracket.dates import round_date
from tourneykit.bracket.layout import BracketLayout, compute_layout, round_title
from tourneykit.bracket.round_robin import RoundRobinScheduler, expected_match_count
from tourneykit.bracket.seeding import next_power_of_two, standard_seed_order

__all__ = [
    "BracketBuilder",
    "BracketBuildResult",
    "BracketLayout",
    "RoundRobinScheduler",
    "compute_layout",
    "expected_match_count",
    "match_id_for",
    "next_power_of_two",
    "round_date",
    "round_title",
    "standard_seed_order",
]
