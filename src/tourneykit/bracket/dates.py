"""Calendar dates of fixture rounds."""

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
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta

from tourneykit.models.fixture import FixtureSettings
from tourneykit.models.match import Match


def round_date(
    start_date: Optional[datetime], round_number: int, days_between_rounds: int
) -> Optional[datetime]:
    """Scheduled date of a round, counted from the fixture's start date.

    >>> round_date(datetime(2025, 5, 3), 3, 7)
    datetime.datetime(2025, 5, 17, 0, 0)
    """
    if start_date is None:
        return None
    return start_date + relativedelta(days=days_between_rounds * (round_number - 1))


def assign_round_dates(matches: Iterable[Match], settings: FixtureSettings) -> None:
    """Set ``scheduled_date`` on every match from its round number."""
    for match in matches:
        match.scheduled_date = round_date(
            settings.start_date, match.round, settings.days_between_rounds
        )
