"""Exceptions for use in tourneykit"""

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


# ========== Base Application Exception ==========


class TourneyKitException(Exception):
    """Base exception for all tourneykit errors.

    Every error raised by the engine is recoverable at the calling layer and
    inherits from this class, so a caller can reject an operation with a
    single except clause.
    """

    pass


# ========== Lookup Exceptions ==========


class NotFound(TourneyKitException):
    """Raised when a fixture, match or participant id is unknown."""

    pass


class FixtureNotFound(NotFound):
    """Raised when a requested fixture does not exist."""

    pass


class MatchNotFound(NotFound):
    """Raised when a requested match does not exist."""

    pass


class ParticipantNotFound(NotFound):
    """Raised when a requested participant cannot be found."""

    pass


# ========== Bracket Exceptions ==========


class BracketException(TourneyKitException):
    """Base exception for bracket construction and editing errors."""

    pass


class InvalidParticipantCount(BracketException):
    """Raised when a fixture is created with fewer than two participants."""

    pass


class InvalidSlot(BracketException):
    """Raised when a slot reference cannot be edited (unknown or fed by a previous match)."""

    pass


class InconsistentSwap(BracketException):
    """Raised when a swap references a slot whose content changed meanwhile.

    The caller should reload the bracket and retry.
    """

    pass


# ========== Fixture Exceptions ==========


class FixtureException(TourneyKitException):
    """Base exception for fixture-level errors."""

    pass


class FixtureLocked(FixtureException):
    """Raised on a structural edit after play has begun."""

    pass


# ========== Result Exceptions ==========


class ResultException(TourneyKitException):
    """Base exception for result recording errors."""

    pass


class AmbiguousResult(ResultException):
    """Raised when a match is completed without a determinable winner."""

    pass


class InvalidResult(ResultException):
    """Raised when a result is invalid (e.g., negative score, unknown winner)."""

    pass


class MatchLocked(ResultException):
    """Raised when a match cannot change in its current state."""

    pass


# ========== Partner Exceptions ==========


class PartnerException(TourneyKitException):
    """Base exception for doubles partner errors."""

    pass


class IneligiblePartner(PartnerException):
    """Raised when a partner is not on the resolved eligible list."""

    pass


# ========== Configuration Exceptions ==========


class ConfigurationException(TourneyKitException):
    """Base exception for configuration errors."""

    pass


class InvalidConfigurationException(ConfigurationException):
    """Raised when configuration data is invalid."""

    pass
