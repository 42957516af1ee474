"""Validation utilities for tourneykit.

This module provides reusable validation functions with consistent error handling.
"""

import math
from datetime import date, datetime
from typing import Any, Iterable, Optional

from dateutil.parser import isoparse

from tourneykit.exceptions import InvalidConfigurationException, InvalidResult


class ValidationResult:
    """Result of a validation operation.

    Attributes:
        is_valid: Whether the validation passed
        error_message: Human-readable error message if invalid
        sanitized_value: Cleaned/normalized value if valid
    """

    def __init__(
        self,
        is_valid: bool,
        error_message: Optional[str] = None,
        sanitized_value: Any = None,
    ):
        self.is_valid = is_valid
        self.error_message = error_message
        self.sanitized_value = sanitized_value

    def __bool__(self) -> bool:
        """Allow using result in boolean context: if result: ..."""
        return self.is_valid

    def __repr__(self) -> str:
        if self.is_valid:
            return f"ValidationResult(VALID, {self.sanitized_value!r})"
        return f"ValidationResult(INVALID, {self.error_message!r})"


# ========== Score Validation ==========


def validate_score(score: Any, label: str = "score") -> ValidationResult:
    """Validate a single match score.

    Scores must be non-negative whole numbers. Integral floats (``2.0``) are
    accepted and normalized to ``int``; booleans are rejected.

    Args:
        score: Score value to validate
        label: Name used in the error message

    Returns:
        ValidationResult with the normalized integer score

    Example:
        >>> validate_score(3).sanitized_value
        3
    """
    if score is None:
        return ValidationResult(is_valid=False, error_message=f"{label} is required")

    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return ValidationResult(
            is_valid=False,
            error_message=f"Invalid {label}: {score!r} (must be a number)",
        )

    if isinstance(score, float):
        if not math.isfinite(score) or not score.is_integer():
            return ValidationResult(
                is_valid=False,
                error_message=f"Invalid {label}: {score} (must be a whole number)",
            )
        score = int(score)

    if score < 0:
        return ValidationResult(
            is_valid=False,
            error_message=f"Invalid {label}: {score} (must not be negative)",
        )

    return ValidationResult(is_valid=True, sanitized_value=score)


def validate_score_strict(score: Any, label: str = "score") -> int:
    """Validate a score and raise exception if invalid.

    Args:
        score: Score value to validate
        label: Name used in the error message

    Returns:
        The normalized score

    Raises:
        InvalidResult: If the score is invalid
    """
    result = validate_score(score, label)
    if not result.is_valid:
        raise InvalidResult(result.error_message)
    return result.sanitized_value


# ========== Date Validation ==========


def validate_datetime(value: Any, label: str = "date") -> ValidationResult:
    """Validate a date or timestamp.

    Accepts ``datetime`` objects, plain dates (taken as midnight) and ISO 8601
    strings such as ``2025-05-03`` or ``2025-05-03T14:30:00Z``.

    Args:
        value: Value to validate
        label: Name used in the error message

    Returns:
        ValidationResult with the value as a ``datetime``
    """
    if isinstance(value, datetime):
        return ValidationResult(is_valid=True, sanitized_value=value)
    if isinstance(value, date):
        return ValidationResult(
            is_valid=True, sanitized_value=datetime(value.year, value.month, value.day)
        )
    if not isinstance(value, str) or not value.strip():
        return ValidationResult(
            is_valid=False,
            error_message=f"Invalid {label}: {value!r} (must be an ISO 8601 date)",
        )

    try:
        parsed = isoparse(value.strip())
    except (ValueError, OverflowError):
        return ValidationResult(
            is_valid=False,
            error_message=f"Invalid {label}: {value!r} (must be an ISO 8601 date)",
        )
    return ValidationResult(is_valid=True, sanitized_value=parsed)


def optional_datetime(value: Any, label: str = "date") -> Optional[datetime]:
    """Parse an optional date field of serialized data.

    Raises:
        InvalidConfigurationException: If a value is given but is not a date
    """
    if value is None:
        return None
    return require_valid(validate_datetime(value, label))


# ========== Settings Validation ==========


def validate_points(value: Any, label: str) -> ValidationResult:
    """Validate a points weight (win/draw/loss or a podium value).

    Negative weights are allowed for loss penalties, but the value must be a
    whole number.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return ValidationResult(
            is_valid=False,
            error_message=f"Invalid {label}: {value!r} (must be a number)",
        )
    if isinstance(value, float) and not value.is_integer():
        return ValidationResult(
            is_valid=False,
            error_message=f"Invalid {label}: {value} (must be a whole number)",
        )
    return ValidationResult(is_valid=True, sanitized_value=int(value))


def validate_positive_int(value: Any, label: str) -> ValidationResult:
    """Validate a strictly positive integer setting (rounds, attempts)."""
    if isinstance(value, bool) or not isinstance(value, int):
        return ValidationResult(
            is_valid=False,
            error_message=f"Invalid {label}: {value!r} (must be an integer)",
        )
    if value < 1:
        return ValidationResult(
            is_valid=False,
            error_message=f"Invalid {label}: {value} (must be at least 1)",
        )
    return ValidationResult(is_valid=True, sanitized_value=value)


def validate_choice(value: Any, choices: Iterable[str], label: str) -> ValidationResult:
    """Validate that a value is one of the allowed string choices."""
    allowed = tuple(choices)
    if value not in allowed:
        return ValidationResult(
            is_valid=False,
            error_message=f"Invalid {label}: {value!r} (expected one of {', '.join(allowed)})",
        )
    return ValidationResult(is_valid=True, sanitized_value=value)


def require_valid(result: ValidationResult) -> Any:
    """Return the sanitized value or raise a configuration error.

    Raises:
        InvalidConfigurationException: If the result is invalid
    """
    if not result.is_valid:
        raise InvalidConfigurationException(result.error_message)
    return result.sanitized_value
