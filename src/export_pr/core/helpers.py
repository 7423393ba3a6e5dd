"""Helper functions for parsing input and formatting provider data."""

import re
from datetime import datetime, timezone
from typing import Iterable, List, Union

from .models import RepoRef
from .exceptions import ConfigurationError, DataError

REPOSITORY_PATTERN = re.compile(r"^(\S+)/(\S+)$")

# Locale's date and time representation (MM/DD/YY HH:MM:SS in the C locale)
DISPLAY_FORMAT = "%x %X"

# fromisoformat before Python 3.11 only takes 3 or 6 fraction digits
FRACTION_PATTERN = re.compile(r"(\d{2}:\d{2}:\d{2})\.(\d+)")


def parse_repository(value: str) -> RepoRef:
    """
    Parse an 'owner/repo' string.

    Args:
        value: Repository reference from the command line

    Returns:
        RepoRef for the repository

    Raises:
        ConfigurationError: If the value is not in 'owner/repo' form
    """
    match = REPOSITORY_PATTERN.match(value)
    if not match:
        raise ConfigurationError(
            f"Invalid repository reference: '{value}'. "
            "Expected format: 'owner/repo'"
        )
    return RepoRef(owner=match.group(1), name=match.group(2))


def parse_repositories(values: Iterable[str]) -> List[RepoRef]:
    """
    Parse every repository reference, failing on the first bad one.

    Args:
        values: Repository references from the command line

    Returns:
        List of RepoRef in input order
    """
    return [parse_repository(value) for value in values]


def _six_digit_fraction(match: "re.Match") -> str:
    return f"{match.group(1)}.{match.group(2)[:6].ljust(6, '0')}"


def format_timestamp(value: Union[str, datetime]) -> str:
    """
    Render a provider timestamp in local time.

    Args:
        value: ISO-8601 string or datetime. Naive values are taken as UTC.

    Returns:
        Timestamp formatted with DISPLAY_FORMAT

    Raises:
        DataError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        text = FRACTION_PATTERN.sub(_six_digit_fraction, text)
        try:
            moment = datetime.fromisoformat(text)
        except ValueError as e:
            raise DataError(f"Unparseable timestamp: {value!r}", details=str(e))
    else:
        raise DataError(f"Missing or invalid timestamp: {value!r}")

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)

    return moment.astimezone().strftime(DISPLAY_FORMAT)
