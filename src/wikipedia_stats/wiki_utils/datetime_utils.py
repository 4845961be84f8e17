# wiki_utils/datetime_utils.py
import re
from typing import Optional

from wikipedia_stats.processing.shared.constants import TIMESTAMP_DATE_PATTERN
from wikipedia_stats.processing.shared.error_handling import MalformedTimestamp

DATE_RE = re.compile(TIMESTAMP_DATE_PATTERN)

# Dump dates are given as YYYYMMDD, e.g. 20211101
DUMP_DATE_RE = re.compile(r"^[0-9]{8}$")


def extract_year(timestamp_str: str, context: str = "revision timestamp") -> int:
    """
    Extract the year from a Wikimedia timestamp fragment.

    Args:
        timestamp_str: Raw character data, e.g. ``2021-03-04T10:00:00Z``
        context: Description of where the timestamp came from for error messages

    Returns:
        The first four digits of the first ``YYYY-MM-DD`` fragment

    Raises:
        MalformedTimestamp: If no date fragment is present
    """
    match = DATE_RE.search(timestamp_str or "")
    if match is None:
        raise MalformedTimestamp(f"Unparsable {context}: {timestamp_str!r}")
    return int(match.group(0)[:4])


def is_dump_date(value: Optional[str]) -> bool:
    """Check that a dump date looks like YYYYMMDD."""
    return bool(value) and DUMP_DATE_RE.match(value) is not None
