# changelog_checker/classifier.py
import logging
from typing import Iterable, Optional, Sequence

from .diff_parser import AddedLine
from .models import AddedEntry

logger = logging.getLogger(__name__)

HEADING_PREFIX = "## "


def heading_category(line: str, prefix: str = HEADING_PREFIX) -> Optional[str]:
    if not line.startswith(prefix):
        return None
    return line[len(prefix):].strip()


def nearest_headings(lines: Sequence[str], prefix: str = HEADING_PREFIX) -> list[Optional[str]]:
    """
    Map every position to the category of the closest heading above it.

    Element i describes lines[:i], so the result has len(lines) + 1 items
    and position 0 never has a heading.
    """
    result: list[Optional[str]] = [None]
    last: Optional[str] = None

    for line in lines:
        category = heading_category(line, prefix)
        if category is not None:
            last = category
        result.append(last)

    return result


def classify(
    lines: Sequence[str],
    added_lines: Iterable[AddedLine],
    prefix: str = HEADING_PREFIX,
) -> list[AddedEntry]:
    headings = nearest_headings(lines, prefix)
    entries = []

    for line_no, text in added_lines:
        category = headings[min(line_no, len(lines))]
        if category is None:
            logger.debug("No heading above line %d, skipping %r", line_no + 1, text)
            continue

        entries.append(AddedEntry(category=category, text=text, line_number=line_no + 1))

    return entries
