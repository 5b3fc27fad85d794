# changelog_checker/checker.py
import logging

from .classifier import HEADING_PREFIX, classify
from .diff_parser import parse_added_lines, split_lines
from .models import AddedEntry
from .sources import ChangelogSource

logger = logging.getLogger(__name__)


def find_added_entries(patch: str, content: str, prefix: str = HEADING_PREFIX) -> list[AddedEntry]:
    """
    Resolve every line added by patch to the section it landed in.

    content is the whole changelog after the change.
    """
    return classify(split_lines(content), parse_added_lines(patch), prefix)


def check(source: ChangelogSource, prefix: str = HEADING_PREFIX) -> list[AddedEntry]:
    """
    Returns the changelog entries added by the change described by source.
    """
    patch = source.fetch_patch()
    if not patch:
        logger.info("No changes to %s", source.changelog_path)
        return []

    added = parse_added_lines(patch)
    logger.info("Found %d added lines in %s", len(added), source.changelog_path)
    if not added:
        return []

    lines = split_lines(source.fetch_content())
    return classify(lines, added, prefix)
