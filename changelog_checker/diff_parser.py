# changelog_checker/diff_parser.py
import re
from functools import reduce
from itertools import chain
from typing import NamedTuple, Optional

from .errors import DiffParseError

# Example header: @@ -90,7 +90,8 @@ HighlightingPage::HighlightingPage()
_HUNK_HEADER_RE = re.compile(r"^@@ -\d+(?:,\d+)? \+(?P<start>\d+)(?:,\d+)? @@")


class AddedLine(NamedTuple):
    # 0-indexed line number in the post-change file
    line_no: int
    text: str


class Hunk(NamedTuple):
    # 1-indexed start line of the hunk in the post-change file
    start: int
    added_lines: tuple[AddedLine, ...] = ()


class _ParseState(NamedTuple):
    cursor: int = 0
    hunk: Optional[Hunk] = None
    done: tuple[Hunk, ...] = ()


def split_lines(text: str) -> list[str]:
    """
    Split text on "\\n" only, like git does, dropping a trailing "\\r".

    str.splitlines() also breaks on form feeds, \\x85, \\u2028 and friends,
    which git keeps inside a line.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def parse_hunk_start(header: str) -> int:
    """
    Return the 1-indexed target start line of a hunk header.
    """
    match = _HUNK_HEADER_RE.match(header)
    if not match:
        raise DiffParseError(f"malformed hunk header: {header!r}")
    return int(match.group("start"))


def _step(state: _ParseState, line: str) -> _ParseState:
    if line.startswith("@@"):
        start = parse_hunk_start(line)
        done = state.done if state.hunk is None else state.done + (state.hunk,)
        # "+0,0" means the target file is empty
        return _ParseState(max(start - 1, 0), Hunk(start), done)

    if state.hunk is None:
        # diff --git / index / --- / +++ lines ahead of the first hunk
        return state

    if line.startswith("+"):
        added = state.hunk.added_lines + (AddedLine(state.cursor, line[1:]),)
        return state._replace(cursor=state.cursor + 1, hunk=state.hunk._replace(added_lines=added))

    if line.startswith("-") or line.startswith("\\"):
        # removed lines and "\ No newline at end of file" are not in the target
        return state

    return state._replace(cursor=state.cursor + 1)


def parse_hunks(patch: str) -> list[Hunk]:
    state = reduce(_step, split_lines(patch), _ParseState())
    if state.hunk is not None:
        return list(state.done + (state.hunk,))
    return list(state.done)


def parse_added_lines(patch: str) -> list[AddedLine]:
    """
    Flatten the added lines of every hunk of a single-file patch, in file order.
    """
    return list(chain.from_iterable(h.added_lines for h in parse_hunks(patch)))
