"""Stack Frame Location — finds the first call frame's file and line in a trace.

Invariants:
    - The first line (the error message) is never inspected
    - Matchers are tried in order per line; first success wins
    - A frame counts only with a non-empty file name AND a positive line
    - Never raises: no match anywhere → FrameLocation(None, None)
    - With accept_path, frames whose full path it rejects are skipped

Supported frame formats:
    - parenthesized: "at getAll (/app/Controllers/TestController.js:43:11)"
    - bare:          "at /app/app.js:57:25"
    - python:        'File "/app/board_api/api/routes/test_projects.py", line 43, in get_all'
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

_PARENTHESIZED = re.compile(r"\(([^()]+):(\d+):(\d+)\)")
_BARE = re.compile(r"^(\S+):(\d+):(\d+)")
_PYTHON = re.compile(r'File "([^"]+)", line (\d+)')


@dataclass(frozen=True)
class FrameLocation:
    """Source location of a frame; both fields None when not found."""
    file_name: str | None = None
    line_number: int | None = None

    @property
    def found(self) -> bool:
        return self.file_name is not None and self.line_number is not None


NOT_FOUND = FrameLocation()

FrameMatcher = Callable[[str], tuple[str, str] | None]


def match_parenthesized(line: str) -> tuple[str, str] | None:
    """Trailing '(<path>:<line>:<column>)' segment."""
    matches = _PARENTHESIZED.findall(line)
    if not matches:
        return None
    path, line_no, _column = matches[-1]
    return path, line_no


def match_bare(line: str) -> tuple[str, str] | None:
    """'at <path>:<line>:<column>' with no parentheses."""
    at_index = line.find("at ")
    if at_index < 0:
        return None
    found = _BARE.match(line[at_index + 3:].strip())
    if not found:
        return None
    return found.group(1), found.group(2)


def match_python(line: str) -> tuple[str, str] | None:
    """Python traceback 'File "<path>", line <line>' entry."""
    found = _PYTHON.search(line)
    if not found:
        return None
    return found.group(1), found.group(2)


FRAME_MATCHERS: tuple[FrameMatcher, ...] = (
    match_parenthesized,
    match_bare,
    match_python,
)


def locate_frame(
    stack_trace: str | None,
    matchers: tuple[FrameMatcher, ...] = FRAME_MATCHERS,
    accept_path: Callable[[str], bool] | None = None,
) -> FrameLocation:
    """Return the first frame with a usable file name and line number."""
    if not stack_trace:
        return NOT_FOUND
    for raw_line in stack_trace.splitlines()[1:]:
        line = raw_line.strip()
        if not line:
            continue
        for matcher in matchers:
            captured = matcher(line)
            if captured and accept_path and not accept_path(captured[0].strip()):
                break
            location = _to_location(captured)
            if location.found:
                return location
    return NOT_FOUND


def short_file_name(path: str) -> str:
    """Substring after the last path separator, or the whole path."""
    cut = max(path.rfind("/"), path.rfind("\\"))
    return path[cut + 1:] if cut >= 0 else path


def _to_location(captured: tuple[str, str] | None) -> FrameLocation:
    if captured is None:
        return NOT_FOUND
    path, line_no = captured
    file_name = short_file_name(path.strip())
    try:
        number = int(line_no, 10)
    except ValueError:
        return NOT_FOUND
    if not file_name or number <= 0:
        return NOT_FOUND
    return FrameLocation(file_name, number)
