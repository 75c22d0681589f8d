"""Stack frame location — pure tests for locate_frame.

Tests cover:
    - Parenthesized, bare and Python traceback frames
    - The message line is never treated as a frame
    - First usable frame wins; unusable frames are skipped
    - No usable frame → both fields None, never raises
"""

from board_api.core.locate_frame import (
    FrameLocation, locate_frame, match_bare, match_parenthesized, short_file_name,
)


def test_parenthesized_frame():
    trace = (
        "Error: boom\n"
        "    at getAll (/app/Controllers/TestController.js:43:11)\n"
        "    at next (...)"
    )
    assert locate_frame(trace) == FrameLocation("TestController.js", 43)


def test_bare_frame():
    trace = "Error: boom\n    at /app/app.js:57:25\n"
    assert locate_frame(trace) == FrameLocation("app.js", 57)


def test_python_frame():
    trace = (
        "ValueError: boom\n"
        '  File "/srv/board_api/api/routes/test_projects.py", line 43, in get_all\n'
        "    raise ValueError('boom')\n"
        '  File "/usr/lib/python3/site-packages/starlette/routing.py", line 74, in app\n'
    )
    assert locate_frame(trace) == FrameLocation("test_projects.py", 43)


def test_windows_separator():
    trace = "Error: boom\n    at C:\\app\\server.js:12:3"
    assert locate_frame(trace) == FrameLocation("server.js", 12)


def test_message_line_is_skipped():
    trace = "Error: at /app/fake.js:1:1\n    at run (/app/real.js:9:2)"
    assert locate_frame(trace) == FrameLocation("real.js", 9)


def test_skips_frames_without_location():
    trace = (
        "TypeError: x is undefined\n"
        "    at new Promise (<anonymous>)\n"
        "    at async Promise.all (index 0)\n"
        "    at handler (/app/handlers.js:7:30)\n"
    )
    assert locate_frame(trace) == FrameLocation("handlers.js", 7)


def test_node_internal_module_path():
    trace = "Error: boom\n    at Module._compile (node:internal/modules/cjs/loader:1105:14)"
    assert locate_frame(trace) == FrameLocation("loader", 1105)


def test_no_matching_frame_returns_absent():
    result = locate_frame("Error: boom\n    at somewhere\n    nothing useful here")
    assert result == FrameLocation(None, None)
    assert not result.found


def test_message_only_returns_absent():
    assert locate_frame("Error: boom") == FrameLocation()


def test_empty_and_none_return_absent():
    assert locate_frame("") == FrameLocation()
    assert locate_frame(None) == FrameLocation()


def test_zero_line_is_not_a_location():
    assert locate_frame("Error\n    at f (/app/a.js:0:1)") == FrameLocation()


# --- Matchers --------------------------------------------------------------------

def test_parenthesized_matcher_takes_trailing_segment():
    assert match_parenthesized("at f (/app/one.js:1:1) (/app/two.js:2:2)") == (
        "/app/two.js", "2",
    )


def test_bare_matcher_requires_column():
    assert match_bare("at /app/app.js:57") is None
    assert match_bare("at /app/app.js:57:1") == ("/app/app.js", "57")


def test_short_file_name():
    assert short_file_name("/a/b/c.js") == "c.js"
    assert short_file_name("c.js") == "c.js"


def test_rejected_paths_are_skipped():
    trace = (
        "OperationalError: no such table\n"
        '  File "/venv/site-packages/sqlalchemy/engine/base.py", line 1967, in _exec\n'
        '  File "/srv/board_api/api/routes/test_projects.py", line 35, in get_all\n'
    )
    location = locate_frame(trace, accept_path=lambda path: "site-packages" not in path)
    assert location == FrameLocation("test_projects.py", 35)


def test_all_paths_rejected_is_not_found():
    trace = 'Error: boom\n  File "/lib/x.py", line 3, in f\n'
    assert not locate_frame(trace, accept_path=lambda path: False).found
