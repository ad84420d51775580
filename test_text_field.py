import curses
import random
from unittest.mock import patch

import pytest

from clipboard import Clipboard
from fields import Field
from text_field import (
    KEY_CTRL_C,
    KEY_CTRL_V,
    KEY_ESC,
    KEY_TAB,
    TextFieldEditor,
    sanitize_paste,
    selection_bounds,
)

CLIP_CONFIG = {
    "CLIPBOARD_COPY_COMMAND": ["fake-copy"],
    "CLIPBOARD_PASTE_COMMAND": ["fake-paste"],
}


def _editor(state):
    return TextFieldEditor(state, Clipboard(CLIP_CONFIG))


def _type(editor, field, text):
    for ch in text:
        editor.handle_key(field, ord(ch))


def test_begin_editing_puts_cursor_at_end(state):
    state.url = "example.com"
    state.begin_editing(Field.URL)
    assert state.cursor_position == len("example.com")
    assert state.input_mode.field is Field.URL


def test_typing_inserts_at_cursor(state):
    ed = _editor(state)
    state.url = "ac"
    state.begin_editing(Field.URL)
    ed.handle_key(Field.URL, curses.KEY_LEFT)
    ed.handle_key(Field.URL, ord("b"))
    assert state.url == "abc"
    assert state.cursor_position == 2


def test_esc_leaves_editing_and_resets_cursor(state):
    ed = _editor(state)
    state.url = "abc"
    state.begin_editing(Field.URL)
    ed.handle_key(Field.URL, KEY_ESC)
    assert not state.input_mode.is_editing
    assert state.cursor_position == 0
    assert state.url == "abc"


def test_backspace_at_start_is_noop(state):
    ed = _editor(state)
    state.url = "abc"
    state.begin_editing(Field.URL)
    ed.handle_key(Field.URL, curses.KEY_HOME)
    ed.handle_key(Field.URL, curses.KEY_BACKSPACE)
    assert state.url == "abc"
    assert state.cursor_position == 0


def test_right_at_end_is_noop(state):
    ed = _editor(state)
    state.url = "abc"
    state.begin_editing(Field.URL)
    ed.handle_key(Field.URL, curses.KEY_RIGHT)
    assert state.cursor_position == 3


@pytest.mark.parametrize("seed", range(5))
def test_cursor_stays_within_text(state, seed):
    rng = random.Random(seed)
    ed = _editor(state)
    keys = [
        curses.KEY_LEFT,
        curses.KEY_RIGHT,
        curses.KEY_HOME,
        curses.KEY_END,
        curses.KEY_BACKSPACE,
        127,
        ord("x"),
        ord("/"),
        10,
        KEY_TAB,
    ]
    for field in (Field.URL, Field.REQUEST_BODY):
        state.begin_editing(field)
        for _ in range(200):
            ed.handle_key(field, rng.choice(keys))
            if not state.input_mode.is_editing:
                state.begin_editing(field)
            assert 0 <= state.cursor_position <= len(state.field_text(field))


def test_body_enter_inserts_newline_and_updates_content_length(state):
    ed = _editor(state)
    state.begin_editing(Field.REQUEST_BODY)
    _type(ed, Field.REQUEST_BODY, "{}")
    ed.handle_key(Field.REQUEST_BODY, 10)
    assert state.body == "{}\n"
    assert state.headers["Content-Length"] == "3"
    assert state.input_mode.field is Field.REQUEST_BODY


def test_body_tab_inserts_four_spaces(state):
    ed = _editor(state)
    state.begin_editing(Field.REQUEST_BODY)
    ed.handle_key(Field.REQUEST_BODY, KEY_TAB)
    assert state.body == "    "
    assert state.cursor_position == 4


def test_url_enter_and_tab_leave_editing(state):
    ed = _editor(state)
    state.begin_editing(Field.URL)
    ed.handle_key(Field.URL, 10)
    assert not state.input_mode.is_editing
    state.begin_editing(Field.URL)
    ed.handle_key(Field.URL, KEY_TAB)
    assert not state.input_mode.is_editing


def test_sanitize_paste():
    assert sanitize_paste("line1\nline2\tend") == "line1line2end"
    assert sanitize_paste("a\r\nqb") == "aqb"


def test_selection_bounds():
    assert selection_bounds(None, 3, 10) is None
    assert selection_bounds(9, 5, 20) == (5, 9)
    assert selection_bounds(2, 50, 10) == (2, 10)


def test_shift_select_then_copy(state):
    ed = _editor(state)
    state.url = "example.com/path"
    state.begin_editing(Field.URL)
    state.cursor_position = 5
    for _ in range(4):
        ed.handle_key(Field.URL, curses.KEY_SRIGHT)
    assert (state.selection_start, state.cursor_position) == (5, 9)

    with patch("subprocess.run") as run:
        ed.handle_key(Field.URL, KEY_CTRL_C)

    run.assert_called_once()
    assert run.call_args.args[0] == ["fake-copy"]
    assert run.call_args.kwargs["input"] == "example.com/path"[5:9]


def test_other_key_clears_selection(state):
    ed = _editor(state)
    state.url = "example.com"
    state.begin_editing(Field.URL)
    ed.handle_key(Field.URL, curses.KEY_SLEFT)
    assert state.selection_start is not None
    ed.handle_key(Field.URL, curses.KEY_LEFT)
    assert state.selection_start is None


def test_paste_sanitizes_and_inserts(state):
    ed = _editor(state)
    state.url = "http://"
    state.begin_editing(Field.URL)

    with patch("subprocess.run") as run:
        run.return_value.stdout = "line1\nline2\tend"
        ed.handle_key(Field.URL, KEY_CTRL_V)

    assert state.url == "http://line1line2end"
    assert state.cursor_position == len(state.url)


def test_paste_replaces_selection(state):
    ed = _editor(state)
    state.url = "http://old.test"
    state.begin_editing(Field.URL)
    state.cursor_position = 7
    for _ in range(3):
        ed.handle_key(Field.URL, curses.KEY_SRIGHT)

    with patch("subprocess.run") as run:
        run.return_value.stdout = "new"
        ed.handle_key(Field.URL, KEY_CTRL_V)

    assert state.url == "http://new.test"
    assert state.cursor_position == 10
    assert state.selection_start is None


def test_paste_failure_leaves_url(state):
    ed = _editor(state)
    state.url = "abc"
    state.begin_editing(Field.URL)

    with patch("subprocess.run", side_effect=FileNotFoundError("fake-paste")):
        ed.handle_key(Field.URL, KEY_CTRL_V)

    assert state.url == "abc"
