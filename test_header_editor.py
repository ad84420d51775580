import curses

from conftest import make_state
from fields import HeaderEditState
from header_editor import TEMP_HEADER_PREFIX, HeaderEditor
from text_field import KEY_ESC, KEY_TAB

ENTER = 10


def _type(editor, text):
    for ch in text:
        editor.handle_key(ord(ch))


def _three_headers(tmp_path):
    return make_state(tmp_path, headers={"A": "1", "B": "2", "C": "3"})


def test_toggle_twice_restores_enabled(tmp_path):
    st = _three_headers(tmp_path)
    ed = HeaderEditor(st)
    st.selected_header_index = 1
    ed.handle_key(ord(" "))
    assert st.is_header_enabled("B") is False
    assert "B" not in st.enabled_headers()
    ed.handle_key(ord(" "))
    assert st.is_header_enabled("B") is True
    assert st.headers == {"A": "1", "B": "2", "C": "3"}


def test_add_header_lands_in_sorted_position(tmp_path):
    st = make_state(tmp_path, headers={"Accept": "*/*", "Zeta": "z"})
    ed = HeaderEditor(st)

    ed.handle_key(ord("n"))
    assert st.header_edit_state is HeaderEditState.EDITING_KEY
    _type(ed, "X")
    ed.handle_key(ENTER)
    assert st.header_edit_state is HeaderEditState.EDITING_VALUE
    _type(ed, "Y")
    ed.handle_key(ENTER)

    assert st.header_edit_state is HeaderEditState.SELECTING
    assert st.headers["X"] == "Y"
    assert st.is_header_enabled("X")
    keys = [k for k, _ in st.ordered_headers()]
    assert keys == ["Accept", "X", "Zeta"]
    assert st.selected_header_index == keys.index("X")


def test_delete_first_of_three(tmp_path):
    st = _three_headers(tmp_path)
    ed = HeaderEditor(st)
    st.selected_header_index = 0
    ed.handle_key(ord("d"))
    assert list(st.headers) == ["B", "C"]
    assert st.selected_header_index == 0


def test_delete_on_add_row_is_noop(tmp_path):
    st = _three_headers(tmp_path)
    ed = HeaderEditor(st)
    st.selected_header_index = 3
    ed.handle_key(ord("d"))
    assert len(st.headers) == 3


def test_empty_key_is_discarded(tmp_path):
    st = _three_headers(tmp_path)
    ed = HeaderEditor(st)
    ed.handle_key(ord("n"))
    ed.handle_key(ENTER)
    _type(ed, "value")
    ed.handle_key(ENTER)
    assert st.header_edit_state is HeaderEditState.SELECTING
    assert len(st.headers) == 3
    assert "" not in st.headers


def test_temp_placeholder_key_is_removed_on_commit(tmp_path):
    st = _three_headers(tmp_path)
    temp = f"{TEMP_HEADER_PREFIX}1"
    st.headers[temp] = ""
    ed = HeaderEditor(st)
    st.selected_header_index = [k for k, _ in st.ordered_headers()].index(temp)
    ed.handle_key(ENTER)
    ed.handle_key(ENTER)
    assert temp not in st.headers


def test_rename_drops_original_key(tmp_path):
    st = _three_headers(tmp_path)
    ed = HeaderEditor(st)
    st.selected_header_index = 1
    ed.handle_key(ENTER)
    assert st.header_edit_key == "B"
    ed.handle_key(curses.KEY_BACKSPACE)
    _type(ed, "D")
    ed.handle_key(KEY_TAB)
    ed.handle_key(ENTER)
    assert "B" not in st.headers
    assert st.headers["D"] == "2"
    assert st.selected_header_index == 2


def test_escape_cancels_edit(tmp_path):
    st = _three_headers(tmp_path)
    ed = HeaderEditor(st)
    st.selected_header_index = 0
    ed.handle_key(ENTER)
    _type(ed, "zzz")
    ed.handle_key(KEY_ESC)
    assert st.header_edit_state is HeaderEditState.SELECTING
    assert st.headers == {"A": "1", "B": "2", "C": "3"}


def test_command_letters_are_text_while_editing(tmp_path):
    st = _three_headers(tmp_path)
    ed = HeaderEditor(st)
    ed.handle_key(ord("n"))
    for ch in "ndq ":
        assert ed.handle_key(ord(ch)) is True
    assert st.header_edit_key == "ndq "
    assert len(st.headers) == 3


def test_selection_clamped_to_add_row(tmp_path):
    st = _three_headers(tmp_path)
    ed = HeaderEditor(st)
    for _ in range(10):
        ed.handle_key(curses.KEY_DOWN)
    assert st.selected_header_index == 3
    for _ in range(10):
        ed.handle_key(curses.KEY_UP)
    assert st.selected_header_index == 0


def test_unhandled_key_falls_through_in_selecting(tmp_path):
    st = _three_headers(tmp_path)
    ed = HeaderEditor(st)
    assert ed.handle_key(KEY_TAB) is False
    assert ed.handle_key(ord("q")) is False


def test_non_ascii_characters_go_into_header_buffers(tmp_path):
    st = _three_headers(tmp_path)
    ed = HeaderEditor(st)
    ed.handle_key(ord("n"))
    _type(ed, "X-")
    ed.handle_key("ć")
    ed.handle_key(ENTER)
    ed.handle_key("ą")
    ed.handle_key(ENTER)
    assert st.headers["X-ć"] == "ą"
