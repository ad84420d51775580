from conftest import make_state
from fields import HeaderEditState
from renderer import format_size, header_lines, visible_slice


def test_visible_slice_keeps_cursor_on_screen():
    assert visible_slice("abcdef", 2, 4) == ("abcd", 0)
    assert visible_slice("abcdefgh", 7, 4) == ("efgh", 4)
    assert visible_slice("abc", 0, 0) == ("", 0)


def test_header_lines_mark_disabled_and_add_row(tmp_path):
    st = make_state(tmp_path, headers={"A": "1", "B": "2"})
    st.header_enabled["B"] = False
    rows = header_lines(st)
    assert rows[0] == ("[x] A: 1", True, True)
    assert rows[1] == ("[ ] B: 2", False, False)
    assert rows[2][0].strip() == "+ add header"


def test_header_lines_show_edit_buffer(tmp_path):
    st = make_state(tmp_path, headers={"A": "1"})
    st.selected_header_index = 1
    st.header_edit_state = HeaderEditState.EDITING_VALUE
    st.header_edit_key = "New"
    st.header_edit_value = "v"
    rows = header_lines(st)
    assert rows[-1] == ("[x] New: v", True, True)


def test_format_size():
    assert format_size(12) == "12 B"
    assert format_size(2048) == "2.0 KB"
    assert format_size(3 * 1024 * 1024) == "3.0 MB"
