import curses
import logging

from fields import HeaderEditState
from text_field import (
    BACKSPACE_KEYS,
    ENTER_KEYS,
    KEY_ESC,
    KEY_TAB,
    as_text,
    backspace,
    clamp,
    insert,
    is_printable,
)

logger = logging.getLogger(__name__)

TEMP_HEADER_PREFIX = "zzz_new_header_"


class HeaderEditor:
    """Selecting / editing-key / editing-value state machine for request headers.

    ``handle_key`` returns True when the key was consumed. While a row is being
    edited every key is consumed, so letters like ``n``, ``d`` or ``q`` become
    text instead of commands.
    """

    def __init__(self, state):
        self.state = state

    def handle_key(self, ch) -> bool:
        st = self.state
        if st.header_edit_state is HeaderEditState.SELECTING:
            return self._handle_selecting(ch)
        return self._handle_editing(ch)

    # ---------- selecting ----------
    def _handle_selecting(self, ch) -> bool:
        if ch == ord("n"):
            self.begin_add()
            return True
        if ch == ord("d"):
            self.delete_selected()
            return True
        if ch == ord(" "):
            self.toggle_selected()
            return True
        if ch == curses.KEY_UP:
            self.select_up()
            return True
        if ch == curses.KEY_DOWN:
            self.select_down()
            return True
        if ch in ENTER_KEYS:
            self.begin_edit()
            return True
        return False

    def select_up(self):
        st = self.state
        st.selected_header_index = max(0, st.selected_header_index - 1)

    def select_down(self):
        st = self.state
        st.selected_header_index = min(len(st.headers), st.selected_header_index + 1)

    def toggle_selected(self):
        st = self.state
        key = st.header_key_at(st.selected_header_index)
        if key is None:
            return
        enabled = not st.is_header_enabled(key)
        st.header_enabled[key] = enabled
        logger.debug("Toggled header %r to %s", key, enabled)

    def begin_add(self):
        st = self.state
        st.selected_header_index = len(st.headers)
        st.header_edit_state = HeaderEditState.EDITING_KEY
        st.header_edit_key = ""
        st.header_edit_value = ""
        st.header_key_cursor = 0
        st.header_value_cursor = 0
        st.header_edit_original_key = None

    def begin_edit(self):
        st = self.state
        key = st.header_key_at(st.selected_header_index)
        if key is None:
            self.begin_add()
            return
        value = st.headers[key]
        st.header_edit_state = HeaderEditState.EDITING_KEY
        st.header_edit_key = key
        st.header_edit_value = value
        st.header_key_cursor = len(key)
        st.header_value_cursor = len(value)
        st.header_edit_original_key = key

    def delete_selected(self):
        st = self.state
        key = st.header_key_at(st.selected_header_index)
        if key is None:
            return
        logger.debug("Deleting header %r", key)
        st.headers.pop(key, None)
        st.header_enabled.pop(key, None)
        if st.selected_header_index > 0:
            st.selected_header_index -= 1
        st.clamp_header_index()

    # ---------- editing ----------
    def _handle_editing(self, ch) -> bool:
        st = self.state
        editing_key = st.header_edit_state is HeaderEditState.EDITING_KEY

        if ch == KEY_ESC:
            self.cancel()
            return True

        if ch in ENTER_KEYS:
            if editing_key:
                self.commit_key()
            else:
                self.commit_value()
            return True

        if ch == KEY_TAB:
            if editing_key:
                self._switch_to_value()
            return True

        if ch == curses.KEY_BTAB:
            if not editing_key:
                st.header_edit_state = HeaderEditState.EDITING_KEY
                st.header_key_cursor = len(st.header_edit_key)
            return True

        text, cursor = self._buffer()
        if ch in BACKSPACE_KEYS:
            text, cursor = backspace(text, cursor)
        elif ch == curses.KEY_LEFT:
            cursor = clamp(cursor - 1, text)
        elif ch == curses.KEY_RIGHT:
            cursor = clamp(cursor + 1, text)
        elif ch == curses.KEY_HOME:
            cursor = 0
        elif ch == curses.KEY_END:
            cursor = len(text)
        elif is_printable(ch):
            text, cursor = insert(text, cursor, as_text(ch))
        self._set_buffer(text, cursor)
        return True

    def commit_key(self):
        st = self.state
        key = st.header_key_at(st.selected_header_index)
        if key is not None and key.startswith(TEMP_HEADER_PREFIX):
            st.headers.pop(key, None)
            st.header_enabled.pop(key, None)
            st.clamp_header_index()
        self._switch_to_value()

    def commit_value(self):
        st = self.state
        key = st.header_edit_key
        if key and not key.startswith(TEMP_HEADER_PREFIX):
            original = st.header_edit_original_key
            if original is not None and original != key:
                st.headers.pop(original, None)
                st.header_enabled.pop(original, None)
            logger.debug("Saving header %r = %r", key, st.header_edit_value)
            st.headers[key] = st.header_edit_value
            st.header_enabled[key] = True
            keys = [k for k, _ in st.ordered_headers()]
            st.selected_header_index = keys.index(key)
        self._reset_edit()

    def cancel(self):
        self._reset_edit()

    # ---------- internals ----------
    def _switch_to_value(self):
        st = self.state
        st.header_edit_state = HeaderEditState.EDITING_VALUE
        st.header_value_cursor = len(st.header_edit_value)

    def _reset_edit(self):
        st = self.state
        st.header_edit_state = HeaderEditState.SELECTING
        st.header_key_cursor = 0
        st.header_value_cursor = 0
        st.header_edit_original_key = None
        st.clamp_header_index()

    def _buffer(self):
        st = self.state
        if st.header_edit_state is HeaderEditState.EDITING_KEY:
            return st.header_edit_key, st.header_key_cursor
        return st.header_edit_value, st.header_value_cursor

    def _set_buffer(self, text, cursor):
        st = self.state
        cursor = clamp(cursor, text)
        if st.header_edit_state is HeaderEditState.EDITING_KEY:
            st.header_edit_key = text
            st.header_key_cursor = cursor
        else:
            st.header_edit_value = text
            st.header_value_cursor = cursor
