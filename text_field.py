import curses

from fields import Field

KEY_ESC = 27
KEY_TAB = 9
KEY_CTRL_C = 3
KEY_CTRL_V = 22
ENTER_KEYS = (10, 13, curses.KEY_ENTER)
BACKSPACE_KEYS = (curses.KEY_BACKSPACE, 127, 8)
BODY_INDENT = "    "


# ---------- buffer primitives ----------
def clamp(cursor: int, text: str) -> int:
    return max(0, min(cursor, len(text)))


def insert(text: str, cursor: int, s: str):
    cursor = clamp(cursor, text)
    return text[:cursor] + s + text[cursor:], cursor + len(s)


def backspace(text: str, cursor: int):
    cursor = clamp(cursor, text)
    if cursor == 0:
        return text, 0
    return text[: cursor - 1] + text[cursor:], cursor - 1


def selection_bounds(anchor, cursor, length):
    """Normalized (start, end) of a selection, or None without an anchor."""
    if anchor is None:
        return None
    start, end = sorted((anchor, cursor))
    return max(0, min(start, length)), max(0, min(end, length))


def sanitize_paste(text: str) -> str:
    # "\nq" first so a pasted trailing line cannot start with a stray quit key
    return (
        text.replace("\nq", "q")
        .replace("\n", "")
        .replace("\r", "")
        .replace("\t", "")
    )


def is_printable(ch) -> bool:
    """Typed text: a one-character str, or an int below the curses key-code range."""
    if isinstance(ch, str):
        return len(ch) == 1 and ch.isprintable()
    if ch < 32 or ch == 127:
        return False
    if 0x80 <= ch < 0xA0:
        return False
    return ch < 256


def as_text(ch) -> str:
    return ch if isinstance(ch, str) else chr(ch)


class TextFieldEditor:
    """Editing-mode keys for the URL and request body fields."""

    def __init__(self, state, clipboard=None):
        self.state = state
        self.clipboard = clipboard

    def handle_key(self, field: Field, ch) -> bool:
        st = self.state

        if field is Field.URL:
            if ch in (curses.KEY_SLEFT, curses.KEY_SRIGHT):
                self._extend_selection(ch)
                return True
            if ch == KEY_CTRL_C:
                self.copy_selection()
                return True
            if ch == KEY_CTRL_V:
                self.paste()
                return True

        # selection lives only while shift-moving
        st.selection_start = None

        if ch == KEY_ESC:
            st.end_editing()
            return True

        if ch in ENTER_KEYS:
            if field is Field.REQUEST_BODY:
                self._insert(field, "\n")
                st.update_request_body(st.body)
            else:
                st.end_editing()
            return True

        if ch == KEY_TAB:
            if field is Field.REQUEST_BODY:
                self._insert(field, BODY_INDENT)
            else:
                st.end_editing()
            return True

        if ch in BACKSPACE_KEYS:
            text, cursor = backspace(st.field_text(field), st.cursor_position)
            st.set_field_text(field, text)
            st.cursor_position = cursor
            return True

        text = st.field_text(field)
        if ch == curses.KEY_RIGHT:
            st.cursor_position = clamp(st.cursor_position + 1, text)
            return True
        if ch == curses.KEY_LEFT:
            st.cursor_position = clamp(st.cursor_position - 1, text)
            return True
        if ch == curses.KEY_HOME:
            st.cursor_position = 0
            return True
        if ch == curses.KEY_END:
            st.cursor_position = len(text)
            return True

        if is_printable(ch):
            self._insert(field, as_text(ch))
            return True

        st.cursor_position = clamp(st.cursor_position, text)
        return False

    # ---------- internals ----------
    def _insert(self, field, s):
        st = self.state
        text, cursor = insert(st.field_text(field), st.cursor_position, s)
        st.set_field_text(field, text)
        st.cursor_position = cursor

    def _extend_selection(self, ch):
        st = self.state
        if st.selection_start is None:
            st.selection_start = st.cursor_position
        if ch == curses.KEY_SLEFT:
            st.cursor_position = clamp(st.cursor_position - 1, st.url)
        else:
            st.cursor_position = clamp(st.cursor_position + 1, st.url)

    def copy_selection(self) -> bool:
        st = self.state
        bounds = selection_bounds(st.selection_start, st.cursor_position, len(st.url))
        if bounds is None or self.clipboard is None:
            return False
        start, end = bounds
        return self.clipboard.copy(st.url[start:end])

    def paste(self) -> bool:
        st = self.state
        if self.clipboard is None:
            return False
        text = self.clipboard.paste()
        if text is None:
            return False
        safe = sanitize_paste(text)
        bounds = selection_bounds(st.selection_start, st.cursor_position, len(st.url))
        if bounds is not None:
            start, end = bounds
            st.url = st.url[:start] + safe + st.url[end:]
            st.cursor_position = start + len(safe)
        else:
            st.url, st.cursor_position = insert(st.url, st.cursor_position, safe)
        st.selection_start = None
        return True
