import curses

from fields import CollectionView, Field, HeaderEditState, HttpMethod, NavItem, Overlay
from status_bar import render_status, status_context
from text_field import selection_bounds


class Renderer:
    """Paints the whole screen from ``AppState``. Never mutates the state."""

    PAIR_ACCENT = 1
    PAIR_SUCCESS = 2
    PAIR_ERROR = 3
    PAIR_SELECTION = 4

    def __init__(self, stdscr, layout):
        self.stdscr = stdscr
        self.layout = layout
        try:
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(self.PAIR_ACCENT, curses.COLOR_CYAN, -1)
            curses.init_pair(self.PAIR_SUCCESS, curses.COLOR_GREEN, -1)
            curses.init_pair(self.PAIR_ERROR, curses.COLOR_RED, -1)
            curses.init_pair(self.PAIR_SELECTION, curses.COLOR_BLACK, curses.COLOR_CYAN)
        except curses.error:
            pass

    # ---------- primitives ----------
    def _put(self, y, x, text, width, attr=0):
        if width <= 0:
            return
        try:
            self.stdscr.addnstr(y, x, text, width, attr)
        except curses.error:
            pass

    def _attr(self, pair):
        try:
            return curses.color_pair(pair)
        except curses.error:
            return 0

    def _box(self, rect, title, focused):
        if rect.h < 2 or rect.w < 2:
            return
        attr = self._attr(self.PAIR_ACCENT) | curses.A_BOLD if focused else 0
        top = "┌" + "─" * (rect.w - 2) + "┐"
        bottom = "└" + "─" * (rect.w - 2) + "┘"
        self._put(rect.y, rect.x, top, rect.w, attr)
        for row in range(1, rect.h - 1):
            self._put(rect.y + row, rect.x, "│", 1, attr)
            self._put(rect.y + row, rect.x + rect.w - 1, "│", 1, attr)
        self._put(rect.y + rect.h - 1, rect.x, bottom, rect.w, attr)
        if title:
            self._put(rect.y, rect.x + 2, f" {title} ", rect.w - 4, attr)

    def _clear_rect(self, rect):
        for row in range(rect.h):
            self._put(rect.y + row, rect.x, " " * rect.w, rect.w)

    # ---------- frame ----------
    def draw(self, state):
        self.stdscr.erase()
        self._draw_nav(state)
        self._draw_url_bar(state)
        self._draw_headers(state)
        self._draw_body(state)
        self._draw_response(state)

        if state.overlay is Overlay.METHOD_SELECTOR:
            self._draw_method_selector(state)
        elif state.overlay is Overlay.SAVE_DIALOG:
            self._draw_save_dialog(state)
        elif state.overlay is Overlay.COLLECTIONS:
            self._draw_collections(state)
        elif state.overlay is Overlay.HISTORY:
            self._draw_history(state)

        st_rect = self.layout.status
        self._put(st_rect.y, 0, render_status(status_context(state), st_rect.w), st_rect.w - 1, curses.A_REVERSE)
        self._place_cursor(state)
        self.stdscr.refresh()

    def _draw_nav(self, state):
        rect = self.layout.nav
        focused = state.active_field is Field.NAV_PANEL
        self._box(rect, "curlew", focused)
        for i, item in enumerate(NavItem.all()):
            y = rect.y + 1 + i
            if y >= rect.y + rect.h - 1:
                break
            marker = "> " if item is state.nav_selected else "  "
            attr = curses.A_REVERSE if focused and item is state.nav_selected else 0
            self._put(y, rect.x + 1, f"{marker}{item.value}", rect.w - 2, attr)

    def _draw_url_bar(self, state):
        rect = self.layout.url_bar
        self._box(rect, "Request", state.active_field in (Field.URL, Field.METHOD))
        if rect.h < 3:
            return
        y = rect.y + 1
        x = rect.x + 1
        inner = rect.w - 2

        method = f"[{state.method.value}]"
        m_attr = curses.A_REVERSE if state.active_field is Field.METHOD else curses.A_BOLD
        self._put(y, x, method, inner, m_attr)

        go = "[Go]"
        save = "[+]" if not state.is_request_in_collection() else "[✓]"
        buttons_w = len(go) + len(save) + 2
        url_x, url_w = url_geometry(rect, state)

        text, offset = visible_slice(state.url, state.cursor_position if self._editing(state, Field.URL) else 0, url_w)
        self._put(y, url_x, text, url_w)

        if self._editing(state, Field.URL) and state.selection_start is not None:
            start, end = selection_bounds(state.selection_start, state.cursor_position, len(state.url))
            start = max(start, offset)
            end = min(end, offset + url_w)
            if end > start:
                self._put(y, url_x + start - offset, state.url[start:end], end - start, self._attr(self.PAIR_SELECTION))

        bx = x + inner - buttons_w + 1
        self._put(y, bx, go, len(go), curses.A_REVERSE if state.active_field is Field.SEND_BUTTON else curses.A_BOLD)
        self._put(y, bx + len(go) + 1, save, len(save), curses.A_REVERSE if state.active_field is Field.SAVE_BUTTON else curses.A_BOLD)

    def _draw_headers(self, state):
        rect = self.layout.headers
        focused = state.active_field is Field.HEADERS
        self._box(rect, "Headers", focused)
        rows = header_lines(state)
        inner_h = rect.h - 2
        top = max(0, state.selected_header_index - inner_h + 1)
        for i, (text, selected, enabled) in enumerate(rows[top:top + inner_h]):
            attr = 0 if enabled else curses.A_DIM
            if focused and selected:
                attr |= curses.A_REVERSE
            self._put(rect.y + 1 + i, rect.x + 1, text, rect.w - 2, attr)

    def _draw_body(self, state):
        rect = self.layout.body
        self._box(rect, "Body", state.active_field is Field.REQUEST_BODY)
        lines = state.body.split("\n")
        inner_h = rect.h - 2
        top = 0
        if self._editing(state, Field.REQUEST_BODY):
            row = state.body[: state.cursor_position].count("\n")
            top = max(0, row - inner_h + 1)
        for i, line in enumerate(lines[top:top + inner_h]):
            self._put(rect.y + 1 + i, rect.x + 1, line, rect.w - 2)

    def _draw_response(self, state):
        rect = self.layout.response
        meta = state.response_metadata
        self._box(rect, "Response", False)
        if rect.h < 3:
            return
        x = rect.x + 1
        inner = rect.w - 2
        y = rect.y + 1

        if state.request_in_flight:
            self._put(y, x, "Sending…", inner, self._attr(self.PAIR_ACCENT))
            return
        if meta is not None:
            pair = self.PAIR_SUCCESS if 200 <= meta.status < 400 else self.PAIR_ERROR
            summary = f"{meta.status_text}  {meta.elapsed_ms} ms  {format_size(meta.size_bytes)}"
            self._put(y, x, summary, inner, self._attr(pair) | curses.A_BOLD)
            y += 1
        elif state.response and state.response.startswith("Error:"):
            self._put(y, x, state.response.splitlines()[0], inner, self._attr(self.PAIR_ERROR))
            return

        lines = state.response_lines()
        avail = rect.y + rect.h - 1 - y
        for i, line in enumerate(lines[state.response_scroll:state.response_scroll + avail]):
            self._put(y + i, x, line, inner)

    # ---------- overlays ----------
    def _draw_method_selector(self, state):
        methods = HttpMethod.all()
        rect = self.layout.centered(len(methods) + 2, 16)
        self._clear_rect(rect)
        self._box(rect, "Method", True)
        for i, method in enumerate(methods):
            attr = curses.A_REVERSE if i == state.selector_method_index else 0
            self._put(rect.y + 1 + i, rect.x + 2, method.value, rect.w - 4, attr)

    def _draw_save_dialog(self, state):
        names = state.collections.names()
        rect = self.layout.centered(max(len(names), 1) + 2, 40)
        self._clear_rect(rect)
        self._box(rect, "Save to collection", True)
        if not names:
            self._put(rect.y + 1, rect.x + 2, "No collections", rect.w - 4, curses.A_DIM)
            return
        for i, name in enumerate(names[: rect.h - 2]):
            attr = curses.A_REVERSE if i == state.save_dialog_selected_index else 0
            self._put(rect.y + 1 + i, rect.x + 2, name, rect.w - 4, attr)

    def _draw_collections(self, state):
        rect = self.layout.main
        self._clear_rect(rect)
        if state.collection_view is CollectionView.LIST:
            self._box(rect, "Collections", True)
            names = state.collections.names()
            for i, name in enumerate(names[: rect.h - 3]):
                col = state.collections.get(name)
                label = f"{name} ({len(col.requests)})"
                attr = curses.A_REVERSE if i == state.collection_selected_index else 0
                self._put(rect.y + 1 + i, rect.x + 2, label, rect.w - 4, attr)
        else:
            col = state.collections.get(state.selected_collection)
            self._box(rect, state.selected_collection or "", True)
            requests = col.requests if col is not None else []
            if not requests:
                self._put(rect.y + 1, rect.x + 2, "No saved requests", rect.w - 4, curses.A_DIM)
            for i, req in enumerate(requests[: rect.h - 3]):
                attr = curses.A_REVERSE if i == state.request_selected_index else 0
                self._put(rect.y + 1 + i, rect.x + 2, f"{req.method:<7} {req.url}", rect.w - 4, attr)

        if state.new_collection_name is not None:
            prompt = f"New collection: {state.new_collection_name}"
            self._put(rect.y + rect.h - 2, rect.x + 2, prompt, rect.w - 4, curses.A_BOLD)

    def _draw_history(self, state):
        rect = self.layout.main
        self._clear_rect(rect)
        self._box(rect, "History", True)
        entries = state.history.newest_first()
        if not entries:
            self._put(rect.y + 1, rect.x + 2, "No requests yet", rect.w - 4, curses.A_DIM)
            return
        inner_h = rect.h - 2
        top = max(0, state.history_selected_index - inner_h + 1)
        for i, entry in enumerate(entries[top:top + inner_h]):
            idx = top + i
            status = entry.response.status if entry.response is not None else "ERR"
            label = f"{entry.timestamp[:19]}  {status}  {entry.request.method:<7} {entry.request.url}"
            attr = curses.A_REVERSE if idx == state.history_selected_index else 0
            self._put(rect.y + 1 + i, rect.x + 2, label, rect.w - 4, attr)

    # ---------- cursor ----------
    def _editing(self, state, field):
        return state.input_mode.field is field

    def _place_cursor(self, state):
        field = state.input_mode.field
        try:
            if field is Field.URL:
                rect = self.layout.url_bar
                url_x, url_w = url_geometry(rect, state)
                _, offset = visible_slice(state.url, state.cursor_position, url_w)
                self.stdscr.move(rect.y + 1, url_x + state.cursor_position - offset)
                curses.curs_set(1)
            elif field is Field.REQUEST_BODY:
                rect = self.layout.body
                before = state.body[: state.cursor_position]
                row = before.count("\n")
                col = len(before) - (before.rfind("\n") + 1)
                top = max(0, row - (rect.h - 2) + 1)
                self.stdscr.move(rect.y + 1 + row - top, rect.x + 1 + min(col, rect.w - 3))
                curses.curs_set(1)
            elif state.header_edit_state is not HeaderEditState.SELECTING:
                curses.curs_set(1)
                self._place_header_cursor(state)
            else:
                curses.curs_set(0)
        except curses.error:
            pass

    def _place_header_cursor(self, state):
        rect = self.layout.headers
        inner_h = rect.h - 2
        top = max(0, state.selected_header_index - inner_h + 1)
        y = rect.y + 1 + state.selected_header_index - top
        if state.header_edit_state is HeaderEditState.EDITING_KEY:
            x = rect.x + 5 + state.header_key_cursor
        else:
            x = rect.x + 5 + len(state.header_edit_key) + 2 + state.header_value_cursor
        self.stdscr.move(y, min(x, rect.x + rect.w - 2))


# ---------- text helpers ----------
def visible_slice(text, cursor, width):
    """Window of ``text`` that keeps ``cursor`` on screen; returns (text, offset)."""
    if width <= 0:
        return "", 0
    offset = 0
    if cursor >= width:
        offset = cursor - width + 1
    return text[offset:offset + width], offset


def header_lines(state):
    """(text, selected, enabled) per row, including the trailing add-row."""
    rows = []
    editing = state.header_edit_state is not HeaderEditState.SELECTING
    for i, (key, value, enabled) in enumerate(state.headers_with_enabled()):
        selected = i == state.selected_header_index
        if editing and selected and state.header_edit_original_key == key:
            key, value = state.header_edit_key, state.header_edit_value
        mark = "[x]" if enabled else "[ ]"
        rows.append((f"{mark} {key}: {value}", selected, enabled))

    add_selected = state.selected_header_index == len(state.headers)
    if editing and add_selected and state.header_edit_original_key is None:
        rows.append((f"[x] {state.header_edit_key}: {state.header_edit_value}", True, True))
    else:
        rows.append(("  + add header", add_selected, True))
    return rows


def format_size(n):
    if n < 1024:
        return f"{n} B"
    if n < 1024 * 1024:
        return f"{n / 1024:.1f} KB"
    return f"{n / (1024 * 1024):.1f} MB"


BUTTONS_W = len("[Go]") + len("[+]") + 2


def url_geometry(rect, state):
    """Screen x and width of the URL text between the method and the buttons."""
    method_w = len(state.method.value) + 2
    url_x = rect.x + 1 + method_w + 1
    url_w = max(0, rect.w - 2 - method_w - 1 - BUTTONS_W)
    return url_x, url_w
