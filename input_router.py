import curses
import logging

from collection_browser import CollectionBrowser, HistoryBrowser
from dialogs import MethodSelector, SaveDialog
from fields import Field, NavItem, Overlay
from header_editor import HeaderEditor
from text_field import ENTER_KEYS, KEY_TAB, TextFieldEditor

logger = logging.getLogger(__name__)

RESPONSE_PAGE = 10


class InputRouter:
    """Routes every key to exactly one handler.

    Editing mode goes straight to the text field editor. In normal mode the
    guards in ``self.handlers`` are checked in order and the first match owns
    the key, so an open overlay swallows keys like Tab before field
    navigation ever sees them. ``handle_key`` returns True when the app
    should quit.
    """

    def __init__(self, state, sender=None, clipboard=None):
        self.state = state
        self.sender = sender
        self.text = TextFieldEditor(state, clipboard)
        self.headers = HeaderEditor(state)
        self.method_selector = MethodSelector(state)
        self.save_dialog = SaveDialog(state)
        self.collections = CollectionBrowser(state)
        self.history = HistoryBrowser(state)

        # (guard, handler) in priority order; handler returns True if consumed
        self.handlers = [
            (lambda: self.state.overlay is Overlay.COLLECTIONS, self.collections.handle_key),
            (lambda: self.state.overlay is Overlay.METHOD_SELECTOR, self.method_selector.handle_key),
            (lambda: self.state.overlay is Overlay.SAVE_DIALOG, self.save_dialog.handle_key),
            (lambda: self.state.overlay is Overlay.HISTORY, self.history.handle_key),
            (lambda: self.state.active_field is Field.HEADERS, self.headers.handle_key),
            (lambda: True, self._handle_generic),
        ]

    def handle_key(self, ch) -> bool:
        st = self.state
        if ch == -1:
            return st.exit_requested

        if st.input_mode.is_editing:
            self.text.handle_key(st.input_mode.field, ch)
            return st.exit_requested

        for guard, handler in self.handlers:
            if guard():
                if handler(ch):
                    break
        return st.exit_requested

    # ---------- generic navigation ----------
    def _handle_generic(self, ch) -> bool:
        st = self.state

        if ch == KEY_TAB:
            st.active_field = st.active_field.next()
            return True
        if ch == curses.KEY_BTAB:
            st.active_field = st.active_field.previous()
            return True

        if ch in ENTER_KEYS:
            self._activate_field()
            return True

        if ch in (curses.KEY_UP, curses.KEY_DOWN):
            if st.active_field is Field.NAV_PANEL:
                items = NavItem.all()
                idx = items.index(st.nav_selected)
                step = -1 if ch == curses.KEY_UP else 1
                st.nav_selected = items[(idx + step) % len(items)]
            return True

        if ch == curses.KEY_NPAGE:
            st.response_scroll += RESPONSE_PAGE
            self._clamp_response_scroll()
            return True
        if ch == curses.KEY_PPAGE:
            st.response_scroll = max(0, st.response_scroll - RESPONSE_PAGE)
            return True

        if ch == ord("q"):
            st.exit_requested = True
            return True

        return False

    def _activate_field(self):
        st = self.state
        field = st.active_field

        if field is Field.SEND_BUTTON:
            if self.sender is not None:
                self.sender.send()
        elif field.is_text:
            st.begin_editing(field)
        elif field is Field.METHOD:
            self.method_selector.open()
        elif field is Field.SAVE_BUTTON:
            self.save_dialog.open()
        elif field is Field.NAV_PANEL:
            if st.nav_selected is NavItem.COLLECTIONS:
                self.collections.open()
            elif st.nav_selected is NavItem.HISTORY:
                self.history.open()
            elif st.nav_selected is NavItem.QUIT:
                logger.debug("Quit selected from navigation panel")
                st.exit_requested = True

    def _clamp_response_scroll(self):
        st = self.state
        lines = len(st.response_lines())
        st.response_scroll = max(0, min(st.response_scroll, lines - 1))
