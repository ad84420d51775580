import curses
import logging

from fields import CollectionView, Field, Overlay
from text_field import BACKSPACE_KEYS, ENTER_KEYS, KEY_ESC, as_text, is_printable

logger = logging.getLogger(__name__)


class CollectionBrowser:
    """Collections overlay: a list of collections, then the requests inside one."""

    def __init__(self, state):
        self.state = state

    def open(self):
        st = self.state
        st.open_overlay(Overlay.COLLECTIONS)
        st.collection_view = CollectionView.LIST
        st.collection_selected_index = 0
        st.request_selected_index = 0
        st.active_field = Field.COLLECTIONS

    def close(self):
        st = self.state
        st.close_overlay()
        st.collection_view = CollectionView.LIST
        st.active_field = Field.NAV_PANEL

    def selected_requests(self):
        st = self.state
        col = st.collections.get(st.selected_collection) if st.selected_collection else None
        return col.requests if col is not None else []

    def handle_key(self, ch) -> bool:
        st = self.state
        if st.new_collection_name is not None:
            self._handle_name_prompt(ch)
            return True

        if st.collection_view is CollectionView.LIST:
            self._handle_list(ch)
        else:
            self._handle_requests(ch)
        # overlay swallows everything else
        return True

    # ---------- list view ----------
    def _handle_list(self, ch):
        st = self.state
        count = len(st.collections)

        if ch == KEY_ESC:
            self.close()
        elif ch in ENTER_KEYS:
            name = st.collections.name_at(st.collection_selected_index)
            if name is not None:
                st.selected_collection = name
                st.collection_view = CollectionView.REQUESTS
                st.request_selected_index = 0
        elif ch == curses.KEY_UP:
            st.collection_selected_index = max(0, st.collection_selected_index - 1)
        elif ch == curses.KEY_DOWN:
            if count > 0:
                st.collection_selected_index = (st.collection_selected_index + 1) % count
        elif ch == ord("n"):
            st.new_collection_name = ""
        elif ch == ord("d"):
            name = st.collections.name_at(st.collection_selected_index)
            if name is not None:
                st.collections.delete(name)
                logger.info("Deleted collection %r", name)
                if st.selected_collection == name:
                    st.selected_collection = None
                st.set_status(f"Deleted collection '{name}'", 3)
            st.collection_selected_index = max(
                0, min(st.collection_selected_index, len(st.collections) - 1)
            )

    # ---------- requests view ----------
    def _handle_requests(self, ch):
        st = self.state
        requests = self.selected_requests()

        if ch == KEY_ESC:
            st.collection_view = CollectionView.LIST
            st.selected_collection = None
            st.request_selected_index = 0
        elif ch in ENTER_KEYS:
            if 0 <= st.request_selected_index < len(requests):
                req = requests[st.request_selected_index]
                st.load_request(req.method, req.url, req.headers, req.body)
                st.close_overlay()
                st.collection_view = CollectionView.LIST
                st.active_field = Field.URL
                st.set_status(f"Loaded {req.name}", 2)
        elif ch == curses.KEY_UP:
            st.request_selected_index = max(0, st.request_selected_index - 1)
        elif ch == curses.KEY_DOWN:
            if requests:
                st.request_selected_index = (st.request_selected_index + 1) % len(requests)
        elif ch == ord("d"):
            if st.collections.delete_request(st.selected_collection, st.request_selected_index):
                remaining = len(self.selected_requests())
                st.request_selected_index = max(
                    0, min(st.request_selected_index, remaining - 1)
                )

    # ---------- new collection prompt ----------
    def _handle_name_prompt(self, ch):
        st = self.state
        if ch == KEY_ESC:
            st.new_collection_name = None
            return
        if ch in ENTER_KEYS:
            name = st.new_collection_name.strip()
            if not name:
                st.set_status("Name required", 3)
                return
            if st.collections.create(name):
                st.collection_selected_index = st.collections.names().index(name)
                st.set_status(f"Created collection '{name}'", 3)
            else:
                st.set_status("Collection already exists", 3)
            st.new_collection_name = None
            return
        if ch in BACKSPACE_KEYS:
            st.new_collection_name = st.new_collection_name[:-1]
            return
        if is_printable(ch):
            st.new_collection_name += as_text(ch)


class HistoryBrowser:
    """History overlay. Index 0 is the most recent exchange."""

    def __init__(self, state):
        self.state = state

    def open(self):
        st = self.state
        st.open_overlay(Overlay.HISTORY)
        st.history_selected_index = 0
        st.active_field = Field.HISTORY

    def handle_key(self, ch) -> bool:
        st = self.state
        entries = st.history.newest_first()

        if ch == KEY_ESC:
            st.close_overlay()
            st.active_field = Field.NAV_PANEL
        elif ch in ENTER_KEYS:
            if 0 <= st.history_selected_index < len(entries):
                req = entries[st.history_selected_index].request
                st.load_request(req.method, req.url, req.headers, req.body)
                st.close_overlay()
                st.active_field = Field.URL
        elif ch == curses.KEY_UP:
            st.history_selected_index = max(0, st.history_selected_index - 1)
        elif ch == curses.KEY_DOWN:
            if entries:
                st.history_selected_index = (st.history_selected_index + 1) % len(entries)
        return True
