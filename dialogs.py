import curses

from fields import HttpMethod, Overlay
from text_field import ENTER_KEYS, KEY_ESC


class MethodSelector:
    def __init__(self, state):
        self.state = state

    def open(self):
        st = self.state
        st.open_overlay(Overlay.METHOD_SELECTOR)
        st.selector_method_index = HttpMethod.all().index(st.method)

    def handle_key(self, ch) -> bool:
        st = self.state
        methods = HttpMethod.all()

        if ch == KEY_ESC:
            st.close_overlay()
            return True

        if ch in ENTER_KEYS:
            if 0 <= st.selector_method_index < len(methods):
                st.method = methods[st.selector_method_index]
            st.close_overlay()
            return True

        if ch == curses.KEY_UP:
            st.selector_method_index = (st.selector_method_index - 1) % len(methods)
        elif ch == curses.KEY_DOWN:
            st.selector_method_index = (st.selector_method_index + 1) % len(methods)
        return True


class SaveDialog:
    """Pick a collection and save the current request into it."""

    def __init__(self, state):
        self.state = state

    def open(self):
        st = self.state
        st.open_overlay(Overlay.SAVE_DIALOG)
        st.save_dialog_selected_index = 0

    def handle_key(self, ch) -> bool:
        st = self.state
        count = len(st.collections)

        if ch == KEY_ESC:
            st.close_overlay()
            st.set_status("Save canceled", 2)
            return True

        if ch in ENTER_KEYS:
            name = st.collections.name_at(st.save_dialog_selected_index)
            if name is not None and st.save_to_collection(name):
                st.selected_collection = name
                st.set_status(f"Saved to {name}", 3)
            st.close_overlay()
            return True

        if count == 0:
            return True
        if ch == curses.KEY_UP:
            st.save_dialog_selected_index = (st.save_dialog_selected_index - 1) % count
        elif ch == curses.KEY_DOWN:
            st.save_dialog_selected_index = (st.save_dialog_selected_index + 1) % count
        return True
