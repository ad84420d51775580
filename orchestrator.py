# ~/Apps/curlew/orchestrator.py
import curses
import logging

from app_state import AppState
from clipboard import Clipboard
from collection_store import CollectionStore
from config_paths import COLLECTIONS_PATH, HISTORY_PATH, ensure_config_dirs, load_config
from history_manager import HistoryManager
from input_router import InputRouter
from renderer import Renderer
from request_sender import RequestSender
from screen_layout import ScreenLayout

logger = logging.getLogger(__name__)

TICK_MS = 16


def build_state(config=None):
    ensure_config_dirs()
    cfg = config if config is not None else load_config()
    history = HistoryManager(HISTORY_PATH, cfg.get("HISTORY_SIZE", 100))
    history.load()
    collections = CollectionStore(COLLECTIONS_PATH)
    collections.load()
    return AppState(cfg, history, collections)


def read_key(stdscr):
    """Next key, -1 when the tick timed out.

    ASCII (control bytes included) comes back as an int so it compares against
    key codes and ord() literals. Any other typed character stays a str, since
    its code point can collide with the curses KEY_* range.
    """
    try:
        ch = stdscr.get_wch()
    except curses.error:
        return -1
    if isinstance(ch, str):
        if len(ch) != 1:
            return -1
        return ord(ch) if ord(ch) < 128 else ch
    return ch


class Orchestrator:
    def __init__(self, stdscr, app_state):
        self.stdscr = stdscr
        self.state = app_state
        curses.raw()
        self.stdscr.keypad(True)
        self.stdscr.nodelay(False)
        self.stdscr.timeout(TICK_MS)

        H, W = self.stdscr.getmaxyx()
        self.layout = ScreenLayout(H, W)
        self.renderer = Renderer(stdscr, self.layout)
        self.clipboard = Clipboard(app_state.config)
        self.sender = RequestSender(app_state)
        self.router = InputRouter(app_state, sender=self.sender, clipboard=self.clipboard)
        self._shown_status = None

    def redraw(self):
        self._shown_status = self.state.current_status()
        self.renderer.draw(self.state)

    def run(self):
        self.stdscr.clear()
        self.stdscr.refresh()
        self.redraw()
        logger.info("curlew started")

        while True:
            ch = read_key(self.stdscr)
            changed = self.sender.poll()

            if ch == curses.KEY_RESIZE:
                H, W = self.stdscr.getmaxyx()
                self.layout.resize(H, W)
                self.redraw()
                continue

            if ch == -1:
                # repaint when a response lands or a status message expires
                if changed or self.state.current_status() != self._shown_status:
                    self.redraw()
                continue

            if self.router.handle_key(ch):
                break
            self.redraw()

        logger.info("curlew exiting")
