import curses
import os
import sys

# Make ESC snappy
os.environ.setdefault("ESCDELAY", "25")
from config_paths import LOG_PATH, ensure_config_dirs, load_config
from logging_setup import configure_logging
from orchestrator import Orchestrator, build_state
from _version import __version__


def main():
    args = sys.argv[1:]

    if "-v" in args or "-V" in args:
        print(__version__)
        return

    if "-h" in args:
        print("curlew - terminal HTTP client\n\nUsage:\n  curlew\n  curlew -v\n")
        return

    ensure_config_dirs()
    config = load_config()
    configure_logging(LOG_PATH, config.get("LOG_LEVEL"))

    def curses_main(stdscr):
        state = build_state(config)
        Orchestrator(stdscr, state).run()

    curses.wrapper(curses_main)


if __name__ == "__main__":
    main()
