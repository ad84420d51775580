import json
import logging
import os
import shutil

logger = logging.getLogger(__name__)

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "curlew")
HISTORY_PATH = os.path.join(CONFIG_DIR, "history.json")
COLLECTIONS_PATH = os.path.join(CONFIG_DIR, "collections.json")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")
LOG_PATH = os.path.join(CONFIG_DIR, "curlew.log")

# default settings
DEFAULT_URL_DEFAULT = ""
HISTORY_SIZE_DEFAULT = 100
TIMEOUT_SECONDS_DEFAULT = 30.0
CONNECT_TIMEOUT_SECONDS_DEFAULT = 10.0
MAX_RESPONSE_SIZE_DEFAULT = 10 * 1024 * 1024
LOG_LEVEL_DEFAULT = "WARNING"
DEFAULT_HEADERS_DEFAULT = {
    "Content-Type": "application/json",
    "Accept": "*/*",
    "Accept-Encoding": "gzip, deflate",
    "User-Agent": "curlew/1.0",
    "Connection": "keep-alive",
    "Content-Length": "<calculated>",
    "Host": "<from url>",
    "Random-Token": "<generated>",
}

# (copy argv, paste argv) pairs probed in order when nothing is configured
CLIPBOARD_TOOLS = [
    (["wl-copy"], ["wl-paste", "--no-newline"]),
    (["xclip", "-selection", "clipboard"], ["xclip", "-selection", "clipboard", "-o"]),
    (["pbcopy"], ["pbpaste"]),
]


def ensure_config_dirs():
    os.makedirs(CONFIG_DIR, exist_ok=True)
    if not os.path.exists(CONFIG_JSON):
        try:
            with open(CONFIG_JSON, "w", encoding="utf-8") as f:
                json.dump(default_config_document(), f, indent=2)
        except OSError as e:
            logger.warning("Could not write default config %s: %s", CONFIG_JSON, e)


def default_config_document():
    return {
        "default_url": DEFAULT_URL_DEFAULT,
        "history_size": HISTORY_SIZE_DEFAULT,
        "timeout_seconds": TIMEOUT_SECONDS_DEFAULT,
        "connect_timeout_seconds": CONNECT_TIMEOUT_SECONDS_DEFAULT,
        "max_response_size": MAX_RESPONSE_SIZE_DEFAULT,
        "log_level": LOG_LEVEL_DEFAULT,
        "default_headers": dict(DEFAULT_HEADERS_DEFAULT),
    }


def detect_clipboard_commands():
    for copy_cmd, paste_cmd in CLIPBOARD_TOOLS:
        if shutil.which(copy_cmd[0]) and shutil.which(paste_cmd[0]):
            return list(copy_cmd), list(paste_cmd)
    return None, None


def _is_argv(value):
    return (
        isinstance(value, list)
        and bool(value)
        and all(isinstance(item, str) for item in value)
    )


def _positive_number(value, default):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if value <= 0:
        return default
    return value


def load_config():
    cfg = {
        "DEFAULT_URL": DEFAULT_URL_DEFAULT,
        "DEFAULT_HEADERS": dict(DEFAULT_HEADERS_DEFAULT),
        "HISTORY_SIZE": HISTORY_SIZE_DEFAULT,
        "TIMEOUT_SECONDS": TIMEOUT_SECONDS_DEFAULT,
        "CONNECT_TIMEOUT_SECONDS": CONNECT_TIMEOUT_SECONDS_DEFAULT,
        "MAX_RESPONSE_SIZE": MAX_RESPONSE_SIZE_DEFAULT,
        "LOG_LEVEL": LOG_LEVEL_DEFAULT,
        "CLIPBOARD_COPY_COMMAND": None,
        "CLIPBOARD_PASTE_COMMAND": None,
    }

    if os.path.exists(CONFIG_JSON):
        try:
            with open(CONFIG_JSON, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable config %s: %s", CONFIG_JSON, e)
            data = None

        if isinstance(data, dict):
            url = data.get("default_url")
            if isinstance(url, str):
                cfg["DEFAULT_URL"] = url

            headers = data.get("default_headers")
            if isinstance(headers, dict):
                cfg["DEFAULT_HEADERS"] = {
                    str(k): str(v)
                    for k, v in headers.items()
                    if isinstance(k, str) and k.strip()
                }

            size = data.get("history_size")
            if isinstance(size, int) and not isinstance(size, bool) and size > 0:
                cfg["HISTORY_SIZE"] = size

            cfg["TIMEOUT_SECONDS"] = _positive_number(
                data.get("timeout_seconds"), TIMEOUT_SECONDS_DEFAULT
            )
            cfg["CONNECT_TIMEOUT_SECONDS"] = _positive_number(
                data.get("connect_timeout_seconds"), CONNECT_TIMEOUT_SECONDS_DEFAULT
            )
            cfg["MAX_RESPONSE_SIZE"] = int(
                _positive_number(data.get("max_response_size"), MAX_RESPONSE_SIZE_DEFAULT)
            )

            level = data.get("log_level")
            if isinstance(level, str) and level.strip():
                cfg["LOG_LEVEL"] = level.strip().upper()

            clip = data.get("clipboard")
            if isinstance(clip, dict):
                if _is_argv(clip.get("copy_command")):
                    cfg["CLIPBOARD_COPY_COMMAND"] = clip["copy_command"]
                if _is_argv(clip.get("paste_command")):
                    cfg["CLIPBOARD_PASTE_COMMAND"] = clip["paste_command"]

    # connect timeout never exceeds the overall budget
    cfg["CONNECT_TIMEOUT_SECONDS"] = min(
        cfg["CONNECT_TIMEOUT_SECONDS"], cfg["TIMEOUT_SECONDS"]
    )
    return cfg


def default_headers(cfg) -> dict[str, str]:
    return dict(cfg.get("DEFAULT_HEADERS") or {})
