import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from collection_store import CollectionNotFound
from config_paths import default_headers
from fields import (
    CollectionView,
    Field,
    HeaderEditState,
    HttpMethod,
    InputMode,
    NavItem,
    Overlay,
)

logger = logging.getLogger(__name__)


@dataclass
class ResponseMetadata:
    status: int
    status_text: str
    elapsed_ms: int
    size_bytes: int
    response_headers: dict = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class AppState:
    def __init__(self, config, history, collections):
        self.config = config or {}
        self.history = history
        self.collections = collections

        # ---- request ----
        self.url: str = self.config.get("DEFAULT_URL", "") or ""
        self.method = HttpMethod.GET
        self.headers: dict[str, str] = {}
        self.header_enabled: dict[str, bool] = {}
        self.body: str = ""
        for key, value in default_headers(self.config).items():
            self.headers[key] = value
            self.header_enabled[key] = True

        # ---- input ----
        self.input_mode = InputMode.NORMAL
        self.active_field = Field.URL
        self.cursor_position = 0
        self.selection_start: Optional[int] = None
        self.nav_selected = NavItem.COLLECTIONS

        # ---- header editing ----
        self.header_edit_state = HeaderEditState.SELECTING
        self.selected_header_index = 0
        self.header_edit_key = ""
        self.header_edit_value = ""
        self.header_key_cursor = 0
        self.header_value_cursor = 0
        self.header_edit_original_key: Optional[str] = None

        # ---- overlays ----
        self.overlay = Overlay.NONE
        self.collection_view = CollectionView.LIST
        self.selector_method_index = 0
        self.save_dialog_selected_index = 0
        self.collection_selected_index = 0
        self.request_selected_index = 0
        self.history_selected_index = 0
        self.selected_collection: Optional[str] = None
        self.new_collection_name: Optional[str] = None

        # ---- response ----
        self.response: Optional[str] = None
        self.response_metadata: Optional[ResponseMetadata] = None
        self.response_scroll = 0
        self.request_in_flight = False

        # ---- status ----
        self.status_msg: Optional[str] = None
        self.status_msg_until = 0.0
        self.exit_requested = False

    # ---------- overlay flags (derived) ----------
    @property
    def show_method_selector(self) -> bool:
        return self.overlay is Overlay.METHOD_SELECTOR

    @property
    def save_dialog_visible(self) -> bool:
        return self.overlay is Overlay.SAVE_DIALOG

    @property
    def show_collections(self) -> bool:
        return self.overlay is Overlay.COLLECTIONS

    @property
    def show_history(self) -> bool:
        return self.overlay is Overlay.HISTORY

    def open_overlay(self, overlay: Overlay):
        self.overlay = overlay
        if overlay is not Overlay.COLLECTIONS:
            self.new_collection_name = None

    def close_overlay(self):
        self.overlay = Overlay.NONE
        self.new_collection_name = None

    # ---------- headers ----------
    def ordered_headers(self) -> list[tuple[str, str]]:
        return sorted(self.headers.items(), key=lambda kv: kv[0])

    def headers_with_enabled(self) -> list[tuple[str, str, bool]]:
        return [
            (k, v, self.is_header_enabled(k)) for k, v in self.ordered_headers()
        ]

    def is_header_enabled(self, key) -> bool:
        return self.header_enabled.get(key, True)

    def enabled_headers(self) -> dict[str, str]:
        return {k: v for k, v in self.headers.items() if self.is_header_enabled(k)}

    def header_key_at(self, index) -> Optional[str]:
        ordered = self.ordered_headers()
        if 0 <= index < len(ordered):
            return ordered[index][0]
        return None

    def clamp_header_index(self):
        self.selected_header_index = max(
            0, min(self.selected_header_index, len(self.headers))
        )

    def update_request_body(self, new_body: str):
        self.body = new_body
        self.headers["Content-Length"] = str(len(self.body.encode("utf-8")))

    # ---------- text fields ----------
    def field_text(self, field: Field) -> str:
        if field is Field.URL:
            return self.url
        if field is Field.REQUEST_BODY:
            return self.body
        return ""

    def set_field_text(self, field: Field, text: str):
        if field is Field.URL:
            self.url = text
        elif field is Field.REQUEST_BODY:
            self.body = text

    def begin_editing(self, field: Field):
        self.input_mode = InputMode.editing(field)
        self.active_field = field
        self.cursor_position = len(self.field_text(field))
        self.selection_start = None

    def end_editing(self):
        self.input_mode = InputMode.NORMAL
        self.cursor_position = 0
        self.selection_start = None

    # ---------- requests ----------
    def load_request(self, method, url, headers, body):
        self.method = HttpMethod.parse(method)
        self.url = url or ""
        self.headers = dict(headers or {})
        self.header_enabled = {k: True for k in self.headers}
        self.body = body or ""
        self.header_edit_state = HeaderEditState.SELECTING
        self.clamp_header_index()
        self.end_editing()
        self.response_scroll = 0

    def is_request_in_collection(self) -> bool:
        if not self.selected_collection:
            return False
        col = self.collections.get(self.selected_collection)
        if col is None:
            return False
        return any(
            r.method == self.method.value and r.url == self.url for r in col.requests
        )

    def save_to_collection(self, collection_name: str) -> bool:
        request_name = f"{self.method.value} {self.url}"
        try:
            saved = self.collections.save_request(
                collection_name,
                request_name,
                self.method.value,
                self.url,
                dict(self.headers),
                self.body,
            )
        except CollectionNotFound:
            logger.debug("Save skipped, collection not found: %s", collection_name)
            return False
        if not saved:
            self.set_status("Saved in memory only, write failed", 4)
        return True

    # ---------- response ----------
    def response_lines(self) -> list[str]:
        """Rows of the response pane: headers, a blank line, then the body."""
        lines = []
        if self.response_metadata is not None:
            for key, value in self.response_metadata.response_headers.items():
                lines.append(f"{key}: {value}")
            lines.append("")
        if self.response:
            lines.extend(self.response.split("\n"))
        return lines

    # ---------- status ----------
    def set_status(self, msg, seconds=3):
        self.status_msg = msg
        self.status_msg_until = time.time() + seconds

    def current_status(self, now=None) -> Optional[str]:
        now = time.time() if now is None else now
        if self.status_msg and now < self.status_msg_until:
            return self.status_msg
        return None
