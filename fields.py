from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Field(Enum):
    URL = "url"
    SEND_BUTTON = "send_button"
    SAVE_BUTTON = "save_button"
    HEADERS = "headers"
    REQUEST_BODY = "request_body"
    METHOD = "method"
    NAV_PANEL = "nav_panel"
    COLLECTIONS = "collections"
    HISTORY = "history"

    def next(self) -> "Field":
        if self not in _CYCLE:
            return self
        idx = _CYCLE.index(self)
        return _CYCLE[(idx + 1) % len(_CYCLE)]

    def previous(self) -> "Field":
        if self not in _CYCLE:
            return self
        idx = _CYCLE.index(self)
        return _CYCLE[(idx - 1) % len(_CYCLE)]

    @property
    def is_text(self) -> bool:
        return self in (Field.URL, Field.REQUEST_BODY)


# Tab order; overlay fields are entered from the nav panel only
_CYCLE = [
    Field.URL,
    Field.SEND_BUTTON,
    Field.SAVE_BUTTON,
    Field.HEADERS,
    Field.REQUEST_BODY,
    Field.METHOD,
    Field.NAV_PANEL,
]


@dataclass(frozen=True)
class InputMode:
    """Normal navigation when ``field`` is None, otherwise editing ``field``."""

    field: Optional[Field] = None

    @classmethod
    def editing(cls, field: Field) -> "InputMode":
        return cls(field)

    @property
    def is_editing(self) -> bool:
        return self.field is not None

    def __str__(self):
        if self.field is None:
            return "NORMAL"
        return f"EDIT:{self.field.name}"


InputMode.NORMAL = InputMode()


class HttpMethod(Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"

    @classmethod
    def all(cls) -> list["HttpMethod"]:
        return list(cls)

    @classmethod
    def parse(cls, text, default=None):
        if isinstance(text, str):
            try:
                return cls(text.strip().upper())
            except ValueError:
                pass
        return cls.GET if default is None else default


class NavItem(Enum):
    COLLECTIONS = "Collections"
    HISTORY = "History"
    QUIT = "Quit"

    @classmethod
    def all(cls) -> list["NavItem"]:
        return list(cls)


class HeaderEditState(Enum):
    SELECTING = "selecting"
    EDITING_KEY = "editing_key"
    EDITING_VALUE = "editing_value"


class CollectionView(Enum):
    LIST = "list"
    REQUESTS = "requests"


class Overlay(Enum):
    NONE = "none"
    METHOD_SELECTOR = "method_selector"
    SAVE_DIALOG = "save_dialog"
    COLLECTIONS = "collections"
    HISTORY = "history"
