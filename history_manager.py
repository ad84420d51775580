import json
import logging
import os
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass
class RequestRecord:
    url: str
    method: str
    headers: dict = field(default_factory=dict)
    body: Optional[str] = None


@dataclass
class ResponseRecord:
    status: Optional[int]
    status_text: Optional[str]
    headers: dict
    body: str
    time_ms: int
    size_bytes: int


@dataclass
class HistoryEntry:
    timestamp: str
    request: RequestRecord
    response: Optional[ResponseRecord] = None

    @classmethod
    def now(cls, request: RequestRecord, response: Optional[ResponseRecord] = None):
        return cls(datetime.now(timezone.utc).isoformat(), request, response)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            return None
        req = data.get("request")
        if not isinstance(req, dict) or not isinstance(req.get("url"), str):
            return None
        headers = req.get("headers") if isinstance(req.get("headers"), dict) else {}
        body = req.get("body") if isinstance(req.get("body"), str) else None
        request = RequestRecord(
            url=req["url"],
            method=str(req.get("method") or "GET"),
            headers={str(k): str(v) for k, v in headers.items()},
            body=body,
        )
        response = None
        resp = data.get("response")
        if isinstance(resp, dict):
            try:
                response = ResponseRecord(
                    status=resp.get("status"),
                    status_text=resp.get("status_text"),
                    headers=dict(resp.get("headers") or {}),
                    body=str(resp.get("body") or ""),
                    time_ms=int(resp.get("time_ms") or 0),
                    size_bytes=int(resp.get("size_bytes") or 0),
                )
            except (TypeError, ValueError):
                response = None
        return cls(str(data.get("timestamp") or ""), request, response)


class HistoryManager:
    """Capacity-bounded log of past exchanges, oldest first, stored as JSON."""

    def __init__(self, history_path: str, max_items: int = 100):
        self.history_path = history_path
        self.max_items = max(1, max_items)
        self.history: List[HistoryEntry] = []

    def load(self) -> List[HistoryEntry]:
        if not os.path.exists(self.history_path):
            self.history = []
            return self.history
        try:
            with open(self.history_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read history %s: %s", self.history_path, e)
            self.history = []
            return self.history

        if not isinstance(data, list):
            logger.warning("History file %s is not a list; starting empty", self.history_path)
            self.history = []
            return self.history

        entries = [HistoryEntry.from_dict(item) for item in data]
        self.history = [e for e in entries if e is not None][-self.max_items:]
        return self.history

    def append(self, entry: HistoryEntry) -> bool:
        if entry is None:
            return True
        self.history.append(entry)
        if len(self.history) > self.max_items:
            self.history = self.history[-self.max_items:]
        return self.persist()

    def persist(self) -> bool:
        try:
            parent = os.path.dirname(self.history_path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(self.history_path, "w", encoding="utf-8") as f:
                json.dump([e.to_dict() for e in self.history], f, indent=2)
            return True
        except OSError as e:
            logger.error("Could not write history %s: %s", self.history_path, e)
            return False

    def entries(self) -> List[HistoryEntry]:
        return list(self.history)

    def newest_first(self) -> List[HistoryEntry]:
        return list(reversed(self.history))

    def __len__(self):
        return len(self.history)
