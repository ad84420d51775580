import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION_NAME = "Default Collection"


class CollectionNotFound(KeyError):
    pass


@dataclass
class SavedRequest:
    name: str
    method: str
    url: str
    headers: dict = field(default_factory=dict)
    body: Optional[str] = None

    def to_dict(self):
        return {
            "name": self.name,
            "request": {
                "method": self.method,
                "url": self.url,
                "headers": dict(self.headers),
                "body": self.body,
            },
        }

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            return None
        req = data.get("request")
        if not isinstance(req, dict) or not isinstance(req.get("url"), str):
            return None
        headers = req.get("headers") if isinstance(req.get("headers"), dict) else {}
        body = req.get("body")
        return cls(
            name=str(data.get("name") or ""),
            method=str(req.get("method") or "GET"),
            url=req["url"],
            headers={str(k): str(v) for k, v in headers.items()},
            body=body if isinstance(body, str) else None,
        )


@dataclass
class Collection:
    name: str
    description: str = ""
    created_at: str = ""
    requests: list = field(default_factory=list)

    def to_dict(self):
        return {
            "info": {
                "name": self.name,
                "description": self.description,
                "created_at": self.created_at,
            },
            "requests": [r.to_dict() for r in self.requests],
        }

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            return None
        info = data.get("info")
        if not isinstance(info, dict) or not isinstance(info.get("name"), str):
            return None
        raw_requests = data.get("requests") if isinstance(data.get("requests"), list) else []
        requests = [SavedRequest.from_dict(r) for r in raw_requests]
        return cls(
            name=info["name"],
            description=str(info.get("description") or ""),
            created_at=str(info.get("created_at") or ""),
            requests=[r for r in requests if r is not None],
        )


def _now():
    return datetime.now(timezone.utc).isoformat()


class CollectionStore:
    """Named groups of saved requests, newest collection first, stored as JSON."""

    def __init__(self, collections_path: str):
        self.collections_path = collections_path
        self.collections: dict[str, Collection] = {}

    def load(self):
        if not os.path.exists(self.collections_path):
            default = Collection(
                DEFAULT_COLLECTION_NAME,
                "Default collection for saved requests",
                _now(),
            )
            self.collections = {default.name: default}
            self.persist()
            return self.collections

        try:
            with open(self.collections_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read collections %s: %s", self.collections_path, e)
            self.collections = {}
            return self.collections

        self.collections = {}
        if not isinstance(data, list):
            logger.warning("Collections file %s is not a list; starting empty", self.collections_path)
            return self.collections
        for item in data:
            col = Collection.from_dict(item)
            if col is not None and col.name not in self.collections:
                self.collections[col.name] = col
        return self.collections

    def persist(self) -> bool:
        try:
            parent = os.path.dirname(self.collections_path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(self.collections_path, "w", encoding="utf-8") as f:
                json.dump([c.to_dict() for c in self.collections.values()], f, indent=2)
            return True
        except OSError as e:
            logger.error("Could not write collections %s: %s", self.collections_path, e)
            return False

    # ---------- queries ----------
    def names(self) -> list[str]:
        return list(self.collections.keys())

    def name_at(self, index: int) -> Optional[str]:
        names = self.names()
        if 0 <= index < len(names):
            return names[index]
        return None

    def get(self, name) -> Optional[Collection]:
        return self.collections.get(name)

    def __len__(self):
        return len(self.collections)

    # ---------- mutations ----------
    def create(self, name: str, description: str = "") -> bool:
        name = (name or "").strip()
        if not name or name in self.collections:
            return False
        col = Collection(name, description, _now())
        # newest first
        self.collections = {name: col, **self.collections}
        self.persist()
        return True

    def save_request(self, collection_name, name, method, url, headers, body) -> bool:
        col = self.collections.get(collection_name)
        if col is None:
            raise CollectionNotFound(collection_name)
        col.requests.append(
            SavedRequest(
                name=name,
                method=method,
                url=url,
                headers=dict(headers or {}),
                body=body,
            )
        )
        return self.persist()

    def delete(self, name) -> bool:
        if self.collections.pop(name, None) is None:
            return False
        self.persist()
        return True

    def delete_request(self, collection_name, index: int) -> bool:
        col = self.collections.get(collection_name)
        if col is None or not (0 <= index < len(col.requests)):
            return False
        del col.requests[index]
        self.persist()
        return True
