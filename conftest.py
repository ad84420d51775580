import pytest

from app_state import AppState
from collection_store import CollectionStore
from history_manager import HistoryManager


def make_state(tmp_path, headers=None, **config):
    cfg = {
        "DEFAULT_URL": "",
        "DEFAULT_HEADERS": dict(headers if headers is not None else {"Accept": "*/*"}),
        "HISTORY_SIZE": 100,
        "TIMEOUT_SECONDS": 5.0,
        "CONNECT_TIMEOUT_SECONDS": 2.0,
        "MAX_RESPONSE_SIZE": 1024 * 1024,
    }
    cfg.update(config)
    history = HistoryManager(str(tmp_path / "history.json"), cfg["HISTORY_SIZE"])
    history.load()
    collections = CollectionStore(str(tmp_path / "collections.json"))
    collections.load()
    return AppState(cfg, history, collections)


@pytest.fixture
def state(tmp_path):
    return make_state(tmp_path)
