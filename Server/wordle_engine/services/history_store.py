"""
Score History Storage

Persists completed-round ScoreRecords under a fixed namespace key. Every
backend fails soft: unreadable, missing or malformed data loads as an empty
history and failed writes are logged and skipped, so the game stays playable
without persistence.
"""

import itertools
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pymongo.errors import PyMongoError
from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi

from ..config.game_settings import HISTORY_NAMESPACE
from ..models.game import ScoreRecord
from ..utils.game_logger import game_logger


def merge_history(existing: Iterable[ScoreRecord], incoming: Iterable[ScoreRecord]) -> List[ScoreRecord]:
    """
    Union of two histories, de-duplicated by timestamp and ordered by it.

    The first record seen for a timestamp wins, so merging the same records
    again never changes the result.
    """
    by_timestamp: Dict[int, ScoreRecord] = {}
    for record in itertools.chain(existing, incoming):
        by_timestamp.setdefault(record.timestamp, record)
    return sorted(by_timestamp.values(), key=lambda record: record.timestamp)


def parse_history(raw: Any) -> List[ScoreRecord]:
    """
    Parse a persisted history value.

    Raises:
        ValueError: If the value is not a list of score entries
    """
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError(f"Score history must be a list, got {type(raw).__name__}")
    return [ScoreRecord.from_dict(entry) for entry in raw]


def serialize_history(records: Iterable[ScoreRecord]) -> List[Dict[str, Any]]:
    return [record.to_dict() for record in records]


class HistoryStore:
    """Key-value style score history store bound to one namespace."""

    backend = "base"

    def __init__(self, namespace: str = HISTORY_NAMESPACE):
        self.namespace = namespace

    def load_history(self) -> List[ScoreRecord]:
        raise NotImplementedError

    def save_history(self, records: Iterable[ScoreRecord]) -> bool:
        raise NotImplementedError

    def _log_failure(self, operation: str, error: Exception):
        game_logger.log_storage_error(operation, error, self.namespace, self.backend)


class InMemoryHistoryStore(HistoryStore):
    """Process-local store, used when persistence is disabled."""

    backend = "memory"

    def __init__(self, namespace: str = HISTORY_NAMESPACE, data: Optional[Dict[str, Any]] = None):
        super().__init__(namespace)
        self.data: Dict[str, Any] = data if data is not None else {}
        self._lock = threading.Lock()

    def load_history(self) -> List[ScoreRecord]:
        with self._lock:
            raw = self.data.get(self.namespace)
        try:
            return parse_history(raw)
        except ValueError as e:
            self._log_failure('load_history', e)
            return []

    def save_history(self, records: Iterable[ScoreRecord]) -> bool:
        with self._lock:
            self.data[self.namespace] = serialize_history(records)
        return True


class JsonFileHistoryStore(HistoryStore):
    """
    JSON file holding an object of namespace -> records.

    Other namespaces in the same file are preserved on write. Writes go
    through a temporary file and an atomic rename.
    """

    backend = "file"

    def __init__(self, path: str, namespace: str = HISTORY_NAMESPACE):
        super().__init__(namespace)
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"History file must contain an object, got {type(data).__name__}")
        return data

    def load_history(self) -> List[ScoreRecord]:
        with self._lock:
            try:
                return parse_history(self._read_all().get(self.namespace))
            except (OSError, ValueError, RecursionError) as e:
                self._log_failure('load_history', e)
                return []

    def save_history(self, records: Iterable[ScoreRecord]) -> bool:
        with self._lock:
            try:
                data = self._read_all()
            except (OSError, ValueError, RecursionError) as e:
                # Corrupt file is replaced
                self._log_failure('read_before_save', e)
                data = {}

            data[self.namespace] = serialize_history(records)

            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), suffix='.tmp')
                try:
                    with os.fdopen(fd, 'w', encoding='utf-8') as f:
                        json.dump(data, f, indent=2)
                    os.replace(tmp_path, self.path)
                finally:
                    if os.path.exists(tmp_path):
                        os.remove(tmp_path)
            except OSError as e:
                self._log_failure('save_history', e)
                return False

            return True


class MongoHistoryStore(HistoryStore):
    """
    MongoDB document per namespace: {_id: namespace, records: [...]}.

    Either a connection string or a ready collection can be given.
    """

    backend = "mongo"

    def __init__(self,
                 mongo_uri: Optional[str] = None,
                 namespace: str = HISTORY_NAMESPACE,
                 collection=None,
                 database: str = "wordle_game",
                 collection_name: str = "score_history"):
        super().__init__(namespace)
        if collection is None:
            if not mongo_uri:
                raise ValueError("MongoHistoryStore requires a mongo_uri or a collection")
            self.client = MongoClient(mongo_uri, server_api=ServerApi('1'), serverSelectionTimeoutMS=2000)
            collection = self.client[database][collection_name]
        self.collection = collection

    def load_history(self) -> List[ScoreRecord]:
        try:
            document = self.collection.find_one({"_id": self.namespace})
            return parse_history(document.get("records") if document else None)
        except (PyMongoError, ValueError) as e:
            self._log_failure('load_history', e)
            return []

    def save_history(self, records: Iterable[ScoreRecord]) -> bool:
        try:
            self.collection.replace_one(
                {"_id": self.namespace},
                {"_id": self.namespace, "records": serialize_history(records)},
                upsert=True
            )
            return True
        except PyMongoError as e:
            self._log_failure('save_history', e)
            return False


def build_history_store(settings: Mapping[str, Any]) -> HistoryStore:
    """
    Create the history store selected by HISTORY_BACKEND.

    A Mongo backend that cannot be configured falls back to memory so the
    game still runs.
    """
    backend = str(settings.get('HISTORY_BACKEND', 'file')).lower()
    namespace = settings.get('HISTORY_NAMESPACE') or HISTORY_NAMESPACE

    if backend == 'memory':
        return InMemoryHistoryStore(namespace)

    if backend == 'mongo':
        try:
            return MongoHistoryStore(settings.get('MONGO_URI'), namespace)
        except (PyMongoError, ValueError) as e:
            game_logger.log_storage_error('connect', e, namespace, 'mongo')
            return InMemoryHistoryStore(namespace)

    if backend == 'file':
        return JsonFileHistoryStore(settings.get('HISTORY_PATH', 'data/score_history.json'), namespace)

    raise ValueError(f"Unknown history backend '{backend}'. Must be one of: file, mongo, memory")
