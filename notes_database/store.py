"""
Document storage for users and notes.

The whole database is one JSON document holding named collections of
records (plain dicts). Records are selected with exact-match predicates:
a record matches when every key of the predicate is present in it with an
equal value.

Every check-then-write sequence the API needs (insert unless a username is
taken, update or remove a matching note) is a single call here, executed
under the store lock, so call sites never race between the check and the
write.
"""
import copy
import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, List, Optional

from .models import DB_DEFAULTS

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the document cannot be read or written back."""


def _matches(record: dict, predicate: dict) -> bool:
    return all(key in record and record[key] == value for key, value in predicate.items())


# PUBLIC_INTERFACE
class DocumentStore(ABC):
    """
    Storage interface used by the service layer.

    All methods return copies; mutating a returned record never changes
    the stored one.
    """

    @abstractmethod
    def find_one(self, collection: str, predicate: dict) -> Optional[dict]:
        """Return the first record matching `predicate`, or None."""

    @abstractmethod
    def filter(self, collection: str, predicate: dict) -> List[dict]:
        """Return every record matching `predicate`, in storage order."""

    @abstractmethod
    def insert(self, collection: str, record: dict) -> dict:
        """Append `record` to the collection."""

    @abstractmethod
    def insert_if_absent(self, collection: str, predicate: dict, record: dict) -> bool:
        """Append `record` unless a record matches `predicate`. Returns True if inserted."""

    @abstractmethod
    def update(self, collection: str, predicate: dict, changes: dict) -> Optional[dict]:
        """Apply `changes` to the first matching record and return it, or None if no match."""

    @abstractmethod
    def remove(self, collection: str, predicate: dict) -> List[dict]:
        """Delete every matching record and return the removed records."""


# PUBLIC_INTERFACE
class MemoryStore(DocumentStore):
    """
    In-memory store. Subclasses persist the document by overriding `_commit`.
    """

    def __init__(self, data: Optional[Dict[str, list]] = None):
        self._data = copy.deepcopy(DB_DEFAULTS)
        if data:
            self._data.update(copy.deepcopy(data))
        self._lock = threading.RLock()

    def _collection(self, name: str) -> list:
        try:
            return self._data[name]
        except KeyError:
            raise StorageError(f"Unknown collection '{name}'") from None

    def _commit(self) -> None:
        pass

    @contextmanager
    def _mutation(self):
        """Run a mutation, write it back, and restore the previous state if the write fails."""
        with self._lock:
            snapshot = copy.deepcopy(self._data)
            yield
            try:
                self._commit()
            except StorageError:
                self._data = snapshot
                raise

    def find_one(self, collection, predicate):
        with self._lock:
            for record in self._collection(collection):
                if _matches(record, predicate):
                    return copy.deepcopy(record)
        return None

    def filter(self, collection, predicate):
        with self._lock:
            return [
                copy.deepcopy(record)
                for record in self._collection(collection)
                if _matches(record, predicate)
            ]

    def insert(self, collection, record):
        with self._mutation():
            self._collection(collection).append(copy.deepcopy(record))
        return copy.deepcopy(record)

    def insert_if_absent(self, collection, predicate, record):
        with self._lock:
            if self.find_one(collection, predicate) is not None:
                return False
            self.insert(collection, record)
            return True

    def update(self, collection, predicate, changes):
        with self._mutation():
            for record in self._collection(collection):
                if _matches(record, predicate):
                    record.update(copy.deepcopy(changes))
                    updated = copy.deepcopy(record)
                    break
            else:
                updated = None
        return updated

    def remove(self, collection, predicate):
        with self._mutation():
            records = self._collection(collection)
            removed = [r for r in records if _matches(r, predicate)]
            records[:] = [r for r in records if not _matches(r, predicate)]
        return removed


# PUBLIC_INTERFACE
class JsonFileStore(MemoryStore):
    """
    Store backed by a single JSON file.

    The file is created with the default empty collections if it does not
    exist. Each mutation is written back synchronously by writing a
    temporary file next to the target and atomically replacing it.
    """

    def __init__(self, path):
        self.path = Path(path)
        super().__init__(self._load())
        if not self.path.exists():
            with self._lock:
                self._commit()
            logger.info("Created database document at %s", self.path)

    def _load(self) -> Optional[Dict[str, list]]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Could not read database document {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Database document {self.path} is not a JSON object")
        return data

    def _commit(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".db-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(self._data, f, ensure_ascii=False, indent=2)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise StorageError(f"Could not write database document {self.path}: {e}") from e
