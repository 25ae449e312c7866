from .db import get_database_path, get_default_store, open_store
from .models import DB_DEFAULTS, NOTES, USERS, NoteRecord, UserRecord, to_timestamp
from .store import DocumentStore, JsonFileStore, MemoryStore, StorageError

__all__ = [
    "DB_DEFAULTS",
    "NOTES",
    "USERS",
    "DocumentStore",
    "JsonFileStore",
    "MemoryStore",
    "NoteRecord",
    "StorageError",
    "UserRecord",
    "get_database_path",
    "get_default_store",
    "open_store",
    "to_timestamp",
]
