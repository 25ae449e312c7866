import os
import threading
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .store import JsonFileStore

DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "data" / "db.json"

_default_store: Optional[JsonFileStore] = None
_default_store_lock = threading.Lock()


# PUBLIC_INTERFACE
def get_database_path() -> Path:
    """
    Retrieves the JSON document location from the DB_PATH environment variable,
    falling back to data/db.json at the project root.
    """
    load_dotenv()
    db_path = os.getenv("DB_PATH")
    return Path(db_path) if db_path else DEFAULT_DB_PATH


# PUBLIC_INTERFACE
def open_store(path=None) -> JsonFileStore:
    """Opens (creating if needed) the JSON document at `path` or the configured location."""
    return JsonFileStore(path or get_database_path())


# PUBLIC_INTERFACE
def get_default_store() -> JsonFileStore:
    """Process-wide store, opened on first use."""
    global _default_store
    with _default_store_lock:
        if _default_store is None:
            _default_store = open_store()
        return _default_store
