# core/persistence.py

"""
Local persisted state for store caches.

Each entity store saves its cache under a distinct key and rehydrates it
verbatim on the next load (no migrations, no versioning). Keys are grouped
by namespace (the signed-in user's id) so two sessions never share a cache.

Two backends share the same get/set/remove interface:
    • FileStateStorage:   one JSON file per key, used by the app
    • MemoryStateStorage: dict-backed, for tests and throwaway sessions
"""

import json
import os
import re
from pathlib import Path
from threading import Lock
from typing import Any, Optional

from core.logging_config import logger


def _safe_part(value: str) -> str:
    return re.sub(r"[^A-Za-z0-9._-]", "_", value) or "_"


class MemoryStateStorage:
    """Dict-backed storage. Thread-safe for concurrent access."""

    def __init__(self):
        self._data: dict[tuple[str, str], str] = {}
        self._lock = Lock()

    def get_item(self, namespace: str, key: str) -> Optional[Any]:
        with self._lock:
            raw = self._data.get((namespace, key))
        return json.loads(raw) if raw is not None else None

    def set_item(self, namespace: str, key: str, value: Any):
        raw = json.dumps(value, default=str)
        with self._lock:
            self._data[(namespace, key)] = raw

    def remove_item(self, namespace: str, key: str):
        with self._lock:
            self._data.pop((namespace, key), None)

    def keys(self, namespace: str) -> list[str]:
        with self._lock:
            return sorted(k for ns, k in self._data if ns == namespace)


class FileStateStorage:
    """
    One JSON file per (namespace, key):
        <root>/<namespace>/<key>.json

    Writes go to a temp file first and are renamed into place.
    Unreadable files rehydrate as None (the store starts empty).
    """

    def __init__(self, root: str):
        self.root = Path(root)
        self._lock = Lock()

    def _path(self, namespace: str, key: str) -> Path:
        return self.root / _safe_part(namespace) / f"{_safe_part(key)}.json"

    def get_item(self, namespace: str, key: str) -> Optional[Any]:
        path = self._path(namespace, key)
        with self._lock:
            if not path.exists():
                return None
            try:
                return json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.warning(f"Ignoring unreadable state file {path}: {e}")
                return None

    def set_item(self, namespace: str, key: str, value: Any):
        path = self._path(namespace, key)
        raw = json.dumps(value, default=str)
        with self._lock:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(".json.tmp")
            tmp.write_text(raw, encoding="utf-8")
            os.replace(tmp, path)

    def remove_item(self, namespace: str, key: str):
        path = self._path(namespace, key)
        with self._lock:
            try:
                path.unlink()
            except FileNotFoundError:
                pass

    def keys(self, namespace: str) -> list[str]:
        folder = self.root / _safe_part(namespace)
        with self._lock:
            if not folder.is_dir():
                return []
            return sorted(p.stem for p in folder.glob("*.json"))


# Process-wide default, built lazily from settings
_default_storage = None


def get_state_storage():
    """FastAPI dependency: the configured persisted-state backend."""
    global _default_storage
    if _default_storage is None:
        from core.config import settings
        _default_storage = FileStateStorage(settings.STATE_DIR)
    return _default_storage
