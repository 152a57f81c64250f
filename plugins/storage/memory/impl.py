from __future__ import annotations
from threading import Lock
from typing import Dict, Optional

# shared by every MemoryStorage created without its own dict, for the life of the process
_PROCESS_BLOBS: Dict[str, str] = {}


class MemoryStorage:
    """Keeps blobs in a dict; nothing survives the process."""
    def __init__(self, blobs: Optional[Dict[str, str]] = None):
        self._blobs = _PROCESS_BLOBS if blobs is None else blobs
        self._lock = Lock()
    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._blobs.get(key)
    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._blobs[key] = value
    def delete(self, key: str) -> None:
        with self._lock:
            self._blobs.pop(key, None)
