from __future__ import annotations
import hashlib
import os
import tempfile
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from config.paths import get_paths

# leaves room for the ".json" suffix and mkstemp's prefix/suffix under NAME_MAX
MAX_NAME = 200


def key_filename(key: str) -> str:
    """Map any key to a single safe path component.

    Keys are percent-encoded, so separators never survive. Names that would
    grow past ``MAX_NAME`` keep a readable head and end in a sha256 digest.
    """
    name = quote(key, safe="")
    if len(name) > MAX_NAME:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        name = f"{name[:MAX_NAME - len(digest) - 1]}-{digest}"
    return name


class JsonFileStorage:
    """One JSON file per key. Writes go through a temp file and ``os.replace``."""
    def __init__(self, root: Optional[Path] = None):
        self.root = Path(root) if root is not None else get_paths().timers_root

    def _path(self, key: str) -> Path:
        return self.root / f"{key_filename(key)}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=f".{path.stem}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
