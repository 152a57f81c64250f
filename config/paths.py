# config/paths.py
"""
Centralized, cross-platform path management for lapwatch.

Design goals
- Single source of truth for the data and logs locations
- Honors these env vars:
    LAPWATCH_DATA_ROOT, LAPWATCH_LOGS_ROOT
- Sensible OS defaults when env vars are not provided
- Helpers for the subpaths the storage plugins and log file use
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


# ---------- OS defaults (used only if env vars not set) ----------

def _platform_default_base() -> Path:
    """
    Returns an OS-specific base directory for user data, following conventions:
    - Windows: %LOCALAPPDATA%/lapwatch
    - macOS:   ~/Library/Application Support/lapwatch
    - Linux:   ~/.local/share/lapwatch
    """
    if sys.platform.startswith("win"):
        base = os.getenv("LOCALAPPDATA") or os.getenv("APPDATA") or str(Path.home() / "AppData" / "Local")
        return Path(base) / "lapwatch"
    elif sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "lapwatch"
    else:
        return Path(os.getenv("XDG_DATA_HOME", Path.home() / ".local" / "share")) / "lapwatch"


def _env_or_default_data_root() -> Path:
    return Path(os.getenv("LAPWATCH_DATA_ROOT", _platform_default_base() / "data"))


def _env_or_default_logs_root() -> Path:
    return Path(os.getenv("LAPWATCH_LOGS_ROOT", _platform_default_base() / "logs"))


# ---------- Core dataclass ----------

@dataclass(frozen=True)
class Paths:
    """
    Canonical path container for lapwatch.

    Most callers should obtain a singleton instance via get_paths().
    """
    data_root: Path
    logs_root: Path

    @staticmethod
    def from_env() -> "Paths":
        return Paths(_env_or_default_data_root(), _env_or_default_logs_root())

    # ----- standard layout helpers -----

    @property
    def timers_root(self) -> Path:
        # JsonFileStorage writes data_root/timers/<encoded key>.json
        return self.data_root / "timers"

    @property
    def log_file(self) -> Path:
        return self.logs_root / "lapwatch.log"

    # ----- setup -----

    def ensure_all(self) -> None:
        for p in [self.data_root, self.logs_root, self.timers_root]:
            p.mkdir(parents=True, exist_ok=True)


# ---------- Singleton access ----------

_paths_singleton: Optional[Paths] = None

def get_paths(force_refresh: bool = False) -> Paths:
    """
    Return a cached Paths instance.
    """
    global _paths_singleton
    if force_refresh or _paths_singleton is None:
        _paths_singleton = Paths.from_env()
        _paths_singleton.ensure_all()
    return _paths_singleton

