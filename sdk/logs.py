from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from config.paths import get_paths

from .config import SDK_CONFIG

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None, to_file: Optional[bool] = None) -> Optional[Path]:
    """Configure root logging once; later calls only adjust the level.

    With ``to_file`` (default ``LAPWATCH_LOG_TO_FILE``) records are also
    appended to ``<logs_root>/lapwatch.log``, whose path is returned.
    """

    resolved = (level or SDK_CONFIG.log_level).upper()
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=resolved, format=LOG_FORMAT)
    root.setLevel(resolved)

    if not (SDK_CONFIG.log_to_file if to_file is None else to_file):
        return None
    path = get_paths().log_file
    target = os.path.abspath(path)
    if not any(isinstance(h, logging.FileHandler) and h.baseFilename == target for h in root.handlers):
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    return path
