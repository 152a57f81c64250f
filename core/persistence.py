"""Load and save timer state through a pluggable key/value store."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from pydantic import ValidationError

from core.state import TimerState
from sdk.config import PersistOptions
from sdk.registry import REGISTRY

logger = logging.getLogger(__name__)

KEY_PREFIX = "lapwatch-timer-store-"


class Storage(Protocol):
    """Minimal blob store contract implemented by ``plugins/storage/*``."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


def storage_key(timer_id: str) -> str:
    return f"{KEY_PREFIX}{timer_id}"


class TimerPersistence:
    """Serializes a ``TimerState`` under ``lapwatch-timer-store-<id>``.

    Write failures raised by the storage medium propagate unchanged. A stored
    blob that no longer validates is logged and treated as absent.
    """

    def __init__(self, persist: PersistOptions, storage: Optional[Storage] = None) -> None:
        self.persist = persist
        self.storage: Storage = storage if storage is not None else REGISTRY.create_storage(persist.storage)
        self.key = storage_key(persist.id)

    def load(self) -> Optional[TimerState]:
        raw = self.storage.get(self.key)
        if raw is None:
            return None
        try:
            return TimerState.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("ignoring unreadable timer state under %s: %s", self.key, exc)
            return None

    def save(self, state: TimerState) -> None:
        self.storage.set(self.key, state.model_dump_json(by_alias=True))

    def clear(self) -> None:
        self.storage.delete(self.key)


__all__ = ["KEY_PREFIX", "Storage", "TimerPersistence", "storage_key"]
