
from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
import os


class PersistOptions(BaseModel):
    """Where a timer's state is kept between runs."""
    id: str = Field(min_length=1)
    storage: str = "local"


class TimerOptions(BaseModel):
    show_ms: bool = False
    update_interval: int = Field(16, gt=0, description="Tick period in milliseconds")
    persist: Optional[PersistOptions] = None


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class AppConfig(BaseModel):
    # env defaults are raw strings; parse and bound them like any other input
    model_config = ConfigDict(validate_default=True)

    show_ms: bool = Field(default_factory=lambda: _env_bool("LAPWATCH_SHOW_MS", False))
    update_interval: int = Field(default_factory=lambda: os.getenv("LAPWATCH_UPDATE_INTERVAL", "16"), gt=0)
    storage: str = Field(default_factory=lambda: os.getenv("LAPWATCH_STORAGE", "local"))
    log_level: str = Field(default_factory=lambda: os.getenv("LAPWATCH_LOG_LEVEL", "WARNING"))
    log_to_file: bool = Field(default_factory=lambda: _env_bool("LAPWATCH_LOG_TO_FILE", False))
    plugins: dict = Field(default_factory=lambda: {
        "storage.memory": "plugins.storage.memory.impl:MemoryStorage",
        "storage.session": "plugins.storage.memory.impl:MemoryStorage",
        "storage.local": "plugins.storage.jsonfile.impl:JsonFileStorage",
        "storage.s3": "plugins.storage.s3.impl:S3Storage",
    })

    def timer_options(self, persist_id: Optional[str] = None, storage: Optional[str] = None,
                      show_ms: Optional[bool] = None) -> TimerOptions:
        persist = PersistOptions(id=persist_id, storage=storage or self.storage) if persist_id else None
        return TimerOptions(
            show_ms=self.show_ms if show_ms is None else show_ms,
            update_interval=self.update_interval,
            persist=persist,
        )


SDK_CONFIG = AppConfig()
