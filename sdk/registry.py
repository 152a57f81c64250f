
from __future__ import annotations
from importlib import import_module
from .config import SDK_CONFIG


class UnknownStorageError(KeyError):
    pass


class Registry:
    def __init__(self, plugins: dict | None = None):
        self._map: dict[str, str] = dict(plugins or {})
    def register(self, key: str, target: str) -> None:
        self._map[key] = target
    def target(self, key: str) -> str:
        return self._map.get(key, key)
    def keys(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self._map if k.startswith(prefix))
    def create(self, key: str, *args, **kwargs):
        target = self.target(key)
        mod_path, _, obj = target.partition(":")
        mod = import_module(mod_path)
        cls = getattr(mod, obj) if obj else mod
        return cls(*args, **kwargs)
    def create_storage(self, name: str, *args, **kwargs):
        key = f"storage.{name}"
        if key not in self._map:
            known = [k.split(".", 1)[1] for k in self.keys("storage.")]
            raise UnknownStorageError(f"unknown storage {name!r}, expected one of {known}")
        return self.create(key, *args, **kwargs)


REGISTRY = Registry(SDK_CONFIG.plugins)
