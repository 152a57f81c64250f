# tests/unit/test_paths.py
import sys
import pytest

# These tests assume the module lives at config/paths.py and is importable as `from config.paths import get_paths, Paths`.

def _import_paths_module():
    """
    Import (or re-import) config.paths so we can reset its singleton between tests.
    """
    import importlib
    if "config.paths" in sys.modules:
        return importlib.reload(sys.modules["config.paths"])
    return importlib.import_module("config.paths")


@pytest.fixture(autouse=True)
def _reset_singleton():
    yield
    paths_mod = _import_paths_module()
    paths_mod._paths_singleton = None  # type: ignore[attr-defined]


def test_env_overrides_take_precedence(monkeypatch, tmp_path):
    data = tmp_path / "data_root"
    logs = tmp_path / "logs_root"

    monkeypatch.setenv("LAPWATCH_DATA_ROOT", str(data))
    monkeypatch.setenv("LAPWATCH_LOGS_ROOT", str(logs))

    paths_mod = _import_paths_module()
    p = paths_mod.get_paths(force_refresh=True)

    assert p.data_root == data
    assert p.logs_root == logs

    # ensure_all() is called inside get_paths(), so the standard subdirs should exist
    assert p.timers_root.is_dir()
    assert p.timers_root == data / "timers"
    assert p.logs_root.is_dir()
    assert p.log_file == logs / "lapwatch.log"


def test_platform_default_on_linux(monkeypatch, tmp_path):
    monkeypatch.delenv("LAPWATCH_DATA_ROOT", raising=False)
    monkeypatch.delenv("LAPWATCH_LOGS_ROOT", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))
    monkeypatch.setattr(sys, "platform", "linux")

    paths_mod = _import_paths_module()
    p = paths_mod.Paths.from_env()

    assert p.data_root == tmp_path / "xdg" / "lapwatch" / "data"
    assert p.logs_root == tmp_path / "xdg" / "lapwatch" / "logs"


def test_singleton_is_cached(monkeypatch, tmp_path):
    monkeypatch.setenv("LAPWATCH_DATA_ROOT", str(tmp_path / "a"))
    monkeypatch.setenv("LAPWATCH_LOGS_ROOT", str(tmp_path / "logs"))
    paths_mod = _import_paths_module()
    first = paths_mod.get_paths(force_refresh=True)

    monkeypatch.setenv("LAPWATCH_DATA_ROOT", str(tmp_path / "b"))
    assert paths_mod.get_paths() is first
    assert paths_mod.get_paths(force_refresh=True).data_root == tmp_path / "b"


def test_invalid_data_root_raises_on_ensure(monkeypatch, tmp_path):
    """
    If LAPWATCH_DATA_ROOT points to a *file* instead of a directory,
    directory creation should fail during get_paths(force_refresh=True).
    """
    bad_data_file = tmp_path / "not_a_dir.txt"
    bad_data_file.write_text("hi", encoding="utf-8")

    monkeypatch.setenv("LAPWATCH_DATA_ROOT", str(bad_data_file))
    monkeypatch.setenv("LAPWATCH_LOGS_ROOT", str(tmp_path / "logs"))

    paths_mod = _import_paths_module()

    with pytest.raises(Exception):
        _ = paths_mod.get_paths(force_refresh=True)
