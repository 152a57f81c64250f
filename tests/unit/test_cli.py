import json

import pytest
from typer.testing import CliRunner

from apps.timer_cli import app
from plugins.storage.memory.impl import MemoryStorage

runner = CliRunner()


@pytest.fixture
def timer_id(request):
    name = f"cli-{request.node.name}"
    yield name
    MemoryStorage().delete(f"lapwatch-timer-store-{name}")


def invoke(*args):
    return runner.invoke(app, list(args))


def test_state_carries_over_between_invocations(timer_id):
    res = invoke("start", "--id", timer_id, "--storage", "memory", "--label", "first")
    assert res.exit_code == 0, res.output
    assert "[ongoing]" in res.output

    assert invoke("lap", "--id", timer_id, "--storage", "memory").exit_code == 0
    assert invoke("pause", "--id", timer_id, "--storage", "memory").exit_code == 0

    res = invoke("show", "--id", timer_id, "--storage", "memory", "--json")
    assert res.exit_code == 0, res.output
    data = json.loads(res.output)
    assert data["status"] == "paused"
    assert data["sections"][0]["label"] == "first"
    assert len(data["laps"]) == 1


def test_ignored_operation_is_reported(timer_id):
    res = invoke("resume", "--id", timer_id, "--storage", "memory")
    assert res.exit_code == 0
    assert "resume ignored" in res.output
    assert "[stopped]" in res.output


def test_toggle_and_reset(timer_id):
    invoke("toggle", "--id", timer_id, "--storage", "memory")
    res = invoke("toggle", "--id", timer_id, "--storage", "memory")
    assert "[paused]" in res.output
    res = invoke("reset", "--id", timer_id, "--storage", "memory")
    assert "[stopped]" in res.output
    assert "sections=" not in res.output


def test_show_lists_sections_and_laps(timer_id):
    invoke("start", "--id", timer_id, "--storage", "memory", "--label", "warmup")
    invoke("lap", "--id", timer_id, "--storage", "memory")
    invoke("stop", "--id", timer_id, "--storage", "memory")
    res = invoke("show", "--id", timer_id, "--storage", "memory", "--show-ms")
    assert res.exit_code == 0, res.output
    assert "warmup" in res.output
    assert "lap 1" in res.output
    assert "[stopped]" in res.output


def test_unknown_storage_exits_with_error(timer_id):
    res = invoke("start", "--id", timer_id, "--storage", "floppy")
    assert res.exit_code == 2


def test_local_storage_writes_json_file(monkeypatch, tmp_path):
    import config.paths as paths_mod

    monkeypatch.setenv("LAPWATCH_DATA_ROOT", str(tmp_path / "data"))
    monkeypatch.setenv("LAPWATCH_LOGS_ROOT", str(tmp_path / "logs"))
    paths_mod.get_paths(force_refresh=True)
    try:
        res = invoke("start", "--id", "disk", "--storage", "local")
        assert res.exit_code == 0, res.output
        blob = tmp_path / "data" / "timers" / "lapwatch-timer-store-disk.json"
        assert json.loads(blob.read_text(encoding="utf-8"))["status"] == "ongoing"
        invoke("stop", "--id", "disk", "--storage", "local")
        assert json.loads(blob.read_text(encoding="utf-8"))["status"] == "stopped"
    finally:
        paths_mod._paths_singleton = None


def test_local_storage_accepts_ids_with_spaces(monkeypatch, tmp_path):
    import config.paths as paths_mod

    monkeypatch.setenv("LAPWATCH_DATA_ROOT", str(tmp_path / "data"))
    monkeypatch.setenv("LAPWATCH_LOGS_ROOT", str(tmp_path / "logs"))
    paths_mod.get_paths(force_refresh=True)
    try:
        res = invoke("start", "--id", "my timer", "--storage", "local")
        assert res.exit_code == 0, res.output
        assert "[ongoing]" in res.output
        assert (tmp_path / "data" / "timers" / "lapwatch-timer-store-my%20timer.json").exists()
        res = invoke("pause", "--id", "my timer", "--storage", "local")
        assert "[paused]" in res.output
    finally:
        paths_mod._paths_singleton = None
