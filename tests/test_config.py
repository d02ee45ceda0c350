from pathlib import Path

from todolist.config import default_file_path, get_settings


def test_defaults(monkeypatch, tmp_path: Path):
    monkeypatch.delenv("TODO_FILE", raising=False)
    monkeypatch.delenv("TODO_BACKEND", raising=False)
    monkeypatch.delenv("TODO_LOG_LEVEL", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    s = get_settings()
    assert s.backend == "file"
    assert s.log_level == "WARNING"
    assert s.file_path == (tmp_path / ".todo-list" / "todos.json").resolve()


def test_env_overrides(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("TODO_FILE", str(tmp_path / "x.json"))
    monkeypatch.setenv("TODO_BACKEND", "Memory")
    monkeypatch.setenv("TODO_LOG_LEVEL", "debug")

    s = get_settings()
    assert s.backend == "memory"
    assert s.log_level == "DEBUG"
    assert default_file_path() == (tmp_path / "x.json").resolve()


def test_unknown_backend_falls_back_to_file(monkeypatch):
    monkeypatch.setenv("TODO_BACKEND", "sqlite")
    assert get_settings().backend == "file"
