import json
import re
import uuid
from pathlib import Path

import pytest

from todolist.cli import main
from todolist.service import TodoService
from todolist.storage import MemoryStorage

UUID_RE = re.compile(r"ID: ([0-9a-f-]{36})")


@pytest.fixture()
def service() -> TodoService:
    return TodoService(MemoryStorage())


def _added_id(out: str) -> str:
    m = UUID_RE.search(out)
    assert m, out
    return m.group(1)


def test_scenario_with_injected_service(service, capsys):
    assert main(["add", "Buy milk"], service=service) == 0
    todo_id = _added_id(capsys.readouterr().out)

    assert main(["list"], service=service) == 0
    out = capsys.readouterr().out
    assert "Buy milk" in out
    assert "TODO" in out and "Medium" in out

    assert main(["complete", todo_id], service=service) == 0
    capsys.readouterr()
    main(["list"], service=service)
    assert "DONE" in capsys.readouterr().out

    assert main(["delete", todo_id], service=service) == 0
    capsys.readouterr()
    main(["list"], service=service)
    assert "No todos found." in capsys.readouterr().out


def test_file_backend_persists_between_invocations(tmp_path: Path, capsys):
    path = tmp_path / "todos.json"
    assert main(["--file", str(path), "add", "Write report", "-p", "high", "-d", "Q3"]) == 0
    todo_id = _added_id(capsys.readouterr().out)

    assert main(["--file", str(path), "toggle", todo_id]) == 0
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data[0]["completed"] is True
    assert data[0]["priority"] == "High"
    assert data[0]["description"] == "Q3"

    capsys.readouterr()
    assert main(["--file", str(path), "list", "--filter", "completed"]) == 0
    out = capsys.readouterr().out
    assert "Write report" in out and "Q3" in out


def test_update_applies_description_and_priority(service, capsys):
    main(["add", "old"], service=service)
    todo_id = _added_id(capsys.readouterr().out)

    assert main(["update", todo_id, "-t", "new", "-d", "notes", "-p", "low"], service=service) == 0
    t = service.get_by_id(uuid.UUID(todo_id))
    assert (t.title, t.description, t.priority.value) == ("new", "notes", "Low")


def test_clear_completed_then_all(service, capsys):
    for title in ("a", "b"):
        main(["add", title], service=service)
    first = _added_id(capsys.readouterr().out)
    main(["complete", first], service=service)

    assert main(["clear"], service=service) == 0
    assert "Removed 1 completed" in capsys.readouterr().out
    assert len(service.list()) == 1

    assert main(["clear", "--all"], service=service) == 0
    assert service.list() == []


@pytest.mark.parametrize(
    "argv,needle",
    [
        (["add", "   "], "Title must not be empty"),
        (["complete", "not-a-uuid"], "Invalid todo id"),
        (["delete", str(uuid.UUID(int=1))], "not found"),
        (["update", str(uuid.UUID(int=1))], "Nothing to update"),
    ],
)
def test_errors_exit_non_zero(service, capsys, argv, needle):
    assert main(argv, service=service) == 1
    err = capsys.readouterr().err
    assert err.startswith("error:")
    assert needle in err


def test_malformed_file_is_reported(tmp_path: Path, capsys):
    path = tmp_path / "todos.json"
    path.write_text("[{]", encoding="utf-8")
    assert main(["--file", str(path), "list"]) == 1
    assert "Malformed todo file" in capsys.readouterr().err


def test_bad_priority_is_usage_error(service):
    with pytest.raises(SystemExit) as exc:
        main(["add", "x", "-p", "urgent"], service=service)
    assert exc.value.code == 2


def test_memory_backend_flag(tmp_path: Path, monkeypatch, capsys):
    monkeypatch.setenv("TODO_FILE", str(tmp_path / "todos.json"))
    assert main(["--backend", "memory", "add", "ephemeral"]) == 0
    assert not (tmp_path / "todos.json").exists()
