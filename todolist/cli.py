from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from .config import BACKENDS, Settings, get_settings
from .errors import TodoError
from .logging_setup import setup_logging
from .models import Todo
from .service import SORT_KEYS, STATUS_FILTERS, ListQuery, TodoService, parse_id, parse_priority
from .storage import open_storage

logger = logging.getLogger(__name__)

PRIORITY_CHOICES = ("low", "medium", "high")


def _settings_from_args(ns: argparse.Namespace) -> Settings:
    settings = get_settings()
    if getattr(ns, "file", None):
        settings = replace(settings, file_path=Path(ns.file).expanduser().resolve())
    if getattr(ns, "backend", None):
        settings = replace(settings, backend=ns.backend)
    if getattr(ns, "verbose", False):
        settings = replace(settings, log_level="DEBUG")
    return settings


def _print_todos(todos: list[Todo]) -> None:
    if not todos:
        print("No todos found.")
        return
    print(f"{'ID':<36}  {'ST':<4} {'PRIO':<6}  TITLE")
    print("-" * 78)
    for t in todos:
        st = "DONE" if t.completed else "TODO"
        print(f"{str(t.id):<36}  {st:<4} {t.priority.value:<6}  {t.title}")
        if t.description:
            print(f"{'':<36}  {'':<4} {'':<6}  {t.description}")


def cmd_add(service: TodoService, ns: argparse.Namespace) -> int:
    todo = service.create(
        ns.title,
        priority=parse_priority(ns.priority),
        description=ns.description,
    )
    print(f"Added todo: {todo.title} (ID: {todo.id})")
    return 0


def cmd_list(service: TodoService, ns: argparse.Namespace) -> int:
    query = ListQuery(status=ns.filter, sort=ns.sort)
    _print_todos(service.list(query))
    return 0


def cmd_complete(service: TodoService, ns: argparse.Namespace) -> int:
    todo = service.complete(parse_id(ns.todo_id))
    print(f"Completed todo: {todo.title}")
    return 0


def cmd_toggle(service: TodoService, ns: argparse.Namespace) -> int:
    todo = service.toggle(parse_id(ns.todo_id))
    state = "done" if todo.completed else "not done"
    print(f"Marked todo as {state}: {todo.title}")
    return 0


def cmd_update(service: TodoService, ns: argparse.Namespace) -> int:
    todo_id = parse_id(ns.todo_id)
    priority = parse_priority(ns.priority) if ns.priority is not None else None
    todo = service.update(
        todo_id,
        title=ns.title,
        description=ns.description,
        priority=priority,
    )
    print(f"Updated todo: {todo.title}")
    return 0


def cmd_delete(service: TodoService, ns: argparse.Namespace) -> int:
    service.delete(parse_id(ns.todo_id))
    print(f"Deleted todo {ns.todo_id}.")
    return 0


def cmd_clear(service: TodoService, ns: argparse.Namespace) -> int:
    if ns.all:
        n = service.clear_all()
        print(f"Removed all todos ({n}).")
    else:
        n = service.clear_completed()
        print(f"Removed {n} completed todo(s).")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="todo",
        description="A simple todo list manager (memory or JSON file storage).",
    )
    p.add_argument(
        "--file",
        help="Path to the JSON todo file (default: ~/.todo-list/todos.json or TODO_FILE env var)",
    )
    p.add_argument(
        "--backend",
        choices=BACKENDS,
        help="Storage backend (default: file, or TODO_BACKEND env var)",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr.")
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("add", help="Add a new todo.")
    s.add_argument("title", help="Short todo title.")
    s.add_argument("-d", "--description", help="Longer description.")
    s.add_argument("-p", "--priority", choices=PRIORITY_CHOICES, help="Priority (default: medium).")
    s.set_defaults(func=cmd_add)

    s = sub.add_parser("list", help="List todos.")
    s.add_argument("-f", "--filter", choices=STATUS_FILTERS, default="all", help="Which todos to show.")
    s.add_argument("-s", "--sort", choices=SORT_KEYS, default="created", help="Sort order.")
    s.set_defaults(func=cmd_list)

    s = sub.add_parser("complete", help="Mark a todo as done.")
    s.add_argument("todo_id", help="Todo ID.")
    s.set_defaults(func=cmd_complete)

    s = sub.add_parser("toggle", help="Flip a todo between done and not done.")
    s.add_argument("todo_id", help="Todo ID.")
    s.set_defaults(func=cmd_toggle)

    s = sub.add_parser("update", help="Change a todo's title, description or priority.")
    s.add_argument("todo_id", help="Todo ID.")
    s.add_argument("-t", "--title", help="New title.")
    s.add_argument("-d", "--description", help="New description (empty string clears it).")
    s.add_argument("-p", "--priority", choices=PRIORITY_CHOICES, help="New priority.")
    s.set_defaults(func=cmd_update)

    s = sub.add_parser("delete", help="Delete a todo.")
    s.add_argument("todo_id", help="Todo ID.")
    s.set_defaults(func=cmd_delete)

    s = sub.add_parser("clear", help="Remove completed todos.")
    s.add_argument("--all", action="store_true", help="Remove every todo, not just completed ones.")
    s.set_defaults(func=cmd_clear)

    return p


def main(argv: Optional[list[str]] = None, service: Optional[TodoService] = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    settings = _settings_from_args(ns)
    setup_logging(settings.log_level)

    try:
        if service is None:
            service = TodoService(open_storage(settings))
        return int(ns.func(service, ns))
    except TodoError as e:
        logger.debug("Command %s failed", ns.cmd, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


def run() -> None:
    sys.exit(main())
