from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

BACKENDS = ("file", "memory")


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings.

    Env vars:
    - TODO_BACKEND: 'file' (default) or 'memory'
    - TODO_FILE: path to the JSON store (default ~/.todo-list/todos.json)
    - TODO_LOG_LEVEL: console log level (default WARNING)
    """

    backend: str
    file_path: Path
    log_level: str


def default_file_path() -> Path:
    """
    Default per-user store:
      ~/.todo-list/todos.json

    Override with TODO_FILE env var or --file CLI option.
    """
    env = os.getenv("TODO_FILE")
    if env:
        return Path(env).expanduser().resolve()

    return (Path.home() / ".todo-list" / "todos.json").resolve()


def get_settings() -> Settings:
    backend = os.getenv("TODO_BACKEND", "file").strip().lower()
    if backend not in BACKENDS:
        backend = "file"

    log_level = os.getenv("TODO_LOG_LEVEL", "").strip().upper() or "WARNING"

    return Settings(
        backend=backend,
        file_path=default_file_path(),
        log_level=log_level,
    )
