from __future__ import annotations

import copy
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional
from uuid import UUID

import pydantic
from pydantic_core import PydanticSerializationError

from .config import Settings
from .errors import SerializationError, StorageIOError
from .models import Todo
from .schemas import decode_todos, encode_todos

logger = logging.getLogger(__name__)


class TodoStorage(ABC):
    """Contract shared by every todo backend."""

    @abstractmethod
    def save(self, todo: Todo) -> None:
        """Insert the todo, or replace the stored one with the same id."""

    @abstractmethod
    def find_by_id(self, todo_id: UUID) -> Optional[Todo]:
        """Return the todo, or None if no todo has this id."""

    @abstractmethod
    def find_all(self) -> list[Todo]:
        """Return every todo. Order is unspecified."""

    @abstractmethod
    def delete(self, todo_id: UUID) -> bool:
        """Remove the todo. Return True if it was present."""

    @abstractmethod
    def update(self, todo: Todo) -> None:
        """Same upsert as save()."""


class MemoryStorage(TodoStorage):
    """
    Dict-backed store. Contents live as long as the instance.

    Not thread-safe.
    """

    def __init__(self) -> None:
        self._todos: dict[UUID, Todo] = {}

    def save(self, todo: Todo) -> None:
        self._todos[todo.id] = copy.copy(todo)

    def find_by_id(self, todo_id: UUID) -> Optional[Todo]:
        todo = self._todos.get(todo_id)
        return None if todo is None else copy.copy(todo)

    def find_all(self) -> list[Todo]:
        return [copy.copy(t) for t in self._todos.values()]

    def delete(self, todo_id: UUID) -> bool:
        return self._todos.pop(todo_id, None) is not None

    def update(self, todo: Todo) -> None:
        self.save(todo)


class FileStorage(TodoStorage):
    """
    JSON file store.

    Every call reads the whole file, changes the list in memory and writes
    the whole list back. A missing file reads as an empty list. There is no
    locking and no atomic rename: one process at a time.
    """

    def __init__(self, file_path: str | Path) -> None:
        self._file_path = Path(file_path)

    @property
    def file_path(self) -> Path:
        return self._file_path

    # ---- low-level helpers ----

    def _load(self) -> list[Todo]:
        if not self._file_path.exists():
            logger.debug("No todo file at %s; starting empty", self._file_path)
            return []

        try:
            raw = self._file_path.read_bytes()
        except OSError as e:
            raise StorageIOError(f"Cannot read {self._file_path}: {e}") from e

        try:
            todos = decode_todos(raw)
        except pydantic.ValidationError as e:
            raise SerializationError(
                f"Malformed todo file {self._file_path}: {e.error_count()} error(s)"
            ) from e

        logger.debug("Loaded %d todo(s) from %s", len(todos), self._file_path)
        return todos

    def _write(self, todos: list[Todo]) -> None:
        try:
            content = encode_todos(todos)
        except PydanticSerializationError as e:
            raise SerializationError(f"Cannot encode todos: {e}") from e

        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_bytes(content)
        except OSError as e:
            raise StorageIOError(f"Cannot write {self._file_path}: {e}") from e

        logger.debug("Wrote %d todo(s) to %s", len(todos), self._file_path)

    # ---- public API ----

    def save(self, todo: Todo) -> None:
        todos = self._load()
        for i, existing in enumerate(todos):
            if existing.id == todo.id:
                todos[i] = todo
                break
        else:
            todos.append(todo)
        self._write(todos)

    def find_by_id(self, todo_id: UUID) -> Optional[Todo]:
        for todo in self._load():
            if todo.id == todo_id:
                return todo
        return None

    def find_all(self) -> list[Todo]:
        return self._load()

    def delete(self, todo_id: UUID) -> bool:
        todos = self._load()
        kept = [t for t in todos if t.id != todo_id]
        if len(kept) == len(todos):
            return False
        self._write(kept)
        return True

    def update(self, todo: Todo) -> None:
        self.save(todo)


def open_storage(settings: Settings) -> TodoStorage:
    """Build the backend named by settings.backend."""
    if settings.backend == "memory":
        logger.debug("Using in-memory storage")
        return MemoryStorage()
    logger.debug("Using file storage at %s", settings.file_path)
    return FileStorage(settings.file_path)
