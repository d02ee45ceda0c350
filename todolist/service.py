from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional
from uuid import UUID

from .errors import NotFoundError, ValidationError
from .models import Priority, Todo
from .storage import TodoStorage

logger = logging.getLogger(__name__)

STATUS_FILTERS = ("all", "pending", "completed")
SORT_KEYS = ("created", "updated", "priority", "title")


def parse_id(text: str) -> UUID:
    try:
        return UUID(text.strip())
    except (ValueError, AttributeError) as e:
        raise ValidationError(f"Invalid todo id '{text}'.") from e


def parse_priority(text: Optional[str]) -> Priority:
    """
    Map user input to a Priority. None means the default (Medium).
    """
    if text is None:
        return Priority.MEDIUM
    for p in Priority:
        if p.value.lower() == text.strip().lower():
            return p
    raise ValidationError(f"Invalid priority '{text}'. Use one of: low, medium, high.")


def _require_title(title: str) -> None:
    if not title or not title.strip():
        raise ValidationError("Title must not be empty.")


def _clean_description(description: Optional[str]) -> Optional[str]:
    if description is None or not description.strip():
        return None
    return description


@dataclass(frozen=True)
class ListQuery:
    """
    Filtering and ordering for TodoService.list().

    status: all | pending | completed
    sort:   created | updated | priority | title
    """

    status: str = "all"
    sort: str = "created"

    def __post_init__(self) -> None:
        if self.status not in STATUS_FILTERS:
            raise ValidationError(
                f"Invalid filter '{self.status}'. Use one of: {', '.join(STATUS_FILTERS)}."
            )
        if self.sort not in SORT_KEYS:
            raise ValidationError(
                f"Invalid sort '{self.sort}'. Use one of: {', '.join(SORT_KEYS)}."
            )

    def apply(self, todos: list[Todo]) -> list[Todo]:
        if self.status == "pending":
            todos = [t for t in todos if not t.completed]
        elif self.status == "completed":
            todos = [t for t in todos if t.completed]
        return sorted(todos, key=_SORT_KEY_FUNCS[self.sort])


_SORT_KEY_FUNCS: dict[str, Callable[[Todo], tuple]] = {
    "created": lambda t: (t.created_at, str(t.id)),
    "updated": lambda t: (t.updated_at, str(t.id)),
    "priority": lambda t: (-t.priority.rank, t.created_at, str(t.id)),
    "title": lambda t: (t.title.casefold(), str(t.id)),
}


class TodoService:
    """
    Validation and orchestration on top of any TodoStorage.

    Holds no state of its own: every call goes through storage.
    """

    def __init__(self, storage: TodoStorage) -> None:
        self._storage = storage

    @property
    def storage(self) -> TodoStorage:
        return self._storage

    def _get_or_raise(self, todo_id: UUID) -> Todo:
        todo = self._storage.find_by_id(todo_id)
        if todo is None:
            raise NotFoundError(todo_id)
        return todo

    def create(
        self,
        title: str,
        priority: Priority = Priority.MEDIUM,
        description: Optional[str] = None,
    ) -> Todo:
        _require_title(title)
        todo = Todo.new(title, priority=priority, description=_clean_description(description))
        self._storage.save(todo)
        logger.info("Created todo %s", todo.id)
        return todo

    def list(self, query: Optional[ListQuery] = None) -> list[Todo]:
        todos = self._storage.find_all()
        if query is None:
            return todos
        return query.apply(todos)

    def get_by_id(self, todo_id: UUID) -> Optional[Todo]:
        return self._storage.find_by_id(todo_id)

    def complete(self, todo_id: UUID) -> Todo:
        todo = self._get_or_raise(todo_id)
        todo.complete()
        self._storage.update(todo)
        logger.info("Completed todo %s", todo_id)
        return todo

    def toggle(self, todo_id: UUID) -> Todo:
        todo = self._get_or_raise(todo_id)
        todo.toggle_complete()
        self._storage.update(todo)
        logger.info("Toggled todo %s -> completed=%s", todo_id, todo.completed)
        return todo

    def update_title(self, todo_id: UUID, title: str) -> Todo:
        _require_title(title)
        todo = self._get_or_raise(todo_id)
        todo.update_title(title)
        self._storage.update(todo)
        logger.info("Retitled todo %s", todo_id)
        return todo

    def update(
        self,
        todo_id: UUID,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        priority: Optional[Priority] = None,
    ) -> Todo:
        """
        Apply every given field in one read/write cycle.

        An empty description clears it.
        """
        if title is None and description is None and priority is None:
            raise ValidationError("Nothing to update: give a title, description or priority.")
        if title is not None:
            _require_title(title)

        todo = self._get_or_raise(todo_id)
        if title is not None:
            todo.update_title(title)
        if description is not None:
            todo.set_description(_clean_description(description))
        if priority is not None:
            todo.set_priority(priority)
        self._storage.update(todo)
        logger.info("Updated todo %s", todo_id)
        return todo

    def delete(self, todo_id: UUID) -> None:
        if not self._storage.delete(todo_id):
            raise NotFoundError(todo_id)
        logger.info("Deleted todo %s", todo_id)

    def clear_completed(self) -> int:
        return self._clear(lambda t: t.completed)

    def clear_all(self) -> int:
        return self._clear(lambda t: True)

    def _clear(self, predicate: Callable[[Todo], bool]) -> int:
        removed = 0
        for todo in self._storage.find_all():
            if predicate(todo) and self._storage.delete(todo.id):
                removed += 1
        logger.info("Cleared %d todo(s)", removed)
        return removed
