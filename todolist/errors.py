from __future__ import annotations


class TodoError(Exception):
    """Base class for every error the CLI reports to the user."""


class ValidationError(TodoError):
    """Bad user input: blank title, unknown priority, malformed id."""


class NotFoundError(TodoError):
    def __init__(self, todo_id: object) -> None:
        super().__init__(f"Todo {todo_id} not found.")
        self.todo_id = todo_id


class StorageIOError(TodoError):
    """Reading or writing the todo file failed."""


class SerializationError(TodoError):
    """The todo file exists but its content cannot be decoded."""
