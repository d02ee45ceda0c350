from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from .models import Priority, Todo


class TodoRecord(BaseModel):
    """
    On-disk shape of one todo inside the JSON array.

    Field order here is the order written to the file.
    """

    model_config = ConfigDict(extra="ignore")

    id: UUID
    title: str
    description: Optional[str] = None
    completed: bool = False
    created_at: datetime
    updated_at: datetime
    priority: Priority = Field(default=Priority.MEDIUM)

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Hand-edited files may carry naive stamps; treat them as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @classmethod
    def from_todo(cls, todo: Todo) -> "TodoRecord":
        return cls(
            id=todo.id,
            title=todo.title,
            description=todo.description,
            completed=todo.completed,
            created_at=todo.created_at,
            updated_at=todo.updated_at,
            priority=todo.priority,
        )

    def to_todo(self) -> Todo:
        return Todo(
            id=self.id,
            title=self.title,
            description=self.description,
            completed=self.completed,
            created_at=self.created_at,
            updated_at=self.updated_at,
            priority=self.priority,
        )


TODO_LIST_ADAPTER = TypeAdapter(List[TodoRecord])


def decode_todos(raw: bytes) -> list[Todo]:
    """Parse a JSON array of records. Raises pydantic.ValidationError on bad input."""
    return [r.to_todo() for r in TODO_LIST_ADAPTER.validate_json(raw)]


def encode_todos(todos: list[Todo]) -> bytes:
    records = [TodoRecord.from_todo(t) for t in todos]
    return TODO_LIST_ADAPTER.dump_json(records, indent=2)
