from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        return _RANKS[self]


_RANKS = {Priority.LOW: 0, Priority.MEDIUM: 1, Priority.HIGH: 2}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Todo:
    """
    One task record.

    The entity does no validation; TodoService checks input before building
    or mutating it. Every mutator refreshes updated_at.
    """

    title: str
    description: Optional[str] = None
    completed: bool = False
    priority: Priority = Priority.MEDIUM
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.updated_at is None:
            self.updated_at = self.created_at

    @classmethod
    def new(
        cls,
        title: str,
        priority: Priority = Priority.MEDIUM,
        description: Optional[str] = None,
    ) -> "Todo":
        return cls(title=title, priority=priority, description=description)

    def _touch(self) -> None:
        # Stamps must move forward even when the clock has not ticked.
        now = _utcnow()
        if now <= self.updated_at:
            now = self.updated_at + timedelta(microseconds=1)
        self.updated_at = now

    def complete(self) -> None:
        self.completed = True
        self._touch()

    def toggle_complete(self) -> None:
        self.completed = not self.completed
        self._touch()

    def update_title(self, title: str) -> None:
        self.title = title
        self._touch()

    def set_priority(self, priority: Priority) -> None:
        self.priority = priority
        self._touch()

    def set_description(self, description: Optional[str]) -> None:
        self.description = description
        self._touch()
