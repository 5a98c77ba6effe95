import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Dict, Optional


class _NamedIntEnum(IntEnum):
    """Small-integer enum persisted by ordinal, presented by name."""

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def from_name(cls, name: str):
        key = name.strip().upper().replace("-", "_").replace(" ", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"unknown {cls.__name__}: {name!r}") from None

    @classmethod
    def from_db(cls, value: int):
        try:
            return cls(int(value))
        except ValueError:
            raise ValueError(f"invalid {cls.__name__} ordinal: {value!r}") from None


class TaskStatus(_NamedIntEnum):
    PENDING = 0
    IN_PROGRESS = 1
    COMPLETED = 2


class TaskPriority(_NamedIntEnum):
    LOW = 0
    MEDIUM = 1
    HIGH = 2


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class User:
    id: uuid.UUID
    username: str
    email: str
    password_hash: str = field(repr=False)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        # password_hash never leaves the process
        return {
            "id": str(self.id),
            "username": self.username,
            "email": self.email,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass
class Task:
    id: uuid.UUID
    title: str
    user_id: uuid.UUID
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def is_overdue(self, now: datetime) -> bool:
        return self.due_date is not None and self.due_date < now and not self.is_completed

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "status": self.status.label,
            "priority": self.priority.label,
            "due_date": _iso(self.due_date),
            "completed_at": _iso(self.completed_at),
            "user_id": str(self.user_id),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass
class TaskFilter:
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    search: Optional[str] = None
    due_before: Optional[datetime] = None
    due_after: Optional[datetime] = None
    overdue_only: bool = False


DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100


@dataclass
class Pagination:
    offset: int = 0
    limit: int = DEFAULT_PAGE_LIMIT


@dataclass
class TaskStatistics:
    total: int
    by_status: Dict[TaskStatus, int]
    by_priority: Dict[TaskPriority, int]
    overdue: int

    @property
    def pending(self) -> int:
        return self.by_status[TaskStatus.PENDING]

    @property
    def in_progress(self) -> int:
        return self.by_status[TaskStatus.IN_PROGRESS]

    @property
    def completed(self) -> int:
        return self.by_status[TaskStatus.COMPLETED]

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "by_status": {s.label: n for s, n in self.by_status.items()},
            "by_priority": {p.label: n for p, n in self.by_priority.items()},
            "overdue": self.overdue,
        }
