"""In-memory repositories with the same contract as the SQL adapters.

Used by the test suite and for ephemeral sessions. All access is guarded by a
lock so services can be called from several threads.
"""

import threading
import uuid
from collections import Counter
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from taskstore.entity.dto import Pagination, Task, TaskFilter, TaskPriority, TaskStatus, User
from taskstore.errors import DuplicateError, InvalidReferenceError, NotFoundError
from taskstore.util import utc_now
from .base import TaskRepository, UserRepository


def _newest_first(tasks: List[Task]) -> List[Task]:
    return sorted(tasks, key=lambda t: (t.created_at, t.id.int), reverse=True)


def _matches(task: Task, task_filter: TaskFilter, now: datetime) -> bool:
    if task_filter.status is not None and task.status != task_filter.status:
        return False
    if task_filter.priority is not None and task.priority != task_filter.priority:
        return False
    if task_filter.search:
        term = task_filter.search.lower()
        if term not in task.title.lower() and term not in (task.description or "").lower():
            return False
    if task_filter.due_before is not None and (task.due_date is None or task.due_date >= task_filter.due_before):
        return False
    if task_filter.due_after is not None and (task.due_date is None or task.due_date <= task_filter.due_after):
        return False
    if task_filter.overdue_only and not task.is_overdue(now):
        return False
    return True


class InMemoryUserRepository(UserRepository):
    def __init__(self):
        self._lock = threading.RLock()
        self._users: Dict[uuid.UUID, User] = {}

    def exists(self, user_id: uuid.UUID) -> bool:
        with self._lock:
            return user_id in self._users

    def _check_unique(self, user: User) -> None:
        for other in self._users.values():
            if other.id == user.id:
                continue
            if other.username == user.username:
                raise DuplicateError("username")
            if other.email == user.email:
                raise DuplicateError("email")

    def create(self, user: User) -> User:
        with self._lock:
            if user.id in self._users:
                raise DuplicateError("id")
            self._check_unique(user)
            now = user.created_at or utc_now()
            stored = replace(user, created_at=now, updated_at=now)
            self._users[stored.id] = stored
            return replace(stored)

    def find_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            return replace(user) if user else None

    def find_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return replace(user)
            return None

    def find_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.email == email:
                    return replace(user)
            return None

    def update(self, user: User) -> User:
        with self._lock:
            current = self._users.get(user.id)
            if current is None:
                raise NotFoundError("user", user.id)
            self._check_unique(user)
            stored = replace(current, username=user.username, email=user.email,
                             password_hash=user.password_hash, updated_at=utc_now())
            self._users[stored.id] = stored
            return replace(stored)


class InMemoryTaskRepository(TaskRepository):
    def __init__(self, users: Optional[InMemoryUserRepository] = None):
        self._lock = threading.RLock()
        self._tasks: Dict[uuid.UUID, Task] = {}
        self._users = users

    def create(self, task: Task) -> Task:
        with self._lock:
            if task.id in self._tasks:
                raise DuplicateError("id")
            if self._users is not None and not self._users.exists(task.user_id):
                raise InvalidReferenceError(f"user {task.user_id}")
            now = task.created_at or utc_now()
            stored = replace(task, created_at=now, updated_at=task.updated_at or now)
            self._tasks[stored.id] = stored
            return replace(stored)

    def find_by_id(self, task_id: uuid.UUID) -> Optional[Task]:
        with self._lock:
            task = self._tasks.get(task_id)
            return replace(task) if task else None

    def find_by_user(self, user_id: uuid.UUID, task_filter: TaskFilter, pagination: Pagination,
                     now: Optional[datetime] = None) -> List[Task]:
        now = now or utc_now()
        with self._lock:
            owned = [t for t in self._tasks.values() if t.user_id == user_id and _matches(t, task_filter, now)]
        window = _newest_first(owned)[pagination.offset:pagination.offset + pagination.limit]
        return [replace(t) for t in window]

    def update(self, task: Task) -> Task:
        with self._lock:
            current = self._tasks.get(task.id)
            if current is None:
                raise NotFoundError("task", task.id)
            stored = replace(
                current,
                title=task.title,
                description=task.description,
                status=task.status,
                priority=task.priority,
                due_date=task.due_date,
                completed_at=task.completed_at,
                updated_at=task.updated_at or utc_now(),
            )
            self._tasks[stored.id] = stored
            return replace(stored)

    def delete(self, task_id: uuid.UUID) -> None:
        with self._lock:
            if self._tasks.pop(task_id, None) is None:
                raise NotFoundError("task", task_id)

    def find_overdue(self, user_id: uuid.UUID, now: datetime) -> List[Task]:
        with self._lock:
            overdue = [t for t in self._tasks.values() if t.user_id == user_id and t.is_overdue(now)]
        return [replace(t) for t in _newest_first(overdue)]

    def count_by_user(self, user_id: uuid.UUID) -> Dict[Tuple[TaskStatus, TaskPriority], int]:
        with self._lock:
            return dict(Counter((t.status, t.priority) for t in self._tasks.values() if t.user_id == user_id))
