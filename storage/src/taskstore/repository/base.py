"""Storage-agnostic repository contracts.

These are the only boundary that touches storage. Lookups return None when
nothing matches; update/delete raise NotFoundError for unknown ids.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from taskstore.entity.dto import Pagination, Task, TaskFilter, TaskPriority, TaskStatus, User


class UserRepository(ABC):
    @abstractmethod
    def create(self, user: User) -> User: ...

    @abstractmethod
    def find_by_id(self, user_id: uuid.UUID) -> Optional[User]: ...

    @abstractmethod
    def find_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    def update(self, user: User) -> User: ...


class TaskRepository(ABC):
    @abstractmethod
    def create(self, task: Task) -> Task: ...

    @abstractmethod
    def find_by_id(self, task_id: uuid.UUID) -> Optional[Task]: ...

    @abstractmethod
    def find_by_user(self, user_id: uuid.UUID, task_filter: TaskFilter, pagination: Pagination,
                     now: Optional[datetime] = None) -> List[Task]:
        """Tasks of one user, newest first (created_at desc, id desc).

        ``now`` is the reference time for ``task_filter.overdue_only``.
        """

    @abstractmethod
    def update(self, task: Task) -> Task:
        """Persist the mutable fields of ``task``; user_id is never rewritten."""

    @abstractmethod
    def delete(self, task_id: uuid.UUID) -> None: ...

    @abstractmethod
    def find_overdue(self, user_id: uuid.UUID, now: datetime) -> List[Task]:
        """Unfinished tasks with due_date before ``now``."""

    @abstractmethod
    def count_by_user(self, user_id: uuid.UUID) -> Dict[Tuple[TaskStatus, TaskPriority], int]: ...
