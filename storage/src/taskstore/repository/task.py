"""SQLAlchemy-backed task repository."""

import uuid
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_

from taskstore.database.base import Database
from taskstore.entity.dto import Pagination, Task, TaskFilter, TaskPriority, TaskStatus
from taskstore.entity.task import TaskEntity
from taskstore.errors import NotFoundError
from taskstore.util import utc_now
from .base import TaskRepository

_NEWEST_FIRST = (TaskEntity.created_at.desc(), TaskEntity.id.desc())


def _entity_to_dto(entity: TaskEntity) -> Task:
    return Task(
        id=entity.id,
        title=entity.title,
        description=entity.description,
        status=TaskStatus.from_db(entity.status),
        priority=TaskPriority.from_db(entity.priority),
        due_date=entity.due_date,
        completed_at=entity.completed_at,
        user_id=entity.user_id,
        created_at=entity.created_at,
        updated_at=entity.updated_at,
    )


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _overdue_clauses(now: datetime) -> tuple:
    return (
        TaskEntity.due_date.isnot(None),
        TaskEntity.due_date < now,
        TaskEntity.status != int(TaskStatus.COMPLETED),
    )


def _mutable_fields(task: Task) -> dict:
    return dict(
        title=task.title,
        description=task.description,
        status=int(task.status),
        priority=int(task.priority),
        due_date=task.due_date,
        completed_at=task.completed_at,
    )


class SqlTaskRepository(TaskRepository):
    def __init__(self, db: Database):
        self._db = db

    def create(self, task: Task) -> Task:
        with self._db.session() as session:
            entity = TaskEntity(id=task.id, user_id=task.user_id, **_mutable_fields(task))
            if task.created_at:
                entity.created_at = task.created_at
                entity.updated_at = task.updated_at or task.created_at
            session.add(entity)
            session.flush()
            return _entity_to_dto(entity)

    def find_by_id(self, task_id: uuid.UUID) -> Optional[Task]:
        with self._db.session() as session:
            row = session.get(TaskEntity, task_id)
            return _entity_to_dto(row) if row else None

    def find_by_user(self, user_id: uuid.UUID, task_filter: TaskFilter, pagination: Pagination,
                     now: Optional[datetime] = None) -> List[Task]:
        with self._db.session() as session:
            query = session.query(TaskEntity).filter(TaskEntity.user_id == user_id)
            if task_filter.status is not None:
                query = query.filter(TaskEntity.status == int(task_filter.status))
            if task_filter.priority is not None:
                query = query.filter(TaskEntity.priority == int(task_filter.priority))
            if task_filter.search:
                pattern = f"%{_escape_like(task_filter.search)}%"
                query = query.filter(or_(
                    TaskEntity.title.ilike(pattern, escape="\\"),
                    TaskEntity.description.ilike(pattern, escape="\\"),
                ))
            if task_filter.due_before is not None:
                query = query.filter(TaskEntity.due_date < task_filter.due_before)
            if task_filter.due_after is not None:
                query = query.filter(TaskEntity.due_date > task_filter.due_after)
            if task_filter.overdue_only:
                query = query.filter(*_overdue_clauses(now or utc_now()))
            query = query.order_by(*_NEWEST_FIRST).offset(pagination.offset).limit(pagination.limit)
            return [_entity_to_dto(row) for row in query.all()]

    def update(self, task: Task) -> Task:
        with self._db.session() as session:
            entity = session.get(TaskEntity, task.id)
            if entity is None:
                raise NotFoundError("task", task.id)
            for k, v in _mutable_fields(task).items():
                setattr(entity, k, v)
            if task.updated_at:
                entity.updated_at = task.updated_at
            session.flush()
            return _entity_to_dto(entity)

    def delete(self, task_id: uuid.UUID) -> None:
        with self._db.session() as session:
            count = session.query(TaskEntity).filter(TaskEntity.id == task_id).delete()
            if count == 0:
                raise NotFoundError("task", task_id)

    def find_overdue(self, user_id: uuid.UUID, now: datetime) -> List[Task]:
        with self._db.session() as session:
            query = (
                session.query(TaskEntity)
                .filter(TaskEntity.user_id == user_id)
                .filter(*_overdue_clauses(now))
                .order_by(*_NEWEST_FIRST)
            )
            return [_entity_to_dto(row) for row in query.all()]

    def count_by_user(self, user_id: uuid.UUID) -> Dict[Tuple[TaskStatus, TaskPriority], int]:
        with self._db.session() as session:
            rows = (
                session.query(TaskEntity.status, TaskEntity.priority, func.count(TaskEntity.id))
                .filter(TaskEntity.user_id == user_id)
                .group_by(TaskEntity.status, TaskEntity.priority)
                .all()
            )
            return {
                (TaskStatus.from_db(status), TaskPriority.from_db(priority)): int(count)
                for status, priority, count in rows
            }
