"""Task service."""

import uuid
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from loguru import logger

from taskstore.entity.dto import Pagination, Task, TaskFilter, TaskPriority, TaskStatistics, TaskStatus
from taskstore.entity.request import CreateTaskRequest, UpdateTaskRequest
from taskstore.errors import AuthorizationError, BulkOperationError, NotFoundError, TaskStoreError, ValidationError
from taskstore.repository.base import TaskRepository
from taskstore.util import generate_id, utc_now
from taskstore.validation import (
    validate_create_task,
    validate_pagination,
    validate_task_filter,
    validate_update_task,
)


def _apply_status(task: Task, status: TaskStatus, now: datetime) -> None:
    """Keep completed_at set exactly while the task is completed."""
    if status == TaskStatus.COMPLETED:
        if task.status != TaskStatus.COMPLETED or task.completed_at is None:
            task.completed_at = now
    else:
        task.completed_at = None
    task.status = status


def _check_bulk_result(succeeded: int, total: int) -> None:
    failed = total - succeeded
    if failed and not succeeded:
        raise BulkOperationError(failed, total)
    if failed:
        logger.warning("Bulk operation partially failed: {}/{} failed", failed, total)


class TaskService:
    """Ownership-scoped task operations.

    Every call takes the authenticated caller's ``user_id``; it is the only
    scope handed to the repository, whatever the request or filter contains.
    """

    def __init__(self, task_repository: TaskRepository, clock: Callable[[], datetime] = utc_now):
        self._tasks = task_repository
        self._clock = clock

    def _load_owned(self, user_id: uuid.UUID, task_id: uuid.UUID) -> Task:
        task = self._tasks.find_by_id(task_id)
        if task is None:
            raise NotFoundError("task", task_id)
        if task.user_id != user_id:
            logger.warning("Access denied: user {} tried to access task {} owned by {}",
                           user_id, task_id, task.user_id)
            raise AuthorizationError(user_id, task_id)
        return task

    def create_task(self, user_id: uuid.UUID, request: CreateTaskRequest) -> Task:
        now = self._clock()
        request = validate_create_task(request, now)
        task = Task(
            id=generate_id(),
            title=request.title,
            description=request.description,
            status=TaskStatus.PENDING,
            priority=request.priority if request.priority is not None else TaskPriority.MEDIUM,
            due_date=request.due_date,
            completed_at=None,
            user_id=user_id,
            created_at=now,
            updated_at=now,
        )
        created = self._tasks.create(task)
        logger.info("Created task id={} user_id={}", created.id, user_id)
        return created

    def get_task(self, user_id: uuid.UUID, task_id: uuid.UUID) -> Task:
        return self._load_owned(user_id, task_id)

    def update_task(self, user_id: uuid.UUID, task_id: uuid.UUID, request: UpdateTaskRequest) -> Task:
        task = self._load_owned(user_id, task_id)
        now = self._clock()
        fields = validate_update_task(request, now)
        if not fields:
            return task

        status = fields.pop("status", None)
        for key, value in fields.items():
            setattr(task, key, value)
        if status is not None:
            _apply_status(task, status, now)
        task.updated_at = now

        updated = self._tasks.update(task)
        changed = sorted(fields) + (["status"] if status is not None else [])
        logger.info("Updated task id={} changed={}", task_id, ", ".join(changed))
        return updated

    def complete_task(self, user_id: uuid.UUID, task_id: uuid.UUID) -> Task:
        task = self._load_owned(user_id, task_id)
        now = self._clock()
        task.status = TaskStatus.COMPLETED
        task.completed_at = now
        task.updated_at = now
        completed = self._tasks.update(task)
        logger.info("Completed task id={}", task_id)
        return completed

    def uncomplete_task(self, user_id: uuid.UUID, task_id: uuid.UUID) -> Task:
        # Reopened tasks always go back to PENDING, an earlier IN_PROGRESS is not restored
        task = self._load_owned(user_id, task_id)
        task.status = TaskStatus.PENDING
        task.completed_at = None
        task.updated_at = self._clock()
        reopened = self._tasks.update(task)
        logger.info("Reopened task id={}", task_id)
        return reopened

    def delete_task(self, user_id: uuid.UUID, task_id: uuid.UUID) -> None:
        self._load_owned(user_id, task_id)
        self._tasks.delete(task_id)
        logger.info("Deleted task id={}", task_id)

    def bulk_update_status(self, user_id: uuid.UUID, task_ids: Iterable[uuid.UUID],
                           status: TaskStatus) -> List[Task]:
        """Set ``status`` on each task the caller owns.

        Items that fail are logged and skipped. BulkOperationError is raised
        only when none succeeded.
        """
        if status is None:
            raise ValidationError("status", "is required")
        task_ids = list(task_ids)
        logger.info("Bulk status update count={} status={} user_id={}", len(task_ids), status.label, user_id)
        updated = []
        for task_id in task_ids:
            try:
                updated.append(self.update_task(user_id, task_id, UpdateTaskRequest(status=status)))
            except TaskStoreError as e:
                logger.warning("Bulk status update skipped task {}: {}", task_id, e)
        _check_bulk_result(len(updated), len(task_ids))
        return updated

    def bulk_delete_tasks(self, user_id: uuid.UUID, task_ids: Iterable[uuid.UUID]) -> int:
        task_ids = list(task_ids)
        logger.info("Bulk delete count={} user_id={}", len(task_ids), user_id)
        deleted = 0
        for task_id in task_ids:
            try:
                self.delete_task(user_id, task_id)
                deleted += 1
            except TaskStoreError as e:
                logger.warning("Bulk delete skipped task {}: {}", task_id, e)
        _check_bulk_result(deleted, len(task_ids))
        return deleted

    def get_tasks(self, user_id: uuid.UUID, task_filter: Optional[TaskFilter] = None,
                  pagination: Optional[Pagination] = None) -> List[Task]:
        task_filter = validate_task_filter(task_filter)
        pagination = validate_pagination(pagination)
        tasks = self._tasks.find_by_user(user_id, task_filter, pagination, now=self._clock())
        logger.debug("Fetched {} tasks user_id={} filter={}", len(tasks), user_id, task_filter)
        return tasks

    def search_tasks(self, user_id: uuid.UUID, term: str, limit: Optional[int] = None) -> List[Task]:
        if not term or not term.strip():
            return []
        pagination = Pagination(limit=limit) if limit is not None else None
        return self.get_tasks(user_id, TaskFilter(search=term.strip()), pagination)

    def get_overdue_tasks(self, user_id: uuid.UUID) -> List[Task]:
        tasks = self._tasks.find_overdue(user_id, self._clock())
        logger.debug("Found {} overdue tasks user_id={}", len(tasks), user_id)
        return tasks

    def get_task_statistics(self, user_id: uuid.UUID) -> TaskStatistics:
        counts = self._tasks.count_by_user(user_id)
        by_status = {status: 0 for status in TaskStatus}
        by_priority = {priority: 0 for priority in TaskPriority}
        for (status, priority), n in counts.items():
            by_status[status] += n
            by_priority[priority] += n
        stats = TaskStatistics(
            total=sum(counts.values()),
            by_status=by_status,
            by_priority=by_priority,
            overdue=len(self.get_overdue_tasks(user_id)),
        )
        logger.debug("Statistics user_id={} total={} completed={} overdue={}",
                     user_id, stats.total, stats.completed, stats.overdue)
        return stats
