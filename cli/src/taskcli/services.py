"""Service wiring for CLI commands."""

from taskcli.config import get_database
from taskstore.repository.task import SqlTaskRepository
from taskstore.repository.user import SqlUserRepository
from taskstore.service.task import TaskService
from taskstore.service.user import UserService


def user_service() -> UserService:
    return UserService(SqlUserRepository(get_database()))


def task_service() -> TaskService:
    return TaskService(SqlTaskRepository(get_database()))
