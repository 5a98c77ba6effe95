from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskstore.database.base import Database
from taskstore.entity.request import RegisterRequest
from taskstore.repository.memory import InMemoryTaskRepository, InMemoryUserRepository
from taskstore.repository.task import SqlTaskRepository
from taskstore.repository.user import SqlUserRepository
from taskstore.service.auth import PasswordHasher
from taskstore.service.task import TaskService
from taskstore.service.user import UserService


class FakeClock:
    """Controllable clock handed to TaskService."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def hasher() -> PasswordHasher:
    # bcrypt's minimum cost keeps the suite fast
    return PasswordHasher(rounds=4)


@pytest.fixture()
def db(tmp_path: Path):
    database = Database(f"sqlite:///{tmp_path / 'tasks.db'}", pool_size=5, pool_timeout=1)
    database.create_schema()
    yield database
    database.dispose()


@pytest.fixture(params=["memory", "sql"])
def backend(request, tmp_path: Path, clock: FakeClock, hasher: PasswordHasher) -> SimpleNamespace:
    """Services over either adapter; scenario tests run against both."""
    if request.param == "memory":
        user_repo = InMemoryUserRepository()
        task_repo = InMemoryTaskRepository(user_repo)
        database = None
    else:
        database = Database(f"sqlite:///{tmp_path / 'backend.db'}")
        database.create_schema()
        user_repo = SqlUserRepository(database)
        task_repo = SqlTaskRepository(database)
    yield SimpleNamespace(
        name=request.param,
        user_repo=user_repo,
        task_repo=task_repo,
        users=UserService(user_repo, hasher),
        tasks=TaskService(task_repo, clock=clock),
        clock=clock,
    )
    if database is not None:
        database.dispose()


@pytest.fixture()
def alice(backend):
    return backend.users.register(RegisterRequest(username="alice", email="alice@x.com", password="Secr3t!2"))


@pytest.fixture()
def bob(backend):
    return backend.users.register(RegisterRequest(username="bob", email="bob@x.com", password="hunter2hunter2"))
