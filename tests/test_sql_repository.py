import uuid
from datetime import datetime, timezone

import pytest
from sqlalchemy import delete, insert, inspect, select, text

from taskstore.database.base import Database, close_db, get_db, init_db
from taskstore.entity.dto import Pagination, Task, TaskFilter, TaskPriority, TaskStatus, User
from taskstore.entity.task import TaskEntity
from taskstore.entity.user import UserEntity
from taskstore.errors import (
    DuplicateError,
    InvalidReferenceError,
    NotFoundError,
    PersistenceError,
    PoolExhaustedError,
)
from taskstore.repository.task import SqlTaskRepository
from taskstore.repository.user import SqlUserRepository

T0 = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)


def _user(name="alice"):
    return User(id=uuid.uuid4(), username=name, email=f"{name}@x.com", password_hash="$2b$04$placeholder")


def _task(user_id, title="Buy milk", **kwargs):
    return Task(id=uuid.uuid4(), title=title, user_id=user_id, **kwargs)


@pytest.fixture()
def repos(db):
    return SqlUserRepository(db), SqlTaskRepository(db)


def test_schema_indexes_and_constraints(db):
    inspector = inspect(db.engine)
    assert {ix["name"] for ix in inspector.get_indexes("users")} >= {
        "idx_users_username", "idx_users_email", "idx_users_created_at",
    }
    assert {ix["name"] for ix in inspector.get_indexes("tasks")} >= {
        "idx_tasks_user_id", "idx_tasks_status", "idx_tasks_priority", "idx_tasks_due_date",
        "idx_tasks_created_at", "idx_tasks_user_status", "idx_tasks_user_priority",
    }
    checks = {c["name"] for c in inspector.get_check_constraints("tasks")}
    assert {"status_check", "priority_check"} <= checks
    fk = inspector.get_foreign_keys("tasks")[0]
    assert fk["referred_table"] == "users"
    assert fk["options"].get("ondelete") == "CASCADE"


def test_status_and_priority_default_on_insert(db, repos):
    users, _ = repos
    owner = users.create(_user())
    task_id = uuid.uuid4()
    with db.session() as session:
        session.execute(insert(TaskEntity).values(id=task_id, title="raw", user_id=owner.id))
    with db.session() as session:
        status, priority = session.execute(
            select(TaskEntity.status, TaskEntity.priority).where(TaskEntity.id == task_id)
        ).one()
    assert (status, priority) == (0, 1)


def test_out_of_range_ordinal_is_rejected(db, repos):
    users, _ = repos
    owner = users.create(_user())
    with pytest.raises(PersistenceError):
        with db.session() as session:
            session.execute(insert(TaskEntity).values(id=uuid.uuid4(), title="bad", user_id=owner.id, status=7))


def test_round_trip_keeps_utc(repos):
    users, tasks = repos
    owner = users.create(_user())
    due = datetime(2026, 3, 1, 17, 30, tzinfo=timezone.utc)
    created = tasks.create(_task(owner.id, priority=TaskPriority.HIGH, due_date=due, created_at=T0))

    loaded = tasks.find_by_id(created.id)
    assert loaded.due_date == due
    assert loaded.due_date.tzinfo is not None
    assert loaded.created_at == T0
    assert loaded.priority is TaskPriority.HIGH
    assert loaded.status is TaskStatus.PENDING


def test_naive_datetime_is_refused(repos):
    users, tasks = repos
    owner = users.create(_user())
    with pytest.raises(PersistenceError):
        tasks.create(_task(owner.id, due_date=datetime(2026, 3, 1)))
    assert tasks.find_by_user(owner.id, TaskFilter(), Pagination()) == []


def test_deleting_user_cascades_to_tasks(db, repos):
    users, tasks = repos
    owner = users.create(_user())
    task = tasks.create(_task(owner.id))
    with db.session() as session:
        session.execute(delete(UserEntity).where(UserEntity.id == owner.id))
    assert tasks.find_by_id(task.id) is None


def test_task_for_unknown_user_is_invalid_reference(repos):
    _, tasks = repos
    with pytest.raises(InvalidReferenceError):
        tasks.create(_task(uuid.uuid4()))


@pytest.mark.parametrize("clash,field", [("username", "username"), ("email", "email")])
def test_unique_constraints(repos, clash, field):
    users, _ = repos
    users.create(_user("alice"))
    other = _user("carol")
    if clash == "username":
        other.username = "alice"
    else:
        other.email = "alice@x.com"
    with pytest.raises(DuplicateError) as exc:
        users.create(other)
    assert exc.value.field == field
    assert users.find_by_email("carol@x.com") is None


def test_update_and_delete_missing_rows(repos):
    users, tasks = repos
    with pytest.raises(NotFoundError):
        users.update(_user())
    with pytest.raises(NotFoundError):
        tasks.update(_task(uuid.uuid4()))
    with pytest.raises(NotFoundError):
        tasks.delete(uuid.uuid4())


def test_count_by_user_groups_by_status_and_priority(repos):
    users, tasks = repos
    owner, other = users.create(_user("alice")), users.create(_user("bob"))
    tasks.create(_task(owner.id, priority=TaskPriority.HIGH))
    tasks.create(_task(owner.id, priority=TaskPriority.HIGH))
    tasks.create(_task(owner.id, status=TaskStatus.COMPLETED, completed_at=T0))
    tasks.create(_task(other.id))

    assert tasks.count_by_user(owner.id) == {
        (TaskStatus.PENDING, TaskPriority.HIGH): 2,
        (TaskStatus.COMPLETED, TaskPriority.MEDIUM): 1,
    }


def test_exhausted_pool_fails_fast(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'busy.db'}", pool_size=1, pool_timeout=0.1)
    database.create_schema()
    try:
        with pytest.raises(PoolExhaustedError) as exc:
            with database.session() as held:
                held.execute(text("SELECT 1"))
                with database.session() as waiting:
                    waiting.execute(text("SELECT 1"))
        assert exc.value.retryable is True
        # the held connection went back to the pool
        with database.session() as session:
            assert session.execute(text("SELECT 1")).scalar() == 1
    finally:
        database.dispose()


def test_in_memory_sqlite_shares_one_database():
    database = Database("sqlite://")
    database.create_schema()
    try:
        users = SqlUserRepository(database)
        created = users.create(_user())
        assert users.find_by_username("alice").id == created.id
    finally:
        database.dispose()


def test_sqlite_lower_folds_unicode(db):
    with db.session() as session:
        assert session.execute(text("SELECT lower('ÉCOLE Ärger')")).scalar() == "école ärger"
        assert session.execute(text("SELECT lower(NULL)")).scalar() is None


def test_process_wide_database(tmp_path):
    database = init_db(f"sqlite:///{tmp_path / 'shared.db'}", pool_size=2)
    try:
        assert get_db() is database
    finally:
        close_db()
    with pytest.raises(PersistenceError):
        get_db()
