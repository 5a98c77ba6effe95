from datetime import datetime, timedelta, timezone

import pytest

from taskstore.entity.dto import MAX_PAGE_LIMIT, Pagination, TaskFilter, TaskStatus
from taskstore.entity.request import CreateTaskRequest, RegisterRequest, UpdateTaskRequest
from taskstore.errors import ValidationError
from taskstore.validation import (
    validate_create_task,
    validate_description,
    validate_due_date,
    validate_email,
    validate_pagination,
    validate_password,
    validate_registration,
    validate_task_filter,
    validate_title,
    validate_update_task,
    validate_username,
)

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("username", ["abc", "alice_01", "A" * 50])
def test_username_accepts_valid(username):
    assert validate_username(username) == username


@pytest.mark.parametrize("username", ["ab", "A" * 51, "alice!", "al ice", ""])
def test_username_rejects_invalid(username):
    with pytest.raises(ValidationError) as exc:
        validate_username(username)
    assert exc.value.field == "username"


def test_email_format():
    assert validate_email("alice@x.com") == "alice@x.com"
    for bad in ["invalid-email", "a@", "@x.com", ""]:
        with pytest.raises(ValidationError) as exc:
            validate_email(bad)
        assert exc.value.field == "email"


def test_password_strength():
    assert validate_password("Secr3t!2") == "Secr3t!2"
    assert validate_password("a1" * 36) == "a1" * 36
    for bad in ["short1", "onlyletters", "1234567890", "a1" * 65, "a1" * 36 + "x", "\u00e9" * 36 + "1"]:
        with pytest.raises(ValidationError) as exc:
            validate_password(bad)
        assert exc.value.field == "password"


def test_title_bounds_and_strip():
    assert validate_title("  Buy milk ") == "Buy milk"
    assert validate_title("x" * 255) == "x" * 255
    for bad in ["", "   ", "x" * 256, None]:
        with pytest.raises(ValidationError) as exc:
            validate_title(bad)
        assert exc.value.field == "title"


def test_description_limit():
    assert validate_description(None) is None
    assert validate_description("d" * 1000) == "d" * 1000
    with pytest.raises(ValidationError):
        validate_description("d" * 1001)


def test_due_date_must_be_strictly_future_and_aware():
    assert validate_due_date(None, NOW) is None
    later = NOW + timedelta(minutes=1)
    assert validate_due_date(later, NOW) == later
    with pytest.raises(ValidationError):
        validate_due_date(NOW, NOW)
    with pytest.raises(ValidationError):
        validate_due_date(NOW - timedelta(days=1), NOW)
    with pytest.raises(ValidationError):
        validate_due_date(datetime(2030, 1, 1), NOW)


def test_pagination_clamps_and_rejects():
    assert validate_pagination(None) == Pagination(offset=0, limit=20)
    assert validate_pagination(Pagination(offset=5, limit=500)) == Pagination(offset=5, limit=MAX_PAGE_LIMIT)
    with pytest.raises(ValidationError) as exc:
        validate_pagination(Pagination(offset=-1))
    assert exc.value.field == "offset"
    with pytest.raises(ValidationError) as exc:
        validate_pagination(Pagination(limit=0))
    assert exc.value.field == "limit"


def test_create_task_request_is_normalised():
    request = validate_create_task(CreateTaskRequest(title=" Buy milk "), NOW)
    assert request.title == "Buy milk"
    with pytest.raises(ValidationError):
        validate_create_task(CreateTaskRequest(title="x", due_date=NOW - timedelta(seconds=1)), NOW)


def test_update_validates_only_present_fields():
    assert validate_update_task(UpdateTaskRequest(), NOW) == {}
    assert validate_update_task(UpdateTaskRequest(status=TaskStatus.IN_PROGRESS), NOW) == {
        "status": TaskStatus.IN_PROGRESS,
    }
    assert validate_update_task(UpdateTaskRequest(description=None), NOW) == {"description": None}
    with pytest.raises(ValidationError):
        validate_update_task(UpdateTaskRequest(title=""), NOW)
    with pytest.raises(ValidationError):
        validate_update_task(UpdateTaskRequest(status=None), NOW)


def test_registration_reports_first_bad_field():
    with pytest.raises(ValidationError) as exc:
        validate_registration(RegisterRequest(username="al", email="alice@x.com", password="Secr3t!2"))
    assert exc.value.field == "username"
    assert str(exc.value).startswith("username:")


def test_task_filter_bounds_must_be_aware():
    assert validate_task_filter(None) == TaskFilter()
    aware = TaskFilter(due_before=NOW, due_after=NOW - timedelta(days=1))
    assert validate_task_filter(aware) is aware
    with pytest.raises(ValidationError) as exc:
        validate_task_filter(TaskFilter(due_after=datetime(2030, 1, 1)))
    assert exc.value.field == "due_after"
