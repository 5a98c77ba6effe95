"""Pure field rules for users, tasks and list requests.

Every rule returns the accepted (possibly normalised) value or raises
ValidationError naming the field.
"""

import re
from dataclasses import replace
from datetime import datetime
from typing import Optional

from email_validator import EmailNotValidError
from email_validator import validate_email as _check_email

from taskstore.entity.dto import MAX_PAGE_LIMIT, Pagination, TaskFilter
from taskstore.entity.request import (
    CreateTaskRequest,
    RegisterRequest,
    UpdateProfileRequest,
    UpdateTaskRequest,
)
from taskstore.errors import ValidationError

USERNAME_MIN = 3
USERNAME_MAX = 50
PASSWORD_MIN = 8
# bcrypt only looks at the first 72 bytes
PASSWORD_MAX_BYTES = 72
TITLE_MAX = 255
DESCRIPTION_MAX = 1000

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_]+$")


def validate_username(username: str) -> str:
    if username is None or not USERNAME_MIN <= len(username) <= USERNAME_MAX:
        raise ValidationError("username", f"must be between {USERNAME_MIN} and {USERNAME_MAX} characters")
    if not _USERNAME_RE.match(username):
        raise ValidationError("username", "may only contain letters, numbers and underscores")
    return username


def validate_email(email: str) -> str:
    if not email:
        raise ValidationError("email", "is required")
    try:
        result = _check_email(email, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError("email", str(e)) from None
    return result.normalized


def validate_password(password: str) -> str:
    if password is None or len(password) < PASSWORD_MIN:
        raise ValidationError("password", f"must be at least {PASSWORD_MIN} characters")
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValidationError("password", f"must be at most {PASSWORD_MAX_BYTES} bytes")
    if not any(c.isalpha() for c in password) or not any(c.isdigit() for c in password):
        raise ValidationError("password", "must contain at least one letter and one digit")
    return password


def validate_title(title: str) -> str:
    if title is None or not title.strip():
        raise ValidationError("title", "is required")
    title = title.strip()
    if len(title) > TITLE_MAX:
        raise ValidationError("title", f"must be at most {TITLE_MAX} characters")
    return title


def validate_description(description: Optional[str]) -> Optional[str]:
    if description is not None and len(description) > DESCRIPTION_MAX:
        raise ValidationError("description", f"must be at most {DESCRIPTION_MAX} characters")
    return description


def validate_due_date(due_date: Optional[datetime], now: datetime) -> Optional[datetime]:
    if due_date is None:
        return None
    if due_date.tzinfo is None:
        raise ValidationError("due_date", "must include a timezone")
    if due_date <= now:
        raise ValidationError("due_date", "must be in the future")
    return due_date


def validate_pagination(pagination: Optional[Pagination]) -> Pagination:
    if pagination is None:
        return Pagination()
    if pagination.offset < 0:
        raise ValidationError("offset", "must not be negative")
    if pagination.limit < 1:
        raise ValidationError("limit", "must be at least 1")
    if pagination.limit > MAX_PAGE_LIMIT:
        return replace(pagination, limit=MAX_PAGE_LIMIT)
    return pagination


def validate_task_filter(task_filter: Optional[TaskFilter]) -> TaskFilter:
    if task_filter is None:
        return TaskFilter()
    for name in ("due_before", "due_after"):
        bound = getattr(task_filter, name)
        if bound is not None and bound.tzinfo is None:
            raise ValidationError(name, "must include a timezone")
    return task_filter


def validate_create_task(request: CreateTaskRequest, now: datetime) -> CreateTaskRequest:
    return request.model_copy(update={
        "title": validate_title(request.title),
        "description": validate_description(request.description),
        "due_date": validate_due_date(request.due_date, now),
    })


def validate_update_task(request: UpdateTaskRequest, now: datetime) -> dict:
    """Validate only the fields present in the update and return them."""
    fields = request.present_fields()
    if "title" in fields:
        fields["title"] = validate_title(fields["title"])
    if "description" in fields:
        fields["description"] = validate_description(fields["description"])
    if "due_date" in fields:
        fields["due_date"] = validate_due_date(fields["due_date"], now)
    for name in ("status", "priority"):
        if name in fields and fields[name] is None:
            raise ValidationError(name, "cannot be cleared")
    return fields


def validate_registration(request: RegisterRequest) -> RegisterRequest:
    return RegisterRequest(
        username=validate_username(request.username),
        email=validate_email(request.email),
        password=validate_password(request.password),
    )


def validate_profile_update(request: UpdateProfileRequest) -> dict:
    fields = {}
    if request.email is not None:
        fields["email"] = validate_email(request.email)
    if request.password is not None:
        fields["password"] = validate_password(request.password)
    return fields
