from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from .dto import TaskPriority, TaskStatus


class CreateTaskRequest(BaseModel):
    title: str
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None


class UpdateTaskRequest(BaseModel):
    """Partial update; only fields explicitly set are applied."""

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None

    def present_fields(self) -> dict:
        return {name: getattr(self, name) for name in self.model_fields_set}


class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str


class UpdateProfileRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
