"""Errors raised by the task store core.

Business outcomes (validation, duplicate, not found, authorization,
authentication) are returned to the caller as-is and never retried.
PersistenceError and PoolExhaustedError mark transport faults a caller may
retry with backoff.
"""

from typing import Any, Optional


class TaskStoreError(Exception):
    retryable = False


class ValidationError(TaskStoreError):
    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class DuplicateError(TaskStoreError):
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} already exists")


class NotFoundError(TaskStoreError):
    def __init__(self, entity: str, entity_id: Any = None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"no such {entity}")


class AuthorizationError(TaskStoreError):
    """Caller is authenticated but may not act on the target.

    The message stays generic; the ids are kept for audit logging.
    """

    def __init__(self, user_id: Any, target_id: Any):
        self.user_id = user_id
        self.target_id = target_id
        super().__init__("permission denied")


class AuthenticationError(TaskStoreError):
    def __init__(self):
        super().__init__("invalid credentials")


class InvalidReferenceError(TaskStoreError):
    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        super().__init__("referenced record does not exist")


class PersistenceError(TaskStoreError):
    retryable = True

    def __init__(self, message: str = "service unavailable"):
        super().__init__(message)


class PoolExhaustedError(PersistenceError):
    def __init__(self):
        super().__init__("storage is busy, try again")


class BulkOperationError(TaskStoreError):
    """Every item of a bulk operation failed."""

    def __init__(self, failed_count: int, total_count: int):
        self.failed_count = failed_count
        self.total_count = total_count
        super().__init__(f"bulk operation failed for {failed_count}/{total_count} tasks")
