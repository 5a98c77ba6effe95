from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, SmallInteger, String, Text, Uuid, text
from .base import Base, BaseEntity, UTCDateTime


class TaskEntity(Base, BaseEntity):
    __tablename__ = "tasks"

    id = Column(Uuid, primary_key=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    # 0: pending, 1: in progress, 2: completed
    status = Column(SmallInteger, nullable=False, default=0, server_default=text("0"))
    # 0: low, 1: medium, 2: high
    priority = Column(SmallInteger, nullable=False, default=1, server_default=text("1"))
    due_date = Column(UTCDateTime, nullable=True)
    completed_at = Column(UTCDateTime, nullable=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    __table_args__ = (
        CheckConstraint("status IN (0, 1, 2)", name="status_check"),
        CheckConstraint("priority IN (0, 1, 2)", name="priority_check"),
        Index("idx_tasks_user_id", "user_id"),
        Index("idx_tasks_status", "status"),
        Index("idx_tasks_priority", "priority"),
        Index(
            "idx_tasks_due_date",
            "due_date",
            postgresql_where=text("due_date IS NOT NULL"),
            sqlite_where=text("due_date IS NOT NULL"),
        ),
        Index("idx_tasks_created_at", "created_at"),
        Index("idx_tasks_user_status", "user_id", "status"),
        Index("idx_tasks_user_priority", "user_id", "priority"),
    )
