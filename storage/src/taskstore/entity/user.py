from sqlalchemy import Column, Index, String, Uuid
from .base import Base, BaseEntity


class UserEntity(Base, BaseEntity):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True)
    username = Column(String(50), nullable=False, unique=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)

    __table_args__ = (
        Index("idx_users_username", "username"),
        Index("idx_users_email", "email"),
        Index("idx_users_created_at", "created_at"),
    )
