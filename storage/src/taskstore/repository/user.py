"""SQLAlchemy-backed user repository."""

import uuid
from typing import Optional

from taskstore.database.base import Database
from taskstore.entity.dto import User
from taskstore.entity.user import UserEntity
from taskstore.errors import NotFoundError
from .base import UserRepository


def _entity_to_dto(entity: UserEntity) -> User:
    return User(
        id=entity.id,
        username=entity.username,
        email=entity.email,
        password_hash=entity.password_hash,
        created_at=entity.created_at,
        updated_at=entity.updated_at,
    )


class SqlUserRepository(UserRepository):
    def __init__(self, db: Database):
        self._db = db

    def create(self, user: User) -> User:
        with self._db.session() as session:
            entity = UserEntity(
                id=user.id,
                username=user.username,
                email=user.email,
                password_hash=user.password_hash,
            )
            if user.created_at:
                entity.created_at = user.created_at
                entity.updated_at = user.created_at
            session.add(entity)
            session.flush()
            return _entity_to_dto(entity)

    def find_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        with self._db.session() as session:
            row = session.get(UserEntity, user_id)
            return _entity_to_dto(row) if row else None

    def find_by_username(self, username: str) -> Optional[User]:
        with self._db.session() as session:
            row = session.query(UserEntity).filter_by(username=username).first()
            return _entity_to_dto(row) if row else None

    def find_by_email(self, email: str) -> Optional[User]:
        with self._db.session() as session:
            row = session.query(UserEntity).filter_by(email=email).first()
            return _entity_to_dto(row) if row else None

    def update(self, user: User) -> User:
        with self._db.session() as session:
            entity = session.get(UserEntity, user.id)
            if entity is None:
                raise NotFoundError("user", user.id)
            entity.username = user.username
            entity.email = user.email
            entity.password_hash = user.password_hash
            session.flush()
            return _entity_to_dto(entity)
