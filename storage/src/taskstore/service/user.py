"""User service: registration, credential checks, profile."""

import uuid
from typing import Optional

from loguru import logger

from taskstore.entity.dto import User
from taskstore.entity.request import RegisterRequest, UpdateProfileRequest
from taskstore.errors import AuthenticationError, DuplicateError, NotFoundError
from taskstore.repository.base import UserRepository
from taskstore.service.auth import PasswordHasher
from taskstore.util import generate_id
from taskstore.validation import validate_profile_update, validate_registration


class UserService:
    def __init__(self, user_repository: UserRepository, hasher: Optional[PasswordHasher] = None):
        self._users = user_repository
        self._hasher = hasher or PasswordHasher()

    def register(self, request: RegisterRequest) -> User:
        request = validate_registration(request)
        logger.info("Registering user username={}", request.username)

        # fast path; a concurrent registration is still caught by the unique constraints
        if self._users.find_by_username(request.username):
            raise DuplicateError("username")
        if self._users.find_by_email(request.email):
            raise DuplicateError("email")

        user = User(
            id=generate_id(),
            username=request.username,
            email=request.email,
            password_hash=self._hasher.hash(request.password),
        )
        created = self._users.create(user)
        logger.info("Registered user id={}", created.id)
        return created

    def authenticate(self, username: str, password: str) -> User:
        if not username or not password:
            logger.warning("Authentication failed: empty credentials")
            raise AuthenticationError()

        user = self._users.find_by_username(username)
        if user is None:
            self._hasher.dummy_verify()
            logger.warning("Authentication failed username={}", username)
            raise AuthenticationError()
        if not self._hasher.verify(password, user.password_hash):
            logger.warning("Authentication failed username={}", username)
            raise AuthenticationError()

        if self._hasher.needs_rehash(user.password_hash):
            user.password_hash = self._hasher.hash(password)
            user = self._users.update(user)
            logger.info("Password hash upgraded user_id={}", user.id)

        logger.info("Authenticated user id={}", user.id)
        return user

    def get_profile(self, user_id: uuid.UUID) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        return user

    def update_profile(self, user_id: uuid.UUID, request: UpdateProfileRequest) -> User:
        fields = validate_profile_update(request)
        user = self.get_profile(user_id)

        if "email" in fields and fields["email"] != user.email:
            other = self._users.find_by_email(fields["email"])
            if other is not None and other.id != user.id:
                raise DuplicateError("email")
            user.email = fields["email"]
        if "password" in fields:
            user.password_hash = self._hasher.hash(fields["password"])

        updated = self._users.update(user)
        logger.info("Updated profile user_id={} fields={}", user_id, sorted(fields))
        return updated
