"""Engine, pooled sessions and storage error translation."""

import re
from contextlib import contextmanager
from typing import Iterator, Optional

from loguru import logger
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from taskstore.entity.base import Base
from taskstore.errors import (
    DuplicateError,
    InvalidReferenceError,
    PersistenceError,
    PoolExhaustedError,
)

DEFAULT_POOL_SIZE = 5
DEFAULT_POOL_TIMEOUT = 5.0

# "UNIQUE constraint failed: users.email" (sqlite), "Key (email)=(...) already exists" (postgres)
_SQLITE_UNIQUE_RE = re.compile(r"UNIQUE constraint failed: (?:\w+\.)?(\w+)")
_PG_KEY_RE = re.compile(r"Key \((\w+)\)=")


def _is_memory_sqlite(url: str) -> bool:
    return url.startswith("sqlite") and (url.rstrip("/") in ("sqlite:", "sqlite://") or ":memory:" in url)


def _duplicate_field(message: str) -> str:
    for pattern in (_SQLITE_UNIQUE_RE, _PG_KEY_RE):
        match = pattern.search(message)
        if match:
            return match.group(1)
    return "record"


def translate_integrity_error(exc: IntegrityError) -> Exception:
    message = str(exc.orig) if exc.orig is not None else str(exc)
    lowered = message.lower()
    if "foreign key" in lowered:
        return InvalidReferenceError(message)
    if "unique" in lowered or "duplicate key" in lowered:
        return DuplicateError(_duplicate_field(message))
    logger.error("Unmapped integrity error: {}", message)
    return PersistenceError()


class Database:
    """Owns the engine and its bounded connection pool.

    A caller that cannot get a connection within ``pool_timeout`` seconds gets
    PoolExhaustedError instead of waiting forever.
    """

    def __init__(self, database_url: str, pool_size: int = DEFAULT_POOL_SIZE,
                 pool_timeout: float = DEFAULT_POOL_TIMEOUT, echo: bool = False):
        self.database_url = database_url
        if _is_memory_sqlite(database_url):
            # a single shared connection, otherwise every checkout sees an empty database
            self.engine: Engine = create_engine(
                database_url,
                echo=echo,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        else:
            connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
            self.engine = create_engine(
                database_url,
                echo=echo,
                pool_size=pool_size,
                max_overflow=0,
                pool_timeout=pool_timeout,
                pool_pre_ping=True,
                connect_args=connect_args,
            )
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _configure_sqlite_connection)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        logger.debug("Database engine created dialect={} pool_size={}", self.engine.dialect.name, pool_size)

    def create_schema(self) -> None:
        # register tables on Base.metadata
        from taskstore.entity import task, user  # noqa: F401
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError:
            logger.exception("Schema creation failed")
            raise PersistenceError() from None

    def dispose(self) -> None:
        self.engine.dispose()

    @contextmanager
    def session(self) -> Iterator[Session]:
        """One unit of work: commit on success, roll back and translate on error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except IntegrityError as e:
            session.rollback()
            raise translate_integrity_error(e) from None
        except PoolTimeoutError:
            session.rollback()
            logger.warning("Connection pool exhausted url={}", self.engine.url.render_as_string(hide_password=True))
            raise PoolExhaustedError() from None
        except SQLAlchemyError:
            session.rollback()
            logger.exception("Storage operation failed")
            raise PersistenceError() from None
        except BaseException:
            session.rollback()
            raise
        finally:
            session.close()


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _configure_sqlite_connection(dbapi_connection, connection_record):
    # built-in lower() only folds ASCII, ilike renders as lower(x) LIKE lower(y)
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


_default_db: Optional[Database] = None


def init_db(database_url: str, pool_size: int = DEFAULT_POOL_SIZE,
            pool_timeout: float = DEFAULT_POOL_TIMEOUT) -> Database:
    global _default_db
    if _default_db is not None:
        _default_db.dispose()
    _default_db = Database(database_url, pool_size=pool_size, pool_timeout=pool_timeout)
    return _default_db


def get_db() -> Database:
    if _default_db is None:
        raise PersistenceError("database is not initialized")
    return _default_db


def close_db() -> None:
    global _default_db
    if _default_db is not None:
        _default_db.dispose()
    _default_db = None
