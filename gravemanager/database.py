import logging
import os
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from gravemanager.config import settings
from gravemanager.exceptions import IllegalEntityError, ServiceFailureError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Declarative base; entities compare equal by id only.

    The hash changes when create_* assigns the id, so do not keep a transient
    entity in a set or dict key across its creation.
    """

    def __eq__(self, other):
        if self is other:
            return True
        if type(self) is not type(other):
            return NotImplemented
        # transient entities are equal only to themselves
        return self.id is not None and self.id == other.id

    def __hash__(self):
        if self.id is None:
            return object.__hash__(self)
        return hash((type(self), self.id))


def create_db_engine(url: str | None = None, echo: bool | None = None) -> Engine:
    """
    Build an engine for ``url`` (default: settings.DATABASE_URL).

    An in-memory SQLite URL shares one connection between all sessions, so it
    only suits single-threaded use such as tests. Concurrent callers need a
    file or server database.
    """
    url = url or settings.DATABASE_URL
    echo = settings.SQL_ECHO if echo is None else echo
    db_url = make_url(url)

    if db_url.get_backend_name() != "sqlite":
        return create_engine(url, echo=echo)

    in_memory = db_url.database in (None, "", ":memory:")
    kwargs = {}
    if in_memory:
        # All sessions must share the single in-memory database
        kwargs["poolclass"] = StaticPool
    else:
        directory = os.path.dirname(db_url.database)
        if directory:
            os.makedirs(directory, exist_ok=True)

    engine = create_engine(
        url,
        echo=echo,
        connect_args={"check_same_thread": False, "timeout": settings.SQLITE_BUSY_TIMEOUT},
        **kwargs,
    )
    _setup_sqlite_locking(engine)
    return engine


def _setup_sqlite_locking(engine: Engine) -> None:
    # SQLite has no row locks; take the write lock when the transaction starts
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    import gravemanager.models  # noqa: F401 register all models
    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready at %s", engine.url.render_as_string(hide_password=True))


@contextmanager
def transaction(sessions: sessionmaker[Session], action: str) -> Iterator[Session]:
    """
    Run the block in a fresh session and commit it as one unit.

    Any exception rolls the transaction back before it propagates. Storage
    errors are logged and re-raised as ServiceFailureError, domain errors are
    re-raised unchanged. The session is always closed.
    """
    db = sessions()
    try:
        yield db
        db.commit()
    except SQLAlchemyError as ex:
        db.rollback()
        msg = f"Error when {action}"
        logger.exception(msg)
        raise ServiceFailureError(msg) from ex
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def check_rowcount(count: int, verb: str, kind: str) -> None:
    if count != 1:
        raise IllegalEntityError(f"{verb} {count} {kind} records instead of 1")
