"""Engine and session bootstrap for the SQLModel-backed collaborators."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator, Tuple

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig
from ..logging_config import get_logger

logger = get_logger("infra.database")

SessionFactory = Callable[[], ContextManager[Session]]


def _is_in_memory(url: str) -> bool:
    return url in {"sqlite://", "sqlite:///:memory:"}


def _install_sqlite_pragmas(engine: Engine, pragmas: dict[str, str]) -> None:
    """Apply PRAGMAs on every new DBAPI connection."""

    @event.listens_for(engine, "connect")
    def _apply(dbapi_connection, _connection_record) -> None:
        cursor = dbapi_connection.cursor()
        try:
            for name, value in pragmas.items():
                cursor.execute(f"PRAGMA {name}={value}")
        finally:
            cursor.close()


def create_db_engine(config: BaseConfig) -> Engine:
    """Create the engine for ``config.DATABASE_URL``.

    SQLite file databases get the configured PRAGMAs; in-memory ones skip
    ``journal_mode`` since WAL needs a file.
    """
    engine = create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())
    if config.DATABASE_URL.startswith("sqlite"):
        pragmas = dict(config.SQLITE_PRAGMAS)
        if _is_in_memory(config.DATABASE_URL):
            pragmas.pop("journal_mode", None)
        _install_sqlite_pragmas(engine, pragmas)
    return engine


def init_database(engine: Engine) -> None:
    """Create the rhythm, activity and snapshot tables if missing."""
    # Import all models to ensure they're registered
    from .. import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def create_session_factory(engine: Engine) -> SessionFactory:
    """Session factory for repositories: commits on success, rolls back on error."""

    @contextmanager
    def factory() -> Iterator[Session]:
        session = Session(engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


def bootstrap_database(config: BaseConfig | None = None) -> Tuple[Engine, SessionFactory]:
    """Create engine, schema and session factory in one step.

    Returns (engine, session_factory).
    """

    cfg = config or BaseConfig()
    engine = create_db_engine(cfg)
    init_database(engine)
    logger.info("Database ready", extra={"database_url": engine.url.render_as_string(hide_password=True)})
    return engine, create_session_factory(engine)
