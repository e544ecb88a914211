"""Engine context: configuration, database and the progress service wired together."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.cache import SQLModelProgressCache
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import SQLModelEntryStore, SQLModelRhythmRepository
from .logging_config import setup_logging
from .services.progress import Clock, RhythmProgressService


@dataclass
class EngineContext:
    """Everything a request handler needs to serve rhythm progress."""

    config: BaseConfig
    engine: Engine
    session_factory: SessionFactory

    rhythm_repo: SQLModelRhythmRepository
    entry_store: SQLModelEntryStore
    cache: SQLModelProgressCache

    progress: RhythmProgressService

    def close(self) -> None:
        self.engine.dispose()


def create_engine_context(
    config: Optional[BaseConfig] = None,
    *,
    configure_logging: bool = True,
    clock: Optional[Clock] = None,
) -> EngineContext:
    """Set up logging, the database and a persisted-cache progress service."""

    if config is None:
        config = BaseConfig()
    if configure_logging:
        setup_logging(config)

    engine, session_factory = bootstrap_database(config)
    rhythm_repo = SQLModelRhythmRepository(session_factory)
    entry_store = SQLModelEntryStore(session_factory)
    cache = SQLModelProgressCache(session_factory)

    return EngineContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        rhythm_repo=rhythm_repo,
        entry_store=entry_store,
        cache=cache,
        progress=RhythmProgressService(entry_store, rhythm_repo, cache, config=config, clock=clock),
    )


__all__ = ["EngineContext", "create_engine_context"]
