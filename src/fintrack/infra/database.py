"""SQLite storage for the ledger document."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, ContextManager, Iterator

from sqlalchemy.engine import Engine, make_url
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig
from ..logging_config import get_logger

logger = get_logger("infra.database")


@dataclass(frozen=True)
class LedgerDatabase:
    """Engine plus the session factory repositories are built on."""

    engine: Engine
    session_factory: Callable[[], ContextManager[Session]]

    def dispose(self) -> None:
        self.engine.dispose()


def _ensure_sqlite_parent(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
        Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)


def session_factory_for(engine: Engine) -> Callable[[], ContextManager[Session]]:
    """Return a factory of sessions that commit on success and roll back on error."""

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


def bootstrap_database(config: BaseConfig) -> LedgerDatabase:
    """Open the configured database and make sure the ledger table exists."""

    _ensure_sqlite_parent(config.DATABASE_URL)
    engine = create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())

    from ..models.document import LedgerDocument

    SQLModel.metadata.create_all(engine, tables=[LedgerDocument.__table__])
    logger.info("Ledger database ready", extra={"url": engine.url.render_as_string()})
    return LedgerDatabase(engine=engine, session_factory=session_factory_for(engine))
