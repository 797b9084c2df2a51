"""SQLAlchemy session factory for the local durable store.

Local storage I/O is synchronous by nature; the engine is a plain
(non-async) engine. Use get_session() as a context manager for
transactional blocks: commits on success, rolls back on exception.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine as sa_create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from lexflow.core.config import Settings
from lexflow.models.database import Base


def create_engine(settings: Settings) -> Engine:
    """Build an engine for the configured local store and ensure its table exists."""
    url = settings.local_storage_url
    kwargs: dict[str, object] = {}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection, otherwise every checkout sees a fresh empty database.
        kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    engine = sa_create_engine(url, **kwargs)
    Base.metadata.create_all(engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Build a session factory bound to the given engine."""
    return sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def get_session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    """Yield a transactional session: commits on success, rolls back on error."""
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
