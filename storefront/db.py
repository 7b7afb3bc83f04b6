from contextlib import contextmanager
from typing import Iterator
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from .config import Settings

def make_engine(settings: Settings) -> Engine:
    return create_engine(settings.database_url, pool_pre_ping=True, future=True)

def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

def init_db(engine: Engine, schema: str = "") -> None:
    """
    Ensure the schema exists (postgres only), then create tables (idempotent).
    """
    if schema and engine.dialect.name == "postgresql":
        with engine.begin() as conn:
            # Quote the schema to avoid edge cases with names
            conn.execute(text(f'CREATE SCHEMA IF NOT EXISTS "{schema}"'))
    # Import here to avoid circulars
    from .models import Base  # noqa
    Base.metadata.create_all(bind=engine)

@contextmanager
def session_scope(factory: sessionmaker) -> Iterator[Session]:
    """
    Yields a session, commits on success, rolls back on error.
    """
    s: Session = factory()
    try:
        yield s
        s.commit()
    except Exception:
        s.rollback()
        raise
    finally:
        s.close()
