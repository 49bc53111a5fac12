from contextlib import contextmanager
from typing import Callable, Iterator

from sqlalchemy.orm import Session

from bingoo.database.connection import SessionLocal

SessionFactory = Callable[[], Session]


def get_db():
    db = SessionLocal()
    try:
        yield db
    except Exception:
        if db.in_transaction():
            db.rollback()
        raise
    finally:
        db.close()


def get_session_factory() -> SessionFactory:
    """Session factory for work that outlives the request (background tasks)."""
    return SessionLocal


@contextmanager
def get_db_context(session_factory: SessionFactory = SessionLocal) -> Iterator[Session]:
    """Standalone unit of work: commit on success, rollback on error."""
    db = session_factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """Scoped transaction over an existing session.

    Everything flushed inside the block is committed together when the block
    exits normally. Any exception rolls the whole unit back and is re-raised,
    so a balance change can never be committed without its audit row.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
